"""
Tests for CNPJ / CPF rules.
"""

import pytest

from src.infrastructure.rules.brazilian_tax_id_rules import BrazilianTaxIdRules
from tests.conftest import ACME_CNPJ, VALID_CPF

VALID_CNPJ = "11.222.333/0001-81"


class TestLengthOnly:

    @pytest.fixture
    def rules(self):
        return BrazilianTaxIdRules()

    def test_formatted_cnpj(self, rules):
        assert rules.check_cnpj(ACME_CNPJ) is None
        assert rules.check_cnpj("12345678000199") is None

    @pytest.mark.parametrize("value", ["", "123", "12.345.678/0001-9", "12.345.678/0001-999"])
    def test_wrong_cnpj_length(self, rules, value):
        violation = rules.check_cnpj(value)
        assert violation.rule_id == "CNPJ_LENGTH"

    def test_cpf(self, rules):
        assert rules.check_cpf("111.111.111-11") is None
        assert rules.check_cpf("123.456.789").rule_id == "CPF_LENGTH"


class TestStrictChecksum:

    @pytest.fixture
    def rules(self):
        return BrazilianTaxIdRules(strict_checksum=True)

    def test_valid_documents(self, rules):
        assert rules.check_cnpj(VALID_CNPJ) is None
        assert rules.check_cpf(VALID_CPF) is None

    def test_bad_check_digits(self, rules):
        assert rules.check_cnpj(ACME_CNPJ).rule_id == "CNPJ_CHECKSUM"
        assert rules.check_cpf("529.982.247-26").rule_id == "CPF_CHECKSUM"

    def test_repeated_digits(self, rules):
        assert rules.check_cnpj("00.000.000/0000-00").rule_id == "CNPJ_ALL_SAME"
        assert rules.check_cpf("111.111.111-11").rule_id == "CPF_ALL_SAME"
