"""
Use Case: Prefill Company

Consulta o cadastro público de CNPJ para pré-preencher o formulário.
Degradação graciosa: qualquer falha devolve {} e o cadastro manual segue.
"""

import logging

from src.core.exceptions import ValidationError
from src.core.interfaces.company_registry import ICompanyRegistry
from src.core.interfaces.rules_engine import ITaxIdRules
from src.core.use_cases.validators import only_digits, require_text

logger = logging.getLogger(__name__)


class PrefillCompanyUseCase:
    """Use Case: CNPJ → campos do formulário de empresa."""

    def __init__(self, registry: ICompanyRegistry | None, tax_id_rules: ITaxIdRules):
        self._registry = registry
        self._rules = tax_id_rules

    def execute(self, cnpj: str) -> dict:
        """
        Returns:
            Dict com as chaves de CompanyInput que a consulta conseguiu
            preencher (cnpj, name, state, city, address, cnae, email,
            founded_on). Vazio se a consulta falhar ou estiver desligada.
        """
        cnpj = require_text("cnpj", cnpj)
        violation = self._rules.check_cnpj(cnpj)
        if violation is not None:
            raise ValidationError("cnpj", violation.rule_name)

        if self._registry is None:
            return {}

        digits = only_digits(cnpj)
        try:
            record = self._registry.lookup(digits)
        except Exception as e:
            logger.warning(f"Registry lookup failed for {digits}: {e}")
            return {}
        if record is None:
            return {}

        prefill = {
            "cnpj": cnpj,
            "name": record.legal_name,
            "state": record.state,
            "city": record.city,
            "address": record.address,
            "cnae": record.activity_code,
            "email": record.email,
            "founded_on": record.founding_date,
        }
        return {k: v for k, v in prefill.items() if v}
