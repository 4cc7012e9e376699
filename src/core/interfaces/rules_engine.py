"""
Contract: Tax Id Rules

Regras determinísticas sobre identificadores fiscais brasileiros
(CNPJ da empresa, CPF do representante legal).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RuleViolation:
    """Uma violação de regra detectada."""
    rule_id: str              # ex: "CPF_CHECKSUM"
    rule_name: str            # ex: "Dígitos verificadores do CPF inválidos"
    severity: str             # "LOW", "MEDIUM", "HIGH", "CRITICAL"
    detail: str


class ITaxIdRules(ABC):
    """
    Port: Tax Id Rules

    Cada método retorna None quando o valor é aceito.
    """

    @abstractmethod
    def check_cnpj(self, value: str) -> RuleViolation | None:
        """
        Valida um CNPJ (com ou sem pontuação).

        Args:
            value: CNPJ informado pelo usuário.

        Returns:
            RuleViolation, ou None se válido.
        """
        ...

    @abstractmethod
    def check_cpf(self, value: str) -> RuleViolation | None:
        ...
