"""
Adapter: Brazilian Tax Id Rules.

Regras para CNPJ (empresa) e CPF (representante legal).
Por padrão só a quantidade de dígitos é exigida; com ``strict_checksum``
os dígitos verificadores (mod 11) também são conferidos.
"""

from src.core.interfaces.rules_engine import ITaxIdRules, RuleViolation
from src.core.use_cases.validators import only_digits


class BrazilianTaxIdRules(ITaxIdRules):
    """
    Regras implementadas:
        1. CNPJ — 14 dígitos
        2. CNPJ — dígitos não todos iguais + mod 11 (modo estrito)
        3. CPF — 11 dígitos
        4. CPF — dígitos não todos iguais + mod 11 (modo estrito)
    """

    def __init__(self, strict_checksum: bool = False):
        self._strict = strict_checksum

    def check_cnpj(self, value: str) -> RuleViolation | None:
        digits = only_digits(value)
        if len(digits) != 14:
            return RuleViolation(
                rule_id="CNPJ_LENGTH",
                rule_name="CNPJ deve ter 14 dígitos",
                severity="HIGH",
                detail=f"CNPJ informado tem {len(digits)} dígitos: {value}",
            )
        if not self._strict:
            return None

        if digits == digits[0] * 14:
            return RuleViolation(
                rule_id="CNPJ_ALL_SAME",
                rule_name="CNPJ com dígitos todos iguais",
                severity="CRITICAL",
                detail=f"CNPJ inválido (todos iguais): {value}",
            )
        if not self._validate_cnpj_digits(digits):
            return RuleViolation(
                rule_id="CNPJ_CHECKSUM",
                rule_name="Dígitos verificadores do CNPJ inválidos",
                severity="CRITICAL",
                detail=f"CNPJ não passa na validação mod-11: {value}",
            )
        return None

    def check_cpf(self, value: str) -> RuleViolation | None:
        digits = only_digits(value)
        if len(digits) != 11:
            return RuleViolation(
                rule_id="CPF_LENGTH",
                rule_name="CPF deve ter 11 dígitos",
                severity="HIGH",
                detail=f"CPF informado tem {len(digits)} dígitos: {value}",
            )
        if not self._strict:
            return None

        if digits == digits[0] * 11:
            return RuleViolation(
                rule_id="CPF_ALL_SAME",
                rule_name="CPF com dígitos todos iguais",
                severity="CRITICAL",
                detail=f"CPF inválido (todos iguais): {value}",
            )
        if not self._validate_cpf_digits(digits):
            return RuleViolation(
                rule_id="CPF_CHECKSUM",
                rule_name="Dígitos verificadores do CPF inválidos",
                severity="CRITICAL",
                detail=f"CPF não passa na validação mod-11: {value}",
            )
        return None

    # ─── Helpers ─────────────────────────────────────────────

    @staticmethod
    def _validate_cpf_digits(digits: str) -> bool:
        """Valida últimos 2 dígitos do CPF (algoritmo mod-11)."""
        nums = [int(d) for d in digits]

        # Primeiro dígito verificador
        weights_1 = list(range(10, 1, -1))
        sum_1 = sum(n * w for n, w in zip(nums[:9], weights_1))
        d1 = 11 - (sum_1 % 11)
        d1 = 0 if d1 >= 10 else d1

        # Segundo dígito verificador
        weights_2 = list(range(11, 1, -1))
        sum_2 = sum(n * w for n, w in zip(nums[:10], weights_2))
        d2 = 11 - (sum_2 % 11)
        d2 = 0 if d2 >= 10 else d2

        return nums[9] == d1 and nums[10] == d2

    @staticmethod
    def _validate_cnpj_digits(digits: str) -> bool:
        """Valida últimos 2 dígitos do CNPJ (pesos 5..2,9..2 e 6..2,9..2)."""
        nums = [int(d) for d in digits]

        weights_1 = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
        rest_1 = sum(n * w for n, w in zip(nums[:12], weights_1)) % 11
        d1 = 0 if rest_1 < 2 else 11 - rest_1

        weights_2 = [6] + weights_1
        rest_2 = sum(n * w for n, w in zip(nums[:13], weights_2)) % 11
        d2 = 0 if rest_2 < 2 else 11 - rest_2

        return nums[12] == d1 and nums[13] == d2
