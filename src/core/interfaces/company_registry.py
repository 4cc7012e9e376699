"""
Contract: Company Registry

Consulta opcional a um cadastro público de CNPJ, usada apenas para
pré-preencher o formulário de criação de empresa.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RegistryRecord:
    """Dados públicos de um estabelecimento."""
    legal_name: str = ""
    state: str = ""
    city: str = ""
    address: str = ""
    founding_date: str | None = None     # ISO yyyy-mm-dd
    activity_code: str = ""              # ex: "6201501 - Desenvolvimento de programas"
    email: str = ""


class ICompanyRegistry(ABC):
    """
    Port: Company Registry

    A falha da consulta nunca bloqueia o cadastro manual.
    """

    @abstractmethod
    def lookup(self, cnpj_digits: str) -> RegistryRecord | None:
        """
        Busca um CNPJ.

        Args:
            cnpj_digits: 14 dígitos, sem pontuação.

        Returns:
            RegistryRecord, ou None se não encontrado / indisponível.
        """
        ...
