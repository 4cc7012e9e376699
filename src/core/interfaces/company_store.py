"""
Contract: Company Store

Acesso ao banco hospedado para empresas, representantes legais,
fluxos, notas e pareceres finais.
"""

from abc import ABC, abstractmethod

from src.core.entities.company import (
    Company,
    Flow,
    Note,
    ParecerFinal,
    RepresentanteLegal,
    Subject,
)


class ICompanyStore(ABC):
    """
    Port: Company Store

    Todas as falhas são reportadas como RemoteStoreError (ou uma de
    suas subclasses). Violações de unicidade em representantes e
    pareceres chegam como ConstraintConflict.
    """

    # ── Companies ──

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """
        Lista todas as empresas, mais recentes primeiro.

        Returns:
            Agregados completos (representante, fluxos, notas, parecer).
        """
        ...

    @abstractmethod
    def get_company(self, company_id: str) -> Company:
        """Retorna o agregado de uma empresa ou levanta RecordNotFoundError."""
        ...

    @abstractmethod
    def insert_company(self, fields: dict, created_by: str) -> Company:
        ...

    @abstractmethod
    def update_company(self, company_id: str, changes: dict) -> Company:
        ...

    # ── Representantes legais ──

    @abstractmethod
    def find_representative(self, company_id: str) -> RepresentanteLegal | None:
        ...

    @abstractmethod
    def get_representative(self, representative_id: str) -> RepresentanteLegal:
        ...

    @abstractmethod
    def insert_representative(self, company_id: str, fields: dict, created_by: str) -> RepresentanteLegal:
        """
        Insere o representante da empresa.

        Raises:
            ConstraintConflict: já existe um representante para company_id.
        """
        ...

    @abstractmethod
    def update_representative(self, representative_id: str, changes: dict) -> RepresentanteLegal:
        ...

    # ── Fluxos ──

    @abstractmethod
    def get_flow(self, flow_id: str) -> Flow:
        ...

    @abstractmethod
    def insert_flow(self, subject: Subject, fields: dict, created_by: str) -> Flow:
        ...

    @abstractmethod
    def update_flow(self, flow_id: str, changes: dict) -> Flow:
        ...

    @abstractmethod
    def delete_flow(self, flow_id: str) -> None:
        ...

    # ── Notas ──

    @abstractmethod
    def get_note(self, note_id: str) -> Note:
        ...

    @abstractmethod
    def insert_note(self, subject: Subject, fields: dict, created_by: str) -> Note:
        ...

    @abstractmethod
    def update_note(self, note_id: str, changes: dict) -> Note:
        ...

    @abstractmethod
    def delete_note(self, note_id: str) -> None:
        ...

    # ── Pareceres ──

    @abstractmethod
    def find_opinion(self, subject: Subject) -> ParecerFinal | None:
        ...

    @abstractmethod
    def get_opinion(self, opinion_id: str) -> ParecerFinal:
        ...

    @abstractmethod
    def insert_opinion(self, subject: Subject, fields: dict, created_by: str) -> ParecerFinal:
        """
        Insere o parecer do sujeito.

        Raises:
            ConstraintConflict: o sujeito já possui um parecer.
        """
        ...

    @abstractmethod
    def update_opinion(self, opinion_id: str, changes: dict) -> ParecerFinal:
        ...

    @abstractmethod
    def delete_opinion(self, opinion_id: str) -> None:
        ...
