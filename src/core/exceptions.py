"""
Typed exceptions for the compliance workflows.

Hierarchy:

    ComplianceError (base)
    |
    +-- ValidationError          campo obrigatório ausente / malformado
    +-- NotAuthenticatedError    mutação sem sessão válida
    +-- AuthorshipError          edição/remoção por quem não é o autor
    +-- RemoteStoreError         qualquer falha do entity store
        +-- RecordNotFoundError
        +-- ConstraintConflict   violação de unicidade (upsert por sujeito)

Every exception carries a machine-readable ``code``.
"""


class ComplianceError(Exception):
    """Base class for every error raised by the workflows."""

    code: str = "COMPLIANCE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ComplianceError):
    """Required field missing or malformed. Raised before any store call."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class NotAuthenticatedError(ComplianceError):
    code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "Usuário não autenticado"):
        super().__init__(message)


class AuthorshipError(ComplianceError):
    """Only the author of a flow, note or opinion (or the recipient of a
    notification) may change it."""

    code = "NOT_AUTHOR"

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} can only be changed by its owner")


class RemoteStoreError(ComplianceError):
    """Any failure reported by the entity store. Never retried automatically."""

    code = "REMOTE_STORE_ERROR"

    def __init__(self, message: str, operation: str = ""):
        self.operation = operation
        super().__init__(message)


class RecordNotFoundError(RemoteStoreError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found", operation="get")


class ConstraintConflict(RemoteStoreError):
    """Uniqueness violation; the upsert rule falls back to an update."""

    code = "CONSTRAINT_CONFLICT"

    def __init__(self, entity: str, detail: str = ""):
        self.entity = entity
        super().__init__(f"Unique constraint violated on {entity}: {detail}".rstrip(": "), operation="insert")
