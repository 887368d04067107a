"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class SnapshotDecodeError(DomainException):
    """Persisted ledger snapshot cannot be parsed at all"""

    pass


class UnknownEntityError(DomainException):
    """Card or transaction id does not exist in the ledger"""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"Unknown {kind}: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id
