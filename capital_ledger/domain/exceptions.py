"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is malformed or out of range; raised before any state change"""

    pass


class NotFoundError(DomainException):
    """Referenced loan, security or transaction does not exist"""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidStateError(DomainException):
    """Operation is not permitted in the entity's current status"""

    pass


class InvalidAmountError(DomainException):
    """Payment amount is non-positive or exceeds the remaining balance"""

    pass


class PersistenceConflictError(DomainException):
    """Record changed between read and conditional write"""

    pass


class PersistenceFailureError(DomainException):
    """Entity store is unavailable or rejected the operation"""

    pass
