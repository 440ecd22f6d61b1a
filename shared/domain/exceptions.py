"""
Domain Error Taxonomy

All expected, caller-recoverable failures of the booking and wallet
contexts derive from DomainError. The families map onto HTTP semantics:

- NotFoundError: the referenced record is absent or inactive (404)
- ValidationError: the request itself is malformed (400)
- ConflictError: the request collides with existing state (409)
- PolicyError: a business rule refuses the request (402)
- StorageError: the store failed mid-transaction; safe to retry (503)
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all domain errors"""

    default_message = "Domain error"
    code = "domain_error"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context: Dict[str, Any] = context
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'detail': self.message,
            'code': self.code,
            'context': {key: str(value) for key, value in self.context.items()},
        }


class NotFoundError(DomainError):
    default_message = "Not found"
    code = "not_found"


class ValidationError(DomainError):
    default_message = "Invalid request"
    code = "invalid"


class ConflictError(DomainError):
    default_message = "Conflicts with existing state"
    code = "conflict"


class PolicyError(DomainError):
    default_message = "Refused by policy"
    code = "policy"


class StorageError(DomainError):
    """
    The store failed while a unit of work was open.

    The transaction has been rolled back; callers may retry.
    """
    default_message = "Storage failure, transaction rolled back"
    code = "storage_error"
