class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class LedgerDriftError(DomainError):
    """Raised when a cached wallet balance disagrees with its ledger."""

    def __init__(self, freelancer_id: int, cached, ledger):
        super().__init__(f"Wallet balance drift for user {freelancer_id}: cached={cached} ledger={ledger}")
        self.freelancer_id = freelancer_id
        self.cached = cached
        self.ledger = ledger
