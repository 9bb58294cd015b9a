"""
Ledger error taxonomy.

Services raise these at the point of detection; the API layer maps each kind
to an HTTP status in one place (see ``splitledger.main``).
"""


class LedgerError(Exception):
    """Base class for every error the ledger raises on purpose."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(LedgerError):
    """No current user identity is available."""
    status_code = 401


class AuthorizationDenied(LedgerError):
    """Caller is not a member of / party to the referenced record."""
    status_code = 403


class NotFound(LedgerError):
    """Referenced user, group or expense does not exist."""
    status_code = 404


class ValidationFailed(LedgerError, ValueError):
    """Input rejected before any write took place."""
    status_code = 400
