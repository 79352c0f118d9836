"""
Error taxonomy shared by services and routes.

Services raise these; ``wedledger.main`` renders every one of them as
``{"error": message}`` with the matching status code.
"""


class WedLedgerError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class ValidationError(WedLedgerError):
    """Missing or malformed input."""
    status_code = 400


class UnauthorizedError(WedLedgerError):
    status_code = 401


class NotFoundError(WedLedgerError):
    """No row matches the identity and ownership filter.

    Deliberately the same for "does not exist" and "exists but not yours".
    """
    status_code = 404


class ConflictError(WedLedgerError):
    """Already accepted, revoked, expired or duplicate."""
    status_code = 400


class UpstreamError(WedLedgerError):
    status_code = 500
