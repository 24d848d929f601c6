"""Finance domain errors.

Each error carries a machine-readable ``code`` and the HTTP ``status`` the
controllers answer with; ``str(exc)`` is the human-readable message.
"""

from __future__ import annotations


class FinanceError(ValueError):
    code = "finance_error"
    status = 400

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.code, "message": self.message}


class InvalidInputError(FinanceError):
    """Malformed or out-of-range caller data."""

    code = "validation_error"
    status = 400


class NotFoundError(FinanceError):
    """Referenced entity absent or owned by someone else."""

    code = "not_found"
    status = 404


class ConflictError(FinanceError):
    code = "already_exists"
    status = 409


class DataIntegrityError(FinanceError):
    """A stored invariant was found already broken (e.g. a dangling account reference)."""

    code = "data_integrity"
    status = 500
