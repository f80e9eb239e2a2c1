from __future__ import annotations


class LedgerError(Exception):
    """Base de todas as falhas tipadas devolvidas pelos serviços."""


class ValidationError(LedgerError):
    pass


class NotFound(LedgerError):
    pass


class Forbidden(LedgerError):
    pass


class AlreadyPaid(LedgerError):
    pass


class InvalidCredentials(LedgerError):
    pass


class StoreError(LedgerError):
    """Falha do banco (SQLAlchemyError), sem classificação adicional."""
