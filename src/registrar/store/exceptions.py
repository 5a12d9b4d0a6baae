"""Custom exceptions for the record store."""


class RecordStoreError(Exception):
    """Base exception for record store errors."""


class UnitOfWorkClosedError(RecordStoreError):
    """Unit of work was used outside its ``with`` block."""
