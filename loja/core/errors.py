"""Error taxonomy shared by services, adapters and the HTTP layer."""

from __future__ import annotations


class LojaError(Exception):
    """Base class for errors that map to an HTTP answer."""

    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LojaError):
    """Missing or malformed input."""

    code = "validation"
    status_code = 400


class NotFoundError(LojaError):
    """No record matches the requested id."""

    code = "not_found"
    status_code = 404


class StorageError(LojaError):
    """Disk, database or media host I/O failed."""

    code = "storage"
    status_code = 500


class PaymentGatewayError(LojaError):
    code = "gateway"
    status_code = 500
