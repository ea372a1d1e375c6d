from __future__ import annotations

from fastapi import HTTPException, status


class SocksError(HTTPException):
    """Base class for ledger failures; FastAPI renders them as {"detail": ...}."""

    default_status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=self.default_status_code, detail=detail)

    def __str__(self) -> str:
        return str(self.detail)


class InvalidDataFormatError(SocksError):
    """A caller-supplied value breaks a business precondition."""


class SocksNotFoundError(SocksError):
    """No socks row matches the requested natural key or id."""

    default_status_code = status.HTTP_404_NOT_FOUND


class InsufficientSocksError(SocksError):
    """Outcome asked for more socks than the warehouse holds."""


class FileProcessingError(SocksError):
    """Any failure while importing a batch file."""


__all__ = [
    "SocksError",
    "InvalidDataFormatError",
    "SocksNotFoundError",
    "InsufficientSocksError",
    "FileProcessingError",
]
