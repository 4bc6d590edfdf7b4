"""
Exception hierarchy raised by the MAIB client helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

__all__ = [
    "ApiError",
    "ApiResponseError",
    "ConfigError",
    "DecodeError",
    "MaibError",
    "MalformedResponseError",
    "NotificationError",
    "TransportError",
    "UnauthorizedError",
]


@dataclass(frozen=True)
class ApiError:
    """A single ``{"errorCode", "errorMessage"}`` entry of an error envelope."""

    code: str
    message: str

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "ApiError":
        return cls(
            code=str(payload["errorCode"]),
            message=str(payload["errorMessage"]),
        )

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class MaibError(Exception):
    """Base class for every error raised by this package."""


class UnauthorizedError(MaibError):
    """The access token was missing or has expired (HTTP 401)."""

    def __init__(self, message: str = "Access token is missing or expired") -> None:
        super().__init__(message)


class TransportError(MaibError):
    """The request could not be delivered (connection, TLS, DNS, timeout)."""


class DecodeError(MaibError):
    """The response body did not match the expected envelope shape."""


class MalformedResponseError(MaibError):
    """The envelope carried both a result and errors, or neither."""


class ApiResponseError(MaibError):
    """
    The gateway answered with an error envelope.

    ``errors`` keeps every entry in the order the gateway sent them.
    """

    def __init__(self, errors: Sequence[ApiError]) -> None:
        self.errors: List[ApiError] = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors))

    @property
    def codes(self) -> List[str]:
        return [error.code for error in self.errors]


class NotificationError(MaibError, ValueError):
    """Raised when an inbound notification payload is not well-formed."""


class ConfigError(MaibError):
    """Raised when the supplied configuration is invalid."""
