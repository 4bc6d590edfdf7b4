"""
Public, high-level helpers for interacting with the MAIB MIA API.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from .core.client import MaibClient
from .core.config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .core.models import SignatureKey, ValidSignatureNotification
from .core.signature import NotificationPayload, verify_notification

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "MaibClient",
    "NotificationPayload",
    "create_client",
    "load_client_config",
    "parse_notification",
    "verify_notification_body",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> MaibClient:
    """
    Construct a :class:`MaibClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data.
    """
    if config is not None:
        extras = (overrides, base, parameters, base_url, timeout_seconds)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
        )
    return MaibClient.from_config(cfg, session=session)


def parse_notification(body: str | bytes | Mapping[str, Any]) -> NotificationPayload:
    """Parse a callback body (raw JSON or an already decoded mapping)."""
    if isinstance(body, Mapping):
        return NotificationPayload.from_wire(body)
    return NotificationPayload.from_json(body)


def verify_notification_body(
    body: str | bytes | Mapping[str, Any],
    key: SignatureKey,
) -> Optional[ValidSignatureNotification]:
    """
    Parse and verify a callback body in one step.

    Returns ``None`` when the signature does not match; raises
    :class:`~maib_payments.core.errors.NotificationError` when the body is
    not a well-formed notification.
    """
    return verify_notification(parse_notification(body), key)
