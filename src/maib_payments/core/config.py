"""
Configuration objects and helpers for the MAIB client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .environment import build_environment
from .errors import ConfigError
from .models import AccessToken, ClientId, ClientSecret, SignatureKey

__all__ = [
    "ConfigError",
    "ClientConfig",
    "ClientParameters",
    "DEFAULT_BASE_URL",
    "load_client_config",
]

DEFAULT_BASE_URL = "https://api.maibmerchants.md"
DEFAULT_TIMEOUT_SECONDS = 30.0

_PARAMETER_TO_ENV_KEY = {
    "base_url": "MAIB_BASE_URL",
    "client_id": "MAIB_CLIENT_ID",
    "client_secret": "MAIB_CLIENT_SECRET",
    "signature_key": "MAIB_SIGNATURE_KEY",
    "access_token": "MAIB_ACCESS_TOKEN",
    "timeout_seconds": "MAIB_TIMEOUT_SECONDS",
}


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Values left as ``None`` fall back to the environment.
    """

    base_url: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    signature_key: Optional[str] = None
    access_token: Optional[str] = None
    timeout_seconds: Optional[float | int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = str(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = str(value)
    return overrides


def _normalize_base_url(raw_url: str) -> str:
    value = raw_url.strip().rstrip("/")
    if not value:
        raise ConfigError("MAIB_BASE_URL must not be empty")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"MAIB_BASE_URL must be an http(s) URL, got '{raw_url}'")
    return value


def _parse_timeout(raw_timeout: str) -> float:
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"MAIB_TIMEOUT_SECONDS must be a number, got '{raw_timeout}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("MAIB_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    client_id: Optional[ClientId] = None
    client_secret: Optional[ClientSecret] = None
    signature_key: Optional[SignatureKey] = None
    access_token: Optional[AccessToken] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def has_credentials(self) -> bool:
        return self.client_id is not None and self.client_secret is not None

    def require_credentials(self) -> tuple[ClientId, ClientSecret]:
        if self.client_id is None or self.client_secret is None:
            raise ConfigError("MAIB_CLIENT_ID and MAIB_CLIENT_SECRET must be provided")
        return self.client_id, self.client_secret

    def require_signature_key(self) -> SignatureKey:
        if self.signature_key is None:
            raise ConfigError("MAIB_SIGNATURE_KEY must be provided")
        return self.signature_key

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        """
        Build a config from ``MAIB_*`` keys. The sandbox variables
        ``MAIB_SANDBOX_BASE_PATH`` and ``MAIB_SANDBOX_ACCESS_TOKEN`` are used
        when the regular ones are absent.
        """
        base_url = values.get("MAIB_BASE_URL") or values.get("MAIB_SANDBOX_BASE_PATH")
        client_id = values.get("MAIB_CLIENT_ID")
        client_secret = values.get("MAIB_CLIENT_SECRET")
        signature_key = values.get("MAIB_SIGNATURE_KEY")
        access_token = values.get("MAIB_ACCESS_TOKEN") or values.get("MAIB_SANDBOX_ACCESS_TOKEN")
        timeout_raw = values.get("MAIB_TIMEOUT_SECONDS")

        return cls(
            base_url=_normalize_base_url(base_url or DEFAULT_BASE_URL),
            client_id=ClientId(client_id) if client_id else None,
            client_secret=ClientSecret(client_secret) if client_secret else None,
            signature_key=SignatureKey(signature_key) if signature_key else None,
            access_token=AccessToken(access_token) if access_token else None,
            timeout_seconds=(
                _parse_timeout(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
            ),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        base_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        signature_key: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout_seconds: Optional[float | int | str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "base_url": base_url,
                "client_id": client_id,
                "client_secret": client_secret,
                "signature_key": signature_key,
                "access_token": access_token,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        return cls.from_mapping(
            build_environment(env_file=env_file, base=base, overrides=merged_overrides)
        )


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    base_url: Optional[str] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    signature_key: Optional[str] = None,
    access_token: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Settings may come from environment variables, a ``.env`` file, keyword
    arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        base_url=base_url,
        client_id=client_id,
        client_secret=client_secret,
        signature_key=signature_key,
        access_token=access_token,
        timeout_seconds=timeout_seconds,
    )
