"""Tests for configuration loading and environment layering."""

from __future__ import annotations

import pytest

from maib_payments.api import create_client
from maib_payments.core.config import (
    DEFAULT_BASE_URL,
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from maib_payments.core.environment import build_environment
from maib_payments.core.models import AccessToken, ClientId, SignatureKey


def test_defaults_when_nothing_is_set():
    config = ClientConfig.from_mapping({})
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout_seconds == 30.0
    assert config.client_id is None
    assert not config.has_credentials


def test_from_mapping_wraps_secrets():
    config = ClientConfig.from_mapping(
        {
            "MAIB_BASE_URL": "https://sandbox.example.md/",
            "MAIB_CLIENT_ID": "id",
            "MAIB_CLIENT_SECRET": "s3cr3t-value",
            "MAIB_SIGNATURE_KEY": "key",
            "MAIB_TIMEOUT_SECONDS": "7.5",
        }
    )
    assert config.base_url == "https://sandbox.example.md"
    assert config.client_id == ClientId("id")
    assert config.require_signature_key() == SignatureKey("key")
    assert config.timeout_seconds == 7.5
    assert "s3cr3t-value" not in repr(config)


def test_sandbox_variables_are_fallbacks():
    config = ClientConfig.from_mapping(
        {
            "MAIB_SANDBOX_BASE_PATH": "https://sandbox.example.md",
            "MAIB_SANDBOX_ACCESS_TOKEN": "sandbox-token",
        }
    )
    assert config.base_url == "https://sandbox.example.md"
    assert config.access_token == AccessToken("sandbox-token")


@pytest.mark.parametrize(
    "values",
    [
        {"MAIB_BASE_URL": "ftp://example.md"},
        {"MAIB_BASE_URL": "not a url"},
        {"MAIB_TIMEOUT_SECONDS": "soon"},
        {"MAIB_TIMEOUT_SECONDS": "0"},
    ],
)
def test_invalid_values(values):
    with pytest.raises(ConfigError):
        ClientConfig.from_mapping(values)


def test_missing_credentials_are_reported():
    with pytest.raises(ConfigError, match="MAIB_CLIENT_ID"):
        ClientConfig().require_credentials()
    with pytest.raises(ConfigError, match="MAIB_SIGNATURE_KEY"):
        ClientConfig().require_signature_key()


def test_layering_order(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# sandbox settings\n"
        "export MAIB_CLIENT_ID=from-file\n"
        "MAIB_CLIENT_SECRET='quoted secret'\n"
        "MAIB_BASE_URL=https://file.example.md\n",
        encoding="utf-8",
    )

    config = load_client_config(
        env_file=str(env_file),
        base={"MAIB_BASE_URL": "https://base.example.md"},
        overrides={"MAIB_TIMEOUT_SECONDS": "3"},
        parameters=ClientParameters(signature_key="param-key"),
        client_id="keyword-id",
    )

    assert config.base_url == "https://base.example.md"
    assert config.client_id == ClientId("keyword-id")
    assert config.client_secret.reveal() == "quoted secret"
    assert config.signature_key == SignatureKey("param-key")
    assert config.timeout_seconds == 3.0


def test_missing_env_file_is_ignored(tmp_path):
    environment = build_environment(env_file=str(tmp_path / "absent.env"), base={"A": "1"})
    assert environment == {"A": "1"}


def test_env_file_fills_only_missing_keys(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text('A=from-file\nB="from file"\nnot a pair\n', encoding="utf-8")
    base = {"A": "existing"}

    environment = build_environment(env_file=str(env_file), base=base, overrides={"C": "3"})

    assert environment == {"A": "existing", "B": "from file", "C": "3"}
    assert base == {"A": "existing"}


def test_none_base_reads_process_environment(monkeypatch):
    monkeypatch.setenv("MAIB_CLIENT_ID", "from-process")
    environment = build_environment(env_file=None)
    assert environment["MAIB_CLIENT_ID"] == "from-process"


def test_create_client_rejects_mixed_inputs():
    with pytest.raises(ValueError):
        create_client(config=ClientConfig(), base_url="https://other.example.md")


def test_create_client_from_parameters():
    client = create_client(env_file=None, base={}, base_url="https://api.example.md", timeout_seconds=4)
    assert client.base_url == "https://api.example.md"
    assert client.timeout_seconds == 4.0


def test_unknown_parameter_is_a_type_error():
    from maib_payments.core.config import _collect_parameter_overrides

    with pytest.raises(TypeError):
        _collect_parameter_overrides(None, {"nope": "x"})
