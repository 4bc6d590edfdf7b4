"""
Command-line interface for exercising the MAIB MIA APIs.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Sequence, Tuple

import requests

from .api import create_client, parse_notification
from .core.client import MaibClient
from .core.config import ClientConfig, ConfigError, load_client_config
from .core.errors import MaibError
from .core.models import AccessToken, ExtensionId, PaymentId, QRId, format_decimal


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, (QRId, PaymentId, ExtensionId)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return format_decimal(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in fields(value)}
    return value


def _print_json(value: Any) -> None:
    print(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maib-payments",
        description="Call the MAIB MIA QR payments API",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MAIB_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("token", help="Request an access token with the configured credentials")

    qr = commands.add_parser("qr", help="Show the details of a QR")
    qr.add_argument("qr_id")

    payment = commands.add_parser("payment", help="Show the details of a payment")
    payment.add_argument("pay_id")

    cancel = commands.add_parser("cancel-qr", help="Cancel an active QR")
    cancel.add_argument("qr_id")
    cancel.add_argument("--reason", required=True)

    refund = commands.add_parser("refund", help="Refund an executed payment")
    refund.add_argument("pay_id")
    refund.add_argument("--reason", required=True)

    verify = commands.add_parser(
        "verify-notification",
        help="Check the signature of a callback body stored in a file ('-' for stdin)",
    )
    verify.add_argument("path")
    return parser


def _resolve_token(client: MaibClient, config: ClientConfig) -> AccessToken:
    if config.access_token is not None:
        return config.access_token
    client_id, client_secret = config.require_credentials()
    return client.get_access_token(client_id, client_secret).access_token


def _read_body(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _run_command(args: argparse.Namespace, config: ClientConfig) -> int:
    if args.command == "verify-notification":
        payload = parse_notification(_read_body(args.path))
        trusted = payload.verify(config.require_signature_key())
        if trusted is None:
            logging.error("Notification signature is not valid")
            return 1
        _print_json(trusted.notification)
        return 0

    client = create_client(config=config, session=requests.Session())

    if args.command == "token":
        client_id, client_secret = config.require_credentials()
        auth = client.get_access_token(client_id, client_secret)
        logging.info(
            "Obtained %s token valid for %s seconds",
            auth.token_type,
            auth.expires_in,
        )
        return 0

    token = _resolve_token(client, config)
    if args.command == "qr":
        _print_json(client.get_qr(QRId(args.qr_id), token))
    elif args.command == "payment":
        _print_json(client.get_payment(PaymentId(args.pay_id), token))
    elif args.command == "cancel-qr":
        _print_json(client.cancel_qr(QRId(args.qr_id), args.reason, token))
    elif args.command == "refund":
        _print_json(client.refund_payment(PaymentId(args.pay_id), args.reason, token))
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        return _run_command(args, config)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1
    except MaibError as exc:
        logging.error("%s failed: %s", args.command, exc)
        return 1
    except OSError as exc:
        logging.error("Could not read input: %s", exc)
        return 1


def main() -> None:
    sys.exit(run_cli())
