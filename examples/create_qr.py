"""
Minimal script that uses the public API to create a dynamic QR and poll it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Tuple

from maib_payments import (
    ConfigError,
    CreateQR,
    MaibError,
    create_client,
    load_client_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Not a decimal amount: {value}") from exc
    if amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return amount


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a MAIB MIA QR using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MAIB_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--amount", type=_amount, default=Decimal("100"), help="Amount in MDL")
    parser.add_argument("--description", default="Order payment")
    parser.add_argument("--order-id", help="Merchant order reference echoed in callbacks")
    parser.add_argument("--callback-url", default="", help="Where MAIB posts the notification")
    parser.add_argument("--redirect-url", default="", help="Where the payer lands afterwards")
    parser.add_argument(
        "--valid-hours",
        type=int,
        default=24,
        help="How long the QR stays payable (default: 24)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
        )
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)
    expires_at = (datetime.now(timezone.utc) + timedelta(hours=args.valid_hours)).isoformat()
    payload = CreateQR.dynamic_fixed(
        args.amount,
        expires_at,
        args.description,
        args.callback_url,
        args.redirect_url,
        order_id=args.order_id,
    )

    try:
        if config.access_token is not None:
            token = config.access_token
        else:
            client_id, client_secret = config.require_credentials()
            token = client.get_access_token(client_id, client_secret).access_token
        created = client.create_qr(payload, token)
        details = client.get_qr(created.qr_id, token)
    except MaibError as exc:
        logging.error("QR creation failed: %s", exc)
        return 1

    logging.info("Created %s QR %s, payable at %s", created.type, created.qr_id, created.url)
    logging.info("Current status: %s, expires at %s", details.status, details.expires_at)
    return 0


if __name__ == "__main__":
    sys.exit(main())
