"""
Verification of the signed notifications MAIB posts to the callback URL.

The gateway signs the colon-joined notification fields followed by the
merchant's signature key::

    amount:commission:currency:executedAt:extensionId[:orderId]:payId:
    payerIban:payerName:qrId:qrStatus:referenceId[:terminalId]:<key>

The signature is ``base64(hex(sha256(canonical)))``: base64 of the lowercase
hex *text*, not of the raw digest.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from .errors import NotificationError
from .models import (
    Notification,
    Signature,
    SignatureKey,
    ValidSignatureNotification,
    format_decimal,
)

__all__ = [
    "NotificationPayload",
    "build_signature",
    "canonical_string",
    "verify_notification",
]


def canonical_string(notification: Notification, key: SignatureKey) -> str:
    n = notification
    parts: List[str] = [
        format_decimal(n.amount),
        format_decimal(n.commission),
        n.currency.code,
        n.executed_at,
        str(n.extension_id),
    ]
    if n.order_id is not None:
        parts.append(n.order_id)
    parts.extend(
        [
            str(n.pay_id),
            n.payer_iban,
            n.payer_name,
            str(n.qr_id),
            str(n.qr_status),
            n.reference_id,
        ]
    )
    if n.terminal_id is not None:
        parts.append(n.terminal_id)
    parts.append(key.reveal())
    return ":".join(parts)


def build_signature(notification: Notification, key: SignatureKey) -> Signature:
    digest = hashlib.sha256(canonical_string(notification, key).encode("utf-8")).hexdigest()
    return Signature(base64.b64encode(digest.encode("ascii")).decode("ascii"))


class NotificationPayload:
    """
    A notification exactly as received, before its signature is checked.

    The wrapped :class:`Notification` is only handed out by :meth:`verify`.
    """

    __slots__ = ("_result", "_signature")

    def __init__(self, result: Notification, signature: Signature) -> None:
        self._result = result
        self._signature = signature

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "NotificationPayload":
        if not isinstance(payload, Mapping):
            raise NotificationError("Notification payload must be a JSON object")
        try:
            result = payload["result"]
            signature = payload["signature"]
        except KeyError as exc:
            raise NotificationError(f"Notification payload is missing {exc.args[0]!r}") from exc
        if not isinstance(result, Mapping):
            raise NotificationError("Notification 'result' must be a JSON object")
        if not isinstance(signature, str):
            raise NotificationError("Notification 'signature' must be a string")
        try:
            notification = Notification.from_wire(result)
        except KeyError as exc:
            raise NotificationError(f"Notification is missing field {exc.args[0]!r}") from exc
        except ValueError as exc:
            raise NotificationError(f"Notification is malformed: {exc}") from exc
        return cls(notification, Signature(signature))

    @classmethod
    def from_json(cls, body: str | bytes) -> "NotificationPayload":
        try:
            payload = json.loads(body, parse_float=Decimal)
        except ValueError as exc:
            raise NotificationError(f"Notification body is not valid JSON: {exc}") from exc
        return cls.from_wire(payload)

    @property
    def signature(self) -> Signature:
        return self._signature

    def verify(self, key: SignatureKey) -> Optional[ValidSignatureNotification]:
        return verify_notification(self, key)

    def __repr__(self) -> str:
        return f"NotificationPayload(pay_id={self._result.pay_id!s}, signature={self._signature})"


def verify_notification(
    payload: NotificationPayload,
    key: SignatureKey,
) -> Optional[ValidSignatureNotification]:
    """
    Return the trusted notification when the signature matches, ``None`` otherwise.
    """
    notification = payload._result
    expected = build_signature(notification, key)
    if hmac.compare_digest(
        expected.reveal().encode("utf-8"),
        payload.signature.reveal().encode("utf-8"),
    ):
        logging.debug("Notification signature verified for payment %s", notification.pay_id)
        return ValidSignatureNotification(notification)

    logging.warning(
        "Rejecting notification for payment %s: signature mismatch",
        notification.pay_id,
    )
    return None
