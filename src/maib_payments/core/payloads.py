"""
Helpers for constructing the JSON payloads sent to the MAIB MIA API.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from .models import (
    ClientId,
    ClientSecret,
    Currency,
    PaymentType,
    QRId,
    QRType,
)

__all__ = [
    "CancelQR",
    "CreateQR",
    "GetAccessToken",
    "RefundPayment",
    "TestPay",
    "decimal_to_json",
]


def decimal_to_json(value: Optional[Decimal]) -> Optional[Union[int, float]]:
    """Amounts travel as JSON numbers; integral values are sent without a fraction."""
    if value is None:
        return None
    value = Decimal(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class GetAccessToken:
    client_id: ClientId
    client_secret: ClientSecret

    def to_wire(self) -> Dict[str, Any]:
        return {
            "clientId": self.client_id.reveal(),
            "clientSecret": self.client_secret.reveal(),
        }


@dataclass(frozen=True)
class CreateQR:
    """
    Body of ``POST /v2/mia/qr``.

    ``expires_at`` must be an ISO 8601 timestamp and is required for
    Dynamic QRs. Optional fields are sent as ``null`` when unset.
    """

    type: QRType
    amount_type: PaymentType
    amount: Decimal
    currency: Currency
    description: str
    callback_url: str
    redirect_url: str
    expires_at: Optional[str] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None
    order_id: Optional[str] = None
    terminal_id: Optional[str] = None

    @classmethod
    def dynamic_fixed(
        cls,
        amount: Decimal,
        expires_at: str,
        description: str,
        callback_url: str,
        redirect_url: str,
        *,
        order_id: Optional[str] = None,
    ) -> "CreateQR":
        """A one-off QR for a fixed MDL amount."""
        return cls(
            type=QRType.DYNAMIC,
            amount_type=PaymentType.FIXED,
            amount=amount,
            currency=Currency.MDL,
            description=description,
            callback_url=callback_url,
            redirect_url=redirect_url,
            expires_at=expires_at,
            order_id=order_id,
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "expiresAt": self.expires_at,
            "amountType": self.amount_type.value,
            "amount": decimal_to_json(self.amount),
            "amountMin": decimal_to_json(self.amount_min),
            "amountMax": decimal_to_json(self.amount_max),
            "currency": self.currency.code,
            "description": self.description,
            "orderId": self.order_id,
            "callbackUrl": self.callback_url,
            "redirectUrl": self.redirect_url,
            "terminalId": self.terminal_id,
        }


@dataclass(frozen=True)
class CancelQR:
    reason: str

    def to_wire(self) -> Dict[str, Any]:
        return {"reason": self.reason}


@dataclass(frozen=True)
class RefundPayment:
    reason: str

    def to_wire(self) -> Dict[str, Any]:
        return {"reason": self.reason}


@dataclass(frozen=True)
class TestPay:
    """Body of the sandbox-only ``POST /v2/mia/test-pay`` endpoint."""

    __test__ = False

    qr_id: QRId
    amount: Decimal
    iban: str
    payer_name: str
    currency: Currency = Currency.MDL

    def to_wire(self) -> Dict[str, Any]:
        return {
            "qrId": self.qr_id.as_str(),
            "amount": decimal_to_json(self.amount),
            "iban": self.iban,
            "currency": self.currency.code,
            "payerName": self.payer_name,
        }
