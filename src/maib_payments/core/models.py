"""
Value types, enums and response models of the MAIB MIA API.

Secrets (credentials, tokens, signatures) render as ``Type([redacted])`` so
they can be logged safely; ``reveal()`` hands out the raw value to the few
call sites that must transmit it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

__all__ = [
    "AccessToken",
    "AccessTokenDuration",
    "AuthToken",
    "CancelQRResult",
    "ClientId",
    "ClientSecret",
    "CreateQRResponse",
    "Currency",
    "ExtensionId",
    "Notification",
    "PaymentDetails",
    "PaymentId",
    "PaymentStatus",
    "PaymentType",
    "QRDetails",
    "QRId",
    "QRStatus",
    "QRType",
    "RefundResult",
    "Signature",
    "SignatureKey",
    "TokenType",
    "ValidSignatureNotification",
    "format_decimal",
    "parse_decimal",
    "parse_timestamp",
]


class _Secret:
    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"{type(self).__name__} expects a str, got {type(value).__name__}")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def reveal(self) -> str:
        """Return the raw value. Never log the result."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))

    def __str__(self) -> str:
        return f"{type(self).__name__}([redacted])"

    __repr__ = __str__


class ClientId(_Secret):
    __slots__ = ()


class ClientSecret(_Secret):
    __slots__ = ()


class AccessToken(_Secret):
    __slots__ = ()


class Signature(_Secret):
    __slots__ = ()


class SignatureKey(_Secret):
    """Callback signature key issued by MAIB out-of-band."""

    __slots__ = ()


@dataclass(frozen=True)
class _Identifier:
    value: str

    def as_str(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.value == other
        if type(other) is type(self):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value


class QRId(_Identifier):
    pass


class PaymentId(_Identifier):
    pass


class ExtensionId(_Identifier):
    pass


@dataclass(frozen=True)
class AccessTokenDuration:
    seconds: int

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)


class _WireEnum(str, Enum):
    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_wire(cls, value: Any):
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unknown {cls.__name__} value {value!r}") from exc


class QRType(_WireEnum):
    STATIC = "Static"
    DYNAMIC = "Dynamic"
    HYBRID = "Hybrid"


class PaymentType(_WireEnum):
    FIXED = "Fixed"
    CONTROLLED = "Controlled"
    FREE = "Free"


class PaymentStatus(_WireEnum):
    EXECUTED = "Executed"
    REFUNDED = "Refunded"


class QRStatus(_WireEnum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    EXPIRED = "Expired"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class TokenType(_WireEnum):
    BEARER = "Bearer"


class Currency(_WireEnum):
    MDL = "MDL"

    @property
    def code(self) -> str:
        return self.value

    @property
    def minor_currency_unit(self) -> int:
        return _MINOR_UNITS[self]

    def to_minor_units(self, amount: Decimal) -> int:
        """Express ``amount`` in minor units, e.g. ``Decimal("1.50")`` MDL -> ``150``."""
        scaled = Decimal(amount) * self.minor_currency_unit
        integral = scaled.to_integral_value()
        if integral != scaled:
            raise ValueError(f"{amount} {self.code} has more precision than its minor unit")
        return int(integral)


_MINOR_UNITS = {Currency.MDL: 100}


def parse_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value if isinstance(value, Decimal) else str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} must be a number, got {value!r}") from exc


def format_decimal(value: Decimal) -> str:
    """Render ``value`` in plain notation without trailing fractional zeros.

    ``Decimal("10.50")`` becomes ``"10.5"`` and ``Decimal("1.00")`` becomes ``"1"``,
    the way the gateway prints amounts when it signs a callback.
    """
    return format(value.normalize(), "f")


# fromisoformat() before 3.11 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def _six_digit_fraction(match: re.Match) -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_timestamp(value: Any, field_name: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be an ISO 8601 string, got {value!r}")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    text = _FRACTION.sub(_six_digit_fraction, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"{field_name} is not a valid ISO 8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"{field_name} must carry a UTC offset: {value!r}")
    return parsed


def _required(payload: Mapping[str, Any], key: str) -> Any:
    value = payload[key]
    if value is None:
        raise ValueError(f"{key} must not be null")
    return value


def _optional(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return None if value is None else str(value)


def _optional_decimal(payload: Mapping[str, Any], key: str) -> Optional[Decimal]:
    value = payload.get(key)
    return None if value is None else parse_decimal(value, key)


@dataclass(frozen=True)
class Notification:
    """Payment event pushed by the gateway to the merchant callback URL."""

    amount: Decimal
    commission: Decimal
    currency: Currency
    executed_at: str
    extension_id: ExtensionId
    pay_id: PaymentId
    payer_iban: str
    payer_name: str
    qr_id: QRId
    qr_status: QRStatus
    reference_id: str
    order_id: Optional[str] = None
    terminal_id: Optional[str] = None

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "Notification":
        return cls(
            amount=parse_decimal(_required(payload, "amount"), "amount"),
            commission=parse_decimal(_required(payload, "commission"), "commission"),
            currency=Currency.from_wire(_required(payload, "currency")),
            executed_at=str(_required(payload, "executedAt")),
            extension_id=ExtensionId(str(_required(payload, "extensionId"))),
            pay_id=PaymentId(str(_required(payload, "payId"))),
            payer_iban=str(_required(payload, "payerIban")),
            payer_name=str(_required(payload, "payerName")),
            qr_id=QRId(str(_required(payload, "qrId"))),
            qr_status=QRStatus.from_wire(_required(payload, "qrStatus")),
            reference_id=str(_required(payload, "referenceId")),
            order_id=_optional(payload, "orderId"),
            terminal_id=_optional(payload, "terminalId"),
        )


@dataclass(frozen=True)
class ValidSignatureNotification:
    """A notification whose signature matched; only the verifier builds these."""

    notification: Notification


@dataclass(frozen=True)
class AuthToken:
    access_token: AccessToken
    expires_in: int
    token_type: TokenType

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "AuthToken":
        return cls(
            access_token=AccessToken(str(payload["accessToken"])),
            expires_in=int(payload["expiresIn"]),
            token_type=TokenType.from_wire(payload["tokenType"]),
        )

    def expires_in_duration(self) -> AccessTokenDuration:
        """Access token lifetime in seconds."""
        return AccessTokenDuration(self.expires_in)


@dataclass(frozen=True)
class CreateQRResponse:
    qr_id: QRId
    order_id: Optional[str]
    type: QRType
    url: str
    expires_at: str

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "CreateQRResponse":
        return cls(
            qr_id=QRId(str(payload["qrId"])),
            order_id=_optional(payload, "orderId"),
            type=QRType.from_wire(payload["type"]),
            url=str(payload["url"]),
            expires_at=str(payload["expiresAt"]),
        )


@dataclass(frozen=True)
class QRDetails:
    qr_id: QRId
    order_id: Optional[str]
    status: QRStatus
    type: QRType
    url: str
    amount_type: PaymentType
    currency: Currency
    amount: Decimal
    amount_min: Optional[Decimal]
    amount_max: Optional[Decimal]
    description: str
    callback_url: str
    redirect_url: str
    terminal_id: Optional[str]
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "QRDetails":
        return cls(
            qr_id=QRId(str(payload["qrId"])),
            order_id=_optional(payload, "orderId"),
            status=QRStatus.from_wire(payload["status"]),
            type=QRType.from_wire(payload["type"]),
            url=str(payload["url"]),
            amount_type=PaymentType.from_wire(payload["amountType"]),
            currency=Currency.from_wire(payload["currency"]),
            amount=parse_decimal(payload["amount"], "amount"),
            amount_min=_optional_decimal(payload, "amountMin"),
            amount_max=_optional_decimal(payload, "amountMax"),
            description=str(payload["description"]),
            callback_url=str(payload["callbackUrl"]),
            redirect_url=str(payload["redirectUrl"]),
            terminal_id=_optional(payload, "terminalId"),
            created_at=parse_timestamp(payload["createdAt"], "createdAt"),
            updated_at=parse_timestamp(payload["updatedAt"], "updatedAt"),
            expires_at=parse_timestamp(payload["expiresAt"], "expiresAt"),
        )


@dataclass(frozen=True)
class CancelQRResult:
    qr_id: QRId
    status: QRStatus

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "CancelQRResult":
        return cls(
            qr_id=QRId(str(payload["qrId"])),
            status=QRStatus.from_wire(payload["status"]),
        )


@dataclass(frozen=True)
class PaymentDetails:
    pay_id: PaymentId
    reference_id: str
    qr_id: QRId
    extension_id: Optional[ExtensionId]
    order_id: Optional[str]
    amount: Decimal
    commission: Decimal
    currency: Currency
    description: str
    payer_name: str
    payer_iban: str
    status: PaymentStatus
    executed_at: str
    refunded_at: Optional[str]
    terminal_id: Optional[str]

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "PaymentDetails":
        extension_id = payload.get("extensionId")
        return cls(
            pay_id=PaymentId(str(payload["payId"])),
            reference_id=str(payload["referenceId"]),
            qr_id=QRId(str(payload["qrId"])),
            extension_id=None if extension_id is None else ExtensionId(str(extension_id)),
            order_id=_optional(payload, "orderId"),
            amount=parse_decimal(payload["amount"], "amount"),
            commission=parse_decimal(payload["commission"], "commission"),
            currency=Currency.from_wire(payload["currency"]),
            description=str(payload["description"]),
            payer_name=str(payload["payerName"]),
            payer_iban=str(payload["payerIban"]),
            status=PaymentStatus.from_wire(payload["status"]),
            executed_at=str(payload["executedAt"]),
            refunded_at=_optional(payload, "refundedAt"),
            terminal_id=_optional(payload, "terminalId"),
        )


@dataclass(frozen=True)
class RefundResult:
    pay_id: PaymentId
    status: PaymentStatus

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "RefundResult":
        return cls(
            pay_id=PaymentId(str(payload["payId"])),
            status=PaymentStatus.from_wire(payload["status"]),
        )
