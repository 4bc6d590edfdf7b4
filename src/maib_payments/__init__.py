"""
Public facade for the MAIB MIA payments client.

The most useful pieces are re-exported so integrators can
``from maib_payments import ...`` without navigating the package.
"""

from .api import create_client, parse_notification, verify_notification_body
from .core import (
    AccessToken,
    ApiError,
    ApiResponseError,
    AuthToken,
    CancelQRResult,
    ClientConfig,
    ClientId,
    ClientParameters,
    ClientSecret,
    ConfigError,
    CreateQR,
    CreateQRResponse,
    Currency,
    DecodeError,
    MaibClient,
    MaibError,
    MalformedResponseError,
    Notification,
    NotificationError,
    NotificationPayload,
    PaymentDetails,
    PaymentId,
    PaymentStatus,
    PaymentType,
    QRDetails,
    QRId,
    QRStatus,
    QRType,
    RefundResult,
    Signature,
    SignatureKey,
    TestPay,
    TransportError,
    UnauthorizedError,
    ValidSignatureNotification,
    load_client_config,
    verify_notification,
)

__all__ = (
    "AccessToken",
    "ApiError",
    "ApiResponseError",
    "AuthToken",
    "CancelQRResult",
    "ClientConfig",
    "ClientId",
    "ClientParameters",
    "ClientSecret",
    "ConfigError",
    "CreateQR",
    "CreateQRResponse",
    "Currency",
    "DecodeError",
    "MaibClient",
    "MaibError",
    "MalformedResponseError",
    "Notification",
    "NotificationError",
    "NotificationPayload",
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
    "TestPay",
    "TransportError",
    "UnauthorizedError",
    "ValidSignatureNotification",
    "create_client",
    "load_client_config",
    "parse_notification",
    "verify_notification",
    "verify_notification_body",
)
