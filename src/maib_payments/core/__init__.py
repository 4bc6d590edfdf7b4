"""
Core primitives of the MAIB MIA client: models, transport and verification.
"""

from .client import MaibClient, SendRequestInput
from .config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    DEFAULT_BASE_URL,
    load_client_config,
)
from .envelope import ApiFailure, ApiResponse, ApiSuccess, decode_envelope
from .environment import build_environment
from .errors import (
    ApiError,
    ApiResponseError,
    DecodeError,
    MaibError,
    MalformedResponseError,
    NotificationError,
    TransportError,
    UnauthorizedError,
)
from .models import (
    AccessToken,
    AccessTokenDuration,
    AuthToken,
    CancelQRResult,
    ClientId,
    ClientSecret,
    CreateQRResponse,
    Currency,
    ExtensionId,
    Notification,
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
    TokenType,
    ValidSignatureNotification,
)
from .payloads import CancelQR, CreateQR, GetAccessToken, RefundPayment, TestPay
from .signature import (
    NotificationPayload,
    build_signature,
    canonical_string,
    verify_notification,
)

__all__ = [
    "AccessToken",
    "AccessTokenDuration",
    "ApiError",
    "ApiFailure",
    "ApiResponse",
    "ApiResponseError",
    "ApiSuccess",
    "AuthToken",
    "CancelQR",
    "CancelQRResult",
    "ClientConfig",
    "ClientId",
    "ClientParameters",
    "ClientSecret",
    "ConfigError",
    "CreateQR",
    "CreateQRResponse",
    "Currency",
    "DEFAULT_BASE_URL",
    "DecodeError",
    "ExtensionId",
    "GetAccessToken",
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
    "RefundPayment",
    "RefundResult",
    "SendRequestInput",
    "Signature",
    "SignatureKey",
    "TestPay",
    "TokenType",
    "TransportError",
    "UnauthorizedError",
    "ValidSignatureNotification",
    "build_environment",
    "build_signature",
    "canonical_string",
    "decode_envelope",
    "load_client_config",
    "verify_notification",
]
