"""
HTTP client for the MAIB MIA QR payments API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import requests

from .config import ClientConfig
from .envelope import ApiFailure, decode_envelope
from .errors import DecodeError, TransportError, UnauthorizedError
from .models import (
    AccessToken,
    AuthToken,
    CancelQRResult,
    ClientId,
    ClientSecret,
    CreateQRResponse,
    PaymentDetails,
    PaymentId,
    QRDetails,
    QRId,
    RefundResult,
)
from .payloads import CancelQR, CreateQR, GetAccessToken, RefundPayment, TestPay

__all__ = [
    "MaibClient",
    "SendRequestInput",
]

R = TypeVar("R")

_JSON = "application/json"


@dataclass(frozen=True)
class SendRequestInput:
    method: str
    path: str
    token: Optional[AccessToken] = None
    body: Optional[Dict[str, Any]] = None


def _build_headers(method: str, token: Optional[AccessToken]) -> Dict[str, str]:
    headers = {"Accept": _JSON}
    if method != "GET":
        headers["Content-Type"] = _JSON
    if token is not None:
        headers["Authorization"] = f"Bearer {token.reveal()}"
    return headers


def _payment_id_from_wire(payload: Mapping[str, Any]) -> PaymentId:
    return PaymentId(str(payload["payId"]))


class MaibClient:
    """
    Thin wrapper around the gateway endpoints.

    One instance (and its ``requests.Session`` connection pool) is meant to be
    shared for the lifetime of the process. Tokens are never stored: every
    authenticated call takes the token explicitly.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> "MaibClient":
        return cls(
            config.base_url,
            session=session,
            timeout_seconds=config.timeout_seconds,
        )

    def get_access_token(self, client_id: ClientId, client_secret: ClientSecret) -> AuthToken:
        """Exchange client credentials for a new bearer token."""
        body = GetAccessToken(client_id=client_id, client_secret=client_secret)
        request = SendRequestInput("POST", "/v2/auth/token", body=body.to_wire())
        return self.send_request(request, AuthToken.from_wire)

    def create_qr(self, payload: CreateQR, token: AccessToken) -> CreateQRResponse:
        request = SendRequestInput("POST", "/v2/mia/qr", token=token, body=payload.to_wire())
        return self.send_request(request, CreateQRResponse.from_wire)

    def get_qr(self, qr_id: QRId, token: AccessToken) -> QRDetails:
        request = SendRequestInput("GET", f"/v2/mia/qr/{qr_id}", token=token)
        return self.send_request(request, QRDetails.from_wire)

    def cancel_qr(self, qr_id: QRId, reason: str, token: AccessToken) -> CancelQRResult:
        request = SendRequestInput(
            "POST",
            f"/v2/mia/qr/{qr_id}/cancel",
            token=token,
            body=CancelQR(reason=reason).to_wire(),
        )
        return self.send_request(request, CancelQRResult.from_wire)

    def get_payment(self, payment_id: PaymentId, token: AccessToken) -> PaymentDetails:
        request = SendRequestInput("GET", f"/v2/mia/payments/{payment_id}", token=token)
        return self.send_request(request, PaymentDetails.from_wire)

    def refund_payment(self, payment_id: PaymentId, reason: str, token: AccessToken) -> RefundResult:
        request = SendRequestInput(
            "POST",
            f"/v2/mia/payments/{payment_id}/refund",
            token=token,
            body=RefundPayment(reason=reason).to_wire(),
        )
        return self.send_request(request, RefundResult.from_wire)

    def simulate_payment(self, payload: TestPay, token: AccessToken) -> PaymentId:
        """
        Pay a QR in the sandbox environment. Production rejects this endpoint.
        """
        request = SendRequestInput("POST", "/v2/mia/test-pay", token=token, body=payload.to_wire())
        return self.send_request(request, _payment_id_from_wire)

    def send_request(
        self,
        request: SendRequestInput,
        parse_result: Callable[[Mapping[str, Any]], R],
    ) -> R:
        url = f"{self.base_url}{request.path}"
        headers = _build_headers(request.method, request.token)
        logging.info("Sending %s %s", request.method, url)

        try:
            response = self.session.request(
                request.method,
                url,
                headers=headers,
                json=request.body,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Error sending request to {url}: {exc}") from exc

        logging.debug("%s %s responded with %s", request.method, url, response.status_code)
        if response.status_code == 401:
            raise UnauthorizedError()

        try:
            payload = response.json(parse_float=Decimal)
        except ValueError as exc:
            raise DecodeError(
                f"Failed to parse JSON from {url} (status {response.status_code}): {exc}"
            ) from exc

        envelope = decode_envelope(payload, parse_result)
        if isinstance(envelope, ApiFailure):
            logging.warning(
                "%s %s returned API errors: %s",
                request.method,
                url,
                ", ".join(error.code for error in envelope.errors),
            )
        return envelope.unwrap()
