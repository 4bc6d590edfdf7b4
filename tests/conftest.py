"""Shared fixtures for the maib_payments test suite."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from maib_payments.core.models import (
    AccessToken,
    Currency,
    ExtensionId,
    Notification,
    PaymentId,
    QRId,
    QRStatus,
)


def make_response(status_code: int = 200, payload: Any = None, json_error: Optional[Exception] = None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def token():
    return AccessToken("tok-123")


@pytest.fixture
def notification():
    return Notification(
        amount=Decimal(0),
        commission=Decimal(0),
        currency=Currency.MDL,
        executed_at="2029-10-22T10:32:28+03:00",
        extension_id=ExtensionId("extension_id"),
        pay_id=PaymentId("pay_id"),
        payer_iban="payer_iban",
        payer_name="payer_name",
        qr_id=QRId("qr_id"),
        qr_status=QRStatus.PAID,
        reference_id="reference_id",
    )


@pytest.fixture
def notification_wire():
    return {
        "amount": 0,
        "commission": 0,
        "currency": "MDL",
        "executedAt": "2029-10-22T10:32:28+03:00",
        "extensionId": "extension_id",
        "payId": "pay_id",
        "payerIban": "payer_iban",
        "payerName": "payer_name",
        "qrId": "qr_id",
        "qrStatus": "Paid",
        "referenceId": "reference_id",
    }
