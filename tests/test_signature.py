"""Tests for callback signature construction and verification."""

from __future__ import annotations

import dataclasses
import json
from decimal import Decimal

import pytest

from maib_payments.core.errors import NotificationError
from maib_payments.core.models import (
    ExtensionId,
    PaymentId,
    QRId,
    QRStatus,
    Signature,
    SignatureKey,
    ValidSignatureNotification,
)
from maib_payments.core.signature import (
    NotificationPayload,
    build_signature,
    canonical_string,
    verify_notification,
)

KEY = SignatureKey("foobar")

BASE_SIGNATURE = "NTFkNzc3ZmZlZjg0MjU0N2I4ODEzYzhmNjQ0N2ZkN2IzODY4Zjk2NGUwZjliMDAxODI5NmFlNDU1N2EyMDdmZA=="
ORDER_SIGNATURE = "NmFjNTczNGM3YzVjMGZhNzE1Nzk4NThiMDY2ZGQ3NDkwMDViNTQ2YzkzNWI4ZDUzNjAwYjA3ZTYwOTZiZjVlNg=="
TERMINAL_SIGNATURE = "MTYzYTI1Y2FiYjFkNzVlMTlhMjg5MTc4YTkxOTJlMzEyMGRkYTg2NjhmOGI3OWE1N2VjYWEwMTgxYWU3MWNlZg=="
BOTH_SIGNATURE = "MDMyNGNiOTYwN2Y2NzZjYmY5MDJkMjhlYTgwMzRkODU0NjdhMmUzZjA2MTU3NGNhYjNhNTBiNDk4NWFkZTczYw=="


class TestKnownVectors:
    @pytest.mark.parametrize(
        "order_id, terminal_id, expected",
        [
            (None, None, BASE_SIGNATURE),
            ("order_id", None, ORDER_SIGNATURE),
            (None, "terminal_id", TERMINAL_SIGNATURE),
            ("order_id", "terminal_id", BOTH_SIGNATURE),
        ],
    )
    def test_build_signature(self, notification, order_id, terminal_id, expected):
        variant = dataclasses.replace(notification, order_id=order_id, terminal_id=terminal_id)
        assert build_signature(variant, KEY) == Signature(expected)

    def test_is_deterministic(self, notification):
        first = build_signature(notification, KEY)
        second = build_signature(notification, KEY)
        assert first == second


class TestCanonicalString:
    def test_without_optional_fields(self, notification):
        assert canonical_string(notification, KEY) == (
            "0:0:MDL:2029-10-22T10:32:28+03:00:extension_id"
            ":pay_id:payer_iban:payer_name:qr_id:Paid:reference_id:foobar"
        )

    def test_optional_fields_take_their_fixed_positions(self, notification):
        variant = dataclasses.replace(notification, order_id="o-1", terminal_id="t-1")
        assert canonical_string(variant, KEY) == (
            "0:0:MDL:2029-10-22T10:32:28+03:00:extension_id:o-1"
            ":pay_id:payer_iban:payer_name:qr_id:Paid:reference_id:t-1:foobar"
        )

    def test_absent_optional_fields_leave_no_placeholder(self, notification):
        text = canonical_string(notification, KEY)
        assert "::" not in text
        assert text.count(":") == 14

    @pytest.mark.parametrize(
        "amount, commission, prefix",
        [
            (Decimal("10.50"), Decimal("1.00"), "10.5:1:MDL:"),
            (Decimal("1E+2"), Decimal("0.00"), "100:0:MDL:"),
            (Decimal("100"), Decimal("0.25"), "100:0.25:MDL:"),
        ],
    )
    def test_decimals_drop_trailing_zeros_without_exponent(
        self, notification, amount, commission, prefix
    ):
        variant = dataclasses.replace(notification, amount=amount, commission=commission)
        assert canonical_string(variant, KEY).startswith(prefix)


class TestSensitivity:
    @pytest.mark.parametrize(
        "changes",
        [
            {"amount": Decimal("1")},
            {"commission": Decimal("0.01")},
            {"executed_at": "2029-10-22T10:32:29+03:00"},
            {"extension_id": ExtensionId("other")},
            {"pay_id": PaymentId("other")},
            {"payer_iban": "MD00"},
            {"payer_name": "someone else"},
            {"qr_id": QRId("other")},
            {"qr_status": QRStatus.ACTIVE},
            {"reference_id": "ref"},
            {"order_id": ""},
            {"terminal_id": ""},
        ],
    )
    def test_any_change_alters_signature(self, notification, changes):
        variant = dataclasses.replace(notification, **changes)
        assert build_signature(variant, KEY) != build_signature(notification, KEY)

    def test_key_change_alters_signature(self, notification):
        assert build_signature(notification, SignatureKey("foobaz")) != build_signature(
            notification, KEY
        )


class TestVerification:
    def test_valid_signature_yields_trusted_notification(self, notification):
        payload = NotificationPayload(notification, Signature(BASE_SIGNATURE))

        trusted = verify_notification(payload, KEY)

        assert isinstance(trusted, ValidSignatureNotification)
        assert trusted.notification == notification

    def test_wrong_signature_yields_none(self, notification):
        payload = NotificationPayload(notification, Signature(ORDER_SIGNATURE))
        assert payload.verify(KEY) is None

    def test_wrong_key_yields_none(self, notification):
        payload = NotificationPayload(notification, Signature(BASE_SIGNATURE))
        assert payload.verify(SignatureKey("not-the-key")) is None

    def test_non_ascii_signature_is_rejected_not_raised(self, notification):
        payload = NotificationPayload(notification, Signature("подпись"))
        assert payload.verify(KEY) is None

    def test_mismatch_is_logged_without_secrets(self, notification, caplog):
        payload = NotificationPayload(notification, Signature("bogus"))
        with caplog.at_level("WARNING"):
            payload.verify(KEY)
        assert "pay_id" in caplog.text
        assert "foobar" not in caplog.text
        assert "bogus" not in caplog.text


class TestPayloadParsing:
    def test_from_json_round_trips_known_vector(self, notification_wire):
        body = json.dumps({"result": notification_wire, "signature": BASE_SIGNATURE})

        trusted = NotificationPayload.from_json(body).verify(KEY)

        assert trusted is not None
        assert trusted.notification.pay_id == "pay_id"
        assert trusted.notification.order_id is None

    def test_from_json_signs_amounts_without_trailing_zeros(self, notification, notification_wire):
        notification_wire["amount"] = "__AMOUNT__"
        notification_wire["commission"] = "__COMMISSION__"
        expected = build_signature(
            dataclasses.replace(notification, amount=Decimal("10.5"), commission=Decimal("1")), KEY
        )
        body = json.dumps({"result": notification_wire, "signature": expected.reveal()})
        body = body.replace('"__AMOUNT__"', "10.50").replace('"__COMMISSION__"', "1.00")

        trusted = NotificationPayload.from_json(body).verify(KEY)

        assert trusted is not None
        assert trusted.notification.amount == Decimal("10.5")
        assert canonical_string(trusted.notification, KEY).startswith("10.5:1:MDL:")

    def test_optional_fields_are_read(self, notification_wire):
        notification_wire["orderId"] = "order_id"
        notification_wire["terminalId"] = "terminal_id"
        payload = NotificationPayload.from_wire(
            {"result": notification_wire, "signature": BOTH_SIGNATURE}
        )
        assert payload.verify(KEY) is not None

    @pytest.mark.parametrize("missing", ["amount", "payId", "qrStatus", "referenceId"])
    def test_missing_required_field_is_rejected(self, notification_wire, missing):
        del notification_wire[missing]
        with pytest.raises(NotificationError, match=missing):
            NotificationPayload.from_wire({"result": notification_wire, "signature": "x"})

    def test_null_required_field_is_rejected(self, notification_wire):
        notification_wire["payerName"] = None
        with pytest.raises(NotificationError):
            NotificationPayload.from_wire({"result": notification_wire, "signature": "x"})

    def test_unknown_status_is_rejected(self, notification_wire):
        notification_wire["qrStatus"] = "Refunded"
        with pytest.raises(NotificationError):
            NotificationPayload.from_wire({"result": notification_wire, "signature": "x"})

    def test_missing_signature_is_rejected(self, notification_wire):
        with pytest.raises(NotificationError, match="signature"):
            NotificationPayload.from_wire({"result": notification_wire})

    def test_invalid_json_is_rejected(self):
        with pytest.raises(NotificationError):
            NotificationPayload.from_json("{not json")

    def test_unknown_fields_are_ignored(self, notification_wire):
        notification_wire["somethingNew"] = "value"
        payload = NotificationPayload.from_wire(
            {"result": notification_wire, "signature": BASE_SIGNATURE}
        )
        assert payload.verify(KEY) is not None

    def test_repr_does_not_leak_signature(self, notification):
        payload = NotificationPayload(notification, Signature(BASE_SIGNATURE))
        assert BASE_SIGNATURE not in repr(payload)
