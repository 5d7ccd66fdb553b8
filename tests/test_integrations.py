"""Tests for the email, SMS and QR integrations."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from printshop.config import settings
from printshop.integrations.email_provider import EmailDeliveryError, send_email
from printshop.integrations.qr import qr_data_uri, tracking_url
from printshop.integrations.sms_gateway import SmsDeliveryError, normalize_phone, send_sms


@pytest.fixture
def sms_credentials():
    with (
        patch.object(settings, "sms_username", "printshop"),
        patch.object(settings, "sms_api_key", "at-key"),
        patch.object(settings, "sms_sender_id", ""),
    ):
        yield


def _gateway_response(status="Success", message_id="ATXid_42", number="+232076123456"):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = {
        "SMSMessageData": {
            "Message": "Sent to 1/1",
            "Recipients": [{"status": status, "messageId": message_id, "number": number}],
        }
    }
    return response


class TestNormalizePhone:
    def test_adds_country_code(self):
        assert normalize_phone("076123456") == "+232076123456"

    def test_strips_formatting(self):
        assert normalize_phone("(076) 123-456") == "+232076123456"

    def test_keeps_existing_country_code(self):
        assert normalize_phone("+232 76 123 456") == "+23276123456"

    def test_foreign_international_number_untouched(self):
        assert normalize_phone("+44 7700 900123") == "+447700900123"

    def test_double_zero_prefix_is_international(self):
        assert normalize_phone("0044 7700 900123") == "+447700900123"

    def test_explicit_country_code(self):
        assert normalize_phone("0712345678", country_code="254") == "+2540712345678"

    def test_empty(self):
        assert normalize_phone("") == ""
        assert normalize_phone("n/a") == ""


class TestSendSms:
    def test_success_returns_message_id(self, sms_credentials):
        with patch("printshop.integrations.sms_gateway.httpx.post", return_value=_gateway_response()) as mock_post:
            assert send_sms("076123456", "Your job is ready") == "ATXid_42"
        payload = mock_post.call_args.kwargs["data"]
        assert payload["to"] == "+232076123456"
        assert payload["username"] == "printshop"
        assert "from" not in payload
        assert mock_post.call_args.kwargs["headers"]["apiKey"] == "at-key"

    def test_sender_id_included(self, sms_credentials):
        with (
            patch.object(settings, "sms_sender_id", "PRINTSHOP"),
            patch("printshop.integrations.sms_gateway.httpx.post", return_value=_gateway_response()) as mock_post,
        ):
            send_sms("076123456", "hi")
        assert mock_post.call_args.kwargs["data"]["from"] == "PRINTSHOP"

    def test_non_success_recipient_is_failure(self, sms_credentials):
        response = _gateway_response(status="InvalidPhoneNumber")
        with patch("printshop.integrations.sms_gateway.httpx.post", return_value=response):
            with pytest.raises(SmsDeliveryError, match="InvalidPhoneNumber"):
                send_sms("076123456", "hi")

    def test_no_recipients(self, sms_credentials):
        response = MagicMock()
        response.json.return_value = {"SMSMessageData": {"Message": "InvalidSenderId", "Recipients": []}}
        with patch("printshop.integrations.sms_gateway.httpx.post", return_value=response):
            with pytest.raises(SmsDeliveryError, match="InvalidSenderId"):
                send_sms("076123456", "hi")

    def test_http_error_status(self, sms_credentials):
        request = httpx.Request("POST", settings.sms_api_url)
        error_response = httpx.Response(401, text="The supplied authentication is invalid", request=request)
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "401", request=request, response=error_response
        )
        with patch("printshop.integrations.sms_gateway.httpx.post", return_value=response):
            with pytest.raises(SmsDeliveryError, match="401"):
                send_sms("076123456", "hi")

    def test_network_error(self, sms_credentials):
        with patch("printshop.integrations.sms_gateway.httpx.post", side_effect=httpx.ConnectTimeout("timed out")):
            with pytest.raises(SmsDeliveryError, match="timed out"):
                send_sms("076123456", "hi")

    def test_missing_credentials(self):
        with patch.object(settings, "sms_api_key", ""), patch("printshop.integrations.sms_gateway.httpx.post") as post:
            with pytest.raises(SmsDeliveryError, match="not configured"):
                send_sms("076123456", "hi")
        post.assert_not_called()

    def test_unusable_number(self, sms_credentials):
        with pytest.raises(SmsDeliveryError):
            send_sms("---", "hi")


class TestSendEmail:
    def test_sends_through_resend(self):
        with (
            patch.object(settings, "resend_api_key", "re_test"),
            patch("printshop.integrations.email_provider.resend.Emails.send", return_value={"id": "em_1"}) as send,
        ):
            assert send_email("aminata@example.com", "Hello", "<p>Hi</p>") == "em_1"
        params = send.call_args.args[0]
        assert params["to"] == ["aminata@example.com"]
        assert params["subject"] == "Hello"
        assert params["from"] == settings.sender_address

    def test_provider_error_wrapped(self):
        with (
            patch.object(settings, "resend_api_key", "re_test"),
            patch(
                "printshop.integrations.email_provider.resend.Emails.send",
                side_effect=RuntimeError("domain not verified"),
            ),
        ):
            with pytest.raises(EmailDeliveryError, match="domain not verified"):
                send_email("aminata@example.com", "Hello", "<p>Hi</p>")

    def test_not_configured(self):
        with patch.object(settings, "resend_api_key", ""):
            with pytest.raises(EmailDeliveryError):
                send_email("aminata@example.com", "Hello", "<p>Hi</p>")


class TestQr:
    def test_tracking_url(self):
        with patch.object(settings, "app_origin", "https://print.example.com/"):
            assert tracking_url("PS260101ABCDEF") == "https://print.example.com/track/PS260101ABCDEF"

    def test_data_uri(self):
        uri = qr_data_uri("https://print.example.com/track/PS1")
        assert uri.startswith("data:image/png;base64,")
        assert len(uri) > 100
