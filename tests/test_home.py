"""
Tests for the HTML result presenter (GET/POST /).

The relay is mocked with respx at RELAY_URL, so these tests cover only what
the presenter sends and how it renders the relay's answer.
"""

import io
import httpx
import pytest
import respx
from fastapi.testclient import TestClient
from src.api.main import app
from src.core.config import settings

client = TestClient(app)

RELAY_URL = "http://relay.test/api/parse-invoice"

FULL_INVOICE = {
    "totalAmount": {"value": 150.00, "confidence": 0.98},
    "taxAmount": {"value": 12.5, "confidence": 0.985},
    "dateTime": {"value": "2024-01-15T10:30:00", "confidence": 0.99},
    "currencyCode": {"value": "USD", "confidence": 0.99},
    "merchantName": {"value": "Acme Building Supply", "confidence": 0.99},
    "merchantAddress": {"value": "1 Main St", "confidence": 0.98},
    "merchantCountry": {"value": "USA", "confidence": 0.99},
    "merchantState": {"value": "TX", "confidence": 0.99},
    "merchantCity": {"value": "Austin", "confidence": 0.99},
    "merchantPostalCode": {"value": "78701", "confidence": 0.98},
    "merchantPhone": {"value": "", "confidence": 0.98},
    "merchantEmail": {"value": None, "confidence": 0.98},
}


@pytest.fixture(autouse=True)
def relay_url(monkeypatch):
    monkeypatch.setattr(settings, "relay_url", RELAY_URL)
    return RELAY_URL


def _invoice_png() -> dict:
    return {"file": ("invoice.png", io.BytesIO(b"\x89PNG" + b"0" * (500 * 1024)), "image/png")}


def test_get_renders_upload_form():
    r = client.get("/")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert 'name="file"' in r.text
    assert 'accept=".pdf,.jpg,.jpeg,.png"' in r.text
    assert 'name="api_key"' in r.text
    assert "Parse Invoice" in r.text
    # Busy indicator while the request is in flight
    assert "Processing..." in r.text
    assert "Error" not in r.text.split("<main>")[1].split("</form>")[1]


@respx.mock
def test_successful_upload_renders_summary():
    route = respx.post(RELAY_URL).mock(return_value=httpx.Response(200, json={"data": FULL_INVOICE}))

    r = client.post("/", files=_invoice_png(), data={"api_key": ""})

    assert r.status_code == 200
    assert route.call_count == 1
    html = r.text
    assert "Extracted Information" in html
    assert "<strong>Total Amount:</strong> $150.00" in html
    assert "<strong>Tax Amount:</strong> $12.50" in html
    assert "<strong>Date:</strong> January 15, 2024" in html
    assert "<strong>Name:</strong> Acme Building Supply" in html
    assert "<strong>Phone:</strong> N/A" in html
    assert "<strong>Email:</strong> N/A" in html
    assert "<strong>Postal Code:</strong> 78701" in html
    assert "Data extraction confidence: 98%–99%" in html


@respx.mock
def test_minimal_payload_renders_total_and_confidence_range():
    payload = {
        "data": {
            "totalAmount": {"value": 150.00, "confidence": 0.98},
            "currencyCode": {"value": "USD", "confidence": 0.99},
        }
    }
    respx.post(RELAY_URL).mock(return_value=httpx.Response(200, json=payload))

    r = client.post("/", files=_invoice_png())

    assert "<strong>Total Amount:</strong> $150.00" in r.text
    assert "98%–99%" in r.text


def test_no_file_selected_shows_validation_error_without_relay_call():
    with respx.mock(assert_all_called=False) as respx_mock:
        route = respx_mock.post(RELAY_URL).mock(return_value=httpx.Response(200, json={"data": FULL_INVOICE}))
        r = client.post("/", data={"api_key": "abc"})

    assert r.status_code == 200
    assert "Please select a file" in r.text
    assert "Extracted Information" not in r.text
    assert not route.called


@respx.mock
def test_relay_error_message_is_shown():
    respx.post(RELAY_URL).mock(
        return_value=httpx.Response(
            413,
            json={
                "message": "Error processing invoice",
                "error": "maxFileSize exceeded, file is larger than 10485760 bytes",
            },
        )
    )

    r = client.post("/", files=_invoice_png())

    assert "maxFileSize exceeded, file is larger than 10485760 bytes" in r.text
    assert "Extracted Information" not in r.text


@respx.mock
def test_relay_message_used_when_no_error_field():
    respx.post(RELAY_URL).mock(return_value=httpx.Response(400, json={"message": "No file uploaded"}))

    r = client.post("/", files=_invoice_png())

    assert "No file uploaded" in r.text


@respx.mock
def test_relay_error_without_json_uses_fallback():
    respx.post(RELAY_URL).mock(return_value=httpx.Response(502, text="<html>bad gateway</html>"))

    r = client.post("/", files=_invoice_png())

    assert "Failed to process invoice" in r.text


@respx.mock
def test_relay_unreachable_shows_generic_error():
    respx.post(RELAY_URL).mock(side_effect=httpx.ConnectError("refused"))

    r = client.post("/", files=_invoice_png())

    assert "An error occurred while processing the invoice" in r.text


@respx.mock
def test_success_without_data_is_reported():
    respx.post(RELAY_URL).mock(return_value=httpx.Response(200, json={"status": "ok"}))

    r = client.post("/", files=_invoice_png())

    assert "Unexpected response from invoice parser" in r.text
    assert "Extracted Information" not in r.text


@respx.mock
def test_api_key_is_forwarded_to_relay():
    route = respx.post(RELAY_URL).mock(return_value=httpx.Response(200, json={"data": FULL_INVOICE}))

    client.post("/", files=_invoice_png(), data={"api_key": "user-key"})

    body = route.calls.last.request.read()
    assert b'name="apiKey"' in body
    assert b"user-key" in body
    assert b'filename="invoice.png"' in body


@respx.mock
def test_blank_api_key_is_not_forwarded():
    route = respx.post(RELAY_URL).mock(return_value=httpx.Response(200, json={"data": FULL_INVOICE}))

    client.post("/", files=_invoice_png(), data={"api_key": "  "})

    assert b'name="apiKey"' not in route.calls.last.request.read()


@respx.mock
def test_provider_values_are_escaped():
    data = dict(FULL_INVOICE, merchantName={"value": "<script>alert(1)</script>", "confidence": 0.9})
    respx.post(RELAY_URL).mock(return_value=httpx.Response(200, json={"data": data}))

    r = client.post("/", files=_invoice_png())

    assert "<script>alert(1)</script>" not in r.text
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in r.text


@respx.mock
def test_error_panel_can_be_dismissed():
    respx.post(RELAY_URL).mock(return_value=httpx.Response(400, json={"message": "No file uploaded"}))

    r = client.post("/", files=_invoice_png())

    panel = r.text.split('<div class="error" role="alert">')[1].split("</div>")[0]
    assert 'class="dismiss"' in panel
    assert "this.parentElement.remove()" in panel


@respx.mock
def test_structured_relay_error_is_shown_as_json():
    detail = [{"loc": ["body", "file"], "msg": "field required"}]
    respx.post(RELAY_URL).mock(
        return_value=httpx.Response(422, json={"message": "Error processing invoice", "error": detail})
    )

    r = client.post("/", files=_invoice_png())

    assert "&quot;msg&quot;: &quot;field required&quot;" in r.text
