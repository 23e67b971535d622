"""
Integration tests against the real Vision Parser API.

These tests require:
- VISION_PARSER_API_KEY in .env or the environment
- sample invoices under samples/invoices/

Run with: pytest --run-integration
"""

import pytest
from pathlib import Path
from fastapi.testclient import TestClient
from src.api.main import app
from src.core.config import settings

client = TestClient(app)

skip_if_no_key = pytest.mark.skipif(
    not settings.vision_parser_api_key,
    reason="Vision Parser not configured (set VISION_PARSER_API_KEY)",
)

SAMPLES_DIR = Path(__file__).parent.parent / "samples" / "invoices"


@skip_if_no_key
@pytest.mark.integration
@pytest.mark.parametrize("invoice_file", ["invoice.png", "invoice.pdf"])
def test_parse_real_invoice(invoice_file):
    path = SAMPLES_DIR / invoice_file
    if not path.exists():
        pytest.skip(f"Sample file not found: {path}")

    with open(path, "rb") as f:
        r = client.post("/api/parse-invoice", files={"file": (invoice_file, f)})

    assert r.status_code == 200, f"Failed to parse {invoice_file}: {r.text}"
    data = r.json()["data"]
    for key in ["totalAmount", "currencyCode", "merchantName"]:
        assert key in data
        assert 0.0 <= data[key]["confidence"] <= 1.0

    print(f"\n✓ {invoice_file}:")
    print(f"  Merchant: {data['merchantName']['value']}")
    print(f"  Total: {data['currencyCode']['value']} {data['totalAmount']['value']}")
