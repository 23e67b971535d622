"""
Display helpers for extracted invoices.

Formatting is fixed to US English / Gregorian calendar, matching what a
browser renders for ``toLocaleDateString('en-US')`` and
``Intl.NumberFormat('en-US', {style: 'currency'})``.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from ..models.invoice import ExtractedInvoice

NOT_AVAILABLE = "N/A"
DEFAULT_CURRENCY = "USD"

# en-US symbols; codes not listed are rendered as "XYZ 1.00"
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "CN¥",
    "INR": "₹",
    "KRW": "₩",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "MXN": "MX$",
    "BRL": "R$",
    "HKD": "HK$",
    "TWD": "NT$",
    "ILS": "₪",
    "VND": "₫",
    "PHP": "₱",
    "XAF": "FCFA",
    "XOF": "F CFA",
}

ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW", "VND", "CLP", "ISK", "PYG", "UGX", "XAF", "XOF"}

DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%d %B %Y", "%B %d, %Y", "%b %d, %Y")


def format_date(value: Any) -> str:
    """'2024-01-15T10:30:00Z' -> 'January 15, 2024'. Unparseable input is returned as-is."""
    if value is None or str(value).strip() == "":
        return NOT_AVAILABLE
    text = str(value).strip()
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        dt = None
        for fmt in DATE_FORMATS:
            try:
                dt = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if dt is None:
        return text
    return f"{dt:%B} {dt.day}, {dt.year}"


def format_currency(amount: Any, currency: str | None) -> str:
    """150 + 'USD' -> '$150.00'; an empty currency code falls back to USD."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return NOT_AVAILABLE
    if amount is None or isinstance(amount, bool) or not value.is_finite():
        return NOT_AVAILABLE

    code = (currency or "").strip().upper() or DEFAULT_CURRENCY
    digits = 0 if code in ZERO_DECIMAL_CURRENCIES else 2
    quantized = value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    number = f"{abs(quantized):,.{digits}f}"
    sign = "-" if quantized < 0 else ""

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code}\u00a0{number}"
    return f"{sign}{symbol}{number}"


def format_percent(value: float) -> str:
    return f"{round(value, 2):g}%"


def confidence_range(invoice: ExtractedInvoice) -> tuple[float, float] | None:
    """(min, max) confidence in percent across every returned field."""
    scores = [c * 100 for c in invoice.confidences()]
    if not scores:
        return None
    return min(scores), max(scores)


@dataclass
class Section:
    title: str
    rows: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class InvoiceSummary:
    sections: list[Section]
    confidence: str | None = None

    def section(self, title: str) -> Section:
        return next(s for s in self.sections if s.title == title)


def _text(value: Any, fallback: str = "") -> str:
    if value is None or value == "":
        return fallback
    return str(value)


def build_summary(invoice: ExtractedInvoice) -> InvoiceSummary:
    """Map an extracted invoice onto the labeled sections shown to the user."""
    v = invoice.value_of
    currency = _text(v("currencyCode"))

    merchant = Section("Merchant Details", [
        ("Name", _text(v("merchantName"))),
        ("Address", _text(v("merchantAddress"))),
        ("Phone", _text(v("merchantPhone"), NOT_AVAILABLE)),
        ("Email", _text(v("merchantEmail"), NOT_AVAILABLE)),
    ])
    location = Section("Location", [
        ("City", _text(v("merchantCity"))),
        ("State", _text(v("merchantState"))),
        ("Country", _text(v("merchantCountry"))),
        ("Postal Code", _text(v("merchantPostalCode"))),
    ])
    details = Section("Invoice Details", [
        ("Date", format_date(v("dateTime"))),
        ("Currency", currency),
        ("Tax Amount", format_currency(v("taxAmount"), currency)),
        ("Total Amount", format_currency(v("totalAmount"), currency)),
    ])

    confidence = None
    bounds = confidence_range(invoice)
    if bounds is not None:
        low, high = bounds
        confidence = f"{format_percent(low)}–{format_percent(high)}"

    return InvoiceSummary(sections=[merchant, location, details], confidence=confidence)
