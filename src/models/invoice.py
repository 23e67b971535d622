from typing import Any
from pydantic import BaseModel, ConfigDict, Field


class ExtractedField(BaseModel):
    """A single value returned by Vision Parser together with its confidence (0..1)."""
    value: Any = None
    confidence: float = Field(default=0.0)


class ExtractedInvoice(BaseModel):
    """The `data` object of a Vision Parser `simple` response.

    Every field is optional since the payload comes from a third party; unknown
    fields are kept so they still count towards the confidence summary.
    """
    model_config = ConfigDict(extra="allow")

    totalAmount: ExtractedField | None = None
    taxAmount: ExtractedField | None = None
    dateTime: ExtractedField | None = None
    currencyCode: ExtractedField | None = None
    merchantName: ExtractedField | None = None
    merchantAddress: ExtractedField | None = None
    merchantCountry: ExtractedField | None = None
    merchantState: ExtractedField | None = None
    merchantCity: ExtractedField | None = None
    merchantPostalCode: ExtractedField | None = None
    merchantPhone: ExtractedField | None = None
    merchantEmail: ExtractedField | None = None

    def value_of(self, name: str) -> Any:
        field = getattr(self, name, None)
        return field.value if field is not None else None

    def confidences(self) -> list[float]:
        """Confidence of every returned field, including ones not declared above."""
        out = []
        for name in list(type(self).model_fields) + list(self.model_extra or {}):
            field = getattr(self, name, None)
            if isinstance(field, ExtractedField):
                out.append(field.confidence)
            elif isinstance(field, dict) and isinstance(field.get("confidence"), (int, float)):
                out.append(float(field["confidence"]))
        return out
