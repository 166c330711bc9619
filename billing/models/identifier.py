"""Short business identifier models."""

from enum import Enum

from pydantic import BaseModel, Field


class IdPrefix(str, Enum):
    """Record types that carry a short reference number."""

    INVOICE = "INV"
    RECEIPT = "RCP"
    BILL = "BIL"
    DOCUMENT = "DOC"
    CLAIM = "CLM"
    ORDER = "ORD"
    LAB = "LAB"
    PRESCRIPTION = "RX"
    ADMISSION = "ADM"
    TRANSACTION = "TXN"


class Identifier(BaseModel):
    """Prefix plus a three-digit sequence, e.g. INV045."""

    model_config = {"frozen": True}

    prefix: IdPrefix
    sequence: int = Field(..., ge=0, le=999)

    def __str__(self) -> str:
        return f"{self.prefix.value}{self.sequence:03d}"
