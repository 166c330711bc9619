"""
Short business identifiers: prefix plus a three-digit sequence.

Format: INV045, RCP456, RX007. The sequence wraps modulo 1000.

Generated identifiers are NOT guaranteed unique. generate_id() picks a random
sequence with no collision check; uniqueness belongs to whoever persists the
record (a counter or a unique constraint).
"""

import random
import re

from billing.models.identifier import Identifier, IdPrefix

_ID_PATTERN = re.compile(r"([A-Z]{2,3})([0-9]{3})")
_PREFIXES = {p.value: p for p in IdPrefix}


def _coerce_prefix(prefix: IdPrefix | str) -> IdPrefix:
    if isinstance(prefix, IdPrefix):
        return prefix
    try:
        return IdPrefix(prefix)
    except ValueError:
        raise ValueError(
            f"Unknown identifier prefix '{prefix}'. "
            f"Valid prefixes: {', '.join(sorted(_PREFIXES))}"
        )


def format_id(prefix: IdPrefix | str, sequence: int) -> str:
    """
    Format an identifier.

    Args:
        prefix: One of the IdPrefix values
        sequence: Any integer; abs(sequence) % 1000 is used

    Returns:
        Canonical identifier string, e.g. "INV045"

    Raises:
        ValueError: If prefix is not a known identifier prefix
    """
    prefix = _coerce_prefix(prefix)
    return f"{prefix.value}{abs(sequence) % 1000:03d}"


def generate_id(prefix: IdPrefix | str, rng: random.Random | None = None) -> str:
    """Format an identifier with a random sequence in [1, 999]."""
    rng = rng or random
    return format_id(prefix, rng.randint(1, 999))


def parse_id(text: str) -> Identifier | None:
    """
    Parse an identifier string.

    Returns:
        Identifier, or None if text is not shaped like one or the prefix is
        not a known identifier prefix.
    """
    match = _ID_PATTERN.fullmatch(text)
    if match is None:
        return None

    prefix = _PREFIXES.get(match.group(1))
    if prefix is None:
        return None

    return Identifier(prefix=prefix, sequence=int(match.group(2)))


def parse_as(text: str, prefix: IdPrefix | str) -> int | None:
    """
    Parse text as an identifier of one type.

    Returns the sequence, or None when text is not an identifier or carries
    a different prefix. Used to probe strings of unknown type.
    """
    expected = _coerce_prefix(prefix)
    parsed = parse_id(text)
    if parsed is None or parsed.prefix != expected:
        return None
    return parsed.sequence


# Invoice IDs
def format_invoice_id(sequence: int) -> str:
    return format_id(IdPrefix.INVOICE, sequence)


def generate_invoice_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.INVOICE, rng)


def parse_invoice_id(text: str) -> int | None:
    return parse_as(text, IdPrefix.INVOICE)


# Receipt IDs
def format_receipt_id(sequence: int) -> str:
    return format_id(IdPrefix.RECEIPT, sequence)


def generate_receipt_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.RECEIPT, rng)


def parse_receipt_id(text: str) -> int | None:
    return parse_as(text, IdPrefix.RECEIPT)


# Bill IDs
def format_bill_id(sequence: int) -> str:
    return format_id(IdPrefix.BILL, sequence)


def generate_bill_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.BILL, rng)


def parse_bill_id(text: str) -> int | None:
    return parse_as(text, IdPrefix.BILL)


# Document IDs
def format_document_id(sequence: int) -> str:
    return format_id(IdPrefix.DOCUMENT, sequence)


def generate_document_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.DOCUMENT, rng)


# Claim IDs
def format_claim_id(sequence: int) -> str:
    return format_id(IdPrefix.CLAIM, sequence)


def generate_claim_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.CLAIM, rng)


# Order IDs
def format_order_id(sequence: int) -> str:
    return format_id(IdPrefix.ORDER, sequence)


def generate_order_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.ORDER, rng)


# Lab IDs
def format_lab_id(sequence: int) -> str:
    return format_id(IdPrefix.LAB, sequence)


def generate_lab_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.LAB, rng)


# Prescription IDs
def format_prescription_id(sequence: int) -> str:
    return format_id(IdPrefix.PRESCRIPTION, sequence)


def generate_prescription_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.PRESCRIPTION, rng)


# Admission IDs
def format_admission_id(sequence: int) -> str:
    return format_id(IdPrefix.ADMISSION, sequence)


def generate_admission_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.ADMISSION, rng)


# Transaction IDs
def format_transaction_id(sequence: int) -> str:
    return format_id(IdPrefix.TRANSACTION, sequence)


def generate_transaction_id(rng: random.Random | None = None) -> str:
    return generate_id(IdPrefix.TRANSACTION, rng)
