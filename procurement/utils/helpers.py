"""
Helper Utilities
Common helper functions
"""

from typing import Iterable
import re


CURRENCY_SYMBOLS = {
    "IDR": "Rp",
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
}


def format_currency(amount: float, currency: str = "IDR") -> str:
    """
    Format amount as currency, without fractional digits

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        str: Formatted currency string, e.g. "Rp 925,000,000"
    """
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{symbol} {amount:,.0f}"
    return f"{currency} {amount:,.0f}"


def trailing_number(value: str) -> int:
    """Return the trailing integer of a document number, 0 if there is none"""
    match = re.search(r"(\d+)$", value or "")
    return int(match.group(1)) if match else 0


def generate_document_number(prefix: str, existing: Iterable[str], width: int = 4) -> str:
    """
    Generate the next sequential document number

    The sequence continues after the highest trailing number found in
    ``existing`` regardless of the prefix those numbers carry.

    Args:
        prefix: Number prefix, e.g. "PR-2024-"
        existing: Document numbers already issued
        width: Zero padding width

    Returns:
        str: Document number, e.g. "PR-2024-0006"
    """
    numbers = [trailing_number(value) for value in existing]
    latest = max(numbers) if numbers else 0
    return f"{prefix}{str(latest + 1).zfill(width)}"
