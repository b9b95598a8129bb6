"""
Dollar amount parsing for ORI record fields and OCR/PDF text captures.
"""
import re
from typing import Optional


def parse_amount(amount_str: str | float | None) -> Optional[float]:
    """
    Parse a dollar amount from various formats.

    Args:
        amount_str: Amount as string (e.g., "$150,000", "150000.00") or number

    Returns:
        Float amount or None if unparseable
    """
    if amount_str is None or isinstance(amount_str, bool):
        return None

    if isinstance(amount_str, (int, float)):
        return float(amount_str)

    if not isinstance(amount_str, str):
        return None

    cleaned = amount_str.strip()
    cleaned = cleaned.replace('$', '')
    cleaned = cleaned.replace(',', '')
    cleaned = cleaned.replace(' ', '')

    # Handle "XX Dollars" format
    cleaned = re.sub(r'\s*dollars?\s*', '', cleaned, flags=re.IGNORECASE)

    if not cleaned:
        return None

    try:
        return float(cleaned)
    except ValueError:
        return None


def within_tolerance(value: float, reference: float, tolerance: float) -> bool:
    """True when ``value`` differs from ``reference`` by less than ``tolerance`` (a fraction)."""
    if not reference:
        return False
    return abs(value - reference) / reference < tolerance
