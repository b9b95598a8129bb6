"""
Risk Flag Engine - conditions in the record set that need a human look.
"""
import math
from typing import List, Sequence

from loguru import logger

from clearview.models.records import Document
from clearview.models.title_package import Flag, Severity
from clearview.utils.time import days_between
from config.title_search import QUICK_FLIP_DAYS

TAX_LIEN_CODE = "LNCORPTX"


def _quick_flip(documents: Sequence[Document]) -> List[Flag]:
    deeds = [d for d in documents if d.doc_type_short == "D"]
    if len(deeds) < 2:
        return []

    recent, previous = sorted(deeds, key=lambda d: d.record_timestamp, reverse=True)[:2]
    days = days_between(recent.record_timestamp, previous.record_timestamp)
    if days >= QUICK_FLIP_DAYS:
        return []

    # half-up, so 89.5 days reads as 90
    rounded = math.floor(days + 0.5)
    return [Flag(
        severity=Severity.MEDIUM,
        type="quick_flip",
        message=f"Property sold twice within {rounded} days",
        documents=[recent, previous],
    )]


def identify_flags(documents: Sequence[Document]) -> List[Flag]:
    """
    Scan the full document set for risk conditions.

    Independent of encumbrance matching. Emits, in order:
    lis pendens (high), judgments (high), tax liens (high) and a quick
    resale of the two most recent deeds inside QUICK_FLIP_DAYS (medium).

    Args:
        documents: All normalized documents for the search

    Returns:
        List of Flag, possibly empty
    """
    flags: List[Flag] = []

    lis_pendens = [d for d in documents if d.doc_type_short == "LP"]
    if lis_pendens:
        flags.append(Flag(
            severity=Severity.HIGH,
            type="lis_pendens",
            message=f"Found {len(lis_pendens)} lis pendens (pending litigation)",
            documents=lis_pendens,
        ))

    judgments = [d for d in documents if d.doc_type_short == "JUD"]
    if judgments:
        flags.append(Flag(
            severity=Severity.HIGH,
            type="judgment",
            message=f"Found {len(judgments)} judgment(s)",
            documents=judgments,
        ))

    tax_liens = [d for d in documents if d.doc_type_short == TAX_LIEN_CODE or "TAX" in d.doc_type]
    if tax_liens:
        flags.append(Flag(
            severity=Severity.HIGH,
            type="tax_lien",
            message=f"Found {len(tax_liens)} tax-related lien(s)",
            documents=tax_liens,
        ))

    flags.extend(_quick_flip(documents))

    if flags:
        logger.info(f"Raised {len(flags)} flag(s): {', '.join(f.type for f in flags)}")
    return flags
