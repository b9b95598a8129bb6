"""
Record normalization and classification.

Turns raw ORI search results into ``Document`` models and buckets them into
title-search categories by their parenthesised doc-type code.
"""
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from loguru import logger

from clearview.models.records import Category, Document
from clearview.utils.amount import parse_amount
from clearview.utils.time import coerce_timestamp, format_record_date

_PAREN_RE = re.compile(r"\(([^)]+)\)")

# ORI short code -> category. Case-sensitive; unknown codes are Other.
CATEGORY_BY_CODE: Dict[str, Category] = {
    "D": Category.DEED,
    "MTG": Category.MORTGAGE,
    "MTGREV": Category.MORTGAGE,
    "MTGNDOC": Category.MORTGAGE,
    "MTGNT": Category.MORTGAGE,
    "MTGNIT": Category.MORTGAGE,
    "SAT": Category.SATISFACTION,
    "SATCORPTX": Category.SATISFACTION,
    "LN": Category.LIEN,
    "MEDLN": Category.LIEN,
    "LNCORPTX": Category.LIEN,
    "LP": Category.LIS_PENDENS,
    "EAS": Category.EASEMENT,
    "RES": Category.RESTRICTION,
    "JUD": Category.JUDGMENT,
    "REL": Category.RELEASE,
    "RELLP": Category.RELEASE,
    "ASG": Category.ASSIGNMENT,
    "ASGT": Category.ASSIGNMENT,
    "ASINT": Category.ASSIGNMENT,
    "MOD": Category.MODIFICATION,
}


def short_doc_type(doc_type: str) -> str:
    """'(MTG) MORTGAGE' -> 'MTG'; labels without a parenthesised code are returned as-is."""
    match = _PAREN_RE.search(doc_type or "")
    if match:
        return match.group(1)
    return doc_type or ""


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _party_names(raw: Any) -> List[str]:
    """PartiesOne/PartiesTwo arrive as lists of names or {"Name": ...} dicts."""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return []

    names: List[str] = []
    for party in raw:
        name = party.get("Name", "") if isinstance(party, dict) else party
        name = str(name or "").strip()
        if name:
            names.append(name)
    return names


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_record(record: Mapping[str, Any]) -> Document:
    """
    Map a raw ORI search result onto a ``Document``.

    Missing or oddly typed fields are defaulted, never rejected.

    Args:
        record: Raw result dict (``Instrument``, ``PartiesOne``, ``RecordDate``, ...)

    Returns:
        Document
    """
    if not isinstance(record, Mapping):
        logger.debug(f"Skipping non-mapping ORI record of type {type(record).__name__}")
        record = {}

    doc_type = _text(record.get("DocType") or record.get("doc_type")) or ""
    timestamp = coerce_timestamp(record.get("RecordDate"))

    return Document(
        instrument_number=_text(record.get("Instrument") or record.get("instrument_number")) or "",
        grantors=_party_names(record.get("PartiesOne")),
        grantees=_party_names(record.get("PartiesTwo")),
        record_timestamp=timestamp,
        record_date=format_record_date(timestamp),
        doc_type=doc_type,
        doc_type_short=short_doc_type(doc_type),
        legal_description=_text(record.get("Legal")),
        sales_price=parse_amount(record.get("SalesPrice")),
        page_count=_int(record.get("PageCount")),
        document_id=_text(record.get("ID")),
        uuid=_text(record.get("UUID")),
        book_num=_text(record.get("BookNum")),
        page_num=_text(record.get("PageNum")),
    )


def classify(doc: Document) -> Category:
    """Category for a document's short code."""
    return CATEGORY_BY_CODE.get(doc.doc_type_short, Category.OTHER)


def group_by_category(documents: Iterable[Document]) -> Dict[Category, List[Document]]:
    """
    Bucket documents by category, newest first within each bucket.

    Every category key is present. Equal timestamps keep input order.
    """
    groups: Dict[Category, List[Document]] = {category: [] for category in Category}

    for doc in documents:
        groups[classify(doc)].append(doc)

    for category, bucket in groups.items():
        groups[category] = sorted(bucket, key=lambda d: d.record_timestamp, reverse=True)

    return groups
