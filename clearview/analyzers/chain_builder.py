"""
Chain of Title Builder - orders deeds into a numbered ownership timeline.
"""
from typing import Iterable, List

from clearview.models.records import DeedData, Document
from clearview.models.title_package import ChainEntry


def build_chain_of_title(deeds: Iterable[Document]) -> List[ChainEntry]:
    """
    Build the chain of title from deed documents.

    Deeds are ordered oldest first by record timestamp (ties keep input order)
    and numbered from 1.

    Args:
        deeds: Deed documents in any order

    Returns:
        List of ChainEntry, empty when there are no deeds
    """
    ordered = sorted(deeds, key=lambda d: d.record_timestamp)

    chain = []
    for index, deed in enumerate(ordered):
        extracted = deed.extracted_data if isinstance(deed.extracted_data, DeedData) else None
        chain.append(ChainEntry(
            sequence=index + 1,
            record_date=deed.record_date,
            record_timestamp=deed.record_timestamp,
            instrument_number=deed.instrument_number,
            grantors=", ".join(deed.grantors),
            grantees=", ".join(deed.grantees),
            sales_price=deed.sales_price,
            legal_description=deed.legal_description,
            document_id=deed.document_id,
            deed_type=extracted.deed_type if extracted else None,
            consideration=extracted.consideration if extracted else None,
        ))

    return chain
