import pytest

from clearview.models.records import Document
from clearview.utils.time import format_record_date

DAY = 86400
T0 = 1_500_000_000  # 2017-07-14 02:40 UTC, 07/13/2017 in Tampa

LABELS = {
    "D": "(D) DEED",
    "MTG": "(MTG) MORTGAGE",
    "SAT": "(SAT) SATISFACTION",
    "LN": "(LN) LIEN",
    "LNCORPTX": "(LNCORPTX) CORP TAX LIEN FOR STATE OF FLORIDA",
    "LP": "(LP) LIS PENDENS",
    "JUD": "(JUD) JUDGMENT",
    "REL": "(REL) RELEASE",
    "EAS": "(EAS) EASEMENT",
    "TAXDEED": "(TAXDEED) TAX DEED",
}


@pytest.fixture
def make_doc():
    """Build a Document from a short code and a few fields."""

    def _make(code="MTG", ts=T0, instrument="", grantors=("SMITH JOHN",), grantees=(), **fields):
        return Document(
            instrument_number=instrument,
            grantors=list(grantors),
            grantees=list(grantees),
            record_timestamp=ts,
            record_date=format_record_date(ts),
            doc_type=LABELS.get(code, f"({code}) {code}"),
            doc_type_short=code,
            **fields,
        )

    return _make


@pytest.fixture
def raw_record():
    """Build a raw ORI search result dict."""

    def _raw(code="D", ts=T0, instrument="2017000001", parties_one=("SMITH JOHN",), parties_two=(), **extra):
        record = {
            "Instrument": instrument,
            "PartiesOne": list(parties_one),
            "PartiesTwo": list(parties_two),
            "RecordDate": ts,
            "DocType": LABELS.get(code, f"({code}) {code}"),
            "Legal": "L 5 B 3 TAMPA PALMS",
            "SalesPrice": None,
            "PageCount": 2,
            "ID": f"id-{instrument}",
            "UUID": f"uuid-{instrument}",
            "BookNum": None,
            "PageNum": None,
        }
        record.update(extra)
        return record

    return _raw
