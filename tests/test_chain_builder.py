from clearview.analyzers.chain_builder import build_chain_of_title
from clearview.models.records import DeedData, ExtractionStatus

from conftest import DAY, T0


def test_chain_is_oldest_first_and_numbered_from_one(make_doc):
    deeds = [
        make_doc("D", ts=T0 + 400 * DAY, instrument="3", grantors=["B"], grantees=["C"]),
        make_doc("D", ts=T0, instrument="1", grantors=["DEVELOPER LLC"], grantees=["A"], sales_price=150000.0),
        make_doc("D", ts=T0 + 200 * DAY, instrument="2", grantors=["A"], grantees=["B", "B2"]),
    ]

    chain = build_chain_of_title(deeds)

    assert [entry.sequence for entry in chain] == [1, 2, 3]
    assert [entry.instrument_number for entry in chain] == ["1", "2", "3"]
    assert chain[0].grantors == "DEVELOPER LLC"
    assert chain[0].sales_price == 150000.0
    assert chain[1].grantees == "B, B2"
    assert chain[0].record_timestamp < chain[1].record_timestamp < chain[2].record_timestamp


def test_chain_keeps_input_order_for_equal_timestamps(make_doc):
    deeds = [make_doc("D", ts=T0, instrument="first"), make_doc("D", ts=T0, instrument="second")]

    chain = build_chain_of_title(deeds)

    assert [entry.instrument_number for entry in chain] == ["first", "second"]


def test_chain_carries_scanned_deed_fields(make_doc):
    deed = make_doc("D", instrument="1").with_extraction(
        ExtractionStatus(success=True, has_text=True, needs_manual_review=False),
        DeedData(consideration=300000.0, deed_type="WARRANTY"),
    )

    entry = build_chain_of_title([deed])[0]

    assert entry.deed_type == "WARRANTY"
    assert entry.consideration == 300000.0


def test_empty_chain():
    assert build_chain_of_title([]) == []
