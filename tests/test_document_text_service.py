from types import SimpleNamespace

import fitz
import pytest

from clearview.models.records import MortgageData, SatisfactionData
from clearview.services.document_text_service import (
    PdfTextSource,
    TextExtraction,
    batch_extract_documents,
    scan_document,
)

MORTGAGE_LINES = [
    "MORTGAGE",
    "Borrower: JOHN SMITH",
    "Mortgagee: WELLS FARGO BANK, N.A.",
    "This Security Instrument secures the principal sum of $200,000.00",
    "with interest at the rate of 4.25% per annum.",
]


def _pdf(lines, pages=1):
    doc = fitz.open()
    for _ in range(pages):
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((72, y), line, fontsize=10)
            y += 14
    data = doc.tobytes()
    doc.close()
    return data


class FakeOcr:
    def __init__(self, text):
        self.text = text
        self.images = []

    def read_image(self, image):
        self.images.append(image)
        return self.text


class FakeTextSource:
    """Returns canned text per instrument; raises for instruments in ``broken``."""

    def __init__(self, texts, broken=()):
        self.texts = texts
        self.broken = set(broken)

    def extract(self, document):
        if document.instrument_number in self.broken:
            raise RuntimeError("download timed out")
        text = self.texts.get(document.instrument_number, "")
        has_text = len(text.strip()) > 100
        return TextExtraction(success=True, text=text, num_pages=1, has_text=has_text,
                              needs_manual_review=not has_text)


def test_text_layer_is_used_when_present():
    source = PdfTextSource(scraper=SimpleNamespace(), ocr_engine=FakeOcr("unused"))

    result = source.extract_bytes(_pdf(MORTGAGE_LINES, pages=2))

    assert result.success is True
    assert result.has_text is True
    assert result.used_ocr is False
    assert result.needs_manual_review is False
    assert result.num_pages == 2
    assert "WELLS FARGO BANK" in result.text
    assert source.ocr_engine.images == []


def test_short_text_layer_falls_back_to_ocr():
    ocr = FakeOcr("SATISFACTION OF MORTGAGE RECORDED AS INSTRUMENT NO. 2015123456 " * 3)
    source = PdfTextSource(scraper=SimpleNamespace(), ocr_engine=ocr, max_ocr_pages=2)

    result = source.extract_bytes(_pdf(["SCANNED IMAGE"], pages=3))

    assert result.used_ocr is True
    assert result.has_text is True
    assert len(ocr.images) == 2
    assert ocr.images[0][:4] == b"\x89PNG"
    assert "--- Page 2 ---" in result.text


def test_short_text_without_ocr_needs_review():
    source = PdfTextSource(scraper=SimpleNamespace())

    result = source.extract_bytes(_pdf(["SCANNED IMAGE"]))

    assert result.success is True
    assert result.has_text is False
    assert result.needs_manual_review is True
    assert result.used_ocr is False


def test_extract_downloads_by_document_id(make_doc):
    requested = []

    def download_pdf(document_id):
        requested.append(document_id)
        return _pdf(MORTGAGE_LINES)

    source = PdfTextSource(scraper=SimpleNamespace(download_pdf=download_pdf))

    result = source.extract(make_doc("MTG", document_id="abc=="))

    assert requested == ["abc=="]
    assert result.has_text is True


def test_extract_without_document_id(make_doc):
    source = PdfTextSource(scraper=SimpleNamespace())

    result = source.extract(make_doc("MTG"))

    assert result.success is False
    assert result.needs_manual_review is True
    assert "no ID" in result.error


def test_scan_document_parses_by_category(make_doc):
    source = FakeTextSource({"M1": "\n".join(MORTGAGE_LINES)})

    doc = scan_document(make_doc("MTG", instrument="M1"), source)

    assert isinstance(doc.extracted_data, MortgageData)
    assert doc.extracted_data.principal_amount == 200000.0
    assert doc.extraction.success is True
    assert doc.extraction.needs_manual_review is False


def test_scan_document_isolates_failures(make_doc):
    doc = scan_document(make_doc("SAT", instrument="S1"), FakeTextSource({}, broken={"S1"}))

    assert doc.extracted_data is None
    assert doc.extraction.success is False
    assert doc.extraction.needs_manual_review is True
    assert "timed out" in doc.extraction.error


@pytest.mark.parametrize("max_workers", [1, 4])
def test_batch_keeps_order_and_counts(make_doc, max_workers):
    satisfaction_text = (
        "SATISFACTION OF MORTGAGE. WELLS FARGO BANK, N.A. certifies that the mortgage recorded as "
        "Instrument No. 2015123456 in the original amount of $200,000.00 is paid in full."
    )
    docs = [
        make_doc("MTG", instrument="M1"),
        make_doc("SAT", instrument="S1"),
        make_doc("MTG", instrument="M2"),
        make_doc("SAT", instrument="S2"),
    ]
    source = FakeTextSource(
        {"M1": "\n".join(MORTGAGE_LINES), "S1": satisfaction_text, "S2": "too short"},
        broken={"M2"},
    )
    progress = []

    results = batch_extract_documents(
        docs, source, on_progress=lambda done, total, doc: progress.append((done, total, doc)),
        max_workers=max_workers,
    )

    assert [d.instrument_number for d in results.documents] == ["M1", "S1", "M2", "S2"]
    assert results.scanned == 4
    assert results.successful == 3
    assert results.failed == 1
    assert results.needs_manual_review == 2
    assert results.used_ocr == 0
    assert isinstance(results.documents[1].extracted_data, SatisfactionData)
    assert results.documents[1].extracted_data.satisfied_instrument_number == "2015123456"
    assert results.documents[3].extracted_data is None

    assert len(progress) == 5
    assert [p[0] for p in progress[:4]] == [1, 2, 3, 4]
    assert progress[-1] == (4, 4, None)


def test_batch_of_nothing():
    progress = []
    results = batch_extract_documents([], FakeTextSource({}), on_progress=lambda *a: progress.append(a))

    assert results.scanned == 0
    assert results.documents == []
    assert progress == [(0, 0, None)]
