"""
Document Text Service - PDF text for the extraction rules.

Reads the PDF text layer with PyMuPDF and falls back to OCR on scanned
images when an OCR engine is supplied. Batches run on a thread pool; every
document gets an ExtractionStatus and a failure never stops the batch.
"""
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

import fitz  # PyMuPDF
from loguru import logger

from clearview.analyzers.classifier import classify
from clearview.analyzers.text_extractor import extract_fields
from clearview.models.records import Document, ExtractionStatus
from clearview.models.title_package import ScanResults
from clearview.scrapers.ori_api_scraper import ORIApiScraper
from config.title_search import (
    MAX_OCR_PAGES,
    MIN_TEXT_LAYER_LENGTH,
    OCR_LANGUAGES,
    OCR_RENDER_DPI,
    SCAN_WORKERS,
)

ProgressCallback = Callable[[int, int, Optional[Document]], None]

# PyMuPDF is not thread-safe; downloads run in parallel, parsing does not.
_FITZ_LOCK = threading.Lock()


@dataclass
class TextExtraction:
    success: bool = False
    text: str = ""
    num_pages: int = 0
    used_ocr: bool = False
    has_text: bool = False
    needs_manual_review: bool = True
    error: Optional[str] = None


class TextSource(Protocol):
    def extract(self, document: Document) -> TextExtraction: ...


class OcrEngine(Protocol):
    def read_image(self, image: bytes) -> str: ...


class EasyOcrEngine:
    """
    EasyOCR reader, loaded on enter and released on exit.

    Share one engine across a batch.
    """

    def __init__(self, languages: Sequence[str] = OCR_LANGUAGES, gpu: bool = False):
        self.languages = list(languages)
        self.gpu = gpu
        self.reader = None

    def __enter__(self) -> "EasyOcrEngine":
        import easyocr  # optional "ocr" extra

        logger.info(f"Initializing EasyOCR ({', '.join(self.languages)})")
        self.reader = easyocr.Reader(self.languages, gpu=self.gpu)
        return self

    def __exit__(self, *exc: object) -> None:
        self.reader = None

    def read_image(self, image: bytes) -> str:
        if self.reader is None:
            raise RuntimeError("EasyOcrEngine used outside of its context")
        return " ".join(self.reader.readtext(image, detail=0))


def read_text_layer(pdf_bytes: bytes) -> tuple[str, int]:
    """Text layer of every page and the page count."""
    with _FITZ_LOCK, fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        pages = [page.get_text("text") for page in doc]
        return "\n".join(pages), len(pages)


def ocr_pages(pdf_bytes: bytes, engine: OcrEngine, max_pages: int = MAX_OCR_PAGES, dpi: int = OCR_RENDER_DPI) -> str:
    """Render the first pages to PNG and OCR them."""
    images: List[bytes] = []
    with _FITZ_LOCK, fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        for index in range(min(len(doc), max_pages)):
            images.append(doc[index].get_pixmap(dpi=dpi).tobytes("png"))

    texts: List[str] = []
    for index, image in enumerate(images):
        texts.append(f"--- Page {index + 1} ---\n{engine.read_image(image)}")
    return "\n\n".join(texts)


class PdfTextSource:
    """Downloads ORI PDFs and returns their text."""

    def __init__(
        self,
        scraper: Optional[ORIApiScraper] = None,
        ocr_engine: Optional[OcrEngine] = None,
        max_ocr_pages: int = MAX_OCR_PAGES,
    ):
        self.scraper = scraper or ORIApiScraper()
        self.ocr_engine = ocr_engine
        self.max_ocr_pages = max_ocr_pages

    def extract(self, document: Document) -> TextExtraction:
        if not document.document_id:
            return TextExtraction(error="Document has no ID")

        pdf_bytes = self.scraper.download_pdf(document.document_id)
        return self.extract_bytes(pdf_bytes)

    def extract_bytes(self, pdf_bytes: bytes) -> TextExtraction:
        text, num_pages = read_text_layer(pdf_bytes)
        used_ocr = False

        if len(text.strip()) <= MIN_TEXT_LAYER_LENGTH and self.ocr_engine is not None:
            logger.debug(f"Text layer has {len(text.strip())} chars, running OCR")
            text = ocr_pages(pdf_bytes, self.ocr_engine, self.max_ocr_pages)
            used_ocr = True

        has_text = len(text.strip()) > MIN_TEXT_LAYER_LENGTH
        return TextExtraction(
            success=True,
            text=text,
            num_pages=num_pages,
            used_ocr=used_ocr,
            has_text=has_text,
            needs_manual_review=not has_text,
        )


def scan_document(document: Document, text_source: TextSource) -> Document:
    """
    Extract and parse one document's text.

    Any failure is recorded on the returned document's ExtractionStatus.
    """
    try:
        result = text_source.extract(document)
    except Exception as e:
        logger.warning(f"Text extraction failed for {document.instrument_number}: {e}")
        return document.with_extraction(ExtractionStatus(error=str(e)))

    status = ExtractionStatus(
        success=result.success,
        has_text=result.has_text,
        used_ocr=result.used_ocr,
        needs_manual_review=result.needs_manual_review,
        error=result.error,
    )
    data = extract_fields(result.text, classify(document)) if result.has_text else None
    return document.with_extraction(status, data)


def batch_extract_documents(
    documents: Sequence[Document],
    text_source: TextSource,
    on_progress: Optional[ProgressCallback] = None,
    max_workers: int = SCAN_WORKERS,
) -> ScanResults:
    """
    Scan a batch of documents concurrently.

    Returns only once every document has finished. Results keep input order.

    Args:
        documents: Documents to scan
        text_source: Supplies text per document
        on_progress: Called as (done, total, document) after each document and
            once more with document=None when the batch is complete
        max_workers: Thread pool size

    Returns:
        ScanResults with counters and the scanned documents
    """
    total = len(documents)
    scanned: List[Optional[Document]] = [None] * total
    done = 0

    if total:
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as ex:
            fut_map = {ex.submit(scan_document, doc, text_source): i for i, doc in enumerate(documents)}
            for fut in as_completed(fut_map):
                index = fut_map[fut]
                scanned[index] = fut.result()
                done += 1
                if on_progress:
                    on_progress(done, total, scanned[index])

    results = ScanResults(documents=[d for d in scanned if d is not None])
    for doc in results.documents:
        status = doc.extraction
        results.scanned += 1
        if status and status.success:
            results.successful += 1
        else:
            results.failed += 1
        if status is None or status.needs_manual_review:
            results.needs_manual_review += 1
        if status and status.used_ocr:
            results.used_ocr += 1

    if on_progress:
        on_progress(total, total, None)

    logger.info(
        f"Scanned {results.scanned} documents: {results.successful} ok, {results.failed} failed, "
        f"{results.needs_manual_review} need review, {results.used_ocr} OCR"
    )
    return results
