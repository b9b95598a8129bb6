"""
Title Search Service

Runs a full title search for an owner name:
1. ORI party-name search over the requested window
2. Normalize raw records into Documents
3. Optional PDF scan of the encumbrance, discharge and deed documents
4. Group, build chain of title, match mortgages and liens, raise flags
5. Summarize into a TitlePackage

Everything after the ORI search is pure apart from the text source, so
``build_title_package`` can be fed recorded results directly.
"""
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from loguru import logger

from clearview.analyzers.chain_builder import build_chain_of_title
from clearview.analyzers.classifier import classify, group_by_category, parse_record
from clearview.analyzers.encumbrance_matcher import match_encumbrances
from clearview.analyzers.flag_engine import identify_flags
from clearview.analyzers.summary import generate_summary
from clearview.models.records import Category, Document
from clearview.models.title_package import ScanResults, SearchParams, TitlePackage
from clearview.scrapers.ori_api_scraper import ORIApiScraper
from clearview.services.document_text_service import (
    PdfTextSource,
    ProgressCallback,
    TextSource,
    batch_extract_documents,
)
from clearview.utils.logging_utils import bind_context
from clearview.utils.time import format_api_date, now_utc, today_local, years_before
from config.title_search import DEFAULT_YEARS_BACK, MAX_YEARS_BACK, TITLE_DOC_TYPES

SCAN_CATEGORIES = (
    Category.MORTGAGE,
    Category.SATISFACTION,
    Category.LIEN,
    Category.RELEASE,
    Category.DEED,
)


def _scan(
    documents: List[Document],
    text_source: TextSource,
    scan_categories: Iterable[Category],
    on_progress: Optional[ProgressCallback],
) -> tuple[List[Document], ScanResults]:
    """Scan the selected documents and splice the results back in place."""
    wanted = set(scan_categories)
    indexes = [i for i, doc in enumerate(documents) if classify(doc) in wanted]
    if not indexes:
        return documents, ScanResults()

    logger.info(f"Scanning {len(indexes)} documents for text extraction...")
    results = batch_extract_documents([documents[i] for i in indexes], text_source, on_progress)

    merged = list(documents)
    for index, scanned in zip(indexes, results.documents):
        merged[index] = scanned
    return merged, results


def build_title_package(
    records: Sequence[Mapping[str, Any]],
    *,
    owner_name: str = "",
    years_back: int = DEFAULT_YEARS_BACK,
    text_source: Optional[TextSource] = None,
    scan_categories: Iterable[Category] = SCAN_CATEGORIES,
    on_progress: Optional[ProgressCallback] = None,
) -> TitlePackage:
    """
    Turn raw ORI records into a title package.

    When ``text_source`` is given, the scan finishes for the whole batch
    before any matching starts.

    Args:
        records: Raw ORI search results
        owner_name: Echoed into search_params
        years_back: Echoed into search_params
        text_source: Supplies document text; None skips scanning
        scan_categories: Categories whose documents are scanned
        on_progress: Scan progress callback

    Returns:
        TitlePackage
    """
    documents = [parse_record(record) for record in records]

    scan_results: Optional[ScanResults] = None
    if text_source is not None:
        documents, scan_results = _scan(documents, text_source, scan_categories, on_progress)

    grouped = group_by_category(documents)
    chain = build_chain_of_title(grouped[Category.DEED])

    mortgage_analysis = match_encumbrances(grouped[Category.MORTGAGE], grouped[Category.SATISFACTION])
    lien_analysis = match_encumbrances(grouped[Category.LIEN], grouped[Category.RELEASE])

    flags = identify_flags(documents)
    needs_review = scan_results.needs_manual_review if scan_results else 0
    summary = generate_summary(
        documents,
        chain,
        mortgage_analysis,
        lien_analysis,
        flags,
        scanned=scan_results is not None,
        needs_manual_review=needs_review,
    )

    return TitlePackage(
        search_params=SearchParams(
            owner_name=owner_name,
            years_back=years_back,
            search_date=now_utc(),
            record_count=len(documents),
            scanned=scan_results is not None,
        ),
        documents=documents,
        grouped=grouped,
        chain_of_title=chain,
        mortgage_analysis=mortgage_analysis,
        lien_analysis=lien_analysis,
        open_liens=lien_analysis.open,
        flags=flags,
        scan_results=scan_results,
        summary=summary,
    )


class TitleSearchService:
    """
    Owner-name title search against the ORI records service.
    """

    def __init__(self, scraper: Optional[ORIApiScraper] = None, text_source: Optional[TextSource] = None):
        self.scraper = scraper or ORIApiScraper()
        self.text_source = text_source

    def perform_title_search(
        self,
        owner_name: str,
        years_back: int = DEFAULT_YEARS_BACK,
        scan_documents: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TitlePackage:
        """
        Search ORI for an owner and build the title package.

        Args:
            owner_name: Owner as recorded (LAST FIRST or company name)
            years_back: How many years of records to search
            scan_documents: Download and parse PDFs before matching
            on_progress: Scan progress callback

        Raises:
            ValueError: empty owner name or years_back outside 1..MAX_YEARS_BACK
            OriSearchError: records service failure
        """
        owner_name = (owner_name or "").strip()
        if not owner_name:
            raise ValueError("Owner name is required")
        if not 1 <= years_back <= MAX_YEARS_BACK:
            raise ValueError(f"years_back must be between 1 and {MAX_YEARS_BACK}")

        log = bind_context(owner=owner_name, years_back=years_back)

        end = today_local()
        start = years_before(end, years_back)
        log.info(f"Searching ORI for {owner_name} from {format_api_date(start)} to {format_api_date(end)}")

        records = self.scraper.search_by_party(
            owner_name,
            start_date=format_api_date(start),
            end_date=format_api_date(end),
            doc_types=TITLE_DOC_TYPES,
        )
        log.info(f"Found {len(records)} records")

        text_source = None
        if scan_documents:
            text_source = self.text_source or PdfTextSource(self.scraper)

        package = build_title_package(
            records,
            owner_name=owner_name,
            years_back=years_back,
            text_source=text_source,
            on_progress=on_progress,
        )
        log.info(
            f"Title search complete: {package.summary.total_documents} documents, "
            f"risk {package.summary.risk_level.value}"
        )
        return package
