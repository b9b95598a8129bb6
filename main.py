"""
Main entry point for ClearView title search.
Usage:
  python main.py "SMITH JOHN" [years_back] [--scan] [--ocr] [--json]
  python main.py --web [--port N]
"""
import argparse
import json
import logging
import sys
from contextlib import ExitStack
from typing import List, Optional

from loguru import logger

from clearview.models.title_package import Severity, TitlePackage
from clearview.scrapers.ori_api_scraper import OriSearchError
from clearview.services.document_text_service import EasyOcrEngine, PdfTextSource
from clearview.services.title_search_service import TitleSearchService
from clearview.utils.logging_config import configure_logger
from config.title_search import DEFAULT_YEARS_BACK, MAX_YEARS_BACK, WEB_PORT

RULE = "=" * 60
SUBRULE = "-" * 40


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging():
    configure_logger("clearview_cli.log")
    # Route urllib3/uvicorn through loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)
    for logger_name in ["urllib3", "uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]
        logging.getLogger(logger_name).propagate = False


def format_report(package: TitlePackage) -> str:
    """Plain-text title report: summary, flags, chain of title, open encumbrances."""
    summary = package.summary
    lines = [
        RULE,
        "  CLEARVIEW TITLE SEARCH",
        "  Hillsborough County, Florida",
        RULE,
        "",
        "SUMMARY",
        SUBRULE,
        f"Total Documents: {summary.total_documents}",
        f"Chain of Title:  {summary.chain_of_title_length} deeds",
        f"Open Mortgages:  {summary.open_mortgages}",
        f"Open Liens:      {summary.open_liens}",
    ]
    if package.search_params.scanned:
        lines.append(f"Manual Review:   {summary.needs_manual_review}")
    lines.append(f"Risk Level:      {summary.risk_level.value}")

    if package.flags:
        lines += ["", "FLAGS", SUBRULE]
        for flag in package.flags:
            marker = "[!]" if flag.severity == Severity.HIGH else "[?]"
            lines.append(f"{marker} {flag.type.upper()}: {flag.message}")

    if package.chain_of_title:
        lines += ["", "CHAIN OF TITLE", SUBRULE]
        for deed in package.chain_of_title:
            lines.append(f"{deed.sequence}. {deed.record_date}")
            lines.append(f"   {deed.grantors[:40]}")
            lines.append(f"   -> {deed.grantees[:40]}")
            if deed.sales_price and deed.sales_price > 0:
                lines.append(f"   ${deed.sales_price:,.0f}")
            lines.append("")

    if package.mortgage_analysis.open:
        lines += ["", "OPEN MORTGAGES", SUBRULE]
        for mtg in package.mortgage_analysis.open:
            lines.append(f"* {mtg.record_date} - {', '.join(mtg.grantors[:2])}")

    if package.open_liens:
        lines += ["", "OPEN LIENS", SUBRULE]
        for lien in package.open_liens:
            lines.append(f"* {lien.record_date} - {lien.doc_type}")
            lines.append(f"  Parties: {', '.join(lien.grantors[:2])}")

    lines += ["", RULE, f"Search completed at {package.search_params.search_date:%Y-%m-%d %H:%M:%S} UTC", RULE]
    return "\n".join(lines)


def handle_search(owner_name: str, years_back: int, scan: bool, ocr: bool, as_json: bool) -> int:
    """Run one title search and print it. Returns the process exit code."""
    with ExitStack() as stack:
        service = TitleSearchService()
        if scan:
            engine = stack.enter_context(EasyOcrEngine()) if ocr else None
            service.text_source = PdfTextSource(service.scraper, ocr_engine=engine)

        def progress(done: int, total: int, doc) -> None:
            if doc is not None:
                logger.info(f"Scanned {done}/{total}: {doc.doc_type_short} {doc.instrument_number}")

        try:
            package = service.perform_title_search(
                owner_name,
                years_back=years_back,
                scan_documents=scan,
                on_progress=progress,
            )
        except (OriSearchError, ValueError) as e:
            logger.error(f"Title search failed: {e}")
            return 1

    if as_json:
        print(json.dumps(package.model_dump(mode="json"), indent=2))
    else:
        print(format_report(package))
    return 0


def handle_web(port: int):
    """Start the FastAPI web server (app/web)."""
    import uvicorn

    logger.info(f"Starting FastAPI Web Server (app/web) on port {port}...")
    logger.info(f"Local Access: http://localhost:{port}")
    uvicorn.run(
        "app.web.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        log_level="info",
    )


def years_back_arg(value: str) -> int:
    try:
        years = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid year count: {value!r}")
    if not 1 <= years <= MAX_YEARS_BACK:
        raise argparse.ArgumentTypeError(f"years_back must be between 1 and {MAX_YEARS_BACK}")
    return years


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ClearView Title Search")
    parser.add_argument("owner_name", nargs="?", help='Owner as recorded, e.g. "SMITH JOHN"')
    parser.add_argument("years_back", nargs="?", type=years_back_arg, default=DEFAULT_YEARS_BACK,
                        help=f"Years of records to search, 1-{MAX_YEARS_BACK} (default {DEFAULT_YEARS_BACK})")
    parser.add_argument("--scan", action="store_true", help="Download and parse document PDFs before matching")
    parser.add_argument("--ocr", action="store_true", help="OCR scanned PDFs without a text layer (needs easyocr)")
    parser.add_argument("--json", action="store_true", help="Print the full title package as JSON")
    parser.add_argument("--web", action="store_true", help="Start web server")
    parser.add_argument("--port", type=int, default=WEB_PORT,
                        help="Port for web server (default 8080 or WEB_PORT env var)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.web:
        setup_logging()
        handle_web(args.port)
        return 0

    if not args.owner_name:
        parser.print_help()
        return 0

    setup_logging()
    return handle_search(args.owner_name, args.years_back, args.scan, args.ocr, args.json)


if __name__ == "__main__":
    sys.exit(main())
