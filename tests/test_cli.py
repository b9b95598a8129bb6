import pytest

import main
from clearview.scrapers.ori_api_scraper import OriSearchError
from clearview.services.title_search_service import build_title_package

from conftest import DAY, T0


def test_no_owner_prints_help(capsys):
    assert main.main([]) == 0
    assert "ClearView Title Search" in capsys.readouterr().out


def test_parser_reads_positional_years_and_flags():
    args = main.build_parser().parse_args(["SMITH JOHN", "15", "--scan", "--json"])

    assert args.owner_name == "SMITH JOHN"
    assert args.years_back == 15
    assert args.scan is True
    assert args.ocr is False
    assert args.json is True


@pytest.mark.parametrize("years", ["0", "-5", "101", "5000", "ten"])
def test_parser_rejects_bad_years_back(years, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.build_parser().parse_args(["SMITH JOHN", years])

    assert excinfo.value.code == 2
    assert "years_back" in capsys.readouterr().err


def test_parser_defaults_years_back():
    assert main.build_parser().parse_args(["SMITH JOHN"]).years_back == 30


def test_format_report_sections(raw_record):
    records = [
        raw_record("D", ts=T0, instrument="1", parties_one=["BUILDER LLC"], parties_two=["SMITH JOHN"],
                   SalesPrice="350000"),
        raw_record("D", ts=T0 + 10 * DAY, instrument="2", parties_one=["SMITH JOHN"], parties_two=["DOE JANE"]),
        raw_record("LP", instrument="3"),
        raw_record("MTG", instrument="4"),
        raw_record("LN", instrument="5"),
    ]

    report = main.format_report(build_title_package(records, owner_name="SMITH JOHN"))

    assert "Risk Level:      HIGH" in report
    assert "[!] LIS_PENDENS: Found 1 lis pendens (pending litigation)" in report
    assert "[?] QUICK_FLIP: Property sold twice within 10 days" in report
    assert "CHAIN OF TITLE" in report
    assert "$350,000" in report
    assert "OPEN MORTGAGES" in report
    assert "OPEN LIENS" in report
    assert "Manual Review" not in report


def test_search_failure_exits_nonzero(monkeypatch):
    class FailingService:
        def __init__(self):
            self.scraper = None
            self.text_source = None

        def perform_title_search(self, *args, **kwargs):
            raise OriSearchError("ORI search request failed: timed out")

    monkeypatch.setattr(main, "TitleSearchService", FailingService)

    assert main.handle_search("SMITH JOHN", 30, scan=False, ocr=False, as_json=False) == 1


def test_json_output(monkeypatch, capsys, raw_record):
    package = build_title_package([raw_record("D")], owner_name="SMITH JOHN")

    class StubService:
        def __init__(self):
            self.scraper = None
            self.text_source = None

        def perform_title_search(self, *args, **kwargs):
            return package

    monkeypatch.setattr(main, "TitleSearchService", StubService)

    assert main.handle_search("SMITH JOHN", 30, scan=False, ocr=False, as_json=True) == 0
    out = capsys.readouterr().out
    assert '"risk_level": "LOW"' in out
    assert '"owner_name": "SMITH JOHN"' in out
