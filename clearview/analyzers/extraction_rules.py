"""
Pattern rule tables for recorded-instrument text.

Each field owns an ordered list of ExtractionRule. The extractor tries them in
order against upper-cased document text and keeps the first value that passes
the rule's validator. Tables are plain data so they can be tuned and tested
without touching the extractor or the matcher.

Known lender fragments follow the bank/servicer lists used for ORI party
filtering.
"""
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from clearview.utils.amount import parse_amount

_FLAGS = re.IGNORECASE

# "$ 200,000.00", "$200000"
_DOLLARS = r"\$[\s,]*([0-9,]+(?:\.[0-9]{2})?)"

NAME_STOPWORDS = {"THE", "AND", "FOR", "THIS", "THAT"}

# Florida documentary stamp tax: $0.70 per $100 of consideration
DOC_STAMP_RATE = 0.0070

LEGAL_DESCRIPTION_MAX_LENGTH = 200


def _group1(match: re.Match) -> Any:
    return match.group(1)


def _amount(match: re.Match) -> Optional[float]:
    return parse_amount(match.group(1))


def _float(match: re.Match) -> Optional[float]:
    try:
        return float(match.group(1))
    except ValueError:
        return None


def _name(match: re.Match) -> str:
    return " ".join(match.group(1).split()).strip(" ,")


def _legal(match: re.Match) -> str:
    return match.group(1).strip()[:LEGAL_DESCRIPTION_MAX_LENGTH]


def _book_page(match: re.Match) -> str:
    return f"Book {match.group(1)}, Page {match.group(2)}"


def _present(value: Any) -> bool:
    return value is not None and value != ""


def amount_between(low: float, high: float = float("inf")) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return value is not None and low <= value <= high
    return check


def plausible_name(value: Any) -> bool:
    return bool(value) and len(value) > 3 and value.upper() not in NAME_STOPWORDS


def has_digit(value: Any) -> bool:
    return bool(value) and any(ch.isdigit() for ch in value)


@dataclass(frozen=True)
class ExtractionRule:
    """One pattern for one field: search, transform the match, validate the value."""

    name: str
    pattern: re.Pattern[str]
    transform: Callable[[re.Match], Any] = _group1
    validator: Callable[[Any], bool] = _present


def rule(
    name: str,
    pattern: str,
    transform: Callable[[re.Match], Any] = _group1,
    validator: Callable[[Any], bool] = _present,
) -> ExtractionRule:
    return ExtractionRule(name, re.compile(pattern, _FLAGS), transform, validator)


# ---------------------------------------------------------------------------
# Lenders
# ---------------------------------------------------------------------------

KNOWN_LENDERS = [
    r"WELLS\s+FARGO(?:\s+BANK)?",
    r"BANK\s+OF\s+AMERICA",
    r"JP\s*MORGAN(?:\s+CHASE)?(?:\s+BANK)?",
    r"CHASE(?:\s+HOME\s+FINANCE|\s+BANK)?",
    r"CITIMORTGAGE",
    r"U\.?\s?S\.?\s+BANK",
    r"QUICKEN\s+LOANS",
    r"ROCKET\s+MORTGAGE",
    r"UNITED\s+SHORE(?:\s+FINANCIAL)?",
    r"UNITED\s+WHOLESALE\s+MORTGAGE",
    r"CALIBER\s+HOME(?:\s+LOANS)?",
    r"FREEDOM\s+MORTGAGE",
    r"PENNYMAC",
    r"GUILD\s+MORTGAGE",
    r"CROSSCOUNTRY\s+MORTGAGE",
    r"MOVEMENT\s+MORTGAGE",
    r"NATIONSTAR(?:\s+MORTGAGE)?",
    r"LAKEVIEW\s+LOAN(?:\s+SERVICING)?",
    r"FLAGSTAR(?:\s+BANK)?",
    r"LOAN\s*DEPOT",
    r"NAVY\s+FEDERAL(?:\s+CREDIT\s+UNION)?",
    r"USAA",
    r"FIFTH\s+THIRD(?:\s+BANK)?",
    r"PNC\s+BANK",
    r"REGIONS\s+BANK",
    r"SUNTRUST(?:\s+BANK|\s+MORTGAGE)?",
    r"TRUIST(?:\s+BANK)?",
    r"CITIZENS\s+BANK",
]

_KNOWN_LENDER_PATTERN = r"\b(" + "|".join(f"(?:{frag})" for frag in KNOWN_LENDERS) + r")\b"

_NAME_CHARS = r"[A-Z0-9\s,\.&'-]"

MORTGAGE_LENDER_RULES: List[ExtractionRule] = [
    rule("lender_label",
         rf"(?:MORTGAGEE|LENDER)\s*[:\s]+([A-Z]{_NAME_CHARS}+?)(?:\s*[,\n]|$)",
         _name, plausible_name),
    rule("in_favor_of",
         rf"IN\s+FAVOR\s+OF\s+([A-Z]{_NAME_CHARS}+?)(?:\s*[,\n]|\s+ITS\b|\s+A\s+)",
         _name, plausible_name),
    rule("known_institution", _KNOWN_LENDER_PATTERN, _name, plausible_name),
    rule("national_association_suffix",
         r"\b([A-Z][A-Z&'-]*(?:[ \t]+[A-Z&'-]+){0,5}),?[ \t]+N\.?[ \t]?A\.?(?![A-Z])",
         _name, plausible_name),
]

SATISFACTION_LENDER_RULES: List[ExtractionRule] = [
    rule("made_to",
         rf"(?:ORIGINALLY\s+)?(?:MADE|EXECUTED)\s+(?:BY\s+.+?\s+)?(?:TO|IN\s+FAVOR\s+OF)\s+([A-Z]{_NAME_CHARS}+?)(?:\s*[,\n]|$)",
         _name, plausible_name),
    rule("lender_was",
         rf"(?:MORTGAGEE|LENDER)\s*(?:WAS|:)\s*([A-Z]{_NAME_CHARS}+?)(?:\s*[,\n]|$)",
         _name, plausible_name),
    rule("known_institution", _KNOWN_LENDER_PATTERN, _name, plausible_name),
]

# ---------------------------------------------------------------------------
# Mortgage
# ---------------------------------------------------------------------------

MORTGAGE_AMOUNT_RANGE = (10_000, 50_000_000)
_mortgage_amount = amount_between(*MORTGAGE_AMOUNT_RANGE)

MORTGAGE_PRINCIPAL_RULES: List[ExtractionRule] = [
    rule("principal_sum", rf"PRINCIPAL\s+(?:SUM|AMOUNT)\s+(?:OF\s+)?{_DOLLARS}", _amount, _mortgage_amount),
    rule("in_the_amount_of", rf"IN\s+THE\s+AMOUNT\s+OF\s+{_DOLLARS}", _amount, _mortgage_amount),
    rule("dollars_written_out", rf"{_DOLLARS}\s*(?:\(|DOLLARS)", _amount, _mortgage_amount),
    rule("face_amount", rf"FACE\s+AMOUNT\s*(?:OF\s+)?{_DOLLARS}", _amount, _mortgage_amount),
    rule("loan_amount", rf"LOAN\s+AMOUNT\s*(?:OF\s+)?{_DOLLARS}", _amount, _mortgage_amount),
    rule("bare_large_amount",
         r"\$\s*((?:[1-9][0-9]{0,2}(?:,[0-9]{3})+|[1-9][0-9]{4,})(?:\.[0-9]{2})?)",
         _amount, _mortgage_amount),
]

# Collected exhaustively (every match of every pattern), not first-match-wins.
INSTRUMENT_REFERENCE_RULES: List[ExtractionRule] = [
    rule("instrument_number", r"INSTRUMENT\s*(?:NO\.?|NUMBER|#)\s*:?\s*([0-9]{6,})"),
    rule("book_page", r"(?:RECORDED\s+IN\s+)?(?:OR\s+)?BOOK\s+([0-9]+)\s*,?\s*PAGE\s+([0-9]+)", _book_page),
    rule("cfn", r"CFN\s*(?:#|NO\.?)?\s*([0-9]{6,})"),
    rule("document_number", r"DOCUMENT\s*(?:NO\.?|NUMBER|#)\s*:?\s*([0-9]{6,})"),
]

MODIFICATION_PATTERN = re.compile(r"MODIFICATION|LOAN\s+MOD", _FLAGS)
REFINANCE_PATTERN = re.compile(r"REFINANC|REFI\s", _FLAGS)

INTEREST_RATE_RULES: List[ExtractionRule] = [
    rule("interest_rate", r"(?:INTEREST\s+RATE|RATE\s+OF)\s*[:\s]+([0-9]+\.?[0-9]*)\s*%", _float),
]

MATURITY_DATE_RULES: List[ExtractionRule] = [
    rule("maturity_date",
         r"MATUR(?:ITY|ES?)\s*(?:DATE)?\s*[:\s]+([0-9]{1,2}[/\-][0-9]{1,2}[/\-][0-9]{2,4})"),
]

# ---------------------------------------------------------------------------
# Deed
# ---------------------------------------------------------------------------

_deed_consideration = amount_between(1_000)

DEED_CONSIDERATION_RULES: List[ExtractionRule] = [
    rule("for_and_in_consideration", rf"FOR\s+AND\s+IN\s+CONSIDERATION\s+OF\s+{_DOLLARS}", _amount, _deed_consideration),
    rule("consideration_of", rf"CONSIDERATION\s+(?:OF\s+)?{_DOLLARS}", _amount, _deed_consideration),
    rule("sum_of", rf"SUM\s+OF\s+{_DOLLARS}", _amount, _deed_consideration),
    rule("documentary_stamps", rf"DOCUMENTARY\s+STAMP(?:S)?\s+{_DOLLARS}", _amount, _deed_consideration),
]

DOC_STAMP_PHRASE = re.compile(r"DOCUMENTARY\s+STAMP", _FLAGS)

DOC_STAMP_AMOUNT_RULES: List[ExtractionRule] = [
    rule("stamp_amount", rf"{_DOLLARS}\s*(?:DOC|DOCUMENTARY)", _amount, amount_between(0.01)),
]

LEGAL_DESCRIPTION_RULES: List[ExtractionRule] = [
    rule("lot_block", r"(LOT\s+[0-9A-Z]+,?\s*(?:OF\s+)?BLOCK\s+[0-9A-Z]+[^.]*)", _legal),
    rule("condo_unit", r"(UNIT\s+(?:NO\.?\s*)?[0-9A-Z-]+[^.]*(?:CONDOMINIUM|CONDO)[^.]*)", _legal),
    rule("section_township_range",
         r"(SEC(?:TION)?\s+[0-9]+[^.]*TOWNSHIP\s+[0-9]+[^.]*RANGE\s+[0-9]+[^.]*)", _legal),
    rule("parcel_id", r"PARCEL\s+(?:ID|IDENTIFICATION|NUMBER|NO\.?)?\s*:?\s*([0-9-]+)", _legal, has_digit),
]

# Checked in order; the first phrase present names the deed type.
DEED_TYPE_RULES: List[Tuple[re.Pattern[str], str]] = [
    (re.compile(r"WARRANTY\s+DEED", _FLAGS), "WARRANTY"),
    (re.compile(r"QUIT\s*CLAIM", _FLAGS), "QUIT CLAIM"),
    (re.compile(r"SPECIAL\s+WARRANTY", _FLAGS), "SPECIAL WARRANTY"),
    (re.compile(r"TAX\s+DEED", _FLAGS), "TAX DEED"),
    (re.compile(r"PERSONAL\s+REPRESENTATIVE", _FLAGS), "PR DEED"),
    (re.compile(r"TRUSTEE", _FLAGS), "TRUSTEE DEED"),
]

# ---------------------------------------------------------------------------
# Satisfaction
# ---------------------------------------------------------------------------

# Values are (reference kind, value); kind is "instrument" or "book_page".
SATISFIED_REFERENCE_RULES: List[ExtractionRule] = [
    rule("instrument_number",
         r"(?:MORTGAGE|INSTRUMENT|DOCUMENT)\s*(?:NO\.?|NUMBER|#)\s*:?\s*([0-9]{6,})",
         lambda m: ("instrument", m.group(1))),
    rule("book_page",
         r"(?:RECORDED\s+)?(?:IN\s+)?(?:O\.?R\.?\s+)?BOOK\s+([0-9]+)\s*,?\s*PAGE\s+([0-9]+)",
         lambda m: ("book_page", _book_page(m))),
    rule("cfn", r"CFN\s*(?:#|NO\.?)?\s*([0-9]{6,})", lambda m: ("instrument", m.group(1))),
]

SATISFACTION_AMOUNT_RULES: List[ExtractionRule] = [
    rule("original_amount", r"(?:ORIGINAL|PRINCIPAL)\s+(?:AMOUNT|SUM)\s*(?:OF|:)?\s*\$[\s,]*([0-9,]+)",
         _amount, amount_between(10_000)),
    rule("amount_before_loan", rf"{_DOLLARS}\s*(?:MORTGAGE|LOAN)", _amount, amount_between(10_000)),
]

SATISFIED_DATE_RULES: List[ExtractionRule] = [
    rule("satisfied_date",
         r"(?:DATED|RECORDED)\s*:?\s*([A-Z]+\s+[0-9]{1,2},?\s*[0-9]{4}|[0-9]{1,2}[/\-][0-9]{1,2}[/\-][0-9]{2,4})"),
]
