"""
Text-signal extraction for scanned ORI documents.

Runs the rule tables in ``extraction_rules`` over PDF/OCR text and returns a
typed record per document category. Parsing never fails: missing evidence is
left as None and shows up as a lower confidence tier.
"""
from typing import Any, Iterable, List, Optional

from clearview.analyzers import extraction_rules as rules
from clearview.analyzers.extraction_rules import ExtractionRule
from clearview.models.records import (
    Category,
    Confidence,
    DeedData,
    ExtractedData,
    MortgageData,
    SatisfactionData,
)
from config.title_search import MIN_EXTRACTABLE_TEXT_LENGTH


def first_match(text: str, field_rules: Iterable[ExtractionRule]) -> Any:
    """
    Value of the first rule whose pattern matches and whose value validates.

    Only the first occurrence of each pattern is considered; a rejected
    value moves on to the next rule.
    """
    for rule in field_rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        value = rule.transform(match)
        if rule.validator(value):
            return value
    return None


def all_matches(text: str, field_rules: Iterable[ExtractionRule]) -> List[Any]:
    """Every non-overlapping match of every rule, de-duplicated in discovery order."""
    found: List[Any] = []
    for rule in field_rules:
        for match in rule.pattern.finditer(text):
            value = rule.transform(match)
            if rule.validator(value) and value not in found:
                found.append(value)
    return found


def confidence_tier(score: int) -> Confidence:
    if score >= 4:
        return Confidence.HIGH
    if score >= 2:
        return Confidence.MEDIUM
    return Confidence.LOW


def _insufficient(text: Optional[str]) -> bool:
    return not text or len(text.strip()) < MIN_EXTRACTABLE_TEXT_LENGTH


def parse_mortgage_text(text: Optional[str]) -> MortgageData:
    """
    Extract mortgage terms from document text.

    Args:
        text: Raw PDF/OCR text

    Returns:
        MortgageData (all fields None and low confidence for short text)
    """
    info = MortgageData()
    if _insufficient(text):
        return info

    normalized = text.upper()

    info.principal_amount = first_match(normalized, rules.MORTGAGE_PRINCIPAL_RULES)
    info.lender_name = first_match(normalized, rules.MORTGAGE_LENDER_RULES)
    info.instrument_references = all_matches(normalized, rules.INSTRUMENT_REFERENCE_RULES)
    info.is_modification = bool(rules.MODIFICATION_PATTERN.search(normalized))
    info.is_refinance = bool(rules.REFINANCE_PATTERN.search(normalized))
    info.interest_rate = first_match(normalized, rules.INTEREST_RATE_RULES)
    info.maturity_date = first_match(normalized, rules.MATURITY_DATE_RULES)

    score = 0
    if info.principal_amount is not None:
        score += 3
    if info.lender_name:
        score += 2
    if info.interest_rate is not None:
        score += 1
    if info.maturity_date:
        score += 1
    info.confidence = confidence_tier(score)

    return info


def parse_deed_text(text: Optional[str]) -> DeedData:
    """
    Extract sale terms from deed text.

    When no consideration is stated but documentary stamps are, the sale
    price is backed out of the stamp amount at the Florida rate.
    """
    info = DeedData()
    if _insufficient(text):
        return info

    normalized = text.upper()

    info.consideration = first_match(normalized, rules.DEED_CONSIDERATION_RULES)
    if info.consideration is None and rules.DOC_STAMP_PHRASE.search(normalized):
        stamps = first_match(normalized, rules.DOC_STAMP_AMOUNT_RULES)
        if stamps is not None:
            info.consideration = round(stamps / rules.DOC_STAMP_RATE, 2)
            info.consideration_derived = True

    info.legal_description = first_match(normalized, rules.LEGAL_DESCRIPTION_RULES)

    for pattern, label in rules.DEED_TYPE_RULES:
        if pattern.search(normalized):
            info.deed_type = label
            break

    score = 0
    if info.consideration is not None:
        score += 2
    if info.legal_description:
        score += 2
    if info.deed_type:
        score += 1
    info.confidence = confidence_tier(score)

    return info


def parse_satisfaction_text(text: Optional[str]) -> SatisfactionData:
    """Extract the satisfied instrument, original lender, amount and date."""
    info = SatisfactionData()
    if _insufficient(text):
        return info

    normalized = text.upper()

    reference = first_match(normalized, rules.SATISFIED_REFERENCE_RULES)
    if reference:
        kind, value = reference
        if kind == "book_page":
            info.satisfied_book_page = value
        else:
            info.satisfied_instrument_number = value

    info.original_lender = first_match(normalized, rules.SATISFACTION_LENDER_RULES)
    info.original_amount = first_match(normalized, rules.SATISFACTION_AMOUNT_RULES)
    info.satisfied_date = first_match(normalized, rules.SATISFIED_DATE_RULES)

    score = 0
    if info.satisfied_instrument_number or info.satisfied_book_page:
        score += 3
    if info.original_lender:
        score += 2
    if info.original_amount is not None:
        score += 1
    info.confidence = confidence_tier(score)

    return info


_PARSERS = {
    Category.MORTGAGE: parse_mortgage_text,
    Category.LIEN: parse_mortgage_text,
    Category.DEED: parse_deed_text,
    Category.SATISFACTION: parse_satisfaction_text,
    Category.RELEASE: parse_satisfaction_text,
}


def extract_fields(text: Optional[str], category: Category) -> Optional[ExtractedData]:
    """
    Parse document text for the given category.

    Liens share the mortgage rules and releases share the satisfaction rules.
    Categories without a parser return None.
    """
    parser = _PARSERS.get(category)
    if parser is None:
        return None
    return parser(text)
