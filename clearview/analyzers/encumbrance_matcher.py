"""
Encumbrance / Discharge Matcher - pairs mortgages and liens with the
satisfactions and releases that discharge them.

Two modes:
- NAME: no document text available. Grantor names and recording order only,
  always low confidence.
- MULTI_SIGNAL: scanned text available. Instrument and book/page references,
  amounts, lender names, grantor names and recording order are scored and
  summed.

Both modes are greedy: once a discharge is paired it is final. Anything that
does not clear the acceptance floor stays open/unmatched.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from clearview.models.records import Confidence, Document, MortgageData, SatisfactionData
from clearview.models.title_package import EncumbranceAnalysis, Match, MatchMode
from clearview.utils.amount import within_tolerance


@dataclass(frozen=True)
class MatchWeights:
    """Signal weights, acceptance floors and confidence tier boundaries."""

    instrument_number: int = 100
    book_page: int = 90
    amount: int = 30
    lender_name: int = 20
    grantor_name: int = 10
    recorded_after: int = 5
    recorded_before_penalty: int = -20
    amount_tolerance: float = 0.01
    acceptance_floor: int = 30
    high_confidence: int = 90
    medium_confidence: int = 50

    # Name-only mode
    name_recorded_after: int = 10
    name_overlap: int = 5
    name_acceptance_floor: int = 10


DEFAULT_MATCH_WEIGHTS = MatchWeights()


def _first_token(name: str) -> str:
    parts = name.lower().split()
    return parts[0] if parts else ""


def _names_overlap(encumbrance_name: str, discharge_name: str) -> bool:
    """First token of either name contained in the other name."""
    enc = encumbrance_name.lower()
    dis = discharge_name.lower()
    enc_first = _first_token(enc)
    dis_first = _first_token(dis)
    if not enc_first or not dis_first:
        return False
    return enc_first in dis or dis_first in enc_first


def has_text_signals(documents: Sequence[Document]) -> bool:
    return any(doc.extracted_data is not None for doc in documents)


# ---------------------------------------------------------------------------
# Name-only mode
# ---------------------------------------------------------------------------

def name_score(
    encumbrance: Document,
    discharge: Document,
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> Tuple[int, List[str]]:
    score = 0
    reasons: List[str] = []
    if discharge.record_timestamp > encumbrance.record_timestamp:
        score += weights.name_recorded_after
        reasons.append("recorded_after")

    # every overlapping grantor pair counts
    for enc_name in encumbrance.grantors:
        for dis_name in discharge.grantors:
            if _names_overlap(enc_name, dis_name):
                score += weights.name_overlap
                reasons.append("grantor_name")

    return score, reasons


def match_by_name(
    encumbrances: Sequence[Document],
    discharges: Sequence[Document],
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> EncumbranceAnalysis:
    """
    Pair each encumbrance with its best unused discharge by date and grantor names.

    Args:
        encumbrances: Mortgages or liens (bucket order)
        discharges: Satisfactions or releases (bucket order)

    Returns:
        EncumbranceAnalysis in NAME mode
    """
    consumed = [False] * len(discharges)
    analysis = EncumbranceAnalysis(mode=MatchMode.NAME, total=len(encumbrances))

    for encumbrance in encumbrances:
        best_index: Optional[int] = None
        best_score = 0
        best_reasons: List[str] = []

        for index, discharge in enumerate(discharges):
            if consumed[index]:
                continue
            score, reasons = name_score(encumbrance, discharge, weights)
            if score > best_score:
                best_score = score
                best_index = index
                best_reasons = reasons

        if best_index is not None and best_score >= weights.name_acceptance_floor:
            consumed[best_index] = True
            analysis.satisfied_list.append(Match(
                encumbrance=encumbrance,
                discharge=discharges[best_index],
                score=best_score,
                confidence=Confidence.LOW,
                match_reasons=best_reasons,
                method=MatchMode.NAME,
            ))
        else:
            analysis.open.append(encumbrance)

    analysis.satisfied = len(analysis.satisfied_list)
    analysis.unmatched_discharges = [d for i, d in enumerate(discharges) if not consumed[i]]
    return analysis


# ---------------------------------------------------------------------------
# Multi-signal mode
# ---------------------------------------------------------------------------

def signal_score(
    encumbrance: Document,
    discharge: Document,
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> Tuple[int, List[str]]:
    """
    Score one encumbrance/discharge pair from independent signals.

    Each signal counts at most once. A discharge recorded on or before the
    encumbrance is penalised rather than excluded.

    Returns:
        (score, reasons) where reasons name the signals that fired
    """
    dis_data = discharge.extracted_data if isinstance(discharge.extracted_data, SatisfactionData) else SatisfactionData()
    enc_data = encumbrance.extracted_data if isinstance(encumbrance.extracted_data, MortgageData) else MortgageData()

    score = 0
    reasons: List[str] = []

    if dis_data.satisfied_instrument_number and encumbrance.instrument_number:
        if dis_data.satisfied_instrument_number == str(encumbrance.instrument_number):
            score += weights.instrument_number
            reasons.append("instrument_number")

    if dis_data.satisfied_book_page and encumbrance.book_num and encumbrance.page_num:
        if (str(encumbrance.book_num) in dis_data.satisfied_book_page
                and str(encumbrance.page_num) in dis_data.satisfied_book_page):
            score += weights.book_page
            reasons.append("book_page")

    if dis_data.original_amount and enc_data.principal_amount:
        if within_tolerance(dis_data.original_amount, enc_data.principal_amount, weights.amount_tolerance):
            score += weights.amount
            reasons.append("amount")

    if dis_data.original_lender and enc_data.lender_name:
        dis_lender = dis_data.original_lender.lower()
        enc_lender = enc_data.lender_name.lower()
        if _first_token(enc_lender) in dis_lender or _first_token(dis_lender) in enc_lender:
            score += weights.lender_name
            reasons.append("lender_name")

    dis_first = _first_token(" ".join(discharge.grantors))
    enc_first = _first_token(" ".join(encumbrance.grantors))
    if dis_first and enc_first and dis_first == enc_first:
        score += weights.grantor_name
        reasons.append("grantor_name")

    if discharge.record_timestamp > encumbrance.record_timestamp:
        score += weights.recorded_after
        reasons.append("recorded_after")
    else:
        score += weights.recorded_before_penalty
        reasons.append("recorded_before_penalty")

    return score, reasons


def score_confidence(score: int, weights: MatchWeights = DEFAULT_MATCH_WEIGHTS) -> Confidence:
    if score >= weights.high_confidence:
        return Confidence.HIGH
    if score >= weights.medium_confidence:
        return Confidence.MEDIUM
    return Confidence.LOW


def match_by_signals(
    encumbrances: Sequence[Document],
    discharges: Sequence[Document],
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> EncumbranceAnalysis:
    """
    Assign each discharge to its best-scoring unmatched encumbrance.

    Discharges are processed in order; an accepted pair removes both sides.
    This is a greedy assignment, not a global optimum.
    """
    matched = [False] * len(encumbrances)
    used = [False] * len(discharges)
    analysis = EncumbranceAnalysis(mode=MatchMode.MULTI_SIGNAL, total=len(encumbrances))

    for d_index, discharge in enumerate(discharges):
        best_index: Optional[int] = None
        best_score = 0
        best_reasons: List[str] = []

        for e_index, encumbrance in enumerate(encumbrances):
            if matched[e_index]:
                continue
            score, reasons = signal_score(encumbrance, discharge, weights)
            if score > best_score:
                best_score = score
                best_index = e_index
                best_reasons = reasons

        if best_index is not None and best_score >= weights.acceptance_floor:
            matched[best_index] = True
            used[d_index] = True
            analysis.satisfied_list.append(Match(
                encumbrance=encumbrances[best_index],
                discharge=discharge,
                score=best_score,
                confidence=score_confidence(best_score, weights),
                match_reasons=best_reasons,
                method=MatchMode.MULTI_SIGNAL,
            ))
            logger.debug(
                f"Matched {discharge.doc_type_short} {discharge.instrument_number} -> "
                f"{encumbrances[best_index].doc_type_short} {encumbrances[best_index].instrument_number} "
                f"(score {best_score}: {', '.join(best_reasons)})"
            )

    analysis.satisfied = len(analysis.satisfied_list)
    analysis.open = [e for i, e in enumerate(encumbrances) if not matched[i]]
    analysis.unmatched_discharges = [d for i, d in enumerate(discharges) if not used[i]]
    return analysis


def match_encumbrances(
    encumbrances: Sequence[Document],
    discharges: Sequence[Document],
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> EncumbranceAnalysis:
    """
    Match encumbrances to discharges, choosing the mode from available evidence.

    Multi-signal scoring is used when any document in either pool carries
    extracted text data; otherwise the name-only heuristic.
    """
    if has_text_signals(encumbrances) or has_text_signals(discharges):
        analysis = match_by_signals(encumbrances, discharges, weights)
    else:
        analysis = match_by_name(encumbrances, discharges, weights)

    logger.debug(
        f"{analysis.mode.value} matching: {analysis.total} encumbrances, "
        f"{analysis.satisfied} discharged, {len(analysis.open)} open, "
        f"{len(analysis.unmatched_discharges)} unmatched discharges"
    )
    return analysis
