"""
Summary / Risk Aggregator.
"""
from typing import Sequence

from clearview.models.records import Document
from clearview.models.title_package import (
    ChainEntry,
    EncumbranceAnalysis,
    Flag,
    RiskLevel,
    Severity,
    Summary,
)


def risk_level(
    flags: Sequence[Flag],
    open_liens: int,
    open_mortgages: int,
    scanned: bool,
) -> RiskLevel:
    """
    HIGH on any high flag. MEDIUM on any medium flag, any open lien, or more
    than one open mortgage when documents were scanned. Otherwise LOW.
    """
    if any(f.severity == Severity.HIGH for f in flags):
        return RiskLevel.HIGH
    if any(f.severity == Severity.MEDIUM for f in flags):
        return RiskLevel.MEDIUM
    if open_liens > 0:
        return RiskLevel.MEDIUM
    if scanned and open_mortgages > 1:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def generate_summary(
    documents: Sequence[Document],
    chain: Sequence[ChainEntry],
    mortgage_analysis: EncumbranceAnalysis,
    lien_analysis: EncumbranceAnalysis,
    flags: Sequence[Flag],
    scanned: bool = False,
    needs_manual_review: int = 0,
) -> Summary:
    open_mortgages = len(mortgage_analysis.open)
    open_liens = len(lien_analysis.open)

    return Summary(
        total_documents=len(documents),
        chain_of_title_length=len(chain),
        total_mortgages=mortgage_analysis.total,
        satisfied_mortgages=mortgage_analysis.satisfied,
        open_mortgages=open_mortgages,
        total_liens=lien_analysis.total,
        open_liens=open_liens,
        high_severity_flags=sum(1 for f in flags if f.severity == Severity.HIGH),
        medium_severity_flags=sum(1 for f in flags if f.severity == Severity.MEDIUM),
        needs_manual_review=needs_manual_review,
        risk_level=risk_level(flags, open_liens, open_mortgages, scanned),
    )
