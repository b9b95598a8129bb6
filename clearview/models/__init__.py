from clearview.models.records import (
    Category,
    Confidence,
    DeedData,
    Document,
    ExtractedData,
    ExtractionStatus,
    MortgageData,
    SatisfactionData,
)
from clearview.models.title_package import (
    ChainEntry,
    EncumbranceAnalysis,
    Flag,
    Match,
    MatchMode,
    RiskLevel,
    ScanResults,
    SearchParams,
    Severity,
    Summary,
    TitlePackage,
)

__all__ = [
    "Category",
    "ChainEntry",
    "Confidence",
    "DeedData",
    "Document",
    "EncumbranceAnalysis",
    "ExtractedData",
    "ExtractionStatus",
    "Flag",
    "Match",
    "MatchMode",
    "MortgageData",
    "RiskLevel",
    "SatisfactionData",
    "ScanResults",
    "SearchParams",
    "Severity",
    "Summary",
    "TitlePackage",
]
