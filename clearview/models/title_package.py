from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from clearview.models.records import Category, Confidence, Document


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


class RiskLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class MatchMode(str, Enum):
    NAME = "name"                  # grantor names and dates only
    MULTI_SIGNAL = "multi_signal"  # text signals from scanned documents


class ChainEntry(BaseModel):
    sequence: int
    record_date: str
    record_timestamp: int
    instrument_number: str
    grantors: str
    grantees: str
    sales_price: Optional[float] = None
    legal_description: Optional[str] = None
    document_id: Optional[str] = None
    deed_type: Optional[str] = None      # from scanned deed text
    consideration: Optional[float] = None  # from scanned deed text


class Match(BaseModel):
    encumbrance: Document
    discharge: Optional[Document] = None
    score: int = 0
    confidence: Confidence = Confidence.LOW
    match_reasons: List[str] = Field(default_factory=list)
    method: MatchMode = MatchMode.NAME


class EncumbranceAnalysis(BaseModel):
    """Outcome of pairing one encumbrance pool with its discharge pool."""
    mode: MatchMode = MatchMode.NAME
    total: int = 0
    satisfied: int = 0
    open: List[Document] = Field(default_factory=list)
    satisfied_list: List[Match] = Field(default_factory=list)
    unmatched_discharges: List[Document] = Field(default_factory=list)


class Flag(BaseModel):
    severity: Severity
    type: str
    message: str
    documents: List[Document] = Field(default_factory=list)


class ScanResults(BaseModel):
    scanned: int = 0
    successful: int = 0
    failed: int = 0
    needs_manual_review: int = 0
    used_ocr: int = 0
    documents: List[Document] = Field(default_factory=list)


class Summary(BaseModel):
    total_documents: int = 0
    chain_of_title_length: int = 0
    total_mortgages: int = 0
    satisfied_mortgages: int = 0
    open_mortgages: int = 0
    total_liens: int = 0
    open_liens: int = 0
    high_severity_flags: int = 0
    medium_severity_flags: int = 0
    needs_manual_review: int = 0
    risk_level: RiskLevel = RiskLevel.LOW


class SearchParams(BaseModel):
    owner_name: str = ""
    years_back: int = 30
    search_date: datetime
    record_count: int = 0
    scanned: bool = False


class TitlePackage(BaseModel):
    search_params: SearchParams
    documents: List[Document] = Field(default_factory=list)
    grouped: Dict[Category, List[Document]] = Field(default_factory=dict)
    chain_of_title: List[ChainEntry] = Field(default_factory=list)
    mortgage_analysis: EncumbranceAnalysis = Field(default_factory=EncumbranceAnalysis)
    lien_analysis: EncumbranceAnalysis = Field(default_factory=EncumbranceAnalysis)
    open_liens: List[Document] = Field(default_factory=list)
    flags: List[Flag] = Field(default_factory=list)
    scan_results: Optional[ScanResults] = None
    summary: Summary = Field(default_factory=Summary)
