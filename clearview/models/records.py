from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    DEED = "Deed"
    MORTGAGE = "Mortgage"
    SATISFACTION = "Satisfaction"
    LIEN = "Lien"
    LIS_PENDENS = "LisPendens"
    EASEMENT = "Easement"
    RESTRICTION = "Restriction"
    JUDGMENT = "Judgment"
    RELEASE = "Release"
    ASSIGNMENT = "Assignment"
    MODIFICATION = "Modification"
    OTHER = "Other"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MortgageData(BaseModel):
    """Fields recovered from mortgage (and lien) text."""
    kind: Literal["mortgage"] = "mortgage"
    principal_amount: Optional[float] = None
    lender_name: Optional[str] = None
    instrument_references: List[str] = Field(default_factory=list)
    is_modification: bool = False
    is_refinance: bool = False
    interest_rate: Optional[float] = None
    maturity_date: Optional[str] = None
    confidence: Confidence = Confidence.LOW


class DeedData(BaseModel):
    """Fields recovered from deed text."""
    kind: Literal["deed"] = "deed"
    consideration: Optional[float] = None
    consideration_derived: bool = False  # True when back-computed from doc stamps
    legal_description: Optional[str] = None
    deed_type: Optional[str] = None
    confidence: Confidence = Confidence.LOW


class SatisfactionData(BaseModel):
    """Fields recovered from satisfaction (and release) text."""
    kind: Literal["satisfaction"] = "satisfaction"
    satisfied_instrument_number: Optional[str] = None
    satisfied_book_page: Optional[str] = None
    original_lender: Optional[str] = None
    original_amount: Optional[float] = None
    satisfied_date: Optional[str] = None
    confidence: Confidence = Confidence.LOW


ExtractedData = Union[MortgageData, DeedData, SatisfactionData]


class ExtractionStatus(BaseModel):
    success: bool = False
    has_text: bool = False
    used_ocr: bool = False
    needs_manual_review: bool = True
    error: Optional[str] = None


class Document(BaseModel):
    """
    Canonical ORI record.

    Frozen: the only post-creation change is attaching scan results,
    which goes through ``with_extraction`` and yields a new instance.
    """
    model_config = ConfigDict(frozen=True)

    instrument_number: str = ""
    grantors: List[str] = Field(default_factory=list)
    grantees: List[str] = Field(default_factory=list)
    record_timestamp: int = 0
    record_date: str = ""
    doc_type: str = ""
    doc_type_short: str = ""
    legal_description: Optional[str] = None
    sales_price: Optional[float] = None
    page_count: int = 0
    document_id: Optional[str] = None
    uuid: Optional[str] = None
    book_num: Optional[str] = None
    page_num: Optional[str] = None

    extracted_data: Optional[ExtractedData] = None
    extraction: Optional[ExtractionStatus] = None

    def with_extraction(
        self,
        status: ExtractionStatus,
        data: Optional[ExtractedData] = None,
    ) -> "Document":
        return self.model_copy(update={"extraction": status, "extracted_data": data})
