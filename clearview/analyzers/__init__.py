"""
Title analyzers: classification, chain of title, text extraction, encumbrance matching, flags and summary.
"""
from .chain_builder import build_chain_of_title

from .classifier import (
    CATEGORY_BY_CODE,
    classify,
    group_by_category,
    parse_record,
    short_doc_type,
)

from .encumbrance_matcher import (
    DEFAULT_MATCH_WEIGHTS,
    MatchWeights,
    match_by_name,
    match_by_signals,
    match_encumbrances,
)

from .flag_engine import identify_flags

from .summary import generate_summary, risk_level

from .text_extractor import (
    extract_fields,
    parse_deed_text,
    parse_mortgage_text,
    parse_satisfaction_text,
)

__all__ = [
    'CATEGORY_BY_CODE',
    'DEFAULT_MATCH_WEIGHTS',
    'MatchWeights',
    'build_chain_of_title',
    'classify',
    'extract_fields',
    'generate_summary',
    'group_by_category',
    'identify_flags',
    'match_by_name',
    'match_by_signals',
    'match_encumbrances',
    'parse_deed_text',
    'parse_mortgage_text',
    'parse_record',
    'parse_satisfaction_text',
    'risk_level',
    'short_doc_type',
]
