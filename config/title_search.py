"""
Title Search Configuration - ORI records search, document scanning and risk rules.

Plain module-level constants; a few can be overridden from the environment.
"""

import os

# ORI Endpoints
ORI_BASE_URL = "https://publicaccess.hillsclerk.com"
ORI_PUBLIC_ACCESS_URL = f"{ORI_BASE_URL}/oripublicaccess/"
ORI_SEARCH_URL = f"{ORI_BASE_URL}/Public/ORIUtilities/DocumentSearch/api/Search"
ORI_PDF_URL = f"{ORI_BASE_URL}/Public/ORIUtilities/OverlayWatermark/api/Watermark"

ORI_HEADERS = {
    "Content-Type": "application/json; charset=UTF-8",
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Origin": ORI_BASE_URL,
    "Referer": ORI_PUBLIC_ACCESS_URL,
    "X-Requested-With": "XMLHttpRequest",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}

# Request timeouts (seconds)
SEARCH_TIMEOUT_SECONDS = 60
PDF_TIMEOUT_SECONDS = 30

# Document types requested for a title search
TITLE_DOC_TYPES = [
    "(D) DEED",
    "(MTG) MORTGAGE",
    "(SAT) SATISFACTION",
    "(LN) LIEN",
    "(LP) LIS PENDENS",
    "(EAS) EASEMENT",
    "(RES) RESTRICTIONS",
    "(JUD) JUDGMENT",
    "(REL) RELEASE",
    "(ASG) ASSIGNMENT",
    "(TAXDEED) TAX DEED",
]

# Search window
DEFAULT_YEARS_BACK = 30
MAX_YEARS_BACK = 100

# Text extraction
MIN_EXTRACTABLE_TEXT_LENGTH = 50   # below this the parsers return an all-empty result
MIN_TEXT_LAYER_LENGTH = 100        # a PDF text layer at or below this is treated as missing
MAX_OCR_PAGES = 3
OCR_RENDER_DPI = 200
OCR_LANGUAGES = ["en"]

# Batch scanning
SCAN_WORKERS = int(os.getenv("SCAN_WORKERS", "4"))

# Risk rules
QUICK_FLIP_DAYS = 90

# Web
WEB_PORT = int(os.getenv("WEB_PORT", "8080"))
