from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import requests
from loguru import logger

from clearview.utils.logging_utils import Timer, log_search
from config.title_search import (
    ORI_HEADERS,
    ORI_PDF_URL,
    ORI_SEARCH_URL,
    PDF_TIMEOUT_SECONDS,
    SEARCH_TIMEOUT_SECONDS,
    TITLE_DOC_TYPES,
)


class OriSearchError(Exception):
    """The ORI records service could not be reached or refused the request."""


class ORIApiScraper:
    """
    Client for the Hillsborough County Official Records Index (ORI) search API.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.update(ORI_HEADERS)

    def search_by_party(
        self,
        party_name: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        doc_types: Optional[Sequence[str]] = TITLE_DOC_TYPES,
    ) -> List[Dict[str, Any]]:
        """
        Search for recorded documents by party name.

        Args:
            party_name: Name of party (LAST FIRST or company name)
            start_date: RecordDateBegin (MM/DD/YYYY), optional
            end_date: RecordDateEnd (MM/DD/YYYY), optional
            doc_types: ORI doc type labels to filter on, None for all

        Returns:
            List of raw result dicts

        Raises:
            OriSearchError: on transport failure or a non-success status
        """
        payload: Dict[str, Any] = {"PartyName": [party_name.upper()]}
        if doc_types:
            payload["DocType"] = list(doc_types)
        if start_date:
            payload["RecordDateBegin"] = start_date
        if end_date:
            payload["RecordDateEnd"] = end_date

        with Timer() as timer:
            results = self._execute_search(payload)

        log_search(
            source="ORI",
            query=party_name,
            results_raw=len(results),
            duration_ms=timer.elapsed_ms,
            start_date=start_date,
            end_date=end_date,
        )
        return results

    def _execute_search(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            response = self.session.post(ORI_SEARCH_URL, json=payload, timeout=SEARCH_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            raise OriSearchError(f"ORI search request failed: {e}") from e

        if not response.ok:
            raise OriSearchError(f"ORI search failed: {response.status_code} {response.reason}")

        # Large result sets sometimes come back truncated
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse ORI search response: {e}")
            return []

        if isinstance(data, dict):
            return data.get("ResultList") or []
        if isinstance(data, list):
            return data
        return []

    @staticmethod
    def get_pdf_url(document_id: str) -> str:
        return f"{ORI_PDF_URL}/{quote(str(document_id))}"

    def download_pdf(self, document_id: str) -> bytes:
        """
        Download the watermarked PDF for a document.

        Raises:
            OriSearchError: on transport failure, a non-200 status or a non-PDF body
        """
        headers = {"Accept": "application/pdf,*/*"}
        try:
            response = self.session.get(
                self.get_pdf_url(document_id), headers=headers, timeout=PDF_TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            raise OriSearchError(f"PDF download failed for {document_id}: {e}") from e

        if response.status_code != 200:
            raise OriSearchError(f"PDF download failed: {response.status_code}")
        if response.content[:4] != b"%PDF":
            raise OriSearchError(f"Document {document_id} did not return a PDF")

        logger.debug(f"Downloaded PDF {document_id} ({len(response.content)} bytes)")
        return response.content
