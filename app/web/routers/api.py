from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse, Response
from loguru import logger
from pydantic import BaseModel, Field

from clearview.scrapers.ori_api_scraper import ORIApiScraper, OriSearchError
from clearview.services.title_search_service import TitleSearchService
from config.title_search import DEFAULT_YEARS_BACK, MAX_YEARS_BACK

router = APIRouter(tags=["api"])


class SearchRequest(BaseModel):
    owner_name: str = ""
    years_back: int = Field(DEFAULT_YEARS_BACK, ge=1, le=MAX_YEARS_BACK)
    scan_documents: bool = False


def get_scraper() -> ORIApiScraper:
    return ORIApiScraper()


def get_title_search_service(scraper: ORIApiScraper = Depends(get_scraper)) -> TitleSearchService:
    return TitleSearchService(scraper)


@router.post("/search")
def search(request: SearchRequest, service: TitleSearchService = Depends(get_title_search_service)):
    """Run a title search and return the full package."""
    owner_name = request.owner_name.strip()
    if not owner_name:
        raise HTTPException(status_code=400, detail="owner_name is required")

    logger.info(f"Title search request: {owner_name} ({request.years_back} years)")
    try:
        package = service.perform_title_search(
            owner_name,
            years_back=request.years_back,
            scan_documents=request.scan_documents,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OriSearchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    logger.info(
        f"Search complete. Found {package.summary.total_documents} documents, "
        f"risk level {package.summary.risk_level.value}"
    )
    return package.model_dump(mode="json")


@router.get("/document/{document_id}")
def view_document(document_id: str):
    """Redirect to the ORI watermarked PDF."""
    return RedirectResponse(ORIApiScraper.get_pdf_url(document_id), status_code=302)


@router.get("/document/{document_id}/download")
def download_document(document_id: str, scraper: ORIApiScraper = Depends(get_scraper)):
    """Proxy the PDF as an attachment."""
    try:
        content = scraper.download_pdf(document_id)
    except OriSearchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="document-{document_id}.pdf"'},
    )
