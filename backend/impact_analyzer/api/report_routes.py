from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, Response

from impact_analyzer.models.analysis_models import AnalysisRecord, PdfRequest
from impact_analyzer.services.analysis_store import AnalysisStore
from impact_analyzer.services.pdf_generator import PDF_FILENAME, html_to_pdf
from impact_analyzer.services.report_renderer import render_report_html
from impact_analyzer.utils.dependencies import get_store

router = APIRouter()


def _get_record(analysis_id: str, store: AnalysisStore) -> AnalysisRecord:
    record = store.get(analysis_id)
    if not record:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return record


async def _pdf_response(html: str) -> Response:
    try:
        pdf = await html_to_pdf(html)
    except RuntimeError:
        return JSONResponse(status_code=500, content={"error": "Failed to generate PDF"})
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={PDF_FILENAME}"},
    )


@router.get("/analyze/{analysis_id}/report", response_class=HTMLResponse)
async def get_report_html(analysis_id: str, store: AnalysisStore = Depends(get_store)):
    """Printable HTML report for a stored analysis."""
    return HTMLResponse(render_report_html(_get_record(analysis_id, store)))


@router.get("/analyze/{analysis_id}/pdf")
async def get_report_pdf(analysis_id: str, store: AnalysisStore = Depends(get_store)):
    """Download a stored analysis as a PDF report."""
    html = render_report_html(_get_record(analysis_id, store))
    return await _pdf_response(html)


@router.post("/generate-pdf")
async def generate_pdf(req: PdfRequest):
    """Export report HTML rendered by the frontend as a PDF."""
    return await _pdf_response(req.html)
