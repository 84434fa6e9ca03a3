"""
Report API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response

from site_inspector.config import settings
from site_inspector.logger import logger
from site_inspector.schemas.environment import EnvironmentSnapshot
from site_inspector.schemas.report import ReportResponse
from site_inspector.services.environment import SnapshotEnvironment
from site_inspector.services.probe import Prober
from site_inspector.services.report_generator import ReportGenerator
from site_inspector.services.report_service import ReportService

router = APIRouter(tags=["Report"])


def get_prober() -> Prober:
    return Prober(settings)


def get_report_service(prober: Prober = Depends(get_prober)) -> ReportService:
    """Report service for the configured snapshot file."""
    try:
        return ReportService.from_settings(settings, prober=prober)
    except FileNotFoundError:
        logger.warning(f"Snapshot not found at {settings.SITE_SNAPSHOT_PATH}")
        raise HTTPException(status_code=404, detail="Environment snapshot not found")
    except ValueError as e:
        logger.warning(f"Invalid snapshot at {settings.SITE_SNAPSHOT_PATH}: {e}")
        raise HTTPException(status_code=422, detail=f"Invalid environment snapshot: {e}")


@router.get("", response_model=ReportResponse)
async def get_report(service: ReportService = Depends(get_report_service)):
    """Audit the configured site."""
    report = await service.generate()
    return ReportResponse.from_report(report)


@router.post("", response_model=ReportResponse)
async def post_report(snapshot: EnvironmentSnapshot, prober: Prober = Depends(get_prober)):
    """Audit the site described by the posted snapshot."""
    service = ReportService(SnapshotEnvironment(snapshot), settings=settings, prober=prober)
    report = await service.generate()
    return ReportResponse.from_report(report)


@router.get("/html", response_class=HTMLResponse)
async def get_report_html(service: ReportService = Depends(get_report_service)):
    """Audit report as an HTML page."""
    report = await service.generate()
    return HTMLResponse(ReportGenerator().render_html(report))


@router.get("/pdf")
async def get_report_pdf(service: ReportService = Depends(get_report_service)):
    """Audit report as PDF."""
    report = await service.generate()
    pdf_bytes = ReportGenerator().generate_pdf(report)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": "attachment; filename=site_inspector_report.pdf"
        }
    )
