"""
Report Generator Service - Render audit reports as HTML or PDF.

HTML comes from a Jinja2 template; PDF converts that HTML with WeasyPrint.
"""

import os
from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_inspector.config import settings
from site_inspector.logger import logger
from site_inspector.services.scoring.engine import AuditReport

# Section headings in display order
SECTIONS = [
    ("performance", "Performance Audit"),
    ("security", "Security Audit"),
]


class ReportGenerator:
    """Generate HTML and PDF reports from an AuditReport."""

    def __init__(self):
        self.template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(["html"]),
        )

    def render_html(self, report: AuditReport) -> str:
        template = self.env.get_template("report.html")
        return template.render(
            app_name=settings.APP_NAME,
            report=report,
            date=report.started_at.strftime("%B %d, %Y"),
            classes=report.scores.classes(),
            sections=[(key, heading, getattr(report, key)) for key, heading in SECTIONS],
        )

    def generate_pdf(self, report: AuditReport) -> bytes:
        """Generate PDF bytes from an audit report.

        Returns:
            bytes: PDF file content
        """
        # WeasyPrint needs native libraries; only load it when a PDF is requested
        from weasyprint import HTML

        try:
            html_string = self.render_html(report)
            pdf_bytes = HTML(string=html_string, base_url=self.template_dir).write_pdf()
            logger.info(f"Generated PDF report for {report.site_url} ({len(pdf_bytes)} bytes)")
            return pdf_bytes
        except Exception as e:
            logger.error(f"Failed to generate PDF: {e}")
            raise
