"""
Report Renderer — stored analysis → printable HTML report.

One section per report tab (overview, responsibilities, skills,
opportunities, threats, recommendations), laid out for A4 printing.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from impact_analyzer.models.analysis_models import AnalysisRecord

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def impact_color(score: float) -> str:
    """Colour band for an impact or risk score."""
    if score <= 50:
        return "#10B981"  # green
    if score <= 65:
        return "#F59E0B"  # amber
    return "#EF4444"  # red


def impact_label(score: float) -> str:
    if score <= 50:
        return "Low impact"
    if score <= 65:
        return "Moderate impact"
    return "High impact"


_env.filters["impact_color"] = impact_color
_env.filters["impact_label"] = impact_label


def render_report_html(record: AnalysisRecord) -> str:
    """Render a stored analysis as a standalone HTML document."""
    template = _env.get_template("report.html")
    return template.render(record=record, analysis=record.analysis)
