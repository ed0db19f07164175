"""
Report Format Selection.

Adding a format means adding a ``ReportFormat`` member and its branch in
``generator_for``.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, TextIO

from config import logger
from miners.models import DataStore, Scope
from report.base import ReportGenerator
from report.csv_generator import CSVReportGenerator
from report.markdown_generator import MarkdownReportGenerator


class ReportFormat(Enum):
    """
    Supported report formats.

    Attributes:
        CSV: Quoted CSV, one row per issue and pull request
        MARKDOWN: Sectioned Markdown with unreferenced pull requests listed apart
    """

    CSV = "csv"
    MARKDOWN = "markdown"


def generator_for(
    report_format: ReportFormat, generated_at: Optional[datetime] = None
) -> ReportGenerator:
    """Return the generator of a format.

    Raises:
        ValueError: For a value that is not a ``ReportFormat`` member.
    """
    if report_format is ReportFormat.CSV:
        return CSVReportGenerator()
    if report_format is ReportFormat.MARKDOWN:
        return MarkdownReportGenerator(generated_at=generated_at)
    raise ValueError(f"Unsupported report format: {report_format!r}")


def render_report(
    report_format: ReportFormat,
    data_store: DataStore,
    scope: Scope,
    buffer: TextIO,
    generated_at: Optional[datetime] = None,
) -> None:
    """Render a completed data store in the requested format."""
    generator = generator_for(report_format, generated_at)
    logger.info(
        {
            "message": "Rendering report",
            "format": report_format.value,
            "issues": len(data_store.issues),
            "pull_requests": len(data_store.pull_requests),
        }
    )
    generator.render(data_store, scope, buffer)
