"""
Abstract Base Class for Report Generators.

Every report format renders the same data store and scope to a text buffer.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, TextIO

from miners.models import DataStore, Scope


def format_date(value: Optional[datetime]) -> str:
    """Render a timestamp as ``YYYY-MM-DD``; missing dates render empty."""
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


class ReportGenerator(ABC):
    """Base class for report formats."""

    @abstractmethod
    def render(self, data_store: DataStore, scope: Scope, buffer: TextIO) -> None:
        """
        Write the report for a completed data store.

        Args:
            data_store (DataStore): Mining result, read only.
            scope (Scope): Window and requested label columns.
            buffer (TextIO): Output sink.
        """
        pass
