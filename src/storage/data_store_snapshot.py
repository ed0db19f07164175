"""
Data Store Snapshot Module.

Persists the result of a mining pass as a single JSON document so a report can
be rendered again, in any format, without querying GitHub a second time. The
scope the data was mined for is stored with it.
"""

from pathlib import Path
from typing import Union

from pydantic import BaseModel

from config import logger
from miners.models import DataStore, Scope


class SnapshotDocument(BaseModel):
    """A mined data store together with the scope it was mined for."""

    scope: Scope
    data_store: DataStore


class DataStoreSnapshot:
    """
    Saves and loads one data store snapshot file.

    Attributes:
        path (Path): Location of the JSON snapshot.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the snapshot location.

        Args:
            path (Union[str, Path]): Snapshot file path; parent directories are
                created on save.
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, data_store: DataStore, scope: Scope) -> None:
        """Write the data store, replacing any previous snapshot.

        Args:
            data_store (DataStore): Completed mining result.
            scope (Scope): Scope the data store was mined for.

        Raises:
            Exception: If the write fails.
        """
        try:
            document = SnapshotDocument(scope=scope, data_store=data_store)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(document.model_dump_json(indent=2), encoding="utf-8")

            logger.info(
                {
                    "message": "Data store snapshot saved",
                    "file": str(self.path),
                    "repositories": scope.repository_names,
                    "issues": len(data_store.issues),
                    "pull_requests": len(data_store.pull_requests),
                }
            )

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to save data store snapshot",
                    "file": str(self.path),
                    "error": str(e),
                }
            )
            raise

    def load(self) -> SnapshotDocument:
        """Read the snapshot back.

        Returns:
            SnapshotDocument: The stored scope and data store, records in
                insertion order.

        Raises:
            Exception: If the file is missing or not a valid snapshot.
        """
        try:
            document = SnapshotDocument.model_validate_json(
                self.path.read_text(encoding="utf-8")
            )

            logger.info(
                {
                    "message": "Data store snapshot loaded",
                    "file": str(self.path),
                    "repositories": document.scope.repository_names,
                    "issues": len(document.data_store.issues),
                    "pull_requests": len(document.data_store.pull_requests),
                }
            )
            return document

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to load data store snapshot",
                    "file": str(self.path),
                    "error": str(e),
                }
            )
            raise
