"""Error kinds raised by the store and controller.

All of them derive from :class:`TaskListError` so the CLI can turn any of
them into a user-facing notice instead of a traceback.
"""

from __future__ import annotations


class TaskListError(Exception):
    """Base class for recoverable tasklist failures."""


class ImportExportError(TaskListError):
    """Failures of the portable import/export document."""


class EmptyCollectionError(ImportExportError):
    def __init__(self, message: str = "No tasks to export.") -> None:
        super().__init__(message)


class MalformedDocumentError(ImportExportError):
    def __init__(self, message: str = "Import file is not valid JSON.") -> None:
        super().__init__(message)


class InvalidShapeError(ImportExportError):
    def __init__(self, message: str = "Import file must contain a JSON array of tasks.") -> None:
        super().__init__(message)


class NoValidRecordsError(ImportExportError):
    def __init__(self, message: str = "Import file contains no valid tasks.") -> None:
        super().__init__(message)


class ImportInProgressError(TaskListError):
    def __init__(self, message: str = "Another import is still in progress.") -> None:
        super().__init__(message)


class PersistenceWriteWarning(TaskListError):
    """Saving to the durable slot failed; in-memory state is still valid."""
