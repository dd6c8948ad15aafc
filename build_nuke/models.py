from __future__ import annotations

import enum
import os
from dataclasses import dataclass


class EventKind(str, enum.Enum):
    FILE_DELETED = "file_deleted"
    DIRECTORY_DELETED = "directory_deleted"
    FAILURE = "failure"


class FailureKind(str, enum.Enum):
    PERMISSION_DENIED = "permission_denied"
    GENERIC = "generic"


@dataclass(frozen=True)
class CleanupTarget:
    path: str

    @classmethod
    def coerce(cls, value: CleanupTarget | str | os.PathLike) -> CleanupTarget:
        if isinstance(value, CleanupTarget):
            return value
        return cls(path=os.fspath(value))


@dataclass
class CleanupSummary:
    roots_processed: int = 0
    directories_removed: int = 0
    files_deleted: int = 0

    def merge(self, other: CleanupSummary) -> CleanupSummary:
        self.roots_processed += other.roots_processed
        self.directories_removed += other.directories_removed
        self.files_deleted += other.files_deleted
        return self

    def to_dict(self) -> dict[str, int]:
        return {
            "roots_processed": self.roots_processed,
            "directories_removed": self.directories_removed,
            "files_deleted": self.files_deleted,
        }


@dataclass(frozen=True)
class ProgressEvent:
    kind: EventKind
    path: str
    is_directory: bool = False
    failure_kind: FailureKind | None = None
    error: str | None = None
    aborted_target: bool = False

    @classmethod
    def file_deleted(cls, path: str) -> ProgressEvent:
        return cls(kind=EventKind.FILE_DELETED, path=path)

    @classmethod
    def directory_deleted(cls, path: str) -> ProgressEvent:
        return cls(kind=EventKind.DIRECTORY_DELETED, path=path, is_directory=True)

    @classmethod
    def failure(
        cls,
        path: str,
        exc: BaseException | str,
        *,
        is_directory: bool,
        aborted_target: bool = False,
    ) -> ProgressEvent:
        if isinstance(exc, PermissionError):
            failure_kind = FailureKind.PERMISSION_DENIED
        else:
            failure_kind = FailureKind.GENERIC
        error = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return cls(
            kind=EventKind.FAILURE,
            path=path,
            is_directory=is_directory,
            failure_kind=failure_kind,
            error=error,
            aborted_target=aborted_target,
        )

    @property
    def is_failure(self) -> bool:
        return self.kind is EventKind.FAILURE

    @property
    def message(self) -> str:
        noun = "directory" if self.is_directory else "file"
        if self.is_failure:
            return f"Delete Failed ({self.error}) for {noun} '{self.path}'"
        return f"Removed {noun} '{self.path}'"
