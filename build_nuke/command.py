"""The "Nuke Build" command: purge ``bin``/``obj`` of every project in a solution.

The runner writes the same transcript the IDE output pane showed: a banner,
one line per deleted or failed entry, a closing banner and the summary.
Per-entry failures are only written to the transcript.  A permission failure,
or giving up on a target altogether, also raises a user notice, at most once
per kind per run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .discovery import Project, get_target_paths
from .engine import DEFAULT_MAX_ATTEMPTS, clean
from .models import CleanupSummary, FailureKind, ProgressEvent


LOGGER = logging.getLogger("build_nuke")

BEGIN_BANNER = "--- Beginning Build Nuke ---"
END_BANNER = "--- Build Nuke Completed ---"

PERMISSION_NOTICE_TITLE = "Something has gone wrong :("
PERMISSION_NOTICE_MESSAGE = (
    "Your current user does not have permissions to delete the bin/obj folders "
    "try restarting as administrator."
)
GENERIC_NOTICE_TITLE = "Something has gone wrong"
GENERIC_NOTICE_MESSAGE = "Something has gone wrong, please try again."

NOTICES: dict[FailureKind, tuple[str, str]] = {
    FailureKind.PERMISSION_DENIED: (PERMISSION_NOTICE_TITLE, PERMISSION_NOTICE_MESSAGE),
    FailureKind.GENERIC: (GENERIC_NOTICE_TITLE, GENERIC_NOTICE_MESSAGE),
}

OutputWriter = Callable[[str], None]
NoticePresenter = Callable[[str, str], None]


def format_summary(summary: CleanupSummary, projects_cleaned: int) -> str:
    return (
        f"Top Level Files Deleted: {summary.files_deleted}\n"
        f"Directories Removed: {summary.directories_removed}\n"
        f"Projects Cleaned: {projects_cleaned}\n"
    )


@dataclass
class NukeReport:
    summary: CleanupSummary = field(default_factory=CleanupSummary)
    projects_cleaned: int = 0
    failures: int = 0
    notices: list[str] = field(default_factory=list)

    @property
    def summary_text(self) -> str:
        return format_summary(self.summary, self.projects_cleaned)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "projects_cleaned": self.projects_cleaned,
            "failures": self.failures,
            "notices": list(self.notices),
        }


def _log_notice(title: str, message: str) -> None:
    LOGGER.warning("[NUKE]: %s %s", title, message)


def run_nuke(
    projects: Iterable[Project],
    output: OutputWriter,
    *,
    verbose: bool = False,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    notify: NoticePresenter | None = None,
) -> NukeReport:
    notify = notify or _log_notice
    report = NukeReport()
    shown: set[FailureKind] = set()
    aborted: list[str] = []

    def show_notice(failure_kind: FailureKind) -> None:
        if failure_kind in shown:
            return
        shown.add(failure_kind)
        title, message = NOTICES[failure_kind]
        report.notices.append(message)
        notify(title, message)

    def sink(event: ProgressEvent) -> None:
        output(event.message)
        if not event.is_failure:
            return
        report.failures += 1
        if event.aborted_target:
            aborted.append(event.path)
        if event.failure_kind is FailureKind.PERMISSION_DENIED:
            show_notice(FailureKind.PERMISSION_DENIED)
        elif event.aborted_target:
            show_notice(FailureKind.GENERIC)

    output(BEGIN_BANNER)
    for project in projects:
        if not project.file_name:
            continue
        LOGGER.debug("[NUKE]: Cleaning project '%s'", project.name)
        aborted.clear()
        summary = clean(
            get_target_paths(project.directory),
            sink,
            verbose=verbose,
            max_attempts=max_attempts,
        )
        report.summary.merge(summary)
        if aborted:
            LOGGER.warning("[NUKE]: Project '%s' not cleaned, gave up on %s", project.name, ", ".join(aborted))
            continue
        report.projects_cleaned += 1
    output(END_BANNER)
    output(report.summary_text)

    LOGGER.info(
        "[NUKE]: Cleaned %d projects, %d files deleted, %d directories removed, %d failures",
        report.projects_cleaned,
        report.summary.files_deleted,
        report.summary.directories_removed,
        report.failures,
    )
    return report
