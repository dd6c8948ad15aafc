"""Recursive directory cleanup.

:func:`clean` purges each target directory bottom-up: immediate files first,
then subdirectories (recursively), then the emptied target itself.  Failures
on individual entries are reported through the sink and never abort the run.
"""
from __future__ import annotations

import logging
import os
import shutil
from typing import Callable, Iterable

from .models import CleanupSummary, CleanupTarget, ProgressEvent


LOGGER = logging.getLogger("build_nuke")

DEFAULT_MAX_ATTEMPTS = 3

ProgressSink = Callable[[ProgressEvent], None]


def _list_children(path: str) -> tuple[list[str], list[str]]:
    """Split the immediate children of *path* into (files, directories)."""
    files: list[str] = []
    directories: list[str] = []
    with os.scandir(path) as entries:
        for entry in entries:
            # Links are removed as entries, never followed.
            if entry.is_dir(follow_symlinks=False):
                directories.append(entry.path)
            else:
                files.append(entry.path)
    return sorted(files), sorted(directories)


def _delete_file(path: str) -> None:
    os.unlink(path)


def _delete_tree(path: str) -> None:
    shutil.rmtree(path)


def _remove_dir(path: str) -> None:
    os.rmdir(path)


def _unlink_target(root: str, *, emit: ProgressSink, summary: CleanupSummary, verbose: bool) -> None:
    """Remove a linked target as an entry; the directory it points to is left alone."""
    try:
        _delete_file(root)
    except OSError as exc:
        LOGGER.warning("[NUKE]: Delete failed for link '%s': %s", root, exc)
        emit(ProgressEvent.failure(root, exc, is_directory=True))
        return
    summary.directories_removed += 1
    if verbose:
        emit(ProgressEvent.directory_deleted(root))


def _clean_target(
    root: str,
    *,
    emit: ProgressSink,
    summary: CleanupSummary,
    verbose: bool,
    max_attempts: int,
) -> None:
    attempts = 0
    while os.path.isdir(root):
        if attempts >= max_attempts:
            LOGGER.warning("[NUKE]: '%s' still present after %d attempts", root, max_attempts)
            emit(
                ProgressEvent.failure(
                    root,
                    f"directory still exists after {max_attempts} attempts",
                    is_directory=True,
                    aborted_target=True,
                )
            )
            return
        attempts += 1

        try:
            files, directories = _list_children(root)
        except OSError as exc:
            LOGGER.warning("[NUKE]: Unable to list '%s': %s", root, exc)
            emit(ProgressEvent.failure(root, exc, is_directory=True, aborted_target=True))
            return

        for file_path in files:
            try:
                _delete_file(file_path)
            except OSError as exc:
                LOGGER.warning("[NUKE]: Delete failed for file '%s': %s", file_path, exc)
                emit(ProgressEvent.failure(file_path, exc, is_directory=False))
                continue
            summary.files_deleted += 1
            if verbose:
                emit(ProgressEvent.file_deleted(file_path))

        for dir_path in directories:
            try:
                _delete_tree(dir_path)
            except OSError as exc:
                LOGGER.warning("[NUKE]: Delete failed for directory '%s': %s", dir_path, exc)
                emit(ProgressEvent.failure(dir_path, exc, is_directory=True))
                continue
            if verbose:
                emit(ProgressEvent.directory_deleted(dir_path))

        try:
            _remove_dir(root)
        except OSError as exc:
            LOGGER.warning("[NUKE]: Delete failed for directory '%s': %s", root, exc)
            emit(ProgressEvent.failure(root, exc, is_directory=True))
            return

        if os.path.isdir(root):
            continue
        summary.directories_removed += 1
        if verbose:
            emit(ProgressEvent.directory_deleted(root))


def clean(
    targets: Iterable[CleanupTarget | str | os.PathLike],
    sink: ProgressSink,
    *,
    verbose: bool = True,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> CleanupSummary:
    """Delete every target directory and return the accumulated counts.

    Targets that do not exist are skipped without an event.  ``verbose``
    gates the success events; failures always reach *sink*.  Only the
    removal of a target itself increments ``directories_removed``; nested
    directories are removed as part of it.  A target that is a symbolic
    link is unlinked rather than followed.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    summary = CleanupSummary()
    for item in targets:
        root = CleanupTarget.coerce(item).path
        if os.path.islink(root) and os.path.isdir(root):
            summary.roots_processed += 1
            _unlink_target(root, emit=sink, summary=summary, verbose=verbose)
            continue
        if not os.path.isdir(root):
            LOGGER.debug("[NUKE]: Skipping missing target '%s'", root)
            continue

        summary.roots_processed += 1
        LOGGER.debug("[NUKE]: Cleaning '%s'", root)
        _clean_target(
            root,
            emit=sink,
            summary=summary,
            verbose=verbose,
            max_attempts=max_attempts,
        )
    return summary
