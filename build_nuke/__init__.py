from .command import NukeReport, format_summary, run_nuke
from .discovery import DiscoveryError, Project, SolutionNotFoundError, discover_projects, get_target_paths
from .engine import DEFAULT_MAX_ATTEMPTS, clean
from .models import CleanupSummary, CleanupTarget, EventKind, FailureKind, ProgressEvent


__all__ = [
    "CleanupSummary",
    "CleanupTarget",
    "DEFAULT_MAX_ATTEMPTS",
    "DiscoveryError",
    "EventKind",
    "FailureKind",
    "NukeReport",
    "Project",
    "ProgressEvent",
    "SolutionNotFoundError",
    "clean",
    "discover_projects",
    "format_summary",
    "get_target_paths",
    "run_nuke",
]
