from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path


LOGGER = logging.getLogger("build_nuke")

TARGET_DIRECTORY_NAMES = ("bin", "obj")
PROJECT_FILE_SUFFIXES = (".csproj", ".vbproj", ".fsproj", ".vcxproj")
SOLUTION_FOLDER_TYPE_GUID = "2150E333-8FDC-42A3-9474-1A3956D46DE8"

_SOLUTION_PROJECT_PATTERN = re.compile(
    r'^\s*Project\("\{(?P<type_guid>[^}]+)\}"\)\s*=\s*'
    r'"(?P<name>[^"]*)"\s*,\s*"(?P<path>[^"]*)"\s*,\s*"\{(?P<guid>[^}]+)\}"',
    re.MULTILINE,
)


class DiscoveryError(Exception):
    pass


class SolutionNotFoundError(DiscoveryError):
    pass


@dataclass(frozen=True)
class Project:
    name: str
    file_name: str
    directory: str


def get_target_paths(project_dir: str | os.PathLike) -> list[str]:
    return [os.path.join(os.fspath(project_dir), name) for name in TARGET_DIRECTORY_NAMES]


def parse_solution(text: str, solution_dir: str | os.PathLike) -> list[Project]:
    """Return the projects declared by ``Project(...)`` lines of a ``.sln`` file.

    Solution folders and entries whose project file is missing on disk come
    back with an empty ``file_name``, the same way unloaded entries do in the
    IDE.
    """
    base = Path(solution_dir)
    out: list[Project] = []
    for match in _SOLUTION_PROJECT_PATTERN.finditer(text):
        name = match.group("name")
        type_guid = match.group("type_guid").upper()
        relative = match.group("path").replace("\\", "/").strip()

        if type_guid == SOLUTION_FOLDER_TYPE_GUID or not relative:
            out.append(Project(name=name, file_name="", directory=""))
            continue

        project_file = (base / relative).resolve()
        if not project_file.is_file():
            LOGGER.info("[NUKE]: Project '%s' is not loaded (missing %s)", name, project_file)
            out.append(Project(name=name, file_name="", directory=str(project_file.parent)))
            continue

        out.append(Project(name=name, file_name=str(project_file), directory=str(project_file.parent)))
    return out


def read_solution(solution_path: str | os.PathLike) -> list[Project]:
    path = Path(solution_path)
    if not path.is_file():
        raise SolutionNotFoundError(f"Solution not found: {path}")
    try:
        # Visual Studio writes solutions with a UTF-8 BOM.
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DiscoveryError(f"Unable to read solution {path}: {exc}") from exc
    return parse_solution(text, path.parent)


def _scan_project_files(root: Path) -> list[Project]:
    out: list[Project] = []
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            name for name in dirnames if name not in TARGET_DIRECTORY_NAMES and not name.startswith(".")
        )
        for filename in sorted(filenames):
            if filename.lower().endswith(PROJECT_FILE_SUFFIXES):
                project_file = Path(current) / filename
                out.append(
                    Project(
                        name=project_file.stem,
                        file_name=str(project_file.resolve()),
                        directory=str(project_file.parent.resolve()),
                    )
                )
    return out


def discover_projects(path: str | os.PathLike) -> list[Project]:
    """Resolve *path* (a ``.sln`` file or a directory) into its projects."""
    root = Path(path)
    if root.is_file():
        if root.suffix.lower() != ".sln":
            raise DiscoveryError(f"Not a solution file: {root}")
        return read_solution(root)

    if not root.is_dir():
        raise SolutionNotFoundError(f"Path not found: {root}")

    solutions = sorted(item for item in root.iterdir() if item.is_file() and item.suffix.lower() == ".sln")
    if solutions:
        if len(solutions) > 1:
            LOGGER.info("[NUKE]: Several solutions in %s, using %s", root, solutions[0].name)
        return read_solution(solutions[0])

    projects = _scan_project_files(root)
    if not projects:
        raise SolutionNotFoundError(f"No solution or project files found under {root}")
    return projects

