from __future__ import annotations

from pathlib import Path

from build_nuke import command, engine
from build_nuke.discovery import Project
from build_nuke.models import CleanupSummary


def _write_file(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")


def _project(root: Path, name: str) -> Project:
    directory = root / name
    directory.mkdir(parents=True, exist_ok=True)
    project_file = directory / f"{name}.csproj"
    project_file.write_text("<Project />", encoding="utf-8")
    return Project(name=name, file_name=str(project_file), directory=str(directory))


def test_format_summary_matches_output_pane_text() -> None:
    summary = CleanupSummary(roots_processed=4, directories_removed=3, files_deleted=7)
    assert command.format_summary(summary, 2) == (
        "Top Level Files Deleted: 7\nDirectories Removed: 3\nProjects Cleaned: 2\n"
    )


def test_run_nuke_cleans_bin_and_obj_of_each_project(tmp_path: Path) -> None:
    app = _project(tmp_path, "App")
    lib = _project(tmp_path, "Lib")
    _write_file(Path(app.directory) / "bin" / "App.dll")
    _write_file(Path(app.directory) / "obj" / "project.assets.json")
    _write_file(Path(lib.directory) / "bin" / "Debug" / "Lib.dll")
    folder = Project(name="Solution Items", file_name="", directory="")

    lines: list[str] = []
    report = command.run_nuke([app, folder, lib], lines.append, verbose=True)

    assert report.projects_cleaned == 2
    assert report.summary.roots_processed == 3
    assert report.summary.directories_removed == 3
    assert report.summary.files_deleted == 2
    assert report.failures == 0
    assert report.notices == []

    assert lines[0] == command.BEGIN_BANNER
    assert lines[-2] == command.END_BANNER
    assert lines[-1] == "Top Level Files Deleted: 2\nDirectories Removed: 3\nProjects Cleaned: 2\n"
    assert f"Removed file '{Path(app.directory) / 'bin' / 'App.dll'}'" in lines
    assert (Path(app.directory) / "App.csproj").exists() is True
    assert (Path(app.directory) / "bin").exists() is False


def test_run_nuke_quiet_prints_only_banners_and_summary(tmp_path: Path) -> None:
    app = _project(tmp_path, "App")
    _write_file(Path(app.directory) / "bin" / "App.dll")

    lines: list[str] = []
    command.run_nuke([app], lines.append, verbose=False)

    assert lines == [
        command.BEGIN_BANNER,
        command.END_BANNER,
        "Top Level Files Deleted: 1\nDirectories Removed: 1\nProjects Cleaned: 1\n",
    ]


def test_run_nuke_locked_files_show_only_the_permission_notice(tmp_path: Path, monkeypatch) -> None:
    first = _project(tmp_path, "First")
    second = _project(tmp_path, "Second")
    for project in (first, second):
        _write_file(Path(project.directory) / "obj" / "locked.dll")

    def fake_delete(path: str) -> None:
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(engine, "_delete_file", fake_delete)

    notices: list[tuple[str, str]] = []
    lines: list[str] = []
    report = command.run_nuke(
        [first, second],
        lines.append,
        notify=lambda title, message: notices.append((title, message)),
    )

    # file + obj directory failure per project
    assert report.failures == 4
    assert report.projects_cleaned == 2
    assert report.summary.directories_removed == 0
    assert notices == [(command.PERMISSION_NOTICE_TITLE, command.PERMISSION_NOTICE_MESSAGE)]
    assert report.notices == [command.PERMISSION_NOTICE_MESSAGE]
    assert sum(1 for line in lines if line.startswith("Delete Failed")) == 4


def test_run_nuke_busy_directory_alone_shows_no_notice(tmp_path: Path, monkeypatch) -> None:
    app = _project(tmp_path, "App")
    _write_file(Path(app.directory) / "bin" / "Debug" / "App.dll")

    def fake_delete_tree(path: str) -> None:
        raise OSError(16, "Device or resource busy", path)

    monkeypatch.setattr(engine, "_delete_tree", fake_delete_tree)

    notices: list[tuple[str, str]] = []
    report = command.run_nuke([app], lambda line: None, notify=lambda title, message: notices.append((title, message)))

    assert report.failures == 2
    assert report.projects_cleaned == 1
    assert notices == []


def test_run_nuke_gives_up_on_project_shows_generic_notice_once(tmp_path: Path, monkeypatch) -> None:
    first = _project(tmp_path, "First")
    second = _project(tmp_path, "Second")
    for project in (first, second):
        (Path(project.directory) / "bin").mkdir()

    monkeypatch.setattr(engine, "_remove_dir", lambda path: None)

    notices: list[tuple[str, str]] = []
    report = command.run_nuke(
        [first, second],
        lambda line: None,
        max_attempts=1,
        notify=lambda title, message: notices.append((title, message)),
    )

    assert report.failures == 2
    assert report.projects_cleaned == 0
    assert notices == [(command.GENERIC_NOTICE_TITLE, command.GENERIC_NOTICE_MESSAGE)]


def test_run_nuke_does_not_count_project_with_unlistable_target(tmp_path: Path, monkeypatch) -> None:
    blocked = _project(tmp_path, "Blocked")
    fine = _project(tmp_path, "Fine")
    _write_file(Path(blocked.directory) / "obj" / "a.cache")
    _write_file(Path(fine.directory) / "obj" / "b.cache")

    real_list = engine._list_children

    def fake_list(path: str):
        if "Blocked" in path:
            raise PermissionError(13, "Permission denied", path)
        return real_list(path)

    monkeypatch.setattr(engine, "_list_children", fake_list)

    notices: list[str] = []
    lines: list[str] = []
    report = command.run_nuke([blocked, fine], lines.append, notify=lambda title, message: notices.append(message))

    assert report.projects_cleaned == 1
    assert report.summary.roots_processed == 2
    assert report.summary.files_deleted == 1
    assert notices == [command.PERMISSION_NOTICE_MESSAGE]
    assert lines[-1].endswith("Projects Cleaned: 1\n")

def test_run_nuke_without_projects_reports_zeros() -> None:
    lines: list[str] = []
    report = command.run_nuke([], lines.append)

    assert report.projects_cleaned == 0
    assert lines[-1] == "Top Level Files Deleted: 0\nDirectories Removed: 0\nProjects Cleaned: 0\n"
