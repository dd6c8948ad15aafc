from __future__ import annotations

import threading

from flask import Blueprint, jsonify, request

from .command import run_nuke
from .config import NukeConfig, parse_boolish
from .discovery import DiscoveryError, SolutionNotFoundError, discover_projects


def _parse_nuke_payload(payload: dict, *, config: NukeConfig) -> dict:
    path = str(payload.get("path") or "").strip()
    verbose = payload.get("verbose")

    if not path:
        raise ValueError("path is required")
    if verbose is not None and not isinstance(verbose, (bool, str)):
        raise ValueError("verbose must be a boolean")

    if verbose is None:
        resolved_verbose = config.verbose
    elif isinstance(verbose, bool):
        resolved_verbose = verbose
    else:
        resolved_verbose = parse_boolish(verbose, default=config.verbose)

    return {"path": path, "verbose": resolved_verbose}


def create_api_blueprint(*, config: NukeConfig) -> Blueprint:
    blueprint = Blueprint("build_nuke_api", __name__)
    run_lock = threading.Lock()

    @blueprint.post("/nuke")
    def nuke() -> tuple:
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return jsonify({"error": "payload must be an object"}), 400
        try:
            parsed = _parse_nuke_payload(payload, config=config)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

        try:
            projects = discover_projects(parsed["path"])
        except SolutionNotFoundError as exc:
            return jsonify({"error": str(exc)}), 404
        except DiscoveryError as exc:
            return jsonify({"error": str(exc)}), 400

        lines: list[str] = []
        with run_lock:
            report = run_nuke(
                projects,
                lines.append,
                verbose=parsed["verbose"],
                max_attempts=config.max_attempts,
            )

        body = {"status": "ok", "lines": lines}
        body.update(report.to_dict())
        return jsonify(body), 200

    @blueprint.get("/health")
    def health() -> tuple:
        return (
            jsonify(
                {
                    "status": "ok",
                    "running": run_lock.locked(),
                }
            ),
            200,
        )

    return blueprint
