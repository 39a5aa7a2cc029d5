"""Flask application factory for the simulator's JSON API.

The ``create_app`` function builds (or accepts) a ``DiskSimulator``
and returns a Flask app with these endpoints:

- ``GET /api/state`` — configuration, playback state, positions, ranking.
- ``GET /api/results`` — all six policy results.
- ``GET /api/chart`` — per-step chart rows up to the current step.
- ``GET /api/log`` — recent events.
- ``POST /api/requests`` — queue a request for a cylinder.
- ``DELETE /api/requests`` / ``DELETE /api/requests/<id>`` — purge or remove.
- ``POST /api/config`` — change head, disk size or direction.
- ``POST /api/presets/<name>`` — load a preset workload.
- ``POST /api/playback`` — play, pause, toggle, reset, start, speed.
- ``POST /api/tick`` — feed elapsed milliseconds to playback.
"""

from __future__ import annotations

import math
from typing import Any

from flask import Flask, Response, jsonify, request

from py_disksim.simulator import DiskSimulator

_HTTP_CREATED = 201
_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404

_PLAYBACK_ACTIONS = ("play", "pause", "toggle", "reset", "start")


def _error(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"error": message}), status


def _state(sim: DiskSimulator) -> dict[str, Any]:
    """Build the state payload the front end polls."""
    summary = sim.summary()
    return {
        "config": sim.snapshot(),
        "step": sim.playback.step,
        "max_step": sim.playback.max_step,
        "state": str(sim.playback.state),
        "speed": sim.playback.speed,
        "interval_ms": sim.playback.interval_ms,
        "positions": {str(name): pos for name, pos in sim.positions().items()},
        "ranking": [entry.to_dict() for entry in sim.ranking()],
        "summary": summary.text,
    }


def create_app(simulator: DiskSimulator | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        simulator: Simulator to serve; a default one is built if None.

    Returns:
        A configured Flask application ready to serve.

    """
    sim = simulator if simulator is not None else DiskSimulator()

    app = Flask(__name__)
    # Policy maps must keep declaration order (FCFS first, C-LOOK last)
    app.json.sort_keys = False  # pyright: ignore[reportAttributeAccessIssue]

    @app.route("/api/state")
    def state() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the current simulator state."""
        return jsonify(_state(sim))

    @app.route("/api/results")
    def results() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return every policy's result."""
        return jsonify({str(name): res.to_dict() for name, res in sim.results.items()})

    @app.route("/api/chart")
    def chart() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return chart rows up to the current step."""
        return jsonify(sim.chart_rows())

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return retained log entries, newest first."""
        return jsonify([entry.to_dict() for entry in reversed(sim.logger.entries)])

    @app.route("/api/requests", methods=["POST"])
    def add_request() -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Queue a request.

        Expects JSON body: ``{"cylinder": n}``

        """
        data = request.get_json(silent=True)
        if data is None or "cylinder" not in data:
            return _error("Missing 'cylinder' field", _HTTP_BAD_REQUEST)
        try:
            req = sim.add_request(int(data["cylinder"]))
        except (TypeError, ValueError) as exc:
            return _error(str(exc), _HTTP_BAD_REQUEST)
        return jsonify(req.to_dict()), _HTTP_CREATED

    @app.route("/api/requests", methods=["DELETE"])
    def clear_requests() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Drop every request."""
        sim.clear_requests()
        return jsonify(_state(sim))

    @app.route("/api/requests/<request_id>", methods=["DELETE"])
    def remove_request(request_id: str) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Remove one request by id."""
        try:
            removed = sim.remove_request(request_id)
        except KeyError:
            return _error(f"No request with id '{request_id}'", _HTTP_NOT_FOUND)
        return jsonify(removed.to_dict())

    @app.route("/api/config", methods=["POST"])
    def configure() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Change head, disk size or direction.

        Expects JSON body with any of ``initial_head``, ``disk_size``,
        ``direction``.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Expected a JSON object", _HTTP_BAD_REQUEST)
        try:
            sim.configure(
                initial_head=int(data["initial_head"]) if "initial_head" in data else None,
                disk_size=int(data["disk_size"]) if "disk_size" in data else None,
                direction=data.get("direction"),
            )
        except (TypeError, ValueError) as exc:
            return _error(str(exc), _HTTP_BAD_REQUEST)
        return jsonify(_state(sim))

    @app.route("/api/presets/<name>", methods=["POST"])
    def load_preset(name: str) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Replace the workload with a named preset."""
        try:
            sim.load_preset(name)
        except ValueError as exc:
            return _error(str(exc), _HTTP_NOT_FOUND)
        return jsonify(_state(sim))

    @app.route("/api/playback", methods=["POST"])
    def playback() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Drive playback.

        Expects JSON body: ``{"action": "play"|"pause"|"toggle"|"reset"|"start"}``
        and/or ``{"speed": x}``.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or ("action" not in data and "speed" not in data):
            return _error("Missing 'action' or 'speed' field", _HTTP_BAD_REQUEST)

        if "speed" in data:
            try:
                sim.set_speed(float(data["speed"]))
            except (TypeError, ValueError) as exc:
                return _error(str(exc), _HTTP_BAD_REQUEST)

        action = data.get("action")
        if action is not None:
            match action:
                case "play":
                    sim.play()
                case "pause":
                    sim.pause()
                case "toggle":
                    sim.toggle()
                case "reset":
                    sim.reset()
                case "start":
                    sim.jump_start()
                case _:
                    allowed = ", ".join(_PLAYBACK_ACTIONS)
                    return _error(f"Unknown action '{action}' (expected one of: {allowed})", _HTTP_BAD_REQUEST)
        return jsonify(_state(sim))

    @app.route("/api/tick", methods=["POST"])
    def tick() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Advance playback by elapsed time.

        Expects JSON body: ``{"elapsed_ms": n}``

        """
        data = request.get_json(silent=True)
        if data is None or "elapsed_ms" not in data:
            return _error("Missing 'elapsed_ms' field", _HTTP_BAD_REQUEST)
        try:
            elapsed = float(data["elapsed_ms"])
        except (TypeError, ValueError):
            return _error("'elapsed_ms' must be a number", _HTTP_BAD_REQUEST)
        if not math.isfinite(elapsed) or elapsed < 0:
            return _error("'elapsed_ms' must be a finite, non-negative number", _HTTP_BAD_REQUEST)
        advanced = sim.tick(elapsed)
        payload = _state(sim)
        payload["advanced"] = advanced
        return jsonify(payload)

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-disksim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
