"""Flask REST API for ReplayBridge.

Thin validation and dispatch layer between the operator UI and the vMix
command layer. Every JSON response carries ``ok`` plus either a result or
an ``error`` message.
"""

import logging
import os
from functools import wraps

from flask import Flask, abort, jsonify, request, send_from_directory

from replaybridge.config import Config
from replaybridge.server.commands import ReplayCommands, ValidationError, validate_highlight
from replaybridge.server.host_store import HostStore, is_valid_host, normalize_host
from replaybridge.server.reel_watcher import ReelReturnWatcher
from replaybridge.server.vmix_client import VmixClient, VmixError

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    client: VmixClient | None = None,
    host_store: HostStore | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Full configuration. Uses defaults if None.
        client: vMix client. Built from ``config.vmix`` if None.
        host_store: Persisted host record. Built from ``config.server.host_file`` if None.
    """
    if config is None:
        config = Config()
    server_cfg = config.server

    app = Flask(__name__, static_folder=None)
    app.config["REPLAYBRIDGE"] = config

    if host_store is None:
        host_store = HostStore(server_cfg.host_file)
    saved_host = host_store.load()
    if saved_host:
        config.vmix.host = saved_host

    if client is None:
        client = VmixClient(config.vmix.host, config.vmix.port, timeout=config.vmix.timeout)
    elif saved_host:
        client.set_host(saved_host)

    rr = config.reel_return
    watcher = ReelReturnWatcher(
        client,
        poll_interval=rr.poll_ms / 1000,
        buffer_delay=rr.buffer_ms / 1000,
        max_wait=rr.max_wait_ms / 1000,
    )
    commands = ReplayCommands(client, watcher, config.replay)

    app.vmix = client
    app.watcher = watcher
    app.commands = commands
    app.host_store = host_store

    def error(message: str, status: int):
        return jsonify({"ok": False, "error": message}), status

    def require_auth(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = server_cfg.auth_token
            if token:
                header = request.headers.get("Authorization", "")
                supplied = header[7:] if header.startswith("Bearer ") else ""
                if supplied != token:
                    return error("Unauthorized", 401)
            return view(*args, **kwargs)
        return wrapper

    # Global JSON error handler so clients never get HTML 500s
    @app.errorhandler(Exception)
    def handle_exception(e):
        from werkzeug.exceptions import HTTPException
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error: %s", e)
        return error(str(e), 500)

    # Allow the web UI to be served from a different origin
    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        return response

    # --- Health / Config ---

    @app.route("/health")
    def health():
        """Report configuration. Does not call vMix."""
        s = config.replay
        return jsonify({
            "ok": True,
            "vmix": client.base_url,
            "vmixHost": client.host,
            "vmixHostConfig": host_store.path,
            "highlightsList": s.highlights_list,
            "duplicateHighlightsList": s.duplicate_highlights_list,
            "reelPlayList": s.reel_play_list,
            "camA": s.cam_a,
            "camB": s.cam_b,
            "authEnabled": bool(server_cfg.auth_token),
        })

    @app.route("/api/config/vmix")
    @require_auth
    def get_vmix_config():
        return jsonify({
            "ok": True,
            "vmixHost": client.host,
            "vmixPort": client.port,
            "vmixHostConfig": host_store.path,
        })

    @app.route("/api/config/vmix", methods=["POST"])
    @require_auth
    def set_vmix_config():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        host = normalize_host(data.get("vmixHost"))
        if not host:
            return error("vmixHost is required", 400)
        if not is_valid_host(host):
            return error("vmixHost must be a hostname or IP address without port, path or spaces", 400)
        try:
            host_store.save(host)
        except OSError as e:
            logger.exception("Failed to save vMix host: %s", e)
            return error(str(e), 500)
        client.set_host(host)
        config.vmix.host = host
        return jsonify({"ok": True, "vmixHost": host, "vmixPort": client.port})

    # --- Highlights ---

    @app.route("/api/highlight", methods=["POST"])
    @require_auth
    def highlight():
        """One request = one highlight."""
        try:
            req = validate_highlight(request.get_json(silent=True))
        except ValidationError as e:
            return error(str(e), 400)
        try:
            commands.mark_highlight(req)
        except VmixError as e:
            logger.warning("Highlight %s failed: %s", req.label, e)
            return error(str(e), 500)
        return jsonify({"ok": True})

    # --- Reel ---

    @app.route("/api/reel/status")
    @require_auth
    def reel_status():
        try:
            result = commands.reel_status()
        except VmixError as e:
            return error(str(e), 500)
        return jsonify({"ok": True, **result})

    @app.route("/api/reel/play", methods=["POST"])
    @require_auth
    def reel_play():
        try:
            commands.play_reel()
        except VmixError as e:
            logger.warning("Reel play failed: %s", e)
            return error(str(e), 500)
        return jsonify({"ok": True})

    @app.route("/api/reel/stop", methods=["POST"])
    @require_auth
    def reel_stop():
        try:
            commands.stop_reel()
        except VmixError as e:
            logger.warning("Reel stop failed: %s", e)
            return error(str(e), 500)
        return jsonify({"ok": True})

    # --- Web UI (optional build output) ---

    static_dir = server_cfg.static_dir

    @app.route("/", defaults={"path": ""})
    @app.route("/<path:path>")
    def web_ui(path):
        if not static_dir or not os.path.isdir(static_dir):
            abort(404)
        if path and os.path.isfile(os.path.join(static_dir, path)):
            return send_from_directory(static_dir, path)
        if path.startswith("api/"):
            abort(404)
        return send_from_directory(static_dir, "index.html")

    return app
