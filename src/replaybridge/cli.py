"""CLI entry points for ReplayBridge.

replaybridge-server: Runs the Flask bridge next to (or on) the vMix PC
replaybridge: Runs the Textual operator console
"""

import argparse
import logging
import sys


def run_server():
    """Entry point for replaybridge-server command."""
    parser = argparse.ArgumentParser(
        description="ReplayBridge server - vMix replay highlight and reel control API"
    )
    parser.add_argument(
        "--host", default=None, help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port", type=int, default=None, help="Port to listen on (default: 3001)"
    )
    parser.add_argument(
        "--config", default=None, help="Path to replaybridge.toml config file"
    )
    parser.add_argument(
        "--vmix-host", default=None,
        help="vMix PC hostname/IP for this run (a host saved from the UI still wins)"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug mode"
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)"
    )
    parser.add_argument(
        "--quiet", action="store_true",
        help="Suppress per-request werkzeug logs"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    from replaybridge.config import load_config
    from replaybridge.server.app import create_app

    config = load_config(args.config)

    # CLI args override config file and environment
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.vmix_host:
        config.vmix.host = args.vmix_host

    app = create_app(config)

    if args.quiet:
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    log = logging.getLogger("replaybridge")
    log.info("ReplayBridge running on http://%s:%d", config.server.host, config.server.port)
    log.info("Using vMix API: %s", app.vmix.base_url)
    if not config.server.auth_token:
        log.warning("AUTH_TOKEN not set; API is open to the LAN")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=args.debug,
        threaded=True,
        use_reloader=False,  # Don't reload - the reel watcher runs on a thread
    )


def run_tui():
    """Entry point for replaybridge console command."""
    parser = argparse.ArgumentParser(
        description="ReplayBridge console - one-tap highlight tagging for vMix replay"
    )
    parser.add_argument(
        "--host", default=None, help="Bridge host (default: from config or 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=None, help="Bridge port (default: from config or 3001)"
    )
    parser.add_argument(
        "--token", default=None, help="Bearer token if the bridge has AUTH_TOKEN set"
    )
    parser.add_argument(
        "--sport", default=None, help="Starting sport preset (GENERAL, FOOTBALL, MMA)"
    )
    parser.add_argument(
        "--config", default=None, help="Path to replaybridge.toml config file"
    )
    args = parser.parse_args()

    from replaybridge.config import load_config

    config = load_config(args.config)
    console = config.console

    host = args.host or console.bridge_host
    port = args.port or console.bridge_port
    token = args.token if args.token is not None else (console.auth_token or config.server.auth_token)
    sport = (args.sport or console.sport).upper()

    try:
        from replaybridge.tui.app import ReplayBridgeApp
    except ImportError:
        print("Console dependencies not installed. Install with:")
        print('  pip install "replaybridge[tui]"')
        sys.exit(1)

    app = ReplayBridgeApp(host=host, port=port, token=token, sport=sport)
    app.run()
