"""
Main entry point for running the Flask server when executed as a module:

    python -m server.app --port 8000 --no-preload
"""
import argparse

from server.app_factory import create_app


def build_overrides(args) -> dict:
    """Translate command-line flags into ``app.config`` overrides."""
    overrides = {}
    if args.no_preload:
        overrides['PRELOAD_ENABLED'] = False
    if args.database:
        overrides['DATABASE_PATH'] = args.database
    if args.threshold is not None:
        overrides['SEARCH_ACCEPT_THRESHOLD'] = args.threshold
    return overrides


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the Quran Companion API server.")
    parser.add_argument("--host", type=str, default=None, help="Hostname to listen on (default: from config or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: from config or 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode (Flask debug, DEBUG logging)")
    parser.add_argument("--no-preload", action="store_true", help="Do not preload chapter text at startup")
    parser.add_argument("--database", type=str, default=None, help="SQLite file for user data")
    parser.add_argument("--threshold", type=float, default=None, help="Minimum score for a search match")

    args = parser.parse_args()

    app = create_app(config_object=build_overrides(args), debug_mode=args.debug)

    host = args.host or app.config.get('HOST', '0.0.0.0')
    port = args.port or app.config.get('PORT', 5000)

    # The reloader would start a second preloader in the child process
    app.run(host=host, port=port, debug=args.debug, use_reloader=False)
