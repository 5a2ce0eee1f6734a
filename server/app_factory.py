"""
Application Factory for creating the Flask app instance.
"""
import logging
import time
from flask import Flask, g
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich.panel import Panel

from config import TOTAL_CHAPTERS
from src.search.cache import TTLCache, CorpusStore
from src.search.engine import VerseSearchEngine
from src.search.preloader import CorpusPreloader
from src.search.scorers import CascadeScorer
from src.search.upstream import QuranApiClient
from server.utils.storage import Storage
from server.utils.logging_config import setup_logging, get_console, get_module_blocker_filter

# Import Blueprints
from server.routes.search import search_bp
from server.routes.quran import quran_bp
from server.routes.hadith import hadith_bp
from server.routes.user import user_bp
from server.routes.books import books_bp
from server.routes.health import health_bp


def create_app(config_object=None, debug_mode=False, quran_client=None):
    """Create and configure an instance of the Flask application.

    Args:
        config_object: Mapping or object overriding ``server.config`` values.
        debug_mode: Enables Flask debug and DEBUG-level logging.
        quran_client: Upstream client to use instead of a live ``QuranApiClient``.
    """
    _console = get_console()
    _module_blocker = get_module_blocker_filter()

    # --- Initial Logging Configuration ---
    setup_logging(debug_mode=debug_mode)

    app = Flask(__name__)

    # --- Request Timing ---
    @app.before_request
    def before_request_timing():
        g.start_time = time.perf_counter()

    @app.after_request
    def after_request_timing(response):
        if hasattr(g, 'start_time'):
            elapsed_ms = (time.perf_counter() - g.start_time) * 1000
            response.headers["X-Response-Time-MS"] = f"{elapsed_ms:.2f}"
        return response

    # --- Flask App Configuration ---
    app.config.from_object('server.config')
    if isinstance(config_object, dict):
        app.config.from_mapping(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)
    app.config['DEBUG'] = debug_mode
    app.json.ensure_ascii = False

    _console.print(f"[bold blue]🚀 Initializing Quran Companion Server...[/bold blue]{' [bold yellow]🔧 DEBUG MODE ENABLED[/bold yellow]' if debug_mode else ''}")

    storage_status = "Error"
    search_status = "Error"
    blueprints_status = "Pending"
    preload_status = "Disabled"

    # Per-chapter cache and upstream records would interleave with the progress display
    with _module_blocker.blocking(["src.search.upstream", "src.search.cache", "server.utils.storage"]):
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=_console,
            transient=False
        ) as progress:
            # --- Task 1: Storage ---
            task1 = progress.add_task("🗄️  Opening Storage...", total=1)
            try:
                app.storage = Storage(app.config['DATABASE_PATH'])
                storage_status = f"OK ({app.config['DATABASE_PATH']})"
                progress.update(task1, completed=1, description="🗄️  Opening Storage... [green]OK[/green]")
            except Exception as e:
                logging.error(f"CRITICAL: Error opening storage: {e}", exc_info=debug_mode)
                app.storage = None
                progress.update(task1, completed=1, description="🗄️  Opening Storage... [red]Error[/red]")

            # --- Task 2: Cache, upstream client and search engine ---
            task2 = progress.add_task("🔍 Initializing Verse Search...", total=1)
            app.cache = TTLCache(ttl_seconds=app.config['CACHE_TTL_SECONDS'])
            app.corpus_store = CorpusStore(app.cache)
            app.quran_client = quran_client or QuranApiClient(
                quran_api_url=app.config['ALQURAN_CLOUD_API'],
                tafseer_api_url=app.config['QURAN_TAFSEER_API'],
                hadith_api_url=app.config['HADITH_CDN_API'],
                timeout=app.config['SURAH_TIMEOUT']
            )
            app.search_engine = VerseSearchEngine(
                app.corpus_store,
                scorer=CascadeScorer(),
                threshold=app.config['SEARCH_ACCEPT_THRESHOLD']
            )
            search_status = f"OK (threshold {app.config['SEARCH_ACCEPT_THRESHOLD']}, TTL {app.config['CACHE_TTL_SECONDS']}s)"
            progress.update(task2, completed=1, description="🔍 Initializing Verse Search... [green]OK[/green]")

            # --- Task 3: Register Blueprints ---
            task3 = progress.add_task("🔌 Registering API Blueprints...", total=1)
            try:
                for blueprint in (search_bp, quran_bp, hadith_bp, user_bp, books_bp, health_bp):
                    app.register_blueprint(blueprint)
                blueprints_status = "OK"
                progress.update(task3, completed=1, description="🔌 Registering API Blueprints... [green]OK[/green]")
            except Exception as e:
                logging.error(f"CRITICAL: Failed to register blueprints: {e}", exc_info=debug_mode)
                blueprints_status = "Error"
                progress.update(task3, completed=1, description="🔌 Registering API Blueprints... [red]Error[/red]")

            # --- Task 4: Background corpus preload ---
            task4 = progress.add_task("📦 Starting Corpus Preload...", total=1)
            app.preloader = CorpusPreloader(
                app.corpus_store,
                app.quran_client,
                edition=app.config['PRELOAD_EDITION'],
                pause_every=app.config['PRELOAD_PAUSE_EVERY'],
                pause_seconds=app.config['PRELOAD_PAUSE_SECONDS'],
                timeout=app.config['PRELOAD_TIMEOUT']
            )
            if app.config['PRELOAD_ENABLED']:
                app.preloader.start()
                preload_status = f"Running in background ({TOTAL_CHAPTERS} chapters)"
                progress.update(task4, completed=1, description="📦 Starting Corpus Preload... [green]OK[/green]")
            else:
                progress.update(task4, completed=1, description="📦 Starting Corpus Preload... [yellow]Skipped[/yellow]")

    logging.debug("Deactivated module log blocker.")

    # --- Print Summary Panel ---
    panel_title = "Server Ready" + (" [DEBUG MODE]" if debug_mode else "")
    panel_border_style = "yellow" if debug_mode else "green"
    panel_content = (
        f"Status:        [bold {panel_border_style}]{'Online (Debug)' if debug_mode else 'Online'}[/bold {panel_border_style}]\n"
        f"Storage:       {storage_status}\n"
        f"Verse Search:  {search_status}\n"
        f"Corpus:        {preload_status}\n"
        f"Blueprints:    {blueprints_status}\n"
        f"Listening on:  [link=http://{app.config['HOST']}:{app.config['PORT']}]http://{app.config['HOST']}:{app.config['PORT']}[/link]"
    )
    _console.print(Panel(panel_content, title=panel_title, border_style=panel_border_style, expand=False))

    return app
