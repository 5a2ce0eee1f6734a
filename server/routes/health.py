from flask import Blueprint, jsonify, current_app
import logging

from config import TOTAL_CHAPTERS
from server.utils.storage import StorageError

health_bp = Blueprint('health_bp', __name__, url_prefix='/')
logger = logging.getLogger(__name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """Provides an endpoint to check the health of application services."""
    services_status = {}

    # Corpus: partial availability is normal while the preloader runs
    try:
        cached = len(current_app.corpus_store.cached_chapters())
        preloader = getattr(current_app, 'preloader', None)
        services_status["corpus"] = {
            "cached_chapters": cached,
            "total_chapters": TOTAL_CHAPTERS,
            "preloading": bool(preloader and preloader.running),
        }
        services_status["cache_entries"] = len(current_app.cache)
    except Exception as e:
        services_status["corpus"] = "error"
        logger.error(f"Health check: Error accessing corpus store: {e}", exc_info=True)

    # Storage
    try:
        if current_app.storage is None:
            raise StorageError("storage was not initialized")
        current_app.storage.ping()
        services_status["storage"] = "ok"
    except StorageError as e:
        services_status["storage"] = "error"
        logger.warning(f"Health check: Storage unavailable: {e}")

    if any(status == "error" for status in services_status.values()):
        return jsonify({"status": "error", "services": services_status}), 503
    return jsonify({"status": "ok", "services": services_status}), 200
