"""
Routes for global verse search.
"""
import logging
from flask import Blueprint, request, current_app

from server.services.search_service import search_ayah
from server.utils.responses import service_response, json_endpoint

logger = logging.getLogger(__name__)

search_bp = Blueprint('search_bp', __name__, url_prefix='/api')


@search_bp.route('/search-ayah', methods=['POST'])
@json_endpoint('SearchRoute')
def handle_search_ayah():
    """Return the best-matching verse for ``searchText`` across cached chapters."""
    payload = request.get_json(silent=True)
    data, error_message, status_code = search_ayah(
        payload,
        engine=current_app.search_engine,
        debug=current_app.debug
    )
    if error_message and status_code != 404:
        logger.warning(f"[SearchRoute] {error_message} (Status: {status_code})")
    return service_response(data, error_message, status_code)
