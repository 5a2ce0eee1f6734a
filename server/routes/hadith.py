"""
Routes for hadith collections.
"""
import logging
from flask import Blueprint, request, current_app

from server.services.hadith_service import get_hadiths
from server.utils.responses import service_response, json_endpoint

logger = logging.getLogger(__name__)

hadith_bp = Blueprint('hadith_bp', __name__, url_prefix='/api')


@hadith_bp.route('/hadiths/<collection>', methods=['GET'])
@json_endpoint('HadithRoute')
def handle_get_hadiths(collection):
    params = {
        'search': request.args.get('search'),
        'page': request.args.get('page'),
        'limit': request.args.get('limit'),
    }
    return service_response(*get_hadiths(
        collection,
        params,
        cache=current_app.cache,
        client=current_app.quran_client,
        config=current_app.config
    ))
