"""
Routes for surah listing, surah detail, tafseer and reciters.
"""
import logging
from flask import Blueprint, jsonify, current_app

from server.services import quran_service
from server.utils.responses import service_response, json_endpoint

logger = logging.getLogger(__name__)

quran_bp = Blueprint('quran_bp', __name__, url_prefix='/api')


@quran_bp.route('/surahs', methods=['GET'])
@json_endpoint('QuranRoute')
def handle_get_surahs():
    return service_response(*quran_service.get_surah_list(current_app.cache, current_app.quran_client))


@quran_bp.route('/surah/<surah_number>/<reciter_edition>', methods=['GET'])
@json_endpoint('QuranRoute')
def handle_get_surah(surah_number, reciter_edition):
    return service_response(*quran_service.get_surah_detail(
        surah_number,
        reciter_edition,
        cache=current_app.cache,
        client=current_app.quran_client,
        store=current_app.corpus_store,
        config=current_app.config
    ))


@quran_bp.route('/tafseer/<surah_number>/<ayah_number>', methods=['GET'])
@json_endpoint('QuranRoute')
def handle_get_tafseer(surah_number, ayah_number):
    return service_response(*quran_service.get_tafseer(
        surah_number,
        ayah_number,
        cache=current_app.cache,
        client=current_app.quran_client,
        config=current_app.config
    ))


@quran_bp.route('/reciters', methods=['GET'])
def handle_get_reciters():
    return jsonify(quran_service.get_reciters()), 200
