"""
Routes for user sessions, bookmarks, reading position and preferences.
"""
import logging
from flask import Blueprint, request, current_app

from server.services import user_service
from server.utils.responses import service_response, json_endpoint

logger = logging.getLogger(__name__)

user_bp = Blueprint('user_bp', __name__, url_prefix='/api')


@user_bp.route('/user/session', methods=['POST'])
@json_endpoint('UserRoute')
def handle_session():
    return service_response(*user_service.get_or_create_session(
        request.get_json(silent=True), current_app.storage
    ))


@user_bp.route('/bookmarks/<user_id>', methods=['GET'])
@json_endpoint('UserRoute')
def handle_list_bookmarks(user_id):
    return service_response(*user_service.list_bookmarks(user_id, current_app.storage))


@user_bp.route('/bookmarks/<user_id>', methods=['POST'])
@json_endpoint('UserRoute')
def handle_create_bookmark(user_id):
    return service_response(*user_service.create_bookmark(
        user_id, request.get_json(silent=True), current_app.storage
    ))


@user_bp.route('/bookmarks/<user_id>/<bookmark_id>', methods=['DELETE'])
@json_endpoint('UserRoute')
def handle_delete_bookmark(user_id, bookmark_id):
    return service_response(*user_service.delete_bookmark(user_id, bookmark_id, current_app.storage))


@user_bp.route('/reading-position/<user_id>', methods=['GET'])
@json_endpoint('UserRoute')
def handle_get_position(user_id):
    return service_response(*user_service.get_reading_position(user_id, current_app.storage))


@user_bp.route('/reading-position/<user_id>', methods=['PUT'])
@json_endpoint('UserRoute')
def handle_save_position(user_id):
    return service_response(*user_service.save_reading_position(
        user_id, request.get_json(silent=True), current_app.storage
    ))


@user_bp.route('/preferences/<user_id>', methods=['GET'])
@json_endpoint('UserRoute')
def handle_get_preferences(user_id):
    return service_response(*user_service.get_preferences(user_id, current_app.storage))


@user_bp.route('/preferences/<user_id>', methods=['PUT'])
@json_endpoint('UserRoute')
def handle_save_preferences(user_id):
    return service_response(*user_service.save_preferences(
        user_id, request.get_json(silent=True), current_app.storage
    ))
