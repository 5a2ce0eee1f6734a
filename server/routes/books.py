"""
Routes for uploaded-book metadata. The PDF files themselves stay in the
browser's local storage; only their metadata is recorded here.
"""
from flask import Blueprint, request, current_app

from server.services import user_service
from server.utils.responses import service_response, json_endpoint

books_bp = Blueprint('books_bp', __name__, url_prefix='/api')


@books_bp.route('/books', methods=['GET'])
@json_endpoint('BooksRoute')
def handle_list_books():
    return service_response(*user_service.list_books(current_app.storage))


@books_bp.route('/books', methods=['POST'])
@json_endpoint('BooksRoute')
def handle_create_book():
    return service_response(*user_service.create_book(request.get_json(silent=True), current_app.storage))
