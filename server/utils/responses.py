"""
Helpers turning service-layer results into Flask JSON responses.
"""
import logging
from functools import wraps
from flask import jsonify

from server.utils.storage import StorageError

logger = logging.getLogger(__name__)


def service_response(data, error_message, status_code):
    """Render a ``(data, error_message, status_code)`` service result."""
    if error_message:
        return jsonify({'error': error_message}), status_code
    return jsonify(data), status_code


def json_endpoint(tag: str):
    """Wrap a route so unexpected failures become a logged 500 JSON body."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except StorageError as e:
                logger.error(f"[{tag}] Storage failure: {e}")
                return jsonify({'error': 'Database error'}), 500
            except Exception as e:
                logger.exception(f"[{tag}] Unexpected error in handler: {e}")
                return jsonify({'error': f'An unexpected server error occurred: {type(e).__name__}'}), 500
        return wrapper
    return decorator
