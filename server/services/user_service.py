"""
Service layer for user sessions, bookmarks, reading position, preferences and books.
"""
import logging
from typing import Dict, Optional, Tuple

from server.utils.storage import Storage, StorageError
from server.utils.validation import parse_int, parse_surah_number, parse_ayah_number, is_valid_edition

logger = logging.getLogger(__name__)

THEMES = ('light', 'dark', 'system')


def _body(payload) -> Dict:
    return payload if isinstance(payload, dict) else {}


def _require_user(storage: Storage, user_id) -> Tuple[Optional[Dict], Optional[str], int]:
    parsed = parse_int(user_id)
    if parsed is None:
        return None, 'Invalid user id', 400
    user = storage.get_user(parsed)
    if user is None:
        return None, 'User not found', 404
    return user, None, 200


def get_or_create_session(payload, storage: Storage):
    session_id = _body(payload).get('sessionId')
    if not isinstance(session_id, str) or not session_id.strip() or len(session_id) > 128:
        return None, 'Session id is required', 400

    try:
        user = storage.get_user_by_session_id(session_id)
        if user is None:
            user = storage.create_user(session_id)
            logger.info(f"[UserService] Created user {user['id']} for new session")
    except StorageError as e:
        logger.error(f"[UserService] Session lookup failed: {e}")
        return None, 'Failed to create user session', 500
    return user, None, 200


def list_bookmarks(user_id, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status
    return storage.get_bookmarks(user['id']), None, 200


def create_bookmark(user_id, payload, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status

    body = _body(payload)
    surah = parse_surah_number(body.get('surahNumber'))
    ayah = parse_ayah_number(body.get('ayahNumber'))
    if surah is None or ayah is None:
        return None, 'Invalid surah or ayah number', 400

    if storage.bookmark_exists(user['id'], surah, ayah):
        return None, 'Bookmark already exists', 409
    bookmark = storage.create_bookmark(
        user['id'], surah, ayah,
        surah_name=body.get('surahName'),
        note=body.get('note'),
    )
    return bookmark, None, 201


def delete_bookmark(user_id, bookmark_id, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status
    parsed = parse_int(bookmark_id)
    if parsed is None:
        return None, 'Invalid bookmark id', 400
    if not storage.delete_bookmark(parsed, user['id']):
        return None, 'Bookmark not found', 404
    return {'deleted': parsed}, None, 200


def get_reading_position(user_id, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status
    position = storage.get_reading_position(user['id'])
    if position is None:
        return None, 'No reading position saved', 404
    return position, None, 200


def save_reading_position(user_id, payload, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status
    body = _body(payload)
    surah = parse_surah_number(body.get('surahNumber'))
    ayah = parse_ayah_number(body.get('ayahNumber'))
    if surah is None or ayah is None:
        return None, 'Invalid surah or ayah number', 400
    return storage.upsert_reading_position(user['id'], surah, ayah), None, 200


def get_preferences(user_id, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status
    preferences = storage.get_user_preferences(user['id'])
    if preferences is None:
        return None, 'No preferences saved', 404
    return preferences, None, 200


def save_preferences(user_id, payload, storage: Storage):
    user, error, status = _require_user(storage, user_id)
    if error:
        return None, error, status
    body = _body(payload)
    reciter = body.get('reciterIdentifier')
    theme = body.get('theme')
    if not is_valid_edition(reciter):
        return None, 'Invalid reciter identifier', 400
    if theme not in THEMES:
        return None, f"Invalid theme. Must be one of {', '.join(THEMES)}", 400
    return storage.upsert_user_preferences(user['id'], reciter, theme), None, 200


def list_books(storage: Storage):
    return storage.get_all_books(), None, 200


def create_book(payload, storage: Storage):
    body = _body(payload)
    title = body.get('title')
    file_name = body.get('fileName')
    if not isinstance(title, str) or not title.strip():
        return None, 'Book title is required', 400
    if not isinstance(file_name, str) or not file_name.lower().endswith('.pdf'):
        return None, 'A PDF file name is required', 400
    file_size = body.get('fileSize')
    if file_size is not None and parse_int(file_size) is None:
        return None, 'Invalid file size', 400
    book = storage.create_book(
        title=title.strip(),
        file_name=file_name,
        author=body.get('author'),
        file_size=parse_int(file_size) if file_size is not None else None,
    )
    return book, None, 201
