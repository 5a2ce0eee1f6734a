"""
Unit tests for the SQLite storage layer.
"""

import pytest

from server.utils.storage import Storage, StorageError


@pytest.fixture
def storage(tmp_path):
    return Storage(str(tmp_path / "nested" / "companion.db"))


@pytest.fixture
def user(storage):
    return storage.create_user("session-abc")


class TestUsers:
    def test_create_and_fetch(self, storage, user):
        assert user['sessionId'] == "session-abc"
        assert storage.get_user(user['id']) == user
        assert storage.get_user_by_session_id("session-abc") == user

    def test_missing_user(self, storage):
        assert storage.get_user(999) is None
        assert storage.get_user_by_session_id("nope") is None

    def test_duplicate_session_raises_storage_error(self, storage, user):
        with pytest.raises(StorageError):
            storage.create_user("session-abc")

    def test_ping(self, storage):
        assert storage.ping()


class TestBookmarks:
    def test_create_list_delete(self, storage, user):
        first = storage.create_bookmark(user['id'], 1, 1, surah_name="الفاتحة")
        second = storage.create_bookmark(user['id'], 2, 255, note="آية الكرسي")
        assert [b['id'] for b in storage.get_bookmarks(user['id'])] == [second['id'], first['id']]
        assert storage.bookmark_exists(user['id'], 2, 255)
        assert storage.delete_bookmark(second['id'], user['id'])
        assert not storage.bookmark_exists(user['id'], 2, 255)
        assert not storage.delete_bookmark(second['id'], user['id'])

    def test_bookmarks_are_per_user(self, storage, user):
        other = storage.create_user("session-xyz")
        bookmark = storage.create_bookmark(user['id'], 18, 10)
        assert storage.get_bookmarks(other['id']) == []
        assert not storage.delete_bookmark(bookmark['id'], other['id'])


class TestReadingPositionAndPreferences:
    def test_upsert_reading_position(self, storage, user):
        assert storage.get_reading_position(user['id']) is None
        storage.upsert_reading_position(user['id'], 2, 5)
        updated = storage.upsert_reading_position(user['id'], 3, 7)
        assert (updated['surahNumber'], updated['ayahNumber']) == (3, 7)
        assert storage.get_reading_position(user['id'])['surahNumber'] == 3

    def test_upsert_preferences(self, storage, user):
        assert storage.get_user_preferences(user['id']) is None
        storage.upsert_user_preferences(user['id'], "ar.alafasy", "light")
        prefs = storage.upsert_user_preferences(user['id'], "ar.husary", "dark")
        assert prefs['reciterIdentifier'] == "ar.husary"
        assert prefs['theme'] == "dark"


class TestBooks:
    def test_create_and_list(self, storage):
        assert storage.get_all_books() == []
        book = storage.create_book("رياض الصالحين", "riyad.pdf", author="النووي", file_size=1024)
        assert book['fileName'] == "riyad.pdf"
        assert storage.get_all_books() == [book]
