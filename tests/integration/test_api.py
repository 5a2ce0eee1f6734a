"""
Integration tests for the HTTP API through the Flask test client.
"""

import pytest

from src.search.upstream import UpstreamError, UpstreamTimeout
from conftest import AL_FATIHA, make_chapter


@pytest.fixture
def loaded_app(app, fatiha, ikhlas, nas):
    for chapter in (fatiha, ikhlas, nas):
        app.corpus_store.put_chapter(chapter)
    return app


@pytest.fixture
def user_id(client):
    response = client.post('/api/user/session', json={'sessionId': "browser-session-1"})
    return response.get_json()['id']


class TestSearchAyah:
    def test_exact_verse(self, loaded_app, client):
        response = client.post('/api/search-ayah', json={'searchText': AL_FATIHA[0]})
        assert response.status_code == 200
        body = response.get_json()
        assert body['surahNumber'] == 1
        assert body['ayahNumber'] == 1
        assert body['score'] == 1.0
        assert body['surahEnglishName'] == "Al-Faatiha"
        assert 'X-Response-Time-MS' in response.headers

    def test_arabic_is_not_escaped(self, loaded_app, client):
        response = client.post('/api/search-ayah', json={'searchText': "قل اعوذ برب الناس"})
        assert "قُلْ" in response.get_data(as_text=True)

    @pytest.mark.parametrize("payload", [{'searchText': "a"}, {'searchText': " "}, {}, {'searchText': 12}])
    def test_invalid_query_is_400(self, loaded_app, client, payload):
        response = client.post('/api/search-ayah', json=payload)
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_non_json_body_is_400(self, client):
        response = client.post('/api/search-ayah', data="not json", content_type='text/plain')
        assert response.status_code == 400

    def test_no_match_is_404(self, loaded_app, client):
        response = client.post('/api/search-ayah', json={'searchText': "xyz qwe"})
        assert response.status_code == 404
        assert response.get_json() == {'error': 'No matching ayah found'}

    def test_empty_corpus_is_404(self, client):
        response = client.post('/api/search-ayah', json={'searchText': "بسم الله"})
        assert response.status_code == 404

    def test_unexpected_failure_is_500(self, loaded_app, client, monkeypatch):
        def boom(query):
            raise RuntimeError("scorer exploded")

        monkeypatch.setattr(loaded_app.search_engine, 'search', boom)
        response = client.post('/api/search-ayah', json={'searchText': "بسم الله"})
        assert response.status_code == 500
        assert 'RuntimeError' in response.get_json()['error']


class TestSurahs:
    def test_surah_list_is_cached(self, client, fake_client):
        first = client.get('/api/surahs')
        second = client.get('/api/surahs')
        assert first.status_code == 200
        assert len(second.get_json()) == 114
        assert first.get_json()[0]['englishName'] == "Surah 1"
        assert fake_client.calls.count(('surahs',)) == 1

    def test_surah_detail(self, app, client, fake_client):
        response = client.get('/api/surah/112/ar.alafasy')
        assert response.status_code == 200
        verses = response.get_json()
        assert len(verses) == 4
        assert verses[0]['ayah']['numberInSurah'] == 1
        assert verses[0]['ayah']['audio'] == "https://audio/112/1.mp3"
        assert verses[0]['urduTranslation']['text'] == "اردو 1"
        assert verses[0]['englishTranslation']['text'] == "English 1"
        assert fake_client.calls[-1] == (
            'editions', 112, ("quran-uthmani", "ar.alafasy", "ur.jalandhry", "en.sahih")
        )

    def test_surah_detail_feeds_the_corpus(self, app, client):
        assert not app.corpus_store.is_cached(112)
        client.get('/api/surah/112/ar.alafasy')
        assert app.corpus_store.is_cached(112)
        response = client.post('/api/search-ayah', json={'searchText': "قل هو الله احد"})
        assert response.get_json()['surahNumber'] == 112

    def test_surah_detail_is_cached(self, client, fake_client):
        client.get('/api/surah/1/ar.alafasy')
        client.get('/api/surah/1/ar.alafasy')
        assert sum(1 for call in fake_client.calls if call[0] == 'editions') == 1

    @pytest.mark.parametrize("path", [
        '/api/surah/0/ar.alafasy', '/api/surah/115/ar.alafasy', '/api/surah/abc/ar.alafasy',
        '/api/surah/²/ar.alafasy', '/api/surah/-1/ar.alafasy',
    ])
    def test_invalid_surah_number(self, client, fake_client, path):
        response = client.get(path)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid surah number. Must be between 1 and 114'
        assert fake_client.calls == []

    def test_invalid_edition(self, client):
        assert client.get('/api/surah/1/not-an-edition').status_code == 400

    def test_upstream_timeout_is_504(self, client, fake_client):
        fake_client.error = UpstreamTimeout("slow")
        response = client.get('/api/surah/1/ar.alafasy')
        assert response.status_code == 504
        assert response.get_json() == {'error': 'Request timeout - please try again'}

    def test_upstream_failure_is_500(self, client, fake_client):
        fake_client.error = UpstreamError("boom")
        assert client.get('/api/surahs').status_code == 500

    def test_upstream_not_found_is_404(self, client, fake_client):
        fake_client.failing_chapters.add(2)
        assert client.get('/api/surah/2/ar.alafasy').status_code == 404

    def test_reciters(self, client):
        reciters = client.get('/api/reciters').get_json()
        assert any(r['identifier'] == "ar.alafasy" for r in reciters)


class TestTafseer:
    def test_tafseer(self, client):
        response = client.get('/api/tafseer/1/1')
        assert response.status_code == 200
        assert response.get_json()['text'] == "تفسير الآية"

    def test_missing_tafseer_is_404(self, client):
        assert client.get('/api/tafseer/2/400').status_code == 404

    def test_invalid_numbers(self, client):
        assert client.get('/api/tafseer/0/1').status_code == 400
        assert client.get('/api/tafseer/1/0').status_code == 400
        assert client.get('/api/tafseer/1/²').status_code == 400


class TestHadiths:
    def test_merged_collection(self, client):
        response = client.get('/api/hadiths/bukhari')
        assert response.status_code == 200
        body = response.get_json()
        assert body['total'] == 2
        first = body['hadiths'][0]
        assert first['collection'] == "Sahih al-Bukhari"
        assert first['hadithNumber'] == "1"
        assert first['bookNumber'] == "1"
        assert first['englishText'] == "Actions are judged by intentions."

    def test_english_and_arabic_search(self, client):
        english = client.get('/api/hadiths/bukhari?search=INTENTIONS').get_json()
        arabic = client.get('/api/hadiths/bukhari', query_string={'search': "النيات"}).get_json()
        assert [h['hadithNumber'] for h in english['hadiths']] == ["1"]
        assert [h['hadithNumber'] for h in arabic['hadiths']] == ["1"]

    def test_pagination(self, client):
        body = client.get('/api/hadiths/bukhari?page=2&limit=1').get_json()
        assert body['page'] == 2
        assert [h['hadithNumber'] for h in body['hadiths']] == ["2"]

    def test_invalid_collection(self, client):
        assert client.get('/api/hadiths/tirmidhi').status_code == 400

    def test_invalid_paging(self, client):
        assert client.get('/api/hadiths/bukhari?limit=500').status_code == 400
        assert client.get('/api/hadiths/bukhari?page=x').status_code == 400

    def test_missing_edition_is_404(self, client):
        assert client.get('/api/hadiths/muslim').status_code == 404


class TestUserData:
    def test_session_is_reused(self, client, user_id):
        again = client.post('/api/user/session', json={'sessionId': "browser-session-1"})
        assert again.get_json()['id'] == user_id

    def test_session_requires_id(self, client):
        assert client.post('/api/user/session', json={}).status_code == 400

    def test_bookmark_flow(self, client, user_id):
        created = client.post(f'/api/bookmarks/{user_id}', json={'surahNumber': 2, 'ayahNumber': 255})
        assert created.status_code == 201
        bookmark_id = created.get_json()['id']

        duplicate = client.post(f'/api/bookmarks/{user_id}', json={'surahNumber': 2, 'ayahNumber': 255})
        assert duplicate.status_code == 409

        listed = client.get(f'/api/bookmarks/{user_id}').get_json()
        assert [b['id'] for b in listed] == [bookmark_id]

        assert client.delete(f'/api/bookmarks/{user_id}/{bookmark_id}').status_code == 200
        assert client.delete(f'/api/bookmarks/{user_id}/{bookmark_id}').status_code == 404

    def test_bookmark_validation(self, client, user_id):
        response = client.post(f'/api/bookmarks/{user_id}', json={'surahNumber': 115, 'ayahNumber': 1})
        assert response.status_code == 400

    def test_unknown_user(self, client):
        assert client.get('/api/bookmarks/999').status_code == 404
        assert client.get('/api/bookmarks/abc').status_code == 400
        assert client.get('/api/bookmarks/²').status_code == 400

    def test_reading_position(self, client, user_id):
        assert client.get(f'/api/reading-position/{user_id}').status_code == 404
        saved = client.put(f'/api/reading-position/{user_id}', json={'surahNumber': 18, 'ayahNumber': 10})
        assert saved.status_code == 200
        position = client.get(f'/api/reading-position/{user_id}').get_json()
        assert (position['surahNumber'], position['ayahNumber']) == (18, 10)

    def test_preferences(self, client, user_id):
        saved = client.put(f'/api/preferences/{user_id}', json={'reciterIdentifier': "ar.husary", 'theme': "dark"})
        assert saved.status_code == 200
        assert client.get(f'/api/preferences/{user_id}').get_json()['theme'] == "dark"
        bad = client.put(f'/api/preferences/{user_id}', json={'reciterIdentifier': "ar.husary", 'theme': "neon"})
        assert bad.status_code == 400


class TestBooks:
    def test_create_and_list(self, client):
        created = client.post('/api/books', json={'title': "الأربعون النووية", 'fileName': "arbaeen.pdf", 'fileSize': "2048"})
        assert created.status_code == 201
        assert created.get_json()['fileSize'] == 2048
        assert [b['title'] for b in client.get('/api/books').get_json()] == ["الأربعون النووية"]

    def test_requires_pdf(self, client):
        assert client.post('/api/books', json={'title': "x", 'fileName': "x.txt"}).status_code == 400


class TestHealth:
    def test_reports_corpus_and_storage(self, app, client):
        app.corpus_store.put_chapter(make_chapter(1, AL_FATIHA))
        response = client.get('/health')
        assert response.status_code == 200
        services = response.get_json()['services']
        assert services['corpus']['cached_chapters'] == 1
        assert services['corpus']['total_chapters'] == 114
        assert services['corpus']['preloading'] is False
        assert services['storage'] == "ok"

    def test_missing_storage_is_503(self, app, client):
        app.storage = None
        assert client.get('/health').status_code == 503
