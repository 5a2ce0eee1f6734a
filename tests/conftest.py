"""
Shared fixtures and test doubles for Quran Companion tests.
"""

import pytest

from src.search.cache import TTLCache, CorpusStore, TOTAL_CHAPTERS
from src.search.models import Chapter, SurahInfo, Verse
from src.search.upstream import UpstreamError, UpstreamNotFound, UpstreamTimeout
from src.text.numbers import to_arabic_number

AL_FATIHA = [
    "بِسْمِ ٱللَّهِ ٱلرَّحْمَٰنِ ٱلرَّحِيمِ",
    "ٱلْحَمْدُ لِلَّهِ رَبِّ ٱلْعَٰلَمِينَ",
    "ٱلرَّحْمَٰنِ ٱلرَّحِيمِ",
    "مَٰلِكِ يَوْمِ ٱلدِّينِ",
    "إِيَّاكَ نَعْبُدُ وَإِيَّاكَ نَسْتَعِينُ",
    "ٱهْدِنَا ٱلصِّرَٰطَ ٱلْمُسْتَقِيمَ",
    "صِرَٰطَ ٱلَّذِينَ أَنْعَمْتَ عَلَيْهِمْ غَيْرِ ٱلْمَغْضُوبِ عَلَيْهِمْ وَلَا ٱلضَّآلِّينَ",
]

AL_IKHLAS = [
    "قُلْ هُوَ ٱللَّهُ أَحَدٌ",
    "ٱللَّهُ ٱلصَّمَدُ",
    "لَمْ يَلِدْ وَلَمْ يُولَدْ",
    "وَلَمْ يَكُن لَّهُۥ كُفُوًا أَحَدٌ",
]

AN_NAS = [
    "قُلْ أَعُوذُ بِرَبِّ ٱلنَّاسِ",
    "مَلِكِ ٱلنَّاسِ",
    "إِلَٰهِ ٱلنَّاسِ",
    "مِن شَرِّ ٱلْوَسْوَاسِ ٱلْخَنَّاسِ",
    "ٱلَّذِى يُوَسْوِسُ فِى صُدُورِ ٱلنَّاسِ",
    "مِنَ ٱلْجِنَّةِ وَٱلنَّاسِ",
]

REAL_CHAPTERS = {
    1: ("سُورَةُ ٱلْفَاتِحَةِ", "Al-Faatiha", AL_FATIHA),
    112: ("سُورَةُ الإِخۡلَاصِ", "Al-Ikhlaas", AL_IKHLAS),
    114: ("سُورَةُ النَّاسِ", "An-Naas", AN_NAS),
}


def make_chapter(number, texts, name="", english_name=""):
    verses = [Verse(surah_number=number, number_in_surah=i + 1, text=t) for i, t in enumerate(texts)]
    return Chapter(number=number, name=name, english_name=english_name, verses=verses)


def chapter_payload(number):
    """alquran.cloud-style single-edition payload; synthetic text for chapters not in REAL_CHAPTERS."""
    name, english_name, texts = REAL_CHAPTERS.get(
        number,
        (f"سورة {to_arabic_number(number)}", f"Surah {number}", [f"نص تجريبي رقم {to_arabic_number(number)}"])
    )
    return {
        'number': number,
        'name': name,
        'englishName': english_name,
        'ayahs': [
            {'number': i + 1, 'numberInSurah': i + 1, 'text': text, 'audio': f"https://audio/{number}/{i + 1}.mp3"}
            for i, text in enumerate(texts)
        ],
    }


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeQuranClient:
    """In-memory stand-in for ``QuranApiClient``."""

    def __init__(self, failing_chapters=(), error=None):
        self.failing_chapters = set(failing_chapters)
        self.error = error
        self.calls = []
        self.hadiths = {
            'ara-bukhari': [
                {'hadithnumber': 1, 'text': "إِنَّمَا الأَعْمَالُ بِالنِّيَّاتِ", 'grades': [], 'reference': {'book': 1, 'hadith': 1}},
                {'hadithnumber': 2, 'text': "الدِّينُ النَّصِيحَةُ", 'grades': [], 'reference': {'book': 1, 'hadith': 2}},
            ],
            'eng-bukhari': [
                {'hadithnumber': 1, 'text': "Actions are judged by intentions.", 'grades': []},
                {'hadithnumber': 2, 'text': "Religion is sincere advice.", 'grades': []},
            ],
        }

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def get_chapter_text(self, number, edition, timeout=None):
        self.calls.append(('chapter', number))
        self._maybe_fail()
        if number in self.failing_chapters:
            raise UpstreamError("Upstream returned HTTP 500", upstream_status=500)
        return Chapter.from_api(chapter_payload(number))

    def get_surah_list(self):
        self.calls.append(('surahs',))
        self._maybe_fail()
        return [
            SurahInfo(n, f"سورة {n}", f"Surah {n}", f"Chapter {n}", 7, "Meccan")
            for n in range(1, TOTAL_CHAPTERS + 1)
        ]

    def get_surah_editions(self, number, editions):
        self.calls.append(('editions', number, tuple(editions)))
        self._maybe_fail()
        if number in self.failing_chapters:
            raise UpstreamNotFound("Not found")
        base = chapter_payload(number)
        return [
            base,
            {**base, 'ayahs': [{**a, 'text': ''} for a in base['ayahs']]},
            {**base, 'ayahs': [{**a, 'text': f"اردو {a['numberInSurah']}"} for a in base['ayahs']]},
            {**base, 'ayahs': [{**a, 'text': f"English {a['numberInSurah']}"} for a in base['ayahs']]},
        ]

    def get_tafseer(self, surah, ayah, tafseer_id=1, timeout=10.0):
        self.calls.append(('tafseer', surah, ayah))
        self._maybe_fail()
        if ayah > 300:
            raise UpstreamNotFound("No tafseer")
        return {'tafseer_id': tafseer_id, 'ayah_number': ayah, 'text': "تفسير الآية"}

    def get_hadith_edition(self, edition):
        self.calls.append(('hadith', edition))
        self._maybe_fail()
        if edition not in self.hadiths:
            raise UpstreamNotFound(edition)
        return self.hadiths[edition]


@pytest.fixture
def clock():
    return FakeClock(1000.0)


@pytest.fixture
def fatiha():
    return make_chapter(1, AL_FATIHA, "سُورَةُ ٱلْفَاتِحَةِ", "Al-Faatiha")


@pytest.fixture
def ikhlas():
    return make_chapter(112, AL_IKHLAS, "سُورَةُ الإِخۡلَاصِ", "Al-Ikhlaas")


@pytest.fixture
def nas():
    return make_chapter(114, AN_NAS, "سُورَةُ النَّاسِ", "An-Naas")


@pytest.fixture
def corpus_store(fatiha, ikhlas, nas):
    store = CorpusStore(TTLCache())
    for chapter in (fatiha, ikhlas, nas):
        store.put_chapter(chapter)
    return store


@pytest.fixture
def fake_client():
    return FakeQuranClient()


@pytest.fixture
def app(tmp_path, fake_client):
    from server.app_factory import create_app
    application = create_app(
        config_object={
            'PRELOAD_ENABLED': False,
            'DATABASE_PATH': str(tmp_path / "companion.db"),
        },
        quran_client=fake_client,
    )
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()
