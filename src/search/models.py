"""
Data structures shared by the search engine, the preloader and the navigator.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Verse:
    """A single ayah. Identity is (surah_number, number_in_surah)."""
    surah_number: int
    number_in_surah: int
    text: str
    number: Optional[int] = None  # global ayah number (1..6236)

    @property
    def key(self):
        return (self.surah_number, self.number_in_surah)


@dataclass
class Chapter:
    """Cached verse text of one surah."""
    number: int
    name: str = ""
    english_name: str = ""
    verses: List[Verse] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict) -> "Chapter":
        """Build a chapter from an alquran.cloud single-edition surah payload."""
        number = int(payload["number"])
        verses = [
            Verse(
                surah_number=number,
                number_in_surah=int(ayah["numberInSurah"]),
                text=ayah.get("text", ""),
                number=ayah.get("number"),
            )
            for ayah in payload.get("ayahs", [])
        ]
        return cls(
            number=number,
            name=payload.get("name", ""),
            english_name=payload.get("englishName", ""),
            verses=verses,
        )


@dataclass(frozen=True)
class SurahInfo:
    number: int
    name: str
    english_name: str
    english_name_translation: str
    number_of_ayahs: int
    revelation_type: str

    @classmethod
    def from_api(cls, payload: Dict) -> "SurahInfo":
        return cls(
            number=int(payload["number"]),
            name=payload.get("name", ""),
            english_name=payload.get("englishName", ""),
            english_name_translation=payload.get("englishNameTranslation", ""),
            number_of_ayahs=int(payload.get("numberOfAyahs", 0)),
            revelation_type=payload.get("revelationType", ""),
        )

    def to_dict(self) -> Dict:
        return {
            'number': self.number,
            'name': self.name,
            'englishName': self.english_name,
            'englishNameTranslation': self.english_name_translation,
            'numberOfAyahs': self.number_of_ayahs,
            'revelationType': self.revelation_type,
        }


@dataclass(frozen=True)
class MatchResult:
    """Best verse found for a query. Produced per search call, never stored."""
    surah_number: int
    ayah_number: int
    text: str
    surah_name: str
    surah_english_name: str
    score: float

    def to_dict(self) -> Dict:
        return {
            'surahNumber': self.surah_number,
            'ayahNumber': self.ayah_number,
            'text': self.text,
            'surahName': self.surah_name,
            'surahEnglishName': self.surah_english_name,
            'score': self.score,
        }

    @classmethod
    def from_dict(cls, payload: Dict) -> "MatchResult":
        return cls(
            surah_number=int(payload['surahNumber']),
            ayah_number=int(payload['ayahNumber']),
            text=payload.get('text', ''),
            surah_name=payload.get('surahName', ''),
            surah_english_name=payload.get('surahEnglishName', ''),
            score=float(payload.get('score', 0.0)),
        )
