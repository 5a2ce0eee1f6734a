"""
HTTP client for this server's API, used by the voice navigator.
"""
import logging
from typing import Optional

import requests

from config import COMPANION_SERVER_URL, DEFAULT_RECITER
from src.search.models import Chapter, MatchResult, Verse
from src.search.upstream import UpstreamError, UpstreamNotFound, request_json

logger = logging.getLogger(__name__)


class CompanionClient:
    def __init__(
        self,
        base_url: str = COMPANION_SERVER_URL,
        edition: str = DEFAULT_RECITER,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.edition = edition
        self.timeout = timeout
        self.session = session or requests.Session()

    def search_ayah(self, text: str) -> Optional[MatchResult]:
        """Global search; None when the server finds nothing or rejects the query."""
        try:
            payload = request_json(
                self.session, "POST", f"{self.base_url}/api/search-ayah",
                timeout=self.timeout, json={'searchText': text}
            )
        except UpstreamNotFound:
            return None
        except UpstreamError as e:
            if e.upstream_status == 400:
                logger.info(f"[CompanionClient] Query rejected by server: '{text}'")
                return None
            raise
        try:
            return MatchResult.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError("Malformed search payload from server") from e

    def fetch_chapter(self, number: int) -> Chapter:
        """Fetch a chapter's verses through the server's surah endpoint."""
        payload = request_json(
            self.session, "GET", f"{self.base_url}/api/surah/{number}/{self.edition}",
            timeout=self.timeout
        )
        if not isinstance(payload, list):
            raise UpstreamError(f"Unexpected surah payload for chapter {number}")
        try:
            return self._build_chapter(number, payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed surah payload for chapter {number}") from e

    @staticmethod
    def _build_chapter(number: int, payload: list) -> Chapter:
        verses = []
        name = english_name = ""
        for item in payload:
            ayah = item['ayah']
            surah = ayah.get('surah') or {}
            name = surah.get('name', name)
            english_name = surah.get('englishName', english_name)
            verses.append(Verse(
                surah_number=number,
                number_in_surah=int(ayah['numberInSurah']),
                text=ayah.get('text', ''),
                number=ayah.get('number'),
            ))
        return Chapter(number=number, name=name, english_name=english_name, verses=verses)
