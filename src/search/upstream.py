"""
HTTP client for the third-party Quran, tafseer and hadith APIs.

Every call carries an explicit timeout. Failures are raised as
``UpstreamError`` subclasses carrying the HTTP status the server should
answer with; nothing is retried here.
"""
import logging
from typing import Dict, List, Optional, Sequence

import requests

from config import ALQURAN_CLOUD_API, QURAN_TAFSEER_API, HADITH_CDN_API, UPSTREAM_TIMEOUT
from src.search.models import Chapter, SurahInfo

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """An upstream API call failed."""
    status_code = 500

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class UpstreamTimeout(UpstreamError):
    status_code = 504


class UpstreamNotFound(UpstreamError):
    status_code = 404


def request_json(session: requests.Session, method: str, url: str, timeout: float, json: Optional[Dict] = None):
    """Perform a request and return the decoded JSON body.

    Raises:
        UpstreamTimeout: the call exceeded ``timeout``.
        UpstreamNotFound: HTTP 404.
        UpstreamError: any other transport failure, non-2xx status or invalid JSON.
    """
    logger.debug(f"[Upstream] {method} {url} (timeout={timeout}s)")
    try:
        response = session.request(method, url, json=json, timeout=timeout)
    except requests.Timeout as e:
        logger.error(f"[Upstream] Timeout after {timeout}s: {url}")
        raise UpstreamTimeout(f"Request timed out: {url}") from e
    except requests.RequestException as e:
        logger.error(f"[Upstream] Request failed for {url}: {e}")
        raise UpstreamError(f"Request failed: {type(e).__name__}") from e

    if response.status_code == 404:
        raise UpstreamNotFound(f"Not found: {url}")
    if not response.ok:
        logger.error(f"[Upstream] {url} answered HTTP {response.status_code}")
        raise UpstreamError(f"Upstream returned HTTP {response.status_code}", upstream_status=response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON from {url}") from e


class QuranApiClient:
    """Thin wrapper around ``requests.Session`` for the upstream providers."""

    def __init__(
        self,
        quran_api_url: str = ALQURAN_CLOUD_API,
        tafseer_api_url: str = QURAN_TAFSEER_API,
        hadith_api_url: str = HADITH_CDN_API,
        timeout: float = UPSTREAM_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.quran_api_url = quran_api_url.rstrip('/')
        self.tafseer_api_url = tafseer_api_url.rstrip('/')
        self.hadith_api_url = hadith_api_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, url: str, timeout: Optional[float] = None):
        return request_json(self.session, "GET", url, timeout=timeout or self.timeout)

    def _get_quran_data(self, path: str, timeout: Optional[float] = None):
        """Fetch an alquran.cloud resource and unwrap its ``data`` envelope."""
        payload = self._get_json(f"{self.quran_api_url}{path}", timeout=timeout)
        if not isinstance(payload, dict) or payload.get('code') != 200 or payload.get('data') is None:
            code = payload.get('code') if isinstance(payload, dict) else None
            raise UpstreamError(f"Unexpected response for {path} (code={code})")
        return payload['data']

    def get_surah_list(self) -> List[SurahInfo]:
        data = self._get_quran_data("/surah")
        return [SurahInfo.from_api(item) for item in data]

    def get_chapter_text(self, number: int, edition: str, timeout: Optional[float] = None) -> Chapter:
        """Fetch a single text edition of one chapter (used by the preloader)."""
        data = self._get_quran_data(f"/surah/{number}/{edition}", timeout=timeout)
        return Chapter.from_api(data)

    def get_surah_editions(self, number: int, editions: Sequence[str]) -> List[Dict]:
        """Fetch several editions of one chapter in a single request."""
        data = self._get_quran_data(f"/surah/{number}/editions/{','.join(editions)}")
        if not isinstance(data, list) or len(data) != len(editions):
            raise UpstreamError(f"Expected {len(editions)} editions for surah {number}")
        return data

    def get_tafseer(self, surah: int, ayah: int, tafseer_id: int = 1, timeout: float = 10.0) -> Dict:
        url = f"{self.tafseer_api_url}/tafseer/{tafseer_id}/{surah}/{ayah}"
        payload = self._get_json(url, timeout=timeout)
        if not isinstance(payload, dict) or not payload.get('text'):
            raise UpstreamNotFound(f"No tafseer text for {surah}:{ayah}")
        return payload

    def get_hadith_edition(self, edition: str) -> List[Dict]:
        """Fetch a full hadith edition (static JSON on the CDN)."""
        payload = self._get_json(f"{self.hadith_api_url}/editions/{edition}.min.json")
        hadiths = payload.get('hadiths') if isinstance(payload, dict) else None
        if not isinstance(hadiths, list):
            raise UpstreamError(f"Hadith edition {edition} has no hadith list")
        return hadiths
