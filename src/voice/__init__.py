"""
Client-side voice navigation: verse index, navigator, recognizer session and
the HTTP client for this server's API.
"""

from src.voice.index import VerseIndex
from src.voice.navigator import VoiceNavigator, NavigationResult
from src.voice.recognizer import RecognizerSession, RecognizerState
from src.voice.client import CompanionClient
