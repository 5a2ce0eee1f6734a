"""
Server package for Quran Companion.
Imports the application factory.
"""

from server.app_factory import create_app

__all__ = [
    'create_app'
]
