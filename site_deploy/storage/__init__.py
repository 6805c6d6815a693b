# site_deploy/storage/__init__.py
"""Project-local state files for site-deploy"""

from .history import HistoryStore
from .json_store import JsonListStore

__all__ = [
    'HistoryStore',
    'JsonListStore',
]
