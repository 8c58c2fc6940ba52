"""
UI Components for CareerFlow.
"""

from .vault import VaultTab
from .jobs import JobsTab
from .chat import ChatTab
from .settings import SettingsTab

__all__ = [
    'VaultTab',
    'JobsTab',
    'ChatTab',
    'SettingsTab',
]
