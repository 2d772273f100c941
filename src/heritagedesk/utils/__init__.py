"""
Utility modules for HeritageDesk.
"""

from .autosave import AutoSaveIndicator, SaveState, SaveStatus
from .config import Config, config

__all__ = ["config", "Config", "AutoSaveIndicator", "SaveState", "SaveStatus"]
