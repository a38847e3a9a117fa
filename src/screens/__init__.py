"""
Modal screens for the Nexus chat application.
"""
from .model_select_screen import ModelSelectScreen

__all__ = ["ModelSelectScreen"]
