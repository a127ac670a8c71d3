"""
i18n-tasks - Build-pipeline orchestration for gettext catalogs.
"""

from .main import main
from .translator import Translator, substitute

__all__ = ["main", "Translator", "substitute"]
