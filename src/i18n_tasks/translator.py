"""
Runtime translation lookup for compiled or source catalogs.

This module loads a translation mapping from a .po or .mo file and provides
the lookup helpers used at runtime: plain, plural and context lookups with
``{$name}`` placeholder substitution, and printf-style formatting.

Usage Examples:
    Basic lookup:
        >>> translator = Translator({"Hello": "Hej"})
        >>> translator.translate("Hello")
        'Hej'

    Placeholders:
        >>> translator.translate("Hi {$name}", {"name": "Alice"})
        'Hi Alice'

    Loading a catalog:
        >>> translator = Translator.from_catalog(Path("languages/da_DK.mo"))
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path

import polib

from .utils.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\x04"
FORMAT_PATTERN = re.compile(r"%([sdfo])")


def substitute(text: str, params: Mapping[str, object] | None = None) -> str:
    """
    Replace ``{$name}`` placeholders with values from ``params``.

    Placeholders without a matching key are left untouched.
    """
    if not params:
        return text
    for key, value in params.items():
        text = text.replace(f"{{${key}}}", str(value))
    return text


def _format_arg(conversion: str, arg: object) -> str:
    match conversion:
        case "d":
            try:
                return str(int(float(str(arg))))
            except (ValueError, OverflowError):
                return "NaN"
        case "f":
            try:
                return str(float(str(arg)))
            except (ValueError, OverflowError):
                return "NaN"
        case _:
            return str(arg)


def format_positional(text: str, *args: object) -> str:
    """Replace ``%s``, ``%d``, ``%f`` and ``%o`` with positional arguments in order."""
    remaining = list(args)

    def replace(match: re.Match[str]) -> str:
        if not remaining:
            return match.group(0)
        return _format_arg(match.group(1), remaining.pop(0))

    return FORMAT_PATTERN.sub(replace, text)


class Translator:
    """Looks up translations in a loaded mapping, falling back to the key."""

    def __init__(self, translations: Mapping[str, str] | None = None) -> None:
        self._translations: dict[str, str] = dict(translations or {})

    def __len__(self) -> int:
        return len(self._translations)

    @classmethod
    def from_catalog(cls, catalog_file: Path) -> Translator:
        """
        Load translations from a .po or .mo catalog.

        Context entries are keyed as ``context + "\\x04" + msgid``; plural
        entries provide both the singular and the plural key. Untranslated,
        fuzzy and obsolete entries are skipped.

        Raises:
            ConfigurationError: If the catalog is missing or cannot be parsed
        """
        if not catalog_file.exists():
            raise ConfigurationError(f"Catalog not found: {catalog_file}", context=str(catalog_file))

        try:
            if catalog_file.suffix == ".mo":
                catalog = polib.mofile(str(catalog_file))
            else:
                catalog = polib.pofile(str(catalog_file))
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to load catalog {catalog_file}: {e}", context=str(catalog_file)
            ) from e

        translations: dict[str, str] = {}
        for entry in catalog:
            if entry.obsolete or "fuzzy" in entry.flags:
                continue
            prefix = f"{entry.msgctxt}{CONTEXT_SEPARATOR}" if entry.msgctxt else ""
            if entry.msgid_plural:
                singular = entry.msgstr_plural.get(0, "")
                plural = entry.msgstr_plural.get(1, "")
                if singular:
                    translations[prefix + entry.msgid] = singular
                if plural:
                    translations[prefix + entry.msgid_plural] = plural
            elif entry.msgstr:
                translations[prefix + entry.msgid] = entry.msgstr

        logger.info(f"Loaded {len(translations)} translations from {catalog_file}")
        return cls(translations)

    def lookup(self, key: str) -> str:
        """Return the translation of ``key``, or ``key`` itself if absent."""
        return self._translations.get(key) or key

    def translate(self, text: str, params: Mapping[str, object] | None = None) -> str:
        return substitute(self.lookup(text), params)

    def translate_plural(
        self,
        singular: str,
        plural: str,
        count: int,
        params: Mapping[str, object] | None = None,
    ) -> str:
        """Translate the singular or plural form depending on ``count``."""
        key = singular if count == 1 else plural
        merged: dict[str, object] = dict(params or {})
        if not merged.get("count"):
            merged["count"] = count
        return substitute(self.lookup(key), merged)

    def translate_context(
        self, text: str, context: str, params: Mapping[str, object] | None = None
    ) -> str:
        """Translate ``text`` disambiguated by ``context``, falling back to the plain key."""
        context_key = f"{context}{CONTEXT_SEPARATOR}{text}"
        translated = self._translations.get(context_key) or self.lookup(text)
        return substitute(translated, params)

    def format(self, text: str, *args: object) -> str:
        return format_positional(self.translate(text), *args)

    def format_plural(self, singular: str, plural: str, count: int, *args: object) -> str:
        return format_positional(self.translate_plural(singular, plural, count), *args)

    @staticmethod
    def mark(text: str) -> str:
        """Mark a string for extraction without translating it."""
        return text
