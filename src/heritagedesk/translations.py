"""
Translation Aggregator - Builds one translation row per language.

The editor keeps two parallel text maps (overview and history, keyed by
language code). The backend stores one translation row per language with
short_desc/full_desc plus the location fields, which are not localized and
live on the English row only.
"""

import logging
from typing import Optional

from deep_translator import GoogleTranslator

from heritagedesk.models import Language

logger = logging.getLogger('HeritageDesk')

LOCATION_FIELDS = ("address", "city", "state", "country")


def _ordered_languages(maps: list[dict[str, str]], languages: list[str]) -> list[str]:
    ordered = [code.lower() for code in languages]
    for mapping in maps:
        for code in mapping:
            if code.lower() not in ordered:
                ordered.append(code.lower())
    return ordered


def _lookup(mapping: dict[str, str], code: str) -> str:
    for key, value in mapping.items():
        if key.lower() == code:
            return (value or "").strip()
    return ""


def build_translation_rows(
    name: str,
    overview: dict[str, str],
    history: dict[str, str],
    location: Optional[dict[str, str]] = None,
    languages: list[str] = Language.ALL,
) -> list[dict]:
    """
    Merge the overview/history maps and location fields into translation rows.

    Only languages with some non-empty text get a row, except English, which
    always gets one: it carries the location fields even when no English
    text was entered. Fields that are not set are left out of the row rather
    than sent as empty strings.

    Args:
        name: Site name, repeated untranslated on every row
        overview: Language code -> overview text (becomes short_desc)
        history: Language code -> history text (becomes full_desc)
        location: address/city/state/country values for the English row
        languages: Supported language codes, in emission order

    Returns:
        List of translation row dicts with upper-case language codes
    """
    accumulators: dict[str, dict[str, str]] = {}

    for code in _ordered_languages([overview, history], languages):
        entry: dict[str, str] = {}
        short_desc = _lookup(overview, code)
        full_desc = _lookup(history, code)
        if short_desc:
            entry["short_desc"] = short_desc
        if full_desc:
            entry["full_desc"] = full_desc
        if entry:
            accumulators[code.upper()] = entry

    english = accumulators.setdefault(Language.ENGLISH.upper(), {})
    for field_name in LOCATION_FIELDS:
        value = ((location or {}).get(field_name) or "").strip()
        if value:
            english[field_name] = value

    rows = []
    for code, entry in accumulators.items():
        rows.append({"language_code": code, "name": name.strip(), **entry})

    logger.debug(f"Built {len(rows)} translation rows: {', '.join(accumulators)}")
    return rows


class TranslationFiller:
    """
    Fills empty language slots from the English text via Google Translate.

    Existing text is never overwritten; failed translations leave the slot
    empty so the editor still shows it as missing.
    """

    def __init__(self, source: str = Language.ENGLISH, languages: list[str] = Language.ALL):
        """
        Initialize the filler.

        Args:
            source: Language code the text is translated from
            languages: Language codes to fill
        """
        self.source = source
        self.languages = [code for code in languages if code != source]
        self._translators: dict[str, GoogleTranslator] = {}
        self._translation_cache: dict[tuple[str, str], str] = {}

    def _translator(self, target: str) -> GoogleTranslator:
        if target not in self._translators:
            self._translators[target] = GoogleTranslator(source=self.source, target=target)
        return self._translators[target]

    def _translate(self, text: str, target: str) -> str:
        """
        Translate text to one target language.

        Args:
            text: Source-language text
            target: Target language code

        Returns:
            Translated text, or "" on failure
        """
        cache_key = (target, text.strip())
        if cache_key in self._translation_cache:
            return self._translation_cache[cache_key]

        try:
            translation = self._translator(target).translate(text) or ""
        except Exception as e:
            logger.warning(f"Translation to '{target}' failed: {e}")
            return ""

        self._translation_cache[cache_key] = translation
        return translation

    def fill(self, translations: dict[str, str]) -> dict[str, str]:
        """
        Return a copy of `translations` with empty slots translated.

        Args:
            translations: Language code -> text map

        Returns:
            New map; unchanged when there is no source text
        """
        source_text = (translations.get(self.source) or "").strip()
        filled = dict(translations)
        if not source_text:
            return filled

        for code in self.languages:
            if (filled.get(code) or "").strip():
                continue
            translated = self._translate(source_text, code)
            if translated:
                filled[code] = translated
                logger.info(f"Filled {Language.get_display_name(code)} from {self.source.upper()}")
        return filled

    def clear_cache(self) -> None:
        """Clear the translation cache to free memory."""
        self._translation_cache.clear()
