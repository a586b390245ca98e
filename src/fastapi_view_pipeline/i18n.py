"""Accept-Language parsing and the localized validation message catalog."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"
DEFAULT_LOCALE = "en"


def _quality(params: list[str]) -> float:
    for param in params:
        name, _, value = param.strip().partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value)
            except ValueError:
                return 0.0
    return 1.0


def parse_accept_language(header: str | None) -> Iterator[str]:
    """Yield language tags from an Accept-Language header, best first.

    Tags with equal quality keep their header order. ``*`` and tags with
    ``q=0`` are skipped.
    """
    if not header:
        return

    weighted: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, *params = part.strip().split(";")
        tag = tag.strip()
        if not tag or tag == "*":
            continue
        q = _quality(params)
        if q <= 0:
            continue
        weighted.append((-q, position, tag))

    for _, _, tag in sorted(weighted):
        yield tag


class MessageCatalog:
    """Validation messages keyed by rule name, one JSON file per locale."""

    def __init__(
        self,
        locales_dir: Path = LOCALES_DIR,
        *,
        default_locale: str = DEFAULT_LOCALE,
    ) -> None:
        self._locales_dir = locales_dir
        self.default_locale = default_locale
        self._translations: dict[str, dict[str, str]] = {}
        self._load()

    def _load(self) -> None:
        if not self._locales_dir.exists():
            logger.warning("Locales directory not found: %s", self._locales_dir)
            return

        for file_path in sorted(self._locales_dir.glob("*.json")):
            with open(file_path, encoding="utf-8") as f:
                self._translations[file_path.stem.lower()] = json.load(f)
            logger.debug("Loaded validation messages for %s", file_path.stem)

    @property
    def locales(self) -> list[str]:
        return sorted(self._translations)

    def _candidates(self, languages: Iterable[str]) -> Iterator[str]:
        for tag in languages:
            tag = tag.lower().replace("_", "-")
            yield tag
            primary = tag.split("-", 1)[0]
            if primary != tag:
                yield primary
        yield self.default_locale

    def message(
        self,
        key: str,
        languages: Iterable[str] = (),
        context: dict[str, Any] | None = None,
    ) -> str:
        """Return the message for ``key`` in the first supported language."""
        for locale in self._candidates(languages):
            messages = self._translations.get(locale)
            if messages and key in messages:
                return _interpolate(messages[key], context or {})

        logger.warning("No validation message for rule %r", key)
        return key


def _interpolate(message: str, context: dict[str, Any]) -> str:
    def replace_var(match: re.Match[str]) -> str:
        return str(context.get(match.group(1), match.group(0)))

    return re.sub(r"\{([^}]+)\}", replace_var, message)


default_catalog = MessageCatalog()
