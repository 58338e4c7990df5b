# tuiedit/integrations/Localization.py
"""Localization.py
===================
Display strings for the editor UI, loaded from TOML catalogs.

Catalogs live in ``tuiedit/locales/<locale>.toml`` and are parsed with the
same ``toml`` library used for the user configuration. Nested tables are
flattened to dotted keys, so ``[status] saved = "..."`` is looked up as
``status.saved``.

Lookup order for ``get(key)``: current locale, fallback locale, then the
bracketed key literal ``[key]``. A ``Localization`` instance is created once
at start-up and handed to the editor explicitly.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import toml

logger = logging.getLogger("tuiedit")

DEFAULT_LOCALE = "en-US"
SUPPORTED_LOCALES = ("en-US", "es-ES", "fr-FR", "de-DE")
LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _flatten(table: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in table.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = str(value)
    return flat


def normalize_locale(raw: Optional[str]) -> Optional[str]:
    """Maps ``es_ES.UTF-8``, ``fr`` or ``de-de`` to a supported locale id."""
    if not raw:
        return None
    tag = raw.split(".")[0].split("@")[0].replace("_", "-").strip()
    if not tag:
        return None
    for supported in SUPPORTED_LOCALES:
        if supported.lower() == tag.lower():
            return supported
    language = tag.split("-")[0].lower()
    for supported in SUPPORTED_LOCALES:
        if supported.split("-")[0].lower() == language:
            return supported
    return None


class Localization:
    """Catalog-backed string lookup.

    Args:
        locale: Initial locale id (any form accepted by ``normalize_locale``).
        fallback: Locale consulted when a key is missing in ``locale``.
        catalog_dir: Directory holding ``<locale>.toml`` files.
    """

    def __init__(
        self,
        locale: Optional[str] = DEFAULT_LOCALE,
        fallback: str = DEFAULT_LOCALE,
        catalog_dir: Optional[Path] = None,
    ) -> None:
        self.catalog_dir = Path(catalog_dir) if catalog_dir else LOCALES_DIR
        self.fallback_locale = normalize_locale(fallback) or DEFAULT_LOCALE
        self._catalogs: dict[str, dict[str, str]] = {}
        self.current_locale = self.fallback_locale
        if locale and not self.set_locale(locale):
            logger.warning("Locale '%s' not supported; using %s", locale, self.current_locale)

    def available_locales(self) -> list[str]:
        return list(SUPPORTED_LOCALES)

    def _catalog(self, locale: str) -> dict[str, str]:
        if locale not in self._catalogs:
            path = self.catalog_dir / f"{locale}.toml"
            try:
                self._catalogs[locale] = _flatten(toml.load(path))
                logger.debug("Loaded %d strings for %s", len(self._catalogs[locale]), locale)
            except (OSError, toml.TomlDecodeError) as e:
                logger.error("Could not load locale catalog '%s': %s", path, e)
                self._catalogs[locale] = {}
        return self._catalogs[locale]

    def set_locale(self, locale: str) -> bool:
        normalized = normalize_locale(locale)
        if normalized is None:
            return False
        self.current_locale = normalized
        self._catalog(normalized)
        return True

    def get(self, key: str, **args: Any) -> str:
        template = self._catalog(self.current_locale).get(key)
        if template is None and self.current_locale != self.fallback_locale:
            template = self._catalog(self.fallback_locale).get(key)
        if template is None:
            return f"[{key}]"
        if not args:
            return template
        try:
            return template.format_map(_KeepMissing(args))
        except (ValueError, IndexError) as e:
            logger.warning("Bad format string for '%s': %s", key, e)
            return template
