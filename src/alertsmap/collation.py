"""Language-aware string ordering for region names."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, MutableSequence, TypeVar

from pyuca import Collator

_LOGGER = logging.getLogger("alertsmap.collation")

T = TypeVar("T")

PRIMARY = 1
SECONDARY = 2
TERTIARY = 3

# Cyrillic and Latin names both order correctly under the root UCA table,
# which has no per-language tailoring for these scripts.
SUPPORTED_LOCALES = frozenset({"uk", "en"})


@lru_cache(maxsize=1)
def _collator() -> Collator:
    _LOGGER.debug("Loading UCA collation table")
    return Collator()


def _language(locale: str) -> str:
    language = locale.replace("-", "_").split("_", 1)[0].casefold()
    if language not in SUPPORTED_LOCALES:
        supported = ", ".join(sorted(SUPPORTED_LOCALES))
        raise ValueError(f"Unsupported collation locale '{locale}'. Supported: {supported}")
    return language


def _truncate_levels(key: tuple[int, ...], strength: int) -> tuple[int, ...]:
    # UCA sort keys separate weight levels with 0; weights themselves are never 0.
    separators = 0
    for pos, weight in enumerate(key):
        if weight == 0:
            separators += 1
            if separators == strength:
                return key[:pos]
    return key


def collation_key(text: str, locale: str = "uk", strength: int = SECONDARY) -> tuple[int, ...]:
    """Sort key for ``text``; ``strength`` 2 ignores case but keeps accents."""
    if strength not in (PRIMARY, SECONDARY, TERTIARY):
        raise ValueError(f"Unsupported collation strength: {strength}")
    _language(locale)
    return _truncate_levels(_collator().sort_key(text), strength)


def sort_by_locale(
    items: MutableSequence[T],
    key: Callable[[T], str],
    locale: str = "uk",
    strength: int = SECONDARY,
) -> None:
    """Sort ``items`` in place by the collated order of ``key(item)``.

    The sort is stable, so items whose keys compare equal at ``strength``
    keep their input order.
    """
    _language(locale)
    ordered = sorted(items, key=lambda item: collation_key(key(item), locale, strength))
    items[:] = ordered
