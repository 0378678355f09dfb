"""
District Key Normalization

Single source of truth for turning free-text district and school names into
the lookup keys that join the budget, enrollment and anchor datasets. Every
loader, script and the estimator go through this module; a key produced
anywhere else will not join.

Usage:
    from district_mergers.normalize import KeyNormalizer, district_key

    district_key("Bristol-Warren Regional School District")   # 'bristol warren'

    normalizer = KeyNormalizer(aliases={"n kingstown": "north kingstown"})
    normalizer.district_key("N. Kingstown")                   # 'north kingstown'
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional

# Separator between the district and school parts of a school key. Never
# survives normalization, so it cannot appear inside either component.
SCHOOL_KEY_SEPARATOR = "||"

DISTRICT_SUFFIXES = (
    " regional school district",
    " school district",
    " public schools",
)

LEVEL_SUFFIXES = (
    " elementary",
    " secondary",
)

# Normalized variant -> canonical key, for names no rule can reconcile
DEFAULT_ALIASES: Dict[str, str] = {
    "bistol warren regional district": "bristol warren",
}

_AMPERSAND = re.compile(r"\s*&\s*")
_DASHES = re.compile("[-–—]")
_PUNCTUATION = re.compile(r"[^A-Za-z0-9_\s]")
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*")
_WHITESPACE = re.compile(r"\s+")


def _strip_one_suffix(text: str, suffixes: Iterable[str]) -> str:
    for suffix in suffixes:
        if text.endswith(suffix):
            return text[:-len(suffix)].strip()
    return text


class KeyNormalizer:
    """
    Canonicalizes district and school names into join keys.

    Args:
        aliases: Mapping of name variant to canonical key. Variants are
            normalized on construction, so raw spellings are accepted.
        strip_parentheticals_first: Remove "(...)" asides before punctuation
            is stripped. Set to False to reproduce keys built by the older
            pipeline, where the aside rule ran after the parentheses were
            already gone and so kept the aside text in the key.
    """

    def __init__(
        self,
        aliases: Optional[Mapping[str, str]] = None,
        strip_parentheticals_first: bool = True
    ):
        self.strip_parentheticals_first = strip_parentheticals_first
        source = DEFAULT_ALIASES if aliases is None else aliases
        self.aliases: Dict[str, str] = {
            self.normalize(variant): canonical
            for variant, canonical in source.items()
        }

    def normalize(self, name: str) -> str:
        """
        Normalize a free-text name.

        Never raises: empty or non-string input yields "".

        Example:
            >>> KeyNormalizer().normalize("Exeter-West Greenwich Regional School District")
            'exeter west greenwich'
        """
        if not name or not isinstance(name, str):
            return ""

        text = name.strip().lower()
        text = _AMPERSAND.sub(" and ", text)
        text = _DASHES.sub(" ", text)
        if self.strip_parentheticals_first:
            text = _PARENTHETICAL.sub(" ", text)
            text = _PUNCTUATION.sub("", text)
        else:
            text = _PUNCTUATION.sub("", text)
            text = _PARENTHETICAL.sub(" ", text)
        text = _WHITESPACE.sub(" ", text).strip()

        text = _strip_one_suffix(text, DISTRICT_SUFFIXES)
        text = _strip_one_suffix(text, LEVEL_SUFFIXES)
        return text

    def district_key(self, name: str) -> str:
        """Normalize a district name and resolve it through the alias table."""
        key = self.normalize(name)
        return self.aliases.get(key, key)

    def school_key(self, district_name: str, school_name: str) -> str:
        """Composite key for a school: ``<district key>||<normalized school name>``."""
        return self.district_key(district_name) + SCHOOL_KEY_SEPARATOR + self.normalize(school_name)


def candidate_keys(mapping: Mapping[str, object], key: str, limit: int = 10) -> List[str]:
    """
    List keys in ``mapping`` that look like near misses for ``key``.

    A key is a candidate when it shares the first 8 characters of ``key`` or
    contains its first 6 characters. Mapping order is kept.
    """
    prefix = key[:8]
    stem = key[:6]
    matches = [k for k in mapping if k[:8] == prefix or stem in k]
    return matches[:limit]


default_normalizer = KeyNormalizer()


def normalize_name(name: str) -> str:
    return default_normalizer.normalize(name)


def district_key(name: str) -> str:
    return default_normalizer.district_key(name)


def school_key(district_name: str, school_name: str) -> str:
    return default_normalizer.school_key(district_name, school_name)
