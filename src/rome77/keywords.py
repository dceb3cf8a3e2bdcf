"""Keyword table, loaded from keywords.yaml next to this module."""

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml

KEYWORDS_FILE = Path(__file__).resolve().parent / "keywords.yaml"

# Token kinds that must be spelled by exactly one keyword.
KEYWORD_KINDS = ("AS", "MUNUS", "GRAFO", "ANAGNOSI", "SINON")


def load_keywords(path: Optional[Path] = None) -> Mapping[str, str]:
    """Read and validate a keyword file. Returns a read-only word -> kind mapping."""
    path = path or KEYWORDS_FILE
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    table = data.get("keywords") if isinstance(data, dict) else None
    if not isinstance(table, dict) or not table:
        raise ValueError(f"{path}: expected a non-empty 'keywords' mapping")
    seen: dict[str, str] = {}
    for word, kind in table.items():
        if not isinstance(word, str) or not word.isalpha() or not word[0].isupper():
            raise ValueError(f"{path}: invalid keyword spelling {word!r}")
        if kind not in KEYWORD_KINDS:
            raise ValueError(f"{path}: unknown keyword kind {kind!r} for {word!r}")
        if kind in seen:
            raise ValueError(f"{path}: kind {kind} spelled twice ({seen[kind]!r}, {word!r})")
        seen[kind] = word
    missing = [k for k in KEYWORD_KINDS if k not in seen]
    if missing:
        raise ValueError(f"{path}: no keyword for {', '.join(missing)}")
    return MappingProxyType(dict(table))


@lru_cache(maxsize=None)
def get_keywords() -> Mapping[str, str]:
    return load_keywords()
