"""Identity canonicalizer backed by a YAML alias mapping.

The resource maps each canonical identity to the list of alternate
identities that should collapse into it::

    "Jane Doe <jdoe@cpan.org>":
      - "Jane Doe <jane@work.example>"
      - "jdoe <jdoe@laptop.local>"

It is read once per canonicalizer and inverted into an alias -> canonical
table.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import yaml
from pydantic import TypeAdapter, ValidationError

from contributors.errors import ResourceLoadError
from contributors.utils import get_logger, load_file

logger = get_logger(__name__)

MAPPING_FILENAME = "author-emails.yaml"

_MAPPING_ADAPTER = TypeAdapter(Dict[str, List[str]])


def default_mapping_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / MAPPING_FILENAME


def load_mapping(path: Union[str, Path]) -> Dict[str, List[str]]:
    try:
        raw = yaml.safe_load(load_file(str(path)))
    except OSError as e:
        raise ResourceLoadError(f"cannot read identity mapping {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ResourceLoadError(f"cannot parse identity mapping {path}: {e}") from e
    try:
        return _MAPPING_ADAPTER.validate_python(raw, strict=True)
    except ValidationError as e:
        raise ResourceLoadError(f"identity mapping {path} is not a mapping of string to list of strings: {e}") from e


def invert_mapping(mapping: Mapping[str, List[str]]) -> Dict[str, str]:
    table: Dict[str, str] = {}
    for canonical, alternates in mapping.items():
        for alt in alternates:
            prev = table.get(alt)
            if prev is not None and prev != canonical:
                raise ResourceLoadError(f"alias {alt!r} maps to both {prev!r} and {canonical!r}")
            table[alt] = canonical
    return table


class IdentityCanonicalizer:
    def __init__(
        self,
        path: Union[str, Path, None] = None,
        *,
        mapping: Optional[Mapping[str, List[str]]] = None,
    ):
        self.path = Path(path) if path is not None else default_mapping_path()
        self._table: Optional[Dict[str, str]] = invert_mapping(mapping) if mapping is not None else None
        self._lock = threading.Lock()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, List[str]]) -> "IdentityCanonicalizer":
        return cls(mapping=mapping)

    def table(self) -> Dict[str, str]:
        if self._table is None:
            with self._lock:
                if self._table is None:
                    table = invert_mapping(load_mapping(self.path))
                    logger.info("canonical: aliases=%d from %s", len(table), self.path)
                    self._table = table
        return self._table

    def lookup(self, identity: str) -> str:
        return self.table().get(identity, identity)
