"""Configuration stash handed to documentation tooling.

Keys follow the weaver convention ``Section.option[index]``, e.g.
``Contributors.contributors[0]`` or ``StopWords.include[3]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

PODWEAVER_STASH = "%PodWeaver"

CONTRIBUTORS_KEY = "Contributors.contributors"
STOPWORDS_KEY = "StopWords.include"


@dataclass
class PodWeaverStash:
    config: Dict[str, str] = field(default_factory=dict)

    def set_indexed(self, key: str, values: Iterable[str]) -> int:
        n = 0
        for i, value in enumerate(values):
            self.config[f"{key}[{i}]"] = value
            n += 1
        return n
