from __future__ import annotations

from typing import Iterable, List


def name_portion(identity: str) -> str:
    """Text before the first ``" <"``; the whole string for a bare name."""
    return identity.split(" <", 1)[0]


def derive_stopwords(contributors: Iterable[str]) -> List[str]:
    """Space-split name tokens of each contributor, unique, first-seen order.

    Unlike a plain single-space split, the empty tokens left by runs of
    spaces are discarded rather than emitted as stopwords.
    """
    tokens = dict.fromkeys(
        tok
        for ident in contributors
        for tok in name_portion(ident).split(" ")
        if tok
    )
    return list(tokens)
