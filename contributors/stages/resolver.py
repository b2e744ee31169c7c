from __future__ import annotations

from typing import Callable, Iterable, List, Sequence

from contributors.utils import get_logger

logger = get_logger(__name__)

# What git records when user.name / user.email were never configured.
PLACEHOLDER_IDENTITY = "Your Name <you@example.com>"


def _identity(x: str) -> str:
    return x


def resolve_contributors(
    identities: Iterable[str],
    *,
    exclude: Sequence[str] = (),
    canonicalize: Callable[[str], str] = _identity,
) -> List[str]:
    """Filter, canonicalize and deduplicate raw author identities.

    Exclusion compares the raw identity exactly against ``exclude``; declared
    authors are expected to already be canonical. The seen-set starts out
    holding the exclusions, so an alias that canonicalizes onto a declared
    author is dropped as a duplicate. First-seen order is kept.
    """
    excluded = set(exclude)
    seen = set(excluded)
    out: List[str] = []
    total = 0
    for raw in identities:
        total += 1
        if raw in excluded or raw == PLACEHOLDER_IDENTITY:
            continue
        ident = canonicalize(raw)
        if ident in seen:
            continue
        seen.add(ident)
        out.append(ident)
    logger.info("resolve: kept=%d from=%d excluded=%d", len(out), total, len(excluded))
    return out
