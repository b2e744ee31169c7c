from __future__ import annotations

from typing import Dict, List, Sequence

METADATA_KEY = "x_contributors"


def export_metadata(contributors: Sequence[str]) -> Dict[str, List[str]]:
    if not contributors:
        return {}
    return {METADATA_KEY: list(contributors)}
