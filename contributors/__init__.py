"""Contributor extraction from git history.

Submodules are imported lazily by callers; importing one configures logging
(see ``contributors.utils.get_logger``).
"""

__all__: list[str] = []
