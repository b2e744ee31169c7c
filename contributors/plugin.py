"""Build plugin that publishes git contributors.

``ContributorsFromGit`` plays two roles for the build system that drives it:
it runs before the build (filling the ``%PodWeaver`` stash with contributor
and stopword entries) and it provides distribution metadata
(``x_contributors``). Both read the same memoized contributor list, so
repeated calls within a run never invoke git twice.
"""

from __future__ import annotations

import threading
import typing as t
from dataclasses import dataclass, field

from contributors.stages.canonical import IdentityCanonicalizer
from contributors.stages.history import HistoryReader
from contributors.stages.metadata import export_metadata
from contributors.stages.resolver import resolve_contributors
from contributors.stages.stopwords import derive_stopwords
from contributors.stash import CONTRIBUTORS_KEY, PODWEAVER_STASH, STOPWORDS_KEY, PodWeaverStash
from contributors.utils import get_logger

logger = get_logger(__name__)


@t.runtime_checkable
class BeforeBuild(t.Protocol):
    def before_build(self) -> None: ...


@t.runtime_checkable
class MetaProvider(t.Protocol):
    def metadata(self) -> t.Dict[str, t.Any]: ...


@dataclass
class BuildContext:
    """The slice of the build system the plugin talks to."""

    authors: t.List[str] = field(default_factory=list)
    stashes: t.Dict[str, PodWeaverStash] = field(default_factory=dict)

    def stash_named(self, name: str) -> t.Optional[PodWeaverStash]:
        return self.stashes.get(name)

    def register_stash(self, name: str, stash: PodWeaverStash) -> None:
        if name in self.stashes:
            raise ValueError(f"stash {name} already registered")
        self.stashes[name] = stash


class ContributorsFromGit(BeforeBuild, MetaProvider):
    def __init__(
        self,
        context: BuildContext,
        *,
        history: t.Optional[HistoryReader] = None,
        canonicalizer: t.Optional[IdentityCanonicalizer] = None,
    ):
        self.context = context
        self.history = history or HistoryReader()
        self.canonicalizer = canonicalizer or IdentityCanonicalizer()
        self._lock = threading.Lock()
        self._contributors: t.Optional[t.List[str]] = None
        self._stopwords: t.Optional[t.List[str]] = None

    def contributor_list(self) -> t.List[str]:
        if self._contributors is None:
            with self._lock:
                if self._contributors is None:
                    if not self.history.available():
                        self._contributors = []
                    else:
                        self._contributors = resolve_contributors(
                            self.history.identities(),
                            exclude=self.context.authors,
                            canonicalize=self.canonicalizer.lookup,
                        )
        return list(self._contributors)

    def stopword_list(self) -> t.List[str]:
        if self._stopwords is None:
            stopwords = derive_stopwords(self.contributor_list())
            with self._lock:
                if self._stopwords is None:
                    self._stopwords = stopwords
        return list(self._stopwords)

    def _stash(self) -> PodWeaverStash:
        stash = self.context.stash_named(PODWEAVER_STASH)
        if stash is None:
            stash = PodWeaverStash()
            self.context.register_stash(PODWEAVER_STASH, stash)
        return stash

    def before_build(self) -> None:
        if not self.history.available():
            logger.warning('The "%s" executable has not been found', self.history.binary)
            return

        # TODO: also check that repo_dir is inside a work tree before touching the stash
        # lists first: a fatal history error must leave no stash behind
        contributors = self.contributor_list()
        stopwords = self.stopword_list()
        stash = self._stash()
        n_contrib = stash.set_indexed(CONTRIBUTORS_KEY, contributors)
        n_stop = stash.set_indexed(STOPWORDS_KEY, stopwords)
        logger.info("stash %s: contributors=%d stopwords=%d", PODWEAVER_STASH, n_contrib, n_stop)

    def metadata(self) -> t.Dict[str, t.Any]:
        return export_metadata(self.contributor_list())
