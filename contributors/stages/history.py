"""History reader: raw author lines from ``git shortlog``."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from typing import Iterator, List, Optional

from contributors.errors import EnvironmentUnavailable, ExternalToolError, HistoryDecodeError
from contributors.utils import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0

_COUNT_PREFIX = re.compile(r"^\s*\d+\s*")


@dataclass(frozen=True)
class AuthorRecord:
    name: str
    email: Optional[str] = None

    @property
    def identity(self) -> str:
        return f"{self.name} <{self.email}>" if self.email is not None else self.name

    @classmethod
    def parse(cls, identity: str) -> "AuthorRecord":
        name, sep, rest = identity.partition(" <")
        if not sep or not rest.endswith(">"):
            return cls(name=identity.strip())
        return cls(name=name.strip(), email=rest[:-1])


def strip_count(line: str) -> str:
    return _COUNT_PREFIX.sub("", line, count=1).strip()


def decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HistoryDecodeError(f"history output is not valid UTF-8: {raw!r}") from e


class HistoryReader:
    """Runs ``git shortlog --summary --email`` against one revision.

    The revision is always passed explicitly: without one, shortlog reads a
    log from stdin whenever stdin is not a terminal.
    """

    def __init__(
        self,
        *,
        binary: str = "git",
        repo_dir: Optional[str] = None,
        revision: str = "HEAD",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.binary = binary
        self.repo_dir = repo_dir
        self.revision = revision
        self.timeout = timeout

    def available(self) -> bool:
        return shutil.which(self.binary) is not None

    def command(self) -> List[str]:
        return [self.binary, "shortlog", "--summary", "--email", self.revision]

    def raw_lines(self) -> Iterator[bytes]:
        if not self.available():
            raise EnvironmentUnavailable(f'The "{self.binary}" executable has not been found')
        cmd = self.command()
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.repo_dir,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(f"{' '.join(cmd)} timed out after {self.timeout}s", command=cmd) from e
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        if proc.returncode != 0:
            raise ExternalToolError(
                f"{' '.join(cmd)} exited with status {proc.returncode}: {stderr}",
                command=cmd,
                stderr=stderr,
            )
        return iter(proc.stdout.splitlines())

    def identities(self) -> Iterator[str]:
        """Yield one normalized identity per author line, count removed."""
        n = 0
        for raw in self.raw_lines():
            line = decode_line(raw)
            if not line.strip():
                continue
            n += 1
            yield AuthorRecord.parse(strip_count(line)).identity
        logger.info("history: authors=%d revision=%s", n, self.revision)
