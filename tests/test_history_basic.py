import subprocess

import pytest

from contributors.errors import EnvironmentUnavailable, ExternalToolError, HistoryDecodeError
from contributors.stages import history
from contributors.stages.history import AuthorRecord, HistoryReader, strip_count


def _fake_git(monkeypatch, stdout=b"", stderr=b"", returncode=0, calls=None):
    monkeypatch.setattr(history.shutil, "which", lambda name: "/usr/bin/" + name)

    def run(cmd, **kwargs):
        if calls is not None:
            calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(history.subprocess, "run", run)


def test_strip_count():
    assert strip_count("    12\tAda Lovelace <ada@example.com>") == "Ada Lovelace <ada@example.com>"
    assert strip_count("3 Bare Name") == "Bare Name"


def test_identities_from_shortlog(monkeypatch):
    calls = []
    out = "     3\tAda Lovelace <ada@example.com>\n     1\tJosé Núñez <jn@example.com>\n\n".encode("utf-8")
    _fake_git(monkeypatch, stdout=out, calls=calls)

    reader = HistoryReader(repo_dir="/repo")
    assert list(reader.identities()) == [
        "Ada Lovelace <ada@example.com>",
        "José Núñez <jn@example.com>",
    ]
    cmd, kwargs = calls[0]
    assert cmd == ["git", "shortlog", "--summary", "--email", "HEAD"]
    assert kwargs["cwd"] == "/repo"
    assert kwargs["stdin"] is subprocess.DEVNULL
    assert kwargs["timeout"] == history.DEFAULT_TIMEOUT


def test_invalid_utf8_is_fatal(monkeypatch):
    _fake_git(monkeypatch, stdout=b"1\tBad \xff Name <bad@example.com>\n")
    with pytest.raises(HistoryDecodeError):
        list(HistoryReader().identities())


def test_nonzero_exit_raises(monkeypatch):
    _fake_git(monkeypatch, stderr=b"fatal: not a git repository", returncode=128)
    with pytest.raises(ExternalToolError) as exc:
        list(HistoryReader().identities())
    assert "not a git repository" in exc.value.stderr
    assert exc.value.command[:2] == ["git", "shortlog"]


def test_timeout_raises(monkeypatch):
    monkeypatch.setattr(history.shutil, "which", lambda name: "/usr/bin/git")

    def run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(history.subprocess, "run", run)
    with pytest.raises(ExternalToolError):
        list(HistoryReader(timeout=0.5).identities())


def test_missing_git(monkeypatch):
    monkeypatch.setattr(history.shutil, "which", lambda name: None)
    reader = HistoryReader()
    assert not reader.available()
    with pytest.raises(EnvironmentUnavailable) as exc:
        list(reader.identities())
    assert isinstance(exc.value, FileNotFoundError)


def test_author_record_parse():
    rec = AuthorRecord.parse("Ada Lovelace <ada@example.com>")
    assert rec == AuthorRecord("Ada Lovelace", "ada@example.com")
    assert rec.identity == "Ada Lovelace <ada@example.com>"

    bare = AuthorRecord.parse("Ada Lovelace")
    assert bare.email is None
    assert bare.identity == "Ada Lovelace"


def test_identities_are_normalized_records(monkeypatch):
    out = b"     2\tAda  Lovelace   <ada@example.com>\n     1\tNo Email\n     1\tBlank <>\n"
    _fake_git(monkeypatch, stdout=out)
    assert list(HistoryReader().identities()) == [
        "Ada  Lovelace <ada@example.com>",
        "No Email",
        "Blank <>",
    ]
