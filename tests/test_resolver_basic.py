from contributors.stages.canonical import IdentityCanonicalizer
from contributors.stages.resolver import PLACEHOLDER_IDENTITY, resolve_contributors

ADA = "Ada Lovelace <ada@example.com>"
ADA_ALT = "ada.l@alt.com <ada.l@alt.com>"


def test_resolve_example():
    canon = IdentityCanonicalizer.from_mapping({ADA: [ADA_ALT]})
    out = resolve_contributors([ADA, PLACEHOLDER_IDENTITY, ADA_ALT], exclude=[], canonicalize=canon.lookup)
    assert out == [ADA]


def test_exclusion_is_exact_and_raw():
    me = "Jane Doe <jane@example.com>"
    raw = [me, "Jane Doe <jane@other.com>", "Bob <bob@example.com>"]
    out = resolve_contributors(raw, exclude=[me])
    assert out == ["Jane Doe <jane@other.com>", "Bob <bob@example.com>"]


def test_alias_of_declared_author_dropped():
    me = "Jane Doe <jane@example.com>"
    canon = IdentityCanonicalizer.from_mapping({me: ["jd <jd@laptop>"]})
    out = resolve_contributors(["jd <jd@laptop>", "Bob <bob@example.com>"], exclude=[me], canonicalize=canon.lookup)
    assert out == ["Bob <bob@example.com>"]


def test_first_seen_order_kept():
    canon = IdentityCanonicalizer.from_mapping({"C <c@x>": ["c2 <c@y>"]})
    raw = ["B <b@x>", "c2 <c@y>", "A <a@x>", "B <b@x>", "C <c@x>"]
    assert resolve_contributors(raw, canonicalize=canon.lookup) == ["B <b@x>", "C <c@x>", "A <a@x>"]


def test_empty_input():
    assert resolve_contributors([], exclude=["Me <me@x>"]) == []
