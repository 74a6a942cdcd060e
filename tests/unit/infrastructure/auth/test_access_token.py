"""Unit tests for the session credential wrapper."""

import hashlib
import pickle

import pytest

from rollcall.infrastructure.auth.access_token import AccessToken, hash_token


def test_generate_produces_64_hex_chars():
    token = AccessToken.generate()
    raw = token.reveal()

    assert len(raw) == 64
    int(raw, 16)


def test_generate_is_unique():
    assert AccessToken.generate().reveal() != AccessToken.generate().reveal()


def test_str_repr_and_format_are_redacted():
    token = AccessToken("super-secret-value")

    assert str(token) == "<redacted>"
    assert repr(token) == "AccessToken(<redacted>)"
    assert f"{token}" == "<redacted>"
    assert "super-secret-value" not in f"token={token!s} {token!r}"


def test_digest_is_sha256_of_raw_value():
    token = AccessToken("abc")

    assert token.digest() == hashlib.sha256(b"abc").hexdigest()
    assert token.digest() == hash_token("abc")


def test_matches_stored_digest():
    token = AccessToken.generate()

    assert token.matches(token.digest()) is True
    assert token.matches(hash_token("something else")) is False


def test_equality_and_hash():
    a = AccessToken("same")
    b = AccessToken("same")
    c = AccessToken("other")

    assert a == b
    assert a != c
    assert hash(a) == hash(b)
    assert len({a, b, c}) == 2


def test_equality_with_non_ascii_values():
    assert AccessToken("héllo") == AccessToken("héllo")
    assert AccessToken("héllo") != AccessToken("hello")


def test_not_equal_to_plain_string():
    assert AccessToken("value") != "value"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_from_cookie_treats_blank_as_absent(value):
    assert AccessToken.from_cookie(value) is None


def test_from_cookie_strips_whitespace():
    token = AccessToken.from_cookie("  abc  ")

    assert token is not None
    assert token.reveal() == "abc"


def test_rejects_non_string_value():
    with pytest.raises(TypeError):
        AccessToken(123)  # type: ignore[arg-type]


def test_cannot_be_pickled():
    with pytest.raises(TypeError):
        pickle.dumps(AccessToken("secret"))
