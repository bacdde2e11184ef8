import pytest

from cookbook.logging_config import redact
from cookbook.normalize import normalize_tag, normalize_tags, parse_tag_filter
from cookbook.security import (
    TokenExpired, TokenInvalid, create_token, decode_token, hash_password,
    token_subject, verify_password,
)


class FakeUser:
    id = 42
    email = "cook@mail.com"


def test_password_hash_roundtrip():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)
    assert not verify_password("secret1", "")


def test_hashes_are_salted():
    assert hash_password("secret1") != hash_password("secret1")


def test_token_claims():
    payload = decode_token(create_token(FakeUser))
    assert payload["sub"] == "42"
    assert payload["email"] == "cook@mail.com"
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60
    assert token_subject(payload) == 42


def test_expired_token():
    with pytest.raises(TokenExpired):
        decode_token(create_token(FakeUser, expires_minutes=-1))


def test_garbage_token():
    with pytest.raises(TokenInvalid):
        decode_token("garbage")


def test_bad_subject():
    with pytest.raises(TokenInvalid):
        token_subject({"sub": "abc"})


@pytest.mark.parametrize(
    "raw,expected",
    (
        ("Dessert", "dessert"),
        ("  dessert ", "dessert"),
        ("", ""),
        (None, ""),
        ("Quick Dinner", "quick dinner"),
    ),
)
def test_normalize_tag(raw, expected):
    assert normalize_tag(raw) == expected


def test_normalize_tags_drops_blanks_and_duplicates():
    assert normalize_tags(["Easy", " ", "easy ", "Dinner"]) == ["easy", "dinner"]
    assert normalize_tags(None) == []


def test_parse_tag_filter():
    assert parse_tag_filter("quick, Dinner,,") == ["quick", "dinner"]
    assert parse_tag_filter("") == []
    assert parse_tag_filter(None) == []


def test_redact_hides_credentials():
    msg = redact("Authorization: Bearer abc.def.ghi password=hunter2 from a@b.com")
    assert "abc.def.ghi" not in msg
    assert "hunter2" not in msg
    assert "a@b.com" not in msg
