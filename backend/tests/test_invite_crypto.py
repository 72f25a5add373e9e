import re

import pytest
from unittest.mock import patch

from app.core.invite_crypto import hash_code, verify_code, ITERATIONS

HASH_LAYOUT = re.compile(r"^[0-9a-f]{32}:[0-9a-f]{64}$")


def test_hash_layout():
    result = hash_code("music-lumina-2024")

    assert HASH_LAYOUT.match(result.hash)
    assert result.salt == result.hash.split(":")[0]
    assert ITERATIONS == 100_000


def test_round_trip():
    stored = hash_code("music-lumina-2024").hash

    assert verify_code("music-lumina-2024", stored) is True


def test_random_salts_give_different_hashes():
    first = hash_code("waitlist-spring")
    second = hash_code("waitlist-spring")

    assert first.salt != second.salt
    assert first.hash != second.hash
    assert verify_code("waitlist-spring", first.hash)
    assert verify_code("waitlist-spring", second.hash)


def test_fixed_salt_is_deterministic():
    salt = bytes(range(16))

    assert hash_code("chopin", salt).hash == hash_code("chopin", salt).hash
    assert hash_code("chopin", salt).salt == salt.hex()


def test_wrong_code_is_rejected():
    stored = hash_code("music-lumina-2024").hash

    assert verify_code("music-lumina-2025", stored) is False
    assert verify_code("MUSIC-LUMINA-2024", stored) is False


@pytest.mark.parametrize("stored", [
    "not-a-valid-hash",
    "",
    ":",
    "abcd:",
    ":abcd",
    "aa:bb:cc",
    "zz11:" + "0" * 64,
])
def test_malformed_hash_fails_closed(stored):
    assert verify_code("music-lumina-2024", stored) is False


def test_crypto_error_is_swallowed():
    stored = hash_code("music-lumina-2024").hash

    with patch("app.core.invite_crypto._derive_key", side_effect=RuntimeError("no backend")):
        assert verify_code("music-lumina-2024", stored) is False
