import pytest

from clarikit.mnemonic import address_from_public_key, b58encode, bip39_seed_from_mnemonic

MNEMONIC = " ".join(["abandon"] * 11 + ["about"])
ALPHABET = set("123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz")
PUBLIC_KEY = "0279BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798"


def test_seed_length_and_determinism():
    seed = bip39_seed_from_mnemonic(MNEMONIC, "")
    assert len(seed) == 64
    assert seed == bip39_seed_from_mnemonic(MNEMONIC, "")


def test_seed_depends_on_password():
    password = "password"
    with_password = bip39_seed_from_mnemonic(MNEMONIC, password)
    assert len(with_password) == 64
    assert with_password != bip39_seed_from_mnemonic(MNEMONIC, "")


def test_seed_depends_on_mnemonic():
    other = bip39_seed_from_mnemonic("zoo " * 11 + "wrong", "")
    assert other != bip39_seed_from_mnemonic(MNEMONIC, "")
    assert len(other) == 64


def test_b58encode_empty_and_zeros():
    assert b58encode(b"") == ""
    assert b58encode(b"\x00\x00") == "11"


def test_b58encode_known_value():
    assert b58encode(b"hello world") == "StV1DL6CwTryKyV"


def test_b58encode_leading_zero_prefix():
    body = b58encode(b"\x05\x06")
    assert b58encode(b"\x00\x05\x06") == "1" + body
    assert set(body) <= ALPHABET


def test_address_from_public_key_known_value():
    assert address_from_public_key(PUBLIC_KEY) == "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"


def test_address_is_case_insensitive_hex():
    address = address_from_public_key(PUBLIC_KEY.lower())
    assert address == address_from_public_key(PUBLIC_KEY)
    assert address.startswith("1")
    assert set(address) <= ALPHABET


def test_address_rejects_bad_hex():
    with pytest.raises(ValueError):
        address_from_public_key("not-hex")