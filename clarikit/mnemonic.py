"""Seed derivation from mnemonics and legacy address encoding."""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160

__all__ = ["bip39_seed_from_mnemonic", "b58encode", "address_from_public_key"]

_PBKDF2_ROUNDS = 2048
_PBKDF2_BYTES = 64
_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_MAINNET_SINGLESIG = b"\x00"


def bip39_seed_from_mnemonic(mnemonic: str, password: str) -> bytes:
    """Derive the 64-byte BIP-39 seed for a mnemonic and passphrase."""
    return hashlib.pbkdf2_hmac(
        "sha512",
        mnemonic.encode("utf-8"),
        f"mnemonic{password}".encode("utf-8"),
        _PBKDF2_ROUNDS,
        _PBKDF2_BYTES,
    )


def b58encode(data: bytes) -> str:
    """Base58 encoding with the Bitcoin alphabet."""
    data = bytes(data)
    stripped = data.lstrip(b"\x00")
    leading_zeros = len(data) - len(stripped)
    number = int.from_bytes(stripped, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_B58_ALPHABET[remainder])
    return _B58_ALPHABET[0] * leading_zeros + "".join(reversed(digits))


def address_from_public_key(public_key: str) -> str:
    """Base58Check address of a hex-encoded public key.

    Raises ValueError when ``public_key`` is not valid hex.
    """
    key_bytes = bytes.fromhex(public_key)
    sha = hashlib.sha256(key_bytes).digest()
    h160 = RIPEMD160.new(sha).digest()
    versioned = _MAINNET_SINGLESIG + h160
    checksum = hashlib.sha256(hashlib.sha256(versioned).digest()).digest()[:4]
    return b58encode(versioned + checksum)