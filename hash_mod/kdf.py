from __future__ import annotations
import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)

_ALGORITHMS = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


@dataclass(frozen=True)
class KDFParams:
    iterations: int = 4096
    key_len: int = 24  # 24 bytes -> 32 crypt chars
    algorithm: str = "sha256"


def hash_algorithm(name: str) -> hashes.HashAlgorithm:
    try:
        return _ALGORITHMS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unsupported HMAC hash algorithm: {name}") from None


def _as_bytes(value: bytes | bytearray | str, what: str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise ValueError(f"{what} must be bytes or str.")


def pbkdf2(
    password: bytes | str,
    salt: bytes | str,
    iteration_count: int = 1000,
    key_length: int = 20,
    algorithm: str = "sha1",
) -> bytes:
    """PKCS #5 v2.0 key derivation over HMAC-<algorithm>.

    Matches the RFC 6070 HMAC-SHA1 vectors and the usual HMAC-SHA2 vectors.
    """
    if iteration_count < 1:
        raise ValueError("Iteration count must be at least 1.")
    if key_length < 1:
        raise ValueError("Key length must be at least 1.")

    kdf = PBKDF2HMAC(
        algorithm=hash_algorithm(algorithm),
        length=key_length,
        salt=_as_bytes(salt, "Salt"),
        iterations=iteration_count,
    )
    return kdf.derive(_as_bytes(password, "Password"))


def derive_key(password: bytes | str, salt: bytes, params: KDFParams = KDFParams()) -> bytes:
    logger.debug(
        f"Deriving {params.key_len}-byte key with PBKDF2-HMAC-{params.algorithm.upper()}, "
        f"{params.iterations} iterations"
    )
    return pbkdf2(
        password,
        salt,
        iteration_count=params.iterations,
        key_length=params.key_len,
        algorithm=params.algorithm,
    )
