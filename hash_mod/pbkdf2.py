from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .adapter import AdapterOptions, HashResult, apply_base_options
from .config import MAX_COST, MIN_COST, Pbkdf2Config, get_config, parse_cost
from .encoding import ITOA64, encode64, random_bytes
from .kdf import KDFParams, derive_key

logger = logging.getLogger(__name__)

IDENTIFIER = "p5v2"
SALT_BYTES = 6
KEY_BYTES = 24
DIGEST_CHARS = 32

_SALT_RE = re.compile(r"\$p5v2\$[./0-9A-Za-z]{1}[./0-9A-Za-z]{8}\$?")
_DIGEST_RE = re.compile(r"[./0-9A-Za-z]{32}")


@dataclass(frozen=True)
class Pbkdf2Adapter:
    """PBKDF2 crypt() adapter.

    Hash format::

        $p5v2$C$SSSSSSSS$HHHHHHHHHHHHHHHHHHHHHHHHHHHHHHHH

    ``C`` is log2 of the iteration count as one alphabet character, ``S`` the
    encoded 48-bit salt and ``H`` the encoded 192-bit PBKDF2-HMAC-SHA256 key.
    The identifier is ``p5v2`` rather than the ``p5k2`` of the older Python
    PBKDF2 module; the two formats are not compatible.
    """

    config: Pbkdf2Config = field(default_factory=Pbkdf2Config)

    @property
    def iteration_count_log2(self) -> int:
        return self.config.iteration_count_log2

    def gen_salt(self, raw: Optional[bytes] = None) -> str:
        """Return a new ``$p5v2$CSSSSSSSS$`` salt.

        ``raw`` is the 6-byte salt value; fresh random bytes are used when it
        is omitted.
        """
        if not raw:
            raw = random_bytes(SALT_BYTES)
        if len(raw) != SALT_BYTES:
            raise ValueError(f"Salt input must be exactly {SALT_BYTES} bytes.")

        count = ITOA64[min(max(self.config.iteration_count_log2, MIN_COST), MAX_COST)]
        return f"${IDENTIFIER}${count}{encode64(raw, SALT_BYTES)}$"

    def hash(self, password: bytes | str, salt: Optional[str] = None) -> HashResult:
        """Hash ``password``, reporting failure as a result instead of raising."""
        if not salt:
            salt = self.gen_salt()

        candidate = None
        if self.verify(salt) and ITOA64.index(salt[6]) <= MAX_COST:
            params = KDFParams(
                iterations=1 << ITOA64.index(salt[6]),
                key_len=KEY_BYTES,
                algorithm=self.config.algorithm,
            )
            # the HMAC salt is the encoded text, not the raw bytes behind it
            checksum = derive_key(password, salt[7:15].encode("ascii"), params)
            candidate = salt[:16].rstrip("$") + "$" + encode64(checksum, KEY_BYTES)

        if candidate is None or not self.verify_hash(candidate):
            logger.warning("Failed generating a valid hash from the supplied salt")
            return HashResult.failure(salt)
        return HashResult.success(candidate)

    def crypt(self, password: bytes | str, salt: Optional[str] = None) -> str:
        """crypt()-style entry point.

        Returns the hash, or ``*0`` / ``*1`` on failure (always different from
        ``salt``). Raises HashGenerationError instead when the adapter was
        configured with throwExceptionOnFailure.
        """
        result = self.hash(password, salt)
        if not result.ok and self.config.throw_on_failure:
            return result.unwrap()
        return result.value

    def check_password(self, password: bytes | str, stored_hash: str) -> bool:
        if not self.verify_hash(stored_hash):
            return False
        return self.hash(password, stored_hash).value == stored_hash

    def set_options(self, options: Mapping[str, Any]) -> Pbkdf2Adapter:
        """Return a copy of this adapter with ``options`` applied.

        Recognized keys, case-insensitive:

        throwExceptionOnFailure
            Raise HashGenerationError from crypt() instead of returning a
            failure string.
        iterationCountLog2
            Base-2 logarithm of the PBKDF2 iteration count, 1 - 30. Defaults
            to 12.

        Unknown keys are ignored. An invalid value raises InvalidOptionError
        and leaves this adapter untouched.
        """
        base = apply_base_options(options, AdapterOptions(self.config.throw_on_failure))
        cost = self.config.iteration_count_log2
        for key, value in options.items():
            if str(key).lower() == "iterationcountlog2":
                cost = parse_cost(value)

        return replace(
            self,
            config=replace(
                self.config,
                iteration_count_log2=cost,
                throw_on_failure=base.throw_on_failure,
            ),
        )

    def verify(self, value: str) -> bool:
        return self.verify_salt(value) or self.verify_hash(value)

    def verify_hash(self, value: str) -> bool:
        if not isinstance(value, str) or len(value) < DIGEST_CHARS:
            return False
        return self.verify_salt(value[:-DIGEST_CHARS]) and bool(
            _DIGEST_RE.fullmatch(value[-DIGEST_CHARS:])
        )

    def verify_salt(self, value: str) -> bool:
        return isinstance(value, str) and bool(_SALT_RE.fullmatch(value))


def default_adapter() -> Pbkdf2Adapter:
    return Pbkdf2Adapter(config=get_config())
