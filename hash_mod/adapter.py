from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .errors import HashGenerationError, InvalidOptionError

# crypt(3) failure strings; neither is a valid salt or hash for any adapter
FAILURE = "*0"
FAILURE_ALT = "*1"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def failure_sentinel(salt: Optional[str]) -> str:
    # must never equal the salt the caller passed in
    return FAILURE_ALT if salt == FAILURE else FAILURE


@dataclass(frozen=True)
class HashResult:
    value: str
    ok: bool

    @classmethod
    def success(cls, value: str) -> HashResult:
        return cls(value=value, ok=True)

    @classmethod
    def failure(cls, salt: Optional[str]) -> HashResult:
        return cls(value=failure_sentinel(salt), ok=False)

    def unwrap(self) -> str:
        if not self.ok:
            raise HashGenerationError("Failed generating a valid hash", self.value)
        return self.value


@dataclass(frozen=True)
class AdapterOptions:
    throw_on_failure: bool = False


def parse_flag(key: str, value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise InvalidOptionError(f"Option {key} expects a boolean, got {value!r}", key)
    return bool(value)


def apply_base_options(options: Mapping[str, Any], current: AdapterOptions) -> AdapterOptions:
    """Apply the options every adapter understands, ignoring all others."""
    throw = current.throw_on_failure
    for key, value in options.items():
        if str(key).lower() == "throwexceptiononfailure":
            throw = parse_flag(key, value)
    return AdapterOptions(throw_on_failure=throw)


@runtime_checkable
class HashAdapter(Protocol):
    """Operations every crypt() adapter provides.

    Adapters are immutable values: set_options returns a new adapter, so a
    configured adapter can be shared between threads without locking.
    """

    def crypt(self, password: bytes | str, salt: Optional[str] = None) -> str: ...

    def gen_salt(self, raw: Optional[bytes] = None) -> str: ...

    def verify_hash(self, value: str) -> bool: ...

    def verify_salt(self, value: str) -> bool: ...

    def set_options(self, options: Mapping[str, Any]) -> HashAdapter: ...
