from __future__ import annotations
import os


# crypt(3) alphabet, shared by every adapter's salt and digest text
ITOA64 = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def random_bytes(n: int) -> bytes:
    if n < 1:
        raise ValueError("Random byte count must be positive.")
    return os.urandom(n)


def encode64(data: bytes, count: int | None = None) -> str:
    """Pack raw bytes into crypt-style text, 3 bytes -> 4 characters.

    Bits are consumed least significant first, so this is not base64 with a
    different table. A trailing group of 1 or 2 bytes yields 2 or 3 chars.
    """
    if count is None:
        count = len(data)
    if count > len(data):
        raise ValueError("Count exceeds input length.")

    out = []
    for i in range(0, count, 3):
        group = data[i : min(i + 3, count)]
        value = int.from_bytes(group, "little")
        # one more output char than input bytes in the group
        for shift in range(0, (len(group) + 1) * 6, 6):
            out.append(ITOA64[(value >> shift) & 0x3F])
    return "".join(out)
