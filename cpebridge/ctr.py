"""AES counter (CTR) mode with a 32-bit big-endian block counter."""

from __future__ import annotations

from typing import Protocol

COUNTER_SIZE = 16
_BLOCK = 16
_COUNTER_MASK = 0xFFFFFFFF


class BlockCipher(Protocol):
    def encrypt_block(self, block: bytes) -> bytes: ...


def ctr_crypt(cipher: BlockCipher, data: bytes, counter: bytes) -> tuple[bytes, bytes]:
    """Encrypt or decrypt ``data`` in CTR mode.

    Only the last four bytes of ``counter`` are incremented, once per block,
    wrapping at 2**32. Returns the processed data and the counter value that
    follows the last block used.
    """
    data = bytes(data)
    counter = bytes(counter)
    if not data:
        raise ValueError("data must not be empty")
    if len(counter) != COUNTER_SIZE:
        raise ValueError(f"counter must be {COUNTER_SIZE} bytes, got {len(counter)}")

    prefix = counter[:12]
    block_num = int.from_bytes(counter[12:], "big")
    out = bytearray()
    for start in range(0, len(data), _BLOCK):
        keystream = cipher.encrypt_block(prefix + block_num.to_bytes(4, "big"))
        block_num = (block_num + 1) & _COUNTER_MASK
        chunk = data[start:start + _BLOCK]
        out.extend(x ^ k for x, k in zip(chunk, keystream))
    return bytes(out), prefix + block_num.to_bytes(4, "big")