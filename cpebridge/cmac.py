"""AES-128-CMAC message authentication (NIST SP 800-38B)."""

from __future__ import annotations

from .aes import AES128, BLOCK_SIZE

GF_WRAP = 0x87
PADDING = 0x80
MAX_CALLS = 1 << 48

_MASK_128 = (1 << 128) - 1


def gf_double(block: bytes) -> bytes:
    """Double a 16-byte big-endian value in GF(2^128).

    The field is reduced by X^128 + X^7 + X^2 + X + 1, so an overflowing
    high bit folds back in as 0x87 on the low byte.
    """
    block = bytes(block)
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
    value = int.from_bytes(block, "big")
    doubled = (value << 1) & _MASK_128
    if value >> 127:
        doubled ^= GF_WRAP
    return doubled.to_bytes(BLOCK_SIZE, "big")


def _xor(*blocks: bytes) -> bytes:
    out = bytearray(BLOCK_SIZE)
    for block in blocks:
        for i, b in enumerate(block):
            out[i] ^= b
    return bytes(out)


class Cmac:
    """Incremental CMAC computation under one AES-128 key.

    Feed data with :meth:`update` and finish with :meth:`digest`. A finished
    computation must be restarted with :meth:`reset` before it is used again.
    At most 2**48 non-empty updates are accepted between resets.
    """

    def __init__(self, key: bytes) -> None:
        self._cipher = AES128(key)
        l_value = self._cipher.encrypt_block(bytes(BLOCK_SIZE))
        self._k1 = gf_double(l_value)
        self._k2 = gf_double(self._k1)
        self.reset()

    def reset(self) -> None:
        """Start a new computation with the same key."""
        self._iv = bytes(BLOCK_SIZE)
        self._leftover = bytearray()
        self._countdown = MAX_CALLS
        self._finished = False

    def _absorb(self, block: bytes) -> None:
        self._iv = self._cipher.encrypt_block(_xor(self._iv, block))

    def update(self, data: bytes) -> None:
        """Mix the next segment of the message into the computation."""
        if self._finished:
            raise RuntimeError("CMAC computation already finished; call reset()")
        data = bytes(data)
        if not data:
            return
        if self._countdown == 0:
            raise RuntimeError("update limit reached; the key must be changed")
        self._countdown -= 1

        if self._leftover:
            remaining = BLOCK_SIZE - len(self._leftover)
            if len(data) < remaining:
                self._leftover.extend(data)
                return
            self._leftover.extend(data[:remaining])
            data = data[remaining:]
            self._absorb(bytes(self._leftover))
            self._leftover.clear()

        # Every block but the last is chained now; the last waits for digest().
        while len(data) > BLOCK_SIZE:
            self._absorb(data[:BLOCK_SIZE])
            data = data[BLOCK_SIZE:]

        if data:
            self._leftover = bytearray(data)

    def digest(self) -> bytes:
        """Return the 16-byte tag and finish the computation."""
        if self._finished:
            raise RuntimeError("CMAC computation already finished; call reset()")
        if len(self._leftover) == BLOCK_SIZE:
            last = bytes(self._leftover)
            subkey = self._k1
        else:
            last = bytes(self._leftover) + bytes([PADDING])
            last = last.ljust(BLOCK_SIZE, b"\x00")
            subkey = self._k2
        tag = self._cipher.encrypt_block(_xor(self._iv, last, subkey))
        self._iv = bytes(BLOCK_SIZE)
        self._leftover.clear()
        self._finished = True
        return tag


def cmac(key: bytes, data: bytes) -> bytes:
    """Compute the AES-128-CMAC tag of ``data`` in one call."""
    mac = Cmac(key)
    mac.update(data)
    return mac.digest()