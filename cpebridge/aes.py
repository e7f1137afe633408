"""AES-128 block encryption (FIPS 197), encryption direction only."""

from __future__ import annotations

from .utils import double_byte

BLOCK_SIZE = 16
KEY_SIZE = 16
_NB = 4
_NK = 4
_NR = 10

_SBOX = bytes.fromhex(
    "637c777bf26b6fc53001672bfed7ab76"
    "ca82c97dfa5947f0add4a2af9ca472c0"
    "b7fd9326363ff7cc34a5e5f171d83115"
    "04c723c31896059a071280e2eb27b275"
    "09832c1a1b6e5aa0523bd6b329e32f84"
    "53d100ed20fcb15b6acbbe394a4c58cf"
    "d0efaafb434d338545f9027f503c9fa8"
    "51a3408f929d38f5bcb6da2110fff3d2"
    "cd0c13ec5f974417c4a77e3d645d1973"
    "60814fdc222a908846eeb814de5e0bdb"
    "e0323a0a4906245cc2d3ac629195e479"
    "e7c8376d8dd54ea96c56f4ea657aae08"
    "ba78252e1ca6b4c6e8dd741f4bbd8b8a"
    "703eb5664803f60e613557b986c11d9e"
    "e1f8981169d98e949b1e87e9ce5528df"
    "8ca1890dbfe6426841992d0fb054bb16"
)

_RCON = (
    0x00000000, 0x01000000, 0x02000000, 0x04000000, 0x08000000, 0x10000000,
    0x20000000, 0x40000000, 0x80000000, 0x1B000000, 0x36000000,
)


def _require_length(name: str, data: bytes, size: int) -> bytes:
    data = bytes(data)
    if len(data) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(data)}")
    return data


def _sub_word(word: int) -> int:
    return int.from_bytes(bytes(_SBOX[b] for b in word.to_bytes(4, "big")), "big")


def _rot_word(word: int) -> int:
    return ((word << 8) | (word >> 24)) & 0xFFFFFFFF


def expand_key(key: bytes) -> tuple[int, ...]:
    """Expand a 16-byte key into the 44 32-bit words of the AES-128 schedule."""
    key = _require_length("key", key, KEY_SIZE)
    words = [int.from_bytes(key[i:i + 4], "big") for i in range(0, KEY_SIZE, 4)]
    for i in range(_NK, _NB * (_NR + 1)):
        t = words[i - 1]
        if i % _NK == 0:
            t = _sub_word(_rot_word(t)) ^ _RCON[i // _NK]
        words.append(words[i - _NK] ^ t)
    return tuple(words)


def _sub_bytes(state: list[int]) -> list[int]:
    return [_SBOX[b] for b in state]


def _shift_rows(state: list[int]) -> list[int]:
    return [state[((c + r) % 4) * 4 + r] for c in range(4) for r in range(4)]


def _mix_column(col: list[int]) -> list[int]:
    a0, a1, a2, a3 = col
    d0, d1, d2, d3 = (double_byte(x) for x in col)
    return [
        d0 ^ (d1 ^ a1) ^ a2 ^ a3,
        a0 ^ d1 ^ (d2 ^ a2) ^ a3,
        a0 ^ a1 ^ d2 ^ (d3 ^ a3),
        (d0 ^ a0) ^ a1 ^ a2 ^ d3,
    ]


def _mix_columns(state: list[int]) -> list[int]:
    out: list[int] = []
    for c in range(4):
        out.extend(_mix_column(state[c * 4:c * 4 + 4]))
    return out


def _add_round_key(state: list[int], round_key: bytes) -> list[int]:
    return [s ^ k for s, k in zip(state, round_key)]


class AES128:
    """AES-128 cipher holding an expanded key schedule."""

    def __init__(self, key: bytes) -> None:
        words = expand_key(key)
        self._round_keys = tuple(
            b"".join(w.to_bytes(4, "big") for w in words[r * _NB:(r + 1) * _NB])
            for r in range(_NR + 1)
        )

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block and return the ciphertext."""
        block = _require_length("block", block, BLOCK_SIZE)
        state = _add_round_key(list(block), self._round_keys[0])
        for round_key in self._round_keys[1:_NR]:
            state = _mix_columns(_shift_rows(_sub_bytes(state)))
            state = _add_round_key(state, round_key)
        state = _shift_rows(_sub_bytes(state))
        state = _add_round_key(state, self._round_keys[_NR])
        return bytes(state)