import pytest

from cpebridge.cmac import Cmac, cmac, gf_double

KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
MSG16 = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a")
MSG40 = MSG16 + bytes.fromhex(
    "ae2d8a571e03ac9c9eb76fac45af8e5130c81c46a35ce411"
)


def test_empty_message_tag():
    assert cmac(KEY, b"") == bytes.fromhex("bb1d6929e95937287fa37d129b756746")


def test_single_block_tag():
    assert cmac(KEY, MSG16) == bytes.fromhex("070a16b46b4d4144f79bdd9dd04a287c")


def test_partial_last_block_tag():
    assert cmac(KEY, MSG40) == bytes.fromhex("dfa66747de9ae63030ca32611497c827")


def test_gf_double_plain_shift():
    assert gf_double(bytes(15) + b"\x01") == bytes(15) + b"\x02"


def test_gf_double_carries_between_bytes():
    assert gf_double(bytes(14) + b"\x00\x80") == bytes(14) + b"\x01\x00"


def test_gf_double_wraps_high_bit():
    assert gf_double(b"\x80" + bytes(15)) == bytes(15) + b"\x87"


def test_gf_double_rejects_wrong_length():
    with pytest.raises(ValueError):
        gf_double(bytes(15))


def test_incremental_matches_one_shot():
    mac = Cmac(KEY)
    mac.update(MSG40[:5])
    mac.update(MSG40[5:25])
    mac.update(MSG40[25:])
    assert mac.digest() == cmac(KEY, MSG40)


def test_small_pieces_within_block_match_one_shot():
    data = bytes(range(10))
    mac = Cmac(KEY)
    for i in range(len(data)):
        mac.update(data[i:i + 1])
    assert mac.digest() == cmac(KEY, data)


def test_empty_update_changes_nothing():
    mac = Cmac(KEY)
    mac.update(b"")
    mac.update(MSG16)
    mac.update(b"")
    assert mac.digest() == cmac(KEY, MSG16)


def test_digest_finishes_computation():
    mac = Cmac(KEY)
    mac.update(MSG16)
    mac.digest()
    with pytest.raises(RuntimeError):
        mac.update(MSG16)
    with pytest.raises(RuntimeError):
        mac.digest()


def test_reset_allows_reuse_with_same_key():
    mac = Cmac(KEY)
    mac.update(b"first message")
    first = mac.digest()
    mac.reset()
    mac.update(MSG40)
    assert mac.digest() == cmac(KEY, MSG40)
    mac.reset()
    mac.update(b"first message")
    assert mac.digest() == first


def test_reset_discards_pending_data():
    mac = Cmac(KEY)
    mac.update(b"discarded")
    mac.reset()
    assert mac.digest() == cmac(KEY, b"")


def test_tag_is_one_block_and_deterministic():
    tag = cmac(KEY, b"abc")
    assert len(tag) == 16
    assert cmac(KEY, b"abc") == tag


def test_accepts_bytearray_and_memoryview():
    assert cmac(KEY, bytearray(MSG40)) == cmac(KEY, memoryview(MSG40))
    assert cmac(bytearray(KEY), MSG16) == cmac(KEY, MSG16)


def test_rejects_wrong_key_length():
    with pytest.raises(ValueError):
        Cmac(bytes(15))