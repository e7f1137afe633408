import pytest

from cpebridge.aes import AES128, expand_key

FIPS_KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
SEQ_KEY = bytes(range(16))


def test_expand_key_has_44_words():
    assert len(expand_key(FIPS_KEY)) == 44


def test_expand_key_starts_with_key_words():
    words = expand_key(FIPS_KEY)
    expected = tuple(int.from_bytes(FIPS_KEY[i:i + 4], "big") for i in range(0, 16, 4))
    assert words[:4] == expected


def test_expand_key_last_word_matches_fips_appendix():
    assert expand_key(FIPS_KEY)[43] == 0xB6630CA6


def test_expand_key_words_fit_32_bits():
    assert all(0 <= w <= 0xFFFFFFFF for w in expand_key(SEQ_KEY))


def test_expand_key_rejects_short_key():
    with pytest.raises(ValueError):
        expand_key(b"\x00" * 15)


def test_encrypt_fips_appendix_c_vector():
    cipher = AES128(SEQ_KEY)
    out = cipher.encrypt_block(bytes.fromhex("00112233445566778899aabbccddeeff"))
    assert out == bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")


def test_encrypt_fips_appendix_b_vector():
    cipher = AES128(FIPS_KEY)
    out = cipher.encrypt_block(bytes.fromhex("3243f6a8885a308d313198a2e0370734"))
    assert out == bytes.fromhex("3925841d02dc09fbdc118597196a0b32")


def test_encrypt_accepts_bytearray_and_is_deterministic():
    cipher = AES128(bytearray(SEQ_KEY))
    block = bytearray(range(16, 32))
    assert cipher.encrypt_block(block) == cipher.encrypt_block(bytes(block))


def test_encrypt_output_is_block_sized():
    assert len(AES128(SEQ_KEY).encrypt_block(bytes(16))) == 16


def test_different_keys_give_different_ciphertexts():
    block = bytes(16)
    assert AES128(SEQ_KEY).encrypt_block(block) != AES128(FIPS_KEY).encrypt_block(block)


def test_distinct_blocks_encrypt_to_distinct_outputs():
    cipher = AES128(SEQ_KEY)
    outputs = {cipher.encrypt_block(bytes([i]) + bytes(15)) for i in range(64)}
    assert len(outputs) == 64


def test_encrypt_rejects_wrong_block_size():
    with pytest.raises(ValueError):
        AES128(SEQ_KEY).encrypt_block(bytes(17))


def test_constructor_rejects_long_key():
    with pytest.raises(ValueError):
        AES128(bytes(32))