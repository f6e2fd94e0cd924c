import hashlib

import pytest
from pydantic import ValidationError

from lugnut import Algorithm, GenerationError, InvalidKeyError, OTPConfig, TOTPConfig
from lugnut.otp import digest, dynamic_truncate, int_to_bytestring, truncate

from .conftest import RFC_SECRET

# RFC 4226 Appendix D: HMAC-SHA1 digest and truncated 31-bit value per counter
RFC4226_INTERMEDIATE = [
    (0, "cc93cf18508d94934c64b65d8ba7667fb7cde4b0", 1284755224),
    (1, "75a48a19d4cbe100644e8ac1397eea747a2d33ab", 1094287082),
    (2, "0bacb7fa082fef30782211938bc1c5e70416ff44", 137359152),
    (3, "66c28227d03a2d5529262ff016a1e6ef76557ece", 1726969429),
    (4, "a904c900a64b35909874b33e61c5938a8e15ed1c", 1640338314),
    (5, "a37e783d7b7233c083d4f62926c7a25f238d0316", 868254676),
    (6, "bc9cd28561042c83f219324d3c607256c03272ae", 1918287922),
    (7, "a4fb960c0bc06e1eabb804e5b397cdc4b45596fa", 82162583),
    (8, "1b3c89f65e6c9e883012052823443f048b4332db", 673399871),
    (9, "1637409809a679dc698207310c8c7fc07290d9e5", 645520489),
]

# RFC 4226 section 5.4 example digest
SECTION_5_4_DIGEST = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")


class TestIntToBytestring:

    def test_zero(self):
        assert int_to_bytestring(0) == b"\x00" * 8

    def test_big_endian(self):
        assert int_to_bytestring(0x0102030405060708) == bytes([1, 2, 3, 4, 5, 6, 7, 8])

    def test_wraps_to_low_64_bits(self):
        assert int_to_bytestring(2**64 + 1) == int_to_bytestring(1)
        assert int_to_bytestring(2**64 - 1) == b"\xff" * 8

    def test_negative_counter_rejected(self):
        with pytest.raises(ValueError):
            int_to_bytestring(-1)


class TestDigest:

    @pytest.mark.parametrize("counter,expected_hex,_", RFC4226_INTERMEDIATE)
    def test_rfc4226_hmac_values(self, counter, expected_hex, _):
        assert digest(RFC_SECRET, counter).hex() == expected_hex

    def test_str_secret_is_utf8_key(self):
        assert digest("12345678901234567890", 0) == digest(RFC_SECRET, 0)

    def test_large_counter_uses_low_64_bits(self):
        assert digest(RFC_SECRET, 2**64 + 7) == digest(RFC_SECRET, 7)
        assert digest(RFC_SECRET, 2**128) == digest(RFC_SECRET, 0)

    @pytest.mark.parametrize(
        "algorithm,size",
        [(Algorithm.SHA1, 20), (Algorithm.SHA256, 32), (Algorithm.SHA512, 64)],
    )
    def test_digest_size(self, algorithm, size):
        assert len(digest(RFC_SECRET, 1, algorithm)) == size

    def test_algorithm_aliases(self):
        expected = digest(RFC_SECRET, 3, Algorithm.SHA256)
        assert digest(RFC_SECRET, 3, "sha256") == expected
        assert digest(RFC_SECRET, 3, "SHA-256") == expected
        assert digest(RFC_SECRET, 3, hashlib.sha256) == expected

    def test_empty_secret(self):
        with pytest.raises(InvalidKeyError):
            digest(b"", 0)

    def test_secret_of_wrong_type(self):
        with pytest.raises(InvalidKeyError):
            digest(12345, 0)

    def test_invalid_key_is_value_error(self):
        with pytest.raises(ValueError):
            digest("", 0)

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            digest(RFC_SECRET, 0, hashlib.md5)


class TestTruncate:

    @pytest.mark.parametrize("counter,expected_hex,value", RFC4226_INTERMEDIATE)
    def test_rfc4226_truncated_values(self, counter, expected_hex, value):
        assert dynamic_truncate(bytes.fromhex(expected_hex)) == value

    def test_section_5_4_example(self):
        assert dynamic_truncate(SECTION_5_4_DIGEST) == 0x50EF7F19
        assert truncate(SECTION_5_4_DIGEST, 6) == "872921"

    def test_keeps_low_order_digits(self):
        assert truncate(SECTION_5_4_DIGEST, 1) == "1"
        assert truncate(SECTION_5_4_DIGEST, 10) == "1357872921"

    def test_pads_beyond_ten_digits(self):
        assert truncate(SECTION_5_4_DIGEST, 12) == "001357872921"

    def test_top_bit_is_masked(self):
        hmac_hash = bytes([0xFF, 0xFF, 0xFF, 0xFF]) + bytes(15) + b"\x00"
        assert dynamic_truncate(hmac_hash) == 0x7FFFFFFF

    def test_zero_code_rejected(self):
        with pytest.raises(GenerationError):
            truncate(bytes(20), 6)

    def test_zero_after_mask_rejected(self):
        hmac_hash = bytes([0x80, 0, 0, 0]) + bytes(16)
        with pytest.raises(GenerationError):
            truncate(hmac_hash, 6)

    def test_digest_too_short_for_offset(self):
        with pytest.raises(GenerationError):
            truncate(bytes([1, 2, 3, 0x0F]), 6)

    def test_empty_digest(self):
        with pytest.raises(GenerationError):
            dynamic_truncate(b"")

    def test_digits_must_be_positive(self):
        with pytest.raises(ValueError):
            truncate(SECTION_5_4_DIGEST, 0)


class TestConfig:

    def test_defaults(self):
        config = OTPConfig()
        assert config.digits == 6
        assert config.window == 10
        assert config.algorithm is Algorithm.SHA1
        assert config.digest_override is None

    def test_totp_defaults(self):
        config = TOTPConfig()
        assert config.window == 0
        assert config.step == 30
        assert config.epoch_offset == 0

    def test_is_immutable(self):
        config = OTPConfig()
        with pytest.raises(ValidationError):
            config.digits = 8

    def test_algorithm_coerced(self):
        assert OTPConfig(algorithm="sha512").algorithm is Algorithm.SHA512
        assert OTPConfig(algorithm=hashlib.sha1).algorithm is Algorithm.SHA1

    @pytest.mark.parametrize(
        "kwargs",
        [{"digits": 0}, {"window": -1}, {"algorithm": "md5"}],
    )
    def test_rejects_invalid_fields(self, kwargs):
        with pytest.raises(ValidationError):
            OTPConfig(**kwargs)

    def test_rejects_zero_step(self):
        with pytest.raises(ValidationError):
            TOTPConfig(step=0)
