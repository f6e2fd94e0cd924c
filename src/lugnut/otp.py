import hmac
import struct
from typing import Any, Optional

from .config import Algorithm, OTPConfig
from .exceptions import GenerationError
from .utils import Secret, key_bytes

COUNTER_MASK = 0xFFFFFFFFFFFFFFFF


def int_to_bytestring(i: int) -> bytes:
    """
    Turns a counter into the OATH specified 8-byte big-endian
    bytestring, which is fed to the HMAC along with the secret.
    Counters wider than 64 bits wrap: only the low 64 bits are kept.
    """
    if i < 0:
        raise ValueError("counter must be a non-negative integer")
    return struct.pack(">Q", i & COUNTER_MASK)


def digest(secret: Secret, counter: int, algorithm: Any = Algorithm.SHA1) -> bytes:
    """
    Computes HMAC(secret, counter) with the selected hash function.

    :param secret: shared key material
    :param counter: the moving factor, only its low 64 bits are used
    :param algorithm: Algorithm member, name or hashlib constructor
    :raises InvalidKeyError: the secret is not usable as an HMAC key
    """
    algorithm = Algorithm.coerce(algorithm)
    key = key_bytes(secret)
    return hmac.new(key, int_to_bytestring(counter), algorithm.hash).digest()


def dynamic_truncate(hmac_hash: bytes) -> int:
    """
    RFC 4226 section 5.3: the low nibble of the last byte picks an offset,
    the four bytes starting there form a 31-bit unsigned integer.
    """
    if not hmac_hash:
        raise GenerationError("digest is empty")
    offset = hmac_hash[-1] & 0xF
    if len(hmac_hash) < offset + 4:
        raise GenerationError("digest of {} bytes is too short for offset {}".format(len(hmac_hash), offset))
    return (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )


def truncate(hmac_hash: bytes, digits: int = 6) -> str:
    """
    Reduces a digest to a zero-padded decimal code of exactly ``digits``
    characters, keeping the low-order digits.

    :raises GenerationError: the truncated value is zero
    """
    if digits < 1:
        raise ValueError("digits must be at least 1")
    code = dynamic_truncate(bytes(hmac_hash))
    if code == 0:
        raise GenerationError("dynamic truncation produced a zero code")
    str_code = str(code).rjust(digits, "0")
    return str_code[-digits:]


def generate_otp(secret: Secret, counter: int, config: OTPConfig) -> str:
    """
    :param config: digits, algorithm and optional digest override for this call
    """
    if config.digest_override is not None:
        hmac_hash = config.digest_override
    else:
        hmac_hash = digest(secret, counter, config.algorithm)
    return truncate(hmac_hash, config.digits)


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        s: Secret,
        digits: int = 6,
        algorithm: Any = Algorithm.SHA1,
        window: int = 0,
    ) -> None:
        self.config = OTPConfig(digits=digits, window=window, algorithm=algorithm)
        self.secret = key_bytes(s)

    @property
    def digits(self) -> int:
        return self.config.digits

    @property
    def algorithm(self) -> Algorithm:
        return self.config.algorithm

    def generate_otp(self, input: int, digest_override: Optional[bytes] = None) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        :param digest_override: precomputed digest to truncate instead of the HMAC
        """
        config = self.config
        if digest_override is not None:
            config = type(config).model_validate({**config.model_dump(), "digest_override": digest_override})
        return generate_otp(self.secret, input, config)
