import hashlib
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Algorithm(str, Enum):
    """
    Keyed-hash functions an OTP may be computed with.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def hash(self) -> Callable[..., Any]:
        return _HASHES[self]

    @classmethod
    def coerce(cls, value: Any) -> "Algorithm":
        """
        Accepts an Algorithm, a name such as "sha1" or "SHA-256", or the
        matching hashlib constructor.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.replace("-", "").upper()
            if name in cls.__members__:
                return cls[name]
        for algorithm, constructor in _HASHES.items():
            if value is constructor:
                return algorithm
        raise ValueError("Invalid value for algorithm, must be SHA1, SHA256 or SHA512")


_HASHES = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


class OTPConfig(BaseModel):
    """
    Options for a single generate or verify call.

    :param digits: length of the OTP, at least 1
    :param window: extra counter steps searched during verification
    :param algorithm: keyed-hash function used for the digest
    :param digest_override: precomputed digest used verbatim instead of the HMAC
    """

    model_config = ConfigDict(frozen=True)

    digits: int = Field(default=6, ge=1)
    window: int = Field(default=10, ge=0)
    algorithm: Algorithm = Algorithm.SHA1
    digest_override: Optional[bytes] = None

    @field_validator("algorithm", mode="before")
    @classmethod
    def validate_algorithm(cls, v: Any) -> Algorithm:
        return Algorithm.coerce(v)


class TOTPConfig(OTPConfig):
    """
    OTPConfig plus the time-step parameters. The window is applied on both
    sides of the current time step and defaults to 0.
    """

    window: int = Field(default=0, ge=0)
    step: int = Field(default=30, ge=1)
    epoch_offset: int = 0
