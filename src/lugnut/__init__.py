from secrets import SystemRandom
from typing import Sequence

from . import hotp as hotp
from . import totp as totp
from .config import Algorithm as Algorithm
from .config import OTPConfig as OTPConfig
from .config import TOTPConfig as TOTPConfig
from .exceptions import GenerationError as GenerationError
from .exceptions import InvalidKeyError as InvalidKeyError
from .exceptions import OTPError as OTPError
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .otp import digest as digest
from .otp import truncate as truncate
from .totp import TOTP as TOTP

ALPHANUMERIC = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
SYMBOLS = "!@#$%^&*()<>?/[]{},.:;"

random = SystemRandom()


def generate_secret(length: int = 32, include_symbols: bool = True) -> str:
    """
    Returns a random secret drawn from ALPHANUMERIC, plus SYMBOLS unless
    ``include_symbols`` is false. The engine uses the string as key bytes.
    """
    if length < 1:
        raise ValueError("length must be at least 1")
    chars = ALPHANUMERIC + SYMBOLS if include_symbols else ALPHANUMERIC
    return "".join(random.choice(chars) for _ in range(length))


def random_base32(length: int = 32, chars: Sequence[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567") -> str:
    # Authenticator apps expect these decoded first, see utils.decode_base32.
    if length < 32:
        raise ValueError("Secrets should be at least 160 bits")

    return "".join(random.choice(chars) for _ in range(length))


def random_hex(length: int = 40, chars: Sequence[str] = "ABCDEF0123456789") -> str:
    if length < 40:
        raise ValueError("Secrets should be at least 160 bits")
    return random_base32(length=length, chars=chars)
