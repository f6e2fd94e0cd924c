import base64
import binascii
import unicodedata
from hmac import compare_digest
from typing import Union

from .exceptions import InvalidKeyError

Secret = Union[bytes, bytearray, memoryview, str]


def key_bytes(secret: Secret) -> bytes:
    """
    Returns the secret as HMAC key bytes. Strings are encoded as UTF-8 and
    used as-is; base32 secrets must go through decode_base32 first.

    :raises InvalidKeyError: the secret is empty or not bytes/str
    """
    if isinstance(secret, str):
        key = secret.encode("utf-8")
    elif isinstance(secret, (bytes, bytearray, memoryview)):
        key = bytes(secret)
    else:
        raise InvalidKeyError("secret must be bytes or str, not {}".format(type(secret).__name__))
    if not key:
        raise InvalidKeyError("secret must not be empty")
    return key


def decode_base32(secret: str) -> bytes:
    """
    Decodes a base32 secret as handed out by authenticator apps, tolerating
    lowercase input and missing padding.

    :raises InvalidKeyError: the secret is not valid base32
    """
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except binascii.Error as e:
        raise InvalidKeyError("Invalid base32 secret") from e


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    # lone surrogates from decoded JSON must compare, not raise
    return compare_digest(s1.encode("utf-8", "surrogatepass"), s2.encode("utf-8", "surrogatepass"))
