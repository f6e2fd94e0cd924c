import pytest

# RFC 4226 Appendix D and RFC 6238 Appendix B seeds
RFC_SECRET = b"12345678901234567890"
RFC_SECRET_SHA256 = b"12345678901234567890123456789012"
RFC_SECRET_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"

# HOTP values for RFC_SECRET, counters 0-9
RFC4226_CODES = [
    "755224",
    "287082",
    "359152",
    "969429",
    "338314",
    "254676",
    "287922",
    "162583",
    "399871",
    "520489",
]


@pytest.fixture
def rfc_secret() -> bytes:
    return RFC_SECRET


@pytest.fixture
def fixed_clock():
    """Returns a factory for clocks frozen at the given Unix time."""
    def make(now: float):
        return lambda: now
    return make
