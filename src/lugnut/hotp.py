import logging
from typing import Any, Optional

from . import utils
from .config import Algorithm, OTPConfig
from .otp import OTP, generate_otp
from .utils import Secret

logger = logging.getLogger(__name__)


def generate(
    secret: Secret,
    counter: int,
    digits: int = 6,
    algorithm: Any = Algorithm.SHA1,
    digest_override: Optional[bytes] = None,
) -> str:
    """
    Generates the HOTP for the given counter.

    :param secret: shared key material
    :param counter: the HMAC counter
    :param digits: number of characters in the OTP
    :param algorithm: hash function used in the HMAC
    :param digest_override: precomputed digest to truncate, used verbatim
    :returns: OTP
    """
    config = OTPConfig(digits=digits, algorithm=algorithm, digest_override=digest_override)
    return generate_otp(secret, counter, config)


def match(
    token: str,
    secret: Secret,
    counter: int,
    digits: int = 6,
    window: int = 10,
    algorithm: Any = Algorithm.SHA1,
) -> Optional[int]:
    """
    Searches counter .. counter + window for the token.

    :returns: the counter that produced the token, or None
    """
    config = OTPConfig(digits=digits, window=window, algorithm=algorithm)
    token = str(token)
    if len(token) != config.digits:
        logger.debug("token length %d does not match %d digits", len(token), config.digits)
        return None

    for candidate in range(counter, counter + config.window + 1):
        if utils.strings_equal(token, generate_otp(secret, candidate, config)):
            logger.debug("token matched at counter offset %d", candidate - counter)
            return candidate

    logger.debug("no match in window of %d after counter", config.window)
    return None


def verify(
    token: str,
    secret: Secret,
    counter: int,
    digits: int = 6,
    window: int = 10,
    algorithm: Any = Algorithm.SHA1,
) -> bool:
    """
    Verifies the token against counter .. counter + window. The search is
    forward-only since HOTP counters only increase.

    :param token: the OTP to check against
    :param counter: the lowest acceptable HMAC counter
    :param window: how many counters past ``counter`` are also accepted
    """
    return match(token, secret, counter, digits=digits, window=window, algorithm=algorithm) is not None


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    def __init__(
        self,
        s: Secret,
        digits: int = 6,
        algorithm: Any = Algorithm.SHA1,
        initial_count: int = 0,
        window: int = 10,
    ) -> None:
        """
        :param s: secret key material
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param algorithm: hash function to use in the HMAC (expected to be SHA1)
        :param initial_count: starting HMAC counter value, defaults to 0
        :param window: look-ahead used by verify, defaults to 10
        """
        if initial_count < 0:
            raise ValueError("initial_count must be a non-negative integer")
        self.initial_count = initial_count
        super().__init__(s=s, digits=digits, algorithm=algorithm, window=window)

    def at(self, count: int, digest_override: Optional[bytes] = None) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(self.initial_count + count, digest_override=digest_override)

    def verify(self, otp: str, counter: int, window: Optional[int] = None) -> bool:
        """
        Verifies the OTP passed in against the counter and the look-ahead window.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        :param window: overrides the window given at construction
        """
        return verify(
            otp,
            self.secret,
            self.initial_count + counter,
            digits=self.digits,
            window=self.config.window if window is None else window,
            algorithm=self.algorithm,
        )
