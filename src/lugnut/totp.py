import calendar
import datetime
import logging
import math
import time
from typing import Any, Callable, Optional, Union

from . import utils
from .config import Algorithm, TOTPConfig
from .otp import OTP, generate_otp
from .utils import Secret

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
ForTime = Union[int, float, datetime.datetime]


def _seconds(for_time: ForTime) -> float:
    if isinstance(for_time, datetime.datetime):
        if for_time.tzinfo:
            return calendar.timegm(for_time.utctimetuple())
        return time.mktime(for_time.timetuple())
    return for_time


def timecode(for_time: ForTime, step: int = 30, epoch_offset: int = 0) -> int:
    """
    Accepts either a Unix timestamp or a datetime object and returns the
    counter for the time step it falls in.

    :param for_time: the time to derive the counter from
    :param step: the time step in seconds
    :param epoch_offset: Unix time to start counting time steps from
    """
    if step < 1:
        raise ValueError("step must be at least 1 second")
    elapsed = _seconds(for_time) - epoch_offset
    if elapsed < 0:
        raise ValueError("time precedes the epoch offset")
    return int(elapsed // step)


def generate(
    secret: Secret,
    digits: int = 6,
    step: int = 30,
    for_time: Optional[ForTime] = None,
    epoch_offset: int = 0,
    algorithm: Any = Algorithm.SHA1,
    digest_override: Optional[bytes] = None,
    clock: Clock = time.time,
) -> str:
    """
    Generates the TOTP for ``for_time``, or for the time returned by
    ``clock`` when no time is given.

    :param secret: shared key material
    :param digits: number of characters in the OTP
    :param step: the time step in seconds
    :param epoch_offset: Unix time to start counting time steps from
    :param digest_override: precomputed digest to truncate, used verbatim
    :param clock: source of the current Unix time
    :returns: OTP
    """
    config = TOTPConfig(
        digits=digits, step=step, epoch_offset=epoch_offset, algorithm=algorithm, digest_override=digest_override
    )
    if for_time is None:
        for_time = clock()
    counter = timecode(for_time, config.step, config.epoch_offset)
    return generate_otp(secret, counter, config)


def verify(
    token: str,
    secret: Secret,
    digits: int = 6,
    step: int = 30,
    window: int = 0,
    for_time: Optional[ForTime] = None,
    epoch_offset: int = 0,
    algorithm: Any = Algorithm.SHA1,
    clock: Clock = time.time,
) -> bool:
    """
    Verifies the token against the time steps within ``window`` on either
    side of the current one. The lower bound stops at counter 0.

    :param token: the OTP to check against
    :param window: number of time steps of clock skew tolerated each way
    :param for_time: time to check the token against, defaults to ``clock()``
    """
    config = TOTPConfig(digits=digits, step=step, window=window, epoch_offset=epoch_offset, algorithm=algorithm)
    token = str(token)
    if len(token) != config.digits:
        logger.debug("token length %d does not match %d digits", len(token), config.digits)
        return False

    if for_time is None:
        for_time = clock()
    counter = timecode(for_time, config.step, config.epoch_offset)
    for candidate in range(max(0, counter - config.window), counter + config.window + 1):
        if utils.strings_equal(token, generate_otp(secret, candidate, config)):
            logger.debug("token matched at time step offset %d", candidate - counter)
            return True

    logger.debug("no match within %d time steps", config.window)
    return False


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: Secret,
        digits: int = 6,
        algorithm: Any = Algorithm.SHA1,
        step: int = 30,
        epoch_offset: int = 0,
        window: int = 0,
        clock: Clock = time.time,
    ) -> None:
        """
        :param s: secret key material
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param algorithm: hash function to use in the HMAC (expected to be SHA1)
        :param step: the time step in seconds. The default is 30 seconds.
        :param epoch_offset: Unix time to start counting time steps from
        :param window: time steps of clock skew tolerated by verify
        :param clock: source of the current Unix time
        """
        super().__init__(s=s, digits=digits, algorithm=algorithm)
        self.config = TOTPConfig(
            digits=digits, algorithm=algorithm, step=step, epoch_offset=epoch_offset, window=window
        )
        self.clock = clock

    @property
    def step(self) -> int:
        return self.config.step

    def timecode(self, for_time: ForTime) -> int:
        return timecode(for_time, self.config.step, self.config.epoch_offset)

    def at(self, for_time: ForTime, digest_override: Optional[bytes] = None) -> str:
        """
        Generates the OTP for the given time.

        :param for_time: the time to generate an OTP for
        :returns: OTP
        """
        return self.generate_otp(self.timecode(for_time), digest_override=digest_override)

    def now(self) -> str:
        """
        Generates the current time OTP.
        """
        return self.at(self.clock())

    def remaining(self, for_time: Optional[ForTime] = None) -> int:
        """
        Seconds left before the OTP for ``for_time`` (default: now) expires.
        """
        if for_time is None:
            for_time = self.clock()
        elapsed = _seconds(for_time) - self.config.epoch_offset
        return int(math.ceil(self.config.step - elapsed % self.config.step))

    def verify(self, otp: str, for_time: Optional[ForTime] = None, window: Optional[int] = None) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: time to check OTP at (defaults to now)
        :param window: overrides the window given at construction
        """
        return verify(
            otp,
            self.secret,
            digits=self.digits,
            step=self.config.step,
            window=self.config.window if window is None else window,
            for_time=for_time,
            epoch_offset=self.config.epoch_offset,
            algorithm=self.algorithm,
            clock=self.clock,
        )
