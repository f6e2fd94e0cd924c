class OTPError(Exception):
    """Base class for OTP engine errors."""
    pass

class InvalidKeyError(OTPError, ValueError):
    """The secret cannot be used as HMAC key material."""
    pass

class GenerationError(OTPError):
    """Dynamic truncation could not produce a usable code."""
    pass
