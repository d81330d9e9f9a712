"""Failure taxonomy for the branding engine.

Every failure is terminal for the call that raised it. Nothing here is
retried and nothing degrades to a default image.
"""


class QRBrandError(Exception):
    """Base class for all qrbrand failures."""


class ConfigError(QRBrandError):
    """An environment or CLI setting could not be parsed."""


# ---------------------------------------------------------------------------
# Construction-time failures
# ---------------------------------------------------------------------------

class LogoPreparationFailure(QRBrandError):
    """The configured logo could not be turned into pixels.

    Raised only while an engine is being built, so no engine ever exists
    with a half-loaded logo.
    """

    def __init__(self, reason: str, path=None):
        self.reason = reason
        self.path = path
        super().__init__(f"logo preparation failed: {reason}")


class LogoIOFailure(LogoPreparationFailure):
    """The logo file could not be read."""


class LogoParseFailure(LogoPreparationFailure):
    """The logo file was read but its contents could not be decoded."""


class LogoUnsupportedFormat(LogoPreparationFailure):
    """The logo file extension is not one we know how to load."""


# ---------------------------------------------------------------------------
# Per-call failures
# ---------------------------------------------------------------------------

class GenerationFailure(QRBrandError):
    """A single generate() call failed."""


class ContentTooLarge(GenerationFailure):
    """Content does not fit any QR version at the requested correction level."""

    def __init__(self, length: int, ecc: str):
        self.length = length
        self.ecc = ecc
        super().__init__(f"content of {length} characters exceeds QR capacity at ECC level {ecc}")


class EncodingFailure(GenerationFailure):
    """Final image serialization failed; indicates a bug, not bad input."""
