"""Error taxonomy for option building and stage execution."""

from __future__ import annotations


class MeshMakerError(Exception):
    """Base class for all meshmaker errors."""


class OptionError(MeshMakerError):
    """A single problem found while building the configuration."""


class ParseError(OptionError):
    """A flag's value could not be parsed, or the value was missing."""

    def __init__(self, flag: str, text: str | None, expected: str = "number"):
        self.flag = flag
        self.text = text
        self.expected = expected
        if text is None:
            message = f"{flag}: missing {expected} value"
        else:
            message = f"{flag}: could not parse {text!r} as a {expected}"
        super().__init__(message)


class MissingInputError(OptionError):
    def __init__(self) -> None:
        super().__init__("Input MAP/MRC file not specified")


class RangeError(OptionError):
    """Target reduction outside the open interval (0, 1)."""

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Target reduction out of range (0, 1): {value}")


class ConfigurationError(MeshMakerError):
    """Every option error found in one build attempt."""

    def __init__(self, errors: list[OptionError]):
        self.errors = list(errors)
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} configuration error(s):\n{lines}")


class HelpRequested(MeshMakerError):
    """Raised by ``BuildResult.unwrap`` when ``-h/--help`` was seen."""


class StageError(MeshMakerError):
    """A pipeline stage failed; the rest of the chain is abandoned."""

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"[{stage}] {type(cause).__name__}: {cause}")


class ConfigWarning(UserWarning):
    """Non-fatal inconsistency in the options (processing continues)."""
