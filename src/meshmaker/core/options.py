"""Turn command-line tokens into a validated ``MeshMakerConfig``.

The scan is a single left-to-right pass over the tokens. Problems are
collected rather than raised so that one run reports every bad option at
once. A help flag anywhere in the tokens short-circuits the whole build.
``build_config`` never raises; callers inspect the returned
``BuildResult`` or call ``unwrap()``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .contracts import MeshMakerConfig, OutputFormat, target_reduction_in_range
from .errors import (
    ConfigurationError,
    ConfigWarning,
    HelpRequested,
    MissingInputError,
    OptionError,
    ParseError,
    RangeError,
)

logger = logging.getLogger(__name__)

USAGE = """\
usage: meshmaker [options] file.map

Generate a mesh from the MAP/MRC file using the specified options

Options:
\t-c/--clevel <float>
\t\t\tthe contour level at which to build the surface [default: 0.0]
\t-o/--output <str>
\t\t\tthe prefix of the output file to be combined with the extension (see below) [default: out]
\t-S/--stl\toutput in STL format
\t-V/--vtk\toutput in VTK format
\t-X/--vtp\toutput in VTP format [default]
\t-D/--decimate\tperform progressive decimation to eliminate superfluous polygons [default: false]
\t-s/--smooth\tsmooth the generated surface [default: false]
\t-i/--smooth-iter <int>
\t\t\tnumber of iterations for smoothing (only applies if -s/--smooth is specified) [default: 20]
\t-t/--target-reduction <float>
\t\t\tset the target reduction in the number of polygons in interval (0, 1) [default: 0.9]
\t-A/--ascii\tsave data as ASCII as opposed to BINARY [default: false]
\t-U/--uint64\tsave VTP headers using UInt64 as opposed to UInt32 [default: false]
\t-I/--int32\tuse Int32 for ids instead of Int64 [default: false]
\t-h/--help\tshow this help
\t-v/--verbose\tverbose output
"""

HELP_FLAGS = ("-h", "--help")

# flag -> (config field, constant value)
_SWITCHES: dict[str, tuple[str, Any]] = {
    "-S": ("output_format", OutputFormat.STL),
    "--stl": ("output_format", OutputFormat.STL),
    "-V": ("output_format", OutputFormat.VTK),
    "--vtk": ("output_format", OutputFormat.VTK),
    "-X": ("output_format", OutputFormat.VTP),
    "--vtp": ("output_format", OutputFormat.VTP),
    "-D": ("decimate", True),
    "--decimate": ("decimate", True),
    "-s": ("smooth", True),
    "--smooth": ("smooth", True),
    "-A": ("ascii", True),
    "--ascii": ("ascii", True),
    "-U": ("wide_headers", True),
    "--uint64": ("wide_headers", True),
    "-I": ("narrow_indices", True),
    "--int32": ("narrow_indices", True),
    "-v": ("verbose", True),
    "--verbose": ("verbose", True),
}

_FLOAT_LITERAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_INT_LITERAL = re.compile(r"[+-]?[0-9]+")


def _strict_float(text: str) -> float:
    """Plain decimal/exponent literals only: no underscores, padding, inf or nan."""
    if not _FLOAT_LITERAL.fullmatch(text):
        raise ValueError(text)
    return float(text)


def _strict_int(text: str) -> int:
    if not _INT_LITERAL.fullmatch(text):
        raise ValueError(text)
    return int(text)


# flag -> (config field, converter, description of expected value)
_VALUED: dict[str, tuple[str, Callable[[str], Any], str]] = {
    "-c": ("contour_level", _strict_float, "number"),
    "--clevel": ("contour_level", _strict_float, "number"),
    "-o": ("output_prefix", str, "string"),
    "--output": ("output_prefix", str, "string"),
    "-t": ("target_reduction", _strict_float, "number"),
    "--target-reduction": ("target_reduction", _strict_float, "number"),
    "-i": ("smooth_iterations", _strict_int, "integer"),
    "--smooth-iter": ("smooth_iterations", _strict_int, "integer"),
}

_DEFAULTS: dict[str, Any] = {
    name: info.default
    for name, info in MeshMakerConfig.model_fields.items()
    if name != "input_path"
}


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one build attempt: a config, a list of errors, or a help request."""

    config: Optional[MeshMakerConfig] = None
    errors: tuple[OptionError, ...] = ()
    warnings: tuple[ConfigWarning, ...] = ()
    show_help: bool = False

    @property
    def ok(self) -> bool:
        return self.config is not None

    def unwrap(self) -> MeshMakerConfig:
        if self.show_help:
            raise HelpRequested(USAGE)
        if self.config is None:
            raise ConfigurationError(list(self.errors))
        return self.config


@dataclass
class _Scan:
    values: dict[str, Any] = field(default_factory=lambda: dict(_DEFAULTS))
    input_path: str = ""
    errors: list[OptionError] = field(default_factory=list)


def _scan(tokens: list[str]) -> _Scan:
    """Walk the tokens once, left to right."""
    scan = _Scan()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in _SWITCHES:
            name, value = _SWITCHES[token]
            scan.values[name] = value
            i += 1
        elif token in _VALUED:
            name, convert, expected = _VALUED[token]
            text = tokens[i + 1] if i + 1 < len(tokens) else None
            if text is None:
                scan.errors.append(ParseError(token, None, expected))
            else:
                try:
                    scan.values[name] = convert(text)
                except ValueError:
                    scan.errors.append(ParseError(token, text, expected))
            # flag and value are both consumed even when the value is bad
            i += 2
        else:
            scan.input_path = token
            i += 1
    return scan


def build_config(tokens: list[str]) -> BuildResult:
    """Build a configuration from ``tokens`` (``sys.argv[1:]`` style).

    Any token that is not a recognised flag is taken as the input path, and
    the last such token wins.
    """
    tokens = list(tokens)
    if any(token in HELP_FLAGS for token in tokens):
        logger.debug("Help requested; skipping validation")
        return BuildResult(show_help=True)

    scan = _scan(tokens)
    values = scan.values
    errors = list(scan.errors)
    warnings: list[ConfigWarning] = []

    if not scan.input_path:
        errors.append(MissingInputError())
    if values["decimate"] and not target_reduction_in_range(values["target_reduction"]):
        errors.append(RangeError(values["target_reduction"]))
    if values["wide_headers"] and values["output_format"] is not OutputFormat.VTP:
        warnings.append(
            ConfigWarning(
                "header set to UInt64 with non-vtp output format "
                f"({values['output_format'].value})"
            )
        )

    if errors:
        return BuildResult(errors=tuple(errors), warnings=tuple(warnings))

    config = MeshMakerConfig(input_path=scan.input_path, **values)
    return BuildResult(config=config, warnings=tuple(warnings))


def parse_args(tokens: list[str]) -> MeshMakerConfig:
    """Like ``build_config`` but raises ``HelpRequested`` / ``ConfigurationError``."""
    return build_config(tokens).unwrap()
