"""
Emission of debug lines to the diagnostic stream.

Pairs argument names with already-evaluated values, formats each value with
fmt_debug() and writes one line per pair:

    [debug] name = value

Tags, names and values are optionally wrapped in ANSI colors. Every line is written
and flushed under a module-level lock, so lines from concurrent threads never interleave
mid-line. Output settings live in a frozen DebugOptions, set through configure().

Environment:
    DBGPRINT_COLOR: "always", "never" or "auto" (default, color only on a TTY)
    NO_COLOR: any non-empty value disables color unless DBGPRINT_COLOR=always
    DBGPRINT_DISABLE: "1", "true", "yes" or "on" silences all lines except assertion failures
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import dataclasses
import os
import sys
import threading
import warnings
from dataclasses import dataclass
from enum import StrEnum, unique
from typing import IO, Any, Final, Iterable, Self

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_debug, fmt_items
from .sentinels import UNSET, UnsetType, ifnotunset
from .utils import fmt_type

DEBUG_TAG: Final[str] = "[debug]"
TRACE_TAG: Final[str] = "[trace]"
ASSERT_TAG: Final[str] = "[ASSERT FAILED]"
MORE_MARKER: Final[str] = ", ..."
MAX_RUNTIME_ITEMS: Final[int] = 20

_TRUTHY = ("1", "true", "yes", "on")
_COLOR_MODES = {"always": True, "never": False, "auto": None}


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Color(StrEnum):
    """ANSI escape sequences used for debug line segments."""
    RESET = "\033[0m"
    CYAN = "\033[36m"
    YELLOW = "\033[33m"
    GREEN = "\033[32m"
    GRAY = "\033[90m"
    BLUE = "\033[34m"
    RED = "\033[31m"


@dataclass(frozen=True)
class DebugOptions:
    """
    Output settings for debug lines.

    Attributes:
        color: True/False forces ANSI colors on/off; None enables them only when the stream is a TTY.
        stream: Text stream for debug lines; None means `sys.stderr` looked up at write time,
                so redirections of sys.stderr (e.g. pytest capture) are honored.
        enabled: When False, debug, array and trace lines are dropped. Assertion failures
                 are always written.

    Examples:
        >>> opts = DebugOptions(color=False)
        >>> opts.merge(enabled=False, color=UNSET)
        DebugOptions(color=False, stream=None, enabled=False)
    """

    color: bool | None = None
    stream: IO[str] | None = None
    enabled: bool = True

    def __post_init__(self) -> None:
        if self.color is not None and not isinstance(self.color, bool):
            raise TypeError(f"DebugOptions.color must be a bool or None, got {fmt_type(self.color)}")
        if not isinstance(self.enabled, bool):
            raise TypeError(f"DebugOptions.enabled must be a bool, got {fmt_type(self.enabled)}")
        if self.stream is not None and not callable(getattr(self.stream, "write", None)):
            raise TypeError(f"DebugOptions.stream must be a writable text stream, got {fmt_type(self.stream)}")

    @classmethod
    def from_env(cls, environ: abc.Mapping[str, str] | None = None) -> Self:
        """Options derived from DBGPRINT_COLOR, NO_COLOR and DBGPRINT_DISABLE."""
        env = os.environ if environ is None else environ

        mode = env.get("DBGPRINT_COLOR", "auto").strip().lower()
        if mode not in _COLOR_MODES:
            warnings.warn(
                f"Ignoring DBGPRINT_COLOR={mode!r}, expected one of: always, never, auto",
                RuntimeWarning,
                stacklevel=2,
            )
            mode = "auto"
        color = _COLOR_MODES[mode]
        if env.get("NO_COLOR") and mode != "always":
            color = False

        enabled = env.get("DBGPRINT_DISABLE", "").strip().lower() not in _TRUTHY
        return cls(color=color, enabled=enabled)

    def merge(self, **kwargs: Any) -> Self:
        """Copy with the given fields replaced; UNSET values keep the current field."""
        return dataclasses.replace(self, **{k: ifnotunset(v, default=getattr(self, k)) for k, v in kwargs.items()})

    def resolve_stream(self) -> IO[str]:
        return sys.stderr if self.stream is None else self.stream

    def use_color(self, stream: IO[str]) -> bool:
        if self.color is not None:
            return self.color
        isatty = getattr(stream, "isatty", None)
        try:
            return bool(isatty()) if callable(isatty) else False
        except (OSError, ValueError):
            # Closed or detached streams
            return False


# Module state ---------------------------------------------------------------------------------------------------------

_options: DebugOptions = DebugOptions.from_env()
_write_lock = threading.Lock()


# Methods --------------------------------------------------------------------------------------------------------------

def configure(*,
              color: bool | None | UnsetType = UNSET,
              stream: IO[str] | None | UnsetType = UNSET,
              enabled: bool | UnsetType = UNSET,
              reset: bool = False,
              ) -> DebugOptions:
    """
    Update the module-wide debug options and return them.

    Only the arguments actually passed are changed. With reset=True the options are first
    rebuilt from the environment, then the passed arguments are applied.

    Examples:
        >>> configure(color=False)             # plain text, whatever the stream
        >>> configure(stream=open("dbg.log", "a"))
        >>> configure(reset=True)              # back to environment defaults
    """
    global _options
    base = DebugOptions.from_env() if reset else _options
    _options = base.merge(color=color, stream=stream, enabled=enabled)
    return _options


def get_options() -> DebugOptions:
    return _options


def paint(text: str, color: Color, enabled: bool = True) -> str:
    """Wrap text in an ANSI color and a reset, or return it unchanged when disabled."""
    if not enabled:
        return text
    return f"{color}{text}{Color.RESET}"


def debug_line(name: str, value_text: str, *, color: bool = False) -> str:
    """One `[debug] name = value` line without the newline."""
    return (f"{paint(DEBUG_TAG, Color.CYAN, color)} "
            f"{paint(name, Color.YELLOW, color)} = "
            f"{paint(value_text, Color.GREEN, color)}")


def emit(names: Iterable[str], values: Iterable[Any], *, options: DebugOptions | None = None) -> None:
    """
    Write one debug line per (name, value) pair, in argument order.

    Names and values are paired positionally. Values past the last name are not printed,
    which happens when the name list was capped. Values must already be evaluated;
    emit() only formats them.
    """
    opts = _options if options is None else options
    if not opts.enabled:
        return

    stream = opts.resolve_stream()
    color = opts.use_color(stream)
    for name, value in zip(names, values):
        _write_line(stream, debug_line(name, fmt_debug(value), color=color))


def emit_array(name: str, items: Any, *, options: DebugOptions | None = None) -> None:
    """
    Write `name[N] = [e0, ..., eN-1]` for a sized collection, always with all N elements.

    Raises:
        TypeError: If items is not sized and iterable.
    """
    try:
        size = len(items)
        elements = list(items)
    except TypeError as e:
        raise TypeError(f"array must be sized and iterable, but got {fmt_type(items)}") from e

    opts = _options if options is None else options
    if not opts.enabled:
        return

    stream = opts.resolve_stream()
    _write_line(stream, debug_line(f"{name}[{size}]", fmt_items(elements), color=opts.use_color(stream)))


def emit_n(name: str, items: Any, length: int, *, options: DebugOptions | None = None) -> None:
    """
    Write `name[length] = [...]` for an indexable buffer with a runtime length.

    At most MAX_RUNTIME_ITEMS elements are shown; a longer buffer gets a trailing `, ...`.
    Only items[0] .. items[shown - 1] are read, so ctypes pointers work as well as lists.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is negative.
        IndexError: If items holds fewer elements than shown.
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError(f"length must be an integer, but got {fmt_type(length)}")
    if length < 0:
        raise ValueError(f"length must be 0 or greater, but got {length}")

    opts = _options if options is None else options
    if not opts.enabled:
        return

    shown = min(length, MAX_RUNTIME_ITEMS)
    body = ", ".join(fmt_debug(items[i]) for i in range(shown))
    if length > MAX_RUNTIME_ITEMS:
        body += MORE_MARKER

    stream = opts.resolve_stream()
    _write_line(stream, debug_line(f"{name}[{length}]", f"[{body}]", color=opts.use_color(stream)))


def emit_assert_failure(filename: str, lineno: int, condition: str, *,
                        options: DebugOptions | None = None) -> None:
    """Write `[ASSERT FAILED] file:line - condition`, regardless of `enabled`."""
    opts = _options if options is None else options
    stream = opts.resolve_stream()
    tag = paint(ASSERT_TAG, Color.RED, opts.use_color(stream))
    _write_line(stream, f"{tag} {filename}:{lineno} - {condition}")


def emit_trace(function: str, filename: str, lineno: int, *, options: DebugOptions | None = None) -> None:
    """Write `[trace] function() at file:line`."""
    opts = _options if options is None else options
    if not opts.enabled:
        return
    stream = opts.resolve_stream()
    tag = paint(TRACE_TAG, Color.BLUE, opts.use_color(stream))
    _write_line(stream, f"{tag} {function}() at {filename}:{lineno}")


# Private Methods ------------------------------------------------------------------------------------------------------

def _write_line(stream: IO[str], line: str) -> None:
    with _write_lock:
        stream.write(line + "\n")
        flush = getattr(stream, "flush", None)
        if callable(flush):
            flush()
