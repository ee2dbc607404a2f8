"""
Inline debug printing.

    >>> from dbgprint.debug import debug, debug_array, debug_n, debug_assert, debug_trace
    >>> x, items = 3, {"a": (1, 'b')}
    >>> debug(x, items, len(items))
    [debug] x = 3
    [debug] items = {"a": (1, "b")}
    [debug] len(items) = 1

Each argument is printed to the diagnostic stream (stderr by default) next to the
source text it was written as. Python evaluates the arguments left to right, exactly once,
before debug() runs; the source text only labels the lines and never affects evaluation.

When the source of a call cannot be read (interactive interpreter, `python -c`, exec),
values are labelled '?' and a RuntimeWarning is issued.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import os
import warnings
from types import FrameType
from typing import Any, TypeVar, TypeVarTuple, overload

# Local ----------------------------------------------------------------------------------------------------------------
from .emission import emit, emit_array, emit_assert_failure, emit_n, emit_trace
from .source import call_arguments, caller_frame, frame_location
from .splitter import split_call_names, split_names

UNKNOWN_NAME = "?"

T = TypeVar("T")
Ts = TypeVarTuple("Ts")


# Methods --------------------------------------------------------------------------------------------------------------

@overload
def debug(value: T, /) -> T: ...


@overload
def debug(*values: *Ts) -> tuple[*Ts]: ...


def debug(*values: Any) -> Any:
    """
    Print each value with the expression it was written as.

    Returns the value for a single argument, or the tuple of values otherwise,
    so debug() can wrap an expression in place: `total = debug(a + b)`.

    Notes:
        - Names come from splitting the call text on top-level commas; see dbgprint.splitter
          for the known limitations (commas inside string literals, `<`/`>` comparisons)
        - At most 32 names are recovered; further values are not printed
        - Starred arguments (`debug(*xs)`) produce a single name for all values
    """
    frame = caller_frame()
    try:
        text = _arguments_text(frame)
    finally:
        del frame

    if text is None:
        if values:
            warnings.warn(
                "Source of the debug() call is unavailable, values are labelled "
                f"{UNKNOWN_NAME!r}",
                RuntimeWarning,
                stacklevel=2,
            )
        names = [UNKNOWN_NAME] * len(values)
    else:
        names = split_call_names(text, len(values))

    emit(names, values)

    if len(values) == 1:
        return values[0]
    return values


def debug_array(arr: Any) -> None:
    """
    Print every element of a sized collection as `arr[N] = [e0, ..., eN-1]`.

    Works for lists, tuples, `array.array` and ctypes arrays; there is no truncation.

    Raises:
        TypeError: If arr is not sized and iterable.
    """
    frame = caller_frame()
    try:
        text = _arguments_text(frame)
    finally:
        del frame

    emit_array(UNKNOWN_NAME if text is None else text, arr)


def debug_n(arr: Any, n: int) -> None:
    """
    Print the first n elements of an indexable buffer as `arr[n] = [...]`.

    Intended for ctypes pointers and other buffers that do not know their own length.
    Only the first 20 elements are shown; a longer buffer ends with `, ...`.

    Raises:
        TypeError: If n is not an integer.
        ValueError: If n is negative.
        IndexError: If arr holds fewer elements than shown.
    """
    frame = caller_frame()
    try:
        text = _arguments_text(frame)
    finally:
        del frame

    names = split_names(text) if text is not None else []
    emit_n(names[0] if names else UNKNOWN_NAME, arr, n)


def debug_assert(condition: Any) -> None:
    """
    Abort the process if condition is false.

    Writes a single `[ASSERT FAILED] file:line - condition` line with the condition's
    source text, then calls os.abort(). This is a "should never happen" check:
    it cannot be caught, and it runs even when debug output is disabled.
    A true condition prints nothing.
    """
    if condition:
        return

    frame = caller_frame()
    try:
        if frame is None:
            filename, lineno = UNKNOWN_NAME, 0
        else:
            filename, lineno, _ = frame_location(frame)
        text = _arguments_text(frame)
    finally:
        del frame

    emit_assert_failure(filename, lineno, UNKNOWN_NAME if text is None else text)
    os.abort()


def debug_trace() -> None:
    """Print `[trace] function() at file:line` for the calling function."""
    frame = caller_frame()
    try:
        if frame is None:
            return
        filename, lineno, function = frame_location(frame)
    finally:
        del frame

    emit_trace(function, filename, lineno)


# Private Methods ------------------------------------------------------------------------------------------------------

def _arguments_text(frame: FrameType | None) -> str | None:
    if frame is None:
        return None
    return call_arguments(frame)
