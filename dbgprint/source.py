"""
Recover the literal source text of a call from the caller's frame.

The call surface needs the text each argument was written as, e.g. `f(b, c)` in
`debug(a, f(b, c))`. The current instruction of the calling frame carries the
source span of the whole call expression (Python 3.11+ code positions); the text is
sliced from the linecache lines and the argument list located with `ast`.

Argument text is normalized like a stringified macro argument: comments are dropped
and every whitespace run between tokens becomes a single space, so a call written
over several lines still yields one-line names. String literals are kept verbatim.

Column offsets in code positions count UTF-8 bytes, not characters.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import ast
import inspect
import io
import linecache
import tokenize
from types import FrameType

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_type


# Methods --------------------------------------------------------------------------------------------------------------

def caller_frame(depth: int = 1) -> FrameType | None:
    """
    Get the frame `depth` levels above the function that calls caller_frame().

    `1` refers to the immediate caller of that function, `2` to the caller's caller, and so on.
    Returns None when the stack is not deep enough. Release the returned frame with `del`
    once done, frames keep their locals alive.

    Raises:
        TypeError: If `depth` is not an integer.
        ValueError: If `depth` is less than 1.
    """
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError(f"stack depth must be an integer, but got {fmt_type(depth)}")
    if depth < 1:
        raise ValueError(f"stack depth must be 1 or greater, but got {depth}")

    frame = inspect.currentframe()
    try:
        # frame.f_back is the function that called caller_frame()
        target = frame.f_back if frame is not None else None
        for _ in range(depth):
            if target is None:
                break
            target = target.f_back
        return target
    finally:
        del frame


def call_source(frame: FrameType) -> str | None:
    """
    Source text of the call expression the frame is currently executing.

    Returns None when positions or source lines are unavailable, e.g. in the
    interactive interpreter, `python -c` or code built with exec().
    """
    try:
        positions = inspect.getframeinfo(frame, context=0).positions
    except (OSError, TypeError):
        return None

    if positions is None or None in (
            positions.lineno, positions.end_lineno, positions.col_offset, positions.end_col_offset):
        return None

    lines = linecache.getlines(frame.f_code.co_filename, frame.f_globals)
    if not lines or positions.end_lineno > len(lines):
        return None

    chunks = [line.encode("utf-8") for line in lines[positions.lineno - 1:positions.end_lineno]]
    if len(chunks) == 1:
        chunks[0] = chunks[0][positions.col_offset:positions.end_col_offset]
    else:
        chunks[0] = chunks[0][positions.col_offset:]
        chunks[-1] = chunks[-1][:positions.end_col_offset]
    return b"".join(chunks).decode("utf-8", errors="replace")


def call_arguments(frame: FrameType) -> str | None:
    """
    Argument list text of the call the frame is currently executing.

    The text between the call's parentheses, stripped of outer whitespace,
    without comments and with whitespace runs collapsed to one space:
    for `debug( a, f(b,\\n  c) )` this is `a, f(b, c)`. Returns None if the
    call source cannot be recovered or parsed.
    """
    source = call_source(frame)
    if source is None:
        return None

    try:
        source = collapse_whitespace(source)
        tree = ast.parse(source, mode="eval")
    except (tokenize.TokenError, SyntaxError):
        return None

    call = tree.body
    if not isinstance(call, ast.Call):
        return None

    start = _text_offset(source, call.func.end_lineno, call.func.end_col_offset)
    rest = source[start:].strip()
    if not (rest.startswith("(") and rest.endswith(")")):
        return None
    return rest[1:-1].strip()


def collapse_whitespace(source: str) -> str:
    """
    Rejoin the tokens of source on one line, dropping comments.

    Tokens that were separated by any whitespace (spaces, newlines, backslash
    continuations, a comment) are joined with a single space; adjacent tokens stay
    adjacent. String literals, f-strings included, are copied unchanged.

    Examples:
        >>> collapse_whitespace("f(a,  # first\\n  g(b,c))")
        'f(a, g(b,c))'

    Raises:
        tokenize.TokenError: If source ends inside an open bracket or string.
        SyntaxError: If source cannot be tokenized.
    """
    lines = source.splitlines(keepends=True)
    line_starts = [0]
    for line in lines:
        line_starts.append(line_starts[-1] + len(line))

    def offset(position: tuple[int, int]) -> int:
        row, col = position
        return line_starts[row - 1] + col

    pieces: list[str] = []
    prev_end = None
    string_start = None
    string_depth = 0

    for tok in tokenize.generate_tokens(io.StringIO(source).readline):
        if tok.type in _STRING_STARTS:
            if string_depth == 0:
                string_start = tok.start
            string_depth += 1
            continue
        if string_depth:
            if tok.type in _STRING_ENDS:
                string_depth -= 1
                if string_depth == 0:
                    _append_token(pieces, source[offset(string_start):offset(tok.end)],
                                  string_start, prev_end)
                    prev_end = tok.end
            continue
        if tok.type in _SKIPPED_TOKENS:
            continue
        _append_token(pieces, tok.string, tok.start, prev_end)
        prev_end = tok.end

    return "".join(pieces)


def frame_location(frame: FrameType) -> tuple[str, int, str]:
    """Filename, current line number and function name of a frame."""
    return frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name


# Private Methods ------------------------------------------------------------------------------------------------------

def _text_offset(source: str, lineno: int, col_offset: int) -> int:
    """Character index in source of an ast (lineno, byte col_offset) position."""
    lines = source.splitlines(keepends=True)
    before = sum(len(line) for line in lines[:lineno - 1])
    column = lines[lineno - 1].encode("utf-8")[:col_offset].decode("utf-8", errors="ignore")
    return before + len(column)


def _append_token(pieces: list[str], text: str, start: tuple[int, int], prev_end: tuple[int, int] | None) -> None:
    if prev_end is not None and start != prev_end:
        pieces.append(" ")
    pieces.append(text)


_SKIPPED_TOKENS = frozenset({
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENDMARKER,
})

# f-strings (3.12+) and t-strings (3.14+) arrive as start/middle/end token runs
_STRING_STARTS = frozenset(
    getattr(tokenize, name) for name in ("FSTRING_START", "TSTRING_START") if hasattr(tokenize, name))
_STRING_ENDS = frozenset(
    getattr(tokenize, name) for name in ("FSTRING_END", "TSTRING_END") if hasattr(tokenize, name))
