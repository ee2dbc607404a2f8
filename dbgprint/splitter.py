#
# DbgPrint Expression Splitter
#

# Splits the literal argument text of a debug(...) call into one name per argument.
# Pure text scanning: nothing is evaluated and values are not consulted.
#
# Known limitations, kept on purpose:
#   - String literal contents are not special-cased: debug("a,b", x) splits inside the quotes.
#   - '<' and '>' count as brackets, so comparisons like debug(a < b, c) do not split.
#   - At most MAX_NAMES names are kept; values past the cap are printed without a line.

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Final

MAX_NAMES: Final[int] = 32
OPEN_DELIMITERS: Final[str] = "<([{"
CLOSE_DELIMITERS: Final[str] = ">)]}"


# Methods --------------------------------------------------------------------------------------------------------------

def split_names(text: str) -> list[str]:
    """
    Split an argument list on top-level commas into trimmed sub-expressions.

    Any of `< ( [ {` opens a nesting level and any of `> ) ] }` closes one;
    commas split only at depth zero. A trailing empty piece (trailing comma) is dropped,
    and names past MAX_NAMES are silently discarded.

    Args:
        text: Literal source text of the call's arguments, without the outer parentheses.

    Returns:
        Ordered list of at most MAX_NAMES names.

    Examples:
        >>> split_names("a, f(b,c), d")
        ['a', 'f(b,c)', 'd']
        >>> split_names("m[{1, 2}],  x ")
        ['m[{1, 2}]', 'x']
    """
    names: list[str] = []
    current: list[str] = []
    depth = 0

    for ch in text:
        if ch in OPEN_DELIMITERS:
            depth += 1
        elif ch in CLOSE_DELIMITERS:
            depth -= 1
        elif ch == "," and depth == 0:
            _keep_name(names, "".join(current))
            current.clear()
            continue
        current.append(ch)

    if current:
        _keep_name(names, "".join(current))

    return names


def split_call_names(text: str, count: int) -> list[str]:
    """
    Names for a call that passed `count` values.

    A single-value call uses the whole text as its name without splitting,
    so expressions containing commas or brackets are shown exactly as written.
    """
    if count == 1:
        return [text]
    return split_names(text)


# Private Methods ------------------------------------------------------------------------------------------------------

def _keep_name(names: list[str], piece: str) -> None:
    if len(names) < MAX_NAMES:
        names.append(piece.strip())
