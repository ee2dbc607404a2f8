"""
Recursive, shape-directed formatting of arbitrary values for debug output.

fmt_debug() is the single entry point: it classifies the value, renders it with the
matching shape renderer, and every renderer recurses into elements, keys and values
through fmt_debug() again, so nesting like a list of dicts of tuples composes freely.

Rendering never raises for acyclic values: a value that fails to render anywhere
becomes the UNPRINTABLE marker, and containers keep rendering their other elements.
Cycles are not detected; a self-referencing structure ends in RecursionError.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import asyncio
import copy
import ctypes
import heapq
import queue
from typing import Any, Callable, Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .shapes import Shape, classify

UNPRINTABLE = "[unprintable type]"
NULLPTR = "nullptr"


# Methods --------------------------------------------------------------------------------------------------------------

def fmt_debug(obj: Any) -> str:
    """
    Format any value as human-readable debug text.

    Examples:
        >>> fmt_debug(True)
        'true'
        >>> fmt_debug((1, "x"))
        '(1, "x")'
        >>> fmt_debug({"a": [1, 2], "b": None})
        '{"a": [1, 2], "b": None}'
        >>> fmt_debug(object())
        '[unprintable type]'

    Notes:
        - Text is quoted but not escaped, so embedded quotes are shown raw
        - Stack and queue adapters are drained from a copy; the argument is never mutated
        - Mappings and sequences are walked in their own iteration order
        - None is an ordinary value and prints as `None`; `nullptr` is reserved for
          null ctypes pointers and null `c_char_p` / `c_wchar_p` strings
    """
    try:
        return _RENDERERS[classify(obj)](obj)
    except RecursionError:
        raise
    except Exception:
        return UNPRINTABLE


def fmt_items(items: Iterable[Any], open_ch: str = "[", close_ch: str = "]") -> str:
    """Join fmt_debug() renderings of items with ', ' between the given delimiters."""
    return open_ch + ", ".join(fmt_debug(item) for item in items) + close_ch


def drain_copy(obj: Any, shape: Shape) -> list[Any]:
    """
    Return the elements of a stack/queue adapter in pop order, without touching obj.

    Stdlib `queue` classes are snapshotted under their mutex, asyncio queues through
    their internal buffer, and duck-typed adapters are deep-copied and drained with
    top()/front() + pop().

    Raises:
        ValueError: If shape is not an adapter shape.
    """
    if shape not in _ADAPTER_SHAPES:
        raise ValueError(f"adapter shape expected, but got {shape!r}")

    snapshot = _adapter_snapshot(obj)
    if snapshot is not None:
        if shape is Shape.STACK_ADAPTER:
            return snapshot[::-1]
        if shape is Shape.PRIORITY_QUEUE_ADAPTER:
            heapq.heapify(snapshot)
            return [heapq.heappop(snapshot) for _ in range(len(snapshot))]
        return snapshot

    working = copy.deepcopy(obj)
    peek = working.front if shape is Shape.QUEUE_ADAPTER else working.top
    items = []
    while not _is_empty(working):
        items.append(peek())
        working.pop()
    return items


# Private Methods ------------------------------------------------------------------------------------------------------

def _adapter_snapshot(obj: Any) -> list[Any] | None:
    """Copy of the buffer behind stdlib and asyncio queues, None for duck types."""
    if isinstance(obj, queue.Queue):
        with obj.mutex:
            return list(obj.queue)
    if isinstance(obj, asyncio.Queue):
        return list(obj._queue)
    return None


def _is_empty(obj: Any) -> bool:
    empty = getattr(obj, "empty", None)
    if callable(empty):
        return bool(empty())
    return len(obj) == 0


def _char_code(obj: Any) -> int:
    if isinstance(obj, ctypes.c_char):
        return obj.value[0]
    return ord(obj)


def _text_of(obj: Any) -> str | None:
    if isinstance(obj, (ctypes.c_char_p, ctypes.c_wchar_p)):
        obj = obj.value
        if obj is None:
            return None
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode("utf-8", errors="backslashreplace")
    return str(obj)


def _address_of(obj: Any) -> int | None:
    return ctypes.cast(obj, ctypes.c_void_p).value


def _pair_of(obj: Any) -> tuple[Any, Any]:
    if hasattr(obj, "first") and hasattr(obj, "second"):
        return obj.first, obj.second
    first, second = obj
    return first, second


def _fmt_boolean(obj: Any) -> str:
    return "true" if obj else "false"


def _fmt_char(obj: Any) -> str:
    code = _char_code(obj)
    if 0x20 <= code < 0x7F:
        return f"'{chr(code)}'"
    return f"'\\x{code:x}'"


def _fmt_text(obj: Any) -> str:
    text = _text_of(obj)
    if text is None:
        return NULLPTR
    return f'"{text}"'


def _fmt_pointer(obj: Any) -> str:
    address = _address_of(obj)
    if not address:
        return NULLPTR
    return hex(address)


def _fmt_pair(obj: Any) -> str:
    first, second = _pair_of(obj)
    return f"({fmt_debug(first)}, {fmt_debug(second)})"


def _fmt_tuple(obj: Any) -> str:
    return fmt_items(obj, "(", ")")


def _fmt_stack(obj: Any) -> str:
    return fmt_items(drain_copy(obj, Shape.STACK_ADAPTER))


def _fmt_priority_queue(obj: Any) -> str:
    return fmt_items(drain_copy(obj, Shape.PRIORITY_QUEUE_ADAPTER))


def _fmt_queue(obj: Any) -> str:
    return fmt_items(drain_copy(obj, Shape.QUEUE_ADAPTER))


def _fmt_map_like(obj: Any) -> str:
    if callable(getattr(obj, "items", None)):
        entries = obj.items()
    else:
        entries = ((key, obj[key]) for key in obj.keys())
    return "{" + ", ".join(f"{fmt_debug(k)}: {fmt_debug(v)}" for k, v in entries) + "}"


def _fmt_sequence(obj: Any) -> str:
    return fmt_items(obj)


def _fmt_stream(obj: Any) -> str:
    return str(obj)


def _fmt_opaque(obj: Any) -> str:
    return UNPRINTABLE


_ADAPTER_SHAPES = frozenset({Shape.STACK_ADAPTER, Shape.PRIORITY_QUEUE_ADAPTER, Shape.QUEUE_ADAPTER})

_RENDERERS: dict[Shape, Callable[[Any], str]] = {
    Shape.BOOLEAN: _fmt_boolean,
    Shape.CHAR: _fmt_char,
    Shape.TEXT: _fmt_text,
    Shape.POINTER: _fmt_pointer,
    Shape.PAIR: _fmt_pair,
    Shape.TUPLE: _fmt_tuple,
    Shape.STACK_ADAPTER: _fmt_stack,
    Shape.PRIORITY_QUEUE_ADAPTER: _fmt_priority_queue,
    Shape.QUEUE_ADAPTER: _fmt_queue,
    Shape.MAP_LIKE: _fmt_map_like,
    Shape.SEQUENCE: _fmt_sequence,
    Shape.STREAM_FORMATTABLE: _fmt_stream,
    Shape.OPAQUE: _fmt_opaque,
}
