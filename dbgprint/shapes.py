"""
Shape classification for debug rendering.

Every value is assigned exactly one rendering Shape. Shapes are resolved by
capability checks applied in a fixed precedence order, because several
capabilities overlap: a mapping is also iterable, a priority queue also has
top()/pop() like a stack, and a pair is also a tuple.

Precedence (first match wins):
    BOOLEAN, CHAR, TEXT, POINTER, PAIR, TUPLE, STACK_ADAPTER,
    PRIORITY_QUEUE_ADAPTER, QUEUE_ADAPTER, MAP_LIKE, SEQUENCE,
    STREAM_FORMATTABLE, OPAQUE

Types pinned with register_shape() bypass the precedence rules.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import asyncio
import collections.abc as abc
import ctypes
import queue
from enum import Enum, unique
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name, fmt_type


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Shape(str, Enum):
    """
    Enumerates the rendering strategies, in classification precedence order.

    Members are str subclasses, so register_shape() also accepts plain strings like "stack".
    """
    BOOLEAN = "boolean"
    CHAR = "char"
    TEXT = "text"
    POINTER = "pointer"
    PAIR = "pair"
    TUPLE = "tuple"
    STACK_ADAPTER = "stack"
    PRIORITY_QUEUE_ADAPTER = "priority-queue"
    QUEUE_ADAPTER = "queue"
    MAP_LIKE = "map"
    SEQUENCE = "sequence"
    STREAM_FORMATTABLE = "stream"
    OPAQUE = "opaque"


class Char(str):
    """
    A single character, rendered with character-literal quoting.

    Python has no character type; wrap a value in Char to get `'c'` / `'\\x7'`
    rendering instead of the `"text"` rendering of plain strings.

    Examples:
        >>> Char("A")
        Char('A')
        >>> Char(7) == "\\x07"
        True
        >>> Char(b"z")
        Char('z')
    """
    __slots__ = ()

    def __new__(cls, value: str | bytes | bytearray | int) -> "Char":
        if isinstance(value, bool):
            raise TypeError(f"Char value must be str, bytes or int, but got {fmt_type(value)}")
        if isinstance(value, int):
            if not 0 <= value <= 0x10FFFF:
                raise ValueError(f"Char code point out of range: {value}")
            value = chr(value)
        elif isinstance(value, (bytes, bytearray)):
            if len(value) != 1:
                raise ValueError(f"Char requires exactly one byte, but got {len(value)}")
            value = chr(value[0])
        elif not isinstance(value, str):
            raise TypeError(f"Char value must be str, bytes or int, but got {fmt_type(value)}")

        if len(value) != 1:
            raise ValueError(f"Char requires exactly one character, but got {len(value)}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Char({str.__repr__(self)})"


# Methods --------------------------------------------------------------------------------------------------------------

def classify(obj: Any) -> Shape:
    """
    Return the single rendering Shape for obj.

    Registered types are resolved first (exact type, then nearest ancestor in the MRO),
    then the capability rules are tried in precedence order. A rule that raises while
    probing obj counts as no match; only RecursionError propagates.

    Examples:
        >>> classify(True)
        <Shape.BOOLEAN: 'boolean'>
        >>> classify({"a": 1})
        <Shape.MAP_LIKE: 'map'>
        >>> classify((1, "x"))
        <Shape.PAIR: 'pair'>
        >>> classify((1, 2, 3))
        <Shape.TUPLE: 'tuple'>
        >>> classify(object())
        <Shape.OPAQUE: 'opaque'>
    """
    shape = registered_shape(obj)
    if shape is not None:
        return shape

    for shape, matches in _SHAPE_RULES:
        try:
            if matches(obj):
                return shape
        except RecursionError:
            raise
        except Exception:
            continue

    return Shape.OPAQUE


def register_shape(typ: type, shape: Shape | str) -> None:
    """
    Pin a type (and its subclasses) to a Shape, bypassing capability detection.

    A registered PAIR type may expose `first`/`second` attributes instead of being a 2-sequence.

    Raises:
        TypeError: If typ is not a type or shape is not a Shape/str.
        ValueError: If shape is not a valid Shape value.
    """
    if not isinstance(typ, type):
        raise TypeError(f"typ must be a type, got {fmt_type(typ)}")
    if not isinstance(shape, str):
        raise TypeError(f"shape must be a Shape or str, got {fmt_type(shape)}")
    try:
        shape = Shape(shape)
    except ValueError:
        valid = ", ".join(s.value for s in Shape)
        raise ValueError(f"unknown shape {shape!r}, expected one of: {valid}") from None

    _SHAPE_REGISTRY[typ] = shape


def unregister_shape(typ: type) -> None:
    """Remove a type pinned with register_shape(); unknown types are ignored."""
    if not isinstance(typ, type):
        raise TypeError(f"typ must be a type, got {fmt_type(typ)}")
    _SHAPE_REGISTRY.pop(typ, None)


def registered_shape(obj: Any) -> Shape | None:
    """Shape pinned for obj's type or its nearest registered ancestor, if any."""
    if not _SHAPE_REGISTRY:
        return None
    for base in type(obj).__mro__:
        if base in _SHAPE_REGISTRY:
            return _SHAPE_REGISTRY[base]
    return None


def registered_shapes() -> dict[str, Shape]:
    """Snapshot of the registry keyed by class name, for inspection."""
    return {class_name(typ, fully_qualified=True): shape for typ, shape in _SHAPE_REGISTRY.items()}


# Private Methods ------------------------------------------------------------------------------------------------------

def _has_methods(obj: Any, *names: str) -> bool:
    # Looked up on the type, as Python does for special methods,
    # so class objects never pass for instances of themselves
    cls = type(obj)
    return all(callable(getattr(cls, name, None)) for name in names)


def _reports_empty(obj: Any) -> bool:
    return _has_methods(obj, "empty") or _has_methods(obj, "__len__")


def _has_comparator(obj: Any) -> bool:
    return callable(getattr(obj, "key", None))


def _is_char(obj: Any) -> bool:
    return isinstance(obj, (Char, ctypes.c_char))


def _is_text(obj: Any) -> bool:
    return isinstance(obj, (str, bytes, bytearray, ctypes.c_char_p, ctypes.c_wchar_p))


def _is_pointer(obj: Any) -> bool:
    return isinstance(obj, (ctypes._Pointer, ctypes.c_void_p, ctypes._CFuncPtr))


def _is_pair(obj: Any) -> bool:
    return type(obj) is tuple and len(obj) == 2


def _is_stack(obj: Any) -> bool:
    if isinstance(obj, (queue.LifoQueue, asyncio.LifoQueue)):
        return True
    return _has_methods(obj, "top", "pop") and _reports_empty(obj) and not _has_comparator(obj)


def _is_priority_queue(obj: Any) -> bool:
    if isinstance(obj, (queue.PriorityQueue, asyncio.PriorityQueue)):
        return True
    return _has_methods(obj, "top", "pop") and _reports_empty(obj) and _has_comparator(obj)


def _is_queue(obj: Any) -> bool:
    if isinstance(obj, (queue.Queue, asyncio.Queue)):
        return True
    return _has_methods(obj, "front", "pop") and _reports_empty(obj)


def _is_map_like(obj: Any) -> bool:
    return isinstance(obj, abc.Mapping) or _has_methods(obj, "keys", "__getitem__", "__iter__")


def _is_sequence(obj: Any) -> bool:
    # Iterators are single-pass: walking them would consume the caller's data
    if isinstance(obj, abc.Iterator):
        return False
    return isinstance(obj, abc.Iterable) or _has_methods(obj, "__getitem__", "__len__")


def _is_stream_formattable(obj: Any) -> bool:
    cls = type(obj)
    return cls.__str__ is not object.__str__ or cls.__repr__ is not object.__repr__


_SHAPE_RULES: tuple[tuple[Shape, Callable[[Any], bool]], ...] = (
    (Shape.BOOLEAN, lambda obj: isinstance(obj, bool)),
    (Shape.CHAR, _is_char),
    (Shape.TEXT, _is_text),
    (Shape.POINTER, _is_pointer),
    (Shape.PAIR, _is_pair),
    (Shape.TUPLE, lambda obj: isinstance(obj, tuple)),
    (Shape.STACK_ADAPTER, _is_stack),
    (Shape.PRIORITY_QUEUE_ADAPTER, _is_priority_queue),
    (Shape.QUEUE_ADAPTER, _is_queue),
    (Shape.MAP_LIKE, _is_map_like),
    (Shape.SEQUENCE, _is_sequence),
    (Shape.STREAM_FORMATTABLE, _is_stream_formattable),
)

SHAPE_PRECEDENCE: tuple[Shape, ...] = tuple(shape for shape, _ in _SHAPE_RULES) + (Shape.OPAQUE,)

_SHAPE_REGISTRY: dict[type, Shape] = {}
