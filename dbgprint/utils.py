"""
DbgPrint utilities shared across the package.

Contains small naming helpers used in argument validation messages.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.
    Builtins are never module-qualified.

    Args:
        obj: An object or a class.
        fully_qualified: If true, returns the module-qualified name for user objects or classes.

    Examples:
        >>> class_name(10)
        'int'
        >>> class Stack: ...
        >>> class_name(Stack(), fully_qualified=True)
        '__main__.Stack'
    """
    cls = obj if isinstance(obj, type) else obj.__class__

    if fully_qualified and cls.__module__ != "builtins":
        return f"{cls.__module__}.{cls.__qualname__}"
    return cls.__name__


def fmt_type(obj: Any) -> str:
    """
    Format the type of obj for exception messages.

    Examples:
        >>> fmt_type(3.5)
        '<float>'
        >>> fmt_type(int)
        '<class: int>'
    """
    if isinstance(obj, type):
        return f"<class: {class_name(obj)}>"
    return f"<{class_name(obj)}>"
