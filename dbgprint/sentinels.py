"""
Sentinel objects for distinguishing an omitted argument from an explicit None.

The debug options use None as a meaningful value (e.g. `color=None` selects
auto-detection), so `configure()` needs a separate marker for "not provided".
All sentinels use identity checks (using 'is') rather than equality checks.

Sentinels:
    UNSET: Represents an unprovided optional argument (distinguishes from None)

Helper Functions:
    ifnotunset: Return default if value is UNSET, otherwise return value

Example:
    >>> def configure(color: bool | None | UnsetType = UNSET):
    ...     color = ifnotunset(color, default=get_options().color)
"""

from typing import Any, Final

__all__ = [
    'UNSET',
    'UnsetType',
    'ifnotunset',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for sentinel objects.

    Sentinels are singleton objects optimized for identity checks.
    """
    __slots__ = ('_name',)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        return (self.__class__, ())


# Sentinel Types -------------------------------------------------------------------------------------------------------

class UnsetType(_SentinelBase):
    """
    Sentinel type for UNSET.

    Marks an option that the caller did not pass, so the current value is kept.
    """
    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("UNSET")


# Sentinel Objects -----------------------------------------------------------------------------------------------------

UNSET: Final[UnsetType] = UnsetType()
"""
Sentinel representing an unprovided optional argument.

Use with identity check: `if arg is UNSET:`
"""


# Helper Functions -----------------------------------------------------------------------------------------------------

def ifnotunset(value: Any, *, default: Any = None) -> Any:
    """
    Return value if it's not UNSET, otherwise return default.

    Args:
        value: The value to check. If not UNSET, this value is returned.
        default: The fallback value when value is UNSET.

    Example:
        >>> ifnotunset(UNSET, default=True)
        True
        >>> ifnotunset(None, default=True)  # None is a real value here
    """
    if value is not UNSET:
        return value
    return default
