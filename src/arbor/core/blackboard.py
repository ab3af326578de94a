"""Blackboard storage shared by the nodes of a behavior tree.

A blackboard maps string keys to arbitrary values. Nodes read and write it
during a tick, and outside systems subscribe to its change notifications to
mirror state. BaseBlackboard defines the contract on top of four storage
primitives so alternative backing stores (see
arbor.core.integration.StateMachineBlackboard) can be swapped in without the
tree noticing.

A key holding None counts as absent: has_key returns False for it and the
typed getters fall back to their defaults.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

T = TypeVar("T")

ChangeCallback = Callable[[str, Any], None]

_TYPE_DEFAULTS: dict[type, Any] = {int: 0, float: 0.0, bool: False, str: ""}


def type_default(value_type: type | None) -> Any:
    """Return the zero value used for a missing key of value_type."""
    if value_type is None:
        return None
    return _TYPE_DEFAULTS.get(value_type)


def _matches(value: Any, value_type: type) -> bool:
    # bool is a subclass of int, but a stored flag is not a count.
    if value_type is int and isinstance(value, bool):
        return False
    if value_type is float and isinstance(value, int) and not isinstance(value, bool):
        return True
    return isinstance(value, value_type)


class BaseBlackboard(ABC):
    """Contract shared by every blackboard backing store.

    Subclasses implement _read, _write, _delete, keys and clear. Everything
    else, including change notification, is provided here.
    """

    def __init__(self):
        self._subscribers: list[ChangeCallback] = []

    # -- storage primitives ---------------------------------------------------

    @abstractmethod
    def _read(self, key: str) -> Any:
        """Return the stored value, or None if there is none."""

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        """Store value under key."""

    @abstractmethod
    def _delete(self, key: str) -> bool:
        """Remove key; return True if a value was stored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return the keys currently holding a value."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every key."""

    # -- change notification --------------------------------------------------

    def subscribe(self, callback: ChangeCallback) -> None:
        """Register callback(key, value), called after every set_value.

        Callbacks run synchronously in subscription order.
        """
        self._subscribers.append(callback)

    def unsubscribe(self, callback: ChangeCallback) -> None:
        """Remove a callback registered with subscribe. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._subscribers):
            callback(key, value)

    # -- generic access -------------------------------------------------------

    def set_value(self, key: str, value: Any) -> None:
        """Store value under key and notify subscribers."""
        self._write(key, value)
        self._notify(key, value)

    def get_value(
        self, key: str, default: Any = None, value_type: type[T] | None = None
    ) -> Any:
        """Get the value stored under key.

        Args:
            key: The key to look up.
            default: Returned when the key is absent or has the wrong type.
            value_type: Optional expected type of the value.

        Returns:
            The stored value, or default.
        """
        value = self._read(key)
        if value is None:
            return default
        if value_type is not None and not _matches(value, value_type):
            return default
        if value_type is float:
            return float(value)
        return value

    def try_get_value(
        self, key: str, value_type: type[T] | None = None
    ) -> tuple[bool, Any]:
        """Look up key without a caller-supplied default.

        Returns:
            (True, value) if a value of the requested type is stored,
            otherwise (False, zero value of value_type).
        """
        value = self._read(key)
        if value is None or (value_type is not None and not _matches(value, value_type)):
            return False, type_default(value_type)
        if value_type is float:
            return True, float(value)
        return True, value

    def has_key(self, key: str) -> bool:
        """Check whether a non-None value is stored under key."""
        return self._read(key) is not None

    def remove_key(self, key: str) -> bool:
        """Remove key.

        Subscribers are notified with (key, None) when a value was removed.

        Returns:
            True if a value was stored under key.
        """
        removed = self._delete(key)
        if removed:
            self._notify(key, None)
        return removed

    # -- typed accessors ------------------------------------------------------

    def get_int(self, key: str, default: int = 0) -> int:
        return self.get_value(key, default, value_type=int)

    def get_float(self, key: str, default: float = 0.0) -> float:
        return self.get_value(key, default, value_type=float)

    def get_bool(self, key: str, default: bool = False) -> bool:
        return self.get_value(key, default, value_type=bool)

    def get_str(self, key: str, default: str = "") -> str:
        return self.get_value(key, default, value_type=str)

    def increment(self, key: str, amount: int | float = 1) -> int | float:
        """Add amount to a numeric value (missing counts as 0) and return it."""
        current = self.get_value(key, 0)
        if isinstance(current, bool) or not isinstance(current, (int, float)):
            current = 0
        new_value = current + amount
        self.set_value(key, new_value)
        return new_value

    # -- mapping conveniences -------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        """Support bracket notation access (blackboard["key"])."""
        value = self._read(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        """Support bracket notation assignment (blackboard["key"] = value)."""
        self.set_value(key, value)

    def __contains__(self, key: object) -> bool:
        """Support 'in' operator (key in blackboard)."""
        return isinstance(key, str) and self.has_key(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict snapshot of the stored values."""
        return {key: self._read(key) for key in self.keys()}


class Blackboard(BaseBlackboard):
    """The default in-memory blackboard.

    Examples:
        >>> bb = Blackboard({"health": 100})
        >>> bb.get_int("health")
        100
        >>> bb.has_key("target")
        False
    """

    def __init__(self, data: dict[str, Any] | None = None):
        """Initialize the blackboard with optional initial data.

        Initial values are stored without notifying anyone.

        Args:
            data: Optional dictionary of initial values.
        """
        super().__init__()
        self._data: dict[str, Any] = dict(data) if data is not None else {}

    def _read(self, key: str) -> Any:
        return self._data.get(key)

    def _write(self, key: str, value: Any) -> None:
        self._data[key] = value

    def _delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        return self._data.pop(key) is not None

    def keys(self) -> list[str]:
        return [key for key, value in self._data.items() if value is not None]

    def clear(self) -> None:
        self._data.clear()

    def __repr__(self) -> str:
        return f"Blackboard({self.to_dict()!r})"
