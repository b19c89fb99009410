"""
Read-only access to the live object graph.

Every operation the engine performs on the running environment goes through
`ObjectModel`: own-property reads, prototype ascension, named-path lookups,
representative values and the single direct invocation. The default model
describes ordinary Python objects:

* a class is its own prototype, and the prototype of an instance is its type;
* the links after an instance are the whole MRO of its type, and the links
  after a class are the rest of its own MRO, so every base of a
  multiple-inheritance class is visited; `object` ends the chain;
* own properties live in the object's `__dict__` (or in the mapping itself
  when the object is a plain namespace dict).
"""

import types
from typing import Any, Iterable, Iterator, Optional, Tuple

from .config import REPRESENTATIVE_CONSTRUCTORS
from .exceptions import DescriptionError, ErrorCode

_MISSING = object()

# Values that behave like JS primitives: they never own described properties.
PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)

NAMESPACE_TYPES = (dict, types.MappingProxyType)


def _representative_function(*args, **kwargs):
    return None


class ObjectModel:
    """Capability object over the live environment. Never triggers accessor logic."""

    def is_structured(self, value: Any) -> bool:
        return not isinstance(value, PRIMITIVE_TYPES)

    def own_namespace(self, obj: Any):
        """Returns the mapping holding `obj`'s own properties, or None."""
        if isinstance(obj, NAMESPACE_TYPES):
            return obj
        try:
            namespace = object.__getattribute__(obj, "__dict__")
        except AttributeError:
            # Objects with __slots__ or builtin instances have no own namespace.
            return None
        return namespace if isinstance(namespace, NAMESPACE_TYPES) else None

    def read_own(self, obj: Any, key: str) -> Tuple[bool, Any]:
        """
        Reads an own property without running getters. Returns (found, value).
        Data descriptors (property, getset, member descriptors) are accessors:
        they have no plain value, so they read as not found.
        """
        namespace = self.own_namespace(obj)
        if namespace is None:
            return False, None
        value = namespace.get(key, _MISSING)
        if value is _MISSING or self.is_accessor(value):
            return False, None
        return True, value

    def lookup(self, obj: Any, key: str) -> Tuple[bool, Any]:
        """Like read_own, but falls back along the prototype chain of `obj`."""
        for link in self.prototype_chain(obj):
            found, value = self.read_own(link, key)
            if found:
                return True, value
        return False, None

    def is_accessor(self, value: Any) -> bool:
        kind = type(value)
        return hasattr(kind, "__set__") or hasattr(kind, "__delete__")

    def ancestors(self, obj: Any) -> Iterator[Any]:
        """The links after `obj`, in lookup order."""
        if isinstance(obj, type):
            return iter(obj.__mro__[1:])
        return iter(type(obj).__mro__)

    def prototype_chain(self, obj: Any) -> Iterator[Any]:
        if obj is None:
            return
        yield obj
        yield from self.ancestors(obj)

    def prototype_of(self, constructor: Any) -> Optional[Any]:
        """Where the instances of `constructor` find their properties."""
        if isinstance(constructor, type):
            return constructor
        return None

    def from_path(self, root: Any, path: Iterable[str]) -> Any:
        """Follows own properties from `root`. Returns None when a segment is missing."""
        current = root
        for segment in path:
            found, current = self.read_own(current, segment)
            if not found:
                return None
        return current

    def require_path(self, root: Any, dotted: str) -> Any:
        current = root
        for segment in dotted.split("."):
            found, current = self.read_own(current, segment)
            if not found:
                raise DescriptionError(ErrorCode.INVALID_PATH, path=dotted, segment=segment)
        return current

    def is_callable(self, value: Any) -> bool:
        return callable(value)

    def call_with_receiver(self, function: Any, receiver: Any) -> Any:
        """Invokes `function` with `receiver` bound as its first argument. Errors propagate."""
        if receiver is None:
            return function()
        return function(receiver)

    def representative(self, window: Any, tag: str) -> Any:
        """
        The canonical empty value for a return tag ('string', 'number', 'bool',
        'array'), built with the window's own constructor when it has one.
        """
        constructor_name = REPRESENTATIVE_CONSTRUCTORS[tag]
        found, constructor = self.read_own(window, constructor_name)
        if not found or not callable(constructor):
            constructor = _BUILTIN_CONSTRUCTORS[constructor_name]
        return constructor()

    def representative_function(self, window: Any) -> Any:
        return _representative_function


_BUILTIN_CONSTRUCTORS = {"str": str, "float": float, "bool": bool, "list": list}
