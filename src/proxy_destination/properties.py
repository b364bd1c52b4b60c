from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, Iterator, List, Mapping, Optional, TypeVar, Union, overload

from pydantic import TypeAdapter, ValidationError

from .errors import PropertyConversionError

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)


@dataclass(frozen=True)
class PropertyKey(Generic[T]):
    """A property name bound to the type its values are read as."""

    name: str
    value_type: Any = str

    def convert(self, raw: Any) -> T:
        try:
            return _adapter(self.value_type).validate_python(raw)
        except ValidationError as e:
            raise PropertyConversionError(
                f"Property {self.name!r} cannot be read as {getattr(self.value_type, '__name__', self.value_type)}: "
                f"{e.errors()[0]['msg']}"
            ) from e


KeyLike = Union[str, PropertyKey]


def _key_name(key: KeyLike) -> str:
    return key.name if isinstance(key, PropertyKey) else key


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    if isinstance(value, bytearray):
        return bytes(value)
    return value


class DestinationProperty:
    """Well-known destination property keys."""

    NAME: PropertyKey[str] = PropertyKey("Name", str)
    URI: PropertyKey[str] = PropertyKey("URL", str)
    TLS_VERSION: PropertyKey[str] = PropertyKey("TLSVersion", str)
    PROXY_TYPE: PropertyKey[str] = PropertyKey("ProxyType", str)
    PROXY_URI: PropertyKey[str] = PropertyKey("ProxyUri", str)
    PROXY_HOST: PropertyKey[str] = PropertyKey("ProxyHost", str)
    PROXY_PORT: PropertyKey[int] = PropertyKey("ProxyPort", int)
    PROXY_USER: PropertyKey[str] = PropertyKey("ProxyUser", str)
    PROXY_PASSWORD: PropertyKey[str] = PropertyKey("ProxyPassword", str)


class _PropertyReader:
    _values: Dict[str, Any]

    @overload
    def get(self, key: PropertyKey[T]) -> Optional[T]: ...

    @overload
    def get(self, key: str, conversion: Optional[Callable[[Any], T]] = None) -> Optional[Any]: ...

    def get(self, key, conversion=None):
        """Return the value stored under ``key``, or ``None`` when it is not set.

        A typed key converts the raw value to its type. A plain name returns the
        raw value, or passes it through ``conversion`` when one is given.
        """
        name = _key_name(key)
        if name not in self._values:
            return None
        raw = self._values[name]
        if isinstance(key, PropertyKey):
            return key.convert(raw)
        if conversion is not None:
            return conversion(raw)
        return raw

    def contains(self, key: KeyLike) -> bool:
        return _key_name(key) in self._values

    def property_names(self) -> List[str]:
        return list(self._values)


class DestinationProperties(_PropertyReader):
    """Frozen, insertion-ordered set of destination properties.

    Container values are frozen on the way in: lists and tuples become tuples,
    sets become frozensets and mappings become read-only mappings.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        object.__setattr__(self, "_values", MappingProxyType({k: _freeze(v) for k, v in (values or {}).items()}))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DestinationProperties):
            return NotImplemented
        return dict(self._values) == dict(other._values)

    def __hash__(self) -> int:
        # values may be unhashable; equal stores always share a key set
        return hash(frozenset(self._values))

    def __repr__(self) -> str:
        return f"DestinationProperties({dict(self._values)!r})"


class DestinationPropertiesBuilder(_PropertyReader):
    """Mutable accumulator for :class:`DestinationProperties`."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def property(self, key: KeyLike, value: Any) -> "DestinationPropertiesBuilder":
        self._values[_key_name(key)] = value
        return self

    def remove_property(self, key: KeyLike) -> "DestinationPropertiesBuilder":
        self._values.pop(_key_name(key), None)
        return self

    def build(self) -> DestinationProperties:
        return DestinationProperties(self._values)
