from __future__ import annotations


class DestinationError(Exception):
    """Base class for all destination errors."""


class MalformedUriError(DestinationError, ValueError):
    """The URI property holds a value that is not a valid URI."""


class MissingPropertyError(DestinationError, KeyError):
    """A required property is absent."""

    def __str__(self) -> str:
        # KeyError quotes its argument
        return str(self.args[0]) if self.args else ""


class PropertyConversionError(DestinationError, TypeError):
    """A stored property value cannot be converted to the type of its key."""


class UnsupportedPropertyError(DestinationError, NotImplementedError):
    """The destination kind never provides the requested attribute.

    Raised instead of returning ``None``, which means "supported but not set".
    """

    def __init__(self, attribute: str, destination_kind: str) -> None:
        super().__init__(f"{destination_kind} does not support {attribute}")
        self.attribute = attribute
        self.destination_kind = destination_kind


class ProxyConfigurationError(DestinationError):
    """The proxy configuration could not be derived from the properties."""
