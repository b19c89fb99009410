"""
Defines the canonical node model of the static knowledge base.

A raw definition document is a nested JSON object: plain keys name live
properties, and keys prefixed with '!' carry metadata about the node that
owns them ('!type', '!return', '!doc', '!url', ...). Once sanitized, each
document is converted into a tree of frozen `DefinitionNode` objects.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import (
    CALL_SIGNATURE_PATTERN,
    DOC_KEY,
    METADATA_PREFIX,
    NAMED_TYPE_PREFIX,
    PATH_SEPARATOR,
    RETURN_KEY,
    TYPE_KEY,
    URL_KEY,
)


def is_metadata_key(key: str) -> bool:
    return key.startswith(METADATA_PREFIX)


def is_call_signature(signature: Optional[str]) -> bool:
    return isinstance(signature, str) and bool(CALL_SIGNATURE_PATTERN.match(signature))


def is_named_reference(signature: Optional[str]) -> bool:
    return isinstance(signature, str) and signature.startswith(NAMED_TYPE_PREFIX)


def reference_path(signature: str) -> list:
    """Splits '+Path.To.Constructor' into ['Path', 'To', 'Constructor']."""
    return signature[len(NAMED_TYPE_PREFIX) :].split(PATH_SEPARATOR)


class DefinitionNode(BaseModel):
    """Describes one live property: its type, its return type and its own properties."""

    model_config = ConfigDict(frozen=True)

    type_signature: Optional[str] = None
    return_signature: Optional[str] = None
    doc: Optional[str] = None
    url: Optional[str] = None
    annotations: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    children: Mapping[str, "DefinitionNode"] = Field(default_factory=dict, validate_default=True)

    @field_validator("annotations", "children", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        # Nodes are shared by every query; their mappings are read-only views.
        return MappingProxyType(dict(value))

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "DefinitionNode":
        """
        Converts an already sanitized raw mapping into a node tree. Non-mapping
        values under plain keys have no live counterpart and are dropped.
        """
        fields: Dict[str, Any] = {}
        annotations: Dict[str, Any] = {}
        children: Dict[str, DefinitionNode] = {}

        for key, value in raw.items():
            if not is_metadata_key(key):
                if isinstance(value, Mapping):
                    children[key] = cls.from_raw(value)
                continue

            if key in (TYPE_KEY, RETURN_KEY, DOC_KEY, URL_KEY) and isinstance(value, str):
                fields[_FIELD_FOR_KEY[key]] = value
            elif value is not None:
                annotations[key] = value

        return cls(annotations=annotations, children=children, **fields)

    def to_raw(self) -> Dict[str, Any]:
        """The inverse of `from_raw`, used for JSON output."""
        raw: Dict[str, Any] = {}
        for key, field_name in _FIELD_FOR_KEY.items():
            value = getattr(self, field_name)
            if value is not None:
                raw[key] = value
        raw.update(self.annotations)
        for name, child in self.children.items():
            raw[name] = child.to_raw()
        return raw

    def child(self, name: str) -> Optional["DefinitionNode"]:
        return self.children.get(name)

    @property
    def is_call(self) -> bool:
        return is_call_signature(self.type_signature)

    @property
    def is_named_reference(self) -> bool:
        return is_named_reference(self.type_signature)


_FIELD_FOR_KEY = {
    TYPE_KEY: "type_signature",
    RETURN_KEY: "return_signature",
    DOC_KEY: "doc",
    URL_KEY: "url",
}
