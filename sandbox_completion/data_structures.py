from dataclasses import dataclass
from typing import Any

from .config import VARIABLE_TOKEN

"""
Defines the request-side data structures of the engine. A query lives for a
single completion request and is discarded afterwards.
"""


class _Decline:
    """The "no informed answer" outcome. Distinct from None, which can be a real value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "DECLINE"


DECLINE = _Decline()


@dataclass
class Token:
    """A classified source token, as handed over by the host's token analyzer."""

    type: str
    string: str

    @property
    def is_variable(self) -> bool:
        return self.type == VARIABLE_TOKEN


@dataclass
class ResolutionQuery:
    """Represents a single describe/function request against the live environment."""

    token: Token
    window: Any
    context: Any = None
    parent: Any = None
    is_constructor: bool = False

    @classmethod
    def from_request(cls, data: dict) -> "ResolutionQuery":
        """Builds a query from the raw request mapping used by the middleware pipeline."""
        token = data.get("token")
        if isinstance(token, dict):
            token = Token(type=token.get("type", ""), string=token.get("string", ""))
        return cls(
            token=token,
            window=data.get("window"),
            context=data.get("context"),
            parent=data.get("parent"),
            is_constructor=bool(data.get("is_constructor", data.get("isConstructor", False))),
        )
