"""
Utility helpers for the sandbox completion engine, including terminal
coloring and a JSON serializer for description artifacts.
"""

import json

from pydantic import BaseModel

from .definition import DefinitionNode


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class DescriptionEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, DefinitionNode):
            return o.to_raw()
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        return super().default(o)
