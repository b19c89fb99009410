"""
Custom exception types for the sandbox completion engine.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):

    # --- Knowledge Base Errors ---
    DEFINITION_NOT_FOUND = "Definition document '{name}' could not be found in '{package}'."
    INVALID_DEFINITION_DOCUMENT = "Definition document '{name}' must be a JSON object, but got a '{provided}'."

    # --- Association Table Errors ---
    TABLE_FROZEN = "The association table is read-only once built. Cannot attach '{name}'."

    # --- Resolution Errors ---
    PROTOTYPE_CYCLE = "Prototype chain of '{name}' loops back on itself after {depth} link(s)."
    PROTOTYPE_CHAIN_TOO_DEEP = "Prototype chain of '{name}' is deeper than {limit} links."

    # --- Path Errors ---
    INVALID_PATH = "'{path}' does not resolve to a live object (failed at '{segment}')."


class DescriptionError(Exception):
    def __init__(self, code: ErrorCode, document: Optional[str] = None, **kwargs):
        self.code = code
        self.document = document
        self.details = kwargs

        # The format string (e.g., "Unknown document '{name}'") is populated
        # with any extra data it needs from kwargs.
        core_message = code.value.format(**kwargs)

        location_prefix = f"Error in '{document}': " if document else ""
        self.message = location_prefix + core_message

        super().__init__(self.message)
