"""
Turns a function's documented return type into a live value that stands in
for the result of calling it, so completion can continue on `f().`.

Only canonical values are produced: empty primitives from the window's own
constructors, existing prototypes, or the receiver itself. No object of a
custom shape is ever fabricated.
"""

import logging
from typing import Any

from .config import (
    ARRAY_SHAPE_PATTERN,
    ARRAY_TAG,
    BARE_FUNCTION_SIGNATURE,
    PRIMITIVE_RETURN_TAGS,
    SELF_REFERENCE,
    WELL_KNOWN_CONSTRUCTORS,
)
from .data_structures import DECLINE, ResolutionQuery
from .definition import is_named_reference, reference_path
from .object_model import ObjectModel
from .resolver import ContextDescriptionResolver

logger = logging.getLogger(__name__)


class ReturnTypeMaterializer:
    def __init__(self, resolver: ContextDescriptionResolver, model: ObjectModel):
        self.resolver = resolver
        self.model = model

    def materialize(self, query: ResolutionQuery) -> Any:
        """Returns a representative value for calling `query.context`, or DECLINE."""
        function = query.context

        # Constructor functions are relatively easy to handle.
        if query.is_constructor or self._is_well_known_constructor(function, query.window):
            prototype = self.model.prototype_of(function)
            return prototype if prototype is not None else DECLINE

        # With no structured receiver there is no other source of type
        # information, so the function is called for real. Errors propagate.
        if not self.model.is_structured(query.parent):
            return self.model.call_with_receiver(function, query.parent)

        description = self.resolver.describe(query)
        if description is DECLINE or not description.is_call or not description.return_signature:
            return DECLINE

        return self.from_return_signature(description.return_signature, query)

    def from_return_signature(self, return_type: str, query: ResolutionQuery) -> Any:
        window = query.window

        if return_type in PRIMITIVE_RETURN_TAGS:
            return self.model.representative(window, return_type)

        if ARRAY_SHAPE_PATTERN.search(return_type):
            return self.model.representative(window, ARRAY_TAG)

        if return_type == BARE_FUNCTION_SIGNATURE:
            return self.model.representative_function(window)

        # Returns its own instance.
        if return_type == SELF_REFERENCE:
            return query.parent

        # Instance type return.
        if is_named_reference(return_type):
            constructor = self.model.from_path(window, reference_path(return_type))
            if constructor is not None and self.model.is_callable(constructor):
                prototype = self.model.prototype_of(constructor)
                if prototype is not None:
                    return prototype

        logger.debug("Declining return type %r: no representative value", return_type)
        return DECLINE

    def _is_well_known_constructor(self, function: Any, window: Any) -> bool:
        for name in WELL_KNOWN_CONSTRUCTORS:
            found, constructor = self.model.read_own(window, name)
            if found and constructor is function:
                return True
        return False
