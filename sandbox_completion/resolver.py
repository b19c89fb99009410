import logging
from typing import Any, Callable, Optional

from .config import MAX_PROTOTYPE_DEPTH
from .data_structures import DECLINE, ResolutionQuery, Token
from .definition import DefinitionNode, reference_path
from .exceptions import DescriptionError, ErrorCode
from .graph_builder import AssociationTable
from .object_model import ObjectModel

logger = logging.getLogger(__name__)

ScopeAnalyzer = Callable[[Token, str], bool]


def nothing_in_scope(token: Token, name: str) -> bool:
    return False


class ContextDescriptionResolver:
    """
    Answers "which definition describes this token?" for a resolution query.

    The context object is looked up directly first. Failing that, the prototype
    chain of the parent is walked until a node with a child named after the
    token is found. A node whose type is a named reference ('+list') is
    redirected once to the referenced constructor's prototype before its
    children are consulted; the redirected node is never followed again.
    """

    def __init__(self, table: AssociationTable, model: ObjectModel, is_in_scope: Optional[ScopeAnalyzer] = None):
        self.table = table
        self.model = model
        self.is_in_scope = is_in_scope or nothing_in_scope

    def describe(self, query: ResolutionQuery):
        """Returns the best matching DefinitionNode, or DECLINE."""
        token = query.token

        # Avoid describing function arguments and local variables.
        if token.is_variable and self.is_in_scope(token, token.string):
            logger.debug("Declining '%s': bound in lexical scope", token.string)
            return DECLINE

        if query.context is not None and self.model.is_structured(query.context):
            description = self.table.get(query.context)
            if description is not None:
                return description

        description = self._walk_prototypes(query.parent, token.string, query.window)
        if description is None:
            logger.debug("Declining '%s': no description on the prototype chain", token.string)
            return DECLINE
        return description

    def _walk_prototypes(self, start: Any, name: str, window: Any) -> Optional[DefinitionNode]:
        # Visited links are held, not just their ids, so an id is never reused mid-walk.
        visited = {}
        links = self.model.prototype_chain(start)
        obj = next(links, None)
        depth = 0

        while obj is not None:
            if id(obj) in visited:
                raise DescriptionError(ErrorCode.PROTOTYPE_CYCLE, name=_label(start), depth=depth)
            if depth >= MAX_PROTOTYPE_DEPTH:
                raise DescriptionError(ErrorCode.PROTOTYPE_CHAIN_TOO_DEEP, name=_label(start), limit=MAX_PROTOTYPE_DEPTH)
            visited[id(obj)] = obj
            depth += 1

            description = self.table.get(obj)
            if description is not None:
                if description.is_named_reference:
                    redirected, description = self.redirect(obj, description, window)
                    if redirected is not obj:
                        # Ascend from the redirected prototype from now on.
                        links = self.model.ancestors(redirected)

                if description is not None and name in description.children:
                    return description.children[name]

            obj = next(links, None)

        return None

    def redirect(self, obj: Any, description: DefinitionNode, window: Any):
        """Swaps `obj` for the referenced constructor's prototype, one level only."""
        constructor = self.model.from_path(window, reference_path(description.type_signature))
        prototype = self.model.prototype_of(constructor) if constructor is not None else None
        if prototype is None:
            logger.debug("Named reference %r does not resolve; skipping this link", description.type_signature)
            return obj, None
        return prototype, self.table.get(prototype)


def _label(obj: Any) -> str:
    return getattr(obj, "__name__", type(obj).__name__)
