"""
Wires the knowledge base, the association table and both resolvers into a
single engine, built once at startup and read-only afterwards.
"""

import builtins
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from .data_structures import DECLINE, ResolutionQuery
from .definitions import load_documents
from .graph_builder import AssociationTable, build_association_table
from .materializer import ReturnTypeMaterializer
from .middleware import Handler
from .object_model import ObjectModel
from .resolver import ContextDescriptionResolver, ScopeAnalyzer
from .sanitizer import load_definition

logger = logging.getLogger(__name__)

DESCRIBE_HANDLER = "completion:describe"
FUNCTION_HANDLER = "completion:function"


class Engine:
    """
    Owns the association table and the two resolvers that read it. The table
    is passed in frozen; nothing here writes to it.
    """

    def __init__(self, table: AssociationTable, window: Any, model: ObjectModel, is_in_scope: Optional[ScopeAnalyzer] = None):
        self.table = table
        self.window = window
        self.model = model
        self.resolver = ContextDescriptionResolver(table, model, is_in_scope)
        self.materializer = ReturnTypeMaterializer(self.resolver, model)

    def query(self, data: Mapping[str, Any]) -> ResolutionQuery:
        query = ResolutionQuery.from_request(dict(data))
        if query.window is None:
            query.window = self.window
        return query

    def describe(self, query: ResolutionQuery):
        return self.resolver.describe(query)

    def materialize(self, query: ResolutionQuery):
        return self.materializer.materialize(query)

    def plugins(self) -> Dict[str, Handler]:
        """The two named handlers to register with the host pipeline."""
        return {DESCRIBE_HANDLER: self._describe_handler, FUNCTION_HANDLER: self._function_handler}

    def _describe_handler(self, data, next_, done):
        description = self.describe(self.query(data))
        # If we didn't retrieve a description, allow the next handler to run.
        if description is DECLINE:
            return next_()
        return done(None, description)

    def _function_handler(self, data, next_, done):
        value = self.materialize(self.query(data))
        if value is DECLINE:
            return next_()
        return done(None, value)


def create_engine(
    window: Any = None,
    documents: Optional[Iterable[Mapping[str, Any]]] = None,
    is_in_scope: Optional[ScopeAnalyzer] = None,
    model: Optional[ObjectModel] = None,
) -> Engine:
    """
    Builds the engine in one blocking pass. `window` defaults to the
    `builtins` module and `documents` to the packaged knowledge base.
    No query may be issued before this returns.
    """
    window = builtins if window is None else window
    model = model or ObjectModel()
    raw_documents = load_documents() if documents is None else list(documents)

    definitions = [load_definition(document) for document in raw_documents]
    table = build_association_table(definitions, window, model)
    logger.debug("Engine ready: %d documents, %d live objects described", len(definitions), len(table))

    return Engine(table, window, model, is_in_scope)
