import re
from typing import Any, List, Optional, Set

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_HOVER,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    Hover,
    MarkupContent,
    MarkupKind,
    Position,
)
from pygls.server import LanguageServer
from pygls.workspace import TextDocument

from .config import PROPERTY_TOKEN, VARIABLE_TOKEN
from .data_structures import DECLINE, ResolutionQuery, Token
from .definition import DefinitionNode
from .engine import Engine, create_engine
from .materializer import ReturnTypeMaterializer
from .resolver import ContextDescriptionResolver
from .signature import render_description, render_signature

server = LanguageServer("sandbox-completion-server", "v1")

_ENGINE: Optional[Engine] = None

# An expression such as `str.lower().upper` directly left of the cursor.
_EXPRESSION_BEFORE_CURSOR = re.compile(r"((?:[A-Za-z_]\w*(?:\(\))?\.)*[A-Za-z_]?\w*)$")
_IDENTIFIER_AFTER_CURSOR = re.compile(r"^\w*")

_ASSIGNMENT_PATTERNS = [
    re.compile(r"^\s*(?:async\s+)?(?:def|class)\s+([A-Za-z_]\w*)", re.MULTILINE),
    re.compile(r"^\s*([A-Za-z_]\w*)\s*(?::[^=\n]+)?=(?!=)", re.MULTILINE),
    re.compile(r"\bfor\s+([A-Za-z_]\w*)\s+in\b"),
    re.compile(r"\bas\s+([A-Za-z_]\w*)"),
    re.compile(r"^\s*import\s+([A-Za-z_]\w*)", re.MULTILINE),
]


def get_engine() -> Engine:
    """The engine is built on first use and shared by every request."""
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = create_engine()
    return _ENGINE


def _bound_names(source: str) -> Set[str]:
    """Names the document binds itself. They shadow built-in descriptions."""
    names = set()
    for pattern in _ASSIGNMENT_PATTERNS:
        names.update(pattern.findall(source))
    return names


def _resolver_for(engine: Engine, source: str) -> ContextDescriptionResolver:
    names = _bound_names(source)
    return ContextDescriptionResolver(engine.table, engine.model, lambda token, name: name in names)


def _get_expression_at_position(document: TextDocument, position: Position, include_word_end: bool = True) -> str:
    line = document.lines[position.line] if position.line < len(document.lines) else ""
    left = line[: position.character]
    expression = _EXPRESSION_BEFORE_CURSOR.search(left).group(1)
    if include_word_end:
        expression += _IDENTIFIER_AFTER_CURSOR.match(line[position.character :]).group(0)
    return expression


def _split_segment(segment: str):
    if segment.endswith("()"):
        return segment[:-2], True
    return segment, False


def _resolve_expression(engine: Engine, resolver: ContextDescriptionResolver, expression: str):
    """
    Walks a dotted expression from the live root. A call segment is replaced by
    the value the materializer picks for it. Returns (query, value) for the
    last segment, or None when some link has no informed answer.
    """
    materializer = ReturnTypeMaterializer(resolver, engine.model)
    segments = expression.split(".")
    parent: Any = engine.window
    query = value = None

    for index, segment in enumerate(segments):
        name, called = _split_segment(segment)
        if not name:
            return None

        found, context = engine.model.lookup(parent, name)
        token = Token(type=VARIABLE_TOKEN if index == 0 else PROPERTY_TOKEN, string=name)
        query = ResolutionQuery(token=token, window=engine.window, context=context if found else None, parent=parent)

        if called:
            if not found:
                return None
            value = materializer.materialize(query)
            if value is DECLINE:
                return None
        elif found:
            value = context
        elif index < len(segments) - 1:
            return None
        else:
            value = None
        parent = value

    return query, value


def _describe_expression(engine: Engine, source: str, expression: str) -> Optional[DefinitionNode]:
    if not expression:
        return None
    resolver = _resolver_for(engine, source)
    resolved = _resolve_expression(engine, resolver, expression)
    if resolved is None:
        return None
    description = resolver.describe(resolved[0])
    return None if description is DECLINE else description


def _described_members(engine: Engine, resolver: ContextDescriptionResolver, obj: Any):
    """Every (name, node) described on `obj` itself or along its prototype chain."""
    members = {}
    namespace = engine.model.own_namespace(obj) or {}
    for name, value in namespace.items():
        description = engine.table.get(value) if isinstance(name, str) else None
        if description is not None:
            members[name] = description

    for link in engine.model.prototype_chain(obj):
        description = engine.table.get(link)
        if description is not None and description.is_named_reference:
            _, description = resolver.redirect(link, description, engine.window)
        if description is None:
            continue
        for name, child in description.children.items():
            members.setdefault(name, child)
    return members


def _completion_items(engine: Engine, source: str, expression: str) -> List[CompletionItem]:
    resolver = _resolver_for(engine, source)
    owner_expression, _, prefix = expression.rpartition(".")

    if owner_expression:
        resolved = _resolve_expression(engine, resolver, owner_expression)
        if resolved is None or resolved[1] is None:
            return []
        owner = resolved[1]
    else:
        owner = engine.window

    items = []
    for name, node in _described_members(engine, resolver, owner).items():
        if not name.startswith(prefix):
            continue
        items.append(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Function if node.is_call else CompletionItemKind.Property,
                detail=render_signature(name, node),
                documentation=node.doc,
            )
        )
    return items


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(params):
    document = server.workspace.get_text_document(params.text_document.uri)
    expression = _get_expression_at_position(document, params.position)
    description = _describe_expression(get_engine(), document.source, expression)
    if description is None:
        return None
    name = _split_segment(expression.split(".")[-1])[0]
    return Hover(contents=MarkupContent(kind=MarkupKind.Markdown, value=render_description(name, description)))


@server.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["."]))
def completions(params):
    document = server.workspace.get_text_document(params.text_document.uri)
    expression = _get_expression_at_position(document, params.position, include_word_end=False)
    items = _completion_items(get_engine(), document.source, expression)
    return CompletionList(items=items, is_incomplete=False)


def start_server():
    server.start_io()


if __name__ == "__main__":
    start_server()
