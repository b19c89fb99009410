"""
Parses call signatures from the knowledge base and renders definition nodes
as Markdown for hovers and completion details.

The resolvers only ever look at signature prefixes; this module is the one
place that understands the parameter list, using a small lark grammar
shipped with the package.
"""

import os
from typing import List, Optional, Union

from lark import Lark, LarkError, Token, Transformer
from pydantic import BaseModel

from .definition import DefinitionNode

try:
    from importlib.resources import files as pkg_files

    type_signature_grammar = (pkg_files("sandbox_completion") / "type_signature.lark").read_text()
except (ImportError, FileNotFoundError):
    # Running from a source checkout that is not installed.
    grammar_path = os.path.join(os.path.dirname(__file__), "type_signature.lark")
    with open(grammar_path, "r") as f:
        type_signature_grammar = f.read()

SIGNATURE_PARSER = Lark(type_signature_grammar, start="start", parser="earley")


class Parameter(BaseModel):
    name: str
    type: str
    optional: bool = False

    def render(self) -> str:
        marker = "?" if self.optional else ""
        return f"{self.name}{marker}: {self.type}"


class CallSignature(BaseModel):
    parameters: List[Parameter]
    return_type: Optional[str] = None

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        rendered = f"fn({params})"
        if self.return_type:
            rendered += f" -> {self.return_type}"
        return rendered


class SignatureTransformer(Transformer):
    """
    Builds a CallSignature from the parse tree. Nested types are turned back
    into their canonical text, so only the outermost call is structured.
    """

    def start(self, items):
        return items[0]

    def call_signature(self, items):
        parameters = [item for item in items if isinstance(item, Parameter)]
        return_type = None
        after_arrow = False
        for item in items:
            if isinstance(item, Token) and item.type == "ARROW":
                after_arrow = True
            elif after_arrow and item is not None:
                return_type = _as_text(item)
        return CallSignature(parameters=parameters, return_type=return_type)

    def parameter(self, items):
        name, *rest = items
        optional = any(isinstance(i, Token) and i.type == "OPTIONAL" for i in rest)
        return Parameter(name=str(name), type=_as_text(rest[-1]), optional=optional)

    def union_type(self, items):
        return "|".join(_as_text(i) for i in items)

    def array_type(self, items):
        return f"[{_as_text(items[0])}]"

    def named_reference(self, items):
        return f"+{items[0]}"

    def type_name(self, items):
        return str(items[0])


def _as_text(item: Union[str, Token, CallSignature]) -> str:
    if isinstance(item, CallSignature):
        return item.render()
    return str(item)


def parse_call_signature(signature: Optional[str]) -> Optional[CallSignature]:
    """Parses 'fn(...)'. Anything outside the grammar is treated as absent."""
    if not signature:
        return None
    try:
        tree = SIGNATURE_PARSER.parse(signature)
    except LarkError:
        return None
    return SignatureTransformer().transform(tree)


def render_signature(name: str, node: DefinitionNode) -> str:
    """One-line signature, e.g. '(function) upper() -> string'."""
    if node.is_call:
        parsed = parse_call_signature(node.type_signature)
        params = ", ".join(p.render() for p in parsed.parameters) if parsed else "..."
        rendered = f"(function) {name}({params})"
        if node.return_signature:
            rendered += f" -> {node.return_signature}"
        return rendered
    if node.type_signature:
        return f"(property) {name}: {node.type_signature}"
    return f"(object) {name}"


def render_description(name: str, node: DefinitionNode) -> str:
    """Markdown shown to the user for a described token."""
    contents = [f"```python\n{render_signature(name, node)}\n```"]
    if node.doc:
        contents.extend(["---", f"**{node.doc}**"])
    if node.url:
        contents.append(f"\n[Reference]({node.url})")
    return "\n".join(contents)
