"""
Sanitizes raw definition documents into the canonical node shape.

Call signatures are stored in the documents with their return type attached
('fn(x: number) -> string'). The resolvers need the two halves apart, so the
part after the last render arrow is moved to '!return'.
"""

import logging
from typing import Any, Dict, Mapping

from .config import RENDER_ARROW, RETURN_KEY, TYPE_KEY
from .definition import DefinitionNode, is_call_signature, is_metadata_key

logger = logging.getLogger(__name__)


def split_call_signature(signature: str):
    """
    Peels the final return segment off a call signature.
    Returns (type_signature, return_signature); the return half is None when
    the signature carries no render arrow. Only one level is peeled, so a
    curried signature keeps its inner arrows.
    """
    parts = signature.split(RENDER_ARROW)
    if len(parts) == 1:
        return signature, None
    return_signature = parts.pop()
    return RENDER_ARROW.join(parts), return_signature


def sanitize_definition(description: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Returns a canonical copy of a raw definition tree. Key order is preserved
    and the input is never mutated. Sanitizing a canonical tree is a no-op.
    """
    sanitized: Dict[str, Any] = {}

    for key, describe in description.items():
        # Metadata and leaf values pass through untouched.
        if not isinstance(describe, Mapping) or is_metadata_key(key):
            sanitized[key] = describe
            continue

        node = dict(describe)
        signature = node.get(TYPE_KEY)
        # A node that already carries its return type is canonical.
        if is_call_signature(signature) and RETURN_KEY not in node:
            fn_type, return_type = split_call_signature(signature)
            if return_type is not None:
                node[TYPE_KEY] = fn_type
                node[RETURN_KEY] = return_type

        sanitized[key] = sanitize_definition(node)

    return sanitized


def load_definition(description: Mapping[str, Any]) -> DefinitionNode:
    """Sanitizes a raw document and converts it into a node tree."""
    root = DefinitionNode.from_raw(sanitize_definition(description))
    logger.debug("Loaded definition tree with %d top-level entries", len(root.children))
    return root
