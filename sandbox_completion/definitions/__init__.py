"""
The static knowledge base: JSON definition documents describing the built-in
objects of the live environment. Documents are read once, in the order given
by `DEFINITION_DOCUMENTS`, and are never written back.
"""

import json
from importlib.resources import files as pkg_files
from typing import Any, Dict, Iterable, List

from ..config import DEFINITION_DOCUMENTS, DEFINITION_PACKAGE
from ..exceptions import DescriptionError, ErrorCode


def load_document(name: str) -> Dict[str, Any]:
    """Reads a single raw definition document by name (without extension)."""
    resource = pkg_files(DEFINITION_PACKAGE) / f"{name}.json"
    try:
        content = resource.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DescriptionError(ErrorCode.DEFINITION_NOT_FOUND, name=name, package=DEFINITION_PACKAGE)

    document = json.loads(content)
    if not isinstance(document, dict):
        raise DescriptionError(ErrorCode.INVALID_DEFINITION_DOCUMENT, document=f"{name}.json", name=name, provided=type(document).__name__)
    return document


def load_documents(names: Iterable[str] = DEFINITION_DOCUMENTS) -> List[Dict[str, Any]]:
    return [load_document(name) for name in names]
