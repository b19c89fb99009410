"""
Type descriptions for the built-in objects of a live Python environment.

    >>> engine = create_engine()
    >>> query = ResolutionQuery(token=Token("property", "upper"), window=engine.window, parent=str)
    >>> engine.describe(query).return_signature
    'string'
"""

from .data_structures import DECLINE, ResolutionQuery, Token
from .definition import DefinitionNode
from .engine import Engine, create_engine
from .exceptions import DescriptionError, ErrorCode
from .graph_builder import AssociationTable, attach_descriptions, build_association_table
from .materializer import ReturnTypeMaterializer
from .object_model import ObjectModel
from .resolver import ContextDescriptionResolver
from .sanitizer import load_definition, sanitize_definition

__all__ = [
    "DECLINE",
    "AssociationTable",
    "ContextDescriptionResolver",
    "DefinitionNode",
    "DescriptionError",
    "Engine",
    "ErrorCode",
    "ObjectModel",
    "ResolutionQuery",
    "ReturnTypeMaterializer",
    "Token",
    "attach_descriptions",
    "build_association_table",
    "create_engine",
    "load_definition",
    "sanitize_definition",
]
