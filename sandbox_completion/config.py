"""
Static configuration data for the sandbox completion engine.
This includes the definition-document markers, the signature grammar
markers used by the resolvers, and the knowledge base load order.
"""

import re

# --- Definition Document Markers ---
# Keys starting with METADATA_PREFIX annotate a node and are never children.
METADATA_PREFIX = "!"
TYPE_KEY = "!type"
RETURN_KEY = "!return"
DOC_KEY = "!doc"
URL_KEY = "!url"

# --- Signature Markers ---
RENDER_ARROW = " -> "
CALL_SIGNATURE_PATTERN = re.compile(r"^fn\(")
ARRAY_SHAPE_PATTERN = re.compile(r"\[.*\]")
NAMED_TYPE_PREFIX = "+"
PATH_SEPARATOR = "."
SELF_REFERENCE = "!this"
BARE_FUNCTION_SIGNATURE = "fn()"

# Plain return tags and the representative value each one materializes to.
# The value is the name of a constructor read from the live root; calling it
# with no arguments yields the canonical empty value ("", 0.0, False, []).
REPRESENTATIVE_CONSTRUCTORS = {
    "string": "str",
    "number": "float",
    "bool": "bool",
    "array": "list",
}
PRIMITIVE_RETURN_TAGS = ("string", "number", "bool")
ARRAY_TAG = "array"

# Constructors whose prototype is returned directly when invoked, without
# consulting the knowledge base.
WELL_KNOWN_CONSTRUCTORS = ("list", "str", "bool")

# --- Token Classification ---
VARIABLE_TOKEN = "variable"
PROPERTY_TOKEN = "property"

# --- Knowledge Base ---
# Documents are attached in this order; later documents win when two of them
# describe the same live object.
DEFINITION_PACKAGE = "sandbox_completion.definitions"
DEFINITION_DOCUMENTS = ("builtins", "builtin_types")

# Upper bound on prototype links walked for a single query.
MAX_PROTOTYPE_DEPTH = 64
