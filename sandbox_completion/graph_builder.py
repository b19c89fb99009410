"""
Builds the association table between live objects and the definition nodes
that describe them, by walking a definition tree and the live object graph
in lockstep.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from .definition import DefinitionNode
from .exceptions import DescriptionError, ErrorCode
from .object_model import ObjectModel

logger = logging.getLogger(__name__)


class AssociationTable:
    """
    Identity-keyed mapping from live object to definition node.

    Keys are `id()`s; the object itself is kept alongside its node so the id
    cannot be recycled while the table is alive. Two structurally equal
    objects are two separate entries. The table is writable only until
    `freeze()` is called.
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[Any, DefinitionNode]] = {}
        self._frozen = False

    def attach(self, live: Any, node: DefinitionNode):
        if self._frozen:
            raise DescriptionError(ErrorCode.TABLE_FROZEN, name=type(live).__name__)
        # Last writer wins: later knowledge bases are more specific.
        self._entries[id(live)] = (live, node)

    def freeze(self) -> "AssociationTable":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, live: Any) -> Optional[DefinitionNode]:
        entry = self._entries.get(id(live))
        if entry is None or entry[0] is not live:
            return None
        return entry[1]

    def __contains__(self, live: Any) -> bool:
        return self.get(live) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return (live for live, _ in self._entries.values())


def attach_descriptions(table: AssociationTable, definition: DefinitionNode, root: Any, model: ObjectModel) -> AssociationTable:
    """
    Pairs every node reachable through plain children of `definition` with the
    live object reached through the same property names from `root`.
    """

    def recurse(node: DefinitionNode, context: Any):
        # Break recursion on a non-object.
        if node is None or not model.is_structured(context):
            return

        table.attach(context, node)

        for key, describe in node.children.items():
            found, value = model.read_own(context, key)
            if found:
                recurse(describe, value)

    recurse(definition, root)
    return table


def build_association_table(definitions: Iterable[DefinitionNode], root: Any, model: Optional[ObjectModel] = None) -> AssociationTable:
    """Folds every definition tree, in order, into one frozen table."""
    model = model or ObjectModel()
    table = AssociationTable()
    for definition in definitions:
        before = len(table)
        attach_descriptions(table, definition, root, model)
        logger.debug("Attached definition tree: table grew from %d to %d entries", before, len(table))
    return table.freeze()
