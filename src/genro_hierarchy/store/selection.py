# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Selection predicates shared by flat and nested queries.

A selection is a single node id or a list/set of ids. Predicates never
raise on unknown ids; they answer False so they can be used for bulk
filtering.
"""

from __future__ import annotations

from typing import Any, Iterator, TYPE_CHECKING

from .metadata import NodeMap

if TYPE_CHECKING:
    from ..schema import FieldSchema

SELECTION_TYPES = (list, set, frozenset)


def iter_references(selected: Any) -> Iterator[Any]:
    """Yield the single ids of a selection."""
    if isinstance(selected, SELECTION_TYPES):
        yield from selected
    elif selected is not None:
        yield selected


def _record_of(nodes: NodeMap, node_id: Any) -> dict[str, Any] | None:
    try:
        return nodes.get(node_id)
    except TypeError:
        return None


def _crumbs_of(nodes: NodeMap, node_id: Any, schema: FieldSchema) -> list[Any] | None:
    record = _record_of(nodes, node_id)
    if record is None:
        return None
    return record.get(schema.breadcrumbs, [])


def is_selected(nodes: NodeMap, schema: FieldSchema, node_id: Any, selected: Any) -> bool:
    """True if node_id is the selected node or one of its ancestors.

    Args:
        nodes: The id -> record map.
        schema: Field names.
        node_id: Node to test.
        selected: Reference id, or a list/set of ids (any of them).

    Returns:
        False when no reference resolves.
    """
    for reference in iter_references(selected):
        crumbs = _crumbs_of(nodes, reference, schema)
        if crumbs is not None and node_id in crumbs:
            return True
    return False


def is_visible(
    nodes: NodeMap,
    schema: FieldSchema,
    node_id: Any,
    selected: Any = None,
    start: Any = None,
) -> bool:
    """True if node_id is shown in a tree expanded along the selection.

    A node is visible when it sits on the top level of the viewport (level
    0, or the level of ``start`` when it resolves), or when its parent is
    the selected node or one of its ancestors, i.e. it is a child of an
    expanded branch.

    Args:
        nodes: The id -> record map.
        schema: Field names.
        node_id: Node to test.
        selected: Reference id, or a list/set of ids (any of them).
        start: Optional viewport root id.

    Returns:
        False for an unknown node_id.
    """
    crumbs = _crumbs_of(nodes, node_id, schema)
    if crumbs is None:
        return False
    level = nodes[node_id].get(schema.level, 0)

    start_record = _record_of(nodes, start) if start is not None else None
    if start_record is None:
        if level == 0:
            return True
    elif level == start_record.get(schema.level, 0):
        return True

    if len(crumbs) < 2:
        return False
    parent_entry = crumbs[-2]
    for reference in iter_references(selected):
        reference_crumbs = _crumbs_of(nodes, reference, schema)
        if reference_crumbs is not None and parent_entry in reference_crumbs:
            return True
    return False
