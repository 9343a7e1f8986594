# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Views - flat and nested projections of the node map.

Every view is built from copies of the stored records: the selection
flags and child lists added here never reach the store.

Filters shared by all views:
    - start: keep only the subtree rooted at this id (the node included)
    - limit: keep only nodes whose level is <= limit

Example:
    >>> build_nested_view(nodes, schema, start=2)
    [{'id': 2, ..., 'children': [{'id': 4, ..., 'children': []}]}]
"""

from __future__ import annotations

from typing import Any, Iterator, TYPE_CHECKING

from ..exceptions import NodeNotFoundError
from .metadata import NodeMap, sibling_groups
from .selection import is_selected, is_visible

if TYPE_CHECKING:
    from ..schema import FieldSchema


def _copy(record: dict[str, Any], schema: FieldSchema) -> dict[str, Any]:
    item = dict(record)
    for key in (schema.breadcrumbs, schema.icons):
        if isinstance(item.get(key), list):
            item[key] = list(item[key])
    return item


def annotated_copy(
    nodes: NodeMap,
    schema: FieldSchema,
    node_id: Any,
    selected: Any = None,
    start: Any = None,
) -> dict[str, Any]:
    """Copy a stored record and add its selected/visible flags."""
    item = _copy(nodes[node_id], schema)
    item[schema.selected] = is_selected(nodes, schema, node_id, selected)
    item[schema.visible] = is_visible(nodes, schema, node_id, selected, start)
    return item


def iter_in_scope(
    nodes: NodeMap,
    schema: FieldSchema,
    start: Any = None,
    limit: int | None = None,
) -> Iterator[Any]:
    """Yield, in map order, the ids that pass the start and limit filters."""
    for node_id, record in nodes.items():
        if limit is not None and record.get(schema.level, 0) > limit:
            continue
        if start is not None and start not in record.get(schema.breadcrumbs, ()):
            continue
        yield node_id


def build_flat_view(
    nodes: NodeMap,
    schema: FieldSchema,
    selected: Any = None,
    start: Any = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Return the filtered, annotated records in map order, without nesting."""
    return [
        annotated_copy(nodes, schema, node_id, selected, start)
        for node_id in iter_in_scope(nodes, schema, start, limit)
    ]


def build_nested_view(
    nodes: NodeMap,
    schema: FieldSchema,
    selected: Any = None,
    start: Any = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Rebuild the nested forest from the pre-ordered map.

    A stack holds the chain of open ancestors as (level, item) pairs.
    Entries at the same or a deeper level than the current node are
    closed; the node then becomes a child of the stack top, or a new root
    when the stack is empty.

    Args:
        nodes: Pre-ordered id -> record map.
        schema: Field names.
        selected: Selection reference (id or list/set of ids).
        start: Optional subtree root.
        limit: Optional maximum level.

    Returns:
        List of root items, each with a ``schema.children`` list.
    """
    roots: list[dict[str, Any]] = []
    stack: list[tuple[int, dict[str, Any]]] = []

    for node_id in iter_in_scope(nodes, schema, start, limit):
        item = annotated_copy(nodes, schema, node_id, selected, start)
        item[schema.children] = []
        level = item.get(schema.level, 0)

        while stack and stack[-1][0] >= level:
            stack.pop()

        if stack:
            stack[-1][1][schema.children].append(item)
        else:
            roots.append(item)
        stack.append((level, item))

    return roots


def build_children_view(
    nodes: NodeMap,
    schema: FieldSchema,
    node_id: Any,
    selected: Any = None,
    start: Any = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Return the children of node_id with their own descendants nested.

    The direct children are always returned; deeper levels are added
    only while the child level is below ``limit``.

    Args:
        nodes: The id -> record map.
        schema: Field names.
        node_id: Parent id, or None for the roots.
        selected: Selection reference (id or list/set of ids).
        start: Viewport root used by the visibility rule.
        limit: Optional maximum level of the nested descendants.

    Raises:
        NodeNotFoundError: If node_id is not None and not in the map.
    """
    if node_id is not None and node_id not in nodes:
        raise NodeNotFoundError(node_id)

    groups = sibling_groups(nodes, schema)
    result: list[dict[str, Any]] = []

    # (parent id, list receiving its children)
    pending = [(node_id, result)]
    while pending:
        parent_id, target = pending.pop()
        for child_id in groups.get(parent_id, ()):
            item = annotated_copy(nodes, schema, child_id, selected, start)
            item[schema.children] = []
            target.append(item)
            if limit is None or limit > item.get(schema.level, 0):
                pending.append((child_id, item[schema.children]))

    return result
