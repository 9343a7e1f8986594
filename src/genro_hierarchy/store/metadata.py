# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Derived node metadata: sibling flags, tree-line icons and breadcrumbs.

Both loaders produce the same pre-ordered map (parents before children,
siblings in their final order) and then hand it to the functions below,
so flags and icons are computed in exactly one place.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from ..schema import FieldSchema

NodeMap = dict[Any, dict[str, Any]]


def sibling_groups(nodes: NodeMap, schema: FieldSchema) -> dict[Any, list[Any]]:
    """Group ids by parent id, keeping map order inside each group.

    Roots are grouped under None.
    """
    groups: dict[Any, list[Any]] = {}
    for node_id, record in nodes.items():
        groups.setdefault(record.get(schema.parent), []).append(node_id)
    return groups


def apply_sibling_metadata(nodes: NodeMap, schema: FieldSchema) -> None:
    """Set first/last/only flags and icons on every record, in place.

    Args:
        nodes: Pre-ordered id -> record map.
        schema: Field names and glyphs.
    """
    for members in sibling_groups(nodes, schema).values():
        last_index = len(members) - 1
        for index, node_id in enumerate(members):
            record = nodes[node_id]
            record[schema.first] = index == 0
            record[schema.last] = index == last_index
            record[schema.only] = last_index == 0

    for record in nodes.values():
        record[schema.icons] = node_icons(record, nodes.get(record.get(schema.parent)), schema)


def node_icons(
    record: dict[str, Any],
    parent: dict[str, Any] | None,
    schema: FieldSchema,
) -> list[str]:
    """Compute the tree-line glyphs of a node from its parent's.

    A node at level N gets N glyphs: one for each ancestor from level 1
    down to its parent (blank under an ancestor that closed its sibling
    group, bar otherwise) followed by its own connector.

    Args:
        record: The node record (needs level and last flag).
        parent: The parent record, already carrying its icons.
        schema: Field names and glyphs.

    Returns:
        New list of glyph strings, empty for roots.
    """
    if parent is None or record.get(schema.level, 0) == 0:
        return []
    icons = list(parent[schema.icons][:-1])
    if parent.get(schema.level, 0) > 0:
        icons.append(schema.icon_blank if parent[schema.last] else schema.icon_bar)
    icons.append(schema.icon_corner if record[schema.last] else schema.icon_tee)
    return icons


def breadcrumb_path(nodes: NodeMap, node_id: Any, schema: FieldSchema) -> list[Any]:
    """Walk parent links up from node_id and return the root -> self path.

    The walk stops at the first parent the map cannot resolve. Origin ids
    are left out of the path.
    """
    crumbs: list[Any] = []
    seen: set[Any] = set()
    current = node_id
    while current is not None and current in nodes and current not in seen:
        seen.add(current)
        if not schema.is_origin(current):
            crumbs.append(current)
        current = nodes[current].get(schema.parent)
    crumbs.reverse()
    return crumbs


def compute_breadcrumbs(nodes: NodeMap, schema: FieldSchema) -> None:
    """Store the breadcrumb path of every record, in place."""
    for node_id, record in nodes.items():
        record[schema.breadcrumbs] = breadcrumb_path(nodes, node_id, schema)
