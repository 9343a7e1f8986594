# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore - the canonical flat map of a hierarchy.

This module provides the TreeStore class. A TreeStore owns an
insertion-ordered ``{id: record}`` dict kept in depth-first pre-order and
answers flat, nested and breadcrumb queries over it.

Key Features:
    - **Two loaders**: flat records with parent references, or nested
      records with child lists, both giving the same canonical map
    - **Derived metadata**: level, breadcrumbs, first/last/only flags and
      tree-line icons on every record
    - **Views**: flat or nested projections filtered by subtree and depth,
      annotated with selection and visibility flags
    - **Nested set**: left/right bounds for range queries in a database
    - **Snapshots**: export the map for a cache and restore it verbatim

Example:
    Basic usage::

        store = TreeStore.from_flat([
            {'id': 1, 'parent_id': None},
            {'id': 2, 'parent_id': 1},
            {'id': 3, 'parent_id': 1},
            {'id': 4, 'parent_id': 2},
        ])
        store.breadcrumb_of(4)           # [1, 2, 4]
        store.nested_view(start=2)       # [{'id': 2, ..., 'children': [{'id': 4, ...}]}]

    Cache round trip::

        cached = store.export()
        store = TreeStore.restore(cached)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping

from ..exceptions import NodeNotFoundError
from ..node import TreeNode
from ..schema import FieldSchema
from .loading import build_from_flat, build_from_nested
from .metadata import NodeMap
from .nestedset import compute_nested_set
from .selection import is_selected, is_visible
from .views import build_children_view, build_flat_view, build_nested_view

logger = logging.getLogger(__name__)


class TreeStore:
    """A hierarchy stored as an ordered id -> record map.

    TreeStore provides:
    - load_flat(records) / load_nested(records): Replace the contents
    - flat_view() / nested_view() / children_of(): Projections
    - breadcrumb_of(id): Root-to-node id path
    - recompute_nested_set(): Refresh left/right bounds
    - export() / restore(data): Snapshot for caching

    A load builds a new map first and swaps it in only on success, so a
    rejected input leaves the store unchanged.

    Attributes:
        schema: The FieldSchema naming record attributes.

    Example:
        >>> store = TreeStore(FieldSchema(parent='parent'))
        >>> store.load_flat([{'id': 1, 'parent': None}, {'id': 2, 'parent': 1}])
        TreeStore([1, 2])
        >>> store.get_node(2).level
        1
    """

    __slots__ = ('_nodes', '_schema')

    def __init__(self, schema: FieldSchema | Mapping[str, Any] | None = None) -> None:
        """Initialize an empty TreeStore.

        Args:
            schema: A FieldSchema, a role -> key mapping, or None for the
                default field names.
        """
        self._schema = _as_schema(schema)
        self._nodes: NodeMap = {}

    # ==================== Construction ====================

    @classmethod
    def from_flat(
        cls,
        records: Iterable[Mapping[str, Any]],
        schema: FieldSchema | Mapping[str, Any] | None = None,
    ) -> TreeStore:
        """Create a store from flat records with parent references."""
        return cls(schema).load_flat(records)

    @classmethod
    def from_nested(
        cls,
        records: Iterable[Mapping[str, Any]],
        schema: FieldSchema | Mapping[str, Any] | None = None,
    ) -> TreeStore:
        """Create a store from nested records with child lists."""
        return cls(schema).load_nested(records)

    def load_flat(self, records: Iterable[Mapping[str, Any]]) -> TreeStore:
        """Replace the contents with flat records.

        Args:
            records: Records carrying id, optional parent and sort values.

        Returns:
            This store, for chaining.

        Raises:
            MalformedInputError: If a record is not a mapping or has no id.
        """
        self._nodes = build_from_flat(records, self._schema)
        return self

    def load_nested(self, records: Iterable[Mapping[str, Any]]) -> TreeStore:
        """Replace the contents with nested records.

        Args:
            records: Top level records, children under ``schema.children``.

        Returns:
            This store, for chaining.

        Raises:
            MalformedInputError: If a record has no id or an id repeats.
        """
        self._nodes = build_from_nested(records, self._schema)
        return self

    # ==================== Snapshots ====================

    def export(self) -> dict[Any, dict[str, Any]]:
        """Return a copy of the id -> record map, for caching."""
        return {node_id: _copy_record(record) for node_id, record in self._nodes.items()}

    @classmethod
    def restore(
        cls,
        data: Mapping[Any, Mapping[str, Any]],
        schema: FieldSchema | Mapping[str, Any] | None = None,
    ) -> TreeStore:
        """Create a store from a map produced by export().

        The data is trusted: no metadata is recomputed or validated. It
        must come from export() on a store using a compatible schema.
        """
        store = cls(schema)
        store._nodes = {node_id: _copy_record(record) for node_id, record in data.items()}
        logger.debug("Restored %d nodes from snapshot", len(store._nodes))
        return store

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing node ids."""
        return f"TreeStore({list(self._nodes.keys())})"

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        """Iterate over nodes in depth-first pre-order."""
        for record in self._nodes.values():
            yield TreeNode(record, self._schema)

    def __contains__(self, node_id: Any) -> bool:
        try:
            return node_id in self._nodes
        except TypeError:
            return False

    @property
    def schema(self) -> FieldSchema:
        """The FieldSchema used by this store."""
        return self._schema

    # ==================== Node Access ====================

    def get_node(self, node_id: Any) -> TreeNode:
        """Get the node with the given id.

        Raises:
            NodeNotFoundError: If the id is not in the store.
        """
        if node_id not in self:
            raise NodeNotFoundError(node_id)
        return TreeNode(self._nodes[node_id], self._schema)

    def get(self, node_id: Any, default: Any = None) -> TreeNode | None:
        """Get the node with the given id, or default."""
        if node_id not in self:
            return default
        return TreeNode(self._nodes[node_id], self._schema)

    def roots(self) -> list[TreeNode]:
        """Return the level 0 nodes in order."""
        return [node for node in self if node.level == 0]

    def breadcrumb_of(self, node_id: Any) -> list[Any]:
        """Return the ids from the outermost ancestor down to node_id.

        Raises:
            NodeNotFoundError: If the id is not in the store.
        """
        return self.get_node(node_id).breadcrumbs

    def descendants_of(self, node_id: Any) -> list[TreeNode]:
        """Return the nodes below node_id, in pre-order.

        Uses the nested set bounds when they have been computed, the
        breadcrumbs otherwise.

        Raises:
            NodeNotFoundError: If the id is not in the store.
        """
        node = self.get_node(node_id)
        if node.left is not None and node.right is not None:
            return [
                other for other in self
                if other.left is not None and node.left < other.left and other.right < node.right
            ]
        return [
            other for other in self
            if other.id != node_id and node_id in other.record.get(self._schema.breadcrumbs, ())
        ]

    # ==================== Selection ====================

    def is_selected(self, node_id: Any, selected: Any) -> bool:
        """True if node_id is the selected node or one of its ancestors.

        Args:
            node_id: Node to test.
            selected: Reference id, or a list/set of ids.
        """
        return is_selected(self._nodes, self._schema, node_id, selected)

    def is_visible(self, node_id: Any, selected: Any = None, start: Any = None) -> bool:
        """True if node_id shows in a tree expanded along the selection.

        Args:
            node_id: Node to test.
            selected: Reference id, or a list/set of ids.
            start: Optional viewport root id.
        """
        return is_visible(self._nodes, self._schema, node_id, selected, start)

    # ==================== Views ====================

    def flat_view(
        self,
        selected: Any = None,
        start: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return annotated copies of the records, without nesting.

        Args:
            selected: Selection reference (id or list/set of ids).
            start: Keep only the subtree rooted at this id.
            limit: Keep only nodes with level <= limit. Use 0 for roots only.
        """
        return build_flat_view(self._nodes, self._schema, selected, start, limit)

    def nested_view(
        self,
        selected: Any = None,
        start: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return annotated copies of the records nested under their parents.

        Args:
            selected: Selection reference (id or list/set of ids).
            start: Return only the subtree rooted at this id.
            limit: Keep only nodes with level <= limit. Use 0 for roots only.
        """
        return build_nested_view(self._nodes, self._schema, selected, start, limit)

    def children_of(
        self,
        node_id: Any,
        selected: Any = None,
        start: Any = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return the children of node_id (roots if None), descendants nested.

        Raises:
            NodeNotFoundError: If node_id is not None and not in the store.
        """
        return build_children_view(self._nodes, self._schema, node_id, selected, start, limit)

    # ==================== Nested Set ====================

    def recompute_nested_set(self) -> None:
        """Refresh the left/right bounds stored on every node."""
        compute_nested_set(self._nodes, self._schema)
        logger.debug("Recomputed nested set bounds for %d nodes", len(self._nodes))


def _as_schema(schema: FieldSchema | Mapping[str, Any] | None) -> FieldSchema:
    if isinstance(schema, FieldSchema):
        return schema
    return FieldSchema.from_mapping(schema)


def _copy_record(record: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: list(value) if isinstance(value, list) else value
        for key, value in record.items()
    }


def load_flat(
    records: Iterable[Mapping[str, Any]],
    schema: FieldSchema | Mapping[str, Any] | None = None,
) -> TreeStore:
    """Build a TreeStore from flat records with parent references."""
    return TreeStore.from_flat(records, schema)


def load_nested(
    records: Iterable[Mapping[str, Any]],
    schema: FieldSchema | Mapping[str, Any] | None = None,
) -> TreeStore:
    """Build a TreeStore from nested records with child lists."""
    return TreeStore.from_nested(records, schema)
