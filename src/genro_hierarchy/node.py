# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeNode - read-only accessor over a stored record."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import FieldSchema


class TreeNode:
    """A node of a TreeStore, seen through its FieldSchema.

    The record itself stays a plain dict owned by the store; TreeNode
    only resolves the configured keys.

    Example:
        >>> store = load_flat([{'id': 1, 'parent_id': None, 'name': 'root'}])
        >>> node = store.get_node(1)
        >>> node.level, node.is_root, node.get_attr('name')
        (0, True, 'root')
    """

    __slots__ = ('record', 'schema')

    def __init__(self, record: dict[str, Any], schema: FieldSchema) -> None:
        self.record = record
        self.schema = schema

    def __repr__(self) -> str:
        return f"TreeNode({self.id!r}, level={self.level})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self.record is other.record

    def __hash__(self) -> int:
        return id(self.record)

    @property
    def id(self) -> Any:
        return self.record[self.schema.id]

    @property
    def parent_id(self) -> Any:
        return self.record.get(self.schema.parent)

    @property
    def level(self) -> int:
        return self.record.get(self.schema.level, 0)

    @property
    def breadcrumbs(self) -> list[Any]:
        """Ids from the outermost ancestor to this node (a copy)."""
        return list(self.record.get(self.schema.breadcrumbs, ()))

    @property
    def icons(self) -> list[str]:
        return list(self.record.get(self.schema.icons, ()))

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_first(self) -> bool:
        return bool(self.record.get(self.schema.first))

    @property
    def is_last(self) -> bool:
        return bool(self.record.get(self.schema.last))

    @property
    def is_only(self) -> bool:
        return bool(self.record.get(self.schema.only))

    @property
    def left(self) -> int | None:
        """Nested set left bound, None until computed."""
        return self.record.get(self.schema.left)

    @property
    def right(self) -> int | None:
        """Nested set right bound, None until computed."""
        return self.record.get(self.schema.right)

    @property
    def prefix(self) -> str:
        """Icons joined, ready to be printed before the node label."""
        return ''.join(self.record.get(self.schema.icons, ()))

    def get_attr(self, attr: str | None = None, default: Any = None) -> Any:
        """Get attribute value or all attributes.

        Args:
            attr: Attribute name. If None, returns a copy of the record.
            default: Default value if attribute not found.

        Returns:
            Attribute value, default, or dict of all attributes.
        """
        if attr is None:
            return dict(self.record)
        return self.record.get(attr, default)
