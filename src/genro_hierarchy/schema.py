# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FieldSchema - attribute names and glyphs used to read and write nodes.

Records are plain dicts, so every derived attribute (level, breadcrumbs,
sibling flags...) is written under a configurable key. A FieldSchema is
immutable and is passed explicitly to every builder and query.

Example:
    >>> schema = FieldSchema(parent='parent', sort='position')
    >>> schema.parent
    'parent'
    >>> FieldSchema.from_mapping({'id': 'code', 'icon_blank': '  '}).id
    'code'
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

#: Roles whose value is the key of an attribute in the records.
KEY_ROLES = (
    'id', 'parent', 'sort', 'level', 'children', 'breadcrumbs', 'icons',
    'first', 'last', 'only', 'selected', 'visible', 'left', 'right',
)

#: Roles whose value is a glyph string used to build icons.
ICON_ROLES = ('icon_blank', 'icon_bar', 'icon_tee', 'icon_corner')


@dataclass(frozen=True)
class FieldSchema:
    """Mapping from logical role to record attribute key.

    Attributes:
        id: Key of the node id.
        parent: Key of the parent id (None for roots).
        sort: Key of the value ordering siblings. If None, siblings keep
            input order.
        level: Key where the depth is stored (roots are 0).
        children: Key of the child list in nested records.
        breadcrumbs: Key of the root-to-self id path.
        icons: Key of the list of tree-line glyphs.
        first, last, only: Keys of the sibling position flags.
        selected, visible: Keys of the per-query selection flags.
        left, right: Keys of the nested set bounds.
        icon_blank: Glyph below an ancestor that was the last of its siblings.
        icon_bar: Glyph below an ancestor that has further siblings.
        icon_tee: Connector of a node followed by siblings.
        icon_corner: Connector of the last (or only) child.
        origin_ids: Ids left out of every breadcrumb list. Use it for a
            synthetic root (e.g. id 0) that callers do not want to see.
    """

    id: str = 'id'
    parent: str = 'parent_id'
    sort: str | None = None
    level: str = 'level'
    children: str = 'children'
    breadcrumbs: str = 'breadcrumbs'
    icons: str = 'icons'
    first: str = 'first'
    last: str = 'last'
    only: str = 'only'
    selected: str = 'selected'
    visible: str = 'visible'
    left: str = 'left'
    right: str = 'right'
    icon_blank: str = '  '
    icon_bar: str = '│ '
    icon_tee: str = '├─'
    icon_corner: str = '└─'
    origin_ids: frozenset[Any] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'origin_ids', frozenset(self.origin_ids))

        seen: dict[str, str] = {}
        for role in KEY_ROLES:
            key = getattr(self, role)
            if key is None and role == 'sort':
                continue
            if not isinstance(key, str) or not key:
                raise ValueError(f"Field '{role}' must be a non-empty string, got {key!r}")
            if key in seen:
                raise ValueError(
                    f"Fields '{seen[key]}' and '{role}' both use the key '{key}'"
                )
            seen[key] = role

        for role in ICON_ROLES:
            if not isinstance(getattr(self, role), str):
                raise ValueError(f"Glyph '{role}' must be a string")

    @classmethod
    def from_mapping(cls, structure: Mapping[str, Any] | None = None) -> FieldSchema:
        """Build a schema from a role -> key mapping.

        Roles missing from the mapping keep their defaults.

        Args:
            structure: Mapping of role names to attribute keys or glyphs.

        Returns:
            A new FieldSchema.

        Raises:
            ValueError: If the mapping contains an unknown role.
        """
        if not structure:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(structure) - known)
        if unknown:
            raise ValueError(f"Unknown schema roles: {', '.join(unknown)}")
        return cls(**dict(structure))

    def replace(self, **changes: Any) -> FieldSchema:
        """Return a copy with the given roles changed."""
        return dataclasses.replace(self, **changes)

    @property
    def derived_keys(self) -> tuple[str, ...]:
        """Keys a loader rebuilds from scratch on nested input."""
        keys = [self.id, self.parent, self.children, self.level, self.breadcrumbs]
        if self.sort is not None:
            keys.append(self.sort)
        return tuple(keys)

    def is_origin(self, node_id: Any) -> bool:
        """True if node_id is excluded from breadcrumbs."""
        try:
            return node_id in self.origin_ids
        except TypeError:
            return False
