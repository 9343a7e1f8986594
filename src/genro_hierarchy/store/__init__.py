# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore package - flat map of a hierarchy with nested views.

The package is organized into:
- core: TreeStore class with loading, queries and snapshots
- loading: Builders for flat (parent reference) and nested (child list) input
- metadata: Sibling flags, tree-line icons and breadcrumbs
- views: Flat, nested and children projections
- selection: Selected/visible predicates
- nestedset: Left/right bound numbering

Example:
    >>> from genro_hierarchy import load_flat
    >>> store = load_flat([{'id': 1, 'parent_id': None}, {'id': 2, 'parent_id': 1}])
    >>> store.breadcrumb_of(2)
    [1, 2]
"""

from .core import TreeStore, load_flat, load_nested

__all__ = ["TreeStore", "load_flat", "load_nested"]
