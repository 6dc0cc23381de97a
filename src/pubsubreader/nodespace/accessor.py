# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""The node-space accessor interface consumed by the synthesizer.

A connected client session provides these three services. The reader never
opens, secures, or recovers the session itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pubsubreader.nodespace.types import DataValue, NodeId, QualifiedName, ReadValueId, RemoteReference

# ###############
# Public Interface
# ###############


class NodeSpace(Protocol):
    """Browse / Read / TranslatePath against a connected endpoint."""

    def browse(self, node_id: NodeId) -> list[RemoteReference]:
        """Return the forward references of *node_id*.

        Hierarchical children are expected along with the non-hierarchical
        ``DataSetToWriter`` references a published data set holds to its
        writers. An empty list means the node has no children.
        Implementations raise :class:`~pubsubreader.synthesis.errors.BrowseFailed`
        when the server rejects the browse.
        """
        ...

    def read(self, items: Sequence[ReadValueId]) -> list[DataValue]:
        """Read all *items* in one request.

        Returns one :class:`DataValue` per item. A bad status is reported in
        the data value, not raised.
        """
        ...

    def translate_path(self, start: NodeId, path: Sequence[QualifiedName]) -> list[NodeId]:
        """Resolve a relative browse path; an empty list means no match."""
        ...
