# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of named children and attributes to decoded values.

Every remote fact the synthesizer needs goes through :class:`AttributeResolver`:
a relative path is translated to a node, the node is read, a bad status is
turned into :class:`ReadFailed`, and nested extension objects are decoded into
their pydantic models so callers never see the wire representation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pubsubreader.model.entities import PublisherId, UInt16PublisherId, UInt64PublisherId
from pubsubreader.nodespace.accessor import NodeSpace
from pubsubreader.nodespace.ids import PubSubState
from pubsubreader.nodespace.types import (
    UNSIGNED_INTEGER_TYPES,
    AttributeId,
    DataValue,
    ExtensionObject,
    NodeId,
    QualifiedName,
    ReadValueId,
    RemoteReference,
    VariantType,
)
from pubsubreader.synthesis.cancellation import CancellationToken
from pubsubreader.synthesis.classifier import TypeRole, select
from pubsubreader.synthesis.errors import MalformedNestedValue, PathNotFound, ReadFailed

logger = logging.getLogger(__name__)

StructureT = TypeVar("StructureT", bound=BaseModel)

# ###############
# Public Interface
# ###############


class AttributeResolver:
    """Resolves facts about remote nodes through a :class:`NodeSpace`.

    Args:
        node_space: The connected accessor.
        batch_reads: When true, :meth:`resolve_many` issues one combined read
            for all names; otherwise it reads them one by one.
        cancellation: Optional token checked before every remote call.
    """

    def __init__(
        self,
        node_space: NodeSpace,
        *,
        batch_reads: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._space = node_space
        self._batch_reads = batch_reads
        self._cancellation = cancellation or CancellationToken()

    # -- remote primitives ------------------------------------------------

    def browse(self, node_id: NodeId) -> list[RemoteReference]:
        self._cancellation.raise_if_cancelled()
        refs = self._space.browse(node_id)
        logger.debug("Browsed %s: %d reference(s)", node_id, len(refs))
        return refs

    def translate(self, start: NodeId, path: Sequence[str]) -> NodeId:
        """Translate *path* below *start* to the first matching node.

        Raises:
            PathNotFound: If the path has no target.
        """
        self._cancellation.raise_if_cancelled()
        targets = self._space.translate_path(start, [QualifiedName(segment) for segment in path])
        if not targets:
            raise PathNotFound(start, path)
        logger.debug("Translated %s/%s -> %s", start, "/".join(path), targets[0])
        return targets[0]

    def read(self, items: Sequence[ReadValueId]) -> list[DataValue]:
        """Read *items*, returning results in request order."""
        self._cancellation.raise_if_cancelled()
        results = self._space.read(items)
        if len(results) != len(items):
            raise MalformedNestedValue("read response", f"expected {len(items)} result(s), got {len(results)}")
        logger.debug("Read %d item(s)", len(items))
        return _in_request_order(items, results)

    # -- single values ----------------------------------------------------

    def read_data_value(self, node_id: NodeId, attribute_id: AttributeId = AttributeId.VALUE) -> DataValue:
        """Read one attribute and return the full data value.

        Raises:
            ReadFailed: If the read reports a non-good status.
        """
        (result,) = self.read([ReadValueId(node_id, attribute_id)])
        if not result.is_good:
            raise ReadFailed(node_id, result.status_code)
        return result

    def resolve_attribute(self, node_id: NodeId, attribute_id: AttributeId) -> Any:
        """Read the Value, DataType or BrowseName attribute of *node_id* directly."""
        return self.read_data_value(node_id, attribute_id).value

    def resolve_path(self, parent: NodeId, path: Sequence[str]) -> Any:
        return self.read_data_value(self.translate(parent, path)).value

    def resolve_named_child(self, parent: NodeId, name: str) -> Any:
        """Translate *name* below *parent* and read the target's value.

        Raises:
            PathNotFound: If *parent* has no child called *name*.
            ReadFailed: If the read reports a non-good status.
        """
        return self.resolve_path(parent, [name])

    def resolve_optional(self, parent: NodeId, name: str, default: Any = None) -> Any:
        """Like :meth:`resolve_named_child`, returning *default* if the child is absent."""
        try:
            return self.resolve_named_child(parent, name)
        except PathNotFound:
            return default

    def resolve_many(self, parent: NodeId, names: Sequence[str]) -> list[Any]:
        """Resolve several named children of *parent*, preserving the order of *names*.

        Produces the same values as calling :meth:`resolve_named_child` once
        per name; with batching enabled all targets are read in one request.
        """
        if not self._batch_reads or len(names) < 2:
            return [self.resolve_named_child(parent, name) for name in names]
        targets = [self.translate(parent, [name]) for name in names]
        results = self.read([ReadValueId(target) for target in targets])
        values: list[Any] = []
        for target, result in zip(targets, results, strict=True):
            if not result.is_good:
                raise ReadFailed(target, result.status_code)
            values.append(result.value)
        return values

    # -- decoded values ---------------------------------------------------

    def resolve_state(self, refs: Sequence[RemoteReference], owner: NodeId) -> bool:
        """Return the enabled flag from the Status node among *refs*.

        Raises:
            PathNotFound: If no Status node is present.
        """
        status_refs = select(list(refs), TypeRole.STATUS)
        if not status_refs:
            raise PathNotFound(owner, ["Status"])
        state = self.resolve_named_child(status_refs[0].node_id, "State")
        return _decode_int(state, "PubSubState") != PubSubState.DISABLED

    def resolve_publisher_id(self, parent: NodeId) -> PublisherId:
        target = self.translate(parent, ["PublisherId"])
        return decode_publisher_id(self.read_data_value(target))

    def resolve_structure(
        self, parent: NodeId, name: str, model: type[StructureT], type_id: int
    ) -> StructureT:
        return decode_structure(self.resolve_named_child(parent, name), model, type_id)

    def resolve_structure_array(self, parent: NodeId, path: Sequence[str]) -> list[Any]:
        """Resolve an array value, leaving element decoding to the caller.

        Raises:
            MalformedNestedValue: If the value is not an array.
        """
        value = self.resolve_path(parent, path)
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise MalformedNestedValue(f"array at '{'/'.join(path)}'", type(value).__name__)
        return list(value)


def decode_structure(value: Any, model: type[StructureT], type_id: int) -> StructureT:
    """Decode an extension object holding a structure of data type *type_id*.

    Raises:
        MalformedNestedValue: If *value* is not an extension object of the
            expected data type or its body does not fit *model*.
    """
    if not isinstance(value, ExtensionObject):
        raise MalformedNestedValue(model.__name__, f"got {type(value).__name__}")
    if value.type_id != NodeId(0, type_id):
        raise MalformedNestedValue(model.__name__, f"unexpected data type {value.type_id}")
    try:
        return model.model_validate(value.body)
    except ValidationError as exc:
        raise MalformedNestedValue(model.__name__, str(exc)) from exc


def decode_publisher_id(data_value: DataValue) -> PublisherId:
    """Choose the publisher id width from the variant type actually read.

    ``UInt16`` values produce the narrow variant; every other unsigned
    integer type widens to 64 bits.

    Raises:
        MalformedNestedValue: If the value is not an unsigned integer.
    """
    value = data_value.value
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise MalformedNestedValue("PublisherId", f"got {value!r}")
    variant_type = data_value.variant_type
    if variant_type is not None and variant_type not in UNSIGNED_INTEGER_TYPES:
        raise MalformedNestedValue("PublisherId", f"unsupported variant type {variant_type.name}")
    try:
        if variant_type is VariantType.UINT16:
            return UInt16PublisherId(value=value)
        return UInt64PublisherId(value=value)
    except ValidationError as exc:
        raise MalformedNestedValue("PublisherId", str(exc)) from exc


# ################
# Implementation
# ################


def _in_request_order(items: Sequence[ReadValueId], results: list[DataValue]) -> list[DataValue]:
    """Re-align *results* with *items* when the accessor reports source nodes."""
    if any(result.node_id is None for result in results):
        return results
    by_node = {result.node_id: result for result in results}
    if any(item.node_id not in by_node for item in items):
        return results
    return [by_node[item.node_id] for item in items]


def _decode_int(value: Any, expected_shape: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedNestedValue(expected_shape, f"got {value!r}")
    return value
