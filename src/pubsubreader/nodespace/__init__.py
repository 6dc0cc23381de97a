# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Node-space primitives: identities, references, read values, and the accessor interface."""

from pubsubreader.nodespace.accessor import NodeSpace
from pubsubreader.nodespace.ids import PUBLISH_SUBSCRIBE_OBJECT, DataTypeIds, ObjectTypeIds, PubSubState
from pubsubreader.nodespace.types import (
    AttributeId,
    DataValue,
    ExtensionObject,
    NodeId,
    QualifiedName,
    ReadValueId,
    RemoteReference,
    StatusCode,
    VariantType,
)

__all__ = [
    # Accessor
    "NodeSpace",
    # Identifiers
    "PUBLISH_SUBSCRIBE_OBJECT",
    "DataTypeIds",
    "ObjectTypeIds",
    "PubSubState",
    # Values
    "AttributeId",
    "DataValue",
    "ExtensionObject",
    "NodeId",
    "QualifiedName",
    "ReadValueId",
    "RemoteReference",
    "StatusCode",
    "VariantType",
]
