# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures: an in-memory node space and a builder for PubSub address spaces."""

from collections.abc import Sequence
from typing import Any

import pytest

from pubsubreader.nodespace.ids import PUBLISH_SUBSCRIBE_OBJECT, DataTypeIds, ObjectTypeIds, PubSubState
from pubsubreader.nodespace.types import (
    DataValue,
    ExtensionObject,
    NodeId,
    QualifiedName,
    ReadValueId,
    RemoteReference,
    StatusCode,
    VariantType,
)
from pubsubreader.synthesis.errors import BrowseFailed

# Type definitions of plain variables and properties; both are unclassified.
BASE_DATA_VARIABLE_TYPE = 63
PROPERTY_TYPE = 68
BASE_OBJECT_TYPE = 58

UDP_UADP = "http://opcfoundation.org/UA-Profile/Transport/pubsub-udp-uadp"
MQTT_UADP = "http://opcfoundation.org/UA-Profile/Transport/pubsub-mqtt-uadp"
MQTT_JSON = "http://opcfoundation.org/UA-Profile/Transport/pubsub-mqtt-json"

# ###############
# Fake node space
# ###############


class FakeNodeSpace:
    """An in-memory address space implementing the NodeSpace protocol.

    Every call is recorded in :attr:`calls` as ``(operation, detail)``.
    """

    def __init__(self) -> None:
        self._children: dict[NodeId, list[RemoteReference]] = {PUBLISH_SUBSCRIBE_OBJECT: []}
        self._values: dict[NodeId, DataValue] = {}
        self._next_id = 50000
        self.browse_failures: set[NodeId] = set()
        self.calls: list[tuple[str, Any]] = []

    # -- building -----------------------------------------------------------

    def add_object(self, parent: NodeId, name: str, type_id: int = BASE_OBJECT_TYPE) -> NodeId:
        node = self._new_id()
        self.link(parent, node, name, type_id)
        self._children.setdefault(node, [])
        return node

    def add_variable(
        self,
        parent: NodeId,
        name: str,
        value: Any,
        variant_type: VariantType | None = None,
        status_code: int = StatusCode.GOOD,
        type_id: int = PROPERTY_TYPE,
    ) -> NodeId:
        node = self._new_id()
        self.link(parent, node, name, type_id)
        self._children.setdefault(node, [])
        self._values[node] = DataValue(value, variant_type, status_code, node)
        return node

    def set_value(self, node: NodeId, value: Any, status_code: int = StatusCode.GOOD) -> None:
        previous = self._values.get(node, DataValue())
        self._values[node] = DataValue(value, previous.variant_type, status_code, node)

    def remove_child(self, parent: NodeId, name: str) -> None:
        self._children[parent] = [ref for ref in self._children[parent] if ref.name != name]

    def child(self, parent: NodeId, name: str) -> NodeId:
        return next(ref.node_id for ref in self._children[parent] if ref.name == name)

    # -- NodeSpace protocol ---------------------------------------------------

    def browse(self, node_id: NodeId) -> list[RemoteReference]:
        self.calls.append(("browse", node_id))
        if node_id in self.browse_failures:
            raise BrowseFailed(node_id, StatusCode.BAD_NODE_ID_UNKNOWN)
        return list(self._children.get(node_id, []))

    def read(self, items: Sequence[ReadValueId]) -> list[DataValue]:
        self.calls.append(("read", len(items)))
        return [
            self._values.get(item.node_id, DataValue(status_code=StatusCode.BAD_NODE_ID_UNKNOWN, node_id=item.node_id))
            for item in items
        ]

    def translate_path(self, start: NodeId, path: Sequence[QualifiedName]) -> list[NodeId]:
        self.calls.append(("translate", "/".join(segment.name for segment in path)))
        current = start
        for segment in path:
            match = next((ref for ref in self._children.get(current, []) if ref.name == segment.name), None)
            if match is None:
                return []
            current = match.node_id
        return [current]

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def _new_id(self) -> NodeId:
        self._next_id += 1
        return NodeId(1, self._next_id)

    def link(self, parent: NodeId, node: NodeId, name: str, type_id: int) -> None:
        self._children.setdefault(parent, []).append(RemoteReference(node, QualifiedName(name), NodeId(0, type_id)))


# ###############
# PubSub builder
# ###############


def structure(type_id: int, **body: Any) -> ExtensionObject:
    """Build an extension object of namespace-0 data type *type_id*."""
    return ExtensionObject(NodeId(0, type_id), body)


def meta_data(name: str, *fields: str) -> ExtensionObject:
    return structure(
        DataTypeIds.DATA_SET_META_DATA_TYPE,
        Name=name,
        Description={"Locale": "en", "Text": f"{name} data set"},
        Fields=[{"Name": field, "BuiltInType": 11, "DataType": "ns=0;i=11"} for field in fields],
        ConfigurationVersion={"MajorVersion": 1, "MinorVersion": 2},
    )


class PubSubBuilder:
    """Builds a standard-conforming PubSub object tree inside a FakeNodeSpace."""

    def __init__(self, space: FakeNodeSpace) -> None:
        self.space = space
        self.root = PUBLISH_SUBSCRIBE_OBJECT

    structure = staticmethod(structure)
    meta_data = staticmethod(meta_data)

    def status(self, parent: NodeId, state: PubSubState = PubSubState.OPERATIONAL) -> NodeId:
        node = self.space.add_object(parent, "Status", ObjectTypeIds.PUB_SUB_STATUS_TYPE)
        self.space.add_variable(node, "State", int(state), VariantType.INT32)
        return node

    def connection(
        self,
        name: str,
        profile: str = UDP_UADP,
        publisher_id: int = 7,
        publisher_id_type: VariantType = VariantType.UINT16,
        url: str = "opc.udp://239.0.0.1:4840",
        state: PubSubState = PubSubState.OPERATIONAL,
    ) -> NodeId:
        space = self.space
        node = space.add_object(self.root, name, ObjectTypeIds.PUB_SUB_CONNECTION_TYPE)
        self.status(node, state)
        space.add_variable(node, "PublisherId", publisher_id, publisher_id_type)
        space.add_variable(node, "TransportProfileUri", profile, VariantType.STRING)
        address = space.add_object(node, "Address", ObjectTypeIds.NETWORK_ADDRESS_URL_TYPE)
        space.add_variable(address, "NetworkInterface", "eth0", VariantType.STRING, type_id=BASE_DATA_VARIABLE_TYPE)
        space.add_variable(address, "Url", url, VariantType.STRING, type_id=BASE_DATA_VARIABLE_TYPE)
        return node

    def writer_group(
        self,
        connection: NodeId,
        name: str,
        writer_group_id: int = 1,
        encoding: str = "uadp",
        transport: str | None = "datagram",
    ) -> NodeId:
        space = self.space
        node = space.add_object(connection, name, ObjectTypeIds.WRITER_GROUP_TYPE)
        self.status(node)
        space.add_variable(node, "MaxNetworkMessageSize", 1472, VariantType.UINT32)
        space.add_variable(node, "HeaderLayoutUri", "http://opcfoundation.org/UA/PubSub-Layouts/UADP-Periodic-Fixed")
        space.add_variable(node, "PublishingInterval", 100.0, VariantType.DOUBLE)
        space.add_variable(node, "WriterGroupId", writer_group_id, VariantType.UINT16)
        space.add_variable(node, "KeepAliveTime", 1000.0, VariantType.DOUBLE)
        if encoding == "uadp":
            message = space.add_object(node, "MessageSettings", ObjectTypeIds.UADP_WRITER_GROUP_MESSAGE_TYPE)
            space.add_variable(message, "GroupVersion", 3, VariantType.UINT32)
            space.add_variable(message, "DataSetOrdering", 1, VariantType.INT32)
            space.add_variable(message, "NetworkMessageContentMask", 0x3F, VariantType.UINT32)
        else:
            message = space.add_object(node, "MessageSettings", ObjectTypeIds.JSON_WRITER_GROUP_MESSAGE_TYPE)
            space.add_variable(message, "NetworkMessageContentMask", 0x0F, VariantType.UINT32)
        if transport == "datagram":
            settings = space.add_object(node, "TransportSettings", ObjectTypeIds.DATAGRAM_WRITER_GROUP_TRANSPORT_TYPE)
            space.add_variable(settings, "MessageRepeatCount", 2, VariantType.BYTE)
        elif transport == "broker":
            self.broker_settings(node, ObjectTypeIds.BROKER_WRITER_GROUP_TRANSPORT_TYPE, "plant/wg")
        return node

    def writer(
        self,
        group: NodeId,
        name: str,
        data_set_writer_id: int = 1,
        encoding: str = "uadp",
        data_set: NodeId | None = None,
    ) -> NodeId:
        space = self.space
        node = space.add_object(group, name, ObjectTypeIds.DATA_SET_WRITER_TYPE)
        self.status(node)
        space.add_variable(node, "DataSetWriterId", data_set_writer_id, VariantType.UINT16)
        space.add_variable(node, "DataSetFieldContentMask", 0, VariantType.UINT32)
        if encoding == "uadp":
            message = space.add_object(node, "MessageSettings", ObjectTypeIds.UADP_DATA_SET_WRITER_MESSAGE_TYPE)
            space.add_variable(message, "DataSetMessageContentMask", 1, VariantType.UINT32)
            space.add_variable(message, "ConfiguredSize", 32, VariantType.UINT16)
            space.add_variable(message, "NetworkMessageNumber", 1, VariantType.UINT16)
            space.add_variable(message, "DataSetOffset", 15, VariantType.UINT16)
        else:
            message = space.add_object(node, "MessageSettings", ObjectTypeIds.JSON_DATA_SET_WRITER_MESSAGE_TYPE)
            space.add_variable(message, "DataSetMessageContentMask", 3, VariantType.UINT32)
        if data_set is not None:
            # DataSetToWriter: a forward reference from the data set to the writer.
            space.link(data_set, node, name, ObjectTypeIds.DATA_SET_WRITER_TYPE)
        return node

    def reader_group(self, connection: NodeId, name: str, transport: str | None = None) -> NodeId:
        """Add a reader group; standard reader groups have no ``TransportSettings`` sub-node."""
        space = self.space
        node = space.add_object(connection, name, ObjectTypeIds.READER_GROUP_TYPE)
        self.status(node)
        space.add_variable(node, "MaxNetworkMessageSize", 1472, VariantType.UINT32)
        if transport == "datagram":
            space.add_object(node, "TransportSettings", ObjectTypeIds.DATAGRAM_CONNECTION_TRANSPORT_TYPE)
        elif transport == "broker":
            self.broker_settings(node, ObjectTypeIds.BROKER_WRITER_GROUP_TRANSPORT_TYPE, "plant/rg")
        return node

    def reader(
        self,
        group: NodeId,
        name: str,
        encoding: str = "uadp",
        broker_queue: str | None = None,
        targets: Sequence[Any] = (),
    ) -> NodeId:
        space = self.space
        node = space.add_object(group, name, ObjectTypeIds.DATA_SET_READER_TYPE)
        self.status(node)
        space.add_variable(node, "PublisherId", 7, VariantType.UINT16)
        space.add_variable(node, "WriterGroupId", 1, VariantType.UINT16)
        space.add_variable(node, "DataSetWriterId", 3, VariantType.UINT16)
        space.add_variable(node, "DataSetFieldContentMask", 0, VariantType.UINT32)
        space.add_variable(node, "MessageReceiveTimeout", 500.0, VariantType.DOUBLE)
        space.add_variable(node, "DataSetMetaData", meta_data("Temperatures", "Temp"))
        subscribed = space.add_object(node, "SubscribedDataSet", ObjectTypeIds.TARGET_VARIABLES_TYPE)
        space.add_variable(subscribed, "TargetVariables", list(targets))
        if encoding == "uadp":
            message = space.add_object(node, "MessageSettings", ObjectTypeIds.UADP_DATA_SET_READER_MESSAGE_TYPE)
            space.add_variable(message, "GroupVersion", 3, VariantType.UINT32)
            space.add_variable(message, "NetworkMessageNumber", 1, VariantType.UINT16)
            space.add_variable(message, "DataSetOffset", 15, VariantType.UINT16)
            space.add_variable(message, "NetworkMessageContentMask", 0x3F, VariantType.UINT32)
            space.add_variable(message, "DataSetMessageContentMask", 1, VariantType.UINT32)
        else:
            message = space.add_object(node, "MessageSettings", ObjectTypeIds.JSON_DATA_SET_READER_MESSAGE_TYPE)
            space.add_variable(message, "NetworkMessageContentMask", 0x0F, VariantType.UINT32)
            space.add_variable(message, "DataSetMessageContentMask", 3, VariantType.UINT32)
        if broker_queue is not None:
            self.broker_settings(node, ObjectTypeIds.BROKER_DATA_SET_READER_TRANSPORT_TYPE, broker_queue)
        return node

    def broker_settings(self, owner: NodeId, type_id: int, queue_name: str) -> NodeId:
        space = self.space
        node = space.add_object(owner, "TransportSettings", type_id)
        space.add_variable(node, "QueueName", queue_name, VariantType.STRING)
        space.add_variable(node, "ResourceUri", "", VariantType.STRING)
        space.add_variable(node, "AuthenticationProfileUri", "", VariantType.STRING)
        space.add_variable(node, "RequestedDeliveryGuarantee", 2, VariantType.INT32)
        return node

    def folder(self, parent: NodeId, name: str) -> NodeId:
        return self.space.add_object(parent, name, ObjectTypeIds.DATA_SET_FOLDER_TYPE)

    def data_set(
        self,
        parent: NodeId,
        name: str,
        variables: Sequence[str] = ("ns=2;s=Temp",),
        extension_fields: dict[str, Any] | None = None,
    ) -> NodeId:
        space = self.space
        node = space.add_object(parent, name, ObjectTypeIds.PUBLISHED_DATA_ITEMS_TYPE)
        space.add_variable(
            node,
            "ConfigurationVersion",
            structure(DataTypeIds.CONFIGURATION_VERSION_DATA_TYPE, MajorVersion=1, MinorVersion=2),
        )
        space.add_variable(node, "DataSetMetaData", meta_data(name, *[v.rsplit("=", 1)[-1] for v in variables]))
        space.add_variable(
            node,
            "PublishedData",
            [
                structure(DataTypeIds.PUBLISHED_VARIABLE_DATA_TYPE, PublishedVariable=variable, AttributeId=13)
                for variable in variables
            ],
        )
        if extension_fields is not None:
            container = space.add_object(node, "ExtensionFields", ObjectTypeIds.PUB_SUB_EXTENSION_FIELDS_TYPE)
            for key, value in extension_fields.items():
                space.add_variable(container, key, value)
        return node


@pytest.fixture
def node_space() -> FakeNodeSpace:
    return FakeNodeSpace()


@pytest.fixture
def pubsub(node_space: FakeNodeSpace) -> PubSubBuilder:
    return PubSubBuilder(node_space)
