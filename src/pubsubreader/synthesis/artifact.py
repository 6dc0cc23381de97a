# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of synthesized configuration documents.

Documents are stored as compact JSON files so that a synthesis result can be
archived or diffed without reconnecting to the server. The format is
versioned so future schema changes can be detected. Nested structures and
settings are written with their OPC UA field names.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter

from pubsubreader.model.entities import (
    ConfigurationDocument,
    Connection,
    DataSetReader,
    DataSetWriter,
    NetworkAddressUrl,
    PublishedDataSet,
    PublisherId,
    ReaderGroup,
    UInt16PublisherId,
    UInt64PublisherId,
    WriterGroup,
)
from pubsubreader.model.settings import MessageSettings, TransportSettings
from pubsubreader.model.structures import (
    ConfigurationVersion,
    DataSetMetaData,
    FieldTarget,
    KeyValuePair,
    PublishedVariable,
)

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".pubsub.json"


def serialize(document: ConfigurationDocument) -> str:
    """Serialize a ConfigurationDocument to a compact JSON string.

    Extension field values are written in their JSON form, so values of
    non-primitive types are read back as plain JSON data.
    """
    return json.dumps(_document_to_dict(document), separators=(",", ":"))


def deserialize(data: str) -> ConfigurationDocument:
    """Deserialize a ConfigurationDocument from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`ConfigurationDocument` model.

    Raises:
        ValueError: If the artifact format version is not recognised.
    """
    obj = json.loads(data)
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    return _document_from_dict(obj)


def write_artifact(document: ConfigurationDocument, path: Path) -> None:
    """Write a document artifact to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(document), encoding="utf-8")


def read_artifact(path: Path) -> ConfigurationDocument:
    """Read and deserialize a document artifact from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################

_MESSAGE_SETTINGS: TypeAdapter[MessageSettings] = TypeAdapter(MessageSettings)
_TRANSPORT_SETTINGS: TypeAdapter[TransportSettings] = TypeAdapter(TransportSettings)


def _document_to_dict(document: ConfigurationDocument) -> dict[str, Any]:
    return {
        "v": ARTIFACT_FORMAT_VERSION,
        "enabled": document.enabled,
        "connections": [_connection_to_dict(c) for c in document.connections],
        "dataSets": [_data_set_to_dict(d) for d in document.published_data_sets],
    }


def _document_from_dict(obj: dict[str, Any]) -> ConfigurationDocument:
    return ConfigurationDocument(
        enabled=obj.get("enabled", True),
        connections=tuple(_connection_from_dict(c) for c in obj.get("connections", [])),
        published_data_sets=tuple(_data_set_from_dict(d) for d in obj.get("dataSets", [])),
    )


def _publisher_id_to_dict(publisher_id: PublisherId) -> dict[str, Any]:
    return {"kind": publisher_id.kind, "value": publisher_id.value}


def _publisher_id_from_dict(obj: dict[str, Any]) -> PublisherId:
    if obj["kind"] == "uint16":
        return UInt16PublisherId(value=obj["value"])
    return UInt64PublisherId(value=obj["value"])


def _model_to_dict(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def _connection_to_dict(conn: Connection) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": conn.name,
        "enabled": conn.enabled,
        "publisherId": _publisher_id_to_dict(conn.publisher_id),
        "profile": conn.transport_profile_uri,
        "transport": _model_to_dict(conn.transport_settings),
        "readerGroups": [_reader_group_to_dict(g) for g in conn.reader_groups],
        "writerGroups": [_writer_group_to_dict(g) for g in conn.writer_groups],
    }
    if conn.address.network_interface is not None:
        d["networkInterface"] = conn.address.network_interface
    if conn.address.url is not None:
        d["url"] = conn.address.url
    return d


def _connection_from_dict(obj: dict[str, Any]) -> Connection:
    return Connection(
        name=obj["name"],
        enabled=obj.get("enabled", False),
        publisher_id=_publisher_id_from_dict(obj["publisherId"]),
        transport_profile_uri=obj.get("profile", ""),
        address=NetworkAddressUrl(network_interface=obj.get("networkInterface"), url=obj.get("url")),
        transport_settings=_TRANSPORT_SETTINGS.validate_python(obj["transport"]),
        reader_groups=tuple(_reader_group_from_dict(g) for g in obj.get("readerGroups", [])),
        writer_groups=tuple(_writer_group_from_dict(g) for g in obj.get("writerGroups", [])),
    )


def _reader_group_to_dict(group: ReaderGroup) -> dict[str, Any]:
    return {
        "name": group.name,
        "enabled": group.enabled,
        "maxNetworkMessageSize": group.max_network_message_size,
        "message": _model_to_dict(group.message_settings),
        "transport": _model_to_dict(group.transport_settings),
        "readers": [_reader_to_dict(r) for r in group.data_set_readers],
    }


def _reader_group_from_dict(obj: dict[str, Any]) -> ReaderGroup:
    return ReaderGroup(
        name=obj["name"],
        enabled=obj.get("enabled", False),
        max_network_message_size=obj.get("maxNetworkMessageSize", 0),
        message_settings=_MESSAGE_SETTINGS.validate_python(obj["message"]),
        transport_settings=_TRANSPORT_SETTINGS.validate_python(obj["transport"]),
        data_set_readers=tuple(_reader_from_dict(r) for r in obj.get("readers", [])),
    )


def _writer_group_to_dict(group: WriterGroup) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": group.name,
        "enabled": group.enabled,
        "maxNetworkMessageSize": group.max_network_message_size,
        "publishingInterval": group.publishing_interval,
        "writerGroupId": group.writer_group_id,
        "keepAliveTime": group.keep_alive_time,
        "localeIds": list(group.locale_ids),
        "message": _model_to_dict(group.message_settings),
        "transport": _model_to_dict(group.transport_settings),
        "writers": [_writer_to_dict(w) for w in group.data_set_writers],
    }
    if group.header_layout_uri is not None:
        d["headerLayoutUri"] = group.header_layout_uri
    if group.priority is not None:
        d["priority"] = group.priority
    return d


def _writer_group_from_dict(obj: dict[str, Any]) -> WriterGroup:
    return WriterGroup(
        name=obj["name"],
        enabled=obj.get("enabled", False),
        max_network_message_size=obj.get("maxNetworkMessageSize", 0),
        header_layout_uri=obj.get("headerLayoutUri"),
        publishing_interval=obj.get("publishingInterval", 0.0),
        writer_group_id=obj.get("writerGroupId", 0),
        keep_alive_time=obj.get("keepAliveTime", 0.0),
        priority=obj.get("priority"),
        locale_ids=tuple(obj.get("localeIds", [])),
        message_settings=_MESSAGE_SETTINGS.validate_python(obj["message"]),
        transport_settings=_TRANSPORT_SETTINGS.validate_python(obj["transport"]),
        data_set_writers=tuple(_writer_from_dict(w) for w in obj.get("writers", [])),
    )


def _reader_to_dict(reader: DataSetReader) -> dict[str, Any]:
    return {
        "name": reader.name,
        "enabled": reader.enabled,
        "publisherId": _publisher_id_to_dict(reader.publisher_id),
        "writerGroupId": reader.writer_group_id,
        "dataSetWriterId": reader.data_set_writer_id,
        "metaData": _model_to_dict(reader.data_set_meta_data),
        "fieldContentMask": reader.data_set_field_content_mask,
        "messageReceiveTimeout": reader.message_receive_timeout,
        "message": _model_to_dict(reader.message_settings),
        "transport": _model_to_dict(reader.transport_settings),
        "targets": [_model_to_dict(t) for t in reader.target_variables],
    }


def _reader_from_dict(obj: dict[str, Any]) -> DataSetReader:
    return DataSetReader(
        name=obj["name"],
        enabled=obj.get("enabled", False),
        publisher_id=_publisher_id_from_dict(obj["publisherId"]),
        writer_group_id=obj.get("writerGroupId", 0),
        data_set_writer_id=obj.get("dataSetWriterId", 0),
        data_set_meta_data=DataSetMetaData.model_validate(obj["metaData"]),
        data_set_field_content_mask=obj.get("fieldContentMask", 0),
        message_receive_timeout=obj.get("messageReceiveTimeout", 0.0),
        message_settings=_MESSAGE_SETTINGS.validate_python(obj["message"]),
        transport_settings=_TRANSPORT_SETTINGS.validate_python(obj["transport"]),
        target_variables=tuple(FieldTarget.model_validate(t) for t in obj.get("targets", [])),
    )


def _writer_to_dict(writer: DataSetWriter) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": writer.name,
        "enabled": writer.enabled,
        "dataSetWriterId": writer.data_set_writer_id,
        "fieldContentMask": writer.data_set_field_content_mask,
        "message": _model_to_dict(writer.message_settings),
        "transport": _model_to_dict(writer.transport_settings),
    }
    if writer.data_set_name is not None:
        d["dataSetName"] = writer.data_set_name
    if writer.data_set_meta_data is not None:
        d["metaData"] = _model_to_dict(writer.data_set_meta_data)
    if writer.key_frame_count is not None:
        d["keyFrameCount"] = writer.key_frame_count
    return d


def _writer_from_dict(obj: dict[str, Any]) -> DataSetWriter:
    meta_data = obj.get("metaData")
    return DataSetWriter(
        name=obj["name"],
        enabled=obj.get("enabled", False),
        data_set_writer_id=obj.get("dataSetWriterId", 0),
        data_set_name=obj.get("dataSetName"),
        data_set_meta_data=DataSetMetaData.model_validate(meta_data) if meta_data is not None else None,
        data_set_field_content_mask=obj.get("fieldContentMask", 0),
        key_frame_count=obj.get("keyFrameCount"),
        message_settings=_MESSAGE_SETTINGS.validate_python(obj["message"]),
        transport_settings=_TRANSPORT_SETTINGS.validate_python(obj["transport"]),
    )


def _data_set_to_dict(data_set: PublishedDataSet) -> dict[str, Any]:
    return {
        "name": data_set.name,
        "folder": list(data_set.data_set_folder),
        "version": _model_to_dict(data_set.configuration_version),
        "metaData": _model_to_dict(data_set.data_set_meta_data),
        "publishedData": [_model_to_dict(p) for p in data_set.published_data],
        "extensionFields": [_model_to_dict(f) for f in data_set.extension_fields],
    }


def _data_set_from_dict(obj: dict[str, Any]) -> PublishedDataSet:
    return PublishedDataSet(
        name=obj["name"],
        data_set_folder=tuple(obj.get("folder", [])),
        configuration_version=ConfigurationVersion.model_validate(obj.get("version", {})),
        data_set_meta_data=DataSetMetaData.model_validate(obj["metaData"]),
        published_data=tuple(PublishedVariable.model_validate(p) for p in obj.get("publishedData", [])),
        extension_fields=tuple(KeyValuePair.model_validate(f) for f in obj.get("extensionFields", [])),
    )
