# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entities of a synthesized PubSub configuration document."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from pubsubreader.model.settings import (
    MessageSettings,
    NoMessageSettings,
    NoTransportSettings,
    TransportSettings,
)
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


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True)


class UInt16PublisherId(_Entity):
    """A publisher id that was read as a 16-bit unsigned integer."""

    kind: Literal["uint16"] = "uint16"
    value: int = _Field(ge=0, le=0xFFFF)


class UInt64PublisherId(_Entity):
    """A publisher id that was read as any wider unsigned integer."""

    kind: Literal["uint64"] = "uint64"
    value: int = _Field(ge=0, le=0xFFFFFFFFFFFFFFFF)


# The width is a property of the value actually read, not of the schema.
PublisherId = Annotated[UInt16PublisherId | UInt64PublisherId, _Field(discriminator="kind")]


class NetworkAddressUrl(_Entity):
    """Network interface and URL of a connection."""

    network_interface: str | None = None
    url: str | None = None


class DataSetReader(_Entity):
    name: str
    enabled: bool = False
    publisher_id: PublisherId
    writer_group_id: int = 0
    data_set_writer_id: int = 0
    data_set_meta_data: DataSetMetaData
    data_set_field_content_mask: int = 0
    message_receive_timeout: float = 0.0
    message_settings: MessageSettings = NoMessageSettings()
    transport_settings: TransportSettings = NoTransportSettings()
    target_variables: tuple[FieldTarget, ...] = ()


class DataSetWriter(_Entity):
    name: str
    enabled: bool = False
    data_set_writer_id: int = 0
    data_set_name: str | None = None
    data_set_meta_data: DataSetMetaData | None = None
    data_set_field_content_mask: int = 0
    key_frame_count: int | None = None
    message_settings: MessageSettings = NoMessageSettings()
    transport_settings: TransportSettings = NoTransportSettings()


class ReaderGroup(_Entity):
    name: str
    enabled: bool = False
    max_network_message_size: int = 0
    message_settings: MessageSettings = NoMessageSettings()
    transport_settings: TransportSettings = NoTransportSettings()
    data_set_readers: tuple[DataSetReader, ...] = ()


class WriterGroup(_Entity):
    name: str
    enabled: bool = False
    max_network_message_size: int = 0
    header_layout_uri: str | None = None
    publishing_interval: float = 0.0
    writer_group_id: int = 0
    keep_alive_time: float = 0.0
    priority: int | None = None
    locale_ids: tuple[str, ...] = ()
    message_settings: MessageSettings = NoMessageSettings()
    transport_settings: TransportSettings = NoTransportSettings()
    data_set_writers: tuple[DataSetWriter, ...] = ()


class Connection(_Entity):
    """A PubSub connection with its reader and writer groups.

    The transport profile URI selects the message settings layout of every
    group, writer and reader below the connection.
    """

    name: str
    enabled: bool = False
    publisher_id: PublisherId
    transport_profile_uri: str = ""
    address: NetworkAddressUrl = NetworkAddressUrl()
    transport_settings: TransportSettings = NoTransportSettings()
    reader_groups: tuple[ReaderGroup, ...] = ()
    writer_groups: tuple[WriterGroup, ...] = ()


class PublishedDataSet(_Entity):
    """A published data items set and the folder path it was found under."""

    name: str
    data_set_folder: tuple[str, ...] = ()
    configuration_version: ConfigurationVersion = ConfigurationVersion()
    data_set_meta_data: DataSetMetaData
    published_data: tuple[PublishedVariable, ...] = ()
    extension_fields: tuple[KeyValuePair, ...] = ()


class ConfigurationDocument(_Entity):
    """Top-level result of one synthesis pass.

    Collections keep the order in which the remote side returned the nodes;
    entries with duplicate names are kept.
    """

    enabled: bool = True
    connections: tuple[Connection, ...] = ()
    published_data_sets: tuple[PublishedDataSet, ...] = ()
