# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Document model for PubSub configurations (connections, groups, data sets, etc.)."""

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
from pubsubreader.model.settings import (
    BrokerTransportSettings,
    DatagramTransportSettings,
    DataSetOrdering,
    DeliveryGuarantee,
    JsonDataSetReaderMessageSettings,
    JsonDataSetWriterMessageSettings,
    JsonWriterGroupMessageSettings,
    MessageSettings,
    NoMessageSettings,
    NoTransportSettings,
    TransportProfile,
    TransportSettings,
    UadpDataSetReaderMessageSettings,
    UadpDataSetWriterMessageSettings,
    UadpWriterGroupMessageSettings,
)
from pubsubreader.model.structures import (
    ConfigurationVersion,
    DataSetMetaData,
    FieldMetaData,
    FieldTarget,
    KeyValuePair,
    PublishedVariable,
)

__all__ = [
    # Nested structures
    "ConfigurationVersion",
    "DataSetMetaData",
    "FieldMetaData",
    "FieldTarget",
    "KeyValuePair",
    "PublishedVariable",
    # Settings variants
    "TransportProfile",
    "DataSetOrdering",
    "DeliveryGuarantee",
    "MessageSettings",
    "UadpWriterGroupMessageSettings",
    "JsonWriterGroupMessageSettings",
    "UadpDataSetWriterMessageSettings",
    "JsonDataSetWriterMessageSettings",
    "UadpDataSetReaderMessageSettings",
    "JsonDataSetReaderMessageSettings",
    "NoMessageSettings",
    "TransportSettings",
    "DatagramTransportSettings",
    "BrokerTransportSettings",
    "NoTransportSettings",
    # Entities
    "PublisherId",
    "UInt16PublisherId",
    "UInt64PublisherId",
    "NetworkAddressUrl",
    "DataSetReader",
    "DataSetWriter",
    "ReaderGroup",
    "WriterGroup",
    "Connection",
    "PublishedDataSet",
    "ConfigurationDocument",
]
