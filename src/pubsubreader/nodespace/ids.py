# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Well-known namespace-0 identifiers of the PubSub information model."""

from pubsubreader.nodespace.types import NodeId

# ###############
# Public Interface
# ###############

# The standard PublishSubscribe object below the Server object.
PUBLISH_SUBSCRIBE_OBJECT = NodeId(0, 14443)


class ObjectTypeIds:
    """Numeric identifiers of the PubSub object types."""

    PUB_SUB_CONNECTION_TYPE = 14209
    READER_GROUP_TYPE = 17999
    WRITER_GROUP_TYPE = 17725
    DATA_SET_READER_TYPE = 15306
    DATA_SET_WRITER_TYPE = 15298
    PUBLISHED_DATA_ITEMS_TYPE = 14534
    DATA_SET_FOLDER_TYPE = 14477
    PUB_SUB_STATUS_TYPE = 14643
    PUB_SUB_EXTENSION_FIELDS_TYPE = 15489
    NETWORK_ADDRESS_URL_TYPE = 21147
    TARGET_VARIABLES_TYPE = 15111

    UADP_WRITER_GROUP_MESSAGE_TYPE = 21105
    UADP_DATA_SET_WRITER_MESSAGE_TYPE = 21111
    UADP_DATA_SET_READER_MESSAGE_TYPE = 21116
    JSON_WRITER_GROUP_MESSAGE_TYPE = 21126
    JSON_DATA_SET_WRITER_MESSAGE_TYPE = 21128
    JSON_DATA_SET_READER_MESSAGE_TYPE = 21130

    DATAGRAM_CONNECTION_TRANSPORT_TYPE = 15064
    DATAGRAM_WRITER_GROUP_TRANSPORT_TYPE = 21133
    BROKER_CONNECTION_TRANSPORT_TYPE = 15155
    BROKER_WRITER_GROUP_TRANSPORT_TYPE = 21136
    BROKER_DATA_SET_WRITER_TRANSPORT_TYPE = 21138
    BROKER_DATA_SET_READER_TRANSPORT_TYPE = 21142


class DataTypeIds:
    """Numeric identifiers of the structures carried in extension objects."""

    PUBLISHED_VARIABLE_DATA_TYPE = 14273
    DATA_SET_META_DATA_TYPE = 14523
    CONFIGURATION_VERSION_DATA_TYPE = 14593
    FIELD_TARGET_DATA_TYPE = 14744


class PubSubState:
    """Values of the ``Status/State`` variable of a PubSub component."""

    DISABLED = 0
    PAUSED = 1
    OPERATIONAL = 2
    ERROR = 3
