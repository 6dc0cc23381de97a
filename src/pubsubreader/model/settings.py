# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Message and transport settings variants of groups, writers and readers."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class TransportProfile(Enum):
    """Transport profiles the reader knows how to decode."""

    UDP_UADP = "udp-uadp"
    MQTT_UADP = "mqtt-uadp"
    MQTT_JSON = "mqtt-json"
    NONE = "none"

    @property
    def uri(self) -> str:
        """The standard profile URI, empty for :attr:`NONE`."""
        if self is TransportProfile.NONE:
            return ""
        return PROFILE_URI_PREFIX + self.value

    @property
    def is_broker(self) -> bool:
        return self in (TransportProfile.MQTT_UADP, TransportProfile.MQTT_JSON)

    @property
    def is_json(self) -> bool:
        return self is TransportProfile.MQTT_JSON


PROFILE_URI_PREFIX = "http://opcfoundation.org/UA-Profile/Transport/pubsub-"


class DataSetOrdering(Enum):
    """Ordering of data set messages within a UADP network message."""

    UNDEFINED = 0
    ASCENDING_WRITER_ID = 1
    ASCENDING_WRITER_ID_SINGLE = 2


class DeliveryGuarantee(Enum):
    """Requested broker quality of service."""

    NOT_SPECIFIED = 0
    BEST_EFFORT = 1
    AT_LEAST_ONCE = 2
    AT_MOST_ONCE = 3
    EXACTLY_ONCE = 4


class _Settings(BaseModel):
    model_config = ConfigDict(frozen=True)


class UadpWriterGroupMessageSettings(_Settings):
    kind: Literal["uadp-writer-group"] = "uadp-writer-group"
    group_version: int = 0
    data_set_ordering: DataSetOrdering = DataSetOrdering.UNDEFINED
    network_message_content_mask: int = 0
    sampling_offset: float | None = None
    publishing_offset: tuple[float, ...] = ()


class JsonWriterGroupMessageSettings(_Settings):
    kind: Literal["json-writer-group"] = "json-writer-group"
    network_message_content_mask: int = 0


class UadpDataSetWriterMessageSettings(_Settings):
    kind: Literal["uadp-data-set-writer"] = "uadp-data-set-writer"
    data_set_message_content_mask: int = 0
    configured_size: int = 0
    network_message_number: int = 0
    data_set_offset: int = 0


class JsonDataSetWriterMessageSettings(_Settings):
    kind: Literal["json-data-set-writer"] = "json-data-set-writer"
    data_set_message_content_mask: int = 0


class UadpDataSetReaderMessageSettings(_Settings):
    kind: Literal["uadp-data-set-reader"] = "uadp-data-set-reader"
    group_version: int = 0
    network_message_number: int = 0
    data_set_offset: int = 0
    data_set_class_id: UUID | None = None
    network_message_content_mask: int = 0
    data_set_message_content_mask: int = 0
    publishing_interval: float | None = None
    receive_offset: float | None = None
    processing_offset: float | None = None


class JsonDataSetReaderMessageSettings(_Settings):
    kind: Literal["json-data-set-reader"] = "json-data-set-reader"
    network_message_content_mask: int = 0
    data_set_message_content_mask: int = 0


class NoMessageSettings(_Settings):
    """Placeholder for entities whose profile defines no message settings."""

    kind: Literal["none"] = "none"


# Message settings of any entity. The `kind` discriminator names both the
# encoding (UADP / JSON) and the entity the field set belongs to.
MessageSettings = Annotated[
    UadpWriterGroupMessageSettings
    | JsonWriterGroupMessageSettings
    | UadpDataSetWriterMessageSettings
    | JsonDataSetWriterMessageSettings
    | UadpDataSetReaderMessageSettings
    | JsonDataSetReaderMessageSettings
    | NoMessageSettings,
    _Field(discriminator="kind"),
]

UADP_MESSAGE_KINDS = frozenset({"uadp-writer-group", "uadp-data-set-writer", "uadp-data-set-reader"})
JSON_MESSAGE_KINDS = frozenset({"json-writer-group", "json-data-set-writer", "json-data-set-reader"})


class DatagramTransportSettings(_Settings):
    """Datagram (UDP) transport settings; only writer groups carry fields."""

    kind: Literal["datagram"] = "datagram"
    message_repeat_count: int | None = None
    message_repeat_delay: float | None = None


class BrokerTransportSettings(_Settings):
    """Broker (MQTT) transport settings of a connection, group, writer or reader."""

    kind: Literal["broker"] = "broker"
    queue_name: str | None = None
    resource_uri: str | None = None
    authentication_profile_uri: str | None = None
    requested_delivery_guarantee: DeliveryGuarantee | None = None
    meta_data_queue_name: str | None = None
    meta_data_update_time: float | None = None


class NoTransportSettings(_Settings):
    kind: Literal["none"] = "none"


TransportSettings = Annotated[
    DatagramTransportSettings | BrokerTransportSettings | NoTransportSettings,
    _Field(discriminator="kind"),
]
