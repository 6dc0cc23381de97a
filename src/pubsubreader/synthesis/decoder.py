# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Decoding of message and transport settings, whose shape depends on context.

Two independent axes select the layout:

* the transport profile URI of the enclosing connection decides the message
  settings shape (UADP, JSON, or none), and
* the type definition of the ``TransportSettings`` sub-node actually present
  below a group, writer or reader decides the transport settings shape
  (datagram or broker).

When the two axes disagree (a broker sub-node under a UDP profile, or a
datagram sub-node under an MQTT profile) the configured
:class:`~pubsubreader.options.config.MismatchPolicy` applies.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_pascal

from pubsubreader.model.settings import (
    PROFILE_URI_PREFIX,
    BrokerTransportSettings,
    DatagramTransportSettings,
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
from pubsubreader.nodespace.ids import ObjectTypeIds
from pubsubreader.nodespace.types import NodeId, RemoteReference
from pubsubreader.options.config import MismatchPolicy
from pubsubreader.synthesis.classifier import TypeRole
from pubsubreader.synthesis.errors import (
    MalformedNestedValue,
    PathNotFound,
    TransportMismatch,
    UnsupportedTransportProfile,
)
from pubsubreader.synthesis.resolver import AttributeResolver

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class DecodingContext:
    """Facts inherited from the enclosing connection.

    Attributes:
        transport_profile_uri: Transport profile URI read from the connection.
        mismatch_policy: Handling of profile / transport sub-node disagreement.
    """

    transport_profile_uri: str
    mismatch_policy: MismatchPolicy = MismatchPolicy.LENIENT

    @property
    def profile(self) -> TransportProfile:
        return resolve_profile(self.transport_profile_uri)


def resolve_profile(uri: str) -> TransportProfile:
    """Map a transport profile URI (or its short name) to a :class:`TransportProfile`.

    An empty URI is the ``none`` profile.

    Raises:
        UnsupportedTransportProfile: For any other unknown URI.
    """
    if not uri:
        return TransportProfile.NONE
    short = uri.removeprefix(PROFILE_URI_PREFIX)
    try:
        return TransportProfile(short)
    except ValueError:
        raise UnsupportedTransportProfile(uri) from None


def decode_message_settings(
    resolver: AttributeResolver,
    owner: NodeId,
    role: TypeRole,
    context: DecodingContext,
) -> MessageSettings:
    """Decode the ``MessageSettings`` of *owner*, shaped by the transport profile.

    Reader groups define no standard message fields and always decode to
    :class:`NoMessageSettings`, as does every entity under the ``none`` profile.

    Raises:
        UnsupportedTransportProfile: If the inherited profile is unknown.
        PathNotFound: If the message settings node or one of its required
            children is absent.
        ReadFailed: If a read reports a non-good status.
        MalformedNestedValue: If a value does not fit the settings model.
    """
    profile = context.profile
    if profile is TransportProfile.NONE or role not in _MESSAGE_LAYOUTS:
        return NoMessageSettings()
    layout = _MESSAGE_LAYOUTS[role][profile.is_json]
    message_node = resolver.translate(owner, ["MessageSettings"])
    return _read_layout(resolver, message_node, layout)


def decode_transport_settings(
    resolver: AttributeResolver,
    owner: NodeId,
    refs: Sequence[RemoteReference],
    role: TypeRole,
    context: DecodingContext,
) -> TransportSettings:
    """Decode the ``TransportSettings`` of *owner*, shaped by the sub-node present.

    A sub-node whose type definition is not a standard namespace-0 transport
    type decodes to :class:`NoTransportSettings`.

    Args:
        resolver: Resolver used for the reads.
        owner: The connection, group, writer or reader node.
        refs: The browse result of *owner*; the ``TransportSettings``
            reference among them is used for dispatch.
        role: Role of *owner*.
        context: Facts inherited from the enclosing connection.

    Raises:
        UnsupportedTransportProfile: If the inherited profile is unknown.
        PathNotFound: If *owner* has no ``TransportSettings`` child.
        TransportMismatch: If the sub-node contradicts the profile and the
            policy is strict.
    """
    profile = context.profile
    transport_ref = next((ref for ref in refs if ref.name == "TransportSettings"), None)
    if transport_ref is None:
        raise PathNotFound(owner, ["TransportSettings"])

    tag = transport_ref.type_definition
    kind = _TRANSPORT_KINDS.get(tag.identifier) if tag.namespace == 0 else None
    if kind is None:
        return NoTransportSettings()
    _check_transport_kind(kind, profile, context)

    node = transport_ref.node_id
    if kind == "datagram":
        if role is not TypeRole.WRITER_GROUP:
            return DatagramTransportSettings()
        return _read_layout(resolver, node, _DATAGRAM_WRITER_GROUP_LAYOUT)
    return _read_layout(resolver, node, _BROKER_LAYOUTS[role])


# ################
# Implementation
# ################


@dataclass(frozen=True)
class _Layout:
    """Fields of a settings model and which of them must be present remotely."""

    model: type[BaseModel]
    required: tuple[str, ...]
    optional: tuple[str, ...] = ()


def _read_layout(resolver: AttributeResolver, node: NodeId, layout: _Layout) -> Any:
    browse_names = [to_pascal(field) for field in layout.required]
    values: dict[str, Any] = dict(zip(layout.required, resolver.resolve_many(node, browse_names), strict=True))
    for field in layout.optional:
        value = resolver.resolve_optional(node, to_pascal(field))
        if value is not None:
            values[field] = value
    try:
        return layout.model.model_validate(values)
    except ValidationError as exc:
        raise MalformedNestedValue(layout.model.__name__, str(exc)) from exc


def _check_transport_kind(kind: str, profile: TransportProfile, context: DecodingContext) -> None:
    if profile is TransportProfile.NONE or (kind == "broker") == profile.is_broker:
        return
    if context.mismatch_policy is MismatchPolicy.STRICT:
        raise TransportMismatch(context.transport_profile_uri, kind)
    logger.warning(
        "Decoding %s transport settings under transport profile %r; result is advisory",
        kind,
        context.transport_profile_uri,
    )


_TRANSPORT_KINDS: dict[int | str, str] = {
    ObjectTypeIds.DATAGRAM_CONNECTION_TRANSPORT_TYPE: "datagram",
    ObjectTypeIds.DATAGRAM_WRITER_GROUP_TRANSPORT_TYPE: "datagram",
    ObjectTypeIds.BROKER_CONNECTION_TRANSPORT_TYPE: "broker",
    ObjectTypeIds.BROKER_WRITER_GROUP_TRANSPORT_TYPE: "broker",
    ObjectTypeIds.BROKER_DATA_SET_WRITER_TRANSPORT_TYPE: "broker",
    ObjectTypeIds.BROKER_DATA_SET_READER_TRANSPORT_TYPE: "broker",
}

# Keyed by role, then by "is JSON encoding".
_MESSAGE_LAYOUTS: dict[TypeRole, dict[bool, _Layout]] = {
    TypeRole.WRITER_GROUP: {
        False: _Layout(
            UadpWriterGroupMessageSettings,
            required=("group_version", "data_set_ordering", "network_message_content_mask"),
            optional=("sampling_offset", "publishing_offset"),
        ),
        True: _Layout(JsonWriterGroupMessageSettings, required=("network_message_content_mask",)),
    },
    TypeRole.DATA_SET_WRITER: {
        False: _Layout(
            UadpDataSetWriterMessageSettings,
            required=(
                "data_set_message_content_mask",
                "configured_size",
                "network_message_number",
                "data_set_offset",
            ),
        ),
        True: _Layout(JsonDataSetWriterMessageSettings, required=("data_set_message_content_mask",)),
    },
    TypeRole.DATA_SET_READER: {
        False: _Layout(
            UadpDataSetReaderMessageSettings,
            required=(
                "group_version",
                "network_message_number",
                "data_set_offset",
                "network_message_content_mask",
                "data_set_message_content_mask",
            ),
            optional=("data_set_class_id", "publishing_interval", "receive_offset", "processing_offset"),
        ),
        True: _Layout(
            JsonDataSetReaderMessageSettings,
            required=("network_message_content_mask", "data_set_message_content_mask"),
        ),
    },
}

_DATAGRAM_WRITER_GROUP_LAYOUT = _Layout(
    DatagramTransportSettings,
    required=(),
    optional=("message_repeat_count", "message_repeat_delay"),
)

_BROKER_COMMON = ("queue_name", "resource_uri", "authentication_profile_uri", "requested_delivery_guarantee")

_BROKER_LAYOUTS: dict[TypeRole, _Layout] = {
    TypeRole.CONNECTION: _Layout(
        BrokerTransportSettings,
        required=(),
        optional=("resource_uri", "authentication_profile_uri"),
    ),
    TypeRole.WRITER_GROUP: _Layout(BrokerTransportSettings, required=_BROKER_COMMON),
    TypeRole.READER_GROUP: _Layout(BrokerTransportSettings, required=_BROKER_COMMON),
    TypeRole.DATA_SET_WRITER: _Layout(
        BrokerTransportSettings,
        required=_BROKER_COMMON,
        optional=("meta_data_queue_name", "meta_data_update_time"),
    ),
    TypeRole.DATA_SET_READER: _Layout(
        BrokerTransportSettings,
        required=_BROKER_COMMON,
        optional=("meta_data_queue_name",),
    ),
}
