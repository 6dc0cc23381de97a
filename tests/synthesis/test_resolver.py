# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for attribute resolution against a node space."""

import pytest

from pubsubreader.model.entities import UInt16PublisherId, UInt64PublisherId
from pubsubreader.model.structures import DataSetMetaData, FieldTarget
from pubsubreader.nodespace.ids import PUBLISH_SUBSCRIBE_OBJECT, DataTypeIds, PubSubState
from pubsubreader.nodespace.types import (
    AttributeId,
    DataValue,
    ExtensionObject,
    NodeId,
    ReadValueId,
    StatusCode,
    VariantType,
)
from pubsubreader.synthesis.cancellation import CancellationToken
from pubsubreader.synthesis.errors import MalformedNestedValue, PathNotFound, ReadFailed, SynthesisCancelled
from pubsubreader.synthesis.resolver import AttributeResolver, decode_publisher_id, decode_structure

# ###############
# Helpers
# ###############


@pytest.fixture
def owner(node_space):
    node = node_space.add_object(PUBLISH_SUBSCRIBE_OBJECT, "Owner")
    node_space.add_variable(node, "WriterGroupId", 5, VariantType.UINT16)
    node_space.add_variable(node, "KeepAliveTime", 1000.0, VariantType.DOUBLE)
    node_space.add_variable(node, "HeaderLayoutUri", "urn:layout", VariantType.STRING)
    return node


# ###############
# Named children
# ###############


class TestResolveNamedChild:
    def test_reads_value_of_child(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space)
        assert resolver.resolve_named_child(owner, "WriterGroupId") == 5

    def test_missing_child_raises_path_not_found(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space)
        with pytest.raises(PathNotFound) as exc_info:
            resolver.resolve_named_child(owner, "Priority")
        assert exc_info.value.start == owner
        assert exc_info.value.path == ("Priority",)

    def test_bad_status_raises_read_failed(self, node_space, owner) -> None:
        node_space.set_value(node_space.child(owner, "WriterGroupId"), None, StatusCode.BAD_NOT_READABLE)
        resolver = AttributeResolver(node_space)
        with pytest.raises(ReadFailed) as exc_info:
            resolver.resolve_named_child(owner, "WriterGroupId")
        assert exc_info.value.status_code == StatusCode.BAD_NOT_READABLE

    def test_optional_child_falls_back_to_default(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space)
        assert resolver.resolve_optional(owner, "Priority") is None
        assert resolver.resolve_optional(owner, "Priority", 0) == 0

    def test_optional_child_still_reports_read_failures(self, node_space, owner) -> None:
        node_space.set_value(node_space.child(owner, "KeepAliveTime"), None, StatusCode.BAD)
        resolver = AttributeResolver(node_space)
        with pytest.raises(ReadFailed):
            resolver.resolve_optional(owner, "KeepAliveTime")

    def test_multi_segment_path(self, node_space, owner) -> None:
        sub = node_space.add_object(owner, "SubscribedDataSet")
        node_space.add_variable(sub, "TargetVariables", [])
        resolver = AttributeResolver(node_space)
        assert resolver.resolve_path(owner, ["SubscribedDataSet", "TargetVariables"]) == []

    def test_resolve_attribute_reads_the_requested_attribute(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space)
        child = node_space.child(owner, "WriterGroupId")
        assert resolver.resolve_attribute(child, AttributeId.VALUE) == 5


# ###############
# Batched reads
# ###############


class TestResolveMany:
    NAMES = ["HeaderLayoutUri", "WriterGroupId", "KeepAliveTime"]

    def test_batched_values_follow_name_order(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space, batch_reads=True)
        assert resolver.resolve_many(owner, self.NAMES) == ["urn:layout", 5, 1000.0]

    def test_batched_and_unbatched_agree(self, node_space, owner) -> None:
        batched = AttributeResolver(node_space, batch_reads=True).resolve_many(owner, self.NAMES)
        single = AttributeResolver(node_space, batch_reads=False).resolve_many(owner, self.NAMES)
        assert batched == single

    def test_batching_issues_one_read(self, node_space, owner) -> None:
        AttributeResolver(node_space, batch_reads=True).resolve_many(owner, self.NAMES)
        assert node_space.count("read") == 1

    def test_unbatched_issues_one_read_per_name(self, node_space, owner) -> None:
        AttributeResolver(node_space, batch_reads=False).resolve_many(owner, self.NAMES)
        assert node_space.count("read") == len(self.NAMES)

    def test_missing_name_raises_path_not_found(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space)
        with pytest.raises(PathNotFound):
            resolver.resolve_many(owner, ["WriterGroupId", "Missing"])

    def test_bad_status_in_batch_raises_read_failed(self, node_space, owner) -> None:
        bad = node_space.child(owner, "KeepAliveTime")
        node_space.set_value(bad, None, StatusCode.BAD_NOT_READABLE)
        resolver = AttributeResolver(node_space)
        with pytest.raises(ReadFailed) as exc_info:
            resolver.resolve_many(owner, self.NAMES)
        assert exc_info.value.node_id == bad


def test_read_realigns_results_reported_out_of_order() -> None:
    first, second = NodeId(1, 1), NodeId(1, 2)

    class _Reversing:
        def read(self, items):
            return [DataValue(value=item.node_id.identifier, node_id=item.node_id) for item in reversed(items)]

    resolver = AttributeResolver(_Reversing())
    results = resolver.read([ReadValueId(first), ReadValueId(second)])
    assert [result.value for result in results] == [1, 2]


def test_read_with_wrong_result_count_is_malformed() -> None:
    class _Short:
        def read(self, items):
            return []

    with pytest.raises(MalformedNestedValue):
        AttributeResolver(_Short()).read([ReadValueId(NodeId(1, 1))])


# ###############
# Status
# ###############


class TestResolveState:
    @pytest.mark.parametrize(
        ("state", "enabled"),
        [
            (PubSubState.DISABLED, False),
            (PubSubState.PAUSED, True),
            (PubSubState.OPERATIONAL, True),
            (PubSubState.ERROR, True),
        ],
    )
    def test_only_disabled_is_not_enabled(self, node_space, pubsub, owner, state, enabled) -> None:
        pubsub.status(owner, state)
        resolver = AttributeResolver(node_space)
        assert resolver.resolve_state(node_space.browse(owner), owner) is enabled

    def test_missing_status_raises_path_not_found(self, node_space, owner) -> None:
        resolver = AttributeResolver(node_space)
        with pytest.raises(PathNotFound):
            resolver.resolve_state(node_space.browse(owner), owner)


# ###############
# Publisher id
# ###############


class TestDecodePublisherId:
    def test_uint16_is_narrow(self) -> None:
        result = decode_publisher_id(DataValue(7, VariantType.UINT16))
        assert result == UInt16PublisherId(value=7)

    @pytest.mark.parametrize("variant_type", [VariantType.BYTE, VariantType.UINT32, VariantType.UINT64, None])
    def test_other_unsigned_types_widen(self, variant_type) -> None:
        result = decode_publisher_id(DataValue(70000, variant_type))
        assert result == UInt64PublisherId(value=70000)

    @pytest.mark.parametrize(
        "data_value",
        [
            DataValue("publisher-1", VariantType.STRING),
            DataValue(-1, VariantType.INT32),
            DataValue(True, VariantType.BOOLEAN),
            DataValue(7, VariantType.INT32),
            DataValue(70000, VariantType.UINT16),
        ],
    )
    def test_rejects_values_that_are_not_unsigned_integers(self, data_value) -> None:
        with pytest.raises(MalformedNestedValue):
            decode_publisher_id(data_value)

    def test_resolve_publisher_id_reads_the_child(self, node_space, owner) -> None:
        node_space.add_variable(owner, "PublisherId", 9, VariantType.UINT64)
        resolver = AttributeResolver(node_space)
        assert resolver.resolve_publisher_id(owner) == UInt64PublisherId(value=9)


# ###############
# Structures
# ###############


class TestDecodeStructure:
    def test_decodes_opc_ua_field_names(self, pubsub) -> None:
        value = pubsub.meta_data("Temperatures", "Temp", "Pressure")
        result = decode_structure(value, DataSetMetaData, DataTypeIds.DATA_SET_META_DATA_TYPE)
        assert result.name == "Temperatures"
        assert result.description == "Temperatures data set"
        assert [field.name for field in result.fields] == ["Temp", "Pressure"]
        assert result.fields[0].data_type == NodeId(0, 11)

    def test_wrong_payload_type_is_malformed(self, pubsub) -> None:
        value = pubsub.meta_data("Temperatures")
        with pytest.raises(MalformedNestedValue):
            decode_structure(value, FieldTarget, DataTypeIds.FIELD_TARGET_DATA_TYPE)

    def test_plain_value_is_malformed(self) -> None:
        with pytest.raises(MalformedNestedValue):
            decode_structure({"Name": "x"}, DataSetMetaData, DataTypeIds.DATA_SET_META_DATA_TYPE)

    def test_body_failing_validation_is_malformed(self) -> None:
        value = ExtensionObject(NodeId(0, DataTypeIds.FIELD_TARGET_DATA_TYPE), {"TargetNodeId": "not a node"})
        with pytest.raises(MalformedNestedValue):
            decode_structure(value, FieldTarget, DataTypeIds.FIELD_TARGET_DATA_TYPE)

    def test_structure_array_none_is_empty(self, node_space, owner) -> None:
        node_space.add_variable(owner, "TargetVariables", None)
        assert AttributeResolver(node_space).resolve_structure_array(owner, ["TargetVariables"]) == []

    def test_structure_array_scalar_is_malformed(self, node_space, owner) -> None:
        node_space.add_variable(owner, "TargetVariables", 5)
        with pytest.raises(MalformedNestedValue):
            AttributeResolver(node_space).resolve_structure_array(owner, ["TargetVariables"])


# ###############
# Cancellation
# ###############


def test_cancelled_token_stops_remote_calls(node_space, owner) -> None:
    token = CancellationToken()
    resolver = AttributeResolver(node_space, cancellation=token)
    token.cancel()
    calls_before = len(node_space.calls)
    with pytest.raises(SynthesisCancelled):
        resolver.resolve_named_child(owner, "WriterGroupId")
    assert len(node_space.calls) == calls_before
