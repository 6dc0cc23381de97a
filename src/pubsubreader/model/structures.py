# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structures decoded from extension-object values (metadata, bindings, etc.).

Each model accepts the body of an extension object keyed by the standard
OPC UA field names (``DataSetFieldId``) as well as by its Python field
names (``data_set_field_id``).
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_pascal

from pubsubreader.nodespace.types import AttributeId, NodeId, QualifiedName

# ###############
# Public Interface
# ###############


def _coerce_node_id(value: Any) -> Any:
    if isinstance(value, str):
        return NodeId.parse(value)
    return value


def _coerce_name(value: Any) -> Any:
    if isinstance(value, QualifiedName):
        return value.name
    return value


def _coerce_text(value: Any) -> Any:
    # LocalizedText bodies arrive as {"Locale": ..., "Text": ...}.
    if isinstance(value, dict) and "Text" in value:
        return value["Text"]
    return value


# A node id that also accepts the ``ns=0;i=11`` string form and is written
# back in that form when dumped to JSON.
NodeIdValue = Annotated[NodeId, BeforeValidator(_coerce_node_id), PlainSerializer(str, when_used="json")]

# A browse name flattened to its string part.
NameValue = Annotated[str, BeforeValidator(_coerce_name)]

# A localized text flattened to its text part.
TextValue = Annotated[str | None, BeforeValidator(_coerce_text)]


class _Structure(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_pascal, populate_by_name=True)


class ConfigurationVersion(_Structure):
    """Major/minor version of a data set configuration."""

    major_version: int = 0
    minor_version: int = 0


class KeyValuePair(_Structure):
    """One named value, as used by published data set extension fields."""

    key: NameValue
    value: Any = None


class FieldMetaData(_Structure):
    """Description of one field of a data set."""

    name: str
    description: TextValue = None
    field_flags: int = 0
    built_in_type: int = 0
    data_type: NodeIdValue | None = None
    value_rank: int = -1
    array_dimensions: tuple[int, ...] = ()
    max_string_length: int = 0
    data_set_field_id: UUID | None = None


class DataSetMetaData(_Structure):
    """Name and field layout of a data set."""

    name: str
    description: TextValue = None
    fields: tuple[FieldMetaData, ...] = ()
    configuration_version: ConfigurationVersion | None = None
    data_set_class_id: UUID | None = None


class PublishedVariable(_Structure):
    """A source variable sampled into a published data set."""

    published_variable: NodeIdValue
    attribute_id: int = AttributeId.VALUE.value
    sampling_interval_hint: float = -1.0
    deadband_type: int = 0
    deadband_value: float = 0.0
    index_range: str | None = None
    substitute_value: Any = None
    meta_data_properties: tuple[NameValue, ...] = ()


class FieldTarget(_Structure):
    """Binding of an incoming data set field to a local target variable."""

    target_node_id: NodeIdValue
    data_set_field_id: UUID | None = None
    receiver_index_range: str | None = None
    attribute_id: int = AttributeId.VALUE.value
    write_index_range: str | None = None
    override_value_handling: int = 0
    override_value: Any = None
