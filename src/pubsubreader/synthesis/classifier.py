# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Classification of browse references by their type definition."""

from __future__ import annotations

from enum import Enum

from pubsubreader.nodespace.ids import ObjectTypeIds
from pubsubreader.nodespace.types import RemoteReference

# ###############
# Public Interface
# ###############


class TypeRole(Enum):
    """The structural role a referenced node plays in a PubSub configuration."""

    CONNECTION = "Connection"
    READER_GROUP = "ReaderGroup"
    WRITER_GROUP = "WriterGroup"
    DATA_SET_READER = "DataSetReader"
    DATA_SET_WRITER = "DataSetWriter"
    PUBLISHED_DATA_ITEMS = "PublishedDataItems"
    DATA_SET_FOLDER = "DataSetFolder"
    STATUS = "Status"
    UNCLASSIFIED = "Unclassified"


def classify(ref: RemoteReference) -> TypeRole:
    """Return the role of *ref*; :attr:`TypeRole.UNCLASSIFIED` for unknown tags."""
    tag = ref.type_definition
    if tag.namespace != 0 or not isinstance(tag.identifier, int):
        return TypeRole.UNCLASSIFIED
    return _ROLES_BY_TYPE_ID.get(tag.identifier, TypeRole.UNCLASSIFIED)


def select(refs: list[RemoteReference], role: TypeRole) -> list[RemoteReference]:
    """Return the references of *refs* with the given role, in browse order."""
    return [ref for ref in refs if classify(ref) is role]


# ################
# Implementation
# ################

_ROLES_BY_TYPE_ID: dict[int, TypeRole] = {
    ObjectTypeIds.PUB_SUB_CONNECTION_TYPE: TypeRole.CONNECTION,
    ObjectTypeIds.READER_GROUP_TYPE: TypeRole.READER_GROUP,
    ObjectTypeIds.WRITER_GROUP_TYPE: TypeRole.WRITER_GROUP,
    ObjectTypeIds.DATA_SET_READER_TYPE: TypeRole.DATA_SET_READER,
    ObjectTypeIds.DATA_SET_WRITER_TYPE: TypeRole.DATA_SET_WRITER,
    ObjectTypeIds.PUBLISHED_DATA_ITEMS_TYPE: TypeRole.PUBLISHED_DATA_ITEMS,
    ObjectTypeIds.DATA_SET_FOLDER_TYPE: TypeRole.DATA_SET_FOLDER,
    ObjectTypeIds.PUB_SUB_STATUS_TYPE: TypeRole.STATUS,
}
