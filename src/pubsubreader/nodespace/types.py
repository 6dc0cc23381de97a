# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value types exchanged with a remote OPC UA node space."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class NodeId:
    """Identity of a node in the remote address space.

    Attributes:
        namespace: Namespace index of the node.
        identifier: Numeric or string identifier within the namespace.
    """

    namespace: int
    identifier: int | str

    @classmethod
    def parse(cls, text: str) -> NodeId:
        """Parse the standard ``ns=<n>;i=<id>`` / ``ns=<n>;s=<id>`` notation.

        The ``ns=`` prefix may be omitted for namespace 0.

        Raises:
            ValueError: If *text* is not a recognised node id notation.
        """
        match = _NODE_ID_PATTERN.fullmatch(text.strip())
        if match is None or (match.group("kind") == "i" and not match.group("id").isdigit()):
            raise ValueError(f"Invalid node id: {text!r}")
        namespace = int(match.group("ns") or 0)
        if match.group("kind") == "i":
            return cls(namespace, int(match.group("id")))
        return cls(namespace, match.group("id"))

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.identifier, int)

    def __str__(self) -> str:
        kind = "i" if self.is_numeric else "s"
        return f"ns={self.namespace};{kind}={self.identifier}"


@dataclass(frozen=True)
class QualifiedName:
    """A browse name: a namespace-qualified string."""

    name: str
    namespace_index: int = 0

    def __str__(self) -> str:
        if self.namespace_index == 0:
            return self.name
        return f"{self.namespace_index}:{self.name}"


@dataclass(frozen=True)
class RemoteReference:
    """One typed reference returned by a browse call.

    Attributes:
        node_id: Target node of the reference.
        browse_name: Browse name of the target node.
        type_definition: Type definition of the target node; the numeric
            identifier drives classification.
    """

    node_id: NodeId
    browse_name: QualifiedName
    type_definition: NodeId

    @property
    def name(self) -> str:
        return self.browse_name.name


class AttributeId(IntEnum):
    """Node attributes the reader needs to read."""

    NODE_ID = 1
    BROWSE_NAME = 3
    VALUE = 13
    DATA_TYPE = 14


class StatusCode:
    """Well-known status codes and severity helpers.

    Status codes are plain unsigned 32-bit integers; the two most
    significant bits carry the severity.
    """

    GOOD = 0x00000000
    UNCERTAIN = 0x40000000
    BAD = 0x80000000
    BAD_NODE_ID_UNKNOWN = 0x80340000
    BAD_ATTRIBUTE_ID_INVALID = 0x80350000
    BAD_NOT_READABLE = 0x803A0000
    BAD_NO_MATCH = 0x806F0000

    @staticmethod
    def is_good(code: int) -> bool:
        return code & 0xC0000000 == 0

    @staticmethod
    def describe(code: int) -> str:
        return f"0x{code:08X}"


class VariantType(Enum):
    """Built-in types a read value may carry."""

    BOOLEAN = 1
    SBYTE = 2
    BYTE = 3
    INT16 = 4
    UINT16 = 5
    INT32 = 6
    UINT32 = 7
    INT64 = 8
    UINT64 = 9
    FLOAT = 10
    DOUBLE = 11
    STRING = 12
    DATETIME = 13
    GUID = 14
    BYTESTRING = 15
    NODE_ID = 17
    STATUS_CODE = 19
    QUALIFIED_NAME = 20
    LOCALIZED_TEXT = 21
    EXTENSION_OBJECT = 22


UNSIGNED_INTEGER_TYPES = frozenset({VariantType.BYTE, VariantType.UINT16, VariantType.UINT32, VariantType.UINT64})


@dataclass(frozen=True)
class ExtensionObject:
    """An encoded structure value.

    Attributes:
        type_id: Data type of the encoded structure.
        body: Decoded body, typically a mapping of OPC UA field names to values.
    """

    type_id: NodeId
    body: Any


@dataclass(frozen=True)
class ReadValueId:
    """One item of a read request."""

    node_id: NodeId
    attribute_id: AttributeId = AttributeId.VALUE


@dataclass(frozen=True)
class DataValue:
    """The result of reading one attribute.

    Attributes:
        value: The decoded value (scalar, list, or :class:`ExtensionObject`).
        variant_type: Built-in type of *value* as reported by the server.
        status_code: Status of the read; see :class:`StatusCode`.
        node_id: Node the value was read from, when the accessor reports it.
    """

    value: Any = None
    variant_type: VariantType | None = None
    status_code: int = StatusCode.GOOD
    node_id: NodeId | None = None

    @property
    def is_good(self) -> bool:
        return StatusCode.is_good(self.status_code)


# ################
# Implementation
# ################

_NODE_ID_PATTERN = re.compile(r"(?:ns=(?P<ns>\d+);)?(?P<kind>[is])=(?P<id>.+)")
