# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised while resolving facts from the remote node space.

All of them except :class:`SynthesisCancelled` are recoverable at the entity
boundary: the synthesizer drops the affected entity and records a warning.
"""

from __future__ import annotations

from collections.abc import Sequence

from pubsubreader.nodespace.types import NodeId, StatusCode

# ###############
# Public Interface
# ###############


class SynthesisError(Exception):
    """Base class for failures that drop a single entity or decoration."""


class PathNotFound(SynthesisError):
    """A relative browse path resolved to no target node."""

    def __init__(self, start: NodeId, path: Sequence[str]) -> None:
        self.start = start
        self.path = tuple(path)
        super().__init__(f"No node at '{'/'.join(self.path)}' below {start}")


class ReadFailed(SynthesisError):
    """A read returned a non-good status code."""

    def __init__(self, node_id: NodeId, status_code: int) -> None:
        self.node_id = node_id
        self.status_code = status_code
        super().__init__(f"Read of {node_id} failed with status {StatusCode.describe(status_code)}")


class BrowseFailed(SynthesisError):
    """The server rejected a browse request."""

    def __init__(self, node_id: NodeId, status_code: int) -> None:
        self.node_id = node_id
        self.status_code = status_code
        super().__init__(f"Browse of {node_id} failed with status {StatusCode.describe(status_code)}")


class UnsupportedTransportProfile(SynthesisError):
    """The transport profile URI is not one the decoder knows."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unsupported transport profile: {uri!r}")


class MalformedNestedValue(SynthesisError):
    """A value could not be cast into the expected structure."""

    def __init__(self, expected_shape: str, detail: str = "") -> None:
        self.expected_shape = expected_shape
        message = f"Value is not a valid {expected_shape}"
        super().__init__(f"{message}: {detail}" if detail else message)


class TransportMismatch(SynthesisError):
    """The transport sub-node does not match the profile (strict policy only)."""

    def __init__(self, profile_uri: str, transport_kind: str) -> None:
        self.profile_uri = profile_uri
        self.transport_kind = transport_kind
        super().__init__(f"{transport_kind} transport settings under transport profile {profile_uri!r}")


class SynthesisCancelled(Exception):
    """Synthesis was cancelled; no document is returned."""
