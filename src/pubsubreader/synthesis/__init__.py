# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Synthesis pipeline: classification, attribute resolution, settings decoding, and tree assembly."""

from pubsubreader.synthesis.artifact import ARTIFACT_SUFFIX, deserialize, read_artifact, serialize, write_artifact
from pubsubreader.synthesis.cancellation import CancellationToken
from pubsubreader.synthesis.classifier import TypeRole, classify
from pubsubreader.synthesis.errors import (
    BrowseFailed,
    MalformedNestedValue,
    PathNotFound,
    ReadFailed,
    SynthesisCancelled,
    SynthesisError,
    TransportMismatch,
    UnsupportedTransportProfile,
)
from pubsubreader.synthesis.synthesizer import SynthesisResult, SynthesisWarning, synthesize

__all__ = [
    "ARTIFACT_SUFFIX",
    "BrowseFailed",
    "CancellationToken",
    "MalformedNestedValue",
    "PathNotFound",
    "ReadFailed",
    "SynthesisCancelled",
    "SynthesisError",
    "SynthesisResult",
    "SynthesisWarning",
    "TransportMismatch",
    "TypeRole",
    "UnsupportedTransportProfile",
    "classify",
    "deserialize",
    "read_artifact",
    "serialize",
    "synthesize",
    "write_artifact",
]
