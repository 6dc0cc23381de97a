# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Synthesis options and their YAML file format."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pubsubreader.model.structures import NodeIdValue
from pubsubreader.nodespace.ids import PUBLISH_SUBSCRIBE_OBJECT

# ###############
# Public Interface
# ###############

OPTIONS_FILE_NAME = ".pubsubreader.yaml"


class OptionsError(Exception):
    """Raised when an options file cannot be read or is invalid."""


class MismatchPolicy(Enum):
    """What to do when a transport sub-node contradicts the transport profile.

    ``lenient`` decodes whichever branch structurally matched and logs a
    warning; ``strict`` rejects the entity.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class SynthesisOptions(BaseModel):
    """Options of one synthesis pass.

    Attributes:
        root_node: Node the traversal starts from.
        mismatch_policy: Handling of profile / transport sub-node disagreement.
        batch_reads: Combine the reads of sibling children into one request.
        max_workers: Number of threads resolving independent top-level
            branches; ``1`` keeps the traversal sequential.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    root_node: NodeIdValue = Field(alias="root-node", default=PUBLISH_SUBSCRIBE_OBJECT)
    mismatch_policy: MismatchPolicy = Field(alias="mismatch-policy", default=MismatchPolicy.LENIENT)
    batch_reads: bool = Field(alias="batch-reads", default=True)
    max_workers: int = Field(alias="max-workers", default=1, ge=1)


def load_synthesis_options(path: Path) -> SynthesisOptions:
    """Load and validate synthesis options from a YAML file.

    An empty file yields the defaults.

    Args:
        path: Path to the options file.

    Returns:
        A validated SynthesisOptions instance.

    Raises:
        OptionsError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise OptionsError(f"Options file not found: {path}") from None
    except OSError as exc:
        raise OptionsError(f"Cannot read options file '{path}': {exc}") from exc

    return parse_synthesis_options(raw, source_label=str(path))


def parse_synthesis_options(text: str, source_label: str = "<string>") -> SynthesisOptions:
    """Parse options YAML text into a SynthesisOptions.

    Raises:
        OptionsError: If the YAML is invalid or does not fit the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise OptionsError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise OptionsError(f"{source_label}: options must be a YAML mapping")

    try:
        return SynthesisOptions.model_validate(data)
    except ValidationError as exc:
        raise OptionsError(f"Invalid options in {source_label}: {exc}") from exc
