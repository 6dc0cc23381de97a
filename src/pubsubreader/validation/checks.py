# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for synthesized configuration documents.

Synthesis reproduces whatever the server exposes, including configurations a
PubSub stack would refuse to run. These checks operate on the finished
document and report such inconsistencies without changing it.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from pubsubreader.model.entities import ConfigurationDocument, Connection
from pubsubreader.model.settings import (
    JSON_MESSAGE_KINDS,
    UADP_MESSAGE_KINDS,
    MessageSettings,
    NoMessageSettings,
    TransportProfile,
    TransportSettings,
)
from pubsubreader.synthesis.decoder import resolve_profile
from pubsubreader.synthesis.errors import UnsupportedTransportProfile

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal inconsistency detected during validation.

    The document describes a configuration that may still run, but some part
    of it was decoded under assumptions the rest of the document contradicts.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal inconsistency detected during validation.

    A PubSub stack would reject the configuration the document describes.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the document checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that indicate an unusable configuration.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(document: ConfigurationDocument) -> ValidationResult:
    """Run all consistency checks on a synthesized document.

    Checks performed:

    1. **Duplicate writer group ids** (error): two writer groups of the same
       connection share a ``WriterGroupId``; subscribers could not tell their
       network messages apart.

    2. **Duplicate data set writer ids** (error): two writers of the same
       writer group share a ``DataSetWriterId``.

    3. **Message encoding** (warning): message settings whose encoding (UADP
       or JSON) differs from the one the connection's transport profile
       implies, or message settings under a connection without a profile.

    4. **Transport kind** (warning): broker transport settings under a
       datagram profile, or datagram settings under a broker profile. These
       only occur when synthesis ran with the lenient mismatch policy.

    5. **Unknown data set** (warning): a writer bound to a data set name that
       is not among the document's published data sets.

    Args:
        document: The document to validate.

    Returns:
        A :class:`ValidationResult` containing any warnings and errors found.
        An empty result indicates a consistent document.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    for connection in document.connections:
        errors.extend(_check_writer_group_ids(connection))
        errors.extend(_check_data_set_writer_ids(connection))
        warnings.extend(_check_settings_against_profile(connection))
    warnings.extend(_check_data_set_names(document))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


def _duplicates(values: list[int]) -> list[int]:
    return sorted(value for value, count in Counter(values).items() if count > 1)


def _check_writer_group_ids(connection: Connection) -> list[ValidationError]:
    ids = [group.writer_group_id for group in connection.writer_groups]
    return [
        ValidationError(message=f"Connection '{connection.name}' has more than one writer group with id {dup}.")
        for dup in _duplicates(ids)
    ]


def _check_data_set_writer_ids(connection: Connection) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for group in connection.writer_groups:
        ids = [writer.data_set_writer_id for writer in group.data_set_writers]
        for dup in _duplicates(ids):
            errors.append(
                ValidationError(
                    message=(
                        f"Writer group '{connection.name}/{group.name}' has more than one "
                        f"data set writer with id {dup}."
                    )
                )
            )
    return errors


def _check_settings_against_profile(connection: Connection) -> list[ValidationWarning]:
    """Return warnings for settings that contradict the connection's transport profile."""
    try:
        profile = resolve_profile(connection.transport_profile_uri)
    except UnsupportedTransportProfile:
        return [
            ValidationWarning(
                message=(
                    f"Connection '{connection.name}' uses unsupported transport profile "
                    f"'{connection.transport_profile_uri}'."
                )
            )
        ]

    warnings: list[ValidationWarning] = []

    def _check(label: str, message: MessageSettings, transport: TransportSettings) -> None:
        if not _message_fits(message, profile):
            warnings.append(
                ValidationWarning(
                    message=f"'{label}' has {message.kind} message settings under profile '{profile.value}'."
                )
            )
        if not _transport_fits(transport, profile):
            warnings.append(
                ValidationWarning(
                    message=f"'{label}' has {transport.kind} transport settings under profile '{profile.value}'."
                )
            )

    _check(connection.name, NoMessageSettings(), connection.transport_settings)
    for reader_group in connection.reader_groups:
        group_label = f"{connection.name}/{reader_group.name}"
        _check(group_label, reader_group.message_settings, reader_group.transport_settings)
        for reader in reader_group.data_set_readers:
            _check(f"{group_label}/{reader.name}", reader.message_settings, reader.transport_settings)
    for writer_group in connection.writer_groups:
        group_label = f"{connection.name}/{writer_group.name}"
        _check(group_label, writer_group.message_settings, writer_group.transport_settings)
        for writer in writer_group.data_set_writers:
            _check(f"{group_label}/{writer.name}", writer.message_settings, writer.transport_settings)
    return warnings


def _message_fits(message: MessageSettings, profile: TransportProfile) -> bool:
    if message.kind == "none":
        return True
    if profile is TransportProfile.NONE:
        return False
    if profile.is_json:
        return message.kind in JSON_MESSAGE_KINDS
    return message.kind in UADP_MESSAGE_KINDS


def _transport_fits(transport: TransportSettings, profile: TransportProfile) -> bool:
    if transport.kind == "none" or profile is TransportProfile.NONE:
        return True
    return (transport.kind == "broker") == profile.is_broker


def _check_data_set_names(document: ConfigurationDocument) -> list[ValidationWarning]:
    """Return warnings for writers bound to data sets the document does not contain."""
    known = {data_set.name for data_set in document.published_data_sets}
    warnings: list[ValidationWarning] = []
    for connection in document.connections:
        for group in connection.writer_groups:
            for writer in group.data_set_writers:
                if writer.data_set_name is not None and writer.data_set_name not in known:
                    warnings.append(
                        ValidationWarning(
                            message=(
                                f"Writer '{connection.name}/{group.name}/{writer.name}' references unknown "
                                f"published data set '{writer.data_set_name}'."
                            )
                        )
                    )
    return warnings
