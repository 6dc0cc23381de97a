# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Synthesis of a PubSub configuration document from a remote node space.

The traversal is depth-first from a root node (by default the standard
``PublishSubscribe`` object):

* connections are read in a fixed order (status, publisher id, transport
  profile URI, address) because every decoder below them depends on the
  transport profile;
* reader and writer groups, and the readers and writers below them, decode
  their message and transport settings with the connection's
  :class:`~pubsubreader.synthesis.decoder.DecodingContext`;
* data set folders are walked first, accumulating the folder path of every
  published data items node and recording the data set writers each data
  set references through ``DataSetToWriter``; writers are bound to their
  data set by node id when the connections are assembled afterwards.

A failure while resolving a required field drops only the affected entity;
the failure is reported as a :class:`SynthesisWarning` and its siblings are
still synthesized. Failures of optional decorations (extension fields, a
single target-variable binding, optional scalars) omit only that decoration.
The graph below the root is assumed to be a tree; cycles are not detected.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from pubsubreader.model.entities import (
    ConfigurationDocument,
    Connection,
    DataSetReader,
    DataSetWriter,
    NetworkAddressUrl,
    PublishedDataSet,
    ReaderGroup,
    WriterGroup,
)
from pubsubreader.model.settings import NoTransportSettings, TransportSettings
from pubsubreader.model.structures import (
    ConfigurationVersion,
    DataSetMetaData,
    FieldTarget,
    KeyValuePair,
    PublishedVariable,
)
from pubsubreader.nodespace.accessor import NodeSpace
from pubsubreader.nodespace.ids import DataTypeIds
from pubsubreader.nodespace.types import NodeId, QualifiedName, ReadValueId, RemoteReference
from pubsubreader.options.config import SynthesisOptions
from pubsubreader.synthesis.cancellation import CancellationToken
from pubsubreader.synthesis.classifier import TypeRole, classify, select
from pubsubreader.synthesis.decoder import DecodingContext, decode_message_settings, decode_transport_settings
from pubsubreader.synthesis.errors import MalformedNestedValue, PathNotFound, ReadFailed, SynthesisError
from pubsubreader.synthesis.resolver import AttributeResolver, decode_structure

logger = logging.getLogger(__name__)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)

# Browse name of the standard folder holding all published data sets; it is
# the root of the folder path, not a segment of it.
PUBLISHED_DATA_SETS_FOLDER = "PublishedDataSets"

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SynthesisWarning:
    """A node that was skipped, or a decoration that was omitted.

    Attributes:
        node_id: Node of the affected entity.
        name: Browse name of the affected entity.
        role: Role of the affected entity.
        error_type: Class name of the underlying error.
        message: Human-readable description of the error.
        decoration: Name of the omitted decoration, or ``None`` if the whole
            entity was dropped.
    """

    node_id: NodeId
    name: str
    role: TypeRole
    error_type: str
    message: str
    decoration: str | None = None

    @property
    def dropped(self) -> bool:
        """True if the entity itself was excluded from the document."""
        return self.decoration is None


@dataclass(frozen=True)
class SynthesisResult:
    """The synthesized document and the warnings collected while building it."""

    document: ConfigurationDocument
    warnings: tuple[SynthesisWarning, ...] = ()


def synthesize(
    node_space: NodeSpace,
    root: NodeId | None = None,
    *,
    options: SynthesisOptions | None = None,
    cancellation: CancellationToken | None = None,
) -> SynthesisResult:
    """Reconstruct the PubSub configuration below *root*.

    Args:
        node_space: Connected accessor providing browse, read and translate.
            Must be safe for concurrent use when ``options.max_workers > 1``.
        root: Node to start from; defaults to ``options.root_node``.
        options: Synthesis options; defaults apply when omitted.
        cancellation: Token that aborts the pass at the next remote call.

    Returns:
        A :class:`SynthesisResult`. The document may be partial; inspect the
        warnings to learn what was skipped.

    Raises:
        SynthesisCancelled: If *cancellation* was triggered.
    """
    options = options or SynthesisOptions()
    return _Synthesizer(node_space, options, cancellation).run(root or options.root_node)


# ################
# Implementation
# ################


@dataclass(frozen=True)
class _Outcome(Generic[T]):
    """A built value (or ``None`` if dropped) with the warnings raised building it."""

    value: T | None
    warnings: tuple[SynthesisWarning, ...] = ()


@dataclass(frozen=True)
class _Binding:
    """The published data set a writer is bound to."""

    name: str
    meta_data: DataSetMetaData | None = None


class _Synthesizer:
    """Performs one synthesis pass."""

    def __init__(
        self,
        node_space: NodeSpace,
        options: SynthesisOptions,
        cancellation: CancellationToken | None,
    ) -> None:
        self._options = options
        self._resolver = AttributeResolver(
            node_space,
            batch_reads=options.batch_reads,
            cancellation=cancellation,
        )
        self._executor: Executor | None = None
        # Writer node -> bound data set, filled while walking the data sets.
        self._bindings: dict[NodeId, _Binding] = {}
        self._bindings_lock = threading.Lock()

    def run(self, root: NodeId) -> SynthesisResult:
        logger.info("Synthesizing PubSub configuration below %s", root)
        root_ref = RemoteReference(root, QualifiedName(str(root)), NodeId(0, 0))
        try:
            refs = self._resolver.browse(root)
        except SynthesisError as exc:
            warning = self._warn(root_ref, TypeRole.UNCLASSIFIED, exc)
            return SynthesisResult(ConfigurationDocument(), (warning,))

        notes: list[SynthesisWarning] = []
        enabled = True
        if select(refs, TypeRole.STATUS):
            enabled = self._decorate(
                root_ref,
                TypeRole.UNCLASSIFIED,
                "Status",
                lambda: self._resolver.resolve_state(refs, root),
                True,
                notes,
            )

        if self._options.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._options.max_workers) as executor:
                self._executor = executor
                try:
                    connections, data_sets = self._synthesize_branches(refs)
                finally:
                    self._executor = None
        else:
            connections, data_sets = self._synthesize_branches(refs)

        document = ConfigurationDocument(
            enabled=enabled,
            connections=tuple(connections.value or ()),
            published_data_sets=tuple(data_sets.value or ()),
        )
        warnings = (*notes, *connections.warnings, *data_sets.warnings)
        logger.info(
            "Synthesized %d connection(s) and %d published data set(s) with %d warning(s)",
            len(document.connections),
            len(document.published_data_sets),
            len(warnings),
        )
        return SynthesisResult(document, warnings)

    def _synthesize_branches(
        self, refs: list[RemoteReference]
    ) -> tuple[_Outcome[list[Connection]], _Outcome[list[PublishedDataSet]]]:
        # Data sets first: writers look up their bindings while being built.
        data_sets = self._collect_data_sets(refs, (), at_root=True)
        connections = self._collect(
            select(refs, TypeRole.CONNECTION),
            TypeRole.CONNECTION,
            self._build_connection,
            parallel=True,
        )
        return connections, data_sets

    # -- folds --------------------------------------------------------------

    def _collect(
        self,
        refs: Sequence[RemoteReference],
        role: TypeRole,
        build: Callable[[RemoteReference], _Outcome[T]],
        *,
        parallel: bool = False,
    ) -> _Outcome[list[T]]:
        """Build one entity per reference, dropping failures in favour of warnings."""
        outcomes = self._map(lambda ref: self._settle(ref, role, build), refs, parallel)
        return _fold(outcomes)

    def _settle(
        self,
        ref: RemoteReference,
        role: TypeRole,
        build: Callable[[RemoteReference], _Outcome[T]],
    ) -> _Outcome[T]:
        try:
            return build(ref)
        except SynthesisError as exc:
            return _Outcome(None, (self._warn(ref, role, exc),))

    def _map(
        self,
        fn: Callable[[RemoteReference], _Outcome[T]],
        refs: Sequence[RemoteReference],
        parallel: bool,
    ) -> list[_Outcome[T]]:
        # Executor.map yields in submission order, i.e. browse order.
        if parallel and self._executor is not None and len(refs) > 1:
            return list(self._executor.map(fn, refs))
        return [fn(ref) for ref in refs]

    def _decorate(
        self,
        ref: RemoteReference,
        role: TypeRole,
        decoration: str,
        resolve: Callable[[], T],
        default: T,
        notes: list[SynthesisWarning],
    ) -> T:
        """Resolve an optional decoration, falling back to *default* on failure."""
        try:
            return resolve()
        except SynthesisError as exc:
            notes.append(self._warn(ref, role, exc, decoration=decoration))
            return default

    def _warn(
        self,
        ref: RemoteReference,
        role: TypeRole,
        exc: SynthesisError,
        *,
        decoration: str | None = None,
    ) -> SynthesisWarning:
        if decoration is None:
            logger.warning("Skipping %s '%s' (%s): %s", role.value, ref.name, ref.node_id, exc)
        else:
            logger.warning("Omitting %s of %s '%s' (%s): %s", decoration, role.value, ref.name, ref.node_id, exc)
        return SynthesisWarning(
            node_id=ref.node_id,
            name=ref.name,
            role=role,
            error_type=type(exc).__name__,
            message=str(exc),
            decoration=decoration,
        )

    # -- connections --------------------------------------------------------

    def _build_connection(self, ref: RemoteReference) -> _Outcome[Connection]:
        resolver = self._resolver
        node = ref.node_id
        refs = resolver.browse(node)

        # Fixed order: later decoding depends on the transport profile.
        enabled = resolver.resolve_state(refs, node)
        publisher_id = resolver.resolve_publisher_id(node)
        profile_uri = _as_text(resolver.resolve_named_child(node, "TransportProfileUri"), "TransportProfileUri")
        address_node = resolver.translate(node, ["Address"])
        network_interface, url = resolver.resolve_many(address_node, ["NetworkInterface", "Url"])

        context = DecodingContext(profile_uri, self._options.mismatch_policy)
        notes: list[SynthesisWarning] = []
        transport_settings: TransportSettings = NoTransportSettings()
        if _has_child(refs, "TransportSettings"):
            transport_settings = self._decorate(
                ref,
                TypeRole.CONNECTION,
                "TransportSettings",
                lambda: decode_transport_settings(resolver, node, refs, TypeRole.CONNECTION, context),
                NoTransportSettings(),
                notes,
            )

        reader_groups = self._collect(
            select(refs, TypeRole.READER_GROUP),
            TypeRole.READER_GROUP,
            lambda group: self._build_reader_group(group, context),
        )
        writer_groups = self._collect(
            select(refs, TypeRole.WRITER_GROUP),
            TypeRole.WRITER_GROUP,
            lambda group: self._build_writer_group(group, context),
        )

        connection = _build(
            Connection,
            name=ref.name,
            enabled=enabled,
            publisher_id=publisher_id,
            transport_profile_uri=profile_uri,
            address=_build(NetworkAddressUrl, network_interface=network_interface, url=url),
            transport_settings=transport_settings,
            reader_groups=tuple(reader_groups.value or ()),
            writer_groups=tuple(writer_groups.value or ()),
        )
        return _Outcome(connection, (*notes, *reader_groups.warnings, *writer_groups.warnings))

    # -- groups -------------------------------------------------------------

    def _build_reader_group(self, ref: RemoteReference, context: DecodingContext) -> _Outcome[ReaderGroup]:
        resolver = self._resolver
        node = ref.node_id
        refs = resolver.browse(node)

        enabled = resolver.resolve_state(refs, node)
        max_network_message_size = resolver.resolve_named_child(node, "MaxNetworkMessageSize")
        message_settings = decode_message_settings(resolver, node, TypeRole.READER_GROUP, context)

        # ReaderGroupType defines no standard transport settings; vendor
        # extensions are decoded when present.
        notes: list[SynthesisWarning] = []
        transport_settings: TransportSettings = NoTransportSettings()
        if _has_child(refs, "TransportSettings"):
            transport_settings = self._decorate(
                ref,
                TypeRole.READER_GROUP,
                "TransportSettings",
                lambda: decode_transport_settings(resolver, node, refs, TypeRole.READER_GROUP, context),
                NoTransportSettings(),
                notes,
            )

        readers = self._collect(
            select(refs, TypeRole.DATA_SET_READER),
            TypeRole.DATA_SET_READER,
            lambda reader: self._build_reader(reader, context),
        )
        group = _build(
            ReaderGroup,
            name=ref.name,
            enabled=enabled,
            max_network_message_size=max_network_message_size,
            message_settings=message_settings,
            transport_settings=transport_settings,
            data_set_readers=tuple(readers.value or ()),
        )
        return _Outcome(group, (*notes, *readers.warnings))

    def _build_writer_group(self, ref: RemoteReference, context: DecodingContext) -> _Outcome[WriterGroup]:
        resolver = self._resolver
        node = ref.node_id
        refs = resolver.browse(node)

        enabled = resolver.resolve_state(refs, node)
        (
            max_network_message_size,
            header_layout_uri,
            publishing_interval,
            writer_group_id,
            keep_alive_time,
        ) = resolver.resolve_many(
            node,
            ["MaxNetworkMessageSize", "HeaderLayoutUri", "PublishingInterval", "WriterGroupId", "KeepAliveTime"],
        )
        notes: list[SynthesisWarning] = []
        priority = self._decorate(
            ref, TypeRole.WRITER_GROUP, "Priority", lambda: resolver.resolve_optional(node, "Priority"), None, notes
        )
        locale_ids = self._decorate(
            ref, TypeRole.WRITER_GROUP, "LocaleIds", lambda: resolver.resolve_optional(node, "LocaleIds"), None, notes
        )
        message_settings = decode_message_settings(resolver, node, TypeRole.WRITER_GROUP, context)
        transport_settings = decode_transport_settings(resolver, node, refs, TypeRole.WRITER_GROUP, context)

        writers = self._collect(
            select(refs, TypeRole.DATA_SET_WRITER),
            TypeRole.DATA_SET_WRITER,
            lambda writer: self._build_writer(writer, context),
        )
        group = _build(
            WriterGroup,
            name=ref.name,
            enabled=enabled,
            max_network_message_size=max_network_message_size,
            header_layout_uri=header_layout_uri,
            publishing_interval=publishing_interval,
            writer_group_id=writer_group_id,
            keep_alive_time=keep_alive_time,
            priority=priority,
            locale_ids=tuple(locale_ids or ()),
            message_settings=message_settings,
            transport_settings=transport_settings,
            data_set_writers=tuple(writers.value or ()),
        )
        return _Outcome(group, (*notes, *writers.warnings))

    # -- readers and writers --------------------------------------------------

    def _build_reader(self, ref: RemoteReference, context: DecodingContext) -> _Outcome[DataSetReader]:
        resolver = self._resolver
        node = ref.node_id
        refs = resolver.browse(node)

        enabled = resolver.resolve_state(refs, node)
        publisher_id = resolver.resolve_publisher_id(node)
        writer_group_id, data_set_writer_id, field_content_mask, receive_timeout = resolver.resolve_many(
            node,
            ["WriterGroupId", "DataSetWriterId", "DataSetFieldContentMask", "MessageReceiveTimeout"],
        )
        meta_data = resolver.resolve_structure(
            node, "DataSetMetaData", DataSetMetaData, DataTypeIds.DATA_SET_META_DATA_TYPE
        )

        notes: list[SynthesisWarning] = []
        bindings = resolver.resolve_structure_array(node, ["SubscribedDataSet", "TargetVariables"])
        target_variables = [
            self._decorate(
                ref,
                TypeRole.DATA_SET_READER,
                f"TargetVariables[{index}]",
                lambda item=item: decode_structure(item, FieldTarget, DataTypeIds.FIELD_TARGET_DATA_TYPE),
                None,
                notes,
            )
            for index, item in enumerate(bindings)
        ]

        message_settings = decode_message_settings(resolver, node, TypeRole.DATA_SET_READER, context)
        transport_settings = self._item_transport(node, refs, TypeRole.DATA_SET_READER, context)

        reader = _build(
            DataSetReader,
            name=ref.name,
            enabled=enabled,
            publisher_id=publisher_id,
            writer_group_id=writer_group_id,
            data_set_writer_id=data_set_writer_id,
            data_set_meta_data=meta_data,
            data_set_field_content_mask=field_content_mask,
            message_receive_timeout=receive_timeout,
            message_settings=message_settings,
            transport_settings=transport_settings,
            target_variables=tuple(target for target in target_variables if target is not None),
        )
        return _Outcome(reader, tuple(notes))

    def _build_writer(self, ref: RemoteReference, context: DecodingContext) -> _Outcome[DataSetWriter]:
        resolver = self._resolver
        node = ref.node_id
        refs = resolver.browse(node)

        enabled = resolver.resolve_state(refs, node)
        data_set_writer_id, field_content_mask = resolver.resolve_many(
            node, ["DataSetWriterId", "DataSetFieldContentMask"]
        )
        notes: list[SynthesisWarning] = []
        key_frame_count = self._decorate(
            ref,
            TypeRole.DATA_SET_WRITER,
            "KeyFrameCount",
            lambda: resolver.resolve_optional(node, "KeyFrameCount"),
            None,
            notes,
        )

        binding = self._bindings.get(node)

        message_settings = decode_message_settings(resolver, node, TypeRole.DATA_SET_WRITER, context)
        transport_settings = self._item_transport(node, refs, TypeRole.DATA_SET_WRITER, context)

        writer = _build(
            DataSetWriter,
            name=ref.name,
            enabled=enabled,
            data_set_writer_id=data_set_writer_id,
            data_set_name=binding.name if binding is not None else None,
            data_set_meta_data=binding.meta_data if binding is not None else None,
            data_set_field_content_mask=field_content_mask,
            key_frame_count=key_frame_count,
            message_settings=message_settings,
            transport_settings=transport_settings,
        )
        return _Outcome(writer, tuple(notes))

    def _item_transport(
        self,
        node: NodeId,
        refs: list[RemoteReference],
        role: TypeRole,
        context: DecodingContext,
    ) -> TransportSettings:
        # Writers and readers only carry transport settings on broker transports.
        if not _has_child(refs, "TransportSettings"):
            return NoTransportSettings()
        return decode_transport_settings(self._resolver, node, refs, role, context)

    # -- published data sets --------------------------------------------------

    def _collect_data_sets(
        self,
        refs: Sequence[RemoteReference],
        folder: tuple[str, ...],
        *,
        at_root: bool = False,
    ) -> _Outcome[list[PublishedDataSet]]:
        candidates = [
            ref for ref in refs if classify(ref) in (TypeRole.DATA_SET_FOLDER, TypeRole.PUBLISHED_DATA_ITEMS)
        ]
        outcomes = self._map(
            lambda ref: self._data_sets_below(ref, folder, at_root),
            candidates,
            parallel=at_root,
        )
        return _flatten(outcomes)

    def _data_sets_below(
        self,
        ref: RemoteReference,
        folder: tuple[str, ...],
        at_root: bool,
    ) -> _Outcome[list[PublishedDataSet]]:
        if classify(ref) is TypeRole.PUBLISHED_DATA_ITEMS:
            outcome = self._settle(
                ref,
                TypeRole.PUBLISHED_DATA_ITEMS,
                lambda item: self._build_published_data_set(item, folder),
            )
            return _Outcome([outcome.value] if outcome.value is not None else [], outcome.warnings)

        if at_root and ref.name == PUBLISHED_DATA_SETS_FOLDER:
            sub_folder = folder
        else:
            sub_folder = (*folder, ref.name)
        return self._settle(
            ref,
            TypeRole.DATA_SET_FOLDER,
            lambda item: self._collect_data_sets(self._resolver.browse(item.node_id), sub_folder),
        )

    def _build_published_data_set(self, ref: RemoteReference, folder: tuple[str, ...]) -> _Outcome[PublishedDataSet]:
        resolver = self._resolver
        node = ref.node_id

        # DataSetToWriter references point from the data set to its writers.
        writers = [writer.node_id for writer in select(resolver.browse(node), TypeRole.DATA_SET_WRITER)]
        self._bind(writers, _Binding(ref.name))

        configuration_version, meta_data, published_data = resolver.resolve_many(
            node, ["ConfigurationVersion", "DataSetMetaData", "PublishedData"]
        )
        published_variables = [
            decode_structure(item, PublishedVariable, DataTypeIds.PUBLISHED_VARIABLE_DATA_TYPE)
            for item in _as_array(published_data, "PublishedData")
        ]

        notes: list[SynthesisWarning] = []
        extension_fields = self._decorate(
            ref,
            TypeRole.PUBLISHED_DATA_ITEMS,
            "ExtensionFields",
            lambda: self._extension_fields(node),
            (),
            notes,
        )

        data_set = _build(
            PublishedDataSet,
            name=ref.name,
            data_set_folder=folder,
            configuration_version=decode_structure(
                configuration_version, ConfigurationVersion, DataTypeIds.CONFIGURATION_VERSION_DATA_TYPE
            ),
            data_set_meta_data=decode_structure(meta_data, DataSetMetaData, DataTypeIds.DATA_SET_META_DATA_TYPE),
            published_data=tuple(published_variables),
            extension_fields=extension_fields,
        )
        self._bind(writers, _Binding(ref.name, data_set.data_set_meta_data))
        return _Outcome(data_set, tuple(notes))

    def _bind(self, writers: Sequence[NodeId], binding: _Binding) -> None:
        with self._bindings_lock:
            for writer in writers:
                self._bindings[writer] = binding

    def _extension_fields(self, node: NodeId) -> tuple[KeyValuePair, ...]:
        """Read the variables below the ExtensionFields container, if any."""
        resolver = self._resolver
        try:
            container = resolver.translate(node, ["ExtensionFields"])
        except PathNotFound:
            return ()
        refs = resolver.browse(container)
        if not refs:
            return ()
        results = resolver.read([ReadValueId(ref.node_id) for ref in refs])
        pairs: list[KeyValuePair] = []
        for ref, result in zip(refs, results, strict=True):
            if not result.is_good:
                raise ReadFailed(ref.node_id, result.status_code)
            pairs.append(_build(KeyValuePair, key=ref.name, value=result.value))
        return tuple(pairs)


def _fold(outcomes: Iterable[_Outcome[T]]) -> _Outcome[list[T]]:
    values: list[T] = []
    warnings: list[SynthesisWarning] = []
    for outcome in outcomes:
        warnings.extend(outcome.warnings)
        if outcome.value is not None:
            values.append(outcome.value)
    return _Outcome(values, tuple(warnings))


def _flatten(outcomes: Iterable[_Outcome[list[T]]]) -> _Outcome[list[T]]:
    values: list[T] = []
    warnings: list[SynthesisWarning] = []
    for outcome in outcomes:
        warnings.extend(outcome.warnings)
        values.extend(outcome.value or ())
    return _Outcome(values, tuple(warnings))


def _build(model: type[ModelT], **fields: Any) -> ModelT:
    try:
        return model(**fields)
    except ValidationError as exc:
        raise MalformedNestedValue(model.__name__, str(exc)) from exc


def _has_child(refs: Sequence[RemoteReference], name: str) -> bool:
    return any(ref.name == name for ref in refs)


def _as_text(value: Any, expected_shape: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedNestedValue(expected_shape, f"got {type(value).__name__}")
    return value


def _as_array(value: Any, expected_shape: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise MalformedNestedValue(f"{expected_shape} array", f"got {type(value).__name__}")
    return list(value)
