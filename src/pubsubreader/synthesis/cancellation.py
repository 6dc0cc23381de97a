# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Cooperative cancellation of a synthesis pass."""

from __future__ import annotations

import threading

from pubsubreader.synthesis.errors import SynthesisCancelled

# ###############
# Public Interface
# ###############


class CancellationToken:
    """A thread-safe flag checked before every remote call.

    Once :meth:`cancel` is called, the next remote call of the synthesis
    raises :class:`SynthesisCancelled`.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SynthesisCancelled("Synthesis was cancelled")
