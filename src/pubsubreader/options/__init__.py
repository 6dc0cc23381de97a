# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Options controlling a synthesis pass."""

from pubsubreader.options.config import (
    OPTIONS_FILE_NAME,
    MismatchPolicy,
    OptionsError,
    SynthesisOptions,
    load_synthesis_options,
    parse_synthesis_options,
)

__all__ = [
    "OPTIONS_FILE_NAME",
    "MismatchPolicy",
    "OptionsError",
    "SynthesisOptions",
    "load_synthesis_options",
    "parse_synthesis_options",
]
