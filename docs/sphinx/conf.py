# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the pubsubreader API documentation."""

project = "pubsubreader"
author = "pubsubreader Contributors"
release = "0.1.0"

# Docstrings use the Google style (Args/Returns/Raises).
extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"
napoleon_google_docstring = True
napoleon_numpy_docstring = False

html_theme = "alabaster"
