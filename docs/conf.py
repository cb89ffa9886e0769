"""Sphinx configuration for the agelock docs."""

import os
import sys

sys.path.insert(0, os.path.abspath("../src"))

from agelock import __version__  # noqa: E402

project = "agelock"
author = "agelock contributors"
copyright = f"2026, {author}"
release = __version__
version = ".".join(release.split(".")[:2])

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_copybutton",
]
source_suffix = {".md": "markdown", ".rst": "restructuredtext"}
exclude_patterns = ["_build"]

html_theme = "furo"
html_title = f"agelock {release}"
html_theme_options = {
    "light_css_variables": {"color-brand-primary": "#2e7d32", "color-brand-content": "#2e7d32"},
    "dark_css_variables": {"color-brand-primary": "#81c784", "color-brand-content": "#81c784"},
    "navigation_with_keys": True,
}

# Google-style docstrings throughout; types come from annotations.
napoleon_numpy_docstring = False
autodoc_typehints = "description"
autodoc_member_order = "bysource"
autodoc_default_options = {"members": True, "show-inheritance": True}
autodoc_mock_imports = ["prometheus_client"]

intersphinx_mapping = {"python": ("https://docs.python.org/3", None)}

# Shell and REPL prompts in usage.md
copybutton_prompt_text = r">>> |\$ "
copybutton_prompt_is_regexp = True
