# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

import os
import sys

# Project root on sys.path so autodoc can import sim/, feed/, advisory/, server/
sys.path.insert(0, os.path.abspath("../.."))

project = 'Nabeh Fleet Telemetry'
copyright = '2026, Nabeh Team'
author = 'Nabeh Team'
release = '0.1.0'

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",    # generate docs from docstrings
    "sphinx.ext.napoleon",   # parse Google/NumPy style docstrings
    "sphinx.ext.viewcode",   # add links to source code
    "sphinx_rtd_dark_mode"
]

templates_path = ['_templates']
exclude_patterns = []

autodoc_member_order = "bysource"
autodoc_typehints = "description"

# sim/ and advisory/ use NumPy sections, feed/ uses Google sections
napoleon_numpy_docstring = True
napoleon_google_docstring = True

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_rtd_theme"
default_dark_mode = True
html_static_path = []

# Only the simulation core has to import for the docs build
autodoc_mock_imports = ["uvicorn", "fastapi", "requests"]
