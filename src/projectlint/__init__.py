"""Project-aware lint orchestration for the html-validate HTML linter."""

__version__ = "0.4.0"
