# File: daogen/errors.py
"""
daogen - Exception Hierarchy
=============================

Every failure the generator raises on purpose derives from ``DaoGenError``.

Scope of each error during a run:

    ConfigurationError    → fatal, raised before any table is processed.
    MetadataError         → fatal while connecting; scoped to one table
                            once the run has started.
    TemplateNotFoundError → fails the artifact (and so the table) being built.
    TemplateRenderError   → same scope; strict placeholder mode only.
    OutputWriteError      → same scope; directory creation or file write.
"""

from __future__ import annotations

from typing import List, Sequence


class DaoGenError(Exception):
    """Base class for all daogen errors."""


class ConfigurationError(DaoGenError):
    """Missing or invalid generator configuration."""


class MetadataError(DaoGenError):
    """The metadata provider could not answer a schema query."""


class TemplateNotFoundError(DaoGenError):
    """A named template does not exist in the template directory."""

    def __init__(self, template_name: str, location: str) -> None:
        self.template_name: str = template_name
        self.location: str = location
        super().__init__(
            f"Template '{template_name}' not found in {location}. "
            "Check the template directory setting."
        )


class TemplateRenderError(DaoGenError):
    """Raised in strict mode when a template references unsupplied keys."""

    def __init__(self, missing_keys: Sequence[str], template_name: str = "<string>") -> None:
        self.missing_keys: List[str] = list(missing_keys)
        self.template_name: str = template_name
        super().__init__(
            f"Unresolved placeholder(s) in {template_name}: "
            + ", ".join("${" + key + "}" for key in self.missing_keys)
        )


class OutputWriteError(DaoGenError):
    """A generated file or its directory could not be written."""


__all__: List[str] = [
    "DaoGenError",
    "ConfigurationError",
    "MetadataError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "OutputWriteError",
]
