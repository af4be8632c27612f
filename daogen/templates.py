# File: daogen/templates.py
"""
daogen - Placeholder Template Engine
=====================================

Templates are plain UTF-8 text files containing ``${key}`` placeholders.
``render`` substitutes them from a ``Dict[str, str]``; ``TemplateStore``
loads template files by name (``<name>.template``) and caches their text
for the lifetime of the store.

Rendering rules:
    - One left-to-right pass.  Substituted values are inserted literally
      and never scanned again, so a value containing ``${x}`` or ``$``
      stays as it is.
    - An unterminated ``${`` is not a placeholder and is left as text.
    - A placeholder with no value renders as ``""`` in permissive mode and
      raises ``TemplateRenderError`` (listing every missing key) in strict
      mode.

There is no manifest of which keys a template expects; the code that
renders a template is the only place that knows.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Pattern

from daogen.errors import TemplateNotFoundError, TemplateRenderError

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEMPLATE_SUFFIX: str = ".template"

# Templates shipped inside the package.
DEFAULT_TEMPLATE_DIR: Path = Path(__file__).resolve().parent / "resources" / "templates"

_PLACEHOLDER_RE: Pattern[str] = re.compile(r"\$\{([^}]+)\}")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def find_placeholders(template: str) -> List[str]:
    """Distinct placeholder keys of *template*, in order of first use."""
    seen: Dict[str, None] = {}
    for match in _PLACEHOLDER_RE.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)


def render(
    template: str,
    values: Mapping[str, str],
    *,
    strict: bool = False,
    template_name: str = "<string>",
) -> str:
    """
    Substitute ``${key}`` placeholders in *template* from *values*.

    Examples:
        >>> render("SELECT * FROM ${table} WHERE ${col} = ?", {"table": "t", "col": "id"})
        'SELECT * FROM t WHERE id = ?'
        >>> render("${missing}", {})
        ''

    Raises:
        TemplateRenderError: In strict mode, if any placeholder has no value.
    """
    if strict:
        missing: List[str] = [
            key for key in find_placeholders(template) if key not in values
        ]
        if missing:
            raise TemplateRenderError(missing, template_name)

    def _substitute(match: "re.Match[str]") -> str:
        key: str = match.group(1)
        value: Optional[str] = values.get(key)
        if value is None:
            logger.debug("No value for ${%s} in %s; rendering empty.", key, template_name)
            return ""
        return str(value)

    return _PLACEHOLDER_RE.sub(_substitute, template)


# ---------------------------------------------------------------------------
# Template store
# ---------------------------------------------------------------------------


class TemplateStore:
    """
    Named templates loaded from one directory.

    Each template is read from disk on first use and cached; the cache is
    never invalidated, so edits to template files during a run are not seen.

    Usage::

        store = TemplateStore()                      # bundled templates
        store = TemplateStore(Path("my/templates"))  # custom set
        text = store.load("pojo_class")
        java = store.render("pojo_class", {"className": "CustomerData"})
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        *,
        strict: bool = True,
        encoding: str = "utf-8",
    ) -> None:
        self._template_dir: Path = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self._strict: bool = strict
        self._encoding: str = encoding
        self._cache: Dict[str, str] = {}

        logger.debug(
            "TemplateStore initialised (dir=%s, strict=%s).",
            self._template_dir,
            strict,
        )

    @property
    def template_dir(self) -> Path:
        return self._template_dir

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def cached_names(self) -> List[str]:
        return list(self._cache)

    def path_for(self, name: str) -> Path:
        return self._template_dir / f"{name}{TEMPLATE_SUFFIX}"

    def load(self, name: str) -> str:
        """
        Return the text of template *name*.

        Raises:
            TemplateNotFoundError: If ``<template_dir>/<name>.template`` is
                missing or unreadable.
        """
        cached: Optional[str] = self._cache.get(name)
        if cached is not None:
            return cached

        path: Path = self.path_for(name)
        try:
            text: str = path.read_text(encoding=self._encoding)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise TemplateNotFoundError(name, str(self._template_dir)) from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read template %s: %s", path, exc)
            raise TemplateNotFoundError(name, str(self._template_dir)) from exc

        self._cache[name] = text
        logger.debug("Loaded template '%s' (%d chars).", name, len(text))
        return text

    def render(self, name: str, values: Mapping[str, str]) -> str:
        """Load template *name* and render it with the store's strictness."""
        return render(
            self.load(name),
            values,
            strict=self._strict,
            template_name=f"{name}{TEMPLATE_SUFFIX}",
        )


__all__: List[str] = [
    "TEMPLATE_SUFFIX",
    "DEFAULT_TEMPLATE_DIR",
    "find_placeholders",
    "render",
    "TemplateStore",
]

logger.debug("daogen.templates loaded.")
