# File: daogen/naming.py
"""
daogen - Name Derivation
=========================

Pure functions that turn database identifiers (``user_profile``,
``COLUMN_NAME``) into the Java identifiers used by generated code.

* ``to_class_name("user_profile")`` → ``"UserProfile"``
* ``to_field_name("user_profile")`` → ``"userProfile"``
* ``method_suffix(["user_id", "email_address"])`` → ``"UserIdEmailAddress"``

None of these functions raise.  ``None`` or ``""`` is handed back unchanged,
so a caller that passes garbage gets garbage back instead of an error; the
schema layer is where empty names should be caught.

All conversions are ``lru_cache``-d: the same column names are converted
many times per table (fields, getters, setters, binding blocks).
"""

from __future__ import annotations

import functools
import logging
import re
from typing import FrozenSet, Iterable, List, Optional, Pattern

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.naming")


@functools.lru_cache(maxsize=None)
def to_class_name(name: Optional[str]) -> Optional[str]:
    """
    Convert a database name to PascalCase.

    The input is lower-cased first, then the first character and every
    character following an underscore are upper-cased, and underscores are
    dropped.

    Examples:
        >>> to_class_name("user_profile")
        'UserProfile'
        >>> to_class_name("COLUMN_NAME")
        'ColumnName'
        >>> to_class_name("lastName")
        'Lastname'
        >>> to_class_name("")
        ''
    """
    if not name:
        return name

    chars: List[str] = []
    capitalize_next: bool = True
    for ch in name.lower():
        if ch == "_":
            capitalize_next = True
        elif capitalize_next:
            chars.append(ch.upper())
            capitalize_next = False
        else:
            chars.append(ch)
    return "".join(chars)


@functools.lru_cache(maxsize=None)
def to_field_name(name: Optional[str]) -> Optional[str]:
    """
    Convert a database name to camelCase.

    Same as :func:`to_class_name` with the first character lower-cased.

        >>> to_field_name("user_profile")
        'userProfile'
    """
    class_name: Optional[str] = to_class_name(name)
    if not class_name:
        return class_name
    return class_name[0].lower() + class_name[1:]


def method_suffix(column_names: Optional[Iterable[Optional[str]]]) -> str:
    """Concatenate ``to_class_name`` of each column, in order, no separator."""
    if column_names is None:
        return ""
    return "".join(to_class_name(col) or "" for col in column_names)


# ---------------------------------------------------------------------------
# Java identifier safety
# ---------------------------------------------------------------------------

JAVA_RESERVED_WORDS: FrozenSet[str] = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
    "class", "const", "continue", "default", "do", "double", "else", "enum",
    "extends", "final", "finally", "float", "for", "goto", "if", "implements",
    "import", "instanceof", "int", "interface", "long", "native", "new",
    "package", "private", "protected", "public", "return", "short", "static",
    "strictfp", "super", "switch", "synchronized", "this", "throw", "throws",
    "transient", "try", "void", "volatile", "while", "true", "false", "null",
    "var", "record", "yield",
})

_NON_IDENTIFIER_RE: Pattern[str] = re.compile(r"[^A-Za-z0-9_$]")


def java_identifier(name: str) -> str:
    """
    camelCase field name for *name* that is also a legal Java identifier.

    Characters Java rejects are dropped, a leading digit gets a ``_``
    prefix, and reserved words get a ``Value`` suffix.

        >>> java_identifier("order_date")
        'orderDate'
        >>> java_identifier("class")
        'classValue'
        >>> java_identifier("2nd line")
        '_2ndline'
    """
    candidate: str = _NON_IDENTIFIER_RE.sub("", to_field_name(name) or "")
    if not candidate:
        candidate = "column"
    if candidate[0].isdigit():
        candidate = "_" + candidate
    if candidate in JAVA_RESERVED_WORDS:
        candidate += "Value"
    if candidate != to_field_name(name):
        logger.debug("Column %r mapped to Java identifier %r.", name, candidate)
    return candidate


__all__: List[str] = [
    "to_class_name",
    "to_field_name",
    "method_suffix",
    "JAVA_RESERVED_WORDS",
    "java_identifier",
]
