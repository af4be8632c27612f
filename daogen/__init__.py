# File: daogen/__init__.py
"""
daogen — JDBC Data-Access Code Generator
=========================================

Reads a live relational schema through SQLAlchemy's inspection API and
writes Java sources: one data class per table, one primary-key class, one
parameter class per index and one JDBC accessor (DAO) per table.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│  DaoGenerator  │────▶│  TemplateStore   │
    │   (cli.py)   │     │ (generator.py) │     │  (templates.py)  │
    └──────────────┘     └───────┬───────┘     └──────────────────┘
                                 │
                    ┌────────────┼────────────┐
                    ▼            ▼            ▼
             ┌──────────┐ ┌───────────┐ ┌───────────┐
             │ provider │ │  schema   │ │ exporters │
             │  (.py)   │ │  (.py)    │ │  (.py)    │
             └──────────┘ └───────────┘ └───────────┘

Usage::

    # As a library
    from daogen import DaoGenerator, load_config
    report = DaoGenerator(load_config(Path("daogen.yaml"))).run()
    print(report.summary())

    # From the command line
    python -m daogen -c database.properties -o ./generated -v

Public API:
    - DaoGenerator       — Master orchestrator
    - GeneratorConfig    — Run settings model
    - load_config        — Settings file + overrides → GeneratorConfig
    - TemplateStore      — Template loading and rendering
    - ArtifactWriter     — File-system writer
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from daogen.errors import (
    ConfigurationError,
    DaoGenError,
    MetadataError,
    OutputWriteError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from daogen.naming import method_suffix, to_class_name, to_field_name
from daogen.type_mapping import SqlType, to_target_type
from daogen.models import (
    ColumnInfo,
    GeneratorConfig,
    IndexInfo,
    IndexInfoBuilder,
    TableSchema,
)
from daogen.provider import (
    MetadataProvider,
    RawColumn,
    RawIndexRow,
    RawPrimaryKeyColumn,
    SQLAlchemyMetadataProvider,
)
from daogen.schema import group_indexes, load_table_schema, resolve_primary_key
from daogen.templates import TemplateStore, render
from daogen.exporters import ArtifactWriter, ExportManifest, FileRecord
from daogen.config import load_config
from daogen.generator import (
    Artifact,
    DaoGenerator,
    GenerationReport,
    TableResult,
    TableStatus,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "DaoGenerator",
    "GenerationReport",
    "TableResult",
    "TableStatus",
    "Artifact",
    # Models
    "ColumnInfo",
    "IndexInfo",
    "IndexInfoBuilder",
    "TableSchema",
    "GeneratorConfig",
    # Naming & types
    "to_class_name",
    "to_field_name",
    "method_suffix",
    "SqlType",
    "to_target_type",
    # Metadata
    "MetadataProvider",
    "SQLAlchemyMetadataProvider",
    "RawColumn",
    "RawPrimaryKeyColumn",
    "RawIndexRow",
    "resolve_primary_key",
    "group_indexes",
    "load_table_schema",
    # Templates
    "TemplateStore",
    "render",
    # Output
    "ArtifactWriter",
    "ExportManifest",
    "FileRecord",
    # Configuration
    "load_config",
    # Errors
    "DaoGenError",
    "ConfigurationError",
    "MetadataError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "OutputWriteError",
]
