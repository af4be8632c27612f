# File: daogen/generator.py
"""
daogen - Generation Pipeline (Orchestrator)
============================================

Connects every phase together:

    MetadataProvider → TableSchema → Java source text → ArtifactWriter

Per run::

    1. Prepare the two package directories under the output root.
    2. Connect to the metadata provider (once).
    3. Discover tables, apply include / exclude filters (provider order kept).
    4. For every table, in order, call ``generate_table``.
    5. Release the provider (always, also on failure).
    6. Return a ``GenerationReport``.

Per table::

    load schema → data artifact → PK artifact (if PK) → index artifacts
                → accessor (DAO) artifact → write all

All of a table's artifacts are rendered before the first one is written,
so a template problem leaves no half-generated table behind.

Error handling strategy:
    - Configuration and connection errors propagate out of ``run``.
    - Anything that goes wrong inside one table is caught by
      ``generate_table`` and returned as a FAILED ``TableResult``; the run
      continues with the next table.
    - A table without columns is SKIPPED, not failed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from daogen.errors import DaoGenError
from daogen.exporters import ArtifactWriter, ExportManifest, FileRecord
from daogen.fragments import (
    DATA_VAR,
    INDEX_VAR,
    PK_VAR,
    UNIQUE_VAR,
    dao_imports,
    escape_java_string,
    index_columns_list,
    parameter_setting_block,
    pojo_values,
    row_mapping_block,
    update_parameter_block,
    update_skipped_comment,
)
from daogen.models import ColumnInfo, GeneratorConfig, IndexInfo, TableSchema
from daogen.provider import MetadataProvider, SQLAlchemyMetadataProvider
from daogen.schema import load_table_schema
from daogen.sql import (
    delete_statement,
    exists_statement,
    insert_statement,
    select_statement,
    update_statement,
)
from daogen.templates import TemplateStore
from daogen.utils import Timer

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.generator")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TableStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class ArtifactKind(str, Enum):
    DATA = "data"
    PRIMARY_KEY = "pk"
    INDEX = "index"
    ACCESSOR = "dao"


@dataclass(frozen=True, slots=True)
class Artifact:
    """One rendered source file, not yet written."""

    name: str
    kind: ArtifactKind
    relative_path: str
    content: str


@dataclass(frozen=False, slots=True)
class TableResult:
    """Outcome of ``DaoGenerator.generate_table`` for one table."""

    table_name: str
    status: TableStatus = TableStatus.SUCCEEDED
    artifacts: List[Artifact] = field(default_factory=list)
    files: List[FileRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    elapsed_seconds: float = 0.0

    @property
    def artifact_names(self) -> List[str]:
        return [artifact.name for artifact in self.artifacts]

    def artifact(self, name: str) -> Optional[Artifact]:
        for candidate in self.artifacts:
            if candidate.name == name:
                return candidate
        return None


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Everything ``DaoGenerator.run()`` did: per-table results plus run totals.
    """

    output_directory: str = ""
    dry_run: bool = False
    tables: List[TableResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    manifest: ExportManifest = field(default_factory=ExportManifest)
    total_elapsed_seconds: float = 0.0

    def _with_status(self, status: TableStatus) -> List[TableResult]:
        return [result for result in self.tables if result.status == status]

    @property
    def succeeded(self) -> List[TableResult]:
        return self._with_status(TableStatus.SUCCEEDED)

    @property
    def skipped(self) -> List[TableResult]:
        return self._with_status(TableStatus.SKIPPED)

    @property
    def failed(self) -> List[TableResult]:
        return self._with_status(TableStatus.FAILED)

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def total_files(self) -> int:
        return self.manifest.total_files

    @property
    def total_lines(self) -> int:
        return self.manifest.total_lines

    @property
    def total_bytes(self) -> int:
        return self.manifest.total_bytes

    def result_for(self, table_name: str) -> Optional[TableResult]:
        for result in self.tables:
            if result.table_name == table_name:
                return result
        return None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  daogen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Output:           {self.output_directory}")
        if self.dry_run:
            lines.append("  Mode:             dry run (nothing written)")
        lines.append(f"  Tables succeeded: {len(self.succeeded)}")
        lines.append(f"  Tables skipped:   {len(self.skipped)}")
        lines.append(f"  Tables failed:    {len(self.failed)}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total size:       {self.total_bytes:,} bytes")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")

        if self.warnings:
            lines.append(f"{'─'*60}")
            lines.append(f"  Warnings ({len(self.warnings)}):")
            for warn in self.warnings:
                lines.append(f"    ⚠ {warn}")

        noted: List[TableResult] = [r for r in self.tables if r.warnings or r.error]
        if noted:
            lines.append(f"{'─'*60}")
            lines.append("  Table diagnostics:")
            for result in noted:
                icon: str = {
                    TableStatus.SUCCEEDED: "✓",
                    TableStatus.SKIPPED: "⊘",
                    TableStatus.FAILED: "✗",
                }[result.status]
                lines.append(f"    {icon} {result.table_name}")
                for warn in result.warnings:
                    lines.append(f"        ⚠ {warn}")
                if result.error:
                    lines.append(f"        ✗ {result.error}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# DaoGenerator: master orchestrator
# ---------------------------------------------------------------------------


class DaoGenerator:
    """
    Generates data classes and JDBC accessors for every table of a database.

    Usage::

        config = load_config(Path("generator.yaml"))
        report = DaoGenerator(config).run()
        print(report.summary())

    A custom ``MetadataProvider`` (tests, other back ends) can be passed in;
    by default one is built from the connection settings in *config*.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        provider: Optional[MetadataProvider] = None,
        *,
        templates: Optional[TemplateStore] = None,
        writer: Optional[ArtifactWriter] = None,
    ) -> None:
        self._config: GeneratorConfig = config
        self._provider: MetadataProvider = provider or SQLAlchemyMetadataProvider(
            config.database_url,
            username=config.username,
            password=config.password,
        )
        self._templates: TemplateStore = templates or TemplateStore(
            Path(config.template_dir) if config.template_dir else None,
            strict=config.strict_placeholders,
        )
        self._writer: ArtifactWriter = writer or ArtifactWriter(
            Path(config.output_dir), dry_run=config.dry_run
        )

        logger.debug(
            "DaoGenerator initialised: output=%s, templates=%s, strict=%s, dry_run=%s.",
            self._writer.output_dir,
            self._templates.template_dir,
            self._templates.strict,
            self._writer.dry_run,
        )

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    # -----------------------------------------------------------------
    # Public: whole run
    # -----------------------------------------------------------------

    def run(self) -> GenerationReport:
        """
        Generate every selected table.

        Raises:
            MetadataError: If the provider cannot connect or list tables.
            OutputWriteError: If the package directories cannot be created.
        """
        run_start: float = time.perf_counter()
        report: GenerationReport = GenerationReport(
            output_directory=str(self._writer.output_dir),
            dry_run=self._writer.dry_run,
            manifest=self._writer.manifest,
        )

        report.warnings.extend(
            self._writer.prepare(
                [self._config.model_package_path, self._config.dao_package_path],
                clean=self._config.clean_output,
            )
        )

        try:
            self._provider.connect()
            tables: List[str] = self.discover_tables()
            if not tables:
                message: str = "No tables found in the database. Nothing to generate."
                logger.warning(message)
                report.warnings.append(message)

            for table_name in tables:
                report.tables.append(self.generate_table(table_name))
        finally:
            self._provider.close()

        if Path(self._config.output_dir).name == "src":
            message = (
                "Files were generated directly into a 'src' directory, mixing "
                "generated and hand-written sources. Consider a separate output directory."
            )
            logger.warning(message)
            report.warnings.append(message)

        report.total_elapsed_seconds = time.perf_counter() - run_start
        logger.info(
            "Generation finished: %d succeeded, %d skipped, %d failed in %.3fs.",
            len(report.succeeded),
            len(report.skipped),
            len(report.failed),
            report.total_elapsed_seconds,
        )
        return report

    def discover_tables(self) -> List[str]:
        """Provider tables, in provider order, after include / exclude filters."""
        all_tables: List[str] = self._provider.list_tables()
        selected: List[str] = [t for t in all_tables if self._config.selects_table(t)]

        unknown: List[str] = [t for t in self._config.tables if t not in all_tables]
        for name in unknown:
            logger.warning("Requested table '%s' does not exist; ignored.", name)

        logger.info(
            "Found %d table(s), %d selected: %s",
            len(all_tables),
            len(selected),
            ", ".join(selected),
        )
        return selected

    # -----------------------------------------------------------------
    # Public: one table
    # -----------------------------------------------------------------

    def generate_table(self, table_name: str) -> TableResult:
        """
        Introspect, render and write one table.  Never raises.
        """
        result: TableResult = TableResult(table_name=table_name)
        logger.info("Processing table '%s'.", table_name)

        with Timer(f"table {table_name}") as timer:
            try:
                schema: TableSchema = load_table_schema(self._provider, table_name)
                result.warnings.extend(schema.anomalies)

                if not schema.columns:
                    message: str = (
                        f"No columns found for table '{table_name}'; skipped. "
                        "Check the table definition and database permissions."
                    )
                    logger.warning(message)
                    result.warnings.append(message)
                    result.status = TableStatus.SKIPPED
                else:
                    result.artifacts = self.build_artifacts(schema, result.warnings)
                    for artifact in result.artifacts:
                        result.files.append(
                            self._writer.write(artifact.relative_path, artifact.content)
                        )
            except DaoGenError as exc:
                result.status = TableStatus.FAILED
                result.error = f"{type(exc).__name__}: {exc}"
                logger.error(
                    "Failed to generate code for table '%s': %s",
                    table_name,
                    exc,
                    exc_info=True,
                )
            except Exception as exc:
                result.status = TableStatus.FAILED
                result.error = f"Unexpected {type(exc).__name__}: {exc}"
                logger.error(
                    "Unexpected error while generating table '%s'.",
                    table_name,
                    exc_info=True,
                )

        result.elapsed_seconds = timer.elapsed
        if result.status == TableStatus.SUCCEEDED:
            logger.info(
                "Generated %d file(s) for table '%s' in %.3fs.",
                len(result.files),
                table_name,
                timer.elapsed,
            )
        return result

    # -----------------------------------------------------------------
    # Artifact assembly
    # -----------------------------------------------------------------

    def build_artifacts(
        self, schema: TableSchema, warnings: Optional[List[str]] = None
    ) -> List[Artifact]:
        """Render every artifact of *schema* without writing anything."""
        sink: List[str] = warnings if warnings is not None else []
        artifacts: List[Artifact] = [self.build_data_artifact(schema)]

        pk_artifact: Optional[Artifact] = self.build_pk_artifact(schema)
        if pk_artifact is not None:
            artifacts.append(pk_artifact)

        artifacts.extend(self.build_index_artifacts(schema, sink))
        artifacts.append(self.build_accessor_artifact(schema))
        return artifacts

    def _model_path(self, name: str) -> str:
        return f"{self._config.model_package_path}/{name}.{self._config.source_extension}"

    def _dao_path(self, name: str) -> str:
        return f"{self._config.dao_package_path}/{name}.{self._config.source_extension}"

    def _pojo_artifact(
        self, name: str, kind: ArtifactKind, columns: List[ColumnInfo]
    ) -> Artifact:
        content: str = self._templates.render(
            "pojo_class", pojo_values(self._config.model_package, name, columns)
        )
        return Artifact(name, kind, self._model_path(name), content)

    def build_data_artifact(self, schema: TableSchema) -> Artifact:
        return self._pojo_artifact(
            data_artifact_name(schema), ArtifactKind.DATA, list(schema.columns)
        )

    def build_pk_artifact(self, schema: TableSchema) -> Optional[Artifact]:
        if not schema.has_primary_key:
            return None
        return self._pojo_artifact(
            pk_artifact_name(schema), ArtifactKind.PRIMARY_KEY, schema.primary_key_columns
        )

    def build_index_artifacts(
        self, schema: TableSchema, warnings: List[str]
    ) -> List[Artifact]:
        artifacts: List[Artifact] = []
        for index in schema.indexes.values():
            columns: List[ColumnInfo] = self._index_columns(schema, index, warnings)
            if not columns:
                continue
            artifacts.append(
                self._pojo_artifact(
                    index_artifact_name(schema, index), ArtifactKind.INDEX, columns
                )
            )
        return artifacts

    def _index_columns(
        self, schema: TableSchema, index: IndexInfo, warnings: List[str]
    ) -> List[ColumnInfo]:
        columns: List[ColumnInfo] = schema.columns_for_index(index)
        if len(columns) != len(index.column_names):
            message: str = (
                f"Index '{index.index_name}' of table '{schema.table_name}' "
                f"references unknown columns; "
                + ("skipped." if not columns else "using the known ones only.")
            )
            if message not in warnings:
                logger.warning(message)
                warnings.append(message)
        return columns

    # -----------------------------------------------------------------
    # Accessor (DAO) assembly
    # -----------------------------------------------------------------

    def build_accessor_artifact(self, schema: TableSchema) -> Artifact:
        name: str = accessor_artifact_name(schema)
        methods: List[str] = [self._insert_method(schema)]

        if schema.has_primary_key:
            methods.append(self._update_method(schema))
            methods.append(self._delete_by_pk_method(schema))
            methods.append(self._get_by_pk_method(schema))

        for index in schema.indexes.values():
            if index.is_primary_index(schema.has_primary_key):
                continue
            columns: List[ColumnInfo] = schema.columns_for_index(index)
            if not columns:
                continue
            methods.extend(self._index_methods(schema, index, columns))

        content: str = self._templates.render(
            "dao_class",
            {
                "packageName": self._config.dao_package,
                "pojoPackage": self._config.model_package,
                "daoClassName": name,
                "tableName": schema.table_name,
                "configResource": escape_java_string(self._config.dao_config_resource),
                "extra_imports": dao_imports(schema.columns),
                "methods_block": "".join(methods),
                "map_row_method_block": self._map_row_method(schema),
            },
        )
        return Artifact(name, ArtifactKind.ACCESSOR, self._dao_path(name), content)

    def _sql(self, statement: str) -> str:
        return escape_java_string(statement)

    @property
    def _quote(self) -> str:
        return self._config.identifier_quote

    def _insert_method(self, schema: TableSchema) -> str:
        columns: List[ColumnInfo] = list(schema.columns)
        return self._templates.render(
            "dao_method_insert",
            {
                "tableName": schema.table_name,
                "dataPojoName": data_artifact_name(schema),
                "sqlQuery": self._sql(
                    insert_statement(
                        schema.table_name, [c.db_name for c in columns], self._quote
                    )
                ),
                "parameter_setting_block": parameter_setting_block(columns, DATA_VAR),
            },
        )

    def _update_method(self, schema: TableSchema) -> str:
        set_columns: List[ColumnInfo] = schema.non_key_columns
        key_columns: List[ColumnInfo] = schema.primary_key_columns
        if not set_columns:
            return update_skipped_comment(schema.table_name)

        return self._templates.render(
            "dao_method_update",
            {
                "tableName": schema.table_name,
                "dataPojoName": data_artifact_name(schema),
                "sqlQuery": self._sql(
                    update_statement(
                        schema.table_name,
                        [c.db_name for c in set_columns],
                        [c.db_name for c in key_columns],
                        self._quote,
                    )
                ),
                "parameter_setting_block": update_parameter_block(set_columns, key_columns),
            },
        )

    def _delete_by_pk_method(self, schema: TableSchema) -> str:
        key_columns: List[ColumnInfo] = schema.primary_key_columns
        return self._templates.render(
            "dao_method_delete_pk",
            {
                "tableName": schema.table_name,
                "pkPojoName": pk_artifact_name(schema),
                "sqlQuery": self._sql(
                    delete_statement(
                        schema.table_name, [c.db_name for c in key_columns], self._quote
                    )
                ),
                "parameter_setting_block": parameter_setting_block(key_columns, PK_VAR),
            },
        )

    def _get_by_pk_method(self, schema: TableSchema) -> str:
        key_columns: List[ColumnInfo] = schema.primary_key_columns
        return self._templates.render(
            "dao_method_get_pk",
            {
                "tableName": schema.table_name,
                "dataPojoName": data_artifact_name(schema),
                "pkPojoName": pk_artifact_name(schema),
                "sqlQuery": self._sql(
                    select_statement(
                        schema.table_name, [c.db_name for c in key_columns], self._quote
                    )
                ),
                "parameter_setting_block": parameter_setting_block(key_columns, PK_VAR),
                "mapRowMethodName": map_row_method_name(schema),
            },
        )

    def _index_methods(
        self, schema: TableSchema, index: IndexInfo, columns: List[ColumnInfo]
    ) -> List[str]:
        """``get`` / ``delete`` / ``exists`` methods for one secondary index."""
        column_names: List[str] = [c.db_name for c in columns]
        lookup_var: str = UNIQUE_VAR if index.is_unique else INDEX_VAR
        common: Dict[str, str] = {
            "tableName": schema.table_name,
            "dataPojoName": data_artifact_name(schema),
            "indexPojoName": index_artifact_name(schema, index),
            "indexColumnsList": index_columns_list(columns),
            "indexName": index.index_name,
            "mapRowMethodName": map_row_method_name(schema),
        }
        get_template: str = "dao_method_get_unique" if index.is_unique else "dao_method_get_index"
        delete_template: str = (
            "dao_method_delete_unique" if index.is_unique else "dao_method_delete_index"
        )

        get_method: str = self._templates.render(
            get_template,
            {
                **common,
                "methodName": f"get{index.name_method_suffix}",
                "sqlQuery": self._sql(
                    select_statement(schema.table_name, column_names, self._quote)
                ),
                "parameter_setting_block": parameter_setting_block(columns, lookup_var),
            },
        )
        delete_method: str = self._templates.render(
            delete_template,
            {
                **common,
                "methodName": f"delete{index.name_method_suffix}",
                "sqlQuery": self._sql(
                    delete_statement(schema.table_name, column_names, self._quote)
                ),
                "parameter_setting_block": parameter_setting_block(columns, lookup_var),
            },
        )
        exists_method: str = self._templates.render(
            "dao_method_exists_by_index",
            {
                **common,
                "methodName": f"exists{index.name_method_suffix}",
                "sqlQuery": self._sql(
                    exists_statement(schema.table_name, column_names, self._quote)
                ),
                "parameter_setting_block": parameter_setting_block(columns, INDEX_VAR),
            },
        )
        return [get_method, delete_method, exists_method]

    def _map_row_method(self, schema: TableSchema) -> str:
        return self._templates.render(
            "dao_method_map_row",
            {
                "dataPojoName": data_artifact_name(schema),
                "mapRowMethodName": map_row_method_name(schema),
                "resultSetMappingBlock": row_mapping_block(list(schema.columns), DATA_VAR),
            },
        )


# ---------------------------------------------------------------------------
# Derived artifact names
# ---------------------------------------------------------------------------


def data_artifact_name(schema: TableSchema) -> str:
    return f"{schema.class_name}Data"


def pk_artifact_name(schema: TableSchema) -> str:
    return f"{schema.class_name}PkData"


def index_artifact_name(schema: TableSchema, index: IndexInfo) -> str:
    return f"{schema.class_name}{index.kind}{index.name_pojo_suffix}Data"


def accessor_artifact_name(schema: TableSchema) -> str:
    return f"{schema.class_name}Dao"


def map_row_method_name(schema: TableSchema) -> str:
    return f"mapRowTo{data_artifact_name(schema)}"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TableStatus",
    "ArtifactKind",
    "Artifact",
    "TableResult",
    "GenerationReport",
    "DaoGenerator",
    "data_artifact_name",
    "pk_artifact_name",
    "index_artifact_name",
    "accessor_artifact_name",
    "map_row_method_name",
]

logger.debug("daogen.generator loaded.")
