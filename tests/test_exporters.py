"""
tests/test_exporters.py
Unit tests for daogen.exporters (ArtifactWriter) and daogen.utils.
"""

from __future__ import annotations

import hashlib
import pathlib

import pytest

from daogen.errors import OutputWriteError
from daogen.exporters import ArtifactWriter
from daogen.utils import Timer, clean_directory, count_lines, sha256_hex


SOURCE: str = "package com.shop.model;\n\npublic class CustomerData {\n}\n"


class TestArtifactWriter:
    def test_write_creates_file_and_record(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path / "out")
        record = writer.write("com/shop/model/CustomerData.java", SOURCE)

        target = tmp_path / "out" / "com" / "shop" / "model" / "CustomerData.java"
        assert target.read_text(encoding="utf-8") == SOURCE
        assert record.relative_path == "com/shop/model/CustomerData.java"
        assert record.absolute_path == str(target.resolve())
        assert record.size_bytes == len(SOURCE.encode("utf-8"))
        assert record.line_count == 4
        assert record.sha256 == hashlib.sha256(SOURCE.encode("utf-8")).hexdigest()
        assert record.written

    def test_overwrites_and_leaves_no_temp_files(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path)
        writer.write("A.java", "old")
        writer.write("A.java", "new")

        assert (tmp_path / "A.java").read_text(encoding="utf-8") == "new"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["A.java"]

    def test_non_atomic_mode(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path, atomic_writes=False)
        writer.write("B.java", SOURCE)
        assert (tmp_path / "B.java").read_text(encoding="utf-8") == SOURCE

    def test_dry_run_writes_nothing(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path / "out", dry_run=True)
        assert writer.prepare(["com/shop/model"]) == []
        record = writer.write("com/shop/model/CustomerData.java", SOURCE)

        assert not (tmp_path / "out").exists()
        assert record.written is False
        assert record.line_count == 4

    def test_write_failure_raises(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "blocker").write_text("a file, not a directory", encoding="utf-8")
        writer = ArtifactWriter(tmp_path)
        with pytest.raises(OutputWriteError):
            writer.write("blocker/Customer.java", SOURCE)

    def test_prepare_creates_package_dirs(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path)
        writer.prepare(["com/shop/model", "com/shop/dao"])
        assert (tmp_path / "com" / "shop" / "model").is_dir()
        assert (tmp_path / "com" / "shop" / "dao").is_dir()

    def test_prepare_failure_raises(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "com").write_text("not a directory", encoding="utf-8")
        with pytest.raises(OutputWriteError):
            ArtifactWriter(tmp_path).prepare(["com/shop/model"])

    def test_prepare_clean(self, tmp_path: pathlib.Path) -> None:
        model_dir = tmp_path / "com" / "shop" / "model"
        (model_dir / "nested").mkdir(parents=True)
        (model_dir / "Old.java").write_text("x", encoding="utf-8")
        (model_dir / ".gitkeep").write_text("", encoding="utf-8")

        ArtifactWriter(tmp_path).prepare(["com/shop/model"], clean=True)
        assert sorted(p.name for p in model_dir.iterdir()) == [".gitkeep"]

    def test_manifest_totals(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter(tmp_path)
        writer.write("A.java", "a\nb\n")
        writer.write("B.java", "c")

        manifest = writer.manifest
        assert manifest.total_files == 2
        assert manifest.total_lines == 3
        assert manifest.total_bytes == 5
        assert manifest.output_directory == str(tmp_path.resolve())


class TestUtils:
    @pytest.mark.parametrize(
        "content, expected",
        [("", 0), ("one", 1), ("one\n", 1), ("one\ntwo", 2), ("\n\n", 2)],
    )
    def test_count_lines(self, content: str, expected: int) -> None:
        assert count_lines(content) == expected

    def test_sha256_hex(self) -> None:
        assert sha256_hex("abc") == hashlib.sha256(b"abc").hexdigest()

    def test_clean_directory_missing_path(self, tmp_path: pathlib.Path) -> None:
        assert clean_directory(tmp_path / "nope") == []

    def test_timer(self) -> None:
        with Timer("work") as timer:
            sum(range(1000))
        assert timer.elapsed >= 0.0
        assert "work" in repr(timer)
