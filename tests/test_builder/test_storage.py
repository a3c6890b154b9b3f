"""
Tests for build archive storage.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path

import pytest

from fhir_builder.builder.storage import BuildStore, is_valid_build_id


class TestBuildIdValidation:
    """Tests for is_valid_build_id."""

    @pytest.mark.parametrize(
        "build_id",
        ["4f5e2c1a-9b7d-4c3e-8a6f-1d2e3f4a5b6c", "abcdefghij", "build_0001"],
    )
    def test_valid(self, build_id: str):
        assert is_valid_build_id(build_id)

    @pytest.mark.parametrize(
        "build_id",
        [None, "", "short", "../../etc/passwd", "abc/def/ghi", "abcdefghij.zip"],
    )
    def test_invalid(self, build_id):
        assert not is_valid_build_id(build_id)

    def test_custom_min_length(self):
        assert is_valid_build_id("abc", min_length=3)


class TestBuildStore:
    """Tests for BuildStore."""

    def test_save_and_load(self, tmp_path: Path):
        store = BuildStore(tmp_path / "builds")

        path = store.save("build-00001", b"PK\x05\x06")

        assert path == tmp_path / "builds" / "build-00001.zip"
        assert store.load("build-00001") == b"PK\x05\x06"
        assert store.exists("build-00001")

    def test_save_leaves_no_temp_files(self, tmp_path: Path):
        store = BuildStore(tmp_path)
        store.save("build-00001", b"one")
        store.save("build-00001", b"two")

        assert [p.name for p in tmp_path.iterdir()] == ["build-00001.zip"]
        assert store.load("build-00001") == b"two"

    def test_load_missing(self, tmp_path: Path):
        assert BuildStore(tmp_path).load("build-00001") is None

    def test_delete(self, tmp_path: Path):
        store = BuildStore(tmp_path)
        store.save("build-00001", b"data")

        store.delete("build-00001")

        assert not store.exists("build-00001")

    def test_archives_ignore_scratch(self, tmp_path: Path):
        """Test scratch directories and other files are not listed."""
        store = BuildStore(tmp_path)
        store.save("build-00002", b"b")
        store.save("build-00001", b"a")
        store.scratch_dir("build-00003").mkdir()
        (tmp_path / "notes.txt").write_text("x")

        assert [p.name for p in store.archives()] == ["build-00001.zip", "build-00002.zip"]

    def test_archives_missing_directory(self, tmp_path: Path):
        assert BuildStore(tmp_path / "missing").archives() == []

    def test_remove_scratch(self, tmp_path: Path):
        store = BuildStore(tmp_path)
        scratch = store.scratch_dir("build-00001")
        (scratch / "src").mkdir(parents=True)
        (scratch / "src" / "server.js").write_text("x")

        store.remove_scratch("build-00001")
        store.remove_scratch("build-00001")

        assert not scratch.exists()

    def test_ensure_directory(self, tmp_path: Path):
        store = BuildStore(tmp_path / "a" / "b")

        store.ensure_directory()

        assert (tmp_path / "a" / "b").is_dir()

    def test_leftovers(self, tmp_path: Path):
        """Test scratch directories and partial writes are listed, archives are not."""
        store = BuildStore(tmp_path)
        store.save("build-00001", b"a")
        store.scratch_dir("build-00002").mkdir()
        (tmp_path / ".build-00003.k2j4h1.tmp").write_bytes(b"partial")
        (tmp_path / "notes.tmp").write_text("x")

        assert [p.name for p in store.leftovers()] == [
            ".build-00003.k2j4h1.tmp",
            "build-00002",
        ]

    def test_leftovers_missing_directory(self, tmp_path: Path):
        assert BuildStore(tmp_path / "missing").leftovers() == []

    def test_remove(self, tmp_path: Path):
        store = BuildStore(tmp_path)
        scratch = store.scratch_dir("build-00002")
        (scratch / "src").mkdir(parents=True)
        partial = tmp_path / ".build-00003.k2j4h1.tmp"
        partial.write_bytes(b"partial")

        store.remove(scratch)
        store.remove(partial)

        assert list(tmp_path.iterdir()) == []
