"""
Tests for chapter assembly.
"""
import os
import shutil

import pytest

from core.exceptions import MetadataDecodeError, ProjectNotFoundError
from infra.storage import file_store
from services.chapter_service import ChapterService


class TestAssemble:

    def test_two_scenes_joined_by_blank_line(self, project_root, write_scene):
        write_scene(1, 1, "A.")
        write_scene(1, 2, "B.")
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == "A.\n\nB."

    def test_order_independent_of_write_order(self, project_root, write_scene):
        for scene in (10, 3, 1, 2):
            write_scene(1, scene, f"Scene {scene}.")
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == (
            "Scene 1.\n\nScene 2.\n\nScene 3.\n\nScene 10."
        )

    def test_only_scenes_of_requested_chapter(self, project_root, write_scene):
        write_scene(1, 1, "One")
        write_scene(10, 1, "Ten")
        write_scene(2, 1, "Two")
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == "One"

    def test_surrounding_whitespace_trimmed(self, project_root, write_scene):
        write_scene(1, 1, "\n  First.\n")
        write_scene(1, 2, "Second.\n\n\n")
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == "First.\n\n\nSecond."

    def test_metadata_is_discarded(self, project_root, write_scene):
        write_scene(1, 1, "Body only.", characters=["Marie"], location="Library")
        ChapterService.assemble(project_root, 1)
        prose = ChapterService.read_chapter_prose(project_root, 1)
        assert prose == "Body only."
        assert "Library" not in prose

    def test_no_scenes_writes_empty_prose(self, project_root):
        ChapterService.assemble(project_root, 4)
        assert ChapterService.read_chapter_prose(project_root, 4) == ""

    def test_idempotent(self, project_root, write_scene):
        write_scene(1, 1, "A.")
        write_scene(1, 2, "B.")
        ChapterService.assemble(project_root, 1)
        first = ChapterService.read_chapter_prose(project_root, 1)
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == first

    def test_reassembly_reflects_scene_changes(self, project_root, write_scene):
        write_scene(1, 1, "Old.")
        ChapterService.assemble(project_root, 1)
        write_scene(1, 1, "New.")
        write_scene(1, 2, "Added.")
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == "New.\n\nAdded."

    def test_blob_without_header_uses_whole_text(self, project_root, write_raw_scene):
        write_raw_scene("ch01-scene01", "Hand written scene.")
        ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == "Hand written scene."

    def test_missing_scenes_collection(self, project_root):
        shutil.rmtree(os.path.join(project_root, "scenes"))
        with pytest.raises(ProjectNotFoundError):
            ChapterService.assemble(project_root, 1)

    def test_malformed_scene_aborts_without_writing(self, project_root, write_scene, write_raw_scene):
        write_scene(1, 1, "Good.")
        write_raw_scene("ch01-scene02", "---\ncharacters: [broken\n---\nBad.")
        with pytest.raises(MetadataDecodeError) as exc_info:
            ChapterService.assemble(project_root, 1)
        assert "ch01-scene02" in str(exc_info.value)
        assert file_store.list_ids(project_root, "chapters") == []

    def test_malformed_scene_keeps_previous_artifact(self, project_root, write_scene, write_raw_scene):
        write_scene(1, 1, "Good.")
        ChapterService.assemble(project_root, 1)
        write_raw_scene("ch01-scene02", "---\nunterminated: true\n")
        with pytest.raises(MetadataDecodeError):
            ChapterService.assemble(project_root, 1)
        assert ChapterService.read_chapter_prose(project_root, 1) == "Good."


class TestReadChapterProse:

    def test_never_assembled(self, project_root):
        with pytest.raises(ProjectNotFoundError):
            ChapterService.read_chapter_prose(project_root, 1)

    def test_uninitialized_project(self, tmp_path):
        with pytest.raises(ProjectNotFoundError):
            ChapterService.read_chapter_prose(str(tmp_path / "missing"), 1)


class TestAssembleEncoding:

    def test_non_utf8_scene_aborts_with_decode_error(self, project_root, write_scene, write_scene_bytes):
        write_scene(1, 1, "Good.")
        write_scene_bytes("ch01-scene02", b"\xff\xfe")
        with pytest.raises(MetadataDecodeError) as exc_info:
            ChapterService.assemble(project_root, 1)
        assert "scenes/ch01-scene02" in str(exc_info.value)
        assert file_store.list_ids(project_root, "chapters") == []
