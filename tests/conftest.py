"""
Pytest configuration and shared fixtures for StoryDesk tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.loader import DEFAULT_CONFIG
from core.project_manager import ProjectManager
from core.schemas import BookConfig, SceneMetadata
from infra.storage import file_store
from services.project_service import ProjectService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config loader at a file that does not exist so defaults apply."""
    monkeypatch.setenv("STORYDESK_CONFIG", str(tmp_path / "no-config.yaml"))


@pytest.fixture
def default_config():
    import copy
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def project_root(tmp_path) -> str:
    """An initialized, empty book project."""
    root = tmp_path / "book"
    ProjectManager.init_project_structure(str(root), BookConfig(title="Test Book", author="Tester"))
    return str(root)


@pytest.fixture
def write_scene(project_root):
    """Write a scene with sensible defaults for the fields a test does not care about."""
    def _write(chapter, scene, prose, characters=None, location="Somewhere", mood="calm"):
        metadata = SceneMetadata(
            chapter=chapter,
            scene=scene,
            characters=list(characters or []),
            location=location,
            mood=mood,
        )
        return ProjectService.write_scene(project_root, metadata, prose)
    return _write


@pytest.fixture
def write_raw_scene(project_root):
    """Write an arbitrary blob straight into the scenes collection."""
    def _write(item_id, text):
        file_store.write_blob(project_root, "scenes", item_id, text)
    return _write


@pytest.fixture
def write_scene_bytes(project_root):
    """Write raw bytes as a scene file, bypassing text encoding."""
    def _write(item_id, data):
        path = Path(project_root) / "scenes" / f"{item_id}.md"
        path.write_bytes(data)
    return _write
