"""
End-to-end run of the demo workflow.
"""
import logging

import pytest

import app
from services.chapter_service import ChapterService
from services.project_service import ProjectService


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestDemo:

    def test_main_runs_full_workflow(self, tmp_path, monkeypatch, capsys, restore_root_logger):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(f"logging:\n  dir: {tmp_path / 'logs'}\n", encoding="utf-8")
        monkeypatch.setenv("STORYDESK_CONFIG", str(config_path))
        project_root = str(tmp_path / "demo-book")

        assert app.main([project_root]) == 0

        out = capsys.readouterr().out
        assert "New characters created automatically: Theo" in out
        assert ChapterService.read_chapter_prose(project_root, 1) == (
            "Marie was combing through the dusty archives when suddenly...\n\n"
            "Professor Laurent examined the manuscript carefully."
        )
        names = sorted(c.name for c in ProjectService.read_characters(project_root))
        assert names == ["Marie Dubois", "Professor Laurent", "Theo"]
        assert (tmp_path / "logs" / "app.log").exists()
