"""
演示入口
创建一个示例书籍项目，依次写入草稿、角色、大纲与场景，
组装第 1 章并自动同步角色卡。

用法: python app.py [项目目录]
"""
import sys
import logging

from config import load_environment
from config.loader import get_setting, load_config
from core import logger as logger_config
from core.exceptions import StoryDeskError
from core.project_manager import ProjectManager
from core.schemas import BookConfig, Character, CharacterArc, ChapterOutline, Role, SceneMetadata
from services.project_service import ProjectService
from services.chapter_service import ChapterService
from services.character_sync import CharacterSyncService

# --- 初始化 ---
load_environment()
app_logger = logging.getLogger(__name__)

DEFAULT_PROJECT_DIR = "my-test-book"


def run_demo(project_root: str, full_config: dict) -> list:
    """运行完整演示流程，返回自动创建的角色名"""
    ProjectManager.init_project_structure(project_root, BookConfig(
        title="My Great Book",
        author="StoryDesk",
        style_guide="Third person, past tense.",
    ))

    # 1. 草稿
    ProjectService.write_draft(
        project_root,
        "# My Great Book\n\nSynopsis: an epic quest to find an ancient artifact.",
    )

    # 2. 角色
    ProjectService.write_character(project_root, Character(
        name="Marie Dubois",
        role=Role.PROTAGONIST,
        age=28,
        background="Parisian archaeologist",
        personality=["curious", "determined", "impulsive"],
        relationships={"mentor": "Professor Laurent"},
        arc=CharacterArc(start="naive and trusting", end="experienced and wary"),
    ))
    ProjectService.write_character(project_root, Character(
        name="Professor Laurent",
        role=Role.SECONDARY,
        age=55,
        background="Historian and Marie's mentor",
        personality=["wise", "cautious"],
    ))

    # 3. 大纲
    ProjectService.write_chapter_outline(project_root, [
        ChapterOutline(
            chapter_number=1,
            title="The Adventure Begins",
            summary="Marie uncovers an ancient mystery...",
            key_events=["discovery of the manuscript", "first meeting"],
            characters_involved=["Marie Dubois", "Professor Laurent"],
            target_scenes=2,
        ),
    ])

    # 4. 场景
    ProjectService.write_scene(
        project_root,
        SceneMetadata(chapter=1, scene=1, characters=["Marie Dubois", "Theo"], location="Library", mood="mysterious"),
        "Marie was combing through the dusty archives when suddenly...",
    )
    ProjectService.write_scene(
        project_root,
        SceneMetadata(chapter=1, scene=2, characters=["Marie Dubois", "Professor Laurent", "Theo"],
                      location="The professor's office", mood="revelation"),
        "Professor Laurent examined the manuscript carefully.",
    )

    # 5. 组装章节
    ChapterService.assemble(project_root, 1)
    print("--- Chapter 1 ---")
    print(ChapterService.read_chapter_prose(project_root, 1))

    # 6. 同步角色
    return CharacterSyncService.sync(project_root, full_config=full_config)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    project_root = argv[0] if argv else DEFAULT_PROJECT_DIR

    full_config = load_config()
    logger_config.setup_logging(
        log_dir=get_setting(full_config, "logging.dir"),
        level=get_setting(full_config, "logging.level"),
    )

    try:
        new_characters = run_demo(project_root, full_config)
    except StoryDeskError as e:
        app_logger.error(f"演示失败: {e}", exc_info=True)
        return 1

    if new_characters:
        print(f"New characters created automatically: {', '.join(new_characters)}")
    else:
        print("No new recurring characters found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
