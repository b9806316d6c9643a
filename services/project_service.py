"""
项目资产服务 (Project Service)
草稿、角色卡、章节大纲与场景的读写。
写入前统一校验数据形状，读取时把磁盘内容还原为 core.schemas 中的对象。
"""
from __future__ import annotations
import json
import logging
from typing import List

from core.exceptions import MetadataDecodeError, SchemaValidationError
from core.schemas import Character, ChapterOutline, SceneMetadata, Scene
from infra.storage import file_store
from infra.utils import front_matter
from infra.utils.identifiers import character_key, chapter_scene_prefix, scene_id

logger = logging.getLogger(__name__)

DRAFT_ID = "draft"
OUTLINE_ID = "chapters-outline"


def _load_json(text: str, source: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MetadataDecodeError(source, f"JSON 解析失败: {e}") from e

def _dump_json(data) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


class ProjectService:
    # --- 草稿 ---

    @staticmethod
    def write_draft(project_root: str, content: str):
        """保存草稿 (draft.md)"""
        file_store.write_blob(project_root, "drafts", DRAFT_ID, content)
        logger.info(f"草稿已保存 (字数: {len(content)})")

    @staticmethod
    def read_draft(project_root: str) -> str:
        return file_store.read_blob(project_root, "drafts", DRAFT_ID)

    # --- 角色卡 ---

    @staticmethod
    def write_character(project_root: str, character: Character) -> str:
        """
        保存角色卡，整体覆盖同一存储键下的旧数据。

        Returns:
            str: 角色的存储键。

        Raises:
            SchemaValidationError: 角色数据形状不正确。
        """
        character = character.validate()
        key = character_key(character.name)
        file_store.write_blob(project_root, "characters", key, _dump_json(character.to_dict()))
        logger.info(f"角色 '{character.name}' 已保存 (键: {key})")
        return key

    @staticmethod
    def read_character(project_root: str, name: str) -> Character:
        key = character_key(name)
        text = file_store.read_blob(project_root, "characters", key)
        return Character.from_dict(_load_json(text, f"characters/{key}"))

    @staticmethod
    def read_characters(project_root: str) -> List[Character]:
        """读取全部角色卡，按存储键排序"""
        return [
            Character.from_dict(_load_json(text, f"characters/{key}"))
            for key, text in file_store.list_entries(project_root, "characters")
        ]

    # --- 章节大纲 ---

    @staticmethod
    def write_chapter_outline(project_root: str, outlines: List[ChapterOutline]):
        """
        保存章节大纲，整个集合一次性替换。

        Raises:
            SchemaValidationError: 任一章节形状错误或章节号重复。
        """
        if not isinstance(outlines, list):
            raise SchemaValidationError("outlines", "应为章节大纲列表")
        validated = []
        seen = set()
        for outline in outlines:
            data = outline.to_dict() if isinstance(outline, ChapterOutline) else outline
            checked = ChapterOutline.from_dict(data)
            if checked.chapter_number in seen:
                raise SchemaValidationError("outline.chapter_number", f"章节号 {checked.chapter_number} 重复")
            seen.add(checked.chapter_number)
            validated.append(checked)

        payload = _dump_json([o.to_dict() for o in validated])
        file_store.write_blob(project_root, "outlines", OUTLINE_ID, payload)
        logger.info(f"章节大纲已保存 (共 {len(validated)} 章)")

    @staticmethod
    def read_chapter_outline(project_root: str) -> List[ChapterOutline]:
        text = file_store.read_blob(project_root, "outlines", OUTLINE_ID)
        data = _load_json(text, f"outlines/{OUTLINE_ID}")
        if not isinstance(data, list):
            raise SchemaValidationError("outlines", "应为章节大纲列表")
        return [ChapterOutline.from_dict(item) for item in data]

    # --- 场景 ---

    @staticmethod
    def write_scene(project_root: str, metadata: SceneMetadata, prose: str) -> str:
        """
        保存场景 (YAML 头 + 正文)，同一 (章, 场景) 会被覆盖。

        Returns:
            str: 场景存储 id。
        """
        data = metadata.to_dict() if isinstance(metadata, SceneMetadata) else metadata
        metadata = SceneMetadata.from_dict(data)
        if not isinstance(prose, str):
            raise SchemaValidationError("scene.prose", "应为字符串")

        item_id = scene_id(metadata.chapter, metadata.scene)
        file_store.write_blob(project_root, "scenes", item_id, front_matter.encode(prose, metadata.to_dict()))
        logger.info(f"场景 {item_id} 已保存")
        return item_id

    @staticmethod
    def read_scene(project_root: str, chapter: int, scene: int) -> Scene:
        item_id = scene_id(chapter, scene)
        return ProjectService._load_scene(project_root, item_id)

    @staticmethod
    def read_scenes(project_root: str, chapter: int) -> List[Scene]:
        """读取某一章的全部场景，按场景 id 排序"""
        prefix = chapter_scene_prefix(chapter)
        return [
            ProjectService._load_scene(project_root, item_id)
            for item_id in file_store.list_ids(project_root, "scenes")
            if item_id.startswith(prefix)
        ]

    @staticmethod
    def _load_scene(project_root: str, item_id: str) -> Scene:
        blob = file_store.read_blob(project_root, "scenes", item_id)
        metadata, prose = front_matter.decode(blob, source=f"scenes/{item_id}")
        return Scene(metadata=SceneMetadata.from_dict(metadata), prose=prose)
