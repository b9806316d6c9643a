"""
章节组装服务 (Chapter Service)
把一章的全部场景正文按顺序拼接为章节正文并落盘。
章节正文是派生产物，场景才是唯一事实来源，每次组装都从磁盘重新读取。
"""
from __future__ import annotations
import logging

from infra.storage import file_store
from infra.utils import front_matter
from infra.utils.identifiers import chapter_id, chapter_scene_prefix

logger = logging.getLogger(__name__)

SCENE_SEPARATOR = "\n\n"

class ChapterService:
    @staticmethod
    def assemble(project_root: str, chapter_number: int):
        """
        组装章节正文并覆盖写入 chapters/chapter-NN.md。

        场景按 id 字典序排列 (两位补零时即数字序)。任一场景解析失败则整体失败，
        不会写出缺少场景的章节。没有场景时写入空正文。

        Raises:
            ProjectNotFoundError: 场景集合不存在。
            MetadataDecodeError: 某个场景的 YAML 头无法解析。
        """
        prefix = chapter_scene_prefix(chapter_number)
        scene_ids = sorted(
            item_id for item_id in file_store.list_ids(project_root, "scenes")
            if item_id.startswith(prefix)
        )

        full_prose = ""
        for item_id in scene_ids:
            blob = file_store.read_blob(project_root, "scenes", item_id)
            _, body = front_matter.decode(blob, source=f"scenes/{item_id}")
            full_prose += body + SCENE_SEPARATOR

        file_store.write_blob(project_root, "chapters", chapter_id(chapter_number), full_prose.strip())
        logger.info(f"第 {chapter_number} 章已组装 (场景数: {len(scene_ids)})")

    @staticmethod
    def read_chapter_prose(project_root: str, chapter_number: int) -> str:
        """
        读取已组装的章节正文。

        Raises:
            ProjectNotFoundError: 该章从未组装过。
        """
        return file_store.read_blob(project_root, "chapters", chapter_id(chapter_number))
