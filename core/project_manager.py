"""
项目核心管理模块 (Core Project Manager)
负责书籍项目的目录结构初始化与元数据读取，采用基于文件夹的项目结构。
"""
import os
import json
import logging
from datetime import datetime

from core.exceptions import MetadataDecodeError, ProjectNotFoundError
from core.schemas import BookConfig

logger = logging.getLogger(__name__)

META_FILE_NAME = "project.storydesk"
PROJECT_SUBDIRS = ("characters", "outline", "scenes", "chapters", "output")

class ProjectManager:
    """
    统一管理书籍项目的目录布局。
    """

    @staticmethod
    def init_project_structure(project_root: str, book_config: BookConfig) -> str:
        """
        在指定路径初始化一个新的项目结构。已存在的目录与文件会被保留，
        元数据文件仅在不存在时创建。

        Args:
            project_root (str): 项目根目录路径。
            book_config (BookConfig): 书名、作者与风格说明。

        Returns:
            str: 元数据文件路径。
        """
        os.makedirs(project_root, exist_ok=True)

        # 1. 创建子目录
        for subdir in PROJECT_SUBDIRS:
            os.makedirs(os.path.join(project_root, subdir), exist_ok=True)

        # 2. 创建元数据文件
        meta_path = os.path.join(project_root, META_FILE_NAME)
        if not os.path.exists(meta_path):
            metadata = {
                **book_config.to_dict(),
                "created_at": datetime.now().isoformat(),
                "version": "1.0",
                "format": "folder_based"
            }
            with open(meta_path, 'w', encoding='utf-8') as f:
                json.dump(metadata, f, ensure_ascii=False, indent=2)

        logger.info(f"项目 '{book_config.title}' 已在 '{project_root}' 初始化。")
        return meta_path

    @staticmethod
    def is_valid_project(project_root: str) -> bool:
        """检查指定目录是否是一个有效的项目"""
        if not os.path.exists(project_root): return False
        meta_path = os.path.join(project_root, META_FILE_NAME)
        return os.path.exists(meta_path)

    @staticmethod
    def load_project_meta(project_root: str) -> dict:
        """加载项目元数据"""
        meta_path = os.path.join(project_root, META_FILE_NAME)
        try:
            with open(meta_path, 'r', encoding='utf-8') as f:
                meta = json.load(f)
        except FileNotFoundError as e:
            raise ProjectNotFoundError(f"项目元数据 ({meta_path})") from e
        except json.JSONDecodeError as e:
            raise MetadataDecodeError(meta_path, str(e)) from e
        if not isinstance(meta, dict):
            raise MetadataDecodeError(meta_path, "元数据应为 JSON 对象")
        return meta
