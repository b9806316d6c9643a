"""
角色同步服务 (Character Sync Service)
扫描全部场景元数据中的角色名，出现次数达到阈值且尚无角色卡的，自动建卡。
统计按原始字符串精确计数，不做大小写或空白归一；
“是否已存在”只对照本次同步开始前已有的角色卡。
"""
from __future__ import annotations
import logging
from collections import Counter
from typing import List, Optional

from config.loader import get_setting, load_config
from core.exceptions import ConfigurationError, MetadataDecodeError, SchemaValidationError
from core.schemas import Character, Role, is_str_list
from infra.storage import file_store
from infra.utils import front_matter
from infra.utils.identifiers import character_key
from services.project_service import ProjectService

logger = logging.getLogger(__name__)

class CharacterSyncService:
    @staticmethod
    def count_mentions(project_root: str) -> Counter:
        """
        统计整个项目中每个角色名在场景元数据里出现的次数。
        文件不是 UTF-8、YAML 头损坏、缺少 characters 字段或字段不是字符串列表的场景计 0 次并跳过。

        Returns:
            Counter: 角色名 -> 次数，保持首次出现的顺序。
        """
        mentions: Counter = Counter()
        for item_id in file_store.list_ids(project_root, "scenes"):
            try:
                blob = file_store.read_blob(project_root, "scenes", item_id)
                metadata, _ = front_matter.decode(blob, source=f"scenes/{item_id}")
            except MetadataDecodeError as e:
                logger.warning(f"跳过无法解析的场景: {e}")
                continue

            names = metadata.get("characters")
            if names is None:
                logger.debug(f"场景 {item_id} 未列出角色，跳过")
                continue
            if not is_str_list(names):
                logger.warning(f"场景 {item_id} 的 characters 字段不是字符串列表，跳过")
                continue

            for name in names:
                mentions[name] += 1
        return mentions

    @staticmethod
    def sync(project_root: str, min_mentions: Optional[int] = None, full_config: Optional[dict] = None) -> List[str]:
        """
        根据场景中的角色出现次数自动创建角色卡。

        Args:
            project_root (str): 项目根目录。
            min_mentions (int, optional): 建卡阈值，默认取配置 sync.min_mentions。
                小于等于 0 时为每个出现过的名字建卡。
            full_config (dict, optional): 全局配置，缺省时从配置文件加载。

        Returns:
            List[str]: 按创建顺序排列的新角色名。

        Raises:
            ProjectNotFoundError: 场景或角色集合不存在。
            ConfigurationError: 配置中的阈值或默认角色定位无效。
        """
        config = full_config if full_config is not None else load_config()
        if min_mentions is None:
            min_mentions = get_setting(config, "sync.min_mentions", 2)
            if isinstance(min_mentions, bool) or not isinstance(min_mentions, int):
                raise ConfigurationError(f"错误: sync.min_mentions 的值 '{min_mentions}' 应为整数")
        role_value = get_setting(config, "sync.default_role", Role.SECONDARY.value)
        try:
            role = Role(role_value)
        except ValueError as e:
            raise ConfigurationError(f"错误: sync.default_role 的值 '{role_value}' 不是有效的角色定位") from e
        placeholder = get_setting(config, "sync.placeholder_background", "To be defined.")

        mentions = CharacterSyncService.count_mentions(project_root)
        known_keys = set(file_store.list_ids(project_root, "characters"))

        new_characters: List[str] = []
        for name, count in mentions.items():
            if count < min_mentions:
                continue
            try:
                key = character_key(name)
            except SchemaValidationError as e:
                logger.warning(f"角色名 '{name}' 无法生成存储键，跳过: {e}")
                continue
            if key in known_keys:
                continue

            # 同一键的多个拼写都达到阈值时，后写入者覆盖前者
            ProjectService.write_character(project_root, Character(
                name=name,
                role=role,
                background=placeholder,
                personality=[],
            ))
            new_characters.append(name)

        if new_characters:
            logger.info(f"自动创建角色 {len(new_characters)} 个: {', '.join(new_characters)}")
        else:
            logger.info("没有达到阈值的新角色。")
        return new_characters
