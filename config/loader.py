"""
配置加载 (Config Loader)
读取 config.yaml 并与内置默认值深度合并。
配置文件路径可通过环境变量 STORYDESK_CONFIG 指定。
"""
import copy
import os
import logging
from typing import Any, Optional

import yaml

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STORYDESK_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"

DEFAULT_CONFIG = {
    "sync": {
        "min_mentions": 2,
        "default_role": "secondary",
        "placeholder_background": "To be defined.",
    },
    "logging": {
        "level": "INFO",
        "dir": "logs",
    },
}


def get_config_path() -> str:
    return os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)

def _merge_configs(base_config: dict, user_config: dict) -> dict:
    """
    合并基础配置和用户配置。
    嵌套字典逐层合并，其余值由用户配置覆盖。
    """
    merged_config = copy.deepcopy(base_config)
    for key, value in user_config.items():
        if isinstance(value, dict) and isinstance(merged_config.get(key), dict):
            merged_config[key] = _merge_configs(merged_config[key], value)
        else:
            merged_config[key] = value
    return merged_config

def load_config(path: Optional[str] = None) -> dict:
    """
    加载并解析配置文件，与默认配置合并。
    文件不存在时直接返回默认配置。

    Raises:
        ConfigurationError: 文件无法解析或顶层不是映射。
    """
    path = path or get_config_path()
    if not os.path.exists(path):
        logger.debug(f"配置文件 {path} 未找到，使用默认配置。")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"解析 {path} 文件失败: {e}", exc_info=True)
        raise ConfigurationError(f"错误: 解析 {path} 文件失败: {e}") from e

    if user_config is None:
        user_config = {}
    if not isinstance(user_config, dict):
        raise ConfigurationError(f"错误: {path} 的顶层应为映射")

    return _merge_configs(DEFAULT_CONFIG, user_config)

def get_setting(config: dict, dotted_key: str, default: Any = None) -> Any:
    """按 'a.b.c' 形式读取嵌套配置项"""
    node: Any = config
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node
