"""
元数据编解码 (Front Matter Codec)
场景文件采用 Markdown + YAML 头的格式:

    ---
    chapter: 1
    scene: 2
    ---
    正文...

encode 与 decode 互为逆运算，正文保持逐字节不变。
"""
import re
import logging
from typing import Any, Dict, Tuple

import yaml

from core.exceptions import MetadataDecodeError

logger = logging.getLogger(__name__)

_OPENING = re.compile(r"\A---[ \t]*\r?\n")
_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.S | re.M)


class _FrontMatterLoader(yaml.SafeLoader):
    """只把 true/false 解析为布尔值，yes/no/on/off 保持为字符串 (YAML 1.2 语义)"""
    pass

_FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_FrontMatterLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def encode(body: str, metadata: Dict[str, Any]) -> str:
    """将正文与元数据序列化为单个文本"""
    header = yaml.safe_dump(metadata, allow_unicode=True, sort_keys=False, default_flow_style=False)
    return f"---\n{header}---\n{body}"

def decode(blob: str, source: str = "<text>") -> Tuple[Dict[str, Any], str]:
    """
    解析文本为 (元数据, 正文)。

    Args:
        blob (str): 原始文本。
        source (str): 文本来源描述，仅用于错误信息。

    Returns:
        Tuple[dict, str]: 没有 YAML 头的文本返回 ({}, 原文)。

    Raises:
        MetadataDecodeError: YAML 头未闭合、YAML 语法错误或头部不是映射。
    """
    if not _OPENING.match(blob):
        return {}, blob

    match = _FRONT_MATTER.match(blob)
    if not match:
        raise MetadataDecodeError(source, "YAML 头缺少结束分隔符 '---'")

    try:
        metadata = yaml.load(match.group(1), Loader=_FrontMatterLoader)
    except yaml.YAMLError as e:
        raise MetadataDecodeError(source, f"YAML 语法错误: {e}") from e

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MetadataDecodeError(source, f"YAML 头应为映射, 实际为 {type(metadata).__name__}")

    return metadata, blob[match.end():]
