"""
标识符构造 (Identifiers)
场景、章节、角色在存储中的键全部由这里生成。
章节组装依赖场景 id 的字典序等于数字序，这一前提只在两位补零时成立，
章节号或场景号达到 100 后排序会出错。
"""
import re

from core.exceptions import SchemaValidationError

_WHITESPACE_RUN = re.compile(r"\s+")


def _pad(number: int) -> str:
    return str(number).zfill(2)

def scene_id(chapter: int, scene: int) -> str:
    """场景存储 id，如 ch01-scene02"""
    return f"ch{_pad(chapter)}-scene{_pad(scene)}"

def chapter_scene_prefix(chapter: int) -> str:
    """某一章全部场景 id 的公共前缀，如 ch01-"""
    return f"ch{_pad(chapter)}-"

def chapter_id(chapter: int) -> str:
    """章节正文产物的存储 id，如 chapter-01"""
    return f"chapter-{_pad(chapter)}"

def character_key(name: str) -> str:
    """
    角色存储键: 小写，连续空白折叠为单个连字符。
    首尾空白先被去掉，因此 " Marco" 的键是 marco 而不是 -marco。

    Raises:
        SchemaValidationError: 规范化后为空，或包含路径分隔符。
    """
    if not isinstance(name, str):
        raise SchemaValidationError("character.name", "应为字符串")
    key = _WHITESPACE_RUN.sub("-", name.strip().lower())
    if not key:
        raise SchemaValidationError("character.name", "规范化后为空")
    if "/" in key or "\\" in key or key in (".", ".."):
        raise SchemaValidationError("character.name", f"'{name}' 不能作为存储键")
    return key
