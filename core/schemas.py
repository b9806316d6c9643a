"""
业务对象定义 (Schemas)
定义角色、章节大纲、场景等强类型数据结构。
所有从磁盘或调用方传入的字典都必须先经过 from_dict 校验，
形状不符时抛出 SchemaValidationError，而不是带着脏数据继续运行。
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

from core.exceptions import SchemaValidationError


class Role(str, Enum):
    """角色定位"""
    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    SECONDARY = "secondary"
    EXTRA = "extra"


# --- 校验辅助函数 ---

def _require_mapping(data: Any, name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SchemaValidationError(name, f"应为对象, 实际为 {type(data).__name__}")
    return data

def _require_str(data: Dict[str, Any], key: str, prefix: str, allow_empty: bool = True) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise SchemaValidationError(f"{prefix}.{key}", "应为字符串")
    if not allow_empty and not value.strip():
        raise SchemaValidationError(f"{prefix}.{key}", "不能为空")
    return value

def _require_int(data: Dict[str, Any], key: str, prefix: str, minimum: Optional[int] = None) -> int:
    value = data.get(key)
    # bool 是 int 的子类，需要排除
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaValidationError(f"{prefix}.{key}", "应为整数")
    if minimum is not None and value < minimum:
        raise SchemaValidationError(f"{prefix}.{key}", f"不能小于 {minimum}")
    return value

def _require_str_list(data: Dict[str, Any], key: str, prefix: str) -> List[str]:
    value = data.get(key)
    if not is_str_list(value):
        raise SchemaValidationError(f"{prefix}.{key}", "应为字符串列表")
    return list(value)

def is_str_list(value: Any) -> bool:
    """判断是否为字符串列表"""
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


@dataclass
class CharacterArc:
    """角色弧光: 起点状态 -> 终点状态"""
    start: str
    end: str

    @classmethod
    def from_dict(cls, data: Any) -> CharacterArc:
        data = _require_mapping(data, "character.arc")
        return cls(
            start=_require_str(data, "start", "character.arc"),
            end=_require_str(data, "end", "character.arc"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}


@dataclass
class Character:
    """
    角色卡。
    name 是唯一标识，经过规范化后作为存储键 (见 infra.utils.identifiers.character_key)。
    """
    name: str
    role: Role
    background: str = ""
    personality: List[str] = field(default_factory=list)
    age: Optional[int] = None
    relationships: Optional[Dict[str, str]] = None
    arc: Optional[CharacterArc] = None

    @classmethod
    def from_dict(cls, data: Any) -> Character:
        data = _require_mapping(data, "character")
        name = _require_str(data, "name", "character", allow_empty=False)

        role_value = data.get("role")
        try:
            role = Role(role_value)
        except ValueError:
            allowed = ", ".join(r.value for r in Role)
            raise SchemaValidationError("character.role", f"'{role_value}' 不在 {allowed} 之中")

        age = None
        if data.get("age") is not None:
            age = _require_int(data, "age", "character", minimum=0)

        relationships = data.get("relationships")
        if relationships is not None:
            if not isinstance(relationships, dict) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in relationships.items()
            ):
                raise SchemaValidationError("character.relationships", "应为 标签 -> 角色名 的字符串映射")
            relationships = dict(relationships)

        arc = None
        if data.get("arc") is not None:
            arc = CharacterArc.from_dict(data["arc"])

        return cls(
            name=name,
            role=role,
            background=_require_str(data, "background", "character"),
            personality=_require_str_list(data, "personality", "character"),
            age=age,
            relationships=relationships,
            arc=arc,
        )

    def validate(self) -> Character:
        """对直接构造的实例做一次完整校验"""
        return Character.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "role": self.role.value if isinstance(self.role, Role) else self.role,
        }
        if self.age is not None:
            data["age"] = self.age
        data["background"] = self.background
        data["personality"] = list(self.personality) if isinstance(self.personality, list) else self.personality
        if self.relationships is not None:
            data["relationships"] = self.relationships
        if self.arc is not None:
            data["arc"] = self.arc.to_dict() if isinstance(self.arc, CharacterArc) else self.arc
        return data


@dataclass
class ChapterOutline:
    """章节大纲"""
    chapter_number: int
    title: str
    summary: str = ""
    key_events: List[str] = field(default_factory=list)
    characters_involved: List[str] = field(default_factory=list)
    target_scenes: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ChapterOutline:
        data = _require_mapping(data, "outline")
        return cls(
            chapter_number=_require_int(data, "chapter_number", "outline", minimum=1),
            title=_require_str(data, "title", "outline"),
            summary=_require_str(data, "summary", "outline"),
            key_events=_require_str_list(data, "key_events", "outline"),
            characters_involved=_require_str_list(data, "characters_involved", "outline"),
            target_scenes=_require_int(data, "target_scenes", "outline", minimum=0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chapter_number": self.chapter_number,
            "title": self.title,
            "summary": self.summary,
            "key_events": list(self.key_events),
            "characters_involved": list(self.characters_involved),
            "target_scenes": self.target_scenes,
        }


@dataclass
class SceneMetadata:
    """场景元数据，(chapter, scene) 组合唯一"""
    chapter: int
    scene: int
    characters: List[str] = field(default_factory=list)
    location: str = ""
    mood: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> SceneMetadata:
        data = _require_mapping(data, "scene")
        return cls(
            chapter=_require_int(data, "chapter", "scene", minimum=1),
            scene=_require_int(data, "scene", "scene", minimum=1),
            characters=_require_str_list(data, "characters", "scene"),
            location=_require_str(data, "location", "scene"),
            mood=_require_str(data, "mood", "scene"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chapter": self.chapter,
            "scene": self.scene,
            "characters": list(self.characters),
            "location": self.location,
            "mood": self.mood,
        }


@dataclass
class Scene:
    """场景 = 元数据 + 正文"""
    metadata: SceneMetadata
    prose: str


@dataclass
class BookConfig:
    """书籍基础信息，写入项目元数据文件"""
    title: str
    author: str = ""
    style_guide: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "author": self.author, "style_guide": self.style_guide}
