"""
文件存储 (File Store)
以 (项目根目录, 集合, 条目 id) 为键读写纯文本文件。
每个集合是一个扁平命名空间，对应项目下的一个目录和一种扩展名。
"""
import os
import logging
from typing import Dict, List, Tuple

from core.exceptions import MetadataDecodeError, ProjectNotFoundError, SchemaValidationError, StorageError

logger = logging.getLogger(__name__)

# 集合名 -> (相对项目根目录的子目录, 扩展名)
COLLECTIONS: Dict[str, Tuple[str, str]] = {
    "drafts": ("", ".md"),
    "characters": ("characters", ".json"),
    "outlines": ("outline", ".json"),
    "scenes": ("scenes", ".md"),
    "chapters": ("chapters", ".md"),
}


def get_collection_dir(project_root: str, collection: str) -> str:
    """获取集合所在目录"""
    if collection not in COLLECTIONS:
        raise SchemaValidationError("collection", f"未知集合 '{collection}'")
    subdir, _ = COLLECTIONS[collection]
    return os.path.join(project_root, subdir) if subdir else project_root

def get_blob_path(project_root: str, collection: str, item_id: str) -> str:
    """获取条目文件路径"""
    if not item_id or os.sep in item_id or "/" in item_id:
        raise SchemaValidationError("item_id", f"非法的条目 id '{item_id}'")
    _, ext = COLLECTIONS.get(collection, ("", ""))
    return os.path.join(get_collection_dir(project_root, collection), f"{item_id}{ext}")

def read_blob(project_root: str, collection: str, item_id: str) -> str:
    """
    读取一个条目。

    Raises:
        ProjectNotFoundError: 文件不存在。
        MetadataDecodeError: 文件不是合法的 UTF-8 文本。
        StorageError: 其他 I/O 错误。
    """
    path = get_blob_path(project_root, collection, item_id)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError as e:
        raise ProjectNotFoundError(f"{collection}/{item_id} ({path})") from e
    except UnicodeDecodeError as e:
        raise MetadataDecodeError(f"{collection}/{item_id}", f"不是合法的 UTF-8 文本: {e}") from e
    except OSError as e:
        logger.error(f"读取 {path} 失败: {e}")
        raise StorageError(f"{collection}/{item_id} ({path})", str(e)) from e
    logger.debug(f"已读取 {collection}/{item_id}: {path}")
    return content

def write_blob(project_root: str, collection: str, item_id: str, text: str):
    """
    写入(覆盖)一个条目，必要时创建集合目录。

    Raises:
        StorageError: 目录无法创建或文件无法写入。
    """
    path = get_blob_path(project_root, collection, item_id)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        logger.error(f"写入 {path} 失败: {e}")
        raise StorageError(f"{collection}/{item_id} ({path})", str(e)) from e
    logger.debug(f"已写入 {collection}/{item_id}: {path}")

def list_ids(project_root: str, collection: str) -> List[str]:
    """
    列出集合内全部条目 id (已排序，不含扩展名)。

    Raises:
        ProjectNotFoundError: 集合目录不存在。
    """
    directory = get_collection_dir(project_root, collection)
    _, ext = COLLECTIONS[collection]
    try:
        names = os.listdir(directory)
    except FileNotFoundError as e:
        raise ProjectNotFoundError(f"集合 {collection} ({directory})") from e
    except OSError as e:
        raise StorageError(f"集合 {collection} ({directory})", str(e)) from e
    return sorted(
        name[:-len(ext)] for name in names
        if name.endswith(ext) and len(name) > len(ext) and os.path.isfile(os.path.join(directory, name))
    )

def list_entries(project_root: str, collection: str) -> List[Tuple[str, str]]:
    """列出集合内全部 (id, 文本) 对"""
    return [(item_id, read_blob(project_root, collection, item_id)) for item_id in list_ids(project_root, collection)]
