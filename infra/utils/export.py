import html
import os
import re
import logging
import tempfile
from typing import List, Tuple

from ebooklib import epub

from core.exceptions import ProjectNotFoundError, SchemaValidationError
from core.project_manager import ProjectManager
from infra.storage import file_store

logger = logging.getLogger(__name__)

_CHAPTER_ID = re.compile(r"^chapter-(\d+)$")
EXPORT_FORMATS = {"markdown": "manuscript.md", "epub": "manuscript.epub"}

def collect_manuscript(project_root: str) -> List[Tuple[int, str]]:
    """按章节号读取全部已组装的章节正文"""
    try:
        ids = file_store.list_ids(project_root, "chapters")
    except ProjectNotFoundError:
        logger.info("尚未组装任何章节。")
        return []

    chapters = []
    for item_id in ids:
        match = _CHAPTER_ID.match(item_id)
        if not match:
            continue
        chapters.append((int(match.group(1)), file_store.read_blob(project_root, "chapters", item_id)))
    chapters.sort(key=lambda c: c[0])
    return chapters

def export_as_markdown(title: str, chapters: List[Tuple[int, str]]) -> str:
    """导出为 Markdown 字符串"""
    parts = [f"# {title}"]
    for number, prose in chapters:
        parts.append(f"## Chapter {number}\n\n{prose}")
    return "\n\n".join(parts) + "\n"

def export_as_epub(title: str, chapters: List[Tuple[int, str]], author: str = "") -> bytes:
    """导出为 EPUB 字节流，每章一个 XHTML 文件"""
    book = epub.EpubBook()
    book.set_identifier(f"storydesk_{title.replace(' ', '_')}")
    book.set_title(title)
    book.set_language('en')
    if author:
        book.add_author(author)

    items = []
    for number, prose in chapters:
        # 格式化正文为 HTML 段落
        formatted_body = "".join(
            f"<p>{html.escape(p.strip(), quote=False)}</p>\n" for p in prose.split("\n\n") if p.strip()
        )
        item = epub.EpubHtml(title=f"Chapter {number}", file_name=f"chapter_{number:02d}.xhtml", lang='en')
        item.content = f"<html><head><meta charset='UTF-8'/></head><body><h1>Chapter {number}</h1>{formatted_body}</body></html>"
        book.add_item(item)
        items.append(item)

    book.toc = items
    book.spine = ['nav'] + items
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())

    # 使用临时文件写入
    with tempfile.NamedTemporaryFile(delete=False, suffix='.epub') as tmp:
        temp_path = tmp.name

    try:
        epub.write_epub(temp_path, book)
        with open(temp_path, 'rb') as f:
            data = f.read()
        return data
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

def export_manuscript(project_root: str, fmt: str = "markdown") -> str:
    """
    将全部已组装章节导出到 output/ 目录。

    Returns:
        str: 导出文件路径。
    """
    if fmt not in EXPORT_FORMATS:
        raise SchemaValidationError("format", f"不支持的导出格式 '{fmt}'")

    meta = ProjectManager.load_project_meta(project_root)
    title = meta.get("title") or os.path.basename(os.path.abspath(project_root))
    chapters = collect_manuscript(project_root)

    output_dir = os.path.join(project_root, "output")
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, EXPORT_FORMATS[fmt])

    if fmt == "markdown":
        with open(path, 'w', encoding='utf-8') as f:
            f.write(export_as_markdown(title, chapters))
    else:
        with open(path, 'wb') as f:
            f.write(export_as_epub(title, chapters, author=meta.get("author", "")))

    logger.info(f"书稿已导出: {path} (章节数: {len(chapters)})")
    return path
