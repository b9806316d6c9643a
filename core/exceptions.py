"""
自定义异常类
用于在存储层、编解码层与业务层之间传递具有明确语义的错误信息。
每个异常都会在消息中点名出错的资源。
"""

class StoryDeskError(Exception):
    """所有业务异常的基类"""
    pass

class ProjectNotFoundError(StoryDeskError):
    """请求的项目、集合或条目在存储中不存在"""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"资源不存在: {resource}")

class MetadataDecodeError(StoryDeskError):
    """存储的文本无法解析为 元数据 + 正文 (文件损坏或被手工改坏)"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"无法解析 {source}: {reason}")

class SchemaValidationError(StoryDeskError):
    """结构化数据的形状不符合要求"""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"字段 '{field}' 校验失败: {reason}")

class StorageError(StoryDeskError):
    """读写存储时发生的其他 I/O 错误 (权限不足、磁盘已满等)"""

    def __init__(self, resource: str, reason: str):
        self.resource = resource
        self.reason = reason
        super().__init__(f"存储读写失败 {resource}: {reason}")

class ConfigurationError(StoryDeskError):
    """当应用配置不正确或缺失时发生错误"""
    pass
