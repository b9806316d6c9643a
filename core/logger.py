import logging
import logging.handlers
import os
import sys
from typing import Optional

# 定义日志文件路径
LOG_DIR = "logs"
LOG_FILE_NAME = "app.log"

def setup_logging(log_dir: Optional[str] = None, level: Optional[str] = None):
    """
    设置应用程序的日志。
    日志将输出到控制台和文件，并使用普通文本格式。
    日志级别优先取环境变量 LOG_LEVEL，其次取参数 level。
    """
    log_dir = log_dir or LOG_DIR
    # 确保日志目录存在
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
    )

    # 移除所有现有的handler，避免重复日志输出
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.root.setLevel(os.getenv("LOG_LEVEL", level or "INFO").upper())

    # 文件处理器
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=10 * 1024 * 1024, # 10 MB
        backupCount=5, # 保留5个备份文件
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    logging.root.addHandler(file_handler)

    # 控制台处理器
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logging.root.addHandler(console_handler)

    # 捕获警告
    logging.captureWarnings(True)
