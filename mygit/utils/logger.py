"""mygit 日志配置

文本或 JSON 两种格式，统一输出到 stderr。
git 相关日志通过 extra 附带 repo / command / returncode，JSON 格式下作为独立字段输出。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

_TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"

# 通过 logger.xxx(..., extra={...}) 传入的上下文字段
CONTEXT_FIELDS = ("repo", "command", "returncode", "duration")

# 开发服务器的访问日志与 mygit.web.app 的请求日志重复，只保留 WARNING 以上
_NOISY_LOGGERS = ("werkzeug",)


class JSONFormatter(logging.Formatter):
    """每条记录一行 JSON，便于日志采集"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: True 时输出 JSON，否则输出文本
    """
    reset_logging()
    root_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(root_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))


def reset_logging() -> None:
    """移除根日志器上的所有 handler（重复配置与测试使用）"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
