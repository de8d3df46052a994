"""日志配置：控制台彩色输出、按天滚动的文件日志，以及贯穿一次请求的 request_id。"""

import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from .config import get_settings

LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class LocalTimeFormatter(logging.Formatter):
    """按 ``Settings.timezone`` 渲染时间戳。"""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        moment = datetime.fromtimestamp(record.created, get_settings().timezone_info)
        if datefmt:
            return moment.strftime(datefmt)
        return moment.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(LocalTimeFormatter):
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_colors: Optional[bool] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{message}\033[0m" if color else message


class JsonFormatter(LocalTimeFormatter):
    """每条记录输出一行 JSON，便于日志采集。"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "request_id": getattr(record, "request_id", None),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx.get()
        return True


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)


def setup_logging() -> None:
    """安装控制台与文件两个处理器；``app`` 与 ``uvicorn`` 日志不再向根记录器重复传播。"""
    settings = get_settings()
    settings.log_directory.mkdir(parents=True, exist_ok=True)

    level = settings.log_level
    handlers = ["console", "file"]
    module = __name__

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "color": {"()": f"{module}.ColorFormatter", "fmt": LINE_FORMAT},
                "plain": {"()": f"{module}.LocalTimeFormatter", "fmt": LINE_FORMAT},
                "json": {"()": f"{module}.JsonFormatter"},
            },
            "filters": {"request_id": {"()": f"{module}.RequestIdFilter"}},
            "handlers": {
                "console": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "json" if settings.log_json else "color",
                    "filters": ["request_id"],
                },
                "file": {
                    "level": level,
                    "class": "logging.handlers.TimedRotatingFileHandler",
                    "formatter": "json" if settings.log_json else "plain",
                    "filename": str(settings.log_file_path),
                    "when": "midnight",
                    "backupCount": 14,
                    "encoding": "utf-8",
                    "delay": True,
                    "filters": ["request_id"],
                },
            },
            "loggers": {
                "app": {"handlers": handlers, "level": level, "propagate": False},
                "uvicorn": {"handlers": handlers, "level": level, "propagate": False},
            },
            "root": {"handlers": handlers, "level": level},
        }
    )


logger = logging.getLogger("app")
