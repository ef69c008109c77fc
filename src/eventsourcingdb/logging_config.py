"""客户端日志配置

库本身只通过 structlog.get_logger() 记录事件，不主动配置日志；
应用可以在启动时调用 setup_logging() 把客户端事件输出到 stderr。

只配置名为 "eventsourcingdb" 的 stdlib logger，root logger 与宿主应用
已有的 handler 保持不变。
"""

import logging
import os

import structlog

LOGGER_NAME = "eventsourcingdb"
LOG_FORMATS = ("dev", "json")
DEFAULT_LOG_FORMAT = "dev"
DEFAULT_LOG_LEVEL = "INFO"

log = structlog.get_logger()


def _resolve_level(value: str) -> int | None:
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else None


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> logging.Logger:
    """初始化客户端日志

    参数优先于环境变量：
    - log_format / EVENTSOURCINGDB_LOG_FORMAT: "dev"（默认，pretty print）或 "json"
    - log_level / EVENTSOURCINGDB_LOG_LEVEL: 标准级别名（默认 INFO）

    非法值记录 warning 并回退到默认值。重复调用只替换本函数安装的 handler。
    structlog 尚未被宿主应用配置时，配置为经由 stdlib logging 输出。

    Returns:
        配置好的 "eventsourcingdb" logger
    """
    raw_format = log_format or os.environ.get("EVENTSOURCINGDB_LOG_FORMAT", DEFAULT_LOG_FORMAT)
    raw_level = log_level or os.environ.get("EVENTSOURCINGDB_LOG_LEVEL", DEFAULT_LOG_LEVEL)

    resolved_format = raw_format.lower()
    format_valid = resolved_format in LOG_FORMATS
    if not format_valid:
        resolved_format = DEFAULT_LOG_FORMAT
    level = _resolve_level(raw_level)
    level_valid = level is not None
    if level is None:
        level = logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if resolved_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    if not structlog.is_configured():
        structlog.configure(
            processors=[
                *shared_processors,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.set_name(LOGGER_NAME)
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in logger.handlers if h.get_name() == LOGGER_NAME]:
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    if not format_valid:
        log.warning("invalid_log_format_config", value=raw_format, fallback=DEFAULT_LOG_FORMAT)
    if not level_valid:
        log.warning("invalid_log_level_config", value=raw_level, fallback=DEFAULT_LOG_LEVEL)
    return logger
