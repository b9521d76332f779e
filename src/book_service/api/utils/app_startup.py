"""Loguru setup: console and file sinks, stdlib interception, library levels."""

import json
import logging
import sys
from pathlib import Path

from loguru import logger

from book_service.runtime.config.config_data import LoggingConfig
from book_service.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Fields bound by the request middleware; copied into JSON lines when present.
REQUEST_FIELDS = (
    "request_id",
    "method",
    "path",
    "client_ip",
    "status_code",
    "duration_ms",
    "error_type",
)


def _json_line(record) -> str:
    extra = record["extra"]
    entry = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": extra.get("logger_name", record["name"]),
        "message": record["message"],
    }
    entry.update({field: extra[field] for field in REQUEST_FIELDS if field in extra})
    if record["exception"] is not None:
        exc_type, exc_value, _ = record["exception"]
        entry["exception"] = f"{exc_type.__name__}: {exc_value}"
    return json.dumps(entry, default=str)


def _json_format(record) -> str:
    record["extra"]["_json"] = _json_line(record)
    return "{extra[_json]}\n"


class InterceptHandler(logging.Handler):
    """Redirect standard 'logging' records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # The request middleware already logs every request.
        if record.name == "uvicorn.access":
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _intercept_stdlib_logging(cfg: LoggingConfig, echo_sql: bool) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict.keys()):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    for name, level in cfg.library_levels.items():
        logging.getLogger(name).setLevel(level.upper())
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if echo_sql else logging.WARNING)


def configure_logging():
    main_config = get_config()
    cfg = main_config.logging
    verbose_errors = main_config.app.environment != "production"

    logger.remove()
    logger.configure(
        extra={"request_id": "-"},
        patcher=lambda record: record["extra"].setdefault("request_id", "-"),
    )

    logger.add(
        sys.stderr,
        level=cfg.level,
        format=PLAIN_FORMAT,
        colorize=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )

    if cfg.file:
        path = Path(cfg.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=cfg.level,
            format=_json_format if cfg.format == "json" else PLAIN_FORMAT,
            rotation=f"{cfg.max_size_mb} MB",
            retention=cfg.backup_count,
            compression="zip",
            enqueue=True,
            backtrace=verbose_errors,
            diagnose=verbose_errors,
        )

    _intercept_stdlib_logging(cfg, echo_sql=main_config.database.echo)

    logger.info(
        "Logging configured (level={}, format={}, file={}, environment={})",
        cfg.level,
        cfg.format,
        cfg.file,
        main_config.app.environment,
    )
