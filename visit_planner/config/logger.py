import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from visit_planner.config.settings import Settings, settings as default_settings

_BASE_LOGGER_NAME = "uvicorn.error"
_STREAM_HANDLER_MARK = "_visit_planner_stream"
_DEBUG_FILE_HANDLER_MARK = "_visit_planner_debug_file"

_active_config: Settings | None = None


def _level_or(level_name: str, fallback: int, setting: str, base_logger: logging.Logger) -> int:
    level = getattr(logging, (level_name or "").strip().upper(), None)
    if isinstance(level, int):
        return level
    base_logger.warning(
        "[logger] Invalid %s '%s', fallback to %s",
        setting,
        level_name,
        logging.getLevelName(fallback),
    )
    return fallback


def _owned_handlers(base_logger: logging.Logger, mark: str) -> list[logging.Handler]:
    return [handler for handler in base_logger.handlers if getattr(handler, mark, False)]


def _apply_stream_handler(base_logger: logging.Logger, config: Settings) -> None:
    owned = _owned_handlers(base_logger, _STREAM_HANDLER_MARK)
    if owned:
        for handler in owned:
            handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
        return
    if base_logger.handlers:
        # uvicorn (or the host app) already attached handlers; leave their format alone.
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    setattr(handler, _STREAM_HANDLER_MARK, True)
    base_logger.addHandler(handler)
    base_logger.propagate = False


def _apply_debug_file_handler(base_logger: logging.Logger, config: Settings) -> None:
    for handler in _owned_handlers(base_logger, _DEBUG_FILE_HANDLER_MARK):
        base_logger.removeHandler(handler)
        handler.close()
    if not config.LOG_DIR:
        return

    backup_count = config.LOG_FILE_BACKUP_COUNT
    if backup_count < 0:
        base_logger.warning(
            "[logger] Invalid LOG_FILE_BACKUP_COUNT '%s', fallback to 7",
            backup_count,
        )
        backup_count = 7
    file_level = _level_or(config.LOG_FILE_LEVEL, logging.DEBUG, "LOG_FILE_LEVEL", base_logger)

    try:
        log_dir = Path(config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=str(log_dir / config.LOG_FILE_NAME),
            when=config.LOG_FILE_WHEN,
            interval=config.LOG_FILE_INTERVAL,
            backupCount=backup_count,
            encoding=config.LOG_FILE_ENCODING,
        )
    except OSError as exc:
        base_logger.warning(
            "[logger] Failed to configure debug file logging at '%s': %s",
            config.LOG_DIR,
            exc,
        )
        return
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    setattr(file_handler, _DEBUG_FILE_HANDLER_MARK, True)
    base_logger.addHandler(file_handler)


def configure_logging(config: Settings | None = None, *, force: bool = False) -> None:
    """Configure the base logger once; ``force=True`` re-applies a new ``config``.

    ``create_app`` forces its injected settings so level, format, debug file
    and output truncation follow them rather than the import-time defaults.
    """
    global _active_config
    if _active_config is not None and not force:
        return

    config = config or default_settings
    base_logger = logging.getLogger(_BASE_LOGGER_NAME)
    _apply_stream_handler(base_logger, config)
    base_logger.setLevel(_level_or(config.LOG_LEVEL, logging.INFO, "LOG_LEVEL", base_logger))
    _apply_debug_file_handler(base_logger, config)
    _active_config = config


def active_config() -> Settings:
    configure_logging()
    return _active_config or default_settings


def get_logger(name: str | None = None) -> logging.Logger:
    configure_logging()
    base_logger = logging.getLogger(_BASE_LOGGER_NAME)
    if not name:
        return base_logger
    return base_logger.getChild(name)


def log_stage(logger: logging.Logger, stage: str, content: Any) -> None:
    text = "" if content is None else str(content)
    if not text:
        logger.info("[%s] output:\n[EMPTY]", stage)
        return

    limit = active_config().LOG_TRUNCATE
    if len(text) > limit:
        text = f"{text[:limit]} ...[truncated {len(text) - limit} chars]"
    logger.info("[%s] output:\n%s", stage, text)
