"""
Logging Configuration
Console, application, error and approval-audit sinks
"""

from loguru import logger
import sys
from pathlib import Path
from typing import Optional

from procurement.config.settings import settings

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
AUDIT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | USER_ID={extra[user_id]} | ACTION={extra[action]} | {message}"

_configured = False


def _is_audit(record) -> bool:
    return record["extra"].get("audit", False)


def setup_logger():
    """
    Configure the shared loguru logger once per process

    Every module calls this at import time and gets the same logger back.

    Returns:
        logger: Configured logger instance
    """
    global _configured
    if _configured:
        return logger

    logger.remove()

    log_dir = Path(settings.LOG_FILE).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=settings.LOG_LEVEL, colorize=True)

    # Application log, audit records excluded
    logger.add(
        settings.LOG_FILE,
        format=FILE_FORMAT,
        level=settings.LOG_LEVEL,
        filter=lambda record: not _is_audit(record),
        rotation="10 MB",
        retention="30 days",
        compression="zip"
    )

    logger.add(
        log_dir / "error.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="90 days",
        compression="zip"
    )

    # Requisition, PO, RFQ and master data changes
    logger.add(
        log_dir / "audit.log",
        format=AUDIT_FORMAT,
        filter=_is_audit,
        rotation="10 MB",
        retention="365 days",
        compression="zip"
    )

    _configured = True
    return logger


def log_audit(user_id: Optional[int], action: str, details: str):
    """
    Record a state change in the audit log

    Args:
        user_id: Acting user, None for vendor or system actions
        action: Action performed (submit_requisition, approved_requisition, close_rfq, ...)
        details: Document number and the values that changed
    """
    logger.bind(audit=True, user_id=user_id if user_id is not None else "-", action=action).info(details)
