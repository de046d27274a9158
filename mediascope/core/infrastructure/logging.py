"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于聚合查询、过滤、过期响应等关键事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from mediascope.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        # 本地开发使用人类可读格式
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/mediascope_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    Usage:
        from mediascope.core.infrastructure.logging import BusinessEvents

        BusinessEvents.source_query_failed(source_key="siteA", reason="timeout")
        BusinessEvents.aggregation_completed(term="三体", source_count=4, ...)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def source_query_failed(
        cls,
        source_key: str,
        reason: str,
        error: str | None = None,
        duration_ms: int | None = None,
        **extra: Any,
    ) -> None:
        """记录单个资源站查询失败（超时或调用异常）。"""
        cls._log.warning(
            "source_query_failed",
            event_type="source_error",
            source_key=source_key,
            reason=reason,
            error=error,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def source_response_malformed(
        cls,
        source_key: str,
        detail: str,
        **extra: Any,
    ) -> None:
        """记录资源站返回结构异常（按空结果处理）。"""
        cls._log.warning(
            "source_response_malformed",
            event_type="source_schema",
            source_key=source_key,
            detail=detail,
            **extra,
        )

    @classmethod
    def aggregation_completed(
        cls,
        term: str,
        source_count: int,
        succeeded: int,
        item_count: int,
        latency_ms: int,
        **extra: Any,
    ) -> None:
        """记录一次聚合查询完成。"""
        cls._log.info(
            "aggregation_completed",
            event_type="aggregate",
            term=term,
            source_count=source_count,
            succeeded=succeeded,
            failed=source_count - succeeded,
            item_count=item_count,
            latency_ms=latency_ms,
            **extra,
        )

    @classmethod
    def content_filtered(
        cls,
        removed: int,
        remaining: int,
        **extra: Any,
    ) -> None:
        """记录内容过滤结果。"""
        cls._log.info(
            "content_filtered",
            event_type="filter",
            removed=removed,
            remaining=remaining,
            **extra,
        )

    @classmethod
    def stale_response_discarded(
        cls,
        dispatched: dict[str, Any],
        live: dict[str, Any],
        **extra: Any,
    ) -> None:
        """记录被丢弃的过期响应。"""
        cls._log.debug(
            "stale_response_discarded",
            event_type="stale",
            dispatched=dispatched,
            live=live,
            **extra,
        )
