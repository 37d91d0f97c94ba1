"""Environment-driven settings."""
import logging
import os
import sys
from dataclasses import dataclass
from datetime import time

import structlog
from dotenv import load_dotenv

from scheduling import ScoringConfig, WorkHours, parse_time

load_dotenv()


@dataclass(frozen=True)
class Settings:
    work_start: time
    work_end: time
    slot_step_minutes: int
    horizon_days: int
    suggestion_limit: int
    log_level: str
    port: int

    @property
    def work_hours(self) -> WorkHours:
        return WorkHours(self.work_start, self.work_end)


def load_settings() -> Settings:
    """Read SCHEDULING_* variables (after .env) into Settings."""
    return Settings(
        work_start=parse_time(os.getenv("SCHEDULING_WORK_START", "09:00")),
        work_end=parse_time(os.getenv("SCHEDULING_WORK_END", "17:00")),
        slot_step_minutes=int(os.getenv("SCHEDULING_SLOT_STEP_MINUTES", "30")),
        horizon_days=int(os.getenv("SCHEDULING_HORIZON_DAYS", "7")),
        suggestion_limit=int(os.getenv("SCHEDULING_SUGGESTION_LIMIT", "6")),
        log_level=os.getenv("SCHEDULING_LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("PORT", "8000")),
    )


def scoring_config(settings: Settings) -> ScoringConfig:
    return ScoringConfig(
        slot_step_minutes=settings.slot_step_minutes,
        limit=settings.suggestion_limit,
    )


def configure_logging(level: str = "INFO") -> None:
    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO
    # stderr only: the MCP transport owns stdout for JSON-RPC
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


settings = load_settings()
