from visit_planner.scheduler.relay import (
    RelayConfig,
    ScheduleResult,
    build_messages,
    relay_schedule,
)

__all__ = [
    "RelayConfig",
    "ScheduleResult",
    "build_messages",
    "relay_schedule",
]
