"""Form 1040 schedules. Each computes from plain inputs and records its lines on a TraceRecorder."""

from calculator.schedules.schedule_1 import Schedule1Result, compute_schedule_1
from calculator.schedules.schedule_a import ScheduleAResult, compute_schedule_a, compute_salt_cap
from calculator.schedules.schedule_b import ScheduleBResult, compute_schedule_b
from calculator.schedules.schedule_c import ScheduleCResult, compute_schedule_c
from calculator.schedules.schedule_d import ScheduleDResult, compute_schedule_d
from calculator.schedules.schedule_e import ScheduleEResult, compute_schedule_e
from calculator.schedules.schedule_se import ScheduleSEResult, compute_schedule_se

__all__ = [
    "Schedule1Result",
    "compute_schedule_1",
    "ScheduleAResult",
    "compute_schedule_a",
    "compute_salt_cap",
    "ScheduleBResult",
    "compute_schedule_b",
    "ScheduleCResult",
    "compute_schedule_c",
    "ScheduleDResult",
    "compute_schedule_d",
    "ScheduleEResult",
    "compute_schedule_e",
    "ScheduleSEResult",
    "compute_schedule_se",
]
