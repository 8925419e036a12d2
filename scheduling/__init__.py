"""Intervention session scheduling engine (weekly slots, cycle dates, load balancing)."""

from .models import (
	CalendarEvent,
	CycleScheduleResult,
	CycleSchedulingOptions,
	GradeLevelConstraint,
	Group,
	InterventionCycle,
	Interventionist,
	ScheduleConflict,
	ScheduledSession,
	SchedulingContext,
	SchedulingOptions,
	Session,
	Student,
	StudentConstraint,
	SuggestedTimeSlot,
	TimeBlock,
	WeeklyTimeBlock,
	WorkloadReport,
)

from .repositories import (
	CalendarService,
	DataSources,
	GroupRepository,
	InMemoryStore,
	RepositoryError,
	SessionRepository,
	load_store_from_json,
	store_from_dict,
)

from .context import load_scheduling_context
from .schedule_shapes import NormalizedSchedule, normalize_group_schedule
from .day_slots import (
	DaySlot,
	expand_groups_to_day_slots,
	get_unscheduled_day_slots,
	is_day_slot_scheduled,
	unscheduled_day_slots_for_interventionist,
	week_dates,
)
from .settings import SchedulingSettings, default_data_path
from .slot_finder import find_available_slots, select_best_slots, suggest_optimal_times, suggest_schedule
from .cycle_scheduler import generate_cycle_dates, generate_cycle_schedule, partition_cycle_dates
from .balancer import auto_schedule_groups_for_cycle
from .workload import get_interventionist_workload

__all__ = [
	"CalendarEvent",
	"CycleScheduleResult",
	"CycleSchedulingOptions",
	"GradeLevelConstraint",
	"Group",
	"InterventionCycle",
	"Interventionist",
	"ScheduleConflict",
	"ScheduledSession",
	"SchedulingContext",
	"SchedulingOptions",
	"Session",
	"Student",
	"StudentConstraint",
	"SuggestedTimeSlot",
	"TimeBlock",
	"WeeklyTimeBlock",
	"WorkloadReport",
	"CalendarService",
	"DataSources",
	"GroupRepository",
	"InMemoryStore",
	"RepositoryError",
	"SessionRepository",
	"load_store_from_json",
	"store_from_dict",
	"load_scheduling_context",
	"NormalizedSchedule",
	"normalize_group_schedule",
	"DaySlot",
	"expand_groups_to_day_slots",
	"get_unscheduled_day_slots",
	"is_day_slot_scheduled",
	"unscheduled_day_slots_for_interventionist",
	"week_dates",
	"SchedulingSettings",
	"default_data_path",
	"find_available_slots",
	"select_best_slots",
	"suggest_optimal_times",
	"suggest_schedule",
	"generate_cycle_dates",
	"generate_cycle_schedule",
	"partition_cycle_dates",
	"auto_schedule_groups_for_cycle",
	"get_interventionist_workload",
]
