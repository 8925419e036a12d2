"""Demo runner: weekly suggestions + a balanced cycle schedule from sample JSON.

This is meant for quick validation and for demos.

Usage (PowerShell):
    python scripts\run_cycle_demo.py [output_dir]

With an output directory, the weekly grid is also written as a PNG and the
full report bundle as a ZIP.

Set INTERVENTION_SCHEDULER_DATA to point at another school snapshot.
"""

from __future__ import annotations

import logging
from pathlib import Path
import sys

# Ensure project root is on PYTHONPATH when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling import (
    CycleSchedulingOptions,
    DataSources,
    SchedulingOptions,
    auto_schedule_groups_for_cycle,
    default_data_path,
    get_interventionist_workload,
    load_store_from_json,
    suggest_schedule,
    unscheduled_day_slots_for_interventionist,
)
from utils.schedule_export import (
    blocked_windows_df,
    cycle_reports_zip_bytes,
    cycle_schedule_df,
    day_slots_df,
    df_to_markdown,
    df_to_png_bytes,
    suggestions_df,
    weekly_grid_df,
    workload_by_day_df,
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    store = load_store_from_json(str(default_data_path()))
    sources = DataSources.from_store(store)

    print("\n=== Interventionist blocked windows ===")
    print(blocked_windows_df(store.interventionists.values()).to_string(index=False))

    for iid in store.interventionists:
        open_slots = unscheduled_day_slots_for_interventionist(sources, iid, "2026-01-07")
        print(f"\n=== {iid}: configured days with nothing booked (week of 2026-01-05) ===")
        print(day_slots_df(open_slots).to_string(index=False))

    picks = suggest_schedule(sources, "g-3-wilson", SchedulingOptions(session_duration=45))
    print("\n=== Weekly pattern for g-3-wilson ===")
    print(df_to_markdown(suggestions_df(picks)))

    cycle = next(iter(store.cycles.values()))
    options = CycleSchedulingOptions(session_duration=30, preferred_time="09:30", balance_workload=True)
    results = auto_schedule_groups_for_cycle(sources, list(store.groups.keys()), cycle.cycle_id, options)

    for gid, result in results.items():
        print(f"\n=== {gid}: {result.total_sessions} sessions, skipped {list(result.skipped_dates)} ===")
        print(cycle_schedule_df(result).head(10).to_string(index=False))

    print("\n=== Weekly grid (sessions per day/time) ===")
    grid = weekly_grid_df(results)
    print(grid.to_string(index=False))

    workloads = {}
    for iid in store.interventionists:
        report = get_interventionist_workload(sources, iid, cycle.start_date, cycle.end_date)
        workloads[iid] = report
        print(f"\n=== Workload {iid}: {report.total_sessions} sessions, {report.average_per_day:.2f}/day ===")
        print(workload_by_day_df(report).to_string(index=False))

    if len(sys.argv) > 1:
        out_dir = Path(sys.argv[1])
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "weekly_grid.png").write_bytes(df_to_png_bytes(grid))
        (out_dir / "cycle_reports.zip").write_bytes(cycle_reports_zip_bytes(results, workloads=workloads))
        print(f"\nWrote weekly_grid.png and cycle_reports.zip to {out_dir}")


if __name__ == "__main__":
    main()
