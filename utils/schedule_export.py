from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

from scheduling.day_slots import DaySlot
from scheduling.models import CycleScheduleResult, Interventionist, SuggestedTimeSlot, WorkloadReport
from scheduling.settings import SchedulingSettings
from scheduling.time_utils import block_duration, format_time_display


def _conflict_text(conflicts) -> str:
    return "; ".join(c.description for c in conflicts or ())


def suggestions_df(suggestions: Sequence[SuggestedTimeSlot]) -> pd.DataFrame:
    """Ranked weekly slots as a table (one row per suggestion, rank from 1)."""

    rows = []
    for rank, s in enumerate(suggestions, start=1):
        rows.append(
            {
                "rank": rank,
                "day": s.day,
                "start_time": s.start_time,
                "end_time": s.end_time,
                "score": float(s.score),
                "conflicts": len(s.conflicts),
                "details": _conflict_text(s.conflicts),
                "display": f"{s.day.title()} {format_time_display(s.start_time)} - {format_time_display(s.end_time)}",
            }
        )
    return pd.DataFrame(
        rows,
        columns=["rank", "day", "start_time", "end_time", "score", "conflicts", "details", "display"],
    )


def cycle_schedule_df(result: CycleScheduleResult, *, group_id: Optional[str] = None) -> pd.DataFrame:
    """Session-level table for one cycle schedule."""

    rows = []
    for s in result.dates:
        row = {
            "date": s.date,
            "day": s.day,
            "time": s.time,
            "end_time": s.end_time,
            "conflicts": len(s.conflicts),
            "details": _conflict_text(s.conflicts),
        }
        if group_id is not None:
            row = {"group_id": group_id, **row}
        rows.append(row)

    columns = ["date", "day", "time", "end_time", "conflicts", "details"]
    if group_id is not None:
        columns = ["group_id"] + columns
    return pd.DataFrame(rows, columns=columns)


def skipped_dates_df(results: Mapping[str, CycleScheduleResult]) -> pd.DataFrame:
    rows = [{"group_id": gid, "date": d} for gid, r in results.items() for d in r.skipped_dates]
    return pd.DataFrame(rows, columns=["group_id", "date"])


def weekly_grid_df(results: Mapping[str, CycleScheduleResult]) -> pd.DataFrame:
    """Day x start-time grid of how many sessions each combination got (all groups)."""

    rows = [{"day": s.day, "time": s.time} for r in results.values() for s in r.dates]
    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows)
    grid = pd.crosstab(df["day"], df["time"])
    order = [d for d in ("monday", "tuesday", "wednesday", "thursday", "friday") if d in grid.index]
    return grid.reindex(order).reset_index()


def workload_by_day_df(report: WorkloadReport) -> pd.DataFrame:
    return pd.DataFrame(
        [{"day": d, "sessions": int(n)} for d, n in report.sessions_by_day.items()],
        columns=["day", "sessions"],
    )


def workload_by_hour_df(report: WorkloadReport) -> pd.DataFrame:
    return pd.DataFrame(
        [{"hour": f"{int(h):02d}:00", "sessions": int(n)} for h, n in sorted(report.sessions_by_hour.items())],
        columns=["hour", "sessions"],
    )


def blocked_windows_df(
    interventionists: Iterable[Interventionist],
    days: Iterable[str] = ("monday", "tuesday", "wednesday", "thursday", "friday"),
    *,
    settings: SchedulingSettings = SchedulingSettings(),
) -> pd.DataFrame:
    """When each interventionist is NOT available, per weekday (inside the settings' day window)."""

    from scheduling.availability import get_interventionist_blocked_times

    day_list = list(days)
    rows = []
    for person in interventionists:
        for day in day_list:
            for b in get_interventionist_blocked_times(person, day, settings=settings):
                rows.append(
                    {
                        "interventionist_id": person.interventionist_id,
                        "name": person.name,
                        "day": day,
                        "start_time": b.start_time,
                        "end_time": b.end_time,
                        "minutes": block_duration(b),
                    }
                )
    return pd.DataFrame(rows, columns=["interventionist_id", "name", "day", "start_time", "end_time", "minutes"])


def day_slots_df(slots: Iterable[DaySlot]) -> pd.DataFrame:
    """One row per configured group day (e.g. the unscheduled ones for a week)."""

    rows = [
        {
            "group_id": s.group.group_id,
            "group": s.group.name,
            "day": s.day,
            "time": s.time or "",
            "duration": int(s.duration),
        }
        for s in slots
    ]
    return pd.DataFrame(rows, columns=["group_id", "group", "day", "time", "duration"])


def _safe_sheet_name(name: str) -> str:
    """Excel sheet names: max 31 chars, cannot contain: `: \\ / ? * [ ]`."""

    bad = [":", "\\", "/", "?", "*", "[", "]"]
    out = str(name or "Sheet")
    for b in bad:
        out = out.replace(b, "-")
    out = out.strip() or "Sheet"
    return out[:31]


def cycle_reports_workbook_bytes(
    results: Mapping[str, CycleScheduleResult],
    *,
    workloads: Optional[Mapping[str, WorkloadReport]] = None,
) -> bytes:
    """Multi-sheet Excel workbook for a batch of cycle schedules.

    Includes:
    - Summary (one row per group)
    - Weekly grid (day x start time counts)
    - Skipped dates
    - One sheet per group (dated sessions)
    - One sheet per interventionist workload, when given
    """

    # Pandas uses openpyxl to write .xlsx by default.
    out = io.BytesIO()

    summary = pd.DataFrame(
        [
            {
                "group_id": gid,
                "total_sessions": int(r.total_sessions),
                "skipped_dates": len(r.skipped_dates),
                "sessions_with_conflicts": sum(1 for s in r.dates if s.conflicts),
                "status": _conflict_text(r.conflicts) or "ok",
            }
            for gid, r in results.items()
        ],
        columns=["group_id", "total_sessions", "skipped_dates", "sessions_with_conflicts", "status"],
    )

    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        summary.to_excel(writer, sheet_name="Summary", index=False)
        weekly_grid_df(results).to_excel(writer, sheet_name=_safe_sheet_name("Weekly Grid"), index=False)
        skipped_dates_df(results).to_excel(writer, sheet_name=_safe_sheet_name("Skipped Dates"), index=False)

        for gid, r in results.items():
            cycle_schedule_df(r).to_excel(writer, sheet_name=_safe_sheet_name(f"Group-{gid}"), index=False)

        for iid, report in (workloads or {}).items():
            sheet = _safe_sheet_name(f"Load-{iid}")
            header_df = pd.DataFrame(
                [
                    ["INTERVENTIONIST", iid],
                    ["TOTAL SESSIONS", int(report.total_sessions)],
                    ["AVERAGE PER DAY", round(float(report.average_per_day), 2)],
                ],
                columns=["Field", "Value"],
            )
            header_df.to_excel(writer, sheet_name=sheet, index=False, startrow=0)
            by_day = workload_by_day_df(report)
            by_day.to_excel(writer, sheet_name=sheet, index=False, startrow=len(header_df) + 2)
            workload_by_hour_df(report).to_excel(
                writer, sheet_name=sheet, index=False, startrow=len(header_df) + len(by_day) + 4
            )

    return out.getvalue()


def cycle_reports_zip_bytes(
    results: Mapping[str, CycleScheduleResult],
    *,
    workloads: Optional[Mapping[str, WorkloadReport]] = None,
) -> bytes:
    """ZIP with the workbook plus one CSV per group and the combined session table."""

    wb = cycle_reports_workbook_bytes(results, workloads=workloads)
    frames = [cycle_schedule_df(r, group_id=gid) for gid, r in results.items()]
    all_sessions = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as z:
        z.writestr("cycle_reports.xlsx", wb)
        z.writestr("tables/cycle_sessions.csv", all_sessions.to_csv(index=False).encode("utf-8"))
        z.writestr("tables/skipped_dates.csv", skipped_dates_df(results).to_csv(index=False).encode("utf-8"))
        for gid, r in results.items():
            z.writestr(f"schedules/{gid}.csv", cycle_schedule_df(r).to_csv(index=False).encode("utf-8"))

    return buf.getvalue()


@dataclass(frozen=True)
class ImageExportOptions:
    title: Optional[str] = None
    font_size: int = 10
    cell_height: float = 0.35
    cell_width: float = 1.2


def df_to_markdown(df: pd.DataFrame) -> str:
    """Convert DataFrame to a GitHub-flavored Markdown table."""

    # pandas to_markdown needs tabulate; keep to a small renderer instead.
    cols = list(df.columns)
    rows = df.astype(str).values.tolist()

    def esc(s: str) -> str:
        return str(s).replace("\n", " ").replace("|", "\\|")

    header = "| " + " | ".join(esc(c) for c in cols) + " |"
    sep = "| " + " | ".join(["---"] * len(cols)) + " |"
    body = ["| " + " | ".join(esc(v) for v in r) + " |" for r in rows]
    return "\n".join([header, sep] + body) + "\n"


def df_to_png_bytes(df: pd.DataFrame, *, options: ImageExportOptions = ImageExportOptions()) -> bytes:
    """Render a schedule table (e.g. the weekly grid) as a PNG image."""

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    nrows, ncols = df.shape

    fig_w = max(6.0, float(options.cell_width) * (ncols + 1))
    fig_h = max(2.0, float(options.cell_height) * (nrows + 2))

    fig, ax = plt.subplots(figsize=(fig_w, fig_h))
    ax.axis("off")

    if options.title:
        ax.set_title(options.title, fontsize=options.font_size + 2, pad=12)

    tbl = ax.table(
        cellText=df.astype(str).values,
        colLabels=[str(c) for c in df.columns],
        cellLoc="center",
        loc="center",
    )

    tbl.auto_set_font_size(False)
    tbl.set_fontsize(options.font_size)
    tbl.scale(1.0, 1.4)

    for (r, c), cell in tbl.get_celld().items():
        cell.set_linewidth(0.6)
        if r == 0:
            cell.set_facecolor("#f0f2f6")
            cell.set_text_props(weight="bold")

    buf = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=120, bbox_inches="tight")
    plt.close(fig)
    return buf.getvalue()
