from __future__ import annotations

import csv
import io
import re

from .model import AttendanceReport

CSV_FIELDS = [
    "date",
    "arrivals",
    "departures",
    "breaks",
    "worked",
    "break",
    "weekend",
    "earnings",
    "note",
]


def export_filename(person_name: str, *, suffix: str = "csv") -> str:
    slug = re.sub(r"\s+", "-", person_name.strip().lower()) or "report"
    return f"attendance-{slug}.{suffix}"


def report_to_csv(report: AttendanceReport) -> bytes:
    """Render report rows plus a TOTAL footer; strings come pre-formatted."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for row in report.rows:
        notes = [n for n in (row.summary.special_label, row.annotation) if n]
        writer.writerow(
            {
                "date": row.date_label,
                "arrivals": ", ".join(row.arrivals),
                "departures": ", ".join(row.departures),
                "breaks": ", ".join(row.breaks),
                "worked": row.worked_label,
                "break": row.break_label,
                "weekend": "yes" if row.summary.is_weekend else "no",
                "earnings": row.earnings_label,
                "note": "; ".join(notes),
            }
        )
    writer.writerow(
        {
            "date": "TOTAL",
            "worked": report.total_worked_label,
            "break": report.total_break_label,
            "earnings": report.total_earnings_label,
        }
    )
    return out.getvalue().encode("utf-8-sig")
