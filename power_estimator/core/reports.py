# power_estimator/core/reports.py
from __future__ import annotations
from datetime import datetime
from pathlib import Path
from typing import Literal, Sequence
import pandas as pd

from .metrics import instructions_frame
from .model import AggregateMetrics, InstructionCategory, ParsedInstruction
from .profiles import CPUProfile

ReportFormat = Literal["txt", "csv", "both"]

REPORT_TITLE = "=== CPU POWER ANALYSIS REPORT ==="
LINE_LIMIT = 50

class ReportWriteError(OSError):
    """Persisting a report failed; computed metrics are unaffected."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"failed to write report {path}: {cause}")
        self.path = Path(path)
        self.cause = cause

def format_report(instructions: Sequence[ParsedInstruction],
                  profile: CPUProfile,
                  metrics: AggregateMetrics,
                  generated_at: datetime | None = None) -> str:
    """
    Render the fixed plain-text report. Pure serialisation: every number comes
    from ``instructions`` and ``metrics`` as given.
    """
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    lines = [
        REPORT_TITLE,
        f"Generated: {stamp}",
        "",
        f"CPU Model: {profile.name}",
        f"Total Instructions: {len(instructions)}",
        "",
        "POWER METRICS:",
        f"  Total Power: {metrics.total_power:.2f} mW",
        f"  Average Power: {metrics.average_power:.2f} mW",
        f"  Total Time: {metrics.total_time:.2f} ns",
        f"  Total Energy: {metrics.total_energy:.2f} pJ",
        "",
        "INSTRUCTION BREAKDOWN:",
    ]
    for category in InstructionCategory:
        count = metrics.count(category)
        if count > 0:
            lines.append(f"  {category.name}: {count} instructions")
    lines += ["", "DETAILED INSTRUCTION LIST:"]
    for n, instr in enumerate(instructions, start=1):
        lines.append(
            f"{n}. [{instr.category.name}] Power={instr.power:.2f} mW, "
            f"Time={instr.execution_time:.2f} ns - {instr.short_text(LINE_LIMIT)}"
        )
    return "\n".join(lines) + "\n"

def write_text_report(text: str, out_path: Path, title: str | None = None) -> Path:
    out_path = Path(out_path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(out_path, e) from e
    print(f"[OK] wrote report: {title or out_path.stem} → {out_path}")
    return out_path

def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> Path:
    out_csv = Path(out_csv)
    try:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        df_out.to_csv(out_csv, index=False, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(out_csv, e) from e
    print(f"[OK] wrote report: {title} → {out_csv}")
    return out_csv

def write_instruction_csv(instructions: Sequence[ParsedInstruction], out_csv: Path, title: str) -> Path:
    return _write_csv(instructions_frame(instructions), out_csv, title)

def write_profile_comparison(rows: list[dict], out_csv: Path, title: str) -> Path | None:
    """One row per analysed profile; ``rows`` come from metrics.metrics_row."""
    if not rows:
        return None
    df_out = pd.DataFrame(rows).sort_values("total_energy_pJ", kind="stable").reset_index(drop=True)
    return _write_csv(df_out, out_csv, title)

def write_report(instructions: Sequence[ParsedInstruction],
                 profile: CPUProfile,
                 metrics: AggregateMetrics,
                 out_base: Path,
                 title: str,
                 fmt: ReportFormat = "txt",
                 generated_at: datetime | None = None) -> list[Path]:
    """
    Write report(s) in the requested format.
    - out_base is a *base path without extension* (e.g., .../PowerAnalysisReport)
    - fmt: "txt" | "csv" | "both"
    Raises ReportWriteError on the first failed write.
    """
    out_base = Path(out_base)
    written: list[Path] = []
    if fmt in ("txt", "both"):
        text = format_report(instructions, profile, metrics, generated_at=generated_at)
        written.append(write_text_report(text, out_base.with_suffix(".txt"), title))
    if fmt in ("csv", "both"):
        written.append(write_instruction_csv(instructions, out_base.with_suffix(".csv"), title))
    return written
