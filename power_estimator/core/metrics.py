# power_estimator/core/metrics.py
from __future__ import annotations
from typing import Sequence
import pandas as pd

from .model import AggregateMetrics, InstructionCategory, ParsedInstruction
from .profiles import CPUProfile

FRAME_COLUMNS = ["index", "category", "power_mW", "time_ns", "energy_pJ", "line"]

def apply_profile(instructions: Sequence[ParsedInstruction], profile: CPUProfile) -> None:
    # overwrite, never accumulate: re-applying any profile is idempotent
    for instr in instructions:
        instr.power = profile.power_for(instr.category)
        instr.execution_time = profile.time_for(instr.category)

def total_power(instructions: Sequence[ParsedInstruction]) -> float:
    return sum((i.power for i in instructions), 0.0)

def average_power(instructions: Sequence[ParsedInstruction]) -> float:
    if not instructions:
        return 0.0
    return total_power(instructions) / len(instructions)

def total_time(instructions: Sequence[ParsedInstruction]) -> float:
    return sum((i.execution_time for i in instructions), 0.0)

def total_energy(instructions: Sequence[ParsedInstruction]) -> float:
    return sum((i.power * i.execution_time for i in instructions), 0.0)

def count_by_category(instructions: Sequence[ParsedInstruction]) -> dict[InstructionCategory, int]:
    counts = {c: 0 for c in InstructionCategory}
    for instr in instructions:
        counts[instr.category] += 1
    return counts

def compute_metrics(instructions: Sequence[ParsedInstruction]) -> AggregateMetrics:
    return AggregateMetrics(
        instruction_count=len(instructions),
        total_power=total_power(instructions),
        average_power=average_power(instructions),
        total_time=total_time(instructions),
        total_energy=total_energy(instructions),
        count_by_category=count_by_category(instructions),
    )

def instructions_frame(instructions: Sequence[ParsedInstruction]) -> pd.DataFrame:
    """Per-instruction table (1-based index) for CSV export and plotting."""
    rows = [
        {
            "index": n,
            "category": instr.category.name,
            "power_mW": instr.power,
            "time_ns": instr.execution_time,
            "energy_pJ": instr.energy,
            "line": instr.raw_text,
        }
        for n, instr in enumerate(instructions, start=1)
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)

def metrics_row(label: str, profile: CPUProfile, m: AggregateMetrics) -> dict:
    row = {
        "source": label,
        "profile": profile.name,
        "n_instructions": m.instruction_count,
        "total_power_mW": round(m.total_power, 6),
        "average_power_mW": round(m.average_power, 6),
        "total_time_ns": round(m.total_time, 6),
        "total_energy_pJ": round(m.total_energy, 6),
    }
    for category in InstructionCategory:
        row[f"n_{category.name.lower()}"] = m.count(category)
    return row
