# power_estimator/core/plotting.py
from __future__ import annotations
from pathlib import Path
import re
from typing import Sequence
import matplotlib.pyplot as plt
import numpy as np

from .model import ParsedInstruction

# bar colours by power band (mW)
LOW_COLOR = "#228b22"     # green
MID_COLOR = "#ffd700"     # yellow
HIGH_COLOR = "#dc143c"    # red

def power_colors(powers, low: float = 3.0, high: float = 5.0) -> list[str]:
    p = np.asarray(powers, dtype=float)
    colors = np.where(p <= low, LOW_COLOR, np.where(p <= high, MID_COLOR, HIGH_COLOR))
    return colors.tolist()

def _sanitize(name: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")
    return s[:120] if len(s) > 120 else s

def save_power_plot(label: str,
                    profile_name: str,
                    instructions: Sequence[ParsedInstruction],
                    out_dir: Path,
                    low: float = 3.0,
                    high: float = 5.0) -> Path | None:
    """
    Bar chart of power per instruction, one bar per step, coloured by band.
    Returns the PNG path, or None when there is nothing to draw.
    """
    if not instructions:
        print(f"[INFO] {label} [{profile_name}]: no instructions; skipping power plot.")
        return None
    out_dir.mkdir(parents=True, exist_ok=True)

    steps = np.arange(1, len(instructions) + 1)
    powers = [instr.power for instr in instructions]

    plt.figure(figsize=(max(7, min(0.35 * len(steps), 24)), 5))
    plt.bar(steps, powers, color=power_colors(powers, low, high))
    plt.xlabel("Instruction Number")
    plt.ylabel("Power (mW)")
    plt.title(f"Power Usage for Each Instruction ({profile_name} CPU)")
    if len(steps) <= 40:
        plt.xticks(steps)
    plt.grid(True, axis="y", alpha=0.3)
    plt.tight_layout()

    out_path = out_dir / f"{_sanitize(label) or 'source'}_power.png"
    plt.savefig(out_path, dpi=160)
    plt.close()
    print(f"[OK] {label} [{profile_name}]: {len(instructions)} bars → {out_path}")
    return out_path
