# power_estimator/core/pipeline.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .classify import classify, configure_from_config
from .metrics import apply_profile, compute_metrics, metrics_row
from .model import AggregateMetrics, ParsedInstruction
from .plotting import _sanitize, save_power_plot
from .profiles import CPUProfile, get_profile
from .reports import ReportWriteError, write_profile_comparison, write_report

@dataclass
class AnalysisResult:
    label: str
    profile: CPUProfile
    instructions: list[ParsedInstruction]      # snapshot valued with ``profile``
    metrics: AggregateMetrics
    report_paths: list[Path] = field(default_factory=list)
    plot_path: Path | None = None

    @property
    def report_path(self) -> Path | None:
        return self.report_paths[0] if self.report_paths else None

def _snapshot(instructions: list[ParsedInstruction]) -> list[ParsedInstruction]:
    return [ParsedInstruction(i.raw_text, i.category, i.power, i.execution_time) for i in instructions]

def resolve_profiles(cfg: dict) -> list[CPUProfile]:
    """Profiles named under cpu.profiles (or cpu.profile); defaults to Basic."""
    cpu = cfg.get("cpu", {}) or {}
    names = cpu.get("profiles")
    if names is None:
        names = [cpu.get("profile", "Basic")]
    elif isinstance(names, str):
        names = [names]
    profiles: list[CPUProfile] = []
    seen: set[str] = set()
    for name in names:
        profile = get_profile(name, cfg)
        if profile.name in seen:
            continue
        seen.add(profile.name)
        profiles.append(profile)
    return profiles

def run_pipeline(source_text: str, label: str, cfg: dict, out_root: Path,
                 generated_at: datetime | None = None) -> list[AnalysisResult]:
    configure_from_config(cfg)
    verbose = bool(cfg.get("logging", {}).get("verbose", True))

    # resolve profiles before any work so config errors surface early
    profiles = resolve_profiles(cfg)

    rep_cfg = cfg.get("reports", {}) or {}
    fmt = str(rep_cfg.get("format", "txt")).lower()
    base_name = Path(str(rep_cfg.get("filename", "PowerAnalysisReport"))).stem

    plot_cfg = cfg.get("plots", {}) or {}
    do_plots = bool(plot_cfg.get("enabled", True))
    low = float(plot_cfg.get("low_threshold_mW", 3.0))
    high = float(plot_cfg.get("high_threshold_mW", 5.0))

    instructions = classify(source_text)
    if verbose:
        print(f"[classify] {label}: {len(instructions)} instruction(s)")

    source_dir = Path(out_root) / (_sanitize(label) or "source")
    results: list[AnalysisResult] = []
    for profile in profiles:
        apply_profile(instructions, profile)
        metrics = compute_metrics(instructions)
        result = AnalysisResult(label, profile, _snapshot(instructions), metrics)
        profile_dir = source_dir / (_sanitize(profile.name) or "profile")

        try:
            result.report_paths = write_report(
                result.instructions, profile, metrics,
                profile_dir / base_name,
                f"{label} [{profile.name}]",
                fmt=fmt,
                generated_at=generated_at,
            )
        except ReportWriteError as e:
            print(f"[WARN] {e}")

        if do_plots:
            try:
                result.plot_path = save_power_plot(label, profile.name, result.instructions,
                                                   profile_dir, low=low, high=high)
            except OSError as e:
                print(f"[WARN] power plot failed for {label} [{profile.name}]: {e}")

        if verbose:
            print(
                f"[summary] {label} [{profile.name}]: "
                f"total={metrics.total_power:.2f} mW, avg={metrics.average_power:.2f} mW, "
                f"time={metrics.total_time:.2f} ns, energy={metrics.total_energy:.2f} pJ"
            )
        results.append(result)

    if len(results) > 1:
        rows = [metrics_row(label, r.profile, r.metrics) for r in results]
        try:
            write_profile_comparison(rows, source_dir / "profile_comparison.csv", f"{label} profiles")
        except ReportWriteError as e:
            print(f"[WARN] {e}")

    return results
