# power_estimator/main.py
from __future__ import annotations
from pathlib import Path
import sys
import yaml

from power_estimator.core.pipeline import resolve_profiles, run_pipeline
from power_estimator.utils.detect import discover_inputs

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def _label_for(path: Path, in_path: Path) -> str:
    if in_path.is_dir():
        try:
            return str(path.relative_to(in_path.resolve()))
        except ValueError:
            pass
    return path.name

def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    # ---------- config ----------
    here = Path(__file__).resolve().parent
    cfg_path = Path(argv[0]) if argv else here / "config.yaml"
    cfg = load_config(cfg_path)

    in_path = Path(cfg["input"]["path"]).resolve()
    recurse = bool(cfg["input"].get("recurse", True))
    out_root = Path(cfg["output"]["root"]).resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    verbose = bool(cfg.get("logging", {}).get("verbose", True))
    if verbose:
        print(f"[cfg] input={in_path} (recurse={recurse})")
        print(f"[cfg] output={out_root}")
        print(f"[cfg] profiles={[p.name for p in resolve_profiles(cfg)]}")

    # ---------- discover ----------
    detected = discover_inputs(in_path, recurse=recurse)
    if not detected:
        print(f"[INFO] No source inputs found under: {in_path}")
        return 0
    if verbose:
        kinds: dict[str, int] = {}
        for d in detected:
            kinds.setdefault(d.language, 0)
            kinds[d.language] += 1
        print(f"[detector] found {sum(kinds.values())} inputs → {kinds}")

    processed = 0
    for item in detected:
        label = _label_for(item.path, in_path)
        if verbose:
            print(f"  [load] {item.language:10} {label}")
        try:
            text = item.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"[WARN] failed to read {item.path.name}: {e}")
            continue
        run_pipeline(text, label, cfg, out_root)
        processed += 1

    if verbose:
        print(f"[summary] analysed {processed} of {len(detected)} input(s)")
    return 0

if __name__ == "__main__":
    sys.exit(main())
