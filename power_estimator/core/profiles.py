# power_estimator/core/profiles.py
from __future__ import annotations
from typing import Callable, Mapping

from .model import InstructionCategory as IC

DEFAULT_POWER_MW: float = 2.0
DEFAULT_TIME_NS: float = 2.0

# execution time per category, identical for every CPU model
_DEFAULT_TIMES: dict[IC, float] = {
    IC.ARITHMETIC: 2.0,
    IC.LOGICAL: 1.5,
    IC.MEMORY: 3.5,
    IC.CONTROL: 1.0,
    IC.BRANCH: 2.5,
    IC.UNKNOWN: 1.8,
}

class CPUProfile:
    """
    Named table of per-category power (mW) and execution time (ns).

    Build it with set_power/set_time, then freeze(); after that the profile is
    read-only and can be shared between any number of analyses.
    """

    def __init__(self, name: str):
        self.name = name
        self._power: dict[IC, float] = {}
        self._time: dict[IC, float] = dict(_DEFAULT_TIMES)
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError(f"CPU profile '{self.name}' is frozen")

    def set_power(self, category: IC, value: float) -> None:
        self._check_mutable()
        self._power[category] = float(value)

    def set_time(self, category: IC, value: float) -> None:
        self._check_mutable()
        self._time[category] = float(value)

    def freeze(self) -> "CPUProfile":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def power_for(self, category: IC) -> float:
        return self._power.get(category, DEFAULT_POWER_MW)

    def time_for(self, category: IC) -> float:
        return self._time.get(category, DEFAULT_TIME_NS)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"CPUProfile({self.name!r})"


def _preset(name: str, power: Mapping[IC, float]) -> CPUProfile:
    profile = CPUProfile(name)
    for category, value in power.items():
        profile.set_power(category, value)
    return profile.freeze()

def create_basic_profile() -> CPUProfile:
    return _preset("Basic", {
        IC.ARITHMETIC: 3.5, IC.LOGICAL: 2.5, IC.MEMORY: 5.0,
        IC.CONTROL: 1.8, IC.BRANCH: 2.8, IC.UNKNOWN: 2.0,
    })

def create_high_performance_profile() -> CPUProfile:
    return _preset("High Performance", {
        IC.ARITHMETIC: 5.0, IC.LOGICAL: 4.0, IC.MEMORY: 6.5,
        IC.CONTROL: 2.5, IC.BRANCH: 4.2, IC.UNKNOWN: 3.5,
    })

def create_low_power_profile() -> CPUProfile:
    return _preset("Low Power", {
        IC.ARITHMETIC: 2.2, IC.LOGICAL: 1.6, IC.MEMORY: 3.8,
        IC.CONTROL: 1.0, IC.BRANCH: 1.8, IC.UNKNOWN: 1.5,
    })

PRESETS: dict[str, Callable[[], CPUProfile]] = {
    "Basic": create_basic_profile,
    "High Performance": create_high_performance_profile,
    "Low Power": create_low_power_profile,
}

def profile_from_mapping(name: str, entry: Mapping) -> CPUProfile:
    """
    Build a frozen profile from a config entry:

        Edge:
          power: {ARITHMETIC: 1.2, MEMORY: 2.9}
          time:  {MEMORY: 4.0}

    Categories left out fall back to the defaults (2.0 mW, seeded times).
    """
    profile = CPUProfile(str(name))
    for key, value in ((entry or {}).get("power") or {}).items():
        profile.set_power(IC.parse(key), value)
    for key, value in ((entry or {}).get("time") or {}).items():
        profile.set_time(IC.parse(key), value)
    return profile.freeze()

def available_profiles(cfg: dict | None = None) -> dict[str, CPUProfile]:
    """Presets first (fixed order), then custom profiles from cfg['profiles']."""
    out = {name: factory() for name, factory in PRESETS.items()}
    custom = (cfg or {}).get("profiles") or {}
    for name, entry in custom.items():
        out[str(name)] = profile_from_mapping(name, entry)
    return out

def get_profile(name: str, cfg: dict | None = None) -> CPUProfile:
    profiles = available_profiles(cfg)
    wanted = str(name).strip().lower()
    for key, profile in profiles.items():
        if key.lower() == wanted:
            return profile
    raise KeyError(f"unknown CPU profile '{name}' (known: {', '.join(profiles)})")
