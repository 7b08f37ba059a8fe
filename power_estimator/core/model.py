# power_estimator/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

class InstructionCategory(Enum):
    ARITHMETIC = "ARITHMETIC"   # +, -, *, /, %, math.*
    MEMORY = "MEMORY"           # [], new, malloc/free
    BRANCH = "BRANCH"           # if, else, switch, case
    CONTROL = "CONTROL"         # for, while, do, break, continue, return
    LOGICAL = "LOGICAL"         # &&, ||, !, ^, &, |
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, name: str) -> "InstructionCategory":
        """Case-insensitive lookup by member name (used for config keys)."""
        key = str(name).strip().upper()
        try:
            return cls[key]
        except KeyError:
            known = ", ".join(c.name for c in cls)
            raise ValueError(f"unknown instruction category '{name}' (known: {known})") from None


@dataclass
class ParsedInstruction:
    raw_text: str                        # trimmed source line, never empty
    category: InstructionCategory        # fixed at creation
    power: float = 0.0                   # mW, set by metrics.apply_profile
    execution_time: float = 0.0          # ns, set by metrics.apply_profile

    def __setattr__(self, name, value):
        if name in ("raw_text", "category") and name in self.__dict__:
            raise AttributeError(f"ParsedInstruction.{name} is read-only")
        super().__setattr__(name, value)

    @property
    def energy(self) -> float:
        return self.power * self.execution_time

    def short_text(self, limit: int = 50) -> str:
        if len(self.raw_text) > limit:
            return self.raw_text[: limit - 3] + "..."
        return self.raw_text


@dataclass(frozen=True)
class AggregateMetrics:
    instruction_count: int
    total_power: float          # mW
    average_power: float        # mW
    total_time: float           # ns
    total_energy: float         # pJ, sum of power * time per instruction
    count_by_category: dict[InstructionCategory, int] = field(default_factory=dict)

    def count(self, category: InstructionCategory) -> int:
        return self.count_by_category.get(category, 0)
