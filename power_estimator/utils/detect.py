# power_estimator/utils/detect.py
from __future__ import annotations
from pathlib import Path
from dataclasses import dataclass

SOURCE_SUFFIXES: dict[str, str] = {
    ".java": "java",
    ".c": "c", ".h": "c",
    ".cpp": "cpp", ".cc": "cpp", ".cxx": "cpp", ".hpp": "cpp",
    ".js": "javascript", ".ts": "javascript",
    ".cs": "csharp",
    ".txt": "text",
}

@dataclass(frozen=True)
class DetectedItem:
    path: Path        # actual path on disk
    language: str     # informational only; the classifier is language-agnostic

def detect_language(p: Path, suffixes: dict[str, str] | None = None) -> str | None:
    """Language tag for a path by suffix, or None when the suffix is unknown."""
    return (suffixes or SOURCE_SUFFIXES).get(p.suffix.lower())

def discover_inputs(root: Path, recurse: bool = True,
                    suffixes: dict[str, str] | None = None) -> list[DetectedItem]:
    """
    If 'root' is a file -> return that one item (if its suffix is known).
    If 'root' is a folder -> walk (optionally recursively) and collect source files.
    """
    items: list[DetectedItem] = []
    if root.is_file():
        lang = detect_language(root, suffixes)
        if lang is not None:
            items.append(DetectedItem(root.resolve(), lang))
        return items
    if not root.is_dir():
        return items

    it = root.rglob("*") if recurse else root.glob("*")
    for p in it:
        if not p.is_file():
            continue
        lang = detect_language(p, suffixes)
        if lang is not None:
            items.append(DetectedItem(p.resolve(), lang))

    # deterministic ordering
    items.sort(key=lambda x: str(x.path))
    return items
