from __future__ import annotations

from pathlib import Path

AMOSTRAS_SUBDIR = "amostras"
VIDEOS_SUBDIR = "videos"

# Order matters: first match wins.
ROUTES: tuple[tuple[str, str], ...] = (
    ("amostra", AMOSTRAS_SUBDIR),
    ("video", VIDEOS_SUBDIR),
)


def route_subdirectory(name: str) -> str:
    """
    Pick the storage subdirectory for an original filename ("" is the root).
    """
    lowered = (name or "").lower()
    for needle, subdir in ROUTES:
        if needle in lowered:
            return subdir
    return ""


def ensure_destination(root: Path, name: str) -> Path:
    destination = root / route_subdirectory(name)
    destination.mkdir(parents=True, exist_ok=True)
    return destination
