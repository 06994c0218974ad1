"""Local APK file helpers for the install panel."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from config.constants import PanelText, PathConstants


@dataclass(frozen=True)
class ApkPreview:
    """What the install panel shows about a chosen file.

    Package name and version are never resolved from the manifest.
    """

    file_name: str = PanelText.LABEL_EMPTY_VALUE
    size_text: str = PanelText.LABEL_EMPTY_VALUE
    package_name: str = PanelText.LABEL_EMPTY_VALUE
    version: str = PanelText.LABEL_EMPTY_VALUE


def format_file_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:
        return f'{size_bytes / 1024.0:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:
        return f'{size_bytes / (1024.0 * 1024.0):.1f} MB'
    return f'{size_bytes / (1024.0 * 1024.0 * 1024.0):.2f} GB'


def is_existing_file(path: str) -> bool:
    return bool(path and path.strip()) and Path(path.strip()).is_file()


def single_apk_from_paths(paths: Optional[Sequence[str]]) -> Optional[str]:
    """Return the path when exactly one existing ``.apk`` file was given."""
    if not paths or len(paths) != 1:
        return None
    candidate = paths[0]
    if not candidate or not candidate.strip():
        return None
    if not candidate.lower().endswith(PathConstants.APK_EXT):
        return None
    if not Path(candidate).is_file():
        return None
    return candidate


def build_apk_preview(path: str) -> ApkPreview:
    if not is_existing_file(path):
        return ApkPreview()
    file_path = Path(path.strip())
    return ApkPreview(
        file_name=file_path.name,
        size_text=format_file_size(file_path.stat().st_size),
    )


__all__ = [
    'ApkPreview',
    'build_apk_preview',
    'format_file_size',
    'is_existing_file',
    'single_apk_from_paths',
]
