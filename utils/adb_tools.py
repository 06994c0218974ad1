"""Locate the adb executable used by every device operation."""

import glob
import os
import platform
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from config.constants import ADBConstants, PathConstants

from utils import common
from utils import session_log


logger = common.get_logger('adb_tools')


class AdbNotFoundError(FileNotFoundError):
  """Raised when no usable adb executable can be located."""


def _adb_executable_name() -> str:
  return 'adb.exe' if platform.system().lower() == 'windows' else 'adb'


def _is_executable(path: str) -> bool:
  return os.path.isfile(path) and os.access(path, os.X_OK)


def bundled_adb_path(base_dir: Optional[Path] = None) -> Path:
  """Return `<application dir>/adb/adb(.exe)`."""
  base_dir = base_dir or session_log.application_base_dir()
  return Path(base_dir) / PathConstants.BUNDLED_ADB_DIR / _adb_executable_name()


def _sdk_candidates() -> List[str]:
  system = platform.system().lower()
  candidates: List[str] = []
  for pattern in ADBConstants.SDK_ADB_LOCATIONS.get(system, []):
    expanded = os.path.expanduser(pattern)
    if '*' in expanded:
      candidates.extend(sorted(glob.glob(expanded)))
    else:
      candidates.append(expanded)
  return candidates


def candidate_adb_paths(configured_path: str = '', base_dir: Optional[Path] = None) -> Iterable[str]:
  """Yield adb locations in priority order.

  The configured override comes first, then the copy bundled next to the
  application, then whatever is on PATH, then the usual SDK locations.
  """
  if configured_path and configured_path.strip():
    yield os.path.expanduser(configured_path.strip())

  yield str(bundled_adb_path(base_dir))

  on_path = shutil.which('adb')
  if on_path:
    yield on_path

  yield from _sdk_candidates()


def resolve_adb_path(configured_path: str = '', base_dir: Optional[Path] = None) -> Optional[str]:
  """Return the first existing adb executable, or None."""
  for candidate in candidate_adb_paths(configured_path, base_dir):
    if _is_executable(candidate):
      logger.debug('Using adb at %s', candidate)
      return candidate
  return None


def ensure_adb_exists(configured_path: str = '', base_dir: Optional[Path] = None) -> str:
  """Return the adb path or raise AdbNotFoundError.

  Callers run this before every operation; a missing adb is never retried
  automatically.
  """
  adb_path = resolve_adb_path(configured_path, base_dir)
  if adb_path is None:
    logger.error('adb executable not found (configured=%r)', configured_path)
    raise AdbNotFoundError('adb executable not found')
  return adb_path
