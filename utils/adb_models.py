"""Adb objects models."""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from utils import time_formatting


class DeviceState(Enum):
  """Connectivity state of the tethered headset as seen by `adb devices`."""

  CONNECTED = 'connected'
  UNAUTHORIZED = 'unauthorized'
  NOT_FOUND = 'not_found'
  # Never produced by a probe; kept as the display default.
  UNKNOWN = 'unknown'


@dataclass(frozen=True)
class CommandResult:
  """Exit code and full captured output of one adb invocation."""

  exit_code: int
  stdout: str = ''
  stderr: str = ''

  @property
  def combined_output(self) -> str:
    """stdout first, newline, then stderr."""
    return f'{self.stdout}\n{self.stderr}'


@dataclass(frozen=True)
class InstallOutcome:
  """Classified result of one `adb install` invocation."""

  success: bool
  reason_token: Optional[str]
  advice: str
  elapsed: float
  apk_name: str = ''

  def format_elapsed(self) -> str:
    return time_formatting.format_elapsed(self.elapsed)


@dataclass
class InstallCounters:
  """Lifetime install tallies; they only ever grow."""

  success_count: int = 0
  fail_count: int = 0
  _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

  def record(self, success: bool) -> None:
    with self._lock:
      if success:
        self.success_count += 1
      else:
        self.fail_count += 1

  @property
  def total(self) -> int:
    return self.success_count + self.fail_count


@dataclass
class InstallOptions:
  """Extra flags for `adb install`."""

  replace_existing: bool = True
  allow_downgrade: bool = False
  allow_test_apk: bool = False
