"""Utility with commands functions for adb.

Every builder returns the argument vector that follows the adb executable;
nothing here is ever joined into a shell string.
"""

from typing import List, Optional

from config.constants import ADBConstants
from utils import adb_models


def cmd_get_adb_devices() -> List[str]:
  return list(ADBConstants.CMD_DEVICES)


def cmd_kill_adb_server() -> List[str]:
  return list(ADBConstants.CMD_KILL_SERVER)


def cmd_start_adb_server() -> List[str]:
  return list(ADBConstants.CMD_START_SERVER)


def cmd_adb_install(apk_path: str, options: Optional[adb_models.InstallOptions] = None) -> List[str]:
  """Build the install command.

  Args:
    apk_path: absolute path of the apk on this computer.
    options: install flags; replace-existing is on by default.

  Returns:
    The argument vector, with the apk path as its own element.
  """
  options = options or adb_models.InstallOptions()
  args = ['install']
  if options.replace_existing:
    args.append('-r')
  if options.allow_downgrade:
    args.append('-d')
  if options.allow_test_apk:
    args.append('-t')
  args.append(apk_path)
  return args


def cmd_input_text(encoded_text: str) -> List[str]:
  """Build `shell input text` for text already passed through the encoder."""
  return ['shell', 'input', 'text', encoded_text]
