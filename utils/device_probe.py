"""Classify `adb devices` output into a DeviceState."""

from __future__ import annotations

import re

from config.constants import ADBConstants
from utils import adb_commands, common
from utils.adb_models import DeviceState
from utils.command_runner import CommandRunner

logger = common.get_logger('device_probe')

_LINE_SPLIT = re.compile(r'[\r\n]+')


def parse_device_state(stdout: str, stderr: str = '') -> DeviceState:
    """Return the state implied by one `adb devices` reply.

    The first device line that ends with a known marker decides the result.
    Without a match, an "unauthorized" mention on stderr still counts as
    unauthorized; anything else means no device. Never returns UNKNOWN.
    """
    for line in _LINE_SPLIT.split(stdout or ''):
        if not line:
            continue
        lowered = line.lower()
        if lowered.startswith(ADBConstants.DEVICE_LIST_HEADER):
            continue
        if lowered.endswith(ADBConstants.DEVICE_CONNECTED_SUFFIX):
            return DeviceState.CONNECTED
        if lowered.endswith(ADBConstants.DEVICE_UNAUTHORIZED_SUFFIX):
            return DeviceState.UNAUTHORIZED

    if ADBConstants.UNAUTHORIZED_MARKER in (stderr or '').lower():
        return DeviceState.UNAUTHORIZED

    return DeviceState.NOT_FOUND


class DeviceStateProbe:
    """Query adb for the current device state; nothing is cached between calls."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def probe(self) -> DeviceState:
        result = self.runner.run(adb_commands.cmd_get_adb_devices(), capture_only=True)
        state = parse_device_state(result.stdout, result.stderr)
        logger.info('Device state: %s', state.value)
        return state


__all__ = ['DeviceStateProbe', 'parse_device_state']
