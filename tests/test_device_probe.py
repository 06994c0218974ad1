import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.adb_models import CommandResult, DeviceState
from utils.device_probe import DeviceStateProbe, parse_device_state


class FakeRunner:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def run(self, args, capture_only=False, timeout=None):
        self.calls.append((list(args), capture_only))
        return self.result


class ParseDeviceStateTest(unittest.TestCase):
    def test_connected_device(self):
        stdout = 'List of devices attached\n1WMHH000000000\tdevice\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.CONNECTED)

    def test_unauthorized_device(self):
        stdout = 'List of devices attached\n1WMHH000000000\tunauthorized\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.UNAUTHORIZED)

    def test_header_only_means_not_found(self):
        self.assertEqual(parse_device_state('List of devices attached\n\n'), DeviceState.NOT_FOUND)

    def test_empty_output_means_not_found(self):
        self.assertEqual(parse_device_state('', ''), DeviceState.NOT_FOUND)

    def test_first_matching_line_wins(self):
        stdout = 'List of devices attached\nAAA\tunauthorized\nBBB\tdevice\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.UNAUTHORIZED)

        stdout = 'List of devices attached\nBBB\tdevice\nAAA\tunauthorized\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.CONNECTED)

    def test_windows_line_endings(self):
        stdout = 'List of devices attached\r\n1WMHH000000000\tdevice\r\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.CONNECTED)

    def test_markers_are_case_insensitive(self):
        stdout = 'List of devices attached\nSERIAL\tDEVICE\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.CONNECTED)

    def test_offline_device_is_not_found(self):
        stdout = 'List of devices attached\nSERIAL\toffline\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.NOT_FOUND)

    def test_marker_must_be_tab_separated_suffix(self):
        stdout = 'List of devices attached\nmy device here\n'
        self.assertEqual(parse_device_state(stdout), DeviceState.NOT_FOUND)

    def test_stderr_unauthorized_fallback(self):
        stderr = 'error: device unauthorized.\nThis adb server\'s $ADB_VENDOR_KEYS is not set'
        self.assertEqual(parse_device_state('List of devices attached\n', stderr), DeviceState.UNAUTHORIZED)

    def test_stdout_match_beats_stderr(self):
        stdout = 'List of devices attached\nSERIAL\tdevice\n'
        self.assertEqual(parse_device_state(stdout, 'unauthorized'), DeviceState.CONNECTED)

    def test_never_returns_unknown(self):
        for stdout, stderr in (('', ''), ('garbage', 'noise'), ('List of devices attached', '')):
            self.assertNotEqual(parse_device_state(stdout, stderr), DeviceState.UNKNOWN)


class DeviceStateProbeTest(unittest.TestCase):
    def test_probe_runs_devices_quietly(self):
        runner = FakeRunner(CommandResult(0, 'List of devices attached\nX\tdevice\n', ''))
        state = DeviceStateProbe(runner).probe()

        self.assertEqual(state, DeviceState.CONNECTED)
        self.assertEqual(runner.calls, [(['devices'], True)])

    def test_probe_does_not_cache(self):
        runner = FakeRunner(CommandResult(0, 'List of devices attached\nX\tdevice\n', ''))
        probe = DeviceStateProbe(runner)
        self.assertEqual(probe.probe(), DeviceState.CONNECTED)

        runner.result = CommandResult(0, 'List of devices attached\n', '')
        self.assertEqual(probe.probe(), DeviceState.NOT_FOUND)
        self.assertEqual(len(runner.calls), 2)


if __name__ == '__main__':
    unittest.main()
