import os
import sys
import threading
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.constants import MessageConstants
from utils.adb_models import DeviceState, InstallCounters
from utils.session_guard import SessionBusyError, SessionState, guard


class GuardTest(unittest.TestCase):
    def setUp(self):
        self.notices = []

    def _notify(self, level, title, message):
        self.notices.append((level, title, message))

    def test_connected_passes_without_notice(self):
        self.assertTrue(guard(DeviceState.CONNECTED, self._notify))
        self.assertEqual(self.notices, [])

    def test_not_found_is_rejected(self):
        self.assertFalse(guard(DeviceState.NOT_FOUND, self._notify))
        self.assertEqual(
            self.notices,
            [('warning', MessageConstants.TITLE_DEVICE_NOT_CONNECTED, MessageConstants.WARNING_DEVICE_NOT_CONNECTED)],
        )

    def test_unauthorized_is_rejected(self):
        self.assertFalse(guard(DeviceState.UNAUTHORIZED, self._notify))
        self.assertEqual(self.notices[0][1], MessageConstants.TITLE_AUTHORIZATION_NEEDED)

    def test_unknown_is_rejected(self):
        self.assertFalse(guard(DeviceState.UNKNOWN, self._notify))
        self.assertEqual(self.notices[0][1], MessageConstants.TITLE_DEVICE_NOT_READY)

    def test_notifier_is_optional(self):
        self.assertFalse(guard(DeviceState.NOT_FOUND))


class SessionStateTest(unittest.TestCase):
    def test_acquire_and_release(self):
        state = SessionState()
        self.assertFalse(state.busy)

        state.acquire('install_apk')
        self.assertTrue(state.busy)
        self.assertEqual(state.busy_label, 'install_apk')

        state.release()
        self.assertFalse(state.busy)
        self.assertIsNone(state.busy_label)

    def test_overlapping_acquire_raises(self):
        state = SessionState()
        state.acquire('install_apk')

        with self.assertRaises(SessionBusyError) as ctx:
            state.acquire('send_text')

        self.assertEqual(ctx.exception.running, 'install_apk')
        self.assertEqual(ctx.exception.requested, 'send_text')
        self.assertEqual(state.busy_label, 'install_apk')

    def test_only_one_thread_wins(self):
        state = SessionState()
        winners = []
        losers = []
        barrier = threading.Barrier(8)

        def attempt(index):
            barrier.wait()
            try:
                state.acquire(f'op-{index}')
                winners.append(index)
            except SessionBusyError:
                losers.append(index)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(winners), 1)
        self.assertEqual(len(losers), 7)

    def test_counters_are_shared(self):
        counters = InstallCounters()
        state = SessionState(counters)
        self.assertIs(state.counters, counters)


if __name__ == '__main__':
    unittest.main()
