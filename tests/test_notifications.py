"""
Tests for the notification relay and its Qt bridge.
"""

import queue
import threading
import time
import unittest

from lmsync.data_structures import Notification
from lmsync.notifications import BACKGROUND_NOTICE, NotificationBridge, NotificationRelay


class TestNotificationRelay(unittest.TestCase):

    def test_drain_delivers_everything_in_order(self):
        delivered = []
        relay = NotificationRelay(delivered.append)
        relay.start()
        for i in range(5):
            relay.post(Notification("Grades", f"update {i}"))

        self.assertEqual(relay.shutdown(drain=True, timeout=5), 0)
        self.assertFalse(relay.is_alive())
        self.assertEqual([n.content for n in delivered], [f"update {i}" for i in range(5)])

    def test_shutdown_without_drain_drops_queued(self):
        delivered = []
        started = threading.Event()
        release = threading.Event()

        def slow_sink(notification):
            started.set()
            release.wait(5)
            delivered.append(notification)

        relay = NotificationRelay(slow_sink)
        relay.start()
        relay.post(Notification("first", ""))
        self.assertTrue(started.wait(5))
        relay.post(Notification("second", ""))
        relay.post(Notification("third", ""))

        dropped = relay.shutdown(drain=False, timeout=0)
        release.set()
        relay.join(5)

        self.assertEqual(dropped, 2)
        self.assertEqual([n.title for n in delivered], ["first"])

    def test_shutdown_timeout_with_busy_sink_and_full_queue(self):
        """A hung sink and a producer blocked on a full queue do not block shutdown past its timeout."""
        delivered = []
        started = threading.Event()
        release = threading.Event()

        def slow_sink(notification):
            started.set()
            release.wait(10)
            delivered.append(notification.title)

        relay = NotificationRelay(slow_sink, maxsize=1)
        relay.start()
        relay.post(Notification("first", ""))
        self.assertTrue(started.wait(5))
        relay.post(Notification("second", ""))

        def produce():
            try:
                relay.post(Notification("third", ""))
            except RuntimeError:
                pass

        producer = threading.Thread(target=produce, daemon=True)
        producer.start()
        time.sleep(0.1)

        begin = time.monotonic()
        with self.assertLogs("LMSync", level="WARNING"):
            self.assertEqual(relay.shutdown(drain=True, timeout=0.5), 0)
        self.assertLess(time.monotonic() - begin, 3)
        self.assertTrue(relay.is_alive())

        release.set()
        producer.join(5)
        relay.shutdown(timeout=5)
        self.assertFalse(relay.is_alive())
        self.assertEqual(delivered[:2], ["first", "second"])

    def test_post_after_shutdown(self):
        relay = NotificationRelay(lambda n: None)
        relay.start()
        relay.shutdown(timeout=5)
        with self.assertRaises(RuntimeError):
            relay.post(BACKGROUND_NOTICE)

    def test_full_queue(self):
        relay = NotificationRelay(lambda n: None, maxsize=1)
        relay.post(Notification("a", ""), block=False)
        with self.assertRaises(queue.Full):
            relay.post(Notification("b", ""), block=False)
        self.assertEqual(relay.shutdown(), 1)

    def test_sink_failure_does_not_stop_relay(self):
        delivered = []

        def flaky_sink(notification):
            if notification.title == "bad":
                raise ValueError("boom")
            delivered.append(notification.title)

        relay = NotificationRelay(flaky_sink)
        relay.start()
        with self.assertLogs("LMSync", level="ERROR"):
            relay.post(Notification("bad", ""))
            relay.post(Notification("good", ""))
            relay.shutdown(timeout=5)
        self.assertEqual(delivered, ["good"])


class TestNotificationBridge(unittest.TestCase):

    def test_bridge_emits_signal(self):
        received = []

        def on_received(title, content):
            received.append((title, content))

        bridge = NotificationBridge()
        bridge.received.connect(on_received)
        bridge(BACKGROUND_NOTICE)

        self.assertEqual(received, [(BACKGROUND_NOTICE.title, BACKGROUND_NOTICE.content)])


if __name__ == '__main__':
    unittest.main()
