from unittest import TestCase

from cloudsync.util.notifications import EMPTY_NOTIFICATION_REGISTRATION, NotificationSource


class TestNotificationSource(TestCase):
    def test_handlers_receive_arguments_in_priority_order(self):
        source = NotificationSource()
        calls = []
        source.register(lambda *args: calls.append(("late", args)), priority=10)
        source.register(lambda *args: calls.append(("early", args)), priority=-10)
        source.fire("123", "steam")
        self.assertEqual(calls, [("early", ("123", "steam")), ("late", ("123", "steam"))])

    def test_unregister(self):
        source = NotificationSource()
        calls = []
        registration = source.register(calls.append)
        self.assertTrue(registration.is_registered)
        registration.unregister()
        self.assertFalse(registration.is_registered)
        self.assertFalse(source.has_handlers)
        source.fire("ignored")
        self.assertEqual(calls, [])

    def test_failing_handler_does_not_stop_others(self):
        source = NotificationSource()
        calls = []

        def broken(_value):
            raise RuntimeError("broken")

        source.register(broken, priority=0)
        source.register(calls.append, priority=1)
        source.fire("value")
        self.assertEqual(calls, ["value"])

    def test_empty_registration(self):
        self.assertFalse(EMPTY_NOTIFICATION_REGISTRATION.is_registered)
        EMPTY_NOTIFICATION_REGISTRATION.unregister()
