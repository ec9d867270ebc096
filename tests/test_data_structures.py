"""
Basic tests for the LMSync records.
"""

import unittest

from lmsync.data_structures import Credentials, Frequency, Notification, Preferences, TelegramInfo


class TestRecords(unittest.TestCase):

    def test_credentials_dataclass(self):
        credentials = Credentials("nusstu\\e0123456", "hunter2")
        self.assertEqual(credentials.username, "nusstu\\e0123456")
        self.assertEqual(credentials.password, "hunter2")
        self.assertFalse(credentials.password_in_keyring)
        self.assertTrue(credentials.is_complete())
        self.assertFalse(Credentials("user").is_complete())

    def test_preferences_defaults(self):
        preferences = Preferences()
        self.assertEqual(preferences.directory, "")
        self.assertEqual(preferences.frequency, 1)

    def test_telegram_info_dataclass(self):
        self.assertTrue(TelegramInfo("123:abc", "42").is_complete())
        self.assertFalse(TelegramInfo(bot_api="123:abc").is_complete())

    def test_notification_dataclass(self):
        notification = Notification("Grades", "New grade released")
        self.assertEqual(notification.title, "Grades")
        self.assertEqual(notification.content, "New grade released")

    def test_state_from_older_file_gets_defaults(self):
        """Fields missing from saved state take their defaults; unknown fields are dropped."""
        preferences = Preferences.__new__(Preferences)
        preferences.__setstate__({"directory": "/srv/files", "legacy_flag": True, "_schema_version": 0})
        self.assertEqual(preferences, Preferences(directory="/srv/files", frequency=1))
        self.assertFalse(hasattr(preferences, "legacy_flag"))

    def test_state_carries_schema_version(self):
        state = TelegramInfo("t", "u").__getstate__()
        self.assertEqual(state, {"bot_api": "t", "user_id": "u", "_schema_version": TelegramInfo.SCHEMA_VERSION})


class TestFrequency(unittest.TestCase):

    def test_labels_in_display_order(self):
        self.assertEqual(Frequency.labels(), ["Disabled", "1 hour", "2 hour", "4 hour", "6 hour", "12 hour"])

    def test_from_label(self):
        self.assertEqual(Frequency.from_label("Disabled"), Frequency.DISABLED)
        self.assertEqual(Frequency.from_label("12 hour"), Frequency.TWELVE_HOUR)
        self.assertEqual(Frequency.from_label("every minute"), Frequency.ONE_HOUR)

    def test_from_hours(self):
        self.assertEqual(Frequency.from_hours(-1).label, "Disabled")
        self.assertEqual(Frequency.from_hours(6), Frequency.SIX_HOUR)
        with self.assertRaises(ValueError):
            Frequency.from_hours(3)


if __name__ == '__main__':
    unittest.main()
