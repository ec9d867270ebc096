"""
Data structures for LMSync.
Uses dataclasses for the records persisted by the credentials, preferences and
integration stores.
"""

from dataclasses import dataclass, fields, MISSING
from enum import IntEnum
from typing import Any, ClassVar, Dict, List


class Record:
    """
    Mixin for persisted dataclasses.

    The pickled state is the field dict plus the record's schema version. On
    load, fields missing from an older file get their defaults and fields that
    no longer exist are dropped.
    """
    SCHEMA_VERSION: ClassVar[int] = 1

    def __getstate__(self) -> Dict[str, Any]:
        state = {f.name: getattr(self, f.name) for f in fields(self)}
        state["_schema_version"] = self.SCHEMA_VERSION
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        for f in fields(self):
            if f.name in state:
                value = state[f.name]
            elif f.default is not MISSING:
                value = f.default
            elif f.default_factory is not MISSING:
                value = f.default_factory()
            else:
                value = None
            object.__setattr__(self, f.name, value)


@dataclass
class Credentials(Record):
    """Login details for the learning-management system."""
    username: str = ""
    password: str = ""
    password_in_keyring: bool = False

    def is_complete(self) -> bool:
        return bool(self.username and self.password)


@dataclass
class Preferences(Record):
    """Sync settings: root directory for synced files and hours between syncs (-1 disables)."""
    directory: str = ""
    frequency: int = 1


@dataclass
class TelegramInfo(Record):
    """Telegram bot token and the user ID notifications are sent to."""
    bot_api: str = ""
    user_id: str = ""

    def is_complete(self) -> bool:
        return bool(self.bot_api and self.user_id)


@dataclass
class Notification:
    """A desktop notification."""
    title: str
    content: str


class Frequency(IntEnum):
    """Hours between automatic syncs."""
    DISABLED = -1
    ONE_HOUR = 1
    TWO_HOUR = 2
    FOUR_HOUR = 4
    SIX_HOUR = 6
    TWELVE_HOUR = 12

    @property
    def label(self) -> str:
        return _FREQUENCY_LABELS[self]

    @classmethod
    def labels(cls) -> List[str]:
        """Labels in display order, disabled first."""
        return [member.label for member in cls]

    @classmethod
    def from_label(cls, label: str) -> "Frequency":
        """Maps a display label to its frequency. Unknown labels fall back to one hour."""
        for member, member_label in _FREQUENCY_LABELS.items():
            if member_label == label:
                return member
        return cls.ONE_HOUR

    @classmethod
    def from_hours(cls, hours: int) -> "Frequency":
        """Raises ValueError for hour counts that are not offered."""
        return cls(hours)


_FREQUENCY_LABELS: Dict[Frequency, str] = {
    Frequency.DISABLED: "Disabled",
    Frequency.ONE_HOUR: "1 hour",
    Frequency.TWO_HOUR: "2 hour",
    Frequency.FOUR_HOUR: "4 hour",
    Frequency.SIX_HOUR: "6 hour",
    Frequency.TWELVE_HOUR: "12 hour",
}
