"""Request language.

Clients send an integer code; it is converted to ``Language`` once at the
boundary and passed around as the enum from then on.
"""

from enum import Enum


class Language(Enum):
    EN = 1
    RU = 2
    HY = 3

    @classmethod
    def from_code(cls, code: int | None) -> "Language":
        """Convert a client language code. Missing codes default to English."""
        if code is None:
            return cls.EN
        return cls(int(code))
