from .stretch import Stretch
from .stretch_history import StretchHistory
from .user_preference import UserPreference

__all__ = [
    "Stretch",
    "StretchHistory",
    "UserPreference",
]
