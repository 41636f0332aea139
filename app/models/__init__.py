from .goal import Goal
from .user_profile import UserProfile

__all__ = [
    "Goal",
    "UserProfile",
]
