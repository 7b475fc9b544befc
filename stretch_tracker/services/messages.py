"""User-facing message pools for the selector and the dashboard summary."""
from __future__ import annotations

import random
from typing import Optional

EMPTY_CATALOG_TITLE = "No stretches available"
EMPTY_CATALOG_MESSAGE = "Please add some stretches in the Settings tab!"

LIMIT_REACHED_TITLE = "Daily Goals Achieved! 🎯"

LIMIT_REACHED_MESSAGES = (
    "🌟 Amazing work today! You've reached your daily stretch goals. Your body is grateful for the care you've shown it!",
    "🎉 Fantastic job! You've completed your stretching for today. Take a moment to appreciate how good your body feels!",
    "💪 Well done! You've given your body the attention it deserves today. Rest and recovery are just as important!",
    "🧘 Excellent dedication! You've honored your commitment to wellness today. Your future self will thank you!",
    "✨ Outstanding! You've completed your daily stretch routine. Enjoy the improved flexibility and mobility!",
    "🏆 Incredible consistency! You've reached today's stretch limit. Your body is stronger and more flexible because of your efforts!",
    "🌈 Beautiful work! You've given your muscles the love they needed today. Tomorrow brings new opportunities to stretch and grow!",
    "💚 Wonderful job! You've completed your stretching goals for today. Your dedication to self-care is inspiring!",
)


def limit_reached_message(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(LIMIT_REACHED_MESSAGES)


def _today_tier(count: int) -> list[str]:
    if count == 0:
        return [
            "Ready to start your stretching journey today? 🌟",
            "Your body is waiting for some love and movement! 💪",
            "Every stretch counts - let's begin! 🎯",
            "Time to show your muscles some care! 🤗",
        ]
    if count < 3:
        return [
            f"Great start! You've done {count} stretch(es) today! 🎉",
            "You're building momentum - keep it up! 🚀",
            "Your body is thanking you already! 💚",
            "Consistency is key - you're doing amazing! ⭐",
        ]
    if count < 5:
        return [
            f"Fantastic! You've completed {count} stretches today! 🏆",
            "You're on fire today! Your flexibility is improving! 🔥",
            "Look at you go! Your dedication is inspiring! 💫",
            "Your future self will thank you for this! 🙏",
        ]
    return [
        f"INCREDIBLE! You've done {count} stretches today! 🎊",
        "You're a stretching superstar! 🌟",
        "Your commitment to wellness is outstanding! 👑",
        "You've exceeded expectations - amazing work! 🎯",
    ]


def motivational_pool(today_count: int, streak: int) -> list[str]:
    """All candidate messages for the given day count and streak."""
    pool = _today_tier(today_count)
    if streak > 1:
        pool += [
            f"Plus you're on a {streak} day streak! 🔥",
            f"Your {streak} day streak is impressive! 💪",
            f"Day {streak} of your amazing streak! 🚀",
        ]
    return pool
