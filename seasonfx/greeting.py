"""Clock and greeting text for the dashboard overlay."""

from __future__ import annotations

from datetime import datetime
from typing import Tuple

DEFAULT_NAME = "Friend"


def format_clock(now: datetime) -> str:
    return now.strftime("%H:%M:%S")


def format_date(now: datetime) -> str:
    # e.g. "Friday, October 16, 2026"
    return f"{now.strftime('%A, %B')} {now.day}, {now.year}"


def hand_angles(now: datetime) -> Tuple[float, float, float]:
    """Analog hour/minute/second hand angles in degrees, clockwise from 12."""
    hours = now.hour % 12
    return hours * 30 + now.minute * 0.5, now.minute * 6.0, now.second * 6.0


def greeting_for(hour: int, name: str | None = None) -> Tuple[str, str]:
    who = name or DEFAULT_NAME
    if 0 <= hour < 4:
        return f"Good Night, {who}...", "Time to rest and recharge for tomorrow"
    if 4 <= hour < 12:
        return f"Good Morning, {who}...", "Hope you have a productive day ahead!"
    if 12 <= hour < 16:
        return f"Good Afternoon, {who}...", "Keep up the great work today!"
    return f"Good Evening, {who}...", "Time to unwind and reflect on today"
