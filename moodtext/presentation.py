from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from moodtext.mood_types import MoodLabel


@dataclass(frozen=True)
class MoodDisplay:
    emoji: str
    color: str


# Owned by the display layer; MoodLabel itself carries no presentation.
MOOD_DISPLAY: Mapping[MoodLabel, MoodDisplay] = {
    MoodLabel.NEGATIVE: MoodDisplay(emoji="😔", color="red"),
    MoodLabel.POSITIVE: MoodDisplay(emoji="😁", color="green"),
    MoodLabel.NEUTRAL: MoodDisplay(emoji="😶", color="gray"),
}


def display_for(mood: MoodLabel) -> MoodDisplay:
    return MOOD_DISPLAY[mood]
