"""Reading-speed bands and the WPM sub-score."""

from enum import StrEnum

IDEAL_WPM_RANGE: tuple[float, float] = (150.0, 160.0)
ACCEPTABLE_WPM_RANGE: tuple[float, float] = (120.0, 180.0)


class WPMPerformance(StrEnum):
    """Reading-speed band."""

    TOO_SLOW = "too_slow"
    BELOW_TARGET = "below_target"
    IDEAL = "ideal"
    ABOVE_TARGET = "above_target"
    TOO_FAST = "too_fast"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def color(self) -> str:
        if self == WPMPerformance.IDEAL:
            return "green"
        if self in (WPMPerformance.BELOW_TARGET, WPMPerformance.ABOVE_TARGET):
            return "orange"
        return "red"


_DESCRIPTIONS: dict[WPMPerformance, str] = {
    WPMPerformance.TOO_SLOW: "Too slow - try to read faster",
    WPMPerformance.BELOW_TARGET: "Below target - good pace but could be faster",
    WPMPerformance.IDEAL: "Perfect pace - ideal reading speed!",
    WPMPerformance.ABOVE_TARGET: "Above target - good speed but watch clarity",
    WPMPerformance.TOO_FAST: "Too fast - slow down for better comprehension",
}


def classify_wpm(wpm: float) -> WPMPerformance:
    """Map a words-per-minute value to its performance band."""
    if wpm < 100:
        return WPMPerformance.TOO_SLOW
    elif wpm < 150:
        return WPMPerformance.BELOW_TARGET
    elif wpm <= 160:
        return WPMPerformance.IDEAL
    elif wpm < 200:
        return WPMPerformance.ABOVE_TARGET
    else:
        return WPMPerformance.TOO_FAST


def wpm_score(wpm: float) -> int:
    """Convert a reading speed into a 10-100 sub-score.

    Args:
        wpm: Words per minute.

    Returns:
        Score truncated to an integer; 100 only inside the ideal band.
    """
    performance = classify_wpm(wpm)
    if performance == WPMPerformance.IDEAL:
        return 100
    if performance == WPMPerformance.BELOW_TARGET:
        # 70 at 100 wpm rising towards 95 at 150 wpm
        progress = (wpm - 100) / 50
        return int(70 + progress * 25)
    if performance == WPMPerformance.ABOVE_TARGET:
        excess = min(wpm - 160, 40)
        return int(95 - excess / 40 * 25)
    if performance == WPMPerformance.TOO_SLOW:
        progress = min(wpm / 100, 1.0)
        return int(10 + progress * 60)
    return max(10, 70 - int((wpm - 200) / 10))
