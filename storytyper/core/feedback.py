"""Plain-language feedback shown on the results screen."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recommendation:
    speed_label: str
    accuracy_label: str
    advice: str
    wpm: float
    accuracy: float

    def __str__(self) -> str:
        return (
            f"Speed: {self.speed_label} ({self.wpm:.0f} WPM)\n"
            f"Accuracy: {self.accuracy_label} ({self.accuracy:.1f}%)\n\n"
            f"{self.advice}"
        )


def speed_label(wpm: float) -> str:
    if wpm >= 70:
        return "Excellent"
    if wpm >= 50:
        return "Great"
    if wpm >= 35:
        return "Good"
    if wpm >= 20:
        return "Keep practicing"
    return "Focus on accuracy first"


def accuracy_label(accuracy: float) -> str:
    if accuracy >= 98:
        return "Perfect accuracy!"
    if accuracy >= 95:
        return "Excellent accuracy"
    if accuracy >= 90:
        return "Good accuracy"
    if accuracy >= 80:
        return "Focus on accuracy"
    return "Slow down for better accuracy"


def advice_for(wpm: float, accuracy: float) -> str:
    if wpm >= 50 and accuracy >= 95:
        return "Outstanding! You type like a master. Try longer texts to push yourself further."
    if wpm >= 40 and accuracy >= 90:
        return "Great performance! Keep practicing to reach 50+ WPM with 95% accuracy."
    if wpm < 30 and accuracy < 85:
        return "Get every letter right first, then speed up little by little. Try not to look at the keyboard."
    if accuracy < 90:
        return "Slow down a little. Being accurate matters more than being fast while you learn."
    # accurate (90%+) but under 40 WPM
    return "Lovely accuracy! Now try to type a bit faster while staying careful."


def recommend(wpm: float, accuracy: float) -> Recommendation:
    return Recommendation(
        speed_label=speed_label(wpm),
        accuracy_label=accuracy_label(accuracy),
        advice=advice_for(wpm, accuracy),
        wpm=wpm,
        accuracy=accuracy,
    )
