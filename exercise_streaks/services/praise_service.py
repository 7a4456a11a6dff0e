"""Praise messages shown right after a day is recorded.

Decision order, first match wins:
1. Streak milestone (exact day count)
2. Total-records milestone (exact record count)
3. Streak tier (2+ days)
4. A random everyday compliment
"""

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from exercise_streaks.schemas import MilestoneResult

MessagePicker = Callable[[Sequence[str]], str]


@dataclass(frozen=True)
class Milestone:
    threshold: int
    message: str
    category: str
    animation: str


STREAK_MILESTONES: tuple[Milestone, ...] = (
    Milestone(7, "7日連続！🎉 1週間達成！", "milestone", "confetti"),
    Milestone(10, "10日連続！⭐ 二桁達成！", "milestone", "star"),
    Milestone(14, "14日連続！🔥 2週間達成！", "milestone", "fire"),
    Milestone(21, "21日連続！🌟 習慣形成完了！", "milestone", "sparkle"),
    Milestone(30, "30日連続！🎯 完全に習慣化！", "habit", "rainbow"),
    Milestone(50, "50日連続！🏆 もはや達人！", "master", "fireworks"),
    Milestone(100, "100日連続！🎊 伝説の領域！", "legendary", "celebration"),
)

TOTAL_MILESTONES: tuple[Milestone, ...] = (
    Milestone(10, "10回達成！🎉 二桁突入！", "milestone", "confetti"),
    Milestone(30, "30回達成！⭐ 継続の力！", "milestone", "star"),
    Milestone(50, "50回達成！🌟 半世紀達成！", "milestone", "sparkle"),
    Milestone(100, "100回達成！🎯 三桁の壁突破！", "milestone", "rainbow"),
    Milestone(200, "200回達成！🏆 継続の王者！", "master", "fireworks"),
    Milestone(365, "365回達成！🎊 1年分の記録！", "legendary", "celebration"),
)

# (minimum streak, message template, category, animation), highest first
STREAK_TIERS: tuple[tuple[int, str, str, str], ...] = (
    (30, "{days}日連続！もはや習慣！🎉", "streak-long", "pulse"),
    (14, "{days}日連続！すごすぎる！🔥", "streak-medium", "pulse"),
    (7, "{days}日連続！1週間達成！⭐", "streak-week", "bounce"),
    (3, "{days}日連続！調子いいね！💪", "streak-short", "bounce"),
    (2, "{days}日連続！その調子！👍", "streak-start", "bounce"),
)

DAILY_MESSAGES: tuple[str, ...] = (
    "今日やってえらい！",
    "すごい！",
    "その調子！",
    "素晴らしい！",
    "よくやった！",
    "継続は力なり！",
)
DAILY_CATEGORY = "daily"
DAILY_ANIMATION = "bounce"

# Shown instead of praise when the day was already recorded
ALREADY_RECORDED_MESSAGE = "既に記録済みです"
ALREADY_RECORDED_PRAISE = MilestoneResult(
    message="今日はもう頑張りました！",
    category=DAILY_CATEGORY,
    animation=DAILY_ANIMATION,
    is_milestone=False,
)


def _exact_match(value: int, table: Sequence[Milestone]) -> Milestone | None:
    for milestone in table:
        if milestone.threshold == value:
            return milestone
    return None


def _as_result(milestone: Milestone) -> MilestoneResult:
    return MilestoneResult(
        message=milestone.message,
        category=milestone.category,
        animation=milestone.animation,
        is_milestone=True,
    )


def check_milestone(current_streak: int, total_records: int) -> MilestoneResult | None:
    """Milestone newly reached by this record, streak milestones first."""
    streak_hit = _exact_match(current_streak, STREAK_MILESTONES)
    if streak_hit:
        return _as_result(streak_hit)

    total_hit = _exact_match(total_records, TOTAL_MILESTONES)
    if total_hit:
        return _as_result(total_hit)

    return None


def streak_message(
    current_streak: int, pick: MessagePicker = random.choice
) -> MilestoneResult:
    """Tiered streak message, or an everyday compliment below two days."""
    for minimum, template, category, animation in STREAK_TIERS:
        if current_streak >= minimum:
            return MilestoneResult(
                message=template.format(days=current_streak),
                category=category,
                animation=animation,
                is_milestone=False,
            )

    return MilestoneResult(
        message=pick(DAILY_MESSAGES),
        category=DAILY_CATEGORY,
        animation=DAILY_ANIMATION,
        is_milestone=False,
    )


def classify_praise(
    current_streak: int,
    total_records: int,
    *,
    pick: MessagePicker | None = None,
    seed: int | None = None,
) -> MilestoneResult:
    """Choose the praise for a freshly recorded day.

    Both counts must already include the new record.

    Args:
        current_streak: Streak as of the recorded day
        total_records: All records of the user
        pick: Chooses the everyday compliment; takes precedence over seed
        seed: Seeds a private random source for reproducible picks

    Raises:
        ValueError: If either count is negative
    """
    if current_streak < 0 or total_records < 0:
        raise ValueError(
            f"Counts must be non-negative, got streak={current_streak} "
            f"total={total_records}"
        )

    if pick is None:
        pick = random.Random(seed).choice if seed is not None else random.choice

    milestone = check_milestone(current_streak, total_records)
    if milestone:
        return milestone
    return streak_message(current_streak, pick)
