"""Progression engine: progressive overload advice and personal records."""

import math
from collections.abc import Sequence
from datetime import date

import structlog

from fittrack.core.config import Settings, settings
from fittrack.models.personal_record import (
    REP_RECORD_TARGETS,
    PersonalRecord,
    PersonalRecordType,
)
from fittrack.schemas.progression import (
    ExerciseSession,
    ExperienceLevel,
    ProgressionAction,
    Recommendation,
    WarmupSet,
)
from fittrack.services.record_store import RecordStore

logger = structlog.get_logger()

# Decision thresholds
RECENT_WINDOW = 3
MIN_SESSIONS = 2
DEFAULT_RPE = 7.0
CONSISTENCY_TOLERANCE = 0.05
REGRESSION_THRESHOLD = -0.10
DELOAD_RPE = 8.5
DELOAD_FACTOR = 0.6
COMPOUND_INCREMENT = 5.0
ISOLATION_INCREMENT = 2.5

# Brzycki is undefined at 37 reps and meaningless above
BRZYCKI_MAX_REPS = 36

EMPTY_BAR = 45.0
WARMUP_STEPS = ((0.4, 8), (0.6, 8), (0.75, 5), (0.85, 3))

FREQUENCY_GUIDE: dict[ExperienceLevel, tuple[int, int, str]] = {
    ExperienceLevel.BEGINNER: (
        2,
        3,
        "As a beginner, 2-3 full-body sessions per week is optimal for recovery and learning.",
    ),
    ExperienceLevel.INTERMEDIATE: (
        3,
        5,
        "3-5 sessions per week allows for good volume distribution across muscle groups.",
    ),
    ExperienceLevel.ADVANCED: (
        4,
        6,
        "Higher frequency training (4-6 days) allows for optimal volume and intensity management.",
    ),
}


def round_half_up(value: float, step: float = 1.0) -> float:
    """Round to the nearest multiple of ``step``, halves rounding up."""
    return math.floor(value / step + 0.5) * step


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """Estimated one-rep max using the Brzycki formula.

    Raises:
        ValueError: If reps is outside 1..36
    """
    if reps < 1 or reps > BRZYCKI_MAX_REPS:
        raise ValueError(f"Brzycki estimate needs 1-{BRZYCKI_MAX_REPS} reps, got {reps}")
    if reps == 1:
        return weight
    return weight * 36 / (37 - reps)


def estimate_reps_at_weight(one_rep_max: float, weight: float) -> int:
    """Reps achievable at ``weight`` given a one-rep max (inverse Brzycki)."""
    if weight >= one_rep_max:
        return 1
    return int(round_half_up(37 - 36 * weight / one_rep_max))


def warmup_recommendation(working_weight: float) -> list[WarmupSet]:
    """Progressive warm-up sets leading up to a working weight.

    Weights are rounded to the nearest 5 and kept only when strictly between
    the empty bar and the working weight. Below the empty bar there is
    nothing to warm up with.
    """
    if working_weight < EMPTY_BAR:
        return []

    warmups: list[WarmupSet] = []
    if working_weight >= 95:
        warmups.append(WarmupSet(weight=EMPTY_BAR, reps=10))

    for pct, reps in WARMUP_STEPS:
        weight = round_half_up(working_weight * pct, 5)
        if EMPTY_BAR < weight < working_weight:
            warmups.append(WarmupSet(weight=weight, reps=reps))

    return warmups


def frequency_recommendation(sessions_per_week: int, level: ExperienceLevel) -> str:
    """Advice on weekly training frequency for an experience level."""
    low, high, message = FREQUENCY_GUIDE[level]
    if sessions_per_week < low:
        return f"Consider increasing to at least {low} sessions per week. {message}"
    if sessions_per_week > high:
        return f"You might be overtraining. Consider reducing to {high} sessions max. {message}"
    return f"Your current frequency is good! {message}"


def average_rpe(sessions: Sequence[ExerciseSession]) -> float:
    """Mean RPE over every set that reports one, 7 when none do."""
    ratings = [s.rpe for session in sessions for s in session.sets if s.rpe is not None]
    if not ratings:
        return DEFAULT_RPE
    return sum(ratings) / len(ratings)


def is_consistent(sessions: Sequence[ExerciseSession]) -> bool:
    """Every session's max weight lies within 5% of their mean.

    Needs at least two sessions. A zero mean (bodyweight work) never counts
    as consistent.
    """
    if len(sessions) < MIN_SESSIONS:
        return False

    weights = [s.max_weight for s in sessions]
    mean_weight = sum(weights) / len(weights)
    if mean_weight <= 0:
        return False
    return all(abs(w - mean_weight) / mean_weight < CONSISTENCY_TOLERANCE for w in weights)


def volume_trend(history: Sequence[ExerciseSession]) -> float:
    """Relative change between the two newest and the two oldest sessions.

    History is newest first. Fewer than three sessions, or a zero older
    volume, give a flat trend of 0.
    """
    if len(history) < 3:
        return 0.0

    recent = (history[0].total_volume + history[1].total_volume) / 2
    older = (history[-2].total_volume + history[-1].total_volume) / 2
    if older == 0:
        return 0.0
    return (recent - older) / older


def recommend(
    history: Sequence[ExerciseSession],
    exercise_id: str,
    exercise_name: str,
    is_compound: bool = True,
) -> Recommendation:
    """Apply the progression decision table to an exercise history.

    Args:
        history: Sessions, newest first
        exercise_id: Exercise library identifier
        exercise_name: Display name
        is_compound: Compound lifts progress in larger increments

    Returns:
        Recommendation for the next session
    """
    if len(history) < MIN_SESSIONS:
        return Recommendation(
            exercise_id=exercise_id,
            exercise_name=exercise_name,
            action=ProgressionAction.MAINTAIN,
            reason="Not enough data yet. Keep training to get personalized recommendations.",
        )

    recent = history[:RECENT_WINDOW]
    avg_max_weight = sum(s.max_weight for s in recent) / len(recent)
    avg_rpe = average_rpe(recent)
    consistent = is_consistent(recent)
    regressing = volume_trend(history) < REGRESSION_THRESHOLD

    avg_total_reps = sum(s.total_reps for s in recent) / len(recent)

    result = Recommendation(
        exercise_id=exercise_id,
        exercise_name=exercise_name,
        action=ProgressionAction.MAINTAIN,
        reason="Keep working at current weights to build consistency before progressing.",
    )

    if regressing and avg_rpe > DELOAD_RPE:
        result.action = ProgressionAction.DELOAD
        result.suggested_weight = round_half_up(avg_max_weight * DELOAD_FACTOR)
        result.reason = (
            "Your performance has decreased and fatigue seems high. "
            "Consider a deload week with 50-60% of your working weight."
        )
    elif regressing:
        result.reason = (
            "Performance has dipped slightly. Focus on recovery and maintain "
            "current weights for another session or two."
        )
    elif consistent and avg_rpe < 7:
        increment = COMPOUND_INCREMENT if is_compound else ISOLATION_INCREMENT
        result.action = ProgressionAction.ADD_WEIGHT
        result.suggested_weight = round_half_up(avg_max_weight + increment, 0.5)
        result.reason = (
            "You've been consistent and the weight feels manageable. "
            f"Try adding {increment:g} to your working sets."
        )
    elif consistent and avg_rpe < 8:
        result.action = ProgressionAction.ADD_REPS
        # Mean session reps divided again by the session count
        result.suggested_reps = int(round_half_up(avg_total_reps / len(recent))) + 1
        result.reason = (
            "Add 1 rep to each set while keeping the weight the same. "
            "Once you hit your rep target consistently, increase weight."
        )
    elif consistent and avg_rpe < 9:
        result.action = ProgressionAction.ADD_SETS
        result.suggested_sets = 1
        result.reason = (
            "The weight is challenging but you're consistent. "
            "Try adding one more set to increase total volume."
        )
    elif avg_rpe >= 9:
        result.reason = (
            "Current intensity is high. Focus on maintaining this weight "
            "until it feels more manageable (RPE 7-8)."
        )

    return result


class ProgressionService:
    """Service for progression recommendations and personal record tracking."""

    def __init__(self, store: RecordStore, config: Settings | None = None) -> None:
        """Initialize progression service.

        Args:
            store: Record store bound to a database session
            config: Settings, defaults to the global settings
        """
        self.store = store
        self.config = config or settings
        self.logger = logger.bind(service="progression")

    async def calculate_progression_recommendation(
        self,
        exercise_id: str,
        exercise_name: str,
        is_compound: bool = True,
    ) -> Recommendation | None:
        """Recommend the next adjustment for an exercise from its recent sessions."""
        history = await self.store.get_exercise_history(
            exercise_id, limit=self.config.progression_history_sessions
        )
        recommendation = recommend(history, exercise_id, exercise_name, is_compound)

        self.logger.debug(
            "Progression recommendation",
            exercise_id=exercise_id,
            sessions=len(history),
            action=recommendation.action.value,
        )
        return recommendation

    async def check_and_update_pr(
        self,
        exercise_id: str,
        weight: float,
        reps: int,
        day: date,
        workout_id: str | None = None,
        set_id: str | None = None,
        commit: bool = True,
    ) -> list[PersonalRecord]:
        """Record every category in which a newly logged set beats the current best.

        Categories: max weight, estimated 1RM (Brzycki, skipped above 36
        reps), and the heaviest weight moved for at least 3, 5 and 10 reps.
        A record is stored only when it strictly exceeds the best on file.
        Existing records are never changed.

        Args:
            exercise_id: Exercise library identifier
            weight: Set weight
            reps: Set reps
            day: Calendar day of the workout
            workout_id: Owning workout, if any
            set_id: Source set, if any
            commit: Commit the new rows; False lets a caller batch writes

        Returns:
            Newly inserted personal records
        """
        if reps < 1:
            return []

        candidates: list[tuple[PersonalRecordType, float]] = [
            (PersonalRecordType.MAX_WEIGHT, weight)
        ]
        if reps <= BRZYCKI_MAX_REPS:
            candidates.append((PersonalRecordType.ONE_RM, estimate_one_rep_max(weight, reps)))
        else:
            self.logger.warning("Skipping 1RM estimate", exercise_id=exercise_id, reps=reps)
        candidates.extend(
            (record_type, weight)
            for record_type, target in REP_RECORD_TARGETS.items()
            if reps >= target
        )

        new_records: list[PersonalRecord] = []
        try:
            for record_type, value in candidates:
                best = await self.store.get_best_record(exercise_id, record_type.value)
                if best is not None and value <= best.value:
                    continue

                record = await self.store.insert_personal_record(
                    PersonalRecord(
                        exercise_id=exercise_id,
                        record_type=record_type.value,
                        value=value,
                        weight=weight,
                        reps=reps,
                        date=day,
                        workout_id=workout_id,
                        set_id=set_id,
                    )
                )
                new_records.append(record)
                self.logger.info(
                    "New personal record",
                    exercise_id=exercise_id,
                    record_type=record_type.value,
                    value=value,
                    previous=best.value if best else None,
                )

            if commit:
                await self.store.commit()
        except Exception as e:
            await self.store.rollback()
            self.logger.error("Personal record check failed", exercise_id=exercise_id, error=str(e))
            raise

        return new_records

    async def get_exercise_prs(self, exercise_id: str) -> list[PersonalRecord]:
        return await self.store.list_personal_records(exercise_id)
