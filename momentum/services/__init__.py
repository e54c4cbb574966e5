from momentum.services import (
    achievement_service,
    chain_service,
    context_service,
    day_service,
    quest_service,
    recovery_service,
    reward_service,
    scoring_service,
    state_service,
    streak_service,
    task_service,
)


__all__ = [
    "achievement_service",
    "chain_service",
    "context_service",
    "day_service",
    "quest_service",
    "recovery_service",
    "reward_service",
    "scoring_service",
    "state_service",
    "streak_service",
    "task_service",
]
