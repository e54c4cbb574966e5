"""Daily quest board: generation, progress and rewards."""

import logging

from momentum.core.clock import Clock, system_clock
from momentum.core.config import constants
from momentum.core.errors import InvalidArgumentError
from momentum.core.randomness import RandomSource, choose, system_random
from momentum.domain.progress import UserStats
from momentum.domain.reward import DailyQuest, Quest, QuestType
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)

# (title, description, type, target, xp_reward); one is drawn per day
_BONUS_QUESTS: tuple[tuple[str, str, QuestType, int, int], ...] = (
    ("Chain Reaction", "Complete a full momentum chain", QuestType.CHAIN_COMPLETION, 1, 50),
    ("Focus Master", "Spend 30 minutes in focus mode", QuestType.FOCUS_TIME, 30, 35),
)


def generate_daily_quests(
    stats: UserStats,
    *,
    rng: RandomSource = system_random,
    clock: Clock = system_clock,
) -> DailyQuest:
    """Build today's board.

    Always a task quest and a level-scaled XP quest, a streak quest while a
    streak is running, and one random bonus quest.
    """
    xp_target = 50 + stats.level * 10
    quests = [
        Quest(
            id=new_id(),
            title="Task Tackler",
            description="Complete any 3 tasks today",
            type=QuestType.COMPLETE_TASKS,
            target=3,
            xp_reward=30,
        ),
        Quest(
            id=new_id(),
            title="XP Hunter",
            description=f"Earn {xp_target} XP today",
            type=QuestType.EARN_XP,
            target=xp_target,
            xp_reward=40,
        ),
    ]

    if stats.current_streak > 0:
        quests.append(
            Quest(
                id=new_id(),
                title="Streak Keeper",
                description="Complete at least 1 task to keep your streak going",
                type=QuestType.MAINTAIN_STREAK,
                target=1,
                xp_reward=25,
            )
        )

    title, description, quest_type, target, xp_reward = choose(_BONUS_QUESTS, rng)
    quests.append(
        Quest(id=new_id(), title=title, description=description, type=quest_type, target=target, xp_reward=xp_reward)
    )

    return DailyQuest(id=new_id(), date=clock.now(), quests=quests, completed=0, total=len(quests))


def update_quest_progress(daily_quest: DailyQuest, quest_type: QuestType, progress: int) -> DailyQuest:
    """Add progress to every open quest of a type; completed quests are left alone."""
    if progress < 0:
        msg = f"Invalid progress: {progress} must not be negative"
        raise InvalidArgumentError(msg)

    quests = []
    for quest in daily_quest.quests:
        if quest.type != quest_type or quest.completed:
            quests.append(quest)
            continue
        current = quest.current + progress
        completed = current >= quest.target
        if completed:
            logger.info(f"Quest completed: {quest.title}")
        quests.append(quest.model_copy(update={"current": current, "completed": completed}))

    return daily_quest.model_copy(update={"quests": quests, "completed": sum(1 for q in quests if q.completed)})


def get_quest_rewards(daily_quest: DailyQuest) -> int:
    """XP for completed quests, plus a bonus when the whole board is done."""
    quest_xp = sum(q.xp_reward for q in daily_quest.quests if q.completed)
    all_complete = daily_quest.total > 0 and daily_quest.completed == daily_quest.total
    return quest_xp + (constants.ALL_QUESTS_COMPLETE_BONUS if all_complete else 0)
