"""Configuration management for momentum."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    # Clock Configuration
    timezone: str = Field(default="UTC", description="IANA timezone used for wall-clock hours and calendar days")

    # Suggestion Configuration
    suggestion_limit: int = Field(default=5, description="Default number of suggestions returned to the caller")

    # Task Defaults
    default_task_minutes: int = Field(
        default=25, description="Estimated duration used when a task is created without one"
    )

    # Streak Configuration
    streak_minimum_tasks: int = Field(
        default=1, description="Completed tasks needed for a day to count towards a streak"
    )
    starting_streak_shields: int = Field(default=1, description="Shields granted to a newly created streak")

    def require_setting(self, field_name: str, description: str) -> str:
        """Validate that an optional setting is present, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            description: Human-readable name for the error message

        Returns:
            The configured value

        Raises:
            ValueError: If the value is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{description} not configured. Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Game Mechanics Constants
class Constants:
    """Fixed reward and scoring mechanics."""

    # Suggestion scoring weights
    PRIORITY_SCORES: dict[str, int] = {
        "critical": 40,
        "high": 30,
        "medium": 20,
        "low": 10,
        "someday": 5,
    }
    ENERGY_MATCH_MAX: int = 25
    ENERGY_MISMATCH_PENALTY: int = 5
    TIME_FIT_FULL: int = 20
    TIME_FIT_PARTIAL: int = 10
    TIME_FIT_STRETCH: float = 1.5
    LOCATION_MATCH: int = 15
    MOOD_MATCH: int = 15
    TIME_OF_DAY_MATCH: int = 10
    QUICK_WIN: int = 10
    QUICK_WIN_MAX_MINUTES: int = 5

    # Due date urgency (hours until due -> bonus)
    URGENCY_OVERDUE: int = 30
    URGENCY_WINDOWS: tuple[tuple[int, int], ...] = ((24, 25), (72, 15), (168, 5))

    # Mood predicates
    CREATIVE_TAGS: frozenset[str] = frozenset({"creative", "brainstorm", "writing", "design"})
    FOCUSED_MIN_MINUTES: int = 25
    SCATTERED_MAX_MINUTES: int = 10
    TIRED_MAX_MINUTES: int = 10
    ANXIOUS_MAX_MINUTES: int = 15

    # Base XP by priority (fixed at task creation)
    BASE_XP: dict[str, int] = {
        "critical": 50,
        "high": 25,
        "medium": 15,
        "low": 10,
        "someday": 5,
    }

    # XP bonuses
    EARLY_BIRD_BONUS: int = 25
    NIGHT_OWL_BONUS: int = 25
    DEADLINE_BEAT_BONUS: int = 15
    DEADLINE_BEAT_HOURS: int = 24
    STREAK_DAY_BONUS: int = 5
    CRITICAL_COMPLETION_BONUS: int = 10
    SPEED_BONUS: int = 5
    EARLY_BIRD_HOURS: tuple[int, int] = (5, 9)  # [start, end)
    NIGHT_OWL_START_HOUR: int = 22
    NIGHT_OWL_END_HOUR: int = 5

    # Variable-ratio bonus tiers: (roll upper bound, bonus)
    VARIABLE_BONUS_TIERS: tuple[tuple[float, int], ...] = ((0.05, 50), (0.15, 25), (0.30, 10))

    # Loot drops
    LOOT_DROP_CHANCE: float = 0.15
    LOOT_DROP_CHANCE_PER_LEVEL: float = 0.01
    LEGENDARY_LOOT_CHANCE: float = 0.001
    EPIC_LOOT_CHANCE: float = 0.01
    RARE_LOOT_CHANCE: float = 0.05
    UNCOMMON_LOOT_CHANCE: float = 0.30

    # Streaks
    MAX_VISIBLE_STREAK: int = 7

    # Quests
    ALL_QUESTS_COMPLETE_BONUS: int = 100

    # Recovery
    RECOVERY_COMPLETE_XP: int = 75
    RECOVERY_BONUS_PER_DAY: int = 10
    RECOVERY_BONUS_CAP: int = 50

    # Day classification thresholds
    PERFECT_DAY_RATE: float = 0.9
    PERFECT_DAY_MIN_PLANNED: int = 3
    GOOD_DAY_RATE: float = 0.7
    OKAY_DAY_RATE: float = 0.4
    OKAY_DAY_MIN_COMPLETED: int = 2

    # Pattern detection
    PATTERN_MIN_RATINGS: int = 7


def get_settings() -> Settings:
    """Get engine settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
