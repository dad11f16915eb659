# backend/creatoraide/services/achievements.py
"""Points and badge summary shown in the achievements panel."""
from dataclasses import dataclass, field
from typing import List

from creatoraide.schemas.onboarding import OnboardingProgress
from creatoraide.services.badge_evaluator import BADGE_DEFINITIONS, BadgeDefinition, get_badge
from creatoraide.services.step_catalog import StepCatalog


@dataclass
class AchievementSummary:
    total_points: int
    available_points: int
    progress_percentage: int
    earned_badges: List[BadgeDefinition] = field(default_factory=list)
    locked_badges: List[BadgeDefinition] = field(default_factory=list)


def build_achievement_summary(progress: OnboardingProgress, catalog: StepCatalog) -> AchievementSummary:
    available = catalog.total_points
    percentage = round(progress.total_points / available * 100) if available else 0

    # Badges missing from the definitions are skipped rather than invented
    earned = [badge for badge in map(get_badge, progress.badges) if badge is not None]
    locked = [
        badge for badge_id, badge in BADGE_DEFINITIONS.items()
        if badge_id not in progress.badges
    ]

    return AchievementSummary(
        total_points=progress.total_points,
        available_points=available,
        progress_percentage=percentage,
        earned_badges=earned,
        locked_badges=locked,
    )
