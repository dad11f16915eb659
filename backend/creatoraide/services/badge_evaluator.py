# backend/creatoraide/services/badge_evaluator.py
"""Badge catalog and the rules that grant badges from progress thresholds."""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from creatoraide.schemas.onboarding import OnboardingProgress
from creatoraide.services.step_catalog import Step, StepCatalog

EXPLORER = "explorer"
TUTORIAL_MASTER = "tutorial_master"

EXPLORER_POINTS_THRESHOLD = 100


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    title: str
    description: str
    color: str
    # Inactive badges are displayed (locked) but have no grant rule
    active: bool = True


BADGE_DEFINITIONS: Dict[str, BadgeDefinition] = {
    EXPLORER: BadgeDefinition(
        id=EXPLORER,
        title="Explorer",
        description="Earned by completing the basic onboarding steps and exploring the platform.",
        color="blue",
    ),
    TUTORIAL_MASTER: BadgeDefinition(
        id=TUTORIAL_MASTER,
        title="Tutorial Master",
        description="Completed the entire platform tutorial.",
        color="yellow",
    ),
    "content_creator": BadgeDefinition(
        id="content_creator",
        title="Content Creator",
        description="Created your first piece of content.",
        color="green",
        active=False,
    ),
    "scheduler_pro": BadgeDefinition(
        id="scheduler_pro",
        title="Scheduler Pro",
        description="Scheduled posts across multiple platforms.",
        color="purple",
        active=False,
    ),
    "algorithm_expert": BadgeDefinition(
        id="algorithm_expert",
        title="Algorithm Expert",
        description="Achieved a virality score of 80+ on a video.",
        color="orange",
        active=False,
    ),
}


def get_badge(badge_id: str) -> Optional[BadgeDefinition]:
    return BADGE_DEFINITIONS.get(badge_id)


def evaluate_badges(
    progress: OnboardingProgress,
    completed_step: Step,
    catalog: StepCatalog,
) -> List[str]:
    """Return the badges newly earned by the transition that completed a step.

    ``progress`` must already include ``completed_step`` and its points.
    Explorer is checked before tutorial master; badges already held are
    never returned.
    """
    earned: List[str] = []
    held = set(progress.badges)

    if progress.total_points >= EXPLORER_POINTS_THRESHOLD and EXPLORER not in held:
        earned.append(EXPLORER)

    if len(progress.completed_step_ids) == len(catalog) - 1 and TUTORIAL_MASTER not in held:
        earned.append(TUTORIAL_MASTER)

    return earned


def merge_badges(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Append new badges to existing ones, keeping order and skipping duplicates."""
    merged = list(existing)
    for badge in new:
        if badge not in merged:
            merged.append(badge)
    return merged
