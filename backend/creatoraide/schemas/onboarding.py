# backend/creatoraide/schemas/onboarding.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from creatoraide.services.step_catalog import Step, StepCatalog


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split('_')
    return components[0] + ''.join(x.title() for x in components[1:])


class CamelModel(BaseModel):
    """Base model that converts snake_case to camelCase in JSON output."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class OnboardingProgress(CamelModel):
    """Per-user onboarding state.

    This is also the persisted wire format: ``model_dump_json(by_alias=True)``
    yields the ``currentStepId``/``completedStepIds``/... object stored under
    the user's key. Unknown keys are ignored and missing keys take defaults.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    current_step_id: Optional[str] = None
    completed_step_ids: List[str] = Field(default_factory=list)
    total_points: int = Field(default=0, ge=0)
    badges: List[str] = Field(default_factory=list)
    enabled: bool = True
    last_active_at: Optional[datetime] = None

    @field_validator("completed_step_ids", "badges")
    @classmethod
    def no_duplicates(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("entries must be unique")
        return value

    @classmethod
    def initial(cls, catalog: StepCatalog) -> "OnboardingProgress":
        """Default progress: first step active, nothing earned, overlay enabled."""
        return cls(current_step_id=catalog.first.id)

    def is_completed(self, step_id: str) -> bool:
        return step_id in self.completed_step_ids

    def is_active(self, catalog: StepCatalog) -> bool:
        """Whether the onboarding overlay should currently be shown."""
        return (
            self.enabled
            and self.current_step_id is not None
            and not self.is_completed(catalog.terminal.id)
        )


class StepResponse(CamelModel):
    id: str
    order: int
    points: int
    title: str
    description: str
    target: str
    position: str
    route: Optional[str] = None
    is_completed: bool = False

    @classmethod
    def from_step(cls, step: Step, progress: Optional[OnboardingProgress] = None) -> "StepResponse":
        return cls(
            id=step.id,
            order=step.order,
            points=step.points,
            title=step.title,
            description=step.description,
            target=step.target,
            position=step.position,
            route=step.route,
            is_completed=progress.is_completed(step.id) if progress else False,
        )


class OnboardingStateResponse(CamelModel):
    """Progress snapshot plus the derived view the tour overlay renders from."""
    progress: OnboardingProgress
    current_step: Optional[StepResponse] = None
    is_active: bool
    navigate_to: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class BadgeResponse(CamelModel):
    id: str
    title: str
    description: str
    color: str
    earned: bool


class AchievementSummaryResponse(CamelModel):
    total_points: int
    available_points: int
    progress_percentage: int
    earned_badges: List[BadgeResponse]
    locked_badges: List[BadgeResponse]
