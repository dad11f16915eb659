# backend/creatoraide/api/onboarding.py
"""API endpoints for the onboarding tour.

Unknown step ids are not errors: complete/goto with an id missing from the
catalog return the unchanged progress.
"""
from typing import List, Optional

from fastapi import APIRouter

from creatoraide.api.deps import Catalog, Controller, CurrentIdentity, Store
from creatoraide.schemas.onboarding import (
    AchievementSummaryResponse,
    BadgeResponse,
    OnboardingProgress,
    OnboardingStateResponse,
    StepResponse,
)
from creatoraide.services.achievements import build_achievement_summary
from creatoraide.services.onboarding_controller import OnboardingController, RecordingRouter
from creatoraide.services.step_catalog import StepCatalog

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


def _state_response(
    progress: OnboardingProgress,
    catalog: StepCatalog,
    controller: Optional[OnboardingController] = None,
) -> OnboardingStateResponse:
    current = catalog.get(progress.current_step_id)
    navigate_to = None
    warnings: List[str] = []
    if controller is not None:
        if isinstance(controller.router, RecordingRouter):
            navigate_to = controller.router.last_route
        warnings = list(controller.warnings)

    return OnboardingStateResponse(
        progress=progress,
        current_step=StepResponse.from_step(current, progress) if current else None,
        is_active=progress.is_active(catalog),
        navigate_to=navigate_to,
        warnings=warnings,
    )


@router.get("/steps", response_model=List[StepResponse])
def list_steps(catalog: Catalog, identity: CurrentIdentity, store: Store):
    """List the tour steps in order, flagged with the caller's completion."""
    progress = store.load(identity.user_id)
    return [StepResponse.from_step(step, progress) for step in catalog]


@router.get("/progress", response_model=OnboardingStateResponse)
def get_progress(controller: Controller):
    """Get the caller's progress, or defaults if none is stored yet."""
    return _state_response(controller.progress, controller.catalog)


@router.post("/start", response_model=OnboardingStateResponse)
def start_onboarding(controller: Controller):
    """Restart the tour from the first step, clearing points and badges."""
    progress = controller.start()
    return _state_response(progress, controller.catalog, controller)


@router.post("/skip", response_model=OnboardingStateResponse)
def skip_onboarding(controller: Controller):
    progress = controller.skip()
    return _state_response(progress, controller.catalog, controller)


@router.post("/next", response_model=OnboardingStateResponse)
def next_step(controller: Controller):
    """Complete the current step and move to the next one."""
    progress = controller.next()
    return _state_response(progress, controller.catalog, controller)


@router.post("/prev", response_model=OnboardingStateResponse)
def prev_step(controller: Controller):
    progress = controller.prev()
    return _state_response(progress, controller.catalog, controller)


@router.post("/steps/{step_id}/complete", response_model=OnboardingStateResponse)
def complete_step(step_id: str, controller: Controller):
    progress = controller.complete_step(step_id)
    return _state_response(progress, controller.catalog, controller)


@router.post("/steps/{step_id}/goto", response_model=OnboardingStateResponse)
def go_to_step(step_id: str, controller: Controller):
    progress = controller.go_to(step_id)
    return _state_response(progress, controller.catalog, controller)


@router.post("/reset", response_model=OnboardingStateResponse)
def reset_progress(controller: Controller):
    """Overwrite the caller's stored progress with defaults."""
    progress = controller.reset()
    return _state_response(progress, controller.catalog, controller)


@router.get("/achievements", response_model=AchievementSummaryResponse)
def get_achievements(controller: Controller):
    summary = build_achievement_summary(controller.progress, controller.catalog)

    def to_response(badge, earned: bool) -> BadgeResponse:
        return BadgeResponse(
            id=badge.id,
            title=badge.title,
            description=badge.description,
            color=badge.color,
            earned=earned,
        )

    return AchievementSummaryResponse(
        total_points=summary.total_points,
        available_points=summary.available_points,
        progress_percentage=summary.progress_percentage,
        earned_badges=[to_response(b, True) for b in summary.earned_badges],
        locked_badges=[to_response(b, False) for b in summary.locked_badges],
    )
