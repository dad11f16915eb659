# backend/creatoraide/services/onboarding_controller.py
"""
Onboarding tour navigation.

The controller is a small state machine over step *order*:

- Inactive: ``current_step_id`` is None (finished or skipped)
- Active(step): ``current_step_id`` names a catalog step

Each transition mutates the in-memory progress, persists it through the
ProgressStore and hands the new snapshot to subscribers. The in-memory
progress stays authoritative for the session even when a save fails.
"""
import logging
from typing import Callable, List, Optional, Protocol

from creatoraide.exceptions import PersistenceWriteError, StepNotFoundError
from creatoraide.models.notification import NotificationType, NotificationSeverity
from creatoraide.schemas.onboarding import OnboardingProgress
from creatoraide.services.badge_evaluator import evaluate_badges, get_badge, merge_badges
from creatoraide.services.notification_service import NotificationSink
from creatoraide.services.progress_store import ProgressStore
from creatoraide.services.step_catalog import Step, StepCatalog

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[OnboardingProgress], None]

SAVE_FAILED_WARNING = "Your onboarding progress could not be saved and may be lost when you sign out."


class NavigationRouter(Protocol):
    def navigate(self, route: str) -> None:
        ...


class RecordingRouter:
    """Router that remembers the last requested route instead of navigating."""

    def __init__(self):
        self.requested: List[str] = []

    def navigate(self, route: str) -> None:
        self.requested.append(route)

    @property
    def last_route(self) -> Optional[str]:
        return self.requested[-1] if self.requested else None


class OnboardingController:
    """Drives one user's onboarding tour for the lifetime of a session."""

    def __init__(
        self,
        user_id: str,
        store: ProgressStore,
        notifier: Optional[NotificationSink] = None,
        router: Optional[NavigationRouter] = None,
    ):
        self.user_id = user_id
        self.store = store
        self.catalog: StepCatalog = store.catalog
        self.notifier = notifier
        self.router = router
        self.warnings: List[str] = []
        self._observers: List[ProgressObserver] = []
        self._progress = store.load(user_id)

    @property
    def progress(self) -> OnboardingProgress:
        return self._progress.model_copy(deep=True)

    @property
    def current_step(self) -> Optional[Step]:
        return self.catalog.get(self._progress.current_step_id)

    @property
    def is_active(self) -> bool:
        return self._progress.is_active(self.catalog)

    def subscribe(self, observer: ProgressObserver) -> Callable[[], None]:
        """Register a callback receiving every new snapshot.

        Returns:
            Callable that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def start(self) -> OnboardingProgress:
        """(Re)start the tour from the first step, discarding earned progress."""
        self._progress = OnboardingProgress.initial(self.catalog)
        self._progress.enabled = True
        logger.info(f"Onboarding started for {self.user_id}")
        self._enter(self.catalog.first)
        return self._commit()

    def reset(self) -> OnboardingProgress:
        """Replace the stored progress with defaults without navigating."""
        self._progress = self.store.default_progress()
        logger.info(f"Onboarding progress reset for {self.user_id}")
        return self._commit()

    def skip(self) -> OnboardingProgress:
        """Leave the tour, keeping whatever was already earned."""
        if self._progress.current_step_id is None:
            return self.progress

        self._progress.current_step_id = None
        self._progress.enabled = False
        logger.info(f"Onboarding skipped by {self.user_id}")
        self._notify(
            NotificationType.ONBOARDING_SKIPPED,
            "Onboarding skipped",
            "You can restart the tutorial anytime from your account settings.",
        )
        return self._commit()

    def complete_step(self, step_id: str) -> OnboardingProgress:
        """Mark a step completed and award its points. Idempotent."""
        try:
            step = self._require_step(step_id)
        except StepNotFoundError as e:
            logger.debug(f"Ignoring completion: {e}")
            return self.progress

        if self._progress.is_completed(step.id):
            return self.progress

        self._apply_completion(step)
        return self._commit()

    def next(self) -> OnboardingProgress:
        """Complete the current step and advance, or finish after the terminal step."""
        current = self.current_step
        if current is None:
            return self.progress

        if not self._progress.is_completed(current.id):
            self._apply_completion(current)

        following = self.catalog.next_of(current)
        if following is not None:
            self._enter(following)
        else:
            self._progress.current_step_id = None
            logger.info(f"Onboarding finished by {self.user_id}")
            self._notify(
                NotificationType.ONBOARDING_COMPLETE,
                "Onboarding Complete!",
                f"Congratulations! You earned {self._progress.total_points} points "
                f"and {len(self._progress.badges)} badges.",
                NotificationSeverity.SUCCESS,
            )
        return self._commit()

    def prev(self) -> OnboardingProgress:
        current = self.current_step
        if current is None:
            return self.progress

        previous = self.catalog.previous_of(current)
        if previous is None:
            return self.progress

        self._enter(previous)
        return self._commit()

    def go_to(self, step_id: str) -> OnboardingProgress:
        """Jump to a step without touching completion, points or badges."""
        try:
            step = self._require_step(step_id)
        except StepNotFoundError as e:
            logger.debug(f"Ignoring jump: {e}")
            return self.progress

        self._enter(step)
        return self._commit()

    def _require_step(self, step_id: str) -> Step:
        step = self.catalog.get(step_id)
        if step is None:
            raise StepNotFoundError(step_id)
        return step

    def _enter(self, step: Step) -> None:
        self._progress.current_step_id = step.id
        if step.route and self.router is not None:
            try:
                self.router.navigate(step.route)
            except Exception as e:
                logger.warning(f"Router failed to navigate to {step.route}: {e}")

    def _apply_completion(self, step: Step) -> None:
        self._progress.completed_step_ids.append(step.id)
        self._progress.total_points += step.points
        self._notify(
            NotificationType.STEP_COMPLETED,
            f"{step.points} points earned!",
            f"You completed: {step.title or step.id}",
            NotificationSeverity.SUCCESS,
        )

        new_badges = evaluate_badges(self._progress, step, self.catalog)
        if not new_badges:
            return

        self._progress.badges = merge_badges(self._progress.badges, new_badges)
        for badge_id in new_badges:
            badge = get_badge(badge_id)
            title = badge.title if badge else badge_id
            logger.info(f"Badge {badge_id} earned by {self.user_id}")
            self._notify(
                NotificationType.BADGE_EARNED,
                f"Badge Earned: {title}!",
                badge.description if badge else "",
                NotificationSeverity.SUCCESS,
            )

    def _commit(self) -> OnboardingProgress:
        try:
            self._progress = self.store.save(self.user_id, self._progress)
        except PersistenceWriteError as e:
            logger.warning(f"Onboarding progress for {self.user_id} not saved: {e}")
            self.warnings.append(SAVE_FAILED_WARNING)
            self._notify(
                NotificationType.PROGRESS_NOT_SAVED,
                "Progress not saved",
                SAVE_FAILED_WARNING,
                NotificationSeverity.WARNING,
            )

        snapshot = self.progress
        for observer in list(self._observers):
            try:
                observer(snapshot.model_copy(deep=True))
            except Exception as e:
                logger.warning(f"Onboarding observer failed: {e}")
        return snapshot

    def _notify(
        self,
        notification_type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(self.user_id, notification_type, title, message, severity)
        except Exception as e:
            logger.warning(f"Failed to deliver {notification_type.value} notification: {e}")
