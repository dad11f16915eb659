# backend/creatoraide/services/progress_store.py
"""Per-user onboarding progress persistence."""
import json
import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from creatoraide.exceptions import CorruptPersistedStateError, PersistenceWriteError
from creatoraide.schemas.onboarding import OnboardingProgress
from creatoraide.services.persistence import KeyValueStore
from creatoraide.services.step_catalog import StepCatalog

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "onboarding-progress-"


class ProgressStore:
    """Loads and saves one Progress snapshot per user.

    ``load`` never raises: missing, unreadable or corrupt records all fall
    back to freshly initialized progress. ``save`` replaces the whole
    snapshot and raises PersistenceWriteError when the backend rejects it.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        catalog: StepCatalog,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self.backend = backend
        self.catalog = catalog
        self.key_prefix = key_prefix

    def key_for(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    def default_progress(self) -> OnboardingProgress:
        return OnboardingProgress.initial(self.catalog)

    def load(self, user_id: str) -> OnboardingProgress:
        key = self.key_for(user_id)
        try:
            raw = self.backend.get(key)
        except Exception as e:
            logger.warning(f"Failed to read onboarding progress for {user_id}: {e}")
            return self.default_progress()

        if raw is None:
            logger.debug(f"No onboarding progress stored for {user_id}")
            return self.default_progress()

        try:
            return self._decode(key, raw)
        except CorruptPersistedStateError as e:
            logger.warning(f"{e}; falling back to defaults")
            return self.default_progress()

    def save(self, user_id: str, progress: OnboardingProgress) -> OnboardingProgress:
        """Persist a snapshot, stamping last_active_at.

        Returns:
            The stamped snapshot that was written

        Raises:
            PersistenceWriteError: If the backend could not store the snapshot
        """
        stamped = progress.model_copy(
            deep=True, update={"last_active_at": datetime.now(timezone.utc)}
        )
        payload = stamped.model_dump_json(by_alias=True)
        try:
            self.backend.set(self.key_for(user_id), payload)
        except PersistenceWriteError:
            raise
        except Exception as e:
            raise PersistenceWriteError(
                f"Failed to save onboarding progress for {user_id}: {e}"
            ) from e
        return stamped

    def reset(self, user_id: str) -> OnboardingProgress:
        return self.save(user_id, self.default_progress())

    def _decode(self, key: str, raw: str) -> OnboardingProgress:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CorruptPersistedStateError(key, f"invalid JSON ({e})") from e

        if not isinstance(data, dict):
            raise CorruptPersistedStateError(key, "snapshot is not an object")

        try:
            progress = OnboardingProgress.model_validate(data)
        except ValidationError as e:
            raise CorruptPersistedStateError(key, f"{e.error_count()} invalid field(s)") from e

        if progress.current_step_id is not None and progress.current_step_id not in self.catalog:
            raise CorruptPersistedStateError(
                key, f"current step {progress.current_step_id!r} is not in the catalog"
            )

        unknown = [s for s in progress.completed_step_ids if s not in self.catalog]
        if unknown:
            raise CorruptPersistedStateError(
                key, f"completed steps {unknown!r} are not in the catalog"
            )

        expected_points = sum(self.catalog.get(s).points for s in progress.completed_step_ids)
        if progress.total_points != expected_points:
            raise CorruptPersistedStateError(
                key,
                f"total points {progress.total_points} do not match completed steps "
                f"({expected_points})",
            )

        # Missing key means "never set", not null
        if "currentStepId" not in data and "current_step_id" not in data:
            progress.current_step_id = self.catalog.first.id

        return progress
