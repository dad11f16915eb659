# backend/creatoraide/exceptions.py
"""Errors raised inside the onboarding core.

None of these escape to the hosting process: the store and controller
recover from each of them locally.
"""


class OnboardingError(Exception):
    """Base class for onboarding errors."""
    pass


class StepNotFoundError(OnboardingError):
    """Raised when a step id is not present in the catalog."""

    def __init__(self, step_id: str):
        super().__init__(f"Unknown onboarding step: {step_id}")
        self.step_id = step_id


NotFoundError = StepNotFoundError


class CorruptPersistedStateError(OnboardingError):
    """Raised when a stored progress snapshot cannot be decoded or validated."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt progress snapshot at {key}: {reason}")
        self.key = key
        self.reason = reason


class PersistenceWriteError(OnboardingError):
    """Raised when the persistence backend fails to store a snapshot."""
    pass
