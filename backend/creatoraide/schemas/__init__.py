# backend/creatoraide/schemas/__init__.py
from creatoraide.schemas.onboarding import (
    CamelModel,
    OnboardingProgress,
    StepResponse,
    OnboardingStateResponse,
    BadgeResponse,
    AchievementSummaryResponse,
)
from creatoraide.schemas.notification import NotificationResponse, NotificationList, NotificationMarkRead
