# backend/creatoraide/services/step_catalog.py
"""Static, ordered catalog of onboarding tour steps."""
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Step:
    """One unit of the onboarding tour."""
    id: str
    order: int
    points: int
    title: str = ""
    description: str = ""
    target: str = "body"
    position: str = "top"
    route: Optional[str] = None


class StepCatalog:
    """Read-only collection of steps indexed by id and by order.

    Orders must be zero-based and contiguous so that traversal by
    ``order +/- 1`` always lands on a defined step or falls off an end.
    """

    def __init__(self, steps: Iterable[Step]):
        ordered = sorted(steps, key=lambda s: s.order)
        if not ordered:
            raise ValueError("Step catalog must contain at least one step")

        self._by_id: Dict[str, Step] = {}
        self._by_order: Dict[int, Step] = {}
        for expected_order, step in enumerate(ordered):
            if step.id in self._by_id:
                raise ValueError(f"Duplicate step id: {step.id}")
            if step.order != expected_order:
                raise ValueError(
                    f"Step orders must be contiguous from 0, got {step.order} for {step.id}"
                )
            if step.points < 0:
                raise ValueError(f"Step {step.id} has negative points")
            self._by_id[step.id] = step
            self._by_order[step.order] = step

        self._steps: List[Step] = ordered

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._by_id

    @property
    def first(self) -> Step:
        return self._steps[0]

    @property
    def terminal(self) -> Step:
        return self._steps[-1]

    @property
    def total_points(self) -> int:
        return sum(step.points for step in self._steps)

    def get(self, step_id: Optional[str]) -> Optional[Step]:
        if step_id is None:
            return None
        return self._by_id.get(step_id)

    def by_order(self, order: int) -> Optional[Step]:
        return self._by_order.get(order)

    def next_of(self, step: Step) -> Optional[Step]:
        return self._by_order.get(step.order + 1)

    def previous_of(self, step: Step) -> Optional[Step]:
        return self._by_order.get(step.order - 1)


DEFAULT_STEPS = [
    Step(
        id="welcome",
        order=0,
        points=10,
        title="Welcome to CreatorAIDE!",
        description="Let's get you started with a quick tour of the platform. "
                    "You'll earn points and badges as you go!",
        target="body",
        position="top",
    ),
    Step(
        id="dashboard",
        order=1,
        points=15,
        title="Your Dashboard",
        description="This is your central hub where you can see all your stats "
                    "and quick access to key features.",
        target=".dashboard-overview",
        position="bottom",
        route="/",
    ),
    Step(
        id="algorithm-assistant",
        order=2,
        points=20,
        title="Algorithm Assistant",
        description="Understand how TikTok's algorithm works and get personalized "
                    "recommendations to boost your videos.",
        target="[data-section='algorithm-assistant']",
        position="right",
        route="/algorithm-assistant",
    ),
    Step(
        id="content-creation",
        order=3,
        points=25,
        title="Content Creation Hub",
        description="Create, edit, and manage your content with AI assistance - "
                    "from ideation to publishing.",
        target="[data-section='content-creation']",
        position="left",
        route="/content-creation",
    ),
    Step(
        id="scheduler",
        order=4,
        points=20,
        title="Cross-Platform Scheduler",
        description="Schedule your content across multiple platforms at optimal "
                    "times for maximum engagement.",
        target="[data-section='scheduler']",
        position="top",
        route="/scheduler",
    ),
    Step(
        id="community-manager",
        order=5,
        points=15,
        title="Community Manager",
        description="Manage comments, messages, and interactions across all your "
                    "social platforms.",
        target="[data-section='community-manager']",
        position="bottom",
        route="/community",
    ),
    Step(
        id="monetization",
        order=6,
        points=25,
        title="Monetization Dashboard",
        description="Track your earnings, find brand deals, and explore new "
                    "revenue opportunities.",
        target="[data-section='monetization']",
        position="right",
        route="/monetization",
    ),
    Step(
        id="ai-agent",
        order=7,
        points=30,
        title="AI Agent",
        description="Your personal AI assistant to help with content ideas, "
                    "caption writing, and more.",
        target="[data-section='ai-agent']",
        position="left",
        route="/ai-agent",
    ),
    Step(
        id="completed",
        order=8,
        points=50,
        title="All Done!",
        description="Congratulations! You've completed the tutorial and earned "
                    "your first badge. Keep exploring to earn more!",
        target="body",
        position="top",
    ),
]


@lru_cache
def get_step_catalog() -> StepCatalog:
    return StepCatalog(DEFAULT_STEPS)
