"""
Subscription plan catalog.

Single source of truth for job limits and prices per plan. Plans are fixed
product definitions, not configuration.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List, Optional

# Stands in for "unlimited" so quota checks stay a plain integer comparison
UNLIMITED_JOBS = 999999

SUBSCRIPTION_PERIOD = timedelta(days=30)


@dataclass(frozen=True)
class PlanSpec:
    name: str
    job_limit: int
    price_gel: int

    @property
    def unlimited(self) -> bool:
        return self.job_limit >= UNLIMITED_JOBS


PLANS: Dict[str, PlanSpec] = {
    "starter": PlanSpec(name="starter", job_limit=2, price_gel=20),
    "business": PlanSpec(name="business", job_limit=10, price_gel=50),
    "corporate": PlanSpec(name="corporate", job_limit=UNLIMITED_JOBS, price_gel=100),
}


def get_plan(plan_name: Optional[str]) -> Optional[PlanSpec]:
    """
    Look up a plan by name.

    Args:
        plan_name: Plan name (starter, business, corporate), case-insensitive

    Returns:
        PlanSpec, or None for unknown names
    """
    if not plan_name:
        return None
    return PLANS.get(plan_name.strip().lower())


def list_plans() -> List[PlanSpec]:
    """Plans in ascending price order."""
    return sorted(PLANS.values(), key=lambda p: p.price_gel)
