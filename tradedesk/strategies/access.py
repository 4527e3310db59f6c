"""
Subscription gating for strategy creation.

Only the creation path is gated. Editing an existing strategy is always
allowed, so users who downgrade can still manage premium strategies they
already own.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .config import StrategyDefinition

class Plan(Enum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    ULTIMATE = "ultimate"
    BUSINESS = "business"

class Role(Enum):
    USER = "user"
    SUPERUSER = "superuser"

PREMIUM_PLANS = frozenset({Plan.PREMIUM, Plan.ULTIMATE, Plan.BUSINESS})

@dataclass(frozen=True)
class UserAccessContext:
    """Plan tier and role of the signed-in user"""
    plan: Optional[Plan] = None
    role: Role = Role.USER

    @property
    def has_premium_access(self) -> bool:
        return self.plan in PREMIUM_PLANS or self.role is Role.SUPERUSER

    @classmethod
    def from_user(cls, user: Optional[Dict[str, Any]]) -> "UserAccessContext":
        """
        Build the context from an authenticated user payload such as
        {'role': 'superuser', 'subscription': {'plan': 'premium'}}.

        Unknown plans and roles grant nothing.
        """
        if not user:
            return cls()

        subscription = user.get('subscription') or {}
        try:
            plan = Plan(subscription.get('plan'))
        except ValueError:
            plan = None

        role = Role.SUPERUSER if user.get('role') == Role.SUPERUSER.value else Role.USER
        return cls(plan=plan, role=role)

def can_create(context: UserAccessContext, definition: StrategyDefinition) -> bool:
    """False only for premium strategy types when the user lacks premium access"""
    return not (definition.is_premium and not context.has_premium_access)
