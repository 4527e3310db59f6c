from .config import StrategyDefinition, ConfigLoader, ConfigValidator
from .registry import StrategyRegistry
from .access import Plan, Role, UserAccessContext, can_create

__all__ = [
    'StrategyDefinition',
    'ConfigLoader',
    'ConfigValidator',
    'StrategyRegistry',
    'Plan',
    'Role',
    'UserAccessContext',
    'can_create'
]
