from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..editor.draft import StrategyInstance, StrategyStatus
from ..submission.payload import SubmissionPayload

class StrategyApi(ABC):
    """Abstract base class for the strategy backend"""

    @abstractmethod
    async def list_strategies(self) -> List[StrategyInstance]:
        """Get all strategies of the current user"""
        pass

    @abstractmethod
    async def create_strategy(self, payload: SubmissionPayload) -> StrategyInstance:
        """Persist a new strategy"""
        pass

    @abstractmethod
    async def update_strategy(self, strategy_id: Any, payload: SubmissionPayload) -> StrategyInstance:
        """Replace the configuration of an existing strategy"""
        pass

    @abstractmethod
    async def set_status(self, strategy_id: Any, status: StrategyStatus) -> Dict[str, Any]:
        """Activate or deactivate a strategy"""
        pass

    @abstractmethod
    async def delete_strategy(self, strategy_id: Any) -> Dict[str, Any]:
        """Delete a strategy"""
        pass

    @abstractmethod
    async def run_backtest(self, payload: SubmissionPayload) -> Dict[str, Any]:
        """Queue a backtest job, returning the acceptance message"""
        pass
