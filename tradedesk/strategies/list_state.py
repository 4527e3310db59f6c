"""
Local copy of the user's strategy list.

Status toggles and deletes update the list in place once the backend
accepts them. A refresh that was already in flight when such a mutation
completed may return data from before the mutation, so completed mutations
are replayed on top of any fetch that started before them. A fetch that
starts after a mutation completed is taken as authoritative.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import structlog

from ..clients.base import StrategyApi
from ..core.exceptions import ApiError
from ..editor.draft import StrategyInstance, StrategyStatus
from ..submission.notifier import LoggingNotifier, Notifier

logger = structlog.get_logger()

@dataclass(frozen=True)
class _Mutation:
    sequence: int
    status: Optional[StrategyStatus]  # None means deleted

class StrategyList:
    """Strategies shown on the strategies page"""

    def __init__(self, api: StrategyApi, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or LoggingNotifier()
        self.strategies: List[StrategyInstance] = []
        self.loading = False

        self._clock = 0
        self._applied_fetch = 0
        self._pending_fetches = 0
        self._mutations: Dict[Any, _Mutation] = {}

    def _tick(self) -> int:
        self._clock += 1
        return self._clock

    def get(self, strategy_id: Any) -> Optional[StrategyInstance]:
        for strategy in self.strategies:
            if strategy.id == strategy_id:
                return strategy
        return None

    async def refresh(self) -> bool:
        """Reload the list from the backend"""
        started = self._tick()
        self._pending_fetches += 1
        self.loading = True

        try:
            fetched = await self.api.list_strategies()
        except ApiError as e:
            logger.error("Failed to fetch strategies", status=e.status, detail=e.detail)
            self.notifier.error("Failed to fetch strategies.")
            return False
        finally:
            self._pending_fetches -= 1
            self.loading = self._pending_fetches > 0

        if started < self._applied_fetch:
            logger.debug("Discarding out-of-order strategy list", started=started,
                         applied=self._applied_fetch)
            return False

        self._applied_fetch = started
        self._mutations = {
            strategy_id: mutation
            for strategy_id, mutation in self._mutations.items()
            if mutation.sequence > started
        }
        self.strategies = self._replay(fetched)

        logger.debug("Strategy list refreshed",
                     count=len(self.strategies),
                     replayed=len(self._mutations))
        return True

    def _replay(self, fetched: List[StrategyInstance]) -> List[StrategyInstance]:
        result = []
        for strategy in fetched:
            mutation = self._mutations.get(strategy.id)
            if mutation is None:
                result.append(strategy)
            elif mutation.status is not None:
                result.append(strategy.with_status(mutation.status))
        return result

    async def toggle_status(self, strategy_id: Any, active: bool) -> bool:
        """Activate or deactivate a strategy"""
        status = StrategyStatus.ACTIVE if active else StrategyStatus.INACTIVE

        try:
            await self.api.set_status(strategy_id, status)
        except ApiError as e:
            logger.warning("Status update failed", strategy_id=strategy_id, status=status.value,
                           detail=e.detail)
            self.notifier.error(e.detail or "Failed to update status.")
            return False

        self._mutations[strategy_id] = _Mutation(self._tick(), status)
        self.strategies = [
            strategy.with_status(status) if strategy.id == strategy_id else strategy
            for strategy in self.strategies
        ]
        self.notifier.success(f"Strategy set to {status.value}.")
        return True

    async def delete(self, strategy_id: Any) -> bool:
        """Delete a strategy"""
        try:
            await self.api.delete_strategy(strategy_id)
        except ApiError as e:
            logger.warning("Strategy delete failed", strategy_id=strategy_id, detail=e.detail)
            self.notifier.error("Failed to delete strategy.")
            return False

        self._mutations[strategy_id] = _Mutation(self._tick(), None)
        self.strategies = [strategy for strategy in self.strategies if strategy.id != strategy_id]
        self.notifier.success("Strategy deleted successfully.")
        return True

    async def on_saved(self, instance: StrategyInstance) -> None:
        """Submission hook: reload after a create or update"""
        logger.debug("Reloading strategies after save", strategy_id=instance.id)
        await self.refresh()
