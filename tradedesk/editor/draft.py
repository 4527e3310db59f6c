from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Tuple

class Timeframe(Enum):
    """Chart granularities a strategy can run on"""
    M1 = "M1"
    M5 = "M5"
    M15 = "M15"
    M30 = "M30"
    H1 = "H1"
    H4 = "H4"
    D1 = "D1"
    W1 = "W1"

STRATEGY_TIMEFRAMES: Tuple[Timeframe, ...] = tuple(Timeframe)
BACKTEST_TIMEFRAMES: Tuple[Timeframe, ...] = (
    Timeframe.M15, Timeframe.M30, Timeframe.H1, Timeframe.H4, Timeframe.D1,
)

class StrategyStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

@dataclass(frozen=True)
class StrategyInstance:
    """A persisted strategy as returned by the backend"""
    id: Any
    strategy_name: str
    symbol: str
    timeframe: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    status: StrategyStatus = StrategyStatus.INACTIVE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StrategyInstance":
        return cls(
            id=data['id'],
            strategy_name=data['strategy_name'],
            symbol=data['symbol'],
            timeframe=data['timeframe'],
            parameters=dict(data.get('parameters') or {}),
            status=StrategyStatus(data.get('status', StrategyStatus.INACTIVE.value)),
        )

    def with_status(self, status: StrategyStatus) -> "StrategyInstance":
        return replace(self, status=status)

@dataclass
class StrategyConfigurationDraft:
    """In-progress configuration held by the editor"""
    strategy_name: str
    symbol: str
    timeframe: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_instance(cls, instance: StrategyInstance) -> "StrategyConfigurationDraft":
        """Seed a draft verbatim from a persisted strategy"""
        return cls(
            strategy_name=instance.strategy_name,
            symbol=instance.symbol,
            timeframe=instance.timeframe,
            parameters=dict(instance.parameters),
        )

    def copy(self) -> "StrategyConfigurationDraft":
        return replace(self, parameters=dict(self.parameters))

class EditorContext(Enum):
    """Where a configuration is submitted"""
    MANAGE_STRATEGY = "manage_strategy"
    BACKTEST = "backtest"
