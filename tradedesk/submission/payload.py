from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..editor.draft import StrategyConfigurationDraft

@dataclass(frozen=True)
class SubmissionPayload:
    """Request body shared by strategy create/update and backtest runs"""
    strategy_name: str
    symbol: str
    timeframe: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'strategy_name': self.strategy_name,
            'symbol': self.symbol,
            'timeframe': self.timeframe,
            'parameters': dict(self.parameters),
        }

def strip_empty(parameters: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop parameters whose value is None"""
    return {name: value for name, value in parameters.items() if value is not None}

def normalize(draft: StrategyConfigurationDraft) -> SubmissionPayload:
    """
    Build the request payload for a draft.

    The symbol is upper-cased and unset parameters are removed. Applying it
    to a draft built from its own output gives the same payload.
    """
    return SubmissionPayload(
        strategy_name=draft.strategy_name,
        symbol=draft.symbol.upper(),
        timeframe=draft.timeframe,
        parameters=strip_empty(draft.parameters),
    )
