from .draft import (
    Timeframe,
    StrategyStatus,
    StrategyInstance,
    StrategyConfigurationDraft,
    STRATEGY_TIMEFRAMES,
    BACKTEST_TIMEFRAMES,
    EditorContext,
)

__all__ = [
    'Timeframe',
    'StrategyStatus',
    'StrategyInstance',
    'StrategyConfigurationDraft',
    'STRATEGY_TIMEFRAMES',
    'BACKTEST_TIMEFRAMES',
    'EditorContext'
]
