"""
Pytest configuration and shared fixtures
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
import sys
import os

# Add project root to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from tradedesk.clients.base import StrategyApi
from tradedesk.editor.draft import EditorContext, StrategyInstance, StrategyStatus
from tradedesk.editor.synchronizer import ConfigurationSynchronizer
from tradedesk.strategies.access import Plan, Role, UserAccessContext
from tradedesk.strategies.registry import StrategyRegistry
from tradedesk.submission.notifier import RecordingNotifier


TEST_CATALOG = {
    'strategies': {
        'trend_follow': {
            'name': 'Trend Follow',
            'is_premium': False,
            'parameters': [
                {'name': 'fast_period', 'label': 'Fast Period', 'type': 'number', 'default': 10, 'step': 1},
                {'name': 'slow_period', 'label': 'Slow Period', 'type': 'number', 'default': 30},
            ],
        },
        'premium_grid': {
            'name': 'Premium Grid',
            'is_premium': True,
            'parameters': [
                {'name': 'levels', 'label': 'Grid Levels', 'type': 'number', 'default': 5, 'step': 1},
                {'name': 'sessions', 'label': 'Sessions', 'type': 'multiselect',
                 'options': ['asian', 'london', 'new_york'], 'default': ['london']},
                {'name': 'comment', 'label': 'Order Comment', 'type': 'text', 'default': 'grid',
                 'tooltip': 'Attached to every order'},
            ],
        },
        'scalper': {
            'name': 'Scalper',
            'parameters': [
                {'name': 'take_profit', 'label': 'Take Profit', 'type': 'number', 'default': 1.5, 'step': 0.1},
                {'name': 'note', 'type': 'text', 'default': 'scalp'},
            ],
        },
    }
}


@pytest.fixture
def registry():
    """Small three-type catalog: free, premium, free"""
    return StrategyRegistry.from_mapping(TEST_CATALOG)


@pytest.fixture
def free_user():
    return UserAccessContext(plan=Plan.FREE)


@pytest.fixture
def premium_user():
    return UserAccessContext(plan=Plan.PREMIUM)


@pytest.fixture
def superuser():
    return UserAccessContext(plan=Plan.FREE, role=Role.SUPERUSER)


@pytest.fixture
def editor(registry, free_user):
    """Strategy editor for a free-plan user"""
    return ConfigurationSynchronizer(registry, free_user)


@pytest.fixture
def backtest_editor(registry, free_user):
    return ConfigurationSynchronizer(registry, free_user, context=EditorContext.BACKTEST)


@pytest.fixture
def saved_strategy():
    return StrategyInstance(
        id=7,
        strategy_name='premium_grid',
        symbol='GBPUSD',
        timeframe='H4',
        parameters={'levels': 8, 'sessions': ['asian'], 'comment': 'legacy'},
        status=StrategyStatus.ACTIVE,
    )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def mock_api():
    """Mock strategy backend for testing"""
    api = MagicMock(spec=StrategyApi)
    api.list_strategies = AsyncMock(return_value=[])
    api.create_strategy = AsyncMock()
    api.update_strategy = AsyncMock()
    api.set_status = AsyncMock(return_value={'message': 'ok'})
    api.delete_strategy = AsyncMock(return_value={'message': 'ok'})
    api.run_backtest = AsyncMock(return_value={'message': 'Backtest job queued'})
    return api


@pytest.fixture
def make_instance():
    """Factory for persisted strategies"""
    def _make(strategy_id, status=StrategyStatus.INACTIVE, **overrides):
        data = {
            'id': strategy_id,
            'strategy_name': 'trend_follow',
            'symbol': 'EURUSD',
            'timeframe': 'H1',
            'parameters': {'fast_period': 10, 'slow_period': 30},
            'status': status,
        }
        data.update(overrides)
        return StrategyInstance(**data)
    return _make
