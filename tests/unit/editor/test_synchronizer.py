"""
Unit tests for the configuration state synchronizer
"""

from dataclasses import replace
import pytest

from tradedesk.core.exceptions import (
    AccessDeniedError,
    EditorStateError,
    SubmissionInProgressError,
    ValidationError,
)
from tradedesk.editor.draft import StrategyConfigurationDraft, Timeframe
from tradedesk.editor.synchronizer import (
    UPGRADE_PROMPT,
    ConfigurationSynchronizer,
    EditorMode,
    EditorState,
)


class TestOpenCreate:

    def test_seeds_first_type_defaults(self, editor):
        editor.open_create()

        assert editor.state is EditorState.OPEN
        assert editor.mode is EditorMode.CREATE
        assert editor.draft == StrategyConfigurationDraft(
            strategy_name='trend_follow',
            symbol='EURUSD',
            timeframe='H1',
            parameters={'fast_period': 10, 'slow_period': 30},
        )

    def test_platform_defaults_are_configurable(self, registry, free_user):
        editor = ConfigurationSynchronizer(registry, free_user,
                                           default_symbol='BTCUSD', default_timeframe='D1')
        editor.open_create()

        assert (editor.draft.symbol, editor.draft.timeframe) == ('BTCUSD', 'D1')

    def test_free_first_type_leaves_submit_enabled(self, editor):
        editor.open_create()

        assert editor.is_creation_disabled is False
        assert editor.can_submit is True
        assert editor.upgrade_prompt is None
        assert editor.errors == {}

    def test_reopen_replaces_draft(self, editor):
        editor.open_create()
        editor.set_symbol('xauusd')
        editor.select_type('scalper')

        editor.open_create()

        assert editor.draft.strategy_name == 'trend_follow'
        assert editor.draft.symbol == 'EURUSD'
        assert editor.draft.parameters == {'fast_period': 10, 'slow_period': 30}

    def test_each_open_starts_a_new_session(self, editor):
        first = editor.open_create()
        second = editor.open_create()
        assert second != first


class TestSelectType:

    def test_switch_replaces_parameters_with_new_defaults(self, editor):
        editor.open_create()
        editor.set_parameter('fast_period', 5)

        editor.select_type('scalper')

        assert editor.draft.parameters == {'take_profit': 1.5, 'note': 'scalp'}

    @pytest.mark.parametrize("source,target", [
        ('trend_follow', 'premium_grid'),
        ('premium_grid', 'scalper'),
        ('scalper', 'trend_follow'),
        ('premium_grid', 'premium_grid'),
    ])
    def test_switch_leaves_no_residual_keys(self, editor, registry, source, target):
        editor.open_create()
        editor.select_type(source)
        for name in list(editor.draft.parameters):
            editor.set_parameter(name, None)

        editor.select_type(target)

        assert editor.draft.parameters == registry.get(target).default_parameters()

    def test_switch_keeps_symbol_and_timeframe(self, editor):
        editor.open_create()
        editor.set_symbol('gbpjpy')
        editor.set_timeframe(Timeframe.M15)

        editor.select_type('scalper')

        assert editor.draft.symbol == 'gbpjpy'
        assert editor.draft.timeframe == 'M15'

    def test_premium_type_disables_creation_for_free_plan(self, editor):
        editor.open_create()
        editor.select_type('premium_grid')

        assert editor.is_creation_disabled is True
        assert editor.can_submit is False
        assert editor.upgrade_prompt == UPGRADE_PROMPT

        editor.select_type('scalper')

        assert editor.is_creation_disabled is False
        assert editor.can_submit is True

    def test_premium_type_allowed_for_premium_plan(self, registry, premium_user):
        editor = ConfigurationSynchronizer(registry, premium_user)
        editor.open_create()
        editor.select_type('premium_grid')

        assert editor.is_creation_disabled is False

    def test_type_locked_in_edit_mode(self, editor, saved_strategy):
        editor.open_edit(saved_strategy)

        with pytest.raises(EditorStateError):
            editor.select_type('trend_follow')

        assert editor.draft.strategy_name == 'premium_grid'

    def test_type_options_flag_upgrades(self, editor):
        options = {o['strategy_name']: o for o in editor.type_options()}

        assert options['premium_grid']['upgrade_required'] is True
        assert options['trend_follow']['upgrade_required'] is False
        assert [o['strategy_name'] for o in editor.type_options()] == [
            'trend_follow', 'premium_grid', 'scalper'
        ]

    def test_timeframe_case_normalised(self, editor):
        editor.open_create()
        editor.set_timeframe('h4')

        assert editor.draft.timeframe == 'H4'
        assert editor.errors == {}

    def test_changes_require_open_editor(self, editor):
        with pytest.raises(EditorStateError):
            editor.select_type('scalper')
        with pytest.raises(EditorStateError):
            editor.set_symbol('EURUSD')

    def test_unknown_parameter_rejected(self, editor):
        editor.open_create()
        with pytest.raises(KeyError):
            editor.set_parameter('levels', 3)


class TestOpenEdit:

    def test_seeds_draft_verbatim(self, editor, saved_strategy):
        editor.open_edit(saved_strategy)

        assert editor.mode is EditorMode.EDIT
        assert editor.instance is saved_strategy
        assert editor.draft == StrategyConfigurationDraft(
            strategy_name='premium_grid',
            symbol='GBPUSD',
            timeframe='H4',
            parameters={'levels': 8, 'sessions': ['asian'], 'comment': 'legacy'},
        )

    def test_no_default_filling(self, editor, make_instance):
        instance = make_instance(3, parameters={'fast_period': 12})
        editor.open_edit(instance)

        assert editor.draft.parameters == {'fast_period': 12}
        assert editor.errors == {'slow_period': "Slow Period is required."}

    def test_scalar_multiselect_reported_inline(self, editor, saved_strategy):
        instance = replace(saved_strategy, parameters={'levels': 8, 'sessions': 5, 'comment': 'legacy'})
        editor.open_edit(instance)

        assert editor.errors == {'sessions': "Sessions must be a list of options."}
        with pytest.raises(ValidationError) as exc_info:
            editor.begin_submit()
        assert exc_info.value.field == 'sessions'

    def test_draft_does_not_alias_instance(self, editor, saved_strategy):
        editor.open_edit(saved_strategy)
        editor.set_parameter('levels', 2)

        assert saved_strategy.parameters['levels'] == 8

    def test_premium_edit_never_gated(self, editor, saved_strategy):
        editor.open_edit(saved_strategy)

        assert editor.is_creation_disabled is False
        assert editor.can_submit is True

    def test_backtest_editor_cannot_edit(self, backtest_editor, saved_strategy):
        with pytest.raises(EditorStateError):
            backtest_editor.open_edit(saved_strategy)


class TestBacktestContext:

    def test_premium_types_not_gated(self, backtest_editor):
        backtest_editor.open_create()
        backtest_editor.select_type('premium_grid')

        assert backtest_editor.is_creation_disabled is False
        assert not any(o['upgrade_required'] for o in backtest_editor.type_options())

    def test_timeframe_subset(self, backtest_editor):
        backtest_editor.open_create()
        backtest_editor.set_timeframe('W1')

        assert 'timeframe' in backtest_editor.errors


class TestSubmitLifecycle:

    def test_begin_submit_locks_draft(self, editor):
        session = editor.open_create()
        editor.set_parameter('fast_period', '8')

        submitted_session, cleaned = editor.begin_submit()

        assert submitted_session == session
        assert cleaned.parameters['fast_period'] == 8
        assert editor.state is EditorState.SUBMITTING
        assert editor.can_submit is False
        with pytest.raises(SubmissionInProgressError):
            editor.set_symbol('USDJPY')
        with pytest.raises(SubmissionInProgressError):
            editor.begin_submit()

    def test_invalid_draft_stays_open(self, editor):
        editor.open_create()
        editor.set_parameter('slow_period', '')

        with pytest.raises(ValidationError) as exc_info:
            editor.begin_submit()

        assert exc_info.value.field == 'slow_period'
        assert editor.state is EditorState.OPEN

    def test_gated_creation_refused(self, editor):
        editor.open_create()
        editor.select_type('premium_grid')

        with pytest.raises(AccessDeniedError):
            editor.begin_submit()
        assert editor.state is EditorState.OPEN

    def test_closed_editor_cannot_submit(self, editor):
        with pytest.raises(EditorStateError):
            editor.begin_submit()

    def test_success_closes_editor(self, editor):
        editor.open_create()
        session, _ = editor.begin_submit()

        assert editor.submission_succeeded(session) is True
        assert editor.state is EditorState.CLOSED
        assert editor.draft is None

    def test_failure_keeps_draft(self, editor):
        editor.open_create()
        editor.set_symbol('audusd')
        session, _ = editor.begin_submit()

        assert editor.submission_failed(session, "Symbol already exists") is True
        assert editor.state is EditorState.OPEN
        assert editor.last_error == "Symbol already exists"
        assert editor.draft.symbol == 'audusd'

    def test_accepted_keeps_draft_open(self, backtest_editor):
        backtest_editor.open_create()
        session, _ = backtest_editor.begin_submit()

        assert backtest_editor.submission_accepted(session) is True
        assert backtest_editor.state is EditorState.OPEN
        assert backtest_editor.draft.strategy_name == 'trend_follow'

    def test_completion_after_cancel_is_ignored(self, editor):
        editor.open_create()
        session, _ = editor.begin_submit()
        editor.cancel()

        assert editor.submission_succeeded(session) is False
        assert editor.submission_failed(session, "late") is False
        assert editor.state is EditorState.CLOSED
        assert editor.last_error is None

    def test_completion_after_reopen_is_ignored(self, editor, saved_strategy):
        editor.open_create()
        session, _ = editor.begin_submit()
        editor.cancel()
        editor.open_edit(saved_strategy)

        assert editor.submission_succeeded(session) is False
        assert editor.state is EditorState.OPEN
        assert editor.draft.strategy_name == 'premium_grid'

    def test_cancel_discards_draft(self, editor):
        editor.open_create()
        editor.cancel()

        assert editor.state is EditorState.CLOSED
        assert editor.draft is None
        assert editor.errors == {}
