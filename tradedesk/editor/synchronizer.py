"""
Configuration state for the strategy editor.

The synchronizer owns the draft for one editor instance and reconciles it
when the editor opens (create or edit) and when the strategy type changes.
Everything the form renders (field models, errors, whether submit is
disabled) is derived from the draft on demand.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import structlog

from ..core.exceptions import AccessDeniedError, EditorStateError, SubmissionInProgressError
from ..strategies.access import UserAccessContext, can_create
from ..strategies.config import ConfigValidator, FieldModel, StrategyDefinition, derive_field_models
from ..strategies.registry import StrategyRegistry
from .draft import (
    BACKTEST_TIMEFRAMES,
    STRATEGY_TIMEFRAMES,
    EditorContext,
    StrategyConfigurationDraft,
    StrategyInstance,
    Timeframe,
)

logger = structlog.get_logger()

UPGRADE_PROMPT = "This is a premium strategy. Please upgrade your plan to create it."

class EditorMode(Enum):
    CREATE = "create"
    EDIT = "edit"

class EditorState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"

class ConfigurationSynchronizer:
    """Owns and reconciles the configuration draft of one editor"""

    def __init__(self, registry: StrategyRegistry, access: UserAccessContext,
                 context: EditorContext = EditorContext.MANAGE_STRATEGY,
                 default_symbol: str = "EURUSD", default_timeframe: str = "H1"):
        self.registry = registry
        self.access = access
        self.context = context
        self.default_symbol = default_symbol
        self.default_timeframe = default_timeframe

        self.state = EditorState.CLOSED
        self.mode: Optional[EditorMode] = None
        self.instance: Optional[StrategyInstance] = None
        self.draft: Optional[StrategyConfigurationDraft] = None
        self.last_error: Optional[str] = None
        self._session = 0

    # Lifecycle

    def open_create(self) -> int:
        """Open the editor with a fresh draft for the first catalog type"""
        strategy_name = self.registry.first_key()
        definition = self.registry.get(strategy_name)

        self._start_session(EditorMode.CREATE, None)
        self.draft = StrategyConfigurationDraft(
            strategy_name=strategy_name,
            symbol=self.default_symbol,
            timeframe=self.default_timeframe,
            parameters=definition.default_parameters(),
        )

        logger.debug("Editor opened", mode="create", strategy=strategy_name, session=self._session)
        return self._session

    def open_edit(self, instance: StrategyInstance) -> int:
        """Open the editor seeded verbatim from an existing strategy"""
        if self.context is EditorContext.BACKTEST:
            raise EditorStateError("Backtests are always configured from scratch")

        self._start_session(EditorMode.EDIT, instance)
        self.draft = StrategyConfigurationDraft.from_instance(instance)

        logger.debug("Editor opened", mode="edit",
                     strategy=instance.strategy_name,
                     instance_id=instance.id,
                     session=self._session)
        return self._session

    def cancel(self) -> None:
        """Close the editor and discard the draft"""
        if self.state is EditorState.SUBMITTING:
            logger.info("Editor closed with a submission in flight", session=self._session)
        self._close()

    def _start_session(self, mode: EditorMode, instance: Optional[StrategyInstance]) -> None:
        self._session += 1
        self.state = EditorState.OPEN
        self.mode = mode
        self.instance = instance
        self.last_error = None

    def _close(self) -> None:
        self._session += 1
        self.state = EditorState.CLOSED
        self.mode = None
        self.instance = None
        self.draft = None
        self.last_error = None

    @property
    def session(self) -> int:
        return self._session

    @property
    def is_open(self) -> bool:
        return self.state is not EditorState.CLOSED

    @property
    def is_editing(self) -> bool:
        return self.mode is EditorMode.EDIT

    # Draft changes

    def select_type(self, strategy_name: str) -> None:
        """
        Switch the strategy type of a new configuration.

        Parameters are replaced by the new type's defaults; symbol and
        timeframe keep their current values.

        Raises:
            EditorStateError: When editing an existing strategy
        """
        self._require_open()
        if self.is_editing:
            raise EditorStateError("Strategy type cannot be changed while editing")

        definition = self.registry.get(strategy_name)
        self.draft.strategy_name = strategy_name
        self.draft.parameters = definition.default_parameters()

        logger.debug("Strategy type selected",
                     strategy=strategy_name,
                     premium=definition.is_premium,
                     creation_disabled=self.is_creation_disabled)

    def set_symbol(self, symbol: str) -> None:
        self._require_open()
        self.draft.symbol = symbol

    def set_timeframe(self, timeframe: str) -> None:
        self._require_open()
        self.draft.timeframe = timeframe.value if isinstance(timeframe, Timeframe) else timeframe.upper()

    def set_parameter(self, name: str, value: Any) -> None:
        self._require_open()
        self.definition.parameter(name)
        self.draft.parameters[name] = value

    def _require_open(self) -> None:
        if self.state is EditorState.CLOSED:
            raise EditorStateError("Editor is not open")
        if self.state is EditorState.SUBMITTING:
            raise SubmissionInProgressError("Draft is locked while a submission is in flight")

    # Derived state

    @property
    def definition(self) -> StrategyDefinition:
        if self.draft is None:
            raise EditorStateError("Editor is not open")
        return self.registry.get(self.draft.strategy_name)

    @property
    def field_models(self) -> List[FieldModel]:
        return derive_field_models(self.definition)

    @property
    def timeframes(self) -> Tuple[Timeframe, ...]:
        if self.context is EditorContext.BACKTEST:
            return BACKTEST_TIMEFRAMES
        return STRATEGY_TIMEFRAMES

    @property
    def errors(self) -> Dict[str, str]:
        """Current inline validation errors, in form order"""
        if self.draft is None:
            return {}
        return ConfigValidator.validate_draft(self.definition, self.draft, self.timeframes)

    @property
    def is_creation_disabled(self) -> bool:
        """True when creating the selected premium type is not allowed"""
        if self.draft is None or self.mode is not EditorMode.CREATE:
            return False
        if self.context is EditorContext.BACKTEST:
            return False
        definition = self.definition
        return definition.is_premium and not can_create(self.access, definition)

    @property
    def upgrade_prompt(self) -> Optional[str]:
        return UPGRADE_PROMPT if self.is_creation_disabled else None

    @property
    def can_submit(self) -> bool:
        return self.state is EditorState.OPEN and not self.is_creation_disabled

    def type_options(self) -> List[Dict[str, Any]]:
        """Entries for the strategy type selector"""
        gated = self.context is EditorContext.MANAGE_STRATEGY
        return [
            {
                'strategy_name': definition.key,
                'name': definition.name,
                'is_premium': definition.is_premium,
                'upgrade_required': gated and not can_create(self.access, definition),
            }
            for definition in self.registry
        ]

    # Submission hooks

    def begin_submit(self) -> Tuple[int, StrategyConfigurationDraft]:
        """
        Validate the draft and move to the submitting state.

        Returns:
            Tuple of (session, validated draft with coerced values)

        Raises:
            SubmissionInProgressError: If a submission is already in flight
            EditorStateError: If the editor is closed
            AccessDeniedError: If creation of the selected type is gated
            ValidationError: For the first failing field
        """
        if self.state is EditorState.SUBMITTING:
            raise SubmissionInProgressError("A submission is already in flight")
        if self.state is EditorState.CLOSED:
            raise EditorStateError("Editor is not open")
        if self.is_creation_disabled:
            raise AccessDeniedError(UPGRADE_PROMPT)

        cleaned = ConfigValidator.clean_draft(self.definition, self.draft, self.timeframes)

        self.state = EditorState.SUBMITTING
        self.last_error = None
        return self._session, cleaned

    def submission_succeeded(self, session: int) -> bool:
        """Close the editor after a successful submission of this session"""
        if not self._is_current(session):
            logger.debug("Ignoring completion for a closed editor", session=session)
            return False
        self._close()
        return True

    def submission_accepted(self, session: int) -> bool:
        """Return to the open state after a fire-and-forget run, keeping the draft"""
        if not self._is_current(session):
            logger.debug("Ignoring completion for a closed editor", session=session)
            return False
        self.state = EditorState.OPEN
        self.last_error = None
        return True

    def submission_failed(self, session: int, message: str) -> bool:
        """Return to the open state keeping the draft so the user can retry"""
        if not self._is_current(session):
            logger.debug("Ignoring failure for a closed editor", session=session)
            return False
        self.state = EditorState.OPEN
        self.last_error = message
        return True

    def _is_current(self, session: int) -> bool:
        return session == self._session and self.state is EditorState.SUBMITTING
