"""
Submission of editor drafts.

The pipeline validates the draft through the synchronizer, normalizes it
into a payload and dispatches it either to the strategy resource (create or
update) or to the backtest runner. Failures are reported to the user and
leave the draft open for a retry.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional
import structlog

from ..clients.base import StrategyApi
from ..core.exceptions import AccessDeniedError, ApiError, ValidationError
from ..editor.draft import EditorContext, StrategyInstance
from ..editor.synchronizer import ConfigurationSynchronizer
from ..logging.logger_config import SubmissionLogger
from .notifier import LoggingNotifier, Notifier
from .payload import SubmissionPayload, normalize

logger = structlog.get_logger()

GENERIC_ERROR = "An error occurred."
BACKTEST_ERROR = "Backtest failed to start."
BACKTEST_PENDING = "Starting backtest... This may take a minute."
BACKTEST_ACCEPTED = "Backtest accepted."

@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one submit call"""
    ok: bool
    context: EditorContext
    message: Optional[str] = None
    payload: Optional[SubmissionPayload] = None
    instance: Optional[StrategyInstance] = None
    field: Optional[str] = None
    dispatched: bool = False

class SubmissionPipeline:
    """Normalizes drafts and sends them to the backend"""

    def __init__(self, api: StrategyApi, notifier: Optional[Notifier] = None,
                 on_saved: Optional[Callable[[StrategyInstance], Awaitable[Any]]] = None):
        self.api = api
        self.notifier = notifier or LoggingNotifier()
        self.on_saved = on_saved
        self.events = SubmissionLogger()

    async def submit(self, editor: ConfigurationSynchronizer) -> SubmissionResult:
        """
        Submit the editor's current draft.

        Validation and access failures return without any network call; the
        validation error is reported inline through the result, never as a
        notice. Server failures are shown as a notice and keep the editor open.

        Raises:
            SubmissionInProgressError: If this editor is already submitting
            EditorStateError: If the editor is closed
        """
        context = editor.context
        try:
            session, draft = editor.begin_submit()
        except ValidationError as e:
            self.events.validation_blocked(editor.draft.strategy_name, editor.errors)
            return SubmissionResult(ok=False, context=context, message=e.message, field=e.field)
        except AccessDeniedError as e:
            logger.info("Submission blocked by plan", strategy=editor.draft.strategy_name)
            return SubmissionResult(ok=False, context=context, message=str(e))

        payload = normalize(draft)
        if context is EditorContext.BACKTEST:
            return await self._run_backtest(editor, session, payload)
        return await self._save_strategy(editor, session, payload)

    async def _save_strategy(self, editor: ConfigurationSynchronizer, session: int,
                             payload: SubmissionPayload) -> SubmissionResult:
        existing = editor.instance
        verb = 'updated' if existing is not None else 'created'
        context = EditorContext.MANAGE_STRATEGY

        self.notifier.loading("Updating strategy..." if existing is not None else "Creating strategy...")
        self.events.submission_started(context.value, payload.strategy_name, payload.symbol,
                                       existing.id if existing is not None else None)

        try:
            if existing is not None:
                instance = await self.api.update_strategy(existing.id, payload)
            else:
                instance = await self.api.create_strategy(payload)
        except ApiError as e:
            return self._fail(editor, session, context, payload, e.detail or GENERIC_ERROR, e.status)
        except Exception as e:
            logger.error("Unexpected error saving strategy", strategy=payload.strategy_name,
                         error=str(e), exc_info=True)
            return self._fail(editor, session, context, payload, GENERIC_ERROR)

        self.events.submission_succeeded(context.value, payload.strategy_name, instance.id)
        message = f"Strategy successfully {verb}!"
        self.notifier.success(message)

        # The strategy is saved even if the editor was closed meanwhile
        editor.submission_succeeded(session)
        if self.on_saved is not None:
            await self.on_saved(instance)

        return SubmissionResult(ok=True, context=context, message=message, payload=payload,
                                instance=instance, dispatched=True)

    async def _run_backtest(self, editor: ConfigurationSynchronizer, session: int,
                            payload: SubmissionPayload) -> SubmissionResult:
        context = EditorContext.BACKTEST
        self.notifier.loading(BACKTEST_PENDING)
        self.events.submission_started(context.value, payload.strategy_name, payload.symbol)

        try:
            response = await self.api.run_backtest(payload)
        except ApiError as e:
            return self._fail(editor, session, context, payload, e.detail or BACKTEST_ERROR, e.status)
        except Exception as e:
            logger.error("Unexpected error starting backtest", strategy=payload.strategy_name,
                         error=str(e), exc_info=True)
            return self._fail(editor, session, context, payload, BACKTEST_ERROR)

        message = _acknowledgment(response)
        self.events.submission_succeeded(context.value, payload.strategy_name)
        self.notifier.success(message)
        editor.submission_accepted(session)

        return SubmissionResult(ok=True, context=context, message=message, payload=payload,
                                dispatched=True)

    def _fail(self, editor: ConfigurationSynchronizer, session: int, context: EditorContext,
              payload: SubmissionPayload, message: str,
              status: Optional[int] = None) -> SubmissionResult:
        """Report a failed dispatch and reopen the editor for a retry"""
        self.events.submission_failed(context.value, payload.strategy_name, message, status)
        self.notifier.error(message)
        editor.submission_failed(session, message)
        return SubmissionResult(ok=False, context=context, message=message,
                                payload=payload, dispatched=True)

def _acknowledgment(response: Dict[str, Any]) -> str:
    message = response.get('message') if isinstance(response, dict) else None
    return message if isinstance(message, str) and message else BACKTEST_ACCEPTED
