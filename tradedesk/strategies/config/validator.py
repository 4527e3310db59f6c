"""
Draft validation for strategy configurations.

Applies the field models of the selected strategy type to a draft, plus the
core symbol and timeframe checks every configuration shares.
"""

from typing import Dict, Iterable, Optional, Tuple
import structlog

from ...core.exceptions import ValidationError
from ...editor.draft import STRATEGY_TIMEFRAMES, StrategyConfigurationDraft, Timeframe
from .fields import validate_parameters
from .schema import StrategyDefinition

logger = structlog.get_logger()

SYMBOL_REQUIRED = "Symbol is required."
TIMEFRAME_REQUIRED = "Timeframe is required."

class ConfigValidator:
    """Validates configuration drafts against strategy definitions"""

    @classmethod
    def validate_draft(cls, definition: StrategyDefinition,
                       draft: StrategyConfigurationDraft,
                       timeframes: Iterable[Timeframe] = STRATEGY_TIMEFRAMES) -> Dict[str, str]:
        """
        Validate a draft.

        Args:
            definition: Definition of the draft's strategy type
            draft: Draft to check
            timeframes: Timeframes accepted in this context

        Returns:
            Errors keyed by field name, in form order (symbol, timeframe,
            then parameters in schema order). Empty when the draft is valid.
        """
        errors: Dict[str, str] = {}

        if draft.symbol is None or not str(draft.symbol).strip():
            errors['symbol'] = SYMBOL_REQUIRED

        allowed = {tf.value for tf in timeframes}
        if not draft.timeframe:
            errors['timeframe'] = TIMEFRAME_REQUIRED
        elif draft.timeframe not in allowed:
            errors['timeframe'] = f"Timeframe {draft.timeframe} is not available."

        _, parameter_errors = validate_parameters(definition, draft.parameters)
        errors.update(parameter_errors)

        return errors

    @classmethod
    def first_error(cls, errors: Dict[str, str]) -> Optional[Tuple[str, str]]:
        """The first failing field and its message, if any"""
        for field_name, message in errors.items():
            return field_name, message
        return None

    @classmethod
    def clean_draft(cls, definition: StrategyDefinition,
                    draft: StrategyConfigurationDraft,
                    timeframes: Iterable[Timeframe] = STRATEGY_TIMEFRAMES) -> StrategyConfigurationDraft:
        """
        Validate a draft and return a copy with coerced parameter values.

        Raises:
            ValidationError: For the first failing field
        """
        errors = cls.validate_draft(definition, draft, timeframes)
        first = cls.first_error(errors)
        if first:
            field_name, message = first
            logger.debug("Draft validation failed",
                         strategy=definition.key,
                         field=field_name,
                         error_count=len(errors))
            raise ValidationError(field_name, message)

        cleaned_parameters, _ = validate_parameters(definition, draft.parameters)
        cleaned = draft.copy()
        cleaned.parameters = cleaned_parameters
        return cleaned
