"""
Field models derived from parameter specs.

Each parameter spec maps to a FieldModel carrying its validation rules and
the input capability used to render it. Derivation is pure, so the visible
form for a strategy type is just derive_field_models(definition).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
import math

from .schema import (
    MultiSelectParameter,
    NumberParameter,
    ParameterSpec,
    StrategyDefinition,
    TextParameter,
    default_value,
)

class InputWidget(Enum):
    """Rendering capability of a field"""
    TEXT = "text"
    NUMBER = "number"
    MULTISELECT = "multiselect"

@dataclass(frozen=True)
class InputCapability:
    widget: InputWidget
    step: Optional[Union[int, float, str]] = None
    options: Tuple[str, ...] = ()

@dataclass(frozen=True)
class FieldRules:
    required_message: str
    coerce_number: bool = False
    allowed_options: Optional[Tuple[str, ...]] = None

@dataclass(frozen=True)
class FieldModel:
    """Validation and rendering model for one parameter"""
    name: str
    label: str
    tooltip: Optional[str]
    default: Any
    capability: InputCapability
    rules: FieldRules

    def validate(self, value: Any) -> Tuple[Any, Optional[str]]:
        """
        Check a raw input value against the field rules.

        Returns:
            Tuple of (cleaned_value, error_message). The error is None when
            the value is acceptable.
        """
        if self.rules.coerce_number:
            return _validate_number(self, value)
        if self.rules.allowed_options is not None:
            return _validate_choices(self, value)
        return _validate_text(self, value)

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def coerce_number(value: Any) -> Union[int, float]:
    """
    Convert an entered value to a number.

    Integral text becomes an int, other numeric text a float. NaN and
    infinities are rejected.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Not a finite number: {value!r}")
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            number = float(text)
            if not math.isfinite(number):
                raise ValueError(f"Not a finite number: {value!r}")
            return number
    raise ValueError(f"Not a number: {value!r}")

def _validate_number(model: FieldModel, value: Any) -> Tuple[Any, Optional[str]]:
    if _is_blank(value):
        return None, model.rules.required_message
    try:
        return coerce_number(value), None
    except ValueError:
        return value, f"{model.label} must be a number."

def _validate_choices(model: FieldModel, value: Any) -> Tuple[Any, Optional[str]]:
    if value is None:
        return [], model.rules.required_message
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return value, f"{model.label} must be a list of options."

    selected = list(value)
    if not selected:
        return [], model.rules.required_message

    options = model.rules.allowed_options
    if any(choice not in options for choice in selected):
        return selected, f"{model.label} contains an unknown option."

    return [option for option in options if option in selected], None

def _validate_text(model: FieldModel, value: Any) -> Tuple[Any, Optional[str]]:
    if _is_blank(value):
        return value, model.rules.required_message
    return str(value), None

def derive_field(spec: ParameterSpec) -> FieldModel:
    """Build the field model for a single parameter spec"""
    if isinstance(spec, NumberParameter):
        capability = InputCapability(
            widget=InputWidget.NUMBER,
            step=spec.step if spec.step is not None else "any",
        )
    elif isinstance(spec, MultiSelectParameter):
        capability = InputCapability(widget=InputWidget.MULTISELECT, options=spec.options)
    elif isinstance(spec, TextParameter):
        capability = InputCapability(widget=InputWidget.TEXT)
    else:
        raise TypeError(f"Unsupported parameter spec: {type(spec).__name__}")

    label = spec.display_label
    rules = FieldRules(
        required_message=f"{label} is required.",
        coerce_number=capability.widget is InputWidget.NUMBER,
        allowed_options=capability.options if capability.widget is InputWidget.MULTISELECT else None,
    )

    return FieldModel(
        name=spec.name,
        label=label,
        tooltip=spec.tooltip,
        default=default_value(spec),
        capability=capability,
        rules=rules,
    )

def derive_field_models(definition: StrategyDefinition) -> List[FieldModel]:
    """Visible field models for a strategy type, in schema order"""
    return [derive_field(spec) for spec in definition.parameters]

def validate_parameters(definition: StrategyDefinition,
                        values: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Validate a parameter mapping against a strategy type.

    Returns:
        Tuple of (cleaned_values, errors_by_field) with errors in schema order
    """
    cleaned = dict(values)
    errors: Dict[str, str] = {}

    for model in derive_field_models(definition):
        value, error = model.validate(values.get(model.name))
        if error:
            errors[model.name] = error
        else:
            cleaned[model.name] = value

    return cleaned, errors
