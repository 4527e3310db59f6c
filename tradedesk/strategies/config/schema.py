"""
Strategy type definitions and parameter specs.

A strategy type is a fixed template with an ordered parameter schema and an
access tier. Parameter specs are a closed set of variants, one per input kind,
each carrying only the attributes valid for that kind.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import keyword

class ParameterKind(Enum):
    """Input kinds a parameter can take"""
    TEXT = "text"
    NUMBER = "number"
    MULTISELECT = "multiselect"

@dataclass(frozen=True)
class TextParameter:
    """Single-line free text parameter"""
    name: str
    label: str = ""
    default: Optional[str] = None
    tooltip: Optional[str] = None
    kind: ParameterKind = field(default=ParameterKind.TEXT, init=False)

    @property
    def display_label(self) -> str:
        return self.label or self.name

@dataclass(frozen=True)
class NumberParameter:
    """Numeric parameter rendered as a stepper"""
    name: str
    label: str = ""
    default: Optional[Union[int, float]] = None
    tooltip: Optional[str] = None
    step: Optional[Union[int, float]] = None
    kind: ParameterKind = field(default=ParameterKind.NUMBER, init=False)

    @property
    def display_label(self) -> str:
        return self.label or self.name

@dataclass(frozen=True)
class MultiSelectParameter:
    """Parameter whose value is a set of choices from a fixed option list"""
    name: str
    options: Tuple[str, ...]
    label: str = ""
    default: Tuple[str, ...] = ()
    tooltip: Optional[str] = None
    kind: ParameterKind = field(default=ParameterKind.MULTISELECT, init=False)

    @property
    def display_label(self) -> str:
        return self.label or self.name

ParameterSpec = Union[TextParameter, NumberParameter, MultiSelectParameter]

def is_valid_parameter_name(name: Any) -> bool:
    """Parameter names must be usable as field identifiers"""
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)

def default_value(spec: ParameterSpec) -> Any:
    """Initial draft value for a parameter"""
    if isinstance(spec, MultiSelectParameter):
        return list(spec.default)
    return spec.default

@dataclass(frozen=True)
class StrategyDefinition:
    """A strategy type from the catalog"""
    key: str
    name: str
    is_premium: bool = False
    parameters: Tuple[ParameterSpec, ...] = ()

    def __post_init__(self):
        seen = set()
        for spec in self.parameters:
            if not is_valid_parameter_name(spec.name):
                raise ValueError(f"Invalid parameter name '{spec.name}' in strategy '{self.key}'")
            if spec.name in seen:
                raise ValueError(f"Duplicate parameter '{spec.name}' in strategy '{self.key}'")
            seen.add(spec.name)

    def parameter(self, name: str) -> ParameterSpec:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        raise KeyError(name)

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.parameters)

    def default_parameters(self) -> Dict[str, Any]:
        """Fresh mapping of parameter name to default value"""
        return {spec.name: default_value(spec) for spec in self.parameters}
