"""
Strategy configuration module.

This module provides the strategy type schema, catalog loading, field model
derivation, and draft validation for the strategy editor.
"""

from .schema import (
    StrategyDefinition,
    ParameterSpec,
    ParameterKind,
    TextParameter,
    NumberParameter,
    MultiSelectParameter,
)
from .fields import FieldModel, InputCapability, InputWidget, derive_field, derive_field_models
from .validator import ConfigValidator
from .loader import ConfigLoader

__all__ = [
    'StrategyDefinition',
    'ParameterSpec',
    'ParameterKind',
    'TextParameter',
    'NumberParameter',
    'MultiSelectParameter',
    'FieldModel',
    'InputCapability',
    'InputWidget',
    'derive_field',
    'derive_field_models',
    'ConfigValidator',
    'ConfigLoader'
]
