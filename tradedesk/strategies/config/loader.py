"""
Catalog loader for strategy types.

This module reads the strategy catalog from YAML and turns each entry into
an immutable StrategyDefinition, rejecting malformed entries up front.
"""

from pathlib import Path
from typing import Any, Dict, List, Union
import structlog

from ...core.config import load_yaml
from ...core.exceptions import CatalogError
from .schema import (
    MultiSelectParameter,
    NumberParameter,
    ParameterKind,
    ParameterSpec,
    StrategyDefinition,
    TextParameter,
)

logger = structlog.get_logger()

class ConfigLoader:
    """Loads strategy type definitions from catalog documents"""

    @classmethod
    def load_catalog(cls, path: Union[str, Path]) -> List[StrategyDefinition]:
        """
        Load the strategy catalog from a YAML file.

        Args:
            path: Path to the catalog document

        Returns:
            Strategy definitions in catalog order

        Raises:
            CatalogError: If the catalog is malformed
        """
        document = load_yaml(path)
        definitions = cls.parse_catalog(document)

        logger.info("Strategy catalog loaded",
                    path=str(path),
                    strategy_count=len(definitions))

        return definitions

    @classmethod
    def parse_catalog(cls, document: Dict[str, Any]) -> List[StrategyDefinition]:
        """Parse a catalog mapping of the form {'strategies': {key: entry}}"""
        strategies = document.get('strategies')
        if not isinstance(strategies, dict) or not strategies:
            raise CatalogError("Catalog must define at least one strategy under 'strategies'")

        return [cls.parse_definition(key, entry) for key, entry in strategies.items()]

    @classmethod
    def parse_definition(cls, key: str, entry: Dict[str, Any]) -> StrategyDefinition:
        if not isinstance(entry, dict):
            raise CatalogError(f"Strategy '{key}' must be a mapping")

        raw_parameters = entry.get('parameters') or []
        if not isinstance(raw_parameters, list):
            raise CatalogError(f"Parameters of strategy '{key}' must be a list")

        parameters = tuple(cls.parse_parameter(key, raw) for raw in raw_parameters)

        try:
            return StrategyDefinition(
                key=str(key),
                name=entry.get('name') or str(key),
                is_premium=bool(entry.get('is_premium', False)),
                parameters=parameters,
            )
        except ValueError as e:
            raise CatalogError(str(e)) from e

    @classmethod
    def parse_parameter(cls, strategy_key: str, raw: Dict[str, Any]) -> ParameterSpec:
        if not isinstance(raw, dict) or 'name' not in raw:
            raise CatalogError(f"Parameter entries of strategy '{strategy_key}' need a name")

        name = raw['name']
        try:
            kind = ParameterKind(raw.get('type', 'text'))
        except ValueError:
            raise CatalogError(
                f"Unknown parameter type '{raw.get('type')}' for '{name}' in strategy '{strategy_key}'"
            ) from None

        common = {
            'name': name,
            'label': raw.get('label') or '',
            'tooltip': raw.get('tooltip'),
        }

        if kind is ParameterKind.TEXT:
            default = raw.get('default')
            return TextParameter(default=None if default is None else str(default), **common)

        if kind is ParameterKind.NUMBER:
            default = raw.get('default')
            if default is not None and (isinstance(default, bool) or not isinstance(default, (int, float))):
                raise CatalogError(f"Default of numeric parameter '{name}' must be a number")
            return NumberParameter(default=default, step=raw.get('step'), **common)

        if kind is ParameterKind.MULTISELECT:
            options = raw.get('options')
            if not isinstance(options, list) or not options:
                raise CatalogError(f"Multiselect parameter '{name}' needs a non-empty options list")
            default = raw.get('default') or []
            unknown = [value for value in default if value not in options]
            if unknown:
                raise CatalogError(f"Default of '{name}' has values outside its options: {unknown}")
            return MultiSelectParameter(options=tuple(options), default=tuple(default), **common)

        raise CatalogError(f"Unhandled parameter kind: {kind}")
