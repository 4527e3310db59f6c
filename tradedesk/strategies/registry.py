from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Union
import structlog

from ..core.exceptions import CatalogError
from .config import ConfigLoader, StrategyDefinition

logger = structlog.get_logger()

class StrategyRegistry:
    """
    Read-only catalog of strategy types.

    Built once at startup and handed to the editor and pipeline, so tests can
    substitute their own catalog.
    """

    def __init__(self, definitions: Iterable[StrategyDefinition]):
        self._definitions: Dict[str, StrategyDefinition] = {}
        for definition in definitions:
            if definition.key in self._definitions:
                raise CatalogError(f"Duplicate strategy type '{definition.key}'")
            self._definitions[definition.key] = definition

        if not self._definitions:
            raise CatalogError("Strategy catalog is empty")

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "StrategyRegistry":
        return cls(ConfigLoader.load_catalog(path))

    @classmethod
    def from_mapping(cls, document: Mapping[str, Any]) -> "StrategyRegistry":
        return cls(ConfigLoader.parse_catalog(dict(document)))

    def get(self, key: str) -> StrategyDefinition:
        """Get a strategy definition by type key"""
        if key not in self._definitions:
            available = list(self._definitions)
            raise CatalogError(f"Unknown strategy '{key}'. Available strategies: {available}")
        return self._definitions[key]

    def list_keys(self) -> List[str]:
        """Type keys in catalog order"""
        return list(self._definitions)

    def first_key(self) -> str:
        return next(iter(self._definitions))

    def describe(self, key: str) -> Dict[str, Any]:
        """
        Parameter information for a strategy type.

        Args:
            key: Strategy type key

        Returns:
            JSON-friendly dictionary with the definition and its parameters
        """
        definition = self.get(key)
        return {
            'strategy_name': definition.key,
            'name': definition.name,
            'is_premium': definition.is_premium,
            'parameters': [
                {
                    'name': spec.name,
                    'label': spec.display_label,
                    'type': spec.kind.value,
                    'default': definition.default_parameters()[spec.name],
                    'tooltip': spec.tooltip,
                    'step': getattr(spec, 'step', None),
                    'options': list(getattr(spec, 'options', ())) or None,
                }
                for spec in definition.parameters
            ],
        }

    def __contains__(self, key: object) -> bool:
        return key in self._definitions

    def __iter__(self) -> Iterator[StrategyDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
