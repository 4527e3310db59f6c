from .base import StrategyApi
from .http_client import HttpStrategyApi

__all__ = ['StrategyApi', 'HttpStrategyApi']
