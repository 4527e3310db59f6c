import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

from ..core.config import Settings
from ..core.exceptions import ApiError
from ..editor.draft import StrategyInstance, StrategyStatus
from ..submission.payload import SubmissionPayload
from .base import StrategyApi

logger = structlog.get_logger()

def extract_detail(body: Any) -> Optional[str]:
    """Pull the {detail: str} message out of an error body"""
    if isinstance(body, dict) and isinstance(body.get('detail'), str):
        return body['detail']
    return None

def _parse_instance(body: Any) -> StrategyInstance:
    """Decode a strategy from a success body"""
    try:
        return StrategyInstance.from_dict(body)
    except (KeyError, TypeError, ValueError) as e:
        logger.error("Unexpected strategy body", body=body, error=str(e))
        raise ApiError(None) from e

class HttpStrategyApi(StrategyApi):
    """aiohttp client for the strategy REST backend"""

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 30.0, session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpStrategyApi":
        return cls(settings.api_base_url, settings.api_token, settings.request_timeout)

    async def connect(self) -> None:
        if self._session is None or self._session.closed:
            headers = {'Accept': 'application/json'}
            if self.token:
                headers['Authorization'] = f"Bearer {self.token}"
            self._session = aiohttp.ClientSession(headers=headers, timeout=self.timeout)
            self._owns_session = True
            logger.debug("HTTP session opened", base_url=self.base_url)

    async def disconnect(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP session closed", base_url=self.base_url)

    async def __aenter__(self) -> "HttpStrategyApi":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                       params: Optional[Dict[str, str]] = None) -> Any:
        await self.connect()
        url = f"{self.base_url}{path}"

        try:
            async with self._session.request(method, url, json=json, params=params) as response:
                try:
                    if response.content_type == 'application/json':
                        body = await response.json()
                    else:
                        body = await response.text() or None
                except ValueError as e:
                    logger.error("Malformed API response", method=method, path=path,
                                 status=response.status, error=str(e))
                    raise ApiError(None, response.status) from e

                if response.status >= 400:
                    detail = extract_detail(body)
                    logger.warning("API request failed",
                                   method=method,
                                   path=path,
                                   status=response.status,
                                   detail=detail)
                    raise ApiError(detail, response.status)

                return body

        except aiohttp.ClientError as e:
            logger.error("API request error", method=method, path=path, error=str(e))
            raise ApiError(None) from e
        except asyncio.TimeoutError as e:
            logger.error("API request timed out", method=method, path=path)
            raise ApiError(None) from e

    async def list_strategies(self) -> List[StrategyInstance]:
        body = await self._request('GET', '/strategies')
        if body is None:
            return []
        if not isinstance(body, list):
            raise ApiError(None)
        return [_parse_instance(item) for item in body]

    async def create_strategy(self, payload: SubmissionPayload) -> StrategyInstance:
        body = await self._request('POST', '/strategies', json=payload.to_dict())
        return _parse_instance(body)

    async def update_strategy(self, strategy_id: Any, payload: SubmissionPayload) -> StrategyInstance:
        body = await self._request('PUT', f'/strategies/{strategy_id}', json=payload.to_dict())
        return _parse_instance(body)

    async def set_status(self, strategy_id: Any, status: StrategyStatus) -> Dict[str, Any]:
        body = await self._request('PATCH', f'/strategies/{strategy_id}/status',
                                   params={'status': status.value})
        return body if isinstance(body, dict) else {}

    async def delete_strategy(self, strategy_id: Any) -> Dict[str, Any]:
        body = await self._request('DELETE', f'/strategies/{strategy_id}')
        return body if isinstance(body, dict) else {}

    async def run_backtest(self, payload: SubmissionPayload) -> Dict[str, Any]:
        body = await self._request('POST', '/backtest', json=payload.to_dict())
        return body if isinstance(body, dict) else {'message': body}
