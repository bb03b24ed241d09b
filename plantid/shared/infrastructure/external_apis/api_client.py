# 📄 File: plantid/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# This file creates a smart HTTP client that knows how to talk to external services reliably,
# handling timeouts, retries, and errors gracefully when sending plant photos to classifiers.

# 🧪 Purpose (Technical Summary):
# Generic async HTTP client with retry on transport errors, HTTP status to exception mapping,
# per-API authentication headers, request statistics and error history for all external
# classification provider integrations.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - tenacity: Retry logic and backoff strategies

# 🔄 Connected Modules / Calls From:
# Used by: Plant.id client, OpenAI Vision client (plant_identification.infrastructure.external)

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import aiohttp
from aiohttp import ClientSession, ClientTimeout
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from plantid.shared.core.exceptions import (
    APIAuthenticationError,
    APIRateLimitError,
    APITimeoutError,
    ExternalAPIError,
)
from plantid.shared.utils.logging import get_logger

logger = get_logger(__name__)
retry_logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (aiohttp.ClientConnectionError, aiohttp.ServerDisconnectedError, asyncio.TimeoutError)


class APIClient:
    """
    Generic async HTTP client for external API integrations.

    Features:
    - Automatic retry with exponential backoff on transport errors
    - Status code to exception mapping
    - Authentication handling per API
    - Request/response logging and performance statistics
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        api_name: str,
        timeout: int = 30,
        max_error_history: int = 100
    ):
        """Initialize API client with configuration."""
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.api_name = api_name
        self.timeout = timeout

        self.session: Optional[ClientSession] = None

        # Performance tracking
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'average_response_time': 0.0,
            'last_request_time': None,
            'rate_limit_hits': 0
        }

        # Error tracking
        self.error_history: List[Dict[str, Any]] = []
        self.max_error_history = max_error_history

    async def initialize(self):
        """Initialize the client session."""
        if self.session and not self.session.closed:
            return

        connector = aiohttp.TCPConnector(
            limit=10,
            limit_per_host=5,
            ttl_dns_cache=300
        )

        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            connector=connector,
            headers=self._get_default_headers()
        )

        logger.info(f"API client initialized for {self.api_name}")

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default headers for requests."""
        headers = {
            'User-Agent': f'PlantIdBackend/1.0 ({self.api_name}-client)',
            'Accept': 'application/json',
            'Content-Type': 'application/json'
        }

        if self.api_key:
            name = self.api_name.lower()
            if 'plant_id' in name or 'plantid' in name or 'kindwise' in name:
                headers['Api-Key'] = self.api_key
            else:
                # OpenAI and most others use bearer tokens
                headers['Authorization'] = f'Bearer {self.api_key}'

        return headers

    def _build_url(self, endpoint: str) -> str:
        if not endpoint:
            return self.base_url
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        before_sleep=before_sleep_log(retry_logger, logging.WARNING),
        reraise=True
    )
    async def _send(self, request_kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """Send one HTTP request; transport errors are retried by tenacity."""
        start_time = time.time()

        async with self.session.request(**request_kwargs) as response:
            response_time = time.time() - start_time
            self._update_timing(response_time)

            await self._handle_response_status(response)

            try:
                response_data = await response.json(content_type=None)
            except (aiohttp.ContentTypeError, ValueError):
                response_data = {'raw_response': await response.text()}

            logger.performance.log_external_api_call(
                api_name=self.api_name,
                endpoint=request_kwargs['url'],
                method=request_kwargs['method'],
                status_code=response.status,
                duration_ms=response_time * 1000,
                success=True
            )

            return response_data

    async def _make_request(
        self,
        method: str,
        endpoint: str = '',
        params: Optional[Dict] = None,
        data: Optional[Union[Dict, str, bytes]] = None,
        headers: Optional[Dict] = None,
        timeout: Optional[int] = None
    ) -> Dict[str, Any]:
        """Make HTTP request and translate failures into API exceptions."""
        await self.initialize()

        url = self._build_url(endpoint)

        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        request_kwargs: Dict[str, Any] = {
            'method': method,
            'url': url,
            'headers': request_headers
        }

        if params:
            request_kwargs['params'] = params

        if data is not None:
            if isinstance(data, dict):
                request_kwargs['json'] = data
            else:
                request_kwargs['data'] = data

        if timeout:
            request_kwargs['timeout'] = ClientTimeout(total=timeout)

        self.stats['total_requests'] += 1
        self.stats['last_request_time'] = datetime.now(timezone.utc).isoformat()

        try:
            response_data = await self._send(request_kwargs)
        except Exception as e:
            self.stats['failed_requests'] += 1
            self._record_error(e, method, url)
            raise self._transform_exception(e, method, url)

        self.stats['successful_requests'] += 1
        return response_data

    def _update_timing(self, response_time: float) -> None:
        if self.stats['average_response_time'] == 0:
            self.stats['average_response_time'] = response_time
        else:
            self.stats['average_response_time'] = (
                self.stats['average_response_time'] * 0.7 + response_time * 0.3
            )

    async def _handle_response_status(self, response: aiohttp.ClientResponse):
        """Handle HTTP response status codes."""
        if 200 <= response.status < 300:
            return

        response_text = await response.text()

        if response.status in (401, 403):
            raise APIAuthenticationError(
                f"Authentication failed for {self.api_name}",
                api_name=self.api_name,
                upstream_status=response.status
            )
        elif response.status in (402, 429):
            self.stats['rate_limit_hits'] += 1
            retry_after = response.headers.get('Retry-After')
            raise APIRateLimitError(
                f"Rate limit or quota exceeded for {self.api_name}",
                api_name=self.api_name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                upstream_status=response.status
            )
        elif 400 <= response.status < 500:
            raise ExternalAPIError(
                f"Client error for {self.api_name} ({response.status})",
                api_name=self.api_name,
                upstream_status=response.status,
                response_body=response_text
            )
        elif 500 <= response.status < 600:
            raise ExternalAPIError(
                f"Server error for {self.api_name} ({response.status})",
                api_name=self.api_name,
                upstream_status=response.status,
                response_body=response_text
            )
        else:
            raise ExternalAPIError(
                f"Unexpected status code for {self.api_name}: {response.status}",
                api_name=self.api_name,
                upstream_status=response.status
            )

    def _transform_exception(self, exception: Exception, method: str, url: str) -> Exception:
        """Transform exceptions to appropriate API exceptions."""
        if isinstance(exception, ExternalAPIError):
            return exception
        elif isinstance(exception, asyncio.TimeoutError):
            return APITimeoutError(f"Timeout for {self.api_name}: {method} {url}", api_name=self.api_name)
        elif isinstance(exception, aiohttp.ClientError):
            return ExternalAPIError(f"Client error for {self.api_name}: {exception}", api_name=self.api_name)
        else:
            return exception

    def _record_error(self, error: Exception, method: str, url: str):
        """Record error for analysis and monitoring."""
        error_record = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'error_type': type(error).__name__,
            'error_message': str(error),
            'method': method,
            'url': url,
            'api_name': self.api_name
        }

        self.error_history.append(error_record)

        if len(self.error_history) > self.max_error_history:
            self.error_history = self.error_history[-self.max_error_history:]

        logger.warning(f"❌ API error recorded for {self.api_name}: {error_record['error_type']}")

    async def post(
        self,
        endpoint: str = '',
        data: Optional[Union[Dict, str, bytes]] = None,
        params: Optional[Dict] = None,
        headers: Optional[Dict] = None,
        timeout: Optional[int] = None
    ) -> Dict[str, Any]:
        """Make POST request."""
        return await self._make_request('POST', endpoint, params, data, headers, timeout)

    def get_stats(self) -> Dict[str, Any]:
        """Get client performance statistics."""
        return {
            **self.stats,
            'api_name': self.api_name,
            'error_rate': (
                self.stats['failed_requests'] / max(self.stats['total_requests'], 1)
            ) * 100
        }

    def get_recent_errors(self, limit: int = 10) -> List[Dict]:
        """Get recent error history."""
        return self.error_history[-limit:]

    async def close(self):
        """Close the client session and cleanup resources."""
        if self.session:
            await self.session.close()
            self.session = None

        logger.info(f"API client closed for {self.api_name}")
