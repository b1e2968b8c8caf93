"""Veo operation polling and generated-media download."""

import asyncio
import logging
from typing import Optional, Protocol

import httpx

from ..config import config
from ..errors import (
    FetchError,
    MissingMediaError,
    OperationCancelledError,
    OperationTimeoutError,
    RemoteOperationError,
)
from ..models import CompletedOperation, EncodedAsset, MediaRef, OperationHandle
from ..models.media import DEFAULT_VIDEO_MIME

logger = logging.getLogger(__name__)


class OperationSource(Protocol):
    """Anything that can refresh an operation's state."""

    async def get_operation(self, name: str) -> OperationHandle:
        ...


class OperationPoller:
    """Waits for a long-running video operation to finish.

    The loop checks status at a fixed interval; there is no backoff. Waiting
    is bounded by ``max_poll_time`` seconds and optionally by a number of
    status checks. A failed status check is not retried.
    """

    DEFAULT_POLL_INTERVAL = 5.0  # seconds
    DEFAULT_MAX_POLL_TIME = 600.0  # 10 minutes

    def __init__(
        self,
        source: OperationSource,
        poll_interval: Optional[float] = None,
        max_poll_time: Optional[float] = None,
    ) -> None:
        """Initialize the poller.

        Args:
            source: Client used for status checks.
            poll_interval: Seconds between checks. Defaults to config.poll_interval.
            max_poll_time: Maximum seconds to wait; 0 waits forever.
                Defaults to config.max_poll_time.
        """
        self._source = source
        self._poll_interval = config.poll_interval if poll_interval is None else poll_interval
        self._max_poll_time = config.max_poll_time if max_poll_time is None else max_poll_time

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def wait(
        self,
        handle: OperationHandle,
        interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CompletedOperation:
        """Poll ``handle`` until it finishes.

        Args:
            handle: Operation returned by a video submission.
            interval: Seconds between checks, overriding the poller default.
            max_attempts: Maximum number of status checks.
            cancel_event: When set, polling stops. The remote job keeps running.

        Returns:
            The completed operation and its media reference.

        Raises:
            RemoteOperationError: The operation finished with an error.
            MissingMediaError: The operation finished without any media.
            OperationTimeoutError: The wait bound was exceeded.
            OperationCancelledError: ``cancel_event`` was set.
        """
        interval = self._poll_interval if interval is None else interval
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        polls = 0
        current = handle

        while not current.done:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(f"Polling of {handle.name} cancelled")

            if max_attempts is not None and polls >= max_attempts:
                raise OperationTimeoutError(
                    f"Operation {handle.name} not done after {polls} status checks"
                )

            elapsed = loop.time() - start_time
            if self._max_poll_time and elapsed > self._max_poll_time:
                logger.warning(f"Operation {handle.name} timed out after {elapsed:.1f}s")
                raise OperationTimeoutError(
                    f"Operation timed out after {self._max_poll_time}s"
                )

            polls += 1
            logger.debug(f"Polling operation (attempt {polls}): {handle.name}")
            current = await self._source.get_operation(current.name)

            # no sleep after the last allowed check
            if not current.done and (max_attempts is None or polls < max_attempts):
                await self._sleep(interval, cancel_event, handle.name)

        if current.error is not None:
            logger.error(f"Operation {current.name} failed: {current.error.message}")
            raise RemoteOperationError(
                f"failed to generate video: {current.error.message}",
                status_code=current.error.code,
            )

        media = current.find_media()
        if media is None:
            detail = f" ({'; '.join(current.filtered_reasons)})" if current.filtered_reasons else ""
            raise MissingMediaError(f"Failed to find the generated video{detail}")

        logger.info(f"Operation {current.name} completed after {polls} status check(s)")
        return CompletedOperation(name=current.name, media=media, polls=polls)

    async def _sleep(
        self, interval: float, cancel_event: Optional[asyncio.Event], name: str
    ) -> None:
        if cancel_event is None:
            await asyncio.sleep(interval)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return
        raise OperationCancelledError(f"Polling of {name} cancelled")


class MediaFetcher:
    """Downloads a generated asset and encodes it as a data URI.

    The credential travels in the ``x-goog-api-key`` header. The whole body
    is read into memory; there is no retry.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or config.request_timeout, follow_redirects=True
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, media: MediaRef, api_key: Optional[str] = None) -> EncodedAsset:
        """Download ``media`` and return it as an ``EncodedAsset``.

        Raises:
            ConfigurationError: If no API key is available.
            FetchError: On network failure, a non-200 status or an empty body.
        """
        api_key = api_key or self._api_key
        if not api_key:
            config.validate_gemini_required()
            api_key = config.gemini_api_key

        logger.info(f"Downloading generated media: {media.url.split('?')[0]}")
        try:
            response = await self._client.get(
                media.url, headers={"x-goog-api-key": api_key}, follow_redirects=True
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Failed to fetch video: {e}")

        if response.status_code != 200:
            raise FetchError(f"Failed to fetch video: HTTP {response.status_code}")
        if not response.content:
            raise FetchError("Failed to fetch video: empty body")

        mime_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not mime_type or mime_type == "application/octet-stream":
            mime_type = media.mime_type or DEFAULT_VIDEO_MIME

        asset = EncodedAsset.from_bytes(response.content, mime_type)
        logger.debug(f"Fetched {len(response.content)} bytes ({mime_type})")
        return asset
