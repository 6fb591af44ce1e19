"""HTTP call execution for the Tenable API.

The Tenable.io API answers internal faults with misleading status codes
(404 for a scan that failed to create on their side, spurious 403s, 500s
when an undocumented request limit is hit), so every non-2xx response is
retried with exponential backoff. 429 responses honor the ``retry-after``
header. Transport failures are never retried.
"""

import asyncio
import json
import time
from collections.abc import AsyncGenerator, Awaitable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from tenacious.utils.backoff import Backoff

if TYPE_CHECKING:
    from tenacious.auth import AuthProvider
    from tenacious.config import RetrySettings

T = TypeVar("T")


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConstructionError(HTTPClientError):
    """The request could not be built (bad URL, unserializable body)."""


class TransportError(HTTPClientError):
    """No HTTP response was obtained."""


class RetryableHTTPError(HTTPClientError):
    """HTTP error that can be retried."""

    def __init__(self, message: str, status_code: int | None = None, body: bytes = b""):
        super().__init__(message, status_code)
        self.body = body


class RateLimitedError(RetryableHTTPError):
    """The server answered 429."""

    def __init__(self, message: str, retry_after: int | None = None, body: bytes = b""):
        super().__init__(message, 429, body)
        self.retry_after = retry_after


class RetryableServerFault(RetryableHTTPError):
    """Any other status of 300 or above."""


class RetryLimitExceeded(HTTPClientError):
    """Every attempt failed."""

    def __init__(self, attempts: int, status_code: int | None = None, body: bytes = b""):
        super().__init__(
            f"Retry limit exceeded after {attempts} attempts (last status {status_code})",
            status_code,
        )
        self.attempts = attempts
        self.body = body


class DecodeError(HTTPClientError):
    """A successful response body did not match the expected shape."""


class CanceledError(HTTPClientError):
    """The call was canceled or ran past its deadline."""


class PreparedRequest(BaseModel):
    """Immutable request description replayed on every attempt."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    body: bytes | None = None
    headers: dict[str, str] = {}

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        payload: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> "PreparedRequest":
        """Validate inputs and capture the JSON body as bytes.

        Args:
            method: HTTP method.
            url: Absolute target URL.
            payload: JSON-serializable body, or None for no body.
            params: Query parameters appended to the URL.
            headers: Application headers (auth headers are added per attempt).

        Returns:
            PreparedRequest instance.

        Raises:
            ConstructionError: If the URL is malformed or the payload is not serializable.
        """
        try:
            parsed = httpx.URL(url, params=params) if params else httpx.URL(url)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise ConstructionError(f"Unable to create request object: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConstructionError(f"Unable to create request object: invalid URL {url!r}")

        request_headers = dict(headers or {})
        body = None
        if payload is not None:
            try:
                body = json.dumps(payload, separators=(",", ":")).encode()
            except (TypeError, ValueError) as e:
                raise ConstructionError(f"Unable to marshal request body: {e}") from e
            request_headers.setdefault("Content-Type", "application/json")

        return cls(method=method.upper(), url=str(parsed), body=body, headers=request_headers)

    def with_body(self, body: bytes) -> "PreparedRequest":
        """Return a copy carrying a different body."""
        return self.model_copy(update={"body": body})


@dataclass(frozen=True)
class Success:
    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RateLimited:
    retry_after: int | None
    body: bytes = b""


@dataclass(frozen=True)
class RetryableFailure:
    status: int
    body: bytes


@dataclass(frozen=True)
class TransportFailure:
    cause: Exception


Outcome = Success | RateLimited | RetryableFailure | TransportFailure


def parse_retry_after(value: str | None) -> int | None:
    """Parse a ``retry-after`` header holding a decimal count of seconds."""
    if value is None or value == "":
        return None
    try:
        seconds = int(value.strip())
        float(seconds)
    except (ValueError, OverflowError):
        logger.warning(f'Error when parsing "retry-after" header: {value[:40]!r}')
        return None
    return seconds if seconds >= 0 else None


def classify_response(status: int, headers: Mapping[str, str], body: bytes) -> Outcome:
    """Classify one attempt's response.

    Args:
        status: HTTP status code.
        headers: Response headers.
        body: Response body bytes.

    Returns:
        Success below 300, RateLimited for 429, RetryableFailure otherwise.
    """
    if status < 300:
        return Success(status, body, headers)
    if status == 429:
        return RateLimited(parse_retry_after(headers.get("retry-after")), body)
    return RetryableFailure(status, body)


class CallContext:
    """Cancellation signal and optional deadline shared by one logical call.

    Both the network exchange and every wait between attempts are guarded,
    so calling :meth:`cancel` or reaching the deadline aborts promptly with
    :class:`CanceledError`.
    """

    def __init__(self, timeout: float | None = None):
        """Initialize call context.

        Args:
            timeout: Seconds from now until the call is abandoned, or None.
        """
        self._event = asyncio.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Signal cancellation to the call using this context."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise CanceledError if the call should stop."""
        if self._event.is_set():
            raise CanceledError("Call canceled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise CanceledError("Call deadline exceeded")

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the context fires first.

        Raises:
            CanceledError: If canceled or past the deadline before completion.
        """
        try:
            self.check()
        except CanceledError:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task.cancelled():
            if self._event.is_set():
                raise CanceledError("Call canceled")
            raise CanceledError("Call deadline exceeded")
        return task.result()

    async def sleep(self, seconds: float) -> None:
        """Wait between attempts; cancelable."""
        await self.guard(asyncio.sleep(seconds))


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 10
    min_backoff: float = 0.1
    max_backoff: float = 60.0
    factor: float = 1.5
    jitter: bool = True

    @classmethod
    def from_settings(cls, settings: "RetrySettings") -> "RetryPolicy":
        return cls(
            max_attempts=settings.max_attempts,
            min_backoff=settings.min_backoff,
            max_backoff=settings.max_backoff,
            factor=settings.factor,
            jitter=settings.jitter,
        )

    def new_backoff(self) -> Backoff:
        return Backoff(self.min_backoff, self.max_backoff, self.factor, self.jitter)


@asynccontextmanager
async def create_http_client(
    timeout: int = 30,
    **kwargs: Any,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an async HTTP client with sensible defaults.

    Args:
        timeout: Request timeout in seconds.
        **kwargs: Additional arguments passed to httpx.AsyncClient.

    Yields:
        Configured httpx.AsyncClient instance.
    """
    # Remove timeout from kwargs if accidentally passed there too
    kwargs.pop("timeout", None)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        **kwargs,
    ) as client:
        yield client


class RequestExecutor:
    """Sends prepared requests, retrying until success or the attempt limit.

    The executor holds no per-call state; one instance can serve concurrent
    calls as long as the underlying ``httpx.AsyncClient`` is shared safely.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth: "AuthProvider",
        policy: RetryPolicy | None = None,
    ):
        """Initialize request executor.

        Args:
            client: HTTP transport.
            auth: Provider injecting auth headers before every send.
            policy: Retry limits and backoff shape.
        """
        self.client = client
        self.auth = auth
        self.policy = policy or RetryPolicy()

    async def execute(
        self,
        request: PreparedRequest,
        decode_into: Any = None,
        *,
        ctx: CallContext | None = None,
    ) -> Any:
        """Execute a request with retries and decode the response.

        Args:
            request: Request to send; its body is replayed on every attempt.
            decode_into: Type to validate the JSON body against, or None to skip decoding.
            ctx: Cancellation and deadline for this call.

        Returns:
            The decoded body, or None when no decode target was given.

        Raises:
            TransportError: On a connection-level failure (not retried).
            RetryLimitExceeded: When every attempt returned a status of 300 or above.
            DecodeError: When a successful body does not match ``decode_into``.
            CanceledError: When ``ctx`` is canceled or its deadline passes.
        """
        ctx = ctx or CallContext()
        backoff = self.policy.new_backoff()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=self._wait_strategy(backoff),
            retry=retry_if_exception_type(RetryableHTTPError),
            sleep=ctx.sleep,
            before_sleep=self._log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    outcome = await self._attempt(request, ctx)
        except RetryError as e:
            last = e.last_attempt.exception()
            raise RetryLimitExceeded(
                e.last_attempt.attempt_number,
                getattr(last, "status_code", None),
                getattr(last, "body", b""),
            ) from last

        if decode_into is None:
            return None
        return self._decode(outcome, decode_into)

    async def _attempt(self, request: PreparedRequest, ctx: CallContext) -> Success:
        """Send once and classify the result, raising on anything but success."""
        http_request = self.client.build_request(
            request.method,
            request.url,
            content=request.body,
            headers=request.headers,
        )
        self.auth.add_auth_headers(http_request)

        outcome = await ctx.guard(self._exchange(http_request))
        if isinstance(outcome, Success):
            return outcome
        if isinstance(outcome, TransportFailure):
            logger.error(f"Failed call to {request.url}: {outcome.cause!r}")
            raise TransportError(f"Failed call: {outcome.cause}") from outcome.cause

        status = 429 if isinstance(outcome, RateLimited) else outcome.status
        logger.warning(f"Request URL: {request.url}")
        logger.warning(f"Request body: {(request.body or b'').decode(errors='replace')}")
        logger.warning(f"Response status code: {status}")
        logger.warning(f"Response body: {outcome.body.decode(errors='replace')}")

        if isinstance(outcome, RateLimited):
            raise RateLimitedError("Rate limit exceeded", outcome.retry_after, outcome.body)
        raise RetryableServerFault(f"Unexpected status code: {status}", status, outcome.body)

    async def _exchange(self, request: httpx.Request) -> Outcome:
        """Send once and classify; transport errors become TransportFailure."""
        try:
            response = await self.client.send(request, stream=True)
        except httpx.RequestError as e:
            return TransportFailure(e)
        try:
            body = await response.aread()
        except httpx.RequestError as e:
            return TransportFailure(e)
        finally:
            await response.aclose()
        return classify_response(response.status_code, response.headers, body)

    @staticmethod
    def _wait_strategy(backoff: Backoff) -> Any:
        def wait(retry_state: RetryCallState) -> float:
            delay = backoff.duration()
            error = retry_state.outcome.exception() if retry_state.outcome else None
            if isinstance(error, RateLimitedError) and error.retry_after is not None:
                return float(error.retry_after)
            return delay

        return wait

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(error, RateLimitedError):
            logger.warning(f"Rate limit exceeded, trying again in {wait:.2f}s")
        else:
            logger.warning(
                f"Unexpected status code: {getattr(error, 'status_code', None)}, "
                f"trying again in {wait:.2f}s (attempt {retry_state.attempt_number})"
            )

    @staticmethod
    def _decode(outcome: Success, decode_into: Any) -> Any:
        try:
            return TypeAdapter(decode_into).validate_json(outcome.body)
        except ValidationError as e:
            raise DecodeError(f"Failed to read the response: {e}", outcome.status) from e
