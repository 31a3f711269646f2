"""HTTP gateway to the memestorage backend.

Every call is a single attempt with a bounded timeout. Expected outcomes are
returned as values rather than raised:

  - HTTP 404 on a user-scoped endpoint means the Telegram account is not
    linked to a memestorage account -> ``UserNotConnected``.
  - Connection errors and timeouts -> ``TransportError``.
  - Any other unusable status -> ``UnexpectedStatus``.

Searches degrade every failure except ``UserNotConnected`` to an empty result
and send the diagnostics to the admin chat, so a flaky backend never breaks a
user-facing flow.
"""
import json
import logging
import time

import httpx

from memebot.constants import (
    PATH_ADD_MEME,
    PATH_PERSONAL_SEARCH,
    PATH_PUBLIC_SEARCH,
    PATH_USER_CHECK,
)
from memebot.metrics import BACKEND_ERRORS, BACKEND_LATENCY
from memebot.models import (
    BackendFailure,
    MemeRecord,
    TransportError,
    UnexpectedStatus,
    UserNotConnected,
)
from memebot.services.admin_channel import AdminChannel

logger = logging.getLogger(__name__)

_DEFAULT_NOT_CONNECTED = "User is not connected"


def _not_connected(response: httpx.Response) -> UserNotConnected:
    """Build a UserNotConnected from a 404 body ({"message": ...})."""
    try:
        message = response.json().get("message")
    except (ValueError, AttributeError):
        message = None
    return UserNotConnected(message=message or _DEFAULT_NOT_CONNECTED)


def _describe_response(response: httpx.Response) -> str:
    """Full diagnostics for the admin chat."""
    try:
        elapsed = f"{response.elapsed.total_seconds():.3f}s"
    except RuntimeError:
        elapsed = "n/a"
    return json.dumps(
        {
            "method": response.request.method,
            "url": str(response.request.url),
            "http_code": response.status_code,
            "content_type": response.headers.get("content-type"),
            "total_time": elapsed,
            "body": response.text[:1000],
        },
        ensure_ascii=False,
    )


class BackendGateway:
    """Typed wrapper around the memestorage HTTP API."""

    def __init__(self, client: httpx.AsyncClient, admin: AdminChannel):
        """
        Args:
            client: httpx client with ``base_url`` and timeout already set.
            admin: Admin channel for failure diagnostics.
        """
        self.client = client
        self.admin = admin

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response | TransportError:
        start_time = time.monotonic()
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            return TransportError(detail=f"{method} {path} timed out: {e!r}")
        except httpx.HTTPError as e:
            return TransportError(detail=f"{method} {path} failed: {e!r}")
        finally:
            BACKEND_LATENCY.labels(endpoint=path).observe(time.monotonic() - start_time)

    async def _report(self, path: str, failure: BackendFailure) -> None:
        """Count a failure and send it to the admin chat."""
        match failure:
            case TransportError(detail=detail):
                BACKEND_ERRORS.labels(endpoint=path, type="transport").inc()
                logger.warning(f"Backend transport error on {path}: {detail}")
                await self.admin.notify(detail)
            case UnexpectedStatus(code=code, body=body):
                error_type = "bad_body" if 200 <= code < 300 else "unexpected_status"
                BACKEND_ERRORS.labels(endpoint=path, type=error_type).inc()
                logger.warning(f"Backend returned {code} on {path}")
                await self.admin.notify(body)
            case UserNotConnected():
                BACKEND_ERRORS.labels(endpoint=path, type="not_connected").inc()

    async def _get(self, path: str, query: dict) -> httpx.Response | BackendFailure:
        """GET ``path``; returns the response only for 2xx with a JSON body."""
        response = await self._request("GET", path, params=query)
        if isinstance(response, TransportError):
            return response
        if response.status_code == 404:
            return _not_connected(response)
        if not response.is_success or not response.content:
            return UnexpectedStatus(code=response.status_code, body=_describe_response(response))
        try:
            response.json()
        except ValueError:
            return UnexpectedStatus(code=response.status_code, body=_describe_response(response))
        return response

    async def _search(self, path: str, telegram_id, description: str) -> list[MemeRecord] | UserNotConnected:
        query = {"telegram_id": str(telegram_id), "description": description}
        result = await self._get(path, query)
        if isinstance(result, UserNotConnected):
            await self._report(path, result)
            return result
        if not isinstance(result, httpx.Response):
            await self._report(path, result)
            return []

        payload = result.json()
        raw_memes = payload.get("memes") if isinstance(payload, dict) else None
        if not raw_memes or not isinstance(raw_memes, list):
            return []
        memes = [MemeRecord.from_payload(item) for item in raw_memes]
        return [meme for meme in memes if meme is not None]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def search_personal(self, telegram_id, description: str) -> list[MemeRecord] | UserNotConnected:
        """Search the user's own storage.

        Returns ``UserNotConnected`` on 404; the caller decides whether that
        matters. Other failures are reported to admin and yield ``[]``.
        """
        return await self._search(PATH_PERSONAL_SEARCH, telegram_id, description)

    async def search_public(self, telegram_id, description: str) -> list[MemeRecord]:
        """Search the public storage. Every failure yields ``[]``."""
        result = await self._search(PATH_PUBLIC_SEARCH, telegram_id, description)
        if isinstance(result, UserNotConnected):
            # Public search has no notion of a linked account.
            await self.admin.notify(
                f"Unexpected 404 from {PATH_PUBLIC_SEARCH}: {result.message}"
            )
            return []
        return result

    async def register_user_check(self, telegram_id) -> UserNotConnected | None:
        """Return ``UserNotConnected`` if the account is not linked, else None."""
        result = await self._get(PATH_USER_CHECK, {"telegram_id": str(telegram_id)})
        if isinstance(result, httpx.Response):
            return None
        await self._report(PATH_USER_CHECK, result)
        if isinstance(result, UserNotConnected):
            return result
        return None

    async def add_meme(
        self,
        telegram_id,
        description: str,
        image_url: str,
        tags: list[str],
        image_name: str,
    ) -> int | BackendFailure:
        """Upload a meme. Returns the HTTP status code or a failure.

        Any status other than 200 is reported to admin with full diagnostics.
        """
        body = {
            "telegram_id": str(telegram_id),
            "description": description,
            "image_url": image_url,
            "tags": tags,
            "image_name": image_name,
        }
        response = await self._request(
            "POST",
            PATH_ADD_MEME,
            json=body,
            headers={"Content-Type": "application/json"},
        )
        if isinstance(response, TransportError):
            await self._report(PATH_ADD_MEME, response)
            return response

        if response.status_code != 200:
            BACKEND_ERRORS.labels(
                endpoint=PATH_ADD_MEME,
                type="not_connected" if response.status_code == 404 else "unexpected_status",
            ).inc()
            await self.admin.notify(_describe_response(response))
        if response.status_code == 404:
            return _not_connected(response)

        logger.info(f"Meme upload for {telegram_id} finished with {response.status_code}")
        return response.status_code
