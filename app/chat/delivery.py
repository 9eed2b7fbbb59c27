"""
Client-side message delivery over the REST API.

The server has no push channel. Clients learn about new messages by
polling GET /api/v1/messages/?conversationId= and replacing their local
list with the server's. This module is that client, built on
httpx.AsyncClient and asyncio.

Key Components:
    ChatClient: Thin async wrapper over the chat endpoints
    ChatClientError: Non-2xx or malformed response from the API
    ConversationPoller: Adaptive polling loop with optimistic sends
    DeliveryState: Lifecycle of a poller

Polling:
    - The first fetch happens immediately on start()
    - The interval starts at 2s. After each fetch it grows by 1s (up to
      10s) while the conversation is empty, and drops back to 2s once it
      has messages.
    - One fetch at a time. A send schedules an extra fetch shortly after
      it completes.
    - A failed fetch sets `error` and keeps the previous list

Optimistic sends:
    send() appends a local copy at once, tagged with a fresh clientKey.
    The server stores the key and echoes it back, so the local copy is
    matched to the stored message by key rather than by position. Once
    the POST returns, the stored copy stays at the end of the list until a
    fetch includes it.

Usage:
    async with ChatClient("http://localhost:8000", token) as client:
        async with ConversationPoller(client, conversation_id) as poller:
            await poller.send("hi")
            print([m["content"] for m in poller.messages])
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
import uuid
from typing import TYPE_CHECKING, Any

import httpx

from chat.constants import DELIVERY_CONFIG

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/"

# error_code for a 2xx response whose body is not the expected envelope
MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class ChatClientError(Exception):
    """The API answered with a non-2xx status or an unusable body."""

    def __init__(self, status_code: int, error: str, error_code: str | None = None):
        self.status_code = status_code
        self.error = error
        self.error_code = error_code
        if error_code:
            super().__init__(f"{status_code} [{error_code}] {error}")
        else:
            super().__init__(f"{status_code} {error}")


class ChatClient:
    """
    Async client for the chat REST API.

    Args:
        base_url: Server root, e.g. "http://localhost:8000"
        token: JWT access token, sent as a Bearer header
        transport: Optional httpx transport (httpx.MockTransport in tests)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DELIVERY_CONFIG.REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> ChatClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self, method: str, path: str, envelope: str, kind: type, **kwargs
    ) -> Any:
        """Issue a request and return the payload under `envelope`."""
        response = await self._http.request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            if not isinstance(body, dict):
                body = {}
            raise ChatClientError(
                response.status_code,
                body.get("error") or body.get("detail") or response.reason_phrase,
                body.get("error_code"),
            )

        # A 2xx body must carry the expected envelope
        if not isinstance(body, dict) or not isinstance(body.get(envelope), kind):
            raise ChatClientError(
                response.status_code,
                f"Unexpected response body, no {envelope!r} {kind.__name__}",
                MALFORMED_RESPONSE,
            )
        return body[envelope]

    async def list_users(self) -> list[dict]:
        return await self._request("GET", "users/", "users", list)

    async def list_conversations(self) -> list[dict]:
        return await self._request("GET", "conversations/", "conversations", list)

    async def open_conversation(self, other_user_id: int) -> dict:
        return await self._request(
            "POST",
            "conversations/",
            "conversation",
            dict,
            json={"otherUserId": other_user_id},
        )

    async def list_messages(self, conversation_id: int) -> list[dict]:
        return await self._request(
            "GET",
            "messages/",
            "messages",
            list,
            params={"conversationId": conversation_id},
        )

    async def send_message(
        self,
        conversation_id: int,
        content: str,
        client_key: str | None = None,
    ) -> dict:
        payload: dict[str, Any] = {"conversationId": conversation_id, "content": content}
        if client_key is not None:
            payload["clientKey"] = client_key
        return await self._request("POST", "messages/", "message", dict, json=payload)


class DeliveryState(str, enum.Enum):
    IDLE = "idle"
    POLLING = "polling"
    SENDING = "sending"
    STOPPED = "stopped"


class ConversationPoller:
    """
    Keeps a local copy of one conversation's messages in sync with the server.

    Attributes:
        messages: Server messages in order, followed by local sends that no
            server list has included yet
        error: Readable description of the last failure, None after a
            successful fetch
        interval: Seconds until the next scheduled fetch
        state: Current DeliveryState

    on_update, if given, is awaited with the new message list after every
    change.
    """

    def __init__(
        self,
        client: ChatClient,
        conversation_id: int,
        on_update: Callable[[list[dict]], Awaitable[None]] | None = None,
        *,
        base_interval: float = DELIVERY_CONFIG.BASE_INTERVAL_SECONDS,
        interval_step: float = DELIVERY_CONFIG.INTERVAL_STEP_SECONDS,
        max_interval: float = DELIVERY_CONFIG.MAX_INTERVAL_SECONDS,
        reconcile_delay: float = DELIVERY_CONFIG.RECONCILE_DELAY_SECONDS,
    ) -> None:
        self.client = client
        self.conversation_id = conversation_id
        self.on_update = on_update
        self.base_interval = base_interval
        self.interval_step = interval_step
        self.max_interval = max_interval
        self.reconcile_delay = reconcile_delay

        self.messages: list[dict] = []
        self.error: str | None = None
        self.interval = base_interval
        self.state = DeliveryState.IDLE

        self._pending: list[dict] = []
        self._alive = False
        self._fetch_lock = asyncio.Lock()
        self._timer: asyncio.Task | None = None
        self._reconcile: asyncio.Task | None = None

    async def __aenter__(self) -> ConversationPoller:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Fetch once, then keep polling in a background task."""
        if self._alive:
            return
        self._alive = True
        self.state = DeliveryState.POLLING
        self.interval = self.base_interval

        await self.fetch()
        self._timer = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop polling. No request is issued after this returns."""
        self._alive = False
        self.state = DeliveryState.STOPPED

        for task in (self._timer, self._reconcile):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._timer = None
        self._reconcile = None

    async def _poll_loop(self) -> None:
        while self._alive:
            await asyncio.sleep(self.interval)
            if not self._alive:
                return
            await self.fetch()
            self._adapt_interval()

    def _adapt_interval(self) -> None:
        if self.messages:
            self.interval = self.base_interval
        else:
            self.interval = min(self.interval + self.interval_step, self.max_interval)

    # =========================================================================
    # Fetching
    # =========================================================================

    async def fetch(self) -> bool:
        """
        Replace the local list with the server's.

        Returns False when the request failed; the previous list is kept.
        """
        async with self._fetch_lock:
            if not self._alive:
                return False
            try:
                server_messages = await self.client.list_messages(self.conversation_id)
            except (httpx.HTTPError, ChatClientError) as exc:
                self.error = f"Failed to fetch messages: {exc}"
                logger.warning(
                    f"Fetch failed for conversation {self.conversation_id}: {exc}"
                )
                return False

            if not self._alive:
                return False
            self.error = None
            self._apply(server_messages)

        await self._notify()
        return True

    def _apply(self, server_messages: list[dict]) -> None:
        merged: list[dict] = []
        seen_ids: set = set()
        seen_keys: set = set()
        for message in server_messages:
            key = message.get("clientKey")
            if message["id"] in seen_ids or (key and key in seen_keys):
                continue
            seen_ids.add(message["id"])
            if key:
                seen_keys.add(key)
            merged.append(message)

        # Local entries stay until a server list contains them
        self._pending = [
            message
            for message in self._pending
            if message.get("clientKey") not in seen_keys
            and (message.get("id") is None or message["id"] not in seen_ids)
        ]
        self.messages = merged + self._pending

    async def _notify(self) -> None:
        if self.on_update is not None:
            await self.on_update(list(self.messages))

    def _schedule_reconcile(self) -> None:
        if self._reconcile is not None and not self._reconcile.done():
            self._reconcile.cancel()
        self._reconcile = asyncio.create_task(self._delayed_fetch())

    async def _delayed_fetch(self) -> None:
        await asyncio.sleep(self.reconcile_delay)
        if self._alive:
            await self.fetch()

    # =========================================================================
    # Sending
    # =========================================================================

    async def send(self, content: str) -> dict | None:
        """
        Send a message with an optimistic local copy.

        Blank content is ignored and returns None. On failure the local
        copy is removed, `error` is set and the exception propagates.
        """
        if not content or not content.strip():
            return None

        client_key = str(uuid.uuid4())
        optimistic = {
            "id": None,
            "conversationId": self.conversation_id,
            "content": content,
            "clientKey": client_key,
            "createdAt": None,
            "pending": True,
        }
        self._pending.append(optimistic)
        self.messages = self.messages + [optimistic]
        previous_state = self.state
        self.state = DeliveryState.SENDING
        await self._notify()

        try:
            stored = await self.client.send_message(
                self.conversation_id, content, client_key=client_key
            )
        except (httpx.HTTPError, ChatClientError) as exc:
            self._pending = [m for m in self._pending if m is not optimistic]
            self.messages = [m for m in self.messages if m is not optimistic]
            self.error = f"Failed to send message: {exc}"
            self._settle(previous_state)
            logger.warning(
                f"Send failed for conversation {self.conversation_id}: {exc}"
            )
            await self._notify()
            raise

        # A fetch issued before the POST may still land without this message,
        # so the stored copy stays pending until a server list includes it.
        already_listed = any(
            m is not optimistic and m.get("id") == stored.get("id")
            for m in self.messages
        )
        self._pending = [
            stored if m is optimistic else m
            for m in self._pending
            if not (already_listed and m is optimistic)
        ]
        self.messages = [
            stored if m is optimistic else m
            for m in self.messages
            if not (already_listed and m is optimistic)
        ]
        self.error = None

        self._settle(previous_state)
        if self._alive:
            self._schedule_reconcile()
        await self._notify()
        return stored

    def _settle(self, previous_state: DeliveryState) -> None:
        # stop() may have run while the request was in flight
        if self._alive:
            self.state = DeliveryState.POLLING
        elif self.state == DeliveryState.SENDING:
            self.state = previous_state
