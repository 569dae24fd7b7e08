"""Webhook HTTP server using aiohttp."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx
from aiohttp import web

from ghostrelay.config import Settings
from ghostrelay.dispatcher import EVENT_HEADER, Dispatcher, event_for_route
from ghostrelay.models import (
    MESSAGE_IGNORED,
    MESSAGE_MISCONFIGURED,
    MESSAGE_TRIGGERED,
    DeployOutcome,
    WebhookNotification,
)
from ghostrelay.triggers import DeployTrigger, create_trigger
from ghostrelay.utils.logging import get_logger, request_log_context

log = get_logger(__name__)

WELCOME_TEXT = "Welcome to the Webhook Server!"

_RESPONSE_TEXT = {
    MESSAGE_IGNORED: "Ignored event",
    MESSAGE_TRIGGERED: "Deployment triggered",
    MESSAGE_MISCONFIGURED: "Deploy target misconfigured",
}
_FAILURE_TEXT = "Failed to trigger deploy"


def outcome_response(outcome: DeployOutcome) -> web.Response:
    """Map an outcome to the caller-facing response; diagnostics stay in logs."""
    status = outcome.status_code or (200 if outcome.succeeded else 500)
    text = _RESPONSE_TEXT.get(outcome.message, _FAILURE_TEXT)
    return web.Response(status=status, text=text)


@web.middleware
async def error_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    with request_log_context(method=request.method, path=request.path):
        try:
            return await handler(request)
        except web.HTTPException:
            raise
        except Exception:
            log.exception("webhook_handler_error")
            return web.Response(status=500, text="Internal Server Error")


class RelayServer:
    """Receives Ghost webhooks and relays recognized events to the deploy API."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        trigger: DeployTrigger | None = None,
    ) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)
        self._trigger = trigger or create_trigger(
            settings.strategy, self._client, timeout=settings.timeout
        )
        self._target = settings.deploy_target()
        self.dispatcher = Dispatcher(self._trigger, self._target)
        self._runner: web.AppRunner | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        missing = self._trigger.missing_fields(self._target)
        if missing:
            log.warning(
                "deploy_target_incomplete",
                strategy=self._settings.strategy,
                missing=missing,
                msg="Recognized events will fail until the target is configured.",
            )
        app = self._build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        server = self._settings.server
        site = web.TCPSite(self._runner, server.bind, server.port)
        await site.start()
        log.info(
            "relay_server_started",
            bind=server.bind,
            port=server.port,
            strategy=self._settings.strategy,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        if self._owns_client:
            await self._client.aclose()
        log.info("relay_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def _build_app(self) -> web.Application:
        app = web.Application(middlewares=[error_middleware])
        app.router.add_get("/", self._handle_index)
        app.router.add_post("/webhook", self._handle_header_webhook)
        app.router.add_post("/webhook/{event}", self._handle_route_webhook)
        return app

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def _handle_index(self, request: web.Request) -> web.Response:
        return web.Response(text=WELCOME_TEXT)

    async def _handle_route_webhook(self, request: web.Request) -> web.Response:
        event_type = event_for_route(request.match_info["event"])
        return await self._relay(request, event_type)

    async def _handle_header_webhook(self, request: web.Request) -> web.Response:
        return await self._relay(request, request.headers.get(EVENT_HEADER, ""))

    async def _relay(self, request: web.Request, event_type: str) -> web.Response:
        payload: Any = {}
        if request.can_read_body:
            body = await request.read()
            if request.content_type == "application/x-www-form-urlencoded":
                payload = dict(await request.post())
            elif body.strip():
                try:
                    payload = await request.json()
                except ValueError:
                    return web.Response(status=400, text="Invalid JSON")

        notification = WebhookNotification(
            event_type=event_type,
            headers=dict(request.headers),
            payload=payload,
        )
        outcome = await self.dispatcher.dispatch(notification)

        log.info(
            "webhook_relayed",
            event_type=event_type,
            succeeded=outcome.succeeded,
            status=outcome.status_code,
            result=outcome.message,
        )
        return outcome_response(outcome)
