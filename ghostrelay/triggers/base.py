"""Deploy trigger base class and outbound request handling."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol

import httpx

from ghostrelay.models import MESSAGE_FAILED, DeployOutcome, Diagnostic, FailureKind
from ghostrelay.utils.logging import get_logger
from ghostrelay.utils.sanitize import mask_secret, truncate_for_logging

log = get_logger(__name__)


class Target(Protocol):
    token: str

    def missing_fields(self) -> list[str]: ...


class TriggerError(Exception):
    """Raised inside a trigger to abort with a diagnostic."""

    def __init__(self, diagnostic: Diagnostic, message: str = MESSAGE_FAILED) -> None:
        super().__init__(diagnostic.error or diagnostic.kind.value)
        self.diagnostic = diagnostic
        self.message = message


class DeployTrigger(ABC):
    """Sends the outbound deploy request for one actionable webhook.

    Each call is independent: the target is validated first, and only a
    complete target leads to network I/O. Misconfiguration and every
    outbound failure come back as a ``DeployOutcome``, not an exception.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = 15.0) -> None:
        self._client = client
        self._timeout = httpx.Timeout(timeout)

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def _dispatch(self, target: Any) -> None:
        """Issue the platform request(s). Raise ``TriggerError`` on failure."""
        ...

    def missing_fields(self, target: Target) -> list[str]:
        return target.missing_fields()

    async def trigger(self, target: Target) -> DeployOutcome:
        missing = self.missing_fields(target)
        if missing:
            log.error("deploy_target_misconfigured", strategy=self.name, missing=missing)
            return DeployOutcome.misconfigured(missing)

        log.info(
            "deploy_trigger_started",
            strategy=self.name,
            token=mask_secret(target.token),
        )
        try:
            await self._dispatch(target)
        except TriggerError as exc:
            log.error(
                "deploy_trigger_failed",
                strategy=self.name,
                reason=exc.message,
                **exc.diagnostic.as_log_fields(),
            )
            return DeployOutcome.failed(exc.diagnostic, message=exc.message)

        log.info("deploy_trigger_succeeded", strategy=self.name)
        return DeployOutcome.triggered()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _post_json(
        self,
        url: str,
        token: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST a JSON body with bearer auth, classifying every failure."""
        try:
            request = self._client.build_request(
                "POST",
                url,
                json=body,
                headers={"Authorization": f"Bearer {token}", **(headers or {})},
                timeout=self._timeout,
            )
        except Exception as exc:
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.REQUEST_CONSTRUCTION_FAILED,
                    error=f"{type(exc).__name__}: {exc}",
                )
            ) from exc

        try:
            response = await self._client.send(request)
        except httpx.UnsupportedProtocol as exc:
            # Raised before any bytes leave the process
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.REQUEST_CONSTRUCTION_FAILED,
                    error=f"{type(exc).__name__}: {exc}",
                )
            ) from exc
        except httpx.RequestError as exc:
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.UPSTREAM_UNREACHABLE,
                    error=f"{type(exc).__name__}: {exc}",
                )
            ) from exc

        log.debug(
            "deploy_upstream_response",
            strategy=self.name,
            status=response.status_code,
            body=truncate_for_logging(response.text),
        )

        if not response.is_success:
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.UPSTREAM_REJECTED,
                    status=response.status_code,
                    body=truncate_for_logging(response.text),
                )
            )
        return response
