"""Event filtering: decide which Ghost notifications trigger a deploy."""

from __future__ import annotations

from ghostrelay.config import DeployTarget, WorkflowTarget
from ghostrelay.models import DeployOutcome, WebhookNotification
from ghostrelay.triggers.base import DeployTrigger
from ghostrelay.utils.logging import get_logger

log = get_logger(__name__)

EVENT_HEADER = "X-Ghost-Event"

RECOGNIZED_EVENTS = frozenset({
    "post.published",
    "post.published.edited",
    "post.updated",
    "post.unpublished",
    "post.deleted",
})

# /webhook/<route> -> event label bound to that route
ROUTE_EVENTS: dict[str, str] = {
    "published": "post.published",
    "updated": "post.published.edited",
    "unpublished": "post.unpublished",
    "deleted": "post.deleted",
}


def event_for_route(route: str) -> str:
    """Map a route suffix to its event label.

    Unknown suffixes map to ``post.<suffix>`` and are dropped by the filter.
    """
    return ROUTE_EVENTS.get(route, f"post.{route}")


def is_recognized(event_type: str | None) -> bool:
    return event_type in RECOGNIZED_EVENTS


class Dispatcher:
    """Filters notifications and hands recognized ones to the deploy trigger."""

    def __init__(
        self, trigger: DeployTrigger, target: DeployTarget | WorkflowTarget
    ) -> None:
        self._trigger = trigger
        self._target = target

    async def dispatch(self, notification: WebhookNotification) -> DeployOutcome:
        log.info(
            "ghost_event_received",
            event_type=notification.event_type,
            payload=notification.payload,
        )

        if not is_recognized(notification.event_type):
            log.info("ghost_event_ignored", event_type=notification.event_type)
            return DeployOutcome.ignored()

        return await self._trigger.trigger(self._target)
