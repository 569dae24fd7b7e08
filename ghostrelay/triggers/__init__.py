"""Deploy trigger strategies."""

from __future__ import annotations

import httpx

from ghostrelay.triggers.base import DeployTrigger, TriggerError
from ghostrelay.triggers.github import WorkflowDispatchTrigger
from ghostrelay.triggers.railway import RedeployTrigger, ServiceDeployTrigger

__all__ = [
    "DeployTrigger",
    "TriggerError",
    "RedeployTrigger",
    "ServiceDeployTrigger",
    "WorkflowDispatchTrigger",
    "create_trigger",
]

_STRATEGIES: dict[str, type[DeployTrigger]] = {
    "redeploy": RedeployTrigger,
    "service": ServiceDeployTrigger,
    "workflow": WorkflowDispatchTrigger,
}


def create_trigger(strategy: str, client: httpx.AsyncClient, timeout: float = 15.0) -> DeployTrigger:
    """Factory to create the deploy trigger for the configured strategy."""
    try:
        trigger_cls = _STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown deploy strategy: {strategy!r}") from None
    return trigger_cls(client, timeout=timeout)
