"""GitHub Actions workflow_dispatch trigger."""

from __future__ import annotations

from urllib.parse import quote

from ghostrelay.config import WorkflowTarget
from ghostrelay.triggers.base import DeployTrigger
from ghostrelay.utils.logging import get_logger

log = get_logger(__name__)

GITHUB_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


def workflow_dispatch_url(target: WorkflowTarget) -> str:
    base = target.api_url.rstrip("/")
    return (
        f"{base}/repos/{quote(target.owner, safe='')}/{quote(target.repo, safe='')}"
        f"/actions/workflows/{quote(target.workflow, safe='')}/dispatches"
    )


class WorkflowDispatchTrigger(DeployTrigger):
    """Run a CI workflow against a branch; GitHub answers 204 on success."""

    @property
    def name(self) -> str:
        return "workflow"

    async def _dispatch(self, target: WorkflowTarget) -> None:
        response = await self._post_json(
            workflow_dispatch_url(target),
            target.token,
            {"ref": target.ref},
            headers=GITHUB_HEADERS,
        )
        log.info(
            "workflow_dispatch_triggered",
            repo=f"{target.owner}/{target.repo}",
            workflow=target.workflow,
            ref=target.ref,
            status=response.status_code,
        )
