"""Shared fixtures: deploy targets and a recording mock of the deploy API."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from ghostrelay.config import DeployTarget, WorkflowTarget

TOKEN = "rw-secret-token-0123456789"


class ApiRecorder:
    """httpx mock transport that records every request it answers."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def bodies(self) -> list[Any]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def railway_responder(
    deployment_id: str | None = "dep-1",
) -> Callable[[httpx.Request], httpx.Response]:
    """Answer the latest-deployment query and the redeploy mutation."""

    def respond(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if "deploymentRedeploy" in body["query"]:
            return httpx.Response(
                200,
                json={"data": {"deploymentRedeploy": {"id": "dep-2", "status": "INITIALIZING"}}},
            )
        edges = []
        if deployment_id is not None:
            edges.append({"node": {"id": deployment_id, "status": "SUCCESS"}})
        return httpx.Response(
            200, json={"data": {"service": {"deployments": {"edges": edges}}}}
        )

    return respond


@pytest.fixture
def target():
    return DeployTarget(
        base_url="https://railway.test/graphql/v2",
        project_id="proj-1",
        service_id="svc-1",
        environment_id="env-1",
        token=TOKEN,
    )


@pytest.fixture
def workflow_target():
    return WorkflowTarget(
        api_url="https://api.github.test",
        token="gh-secret-token-0123456789",
        owner="acme",
        repo="blog-site",
        workflow="deploy.yml",
        ref="main",
    )
