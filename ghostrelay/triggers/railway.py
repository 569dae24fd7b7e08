"""Railway deploy triggers: GraphQL redeploy and REST deploy-by-service."""

from __future__ import annotations

from typing import Any

from ghostrelay.config import DeployTarget
from ghostrelay.models import MESSAGE_NO_DEPLOYMENT, Diagnostic, FailureKind
from ghostrelay.triggers.base import DeployTrigger, TriggerError
from ghostrelay.utils.logging import get_logger
from ghostrelay.utils.sanitize import truncate_for_logging

log = get_logger(__name__)


LATEST_DEPLOYMENT_QUERY = """
query ($serviceId: ID!, $environmentId: ID!) {
  service(id: $serviceId) {
    deployments(environmentId: $environmentId, first: 1) {
      edges {
        node {
          id
          status
        }
      }
    }
  }
}
"""

REDEPLOY_MUTATION = """
mutation ($deploymentId: String!) {
  deploymentRedeploy(id: $deploymentId) {
    id
    status
  }
}
"""


def extract_latest_deployment_id(data: Any) -> str | None:
    """Pull ``data.service.deployments.edges[0].node.id`` out of a query result."""
    try:
        edges = data["data"]["service"]["deployments"]["edges"]
        node_id = edges[0]["node"]["id"]
    except (KeyError, IndexError, TypeError):
        return None
    return node_id or None


def extract_redeployed_node(data: Any) -> dict[str, Any] | None:
    """Pull ``data.deploymentRedeploy`` out of a mutation result."""
    body = data.get("data") if isinstance(data, dict) else None
    node = body.get("deploymentRedeploy") if isinstance(body, dict) else None
    if not isinstance(node, dict) or not node.get("id"):
        return None
    return node


class RedeployTrigger(DeployTrigger):
    """Look up the newest deployment of the service, then redeploy it.

    The two GraphQL calls run strictly in sequence since the mutation needs
    the id returned by the query.
    """

    @property
    def name(self) -> str:
        return "redeploy"

    async def _dispatch(self, target: DeployTarget) -> None:
        result = await self._graphql(
            target,
            LATEST_DEPLOYMENT_QUERY,
            {"serviceId": target.service_id, "environmentId": target.environment_id},
        )
        deployment_id = extract_latest_deployment_id(result)
        if deployment_id is None:
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.NO_DEPLOYMENT,
                    body=truncate_for_logging(str(result)),
                ),
                message=MESSAGE_NO_DEPLOYMENT,
            )

        log.info("railway_latest_deployment", deployment_id=deployment_id)
        redeployed = await self._graphql(
            target, REDEPLOY_MUTATION, {"deploymentId": deployment_id}
        )
        node = extract_redeployed_node(redeployed)
        if node is None:
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.UPSTREAM_REJECTED,
                    body=truncate_for_logging(str(redeployed)),
                    error="redeploy response has no deployment",
                )
            )
        log.info(
            "railway_redeploy_triggered",
            deployment_id=node.get("id"),
            status=node.get("status"),
        )

    async def _graphql(
        self, target: DeployTarget, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        response = await self._post_json(
            target.base_url,
            target.token,
            {"query": query, "variables": variables},
        )
        try:
            result = response.json()
        except ValueError as exc:
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.UPSTREAM_REJECTED,
                    status=response.status_code,
                    body=truncate_for_logging(response.text),
                    error="response is not JSON",
                )
            ) from exc

        # GraphQL reports failures with a 200 and an errors array
        if not isinstance(result, dict) or result.get("errors"):
            raise TriggerError(
                Diagnostic(
                    kind=FailureKind.UPSTREAM_REJECTED,
                    status=response.status_code,
                    body=truncate_for_logging(response.text),
                )
            )
        return result


class ServiceDeployTrigger(DeployTrigger):
    """Ask Railway for a fresh deployment of the service in one REST call."""

    @property
    def name(self) -> str:
        return "service"

    def missing_fields(self, target: DeployTarget) -> list[str]:
        return target.missing_fields(url_field="rest_url")

    async def _dispatch(self, target: DeployTarget) -> None:
        base = target.rest_url.rstrip("/")
        url = f"{base}/projects/{target.project_id}/services/{target.service_id}/deploy"
        response = await self._post_json(
            url, target.token, {"environmentId": target.environment_id}
        )
        log.info("railway_service_deploy_triggered", status=response.status_code)
