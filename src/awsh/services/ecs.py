"""ECS commands: clusters, services and tasks."""

from __future__ import annotations

import logging
from typing import Any, Optional

from awsh.services.common import split_list
from awsh.shell.builtins import get_registry

logger = logging.getLogger(__name__)

registry = get_registry()


def _arn_table(session: Any, header: str, arns: list) -> str:
    return session.render_table([[header]] + [[arn] for arn in arns])


def _short_arn(arn: Optional[str]) -> str:
    """Last path segment of an ARN (``family:revision``, task ID), ``N/A`` for None."""
    if not arn:
        return "N/A"
    return arn.rsplit("/", 1)[-1]


@registry.register("ecs list-clusters", "List ECS clusters")
def list_clusters(session: Any) -> str:
    """Usage:
        ecs list-clusters
    """
    arns = session.client("ecs").list_clusters().get("clusterArns", [])
    if not arns:
        return "No clusters found"
    return _arn_table(session, "Cluster ARN", arns)


@registry.register("ecs describe-clusters", "Describe ECS clusters")
def describe_clusters(session: Any, clusters: Optional[str] = None) -> str:
    """Usage:
        ecs describe-clusters
        ecs describe-clusters --clusters $CLUSTER_NAME
    """
    params = {"clusters": split_list(clusters)} if clusters else {}
    response = session.client("ecs").describe_clusters(**params)

    found = response.get("clusters", [])
    if not found:
        return "No clusters found"

    rows = [["Cluster Name", "Status", "Running Tasks", "Pending Tasks",
             "Active Services", "Registered Instances"]]
    for cluster in found:
        rows.append([
            cluster["clusterName"],
            cluster.get("status", "-"),
            str(cluster.get("runningTasksCount", 0)),
            str(cluster.get("pendingTasksCount", 0)),
            str(cluster.get("activeServicesCount", 0)),
            str(cluster.get("registeredContainerInstancesCount", 0)),
        ])
    return session.render_table(rows)


@registry.register("ecs list-services", "List ECS services")
def list_services(session: Any, cluster: str) -> str:
    """Usage:
        ecs list-services --cluster $CLUSTER_NAME
    """
    arns = session.client("ecs").list_services(cluster=cluster).get("serviceArns", [])
    if not arns:
        return f"No services found in cluster: {cluster}"
    return _arn_table(session, "Service ARN", arns)


@registry.register("ecs describe-services", "Describe ECS services")
def describe_services(session: Any, cluster: str, services: str) -> str:
    """Usage:
        ecs describe-services --cluster $CLUSTER_NAME --services $SERVICE_NAME
    """
    names = split_list(services)
    response = session.client("ecs").describe_services(cluster=cluster, services=names)

    found = response.get("services", [])
    if not found:
        return "No services found"

    rows = [["Service Name", "Status", "Desired Count", "Running Count",
             "Pending Count", "Task Definition"]]
    for service in found:
        rows.append([
            service["serviceName"],
            service.get("status", "-"),
            str(service.get("desiredCount", 0)),
            str(service.get("runningCount", 0)),
            str(service.get("pendingCount", 0)),
            _short_arn(service.get("taskDefinition")),
        ])
    return session.render_table(rows)


@registry.register("ecs list-tasks", "List ECS tasks")
def list_tasks(session: Any, cluster: str, service_name: Optional[str] = None) -> str:
    """Usage:
        ecs list-tasks --cluster $CLUSTER_NAME
        ecs list-tasks --cluster $CLUSTER_NAME --service-name $SERVICE
    """
    params = {"cluster": cluster}
    if service_name:
        params["serviceName"] = service_name
    arns = session.client("ecs").list_tasks(**params).get("taskArns", [])
    if not arns:
        return f"No tasks found in cluster: {cluster}"
    return _arn_table(session, "Task ARN", arns)


@registry.register("ecs describe-tasks", "Describe ECS tasks")
def describe_tasks(session: Any, cluster: str, tasks: str) -> str:
    """Usage:
        ecs describe-tasks --cluster $CLUSTER_NAME --tasks $TASK_ID
    """
    ids = split_list(tasks)
    response = session.client("ecs").describe_tasks(cluster=cluster, tasks=ids)

    found = response.get("tasks", [])
    if not found:
        return "No tasks found"

    rows = [["Task ID", "Status", "Desired Status", "Task Definition", "Container Instance"]]
    for task in found:
        rows.append([
            _short_arn(task.get("taskArn")),
            task.get("lastStatus", "-"),
            task.get("desiredStatus", "-"),
            _short_arn(task.get("taskDefinitionArn")),
            _short_arn(task.get("containerInstanceArn")),
        ])
    return session.render_table(rows)
