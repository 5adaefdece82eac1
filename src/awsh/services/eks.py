"""EKS commands: clusters and node groups."""

from __future__ import annotations

import logging
from typing import Any

from awsh.lib.formatting import format_timestamp
from awsh.services.common import or_dash
from awsh.shell.builtins import get_registry

logger = logging.getLogger(__name__)

registry = get_registry()


@registry.register("eks list-clusters", "List EKS clusters")
def list_clusters(session: Any) -> str:
    """Usage:
        eks list-clusters
    """
    names = session.client("eks").list_clusters().get("clusters", [])
    if not names:
        return "No clusters found"
    return session.render_table([["Cluster Name"]] + [[name] for name in names])


@registry.register("eks describe-cluster", "Describe EKS cluster")
def describe_cluster(session: Any, name: str) -> str:
    """Usage:
        eks describe-cluster --name $CLUSTER_NAME
    """
    cluster = session.client("eks").describe_cluster(name=name)["cluster"]

    pairs = [
        ["Name", cluster["name"]],
        ["ARN", cluster.get("arn", "-")],
        ["Status", cluster.get("status", "-")],
        ["Version", cluster.get("version", "-")],
        ["Endpoint", cluster.get("endpoint") or "N/A"],
        ["Role ARN", cluster.get("roleArn", "-")],
        ["Platform Version", cluster.get("platformVersion", "-")],
    ]
    if cluster.get("createdAt"):
        pairs.append(["Created At", format_timestamp(cluster["createdAt"])])

    vpc_config = cluster.get("resourcesVpcConfig")
    if session.config.output == "json" or not vpc_config:
        return session.render_pairs(pairs)

    vpc_pairs = [
        ["VPC ID", or_dash(vpc_config.get("vpcId"))],
        ["Subnet IDs", ", ".join(vpc_config.get("subnetIds", []))],
        ["Security Group IDs", ", ".join(vpc_config.get("securityGroupIds", []))],
        ["Endpoint Public Access", str(vpc_config.get("endpointPublicAccess", False)).lower()],
        ["Endpoint Private Access", str(vpc_config.get("endpointPrivateAccess", False)).lower()],
    ]
    return (
        session.render_pairs(pairs)
        + "\nVPC Configuration:\n"
        + session.render_pairs(vpc_pairs)
    )


@registry.register("eks list-nodegroups", "List EKS node groups")
def list_nodegroups(session: Any, cluster_name: str) -> str:
    """Usage:
        eks list-nodegroups --cluster-name $CLUSTER_NAME
    """
    names = session.client("eks").list_nodegroups(clusterName=cluster_name).get("nodegroups", [])
    if not names:
        return f"No node groups found in cluster: {cluster_name}"
    return session.render_table([["Node Group Name"]] + [[name] for name in names])


@registry.register("eks describe-nodegroup", "Describe EKS node group")
def describe_nodegroup(session: Any, cluster_name: str, nodegroup_name: str) -> str:
    """Show a node group with its scaling configuration.

    Usage:
        eks describe-nodegroup --cluster-name $CLUSTER_NAME --nodegroup-name $NODEGROUP_NAME
    """
    nodegroup = session.client("eks").describe_nodegroup(
        clusterName=cluster_name,
        nodegroupName=nodegroup_name,
    )["nodegroup"]

    pairs = [
        ["Nodegroup Name", nodegroup["nodegroupName"]],
        ["ARN", nodegroup.get("nodegroupArn", "-")],
        ["Status", nodegroup.get("status", "-")],
        ["Capacity Type", nodegroup.get("capacityType", "-")],
        ["Node Role", nodegroup.get("nodeRole", "-")],
        ["Version", nodegroup.get("version") or "N/A"],
        ["Release Version", nodegroup.get("releaseVersion") or "N/A"],
    ]
    if nodegroup.get("createdAt"):
        pairs.append(["Created At", format_timestamp(nodegroup["createdAt"])])

    scaling = nodegroup.get("scalingConfig")
    scaling_pairs = [
        ["Min Size", str(scaling.get("minSize", "-"))],
        ["Max Size", str(scaling.get("maxSize", "-"))],
        ["Desired Size", str(scaling.get("desiredSize", "-"))],
    ] if scaling else []
    instance_types = ", ".join(nodegroup.get("instanceTypes") or [])
    subnets = ", ".join(nodegroup.get("subnets") or [])

    if session.config.output == "json":
        return session.render_pairs(
            pairs + scaling_pairs + [["Instance Types", instance_types], ["Subnets", subnets]]
        )

    result = session.render_pairs(pairs)
    if scaling_pairs:
        result += "\nScaling Configuration:\n" + session.render_pairs(scaling_pairs)
    if instance_types:
        result += f"\nInstance Types: {instance_types}\n"
    if subnets:
        result += f"\nSubnets: {subnets}\n"
    return result
