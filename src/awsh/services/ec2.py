"""EC2 commands: instances, VPCs, subnets and security groups."""

from __future__ import annotations

import logging
from typing import Any, Optional

from awsh.lib.formatting import format_timestamp
from awsh.services.common import or_dash, split_list, tag_value
from awsh.shell.builtins import get_registry

logger = logging.getLogger(__name__)

registry = get_registry()

STATE_CHANGE_HEADER = ["Instance ID", "Previous State", "Current State"]


def _state_changes(session: Any, changes: list) -> str:
    rows = [list(STATE_CHANGE_HEADER)]
    for change in changes:
        rows.append([
            change["InstanceId"],
            change["PreviousState"]["Name"],
            change["CurrentState"]["Name"],
        ])
    return session.render_table(rows)


@registry.register("ec2 describe-instances", "Describe EC2 instances")
def describe_instances(session: Any, instance_ids: Optional[str] = None) -> str:
    """Usage:
        ec2 describe-instances
        ec2 describe-instances --instance-ids i-1234567890abcdef0
        ec2 describe-instances --instance-ids $INSTANCE_ID
    """
    params = {}
    if instance_ids:
        params["InstanceIds"] = split_list(instance_ids)
    response = session.client("ec2").describe_instances(**params)

    rows = [["Instance ID", "Name", "Type", "State", "Public IP", "Private IP", "Launch Time"]]
    for reservation in response.get("Reservations", []):
        for instance in reservation.get("Instances", []):
            rows.append([
                instance["InstanceId"],
                tag_value(instance.get("Tags")),
                instance.get("InstanceType", "-"),
                instance.get("State", {}).get("Name", "-"),
                or_dash(instance.get("PublicIpAddress")),
                or_dash(instance.get("PrivateIpAddress")),
                format_timestamp(instance.get("LaunchTime")),
            ])

    if len(rows) == 1:
        return "No instances found"
    return session.render_table(rows)


@registry.register("ec2 start-instances", "Start EC2 instances")
def start_instances(session: Any, instance_ids: str) -> str:
    """Usage:
        ec2 start-instances --instance-ids i-1234567890abcdef0,i-0987654321fedcba0
        ec2 start-instances --instance-ids $INSTANCE_ID
    """
    ids = split_list(instance_ids)
    response = session.client("ec2").start_instances(InstanceIds=ids)
    return _state_changes(session, response.get("StartingInstances", []))


@registry.register("ec2 stop-instances", "Stop EC2 instances")
def stop_instances(session: Any, instance_ids: str) -> str:
    """Usage:
        ec2 stop-instances --instance-ids $INSTANCE_ID
    """
    ids = split_list(instance_ids)
    response = session.client("ec2").stop_instances(InstanceIds=ids)
    return _state_changes(session, response.get("StoppingInstances", []))


@registry.register("ec2 terminate-instances", "Terminate EC2 instances")
def terminate_instances(session: Any, instance_ids: str) -> str:
    """Usage:
        ec2 terminate-instances --instance-ids $INSTANCE_ID
    """
    ids = split_list(instance_ids)
    response = session.client("ec2").terminate_instances(InstanceIds=ids)
    return _state_changes(session, response.get("TerminatingInstances", []))


@registry.register("ec2 describe-vpcs", "Describe VPCs")
def describe_vpcs(session: Any) -> str:
    """Usage:
        ec2 describe-vpcs
    """
    response = session.client("ec2").describe_vpcs()

    rows = [["VPC ID", "Name", "CIDR Block", "State", "Default"]]
    for vpc in response.get("Vpcs", []):
        rows.append([
            vpc["VpcId"],
            tag_value(vpc.get("Tags")),
            vpc.get("CidrBlock", "-"),
            vpc.get("State", "-"),
            "Yes" if vpc.get("IsDefault") else "No",
        ])

    if len(rows) == 1:
        return "No VPCs found"
    return session.render_table(rows)


@registry.register("ec2 describe-subnets", "Describe subnets")
def describe_subnets(session: Any, vpc_id: Optional[str] = None) -> str:
    """Usage:
        ec2 describe-subnets
        ec2 describe-subnets --vpc-id $VPC_ID
    """
    params = {}
    if vpc_id:
        params["Filters"] = [{"Name": "vpc-id", "Values": [vpc_id]}]
    response = session.client("ec2").describe_subnets(**params)

    rows = [["Subnet ID", "Name", "VPC ID", "CIDR Block", "AZ", "Available IPs"]]
    for subnet in response.get("Subnets", []):
        rows.append([
            subnet["SubnetId"],
            tag_value(subnet.get("Tags")),
            subnet.get("VpcId", "-"),
            subnet.get("CidrBlock", "-"),
            subnet.get("AvailabilityZone", "-"),
            str(subnet.get("AvailableIpAddressCount", 0)),
        ])

    if len(rows) == 1:
        return "No subnets found"
    return session.render_table(rows)


@registry.register("ec2 describe-security-groups", "Describe security groups")
def describe_security_groups(session: Any, group_ids: Optional[str] = None) -> str:
    """Usage:
        ec2 describe-security-groups
        ec2 describe-security-groups --group-ids $SG_ID
    """
    params = {}
    if group_ids:
        params["GroupIds"] = split_list(group_ids)
    response = session.client("ec2").describe_security_groups(**params)

    rows = [["Group ID", "Group Name", "VPC ID", "Description"]]
    for group in response.get("SecurityGroups", []):
        rows.append([
            group["GroupId"],
            group.get("GroupName", "-"),
            or_dash(group.get("VpcId")),
            or_dash(group.get("Description")),
        ])

    if len(rows) == 1:
        return "No security groups found"
    return session.render_table(rows)
