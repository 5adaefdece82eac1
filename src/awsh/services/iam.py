"""IAM commands: users, roles and groups."""

from __future__ import annotations

import logging
from typing import Any, Optional

from awsh.lib.formatting import format_timestamp
from awsh.shell.builtins import get_registry

logger = logging.getLogger(__name__)

registry = get_registry()


@registry.register("iam list-users", "List IAM users")
def list_users(session: Any) -> str:
    """Usage:
        iam list-users
    """
    response = session.client("iam").list_users()

    rows = [["User Name", "User ID", "ARN", "Created"]]
    for user in response.get("Users", []):
        rows.append([
            user["UserName"],
            user["UserId"],
            user["Arn"],
            format_timestamp(user.get("CreateDate")),
        ])

    if len(rows) == 1:
        return "No users found"
    return session.render_table(rows)


@registry.register("iam get-user", "Get IAM user details")
def get_user(session: Any, user_name: Optional[str] = None) -> str:
    """Show a user; the calling user when no name is given.

    Usage:
        iam get-user
        iam get-user --user-name $USER_NAME
    """
    params = {"UserName": user_name} if user_name else {}
    user = session.client("iam").get_user(**params)["User"]

    pairs = [
        ["User Name", user["UserName"]],
        ["User ID", user["UserId"]],
        ["ARN", user["Arn"]],
        ["Path", user.get("Path", "/")],
        ["Created", format_timestamp(user.get("CreateDate"))],
    ]
    if user.get("PasswordLastUsed"):
        pairs.append(["Password Last Used", format_timestamp(user["PasswordLastUsed"])])
    return session.render_pairs(pairs)


@registry.register("iam list-roles", "List IAM roles")
def list_roles(session: Any) -> str:
    """Usage:
        iam list-roles
    """
    response = session.client("iam").list_roles()

    rows = [["Role Name", "Role ID", "ARN", "Created"]]
    for role in response.get("Roles", []):
        rows.append([
            role["RoleName"],
            role["RoleId"],
            role["Arn"],
            format_timestamp(role.get("CreateDate")),
        ])

    if len(rows) == 1:
        return "No roles found"
    return session.render_table(rows)


@registry.register("iam get-role", "Get IAM role details")
def get_role(session: Any, role_name: str) -> str:
    """Usage:
        iam get-role --role-name $ROLE_NAME
    """
    role = session.client("iam").get_role(RoleName=role_name)["Role"]

    pairs = [
        ["Role Name", role["RoleName"]],
        ["Role ID", role["RoleId"]],
        ["ARN", role["Arn"]],
        ["Path", role.get("Path", "/")],
        ["Created", format_timestamp(role.get("CreateDate"))],
        ["Max Session Duration", str(role.get("MaxSessionDuration", "-"))],
    ]
    if role.get("Description"):
        pairs.append(["Description", role["Description"]])
    return session.render_pairs(pairs)


@registry.register("iam list-groups", "List IAM groups")
def list_groups(session: Any) -> str:
    """Usage:
        iam list-groups
    """
    response = session.client("iam").list_groups()

    rows = [["Group Name", "Group ID", "ARN", "Created"]]
    for group in response.get("Groups", []):
        rows.append([
            group["GroupName"],
            group["GroupId"],
            group["Arn"],
            format_timestamp(group.get("CreateDate")),
        ])

    if len(rows) == 1:
        return "No groups found"
    return session.render_table(rows)
