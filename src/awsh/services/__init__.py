"""AWS service commands.

Importing this package registers every service command with the shell's
command registry.
"""

from awsh.services import ec2, ecs, eks, iam, s3, sts

__all__ = ["ec2", "ecs", "eks", "iam", "s3", "sts"]
