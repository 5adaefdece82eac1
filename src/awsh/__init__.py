"""awsh - Interactive AWS Shell.

A command shell for AWS built on boto3, with session variables that can be
captured once and reused in later commands.

Features:
- $NAME / ${NAME} variable interpolation in every command argument
- STS, S3, EC2, IAM, ECS and EKS commands
- Table or JSON output
- Script and one-shot command execution
"""

__version__ = "1.0.0"
__license__ = "MIT"

from awsh.cli import main

__all__ = ["main", "__version__"]
