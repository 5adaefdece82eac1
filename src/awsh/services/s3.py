"""S3 commands: buckets, objects and copies to/from local files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from botocore.exceptions import ClientError

from awsh.lib.formatting import format_size, format_timestamp
from awsh.shell.builtins import get_registry

logger = logging.getLogger(__name__)

registry = get_registry()

S3_SCHEME = "s3://"


@dataclass
class S3Path:
    """Bucket and key parsed from an ``s3://bucket/key`` URI."""

    bucket: str
    key: str = ""

    def __str__(self) -> str:
        return f"{S3_SCHEME}{self.bucket}/{self.key}" if self.key else f"{S3_SCHEME}{self.bucket}"


def parse_s3_uri(path: str) -> S3Path:
    """Parse ``s3://bucket[/key]``.

    Args:
        path: S3 URI

    Returns:
        Parsed path

    Raises:
        ValueError: If the path is not an S3 URI or has no bucket
    """
    if not path.startswith(S3_SCHEME):
        raise ValueError("S3 path must start with s3://")
    bucket, _, key = path[len(S3_SCHEME):].partition('/')
    if not bucket:
        raise ValueError(f"S3 path has no bucket: {path}")
    return S3Path(bucket=bucket, key=key)


@registry.register("s3 ls", "List S3 buckets or objects")
def list_path(session: Any, path: Optional[str] = None) -> str:
    """List all buckets, or the objects under a bucket/prefix.

    Usage:
        s3 ls
        s3 ls s3://bucket-name
        s3 ls s3://bucket/prefix
        s3 ls s3://$BUCKET
    """
    client = session.client("s3")

    if not path:
        response = client.list_buckets()
        rows = [["Name", "Creation Date"]]
        for bucket in response.get("Buckets", []):
            rows.append([bucket["Name"], format_timestamp(bucket.get("CreationDate"))])
        if len(rows) == 1:
            return "No buckets found"
        return session.render_table(rows)

    s3_path = parse_s3_uri(path)
    params = {"Bucket": s3_path.bucket}
    if s3_path.key:
        params["Prefix"] = s3_path.key
    response = client.list_objects_v2(**params)

    rows = [["Key", "Size", "Last Modified"]]
    for obj in response.get("Contents", []):
        rows.append([
            obj["Key"],
            format_size(obj.get("Size", 0)),
            format_timestamp(obj.get("LastModified")),
        ])
    if len(rows) == 1:
        return "No objects found"
    return session.render_table(rows)


@registry.register("s3 mb", "Create an S3 bucket")
def make_bucket(session: Any, bucket_uri: str) -> str:
    """Create a bucket in the session region.

    Usage:
        s3 mb s3://bucket-name
        s3 mb s3://$BUCKET
    """
    s3_path = parse_s3_uri(bucket_uri)
    params: dict = {"Bucket": s3_path.bucket}
    region = session.clients.region
    # us-east-1 rejects an explicit location constraint
    if region and region != "us-east-1":
        params["CreateBucketConfiguration"] = {"LocationConstraint": region}
    session.client("s3").create_bucket(**params)
    return f"Bucket created: {s3_path.bucket}"


@registry.register("s3 rb", "Remove an S3 bucket")
def remove_bucket(session: Any, bucket_uri: str) -> str:
    """Usage:
        s3 rb s3://bucket-name
        s3 rb s3://$BUCKET
    """
    s3_path = parse_s3_uri(bucket_uri)
    session.client("s3").delete_bucket(Bucket=s3_path.bucket)
    return f"Bucket deleted: {s3_path.bucket}"


@registry.register("s3 cp", "Copy files to/from S3")
def copy(session: Any, source: str, destination: str) -> str:
    """Upload, download, or copy between S3 locations.

    Usage:
        s3 cp local-file s3://bucket/key
        s3 cp s3://bucket/key local-file
        s3 cp s3://bucket1/key s3://bucket2/key
        s3 cp $LOCAL_FILE s3://$BUCKET/$KEY
    """
    source_is_s3 = source.startswith(S3_SCHEME)
    dest_is_s3 = destination.startswith(S3_SCHEME)
    client = session.client("s3")

    if not source_is_s3 and dest_is_s3:
        local = Path(source)
        if not local.is_file():
            raise FileNotFoundError(f"Local file not found: {source}")
        target = parse_s3_uri(destination)
        key = target.key or local.name
        client.upload_file(str(local), target.bucket, key)
        return f"Uploaded: {source} -> {S3Path(target.bucket, key)}"

    if source_is_s3 and not dest_is_s3:
        origin = parse_s3_uri(source)
        local = Path(destination)
        if local.is_dir():
            local = local / Path(origin.key).name
        client.download_file(origin.bucket, origin.key, str(local))
        return f"Downloaded: {source} -> {local}"

    if source_is_s3 and dest_is_s3:
        origin = parse_s3_uri(source)
        target = parse_s3_uri(destination)
        client.copy_object(
            CopySource={"Bucket": origin.bucket, "Key": origin.key},
            Bucket=target.bucket,
            Key=target.key or Path(origin.key).name,
        )
        return f"Copied: {source} -> {destination}"

    raise ValueError("At least one path must be an S3 URI (s3://...)")


@registry.register("s3 rm", "Remove an S3 object")
def remove_object(session: Any, path: str) -> str:
    """Usage:
        s3 rm s3://bucket/key
        s3 rm s3://$BUCKET/$KEY
    """
    s3_path = parse_s3_uri(path)
    if not s3_path.key:
        raise ValueError(f"S3 path has no key: {path}")
    session.client("s3").delete_object(Bucket=s3_path.bucket, Key=s3_path.key)
    return f"Object deleted: {path}"


@registry.register("s3 head-bucket", "Check if a bucket exists")
def head_bucket(session: Any, bucket_uri: str) -> str:
    """Usage:
        s3 head-bucket s3://bucket-name
    """
    s3_path = parse_s3_uri(bucket_uri)
    try:
        session.client("s3").head_bucket(Bucket=s3_path.bucket)
    except ClientError as e:
        return f"Bucket does not exist or is not accessible: {e}"
    return f"Bucket exists: {s3_path.bucket}"


@registry.register("s3 get-bucket-location", "Get bucket region")
def get_bucket_location(session: Any, bucket_uri: str) -> str:
    """Usage:
        s3 get-bucket-location s3://bucket-name
    """
    s3_path = parse_s3_uri(bucket_uri)
    response = session.client("s3").get_bucket_location(Bucket=s3_path.bucket)
    # A null location constraint means us-east-1
    region = response.get("LocationConstraint") or "us-east-1"
    return session.render_pairs([
        ["Bucket", s3_path.bucket],
        ["Region", region],
    ])


@registry.register("s3 head-object", "Get object metadata")
def head_object(session: Any, path: str) -> str:
    """Usage:
        s3 head-object s3://bucket/key
    """
    s3_path = parse_s3_uri(path)
    response = session.client("s3").head_object(Bucket=s3_path.bucket, Key=s3_path.key)
    pairs = [
        ["Key", s3_path.key],
        ["Content Type", response.get("ContentType", "-")],
        ["Content Length", format_size(response.get("ContentLength", 0))],
        ["ETag", response.get("ETag", "-")],
        ["Last Modified", format_timestamp(response.get("LastModified"))],
    ]
    if response.get("StorageClass"):
        pairs.append(["Storage Class", response["StorageClass"]])
    for name, value in sorted(response.get("Metadata", {}).items()):
        pairs.append([f"Metadata: {name}", value])
    return session.render_pairs(pairs)
