"""Tests for AWS service commands against fake boto3 clients."""

import json
from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError

from awsh.services.s3 import S3Path, parse_s3_uri
from awsh.shell.interpreter import ShellInterpreter

CREATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def run(session, line):
    return ShellInterpreter(session).execute(line)


class TestSts:
    """Test STS commands."""

    def test_get_caller_identity(self, make_session, fake_client):
        sts = fake_client(get_caller_identity={
            "Account": "123456789012",
            "UserId": "AIDAEXAMPLE",
            "Arn": "arn:aws:iam::123456789012:user/dev",
        })
        output = run(make_session(sts=sts), "sts get-caller-identity")
        assert output == (
            "Account : 123456789012\n"
            "User ID : AIDAEXAMPLE\n"
            "ARN     : arn:aws:iam::123456789012:user/dev\n"
        )

    def test_assume_role_resolves_variables(self, make_session, fake_client):
        sts = fake_client(assume_role={
            "Credentials": {
                "AccessKeyId": "ASIAEXAMPLE",
                "SecretAccessKey": "secret",
                "SessionToken": "token",
                "Expiration": CREATED,
            },
            "AssumedRoleUser": {
                "Arn": "arn:aws:sts::1:assumed-role/Admin/me",
                "AssumedRoleId": "AROA:me",
            },
        })
        session = make_session(sts=sts)
        session.variables.set("ROLE_ARN", "arn:aws:iam::1:role/Admin")

        output = run(session, "sts assume-role --role-arn $ROLE_ARN --role-session-name me "
                              "--duration-seconds 900")

        assert sts.calls == [("assume_role", (), {
            "RoleArn": "arn:aws:iam::1:role/Admin",
            "RoleSessionName": "me",
            "DurationSeconds": 900,
        })]
        assert output.startswith("Role assumed successfully:")
        assert "export AWS_ACCESS_KEY_ID=ASIAEXAMPLE" in output

    def test_assume_role_requires_arn(self, make_session, fake_client):
        with pytest.raises(TypeError, match="Invalid arguments for sts assume-role"):
            run(make_session(sts=fake_client()), "sts assume-role --role-session-name me")

    def test_assume_role_json_output(self, make_session, fake_client):
        sts = fake_client(assume_role={
            "Credentials": {
                "AccessKeyId": "ASIAEXAMPLE",
                "SecretAccessKey": "secret",
                "SessionToken": "token",
            },
            "AssumedRoleUser": {"Arn": "arn:aws:sts::1:assumed-role/Admin/me", "AssumedRoleId": "AROA:me"},
        })
        output = run(make_session(output="json", sts=sts),
                     "sts assume-role --role-arn arn:aws:iam::1:role/Admin --role-session-name me")
        data = json.loads(output)
        assert data["Access Key ID"] == "ASIAEXAMPLE"
        assert data["Assumed Role ID"] == "AROA:me"

    @pytest.mark.parametrize("line", [
        "sts assume-role --role-arn arn:aws:iam::1:role/A --role-session-name me --duration-seconds",
        "sts assume-role --role-arn arn:aws:iam::1:role/A --role-session-name me --duration-seconds soon",
        "sts get-session-token --duration-seconds",
    ])
    def test_duration_must_be_a_number(self, make_session, fake_client, line):
        sts = fake_client(assume_role={}, get_session_token={})
        with pytest.raises(ValueError, match="--duration-seconds expects a number"):
            run(make_session(sts=sts), line)
        assert sts.calls == []


class TestS3:
    """Test S3 commands."""

    def test_parse_s3_uri(self):
        assert parse_s3_uri("s3://bucket") == S3Path("bucket", "")
        assert parse_s3_uri("s3://bucket/a/b.txt") == S3Path("bucket", "a/b.txt")
        with pytest.raises(ValueError, match="must start with s3://"):
            parse_s3_uri("/tmp/file")
        with pytest.raises(ValueError, match="no bucket"):
            parse_s3_uri("s3:///key")

    def test_ls_buckets(self, make_session, fake_client):
        s3 = fake_client(list_buckets={"Buckets": [{"Name": "alpha", "CreationDate": CREATED}]})
        output = run(make_session(s3=s3), "s3 ls")
        assert output.splitlines()[0].split() == ["Name", "Creation", "Date"]
        assert "alpha" in output

    def test_ls_no_buckets(self, make_session, fake_client):
        s3 = fake_client(list_buckets={"Buckets": []})
        assert run(make_session(s3=s3), "s3 ls") == "No buckets found"

    def test_ls_objects_with_variable(self, make_session, fake_client):
        s3 = fake_client(list_objects_v2={"Contents": [
            {"Key": "logs/a.txt", "Size": 2048, "LastModified": CREATED},
        ]})
        session = make_session(s3=s3)
        session.variables.set("BUCKET", "my-bucket")

        output = run(session, "s3 ls s3://$BUCKET/logs")

        assert s3.calls == [("list_objects_v2", (), {"Bucket": "my-bucket", "Prefix": "logs"})]
        assert "logs/a.txt" in output
        assert "2.0 KiB" in output

    def test_ls_no_objects(self, make_session, fake_client):
        s3 = fake_client(list_objects_v2={"KeyCount": 0})
        assert run(make_session(s3=s3), "s3 ls s3://empty") == "No objects found"

    def test_unbound_bucket_fails_naturally(self, make_session, fake_client):
        """Test an unresolved reference is sent as-is rather than emptied."""
        s3 = fake_client(delete_bucket={})
        assert run(make_session(s3=s3), "s3 rb s3://$BUCKET") == "Bucket deleted: $BUCKET"
        assert s3.calls == [("delete_bucket", (), {"Bucket": "$BUCKET"})]

    def test_mb_sets_location_constraint(self, make_session, fake_client):
        s3 = fake_client(create_bucket={})
        assert run(make_session(s3=s3), "s3 mb s3://new-bucket") == "Bucket created: new-bucket"
        assert s3.calls[0][2] == {
            "Bucket": "new-bucket",
            "CreateBucketConfiguration": {"LocationConstraint": "us-east-2"},
        }

    def test_cp_upload(self, make_session, fake_client, tmp_path):
        local = tmp_path / "data.csv"
        local.write_text("a,b\n")
        s3 = fake_client(upload_file=None)
        session = make_session(s3=s3)
        session.variables.set("FILE", str(local))

        output = run(session, "s3 cp $FILE s3://bucket/")

        assert s3.calls == [("upload_file", (str(local), "bucket", "data.csv"), {})]
        assert output == f"Uploaded: {local} -> s3://bucket/data.csv"

    def test_cp_upload_missing_file(self, make_session, fake_client, tmp_path):
        with pytest.raises(FileNotFoundError, match="Local file not found"):
            run(make_session(s3=fake_client()), f"s3 cp {tmp_path / 'nope'} s3://bucket/key")

    def test_cp_download(self, make_session, fake_client, tmp_path):
        s3 = fake_client(download_file=None)
        output = run(make_session(s3=s3), f"s3 cp s3://bucket/dir/report.txt {tmp_path}")
        target = tmp_path / "report.txt"
        assert s3.calls == [("download_file", ("bucket", "dir/report.txt", str(target)), {})]
        assert output == f"Downloaded: s3://bucket/dir/report.txt -> {target}"

    def test_cp_between_buckets(self, make_session, fake_client):
        s3 = fake_client(copy_object={})
        run(make_session(s3=s3), "s3 cp s3://src/a.txt s3://dst/b.txt")
        assert s3.calls[0][2] == {
            "CopySource": {"Bucket": "src", "Key": "a.txt"},
            "Bucket": "dst",
            "Key": "b.txt",
        }

    def test_cp_requires_s3_side(self, make_session, fake_client):
        with pytest.raises(ValueError, match="At least one path must be an S3 URI"):
            run(make_session(s3=fake_client()), "s3 cp a b")

    def test_head_bucket_missing(self, make_session, fake_client):
        error = ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
        s3 = fake_client(head_bucket=error)
        output = run(make_session(s3=s3), "s3 head-bucket s3://gone")
        assert output.startswith("Bucket does not exist or is not accessible:")

    def test_get_bucket_location_default_region(self, make_session, fake_client):
        s3 = fake_client(get_bucket_location={"LocationConstraint": None})
        output = run(make_session(s3=s3), "s3 get-bucket-location s3://b")
        assert "Region : us-east-1" in output

    def test_client_error_propagates(self, make_session, fake_client):
        error = ClientError({"Error": {"Code": "AccessDenied", "Message": "Denied"}}, "DeleteObject")
        s3 = fake_client(delete_object=error)
        with pytest.raises(ClientError):
            run(make_session(s3=s3), "s3 rm s3://b/k")


class TestEc2:
    """Test EC2 commands."""

    def test_describe_instances(self, make_session, fake_client):
        ec2 = fake_client(describe_instances={"Reservations": [{"Instances": [{
            "InstanceId": "i-123",
            "InstanceType": "t3.micro",
            "State": {"Name": "running"},
            "PrivateIpAddress": "10.0.0.5",
            "LaunchTime": CREATED,
            "Tags": [{"Key": "Name", "Value": "web"}],
        }]}]})
        session = make_session(ec2=ec2)
        session.variables.set("ID", "i-123")

        output = run(session, "ec2 describe-instances --instance-ids $ID")

        assert ec2.calls[0][2] == {"InstanceIds": ["i-123"]}
        row = output.splitlines()[2].split()
        assert row[:6] == ["i-123", "web", "t3.micro", "running", "-", "10.0.0.5"]

    def test_describe_instances_empty(self, make_session, fake_client):
        ec2 = fake_client(describe_instances={"Reservations": []})
        assert run(make_session(ec2=ec2), "ec2 describe-instances") == "No instances found"

    def test_stop_instances(self, make_session, fake_client):
        ec2 = fake_client(stop_instances={"StoppingInstances": [{
            "InstanceId": "i-1",
            "PreviousState": {"Name": "running"},
            "CurrentState": {"Name": "stopping"},
        }]})
        output = run(make_session(ec2=ec2), "ec2 stop-instances --instance-ids 'i-1, i-2'")
        assert ec2.calls[0][2] == {"InstanceIds": ["i-1", "i-2"]}
        assert output.splitlines()[2].split() == ["i-1", "running", "stopping"]

    def test_instance_ids_flag_without_value(self, make_session, fake_client):
        with pytest.raises(ValueError, match="comma-separated"):
            run(make_session(ec2=fake_client()), "ec2 start-instances --instance-ids")

        ec2 = fake_client(terminate_instances={"TerminatingInstances": []})
        with pytest.raises(ValueError, match="comma-separated"):
            run(make_session(ec2=ec2), "ec2 terminate-instances --instance-ids")
        assert ec2.calls == []

    def test_describe_subnets_filters_vpc(self, make_session, fake_client):
        ec2 = fake_client(describe_subnets={"Subnets": []})
        output = run(make_session(ec2=ec2), "ec2 describe-subnets --vpc-id vpc-1")
        assert output == "No subnets found"
        assert ec2.calls[0][2] == {"Filters": [{"Name": "vpc-id", "Values": ["vpc-1"]}]}

    def test_describe_vpcs_json(self, make_session, fake_client):
        ec2 = fake_client(describe_vpcs={"Vpcs": [
            {"VpcId": "vpc-1", "CidrBlock": "10.0.0.0/16", "State": "available", "IsDefault": True},
        ]})
        output = run(make_session(output="json", ec2=ec2), "ec2 describe-vpcs")
        assert '"VPC ID": "vpc-1"' in output
        assert '"Default": "Yes"' in output


class TestIam:
    """Test IAM commands."""

    def test_list_users(self, make_session, fake_client):
        iam = fake_client(list_users={"Users": [{
            "UserName": "alice", "UserId": "AID1", "Arn": "arn:aws:iam::1:user/alice",
            "CreateDate": CREATED,
        }]})
        output = run(make_session(iam=iam), "iam list-users")
        assert output.splitlines()[2].split()[:3] == ["alice", "AID1", "arn:aws:iam::1:user/alice"]

    def test_get_user_defaults_to_caller(self, make_session, fake_client):
        iam = fake_client(get_user={"User": {
            "UserName": "me", "UserId": "AID2", "Arn": "arn", "Path": "/", "CreateDate": CREATED,
        }})
        output = run(make_session(iam=iam), "iam get-user")
        assert iam.calls[0][2] == {}
        assert "User Name : me" in output

    def test_get_role(self, make_session, fake_client):
        iam = fake_client(get_role={"Role": {
            "RoleName": "Admin", "RoleId": "AROA1", "Arn": "arn", "Path": "/",
            "CreateDate": CREATED, "MaxSessionDuration": 3600, "Description": "admins",
        }})
        session = make_session(iam=iam)
        session.variables.set("ROLE", "Admin")
        output = run(session, "iam get-role --role-name ${ROLE}")
        assert iam.calls[0][2] == {"RoleName": "Admin"}
        assert "Max Session Duration : 3600" in output
        assert "Description          : admins" in output

    def test_list_groups_empty(self, make_session, fake_client):
        iam = fake_client(list_groups={"Groups": []})
        assert run(make_session(iam=iam), "iam list-groups") == "No groups found"


class TestEcsEks:
    """Test ECS and EKS commands."""

    def test_ecs_list_clusters(self, make_session, fake_client):
        ecs = fake_client(list_clusters={"clusterArns": ["arn:aws:ecs:us-east-2:1:cluster/prod"]})
        output = run(make_session(ecs=ecs), "ecs list-clusters")
        lines = output.splitlines()
        assert lines[0].rstrip() == "Cluster ARN"
        assert lines[1] == "-" * len("arn:aws:ecs:us-east-2:1:cluster/prod")
        assert lines[2] == "arn:aws:ecs:us-east-2:1:cluster/prod"

    def test_ecs_list_services_empty(self, make_session, fake_client):
        ecs = fake_client(list_services={"serviceArns": []})
        session = make_session(ecs=ecs)
        session.variables.set("CLUSTER", "prod")
        assert run(session, "ecs list-services --cluster $CLUSTER") == "No services found in cluster: prod"

    def test_ecs_describe_clusters(self, make_session, fake_client):
        ecs = fake_client(describe_clusters={"clusters": [{
            "clusterName": "prod", "status": "ACTIVE", "runningTasksCount": 3,
            "pendingTasksCount": 0, "activeServicesCount": 2,
            "registeredContainerInstancesCount": 1,
        }]})
        output = run(make_session(ecs=ecs), "ecs describe-clusters --clusters prod,stage")
        assert ecs.calls[0][2] == {"clusters": ["prod", "stage"]}
        assert output.splitlines()[2].split() == ["prod", "ACTIVE", "3", "0", "2", "1"]

    def test_ecs_list_tasks_for_service(self, make_session, fake_client):
        ecs = fake_client(list_tasks={"taskArns": ["arn:task/1"]})
        run(make_session(ecs=ecs), "ecs list-tasks --cluster prod --service-name api")
        assert ecs.calls[0][2] == {"cluster": "prod", "serviceName": "api"}

    def test_eks_describe_cluster(self, make_session, fake_client):
        eks = fake_client(describe_cluster={"cluster": {
            "name": "k8s", "arn": "arn:eks", "status": "ACTIVE", "version": "1.29",
            "endpoint": None, "roleArn": "arn:role", "platformVersion": "eks.1",
            "createdAt": CREATED,
            "resourcesVpcConfig": {
                "vpcId": "vpc-1", "subnetIds": ["subnet-a", "subnet-b"],
                "securityGroupIds": [], "endpointPublicAccess": True,
                "endpointPrivateAccess": False,
            },
        }})
        output = run(make_session(eks=eks), "eks describe-cluster --name k8s")
        assert "Endpoint         : N/A" in output
        assert "VPC Configuration:" in output
        assert "subnet-a, subnet-b" in output
        assert "Endpoint Public Access  : true" in output

    def test_eks_list_nodegroups_empty(self, make_session, fake_client):
        eks = fake_client(list_nodegroups={"nodegroups": []})
        output = run(make_session(eks=eks), "eks list-nodegroups --cluster-name k8s")
        assert output == "No node groups found in cluster: k8s"

    def test_ecs_describe_services(self, make_session, fake_client):
        ecs = fake_client(describe_services={"services": [{
            "serviceName": "api", "status": "ACTIVE", "desiredCount": 2,
            "runningCount": 2, "pendingCount": 0,
            "taskDefinition": "arn:aws:ecs:us-east-2:1:task-definition/api:7",
        }]})
        session = make_session(ecs=ecs)
        session.variables.set("SERVICE", "api")

        output = run(session, "ecs describe-services --cluster prod --services $SERVICE")

        assert ecs.calls[0][2] == {"cluster": "prod", "services": ["api"]}
        assert output.splitlines()[2].split() == ["api", "ACTIVE", "2", "2", "0", "api:7"]

    def test_ecs_describe_tasks(self, make_session, fake_client):
        ecs = fake_client(describe_tasks={"tasks": [{
            "taskArn": "arn:aws:ecs:us-east-2:1:task/prod/abc123",
            "lastStatus": "RUNNING", "desiredStatus": "RUNNING",
            "taskDefinitionArn": "arn:aws:ecs:us-east-2:1:task-definition/api:7",
        }]})
        output = run(make_session(ecs=ecs), "ecs describe-tasks --cluster prod --tasks abc123")
        assert ecs.calls[0][2] == {"cluster": "prod", "tasks": ["abc123"]}
        assert output.splitlines()[2].split() == ["abc123", "RUNNING", "RUNNING", "api:7", "N/A"]

    def test_ecs_describe_tasks_empty(self, make_session, fake_client):
        ecs = fake_client(describe_tasks={"tasks": []})
        assert run(make_session(ecs=ecs), "ecs describe-tasks --cluster prod --tasks x") == "No tasks found"

    def test_eks_describe_nodegroup(self, make_session, fake_client):
        eks = fake_client(describe_nodegroup={"nodegroup": {
            "nodegroupName": "workers", "nodegroupArn": "arn:ng", "status": "ACTIVE",
            "capacityType": "ON_DEMAND", "nodeRole": "arn:role", "version": "1.29",
            "scalingConfig": {"minSize": 1, "maxSize": 5, "desiredSize": 3},
            "instanceTypes": ["m5.large", "m5.xlarge"],
            "subnets": ["subnet-a"],
        }})
        output = run(make_session(eks=eks),
                     "eks describe-nodegroup --cluster-name k8s --nodegroup-name workers")

        assert eks.calls[0][2] == {"clusterName": "k8s", "nodegroupName": "workers"}
        lines = output.splitlines()
        assert lines[0].split() == ["Nodegroup", "Name", ":", "workers"]
        assert ["Release", "Version", ":", "N/A"] in [line.split() for line in lines]
        assert "Scaling Configuration:" in lines
        assert "Desired Size : 3" in lines
        assert "Instance Types: m5.large, m5.xlarge" in lines
        assert "Subnets: subnet-a" in lines

    def test_eks_describe_nodegroup_json(self, make_session, fake_client):
        eks = fake_client(describe_nodegroup={"nodegroup": {
            "nodegroupName": "workers", "scalingConfig": {"minSize": 1, "maxSize": 5, "desiredSize": 3},
        }})
        output = run(make_session(output="json", eks=eks),
                     "eks describe-nodegroup --cluster-name k8s --nodegroup-name workers")
        data = json.loads(output)
        assert data["Nodegroup Name"] == "workers"
        assert data["Desired Size"] == "3"
