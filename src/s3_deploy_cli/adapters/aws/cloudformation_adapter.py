# src/s3_deploy_cli/adapters/aws/cloudformation_adapter.py
"""
AWS CloudFormation adapter — reads a deployed stack's outputs with boto3.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from s3_deploy_cli.core.models import StackOutput
from s3_deploy_cli.core.stack_outputs import parse_stack_outputs


class StackLookupError(RuntimeError):
    """Raised when CloudFormation cannot be queried for a stack."""


def fetch_stack_outputs(
    stack_name: str,
    region: str,
    profile: str | None = None,
) -> list[StackOutput]:
    """
    Describes `stack_name` and returns its outputs.

    A stack with no Outputs yields an empty list. Any AWS error (missing
    stack, access denied, no credentials) raises StackLookupError with the
    original message.

    IAM required: cloudformation:DescribeStacks
    """
    try:
        session = boto3.Session(profile_name=profile, region_name=region)
        cfn = session.client("cloudformation")
        response = cfn.describe_stacks(StackName=stack_name)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        message = e.response.get("Error", {}).get("Message", str(e))
        raise StackLookupError(f"{code}: {message}" if code else message) from e
    except BotoCoreError as e:
        raise StackLookupError(str(e)) from e

    stacks = response.get("Stacks") or []
    if not stacks:
        return []
    return parse_stack_outputs(stacks[0])
