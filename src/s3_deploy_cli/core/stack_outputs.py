# src/s3_deploy_cli/core/stack_outputs.py
"""
Helpers for CloudFormation stack outputs.
"""

from typing import Optional

from s3_deploy_cli.core.models import StackOutput

# Output keys exported by the known website templates.
KNOWN_OUTPUT_KEYS = ("WebsiteDistribution", "WebAppCloudFrontDistributionOutput")


def parse_stack_outputs(stack: Optional[dict]) -> list[StackOutput]:
    """Converts a describe_stacks entry into StackOutput records (empty if none)."""
    if not stack:
        return []
    return [
        StackOutput(
            key=o.get("OutputKey", ""),
            value=o.get("OutputValue", ""),
            description=o.get("Description", ""),
        )
        for o in stack.get("Outputs") or []
    ]


def find_output(outputs: list[StackOutput], key: str) -> Optional[StackOutput]:
    return next((o for o in outputs if o.key == key), None)


def get_stack_name(service: str, stage: str) -> str:
    """Stack naming used by the serverless framework: <service>-<stage>."""
    return f"{service}-{stage}"
