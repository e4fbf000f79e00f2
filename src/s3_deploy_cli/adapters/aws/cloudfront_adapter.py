# src/s3_deploy_cli/adapters/aws/cloudfront_adapter.py
"""
AWS CloudFront adapter — argument lists for the CloudFront CLI calls.
CloudFront is a global service, so no region is needed.
"""

from s3_deploy_cli import config


def build_list_distributions_args() -> list[str]:
    return ["cloudfront", "list-distributions", "--output", "json"]


def build_invalidation_args(distribution_id: str, paths: list[str] | None = None) -> list[str]:
    paths = paths or config.INVALIDATION_PATHS
    return [
        "cloudfront",
        "create-invalidation",
        "--distribution-id",
        distribution_id,
        "--paths",
        *paths,
    ]
