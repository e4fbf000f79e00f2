# src/s3_deploy_cli/core/distributions.py
"""
CloudFront distribution list parsing and bucket resolution.

Parses the JSON printed by `aws cloudfront list-distributions` into
Distribution records and picks the one fronting a given S3 bucket.

Every nested field is optional: a missing DistributionList, Items, Origins
or DomainName becomes an empty value instead of an error, so an account
with no distributions simply resolves to nothing. A DistributionList or
Items of the wrong type is a parse error.
"""

import json

from s3_deploy_cli.core.models import Distribution


class DistributionParseError(ValueError):
    """Raised when list-distributions output is not JSON or not shaped like a distribution list."""


def parse_distribution_list(payload: str) -> list[Distribution]:
    """
    Turns raw list-distributions output into Distribution records.

    Args:
        payload: JSON text, e.g. {"DistributionList": {"Items": [...]}}.

    Returns:
        Distributions in the order CloudFront returned them. Items that are
        not objects or have no Id are skipped; wrong-shaped Origins count as
        no origins.

    Raises:
        DistributionParseError: if the payload is not JSON, or the top level,
            DistributionList or Items has the wrong type.
    """
    if not payload or not payload.strip():
        return []

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DistributionParseError(f"Invalid list-distributions output: {e}") from e

    if data is None:
        return []
    if not isinstance(data, dict):
        raise DistributionParseError(
            f"Expected a JSON object from list-distributions, got {type(data).__name__}"
        )

    dist_list = data.get("DistributionList") or {}
    if not isinstance(dist_list, dict):
        raise DistributionParseError(
            f"Expected DistributionList to be an object, got {type(dist_list).__name__}"
        )
    items = dist_list.get("Items") or []
    if not isinstance(items, list):
        raise DistributionParseError(
            f"Expected DistributionList.Items to be a list, got {type(items).__name__}"
        )

    distributions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        dist_id = item.get("Id")
        if not dist_id or not isinstance(dist_id, str):
            continue
        distributions.append(Distribution(
            id=dist_id,
            domain_name=_as_str(item.get("DomainName")),
            origin_domain_names=_origin_domains(item.get("Origins")),
        ))
    return distributions


def _as_str(value) -> str:
    return value if isinstance(value, str) else ""


def _origin_domains(origins) -> tuple[str, ...]:
    # Wrong-shaped origin blocks count as no origins
    if not isinstance(origins, dict):
        return ()
    entries = origins.get("Items")
    if not isinstance(entries, list):
        return ()
    return tuple(
        o["DomainName"] for o in entries
        if isinstance(o, dict) and isinstance(o.get("DomainName"), str) and o["DomainName"]
    )


def find_matching_distributions(
    distributions: list[Distribution],
    bucket_name: str,
) -> list[Distribution]:
    """All distributions with an origin of `<bucket>.s3.amazonaws.com`, in list order."""
    return [d for d in distributions if d.serves(bucket_name)]

