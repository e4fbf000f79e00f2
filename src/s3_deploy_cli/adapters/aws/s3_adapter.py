# src/s3_deploy_cli/adapters/aws/s3_adapter.py

from s3_deploy_cli.core.models import SyncMode


def bucket_uri(bucket_name: str) -> str:
    return f"s3://{bucket_name}/"


def build_sync_args(
    dist_folder: str,
    bucket_name: str,
    mode: SyncMode = SyncMode.SYNC,
    delete_removed: bool = False,
) -> list[str]:
    """
    Arguments that recursively mirror `dist_folder` into the bucket.

    SYNC uploads changed files only; with delete_removed, objects missing
    locally are removed from the bucket. COPY re-uploads everything.
    """
    if mode == SyncMode.COPY:
        return ["s3", "cp", dist_folder, bucket_uri(bucket_name), "--recursive"]

    source = dist_folder if dist_folder.endswith("/") else f"{dist_folder}/"
    args = ["s3", "sync", source, bucket_uri(bucket_name)]
    if delete_removed:
        args.append("--delete")
    return args


def build_wipe_args(bucket_name: str) -> list[str]:
    """Deletes every object in the bucket. Irreversible."""
    return ["s3", "rm", f"s3://{bucket_name}", "--recursive"]
