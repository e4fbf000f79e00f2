# src/s3_deploy_cli/adapters/aws/deploy_orchestrator.py
"""
AWS implementation of the deploy operations.

Each public method is one lifecycle hook: it runs to completion, logs what
happened and returns an OperationResult. Command failures are reported,
never raised, so a failing hook does not abort the caller.
"""

import os
from typing import Callable, Optional

from s3_deploy_cli.config import DeployConfig
from s3_deploy_cli.core.base_runner import BaseCommandRunner
from s3_deploy_cli.core.distributions import (
    DistributionParseError,
    find_matching_distributions,
    parse_distribution_list,
)
from s3_deploy_cli.core.models import (
    CommandResult,
    OperationResult,
    StackOutput,
    Status,
    bucket_origin_domain,
)
from s3_deploy_cli.core.stack_outputs import get_stack_name, find_output
from s3_deploy_cli.utils.log import ConsoleLog
from s3_deploy_cli.adapters import command_registry

# Adapter imports
from s3_deploy_cli.adapters.aws.cli_runner import AwsCliRunner
from s3_deploy_cli.adapters.aws.s3_adapter import build_sync_args, build_wipe_args
from s3_deploy_cli.adapters.aws.cloudfront_adapter import (
    build_invalidation_args,
    build_list_distributions_args,
)
from s3_deploy_cli.adapters.aws.cloudformation_adapter import StackLookupError, fetch_stack_outputs


StackOutputsFetcher = Callable[[str, str, Optional[str]], list[StackOutput]]


class DeployOrchestrator:
    """
    Runs syncToS3, wipeS3, domainInfo and invalidateCache for one DeployConfig.

    The runner and the stack-outputs fetcher are injectable so the hooks can
    be exercised without the AWS CLI or credentials.
    """

    def __init__(
        self,
        config: DeployConfig,
        runner: Optional[BaseCommandRunner] = None,
        log: Optional[ConsoleLog] = None,
        fetch_outputs: StackOutputsFetcher = fetch_stack_outputs,
    ):
        self.config = config
        self.runner = runner or AwsCliRunner(profile=config.profile, region=config.region)
        self.log = log or ConsoleLog()
        self.fetch_outputs = fetch_outputs

    def run(self, command: str) -> list[OperationResult]:
        """Runs every lifecycle hook registered for `command`, in order."""
        results = []
        for hook in command_registry.hooks_for(command):
            handler = getattr(self, command_registry.get_hook(hook))
            results.append(handler())
        return results

    def _execute(self, args: list[str]) -> CommandResult:
        self.log.debug(f"$ {self.runner.describe(args)}")
        result = self.runner.run(args)
        self.log.debug(f"exit status {result.exit_status}")
        return result

    def _report(self, operation: str, result: CommandResult, success_message: str) -> OperationResult:
        if result.stdout:
            self.log.info(result.stdout)
        if not result.ok:
            self.log.error(result.stderr)
            return OperationResult(operation, Status.FAILED, result.stderr.strip(), detail=result)
        self.log.success(success_message)
        return OperationResult(operation, Status.SUCCESS, success_message, detail=result)

    # ------------------------------------------------------------------
    # syncToS3:sync
    # ------------------------------------------------------------------
    def sync_directory(self) -> OperationResult:
        cfg = self.config
        if not os.path.isdir(cfg.dist_folder):
            message = f"Local directory '{cfg.dist_folder}' does not exist"
            self.log.error(message)
            return OperationResult("syncToS3", Status.FAILED, message)

        args = build_sync_args(cfg.dist_folder, cfg.bucket_name, cfg.sync_mode, cfg.delete_removed)
        result = self._execute(args)
        return self._report("syncToS3", result, "Successfully synced to the S3 bucket")

    # ------------------------------------------------------------------
    # wipeS3:wipe
    # ------------------------------------------------------------------
    def wipe_bucket(self) -> OperationResult:
        bucket = self.config.bucket_name
        self.log.warning(f"Removing all objects from s3://{bucket}")
        result = self._execute(build_wipe_args(bucket))
        return self._report("wipeS3", result, "Successfully wiped the S3 bucket")

    # ------------------------------------------------------------------
    # domainInfo:domainInfo
    # ------------------------------------------------------------------
    def domain_info(self) -> OperationResult:
        cfg = self.config
        stack_name = cfg.stack_name
        if not stack_name:
            if not cfg.service:
                message = "No service name configured; cannot resolve the stack name"
                self.log.error(message)
                return OperationResult("domainInfo", Status.FAILED, message)
            stack_name = get_stack_name(cfg.service, cfg.stage)

        self.log.debug(f"Describing stack {stack_name} in {cfg.region}")
        try:
            outputs = self.fetch_outputs(stack_name, cfg.region, cfg.profile)
        except StackLookupError as e:
            self.log.error(f"Could not describe stack {stack_name}: {e}")
            return OperationResult("domainInfo", Status.FAILED, str(e))

        output = find_output(outputs, cfg.output_key)
        self.log.debug(f"Results for Outputs.{cfg.output_key}: {output}")

        if not output or not output.value:
            self.log.warning("Web App Domain: Not Found")
            return OperationResult("domainInfo", Status.NOT_FOUND, "Web App Domain: Not Found")

        domain = f"{cfg.domain_scheme}{output.value}"
        self.log.success(f"Web App Domain: {domain}")
        return OperationResult("domainInfo", Status.SUCCESS, f"Web App Domain: {domain}", detail=domain)

    # ------------------------------------------------------------------
    # invalidateCache:invalidate
    # ------------------------------------------------------------------
    def invalidate_cache(self) -> OperationResult:
        bucket = self.config.bucket_name
        self.log.info("invalidate CloudFront cache")

        listing = self._execute(build_list_distributions_args())
        if not listing.stdout and listing.stderr:
            self.log.error(listing.stderr)
            return OperationResult("invalidateCache", Status.FAILED, listing.stderr.strip(), detail=listing)
        if listing.stderr:
            self.log.warning(listing.stderr)

        try:
            distributions = parse_distribution_list(listing.stdout)
        except DistributionParseError as e:
            self.log.error(str(e))
            return OperationResult("invalidateCache", Status.FAILED, str(e))

        matches = find_matching_distributions(distributions, bucket)
        if not matches:
            self.log.warning("DistId not found!")
            return OperationResult(
                "invalidateCache",
                Status.NOT_FOUND,
                f"No distribution with origin {bucket_origin_domain(bucket)}",
            )
        if len(matches) > 1:
            ignored = ", ".join(d.id for d in matches[1:])
            self.log.warning(
                f"{len(matches)} distributions serve {bucket_origin_domain(bucket)}; "
                f"using the first and ignoring {ignored}"
            )

        dist_id = matches[0].id
        self.log.info(f"DistId: {dist_id}")

        result = self._execute(build_invalidation_args(dist_id))
        if result.stdout:
            self.log.info(result.stdout)
        elif result.stderr:
            self.log.error(result.stderr)
            return OperationResult("invalidateCache", Status.FAILED, result.stderr.strip(), detail=dist_id)
        return OperationResult("invalidateCache", Status.SUCCESS, f"Invalidation created for {dist_id}", detail=dist_id)
