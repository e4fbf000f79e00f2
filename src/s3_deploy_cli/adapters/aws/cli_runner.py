# src/s3_deploy_cli/adapters/aws/cli_runner.py
"""
subprocess-backed runner for the AWS command-line tool.
"""

import os
import subprocess
from typing import Optional

from s3_deploy_cli import config
from s3_deploy_cli.core.base_runner import BaseCommandRunner
from s3_deploy_cli.core.models import CommandResult

# Exit status shells use for "command not found"
COMMAND_NOT_FOUND = 127


class AwsCliRunner(BaseCommandRunner):
    """Invokes `aws` synchronously and captures stdout/stderr as text."""

    def __init__(
        self,
        binary: str = config.AWS_CLI_BINARY,
        profile: Optional[str] = None,
        region: Optional[str] = None,
    ):
        self.binary = binary
        self.profile = profile
        self.region = region

    def build_command(self, args: list[str]) -> list[str]:
        cmd = [self.binary]
        if self.profile:
            cmd += ["--profile", self.profile]
        if self.region:
            cmd += ["--region", self.region]
        return cmd + list(args)

    def describe(self, args: list[str]) -> str:
        return " ".join(self.build_command(args))

    def run(self, args: list[str]) -> CommandResult:
        cmd = self.build_command(args)
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                env=os.environ.copy(),
                check=False,
            )
        except FileNotFoundError:
            return CommandResult(
                stdout="",
                stderr=f"{self.binary}: command not found. Install the AWS CLI and make sure it is on PATH.",
                exit_status=COMMAND_NOT_FOUND,
                args=cmd,
            )
        return CommandResult(
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            exit_status=proc.returncode,
            args=cmd,
        )
