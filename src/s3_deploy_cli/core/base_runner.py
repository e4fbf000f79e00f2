# src/s3_deploy_cli/core/base_runner.py
"""
Abstract base for the command-execution facility.

The orchestrator never spawns processes itself. It builds argument lists
through the adapters and hands them to a runner:

┌─────────────────────────────────────────────────────────────┐
│                    CLI / Command registry                   │
│        (cli.py, adapters/command_registry.py)               │
└────────────────────────┬────────────────────────────────────┘
                         │  calls hooks on
                         ▼
             ┌──────────────────────┐
             │  DeployOrchestrator  │
             └──────────┬───────────┘
                        │  run(args)
                        ▼
             ┌──────────────────────┐
             │   BaseCommandRunner  │  ◄── this module
             └──────────────────────┘
                    ▲         ▲
         implements │         │ implements
                    │         │
      ┌──────────────┐      ┌──────────────┐
      │ AwsCliRunner │      │  test fakes  │
      │ (subprocess) │      │              │
      └──────────────┘      └──────────────┘

A runner must be synchronous: run() blocks until the tool exits and hands
back everything it printed.
"""

from abc import ABC, abstractmethod

from .models import CommandResult


class BaseCommandRunner(ABC):
    """
    Runs one external tool invocation and captures its output.

    Runners do NOT raise for a failing command. A non-zero exit or error
    text is reported through the returned CommandResult so callers can log
    it and carry on.
    """

    # Executable the runner invokes, e.g. "aws"
    binary: str = ""

    @abstractmethod
    def run(self, args: list[str]) -> CommandResult:
        """
        Execute `binary` with `args` and wait for it to finish.

        Args:
            args: Arguments after the executable, e.g. ["s3", "sync", "build/", "s3://b/"].

        Returns:
            A CommandResult with decoded stdout/stderr and the exit status.
        """
        ...

    def describe(self, args: list[str]) -> str:
        """Shell-style rendering of a command line for log output."""
        return " ".join([self.binary, *args])

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} binary={self.binary!r}>"
