# src/s3_deploy_cli/core/models.py

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Optional


class Status(str, Enum):
    SUCCESS = "Success"
    NOT_FOUND = "Not Found"
    FAILED = "Failed"

class SyncMode(str, Enum):
    SYNC = "sync"
    COPY = "copy"

@dataclass
class CommandResult:
    stdout: str
    stderr: str
    exit_status: int
    args: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        # Success is judged on error text, not on the exit status.
        return not self.stderr

@dataclass(frozen=True)
class Distribution:
    id: str
    domain_name: str = ""
    origin_domain_names: tuple[str, ...] = ()

    def serves(self, bucket_name: str) -> bool:
        return bucket_origin_domain(bucket_name) in self.origin_domain_names

@dataclass(frozen=True)
class StackOutput:
    key: str
    value: str = ""
    description: str = ""

@dataclass
class OperationResult:
    operation: str
    status: Status
    message: str = ""
    detail: Optional[Any] = None

    @property
    def failed(self) -> bool:
        return self.status == Status.FAILED


def bucket_origin_domain(bucket_name: str) -> str:
    return f"{bucket_name}.s3.amazonaws.com"
