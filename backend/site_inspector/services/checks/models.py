from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from site_inspector.config import Settings, settings as default_settings
from site_inspector.services.environment import HostEnvironment
from site_inspector.services.probe import Prober


class Status(Enum):
    """Outcome of a single check."""
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


@dataclass
class AuditResult:
    """Individual audit check result."""
    title: str
    status: Status
    message: str
    explanation: str = ""
    fix: str = ""


def make_result(title: str, status: Status, message: str, explanation: str = "", fix: str = "") -> AuditResult:
    """Build a result; passing checks carry no remediation."""
    return AuditResult(
        title=title,
        status=status,
        message=message,
        explanation=explanation,
        fix="" if status is Status.PASS else fix,
    )


@dataclass
class AuditContext:
    """Everything a check may read."""
    env: HostEnvironment
    prober: Prober = field(default_factory=Prober)
    settings: Settings = field(default_factory=lambda: default_settings)


CheckFunc = Callable[[AuditContext], Awaitable[AuditResult]]


@dataclass(frozen=True)
class CheckSpec:
    """A registered check: stable title plus the coroutine that evaluates it."""
    title: str
    func: CheckFunc
