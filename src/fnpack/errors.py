# errors.py
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class PackError(Exception):
    """
    Structured packaging error with enough context for:
      - clean CLI output
      - debugging without full tracebacks
    """
    kind: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class BundleError(PackError):
    def __init__(self, message: str, **details):
        super().__init__(kind="bundle_failed", message=message, details=details)


class ContractError(PackError):
    """The loaded artifact does not expose get_config/run_step."""

    def __init__(self, message: str, **details):
        super().__init__(kind="contract_not_satisfied", message=message, details=details)


class UnsupportedStepFunctions(PackError):
    def __init__(self, step_ids: list[str]):
        super().__init__(
            kind="unsupported_config",
            message="Step functions are not yet supported",
            details={"steps": ", ".join(step_ids)},
        )
        self.step_ids = step_ids


class DeployFailure(PackError):
    def __init__(self, exit_code: int | None, reason: str | None = None):
        details = {"exit_code": exit_code}
        if reason:
            details["reason"] = reason
        super().__init__(kind="deploy_failed", message="Deploy command failed", details=details)
        self.exit_code = exit_code
        self.reason = reason
