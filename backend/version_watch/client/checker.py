from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Optional

from version_watch.core.compat import RangeConstraint, Version, parse_version
from version_watch.core.errors import VersionParseError


class PollOutcome(str, enum.Enum):
    compatible = 'compatible'
    incompatible = 'incompatible'
    fetch_error = 'fetch_error'
    parse_error = 'parse_error'


@dataclass(frozen=True, slots=True)
class CheckResult:
    outcome: PollOutcome
    message: str
    raw_version: Optional[str] = None
    version: Optional[Version] = None
    error: Optional[BaseException] = None

    @property
    def compatible(self) -> bool:
        return self.outcome is PollOutcome.compatible

    def summary(self) -> dict:
        return {
            'outcome': self.outcome.value,
            'message': self.message,
            'raw_version': self.raw_version,
            'version': str(self.version) if self.version is not None else None,
            'error': str(self.error) if self.error is not None else None,
        }


def check_compatibility(
    raw_version: Optional[str],
    constraint: RangeConstraint,
    *,
    fetch_error: Optional[BaseException] = None,
) -> CheckResult:
    """Classify one poll response against *constraint*.

    Pure: no logging and no I/O. A fetch failure short-circuits before any
    parsing, and a version that does not parse never reaches the constraint.
    """
    if fetch_error is not None:
        url = getattr(fetch_error, 'url', None)
        target = f" from {url}" if url else ""
        return CheckResult(
            PollOutcome.fetch_error,
            f"Error getting server info{target}: {fetch_error}",
            error=fetch_error,
        )

    try:
        version = parse_version(raw_version)  # type: ignore[arg-type]
    except VersionParseError as exc:
        return CheckResult(
            PollOutcome.parse_error,
            f"Server returned invalid version {raw_version!r}: {exc.reason or exc}",
            raw_version=raw_version,
            error=exc,
        )

    if constraint.check(version):
        return CheckResult(
            PollOutcome.compatible,
            f"Server version {raw_version} is compatible with {constraint}",
            raw_version=raw_version,
            version=version,
        )
    return CheckResult(
        PollOutcome.incompatible,
        f"Server version {raw_version} is NOT compatible with {constraint}",
        raw_version=raw_version,
        version=version,
    )
