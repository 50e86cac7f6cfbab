from __future__ import annotations
"""Version compatibility helpers: semver parsing and range constraints.

Versions compare on their numeric ``MAJOR.MINOR.PATCH`` release only. A
pre-release label (``0.1.1-dev``) is kept for display but never changes the
outcome of a comparison, so ``0.1.1-dev`` satisfies exactly the same ranges
as ``0.1.1``.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from packaging import version as _v

from version_watch.core.errors import InvalidRangeError, VersionParseError

# Longest prefixes first so ">=" is not read as ">".
_PREFIXES: Tuple[str, ...] = (">=", "<=", "==", "!=", ">", "<", "=", "^", "~")


def _parse_release(text: str) -> _v.Version:
    """Parse strict ``MAJOR.MINOR.PATCH[+build]`` text; raise ValueError otherwise."""
    # packaging tolerates surrounding whitespace, a "v" prefix and mixed case;
    # callers have already removed the single allowed "v".
    if not text[:1].isdigit() or text != text.strip():
        raise ValueError("expected MAJOR.MINOR.PATCH")
    try:
        parsed = _v.Version(text)
    except _v.InvalidVersion as exc:
        raise ValueError("expected MAJOR.MINOR.PATCH") from exc
    if (
        len(parsed.release) != 3
        or parsed.epoch
        or parsed.pre is not None
        or parsed.post is not None
        or parsed.dev is not None
    ):
        raise ValueError("expected MAJOR.MINOR.PATCH")
    return parsed


@dataclass(frozen=True, order=True)
class Version:
    major: int = field(compare=False)
    minor: int = field(compare=False)
    patch: int = field(compare=False)
    prerelease: Tuple[str, ...] = field(default=(), compare=False)
    build: Optional[str] = field(default=None, compare=False)
    # Ordering, equality and hashing all go through the numeric release.
    release: _v.Version = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "release", _v.Version(f"{self.major}.{self.minor}.{self.patch}"))

    @property
    def core(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + self.build
        return text


def parse_version(raw: str) -> Version:
    """Parse a reported version string such as ``v0.1.1-dev``.

    A single leading ``v`` is dropped and everything after the first ``-`` is
    treated as the pre-release label. The remainder must be exactly
    ``MAJOR.MINOR.PATCH`` (optionally followed by ``+build`` metadata).

    Raises:
        VersionParseError: carrying the original *raw* value.
    """
    if not isinstance(raw, str) or not raw:
        raise VersionParseError(raw, "empty version string")

    text = raw[1:] if raw.startswith("v") else raw
    core_text, dash, label = text.partition("-")
    try:
        parsed = _parse_release(core_text)
    except ValueError as exc:
        raise VersionParseError(raw, str(exc)) from exc

    build = parsed.local
    prerelease: Tuple[str, ...] = ()
    if dash:
        label, _, label_build = label.partition("+")
        prerelease = tuple(part for part in label.split(".") if part)
        build = build or label_build or None
    major, minor, patch = parsed.release
    return Version(major, minor, patch, prerelease, build)


@dataclass(frozen=True)
class Comparator:
    op: str
    version: Version

    def matches(self, version: Version) -> bool:
        current, target = version.release, self.version.release
        if self.op in ("==", "="):
            return current == target
        if self.op == "!=":
            return current != target
        if self.op == ">=":
            return current >= target
        if self.op == ">":
            return current > target
        if self.op == "<=":
            return current <= target
        if self.op == "<":
            return current < target
        raise ValueError(f"unknown operator {self.op!r}")

    def __str__(self) -> str:
        return f"{self.op}{self.version}"


@dataclass(frozen=True)
class RangeConstraint:
    """Conjunction of comparator clauses parsed from *expression*."""

    expression: str
    clauses: Tuple[Comparator, ...]

    def check(self, version: Version) -> bool:
        return all(clause.matches(version) for clause in self.clauses)

    def __str__(self) -> str:
        return self.expression


def _tokenize(expression: str) -> list[str]:
    tokens = expression.replace(",", " ").split()
    clauses: list[str] = []
    pending: str | None = None
    for token in tokens:
        if pending is not None:
            clauses.append(pending + token)
            pending = None
        elif token in _PREFIXES:
            pending = token
        else:
            clauses.append(token)
    if pending is not None:
        raise InvalidRangeError(expression, pending, "operator without a version")
    return clauses


def _parse_clause(expression: str, clause: str) -> Tuple[Comparator, ...]:
    if clause == "||":
        raise InvalidRangeError(expression, clause, "OR-groups are not supported")

    op = "="
    target = clause
    for candidate in _PREFIXES:
        if clause.startswith(candidate):
            op = candidate
            target = clause[len(candidate):]
            break

    literal = target[1:] if target.startswith("v") else target
    try:
        if "-" in literal or "+" in literal:
            raise ValueError("pre-release and build labels are not allowed in ranges")
        release = _parse_release(literal)
    except ValueError as exc:
        raise InvalidRangeError(expression, clause, "expected an operator followed by MAJOR.MINOR.PATCH") from exc
    version = Version(*release.release)

    if op == "^":
        if version.major:
            upper = Version(version.major + 1, 0, 0)
        elif version.minor:
            upper = Version(0, version.minor + 1, 0)
        else:
            upper = Version(0, 0, version.patch + 1)
        return (Comparator(">=", version), Comparator("<", upper))
    if op == "~":
        return (Comparator(">=", version), Comparator("<", Version(version.major, version.minor + 1, 0)))
    return (Comparator(op, version),)


def parse_range(expression: str) -> RangeConstraint:
    """Parse a range such as ``">=0.1.0 <0.2.0"`` into a :class:`RangeConstraint`.

    Raises:
        InvalidRangeError: naming the offending clause and the full expression.
    """
    if not isinstance(expression, str) or not expression.strip():
        raise InvalidRangeError(str(expression), None, "empty expression")

    tokens = _tokenize(expression)
    if not tokens:
        raise InvalidRangeError(expression, None, "empty expression")
    clauses: list[Comparator] = []
    for clause in tokens:
        clauses.extend(_parse_clause(expression, clause))
    return RangeConstraint(expression=expression, clauses=tuple(clauses))


def version_satisfies(actual: Optional[str], requirement: Union[str, RangeConstraint, None]) -> bool:
    """Evaluate whether *actual* satisfies the semver-like *requirement* expression.

    An empty requirement accepts everything; an unparsable *actual* never
    satisfies. An unparsable requirement raises :class:`InvalidRangeError`.
    """
    if requirement is None or (isinstance(requirement, str) and not requirement.strip()):
        return True
    constraint = requirement if isinstance(requirement, RangeConstraint) else parse_range(requirement)
    try:
        current = parse_version(actual)  # type: ignore[arg-type]
    except VersionParseError:
        return False
    return constraint.check(current)
