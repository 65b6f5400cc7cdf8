"""Version actuality checks.

A consumer's recorded dependency range is *actual* when it points at the
dependency's current version. By default the exact ``major.minor.patch``
embedded in the range must equal the current version, so that a release
chain never skips a build when a real change exists. Packages that are
explicitly exempted, or that sit in a dependency cycle, only need to satisfy
the range: exact equality between two packages depending on each other can
never be reached.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import nodesemver

from libalibe.errors import RangeNotFoundError
from libalibe.workspace.manifest import ManifestSnapshot

EXACT_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")


@dataclass
class ActualityResult:
    """Outcome of checking several dependencies of one consumer.

    Attributes:
        all_actual: Every checked dependency is actual.
        stale_names: Dependencies that need refreshing, in input order.
    """

    all_actual: bool = True
    stale_names: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.all_actual


def extract_exact_version(declared_range: str) -> str | None:
    """Return the first ``major.minor.patch`` token of a range."""
    match = EXACT_VERSION_PATTERN.search(declared_range)
    return match.group(0) if match else None


def is_actual(
    consumer: ManifestSnapshot,
    dependency_name: str,
    actual_version: str | None,
    *,
    self_exempt: bool = False,
    in_cycle: bool = False,
    force_exact: bool = False,
) -> bool:
    """Check one dependency of a consumer.

    Args:
        consumer: Consumer manifest.
        dependency_name: Dependency manifest name.
        actual_version: Dependency's current version.
        self_exempt: The dependency declares itself accuracy exempt.
        in_cycle: The dependency participates in a dependency cycle.
        force_exact: Require exact equality regardless of exemptions.

    Returns:
        True if the declared range is actual.

    Raises:
        RangeNotFoundError: If the consumer does not declare the dependency.
    """
    declared_range = consumer.declared_range(dependency_name)
    if declared_range is None:
        raise RangeNotFoundError(consumer.name, dependency_name)

    exact = extract_exact_version(declared_range)
    if exact is None:
        return False

    if not actual_version or not nodesemver.valid(actual_version, False):
        return False

    loose = not force_exact and (
        dependency_name in consumer.accuracy_exempt_names or self_exempt or in_cycle
    )
    if loose:
        return bool(nodesemver.satisfies(actual_version, declared_range, False))

    return bool(nodesemver.eq(exact, actual_version, False))


def check_actuality(
    consumer: ManifestSnapshot,
    dependencies: Mapping[str, ManifestSnapshot],
    cycle_members: Iterable[str] = (),
    force_exact: bool = False,
) -> ActualityResult:
    """Check every suitable dependency of a consumer.

    Args:
        consumer: Consumer manifest.
        dependencies: Dependency manifest name to its current manifest.
        cycle_members: Manifest names of packages in a dependency cycle.
        force_exact: Require exact equality for every dependency.

    Returns:
        Aggregate result listing stale dependency names.
    """
    cycle = set(cycle_members)
    result = ActualityResult()

    for name, dependency in dependencies.items():
        actual = is_actual(
            consumer,
            name,
            dependency.version,
            self_exempt=dependency.self_accuracy_exempt,
            in_cycle=name in cycle,
            force_exact=force_exact,
        )
        if not actual:
            result.all_actual = False
            result.stale_names.append(name)

    return result
