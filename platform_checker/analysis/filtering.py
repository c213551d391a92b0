"""Selection of the configurations a check scans."""

from __future__ import annotations

from typing import Optional

from platform_checker.models.dependency import ConfigurationView, DependencySnapshot


def select_configurations(
    snapshot: DependencySnapshot,
    names: Optional[list[str]] = None,
) -> list[ConfigurationView]:
    """Select configurations to scan.

    Test configurations are matched case-insensitively, so ``testCompile``
    and ``TestRuntime`` are both left out of the default selection.

    Args:
        snapshot: The project's dependency snapshot.
        names: Explicit configuration names. If None, every configuration
            whose name does not contain "test" is selected.

    Returns:
        The selected configurations, in the order given or declared. A name
        given more than once is selected once.

    Raises:
        ConfigurationError: If an explicitly named configuration does not exist.
    """
    if names is not None:
        return [snapshot.get_configuration(name) for name in dict.fromkeys(names)]
    return [c for c in snapshot.configurations if not c.is_test]
