"""
Version-gated capabilities.

Every API path whose availability depends on the cluster version lives in
CAPABILITIES. Adding a gated call means adding a row here, not another
``if version.major >= ...`` at the call site.

Only (major, minor) is compared; patch releases never gate a capability.

When no version has been detected yet, each capability decides for itself
what to assume:
  - assume_newest=True: behave as on the newest cluster (minimums pass,
    modern path is used, removals apply);
  - assume_newest=False: behave as on an old cluster (removals don't apply).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from elastic_explorer.errors import UnsupportedError
from elastic_explorer.es.version import RemoteVersion


def _fmt(level: tuple[int, int]) -> str:
    return f"{level[0]}.{level[1]}"


@dataclass(frozen=True)
class Capability:
    name: str
    description: str
    path: str
    minimum: tuple[int, int] | None = None
    removed_in: tuple[int, int] | None = None
    # Used below the minimum instead of raising UnsupportedError.
    fallback_path: str | None = None
    assume_newest: bool = True

    def resolve(self, version: RemoteVersion | None) -> str:
        """Return the path to use on ``version``, or raise UnsupportedError."""
        if version is None:
            below_minimum = not self.assume_newest and self.minimum is not None
            removed = self.assume_newest and self.removed_in is not None
        else:
            level = version.feature_level
            below_minimum = self.minimum is not None and level < self.minimum
            removed = self.removed_in is not None and level >= self.removed_in

        if removed and self.removed_in:
            raise UnsupportedError(self.description, removed_in=_fmt(self.removed_in))
        if below_minimum and self.minimum:
            if self.fallback_path is not None:
                return self.fallback_path
            raise UnsupportedError(self.description, _fmt(self.minimum))
        return self.path


CAPABILITIES: dict[str, Capability] = {
    c.name: c
    for c in [
        Capability(
            name="sql",
            description="SQL API",
            path="/_sql",
            minimum=(7, 0),
        ),
        Capability(
            name="index_template_v2",
            description="Composable index templates",
            path="/_index_template",
            minimum=(7, 8),
            fallback_path="/_template",
        ),
        Capability(
            name="component_templates",
            description="Component templates",
            path="/_component_template",
            minimum=(7, 8),
        ),
        Capability(
            name="data_streams",
            description="Data streams",
            path="/_data_stream",
            minimum=(7, 9),
        ),
        Capability(
            name="legacy_templates",
            description="Legacy index templates",
            path="/_template",
            removed_in=(9, 0),
            assume_newest=False,
        ),
    ]
}


class VersionGate:
    """Maps a (possibly undetected) cluster version to capability paths."""

    def __init__(
        self,
        version: RemoteVersion | None,
        capabilities: Mapping[str, Capability] | None = None,
    ) -> None:
        self.version = version
        self.capabilities = CAPABILITIES if capabilities is None else capabilities

    def _capability(self, name: str) -> Capability:
        try:
            return self.capabilities[name]
        except KeyError:
            raise KeyError(f"Unknown capability: {name}") from None

    def path_for(self, name: str) -> str:
        """Path variant for a capability. Raises UnsupportedError if unavailable."""
        return self._capability(name).resolve(self.version)

    def require(self, name: str) -> None:
        self.path_for(name)

    def supports(self, name: str) -> bool:
        try:
            self.path_for(name)
        except UnsupportedError:
            return False
        return True
