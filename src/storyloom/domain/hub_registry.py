"""Hub exclusion graph: maps (hub, chosen target) to the branch ids it burns."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from storyloom.domain.defs import ExclusionRuleDef, HubConfigDef

HubLookup = Mapping[str, Mapping[str, tuple[str, ...]]]


@dataclass(frozen=True)
class HubRegistry:
    """Read-only nested lookup ``hub id -> target id -> burn list``."""

    hubs: HubLookup = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, hub_id: str, target_id: str) -> tuple[str, ...]:
        """Return the burn list for a hub choice; unknown hubs or targets burn nothing."""
        return self.hubs.get(hub_id, {}).get(target_id, ())

    def __contains__(self, hub_id: object) -> bool:
        return hub_id in self.hubs

    def __len__(self) -> int:
        return len(self.hubs)


def build_hub_registry(hubs: Iterable[HubConfigDef | Mapping[str, object]] | None) -> HubRegistry:
    """Build a registry from typed hub configs or their JSON wire format.

    Malformed entries are skipped; a later entry for the same hub id replaces
    an earlier one.
    """
    table: dict[str, Mapping[str, tuple[str, ...]]] = {}
    if not isinstance(hubs, Iterable) or isinstance(hubs, (str, bytes, Mapping)):
        return HubRegistry()
    for hub in hubs:
        config = _coerce_hub(hub)
        if config is None:
            continue
        options: dict[str, tuple[str, ...]] = {}
        for rule in config.options:
            options[rule.target] = rule.burns
        table[config.id] = MappingProxyType(options)
    return HubRegistry(MappingProxyType(table))


def lookup_burns(registry: HubRegistry, hub_id: str, target_id: str) -> tuple[str, ...]:
    return registry.lookup(hub_id, target_id)


class HubRegistryCache:
    """Rebuilds the registry only when handed a different input object."""

    def __init__(self) -> None:
        self._source: object = None
        self._registry = HubRegistry()

    def get(self, hubs: Sequence[HubConfigDef | Mapping[str, object]] | None) -> HubRegistry:
        if hubs is not self._source:
            self._source = hubs
            self._registry = build_hub_registry(hubs)
        return self._registry


def _coerce_hub(hub: object) -> HubConfigDef | None:
    if isinstance(hub, HubConfigDef):
        return hub
    if not isinstance(hub, Mapping):
        return None
    hub_id = hub.get("id")
    raw_options = hub.get("options")
    if not isinstance(hub_id, str) or not isinstance(raw_options, list):
        return None
    rules = [rule for rule in (coerce_exclusion_rule(entry) for entry in raw_options) if rule]
    return HubConfigDef(id=hub_id, options=tuple(rules))


def coerce_exclusion_rule(entry: object) -> ExclusionRuleDef | None:
    """Return a rule from its wire mapping, or None when it is malformed."""
    if isinstance(entry, ExclusionRuleDef):
        return entry
    if not isinstance(entry, Mapping):
        return None
    target = entry.get("target")
    burns = entry.get("burns")
    if not isinstance(target, str) or not isinstance(burns, list):
        return None
    return ExclusionRuleDef(target=target, burns=tuple(item for item in burns if isinstance(item, str)))
