"""
Air Raid Alerts
===============
Region payloads, matching against the monitored region list, and the
messages shown while an alert is raised.

The regional status service answers with a mapping of region key to
`{"name": ..., "alias": ..., "alertnow": ...}`.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

ALERT = "Alert!"
ALERT_MESSAGE = "Air Raid Alert{region}! Proceed to the nearest shelter!"
ALERT_OVER = "Over!"
ALERT_OVER_MESSAGE = "The Air Raid Alert is Over!"


@dataclass(frozen=True)
class AlertRegion:
    key: str
    name: str = ""
    alias: Optional[str] = None
    alert_now: bool = False

    @property
    def display_name(self) -> str:
        return self.alias or self.name or ""

    @classmethod
    def from_payload(cls, key: str, payload: Mapping[str, Any]) -> AlertRegion:
        name = payload.get("name")
        alias = payload.get("alias")
        return cls(
            key=str(key),
            name=name if isinstance(name, str) else "",
            alias=alias if isinstance(alias, str) and alias else None,
            alert_now=bool(payload.get("alertnow", False)),
        )

    def matches(self, monitored_name: str) -> bool:
        return (
            self.key == monitored_name
            or self.name.lower() == monitored_name
            or (self.alias is not None and self.alias.lower() == monitored_name)
        )


@dataclass(frozen=True)
class AlertUpdate:
    """One poll result, posted to the boot context inbox."""
    alert_now: bool
    lead: Optional[AlertRegion] = None


def parse_monitored(war: str) -> list[str]:
    return [name.strip() for name in war.lower().split(",") if name.strip()]


def match_regions(regions: Mapping[str, Any], monitored: list[str]) -> list[AlertRegion]:
    """Regions whose key, name or alias is monitored, in payload order."""
    matched = []
    for key, payload in regions.items():
        if not isinstance(payload, Mapping):
            continue
        region = AlertRegion.from_payload(key, payload)
        if any(region.matches(name) for name in monitored):
            matched.append(region)
    return matched


def evaluate(regions: Mapping[str, Any], war: str) -> AlertUpdate:
    """Reduce a status payload to a single update; the first alerting region leads."""
    for region in match_regions(regions, parse_monitored(war)):
        if region.alert_now:
            return AlertUpdate(alert_now=True, lead=region)
    return AlertUpdate(alert_now=False)


def alert_message(region: Optional[AlertRegion]) -> str:
    where = f" in {region.display_name}" if region is not None and region.display_name else ""
    return ALERT_MESSAGE.format(region=where)
