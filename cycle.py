# cycle.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

from models import Device, PatternSet, Selection
from patterns import DeviceFilter, RegexEngine

logger = logging.getLogger(__name__)


def _as_filter(filters: Union[PatternSet, DeviceFilter], engine: Optional[RegexEngine]) -> DeviceFilter:
    if isinstance(filters, DeviceFilter):
        return filters
    return DeviceFilter.from_pattern_set(filters, engine)


def eligible_devices(devices: Sequence[Device], filters: Union[PatternSet, DeviceFilter], engine: Optional[RegexEngine] = None) -> List[Device]:
    flt = _as_filter(filters, engine)
    return [d for d in devices if flt.is_eligible(d)]


def _position_of(eligible: Sequence[Device], device_id: Optional[int]) -> Optional[int]:
    if device_id is None:
        return None
    for i, d in enumerate(eligible):
        if d.id == device_id:
            return i
    return None


def select_next(
    devices: Sequence[Device],
    current_default_id: Optional[int],
    filters: Union[PatternSet, DeviceFilter],
    engine: Optional[RegexEngine] = None,
) -> Selection:
    """
    Pick the device that should become the default.

    The eligible devices keep the order `devices` came in. If the current
    default is one of them the next one is chosen, wrapping around at the end;
    otherwise the first eligible device is chosen. An empty eligible list is
    returned as a Selection without a device rather than raised.
    """
    eligible = eligible_devices(devices, filters, engine)
    if not eligible:
        logger.debug("no eligible devices among %d", len(devices))
        return Selection(eligible=[])

    pos = _position_of(eligible, current_default_id)
    if pos is None:
        logger.debug("current default %r is not eligible, using first match", current_default_id)
        return Selection(eligible=eligible, device=eligible[0])

    return Selection(
        eligible=eligible,
        device=eligible[(pos + 1) % len(eligible)],
        current_position=pos,
    )
