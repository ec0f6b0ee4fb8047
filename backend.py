# backend.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pulsectl

from errors import UpstreamEnumerationError, UpstreamSetDefaultError
from models import Device

logger = logging.getLogger(__name__)


def device_from_sink(sink: Any) -> Device:
    idx = int(sink.index)
    name = getattr(sink, "name", None)
    desc = getattr(sink, "description", None)
    return Device(
        id=idx,
        name=name if name is not None else f"[unknown name {idx}]",
        description=desc if desc is not None else f"[unknown description {idx}]",
    )


class PulseSinkBackend:
    """
    Thin pulsectl wrapper: one connection per run, sinks re-read on every
    enumeration.
    """

    def __init__(self, pulse_client_name: str = "pulse-switcher") -> None:
        self._pulse_client_name = pulse_client_name
        self._pulse: Optional[pulsectl.Pulse] = None
        self._sinks: Dict[int, Any] = {}

    def __enter__(self) -> "PulseSinkBackend":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _pulse_connect(self) -> pulsectl.Pulse:
        if self._pulse is None:
            self._pulse = pulsectl.Pulse(self._pulse_client_name)
        return self._pulse

    def close(self) -> None:
        if self._pulse is not None:
            self._pulse.close()
        self._pulse = None

    def _sink_list(self) -> List[Any]:
        try:
            sinks = list(self._pulse_connect().sink_list())
        except pulsectl.PulseError as e:
            raise UpstreamEnumerationError(f"failed to list devices: {e}") from e
        self._sinks = {int(s.index): s for s in sinks}
        return sinks

    def list_devices(self) -> List[Device]:
        return [device_from_sink(s) for s in self._sink_list()]

    def default_device_id(self) -> Optional[int]:
        try:
            name = self._pulse_connect().server_info().default_sink_name
        except pulsectl.PulseError as e:
            raise UpstreamEnumerationError(f"failed to get default device: {e}") from e
        if not name:
            return None

        if not self._sinks:
            self._sink_list()
        for idx, s in self._sinks.items():
            if s.name == name:
                return idx
        logger.debug("default sink %r is not in the sink list", name)
        return None

    def set_default(self, device_id: int) -> None:
        sink = self._sinks.get(device_id)
        if sink is None:
            self._sink_list()
            sink = self._sinks.get(device_id)
        if sink is None:
            raise UpstreamSetDefaultError(f"failed setting default device: no sink with index {device_id}")

        try:
            self._pulse_connect().default_set(sink)
        except pulsectl.PulseError as e:
            raise UpstreamSetDefaultError(f"failed setting default device: {e}") from e
