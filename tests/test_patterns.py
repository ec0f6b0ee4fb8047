from __future__ import annotations

from typing import Any, List

import pytest

from errors import ConfigurationError
from models import Device, PatternSet
from patterns import DeviceFilter, ReEngine, is_eligible


def _dev(name: str, desc: str = "", idx: int = 0) -> Device:
    return Device(id=idx, name=name, description=desc)


def test_empty_pattern_set_accepts_everything() -> None:
    flt = DeviceFilter.from_pattern_set(PatternSet())
    for d in (_dev("a"), _dev(""), _dev("alsa_output.pci", "Built-in Audio")):
        assert flt.is_eligible(d)


def test_include_name_is_substring_search() -> None:
    ps = PatternSet(include_names=["analog-stereo"])
    assert is_eligible(_dev("alsa_output.pci-0000_00_1f.3.analog-stereo"), ps)
    assert not is_eligible(_dev("alsa_output.pci-0000_00_1f.3.hdmi-stereo"), ps)


def test_description_match_is_enough_when_name_does_not_match() -> None:
    ps = PatternSet(include_names=["^nothing$"], include_descriptions=["Headset"])
    assert is_eligible(_dev("bluez_sink.00_11", "WH-1000 Headset"), ps)
    assert not is_eligible(_dev("bluez_sink.00_11", "Speakers"), ps)


def test_only_description_includes_still_filter() -> None:
    ps = PatternSet(include_descriptions=["Headset"])
    assert not is_eligible(_dev("headset_sink", "Speakers"), ps)


def test_exclude_wins_over_include() -> None:
    ps = PatternSet(include_names=["usb"], exclude_descriptions=["Astro"])
    assert not is_eligible(_dev("alsa_output.usb-astro", "Astro A50 Voice"), ps)
    assert is_eligible(_dev("alsa_output.usb-other", "DAC"), ps)


def test_exclude_without_include() -> None:
    ps = PatternSet(exclude_names=["hdmi"])
    assert is_eligible(_dev("analog-stereo"), ps)
    assert not is_eligible(_dev("hdmi-stereo"), ps)


def test_inline_case_insensitive_flag() -> None:
    ps = PatternSet(include_names=["(?i)astro.*a50.*game"])
    assert is_eligible(_dev("usb-Astro_Gaming_Astro_A50-00.Game"), ps)
    assert not is_eligible(_dev("usb-Astro_Gaming_Astro_A50-00.Voice"), ps)


def test_case_sensitive_by_default() -> None:
    assert not is_eligible(_dev("ASTRO"), PatternSet(include_names=["astro"]))


def test_invalid_pattern_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="exclude_descriptions"):
        DeviceFilter.from_pattern_set(PatternSet(include_names=["ok"], exclude_descriptions=["(unclosed"]))


def test_invalid_pattern_fails_before_any_device_is_checked() -> None:
    seen: List[str] = []

    class Engine(ReEngine):
        def matches(self, matcher: Any, text: str) -> bool:
            seen.append(text)
            return super().matches(matcher, text)

    with pytest.raises(ConfigurationError):
        is_eligible(_dev("x"), PatternSet(include_names=["x", "["]), engine=Engine())
    assert seen == []


class _LiteralEngine:
    """Plain substring matching, no regex involved."""

    def compile(self, pattern: str) -> str:
        if pattern == "bad":
            raise ConfigurationError("bad pattern")
        return pattern

    def matches(self, matcher: str, text: str) -> bool:
        return matcher in text


def test_custom_engine_is_used() -> None:
    ps = PatternSet(include_names=["a.b"])
    assert is_eligible(_dev("xa.by"), ps, engine=_LiteralEngine())
    assert not is_eligible(_dev("xaXby"), ps, engine=_LiteralEngine())
    # the same pattern is a regex for the default engine
    assert is_eligible(_dev("xaXby"), ps)


def test_custom_engine_errors_propagate() -> None:
    with pytest.raises(ConfigurationError, match="include_descriptions"):
        DeviceFilter.from_pattern_set(PatternSet(include_descriptions=["bad"]), engine=_LiteralEngine())
