# errors.py
from __future__ import annotations


class SwitcherError(RuntimeError):
    pass


class ConfigurationError(SwitcherError):
    pass


class NoEligibleDeviceError(SwitcherError):
    pass


class UpstreamEnumerationError(SwitcherError):
    pass


class UpstreamSetDefaultError(SwitcherError):
    pass
