"""Probes that observe the host and the registry."""

from services.probes.connectivity import ConnectivityProbe
from services.probes.subprocess_probe import SubprocessProbe

__all__ = ["ConnectivityProbe", "SubprocessProbe"]
