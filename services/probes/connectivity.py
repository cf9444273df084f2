"""End-to-end pull/push probe used as ground truth for cached credentials."""

from __future__ import annotations

import logging

from contracts.errors import StaleCredentials
from contracts.interfaces import CommandRunnerProtocol, ContainerRuntimeProtocol
from contracts.outcomes import Outcome

logger = logging.getLogger(__name__)

STALE_DESPITE_FRESH = "auth appears stale despite fresh timestamp"


class ConnectivityProbe:
    """Pull and/or push a known test image through the container runtime."""

    def __init__(
        self,
        *,
        runtime: ContainerRuntimeProtocol,
        runner: CommandRunnerProtocol | None = None,
    ) -> None:
        self._runtime = runtime
        self._runner = runner

    def verify(self, test_image: str, *, do_pull: bool, do_push: bool) -> Outcome:
        """Return PASS only when every enabled probe succeeds."""
        if not (do_pull or do_push):
            return Outcome.unknown("no connectivity probe enabled")
        if not test_image:
            return Outcome.unknown("no test image configured")

        probes = []
        if do_pull:
            probes.append(("pull", self._runtime.pull))
        if do_push:
            probes.append(("push", self._runtime.push))

        for label, probe in probes:
            result = probe(test_image)
            if not result.ok:
                logger.info("%s of %s failed with exit code %s", label, test_image, result.exit_code)
                if self._runner is not None:
                    self._runner.persist(result, f"connectivity.{label}")
                return Outcome.unknown(f"{STALE_DESPITE_FRESH} ({label} failed)", error=StaleCredentials.code)
            logger.debug("%s of %s succeeded", label, test_image)
        return Outcome.passed("registry reachable with cached credentials")
