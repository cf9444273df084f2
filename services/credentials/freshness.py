"""Decide whether cached registry credentials can be trusted.

Decision tree, first match wins:

1. file absent -> create parent dir, UNKNOWN ("first login needed")
2. not owned by the current user -> one ownership remediation; still not
   owned -> FAIL (credential_file_permission)
3. not writable -> FAIL (credential_file_permission), no remediation
4. no entry for the registry -> UNKNOWN ("needs auth entry")
5. older than max age -> UNKNOWN ("stale")
6. otherwise the connectivity probe decides

Ownership and writability come before content and age: a file the login
step cannot rewrite would only fail later, after a successful token fetch.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from contracts.errors import ConfigurationError, CredentialFilePermission, StaleCredentials
from contracts.interfaces import CredentialStoreProtocol
from contracts.outcomes import Outcome
from services.probes.connectivity import ConnectivityProbe

logger = logging.getLogger(__name__)

Reclaimer = Callable[[], Outcome]

BRANCH_ABSENT = "absent"
BRANCH_NOT_OWNED = "not_owned"
BRANCH_NOT_WRITABLE = "not_writable"
BRANCH_NO_ENTRY = "no_entry"
BRANCH_STALE = "stale"
BRANCH_CONNECTIVITY = "connectivity"


class CredentialFreshnessOracle:
    """Evaluate the credential file, delegating to a connectivity probe last."""

    def __init__(
        self,
        *,
        store: CredentialStoreProtocol,
        registry_host: str,
        max_age_seconds: int,
        connectivity: ConnectivityProbe,
        test_image: str,
        do_pull: bool = True,
        do_push: bool = False,
        current_uid: int,
        reclaim: Reclaimer | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._registry_host = registry_host
        self._max_age_seconds = int(max_age_seconds)
        self._connectivity = connectivity
        self._test_image = test_image
        self._do_pull = do_pull
        self._do_push = do_push
        self._current_uid = current_uid
        self._reclaim = reclaim
        self._clock = clock
        self.last_branch = ""

    def age_seconds(self) -> float:
        return self._clock() - self._store.mtime()

    def is_fresh(self) -> bool:
        """Age equal to the maximum still counts as fresh."""
        return self.age_seconds() <= self._max_age_seconds

    def evaluate(self) -> Outcome:
        """Walk the decision tree; filesystem errors become ConfigurationError."""
        try:
            return self._evaluate()
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise ConfigurationError(f"cannot read credential file {self._store.path}: {reason}") from exc

    def _evaluate(self) -> Outcome:
        store = self._store
        if not store.exists():
            store.ensure_parent()
            return self._branch(BRANCH_ABSENT, Outcome.unknown(f"first login needed: {store.path} does not exist"))

        if store.owner_uid() != self._current_uid:
            outcome = self._reclaim_ownership()
            if outcome is not None:
                return self._branch(BRANCH_NOT_OWNED, outcome)

        if not store.is_writable():
            return self._branch(
                BRANCH_NOT_WRITABLE,
                Outcome.failed(f"{store.path} is not writable", error=CredentialFilePermission.code),
            )

        if self._registry_host not in store.read_text():
            return self._branch(
                BRANCH_NO_ENTRY,
                Outcome.unknown(f"needs auth entry: {store.path} has no entry for {self._registry_host}"),
            )

        age = self.age_seconds()
        if age > self._max_age_seconds:
            return self._branch(
                BRANCH_STALE,
                Outcome.unknown(
                    f"stale: credentials are {int(age)}s old (max {self._max_age_seconds}s)",
                    error=StaleCredentials.code,
                ),
            )

        logger.debug("credential file is %ss old; probing registry", int(age))
        outcome = self._connectivity.verify(self._test_image, do_pull=self._do_pull, do_push=self._do_push)
        return self._branch(BRANCH_CONNECTIVITY, outcome)

    def _reclaim_ownership(self) -> Outcome | None:
        """Return a FAIL outcome when ownership cannot be restored, else None."""
        path = self._store.path
        logger.warning("%s is not owned by uid %s", path, self._current_uid)
        if self._reclaim is not None:
            attempt = self._reclaim()
            logger.info("ownership remediation for %s: %s %s", path, attempt.kind.value, attempt.reason)
            if self._store.owner_uid() == self._current_uid:
                return None
            detail = attempt.reason or "ownership unchanged"
        else:
            detail = "no ownership remediation available"
        return Outcome.failed(
            f"{path} is not owned by the current user ({detail})",
            error=CredentialFilePermission.code,
        )

    def _branch(self, name: str, outcome: Outcome) -> Outcome:
        self.last_branch = name
        return outcome
