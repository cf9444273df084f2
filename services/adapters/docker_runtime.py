"""Container runtime adapter backed by the ``docker`` CLI."""

from __future__ import annotations

from contracts.commands import CommandResult, LoginCommand
from contracts.interfaces import CommandRunnerProtocol


class DockerRuntime:
    """Thin wrapper running docker subcommands through a command runner."""

    def __init__(self, *, runner: CommandRunnerProtocol, name: str = "docker") -> None:
        self.name = name
        self._runner = runner

    def is_available(self) -> bool:
        return self._runner.which(self.name) is not None

    def pull(self, reference: str) -> CommandResult:
        return self._runner.run((self.name, "pull", reference))

    def push(self, reference: str) -> CommandResult:
        return self._runner.run((self.name, "push", reference))

    def login(self, command: LoginCommand) -> CommandResult:
        return self._runner.run(command.argv, stdin=command.secret or None)
