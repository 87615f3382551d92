"""Command templates and builders for the nordvpn CLI."""

from typing import Optional
from dataclasses import dataclass

from .exceptions import VPNError


class CommandError(VPNError):
    """Base exception for command-related errors."""
    pass


class ValidationError(CommandError):
    """Raised when command validation fails."""
    pass


@dataclass
class Command:
    """Command builder with validation."""
    base_cmd: list[str]
    _valid_subcommands: Optional[frozenset[str]] = None

    def _validate_subcommand(self, name: str) -> None:
        """Validate subcommand if validation rules exist."""
        if self._valid_subcommands is not None and name not in self._valid_subcommands:
            valid = ", ".join(sorted(self._valid_subcommands))
            raise ValidationError(
                f"Invalid subcommand '{name}' for command {self.base_cmd[0]}. "
                f"Valid subcommands are: {valid}"
            )

    def _validate_executable(self) -> None:
        """Validate that base command exists."""
        if not self.base_cmd or not self.base_cmd[0]:
            raise ValidationError("Command cannot be empty")

    @staticmethod
    def _validate_arg(arg: str) -> None:
        if not isinstance(arg, str) or not arg.strip():
            raise ValidationError(f"Invalid argument {arg!r}: arguments must be non-empty strings")

    @classmethod
    def from_str(cls, cmd: str, valid_subcommands: Optional[frozenset[str]] = None) -> 'Command':
        """Create command from string with optional validation rules."""
        command = cls(cmd.split(), valid_subcommands)
        command._validate_executable()
        return command

    def with_program(self, program: str) -> 'Command':
        """Swap the executable, keeping arguments and rules."""
        command = Command([program] + self.base_cmd[1:], self._valid_subcommands)
        command._validate_executable()
        return command

    def with_subcommand(self, name: str) -> 'Command':
        """Add subcommand with validation."""
        self._validate_subcommand(name)
        return Command(self.base_cmd + [name], self._valid_subcommands)

    def with_arg(self, arg: str) -> 'Command':
        """Add single argument."""
        self._validate_arg(arg)
        return Command(self.base_cmd + [arg], self._valid_subcommands)

    def with_args(self, *args: str) -> 'Command':
        """Add multiple arguments."""
        for arg in args:
            self._validate_arg(arg)
        return Command(self.base_cmd + list(args), self._valid_subcommands)

    def build(self) -> list[str]:
        """Get final command list."""
        self._validate_executable()
        return list(self.base_cmd)


NORDVPN_SUBCOMMANDS = frozenset({
    'account',
    'cities',
    'connect',
    'countries',
    'disconnect',
    'groups',
    'login',
    'logout',
    'set',
    'settings',
    'status',
    'version',
})


NORDVPN = Command.from_str("nordvpn", valid_subcommands=NORDVPN_SUBCOMMANDS)
