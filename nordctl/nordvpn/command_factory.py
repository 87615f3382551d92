"""Factory for creating nordvpn commands."""

from typing import Iterable, Optional

from .commands import NORDVPN, Command
from .models import ConnectOption


class NordVPNCommandFactory:
    """Factory for creating nordvpn CLI commands."""

    def __init__(self, program: str = "nordvpn"):
        self.base: Command = NORDVPN.with_program(program)

    def _simple(self, subcommand: str) -> list[str]:
        return self.base.with_subcommand(subcommand).build()

    def account(self) -> list[str]:
        return self._simple("account")

    def cities(self, country: str) -> list[str]:
        return self.base.with_subcommand("cities").with_arg(country).build()

    def connect(self, option: Optional[ConnectOption] = None) -> list[str]:
        """Create connect command, the tool picks a server when option is None."""
        cmd = self.base.with_subcommand("connect")
        if option is not None:
            cmd = cmd.with_args(*option.args())
        return cmd.build()

    def countries(self) -> list[str]:
        return self._simple("countries")

    def disconnect(self) -> list[str]:
        return self._simple("disconnect")

    def groups(self) -> list[str]:
        return self._simple("groups")

    def login(self) -> list[str]:
        return self._simple("login")

    def logout(self) -> list[str]:
        return self._simple("logout")

    def set(self, setting: str, values: Iterable[str]) -> list[str]:
        """Create `set <setting> <values...>` command."""
        return self.base.with_subcommand("set").with_arg(setting).with_args(*values).build()

    def settings(self) -> list[str]:
        return self._simple("settings")

    def status(self) -> list[str]:
        return self._simple("status")

    def version(self) -> list[str]:
        return self._simple("version")
