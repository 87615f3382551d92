"""NordVPN CLI management implementation."""

import configparser
from pathlib import Path
from typing import Iterable, Optional

from . import parsers
from .command_factory import NordVPNCommandFactory
from .exceptions import ConfigurationError
from .models import Account, ConnectOption, Connected, Settings, Status, Version
from .utils import CommandResult, CommandRunner, run_command
from ..logging_utility import logger

DEFAULT_BINARY = "nordvpn"
DEFAULT_TIMEOUT = 30.0


class NordVPNManager:
    """
    Typed front end for the nordvpn CLI.

    Each operation runs exactly one nordvpn command, parses its stdout and
    returns a fresh value or raises a CliError. Nothing is cached between
    calls; every call re-reads the state from the tool.
    """

    def __init__(self, config_file: Optional[str] = None, runner: Optional[CommandRunner] = None):
        self.config = self._load_config(config_file)
        self.binary = self.config.get("nordvpn", "binary", fallback=DEFAULT_BINARY)
        self.timeout = self._read_timeout(self.config)
        self.commands = NordVPNCommandFactory(self.binary)
        self._runner = runner

    @staticmethod
    def _load_config(config_file: Optional[str]) -> configparser.ConfigParser:
        config = configparser.ConfigParser()
        if config_file is not None:
            if Path(config_file).exists():
                config.read(config_file)
            else:
                logger.warning(f"Config file {config_file} not found, using defaults")
        return config

    @staticmethod
    def _read_timeout(config: configparser.ConfigParser) -> Optional[float]:
        raw = config.get("nordvpn", "timeout", fallback=str(DEFAULT_TIMEOUT))
        if raw.strip().lower() in ("none", "off", ""):
            return None
        try:
            timeout = float(raw)
        except ValueError:
            raise ConfigurationError(f"Invalid timeout '{raw}' in [nordvpn] section")
        if timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {timeout}")
        return timeout

    def _run(self, cmd: list[str]) -> CommandResult:
        if self._runner is not None:
            return self._runner(cmd)
        return run_command(cmd, timeout=self.timeout)

    def account(self) -> Optional[Account]:
        """Account details, None when not logged in."""
        return parsers.parse_account(self._run(self.commands.account()))

    def cities(self, country: str) -> list[str]:
        return parsers.parse_cities(self._run(self.commands.cities(country)))

    def connect(self, option: Optional[ConnectOption] = None) -> Connected:
        logger.info(f"Connecting with option {option}")
        connected = parsers.parse_connect(self._run(self.commands.connect(option)))
        logger.info(f"Connected to {connected.country} #{connected.server} ({connected.hostname})")
        return connected

    def countries(self) -> list[str]:
        return parsers.parse_countries(self._run(self.commands.countries()))

    def disconnect(self) -> bool:
        """True when a connection was dropped, False when none was up."""
        disconnected = parsers.parse_disconnect(self._run(self.commands.disconnect()))
        logger.info("Disconnected" if disconnected else "Disconnect requested while not connected")
        return disconnected

    def groups(self) -> list[str]:
        return parsers.parse_groups(self._run(self.commands.groups()))

    def login(self) -> Optional[str]:
        """URL to finish the login in a browser, None when already logged in."""
        return parsers.parse_login(self._run(self.commands.login()))

    def logout(self) -> bool:
        return parsers.parse_logout(self._run(self.commands.logout()))

    def set(self, setting: str, values: Iterable[str]) -> None:
        """
        Change one setting of the tool.

        Raises:
            InvalidSettingValue: the tool rejected the values
            InvalidSettingName: the tool does not know the setting
            BadOutput: any other non-zero exit
        """
        values = list(values)
        logger.info(f"Setting {setting} to {' '.join(values)}")
        result = self._run(self.commands.set(setting, values))
        parsers.check_set(result, setting, values)

    def settings(self) -> Settings:
        return parsers.parse_settings(self._run(self.commands.settings()))

    def status(self) -> Optional[Status]:
        """Current connection, None when disconnected."""
        return parsers.parse_status(self._run(self.commands.status()))

    def version(self) -> Version:
        return parsers.parse_version(self._run(self.commands.version()))
