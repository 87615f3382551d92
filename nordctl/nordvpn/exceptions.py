"""Custom exceptions for NordVPN CLI management."""

from enum import Enum
from typing import Optional, Sequence


class VPNError(Exception):
    """Base exception for VPN-related errors."""
    pass


class ConfigurationError(VPNError):
    """Raised when there's an issue with the nordctl configuration"""
    pass


class RegexField(Enum):
    """Every parse target and every mandatory named field a pattern can miss."""
    ACCOUNT = "account"
    ACCOUNT_EMAIL = "account.email"
    ACCOUNT_ACTIVE = "account.active"
    ACCOUNT_EXPIRES = "account.expires"
    CITIES = "cities"
    CONNECT = "connect"
    COUNTRIES = "countries"
    GROUPS = "groups"
    LOGIN = "login"
    SETTINGS = "settings"
    SETTINGS_TECHNOLOGY = "settings.technology"
    SETTINGS_PROTOCOL = "settings.protocol"
    SETTINGS_FIREWALL = "settings.firewall"
    SETTINGS_KILLSWITCH = "settings.killswitch"
    SETTINGS_CYBERSEC = "settings.cybersec"
    SETTINGS_OBFUSCATE = "settings.obfuscate"
    SETTINGS_NOTIFY = "settings.notify"
    SETTINGS_AUTOCONNECT = "settings.autoconnect"
    SETTINGS_IPV6 = "settings.ipv6"
    SETTINGS_DNS = "settings.dns"
    STATUS = "status"
    STATUS_HOSTNAME = "status.hostname"
    STATUS_COUNTRY = "status.country"
    STATUS_CITY = "status.city"
    STATUS_IP = "status.ip"
    STATUS_TECHNOLOGY = "status.technology"
    STATUS_PROTOCOL = "status.protocol"
    STATUS_TRANSFER = "status.transfer"
    STATUS_UPTIME = "status.uptime"
    VERSION = "version"


class CliError(VPNError):
    """
    Base exception for failures of a nordvpn invocation.

    Every subclass keeps the command line that failed so the error can be
    shown without re-running or re-parsing anything.
    """
    message = "nordvpn command failed"

    def __init__(self, command: Optional[Sequence[str]] = None, message: Optional[str] = None):
        self.command: list[str] = list(command) if command else []
        super().__init__(message or self.message)

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def __str__(self) -> str:
        text = super().__str__()
        if self.command:
            return f"{text}: {self.command_line}"
        return text


class IoError(CliError):
    """Raised when the command cannot be spawned"""
    message = "unable to create command"


class BadEncoding(CliError):
    """Raised when stdout is not valid UTF-8"""
    message = "failed to get command output as UTF-8"


class CommandTimeout(CliError):
    """Raised when the command does not finish in time"""
    message = "command timed out"


class FailedCommand(CliError):
    """Raised when the command exits unsuccessfully"""
    message = "command terminated unsuccessfully"


class BadOutput(CliError):
    """Raised when the output matches none of the expected shapes"""
    message = "command output did not match as expected"


class RegexError(CliError):
    """Raised when a pattern, or one named field of it, failed to match"""
    message = "a regex pattern failed to match"

    def __init__(self, field: RegexField, command: Optional[Sequence[str]] = None):
        self.field = field
        super().__init__(command, f"{self.message} ({field.value})")


class InvalidSettingName(CliError):
    """Raised when the setting does not exist"""
    message = "setting does not exist"

    def __init__(self, name: str, command: Optional[Sequence[str]] = None):
        self.name = name
        super().__init__(command, f"{self.message}: {name}")


class InvalidSettingValue(CliError):
    """Raised when the value given for a setting is malformed or invalid"""
    message = "the provided value for a setting is malformed or invalid"

    def __init__(self, name: str, values: Sequence[str], command: Optional[Sequence[str]] = None):
        self.name = name
        self.values = list(values)
        super().__init__(command, f"{self.message}: {name} {' '.join(self.values)}")
