"""Data models for NordVPN CLI responses."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union

IPAddress = Union[IPv4Address, IPv6Address]


class Technology(Enum):
    """VPN technology"""
    OPENVPN = "OPENVPN"
    NORDLYNX = "NORDLYNX"

    @classmethod
    def parse(cls, token: str) -> "Technology":
        """Case-insensitive lookup, ValueError on anything unknown."""
        try:
            return cls(token.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown technology '{token}'")


class Protocol(Enum):
    """Transport protocol"""
    TCP = "TCP"
    UDP = "UDP"

    @classmethod
    def parse(cls, token: str) -> "Protocol":
        """Case-insensitive lookup, ValueError on anything unknown."""
        try:
            return cls(token.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown protocol '{token}'")


@dataclass
class Account:
    """Logged in account information"""
    email: str
    active: bool
    expires: date


@dataclass
class Connected:
    """Server reported by a successful connect"""
    country: str
    server: int
    hostname: str


@dataclass
class Transfer:
    """Bytes moved over the current connection"""
    received: int
    sent: int


@dataclass
class Status:
    """Current connection status"""
    hostname: str
    country: str
    city: str
    ip: IPAddress
    technology: Technology
    protocol: Protocol
    transfer: Transfer
    uptime: timedelta


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        major, minor, patch = (int(part) for part in text.strip().split("."))
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class Settings:
    """
    In-memory mirror of the nordvpn configuration.

    Fields are only written by SettingsApplier after the matching
    `nordvpn set` call succeeded. Not safe for concurrent mutation.
    """
    technology: Technology
    protocol: Protocol
    firewall: bool
    killswitch: bool
    cybersec: bool
    obfuscate: Optional[bool]
    notify: bool
    autoconnect: bool
    ipv6: bool
    dns: Optional[list[IPAddress]] = None


# Connect options. Each variant knows the positional arguments it adds
# after `nordvpn connect`.

@dataclass(frozen=True)
class ConnectOption:
    def args(self) -> list[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class Country(ConnectOption):
    name: str

    def args(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class Server(ConnectOption):
    name: str

    def args(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class CountryCode(ConnectOption):
    code: str

    def args(self) -> list[str]:
        return [self.code]


@dataclass(frozen=True)
class City(ConnectOption):
    name: str

    def args(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class Group(ConnectOption):
    name: str

    def args(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class CountryCity(ConnectOption):
    country: str
    city: str

    def args(self) -> list[str]:
        return [self.country, self.city]
