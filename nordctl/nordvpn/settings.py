"""Apply Settings to the nordvpn CLI one field at a time."""

from typing import Iterable, Optional

from .manager import NordVPNManager
from .models import IPAddress, Protocol, Settings, Technology


def _flag(enabled: bool) -> str:
    return "true" if enabled else "false"


class SettingsApplier:
    """
    Push Settings fields to nordvpn.

    Every setter issues one `nordvpn set` call and writes the field into
    `settings` only when that call succeeded. There is no transaction:
    when update() fails half way, the fields before the failing one are
    already applied both in the tool and in `settings`.
    """

    def __init__(self, manager: NordVPNManager, settings: Settings):
        self.manager = manager
        self.settings = settings

    def update(self) -> "SettingsApplier":
        """Apply every field in order, stopping at the first CliError."""
        s = self.settings
        self.set_technology(s.technology)
        self.set_protocol(s.protocol)
        self.set_firewall(s.firewall)
        self.set_killswitch(s.killswitch)
        self.set_cybersec(s.cybersec)
        self.set_obfuscate(s.obfuscate)
        self.set_notify(s.notify)
        self.set_autoconnect(s.autoconnect)
        self.set_ipv6(s.ipv6)
        self.set_dns(s.dns)
        return self

    def set_technology(self, technology: Technology) -> "SettingsApplier":
        self.manager.set("technology", [technology.value])
        self.settings.technology = technology
        return self

    def set_protocol(self, protocol: Protocol) -> "SettingsApplier":
        self.manager.set("protocol", [protocol.value])
        self.settings.protocol = protocol
        return self

    def set_firewall(self, enabled: bool) -> "SettingsApplier":
        self.manager.set("firewall", [_flag(enabled)])
        self.settings.firewall = enabled
        return self

    def set_killswitch(self, enabled: bool) -> "SettingsApplier":
        self.manager.set("killswitch", [_flag(enabled)])
        self.settings.killswitch = enabled
        return self

    def set_cybersec(self, enabled: bool) -> "SettingsApplier":
        self.manager.set("cybersec", [_flag(enabled)])
        self.settings.cybersec = enabled
        return self

    def set_obfuscate(self, enabled: Optional[bool]) -> "SettingsApplier":
        # None means unsupported by the technology, sent as off
        self.manager.set("obfuscate", [_flag(bool(enabled))])
        self.settings.obfuscate = enabled
        return self

    def set_notify(self, enabled: bool) -> "SettingsApplier":
        self.manager.set("notify", [_flag(enabled)])
        self.settings.notify = enabled
        return self

    def set_autoconnect(self, enabled: bool) -> "SettingsApplier":
        self.manager.set("autoconnect", [_flag(enabled)])
        self.settings.autoconnect = enabled
        return self

    def set_ipv6(self, enabled: bool) -> "SettingsApplier":
        self.manager.set("ipv6", [_flag(enabled)])
        self.settings.ipv6 = enabled
        return self

    def set_dns(self, addresses: Optional[Iterable[IPAddress]]) -> "SettingsApplier":
        if addresses is None:
            self.manager.set("dns", ["false"])
            self.settings.dns = None
        else:
            addresses = list(addresses)
            self.manager.set("dns", [str(address) for address in addresses])
            self.settings.dns = addresses
        return self
