"""Tests for applying settings through the nordvpn CLI."""

from ipaddress import IPv4Address, IPv6Address

import pytest

from nordctl.nordvpn.exceptions import BadOutput, InvalidSettingValue
from nordctl.nordvpn.manager import NordVPNManager
from nordctl.nordvpn.models import Protocol, Settings, Technology
from nordctl.nordvpn.settings import SettingsApplier
from nordctl.nordvpn.utils import CommandResult


class FakeNordVPN:
    """
    Minimal stateful stand-in for the nordvpn binary: `set` changes the
    stored values, `settings` prints them back the way the tool does.
    """

    FLAGS = {
        "firewall": "Firewall",
        "killswitch": "Kill Switch",
        "cybersec": "CyberSec",
        "obfuscate": "Obfuscate",
        "notify": "Notify",
        "autoconnect": "Auto-connect",
        "ipv6": "IPv6",
    }

    def __init__(self, reject=None):
        self.values = {
            "technology": "OPENVPN",
            "protocol": "UDP",
            "firewall": "enabled",
            "killswitch": "disabled",
            "cybersec": "disabled",
            "obfuscate": "disabled",
            "notify": "disabled",
            "autoconnect": "disabled",
            "ipv6": "disabled",
            "dns": "disabled",
        }
        self.reject = reject or set()
        self.calls = []

    def __call__(self, cmd):
        self.calls.append(list(cmd))
        subcommand, args = cmd[1], cmd[2:]
        if subcommand == "settings":
            return CommandResult(cmd, 0, self._render())
        if subcommand == "set":
            return self._set(cmd, args[0], args[1:])
        return CommandResult(cmd, 1, "Command not handled\n")

    def _set(self, cmd, name, values):
        if name in self.reject:
            return CommandResult(cmd, 1, "The command you entered is not valid.\n")
        if name in ("technology", "protocol"):
            self.values[name] = values[0].upper()
        elif name == "dns":
            self.values[name] = "disabled" if values == ["false"] else ", ".join(values)
        elif name in self.FLAGS:
            self.values[name] = "enabled" if values == ["true"] else "disabled"
        else:
            return CommandResult(cmd, 1, f"Command '{name}' doesn't exist.\n")
        return CommandResult(cmd, 0, f"Setting '{name}' updated.\n")

    def _render(self):
        lines = [f"Technology: {self.values['technology']}"]
        if self.values["technology"] == "OPENVPN":
            lines.append(f"Protocol: {self.values['protocol']}")
        for name, label in self.FLAGS.items():
            if name == "obfuscate" and self.values["technology"] != "OPENVPN":
                continue
            lines.append(f"{label}: {self.values[name]}")
        lines.append(f"DNS: {self.values['dns']}")
        return "\n".join(lines) + "\n"


@pytest.fixture
def tool():
    return FakeNordVPN()


@pytest.fixture
def applier(tool):
    manager = NordVPNManager(runner=tool)
    return SettingsApplier(manager, manager.settings())


def test_initial_settings(applier):
    settings = applier.settings
    assert settings.technology is Technology.OPENVPN
    assert settings.protocol is Protocol.UDP
    assert settings.firewall is True
    assert settings.obfuscate is False
    assert settings.dns is None


def test_setter_sends_one_command(applier, tool):
    tool.calls.clear()
    applier.set_killswitch(True)
    assert tool.calls == [["nordvpn", "set", "killswitch", "true"]]
    assert applier.settings.killswitch is True


def test_setters_chain(applier):
    applier.set_notify(True).set_ipv6(True)
    assert applier.settings.notify is True
    assert applier.settings.ipv6 is True


def test_round_trip_through_settings_query(applier):
    manager = applier.manager
    applier.set_protocol(Protocol.TCP)
    applier.set_cybersec(True)
    applier.set_autoconnect(True)
    applier.set_dns([IPv4Address("1.1.1.1"), IPv6Address("2606:4700:4700::1111")])

    assert manager.settings() == applier.settings


def test_round_trip_nordlynx(applier):
    applier.set_technology(Technology.NORDLYNX).set_protocol(Protocol.UDP).set_obfuscate(None)
    queried = applier.manager.settings()
    assert queried.technology is Technology.NORDLYNX
    assert queried.protocol is Protocol.UDP
    assert queried.obfuscate is None
    assert queried == applier.settings


def test_dns_none_disables(applier, tool):
    applier.set_dns([IPv4Address("9.9.9.9")])
    applier.set_dns(None)
    assert tool.calls[-1] == ["nordvpn", "set", "dns", "false"]
    assert applier.settings.dns is None


def test_failed_set_leaves_field_untouched(tool):
    tool.reject = {"firewall"}
    manager = NordVPNManager(runner=tool)
    applier = SettingsApplier(manager, manager.settings())
    with pytest.raises(InvalidSettingValue) as exc:
        applier.set_firewall(False)
    assert exc.value.name == "firewall"
    assert exc.value.values == ["false"]
    assert applier.settings.firewall is True


def test_update_applies_every_field_in_order(applier, tool):
    tool.calls.clear()
    applier.update()
    assert [call[2] for call in tool.calls] == [
        "technology", "protocol", "firewall", "killswitch", "cybersec",
        "obfuscate", "notify", "autoconnect", "ipv6", "dns",
    ]


def test_update_stops_at_first_failure(tool):
    tool.reject = {"cybersec"}
    manager = NordVPNManager(runner=tool)
    wanted = Settings(
        technology=Technology.OPENVPN,
        protocol=Protocol.TCP,
        firewall=False,
        killswitch=True,
        cybersec=True,
        obfuscate=False,
        notify=True,
        autoconnect=True,
        ipv6=True,
        dns=None,
    )
    applier = SettingsApplier(manager, wanted)
    with pytest.raises(InvalidSettingValue):
        applier.update()

    names = [call[2] for call in tool.calls]
    assert names == ["technology", "protocol", "firewall", "killswitch", "cybersec"]
    # applied before the failure, nothing rolled back
    assert tool.values["protocol"] == "TCP"
    assert tool.values["killswitch"] == "enabled"
    assert tool.values["notify"] == "disabled"


def test_unknown_exit_is_bad_output():
    def broken(cmd):
        return CommandResult(cmd, 2, "Whoops! Cannot reach System Daemon.\n")

    with pytest.raises(BadOutput):
        NordVPNManager(runner=broken).set("firewall", ["true"])
