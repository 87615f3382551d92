"""Pytest fixtures for nordctl tests."""

import os
import tempfile

import pytest

os.environ.setdefault("NORDCTL_LOG_DIR", os.path.join(tempfile.gettempdir(), "nordctl-test-logs"))

from nordctl.nordvpn.manager import NordVPNManager  # noqa: E402
from nordctl.nordvpn.utils import CommandResult  # noqa: E402

# Captured nordvpn output, spinner prefix included where the tool prints one
STATUS_CONNECTED = """\r-\r  \rStatus: Connected
Current server: de1042.nordvpn.com
Country: Germany
City: Frankfurt
Server IP: 185.130.184.73
Current technology: NORDLYNX
Current protocol: UDP
Transfer: 2.00 MiB received, 500.00 KiB sent
Uptime: 1 hour 5 minutes 6 seconds
"""

STATUS_DISCONNECTED = "\r-\r  \rStatus: Disconnected\n"

ACCOUNT_ACTIVE = """Account Information:
Email Address: someone@example.com
VPN Service: Active (Expires on Sep 3rd, 2023)
"""

SETTINGS_OPENVPN = """Technology: OPENVPN
Protocol: TCP
Firewall: enabled
Kill Switch: disabled
CyberSec: enabled
Obfuscate: disabled
Notify: enabled
Auto-connect: disabled
IPv6: disabled
DNS: 103.86.96.100, 103.86.99.100
"""

SETTINGS_NORDLYNX = """Technology: NORDLYNX
Firewall: enabled
Firewall Mark: 0xe1f1
Routing: enabled
Kill Switch: enabled
Threat Protection Lite: disabled
Notify: disabled
Auto-connect: enabled
IPv6: enabled
Meshnet: disabled
DNS: disabled
"""

COUNTRIES = "Albania, Argentina, Australia, Austria, United_States\n"


class FakeRunner:
    """Stands in for run_command: replays canned output, records every argv."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, cmd):
        self.calls.append(list(cmd))
        stdout, returncode = self.responses.pop(0)
        return CommandResult(command=list(cmd), returncode=returncode, stdout=stdout)


@pytest.fixture
def result():
    """Build a CommandResult for a parser."""
    def _result(stdout, returncode=0, command=("nordvpn", "status")):
        return CommandResult(command=list(command), returncode=returncode, stdout=stdout)
    return _result


@pytest.fixture
def fake_manager():
    """Build a NordVPNManager whose commands return the given (stdout, exit) pairs."""
    def _manager(*responses):
        runner = FakeRunner(*responses)
        return NordVPNManager(runner=runner), runner
    return _manager
