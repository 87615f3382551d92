"""
Text patterns for nordvpn CLI output.

One composite pattern per report shape. A composite is the alternation of
its field patterns; the parsers merge the named groups of every match in the
output, so fields may come in any order and unknown lines are skipped.

Shared sub-patterns carry a GROUP_NAME placeholder and are instantiated with
`_named()` so account, status and settings match values the same way.
"""

import re
import threading
from typing import Iterator, Optional

# ============================================================
# Sentinel phrases
# ============================================================

NOT_LOGGED_IN = "You are not logged in."
ALREADY_LOGGED_IN = "You are already logged in."
LOGGED_OUT = "You are logged out."
NOT_CONNECTED = "You are not connected to NordVPN."
DISCONNECTED_FROM = "You are disconnected from NordVPN."
DISCONNECTED = "Disconnected"
INVALID_COMMAND = "The command you entered is not valid."

# Labels of optional lines; present but unmatched is a field error
UPTIME_LABEL = "Uptime:"
OBFUSCATE_LABEL = "Obfuscate:"


# ============================================================
# Shared sub-patterns
# ============================================================

LINE_END = r"[ \t]*(?:\r?\n|$)"
IPV4_OR_IPV6 = (
    r"(?P<GROUP_NAME>(?:[\da-fA-F]{0,4}:){1,7}[\da-fA-F]{0,4}"
    r"|(?:\d{1,3}\.){3}\d{1,3})"
)
OPENVPN_OR_NORDLYNX = r"(?P<GROUP_NAME>(?i:OPENVPN|NORDLYNX))"
TCP_OR_UDP = r"(?P<GROUP_NAME>(?i:TCP|UDP))"
ENABLED_OR_DISABLED = r"(?P<GROUP_NAME>(?i:enabled|disabled))"
BYTE_QUANTITY = r"(?P<GROUP_NAME>\d+(?:\.\d+)?[ \t]+[A-Za-z]+)"


def _named(template: str, group: str) -> str:
    return template.replace("GROUP_NAME", group)


def _composite(*fields: str) -> str:
    return "(?:" + "|".join(fields) + ")"


def _uptime_component(group: str, unit: str) -> str:
    return rf"(?:[ \t]+(?P<{group}>\d+)[ \t]+{unit}s?)?"


# ============================================================
# Field patterns
# ============================================================

WORD_LIST = r"(\w+)(?:,\s*|\s+|$)"

# account
ACCOUNT_EMAIL = r"Email Address:[ \t]+(?P<email>\S+)" + LINE_END
ACCOUNT_ACTIVE = r"VPN Service:[ \t]+(?P<active>[A-Za-z]+)[ \t]*"
ACCOUNT_EXPIRES = (
    r"\(Expires on[ \t]+(?P<expires_month>[A-Za-z]{3})[ \t]+(?P<expires_day>\d{1,2})"
    r"(?i:st|nd|rd|th),[ \t]+(?P<expires_year>\d{4})\)"
)

# connect
CONNECT_COUNTRY_SERVER_HOSTNAME = (
    r"You are connected to[ \t]+(?P<country>[^#\r\n]+?)[ \t]+#(?P<server>\d+)"
    r"[ \t]+\((?P<hostname>[\w\-\.]+)\)!"
)

# login
LOGIN_URL = r"Continue in the browser:[ \t]+(?P<url>\S+)" + LINE_END

# settings
SETTINGS_INVALID_NAME = r"Command '(?P<name>.+)' doesn't exist\."
SETTINGS_TECHNOLOGY = r"Technology:[ \t]+" + _named(OPENVPN_OR_NORDLYNX, "technology") + LINE_END
SETTINGS_PROTOCOL = r"Protocol:[ \t]+" + _named(TCP_OR_UDP, "protocol") + LINE_END
SETTINGS_FIREWALL = r"Firewall:[ \t]+" + _named(ENABLED_OR_DISABLED, "firewall") + LINE_END
SETTINGS_KILLSWITCH = r"Kill Switch:[ \t]+" + _named(ENABLED_OR_DISABLED, "killswitch") + LINE_END
SETTINGS_CYBERSEC = (
    r"(?:CyberSec|Threat Protection Lite):[ \t]+"
    + _named(ENABLED_OR_DISABLED, "cybersec") + LINE_END
)
SETTINGS_OBFUSCATE = r"Obfuscate:[ \t]+" + _named(ENABLED_OR_DISABLED, "obfuscate") + LINE_END
SETTINGS_NOTIFY = r"Notify:[ \t]+" + _named(ENABLED_OR_DISABLED, "notify") + LINE_END
SETTINGS_AUTOCONNECT = r"Auto-connect:[ \t]+" + _named(ENABLED_OR_DISABLED, "autoconnect") + LINE_END
SETTINGS_IPV6 = r"IPv6:[ \t]+" + _named(ENABLED_OR_DISABLED, "ipv6") + LINE_END
SETTINGS_DNS = (
    r"DNS:[ \t]+(?:"
    + _named(ENABLED_OR_DISABLED, "dns_disabled")
    + "|"
    + _named(IPV4_OR_IPV6, "dns_primary")
    + r"(?:,[ \t]*" + _named(IPV4_OR_IPV6, "dns_secondary") + ")?"
    + r"(?:,[ \t]*" + _named(IPV4_OR_IPV6, "dns_tertiary") + ")?"
    + ")" + LINE_END
)

# status
STATUS_HOSTNAME = r"(?:Current server|Hostname):[ \t]+(?P<hostname>[\w\-\.]+)" + LINE_END
STATUS_COUNTRY = r"Country:[ \t]+(?P<country>[^\r\n]+?)" + LINE_END
STATUS_CITY = r"City:[ \t]+(?P<city>[^\r\n]+?)" + LINE_END
STATUS_IP = r"\b(?:Server IP|IP):[ \t]+" + _named(IPV4_OR_IPV6, "ip") + LINE_END
STATUS_TECHNOLOGY = r"Current technology:[ \t]+" + _named(OPENVPN_OR_NORDLYNX, "technology") + LINE_END
STATUS_PROTOCOL = r"Current protocol:[ \t]+" + _named(TCP_OR_UDP, "protocol") + LINE_END
STATUS_TRANSFER = (
    r"Transfer:[ \t]+" + _named(BYTE_QUANTITY, "transfer_received") + r"[ \t]+received,"
    r"[ \t]+" + _named(BYTE_QUANTITY, "transfer_sent") + r"[ \t]+sent" + LINE_END
)
STATUS_UPTIME = (
    r"(?P<uptime>Uptime:)(?i:"
    + _uptime_component("uptime_years", "year")
    + _uptime_component("uptime_months", "month")
    + _uptime_component("uptime_days", "day")
    + _uptime_component("uptime_hours", "hour")
    + _uptime_component("uptime_minutes", "minute")
    + _uptime_component("uptime_seconds", "second")
    + ")" + LINE_END
)

# version
VERSION_NUMBER = r"(?P<version>\d+\.\d+\.\d+)" + LINE_END


# ============================================================
# Compiled patterns
# ============================================================

class LazyPattern:
    """A regex compiled on first use and shared read-only afterwards."""

    def __init__(self, source: str, flags: int = 0):
        self.source = source
        self.flags = flags
        self._compiled: Optional[re.Pattern] = None
        self._lock = threading.Lock()

    @property
    def regex(self) -> re.Pattern:
        if self._compiled is None:
            with self._lock:
                if self._compiled is None:
                    self._compiled = re.compile(self.source, self.flags)
        return self._compiled

    def search(self, text: str) -> Optional[re.Match]:
        return self.regex.search(text)

    def finditer(self, text: str) -> Iterator[re.Match]:
        return self.regex.finditer(text)


WORD_LIST_RE = LazyPattern(WORD_LIST)
ACCOUNT = LazyPattern(_composite(ACCOUNT_EMAIL, ACCOUNT_ACTIVE, ACCOUNT_EXPIRES))
CONNECT = LazyPattern(CONNECT_COUNTRY_SERVER_HOSTNAME)
LOGIN = LazyPattern(LOGIN_URL)
INVALID_SETTING = LazyPattern(SETTINGS_INVALID_NAME)
SETTINGS = LazyPattern(_composite(
    SETTINGS_TECHNOLOGY,
    SETTINGS_PROTOCOL,
    SETTINGS_FIREWALL,
    SETTINGS_KILLSWITCH,
    SETTINGS_CYBERSEC,
    SETTINGS_OBFUSCATE,
    SETTINGS_NOTIFY,
    SETTINGS_AUTOCONNECT,
    SETTINGS_IPV6,
    SETTINGS_DNS,
))
STATUS = LazyPattern(_composite(
    STATUS_HOSTNAME,
    STATUS_COUNTRY,
    STATUS_CITY,
    STATUS_IP,
    STATUS_TECHNOLOGY,
    STATUS_PROTOCOL,
    STATUS_TRANSFER,
    STATUS_UPTIME,
))
VERSION = LazyPattern(VERSION_NUMBER)
