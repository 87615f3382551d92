"""
NordVPN CLI response parsers.

Raw `nordvpn` output → model dataclasses.

Every parser function:
  - Takes the CommandResult of one invocation
  - Checks sentinel phrases first; they win over the exit code
  - Raises FailedCommand on any other non-zero exit
  - Raises RegexError naming the target when the pattern finds nothing,
    or naming the single field that is missing or unconvertible
"""

import re
from datetime import date, datetime, timedelta
from ipaddress import ip_address
from typing import Any, Callable, Optional

from . import patterns
from .exceptions import (
    BadOutput,
    FailedCommand,
    InvalidSettingName,
    InvalidSettingValue,
    RegexError,
    RegexField,
)
from .models import (
    Account,
    Connected,
    IPAddress,
    Protocol,
    Settings,
    Status,
    Technology,
    Transfer,
    Version,
)
from .utils import CommandResult
from ..logging_utility import logger

Captures = dict[str, str]


# ============================================================
# Conversion helpers
# ============================================================

SECONDS_PER_YEAR = 3.154e7
SECONDS_PER_MONTH = 2.628e6
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

UPTIME_WEIGHTS = (
    ("uptime_years", SECONDS_PER_YEAR),
    ("uptime_months", SECONDS_PER_MONTH),
    ("uptime_days", SECONDS_PER_DAY),
    ("uptime_hours", SECONDS_PER_HOUR),
    ("uptime_minutes", SECONDS_PER_MINUTE),
    ("uptime_seconds", 1),
)

BYTE_UNITS = {
    "b": 1,
    "k": 1000, "kb": 1000, "kib": 1024,
    "m": 1000 ** 2, "mb": 1000 ** 2, "mib": 1024 ** 2,
    "g": 1000 ** 3, "gb": 1000 ** 3, "gib": 1024 ** 3,
    "t": 1000 ** 4, "tb": 1000 ** 4, "tib": 1024 ** 4,
    "p": 1000 ** 5, "pb": 1000 ** 5, "pib": 1024 ** 5,
}

_BYTE_QUANTITY = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>[A-Za-z]*)\s*$")


def parse_bytes(text: str) -> int:
    """
    '12.3 MiB' → 12897485. Decimal units are powers of 1000, binary (…iB)
    units powers of 1024, a bare number is bytes. Raises ValueError.
    """
    match = _BYTE_QUANTITY.match(text)
    if match is None:
        raise ValueError(f"Not a byte quantity: '{text}'")
    unit = match.group("unit").lower() or "b"
    if unit not in BYTE_UNITS:
        raise ValueError(f"Unknown byte unit '{match.group('unit')}'")
    return int(round(float(match.group("value")) * BYTE_UNITS[unit]))


def parse_uptime(captures: Captures) -> timedelta:
    """Sum the optional uptime components, rounded to the millisecond."""
    seconds = 0.0
    for group, weight in UPTIME_WEIGHTS:
        value = captures.get(group)
        if value is not None:
            seconds += float(value) * weight
    return timedelta(milliseconds=round(seconds * 1000))


def parse_date(month: str, day: str, year: str) -> date:
    """('Sep', '3', '2023') → date(2023, 9, 3). Raises ValueError."""
    return datetime.strptime(f"{month}-{int(day):02d}-{year}", "%b-%d-%Y").date()


def parse_ip(text: str) -> IPAddress:
    """IPv4 dotted or IPv6 colon form. Raises ValueError."""
    return ip_address(text.strip())


def parse_enabled(text: str) -> bool:
    return text.strip().lower() == "enabled"


def parse_list(text: str) -> Optional[list[str]]:
    """
    Comma or whitespace separated words → list.
    None when there is no word at all, so empty output is told apart
    from an empty list.
    """
    items = [m.group(1) for m in patterns.WORD_LIST_RE.finditer(text)]
    if not items:
        return None
    return items


# ============================================================
# Matching helpers
# ============================================================

def _require_success(result: CommandResult) -> None:
    if not result.success:
        logger.error(f"Command failed with exit code {result.returncode}: {' '.join(result.command)}")
        raise FailedCommand(result.command)


def _captures(pattern: patterns.LazyPattern, result: CommandResult, target: RegexField) -> Captures:
    """
    Merge the named groups of every match in stdout.
    The first non-empty capture of a group wins.
    """
    captures: Captures = {}
    matched = False
    for match in pattern.finditer(result.stdout):
        matched = True
        for name, value in match.groupdict().items():
            if value is not None and name not in captures:
                captures[name] = value
    if not matched:
        logger.error(f"Output of '{' '.join(result.command)}' did not match the {target.value} pattern")
        raise RegexError(target, result.command)
    return captures


def _field(captures: Captures, name: str, field: RegexField, result: CommandResult,
           convert: Optional[Callable[[str], Any]] = None) -> Any:
    """Fetch one mandatory group, converting it; any failure is that field's error."""
    value = captures.get(name)
    if value is None:
        logger.error(f"Missing field '{name}' in output of '{' '.join(result.command)}'")
        raise RegexError(field, result.command)
    if convert is None:
        return value.strip()
    try:
        return convert(value)
    except ValueError as e:
        logger.error(f"Malformed field '{name}' in output of '{' '.join(result.command)}': {e}")
        raise RegexError(field, result.command)


# ============================================================
# Parsers, one per subcommand
# ============================================================

def parse_account(result: CommandResult) -> Optional[Account]:
    """nordvpn account → Account, or None when logged out."""
    if patterns.NOT_LOGGED_IN in result.stdout:
        return None
    _require_success(result)

    captures = _captures(patterns.ACCOUNT, result, RegexField.ACCOUNT)

    email = _field(captures, "email", RegexField.ACCOUNT_EMAIL, result)
    active = _field(captures, "active", RegexField.ACCOUNT_ACTIVE, result,
                    lambda value: value.strip().lower() == "active")

    parts = [captures.get(name) for name in ("expires_month", "expires_day", "expires_year")]
    if any(part is None for part in parts):
        raise RegexError(RegexField.ACCOUNT_EXPIRES, result.command)
    try:
        expires = parse_date(*parts)
    except ValueError as e:
        logger.error(f"Malformed expiry date {parts}: {e}")
        raise RegexError(RegexField.ACCOUNT_EXPIRES, result.command)

    return Account(email=email, active=active, expires=expires)


def _parse_word_list(result: CommandResult, target: RegexField) -> list[str]:
    _require_success(result)
    items = parse_list(result.stdout)
    if items is None:
        logger.error(f"No entries in output of '{' '.join(result.command)}'")
        raise RegexError(target, result.command)
    return items


def parse_cities(result: CommandResult) -> list[str]:
    return _parse_word_list(result, RegexField.CITIES)


def parse_countries(result: CommandResult) -> list[str]:
    return _parse_word_list(result, RegexField.COUNTRIES)


def parse_groups(result: CommandResult) -> list[str]:
    return _parse_word_list(result, RegexField.GROUPS)


def parse_connect(result: CommandResult) -> Connected:
    """nordvpn connect → Connected."""
    _require_success(result)

    match = patterns.CONNECT.search(result.stdout)
    if match is None:
        raise RegexError(RegexField.CONNECT, result.command)

    server = int(match.group("server"))
    if server <= 0:
        raise RegexError(RegexField.CONNECT, result.command)

    return Connected(
        country=match.group("country").strip(),
        server=server,
        hostname=match.group("hostname"),
    )


def parse_disconnect(result: CommandResult) -> bool:
    """True when a connection was dropped, False when there was none."""
    if patterns.NOT_CONNECTED in result.stdout:
        return False
    if patterns.DISCONNECTED_FROM in result.stdout:
        return True
    _require_success(result)
    raise BadOutput(result.command)


def parse_login(result: CommandResult) -> Optional[str]:
    """Browser URL to finish the login, None when already logged in."""
    if patterns.ALREADY_LOGGED_IN in result.stdout:
        return None
    _require_success(result)

    match = patterns.LOGIN.search(result.stdout)
    if match is None:
        raise RegexError(RegexField.LOGIN, result.command)
    return match.group("url")


def parse_logout(result: CommandResult) -> bool:
    """True when logged out now, False when there was no session."""
    if patterns.NOT_LOGGED_IN in result.stdout:
        return False
    if patterns.LOGGED_OUT in result.stdout:
        return True
    _require_success(result)
    raise BadOutput(result.command)


def parse_status(result: CommandResult) -> Optional[Status]:
    """nordvpn status → Status, or None when disconnected."""
    if patterns.DISCONNECTED in result.stdout:
        return None
    _require_success(result)

    captures = _captures(patterns.STATUS, result, RegexField.STATUS)

    hostname = _field(captures, "hostname", RegexField.STATUS_HOSTNAME, result)
    country = _field(captures, "country", RegexField.STATUS_COUNTRY, result)
    city = _field(captures, "city", RegexField.STATUS_CITY, result)
    ip = _field(captures, "ip", RegexField.STATUS_IP, result, parse_ip)
    technology = _field(captures, "technology", RegexField.STATUS_TECHNOLOGY, result, Technology.parse)
    protocol = _field(captures, "protocol", RegexField.STATUS_PROTOCOL, result, Protocol.parse)
    transfer = Transfer(
        received=_field(captures, "transfer_received", RegexField.STATUS_TRANSFER, result, parse_bytes),
        sent=_field(captures, "transfer_sent", RegexField.STATUS_TRANSFER, result, parse_bytes),
    )

    # A missing Uptime line means zero, an unreadable one is an error
    if "uptime" not in captures and patterns.UPTIME_LABEL in result.stdout:
        logger.error(f"Malformed uptime in output of '{' '.join(result.command)}'")
        raise RegexError(RegexField.STATUS_UPTIME, result.command)

    return Status(
        hostname=hostname,
        country=country,
        city=city,
        ip=ip,
        technology=technology,
        protocol=protocol,
        transfer=transfer,
        uptime=parse_uptime(captures),
    )


def parse_settings(result: CommandResult) -> Settings:
    """
    nordvpn settings → Settings.

    Protocol is only printed for OpenVPN; NordLynx always runs over UDP.
    Obfuscate is only printed where the technology supports it.
    """
    _require_success(result)

    captures = _captures(patterns.SETTINGS, result, RegexField.SETTINGS)

    technology = _field(captures, "technology", RegexField.SETTINGS_TECHNOLOGY, result, Technology.parse)
    if "protocol" in captures or technology is not Technology.NORDLYNX:
        protocol = _field(captures, "protocol", RegexField.SETTINGS_PROTOCOL, result, Protocol.parse)
    else:
        protocol = Protocol.UDP

    obfuscate = captures.get("obfuscate")
    if obfuscate is None and patterns.OBFUSCATE_LABEL in result.stdout:
        logger.error(f"Malformed obfuscate setting in output of '{' '.join(result.command)}'")
        raise RegexError(RegexField.SETTINGS_OBFUSCATE, result.command)

    return Settings(
        technology=technology,
        protocol=protocol,
        firewall=_field(captures, "firewall", RegexField.SETTINGS_FIREWALL, result, parse_enabled),
        killswitch=_field(captures, "killswitch", RegexField.SETTINGS_KILLSWITCH, result, parse_enabled),
        cybersec=_field(captures, "cybersec", RegexField.SETTINGS_CYBERSEC, result, parse_enabled),
        obfuscate=parse_enabled(obfuscate) if obfuscate is not None else None,
        notify=_field(captures, "notify", RegexField.SETTINGS_NOTIFY, result, parse_enabled),
        autoconnect=_field(captures, "autoconnect", RegexField.SETTINGS_AUTOCONNECT, result, parse_enabled),
        ipv6=_field(captures, "ipv6", RegexField.SETTINGS_IPV6, result, parse_enabled),
        dns=_parse_dns(captures, result),
    )


def _parse_dns(captures: Captures, result: CommandResult) -> Optional[list[IPAddress]]:
    if "dns_disabled" in captures:
        if parse_enabled(captures["dns_disabled"]):
            # enabled without addresses says nothing about which servers
            raise RegexError(RegexField.SETTINGS_DNS, result.command)
        return None

    primary = _field(captures, "dns_primary", RegexField.SETTINGS_DNS, result, parse_ip)
    addresses = [primary]
    for name in ("dns_secondary", "dns_tertiary"):
        if name in captures:
            addresses.append(_field(captures, name, RegexField.SETTINGS_DNS, result, parse_ip))
    return addresses


def parse_version(result: CommandResult) -> Version:
    """nordvpn version → Version."""
    _require_success(result)

    match = patterns.VERSION.search(result.stdout)
    if match is None:
        raise RegexError(RegexField.VERSION, result.command)
    return Version.parse(match.group("version"))


def check_set(result: CommandResult, setting: str, values: list[str]) -> None:
    """
    Classify the output of `nordvpn set`. Rejected value, then unknown
    setting, then any other non-zero exit; anything else is success.
    """
    if patterns.INVALID_COMMAND in result.stdout:
        raise InvalidSettingValue(setting, values, result.command)
    if patterns.INVALID_SETTING.search(result.stdout):
        raise InvalidSettingName(setting, result.command)
    if not result.success:
        raise BadOutput(result.command)
