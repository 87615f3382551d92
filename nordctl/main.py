from ipaddress import IPv4Address, IPv6Address
from typing import Literal, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .nordvpn.commands import ValidationError
from .nordvpn.exceptions import (
    CliError,
    CommandTimeout,
    InvalidSettingName,
    InvalidSettingValue,
    RegexError,
)
from .nordvpn.manager import NordVPNManager
from .nordvpn.models import (
    City,
    ConnectOption,
    Country,
    CountryCity,
    CountryCode,
    Group,
    Protocol,
    Server,
    Technology,
)
from .nordvpn.settings import SettingsApplier
from .logging_utility import logger


app = FastAPI(title="nordctl")
manager = NordVPNManager('config/nordctl.conf')


class ConnectRequest(BaseModel):
    kind: Literal["country", "server", "country_code", "city", "group", "country_city"]
    value: str = Field(..., min_length=1)
    city: Optional[str] = Field(None, min_length=1)

    def to_option(self) -> ConnectOption:
        if self.kind == "country_city":
            if not self.city:
                raise HTTPException(status_code=422, detail="country_city requires 'city'")
            return CountryCity(self.value, self.city)
        return {
            "country": Country,
            "server": Server,
            "country_code": CountryCode,
            "city": City,
            "group": Group,
        }[self.kind](self.value)


class SettingValues(BaseModel):
    values: list[str] = Field(..., min_length=1)


class SettingsPatch(BaseModel):
    """Fields left out are not touched. Applied in declaration order."""
    technology: Optional[Technology] = None
    protocol: Optional[Protocol] = None
    firewall: Optional[bool] = None
    killswitch: Optional[bool] = None
    cybersec: Optional[bool] = None
    obfuscate: Optional[bool] = None
    notify: Optional[bool] = None
    autoconnect: Optional[bool] = None
    ipv6: Optional[bool] = None
    dns: Optional[list[Union[IPv4Address, IPv6Address]]] = None


# null turns these off instead of being rejected
NULLABLE_SETTINGS = {"obfuscate", "dns"}


def _raise_http(e: Exception, action: str):
    """Translate a nordctl failure into an HTTPException."""
    logger.error(f"Error {action}: {str(e)}")
    if isinstance(e, (InvalidSettingName, InvalidSettingValue, ValidationError)):
        status_code = 400
    elif isinstance(e, CommandTimeout):
        status_code = 504
    else:
        status_code = 502
    detail = {"error": type(e).__name__, "message": str(e)}
    if isinstance(e, CliError):
        detail["command"] = e.command
    if isinstance(e, RegexError):
        detail["field"] = e.field.value
    raise HTTPException(status_code=status_code, detail=detail)


@app.get("/account")
def get_account():
    """Account details, null when logged out"""
    try:
        return {"account": manager.account()}
    except CliError as e:
        _raise_http(e, "getting account")


@app.get("/status")
def get_status():
    """Connection status, null when disconnected"""
    try:
        return {"status": manager.status()}
    except CliError as e:
        _raise_http(e, "getting status")


@app.get("/settings")
def get_settings():
    try:
        return manager.settings()
    except CliError as e:
        _raise_http(e, "getting settings")


@app.put("/settings/{name}")
def put_setting(name: str, body: SettingValues):
    """Set one setting to raw CLI values"""
    try:
        manager.set(name, body.values)
        return {"status": "success", "setting": name, "values": body.values}
    except (CliError, ValidationError) as e:
        _raise_http(e, f"setting {name}")


@app.patch("/settings")
def patch_settings(body: SettingsPatch):
    """
    Apply the given fields one by one against the current settings.
    Stops at the first failure; fields applied before it stay applied.
    """
    for field_name in body.model_fields_set - NULLABLE_SETTINGS:
        if getattr(body, field_name) is None:
            raise HTTPException(status_code=422, detail=f"'{field_name}' cannot be null")
    try:
        applier = SettingsApplier(manager, manager.settings())
        for field_name in SettingsPatch.model_fields:
            if field_name in body.model_fields_set:
                getattr(applier, f"set_{field_name}")(getattr(body, field_name))
        return applier.settings
    except (CliError, ValidationError) as e:
        _raise_http(e, "updating settings")


@app.get("/countries")
def get_countries():
    try:
        return {"countries": manager.countries()}
    except CliError as e:
        _raise_http(e, "getting countries")


@app.get("/cities/{country}")
def get_cities(country: str):
    try:
        return {"country": country, "cities": manager.cities(country)}
    except (CliError, ValidationError) as e:
        _raise_http(e, f"getting cities for {country}")


@app.get("/groups")
def get_groups():
    try:
        return {"groups": manager.groups()}
    except CliError as e:
        _raise_http(e, "getting groups")


@app.get("/version")
def get_version():
    try:
        return {"version": str(manager.version())}
    except CliError as e:
        _raise_http(e, "getting version")


@app.post("/connect")
def connect(body: Optional[ConnectRequest] = None):
    """Connect, letting nordvpn pick the server when no body is given"""
    option = body.to_option() if body is not None else None
    try:
        return manager.connect(option)
    except (CliError, ValidationError) as e:
        _raise_http(e, "connecting")


@app.post("/disconnect")
def disconnect():
    try:
        return {"disconnected": manager.disconnect()}
    except CliError as e:
        _raise_http(e, "disconnecting")


@app.post("/login")
def login():
    """Browser URL to finish logging in, null when already logged in"""
    try:
        return {"url": manager.login()}
    except CliError as e:
        _raise_http(e, "logging in")


@app.post("/logout")
def logout():
    try:
        return {"logged_out": manager.logout()}
    except CliError as e:
        _raise_http(e, "logging out")
