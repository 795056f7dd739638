"""
Wire models for the Neato Beehive and Nucleo APIs.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    """
    A username/password pair supplied by a credential backend.
    """

    username: str
    password: SecretStr


# --- BEEHIVE ---


class SessionGrant(BaseModel):
    """Body returned by the Beehive ``sessions`` endpoint."""

    access_token: str
    current_time: datetime


class Session(BaseModel):
    """Bearer-token session with the Beehive API.

    ``client`` is the HTTP client the session was created with. It is kept
    when the session is refreshed so that open connections are reused.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    access_token: str = ""
    current_time: datetime | None = None
    client: httpx.Client = Field(exclude=True, repr=False)

    def bearer(self) -> str:
        """Value of the ``Authorization`` header for Beehive calls."""
        return f"Bearer {self.access_token}"

    def apply_grant(self, grant: SessionGrant) -> None:
        """Overwrite the token and issue time with a freshly issued grant."""
        self.access_token = grant.access_token
        self.current_time = grant.current_time


class User(BaseModel):
    """A user on the Neato systems."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    locale: str | None = None
    phone_number: str | None = None
    street_1: str | None = None
    street_2: str | None = None
    city: str | None = None
    post_code: str | None = None
    province: str | None = None
    state_region: str | None = None
    country_code: str | None = None
    developer: bool = False
    email: str | None = None
    newsletter: bool = False
    created_at: datetime | None = None
    verified_at: datetime | None = None


class Robot(BaseModel):
    """A robot linked to the account, as listed by Beehive."""

    model_config = ConfigDict(frozen=True)

    serial: str
    prefix: str | None = None
    name: str | None = None
    model: str | None = None
    secret_key: SecretStr
    purchased_at: datetime | None = None
    linked_at: datetime | None = None
    traits: list[str] = Field(default_factory=list)


class Map(BaseModel):
    """A single cleaning map stored for a robot."""

    version: int | None = None
    id: str
    url: str | None = None
    url_valid_for_seconds: int | None = None
    run_id: str | None = None
    status: str | None = None
    launched_from: str | None = None
    error: str | None = None
    category: int | None = None
    mode: int | None = None
    modifier: int | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    end_orientation_relative_degrees: int | None = None
    run_charge_at_start: int | None = None
    run_charge_at_end: int | None = None
    suspended_cleaning_charging_count: int | None = None
    time_in_suspended_cleaning: int | None = None
    time_in_error: int | None = None
    time_in_pause: int | None = None
    cleaned_area: float | None = None
    base_count: int | None = None
    is_docked: bool | None = None
    delocalized: bool | None = None


class MapsResult(BaseModel):
    """Maps available for a robot."""

    stats: dict[str, Any] = Field(default_factory=dict)
    maps: list[Map] = Field(default_factory=list)


# --- NUCLEO ---


class NucleoModel(BaseModel):
    """Base for Nucleo shapes, which use camelCase keys on the wire."""

    model_config = ConfigDict(populate_by_name=True)


class ScheduleEvent(NucleoModel):
    """One entry of a robot's cleaning schedule."""

    mode: int | None = None
    day: int
    start_time: str = Field(alias="startTime")
    boundary_id: str | None = Field(default=None, alias="boundaryId")


class Params(NucleoModel):
    """Optional values sent with a command.

    Which values are mandatory varies between robots and firmware versions,
    so only the fields that are set are serialized.
    """

    category: int | None = None
    mode: int | None = None
    modifier: int | None = None
    robot_sounds: bool | None = Field(default=None, alias="robotSounds")
    dirtbin_alert: bool | None = Field(default=None, alias="dirtbinAlert")
    all_alerts: bool | None = Field(default=None, alias="allAlerts")
    leds: bool | None = None
    button_clicks: bool | None = Field(default=None, alias="buttonClicks")
    dirtbin_alert_reminder_interval: int | None = Field(
        default=None, alias="dirtbinAlertReminderInterval"
    )
    filter_change_reminder_interval: int | None = Field(
        default=None, alias="filterChangeReminderInterval"
    )
    brush_change_reminder_interval: int | None = Field(
        default=None, alias="brushChangeReminderInterval"
    )
    clock_24h: bool | None = Field(default=None, alias="clock24h")
    locale: str | None = None
    available_locales: list[str] | None = Field(default=None, alias="availableLocales")
    navigation_mode: int | None = Field(default=None, alias="navigationMode")
    boundary_id: str | None = Field(default=None, alias="boundaryId")
    spot_width: int | None = Field(default=None, alias="spotWidth")
    spot_height: int | None = Field(default=None, alias="spotHeight")
    events: list[ScheduleEvent] | None = None


class CommandEnvelope(NucleoModel):
    """A single command addressed to a robot."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    req_id: str = Field(alias="reqId")
    cmd: str
    params: Params | None = None

    def payload(self) -> dict[str, Any]:
        """The JSON object sent on the wire: ``reqId``, ``cmd``, ``params``."""
        body: dict[str, Any] = {"reqId": self.req_id, "cmd": self.cmd}
        if self.params is not None:
            body["params"] = self.params.model_dump(by_alias=True, exclude_none=True)
        return body

    def serialize(self) -> bytes:
        """Compact JSON encoding, shared by the signature and the request body."""
        return json.dumps(self.payload(), separators=(",", ":")).encode("utf-8")


class Battery(NucleoModel):
    """Battery telemetry."""

    level: int | None = None
    time_to_empty: int | None = Field(default=None, alias="timeToEmpty")
    time_to_full_charge: int | None = Field(default=None, alias="timeToFullCharge")
    total_charges: int | None = Field(default=None, alias="totalCharges")
    manufacturing_date: str | None = Field(default=None, alias="manufacturingDate")
    authorization_status: int | None = Field(default=None, alias="authorizationStatus")
    vendor: str | None = None


class CleaningHistory(NucleoModel):
    """A past cleaning run."""

    start: datetime | None = None
    end: datetime | None = None
    suspended_cleaning_charging_time: int | None = Field(
        default=None, alias="suspendedCleaningChargingTime"
    )
    error_time: int | None = Field(default=None, alias="errorTime")
    pause_time: int | None = Field(default=None, alias="pauseTime")
    mode: int | None = None
    area: float | None = None
    launched_from: str | None = Field(default=None, alias="launchedFrom")
    completed: bool | None = None


class Cleaning(NucleoModel):
    """Cleaning settings of a running job, or aggregated cleaning stats."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    category: int | None = None
    mode: int | None = None
    modifier: int | None = None
    navigation_mode: int | None = Field(default=None, alias="navigationMode")
    spot_width: int | None = Field(default=None, alias="spotWidth")
    spot_height: int | None = Field(default=None, alias="spotHeight")
    total_cleaned_area: float | None = Field(default=None, alias="totalCleanedArea")
    total_cleaning_time: int | None = Field(default=None, alias="totalCleaningTime")
    average_cleaned_area: float | None = Field(default=None, alias="averageCleanedArea")
    average_cleaning_time: int | None = Field(default=None, alias="averageCleaningTime")
    history: list[CleaningHistory] = Field(default_factory=list)


class Details(NucleoModel):
    """Charging and docking state."""

    is_charging: bool | None = Field(default=None, alias="isCharging")
    is_docked: bool | None = Field(default=None, alias="isDocked")
    dock_has_been_seen: bool | None = Field(default=None, alias="dockHasBeenSeen")
    charge: int | None = None
    is_schedule_enabled: bool | None = Field(default=None, alias="isScheduleEnabled")


class AvailableCommands(NucleoModel):
    """Commands the robot accepts in its current state."""

    start: bool = False
    stop: bool = False
    pause: bool = False
    resume: bool = False
    go_to_base: bool = Field(default=False, alias="goToBase")


class AvailableServices(NucleoModel):
    """Service versions supported by the robot's firmware."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    house_cleaning: str | None = Field(default=None, alias="houseCleaning")
    spot_cleaning: str | None = Field(default=None, alias="spotCleaning")
    manual_cleaning: str | None = Field(default=None, alias="manualCleaning")
    schedule: str | None = None


class Meta(NucleoModel):
    """Model and firmware of the robot."""

    model_name: str | None = Field(default=None, alias="modelName")
    firmware: str | None = None


class ResponseData(NucleoModel):
    """Command-specific result payload.

    The shape depends on the command and the firmware, so this record only
    names the common fields and keeps everything else as extra attributes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    enabled: bool | None = None
    events: list[ScheduleEvent] | None = None
    serial: str | None = None
    model: str | None = None
    model_name: str | None = Field(default=None, alias="modelName")
    firmware: str | None = None
    product_number: str | None = Field(default=None, alias="productNumber")
    battery: Battery | None = None
    house_cleaning: Cleaning | None = Field(default=None, alias="houseCleaning")
    spot_cleaning: Cleaning | None = Field(default=None, alias="spotCleaning")


class CommandResponse(NucleoModel):
    """Standard response merged with the state response of a robot."""

    version: int | None = None
    req_id: str | None = Field(default=None, alias="reqId")
    result: str | None = None
    data: ResponseData | None = None
    state: int | None = None
    action: int | None = None
    error: Any = None
    alert: str | None = None
    cleaning: Cleaning | None = None
    details: Details | None = None
    available_commands: AvailableCommands | None = Field(
        default=None, alias="availableCommands"
    )
    available_services: AvailableServices | None = Field(
        default=None, alias="availableServices"
    )
    meta: Meta | None = None
