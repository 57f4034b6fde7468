"""Telemetry snapshot model."""

from __future__ import annotations

from enum import StrEnum

from evfleet.models._base import FleetBaseModel


class ChargingStatus(StrEnum):
    CHARGING = "charging"
    DISCHARGING = "discharging"
    IDLE = "idle"


class Location(FleetBaseModel):
    """Latitude/longitude pair in degrees."""

    lat: float
    lng: float


class TelemetrySnapshot(FleetBaseModel):
    """One telemetry sample for a vehicle.

    The model does not enforce the generator's value ranges: partial
    updates may legitimately carry out-of-range readings (an overspeeding
    vehicle, for instance) which the alert rules must be able to see.

    Parameters
    ----------
    speed : float
        Speed in km/h.
    battery_level : float
        State of charge in percent (0-100).
    temperature : float
        Battery/motor temperature in °C.
    tire_pressure : float
        Tire pressure in PSI.
    motor_efficiency : float
        Motor efficiency in percent (0-100).
    regenerative_braking : bool
        Whether regenerative braking is engaged.
    location : Location
        Current position.
    odometer : float
        Total distance in km.
    energy_consumption : float
        Consumption in kWh/100km.
    charging_status : ChargingStatus
        Charge flow direction.
    voltage : float
        Pack voltage in volts.
    current : float
        Pack current in amps.
    """

    speed: float
    battery_level: float
    temperature: float
    tire_pressure: float
    motor_efficiency: float
    regenerative_braking: bool
    location: Location
    odometer: float
    energy_consumption: float
    charging_status: ChargingStatus
    voltage: float
    current: float
