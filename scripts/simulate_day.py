#!/usr/bin/env python3
"""
Synthetic Day Simulation Tool

Drives the production controller through a 24h day on a crude tank model:
solar gain follows a daylight bell curve, draw-offs happen at breakfast and
dinner, and the element adds heat while ON. Useful for eyeballing how the
mode schedule, poor weather and anti-cycling interact before changing
thresholds.

Examples:
  # Sunny day with defaults
  python3 scripts/simulate_day.py

  # Overcast day, print every controller pass
  python3 scripts/simulate_day.py --weather overcast --verbose

  # Super heat in the evening
  python3 scripts/simulate_day.py --super-heat-from 18 --super-heat-to 20
"""

import argparse
import logging
import math
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from custom_components.solar_hws.const import (  # noqa: E402
    FORECAST_OVERCAST,
    PAYLOAD_S2,
    PAYLOAD_S3,
    PAYLOAD_S4,
    PAYLOAD_TIME,
    STATE_DISABLE_AUTO_CONTROL,
    STATE_ENERGY_MGMT_ACTIVE,
    STATE_HOT_WATER_ELEMENT,
    STATE_SUPER_HEAT,
    STATE_WEATHER_CLOUD_COVER,
    STATE_WEATHER_FORECAST,
    STATE_WEATHER_SOLAR_IRRADIANCE,
)
from custom_components.solar_hws.control import (  # noqa: E402
    ControllerConfig,
    ControlState,
    SolarHotWaterController,
)

STEP_MINUTES = 5

# Tank model (°C per step)
ELEMENT_GAIN = 0.9
STANDING_LOSS = 0.05
SOLAR_GAIN_PEAK = 0.8
DRAW_OFF_LOSS = 4.0
DRAW_OFF_HOURS = (7, 19)

WEATHER_PROFILES = {
    "sunny": {"cloud_cover": 10.0, "irradiance_peak": 900.0, "forecast": "clear"},
    "cloudy": {"cloud_cover": 70.0, "irradiance_peak": 400.0, "forecast": "partly_cloudy"},
    "overcast": {"cloud_cover": 98.0, "irradiance_peak": 40.0, "forecast": FORECAST_OVERCAST},
}


@dataclass
class TankModel:
    """Three-layer tank: S2 bottom, S3 middle, S4 top."""

    s2: float
    s3: float
    s4: float

    def step(self, solar_fraction: float, element_on: bool, draw_off: bool) -> None:
        """Advance one step."""
        solar = SOLAR_GAIN_PEAK * solar_fraction
        # Solar heats from the collector return near the bottom
        self.s2 += solar - STANDING_LOSS
        self.s3 += solar * 0.6 - STANDING_LOSS
        self.s4 += solar * 0.4 - STANDING_LOSS

        if element_on:
            # Element sits around the S3 layer
            self.s3 += ELEMENT_GAIN
            self.s4 += ELEMENT_GAIN * 0.7

        if draw_off:
            self.s4 -= DRAW_OFF_LOSS
            self.s3 -= DRAW_OFF_LOSS * 0.8
            self.s2 -= DRAW_OFF_LOSS * 1.2

        # Stratification: hot water rises
        self.s4 = max(self.s4, self.s3)
        self.s3 = max(self.s3, self.s2)


def solar_fraction(hour: float, profile: dict) -> float:
    """Daylight bell curve between 06:00 and 18:00, scaled by irradiance."""
    if not 6 <= hour <= 18:
        return 0.0
    return math.sin(math.pi * (hour - 6) / 12) * profile["irradiance_peak"] / 1000


def main():
    """Run the synthetic day."""
    parser = argparse.ArgumentParser(
        description="Simulate one day of solar hot water control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--weather",
        choices=sorted(WEATHER_PROFILES),
        default="sunny",
        help="Weather profile for the whole day (default: sunny)",
    )
    parser.add_argument("--s3", type=float, default=38.0, help="Starting S3 temperature (°C)")
    parser.add_argument(
        "--min-switch-interval",
        type=float,
        default=None,
        help="Override anti-cycling dwell (minutes)",
    )
    parser.add_argument("--super-heat-from", type=int, help="Hour super heat is switched on")
    parser.add_argument("--super-heat-to", type=int, help="Hour super heat is switched off")
    parser.add_argument(
        "--energy-mgmt-hour",
        type=int,
        help="Hour during which energy management holds the element",
    )
    parser.add_argument("--verbose", action="store_true", help="Print every controller pass")
    parser.add_argument("--debug", action="store_true", help="Enable controller debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    raw = {}
    if args.min_switch_interval is not None:
        raw["min_switch_interval_minutes"] = args.min_switch_interval
    config = ControllerConfig.from_dict(raw)
    controller = SolarHotWaterController(config)
    state = ControlState()
    profile = WEATHER_PROFILES[args.weather]

    tank = TankModel(s2=args.s3 - 6, s3=args.s3, s4=args.s3 + 4)
    element_on = False
    start = datetime(2025, 1, 15, 0, 0)
    uptime = 0.0
    switches = 0
    on_minutes = 0
    modes_seen: list[str] = []

    print(f"Weather: {args.weather}  Start S3: {args.s3:.1f}°C")
    print(f"{'Time':>5}  {'Mode':<14} {'S2':>5} {'S3':>5} {'S4':>5}  {'Elem':<4} Decision")

    for step in range(24 * 60 // STEP_MINUTES):
        now = start + timedelta(minutes=step * STEP_MINUTES)
        hour = now.hour + now.minute / 60
        uptime += STEP_MINUTES * 60

        super_heat = (
            args.super_heat_from is not None
            and args.super_heat_to is not None
            and args.super_heat_from <= now.hour < args.super_heat_to
        )
        energy_mgmt = args.energy_mgmt_hour is not None and now.hour == args.energy_mgmt_hour
        fraction = solar_fraction(hour, profile)

        payload = {
            PAYLOAD_S2: round(tank.s2, 1),
            PAYLOAD_S3: round(tank.s3, 1),
            PAYLOAD_S4: round(tank.s4, 1),
            PAYLOAD_TIME: uptime,
        }
        inputs = {
            STATE_DISABLE_AUTO_CONTROL: int(energy_mgmt),
            STATE_HOT_WATER_ELEMENT: int(element_on),
            STATE_SUPER_HEAT: int(super_heat),
            STATE_ENERGY_MGMT_ACTIVE: energy_mgmt,
            STATE_WEATHER_CLOUD_COVER: profile["cloud_cover"],
            STATE_WEATHER_SOLAR_IRRADIANCE: profile["irradiance_peak"] * fraction,
            STATE_WEATHER_FORECAST: profile["forecast"],
        }

        result = controller.run(payload, inputs, state, now)
        if result.ran and result.command is not None:
            element_on = result.command == 1
            switches += 1

        if result.ran and result.resolution and result.resolution.mode not in modes_seen:
            modes_seen.append(result.resolution.mode)

        if args.verbose or (result.ran and result.command is not None):
            mode = result.resolution.mode if result.resolution else "-"
            print(
                f"{now:%H:%M}  {mode:<14} {tank.s2:5.1f} {tank.s3:5.1f} {tank.s4:5.1f}  "
                f"{'ON' if element_on else 'off':<4} {result.decision.reason}"
            )

        if element_on:
            on_minutes += STEP_MINUTES

        draw_off = now.hour in DRAW_OFF_HOURS and now.minute == 0
        tank.step(fraction, element_on, draw_off)

    print()
    print(f"Switches: {switches}")
    print(f"Element on: {on_minutes / 60:.1f} h")
    print(f"Modes: {', '.join(modes_seen)}")
    print(f"End of day: S2 {tank.s2:.1f}°C  S3 {tank.s3:.1f}°C  S4 {tank.s4:.1f}°C")


if __name__ == "__main__":
    main()
