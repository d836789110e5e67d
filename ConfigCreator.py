"""Sunward Config Creator CLI

Standalone command-line tool for writing a platform config JSON file.

Run this file directly:

    python ConfigCreator.py

It prompts for every operator setting (press Enter to keep the default) and
saves a file that ``sunward.controller.load_config`` and
``python -m simulators.platform_sim --config <file>`` accept::

    {
      "ship_size": "large",
      "min_power_percent": 98.0,
      "turn_rate": 2.5,
      "primary_axis": "Roll",
      "secondary_axis": "Pitch",
      ...
    }
"""

import json
from typing import Sequence

from sunward.alignment import Axis
from sunward.controller import PlatformConfig, save_config
from sunward.sizing import ShipSize


def prompt_float(prompt: str, default: float, min_val: float = None, max_val: float = None) -> float:
    while True:
        raw = input(f"{prompt} [{default}]: ").strip()
        if not raw:
            return default
        try:
            val = float(raw)
            if (min_val is not None and val < min_val) or (max_val is not None and val > max_val):
                print(f"Value must be between {min_val} and {max_val}. Please try again.")
                continue
            return val
        except ValueError:
            print("Invalid number. Please try again.")


def prompt_choice(prompt: str, default: str, choices: Sequence[str]) -> str:
    options = "/".join(choices)
    lowered = {c.lower(): c for c in choices}
    while True:
        raw = input(f"{prompt} ({options}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in lowered:
            return lowered[raw]
        print(f"Please enter one of: {options}.")


def prompt_bool(prompt: str, default: bool) -> bool:
    yes = {"yes", "y"}
    no = {"no", "n"}
    default_str = "y" if default else "n"
    while True:
        raw = input(f"{prompt} (y/n) [{default_str}]: ").strip().lower()
        if not raw:
            return default
        if raw in yes:
            return True
        if raw in no:
            return False
        print("Please enter 'y' or 'n'.")


def main() -> int:
    print("Sunward Config Creator CLI")
    print("==========================\n")

    d = PlatformConfig()
    axes = [a.value for a in Axis]

    print("Panels facing up/down: Roll + Pitch. Forward/back: Pitch + Yaw. Left/right: Roll + Yaw.\n")
    while True:
        raw = {
            "ship_size": prompt_choice("Ship size", d.ship_size.value, [s.value for s in ShipSize]),
            "min_power_percent": prompt_float("Minimum power (% of one panel)", d.min_power_percent, 1.0, 100.0),
            "turn_rate": prompt_float("Turn rate (slower is more precise)", d.turn_rate, 0.1, 20.0),
            "primary_axis": prompt_choice("Primary axis", d.primary_axis.value, axes),
            "secondary_axis": prompt_choice("Secondary axis", d.secondary_axis.value, axes),
            "auto_override": prompt_bool("Auto gyro override", d.auto_override),
            "battery_management": prompt_bool("Battery management", d.battery_management),
            "charge_docked": prompt_bool("Charge docked cells", d.charge_docked),
            "keep_cells_on": prompt_bool("Keep local cells on", d.keep_cells_on),
        }
        try:
            cfg = PlatformConfig.from_dict(raw)
            break
        except ValueError as e:
            print(f"Invalid config: {e}. Please try again.\n")

    print("\nGenerated config JSON:")
    print(json.dumps(cfg.to_dict(), indent=2))
    print(f"Target power: {cfg.target_power:.0f} W")

    while True:
        save_path = input("\nEnter filename to save config (e.g. platform.json): ").strip()
        if not save_path:
            print("Filename cannot be empty.")
            continue
        try:
            out = save_config(cfg, save_path)
            print(f"Config saved to {out}")
            break
        except OSError as e:
            print(f"Error saving file: {e}")
            retry = prompt_bool("Try again?", True)
            if not retry:
                print("Exiting without saving.")
                break

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
