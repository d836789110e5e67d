"""Sunward entrypoint

Running:

    python Sunward.py --scenario offset_roll

runs the tick controller against the simulated platform. All options are
those of ``simulators.platform_sim`` (``--help`` lists them). The control
core itself lives in ``sunward/``; a host integration drives
``SolarRechargeController.tick()`` on its own 2 s cadence.
"""

import sys
from pathlib import Path

# Ensure the repository root is on sys.path so that ``sunward.*`` and
# ``simulators.*`` imports work when running this file directly.
REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def main() -> int:
    from simulators.platform_sim import main as platform_sim_main

    return platform_sim_main()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
