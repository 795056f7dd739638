"""Constants for the Neato Cloud integration."""

from datetime import timedelta
from typing import Final

DOMAIN: Final = "neato_cloud"

MANUFACTURER: Final = "Neato Robotics"

SCAN_INTERVAL: Final = timedelta(seconds=60)

# Robot states reported by getRobotState
STATE_IDLE: Final = 1
STATE_BUSY: Final = 2
STATE_PAUSED: Final = 3
STATE_ERROR: Final = 4

# Cleaning parameters for a house cleaning run
CLEANING_CATEGORY_HOUSE: Final = 2
CLEANING_MODE_TURBO: Final = 2
CLEANING_MODIFIER_NORMAL: Final = 1
