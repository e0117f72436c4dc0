"""Stream Launcher - schedule YouTube live broadcasts and start OBS at sunrise, sunset or a set time."""

__version__ = "0.1.0"
