"""Clock port. Use cases ask it for "now" instead of reading the system time."""

from collections.abc import Callable
from datetime import datetime

Clock = Callable[[], datetime]
