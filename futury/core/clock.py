"""
FUTURY - Simulation Clock
Converts elapsed real time into fractional simulation years.

Scale: 24 real hours = 1 simulation year (1 real second = 1/86400 year).
"""

from typing import Callable, Dict, Optional
import logging
import math
import numbers
import time

from ..config import TimeConfig, TIME
from ..errors import InvalidTimeRange

logger = logging.getLogger(__name__)


class SimClock:
    """
    Virtual calendar driven by a monotonic real-time source.

    The year is recomputed on each tick from real time elapsed since init,
    minus time spent paused. It never decreases, including across
    pause/resume.
    """

    def __init__(self, config: TimeConfig = TIME,
                 time_source: Callable[[], float] = time.monotonic):
        self.config = config
        self._now = time_source

        self.epoch_year = config.default_start_year
        self.current_year = config.default_start_year

        self.paused = False
        self.accumulated_pause = 0.0  # Real seconds

        self._anchor_year = config.default_start_year
        self._start_real: Optional[float] = None
        self._pause_started: Optional[float] = None

    @property
    def scale(self) -> float:
        return self.config.scale

    @property
    def initialized(self) -> bool:
        return self._start_real is not None

    def init(self, epoch_year: float, current_year: Optional[float] = None):
        """
        Start the calendar.

        Args:
            epoch_year: Simulation year at session start
            current_year: Year to resume from (defaults to epoch_year)

        Raises:
            InvalidTimeRange: Non-finite years, epoch outside the configured
                range, or current year before the epoch.
        """
        if current_year is None:
            current_year = epoch_year

        for value in (epoch_year, current_year):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidTimeRange(f"Year values must be numbers, got {value!r}")
            if not math.isfinite(value):
                raise InvalidTimeRange(f"Year values must be finite, got {value!r}")

        if not (self.config.min_epoch_year <= epoch_year <= self.config.max_epoch_year):
            raise InvalidTimeRange(
                f"Epoch year {epoch_year} outside "
                f"{self.config.min_epoch_year:.0f}-{self.config.max_epoch_year:.0f}"
            )

        if current_year < epoch_year:
            raise InvalidTimeRange(f"Current year {current_year} is before epoch {epoch_year}")

        self.epoch_year = float(epoch_year)
        self.current_year = float(current_year)
        self._anchor_year = self.current_year

        self._start_real = self._now()
        self.accumulated_pause = 0.0
        self.paused = False
        self._pause_started = None

        logger.info(f"Clock initialized - epoch {epoch_year}, current {current_year:.4f}")

    def tick(self) -> float:
        """Recompute the current year from real time. Returns the precise year."""
        if self.paused or self._start_real is None:
            return self.current_year

        elapsed_real = self._now() - self._start_real - self.accumulated_pause
        candidate = self._anchor_year + max(0.0, elapsed_real) / self.config.seconds_per_year

        # Guard against a misbehaving time source
        if candidate > self.current_year:
            self.current_year = candidate

        return self.current_year

    def pause(self):
        """Freeze the calendar. Idempotent."""
        if not self.paused:
            self.paused = True
            self._pause_started = self._now()
            logger.info(f"Clock paused at {self.current_year:.4f}")

    def resume(self):
        """Unfreeze the calendar, folding the pause into accumulated_pause. Idempotent."""
        if self.paused:
            if self._pause_started is not None:
                self.accumulated_pause += self._now() - self._pause_started
            self.paused = False
            self._pause_started = None
            logger.info(f"Clock resumed at {self.current_year:.4f}")

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def year(self) -> int:
        return math.floor(self.current_year)

    @property
    def precise_year(self) -> float:
        return self.current_year

    @property
    def elapsed_years(self) -> float:
        return self.current_year - self.epoch_year

    def elapsed_real_seconds(self) -> float:
        """Real seconds of unpaused running since init."""
        if self._start_real is None:
            return 0.0
        paused = self.accumulated_pause
        if self.paused and self._pause_started is not None:
            paused += self._now() - self._pause_started
        return self._now() - self._start_real - paused

    def real_to_sim_years(self, real_seconds: float) -> float:
        return real_seconds / self.config.seconds_per_year

    def sim_years_to_real(self, years: float) -> float:
        """Real seconds needed for the given span of simulation years."""
        return years * self.config.seconds_per_year

    def time_until_year(self, target_year: float) -> float:
        """Real seconds until target_year (0 if already reached)."""
        return max(0.0, self.sim_years_to_real(target_year - self.current_year))

    def current_date(self) -> Dict:
        fraction = self.current_year - self.year
        day = int(fraction * self.config.days_per_year) + 1
        return {"year": self.year, "day": day, "fraction": fraction}

    def format_game_date(self) -> str:
        date = self.current_date()
        return f"Year {date['year']}, Day {date['day']}"

    @staticmethod
    def format_time_remaining(seconds: float) -> str:
        """Compact real-time duration, e.g. '2d 3h 10m'."""
        total = max(0, int(seconds))
        days, rem = divmod(total, 86400)
        hours, rem = divmod(rem, 3600)
        minutes, secs = divmod(rem, 60)

        if days > 0:
            return f"{days}d {hours}h {minutes}m"
        if hours > 0:
            return f"{hours}h {minutes}m"
        if minutes > 0:
            return f"{minutes}m {secs}s"
        return f"{secs}s"

    def get_status(self) -> Dict:
        return {
            "epoch_year": self.epoch_year,
            "current_year": self.current_year,
            "year": self.year,
            "paused": self.paused,
            "accumulated_pause_s": self.accumulated_pause,
        }

    def __repr__(self) -> str:
        state = "paused" if self.paused else "running"
        return f"SimClock({self.current_year:.4f}, {state})"
