"""Sensor plug-in base class."""

from abc import ABC, abstractmethod


class Sensor(ABC):
    """
    Abstract base class for sensor plug-ins.

    Constructors only validate configuration; hardware is touched in
    init() and released in close().
    """

    @abstractmethod
    def init(self) -> None:
        """Open the hardware and prepare it for reading."""
        pass

    @abstractmethod
    def read(self) -> tuple:
        """Return the current sensor value(s) as a tuple."""
        pass

    @abstractmethod
    def get_names(self) -> tuple[str, ...]:
        """Return the sensor name(s). Tuple length matches read() output count."""
        pass

    @abstractmethod
    def get_units(self) -> tuple[str, ...]:
        """Return the units of measurement. Tuple length matches read() output count."""
        pass

    def get_precision(self) -> int:
        """Return the number of decimal places for float values. Default is 3."""
        return 3

    def close(self) -> None:
        """Release hardware resources. Override if the sensor holds a bus."""
        pass

    def __enter__(self):
        self.init()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
