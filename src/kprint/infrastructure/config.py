"""Settings read from the environment (and a ``.env`` file, if present).

``PRINTER_IP_ADDRESS`` is the only switch that matters for printing:
without it the printer counts as "not configured" and the fast path is
skipped.  Everything else has a working default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from kprint.domain.exceptions import ConfigurationError
from kprint.domain.model.printer import DEFAULT_PORT, DEFAULT_SEND_TIMEOUT, PrinterConfig
from kprint.domain.model.value_objects import DEFAULT_CURRENCY

# Project root when installed in editable mode.
BASE_DIR = Path(__file__).resolve().parents[3]

T = TypeVar("T")

PRINTER_ENCODING = "cp437"


@dataclass(frozen=True)
class Settings:
    printer_host: str | None = None
    printer_port: int = DEFAULT_PORT
    printer_timeout: float = DEFAULT_SEND_TIMEOUT
    max_attempts: int = 3
    batch_size: int = 5
    job_delay: float = 0.5
    process_interval: float = 15.0
    currency: str = DEFAULT_CURRENCY
    printer_currency: str | None = None
    timezone: str = "Africa/Lagos"
    data_dir: Path = BASE_DIR / "data"
    log_level: str = "INFO"
    log_dir: Path | None = None

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, dotenv: bool = True
    ) -> Settings:
        """Build settings from *environ* (default: ``os.environ``).

        Raises ConfigurationError on a value that cannot be parsed.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        def get(name: str, parse: Callable[[str], T], default: T) -> T:
            raw = environ.get(name, "").strip()
            if not raw:
                return default
            try:
                return parse(raw)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid {name}={raw!r}: {exc}") from exc

        settings = cls(
            printer_host=environ.get("PRINTER_IP_ADDRESS", "").strip() or None,
            printer_port=get("PRINTER_PORT", int, DEFAULT_PORT),
            printer_timeout=get("PRINTER_TIMEOUT", float, DEFAULT_SEND_TIMEOUT),
            max_attempts=get("PRINT_MAX_ATTEMPTS", int, 3),
            batch_size=get("PRINT_BATCH_SIZE", int, 5),
            job_delay=get("PRINT_JOB_DELAY", float, 0.5),
            process_interval=get("PRINT_PROCESS_INTERVAL", float, 15.0),
            currency=get("RECEIPT_CURRENCY", str, DEFAULT_CURRENCY),
            printer_currency=get("PRINTER_CURRENCY", str, None),
            timezone=get("RECEIPT_TIMEZONE", str, "Africa/Lagos"),
            data_dir=get("KPRINT_DATA_DIR", Path, BASE_DIR / "data"),
            log_level=get("KPRINT_LOG_LEVEL", str.upper, "INFO"),
            log_dir=get("KPRINT_LOG_DIR", Path, None),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not 0 < self.printer_port < 65536:
            raise ConfigurationError(f"PRINTER_PORT out of range: {self.printer_port}")
        if self.printer_timeout <= 0:
            raise ConfigurationError("PRINTER_TIMEOUT must be positive")
        if self.max_attempts < 1:
            raise ConfigurationError("PRINT_MAX_ATTEMPTS must be at least 1")
        if self.batch_size < 1:
            raise ConfigurationError("PRINT_BATCH_SIZE must be at least 1")
        if self.job_delay < 0 or self.process_interval <= 0:
            raise ConfigurationError("PRINT_JOB_DELAY/PRINT_PROCESS_INTERVAL out of range")
        try:
            self.thermal_currency.encode(PRINTER_ENCODING)
        except UnicodeEncodeError as exc:
            raise ConfigurationError(
                f"Currency marker {self.thermal_currency!r} cannot be printed "
                f"in {PRINTER_ENCODING}; set PRINTER_CURRENCY (e.g. NGN)"
            ) from exc
        self.tzinfo()

    @property
    def thermal_currency(self) -> str:
        """Marker for ESC/POS pricing lines; defaults to the receipt's own."""
        return self.printer_currency or self.currency

    def printer_config(self) -> PrinterConfig | None:
        if self.printer_host is None:
            return None
        return PrinterConfig(self.printer_host, self.printer_port, self.printer_timeout)

    def require_printer(self) -> PrinterConfig:
        config = self.printer_config()
        if config is None:
            raise ConfigurationError("PRINTER_IP_ADDRESS not configured")
        return config

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown RECEIPT_TIMEZONE {self.timezone!r}") from exc
