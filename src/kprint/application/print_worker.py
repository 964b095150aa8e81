"""Print worker: the periodic trigger for the batch processor.

A single foreground loop owns the schedule, so two batches can never
overlap.  Every ``interval`` seconds it runs one batch; every
``health_interval`` seconds it probes the printer and logs the result.
After ``max_consecutive_errors`` batches in a row raise, the worker
gives up with WorkerAbortedError and leaves restarting to its
supervisor.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from kprint.application.process_queue import ProcessQueueHandler
from kprint.domain.exceptions import WorkerAbortedError
from kprint.domain.gateway.printer_gateway import PrinterGateway
from kprint.domain.model.printer import PrinterConfig

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 15.0  # seconds
HEALTH_CHECK_INTERVAL = 300.0
MAX_CONSECUTIVE_ERRORS = 10


class PrintQueueWorker:

    def __init__(
        self,
        processor: ProcessQueueHandler,
        printer: PrinterGateway,
        config: PrinterConfig,
        interval: float = DEFAULT_INTERVAL,
        health_interval: float = HEALTH_CHECK_INTERVAL,
        max_consecutive_errors: int = MAX_CONSECUTIVE_ERRORS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._processor = processor
        self._printer = printer
        self._config = config
        self._interval = interval
        self._health_interval = health_interval
        self._max_consecutive_errors = max_consecutive_errors
        self._sleep = sleep
        self._clock = clock
        self.consecutive_errors = 0

    def run(self, max_cycles: int | None = None) -> int:
        """Loop until stopped; returns the number of batches run.

        *max_cycles* bounds the loop (tests, one-shot runs); ``None``
        runs until interrupted.
        """
        logger.info(
            "Print worker started for %s (interval %gs)",
            self._config.address,
            self._interval,
        )
        self.health_check()
        last_health = self._clock()
        cycles = 0

        while max_cycles is None or cycles < max_cycles:
            if cycles:
                self._sleep(self._interval)
            self.run_once()
            cycles += 1

            if self._clock() - last_health >= self._health_interval:
                self.health_check()
                last_health = self._clock()

        logger.info("Print worker stopped after %d cycle(s)", cycles)
        return cycles

    def run_once(self) -> None:
        try:
            result = self._processor.handle(self._config)
        except Exception:
            self.consecutive_errors += 1
            logger.exception(
                "Print queue processing error (%d/%d in a row)",
                self.consecutive_errors,
                self._max_consecutive_errors,
            )
            if self.consecutive_errors >= self._max_consecutive_errors:
                raise WorkerAbortedError(
                    f"Too many consecutive errors ({self.consecutive_errors}), "
                    "print worker stopped"
                )
            return

        self.consecutive_errors = 0
        for err in result.errors:
            logger.warning("Job %s: %s", err.job_id, err.error)

    def health_check(self) -> bool:
        outcome = self._printer.test_connection(self._config)
        if outcome.success:
            logger.info("Health: printer online - %s", outcome.message)
        else:
            logger.warning("Health: printer offline - %s", outcome.message)
        return outcome.success
