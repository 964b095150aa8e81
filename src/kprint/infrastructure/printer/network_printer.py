"""Network printer client: raw bytes over TCP (port 9100 by convention).

Works the same whether the printer sits on the local LAN or behind a VPN
tunnel.  Every call opens its own connection, is bounded by a timeout,
and closes the socket before returning; nothing is kept between calls.
Failures come back as values, never as exceptions.
"""

from __future__ import annotations

import logging
import socket
import time

from kprint.domain.gateway.printer_gateway import PrinterGateway
from kprint.domain.model.printer import (
    DEFAULT_PROBE_TIMEOUT,
    PaperStatus,
    PrintResult,
    PrinterConfig,
    PrinterStatus,
    ReadinessReport,
)
from kprint.infrastructure.printer.escpos import (
    STATUS_PAPER,
    STATUS_PRINTER,
    decode_paper_status,
    decode_printer_status,
)

logger = logging.getLogger(__name__)

QUIET_WINDOW = 0.1  # seconds of silence that end a status response
STATUS_TIMEOUT = 2.0
_RECV_SIZE = 1024
_SEND_CHUNK = 4096


class _StatusUnavailable(Exception):
    """A status query produced no usable byte."""


class NetworkPrinter(PrinterGateway):

    def __init__(
        self,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        status_timeout: float = STATUS_TIMEOUT,
        quiet_window: float = QUIET_WINDOW,
    ) -> None:
        self._probe_timeout = probe_timeout
        self._status_timeout = status_timeout
        self._quiet_window = quiet_window

    # --- Printing -------------------------------------------------------------

    def send(self, data: bytes, config: PrinterConfig) -> PrintResult:
        """Write *data*, half-close, and wait for the printer to hang up.

        Success means the printer closed the connection cleanly after
        receiving everything; a reset or a timeout is a failure.
        ``config.timeout`` is an idle timeout: it restarts whenever a chunk
        is written or a byte arrives, so a slow link that keeps making
        progress is not cut off.
        """
        timeout = config.timeout
        logger.debug("Connecting to printer at %s", config.address)
        try:
            sock = socket.create_connection((config.host, config.port), timeout=timeout)
        except socket.timeout as exc:
            return self._timeout(config, timeout, exc)
        except OSError as exc:
            logger.warning("Printer connection error at %s: %s", config.address, exc)
            return PrintResult.failed(f"Printer connection failed: {exc}", exc)

        with sock:
            try:
                _write_all(sock, data, timeout)
            except socket.timeout as exc:
                return self._timeout(config, timeout, exc)
            except OSError as exc:
                logger.warning("Write to printer at %s failed: %s", config.address, exc)
                return PrintResult.failed(f"Failed to send data to printer: {exc}", exc)
            logger.info("Sent %d bytes to printer at %s", len(data), config.address)

            try:
                sock.shutdown(socket.SHUT_WR)
                _drain_until_closed(sock, timeout)
            except socket.timeout as exc:
                return self._timeout(config, timeout, exc)
            except OSError as exc:
                logger.warning("Printer at %s dropped the connection: %s", config.address, exc)
                return PrintResult.failed(f"Printer connection failed: {exc}", exc)

        return PrintResult.ok("Print job sent successfully")

    def send_verified(self, data: bytes, config: PrinterConfig) -> PrintResult:
        result = super().send_verified(data, config)
        if not result.success:
            logger.warning("Not printing to %s: %s", config.address, result.message)
        return result

    def test_connection(self, config: PrinterConfig) -> PrintResult:
        timeout = min(config.timeout, self._probe_timeout)
        try:
            with socket.create_connection((config.host, config.port), timeout=timeout):
                pass
        except socket.timeout as exc:
            return PrintResult.failed(f"Printer not responding (timeout: {timeout:g}s)", exc)
        except OSError as exc:
            return PrintResult.failed(f"Cannot reach printer: {exc}", exc)
        return PrintResult.ok(f"Printer is online at {config.address}")

    # --- Status ---------------------------------------------------------------

    def query_status(
        self,
        command: bytes,
        config: PrinterConfig,
        response_timeout: float | None = None,
    ) -> bytes | None:
        """Send a status command and collect the reply.

        Reading stops once the printer has been silent for the quiet
        window, closes the connection, or the overall timeout passes.
        Returns None when nothing came back, including when the printer
        cannot be reached.
        """
        try:
            return self._exchange(command, config, response_timeout)
        except OSError as exc:
            logger.warning("Status query to %s failed: %s", config.address, exc)
            return None

    def get_printer_status(self, config: PrinterConfig) -> PrinterStatus:
        try:
            response = self._query(STATUS_PRINTER, config)
        except _StatusUnavailable as exc:
            return PrinterStatus.unreachable(str(exc))
        return decode_printer_status(response[0])

    def get_paper_status(self, config: PrinterConfig) -> PaperStatus:
        try:
            response = self._query(STATUS_PAPER, config)
        except _StatusUnavailable as exc:
            return PaperStatus.unreachable(str(exc))
        return decode_paper_status(response[0])

    def is_ready(self, config: PrinterConfig) -> ReadinessReport:
        report = super().is_ready(config)
        for warning in report.warnings:
            logger.warning("Printer %s: %s", config.address, warning)
        return report

    # --- Internal helpers -----------------------------------------------------

    def _exchange(
        self,
        command: bytes,
        config: PrinterConfig,
        response_timeout: float | None,
    ) -> bytes | None:
        timeout = response_timeout if response_timeout is not None else config.timeout
        deadline = time.monotonic() + timeout
        buf = bytearray()
        with socket.create_connection((config.host, config.port), timeout=timeout) as sock:
            sock.settimeout(_remaining(deadline))
            sock.sendall(command)
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                sock.settimeout(min(remaining, self._quiet_window) if buf else remaining)
                try:
                    chunk = sock.recv(_RECV_SIZE)
                except socket.timeout:
                    break
                if not chunk:
                    break
                buf += chunk
        return bytes(buf) or None

    def _query(self, command: bytes, config: PrinterConfig) -> bytes:
        # Bypasses query_status so an unreachable printer and a silent one
        # stay distinguishable in the report
        try:
            response = self._exchange(
                command, config, min(config.timeout, self._status_timeout)
            )
        except OSError as exc:
            logger.warning("Status query to %s failed: %s", config.address, exc)
            raise _StatusUnavailable(f"Cannot reach printer: {exc}") from exc
        if response is None:
            raise _StatusUnavailable("No response to status query")
        return response

    @staticmethod
    def _timeout(config: PrinterConfig, timeout: float, exc: BaseException) -> PrintResult:
        logger.warning("Printer at %s timed out after %gs", config.address, timeout)
        return PrintResult.failed(f"Printer connection timeout ({timeout:g}s)", exc)


def _remaining(deadline: float) -> float:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise socket.timeout("deadline exceeded")
    return remaining


def _write_all(sock: socket.socket, data: bytes, idle_timeout: float) -> None:
    view = memoryview(data)
    while view:
        sock.settimeout(idle_timeout)
        sent = sock.send(view[:_SEND_CHUNK])
        view = view[sent:]


def _drain_until_closed(sock: socket.socket, idle_timeout: float) -> None:
    """Read and discard until the peer closes its side."""
    sock.settimeout(idle_timeout)
    while sock.recv(_RECV_SIZE):
        pass
