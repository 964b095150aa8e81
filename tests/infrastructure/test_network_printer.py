"""Transport tests against a real loopback TCP server."""

from __future__ import annotations

import socket
import threading

import pytest

from kprint.domain.model.printer import PrinterConfig
from kprint.infrastructure.printer.escpos import STATUS_PAPER, STATUS_PRINTER
from kprint.infrastructure.printer.network_printer import NetworkPrinter


class LoopbackPrinter:
    """A tiny raw-port printer.

    Collects whatever a client writes.  Answers DLE EOT queries from
    ``status_bytes`` (missing entries get no reply).  With
    ``hang=True`` it never closes a connection on its own.  ``trickle``
    sends that many single bytes, 0.1s apart, before closing.
    """

    def __init__(
        self,
        status_bytes: dict[bytes, int] | None = None,
        hang: bool = False,
        trickle: int = 0,
    ):
        self.status_bytes = status_bytes or {}
        self.hang = hang
        self.trickle = trickle
        self.received: list[bytes] = []
        self._stop = threading.Event()
        self._server = socket.create_server(("127.0.0.1", 0))
        self._server.settimeout(0.05)
        self.port = self._server.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def config(self, timeout: float = 2.0) -> PrinterConfig:
        return PrinterConfig("127.0.0.1", self.port, timeout)

    def start(self) -> LoopbackPrinter:
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        self._thread.join(timeout=2)
        self._server.close()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._server.accept()
            except socket.timeout:
                continue
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            conn.settimeout(0.05)
            buf = bytearray()
            while not self._stop.is_set():
                try:
                    chunk = conn.recv(4096)
                except socket.timeout:
                    if bytes(buf) in self.status_bytes:
                        conn.sendall(bytes([self.status_bytes[bytes(buf)]]))
                        buf.clear()
                    continue
                if not chunk:
                    break
                buf += chunk
            self.received.append(bytes(buf))
            for _ in range(self.trickle):
                self._stop.wait(0.1)
                conn.sendall(b"\x00")
            while self.hang and not self._stop.is_set():
                self._stop.wait(0.05)


@pytest.fixture
def loopback():
    servers: list[LoopbackPrinter] = []

    def start(**kwargs) -> LoopbackPrinter:
        server = LoopbackPrinter(**kwargs).start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.stop()


@pytest.fixture
def closed_port() -> PrinterConfig:
    sock = socket.create_server(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return PrinterConfig("127.0.0.1", port, 1.0)


STATUS_OK = {STATUS_PRINTER: 0x12, STATUS_PAPER: 0x12}


class TestSend:

    def test_delivers_bytes_and_reports_success(self, loopback):
        server = loopback()
        payload = b"\x1b@hello\n\x1dV\x41\x00"
        result = NetworkPrinter().send(payload, server.config())
        assert result.success
        assert result.message == "Print job sent successfully"
        assert server.received == [payload]

    def test_connection_refused(self, closed_port):
        result = NetworkPrinter().send(b"data", closed_port)
        assert not result.success
        assert result.message.startswith("Printer connection failed:")
        assert isinstance(result.error, OSError)

    def test_printer_that_never_closes_times_out(self, loopback):
        server = loopback(hang=True)
        result = NetworkPrinter().send(b"data", server.config(timeout=0.3))
        assert not result.success
        assert result.message == "Printer connection timeout (0.3s)"

    def test_timeout_restarts_while_printer_keeps_talking(self, loopback):
        # 0.8s in total, never more than 0.1s of silence
        server = loopback(trickle=8)
        result = NetworkPrinter().send(b"data", server.config(timeout=0.3))
        assert result.success
        assert server.received == [b"data"]


class TestConnectionCheck:

    def test_online(self, loopback):
        server = loopback()
        result = NetworkPrinter().test_connection(server.config())
        assert result.success
        assert result.message == f"Printer is online at 127.0.0.1:{server.port}"

    def test_refused(self, closed_port):
        result = NetworkPrinter().test_connection(closed_port)
        assert not result.success
        assert result.message.startswith("Cannot reach printer:")


class TestStatusQueries:

    def test_query_returns_raw_reply(self, loopback):
        server = loopback(status_bytes={STATUS_PRINTER: 0x16})
        assert NetworkPrinter().query_status(STATUS_PRINTER, server.config()) == b"\x16"

    def test_query_unreachable_printer_returns_none(self, closed_port):
        assert NetworkPrinter().query_status(STATUS_PRINTER, closed_port) is None

    def test_query_silent_printer_returns_none(self, loopback):
        server = loopback()
        assert NetworkPrinter().query_status(STATUS_PRINTER, server.config(), 0.3) is None

    def test_printer_status_decoded(self, loopback):
        server = loopback(status_bytes={STATUS_PRINTER: 0x08})
        status = NetworkPrinter().get_printer_status(server.config())
        assert status.connected
        assert not status.online

    def test_silent_printer_is_not_connected(self, loopback):
        server = loopback()
        status = NetworkPrinter(status_timeout=0.3).get_printer_status(server.config())
        assert not status.connected
        assert status.error_message == "No response to status query"

    def test_unreachable_printer_is_not_connected(self, closed_port):
        paper = NetworkPrinter().get_paper_status(closed_port)
        assert not paper.connected
        assert paper.error_message.startswith("Cannot reach printer:")


class TestReadiness:

    def test_ready(self, loopback):
        server = loopback(status_bytes=STATUS_OK)
        report = NetworkPrinter().is_ready(server.config())
        assert report.ready
        assert report.warnings == ()

    def test_cover_open_not_ready(self, loopback):
        server = loopback(status_bytes={STATUS_PRINTER: 0x20, STATUS_PAPER: 0x12})
        report = NetworkPrinter().is_ready(server.config())
        assert not report.ready
        assert report.details["cover_closed"] is False

    def test_paper_near_end_still_ready(self, loopback):
        server = loopback(status_bytes={STATUS_PRINTER: 0x12, STATUS_PAPER: 0x0C})
        report = NetworkPrinter().is_ready(server.config())
        assert report.ready
        assert "Paper is running low" in report.warnings

    def test_verified_send_skips_payload_when_not_ready(self, loopback):
        server = loopback(status_bytes={STATUS_PRINTER: 0x12, STATUS_PAPER: 0x60})
        result = NetworkPrinter().send_verified(b"RECEIPT", server.config())
        assert not result.success
        assert result.message == "Printer not ready: no paper"
        assert b"RECEIPT" not in server.received

    def test_verified_send_prints_when_ready(self, loopback):
        server = loopback(status_bytes=STATUS_OK)
        result = NetworkPrinter().send_verified(b"RECEIPT", server.config())
        assert result.success
        assert b"RECEIPT" in server.received
