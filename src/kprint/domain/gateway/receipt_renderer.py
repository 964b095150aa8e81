"""Shared rendering interface.

The thermal printer and the browser/print-dialog fallback consume the
same ReceiptData; each target supplies its own renderer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kprint.domain.model.receipt import ReceiptData


class ReceiptRenderer(ABC):

    @abstractmethod
    def render(self, receipt: ReceiptData) -> bytes:
        """Turn a receipt into the bytes the target device expects.

        Pure: no I/O.  Exceptions mean malformed input and must
        propagate unchanged.
        """
