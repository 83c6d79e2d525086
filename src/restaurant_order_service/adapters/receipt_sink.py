"""Receipt sinks for confirmed payments.

This module defines the abstract base class for receipt persistence and the
plain-text file implementation. Following the adapter pattern used across the
service, sinks return None on expected failures rather than raising.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from restaurant_order_service.models.order_models import PaymentRecord

logger = logging.getLogger(__name__)

RECEIPT_RULE = "-" * 25


def render_receipt(record: PaymentRecord) -> str:
    """Render the human-readable receipt for a payment.

    Args:
        record: The confirmed payment

    Returns:
        str: Receipt text, newline terminated
    """
    lines = [
        f"*** RECEIPT FOR TABLE {record.table_id} ***",
        RECEIPT_RULE,
    ]
    lines.extend(f"{item.name} - ${item.price}" for item in record.items)
    lines.extend(
        [
            RECEIPT_RULE,
            f"Subtotal: ${record.subtotal}",
            f"Tip ({record.tip_rate:.0%}): ${record.tip:.2f}",
            f"Tax ({record.tax_rate:.0%}): ${record.tax:.2f}",
            f"Total: ${record.total:.2f}",
        ]
    )
    return "\n".join(lines) + "\n"


class ReceiptSink(ABC):
    """Abstract base class for receipt persistence.

    - write_receipt returns where the receipt went, or None on failure
    - The caller decides how to report a missing receipt
    """

    @abstractmethod
    def write_receipt(self, record: PaymentRecord) -> str | None:
        """Persist the receipt for a confirmed payment.

        Args:
            record: The confirmed payment

        Returns:
            str: Location of the stored receipt, or None if it could not be stored
        """
        pass


class TextFileReceiptSink(ReceiptSink):
    """Writes one ``Transaction#<id>.txt`` file per payment.

    Files are created exclusively; an existing receipt is never overwritten.
    """

    def __init__(self, directory: str | Path) -> None:
        """Initialize the sink.

        Args:
            directory: Directory receipts are written to (created on first write)
        """
        self.directory = Path(directory)

    def write_receipt(self, record: PaymentRecord) -> str | None:
        path = self.directory / record.receipt_filename

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with path.open("x", encoding="utf-8") as receipt_file:
                receipt_file.write(render_receipt(record))
        except FileExistsError:
            logger.error(f"Receipt {path} already exists, refusing to overwrite")
            return None
        except OSError as e:
            logger.error(f"Failed to write receipt {path}: {e}")
            return None

        logger.info(f"Receipt for table {record.table_id} saved to {path}")
        return str(path)
