# shoescrape/delegates/file_manager_delegate.py
import csv
import logging
import threading
from pathlib import Path
from typing import List, Optional

from .. import config
from ..errors import ConfigurationError
from ..models import ProductVariantRecord

logger = logging.getLogger(__name__)


class FileManagerDelegate:
    """
    The row sink: owns the output CSV file. The header is written on open and every
    record is flushed as soon as it is appended, so an interrupted run keeps its rows.
    """
    def __init__(self, output_path: Path, header: Optional[List[str]] = None):
        self.output_path = Path(output_path)
        self.header = header or config.CSV_HEADER
        self.rows_written = 0
        self._file = None
        self._writer = None
        self._lock = threading.Lock()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self):
        try:
            if self.output_path.parent:
                self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self.output_path.open("w", encoding="utf-8", newline="")
        except OSError as e:
            raise ConfigurationError(f"Cannot create file {str(self.output_path)!r}: {e}") from e
        self._writer = csv.writer(self._file)
        self._writer.writerow(self.header)
        self._file.flush()
        logger.info("Writing rows to: %s", self.output_path)

    def append(self, record: ProductVariantRecord):
        """Writes one record. Safe to call from concurrent extractions."""
        if self._writer is None:
            raise RuntimeError("FileManagerDelegate.append called before open().")
        with self._lock:
            self._writer.writerow(record.to_row())
            self._file.flush()
            self.rows_written += 1

    def close(self):
        with self._lock:
            if self._file is not None:
                self._file.close()
                logger.info("Saved %d rows to %s", self.rows_written, self.output_path.name)
            self._file = None
            self._writer = None
