"""Order Store: CSV-file persistence for the Order collection.

Invariants:
    - The file always starts with exactly one header line (HEADER_LINE)
    - Header mismatch raises SchemaError; a malformed data row is dropped and logged
    - update/delete on an unknown id return None/False and never write
    - Whole-file rewrites go through a temp file + os.replace (readers never see a truncated file)
      and keep the existing file's permission bits
    - A stray quote in one row never affects the rows around it
    - OSError is propagated to the caller uninterpreted

Design Decisions:
    - csv module with QUOTE_MINIMAL: plain values stay byte-compatible with the
      bare comma-joined format, values with commas/quotes/newlines get quoted
    - One RLock per store serializes every read-mutate-write cycle in this process;
      multiple worker processes against one file are still unsupported
    - Singleton store initialized on startup, exposed through get_store() for
      FastAPI dependency injection (same lifecycle as a DB session manager)
"""

import csv
import io
import logging
import os
import stat
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator

from orderdesk.core.errors import SchemaError
from orderdesk.core.order_rules import (
    apply_patch, decode_row, encode_row, is_blank_row, is_header_row,
    next_id as allocate_next_id,
)
from orderdesk.core.order_types import (
    DEFAULT_STATUS, HEADER_LINE, ORDER_COLUMNS, Order, OrderPatch,
)

logger = logging.getLogger(__name__)


class OrderStore:
    """Reads and writes orders in a single CSV file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = threading.RLock()

    # ─── Storage lifecycle ──────────────────────────────────────

    def ensure_storage(self) -> None:
        """Create the data directory and a header-only file if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.path.open("x", encoding="utf-8", newline="") as f:
                f.write(_encode_lines([list(ORDER_COLUMNS)]))
            logger.info(f"Created orders file {self.path}")
        except FileExistsError:
            pass

    # ─── Reads ──────────────────────────────────────────────────

    def read_all(self) -> list[Order]:
        """Load every order in file order. Raises SchemaError on a bad header."""
        with self._lock:
            self.ensure_storage()
            with self.path.open("r", encoding="utf-8-sig", newline="") as f:
                text = f.read()
        return self._parse(text)

    def get(self, order_id: int) -> Order | None:
        return next((o for o in self.read_all() if o.id == order_id), None)

    @staticmethod
    def next_id(orders: Iterable[Order]) -> int:
        return allocate_next_id(orders)

    def health_check(self) -> bool:
        """Check the file is readable with a valid header (for readiness probes)."""
        try:
            self.read_all()
            return True
        except (SchemaError, OSError) as e:
            logger.error(f"Order store health check failed: {e}")
            return False

    # ─── Writes ─────────────────────────────────────────────────

    def append(self, order: Order) -> None:
        """Append one order line. Does not check for id collisions."""
        with self._lock:
            self.ensure_storage()
            prefix = self._append_prefix()
            with self.path.open("a", encoding="utf-8", newline="") as f:
                f.write(prefix + _encode_lines([encode_row(order)]))

    def create(
        self,
        customer: str,
        item: str,
        qty: int,
        status: str = DEFAULT_STATUS,
        created_at: str | None = None,
    ) -> Order:
        """Allocate the next id and append a new order."""
        with self._lock:
            order = Order(
                id=self.next_id(self.read_all()),
                customer=customer,
                item=item,
                qty=qty,
                status=status,
                created_at=created_at or _utc_now_iso(),
            )
            self.append(order)
        logger.info(
            f"Order {order.id} created",
            extra={"order_id": order.id, "operation": "create"},
        )
        return order

    def update(self, order_id: int, patch: OrderPatch) -> Order | None:
        """Merge patch into the order and rewrite the file. None if absent."""
        with self._lock:
            orders = self.read_all()
            index = next(
                (i for i, o in enumerate(orders) if o.id == order_id), None,
            )
            if index is None:
                return None
            orders[index] = apply_patch(orders[index], patch)
            self.write_all(orders)
        logger.info(
            f"Order {order_id} updated",
            extra={"order_id": order_id, "operation": "update"},
        )
        return orders[index]

    def delete(self, order_id: int) -> bool:
        """Remove the order and rewrite the file. False if absent."""
        with self._lock:
            orders = self.read_all()
            remaining = [o for o in orders if o.id != order_id]
            if len(remaining) == len(orders):
                return False
            self.write_all(remaining)
        logger.info(
            f"Order {order_id} deleted",
            extra={"order_id": order_id, "operation": "delete"},
        )
        return True

    def write_all(self, orders: Iterable[Order]) -> None:
        """Replace the file with the header plus one line per order."""
        content = _encode_lines(
            [list(ORDER_COLUMNS)] + [encode_row(o) for o in orders],
        )
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())
                os.chmod(tmp_name, self._file_mode())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    # ─── Helpers ────────────────────────────────────────────────

    def _file_mode(self) -> int:
        """Permission bits for a rewrite: the current file's, else 0o666 minus umask."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def _append_prefix(self) -> str:
        """Header for an empty file, newline if the tail lacks one, else nothing."""
        with self.path.open("rb") as f:
            f.seek(0, os.SEEK_END)
            if f.tell() == 0:
                return _encode_lines([list(ORDER_COLUMNS)])
            f.seek(-1, os.SEEK_END)
            return "" if f.read(1) == b"\n" else "\n"

    def _parse(self, text: str) -> list[Order]:
        records = _records(text)
        header = next(records, None)
        if header is None:
            return []
        if not is_header_row(header):
            raise SchemaError(found=",".join(header), expected=HEADER_LINE)

        orders: list[Order] = []
        dropped = 0
        for row in records:
            order = decode_row(row)
            if order is None:
                dropped += 1
                continue
            orders.append(order)
        if dropped:
            logger.warning(
                f"Skipped {dropped} malformed row(s) in {self.path}",
                extra={"rows_dropped": dropped, "operation": "read"},
            )
        return orders


def _records(text: str) -> Iterator[list[str]]:
    """Split text into rows, one physical line each unless a quoted field spans lines.

    A line with an unbalanced quote joins the following lines only when the
    joined text parses to exactly one full row; otherwise it is split on bare
    commas on its own, so a stray quote never swallows the rows after it.
    """
    lines = text.split("\n")
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if is_blank_row([line]):
            continue
        quotes = line.count('"')
        if quotes % 2 == 1:
            end = _balancing_line(lines, i, quotes)
            if end is not None:
                cells = _parse_quoted("\n".join(lines[i - 1:end + 1]).rstrip("\r"))
                if cells is not None and len(cells) == len(ORDER_COLUMNS):
                    yield cells
                    i = end + 1
                    continue
            yield line.rstrip("\r").split(",")
            continue
        line = line.rstrip("\r")
        yield _parse_quoted(line) or line.split(",")


def _balancing_line(lines: list[str], start: int, quotes: int) -> int | None:
    """Index of the first line from start that closes an odd quote count."""
    for j in range(start, len(lines)):
        quotes += lines[j].count('"')
        if quotes % 2 == 0:
            return j
    return None


def _parse_quoted(text: str) -> list[str] | None:
    """Strict quote-aware parse of one record; None unless it is exactly one valid row."""
    try:
        rows = list(csv.reader(io.StringIO(text, newline=""), strict=True))
    except csv.Error:
        return None
    return rows[0] if len(rows) == 1 else None


def _encode_lines(rows: list[list[str]]) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerows(rows)
    return buf.getvalue()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z",
    )


# Singleton (initialized on startup)
order_store: OrderStore | None = None


def init_store(path: str | os.PathLike) -> OrderStore:
    global order_store
    order_store = OrderStore(path)
    order_store.ensure_storage()
    return order_store


def get_store() -> OrderStore:
    """FastAPI dependency for the order store."""
    if not order_store:
        raise RuntimeError("Order store not initialized")
    return order_store
