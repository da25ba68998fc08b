"""SQLite transaction store used as the sync sink."""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterator, List, Optional

from ..exceptions import SinkWriteError
from ..models.core import ParsedTransaction, TransactionKind
from ..sync.base import TransactionSink


logger = logging.getLogger(__name__)


SOURCE_SMS = 'SMS'
SOURCE_MANUAL = 'MANUAL'


@dataclass
class StoredTransaction:
    """A row of the transactions table"""
    id: str
    amount: Decimal
    category: str
    date: str  # ISO format YYYY-MM-DD
    notes: str
    type: str  # "DEBIT" or "CREDIT"
    source: str = SOURCE_MANUAL
    bank_name: Optional[str] = None
    account_suffix: Optional[str] = None
    fingerprint: Optional[str] = None


class SQLiteTransactionStore(TransactionSink):
    """Stores transactions in a single SQLite table.

    Synced rows carry the source message fingerprint in a UNIQUE column,
    which lets the coordinator skip messages it has already stored.
    """

    COLUMNS = ('id, amount, category, date, notes, type, source, '
               'bank_name, account_suffix, fingerprint')

    def __init__(self, db_path: str = "sms_budget.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path))
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS transactions (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        amount TEXT NOT NULL,
                        category TEXT NOT NULL,
                        date TEXT NOT NULL,
                        notes TEXT,
                        type TEXT NOT NULL,
                        source TEXT DEFAULT 'MANUAL',
                        bank_name TEXT,
                        account_suffix TEXT,
                        fingerprint TEXT UNIQUE
                    )
                """)
                conn.execute("CREATE INDEX IF NOT EXISTS idx_date ON transactions(date)")
        except sqlite3.Error as e:
            raise SinkWriteError(f"Cannot initialise transaction store {self.db_path}: {e}") from e

    def append(self, transaction: ParsedTransaction) -> str:
        """Insert a synced transaction and return its id"""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO transactions
                    (amount, category, date, notes, type, source, bank_name, account_suffix, fingerprint)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        str(transaction.amount),
                        transaction.category,
                        transaction.occurred_on.isoformat(),
                        transaction.description,
                        transaction.kind.value,
                        SOURCE_SMS,
                        transaction.bank_name,
                        transaction.account_suffix,
                        transaction.fingerprint,
                    )
                )
                return str(cursor.lastrowid)
        except sqlite3.Error as e:
            raise SinkWriteError(f"Failed to insert transaction: {e}") from e

    def add_manual(self,
                   amount: Decimal,
                   kind: TransactionKind,
                   category: str,
                   on: date,
                   notes: str = "",
                   bank_name: Optional[str] = None) -> str:
        """Insert a manually entered transaction and return its id"""
        if kind not in (TransactionKind.DEBIT, TransactionKind.CREDIT):
            raise ValueError(f"Invalid transaction kind: {kind}")
        if Decimal(amount) <= 0:
            raise ValueError(f"Amount must be positive: {amount}")

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO transactions (amount, category, date, notes, type, source, bank_name)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (str(amount), category, on.isoformat(), notes, kind.value, SOURCE_MANUAL, bank_name)
                )
                return str(cursor.lastrowid)
        except sqlite3.Error as e:
            raise SinkWriteError(f"Failed to insert transaction: {e}") from e

    def update(self, transaction: StoredTransaction) -> bool:
        """Update an existing row. Returns False if the id does not exist."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    UPDATE transactions
                    SET amount = ?, category = ?, date = ?, notes = ?, bank_name = ?, type = ?
                    WHERE id = ?
                    """,
                    (
                        str(transaction.amount),
                        transaction.category,
                        transaction.date,
                        transaction.notes,
                        transaction.bank_name,
                        transaction.type,
                        int(transaction.id),
                    )
                )
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise SinkWriteError(f"Failed to update transaction {transaction.id}: {e}") from e

    def delete(self, transaction_id: str) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (int(transaction_id),))
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise SinkWriteError(f"Failed to delete transaction {transaction_id}: {e}") from e

    def get(self, transaction_id: str) -> Optional[StoredTransaction]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {self.COLUMNS} FROM transactions WHERE id = ?", (int(transaction_id),)
            ).fetchone()
        return self._row_to_transaction(row) if row else None

    def list_transactions(self, limit: Optional[int] = None) -> List[StoredTransaction]:
        """All rows, newest date first"""
        query = f"SELECT {self.COLUMNS} FROM transactions ORDER BY date DESC, id DESC"
        params = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_transaction(r) for r in rows]

    def contains_fingerprint(self, fingerprint: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM transactions WHERE fingerprint = ?", (fingerprint,)
            ).fetchone()
        return row is not None

    @staticmethod
    def _row_to_transaction(row) -> StoredTransaction:
        return StoredTransaction(
            id=str(row[0]),
            amount=Decimal(row[1]),
            category=row[2],
            date=row[3],
            notes=row[4] or "",
            type=row[5],
            source=row[6],
            bank_name=row[7],
            account_suffix=row[8],
            fingerprint=row[9],
        )
