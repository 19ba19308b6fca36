# app/modules/inventory/repository.py
import copy
import csv
import logging
import os
import re
import tempfile
import threading
from typing import List, Dict, Optional, Tuple

from app.core.exceptions import (
    BinNotFoundError, SkuNotFoundError, InvalidRequestError,
    StorageUnreadableError, StorageMalformedError, StorageUnwritableError
)
from .schemas import InventoryTable

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def parse_quantity(cell: Optional[str]) -> int:
    """
    Cantidad de una celda: el entero inicial ("10.0" -> 10, "12abc" -> 12).
    Vacía o sin dígitos iniciales cuenta como 0; nunca negativa.
    """
    if cell is None:
        return 0
    match = _LEADING_INT.match(str(cell))
    if match is None:
        return 0
    return max(0, int(match.group(0)))


class InventoryRepository:
    """
    Repositorio del inventario sobre un archivo CSV

    Filas = bins, columnas = SKUs. El archivo es la fuente de verdad: cada
    escritura reemplaza el archivo completo. Un único lock por instancia
    serializa carga, descuento y persistencia.
    """

    def __init__(self, csv_path: str, cache_table: bool = True):
        self.csv_path = csv_path
        self.cache_table = cache_table
        self._lock = threading.RLock()
        self._cache: Optional[Tuple[Tuple[int, int], InventoryTable]] = None

    # ==================== LECTURA ====================

    def load(self) -> InventoryTable:
        """Cargar la tabla (copia independiente; el llamador puede mutarla)"""
        with self._lock:
            stamp = self._file_stamp()

            if self.cache_table and self._cache and self._cache[0] == stamp:
                return copy.deepcopy(self._cache[1])

            table = self._read_table()
            logger.debug(f"Inventario cargado: {len(table.rows)} bins, {len(table.columns) - 1} SKUs")

            if self.cache_table:
                self._cache = (stamp, copy.deepcopy(table))
            return table

    def read_all(self) -> List[Dict[str, str]]:
        return self.load().rows

    def columns(self, table: InventoryTable) -> List[str]:
        """SKUs en orden del archivo; vacío si la tabla no tiene filas"""
        if not table.rows:
            return []
        return list(table.columns[1:])

    def search(self, table: InventoryTable, sku: str, threshold: int) -> List[Dict[str, str]]:
        """Bins cuya cantidad del SKU es mayor que `threshold`"""
        return [
            dict(row) for row in table.rows
            if parse_quantity(row.get(sku)) > threshold
        ]

    # ==================== ESCRITURA ====================

    def decrement(self, bin_id: str, sku: str, amount: int) -> Tuple[int, int]:
        """
        Restar `amount` del SKU en el bin y persistir la tabla.

        La cantidad nunca baja de 0: un descuento mayor al stock deja 0.
        Retorna (valor anterior, valor nuevo).
        """
        if amount < 0:
            raise InvalidRequestError(f"Amount must not be negative: {amount}")

        with self._lock:
            table = self.load()

            row = table.find_row(bin_id)
            if row is None:
                raise BinNotFoundError()
            if sku not in table.columns[1:]:
                raise SkuNotFoundError(f"SKU not found: {sku}")

            previous = parse_quantity(row[sku])
            updated = max(0, previous - amount)
            row[sku] = str(updated)

            self.persist(table)
            return previous, updated

    def persist(self, table: InventoryTable):
        """
        Reescribir el CSV completo.

        Se escribe a un archivo temporal del mismo directorio y se reemplaza
        con os.replace: el archivo queda completo con la versión vieja o la nueva.
        """
        directory = os.path.dirname(os.path.abspath(self.csv_path))

        with self._lock:
            tmp_path = None
            try:
                fd, tmp_path = tempfile.mkstemp(prefix=".inventory-", suffix=".tmp", dir=directory)
                with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
                    writer = csv.writer(f, lineterminator="\n")
                    writer.writerow(table.columns)
                    for row in table.rows:
                        writer.writerow([row.get(column) or "0" for column in table.columns])
                    f.flush()
                    os.fsync(f.fileno())
                self._copy_mode(tmp_path)
                os.replace(tmp_path, self.csv_path)
            except OSError as e:
                if tmp_path and os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise StorageUnwritableError(f"Inventory file could not be written: {e}") from e

            if self.cache_table:
                self._cache = (self._file_stamp(), copy.deepcopy(table))
            logger.info(f"💾 Inventario guardado: {len(table.rows)} bins en {self.csv_path}")

    # ==================== INTERNOS ====================

    def _file_stamp(self) -> Tuple[int, int]:
        try:
            st = os.stat(self.csv_path)
        except OSError as e:
            raise StorageUnreadableError(f"Inventory file is missing or unreadable: {self.csv_path}") from e
        return st.st_mtime_ns, st.st_size

    def _copy_mode(self, tmp_path: str):
        try:
            os.chmod(tmp_path, os.stat(self.csv_path).st_mode & 0o777)
        except FileNotFoundError:
            pass

    def _read_table(self) -> InventoryTable:
        try:
            with open(self.csv_path, newline="", encoding="utf-8-sig") as f:
                records = list(csv.reader(f))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise StorageUnreadableError(f"Inventory file is missing or unreadable: {e}") from e

        # Numerar líneas antes de descartar las vacías para los mensajes de error
        numbered = [
            (line_no, record) for line_no, record in enumerate(records, start=1)
            if any(cell.strip() for cell in record)
        ]
        if not numbered:
            raise StorageMalformedError("Inventory file has no header row")

        _, header = numbered[0]
        columns = [name.strip() for name in header]
        if any(not name for name in columns):
            raise StorageMalformedError("Inventory header has a blank column name")
        if len(set(columns)) != len(columns):
            raise StorageMalformedError("Inventory header has duplicated column names")

        identity = columns[0]
        rows = []
        seen = set()
        for line_no, record in numbered[1:]:
            if len(record) != len(columns):
                raise StorageMalformedError(
                    f"Line {line_no} has {len(record)} cells, expected {len(columns)}"
                )
            row = {
                column: (cell if cell.strip() else "0")
                for column, cell in zip(columns, record)
            }
            row[identity] = record[0].strip()
            if not row[identity]:
                raise StorageMalformedError(f"Line {line_no} has a blank {identity}")
            if row[identity] in seen:
                raise StorageMalformedError(f"Duplicated {identity} on line {line_no}: {row[identity]}")
            seen.add(row[identity])
            rows.append(row)

        return InventoryTable(columns=columns, rows=rows)
