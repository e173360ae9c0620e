# ==============================================================================
# ALMACENAMIENTO JSON
# ==============================================================================
# Cada repositorio es un archivo JSON dentro de DATA_DIR. Todas las lecturas
# y escrituras pasan por un lock global re-entrante, y cada escritura
# reemplaza el archivo de una sola vez (temporal único + os.replace).
#
# UnitOfWork agrupa varios repositorios en una sola transacción:
#   - toma el lock durante todo el bloque (leer → validar → escribir)
#   - entrega copias de trabajo de los datos
#   - commit() escribe todo; si una escritura falla, restaura las ya hechas
#   - salir del bloque sin commit() descarta todos los cambios
# ==============================================================================

import json
import logging
import os
import re
import tempfile
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')


def new_id() -> str:
    """Genera un identificador nuevo (uuid4 en hex)."""
    return uuid.uuid4().hex


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))


class StorageError(Exception):
    """Error leyendo o escribiendo un archivo de datos."""


class BaseRepository:
    """
    Un archivo JSON con un contenedor raíz de tipo `root_type`.

    Las subclases fijan `file_name` y `root_type` (dict indexado por id, o
    list para datos que solo se agregan).
    """

    # Compartido por todos los repositorios del proceso
    _file_lock = threading.RLock()

    file_name: str = ''
    root_type: type = dict

    def __init__(self, base_path: str):
        self.file_path = os.path.join(base_path, self.file_name)
        try:
            os.makedirs(base_path, exist_ok=True)
            with self._file_lock:
                if not os.path.exists(self.file_path):
                    self._write_raw(self.root_type())
        except OSError as e:
            logger.error('No se pudo crear %s: %s', self.file_path, e)
            raise StorageError(f'No se pudo crear el archivo de datos {self.file_name}: {e}') from e

    def _read_raw(self) -> Any:
        """
        Contenido actual del archivo.

        Raises:
            StorageError: JSON inválido o archivo ilegible
        """
        with self._file_lock:
            try:
                with open(self.file_path, encoding='utf-8') as f:
                    data = json.load(f)
            except FileNotFoundError:
                return self.root_type()
            except (json.JSONDecodeError, OSError) as e:
                logger.error('No se pudo leer %s: %s', self.file_path, e)
                raise StorageError(f'Archivo de datos ilegible: {self.file_name}') from e
        return data if isinstance(data, self.root_type) else self.root_type()

    def _write_raw(self, data: Any) -> None:
        directory = os.path.dirname(self.file_path) or '.'
        with self._file_lock:
            fd, temp_path = tempfile.mkstemp(prefix=self.file_name + '.', suffix='.tmp', dir=directory)
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(temp_path, self.file_path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise

    def _records(self, data: Any) -> Iterable[Dict[str, Any]]:
        return data.values() if isinstance(data, dict) else data

    def get_all(self) -> Any:
        return self._read_raw()

    def save_all(self, data: Any) -> None:
        """Reemplaza el contenido completo del archivo."""
        self._write_raw(data)

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primer registro cuyo `field` es igual a `value`."""
        return next((r for r in self._records(self.get_all()) if r.get(field) == value), None)


class DictRepository(BaseRepository):
    """{id: registro}, ej. products.json"""

    root_type = dict

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.get_all().get(record_id)


class ListRepository(BaseRepository):
    """[registro, ...] en orden de inserción, ej. sales.json"""

    root_type = list


class UnitOfWork:
    """
    Transacción sobre uno o más repositorios.

    Uso:
        with UnitOfWork(product_repo, sales_repo) as uow:
            products = uow.data(product_repo)
            sales = uow.data(sales_repo)
            ...  # modificar las copias de trabajo
            uow.commit()

    Cualquier excepción dentro del bloque (o no llamar a commit) deja los
    archivos tal como estaban.
    """

    def __init__(self, *repositories: BaseRepository):
        self._repositories = repositories
        self._working: Dict[int, Any] = {}
        self._snapshots: Dict[int, Any] = {}
        self.committed = False

    def __enter__(self) -> 'UnitOfWork':
        BaseRepository._file_lock.acquire()
        try:
            for repo in self._repositories:
                # Dos lecturas: una copia de trabajo y una intacta para rollback
                self._working[id(repo)] = repo._read_raw()
                self._snapshots[id(repo)] = repo._read_raw()
        except Exception:
            BaseRepository._file_lock.release()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and not self.committed:
            logger.debug('Transacción descartada: %s', exc_type.__name__)
        self._working.clear()
        self._snapshots.clear()
        BaseRepository._file_lock.release()
        return False

    def data(self, repo: BaseRepository) -> Any:
        """Copia de trabajo de los datos de un repositorio."""
        return self._working[id(repo)]

    def commit(self) -> None:
        """
        Escribe todas las copias de trabajo modificadas.

        Raises:
            StorageError: Si alguna escritura falla (las anteriores se revierten)
        """
        written = []
        for repo in self._repositories:
            key = id(repo)
            if self._working[key] == self._snapshots[key]:
                continue
            try:
                repo._write_raw(self._working[key])
            except Exception as e:
                logger.error('Fallo escribiendo %s, revirtiendo transacción: %s', repo.file_path, e)
                self._rollback(written)
                raise StorageError(str(e)) from e
            written.append(repo)
        self.committed = True

    def _rollback(self, written: List[BaseRepository]) -> None:
        for repo in reversed(written):
            try:
                repo._write_raw(self._snapshots[id(repo)])
            except Exception:
                logger.exception('No se pudo revertir %s', repo.file_path)
