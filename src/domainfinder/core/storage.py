"""
storage.py
==========
Persistência das listas de domínios em arquivos JSON.

- read_json_list / write_json_list: leitura e escrita com valores padrão
  seguros (lista vazia na leitura, False na escrita), nunca propagam erros.
- DomainStore: fila FIFO de escrita com um único consumidor. Todas as
  gravações passam pela mesma fila, então duas escritas no mesmo arquivo
  nunca se intercalam.
"""

import asyncio
import json
import logging
import os
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Leitura e escrita de listas JSON
# ---------------------------------------------------------------------------

def read_json_list(path: str) -> List[str]:
    """
    Lê um array JSON de strings.

    Retorna [] se o arquivo não existir, estiver vazio, corrompido ou não
    contiver uma lista. Itens que não são strings são descartados e
    duplicatas são colapsadas (a ordem da primeira ocorrência é mantida).
    """
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return []
        data = json.loads(content)
    except (OSError, ValueError) as e:
        logger.error("Erro ao ler %s: %s", path, e)
        return []

    if not isinstance(data, list):
        logger.warning("%s não contém uma lista JSON; ignorando.", path)
        return []

    seen = set()
    result: List[str] = []
    for item in data:
        if isinstance(item, str) and item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


def write_json_list(path: str, items: Iterable[str]) -> bool:
    """Grava a lista como JSON indentado. Retorna False em caso de erro."""
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(list(items), f, indent=2)
        return True
    except (OSError, TypeError) as e:
        logger.error("Erro ao gravar %s: %s", path, e)
        return False


# ---------------------------------------------------------------------------
# Fila de escrita serializada
# ---------------------------------------------------------------------------

class DomainStore:
    """
    Armazenamento dos domínios de vídeo e áudio com escrita serializada.

    As chamadas a save_video/save_audio apenas enfileiram um snapshot e
    retornam imediatamente; um único worker grava os snapshots em ordem FIFO
    no executor padrão, sem bloquear o event loop.

    Uso típico
    ----------
    >>> store = DomainStore("video_domains.json", "audio_domains.json")
    >>> store.save_video(registry.snapshot())   # dentro do event loop
    >>> await store.close()                     # grava o que estiver pendente
    """

    def __init__(self, video_path: str, audio_path: str):
        self.video_path = video_path
        self.audio_path = audio_path
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._closing = False
        self.failed_writes = 0
        self.dropped_writes = 0

    # -----------------------------------------------------------------------
    # Leitura (síncrona, usada apenas na inicialização)
    # -----------------------------------------------------------------------

    def load_video(self) -> List[str]:
        return read_json_list(self.video_path)

    def load_audio(self) -> List[str]:
        return read_json_list(self.audio_path)

    # -----------------------------------------------------------------------
    # Escrita enfileirada
    # -----------------------------------------------------------------------

    def start(self) -> None:
        """Inicia o worker de escrita. Requer um event loop em execução."""
        if self._worker is not None and not self._worker.done():
            return
        if self._queue is None:
            self._queue = asyncio.Queue()
        self._worker = asyncio.get_running_loop().create_task(self._run())

    def save_video(self, domains: Iterable[str]) -> None:
        self._enqueue(self.video_path, list(domains))

    def save_audio(self, domains: Iterable[str]) -> None:
        self._enqueue(self.audio_path, list(domains))

    def _enqueue(self, path: str, items: List[str]) -> None:
        if self._closing:
            # Eventos tardios durante o encerramento não reabrem a fila
            self.dropped_writes += 1
            logger.warning("Armazenamento encerrado; gravação em %s descartada.", path)
            return
        self.start()
        self._queue.put_nowait((path, items))

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            job: Tuple[str, List[str]] = await self._queue.get()
            path, items = job
            try:
                ok = await loop.run_in_executor(None, write_json_list, path, items)
                if ok:
                    logger.debug("Gravados %d domínios em %s", len(items), path)
                else:
                    self.failed_writes += 1
            finally:
                self._queue.task_done()

    async def flush(self) -> None:
        """Aguarda até que todas as escritas enfileiradas tenham sido gravadas."""
        if self._queue is not None and self._worker is not None:
            await self._queue.join()

    async def close(self, timeout: Optional[float] = None) -> bool:
        """
        Grava o que estiver pendente (respeitando o timeout) e encerra o worker.

        Retorna False se o timeout expirar antes de esvaziar a fila. Depois
        de chamado, novas gravações são descartadas.
        """
        self._closing = True
        flushed = True
        try:
            await asyncio.wait_for(self.flush(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Tempo esgotado ao gravar domínios; %d escritas perdidas.", self.pending)
            flushed = False
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
        return flushed
