"""
candidate_tracker.py
====================
Conjunto limitado de URLs candidatas aguardando a verificação da resposta.

Cada entrada guarda o instante de inserção; entradas mais antigas que o TTL
configurado são descartadas pela varredura periódica, de modo que requisições
que nunca produzem resposta ou falha (ex: navegação no meio do download) não
permanecem no conjunto indefinidamente.
"""

import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class CandidateTracker:
    """Conjunto de URLs em trânsito, indexado pela URL exata."""

    def __init__(self, ttl: float = 120.0, clock: Callable[[], float] = time.monotonic):
        """
        Parâmetros
        ----------
        ttl : float
            Tempo máximo (segundos) que uma URL pode permanecer como candidata.
        clock : callable
            Relógio monotônico; injetável para testes.
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, float] = {}
        self.evicted = 0

    def mark(self, url: str) -> None:
        """Inserção idempotente; mantém o instante da primeira marcação."""
        if url not in self._entries:
            self._entries[url] = self._clock()

    def resolve(self, url: str) -> bool:
        """Remove a URL se presente. Retorna True se ela era candidata."""
        return self._entries.pop(url, None) is not None

    def sweep(self, now: Optional[float] = None) -> int:
        """Descarta as entradas cujo tempo de vida excedeu o TTL."""
        now = self._clock() if now is None else now
        expired = [url for url, t in self._entries.items() if now - t > self.ttl]
        for url in expired:
            del self._entries[url]
        if expired:
            self.evicted += len(expired)
            logger.debug("%d candidatos expirados descartados", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CandidateTracker(pending={len(self._entries)}, ttl={self.ttl})"
