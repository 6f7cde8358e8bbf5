"""
domain_registry.py
==================
Registro autoritativo dos domínios classificados durante a sessão.

Mantém três conjuntos: domínios confirmados de vídeo, domínios confirmados de
áudio e domínios ignorados (rastreamento/analytics). Um domínio nunca fica ao
mesmo tempo em vídeo e áudio: a promoção remove-o do conjunto conflitante
antes de inseri-lo no conjunto de destino.
"""

import enum
import logging
from typing import Iterable, List, Optional, Set

logger = logging.getLogger(__name__)


class Classification(enum.Enum):
    VIDEO = "video"
    AUDIO = "audio"


class DomainRegistry:
    """
    Conjuntos de domínios de vídeo, áudio e ignorados.

    Uso típico
    ----------
    >>> registry = DomainRegistry(ignored=["analytics"])
    >>> registry.seed(["cdn.example.com"], ["video.akamaized.net"])
    >>> registry.promote("media.example.net", Classification.VIDEO)
    True
    """

    def __init__(self, ignored: Optional[Iterable[str]] = None):
        self.video: Set[str] = set()
        self.audio: Set[str] = set()
        self.ignored: Set[str] = set(ignored or [])

    def seed(
        self,
        initial: Iterable[str],
        reference: Iterable[str],
        initial_audio: Iterable[str] = (),
    ) -> None:
        """
        Mescla o estado persistido com a lista de referência.

        Entradas da referência sempre vencem: terminam em `video` mesmo que o
        arquivo de áudio (possivelmente corrompido) diga o contrário.
        """
        for domain in initial_audio:
            if domain:
                self.audio.add(domain)
        for domain in initial:
            if domain and domain not in self.audio:
                self.video.add(domain)
        loaded = len(self.video)
        for domain in reference:
            self.audio.discard(domain)
            if domain not in self.video:
                self.video.add(domain)
                logger.debug("Domínio de referência adicionado: %s", domain)
        logger.info(
            "Registro inicializado: %d persistidos, %d de vídeo, %d de áudio.",
            loaded, len(self.video), len(self.audio),
        )

    def promote(self, domain: str, classification: Classification) -> bool:
        """
        Move o domínio para o conjunto da classificação.

        Retorna True se o domínio ainda não estava no conjunto de destino.
        """
        if classification is Classification.VIDEO:
            target, other = self.video, self.audio
        else:
            target, other = self.audio, self.video
        other.discard(domain)
        if domain in target:
            return False
        target.add(domain)
        return True

    def is_video(self, domain: str) -> bool:
        return domain in self.video

    def is_audio(self, domain: str) -> bool:
        return domain in self.audio

    def is_ignored(self, host: str) -> bool:
        """True se o host contiver algum padrão da lista de ignorados."""
        return any(pattern in host for pattern in self.ignored)

    def snapshot(self) -> List[str]:
        """Lista ordenada dos domínios de vídeo (para persistência/relatórios)."""
        return sorted(self.video)

    def audio_snapshot(self) -> List[str]:
        return sorted(self.audio)

    def __len__(self) -> int:
        return len(self.video)

    def __repr__(self) -> str:
        return f"DomainRegistry(video={len(self.video)}, audio={len(self.audio)})"
