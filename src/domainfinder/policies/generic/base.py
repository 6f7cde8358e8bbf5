from abc import ABC, abstractmethod
from typing import Mapping, Optional

from domainfinder.core.config import DEFAULT_SIZE_THRESHOLD
from domainfinder.core.verdicts import ResponseVerdict


class ClassificationPolicy(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Nome da política"""
        pass

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def accepts_request(self, host: str, path: str) -> bool:
        """Decide se uma requisição que passou pelos filtros vira candidata"""
        pass

    @abstractmethod
    def classify_unseen(self, headers: Mapping[str, str]) -> ResponseVerdict:
        """Veredicto para um host ainda desconhecido com MIME de vídeo"""
        pass


def parse_content_length(headers: Mapping[str, str]) -> Optional[int]:
    value = headers.get("content-length")
    if value is None:
        return None
    try:
        length = int(str(value).strip())
    except ValueError:
        return None
    return length if length >= 0 else None


class DiscoveryPolicy(ClassificationPolicy):
    """
    Política padrão: toda requisição não rejeitada é candidata, o que permite
    descobrir CDNs ainda desconhecidas. Na resposta, o tamanho separa vídeo de
    fragmentos de áudio servidos com MIME de vídeo.

    Sem content-length (ou com valor inválido) o veredicto é inconclusivo, e
    não áudio: respostas chunked não informam tamanho, e como a classificação
    de áudio é permanente, tratá-las como pequenas marcaria uma CDN de vídeo
    como áudio para sempre. O host volta a ser avaliado na próxima resposta.
    """

    def __init__(self, size_threshold: int = DEFAULT_SIZE_THRESHOLD):
        self.size_threshold = size_threshold

    @property
    def name(self) -> str:
        return "discovery"

    @property
    def description(self) -> str:
        return (
            "Rastreia toda requisição não rejeitada; respostas com MIME de vídeo "
            f"acima de {self.size_threshold} bytes são vídeo, abaixo são áudio."
        )

    def accepts_request(self, host: str, path: str) -> bool:
        return True

    def classify_unseen(self, headers: Mapping[str, str]) -> ResponseVerdict:
        length = parse_content_length(headers)
        if length is None:
            # sem tamanho não há como separar áudio de vídeo
            return ResponseVerdict.INCONCLUSIVE
        if length > self.size_threshold:
            return ResponseVerdict.CONFIRMED_VIDEO
        return ResponseVerdict.CONFIRMED_AUDIO
