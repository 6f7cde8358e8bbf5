"""
spotify.py
==========
Política estrita baseada em padrões conhecidos da CDN de vídeo do Spotify.

Uma requisição só vira candidata quando:
1. O host contém um domínio de vídeo de referência.
2. O caminho contém um dos segmentos típicos (/segments/v1/, /encodings/...).
3. O caminho termina com uma extensão de vídeo reconhecida (.mp4, .m3u8...).

Gera menos falsos positivos que a política de descoberta, mas nunca encontra
hosts fora da lista de referência. Na resposta basta o MIME de vídeo.
"""

import re
from typing import List, Mapping, Optional

from domainfinder.core.config import (
    REFERENCE_VIDEO_DOMAINS,
    REQUIRED_VIDEO_PATH_SEGMENTS,
    VIDEO_EXTENSIONS_PATTERN,
)
from domainfinder.core.verdicts import ResponseVerdict
from domainfinder.policies.generic.base import ClassificationPolicy


class PatternPolicy(ClassificationPolicy):
    """Política por padrões de domínio, caminho e extensão."""

    def __init__(
        self,
        reference_domains: Optional[List[str]] = None,
        path_segments: Optional[List[str]] = None,
        extensions_pattern: str = VIDEO_EXTENSIONS_PATTERN,
    ):
        self.reference_domains = list(reference_domains or REFERENCE_VIDEO_DOMAINS)
        self.path_segments = list(path_segments or REQUIRED_VIDEO_PATH_SEGMENTS)
        self._extensions_re = re.compile(extensions_pattern, re.IGNORECASE)

    @property
    def name(self) -> str:
        return "pattern"

    @property
    def description(self) -> str:
        return (
            "Só rastreia hosts de referência com caminho e extensão de vídeo; "
            "confirma pelo MIME, sem heurística de tamanho."
        )

    def accepts_request(self, host: str, path: str) -> bool:
        if not any(domain in host for domain in self.reference_domains):
            return False
        lower_path = path.lower()
        if not any(segment in lower_path for segment in self.path_segments):
            return False
        return bool(self._extensions_re.search(lower_path))

    def classify_unseen(self, headers: Mapping[str, str]) -> ResponseVerdict:
        return ResponseVerdict.CONFIRMED_VIDEO
