"""
request_filter.py
=================
Verificação em tempo de requisição: decide, para cada URL interceptada, se
ela deve ser abortada (rastreamento/analytics), rejeitada (segue na rede sem
ser rastreada) ou marcada como candidata a vídeo.

As verificações aqui são apenas comparações de strings sobre host e caminho;
a inspeção de cabeçalhos fica para a fase de resposta.
"""

import logging
import urllib.parse
from typing import List, Optional, Tuple

from domainfinder.core.config import NON_MEDIA_EXTENSIONS, SKIP_DOMAINS
from domainfinder.core.domain_registry import DomainRegistry
from domainfinder.core.verdicts import RequestVerdict
from domainfinder.policies.generic.base import ClassificationPolicy, DiscoveryPolicy

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Funções auxiliares
# ---------------------------------------------------------------------------

def split_url(url: str) -> Optional[Tuple[str, str]]:
    """Retorna (host, caminho) ou None se a URL for inválida ou não tiver host."""
    try:
        parsed = urllib.parse.urlparse(url)
        host = parsed.hostname
    except (ValueError, AttributeError):
        return None
    if not host:
        return None
    return host, parsed.path or "/"


def get_domain(url: str) -> Optional[str]:
    """Extrai o host da URL (None se inválida)."""
    parts = split_url(url)
    return parts[0] if parts else None


# ---------------------------------------------------------------------------
# Classe principal: RequestFilter
# ---------------------------------------------------------------------------

class RequestFilter:
    """
    Filtro de requisições em três saídas: IGNORE, REJECT ou CANDIDATE.

    Uso típico
    ----------
    >>> request_filter = RequestFilter(registry, policy)
    >>> request_filter.check("https://video.akamaized.net/segments/v1/a.mp4")
    <RequestVerdict.CANDIDATE: 'candidate'>
    """

    def __init__(
        self,
        registry: DomainRegistry,
        policy: Optional[ClassificationPolicy] = None,
        skip_domains: Optional[List[str]] = None,
        non_media_extensions: Optional[List[str]] = None,
    ):
        self.registry = registry
        self.policy = policy or DiscoveryPolicy()
        self.skip_domains = list(SKIP_DOMAINS if skip_domains is None else skip_domains)
        self.non_media_extensions = tuple(
            NON_MEDIA_EXTENSIONS if non_media_extensions is None else non_media_extensions
        )

    def _is_skipped(self, host: str) -> bool:
        return any(skip in host for skip in self.skip_domains)

    def _is_non_media(self, path: str) -> bool:
        return path.lower().endswith(self.non_media_extensions)

    def check(self, url: str) -> RequestVerdict:
        """Classifica a URL de uma requisição de saída."""
        parts = split_url(url)
        if parts is None:
            return RequestVerdict.REJECT
        host, path = parts

        if self.registry.is_ignored(host):
            return RequestVerdict.IGNORE

        if self._is_skipped(host) or self._is_non_media(path):
            return RequestVerdict.REJECT

        if not self.policy.accepts_request(host, path):
            return RequestVerdict.REJECT

        return RequestVerdict.CANDIDATE
