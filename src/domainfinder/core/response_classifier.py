"""
response_classifier.py
======================
Verificação em tempo de resposta: confirma se a resposta de uma URL
candidata realmente carrega vídeo, áudio ou nada relevante.

Ordem das verificações:
1. Host já confirmado como áudio: inconclusivo (áudio é permanente).
2. Host já confirmado como vídeo: vídeo, sem reavaliar tamanho.
3. Status diferente de 200/206: inconclusivo.
4. content-type sem MIME de vídeo: inconclusivo.
5. Host desconhecido com MIME de vídeo: a política decide (tamanho).
"""

import logging
from typing import Iterable, Mapping, Optional, Set

from rich.console import Console

from domainfinder.core.candidate_tracker import CandidateTracker
from domainfinder.core.config import ACCEPTED_VIDEO_MIME_TYPES
from domainfinder.core.domain_registry import Classification, DomainRegistry
from domainfinder.core.request_filter import get_domain
from domainfinder.core.verdicts import ResponseVerdict
from domainfinder.policies.generic.base import ClassificationPolicy, DiscoveryPolicy

logger = logging.getLogger(__name__)

ELIGIBLE_STATUSES = (200, 206)


def is_video_mime(content_type: str, accepted: Iterable[str] = ACCEPTED_VIDEO_MIME_TYPES) -> bool:
    content_type = (content_type or "").lower()
    return any(mime in content_type for mime in accepted)


class ResponseClassifier:
    """
    Classificador de respostas das URLs candidatas.

    Só altera estado para respostas cuja URL está no CandidateTracker; a
    entrada é removida do tracker assim que a resposta é avaliada.
    """

    def __init__(
        self,
        registry: DomainRegistry,
        tracker: CandidateTracker,
        policy: Optional[ClassificationPolicy] = None,
        store=None,
        reporter=None,
        console: Optional[Console] = None,
        video_mime_types: Optional[Iterable[str]] = None,
    ):
        """
        Parâmetros
        ----------
        store : DomainStore, opcional
            Recebe os snapshots do registro a cada domínio novo.
        reporter : SessionReporter, opcional
            Usado para imprimir as estatísticas após um domínio novo de vídeo.
        """
        self.registry = registry
        self.tracker = tracker
        self.policy = policy or DiscoveryPolicy()
        self.store = store
        self.reporter = reporter
        self.console = console or Console()
        self.video_mime_types = list(video_mime_types or ACCEPTED_VIDEO_MIME_TYPES)
        # Domínios que já geraram mensagem nesta execução
        self.logged_this_session: Set[str] = set()

    def handle_response(
        self, url: str, status: int, headers: Mapping[str, str]
    ) -> Optional[ResponseVerdict]:
        """
        Processa a resposta de uma requisição.

        Retorna None (sem efeitos colaterais) se a URL não for candidata.
        """
        if url not in self.tracker:
            return None
        try:
            return self._classify(url, status, headers)
        finally:
            self.tracker.resolve(url)

    def _classify(self, url: str, status: int, headers: Mapping[str, str]) -> ResponseVerdict:
        domain = get_domain(url)
        if not domain:
            return ResponseVerdict.INCONCLUSIVE

        if self.registry.is_audio(domain):
            return ResponseVerdict.INCONCLUSIVE

        if self.registry.is_video(domain):
            if domain not in self.logged_this_session:
                self.logged_this_session.add(domain)
                self.console.print(f"\n[cyan]Vídeo detectado em domínio conhecido:[/] {domain}")
            return ResponseVerdict.CONFIRMED_VIDEO

        if status not in ELIGIBLE_STATUSES:
            return ResponseVerdict.INCONCLUSIVE

        headers = {str(k).lower(): v for k, v in headers.items()}
        if not is_video_mime(headers.get("content-type", ""), self.video_mime_types):
            return ResponseVerdict.INCONCLUSIVE

        verdict = self.policy.classify_unseen(headers)
        if verdict is ResponseVerdict.CONFIRMED_VIDEO:
            self._record_video(domain)
        elif verdict is ResponseVerdict.CONFIRMED_AUDIO:
            self._record_audio(domain, headers.get("content-length"))
        return verdict

    def _record_video(self, domain: str) -> None:
        self.registry.promote(domain, Classification.VIDEO)
        if self.store is not None:
            self.store.save_video(self.registry.snapshot())
        self.logged_this_session.add(domain)
        self.console.print(f"\n[bold green]Novo domínio de vídeo detectado:[/] {domain}")
        if self.reporter is not None:
            self.reporter.print_stats()

    def _record_audio(self, domain: str, length) -> None:
        self.registry.promote(domain, Classification.AUDIO)
        if self.store is not None:
            self.store.save_audio(self.registry.audio_snapshot())
        self.logged_this_session.add(domain)
        logger.info("Domínio classificado como áudio: %s (content-length=%s)", domain, length)
