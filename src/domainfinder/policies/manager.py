"""
manager.py
==========
Gerenciador de políticas de classificação do domainfinder.

Responsável por registrar as políticas disponíveis e selecionar uma pelo nome.
A política de descoberta (com heurística de tamanho) é o padrão e também o
fallback para nomes desconhecidos.
"""

import logging
from typing import List, Optional

from domainfinder.core.config import DEFAULT_SIZE_THRESHOLD
from domainfinder.policies.generic.base import ClassificationPolicy, DiscoveryPolicy
from domainfinder.policies.specific_sites.spotify import PatternPolicy

logger = logging.getLogger(__name__)


class PolicyManager:
    """
    Gerencia o registro e a seleção de políticas.

    Políticas são buscadas pelo nome (sem diferenciar maiúsculas). Se nenhuma
    casar, a DiscoveryPolicy é retornada como fallback.
    """

    def __init__(
        self,
        size_threshold: int = DEFAULT_SIZE_THRESHOLD,
        reference_domains: Optional[List[str]] = None,
    ):
        self.policies: List[ClassificationPolicy] = []
        self.default_policy = DiscoveryPolicy(size_threshold=size_threshold)
        self._register_defaults(reference_domains)

    def _register_defaults(self, reference_domains: Optional[List[str]]) -> None:
        """Registra as políticas incluídas no pacote."""
        self.register_policy(self.default_policy)
        self.register_policy(PatternPolicy(reference_domains=reference_domains))

    def register_policy(self, policy: ClassificationPolicy) -> None:
        """Registra uma política no gerenciador."""
        self.policies.append(policy)

    def names(self) -> List[str]:
        return [p.name for p in self.policies]

    def get_policy(self, name: str) -> ClassificationPolicy:
        """
        Retorna a política registrada com o nome fornecido.
        Fallback: DiscoveryPolicy.
        """
        for policy in self.policies:
            if policy.name.lower() == name.lower():
                return policy
        logger.warning("Política '%s' desconhecida; usando '%s'.", name, self.default_policy.name)
        return self.default_policy
