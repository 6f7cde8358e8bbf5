"""
domainfinder.core
=================
Módulos principais do domainfinder.

- domain_registry: Conjuntos de domínios de vídeo, áudio e ignorados.
- request_filter: Verificação em tempo de requisição.
- response_classifier: Verificação em tempo de resposta.
- candidate_tracker: URLs candidatas em trânsito, com TTL.
- storage: Persistência em JSON com fila de escrita serializada.
- reporter: Relatório no console e exportação CSV.
- monitor: Orquestração com Playwright.
"""
