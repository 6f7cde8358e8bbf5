"""Veredictos das duas fases de classificação."""

import enum


class RequestVerdict(enum.Enum):
    IGNORE = "ignore"        # rastreamento/analytics: requisição abortada
    REJECT = "reject"        # segue na rede, mas não é rastreada
    CANDIDATE = "candidate"  # aguarda a verificação da resposta


class ResponseVerdict(enum.Enum):
    CONFIRMED_VIDEO = "confirmed-video"
    CONFIRMED_AUDIO = "confirmed-audio"
    INCONCLUSIVE = "inconclusive"
