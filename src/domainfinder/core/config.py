"""
config.py
=========
Configuração do domainfinder: listas de referência, padrões de filtragem e
parâmetros ajustáveis do classificador.

As listas são constantes de módulo (valores padrão); a classe DetectorConfig
agrupa tudo o que o monitor precisa e pode ser sobrescrita pela CLI.
"""

import os
from dataclasses import dataclass, field
from typing import List


# ---------------------------------------------------------------------------
# Domínios de referência
# ---------------------------------------------------------------------------

# Hosts conhecidos de antemão por servir vídeo do Spotify. Sempre mesclados
# ao estado persistido na inicialização.
REFERENCE_VIDEO_DOMAINS: List[str] = [
    "video-fa.scdn.co",
    "video.spotifycdn.com",
    "video.akamaized.net",
    "video-ak.cdn.spotify.com",
    "video-fa.sc",
    "video-akpcw.spotifycdn.com",
    "video-akpcw-cdn-spotify-com.akamaized.net",
    "video-ak.cdn.spotify.com.splitter-eip.akadns.net",
    "eip-ntt.video-ak.cdn.spotify.com.akahost.net",
    "video-fa.cdn.spotify.com",
    "video-fa-b.cdn.spotify.com",
]

# Segmentos de caminho que indicam dados reais de vídeo (política estrita).
REQUIRED_VIDEO_PATH_SEGMENTS: List[str] = ["/segments/v1/", "/encodings/", "/profiles/"]

# Extensões típicas de streams de vídeo (política estrita).
VIDEO_EXTENSIONS_PATTERN: str = r"\.(mp4|webm|m3u8|mpd)(\?|$)"

# Tipos MIME aceitos no cabeçalho content-type da resposta.
ACCEPTED_VIDEO_MIME_TYPES: List[str] = [
    "video/mp4",
    "video/webm",
    "video/ogg",
    "video/",
    "application/x-mpegurl",
    "application/vnd.apple.mpegurl",
    "application/dash+xml",
]

# ---------------------------------------------------------------------------
# Constantes de filtragem
# ---------------------------------------------------------------------------

# APIs e autenticação: a requisição segue normalmente, mas não é rastreada.
SKIP_DOMAINS: List[str] = [
    "api-partner.spotify.com",
    "api.spotify.com",
    "accounts.spotify.com",
    "gue1-spclient.spotify.com",
]

# Rastreamento, analytics e publicidade: a requisição é abortada.
IGNORE_DOMAINS: List[str] = [
    "sentry.io",
    "cookielaw.org",
    "google-analytics",
    "doubleclick.net",
    "analytics",
    "tracker",
    "telemetry",
    "log.spotify.com",
]

# Extensões que nunca carregam mídia (estilos, scripts, imagens, fontes,
# marcação e source maps).
NON_MEDIA_EXTENSIONS: List[str] = [
    ".css",
    ".js", ".mjs",
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico",
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    ".html", ".htm",
    ".map",
]

# Erros do console da página que são ruído conhecido do player.
IGNORED_CONSOLE_ERRORS: List[str] = [
    "EMEError: No supported keysystem was found",
    "vendor~web-player",
    "sentry.io",
    "cookielaw.org",
    ".akamaized.",
    "cdn.",
    "ingest.sentry",
    "connect-state",
    "Failed to load resource",
]

DEFAULT_START_URL = "https://open.spotify.com"

# Respostas com MIME de vídeo abaixo deste tamanho são tratadas como
# fragmentos de áudio rotulados incorretamente pelo servidor.
DEFAULT_SIZE_THRESHOLD = 1024 * 500


# ---------------------------------------------------------------------------
# Estrutura de configuração
# ---------------------------------------------------------------------------

@dataclass
class DetectorConfig:
    """Parâmetros do monitor e do classificador."""
    data_dir: str = "."
    policy: str = "discovery"
    size_threshold: int = DEFAULT_SIZE_THRESHOLD
    candidate_ttl: float = 120.0     # segundos até um candidato ser descartado
    sweep_interval: float = 30.0     # intervalo da varredura de candidatos
    shutdown_timeout: float = 5.0    # limite para fechar o navegador/gravar
    headless: bool = False
    browser: str = "chromium"
    timeout: int = 60000             # ms, navegação inicial
    cookies_file: str = ""
    reference_domains: List[str] = field(default_factory=lambda: list(REFERENCE_VIDEO_DOMAINS))
    skip_domains: List[str] = field(default_factory=lambda: list(SKIP_DOMAINS))
    ignore_domains: List[str] = field(default_factory=lambda: list(IGNORE_DOMAINS))
    non_media_extensions: List[str] = field(default_factory=lambda: list(NON_MEDIA_EXTENSIONS))
    video_mime_types: List[str] = field(default_factory=lambda: list(ACCEPTED_VIDEO_MIME_TYPES))

    @property
    def video_domains_path(self) -> str:
        return os.path.join(self.data_dir, "video_domains.json")

    @property
    def audio_domains_path(self) -> str:
        return os.path.join(self.data_dir, "audio_domains.json")

    @property
    def csv_path(self) -> str:
        return os.path.join(self.data_dir, "video_domains.csv")

    @property
    def cookies_path(self) -> str:
        if self.cookies_file:
            return self.cookies_file
        return os.path.join(self.data_dir, ".config", "cookies.json")
