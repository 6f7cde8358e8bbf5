"""
Testes para o módulo domainfinder.core.request_filter.
"""

import pytest
from domainfinder.core.domain_registry import DomainRegistry
from domainfinder.core.request_filter import RequestFilter, get_domain, split_url
from domainfinder.core.verdicts import RequestVerdict
from domainfinder.core.config import IGNORE_DOMAINS
from domainfinder.policies.generic.base import DiscoveryPolicy
from domainfinder.policies.specific_sites.spotify import PatternPolicy


@pytest.fixture
def registry():
    return DomainRegistry(ignored=IGNORE_DOMAINS)


# ---------------------------------------------------------------------------
# Testes de funções auxiliares
# ---------------------------------------------------------------------------

def test_get_domain_extracts_host():
    assert get_domain("https://video.akamaized.net/segments/v1/track1.mp4") == "video.akamaized.net"


def test_get_domain_ignores_port():
    assert get_domain("https://cdn.example.com:8443/a.mp4") == "cdn.example.com"


def test_get_domain_invalid_returns_none():
    assert get_domain("not-a-url") is None
    assert get_domain("http://[::1") is None
    assert get_domain("") is None


def test_split_url_default_path():
    assert split_url("https://cdn.example.com") == ("cdn.example.com", "/")


# ---------------------------------------------------------------------------
# Política de descoberta (padrão)
# ---------------------------------------------------------------------------

def test_ignore_list_host_is_ignored(registry):
    request_filter = RequestFilter(registry, DiscoveryPolicy())
    assert request_filter.check("https://o123.ingest.sentry.io/api/envelope") is RequestVerdict.IGNORE
    assert request_filter.check("https://www.google-analytics.com/collect") is RequestVerdict.IGNORE
    assert request_filter.check("https://log.spotify.com/v1/event") is RequestVerdict.IGNORE


def test_ignore_matches_host_only(registry):
    """Palavras da lista de ignorados no caminho não bastam para abortar."""
    request_filter = RequestFilter(registry, DiscoveryPolicy())
    verdict = request_filter.check("https://cdn.example.com/analytics/video.mp4")
    assert verdict is RequestVerdict.CANDIDATE


def test_skip_domains_are_rejected(registry):
    request_filter = RequestFilter(registry, DiscoveryPolicy())
    assert request_filter.check("https://api.spotify.com/v1/me") is RequestVerdict.REJECT
    assert request_filter.check("https://accounts.spotify.com/login") is RequestVerdict.REJECT


@pytest.mark.parametrize("path", [
    "/style.css", "/app.js", "/logo.PNG", "/font.woff2", "/index.html", "/app.js.map",
])
def test_non_media_extensions_are_rejected(registry, path):
    request_filter = RequestFilter(registry, DiscoveryPolicy())
    assert request_filter.check(f"https://cdn.example.com{path}") is RequestVerdict.REJECT


def test_css_rejected_even_on_reference_domain(registry):
    for policy in (DiscoveryPolicy(), PatternPolicy()):
        request_filter = RequestFilter(registry, policy)
        verdict = request_filter.check("https://video.akamaized.net/segments/v1/player.css")
        assert verdict is RequestVerdict.REJECT


def test_discovery_tracks_unknown_hosts(registry):
    request_filter = RequestFilter(registry, DiscoveryPolicy())
    assert request_filter.check("https://new-cdn.example.net/chunk/0001") is RequestVerdict.CANDIDATE


def test_malformed_url_is_rejected(registry):
    request_filter = RequestFilter(registry, DiscoveryPolicy())
    assert request_filter.check("not-a-url") is RequestVerdict.REJECT


# ---------------------------------------------------------------------------
# Política estrita por padrões
# ---------------------------------------------------------------------------

def test_pattern_policy_accepts_known_video_request(registry):
    request_filter = RequestFilter(registry, PatternPolicy())
    verdict = request_filter.check("https://video.akamaized.net/segments/v1/track1.mp4")
    assert verdict is RequestVerdict.CANDIDATE


def test_pattern_policy_accepts_query_string(registry):
    request_filter = RequestFilter(registry, PatternPolicy())
    verdict = request_filter.check("https://video-fa.scdn.co/encodings/abc/master.m3u8?token=1")
    assert verdict is RequestVerdict.CANDIDATE


def test_pattern_policy_rejects_unknown_host(registry):
    request_filter = RequestFilter(registry, PatternPolicy())
    verdict = request_filter.check("https://new-cdn.example.net/segments/v1/track1.mp4")
    assert verdict is RequestVerdict.REJECT


def test_pattern_policy_requires_path_segment(registry):
    request_filter = RequestFilter(registry, PatternPolicy())
    verdict = request_filter.check("https://video.akamaized.net/other/track1.mp4")
    assert verdict is RequestVerdict.REJECT


def test_pattern_policy_requires_video_extension(registry):
    request_filter = RequestFilter(registry, PatternPolicy())
    verdict = request_filter.check("https://video.akamaized.net/segments/v1/track1.bin")
    assert verdict is RequestVerdict.REJECT


def test_custom_skip_list(registry):
    request_filter = RequestFilter(registry, DiscoveryPolicy(), skip_domains=["internal.example"])
    assert request_filter.check("https://internal.example/video.mp4") is RequestVerdict.REJECT
    # A lista padrão foi substituída
    assert request_filter.check("https://api.spotify.com/v1/me") is RequestVerdict.CANDIDATE
