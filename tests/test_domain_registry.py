"""
Testes para o módulo domainfinder.core.domain_registry.
"""

from domainfinder.core.domain_registry import Classification, DomainRegistry


def test_promote_new_domain():
    registry = DomainRegistry()
    assert registry.promote("cdn.example.com", Classification.VIDEO) is True
    assert registry.is_video("cdn.example.com")
    assert registry.promote("cdn.example.com", Classification.VIDEO) is False


def test_promote_removes_conflicting_classification():
    registry = DomainRegistry()
    registry.promote("cdn.example.com", Classification.AUDIO)
    registry.promote("cdn.example.com", Classification.VIDEO)
    assert registry.is_video("cdn.example.com")
    assert not registry.is_audio("cdn.example.com")

    registry.promote("cdn.example.com", Classification.AUDIO)
    assert registry.is_audio("cdn.example.com")
    assert not registry.is_video("cdn.example.com")


def test_seed_merges_persisted_and_reference():
    registry = DomainRegistry()
    registry.seed(["learned.example.net"], ["video.akamaized.net"])
    assert registry.snapshot() == ["learned.example.net", "video.akamaized.net"]


def test_seed_reference_wins_over_audio_state():
    """Um arquivo de áudio corrompido não pode tirar um domínio de referência."""
    registry = DomainRegistry()
    registry.seed([], ["video.akamaized.net"], initial_audio=["video.akamaized.net"])
    assert registry.is_video("video.akamaized.net")
    assert not registry.is_audio("video.akamaized.net")


def test_seed_audio_wins_over_persisted_video():
    registry = DomainRegistry()
    registry.seed(["cdn.example.com"], [], initial_audio=["cdn.example.com"])
    assert registry.is_audio("cdn.example.com")
    assert not registry.is_video("cdn.example.com")


def test_seed_collapses_duplicates():
    registry = DomainRegistry()
    registry.seed(["a.example.com", "a.example.com"], ["a.example.com"])
    assert len(registry) == 1


def test_is_ignored_substring_match():
    registry = DomainRegistry(ignored=["analytics", "sentry.io"])
    assert registry.is_ignored("www.google-analytics.com")
    assert registry.is_ignored("o1.ingest.sentry.io")
    assert not registry.is_ignored("video.akamaized.net")


def test_snapshot_is_sorted_copy():
    registry = DomainRegistry()
    registry.promote("b.example.com", Classification.VIDEO)
    registry.promote("a.example.com", Classification.VIDEO)
    snapshot = registry.snapshot()
    assert snapshot == ["a.example.com", "b.example.com"]
    snapshot.append("c.example.com")
    assert len(registry) == 2
