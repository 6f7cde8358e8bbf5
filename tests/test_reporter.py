"""
Testes para o módulo domainfinder.core.reporter.
"""

import io

import pytest
from rich.console import Console

from domainfinder.core.domain_registry import Classification, DomainRegistry
from domainfinder.core.reporter import SessionReporter


@pytest.fixture
def output():
    return io.StringIO()


def make_reporter(output, *domains):
    registry = DomainRegistry()
    for domain in domains:
        registry.promote(domain, Classification.VIDEO)
    return SessionReporter(registry, Console(file=output, width=200))


def test_export_with_no_domains_writes_nothing(tmp_path, output):
    reporter = make_reporter(output)
    path = tmp_path / "video_domains.csv"
    assert reporter.export_csv(str(path)) is False
    assert not path.exists()
    assert "Nada para exportar" in output.getvalue()


def test_export_csv_format(tmp_path, output):
    reporter = make_reporter(output, "b.example.com", "a.example.com")
    path = tmp_path / "video_domains.csv"
    assert reporter.export_csv(str(path)) is True
    assert path.read_text(encoding="utf-8") == 'domain\n"a.example.com"\n"b.example.com"\n'


def test_export_csv_escapes_quotes(tmp_path, output):
    reporter = make_reporter(output, 'odd"host')
    path = tmp_path / "out.csv"
    reporter.export_csv(str(path))
    assert path.read_text(encoding="utf-8").splitlines()[1] == '"odd""host"'


def test_export_csv_io_error_returns_false(tmp_path, output):
    reporter = make_reporter(output, "a.example.com")
    # Um diretório no lugar do arquivo provoca erro de escrita
    target = tmp_path / "csv_dir"
    target.mkdir()
    assert reporter.export_csv(str(target)) is False


def test_report_sorted_with_count(output):
    reporter = make_reporter(output, "c.example.com", "a.example.com", "b.example.com")
    reporter.generate_report()
    text = output.getvalue()
    assert "Total de domínios: 3" in text
    assert text.index("a.example.com") < text.index("b.example.com") < text.index("c.example.com")


def test_report_empty(output):
    reporter = make_reporter(output)
    reporter.generate_report()
    assert "Nenhum domínio detectado ainda" in output.getvalue()


def test_report_does_not_list_audio_domains(output):
    reporter = make_reporter(output, "video.example.com")
    reporter.registry.promote("audio.example.com", Classification.AUDIO)
    reporter.generate_report()
    text = output.getvalue()
    assert "audio.example.com" not in text
    assert "Domínios de áudio (ignorados): 1" in text


def test_print_stats(output):
    reporter = make_reporter(output, "b.example.com", "a.example.com")
    reporter.print_stats()
    lines = output.getvalue().strip().splitlines()
    assert lines[0] == "Total de domínios de vídeo detectados: 2"
    assert lines[1:] == ["- a.example.com", "- b.example.com"]
