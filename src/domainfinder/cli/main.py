"""
cli/main.py
===========
Interface de linha de comando do domainfinder.

Argumentos:
  url              : Página inicial (padrão: https://open.spotify.com).
  --browser        : Escolhe o navegador (chrome, edge, firefox, chromium).
  --policy         : Política de classificação (discovery, pattern).
  --size-threshold : Limite em bytes que separa vídeo de áudio.
  --candidate-ttl  : Tempo máximo de vida de uma URL candidata.
  --report         : Imprime o relatório dos domínios salvos e sai.
  --export         : Exporta os domínios salvos para CSV e sai.
  --list-policies  : Lista as políticas disponíveis e sai.
"""

import asyncio
import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from domainfinder.core.config import DEFAULT_SIZE_THRESHOLD, DEFAULT_START_URL, DetectorConfig
from domainfinder.core.monitor import BROWSER_MAP, DomainMonitor
from domainfinder.policies.manager import PolicyManager

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="domainfinder: Descobre os domínios que servem vídeo em uma sessão do navegador.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  domainfinder
  domainfinder https://open.spotify.com/show/xyz --browser chrome
  domainfinder --policy pattern --data-dir ~/.domainfinder
  domainfinder --report
  domainfinder --export
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        default=DEFAULT_START_URL,
        help=f"Página inicial (padrão: {DEFAULT_START_URL}).",
    )

    # Opções de navegador
    browser_group = parser.add_argument_group("Opções de Navegador")
    browser_group.add_argument(
        "--browser",
        choices=sorted(BROWSER_MAP),
        default="chromium",
        help="Navegador a ser usado (padrão: chromium).",
    )
    browser_group.add_argument(
        "--headless",
        action="store_true",
        default=False,
        help="Executa o navegador sem interface gráfica.",
    )
    browser_group.add_argument(
        "--no-headless",
        action="store_false",
        dest="headless",
        help="Executa o navegador com interface gráfica (padrão).",
    )
    browser_group.add_argument(
        "--timeout",
        type=int,
        default=60000,
        help="Tempo limite em milissegundos para carregar a página inicial (padrão: 60000).",
    )
    browser_group.add_argument(
        "--cookies",
        default="",
        help="Arquivo de cookies (.json ou .txt) da sessão (padrão: <data-dir>/.config/cookies.json).",
    )

    # Opções de classificação
    detect_group = parser.add_argument_group("Opções de Classificação")
    detect_group.add_argument(
        "--policy",
        choices=PolicyManager().names(),
        default="discovery",
        help="Política de classificação (padrão: discovery).",
    )
    detect_group.add_argument(
        "--size-threshold",
        type=int,
        default=DEFAULT_SIZE_THRESHOLD,
        metavar="BYTES",
        help=f"Respostas de vídeo até este tamanho são tratadas como áudio (padrão: {DEFAULT_SIZE_THRESHOLD}).",
    )
    detect_group.add_argument(
        "--candidate-ttl",
        type=float,
        default=120.0,
        metavar="SEGUNDOS",
        help="Tempo máximo de espera pela resposta de uma candidata (padrão: 120).",
    )
    detect_group.add_argument(
        "--list-policies",
        action="store_true",
        default=False,
        help="Lista as políticas disponíveis e sai.",
    )

    # Saída
    output_group = parser.add_argument_group("Saída")
    output_group.add_argument(
        "--data-dir",
        default=".",
        help="Diretório dos arquivos video_domains.json/audio_domains.json/CSV (padrão: .).",
    )
    output_group.add_argument(
        "--report",
        action="store_true",
        default=False,
        help="Imprime o relatório dos domínios já salvos e sai.",
    )
    output_group.add_argument(
        "--export",
        action="store_true",
        default=False,
        help="Exporta os domínios já salvos para CSV e sai.",
    )
    output_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="Mostra mensagens de depuração.",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def print_policies() -> None:
    console.print("\n[bold cyan]Políticas disponíveis:[/]")
    for policy in PolicyManager().policies:
        console.print(f"  [bold]{policy.name}[/]: {policy.description}")


async def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list_policies:
        print_policies()
        return 0

    config = DetectorConfig(
        data_dir=args.data_dir,
        policy=args.policy,
        size_threshold=args.size_threshold,
        candidate_ttl=args.candidate_ttl,
        headless=args.headless,
        browser=args.browser,
        timeout=args.timeout,
        cookies_file=args.cookies,
    )
    monitor = DomainMonitor(config, console=console, interactive=sys.stdin.isatty())

    # Comandos offline: usam apenas os arquivos salvos
    if args.report or args.export:
        monitor.load_state()
        if args.report:
            monitor.reporter.generate_report()
        if args.export:
            monitor.reporter.export_csv(config.csv_path)
        return 0

    try:
        return await monitor.run(args.url)
    except ValueError as e:
        console.print(f"[bold red]Erro:[/] {e}")
        return 2


def main_entry():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    main_entry()
