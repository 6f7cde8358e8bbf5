"""
reporter.py
===========
Resumos legíveis dos domínios detectados: relatório no console, estatísticas
após cada domínio novo e exportação para CSV. Apenas lê o DomainRegistry.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.table import Table

from domainfinder.core.domain_registry import DomainRegistry

logger = logging.getLogger(__name__)


def _csv_quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


class SessionReporter:
    """Relatórios sobre o registro de domínios (somente leitura)."""

    def __init__(self, registry: DomainRegistry, console: Optional[Console] = None):
        self.registry = registry
        self.console = console or Console()

    def print_stats(self) -> None:
        """Resumo curto: total e lista ordenada."""
        domains = self.registry.snapshot()
        self.console.print(f"\nTotal de domínios de vídeo detectados: {len(domains)}")
        for domain in domains:
            self.console.print(f"- {domain}", highlight=False)

    def generate_report(self) -> None:
        """Relatório completo dos domínios de vídeo no console."""
        domains = self.registry.snapshot()
        self.console.print("\n[bold cyan]===== RELATÓRIO DE DOMÍNIOS DE VÍDEO =====[/]")
        self.console.print(f"Total de domínios: {len(domains)}")
        if not domains:
            self.console.print("[yellow]Nenhum domínio detectado ainda.[/]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Domínio")
        for i, domain in enumerate(domains, 1):
            table.add_row(str(i), domain)
        self.console.print(table)

        if self.registry.audio:
            self.console.print(
                f"[dim]Domínios de áudio (ignorados): {len(self.registry.audio)}[/]"
            )
        self.console.print("[bold cyan]==========================================[/]")

    def export_csv(self, path: str) -> bool:
        """
        Exporta os domínios de vídeo para CSV (cabeçalho 'domain', um host
        entre aspas por linha).

        Não grava nada se não houver domínios. Retorna True se o arquivo foi
        gravado.
        """
        domains = self.registry.snapshot()
        if not domains:
            self.console.print("\n[yellow]Nenhum domínio de vídeo detectado ainda. Nada para exportar.[/]")
            return False

        lines = ["domain"] + [_csv_quote(d) for d in domains]
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            logger.error("Erro ao exportar CSV para %s: %s", path, e)
            self.console.print(f"[bold red]Erro ao exportar:[/] {e}")
            return False

        self.console.print(f"\n[bold green]✓[/] Exportados {len(domains)} domínios para '[bold cyan]{path}[/]'")
        return True
