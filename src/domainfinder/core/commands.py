"""
commands.py
===========
Comandos interativos de teclado durante o monitoramento:

  r       : relatório dos domínios de vídeo detectados
  e       : exporta os domínios para CSV
  q / ^C  : encerra o programa
"""

import asyncio
import contextlib
import logging
import os
import sys
import threading
from typing import Callable, Optional

from domainfinder.core.reporter import SessionReporter

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q", "\x03")


@contextlib.contextmanager
def _cbreak(stream):
    """Coloca o terminal em modo cbreak (uma tecla por vez) e restaura ao sair."""
    try:
        import termios
        import tty
    except ImportError:
        yield False
        return
    fd = stream.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


class KeyboardCommands:
    """Despacha teclas para o relatório, a exportação e o encerramento."""

    def __init__(
        self,
        reporter: SessionReporter,
        csv_path: str,
        on_quit: Callable[[], None],
        stream=None,
    ):
        self.reporter = reporter
        self.csv_path = csv_path
        self.on_quit = on_quit
        self.stream = stream or sys.stdin
        self._done: Optional[asyncio.Event] = None

    def handle(self, key: str) -> bool:
        """Executa o comando da tecla. Retorna True se o comando for de saída."""
        if key == "r":
            self.reporter.generate_report()
        elif key == "e":
            self.reporter.console.print("\nExportando lista de domínios para CSV...")
            self.reporter.export_csv(self.csv_path)
        elif key in QUIT_KEYS:
            self.reporter.console.print("\nSaindo...")
            self.on_quit()
            return True
        elif key.strip():
            logger.debug("Tecla sem comando associado: %r", key)
        return False

    def _dispatch(self, data: Optional[str]) -> None:
        if data is None:
            # EOF: stdin fechado, não há mais comandos
            self._done.set()
            return
        for key in data:
            if self.handle(key):
                self._done.set()
                return

    async def run(self) -> None:
        """Lê teclas até um comando de saída ou o fim da entrada."""
        loop = asyncio.get_running_loop()
        self._done = asyncio.Event()

        if self.stream.isatty() and sys.platform != "win32":
            with _cbreak(self.stream):
                fd = self.stream.fileno()
                loop.add_reader(
                    fd, lambda: self._dispatch(os.read(fd, 32).decode(errors="ignore") or None)
                )
                try:
                    await self._done.wait()
                finally:
                    loop.remove_reader(fd)
            return

        # Entrada sem terminal (pipe, Windows): lê linhas numa thread daemon
        def reader():
            for line in self.stream:
                line = line.strip()
                loop.call_soon_threadsafe(self._dispatch, line)
                if any(key in line for key in QUIT_KEYS):
                    return
            loop.call_soon_threadsafe(self._dispatch, None)

        threading.Thread(target=reader, name="keyboard-commands", daemon=True).start()
        await self._done.wait()
