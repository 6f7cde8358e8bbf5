"""
monitor.py
==========
Orquestrador do domainfinder: abre o navegador com Playwright, intercepta o
tráfego de rede da página e conecta os eventos às duas fases de
classificação.

Fluxo:
- Toda requisição de saída passa pelo RequestFilter (rota "**/*"); as
  requisições de rastreamento são abortadas, as demais seguem e as candidatas
  entram no CandidateTracker.
- Toda resposta é comparada com o CandidateTracker e, se candidata, vai para
  o ResponseClassifier, que atualiza o DomainRegistry.
- Falhas de requisição e a varredura periódica removem candidatos pendentes.

Todo o estado (registro, candidatos, fila de escrita) pertence a uma única
instância de DomainMonitor e roda no mesmo event loop.
"""

import asyncio
import logging
import signal
from typing import Any, Dict, List, Optional

import validators
from playwright.async_api import (
    Browser,
    BrowserContext,
    ConsoleMessage,
    Page,
    Request,
    Response,
    Route,
    async_playwright,
)
from rich.console import Console

from domainfinder.core.candidate_tracker import CandidateTracker
from domainfinder.core.commands import KeyboardCommands
from domainfinder.core.config import DEFAULT_START_URL, IGNORED_CONSOLE_ERRORS, DetectorConfig
from domainfinder.core.domain_registry import DomainRegistry
from domainfinder.core.reporter import SessionReporter
from domainfinder.core.request_filter import RequestFilter
from domainfinder.core.response_classifier import ResponseClassifier
from domainfinder.core.session_store import load_cookies, save_cookies
from domainfinder.core.storage import DomainStore
from domainfinder.core.verdicts import RequestVerdict
from domainfinder.policies.manager import PolicyManager

logger = logging.getLogger(__name__)

# navegador -> (tipo do Playwright, canal)
BROWSER_MAP = {
    "chrome": ("chromium", "chrome"),
    "edge": ("chromium", "msedge"),
    "firefox": ("firefox", None),
    "chromium": ("chromium", None),
}

CHROMIUM_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/123.0.0.0 Safari/537.36"
)

# A cada quantas requisições ignoradas uma mensagem é exibida
SKIPPED_LOG_EVERY = 10


class DomainMonitor:
    """
    Monitor de tráfego que descobre os domínios de vídeo de uma sessão.

    Parâmetros
    ----------
    config : DetectorConfig, opcional
        Listas de referência, caminhos dos arquivos e parâmetros ajustáveis.
    console : rich.console.Console, opcional
        Saída das mensagens ao usuário.
    interactive : bool
        Se True (padrão), lê comandos de teclado (r, e, q) durante a execução.
    """

    def __init__(
        self,
        config: Optional[DetectorConfig] = None,
        console: Optional[Console] = None,
        interactive: bool = True,
    ):
        self.config = config or DetectorConfig()
        self.console = console or Console()
        self.interactive = interactive

        cfg = self.config
        self.registry = DomainRegistry(ignored=cfg.ignore_domains)
        self.tracker = CandidateTracker(ttl=cfg.candidate_ttl)
        self.store = DomainStore(cfg.video_domains_path, cfg.audio_domains_path)
        self.policy = PolicyManager(
            size_threshold=cfg.size_threshold,
            reference_domains=cfg.reference_domains,
        ).get_policy(cfg.policy)
        self.request_filter = RequestFilter(
            self.registry,
            self.policy,
            skip_domains=cfg.skip_domains,
            non_media_extensions=cfg.non_media_extensions,
        )
        self.reporter = SessionReporter(self.registry, self.console)
        self.classifier = ResponseClassifier(
            self.registry,
            self.tracker,
            self.policy,
            store=self.store,
            reporter=self.reporter,
            console=self.console,
            video_mime_types=cfg.video_mime_types,
        )

        self.skipped_requests = 0
        self.exit_code = 0
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._tasks: List[asyncio.Task] = []
        self._stop: Optional[asyncio.Event] = None
        self._shutting_down = False

    # -----------------------------------------------------------------------
    # Validação de URL
    # -----------------------------------------------------------------------

    def validate_url(self, url: str) -> bool:
        """Valida se a URL inicial é bem formatada e usa http(s)."""
        if not validators.url(url):
            return False
        return url.lower().startswith(("http://", "https://"))

    # -----------------------------------------------------------------------
    # Estado persistido
    # -----------------------------------------------------------------------

    def load_state(self) -> int:
        """Carrega os domínios persistidos e mescla com a lista de referência."""
        video = self.store.load_video()
        audio = self.store.load_audio()
        self.registry.seed(video, self.config.reference_domains, initial_audio=audio)
        self.console.print(f"Carregados {len(video)} domínios detectados anteriormente.")
        return len(self.registry)

    # -----------------------------------------------------------------------
    # Handlers de eventos do Playwright
    # -----------------------------------------------------------------------

    async def _continue(self, route: Route) -> None:
        try:
            await route.continue_()
        except Exception as e:
            # A requisição não vai gerar resposta; não pode ficar pendente
            self.tracker.resolve(route.request.url)
            logger.debug("Falha ao continuar %s: %s", route.request.url, e)

    async def _handle_route(self, route: Route) -> None:
        """Fase 1: toda requisição é abortada ou continuada exatamente uma vez."""
        url = route.request.url
        try:
            verdict = self.request_filter.check(url)
        except Exception:
            logger.exception("Erro ao filtrar requisição %s", url)
            verdict = RequestVerdict.REJECT

        if verdict is RequestVerdict.IGNORE:
            self.skipped_requests += 1
            if self.skipped_requests % SKIPPED_LOG_EVERY == 0:
                self.console.print(
                    f"[dim]Filtradas {self.skipped_requests} requisições não essenciais[/]"
                )
            try:
                await route.abort()
            except Exception:
                await self._continue(route)
            return

        if verdict is RequestVerdict.CANDIDATE:
            self.tracker.mark(url)
        await self._continue(route)

    def _handle_response(self, response: Response) -> None:
        """Fase 2: confirma as respostas das URLs candidatas."""
        url = response.url
        try:
            verdict = self.classifier.handle_response(url, response.status, response.headers)
        except Exception:
            logger.exception("Erro ao classificar resposta %s", url)
            self.tracker.resolve(url)
            return
        if verdict is not None:
            logger.debug("%s -> %s", url, verdict.value)

    def _handle_request_failed(self, request: Request) -> None:
        if self.tracker.resolve(request.url):
            logger.debug("Candidata falhou: %s (%s)", request.url, request.failure)

    def _handle_console(self, message: ConsoleMessage) -> None:
        if message.type != "error":
            return
        text = message.text
        if not any(pattern in text for pattern in IGNORED_CONSOLE_ERRORS):
            self.console.print(f"[red]Erro na página:[/] {text}", highlight=False)

    def _handle_crash(self, page: Page) -> None:
        self.console.print("[bold red]A página travou.[/]")
        self.request_shutdown(1)

    def _handle_page_close(self, page: Page) -> None:
        if self._shutting_down:
            return
        self.console.print("\nA aba monitorada foi fechada.")
        self.request_shutdown()

    def _handle_disconnected(self, *_: Any) -> None:
        if self._shutting_down:
            return
        self.console.print("[bold red]O navegador foi desconectado inesperadamente.[/]")
        self.request_shutdown(1)

    # -----------------------------------------------------------------------
    # Tarefas em segundo plano
    # -----------------------------------------------------------------------

    async def _sweep_candidates(self) -> None:
        while True:
            await asyncio.sleep(self.config.sweep_interval)
            self.tracker.sweep()

    def _start_task(self, coro) -> None:
        self._tasks.append(asyncio.get_running_loop().create_task(coro))

    # -----------------------------------------------------------------------
    # Construção do navegador e da página
    # -----------------------------------------------------------------------

    async def _launch(self, playwright_instance) -> Page:
        browser_type_name, channel = BROWSER_MAP.get(self.config.browser, ("chromium", None))
        browser_type = getattr(playwright_instance, browser_type_name)

        launch_kwargs: Dict[str, Any] = {"headless": self.config.headless}
        if browser_type_name == "chromium":
            launch_kwargs["args"] = CHROMIUM_ARGS
        if channel:
            launch_kwargs["channel"] = channel

        self.console.print(f"[*] Abrindo o navegador ({self.config.browser})...")
        self._browser = await browser_type.launch(**launch_kwargs)
        self._browser.on("disconnected", self._handle_disconnected)

        self._context = await self._browser.new_context(
            user_agent=USER_AGENT,
            viewport={"width": 1280, "height": 800},
        )
        cookies = load_cookies(self.config.cookies_path)
        if cookies:
            await self._context.add_cookies(cookies)
            self.console.print(f"[*] {len(cookies)} cookies da sessão anterior carregados.")

        page = await self._context.new_page()
        await page.add_init_script(
            "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"
        )
        self._page = page
        return page

    async def _setup_page_monitoring(self, page: Page) -> None:
        await page.route("**/*", self._handle_route)
        page.on("response", self._handle_response)
        page.on("requestfailed", self._handle_request_failed)
        page.on("console", self._handle_console)
        page.on("crash", self._handle_crash)
        page.on("close", self._handle_page_close)

    # -----------------------------------------------------------------------
    # Sinais e encerramento
    # -----------------------------------------------------------------------

    def request_shutdown(self, exit_code: int = 0) -> None:
        """Pede o encerramento do monitor (pode ser chamado de qualquer handler)."""
        if exit_code:
            self.exit_code = exit_code
        if self._stop is not None:
            self._stop.set()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
            except (NotImplementedError, RuntimeError):
                # Windows: o KeyboardInterrupt padrão continua valendo
                pass

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass

    async def shutdown(self) -> None:
        """
        Encerramento limpo e limitado no tempo: cancela as tarefas, salva os
        cookies, grava a fila de escrita pendente e fecha o navegador.
        """
        if self._shutting_down:
            return
        self._shutting_down = True
        timeout = self.config.shutdown_timeout
        self.console.print("\nEncerrando...")

        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

        if self._context is not None:
            try:
                cookies = await asyncio.wait_for(self._context.cookies(), timeout=timeout)
                if save_cookies(self.config.cookies_path, cookies):
                    self.console.print("Cookies da sessão salvos para a próxima execução.")
            except Exception as e:
                logger.warning("Não foi possível salvar os cookies: %s", e)

        await self.store.close(timeout=timeout)

        if self._browser is not None:
            self.console.print("Fechando o navegador...")
            try:
                await asyncio.wait_for(self._browser.close(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.error("Tempo esgotado ao fechar o navegador; forçando saída.")
                self.exit_code = 1
            except Exception as e:
                logger.error("Erro ao fechar o navegador: %s", e)
        self.console.print("Encerramento concluído.")

    # -----------------------------------------------------------------------
    # Método principal
    # -----------------------------------------------------------------------

    def _print_instructions(self) -> None:
        self.console.print(
            f"\n[bold green]Navegador aberto.[/] Política: [cyan]{self.policy.name}[/]. "
            "Navegue até conteúdos com vídeo."
        )
        if self.interactive:
            self.console.print("Comandos interativos:")
            self.console.print("  r - Relatório dos domínios de vídeo detectados")
            self.console.print("  e - Exportar domínios para CSV")
            self.console.print("  q - Sair")

    async def run(self, start_url: str = DEFAULT_START_URL) -> int:
        """
        Executa o monitoramento até o usuário sair ou ocorrer um erro fatal.

        Retorna o código de saída do processo (0 em saída normal).
        """
        if not self.validate_url(start_url):
            raise ValueError(f"URL inválida: {start_url}")

        self._stop = asyncio.Event()
        self.load_state()
        self.store.start()
        self.store.save_video(self.registry.snapshot())
        self._install_signal_handlers()

        try:
            async with async_playwright() as p:
                try:
                    page = await self._launch(p)
                    await self._setup_page_monitoring(page)
                    self._start_task(self._sweep_candidates())
                    if self.interactive:
                        commands = KeyboardCommands(
                            self.reporter, self.config.csv_path, self.request_shutdown
                        )
                        self._start_task(commands.run())

                    await page.goto(start_url, wait_until="domcontentloaded", timeout=self.config.timeout)
                    self._print_instructions()
                    await self._stop.wait()
                except Exception as e:
                    logger.exception("Erro fatal durante o monitoramento")
                    self.console.print(f"[bold red]Erro:[/] {e}")
                    self.exit_code = 1
                finally:
                    await self.shutdown()
        finally:
            self._remove_signal_handlers()

        return self.exit_code
