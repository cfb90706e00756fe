"""Litestar plugin for promptcanvas integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from promptcanvas.commands.executor import CommandExecutor
from promptcanvas.commands.placement import PlacementEngine
from promptcanvas.commands.templates import KeywordTemplateMatcher
from promptcanvas.core.config import CanvasSettings, OracleConfig
from promptcanvas.realtime.manager import ConnectionManager
from promptcanvas.services.canvas import CanvasService
from promptcanvas.services.commands import CommandService
from promptcanvas.services.oracle import GroqOracle
from promptcanvas.services.transcription import GroqTranscriber, TranscriberProtocol
from promptcanvas.storage.memory import InMemoryStorage
from promptcanvas.web.router import create_router

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from promptcanvas.commands.templates import TemplateMatcher
    from promptcanvas.services.oracle import OracleProtocol
    from promptcanvas.storage.base import StorageProtocol


@dataclass
class PromptCanvasConfig:
    """Configuration for the PromptCanvas plugin.

    Attributes:
        storage: Record store for shapes and chat messages. If None,
            InMemoryStorage will be used by default.
        settings: Placement geometry and policy. Read from the environment
            when not provided.
        oracle_config: Endpoints and credentials for the hosted model. Read
            from the environment when not provided.
        oracle: Command-interpretation service. Defaults to GroqOracle.
        transcriber: Speech-to-text service. Defaults to GroqTranscriber.
        matcher: Template matcher. Defaults to KeywordTemplateMatcher.
        enable_api: Whether to mount the REST API routes. Defaults to True.
        enable_websocket: Whether to mount the WebSocket endpoint. Defaults to True.
        api_path: Base path for mounting API routes. Defaults to "/api".
        ws_path: Path of the WebSocket endpoint. Defaults to "/ws".
        dependency_key: Dependency injection key for CanvasService.
            Defaults to "service".
        connection_manager: Optional pre-configured ConnectionManager.

    Example:
        >>> from promptcanvas.storage.memory import InMemoryStorage
        >>> config = PromptCanvasConfig(storage=InMemoryStorage(), api_path="/api/v1")
    """

    storage: StorageProtocol | None = None
    settings: CanvasSettings | None = None
    oracle_config: OracleConfig | None = None
    oracle: OracleProtocol | None = None
    transcriber: TranscriberProtocol | None = None
    matcher: TemplateMatcher | None = None
    enable_api: bool = True
    enable_websocket: bool = True
    api_path: str = "/api"
    ws_path: str = "/ws"
    dependency_key: str = "service"
    connection_manager: ConnectionManager | None = field(default=None)


class PromptCanvasPlugin(InitPluginProtocol):
    """Litestar plugin for promptcanvas integration.

    Builds the record store, the command pipeline and the services, registers
    them with dependency injection and mounts the REST API and the WebSocket
    endpoint.

    Example:
        >>> from litestar import Litestar
        >>> from promptcanvas import PromptCanvasPlugin, PromptCanvasConfig
        >>>
        >>> app = Litestar(plugins=[PromptCanvasPlugin(PromptCanvasConfig())])

    Attributes:
        _config: The plugin configuration.
        _storage: The initialized record store (None until on_app_init).
        _service: The initialized CanvasService (None until on_app_init).
        _command_service: The initialized CommandService (None until on_app_init).
        _connection_manager: The WebSocket connection manager (None until on_app_init).
    """

    def __init__(self, config: PromptCanvasConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. If None, PromptCanvasConfig with default
                values will be used.
        """
        self._config = config or PromptCanvasConfig()
        self._storage: StorageProtocol | None = None
        self._service: CanvasService | None = None
        self._command_service: CommandService | None = None
        self._connection_manager: ConnectionManager | None = None
        self._oracle_config: OracleConfig | None = None
        self._transcriber: TranscriberProtocol | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin during application startup.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration with promptcanvas integration.
        """
        settings = self._config.settings or CanvasSettings.from_env()
        self._oracle_config = self._config.oracle_config or OracleConfig()

        self._storage = self._config.storage or InMemoryStorage()
        self._connection_manager = self._config.connection_manager or ConnectionManager()
        self._service = CanvasService(self._storage, self._connection_manager)

        executor = CommandExecutor(
            self._storage,
            matcher=self._config.matcher or KeywordTemplateMatcher(),
            engine=PlacementEngine(
                settings.width,
                settings.height,
                margin=settings.margin,
                policy=settings.placement_policy,
            ),
            target=settings.target,
            center=settings.center,
        )
        oracle = self._config.oracle or GroqOracle(self._oracle_config)
        self._transcriber = self._config.transcriber or GroqTranscriber(self._oracle_config)
        self._command_service = CommandService(self._service, oracle, executor, self._connection_manager)

        def provide_service() -> CanvasService:
            """Dependency provider for CanvasService."""
            if self._service is None:
                msg = "Service not initialized"
                raise RuntimeError(msg)
            return self._service

        def provide_command_service() -> CommandService:
            """Dependency provider for CommandService."""
            if self._command_service is None:
                msg = "Command service not initialized"
                raise RuntimeError(msg)
            return self._command_service

        def provide_transcriber() -> TranscriberProtocol:
            """Dependency provider for the transcriber."""
            if self._transcriber is None:
                msg = "Transcriber not initialized"
                raise RuntimeError(msg)
            return self._transcriber

        def provide_oracle_config() -> OracleConfig:
            """Dependency provider for OracleConfig."""
            if self._oracle_config is None:
                msg = "Oracle config not initialized"
                raise RuntimeError(msg)
            return self._oracle_config

        app_config.dependencies[self._config.dependency_key] = Provide(provide_service, sync_to_thread=False)
        app_config.dependencies["command_service"] = Provide(provide_command_service, sync_to_thread=False)
        app_config.dependencies["transcriber"] = Provide(provide_transcriber, sync_to_thread=False)
        app_config.dependencies["oracle_config"] = Provide(provide_oracle_config, sync_to_thread=False)

        if self._config.enable_api:
            app_config.route_handlers.append(create_router(path=self._config.api_path))

        if self._config.enable_websocket:
            from promptcanvas.realtime.handler import create_websocket_handler

            ws_handler = create_websocket_handler(
                path=self._config.ws_path,
                connection_manager=self._connection_manager,
                canvas_service=self._service,
                command_service=self._command_service,
                transcriber=self._transcriber,
            )
            app_config.route_handlers.append(ws_handler)

        return app_config

    @property
    def storage(self) -> StorageProtocol:
        """Get the initialized record store.

        Raises:
            RuntimeError: If the plugin has not been initialized yet
                (on_app_init not called).
        """
        if self._storage is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._storage

    @property
    def service(self) -> CanvasService:
        """Get the initialized canvas service.

        Raises:
            RuntimeError: If the plugin has not been initialized yet
                (on_app_init not called).
        """
        if self._service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._service

    @property
    def command_service(self) -> CommandService:
        """Get the initialized command service.

        Raises:
            RuntimeError: If the plugin has not been initialized yet
                (on_app_init not called).
        """
        if self._command_service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._command_service

    @property
    def connection_manager(self) -> ConnectionManager:
        """Get the initialized connection manager.

        Raises:
            RuntimeError: If the plugin has not been initialized yet
                (on_app_init not called).
        """
        if self._connection_manager is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._connection_manager
