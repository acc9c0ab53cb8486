"""Structured diagnostics for meshops, built on structlog."""

import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional, TextIO, Tuple, Type

import structlog

from meshops.core.config import LoggingConfig

# Third-party loggers that only get to speak at WARNING and above
QUIET_LIBRARIES = ("trimesh", "numpy")

LOG_FILE_NAME = "meshops.log"

_PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
]


def _renderer(config: LoggingConfig, stream: TextIO) -> Any:
    """Pick the final structlog renderer for a stream."""
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    if config.format == "console":
        return structlog.dev.ConsoleRenderer(
            colors=config.colorize and stream.isatty(),
        )
    return structlog.processors.KeyValueRenderer(
        key_order=["level", "logger", "event"],
        drop_missing=True,
    )


def _handler(handler: logging.Handler, renderer: Any) -> logging.Handler:
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def resolve_log_file(config: LoggingConfig) -> Optional[Path]:
    """Location of the JSON log file, or None when file logging is off.

    The directory is created on demand.
    """
    if not config.log_to_file or config.log_dir is None:
        return None
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / LOG_FILE_NAME


def setup_logging(
    config: Optional[LoggingConfig] = None,
    log_file: Optional[Path] = None,
) -> structlog.stdlib.BoundLogger:
    """Route meshops events through the root logger.

    Events are rendered to stderr in the configured format, so mesh tables
    printed on stdout stay clean. A log file, when given or enabled in the
    configuration, always receives JSON lines.

    Args:
        config: Logging configuration
        log_file: Explicit log file; overrides ``log_dir``/``log_to_file``

    Returns:
        The ``meshops`` logger
    """
    config = config or LoggingConfig()
    log_file = log_file or resolve_log_file(config)

    structlog.configure(
        processors=_PRE_CHAIN + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers = [
        _handler(logging.StreamHandler(sys.stderr), _renderer(config, sys.stderr))
    ]
    if log_file:
        handlers.append(
            _handler(logging.FileHandler(log_file), structlog.processors.JSONRenderer())
        )

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(config.level)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger("meshops")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    return structlog.get_logger(name)


def log_mesh_result(
    logger: structlog.stdlib.BoundLogger,
    mesh: Any,  # Optional[Mesh]
    source: str,
) -> None:
    """Log whether a construction produced a mesh.

    Args:
        logger: Logger instance
        mesh: Constructed mesh, or None when no mesh was produced
        source: Description of the input (resource name, "box", ...)
    """
    if mesh is None:
        logger.error("mesh_not_created", source=source)
        return
    logger.info(
        "mesh_created",
        source=source,
        vertices=mesh.vertex_count,
        triangles=mesh.triangle_count,
    )


class OperationLog:
    """Context manager that times an operation and logs how it ended.

    ``<operation>_started`` is logged at debug level on entry. A clean exit
    logs ``<operation>_completed`` at info level. An exception logs
    ``<operation>_failed`` at the exception's ``log_level`` (error when it
    has none); exceptions of the ``suppress`` types are swallowed after
    logging, all others propagate.

    Example:
        op = OperationLog(logger, "mesh_from_points", suppress=(MeshOpsError,))
        with op:
            mesh = build()
            op.record(vertices=mesh.vertex_count)
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        suppress: Tuple[Type[BaseException], ...] = (),
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.suppress = suppress
        self.context = context
        self.duration_ms: Optional[float] = None
        self._start: Optional[float] = None

    def record(self, **fields: Any) -> None:
        """Attach fields to the final event."""
        self.context.update(fields)

    def __enter__(self) -> "OperationLog":
        self._start = time.perf_counter()
        self.logger.debug(f"{self.operation}_started", **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.duration_ms = round((time.perf_counter() - self._start) * 1000, 2)

        if exc_type is None:
            self.logger.info(
                f"{self.operation}_completed",
                duration_ms=self.duration_ms,
                **self.context,
            )
            return False

        log = getattr(self.logger, getattr(exc_val, "log_level", "error"))
        log(
            f"{self.operation}_failed",
            duration_ms=self.duration_ms,
            error=str(exc_val),
            error_type=exc_type.__name__,
            **self.context,
        )
        return isinstance(exc_val, self.suppress)
