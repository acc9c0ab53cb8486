"""Utility functions for meshops."""

from meshops.utils.logging import (
    OperationLog,
    get_logger,
    log_mesh_result,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_mesh_result",
    "OperationLog",
]
