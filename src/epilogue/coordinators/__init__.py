"""Coordinators - Orchestration layer connecting UI with business logic."""

from .command_dispatcher import CommandDispatcher
from .reader_controller import AppView, ReaderController, flatten_toc
from .session_orchestrator import SessionOrchestrator

__all__ = [
    "AppView",
    "CommandDispatcher",
    "flatten_toc",
    "ReaderController",
    "SessionOrchestrator",
]
