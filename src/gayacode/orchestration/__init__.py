"""
Execution orchestration for the gayacode package.

The ExecutionOrchestrator races a target's completion against its deadline
while the resource monitor samples it.
"""

from .execution_orchestrator import ExecutionOrchestrator, RunnerFactory

__all__ = [
    "ExecutionOrchestrator",
    "RunnerFactory",
]
