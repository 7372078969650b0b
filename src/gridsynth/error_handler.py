"""
Error Handling Manager for gridsynth
Provides centralized error handling, logging, and recovery mechanisms.

The synthesis core never raises for valid input, so this module mostly
guards the edges: configuration loading and external compiler runs.
"""

import logging
import threading
import time
import traceback
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type


logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling and recovery system."""

    def __init__(self, max_history_size: int = 1000) -> None:
        self.error_counts: Dict[str, int] = {}
        self.recovery_strategies: Dict[Type[Exception], Callable] = {}
        self._lock = threading.RLock()

        # Error history for analysis
        self._error_history: List[Dict[str, Any]] = []
        self._max_history_size = max_history_size

    def register_recovery_strategy(
        self, exception_type: Type[Exception], strategy: Callable
    ) -> None:
        """Register a recovery strategy for a specific exception type."""
        self.recovery_strategies[exception_type] = strategy

    def _attempt_recovery(
        self,
        exception: Exception,
        context: Dict[str, Any],
    ) -> Optional[Any]:
        """Attempt recovery using registered strategies."""
        recovery_strategy = self.recovery_strategies.get(type(exception))

        if recovery_strategy:
            try:
                return recovery_strategy(exception, context)
            except Exception as recovery_error:
                logger.error(f"Recovery strategy failed: {recovery_error}")

        return None

    def handle_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> Optional[Any]:
        """Handle an error with appropriate logging and recovery."""
        error_type = type(error).__name__
        context = context or {}

        with self._lock:
            self.error_counts[error_type] = (
                self.error_counts.get(error_type, 0) + 1
            )
            self._error_history.append(
                {
                    "function": context.get("function", error_type),
                    "error_type": error_type,
                    "error_code": getattr(error, "error_code", None),
                    "error_message": str(error),
                    "timestamp": datetime.now().isoformat(),
                }
            )
            if len(self._error_history) > self._max_history_size:
                self._error_history.pop(0)

        logger.error(
            f"Error occurred: {error_type}: {str(error)}",
            extra={
                "error_type": error_type,
                "context": context,
                "stack_trace": traceback.format_exc(),
            },
        )

        return self._attempt_recovery(error, context)

    def reset_error_count(self, error_type: str) -> None:
        """Reset error count for a specific error type."""
        if error_type in self.error_counts:
            self.error_counts[error_type] = 0

    def get_error_stats(self) -> Dict[str, int]:
        """Get current error statistics."""
        return self.error_counts.copy()

    def get_error_history(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Get recent error history."""
        with self._lock:
            return self._error_history[-limit:]


def with_error_handling(
    error_handler: ErrorHandler,
    fallback_value: Any = None,
    reraise: bool = False,
):
    """Decorator to add error handling to functions."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            except Exception as e:
                context = {
                    "function": func.__name__,
                    "args": str(args)[:100],
                    "kwargs": str(kwargs)[:100],
                    "latency_ms": (time.time() - start_time) * 1000,
                }

                result = error_handler.handle_error(e, context)
                if result is not None:
                    return result

                if reraise:
                    raise

                return fallback_value

        return wrapper

    return decorator


# Global error handler instance
global_error_handler = ErrorHandler()
