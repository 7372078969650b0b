"""
Tests for the error handler module.
"""

import unittest
from unittest.mock import MagicMock

from gridsynth.error_handler import ErrorHandler, global_error_handler, with_error_handling
from gridsynth.exceptions import ExecutionError, GridError


class TestErrorHandler(unittest.TestCase):
    def setUp(self):
        self.handler = ErrorHandler(max_history_size=3)

    def test_counts_and_history(self):
        self.handler.handle_error(GridError("bad", "EMPTY_PATTERN"), {"function": "load"})
        self.handler.handle_error(GridError("bad again"))

        self.assertEqual(self.handler.get_error_stats(), {"GridError": 2})
        history = self.handler.get_error_history()
        self.assertEqual(history[0]["function"], "load")
        self.assertEqual(history[0]["error_code"], "EMPTY_PATTERN")

    def test_history_is_bounded(self):
        for i in range(5):
            self.handler.handle_error(GridError(f"e{i}"))
        history = self.handler.get_error_history()
        self.assertEqual(len(history), 3)
        self.assertEqual(history[-1]["error_message"], "e4")

    def test_reset_error_count(self):
        self.handler.handle_error(GridError("x"))
        self.handler.reset_error_count("GridError")
        self.assertEqual(self.handler.get_error_stats()["GridError"], 0)

    def test_recovery_strategy(self):
        strategy = MagicMock(return_value="recovered")
        self.handler.register_recovery_strategy(ExecutionError, strategy)
        result = self.handler.handle_error(ExecutionError("boom"))
        self.assertEqual(result, "recovered")
        strategy.assert_called_once()

    def test_failing_recovery_strategy(self):
        self.handler.register_recovery_strategy(
            ExecutionError, MagicMock(side_effect=RuntimeError("nope"))
        )
        self.assertIsNone(self.handler.handle_error(ExecutionError("boom")))


class TestDecorators(unittest.TestCase):
    def test_fallback_value(self):
        handler = ErrorHandler()

        @with_error_handling(handler, fallback_value="fallback")
        def broken():
            raise GridError("broken")

        self.assertEqual(broken(), "fallback")
        self.assertEqual(handler.get_error_history()[0]["function"], "broken")

    def test_reraise(self):
        handler = ErrorHandler()

        @with_error_handling(handler, reraise=True)
        def broken():
            raise GridError("broken")

        with self.assertRaises(GridError):
            broken()

    def test_global_handler_reraises_execution_errors(self):
        @with_error_handling(global_error_handler, reraise=True)
        def failing_run():
            raise ExecutionError("compiler exited with status 1", "COMPILE_FAILED")

        with self.assertRaises(ExecutionError):
            failing_run()
        self.assertEqual(global_error_handler.recovery_strategies, {})


if __name__ == "__main__":
    unittest.main()
