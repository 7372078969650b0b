"""
Unit tests for the generated-program interpreter.
"""

import pytest

from gridsynth.codegen.interpreter import (
    ProgramInterpreter,
    evaluate_expression,
    render_predicates,
    run_program,
    tokenize,
)
from gridsynth.core.types import Coordinate, Predicate, PredicateKind
from gridsynth.exceptions import ExecutionError, ProgramSyntaxError


class TestExpressions:
    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("true", 1),
            ("false", 0),
            ("r == c", 1),
            ("r + c == H - 1 && c < H", 1),
            ("r + c == W - 1", 0),
            ("r >= H/2 && r < H-2", 1),
            ("(r + c) % 2 == 0", 1),
            ("!(r == 0) || c == 9", 1),
            ("2 + 3 * 4", 14),
            ("-7 / 2", -3),
            ("-7 % 2", -1),
            ("W / 4", 2),
        ],
    )
    def test_evaluate(self, expression, expected):
        assert evaluate_expression(expression, 2, 2, 5, 10) == expected

    def test_short_circuit_skips_division_by_zero(self):
        assert evaluate_expression("c != 0 && 10 / c == 1", 0, 0, 1, 1) == 0

    def test_division_by_zero(self):
        with pytest.raises(ExecutionError):
            evaluate_expression("r / c", 1, 0, 1, 1)

    def test_undefined_variable(self):
        with pytest.raises(ExecutionError):
            evaluate_expression("x == 1", 0, 0, 1, 1)

    def test_trailing_tokens(self):
        with pytest.raises(ProgramSyntaxError):
            evaluate_expression("r == c c", 0, 0, 1, 1)

    def test_unexpected_character(self):
        with pytest.raises(ProgramSyntaxError):
            tokenize("r @ c")


PROGRAM = """#include <iostream>
using namespace std;

int main() {
    int H = 2;  // Height
    int W = 3;
    for (int r = 0; r < H; r++) {
        for (int c = 0; c < W; ++c) {
            if (r == c) {
                cout << '\\\\';
            } else if ((r==1 && c==2)) {
                std::cout << '\\'';
            } else {
                cout << ' ';
            }
        }
        cout << endl;
    }
    return 0;
}
"""


class TestProgramInterpreter:
    def test_runs_generated_shape(self):
        assert run_program(PROGRAM) == "\\  \n \\'\n"

    def test_nonzero_exit(self):
        with pytest.raises(ExecutionError) as exc:
            run_program("int main() { cout << 'x'; return 3; }")
        assert exc.value.error_code == "NONZERO_EXIT"

    def test_return_stops_execution(self):
        assert run_program("int main() { cout << 'a'; return 0; cout << 'b'; }") == "a"

    def test_step_limit(self):
        code = "int main() { for (int i = 0; i < 100; i++) { cout << 'x'; } }"
        with pytest.raises(ExecutionError) as exc:
            ProgramInterpreter(max_steps=10).run(code)
        assert exc.value.error_code == "STEP_LIMIT_EXCEEDED"

    def test_loop_must_increment_its_variable(self):
        with pytest.raises(ProgramSyntaxError):
            run_program("int main() { for (int i = 0; i < 2; j++) cout << 'x'; }")

    def test_unsupported_statement(self):
        with pytest.raises(ProgramSyntaxError):
            run_program("int main() { while (1) { } }")

    def test_text_after_main(self):
        with pytest.raises(ProgramSyntaxError):
            run_program("int main() { return 0; } int x = 1;")


class TestRenderPredicates:
    def test_first_match_wins(self):
        predicates = [
            Predicate(PredicateKind.DIAGONAL, "\\", "r == c"),
            Predicate(PredicateKind.FILL, ".", "true"),
        ]
        assert render_predicates(predicates, 2, 3) == "\\..\n.\\."

    def test_coordinate_set(self):
        predicate = Predicate(
            PredicateKind.COORDINATE_SET,
            "*",
            "occupied_42.count({r, c})",
            is_scalable=False,
            confidence=0.0,
            coordinates=(Coordinate(0, 1),),
        )
        assert render_predicates([predicate], 1, 3) == " * "

    def test_rescaled_dimensions(self):
        border = Predicate(
            PredicateKind.BORDER, "#", "r == 0 || r == H-1 || c == 0 || c == W-1"
        )
        assert render_predicates([border], 3, 4) == "####\n#  #\n####"


class TestLongChains:
    def test_long_or_chain(self):
        expression = " || ".join(f"(r=={i} && c=={i})" for i in range(5000))
        assert evaluate_expression(expression, 4999, 4999, 1, 1) == 1
        assert evaluate_expression(expression, 4999, 0, 1, 1) == 0

    def test_long_and_chain(self):
        expression = " && ".join(f"r != {i}" for i in range(1, 5001))
        assert evaluate_expression(expression, 0, 0, 1, 1) == 1
        assert evaluate_expression(expression, 5000, 0, 1, 1) == 0

    def test_mixed_precedence_chain(self):
        assert evaluate_expression("r == 1 || c == 1 && r == 0 || false", 0, 1, 1, 1) == 1
        assert evaluate_expression("r == 1 && c == 1 || r == 0 && c == 0 && H == 1", 0, 0, 1, 1) == 1
        assert evaluate_expression("r == 1 && c == 1 || r == 0 && c == 0 && H == 2", 0, 0, 1, 1) == 0
