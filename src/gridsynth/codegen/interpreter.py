"""
Reference interpreter for generated programs.

Understands exactly the C++ subset the code generator emits: ``int``
declarations, counted ``for`` loops, ``if`` / ``else if`` / ``else``
chains, ``cout << 'x'`` / ``cout << endl`` and ``return``.  Conditions
follow C semantics (integer truthiness, truncating ``/`` and ``%``,
short-circuit ``&&`` and ``||``).

This lets the pipeline check a program's output without a compiler, and
gives tests a way to evaluate predicate chains cell by cell.
"""

from __future__ import annotations

import logging
import operator
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from ..core.types import Coordinate, Predicate, PredicateKind
from ..exceptions import ExecutionError, ProgramSyntaxError

logger = logging.getLogger(__name__)

Env = Dict[str, int]
Evaluator = Callable[[Env], int]

DEFAULT_MAX_STEPS = 5_000_000

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<comment>//[^\n]*|/\*.*?\*/)
    | (?P<directive>\#[^\n]*)
    | (?P<char>'(?:\\.|[^\\'\n])')
    | (?P<int>\d+)
    | (?P<name>[A-Za-z_]\w*)
    | (?P<op><<|::|&&|\|\||==|!=|<=|>=|\+\+|[-+*/%<>!(){};=,])
    """,
    re.VERBOSE | re.DOTALL,
)

_CHAR_UNESCAPES = {"n": "\n", "t": "\t", "\\": "\\", "'": "'", '"': '"', "0": "\0"}

_BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 4,
    "<=": 4,
    ">": 4,
    ">=": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
    "%": 6,
}

_COMPARISONS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class Token(NamedTuple):
    kind: str
    text: str
    pos: int


_EOF = Token("eof", "", -1)


def tokenize(source: str) -> List[Token]:
    """Split program or expression text into tokens."""
    tokens: List[Token] = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise ProgramSyntaxError(
                f"Unexpected character {source[pos]!r} at offset {pos}",
                "UNEXPECTED_CHARACTER",
                {"offset": pos},
            )
        kind = match.lastgroup or ""
        if kind not in ("ws", "comment", "directive"):
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


def _decode_char(literal: str) -> str:
    body = literal[1:-1]
    if not body.startswith("\\"):
        return body
    try:
        return _CHAR_UNESCAPES[body[1]]
    except KeyError:
        raise ProgramSyntaxError(
            f"Unsupported escape sequence {literal}", "UNSUPPORTED_ESCAPE"
        ) from None


# ═══════════════════════════════════════════════════════════════════════
# C integer arithmetic
# ═══════════════════════════════════════════════════════════════════════


def _c_div(a: int, b: int) -> int:
    if b == 0:
        raise ExecutionError("Division by zero", "DIVISION_BY_ZERO")
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _c_mod(a: int, b: int) -> int:
    return a - b * _c_div(a, b)


def _logical(op: str, operands: Sequence[Evaluator]) -> Evaluator:
    """One evaluator for a whole `a && b && ...` or `a || b || ...` chain."""
    operands = tuple(operands)
    if op == "&&":
        return lambda env: 1 if all(f(env) for f in operands) else 0
    return lambda env: 1 if any(f(env) for f in operands) else 0


def _binary(op: str, left: Evaluator, right: Evaluator) -> Evaluator:
    if op in _COMPARISONS:
        compare = _COMPARISONS[op]
        return lambda env: 1 if compare(left(env), right(env)) else 0
    if op == "+":
        return lambda env: left(env) + right(env)
    if op == "-":
        return lambda env: left(env) - right(env)
    if op == "*":
        return lambda env: left(env) * right(env)
    if op == "/":
        return lambda env: _c_div(left(env), right(env))
    return lambda env: _c_mod(left(env), right(env))


def _variable(name: str) -> Evaluator:
    def lookup(env: Env) -> int:
        try:
            return env[name]
        except KeyError:
            raise ExecutionError(
                f"Undefined variable '{name}'", "UNDEFINED_VARIABLE"
            ) from None

    return lookup


# ═══════════════════════════════════════════════════════════════════════
# Program structure
# ═══════════════════════════════════════════════════════════════════════


@dataclass
class Declare:
    name: str
    value: Evaluator


@dataclass
class ForLoop:
    var: str
    start: Evaluator
    condition: Evaluator
    body: List["Statement"] = field(default_factory=list)


@dataclass
class IfChain:
    branches: List[Tuple[Evaluator, List["Statement"]]] = field(default_factory=list)
    orelse: List["Statement"] = field(default_factory=list)


@dataclass
class Print:
    glyphs: List[str] = field(default_factory=list)


@dataclass
class Return:
    value: Evaluator


Statement = Union[Declare, ForLoop, IfChain, Print, Return]


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        self.index = 0

    # -- token helpers --------------------------------------------------

    def peek(self, offset: int = 0) -> Token:
        i = self.index + offset
        return self.tokens[i] if i < len(self.tokens) else _EOF

    def advance(self) -> Token:
        token = self.peek()
        self.index += 1
        return token

    def accept(self, text: str) -> bool:
        if self.peek().text == text and self.peek().kind != "char":
            self.index += 1
            return True
        return False

    def expect(self, text: str) -> Token:
        token = self.peek()
        if token.text != text or token.kind == "char":
            raise self.error(f"Expected '{text}'")
        return self.advance()

    def expect_name(self) -> str:
        token = self.peek()
        if token.kind != "name":
            raise self.error("Expected identifier")
        return self.advance().text

    def error(self, message: str) -> ProgramSyntaxError:
        token = self.peek()
        found = token.text or "end of input"
        return ProgramSyntaxError(
            f"{message}, found {found!r}",
            "UNEXPECTED_TOKEN",
            {"offset": token.pos},
        )

    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    # -- expressions ----------------------------------------------------

    def expression(self, min_precedence: int = 1) -> Evaluator:
        left = self.unary()
        while True:
            token = self.peek()
            precedence = _BINARY_PRECEDENCE.get(token.text) if token.kind == "op" else None
            if precedence is None or precedence < min_precedence:
                return left
            self.advance()
            right = self.expression(precedence + 1)
            if token.text in ("&&", "||"):
                # Flat operand list keeps evaluation depth independent of chain length.
                operands = [left, right]
                while self.peek().kind == "op" and self.peek().text == token.text:
                    self.advance()
                    operands.append(self.expression(precedence + 1))
                left = _logical(token.text, operands)
            else:
                left = _binary(token.text, left, right)

    def unary(self) -> Evaluator:
        if self.accept("!"):
            operand = self.unary()
            return lambda env: 0 if operand(env) else 1
        if self.accept("-"):
            operand = self.unary()
            return lambda env: -operand(env)
        if self.accept("+"):
            return self.unary()
        return self.primary()

    def primary(self) -> Evaluator:
        token = self.peek()
        if token.kind == "int":
            self.advance()
            value = int(token.text)
            return lambda env: value
        if token.kind == "name":
            self.advance()
            if token.text == "true":
                return lambda env: 1
            if token.text == "false":
                return lambda env: 0
            return _variable(token.text)
        if self.accept("("):
            inner = self.expression()
            self.expect(")")
            return inner
        raise self.error("Expected expression")

    # -- statements -----------------------------------------------------

    def program(self) -> List[Statement]:
        if self.accept("using"):
            self.expect("namespace")
            self.expect("std")
            self.expect(";")
        self.expect("int")
        self.expect("main")
        self.expect("(")
        self.expect(")")
        body = self.block()
        if not self.at_end():
            raise self.error("Unexpected text after main()")
        return body

    def block(self) -> List[Statement]:
        self.expect("{")
        statements: List[Statement] = []
        while not self.accept("}"):
            if self.at_end():
                raise self.error("Unterminated block")
            statements.append(self.statement())
        return statements

    def body(self) -> List[Statement]:
        if self.peek().text == "{":
            return self.block()
        return [self.statement()]

    def statement(self) -> Statement:
        token = self.peek()
        if token.text == "int":
            self.advance()
            name = self.expect_name()
            self.expect("=")
            value = self.expression()
            self.expect(";")
            return Declare(name, value)
        if token.text == "for":
            return self.for_loop()
        if token.text == "if":
            return self.if_chain()
        if token.text in ("cout", "std"):
            return self.print_statement()
        if token.text == "return":
            self.advance()
            value = self.expression()
            self.expect(";")
            return Return(value)
        raise self.error("Expected statement")

    def for_loop(self) -> ForLoop:
        self.expect("for")
        self.expect("(")
        self.expect("int")
        var = self.expect_name()
        self.expect("=")
        start = self.expression()
        self.expect(";")
        condition = self.expression()
        self.expect(";")
        if self.accept("++"):
            step_var = self.expect_name()
        else:
            step_var = self.expect_name()
            self.expect("++")
        if step_var != var:
            raise self.error(f"Loop must increment '{var}'")
        self.expect(")")
        return ForLoop(var, start, condition, self.body())

    def if_chain(self) -> IfChain:
        chain = IfChain()
        self.expect("if")
        while True:
            self.expect("(")
            condition = self.expression()
            self.expect(")")
            chain.branches.append((condition, self.body()))
            if not self.accept("else"):
                return chain
            if not self.accept("if"):
                chain.orelse = self.body()
                return chain

    def print_statement(self) -> Print:
        if self.accept("std"):
            self.expect("::")
        self.expect("cout")
        glyphs: List[str] = []
        while self.accept("<<"):
            token = self.peek()
            if token.kind == "char":
                glyphs.append(_decode_char(self.advance().text))
                continue
            if self.accept("std"):
                self.expect("::")
            if self.accept("endl"):
                glyphs.append("\n")
                continue
            raise self.error("Expected character literal or endl")
        if not glyphs:
            raise self.error("Expected '<<'")
        self.expect(";")
        return Print(glyphs)


# ═══════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════


@lru_cache(maxsize=512)
def compile_expression(expression: str) -> Evaluator:
    """Compile a condition into a callable taking a variable mapping."""
    parser = _Parser(tokenize(expression))
    evaluator = parser.expression()
    if not parser.at_end():
        raise parser.error("Unexpected text after expression")
    return evaluator


def evaluate_expression(expression: str, r: int, c: int, H: int, W: int) -> int:
    """Evaluate a predicate expression for one cell (C truthiness)."""
    return compile_expression(expression)({"r": r, "c": c, "H": H, "W": W})


class _ProgramExit(Exception):
    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


class ProgramInterpreter:
    """Run a generated program and capture what it prints.

    Usage::

        output = ProgramInterpreter().run(generated.code)
    """

    def __init__(self, max_steps: int = DEFAULT_MAX_STEPS) -> None:
        self.max_steps = max_steps
        self._steps = 0

    def parse(self, code: str) -> List[Statement]:
        return _Parser(tokenize(code)).program()

    def run(self, code: str) -> str:
        statements = self.parse(code)
        self._steps = 0
        out: List[str] = []
        try:
            self._execute(statements, {}, out)
            exit_code = 0
        except _ProgramExit as exit_signal:
            exit_code = exit_signal.code
        if exit_code != 0:
            raise ExecutionError(
                f"Program exited with status {exit_code}",
                "NONZERO_EXIT",
                {"exit_code": exit_code},
            )
        logger.debug("Interpreted program in %d loop iterations", self._steps)
        return "".join(out)

    def _tick(self) -> None:
        self._steps += 1
        if self._steps > self.max_steps:
            raise ExecutionError(
                f"Program exceeded {self.max_steps} loop iterations",
                "STEP_LIMIT_EXCEEDED",
            )

    def _execute(self, statements: Sequence[Statement], env: Env, out: List[str]) -> None:
        for stmt in statements:
            if isinstance(stmt, Declare):
                env[stmt.name] = stmt.value(env)
            elif isinstance(stmt, ForLoop):
                env[stmt.var] = stmt.start(env)
                while stmt.condition(env):
                    self._tick()
                    self._execute(stmt.body, env, out)
                    env[stmt.var] += 1
            elif isinstance(stmt, IfChain):
                for condition, body in stmt.branches:
                    if condition(env):
                        self._execute(body, env, out)
                        break
                else:
                    self._execute(stmt.orelse, env, out)
            elif isinstance(stmt, Print):
                out.extend(stmt.glyphs)
            elif isinstance(stmt, Return):
                raise _ProgramExit(stmt.value(env))


def run_program(code: str, max_steps: int = DEFAULT_MAX_STEPS) -> str:
    """Interpret ``code`` and return its standard output."""
    return ProgramInterpreter(max_steps).run(code)


def render_predicates(
    predicates: Sequence[Predicate],
    height: int,
    width: int,
    coordinates_by_symbol: Optional[Mapping[str, Sequence[Coordinate]]] = None,
    blank: str = " ",
) -> str:
    """Evaluate a predicate chain over every cell, first match wins.

    Returns the rows joined by newlines, in the same form as
    :meth:`Grid.render`.
    """
    coordinates_by_symbol = coordinates_by_symbol or {}
    tests: List[Tuple[str, Callable[[int, int], bool]]] = []
    for predicate in predicates:
        if predicate.kind is PredicateKind.COORDINATE_SET:
            cells = coordinates_by_symbol.get(predicate.symbol, predicate.coordinates)
            members = frozenset((row, col) for row, col in cells)
            tests.append((predicate.symbol, lambda r, c, m=members: (r, c) in m))
        else:
            evaluator = compile_expression(predicate.expression)
            tests.append(
                (
                    predicate.symbol,
                    lambda r, c, f=evaluator: bool(
                        f({"r": r, "c": c, "H": height, "W": width})
                    ),
                )
            )

    rows = []
    for r in range(height):
        glyphs = []
        for c in range(width):
            glyphs.append(next((s for s, test in tests if test(r, c)), blank))
        rows.append("".join(glyphs))
    return "\n".join(rows)
