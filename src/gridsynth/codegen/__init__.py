"""Program synthesis and execution of generated programs."""

from .code_generator import CodeGenerator, synthesize
from .interpreter import ProgramInterpreter, render_predicates, run_program
from .runner import CompilerRunner

__all__ = [
    "CodeGenerator",
    "synthesize",
    "ProgramInterpreter",
    "render_predicates",
    "run_program",
    "CompilerRunner",
]
