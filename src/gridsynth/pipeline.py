"""
Pipeline: grid to predicates to program to verified output.

Each call recomputes everything from the grid snapshot; nothing is
cached between runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .analysis.pattern_analyzer import PatternAnalyzer
from .codegen.code_generator import CodeGenerator
from .codegen.interpreter import run_program
from .codegen.runner import CompilerRunner
from .config_manager import GridSynthConfig
from .core.grid import Grid
from .core.types import AnalysisResult, GeneratedCode, ValidationResult
from .exceptions import ValidationError
from .verify.output_validator import format_diff_report, validate

logger = logging.getLogger(__name__)

EXECUTION_MODES = ("interpreter", "compiler")


@dataclass
class PipelineReport:
    """Everything produced for one grid."""

    analysis: AnalysisResult
    generated: GeneratedCode
    output: Optional[str] = None
    validation: Optional[ValidationResult] = None
    report: str = ""

    @property
    def verified(self) -> bool:
        return self.validation is not None and self.validation.valid


class GridSynthPipeline:
    """Run discovery, synthesis and (optionally) verification.

    Usage::

        pipeline = GridSynthPipeline()
        report = pipeline.run(Grid.from_text("###\\n# #\\n###"), execute="interpreter")
        assert report.verified
    """

    def __init__(self, config: Optional[GridSynthConfig] = None) -> None:
        self.config = config or GridSynthConfig()
        self.generator = CodeGenerator(self.config.synthesis)

    def analyze(self, grid: Grid) -> AnalysisResult:
        return PatternAnalyzer(grid).analyze()

    def generate(self, grid: Grid, analysis: Optional[AnalysisResult] = None) -> GeneratedCode:
        analysis = analysis or self.analyze(grid)
        return self.generator.generate(
            analysis.predicates, grid.height, grid.width, grid.coordinates_by_symbol()
        )

    def execute(self, code: str, mode: Optional[str] = None) -> str:
        mode = mode or self.config.execution.mode
        if mode == "interpreter":
            return run_program(code)
        if mode == "compiler":
            return CompilerRunner(self.config.execution).run(code)
        raise ValidationError(
            f"Unsupported execution mode: {mode}", "UNSUPPORTED_EXECUTION_MODE"
        )

    def run(
        self,
        grid: Grid,
        candidate_output: Optional[str] = None,
        execute: Optional[str] = None,
    ) -> PipelineReport:
        analysis = self.analyze(grid)
        generated = self.generate(grid, analysis)
        report = PipelineReport(analysis=analysis, generated=generated)

        if candidate_output is None and execute is not None:
            candidate_output = self.execute(generated.code, execute)

        if candidate_output is not None:
            report.output = candidate_output
            report.validation = validate(grid, candidate_output)
            report.report = format_diff_report(
                report.validation, self.config.verifier.max_reported_differences
            )
            logger.info(
                "Verification %s for %dx%d grid",
                "passed" if report.validation.valid else "failed",
                grid.height,
                grid.width,
            )
        return report
