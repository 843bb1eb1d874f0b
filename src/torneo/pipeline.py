"""
Unified analysis pipeline: scan -> build model -> stats -> bracket graph.
"""
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .bracket.graph import BracketGraphGenerator
from .config import Settings, settings as default_settings
from .frontend.diagnostics import Diagnostic
from .frontend.parser import build_model
from .frontend.scanner import scan
from .frontend.tokens import Token
from .model import TournamentModel
from .stats import ScorerEvent, ScoringSystem, Standing, compute_stats
from .utils.observability import RUN_ID, Logger, MetricsRegistry, get_metrics

logger = Logger(__name__)


@dataclass
class AnalysisResult:
    """Everything one analysis run produces."""
    tokens: List[Token] = field(default_factory=list)
    lexical_diagnostics: List[Diagnostic] = field(default_factory=list)
    syntax_diagnostics: List[Diagnostic] = field(default_factory=list)
    model: TournamentModel = field(default_factory=TournamentModel)
    standings: List[Standing] = field(default_factory=list)
    scorers: List[ScorerEvent] = field(default_factory=list)
    graph: str = ""

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Lexical diagnostics first, then syntax diagnostics."""
        return self.lexical_diagnostics + self.syntax_diagnostics

    @property
    def has_errors(self) -> bool:
        return bool(self.lexical_diagnostics or self.syntax_diagnostics)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tokens": [t.to_dict() for t in self.tokens],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "model": self.model.to_dict(),
            "standings": [s.to_dict() for s in self.standings],
            "scorers": [e.to_dict() for e in self.scorers],
            "graph": self.graph,
        }


class AnalysisPipeline:
    """
    Runs the full analysis with canonical logging and metrics.

    Each stage consumes the complete output of the previous one; a run
    shares nothing with earlier runs.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        metrics: Optional[MetricsRegistry] = None,
    ):
        self.settings = settings or default_settings
        if metrics is None and self.settings.observability.enable_metrics:
            metrics = get_metrics()
        self.metrics = metrics
        self.scoring = ScoringSystem.from_settings(self.settings.scoring)
        self.graph_generator = BracketGraphGenerator(self.settings.graph)

    @contextmanager
    def observability_context(self, stage: str):
        """Context manager for canonical logging and metrics."""
        start_time = time.time()
        logger.log_event(f'{stage}_started', stage=stage)

        try:
            yield

            duration = time.time() - start_time
            logger.log_event(
                f'{stage}_completed',
                stage=stage,
                duration_seconds=duration,
                status='success',
            )
            if self.metrics is not None:
                self.metrics.stage_duration.labels(stage=stage).observe(duration)

        except Exception as e:
            duration = time.time() - start_time
            logger.log_error(
                f'{stage}_failed',
                stage=stage,
                duration_seconds=duration,
                error_type=type(e).__name__,
                error_message=str(e),
                exc_info=True,
            )
            raise

    def run(self, text: str) -> AnalysisResult:
        """
        Analyze one source text.

        All stage events share one run id: the one already bound in
        RUN_ID, or a fresh one for this run.

        Raises:
            SourceTextError: if `text` is not a string
        """
        token = RUN_ID.set(RUN_ID.get() or str(uuid.uuid4()))
        result = AnalysisResult()
        try:
            with self.observability_context('scan'):
                result.tokens, result.lexical_diagnostics = scan(text)

            with self.observability_context('build_model'):
                result.model, result.syntax_diagnostics = build_model(
                    result.tokens, self.settings.parser
                )

            with self.observability_context('compute_stats'):
                result.standings, result.scorers = compute_stats(result.model, self.scoring)

            with self.observability_context('generate_graph'):
                result.graph = self.graph_generator.generate(result.model)

            self._record(result)
        except Exception:
            if self.metrics is not None:
                self.metrics.analysis_runs.labels(status='failure').inc()
            raise
        finally:
            RUN_ID.reset(token)

        return result

    def _record(self, result: AnalysisResult):
        logger.log_event(
            'analysis_completed',
            tokens=len(result.tokens),
            lexical_errors=len(result.lexical_diagnostics),
            syntax_errors=len(result.syntax_diagnostics),
            teams=len(result.model.teams),
            phases=len(result.model.elimination_bracket),
        )
        if self.metrics is None:
            return
        self.metrics.analysis_runs.labels(status='success').inc()
        self.metrics.tokens_scanned.inc(len(result.tokens))
        for diagnostic in result.diagnostics:
            self.metrics.diagnostics.labels(
                stage=diagnostic.stage.value,
                kind=diagnostic.kind.name.lower(),
            ).inc()
        self.metrics.last_analysis_timestamp.set(time.time())


def analyze(text: str, settings: Optional[Settings] = None) -> AnalysisResult:
    """Run the whole pipeline on `text` with the given (or global) settings."""
    return AnalysisPipeline(settings).run(text)
