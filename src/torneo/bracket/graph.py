"""
Bracket graph description generator.

Emits Graphviz DOT text for the elimination tree: one cluster per phase
in the fixed cuartos -> semifinal -> final order, two team nodes and one
match node per match, and an advancement edge from each winner to its
slot in the next phase. Rendering the text is left to external tools.
"""
import logging
from typing import List, Optional

from ..config.settings import GraphSettings
from ..model import Match, TournamentModel
from ..score import parse_score
from .phases import display_name, next_phase, ordered_phases

logger = logging.getLogger(__name__)


def quote(text: str) -> str:
    """Quote a DOT identifier or label."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def match_node_id(phase: str, index: int) -> str:
    return f"{phase}_m{index}"


def team_node_id(phase: str, index: int, slot: str) -> str:
    return f"{phase}_m{index}_{slot}"


class BracketGraphGenerator:
    """
    Generate a DOT description of the elimination bracket.

    Usage:
        text = BracketGraphGenerator().generate(model)
    """

    PENDING_LABEL = "pendiente"

    def __init__(self, graph_settings: Optional[GraphSettings] = None):
        self.settings = graph_settings or GraphSettings()

    def generate(self, model: TournamentModel) -> str:
        """
        Build the graph text.

        Phases missing from the model contribute nothing; a model with no
        bracket still yields a valid, empty digraph.
        """
        lines = [
            "digraph bracket {",
            f"  rankdir={self.settings.rankdir};",
            f"  node [shape={self.settings.node_shape}, fontname={quote(self.settings.font_name)}];",
            f"  edge [fontname={quote(self.settings.font_name)}];",
        ]
        advancement: List[str] = []

        for phase in ordered_phases(model.elimination_bracket):
            matches = model.elimination_bracket[phase]
            lines.extend(self._render_cluster(phase, matches))
            advancement.extend(self._advancement_edges(model, phase, matches))

        lines.extend(advancement)
        lines.append("}")

        logger.debug("Generated bracket graph with %d advancement edges", len(advancement))
        return "\n".join(lines) + "\n"

    def _render_cluster(self, phase: str, matches: List[Match]) -> List[str]:
        lines = [
            f"  subgraph cluster_{phase} {{",
            f"    label={quote(display_name(phase))};",
            "    style=rounded;",
        ]
        same_rank = []

        for index, match in enumerate(matches):
            score = parse_score(match.result)
            node_a = team_node_id(phase, index, "a")
            node_b = team_node_id(phase, index, "b")
            node_m = match_node_id(phase, index)

            style_a = style_b = ""
            if score is not None and score.is_draw:
                style_a = style_b = self._fill(self.settings.draw_color)
            elif score is not None and score.winner_side == "a":
                style_a = self._fill(self.settings.winner_color, bold=True)
            elif score is not None:
                style_b = self._fill(self.settings.winner_color, bold=True)

            outcome = str(score) if score is not None else self.PENDING_LABEL
            match_label = match.label + "\n" + outcome
            lines.append(f"    {quote(node_a)} [label={quote(match.team_a)}{style_a}];")
            lines.append(f"    {quote(node_b)} [label={quote(match.team_b)}{style_b}];")
            lines.append(
                f"    {quote(node_m)} [label={quote(match_label)}, "
                f"shape=ellipse{self._fill(self.settings.match_color)}];"
            )
            lines.append(f"    {quote(node_a)} -> {quote(node_m)} [arrowhead=none];")
            lines.append(f"    {quote(node_b)} -> {quote(node_m)} [arrowhead=none];")
            same_rank.extend([node_a, node_b])

        if same_rank:
            members = " ".join(f"{quote(node)};" for node in same_rank)
            lines.append(f"    {{ rank=same; {members} }}")
        lines.append("  }")
        return lines

    def _advancement_edges(self, model: TournamentModel, phase: str, matches: List[Match]) -> List[str]:
        target_phase = next_phase(phase)
        if target_phase is None or target_phase not in model.elimination_bracket:
            return []
        target_matches = model.elimination_bracket[target_phase]

        edges = []
        for index, match in enumerate(matches):
            score = parse_score(match.result)
            if score is None or score.is_draw:
                continue
            target_index = index // 2
            if target_index >= len(target_matches):
                continue
            source = team_node_id(phase, index, score.winner_side)
            target = team_node_id(target_phase, target_index, "a" if index % 2 == 0 else "b")
            edges.append(
                f"  {quote(source)} -> {quote(target)} "
                f"[color={quote(self.settings.winner_color)}, style=bold];"
            )
        return edges

    @staticmethod
    def _fill(color: str, bold: bool = False) -> str:
        style = "filled,bold" if bold else "filled"
        return f", style={quote(style)}, fillcolor={quote(color)}"


def generate_bracket_graph(model: TournamentModel, graph_settings: Optional[GraphSettings] = None) -> str:
    """Convenience wrapper around BracketGraphGenerator.generate."""
    return BracketGraphGenerator(graph_settings).generate(model)
