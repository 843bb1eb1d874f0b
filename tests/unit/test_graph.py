# tests/unit/test_graph.py
from torneo.bracket import BracketGraphGenerator, generate_bracket_graph
from torneo.bracket.graph import quote
from torneo.bracket.phases import next_phase, ordered_phases
from torneo.config import GraphSettings
from torneo.model import Match, TournamentModel


def advancement_lines(text):
    return [line.strip() for line in text.splitlines() if "style=bold" in line]


class TestPhases:

    def test_next_phase(self):
        assert next_phase("cuartos") == "semifinal"
        assert next_phase("semifinal") == "final"
        assert next_phase("final") is None
        assert next_phase("octavos") is None

    def test_ordered_phases_ignores_declaration_order(self):
        bracket = {"final": [], "octavos": [], "cuartos": []}
        assert ordered_phases(bracket) == ["cuartos", "final"]


class TestGraph:

    def test_empty_model_is_valid_digraph(self):
        text = generate_bracket_graph(TournamentModel())
        assert text.startswith("digraph bracket {\n")
        assert text.endswith("}\n")
        assert "subgraph" not in text
        assert "->" not in text

    def test_copa_scenario(self, copa_model):
        text = generate_bracket_graph(copa_model)
        assert text.count("subgraph cluster_") == 1
        assert 'label="Cuartos de final";' in text
        assert text.count("->") == 2
        assert "semifinal" not in text
        assert '"cuartos_m0" [label="A vs B\\n3-1", shape=ellipse' in text

    def test_winner_is_highlighted(self, copa_model):
        text = generate_bracket_graph(copa_model)
        assert '"cuartos_m0_a" [label="A", style="filled,bold", fillcolor="#22c55e"];' in text
        assert '"cuartos_m0_b" [label="B"];' in text

    def test_full_tournament(self, full_model):
        text = generate_bracket_graph(full_model)
        assert text.count("subgraph cluster_") == 3
        assert text.index("cluster_cuartos") < text.index("cluster_semifinal") < text.index("cluster_final")
        assert text.count("->") == 18
        assert text.count("rank=same") == 3

    def test_advancement_edges(self, full_model):
        edges = advancement_lines(generate_bracket_graph(full_model))
        assert [line.split(" [")[0] for line in edges] == [
            '"cuartos_m0_a" -> "semifinal_m0_a"',
            '"cuartos_m2_b" -> "semifinal_m1_a"',
            '"cuartos_m3_a" -> "semifinal_m1_b"',
            '"semifinal_m0_a" -> "final_m0_a"',
        ]

    def test_draw_fills_both_teams_without_advancing(self):
        model = TournamentModel(elimination_bracket={
            "cuartos": [Match("A", "B", "1-1")],
            "semifinal": [Match("A", "C")],
        })
        text = generate_bracket_graph(model)
        assert text.count('fillcolor="#facc15"') == 2
        assert advancement_lines(text) == []

    def test_pending_match(self):
        model = TournamentModel(elimination_bracket={"final": [Match("A", "B", "pendiente")]})
        text = generate_bracket_graph(model)
        assert '"final_m0" [label="A vs B\\npendiente"' in text
        assert "filled,bold" not in text

    def test_no_edge_without_target_match(self):
        model = TournamentModel(elimination_bracket={
            "cuartos": [Match("A", "B", "1-0"), Match("C", "D", "1-0"), Match("E", "F", "2-0")],
            "semifinal": [Match("A", "C")],
        })
        edges = advancement_lines(generate_bracket_graph(model))
        assert len(edges) == 2

    def test_skipped_phase_gets_no_edges(self):
        model = TournamentModel(elimination_bracket={
            "cuartos": [Match("A", "B", "1-0")],
            "final": [Match("A", "C")],
        })
        assert advancement_lines(generate_bracket_graph(model)) == []

    def test_unknown_phases_are_not_drawn(self):
        model = TournamentModel(elimination_bracket={"octavos": [Match("A", "B", "1-0")]})
        assert "octavos" not in generate_bracket_graph(model)

    def test_names_are_quoted(self):
        model = TournamentModel(elimination_bracket={"final": [Match('Los "Reyes"', "B")]})
        assert 'label="Los \\"Reyes\\""' in generate_bracket_graph(model)

    def test_settings_change_styling(self, copa_model):
        settings = GraphSettings(rankdir="TB", winner_color="#000000", node_shape="record")
        text = BracketGraphGenerator(settings).generate(copa_model)
        assert "rankdir=TB;" in text
        assert "node [shape=record" in text
        assert 'fillcolor="#000000"' in text

    def test_output_is_deterministic(self, full_model):
        assert generate_bracket_graph(full_model) == generate_bracket_graph(full_model)


def test_quote_escapes():
    assert quote('a"b') == '"a\\"b"'
    assert quote("a\nb") == '"a\\nb"'
    assert quote("a\\b") == '"a\\\\b"'
