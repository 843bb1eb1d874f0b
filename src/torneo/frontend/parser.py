"""
Error-tolerant recursive-descent model builder.

Consumes the scanner's tokens and builds a TournamentModel. Every
expectation failure is recorded as a diagnostic and the builder
resynchronizes by skipping exactly one token, so any finite token
sequence yields a model (possibly empty) without raising.

Grammar (informal; `?` optional, `*` repeated, commas optional):

    source      := block*
    block       := TORNEO | EQUIPOS | ELIMINACION
    TORNEO      := 'torneo' '{' pair* '}' ';'?
    EQUIPOS     := 'equipos' '{' team* '}' ';'?
    team        := 'equipo' ':' name ('[' player* ']')?
    player      := 'jugador' ':' name ('[' pair* ']')?
    ELIMINACION := 'eliminacion' '{' phase* '}' ';'?
    phase       := PHASE ':' ('[' | '{')? match* (']' | '}')?
    match       := 'partido' ':' name VS? name ('[' match_attr* ']')?
    match_attr  := 'resultado' ':' value
                 | 'goleadores' ':' ('[' scorer* ']' | name)
                 | key ':' value
    scorer      := 'goleador' ':' name ('[' 'minuto' ':' value ']')? | name
    pair        := key ':' value
"""
import logging
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..config.settings import ParserSettings, RedeclarationPolicy
from ..model import Match, Player, Scorer, Team, TournamentModel
from .diagnostics import Diagnostic, DiagnosticKind
from .tokens import BLOCK_WORDS, PHASE_WORDS, Token, TokenKind

logger = logging.getLogger(__name__)


VALUE_KINDS = frozenset({TokenKind.STRING, TokenKind.NUMBER, TokenKind.IDENTIFIER})
NAME_KINDS = frozenset({TokenKind.STRING, TokenKind.IDENTIFIER})
KEY_KINDS = frozenset({TokenKind.RESERVED, TokenKind.IDENTIFIER})

# Tokens that end an empty value slot without being consumed
STRUCTURAL_KINDS = frozenset({
    TokenKind.LBRACE, TokenKind.RBRACE,
    TokenKind.LBRACKET, TokenKind.RBRACKET,
    TokenKind.COLON, TokenKind.COMMA, TokenKind.SEMICOLON,
    TokenKind.VERSUS,
})

SYMBOL_TEXT = {
    TokenKind.LBRACE: "{",
    TokenKind.RBRACE: "}",
    TokenKind.LBRACKET: "[",
    TokenKind.RBRACKET: "]",
    TokenKind.COLON: ":",
}

KeyHandler = Callable[[Token], None]


class ModelBuilder:
    """
    Builds a TournamentModel from a token sequence.

    Usage:
        model, diagnostics = ModelBuilder(tokens).build()
    """

    def __init__(self, tokens: Sequence[Token], parser_settings: Optional[ParserSettings] = None):
        self.tokens: List[Token] = list(tokens)
        self.settings = parser_settings or ParserSettings()
        self.pos = 0
        self.model = TournamentModel()
        self.diagnostics: List[Diagnostic] = []
        self._metadata_declared = False

    # ------------------------------------------------------------------
    # Cursor primitives
    # ------------------------------------------------------------------

    def _peek(self, k: int = 0) -> Optional[Token]:
        i = self.pos + k
        return self.tokens[i] if i < len(self.tokens) else None

    def _advance(self) -> Optional[Token]:
        tok = self._peek()
        if tok is not None:
            self.pos += 1
        return tok

    def _check(self, kind: TokenKind) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == kind

    def _expect(self, kind: TokenKind) -> Optional[Token]:
        """Consume and return the next token only if it has `kind`."""
        if self._check(kind):
            return self._advance()
        return None

    def _accept(self, kind: TokenKind) -> bool:
        return self._expect(kind) is not None

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _at_block_start(self) -> bool:
        """A top-level keyword followed by '{' always starts a new block."""
        tok = self._peek()
        nxt = self._peek(1)
        return (
            tok is not None
            and tok.kind == TokenKind.RESERVED
            and tok.lexeme in BLOCK_WORDS
            and nxt is not None
            and nxt.kind == TokenKind.LBRACE
        )

    def _at_sequence_end(self, closer: TokenKind, stop_words: Iterable[str] = ()) -> bool:
        tok = self._peek()
        if tok is None or tok.kind == closer or self._at_block_start():
            return True
        return tok.kind == TokenKind.RESERVED and tok.lexeme in stop_words

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _report(self, kind: DiagnosticKind, description: str, token: Optional[Token] = None):
        if token is None:
            token = self._peek()
        if token is not None:
            text, line, column = token.lexeme, token.line, token.column
        elif self.tokens:
            last = self.tokens[-1]
            text, line, column = "EOF", last.line, last.column
        else:
            text, line, column = "EOF", 1, 1
        self.diagnostics.append(Diagnostic(text, kind, description, line, column))

    def _expect_delimiter(self, kind: TokenKind, context: str) -> bool:
        if self._accept(kind):
            return True
        self._report(
            DiagnosticKind.MISSING_DELIMITER,
            f"Se esperaba '{SYMBOL_TEXT[kind]}' {context}",
        )
        return False

    def _close(self, closer: TokenKind, context: str) -> bool:
        return self._expect_delimiter(closer, f"para cerrar {context}")

    def _skip_unexpected(self, context: str):
        tok = self._advance()
        logger.debug("Skipping %r at %d:%d in %s", tok.lexeme, tok.line, tok.column, context)
        self._report(
            DiagnosticKind.UNEXPECTED_TOKEN,
            f"Token '{tok.lexeme}' inesperado en {context}",
            tok,
        )

    def _read_value(self, kinds: FrozenSet[TokenKind], what: str) -> Optional[Token]:
        """
        Read one value token of an accepted kind.

        An empty slot (delimiter, block start or end of input) is reported
        without consuming anything; a wrong-kind token is reported and
        skipped.
        """
        tok = self._peek()
        if tok is not None and tok.kind in kinds:
            return self._advance()
        if tok is None or tok.kind in STRUCTURAL_KINDS or self._at_block_start():
            self._report(DiagnosticKind.MISSING_VALUE, f"Falta {what}")
            return None
        self._advance()
        self._report(DiagnosticKind.INVALID_VALUE, f"'{tok.lexeme}' no es válido como {what}", tok)
        return None

    # ------------------------------------------------------------------
    # Generic key/value sequence
    # ------------------------------------------------------------------

    def _parse_pairs(
        self,
        closer: TokenKind,
        context: str,
        special: Optional[Dict[str, KeyHandler]] = None,
        known: Optional[FrozenSet[str]] = None,
        stop_words: Iterable[str] = (),
    ) -> Dict[str, str]:
        """
        Parse `key : value` entries up to and including `closer`.

        Args:
            closer: Token kind that closes the sequence (the opener is
                already consumed)
            context: Human-readable location for diagnostics
            special: Keys whose value is parsed by a dedicated handler,
                called right after the colon
            known: If given, only these keys are stored; any other key has
                its value consumed and discarded
            stop_words: Reserved words that end the sequence early

        Returns:
            Mapping of key to raw value lexeme (later duplicates win)
        """
        special = special or {}
        pairs: Dict[str, str] = {}

        while not self._at_sequence_end(closer, stop_words):
            tok = self._peek()
            if tok.kind == TokenKind.COMMA:
                self._advance()
                continue
            if tok.kind not in KEY_KINDS:
                self._skip_unexpected(context)
                continue

            key_tok = self._advance()
            key = key_tok.lexeme
            self._expect_delimiter(TokenKind.COLON, f"después de '{key}'")

            handler = special.get(key)
            if handler is not None:
                handler(key_tok)
                continue

            value = self._read_value(VALUE_KINDS, f"un valor para '{key}'")
            if known is not None and key not in known:
                if self.settings.is_strict:
                    self._report(
                        DiagnosticKind.UNKNOWN_ATTRIBUTE,
                        f"Atributo '{key}' ignorado en {context}",
                        key_tok,
                    )
                continue
            if value is not None:
                pairs[key] = value.lexeme

        self._close(closer, context)
        return pairs

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def build(self) -> Tuple[TournamentModel, List[Diagnostic]]:
        """Run the top-level loop until the token stream is exhausted."""
        while not self._at_end():
            tok = self._peek()
            if tok.is_reserved("torneo"):
                self._parse_torneo()
            elif tok.is_reserved("equipos"):
                self._parse_equipos()
            elif tok.is_reserved("eliminacion"):
                self._parse_eliminacion()
            else:
                self._skip_unexpected("el nivel superior")

        logger.debug(
            "Built model: %d metadata keys, %d teams, %d phases (%d syntax errors)",
            len(self.model.metadata), len(self.model.teams),
            len(self.model.elimination_bracket), len(self.diagnostics),
        )
        return self.model, self.diagnostics

    def _open_block(self, name: str) -> Token:
        keyword = self._advance()
        self._expect_delimiter(TokenKind.LBRACE, f"después de '{name}'")
        return keyword

    def _end_block(self, name: str):
        self._close(TokenKind.RBRACE, f"el bloque {name.upper()}")
        self._accept(TokenKind.SEMICOLON)

    def _parse_torneo(self):
        keyword = self._open_block("torneo")
        metadata = self._parse_pairs(TokenKind.RBRACE, "el bloque TORNEO")
        self._accept(TokenKind.SEMICOLON)
        self._store_metadata(metadata, keyword)

    def _parse_equipos(self):
        self._open_block("equipos")
        while not self._at_sequence_end(TokenKind.RBRACE):
            tok = self._peek()
            if tok.kind == TokenKind.COMMA:
                self._advance()
            elif tok.is_reserved("equipo"):
                self._parse_team()
            else:
                self._skip_unexpected("el bloque EQUIPOS")
        self._end_block("equipos")

    def _parse_team(self):
        self._advance()
        self._expect_delimiter(TokenKind.COLON, "después de 'equipo'")
        name = self._read_value(NAME_KINDS, "el nombre del equipo")
        team = Team(name.lexeme) if name is not None else None

        if self._accept(TokenKind.LBRACKET):
            while not self._at_sequence_end(TokenKind.RBRACKET, stop_words=("equipo",)):
                tok = self._peek()
                if tok.kind == TokenKind.COMMA:
                    self._advance()
                elif tok.is_reserved("jugador"):
                    player = self._parse_player()
                    if player is not None and team is not None:
                        team.players.append(player)
                else:
                    self._skip_unexpected("la plantilla del equipo")
            self._close(TokenKind.RBRACKET, "la plantilla del equipo")

        if team is not None:
            self.model.teams.append(team)

    def _parse_player(self) -> Optional[Player]:
        self._advance()
        self._expect_delimiter(TokenKind.COLON, "después de 'jugador'")
        name = self._read_value(NAME_KINDS, "el nombre del jugador")
        attributes: Dict[str, str] = {}
        if self._accept(TokenKind.LBRACKET):
            attributes = self._parse_pairs(
                TokenKind.RBRACKET,
                "los atributos del jugador",
                stop_words=("jugador", "equipo"),
            )
        if name is None:
            return None
        return Player(name.lexeme, attributes)

    def _parse_eliminacion(self):
        self._open_block("eliminacion")
        while not self._at_sequence_end(TokenKind.RBRACE):
            tok = self._peek()
            if tok.kind == TokenKind.COMMA:
                self._advance()
            elif tok.kind == TokenKind.RESERVED and tok.lexeme in PHASE_WORDS:
                self._parse_phase()
            else:
                self._skip_unexpected("el bloque ELIMINACION")
        self._end_block("eliminacion")

    def _parse_phase(self):
        phase_tok = self._advance()
        phase = phase_tok.lexeme
        context = f"la fase '{phase}'"
        self._expect_delimiter(TokenKind.COLON, f"después de '{phase}'")

        closer = None
        if self._accept(TokenKind.LBRACKET):
            closer = TokenKind.RBRACKET
        elif self._accept(TokenKind.LBRACE):
            closer = TokenKind.RBRACE

        matches: List[Match] = []
        while True:
            if closer is not None and self._at_sequence_end(closer, stop_words=PHASE_WORDS):
                break
            tok = self._peek()
            if tok is None:
                break
            if tok.kind == TokenKind.COMMA:
                self._advance()
            elif tok.is_reserved("partido"):
                match = self._parse_match()
                if match is not None:
                    matches.append(match)
            elif closer is None:
                break
            else:
                self._skip_unexpected(context)

        if closer is not None:
            self._close(closer, context)
        self._store_phase(phase, matches, phase_tok)

    def _parse_match(self) -> Optional[Match]:
        self._advance()
        self._expect_delimiter(TokenKind.COLON, "después de 'partido'")
        team_a = self._read_value(NAME_KINDS, "el primer equipo del partido")
        self._accept(TokenKind.VERSUS)
        team_b = self._read_value(NAME_KINDS, "el segundo equipo del partido")

        match = Match(
            team_a=team_a.lexeme if team_a is not None else "",
            team_b=team_b.lexeme if team_b is not None else "",
        )

        if self._accept(TokenKind.LBRACKET):
            attributes = self._parse_pairs(
                TokenKind.RBRACKET,
                "los atributos del partido",
                special={"goleadores": lambda _key: self._parse_scorers(match)},
                known=frozenset({"resultado"}),
                stop_words=("partido",),
            )
            match.result = attributes.get("resultado")

        if team_a is None or team_b is None:
            return None
        return match

    def _parse_scorers(self, match: Match):
        # Legacy single-scorer form: goleadores: "Nombre"
        if not self._accept(TokenKind.LBRACKET):
            name = self._read_value(NAME_KINDS, "el nombre del goleador")
            if name is not None:
                match.scorers.append(Scorer(name.lexeme))
            return

        while not self._at_sequence_end(TokenKind.RBRACKET, stop_words=("partido",)):
            tok = self._peek()
            if tok.kind == TokenKind.COMMA:
                self._advance()
            elif tok.is_reserved("goleador"):
                scorer = self._parse_scorer()
                if scorer is not None:
                    match.scorers.append(scorer)
            elif tok.kind in NAME_KINDS:
                match.scorers.append(Scorer(self._advance().lexeme))
            else:
                self._skip_unexpected("la lista de goleadores")
        self._close(TokenKind.RBRACKET, "la lista de goleadores")

    def _parse_scorer(self) -> Optional[Scorer]:
        self._advance()
        self._expect_delimiter(TokenKind.COLON, "después de 'goleador'")
        name = self._read_value(NAME_KINDS, "el nombre del goleador")
        attributes: Dict[str, str] = {}
        if self._accept(TokenKind.LBRACKET):
            attributes = self._parse_pairs(
                TokenKind.RBRACKET,
                "los atributos del goleador",
                known=frozenset({"minuto"}),
                stop_words=("goleador", "partido"),
            )
        if name is None:
            return None
        return Scorer(name.lexeme, attributes.get("minuto"))

    # ------------------------------------------------------------------
    # Redeclaration policy
    # ------------------------------------------------------------------

    def _store_metadata(self, metadata: Dict[str, str], keyword: Token):
        policy = self.settings.redeclaration_policy
        if not self._metadata_declared:
            self.model.metadata = metadata
        else:
            if self.settings.is_strict:
                self._report(DiagnosticKind.REDECLARED_BLOCK, "Bloque TORNEO declarado más de una vez", keyword)
            if policy == RedeclarationPolicy.LAST_WINS:
                self.model.metadata = metadata
            elif policy == RedeclarationPolicy.MERGE:
                self.model.metadata.update(metadata)
        self._metadata_declared = True

    def _store_phase(self, phase: str, matches: List[Match], phase_tok: Token):
        bracket = self.model.elimination_bracket
        if phase in bracket:
            if self.settings.is_strict:
                self._report(DiagnosticKind.REDECLARED_BLOCK, f"Fase '{phase}' declarada más de una vez", phase_tok)
            if self.settings.redeclaration_policy == RedeclarationPolicy.KEEP_FIRST:
                return
            if self.settings.redeclaration_policy == RedeclarationPolicy.MERGE:
                bracket[phase].extend(matches)
                return
        bracket[phase] = matches


def build_model(
    tokens: Sequence[Token],
    parser_settings: Optional[ParserSettings] = None,
) -> Tuple[TournamentModel, List[Diagnostic]]:
    """
    Build a tournament model from scanner tokens.

    Args:
        tokens: Token sequence from `scan`
        parser_settings: Strictness and redeclaration policy (defaults
            to lenient, last declaration wins)

    Returns:
        Tuple of (model, syntax diagnostics)
    """
    return ModelBuilder(tokens, parser_settings).build()
