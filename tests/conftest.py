# tests/conftest.py
import pytest

from torneo.frontend import build_model, scan
from torneo.utils.observability import MetricsRegistry


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "e2e: marks tests as end-to-end tests")


COPA_SOURCE = """
torneo {
    nombre: "Copa Mundo",
    sede: "Guatemala"
}

equipos {
    equipo: "A" [
        jugador: "X" [posicion: "Delantero", numero: 9, edad: 25]
    ],
    equipo: "B" [
        jugador: "Y" [posicion: "Portero", numero: 1, edad: 30]
    ]
}

eliminacion {
    cuartos: [
        partido: "A" vs "B" [resultado: "3-1", goleadores: ["X"]]
    ]
}
"""


FULL_SOURCE = """
// Copa regional de ejemplo
torneo {
    nombre: "Copa Centroamericana",
    equipos: 8,
    sede: "Ciudad de Guatemala"
};

equipos {
    equipo: "Leones" [
        jugador: "Carlos Pérez" [posicion: "Delantero", numero: 9, edad: 27],
        jugador: "Luis Gómez" [posicion: "Medio"]
    ],
    equipo: "Tigres" [
        jugador: "Mario Ramírez" [numero: 10]
    ],
    equipo: "Águilas" [
        jugador: "José Núñez"
    ],
    equipo: "Pumas" [],
    equipo: "Halcones",
    equipo: "Toros",
    equipo: "Lobos",
    equipo: "Osos"
}

/* Resultados
   de la fase final */
eliminacion {
    cuartos: [
        partido: "Leones" vs "Tigres" [
            resultado: "2-1",
            goleadores: [
                goleador: "Carlos Pérez" [minuto: 12],
                goleador: "Luis Gómez" [minuto: 70],
                goleador: "Mario Ramírez" [minuto: 55]
            ]
        ],
        partido: "Águilas" vs "Pumas" [resultado: "1-1", goleadores: ["José Núñez"]],
        partido: "Halcones" VS "Toros" [resultado: "0-2"],
        partido: "Lobos" vs "Osos" [resultado: "3-0", goleadores: [goleador: "Pedro Lobo"]]
    ],
    semifinal: [
        partido: "Leones" vs "Águilas" [resultado: "1-0", goleadores: [goleador: "Carlos Pérez" [minuto: 88]]],
        partido: "Toros" vs "Lobos" [resultado: "pendiente"]
    ],
    final: [
        partido: "Leones" vs "Toros"
    ]
}
"""


@pytest.fixture
def copa_source():
    """Two teams and a single quarterfinal."""
    return COPA_SOURCE


@pytest.fixture
def full_source():
    """Eight teams played through to a pending final."""
    return FULL_SOURCE


@pytest.fixture
def parse():
    """Scan and build in one step; returns (model, lexical + syntax diagnostics)."""
    def _parse(text, parser_settings=None):
        tokens, lex_errors = scan(text)
        model, syntax_errors = build_model(tokens, parser_settings)
        return model, lex_errors + syntax_errors
    return _parse


@pytest.fixture
def copa_model(parse, copa_source):
    model, diagnostics = parse(copa_source)
    assert diagnostics == []
    return model


@pytest.fixture
def full_model(parse, full_source):
    model, diagnostics = parse(full_source)
    assert diagnostics == []
    return model


@pytest.fixture
def metrics():
    """Fresh metrics registry isolated from the global singleton."""
    return MetricsRegistry()
