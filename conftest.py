# conftest.py
# -------------------------------------------------------------------------------------
# Archivo: conftest.py (raíz del proyecto)
# Propósito: Configurar pytest para la suite del buscador de invitados.
#            - Fixtures con una exportación de ejemplo (la misma de los escenarios).
#            - Fetcher falso (sin red) que cuenta descargas y puede simular caídas.
#            - Fábrica de TestClient con Settings explícitos por test.
#            - Muestra cuántos tests se descubrieron y el tiempo total de la suite.
# Requisitos:
#   - pytest instalado.
#   - httpx (lo usa fastapi.testclient).
# -------------------------------------------------------------------------------------

from __future__ import annotations  # Permite anotaciones de tipos adelantadas
import time                         # Para medir el tiempo total de la suite
from typing import Callable, Optional

import pytest                       # Framework de testing que orquesta los hooks de sesión
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.directory import GuestDirectory
from app.main import create_app
from app.services.guest_source import GuestSourceError

# =========================
# Datos de ejemplo
# =========================
SCENARIO_EXPORT = (
    "Name,Family Group,Confirmation,Table,Date\n"
    '"Leo Hany","Leo Hany Family",,,\n'
    '"Monica Atef","Leo Hany Family",,,\n'
    '"Fady Adel","Fady Adel Family",,,\n'
    '"Sarah Adel","Fady Adel Family",,,\n'
    '"John Doe","",,,\n'
)

_session_start_monotonic: float = 0.0            # Marca de tiempo (monotónica) al iniciar la suite


def _fmt_hhmmss(elapsed: float) -> str:
    """Convierte segundos (float) a cadena HH:MM:SS para mostrar tiempos de forma legible."""
    total = int(elapsed)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def pytest_sessionstart(session):
    """Hook al iniciar la sesión: arranca el cronómetro."""
    global _session_start_monotonic
    _session_start_monotonic = time.monotonic()


def pytest_collection_finish(session):
    """Hook cuando pytest termina de recolectar tests: muestra cuántos encontró."""
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    msg = f"📋 Descubiertos {len(session.items)} tests."
    if tr:
        tr.write_line(msg)
    else:
        print(msg)


def pytest_sessionfinish(session, exitstatus):
    """Hook al finalizar la sesión: muestra tiempo total."""
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    line = f"🟢 Suite finalizada. Tiempo total: {_fmt_hhmmss(time.monotonic() - _session_start_monotonic)}"
    if tr:
        tr.write_line(line)
    else:
        print("\n" + line)


# =========================
# Fetcher falso
# =========================
class FakeFetcher:
    """Devuelve `text` y cuenta las descargas; con `fail=True` simula la caída de la hoja."""

    def __init__(self, text: str = SCENARIO_EXPORT, fail: bool = False) -> None:
        self.text = text
        self.fail = fail
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.fail:
            raise GuestSourceError("HTTP 403 Forbidden")
        return self.text


# ===============================
# Fixtures
# ===============================
@pytest.fixture
def scenario_export() -> str:
    return SCENARIO_EXPORT


@pytest.fixture
def directory() -> GuestDirectory:
    """Directorio de los escenarios: Leo/Monica, Fady/Sarah y John sin familia."""
    return GuestDirectory.from_export(SCENARIO_EXPORT)


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Fábrica: make_client(fetcher=..., **overrides de Settings) → TestClient."""
    def _make(fetcher: Optional[Callable[[], str]] = None, **overrides) -> TestClient:
        base = {"guest_sheet_id": "test-sheet", "search_max": 0, "cache_ttl_seconds": 60}
        base.update(overrides)
        app = create_app(Settings(**base), fetcher=fetcher or FakeFetcher())
        return TestClient(app)
    return _make
