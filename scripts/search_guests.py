# scripts/search_guests.py
# =============================================================================
# 🔎 Búsqueda de invitados desde la terminal (sin levantar la API).
# - Lee la exportación CSV desde un archivo local (--file) o desde la hoja
#   publicada (GUEST_SHEET_ID en .env).
# - Ejecuta la misma búsqueda + expansión familiar que usa el endpoint.
# - Muestra el resultado como tabla (pandas) y opcionalmente lo guarda a CSV.
# Uso:
#   python scripts/search_guests.py --file invitados.csv "Leo Hany"
#   python scripts/search_guests.py --matcher token --out resultado.csv adel
# =============================================================================

import argparse
import sys
from dataclasses import asdict
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv
from loguru import logger

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.config import Settings                                        # noqa: E402
from app.core.directory import GuestDirectory                         # noqa: E402
from app.core.matching import MATCHERS, get_matcher                   # noqa: E402
from app.main import build_fetcher                                    # noqa: E402
from app.services.guest_source import FileCsvFetcher, GuestSourceError  # noqa: E402

COLUMNS = ["row_index", "name", "family_group", "alternate_name", "table_number"]


def results_frame(directory: GuestDirectory, query: str) -> pd.DataFrame:
    """Resultado de la búsqueda como DataFrame (columnas fijas, orden del resultado)."""
    rows = [asdict(g) for g in directory.search(query)]
    return pd.DataFrame(rows, columns=COLUMNS)


def main(argv=None) -> int:
    load_dotenv()
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Busca invitados (y sus familias) en la exportación CSV.")
    parser.add_argument("query", nargs="?", default="", help="Texto a buscar (vacío = todos).")
    parser.add_argument("--file", help="Exportación CSV local (si no, se usa GUEST_SHEET_ID / GUEST_CSV_PATH).")
    parser.add_argument("--matcher", choices=sorted(MATCHERS), default=settings.matcher)
    parser.add_argument("--out", help="Guarda el resultado en este CSV.")
    args = parser.parse_args(argv)

    try:
        fetcher = FileCsvFetcher(args.file) if args.file else build_fetcher(settings)
        text = fetcher()
    except GuestSourceError as e:
        logger.error("No se pudo cargar la lista de invitados: {}", e)
        return 2

    directory = GuestDirectory.from_export(text, layout=settings.layout, matcher=get_matcher(args.matcher))
    df = results_frame(directory, args.query)

    if df.empty:
        print(f"Sin resultados para '{args.query}'.")
    else:
        print(df.fillna("").to_string(index=False))
    print(f"\nTotal: {len(df)} de {len(directory)} invitados")

    if args.out:
        df.to_csv(args.out, index=False)
        logger.info("Resultado guardado en {}", args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
