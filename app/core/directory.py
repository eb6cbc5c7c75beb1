# app/core/directory.py  # Directorio inmutable de invitados + búsqueda con expansión familiar.

# =================================================================================
# 👪 DIRECTORIO DE INVITADOS
# ---------------------------------------------------------------------------------
# - Se construye una vez por cada descarga de la hoja (from_export).
# - Nunca se modifica después: cada nueva descarga crea un directorio nuevo.
# - search(query) devuelve coincidencias directas + todos los miembros de sus
#   grupos familiares, sin duplicados (clave: row_index).
# - Es una función pura: sin I/O y sin estado compartido mutable, así que
#   muchas peticiones pueden buscar en paralelo sobre el mismo directorio.
# =================================================================================

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from app.core.csv_line import clean_field, parse_csv_line
from app.core.matching import Matcher, substring_match

ARABIC_RE = re.compile(r"[\u0600-\u06FF]")                                 # Bloque Unicode árabe (nombres alternativos).


@dataclass(frozen=True)
class GuestRecord:
    """Un invitado tal como aparece en la exportación."""
    name: str
    row_index: int
    family_group: Optional[str] = None
    alternate_name: Optional[str] = None
    table_number: Optional[str] = None


@dataclass(frozen=True)
class ColumnLayout:
    """Posición (0-based) de cada columna en la exportación; None = no se lee."""
    name: int = 0
    family_group: int = 1
    alternate_name: Optional[int] = None
    table_number: Optional[int] = None

    @property
    def min_fields(self) -> int:
        used = [c for c in (self.name, self.family_group, self.alternate_name, self.table_number) if c is not None]
        return max(2, max(used) + 1)


def _optional(value: str) -> Optional[str]:
    return value if len(value) > 0 else None


def _field(columns: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(columns):
        return ""
    return clean_field(columns[index])


def split_export_lines(text: str) -> List[str]:
    """Normaliza finales de línea (\\r\\n, \\r → \\n) y descarta líneas en blanco."""
    normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in normalized.split("\n") if line.strip()]


def detect_search_language(query: str | None) -> str:
    """'ar' si la búsqueda contiene caracteres árabes, si no 'en'."""
    return "ar" if ARABIC_RE.search(query or "") else "en"


class GuestDirectory:
    """Instantánea inmutable de invitados con búsqueda + expansión por familia."""

    def __init__(self, guests: Iterable[GuestRecord], matcher: Matcher = substring_match) -> None:
        self._guests: Tuple[GuestRecord, ...] = tuple(guests)
        self._matcher = matcher

    # ---------------------- Construcción ----------------------
    @classmethod
    def from_export(
        cls,
        text: str,
        layout: ColumnLayout | None = None,
        matcher: Matcher = substring_match,
        delimiter: str = ",",
    ) -> "GuestDirectory":
        """
        Construye el directorio desde el texto CSV completo.

        La línea 0 es la cabecera. row_index = posición de la línea (ya sin
        líneas en blanco) menos 1. Filas sin nombre se saltan en silencio.
        """
        layout = layout or ColumnLayout()
        lines = split_export_lines(text)
        guests: List[GuestRecord] = []
        skipped = 0

        for i in range(1, len(lines)):                                  # Salta la cabecera (i = 0).
            columns = parse_csv_line(lines[i], delimiter=delimiter, min_fields=layout.min_fields)
            name = _field(columns, layout.name)
            if not name:
                skipped += 1
                continue
            family_group = _field(columns, layout.family_group).rstrip()
            guests.append(GuestRecord(
                name=name,
                row_index=i - 1,
                family_group=_optional(family_group),
                alternate_name=_optional(_field(columns, layout.alternate_name)),
                table_number=_optional(_field(columns, layout.table_number)),
            ))

        logger.debug(
            "Directorio construido: lineas={} invitados={} sin_nombre={}",
            len(lines), len(guests), skipped,
        )
        return cls(guests, matcher=matcher)

    # ---------------------- Acceso ----------------------
    @property
    def guests(self) -> Tuple[GuestRecord, ...]:
        return self._guests

    def __len__(self) -> int:
        return len(self._guests)

    def __iter__(self):
        return iter(self._guests)

    # ---------------------- Búsqueda ----------------------
    def _matches(self, guest: GuestRecord, query: str) -> bool:
        if self._matcher(guest.name.lower(), query):
            return True
        return bool(guest.alternate_name) and self._matcher(guest.alternate_name.lower(), query)

    def search(self, query: str | None) -> List[GuestRecord]:
        """
        Invitados que coinciden con `query` más sus familiares.

        - Búsqueda vacía o solo espacios → todos los invitados (modo "ver todos").
        - Orden: coincidencias directas (orden del directorio) y luego familiares
          que no coincidían, también en orden del directorio.
        """
        if not query or not query.strip():
            return list(self._guests)

        needle = query.lower().strip()

        # 1) Coincidencias directas por texto.
        direct = [g for g in self._guests if self._matches(g, needle)]

        # 2) Grupos familiares presentes entre las coincidencias (igualdad exacta).
        families = {
            g.family_group.strip()
            for g in direct
            if g.family_group and g.family_group.strip()
        }

        # 3) Todos los miembros de esos grupos.
        related = [
            g for g in self._guests
            if g.family_group and g.family_group.strip() in families
        ]

        # 4) Unión sin duplicados por row_index (dict conserva orden de inserción).
        merged: Dict[int, GuestRecord] = {}
        for guest in direct:
            merged[guest.row_index] = guest
        for guest in related:
            merged[guest.row_index] = guest

        logger.debug(
            "Busqueda '{}': directos={} familias={} familiares={} total={}",
            needle, len(direct), len(families), len(related), len(merged),
        )
        return list(merged.values())
