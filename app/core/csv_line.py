# app/core/csv_line.py  # Parser de una línea CSV exportada desde la hoja de invitados.

# =================================================================================
# 🧾 PARSER DE LÍNEAS CSV (estilo RFC4180, una sola línea)
# ---------------------------------------------------------------------------------
# - Convierte una línea de texto en la lista ordenada de campos crudos.
# - Respeta comillas: el delimitador dentro de "..." no separa campos.
# - "" dentro de un campo entrecomillado es una comilla literal.
# - Nunca falla: comillas desbalanceadas se aceptan tal cual (mejor esfuerzo).
# - No soporta campos multilínea (la exportación de Google Sheets no los usa aquí).
# =================================================================================

from typing import List

QUOTE = '"'                                                            # Carácter de comillas del formato CSV.


def parse_csv_line(line: str, delimiter: str = ",", min_fields: int = 2) -> List[str]:
    """
    Divide `line` en campos respetando comillas.

    Garantiza al menos `min_fields` campos (rellena con "") para que quien llama
    pueda leer siempre el campo 0 (nombre) y el 1 (grupo familiar) sin IndexError.
    """
    result: List[str] = []                                             # Campos ya cerrados.
    current: List[str] = []                                            # Acumulador del campo en curso.
    in_quotes = False                                                  # True mientras estamos dentro de "...".

    i = 0
    length = len(line)
    while i < length:                                                  # Recorre la línea de izquierda a derecha.
        char = line[i]

        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:  # "" dentro de comillas → comilla literal.
                current.append(QUOTE)
                i += 2                                                 # Consume las dos comillas.
                continue
            in_quotes = not in_quotes                                  # Abre o cierra el tramo entrecomillado.
        elif char == delimiter and not in_quotes:                      # Delimitador fuera de comillas: cierra el campo.
            result.append("".join(current))
            current = []
        else:
            current.append(char)                                       # Cualquier otro carácter se acumula.
        i += 1

    result.append("".join(current))                                   # El último campo siempre se empuja.

    while len(result) < min_fields:                                    # Fila corta: se rellena con vacíos.
        result.append("")

    return result


def clean_field(raw: str | None) -> str:
    """Quita comillas sobrantes en ambos extremos y espacios alrededor."""
    return (raw or "").strip(QUOTE).strip()
