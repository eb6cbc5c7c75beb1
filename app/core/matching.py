# app/core/matching.py  # Estrategias para decidir si un nombre coincide con la búsqueda.

# =================================================================================
# 🔍 ESTRATEGIAS DE COINCIDENCIA
# ---------------------------------------------------------------------------------
# Un "matcher" es cualquier callable (name, query) -> bool.
# Ambos argumentos llegan ya en minúsculas y sin espacios alrededor.
# - substring: contención simple ("leo" coincide con "cleopatra").
# - token: cada palabra de la búsqueda debe ser prefijo de alguna palabra del nombre.
# =================================================================================

from typing import Callable, Dict

Matcher = Callable[[str, str], bool]


def substring_match(name: str, query: str) -> bool:
    """Coincidencia por subcadena (comportamiento por defecto del buscador)."""
    return query in name


def token_match(name: str, query: str) -> bool:
    """Cada token de `query` debe ser prefijo de algún token de `name`."""
    name_tokens = name.split()
    query_tokens = query.split()
    if not query_tokens:
        return False
    return all(
        any(token.startswith(q) for token in name_tokens)
        for q in query_tokens
    )


MATCHERS: Dict[str, Matcher] = {
    "substring": substring_match,
    "token": token_match,
}


def get_matcher(name: str | None) -> Matcher:
    """Devuelve el matcher registrado con ese nombre; ValueError si no existe."""
    key = (name or "substring").strip().lower()
    try:
        return MATCHERS[key]
    except KeyError:
        raise ValueError(
            f"Matcher desconocido: {name!r}. Opciones: {', '.join(sorted(MATCHERS))}"
        ) from None
