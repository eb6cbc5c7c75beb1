# tests/test_directory.py  # Pruebas del directorio de invitados y la expansión familiar.

import pytest

from app.core.directory import (
    ColumnLayout,
    GuestDirectory,
    GuestRecord,
    detect_search_language,
    split_export_lines,
)
from app.core.matching import token_match


def _names(guests):
    return [g.name for g in guests]


def _export(rows, header="Name,Family Group"):
    """Arma una exportación CSV con filas (nombre, familia) entrecomilladas."""
    lines = [header] + [f'"{name}","{family}",,,' for name, family in rows]
    return "\n".join(lines) + "\n"

# =======================
# Construcción
# =======================
def test_01_builds_records_with_row_index_and_family(directory):
    assert len(directory) == 5
    assert directory.guests[0] == GuestRecord(name="Leo Hany", row_index=0, family_group="Leo Hany Family")
    assert directory.guests[4] == GuestRecord(name="John Doe", row_index=4, family_group=None)
    assert [g.row_index for g in directory] == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
def test_02_all_line_endings_are_accepted(newline):
    text = newline.join(["Name,Family", "Ana,F1", "Luis,F1"])
    directory = GuestDirectory.from_export(text)
    assert _names(directory) == ["Ana", "Luis"]
    assert [g.row_index for g in directory] == [0, 1]


def test_03_blank_lines_are_dropped_before_indexing():
    text = "Name,Family\n\nAna,\n   \nLuis,\n\n"
    directory = GuestDirectory.from_export(text)
    assert [(g.name, g.row_index) for g in directory] == [("Ana", 0), ("Luis", 1)]


def test_04_rows_without_name_are_skipped_but_keep_numbering():
    text = 'Name,Family\nAna,\n"",Familia X\n  ,Y\nLuis,\n'
    directory = GuestDirectory.from_export(text)
    assert [(g.name, g.row_index) for g in directory] == [("Ana", 0), ("Luis", 3)]


def test_05_fields_are_unquoted_and_trimmed():
    text = 'Name,Family\n"  Ana Pérez ", " Familia Pérez   "\n'
    guest = GuestDirectory.from_export(text).guests[0]
    assert guest.name == "Ana Pérez"
    assert guest.family_group == "Familia Pérez"


def test_06_scenario_5_comma_inside_quoted_name():
    directory = GuestDirectory.from_export('Name,Family Group\n"Doe, John","",,,\n')
    assert len(directory) == 1
    assert directory.guests[0].name == "Doe, John"
    assert directory.guests[0].family_group is None


def test_07_header_only_export_is_empty():
    directory = GuestDirectory.from_export("Name,Family Group\n")
    assert len(directory) == 0
    assert directory.search("ana") == []
    assert directory.search("") == []


def test_08_empty_text_is_empty_directory():
    assert len(GuestDirectory.from_export("")) == 0


def test_09_split_export_lines_normalizes_and_filters():
    assert split_export_lines("a\r\nb\rc\n\n  \nd") == ["a", "b", "c", "d"]


def test_10_single_column_rows_are_padded():
    directory = GuestDirectory.from_export("Name\nAna\nLuis\n")
    assert [(g.name, g.family_group) for g in directory] == [("Ana", None), ("Luis", None)]

# =======================
# Escenarios de búsqueda
# =======================
def test_11_scenario_1_family_of_leo(directory):
    assert _names(directory.search("Leo Hany")) == ["Leo Hany", "Monica Atef"]


def test_12_scenario_2_adel_family(directory):
    assert _names(directory.search("adel")) == ["Fady Adel", "Sarah Adel"]


def test_13_scenario_3_no_family_no_expansion(directory):
    assert _names(directory.search("doe")) == ["John Doe"]


@pytest.mark.parametrize("query", ["", "   ", "\t", None])
def test_14_scenario_4_empty_query_returns_everyone(directory, query):
    assert _names(directory.search(query)) == [
        "Leo Hany", "Monica Atef", "Fady Adel", "Sarah Adel", "John Doe",
    ]


def test_15_search_by_relative_pulls_in_the_matched_family(directory):
    # Monica no se llama "Leo", pero buscarla trae a Leo por la familia.
    assert _names(directory.search("monica")) == ["Monica Atef", "Leo Hany"]


def test_16_case_insensitive_and_trimmed(directory):
    assert _names(directory.search("  LEO hANY ")) == ["Leo Hany", "Monica Atef"]


def test_17_substring_not_word_match():
    directory = GuestDirectory.from_export(_export([("Cleopatra", ""), ("Leo", "")]))
    assert _names(directory.search("leo")) == ["Cleopatra", "Leo"]


def test_18_no_match_returns_empty(directory):
    assert directory.search("zzz") == []

# =======================
# Propiedades
# =======================
def test_19_direct_matches_first_then_relatives_in_directory_order():
    directory = GuestDirectory.from_export(_export([
        ("Ann Z", "G"),
        ("Bob", "G"),
        ("Zed Ann", ""),
        ("Carl", "G"),
    ]))
    result = directory.search("ann")
    assert [g.row_index for g in result] == [0, 2, 1, 3]


def test_20_no_duplicate_row_index_when_several_members_match():
    directory = GuestDirectory.from_export(_export([
        ("Ana Ruiz", "Ruiz"),
        ("Pedro Ruiz", "Ruiz"),
        ("Lucia Ruiz", "Ruiz"),
    ]))
    result = directory.search("ruiz")
    ids = [g.row_index for g in result]
    assert ids == [0, 1, 2]
    assert len(ids) == len(set(ids))


def test_21_same_name_twice_keeps_both_rows():
    directory = GuestDirectory.from_export(_export([("Ana", ""), ("Ana", "")]))
    assert [g.row_index for g in directory.search("ana")] == [0, 1]


def test_22_idempotent(directory):
    assert directory.search("adel") == directory.search("adel")


def test_23_search_does_not_mutate_directory(directory):
    before = directory.guests
    directory.search("leo")
    directory.search("")
    assert directory.guests == before


def test_24_isolation_of_other_families_and_ungrouped(directory):
    names = set(_names(directory.search("leo")))
    assert "John Doe" not in names
    assert "Fady Adel" not in names
    assert "Sarah Adel" not in names


def test_25_family_match_is_exact_and_case_sensitive():
    directory = GuestDirectory.from_export(_export([
        ("Ana", "Familia Ruiz"),
        ("Pedro", "familia ruiz"),
        ("Luis", "Familia Ruiz "),
    ]))
    # "Familia Ruiz " se recorta al construir; "familia ruiz" es otro grupo.
    assert _names(directory.search("ana")) == ["Ana", "Luis"]


def test_26_every_result_matches_or_shares_a_matched_family(directory):
    for query in ["leo", "a", "adel", "o", "doe"]:
        result = directory.search(query)
        direct = [g for g in result if query in g.name.lower()]
        families = {g.family_group for g in direct if g.family_group}
        for g in result:
            assert query in g.name.lower() or g.family_group in families

# =======================
# Extras: columnas opcionales, matcher, idioma
# =======================
def test_27_layout_reads_alternate_name_and_table():
    text = (
        "English Name,Arabic Name,Family Group,Confirmation,Table\n"
        '"Sarah abdelrahman","سارة عبد الرحمان","Sarah And Hossni\'s Family",,1\n'
        '"Hossni","حسني","Sarah And Hossni\'s Family",,2\n'
        '"Omar","","",,\n'
    )
    layout = ColumnLayout(name=0, alternate_name=1, family_group=2, table_number=4)
    directory = GuestDirectory.from_export(text, layout=layout)

    sarah = directory.guests[0]
    assert sarah.alternate_name == "سارة عبد الرحمان"
    assert sarah.table_number == "1"
    assert directory.guests[2].alternate_name is None

    # Buscar por el nombre en árabe también expande la familia.
    assert _names(directory.search("حسني")) == ["Hossni", "Sarah abdelrahman"]


def test_28_layout_min_fields_covers_highest_column():
    assert ColumnLayout().min_fields == 2
    assert ColumnLayout(table_number=6).min_fields == 7


def test_29_token_matcher_is_pluggable():
    directory = GuestDirectory.from_export(
        _export([("Cleopatra", ""), ("Leo Hany", "LH"), ("Monica", "LH")]),
        matcher=token_match,
    )
    assert _names(directory.search("leo")) == ["Leo Hany", "Monica"]


@pytest.mark.parametrize("query,expected", [
    ("Leo", "en"),
    ("", "en"),
    (None, "en"),
    ("سارة", "ar"),
    ("Sarah سارة", "ar"),
])
def test_30_detect_search_language(query, expected):
    assert detect_search_language(query) == expected
