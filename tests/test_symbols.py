import pytest

from snlc.symbols import FieldEntry, SymbolTable, SymKind


def build_sample() -> SymbolTable:
    table = SymbolTable()
    table.add_symbol_head("p", SymKind.PROC, "PROGRAM")
    table.add_symbol_type("INTEGER", SymKind.TYPE, "t1")
    table.add_symbol("INTEGER", SymKind.VAR, "v1")
    table.add_symbol_array("INTEGER", SymKind.VAR, "b", 1, 10)
    table.add_symbol_proc("q", SymKind.PROC, "PROCEDURE")
    table.enter_scope()
    table.add_symbol_param("q", "INTEGER", SymKind.PARAM, "i")
    table.exit_scope()
    return table


def test_variable_offsets_increase():
    table = SymbolTable()
    first = table.add_symbol("INTEGER", SymKind.VAR, "a")
    second = table.add_symbol("CHAR", SymKind.VAR, "b")
    assert first.offset == 0
    assert second.offset == first.offset + 1
    assert (second.name, second.type_name) == ("b", "CHAR")


def test_special_offsets():
    table = build_sample()
    assert table.lookup_entry("PROGRAM").offset == -1
    assert table.lookup_entry("t1").offset == -2
    assert table.lookup_entry("q").offset == -4


def test_enter_scope_resets_offset_and_tracks_max():
    table = SymbolTable()
    table.add_symbol("INTEGER", SymKind.VAR, "a")
    table.enter_scope()
    inner = table.add_symbol("INTEGER", SymKind.VAR, "x")
    assert inner.offset == 0
    assert inner.level == 1
    assert table.max_level == 1
    table.exit_scope()
    assert table.current_level == 0
    assert table.max_level == 1


def test_lookup_current_scope_and_outer():
    table = SymbolTable()
    outer = table.add_symbol("INTEGER", SymKind.VAR, "a")
    table.enter_scope()
    assert table.lookup_current_scope("a") is None
    assert table.lookup_entry("a") is outer
    assert table.lookup_entry("missing") is None


def test_find_entry_matches_type_and_procedure_name():
    table = build_sample()
    table.enter_scope()
    param = table.add_symbol_param("q", "INTEGER", SymKind.PARAM, "i")
    assert table.find_entry("q", "one") is param
    assert table.find_entry("i", "one") is param
    assert table.find_entry("v1", "one") is None
    assert table.find_entry("v1", "up").name == "v1"


def test_find_entry_down_sees_closed_scope():
    table = build_sample()
    found = table.find_entry("i", "down")
    assert found is not None
    assert found.level == 1
    assert table.find_entry("i", "up") is None


def test_find_entry_unknown_flag():
    with pytest.raises(ValueError):
        SymbolTable().find_entry("a", "sideways")


def test_enter_rejects_duplicate_in_same_scope():
    table = SymbolTable()
    entry = table.enter("a", "INTEGER")
    assert table.lookup_current_scope("a") is entry
    with pytest.raises(ValueError, match="Duplicate declaration of 'a'"):
        table.enter("a", "CHAR")
    table.enter_scope()
    assert table.enter("a", "CHAR").level == 1


def test_destroy_table_discards_entries():
    table = SymbolTable()
    table.create_table()
    table.add_symbol("INTEGER", SymKind.VAR, "x")
    table.destroy_table()
    assert table.current_level == 0
    assert table.find_entry("x", "down") is None


def test_enter_scope_clears_previous_entries_at_level():
    table = SymbolTable()
    table.enter_scope()
    table.add_symbol("INTEGER", SymKind.VAR, "x")
    table.exit_scope()
    table.enter_scope()
    assert table.lookup_current_scope("x") is None


def test_adding_out_of_range_level_raises():
    table = SymbolTable()
    table.set_level(-1)
    with pytest.raises(IndexError):
        table.add_symbol("INTEGER", SymKind.VAR, "a")


def test_insert_and_lookup_through_parents():
    outer = SymbolTable()
    outer.insert("a", "INTEGER")
    inner = SymbolTable(outer)
    inner.insert("b", "CHAR")
    assert inner.lookup("a") == "INTEGER"
    assert inner.lookup("b") == "CHAR"
    with pytest.raises(ValueError, match="redeclared in the same scope"):
        outer.insert("a", "CHAR")
    with pytest.raises(KeyError):
        inner.lookup("c")


def test_type_of_searches_all_directions():
    table = build_sample()
    assert table.type_of("v1") == "INTEGER"
    assert table.type_of("i") == "INTEGER"
    with pytest.raises(KeyError):
        table.type_of("nothing")


def test_field_tables():
    table = SymbolTable()
    fields = [FieldEntry("x", "INTEGER"), FieldEntry("y", "CHAR")]
    table.add_field_table("rec", fields)
    assert table.get_field_table("rec") == fields
    assert table.find_field_in_table("rec", "y") == fields[1]
    assert table.find_field_in_table("rec", "z") is None
    assert table.find_field_in_table("other", "x") is None
    assert table.find_field("x", None) is None


def test_format_listing():
    lines = build_sample().format().split("\n")
    assert lines[0] == "===== Symbol Table (Max Level: 1) ====="
    assert lines[1] == "--- Level 1 ---"
    assert lines[2] == "Parameter\tType: INTEGER | varKind | dir | Name: i | Offset: 0"
    assert lines[3] == "--- Level 0 ---"
    assert lines[4] == "NULL | procKind | Type: PROCEDURE | Name: q"
    assert lines[5].startswith("Array\tType: INTEGER | varKind | dir | Name: b | Offset: ")
    assert lines[6] == "Type: INTEGER | varKind | dir | Name: v1 | Offset: 0"
    assert lines[7] == "DEFINE     Name: t1 | Type: INTEGER"
    assert lines[8] == "Type: PROGRAM | Name: p"
    assert lines[9] == "=" * 51


def test_format_marks_indirect_types():
    table = SymbolTable()
    table.add_symbol("INTEGER^", SymKind.VAR, "r")
    assert "Type: INTEGER^ | varKind | indir | Name: r" in table.format()


def test_procedure_params():
    assert build_sample().procedure_params() == [["INTEGER", "q"], []]


def test_every_kind_is_accepted_by_add_symbol():
    table = SymbolTable()
    entries = [
        table.add_symbol("INTEGER", kind, f"v{number}")
        for number, kind in enumerate(SymKind)
    ]
    assert [entry.offset for entry in entries] == [0, 1, 2, 3]
    assert table.lookup_entry("v3") is entries[3]