import pytest

from snlc.intermediate import Quadruple, QuadrupleGenerator, format_quadruple


def test_temps_and_labels_are_sequential():
    gen = QuadrupleGenerator()
    assert [gen.new_temp(), gen.new_temp()] == ["t0", "t1"]
    assert [gen.new_label(), gen.new_label()] == ["L0", "L1"]


def test_format_quadruple_pads_fields():
    assert format_quadruple(Quadruple("read", "-", "-", "x")) == "(read,    -,    -,    x)"


def test_emit_records_quadruple():
    gen = QuadrupleGenerator()
    quad = gen.emit("+", "a", "b", "t0")
    assert gen.quads == [quad]
    assert quad == Quadruple("+", "a", "b", "t0")


def test_read_write_and_assign():
    gen = QuadrupleGenerator()
    gen.process_syntax_tree([
        "    StmtK READ\n",
        "        ExpK IdK x\n",
        "    StmtK WRITE\n",
        "        ExpK IdK y\n",
        "    StmtK AssignK\n",
        "        ExpK IdK a\n",
        "        ExpK IdK b\n",
    ])
    assert gen.quads == [
        Quadruple("read", "-", "-", "x"),
        Quadruple("write", "-", "-", "y"),
        Quadruple("=", "b", "-", "a"),
    ]


def test_call():
    gen = QuadrupleGenerator()
    gen.process_syntax_tree(["StmtK CALL", "  ExpK IdK q", "  ExpK IdK v1"])
    assert gen.quads == [Quadruple("call", "q", "v1", "-")]


def test_if_then_else():
    lines = [
        "StmtK IF",
        "  ExpK v1", "  ExpK <", "  ExpK 10",
        "  StmtK THEN",
        "  ExpK a", "  ExpK b", "  ExpK +", "  ExpK c",
        "  StmtK ELSE",
        "  ExpK d", "  ExpK e", "  ExpK -", "  ExpK f",
    ]
    gen = QuadrupleGenerator()
    gen.process_syntax_tree(lines)
    assert gen.quads == [
        Quadruple("<", "v1", "10", "L0"),
        Quadruple("goto", "-", "-", "L1"),
        Quadruple("+", "b", "c", "t0"),
        Quadruple("=", "t0", "-", "a"),
        Quadruple("goto", "-", "-", "L2"),
        Quadruple("label", "-", "-", "L1"),
        Quadruple("-", "e", "f", "t1"),
        Quadruple("=", "t1", "-", "d"),
        Quadruple("label", "-", "-", "L2"),
    ]


def test_unrelated_lines_produce_nothing():
    gen = QuadrupleGenerator()
    gen.process_syntax_tree(["Prok", "  PheadK p", "", "  VAR"])
    assert gen.quads == []


def test_truncated_statement_raises():
    gen = QuadrupleGenerator()
    with pytest.raises(ValueError):
        gen.process_syntax_tree(["StmtK AssignK", "  ExpK IdK a"])


def test_format_and_write(tmp_path):
    gen = QuadrupleGenerator()
    gen.emit("read", "-", "-", "x")
    gen.emit("call", "q", "x", "-")
    text = gen.format()
    assert text.splitlines() == [format_quadruple(q) for q in gen.quads]
    path = tmp_path / "quads.txt"
    gen.write(path)
    assert path.read_text(encoding="utf-8") == text