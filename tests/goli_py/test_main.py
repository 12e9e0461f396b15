# tests/goli_py/test_main.py

import io
import json

from goli_py.main import DEFAULT_INPUT, compile_goli, compile_program, main

PROGRAM = "(package main)\n; entry\n(defn main () (fmt/Println \"hi; there\"))\n"
EXPECTED = 'package main\n\nfunc main() {\n\tfmt.Println("hi; there")\n}\n'


def write_program(tmp_path, code=PROGRAM, name="prog.goli"):
    path = tmp_path / name
    path.write_text(code, encoding="utf-8")
    return path


def test_compiles_file_to_stdout(tmp_path, capsys):
    path = write_program(tmp_path)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == EXPECTED


def test_default_input_file(tmp_path, capsys, monkeypatch):
    write_program(tmp_path, name=DEFAULT_INPUT)
    monkeypatch.chdir(tmp_path)
    assert main([]) == 0
    assert capsys.readouterr().out == EXPECTED


def test_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("(package main)"))
    assert main(["-"]) == 0
    assert capsys.readouterr().out == "package main\n"


def test_writes_output_file(tmp_path, capsys):
    path = write_program(tmp_path)
    out = tmp_path / "main.go"
    assert main([str(path), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == EXPECTED
    assert capsys.readouterr().out == ""


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.goli")]) == 1
    assert "Input file not found" in capsys.readouterr().err


def test_parse_error_exit_status(tmp_path, capsys):
    path = write_program(tmp_path, code="(foo))")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Parse Error:")


def test_generation_error_exit_status(tmp_path, capsys):
    path = write_program(tmp_path, code="(package a b)")
    assert main([str(path)]) == 1
    assert "Code Generation Error: package:" in capsys.readouterr().err


def test_ast_dump(tmp_path, capsys):
    path = write_program(tmp_path, code="(package main)")
    assert main([str(path), "--ast"]) == 0
    out = capsys.readouterr().out
    dumped, generated = out.rsplit("}\n", 1)
    assert json.loads(dumped + "}") == {"children": [{"children": ["package", "main"]}]}
    assert generated == "package main\n"


def test_preprocess_only(tmp_path, capsys):
    path = write_program(tmp_path, code='(package "a;b") ; gone\n')
    assert main([str(path), "-E"]) == 0
    assert capsys.readouterr().out == '(package "a;b") \n\n'


def test_verbose_prints_stages(capsys):
    assert compile_goli("(package main)", print_stages=True) == "package main\n"
    out = capsys.readouterr().out
    assert "--- Tokens ---" in out
    assert "--- AST ---" in out


def test_ast_dump_withheld_on_generation_error(tmp_path, capsys):
    path = write_program(tmp_path, code="(package main) (defn f (x))")
    assert main([str(path), "--ast"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Code Generation Error: defn:" in captured.err


def test_ast_dump_with_output_file(tmp_path, capsys):
    path = write_program(tmp_path, code="(package main)")
    out = tmp_path / "main.go"
    assert main([str(path), "--ast", "-o", str(out)]) == 0
    assert json.loads(capsys.readouterr().out) == {"children": [{"children": ["package", "main"]}]}
    assert out.read_text(encoding="utf-8") == "package main\n"


def test_compile_program_returns_tree_and_code():
    tree, code = compile_program("(package main)")
    assert tree.root.children[0].children == ["package", "main"]
    assert code == "package main\n"
