## snx — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def run_cli(*cli_args: str | Path, stdin: str | None = None, extra_args: list[str] | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "snx", "--plain"]
    if extra_args:
        args.extend(extra_args)
    args.extend(str(arg) for arg in cli_args)
    merged_env = os.environ.copy()
    merged_env['PYTHONPATH'] = os.pathsep.join(filter(None, [str(repo_root() / "src"), merged_env.get('PYTHONPATH')]))
    return subprocess.run(args, input=stdin or '', capture_output=True, text=True, env=merged_env)


def test_cli_runs_script_file():
    result = run_cli(repo_root() / "tests" / "hello.snx", stdin="Ada\n")
    assert result.returncode == 0, result.stdout
    assert result.stdout == "What is your name?\nHello, Ada!\n1\n2\n3\ndone\n"

def test_cli_runs_brackets_script():
    result = run_cli(repo_root() / "tests" / "functions-brackets.snx")
    assert result.returncode == 0, result.stdout
    assert result.stdout == "area=12\nbig\narea=2\nsmall\n"

def test_cli_style_option():
    result = run_cli("-", stdin='if true {\nprintln "braced"\n}\n', extra_args=["--style", "brackets"])
    assert result.returncode == 0
    assert result.stdout == "braced\n"

def test_cli_reads_script_from_stdin():
    result = run_cli(stdin='println 6 * 7\n')
    assert result.returncode == 0
    assert result.stdout == "42\n"


def test_cli_reported_errors_keep_going():
    result = run_cli("-", stdin='var x = 1\nvar x = 2\nprintln x\n')
    assert result.returncode == 0
    assert "COMPILATION ERROR." in result.stdout
    assert "File \"" in result.stdout
    assert result.stdout.endswith("1\n")

def test_cli_fatal_jump_error():
    result = run_cli(repo_root() / "tests" / "error-jump.snx")
    assert result.returncode == 1
    out = result.stdout
    assert out.startswith("before\n")
    assert "FATAL RUNTIME ERROR." in out
    assert "Jump to invalid line 99." in out
    assert "\nafter\n" not in out

def test_cli_fatal_return_error():
    result = run_cli("-", stdin='return\n')
    assert result.returncode == 1
    assert "outside of a function" in result.stdout


def test_cli_evaluates_expressions():
    result = run_cli("-c", "2 + 3 * 4", '"a" + "b"', "10 / 4")
    assert result.returncode == 0
    assert result.stdout == '14\n"ab"\n2.5\n'

def test_cli_evaluation_error_fails():
    result = run_cli("-c", "7 % 0")
    assert result.returncode == 1
    assert "EVALUATION ERROR." in result.stdout and "Modulo by zero" in result.stdout

def test_cli_negative_expression_is_not_an_option():
    result = run_cli("-c", "-3 * 2")
    assert result.returncode == 0
    assert result.stdout == "-6\n"


def test_cli_no_exec_refuses_shell():
    result = run_cli("-", stdin='exec "echo hi"\nprintln "next"\n', extra_args=["--no-exec"])
    assert result.returncode == 0
    assert "Shell execution is disabled" in result.stdout
    assert result.stdout.endswith("next\n")

def test_cli_verbose_traces_and_reports_end():
    result = run_cli("-v", "-", stdin='println 1\nEND\nprintln 2\n')
    assert result.returncode == 0
    assert "println 1" in result.stdout
    assert "Program execution terminated by END command." in result.stdout

def test_cli_stats():
    result = run_cli("--stats", "-", stdin='println 1\nprintln 2\n')
    assert result.returncode == 0
    assert "STATISTICS." in result.stdout
    assert "step\t2" in result.stdout

def test_cli_missing_file():
    result = run_cli(repo_root() / "tests" / "does-not-exist.snx")
    assert result.returncode != 0
