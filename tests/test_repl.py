"""Tests for RillRepl and the REPL line helpers."""

import io
import sys

import pytest

from rill_core import Empty, RillRepl, UndefinedNameError, VFunction, VMap, VNumber, VText
from rill_core.repl import (
    _fmt_inline,
    _fmt_inspect,
    _process_line,
    _show_state,
    _show_vars,
)


# ---------------------------------------------------------------------------
# RillRepl.eval()
# ---------------------------------------------------------------------------

def test_eval_returns_last_value():
    repl = RillRepl(out=io.StringIO())
    assert repl.eval("(const x 2) (mul x 21)") == VNumber(42)


def test_eval_blank_returns_none():
    repl = RillRepl(out=io.StringIO())
    assert repl.eval("") is None
    assert repl.eval("   ; only a comment") is None


def test_definitions_persist_across_evals():
    repl = RillRepl(out=io.StringIO())
    repl.eval("(defn sq [v] (mul v v))")
    assert repl.eval("(sq 4)") == VNumber(16)


def test_reactive_update_across_evals():
    repl = RillRepl(out=io.StringIO())
    repl.eval("($ a 1)")
    repl.eval("($ b [a] (add a 1))")
    repl.eval("($ a 5)")
    assert repl.eval("b") == VNumber(6)


def test_errors_propagate_from_eval():
    repl = RillRepl(out=io.StringIO())
    with pytest.raises(UndefinedNameError):
        repl.eval("ghost")


def test_reset_clears_everything():
    repl = RillRepl(out=io.StringIO())
    repl.eval("(const x 1) ($ s 2)")
    repl.reset()
    assert "x" not in repl.sketch.constants
    assert repl.sketch.state == {}
    assert repl.eval("(const x 3)") == VNumber(3)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def test_fmt_inline_text_is_quoted():
    assert _fmt_inline(VText("hi")) == '"hi"'


def test_fmt_inline_number():
    assert _fmt_inline(VNumber(3.0)) == "3"
    assert _fmt_inline(VNumber(2.5)) == "2.5"


def test_fmt_inline_map():
    assert _fmt_inline(VMap({VText("k"): VNumber(1)})) == '{"k" 1}'


def test_fmt_inspect_empty():
    assert _fmt_inspect(Empty) == "Empty"


def test_fmt_inspect_map():
    out = _fmt_inspect(VMap({VText("shape"): VText("circle"), VText("r"): VNumber(3)}))
    assert out.startswith("VMap {")
    assert '"circle"' in out
    assert out.endswith("}")


def test_fmt_inspect_empty_map():
    assert _fmt_inspect(VMap({})) == "VMap {}"


def test_fmt_inspect_function():
    repl = RillRepl(out=io.StringIO())
    fn = repl.eval("(defn f [a b] a)")
    assert isinstance(fn, VFunction)
    assert _fmt_inspect(fn) == "VFunction f [a b]"


# ---------------------------------------------------------------------------
# :vars / :state
# ---------------------------------------------------------------------------

def test_show_vars_empty_hides_builtins():
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    _show_vars(repl, buf)
    assert "no constants" in buf.getvalue()
    assert "add" not in buf.getvalue()


def test_show_vars_with_entries():
    repl = RillRepl(out=io.StringIO())
    repl.eval("(const size 40)")
    buf = io.StringIO()
    _show_vars(repl, buf)
    assert "size" in buf.getvalue()
    assert "40" in buf.getvalue()


def test_show_state_empty():
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    _show_state(repl, buf)
    assert "no state" in buf.getvalue()


def test_show_state_lists_watched_names():
    repl = RillRepl(out=io.StringIO())
    repl.eval("($ a 1) ($ b [a] (add a 1))")
    buf = io.StringIO()
    _show_state(repl, buf)
    out = buf.getvalue()
    assert "$a" in out
    assert "<- [a]" in out


# ---------------------------------------------------------------------------
# _process_line
# ---------------------------------------------------------------------------

def test_process_line_quit():
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    assert _process_line(repl, ":q", buf) is False
    assert _process_line(repl, ":quit", buf) is False


def test_process_line_empty():
    repl = RillRepl(out=io.StringIO())
    assert _process_line(repl, "   ", io.StringIO()) is True


def test_process_line_question_mark():
    repl = RillRepl(out=io.StringIO())
    repl.eval("(const x 42)")
    buf = io.StringIO()
    _process_line(repl, "? x", buf)
    assert buf.getvalue() == "42\n"


def test_process_line_inspect():
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    _process_line(repl, "inspect([1 2])", buf)
    assert "VList [" in buf.getvalue()
    buf = io.StringIO()
    _process_line(repl, "i({:a 1})", buf)
    assert "VMap {" in buf.getvalue()


def test_process_line_reset():
    repl = RillRepl(out=io.StringIO())
    repl.eval("(const x 1)")
    _process_line(repl, ":reset", io.StringIO())
    assert "x" not in repl.sketch.constants


def test_process_line_plain_input_prints_nothing():
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    _process_line(repl, "(const y 9)", buf)
    assert repl.sketch.constants["y"] == VNumber(9)
    assert buf.getvalue() == ""


def test_batch_file(tmp_path):
    src = tmp_path / "live.rill"
    src.write_text(
        "($ a 1)\n"
        "($ b [a] (mul a 10))\n"
        "($ a 3)\n"
        "? b\n",
        encoding="utf-8",
    )
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    _process_line(repl, f"?<< {src}", buf)
    assert buf.getvalue() == "30\n"


def test_batch_file_missing(tmp_path, capsys):
    repl = RillRepl(out=io.StringIO())
    _process_line(repl, f"?<< {tmp_path / 'nope.rill'}", io.StringIO())
    assert "Error reading" in capsys.readouterr().err


def test_batch_file_continues_after_error(tmp_path, capsys):
    src = tmp_path / "broken.rill"
    src.write_text("(const a 1)\nghost\n(const b 2)\n? (add a b)\n", encoding="utf-8")
    repl = RillRepl(out=io.StringIO())
    buf = io.StringIO()
    _process_line(repl, f"?<< {src}", buf)
    assert buf.getvalue() == "3\n"
    err = capsys.readouterr().err
    assert f"{src}:2: UndefinedNameError" in err


# ---------------------------------------------------------------------------
# Output destination
# ---------------------------------------------------------------------------

def test_println_follows_line_destination(capsys):
    repl = RillRepl()
    buf = io.StringIO()
    _process_line(repl, "(println 42)", buf)
    assert buf.getvalue() == "42\n"
    assert capsys.readouterr().out == ""


def test_redirect_captures_println_and_results(tmp_path):
    console = io.StringIO()
    repl = RillRepl(out=console)
    target = tmp_path / "session.txt"

    _process_line(repl, f"?>> {target}")
    _process_line(repl, "(println :hello)")
    _process_line(repl, "? (add 1 2)")
    _process_line(repl, "?>>")
    _process_line(repl, "(println :back)")

    assert target.read_text(encoding="utf-8") == "hello\n3\n"
    assert console.getvalue() == "back\n"


def test_redirect_survives_reset(tmp_path):
    repl = RillRepl(out=io.StringIO())
    target = tmp_path / "after_reset.txt"
    _process_line(repl, f"?>> {target}")
    _process_line(repl, ":reset")
    _process_line(repl, "(println 7)")
    repl.redirect(None)
    assert target.read_text(encoding="utf-8") == "7\n"


def test_redirect_bad_path_keeps_console(tmp_path, capsys):
    console = io.StringIO()
    repl = RillRepl(out=console)
    _process_line(repl, f"?>> {tmp_path / 'missing' / 'out.txt'}")
    _process_line(repl, "(println 1)")
    assert "Error opening" in capsys.readouterr().err
    assert console.getvalue() == "1\n"


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def test_main_exits_on_eof(monkeypatch):
    from rill_core.repl import main
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    main()


def test_main_reports_errors_and_continues(monkeypatch, capsys):
    from rill_core.repl import main
    monkeypatch.setattr(sys, "stdin", io.StringIO("ghost\n? (add 1 2)\n:q\n"))
    main()
    captured = capsys.readouterr()
    assert "UndefinedNameError" in captured.err
    assert "3" in captured.out
