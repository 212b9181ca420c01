"""Tests for rill_core.builtins."""

import io
import math

import pytest

from rill_core import Empty, Sketch, TypeMismatchError, VNumber, VText, core_builtins
from rill_core.builtins import add, div, mod, mul, pow_, sub


def run(source):
    return Sketch(out=io.StringIO()).run_source(source)


class TestTable:
    def test_reference_names_in_order(self):
        names = [name for name, _ in core_builtins()]
        assert names == ["println", "add", "sub", "mul", "div", "mod", "pow"]

    def test_println_writes_to_out(self):
        out = io.StringIO()
        Sketch(out=out).run_source('(println "hello") (println <1 2>)')
        assert out.getvalue() == "hello\n<1 2>\n"

    def test_println_returns_empty(self):
        assert run("(println 1)") is Empty


class TestArithmetic:
    def test_add(self):
        assert add(VNumber(2), VNumber(3)) == VNumber(5)

    def test_add_concatenates_strings(self):
        assert add(VText("n="), VNumber(3)) == VText("n=3")
        assert add(VNumber(1), VText("px")) == VText("1px")

    def test_sub_mul(self):
        assert sub(VNumber(2), VNumber(3)) == VNumber(-1)
        assert mul(VNumber(2), VNumber(3)) == VNumber(6)

    def test_div(self):
        assert div(VNumber(1), VNumber(4)) == VNumber(0.25)

    def test_div_by_zero(self):
        assert div(VNumber(1), VNumber(0)) == VNumber(math.inf)
        assert div(VNumber(-1), VNumber(0)) == VNumber(-math.inf)
        assert math.isnan(div(VNumber(0), VNumber(0)).value)

    def test_mod_truncates_toward_zero(self):
        assert mod(VNumber(7), VNumber(3)) == VNumber(1)
        assert mod(VNumber(-7), VNumber(3)) == VNumber(-1)
        assert math.isnan(mod(VNumber(1), VNumber(0)).value)

    def test_pow(self):
        assert pow_(VNumber(2), VNumber(10)) == VNumber(1024)
        assert pow_(VNumber(10), VNumber(400)) == VNumber(math.inf)

    def test_pow_through_evaluator(self):
        assert run("(pow 3 2)") == VNumber(9)


class TestTypeMismatch:
    def test_non_number_operand(self):
        with pytest.raises(TypeMismatchError) as exc:
            run("(mul :a 2)")
        assert exc.value.operation == "mul"

    def test_missing_operand_is_empty(self):
        with pytest.raises(TypeMismatchError) as exc:
            run("(sub 1)")
        assert exc.value.value is Empty
