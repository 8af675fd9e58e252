"""Tests for rendering Python values as SQL literals."""

import datetime
from collections import OrderedDict, deque
from decimal import Decimal
from enum import Enum, IntEnum
from io import StringIO
from typing import NamedTuple
from uuid import UUID

import pytest

from chsql.exceptions import SerializationError
from chsql.protocols import SupportsWrite
from chsql.sql.bind import Identifier, register_literal_writer, render_literal, write_literal
from chsql.sql.builder import SQLBuilder


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class Point(NamedTuple):
    x: int
    y: int


class TestScalars:
    def test_none_is_null(self) -> None:
        assert render_literal(None) == "NULL"

    def test_bool(self) -> None:
        assert render_literal(True) == "true"
        assert render_literal(False) == "false"

    @pytest.mark.parametrize(("value", "expected"), [(0, "0"), (42, "42"), (-7, "-7"), (2**64, "18446744073709551616")])
    def test_int(self, value: int, expected: str) -> None:
        assert render_literal(value) == expected

    def test_float(self) -> None:
        assert render_literal(1.5) == "1.5"
        assert render_literal(-0.25) == "-0.25"

    def test_non_finite_float(self) -> None:
        assert render_literal(float("nan")) == "nan"
        assert render_literal(float("inf")) == "inf"
        assert render_literal(float("-inf")) == "-inf"

    def test_decimal(self) -> None:
        assert render_literal(Decimal("123.450")) == "123.450"
        assert render_literal(Decimal("1E+3")) == "1000"

    def test_non_finite_decimal_fails(self) -> None:
        with pytest.raises(SerializationError, match="non-finite decimal"):
            render_literal(Decimal("NaN"))

    def test_string(self) -> None:
        assert render_literal("foo") == "'foo'"
        assert render_literal("") == "''"
        assert render_literal("O'Brien\\") == "'O\\'Brien\\\\'"

    def test_bytes(self) -> None:
        assert render_literal(b"ab'c\\\x00\xff") == "'ab\\'c\\\\\\x00\\xFF'"
        assert render_literal(bytearray(b"xy")) == "'xy'"
        assert render_literal(memoryview(b"z")) == "'z'"

    def test_uuid(self) -> None:
        value = UUID("550e8400-e29b-41d4-a716-446655440000")

        assert render_literal(value) == "'550e8400-e29b-41d4-a716-446655440000'"

    def test_enum_uses_value(self) -> None:
        assert render_literal(Color.RED) == "'red'"
        assert render_literal(Level.HIGH) == "2"


class TestDatesAndTimes:
    def test_date(self) -> None:
        assert render_literal(datetime.date(2024, 1, 15)) == "'2024-01-15'"

    def test_datetime(self) -> None:
        assert render_literal(datetime.datetime(2024, 1, 15, 12, 30, 45)) == "'2024-01-15 12:30:45'"

    def test_datetime_with_microseconds(self) -> None:
        value = datetime.datetime(2024, 1, 15, 12, 30, 45, 123)

        assert render_literal(value) == "'2024-01-15 12:30:45.000123'"

    def test_aware_datetime_is_converted_to_utc(self) -> None:
        tz = datetime.timezone(datetime.timedelta(hours=2))
        value = datetime.datetime(2024, 1, 15, 12, 0, 0, tzinfo=tz)

        assert render_literal(value) == "'2024-01-15 10:00:00'"

    def test_time(self) -> None:
        assert render_literal(datetime.time(8, 5, 3)) == "'08:05:03'"


class TestCollections:
    def test_empty_list(self) -> None:
        assert render_literal([]) == "[]"

    def test_string_list(self) -> None:
        assert render_literal(["a", "b", "c"]) == "['a','b','c']"

    def test_nested_list(self) -> None:
        assert render_literal([[1, 2], [], [None]]) == "[[1,2],[],[NULL]]"

    def test_optional_elements(self) -> None:
        assert render_literal([1, None, 3]) == "[1,NULL,3]"

    def test_set_is_sorted(self) -> None:
        assert render_literal({3, 1, 2}) == "[1,2,3]"
        assert render_literal(frozenset({"b", "a"})) == "['a','b']"

    def test_unorderable_set_keeps_elements(self) -> None:
        rendered = render_literal({1, "a"})

        assert rendered in {"[1,'a']", "['a',1]"}

    def test_generic_sequence(self) -> None:
        assert render_literal(deque([1, 2])) == "[1,2]"
        assert render_literal(range(3)) == "[0,1,2]"

    def test_tuple(self) -> None:
        assert render_literal((1, "a", None)) == "(1,'a',NULL)"
        assert render_literal(()) == "()"

    def test_named_tuple_is_a_tuple(self) -> None:
        assert render_literal(Point(1, 2)) == "(1,2)"

    def test_mapping(self) -> None:
        assert render_literal({"a": 1, "b": [2]}) == "map('a',1,'b',[2])"
        assert render_literal({}) == "map()"
        assert render_literal(OrderedDict([("k", "v")])) == "map('k','v')"


class TestIdentifiers:
    def test_identifier(self) -> None:
        assert render_literal(Identifier("events")) == "`events`"

    def test_identifier_escaping(self) -> None:
        assert render_literal(Identifier("we`ird\\name")) == "`we\\`ird\\\\name`"

    def test_identifier_equality(self) -> None:
        assert Identifier("a") == Identifier("a")
        assert Identifier("a") != Identifier("b")
        assert hash(Identifier("a")) == hash(Identifier("a"))
        assert repr(Identifier("a")) == "Identifier('a')"

    def test_identifier_in_builder(self) -> None:
        sql = SQLBuilder("SELECT count() FROM ? WHERE name = ?")
        sql.bind_arg(Identifier("my table"))
        sql.bind_arg("my table")

        assert sql.finish() == "SELECT count() FROM `my table` WHERE name = 'my table'"


class TestExtension:
    def test_bind_protocol(self) -> None:
        class Now:
            def write_sql(self, out: SupportsWrite) -> None:
                out.write("now()")

        assert render_literal(Now()) == "now()"
        assert render_literal([Now(), Now()]) == "[now(),now()]"

    def test_register_literal_writer(self) -> None:
        class Money:
            def __init__(self, cents: int) -> None:
                self.cents = cents

        class Euro(Money):
            pass

        def write_money(value: Money, out: SupportsWrite) -> None:
            out.write(f"toDecimal64({value.cents / 100:.2f}, 2)")

        register_literal_writer(Money, write_money)

        assert render_literal(Money(1999)) == "toDecimal64(19.99, 2)"
        assert render_literal(Euro(5)) == "toDecimal64(0.05, 2)"

    def test_unsupported_type(self) -> None:
        class Opaque:
            pass

        with pytest.raises(SerializationError, match="unsupported value type"):
            render_literal(Opaque())

    def test_unsupported_nested_type(self) -> None:
        with pytest.raises(SerializationError):
            render_literal([1, object()])

    def test_write_literal_appends_to_buffer(self) -> None:
        out = StringIO()
        out.write("x = ")
        write_literal(5, out)

        assert out.getvalue() == "x = 5"
