"""Unit tests for token streams."""

from decimal import Decimal
import io

import pytest

from json_field_mapper.mapper.errors import MapperParsingError
from json_field_mapper.mapper.tokens import (
    EventTokenStream,
    IjsonTokenStream,
    JsonToken,
    ValueTokenStream,
    scalar_text,
)


def _drain(stream):
    tokens = []
    while (token := stream.next_token()) is not None:
        tokens.append(token)
    return tokens


class TestJsonToken:
    def test_scalar_tokens_are_values(self):
        assert JsonToken.VALUE_STRING.is_value
        assert JsonToken.VALUE_NUMBER.is_value
        assert JsonToken.VALUE_BOOLEAN.is_value

    def test_null_and_structure_tokens_are_not_values(self):
        assert not JsonToken.VALUE_NULL.is_value
        assert not JsonToken.START_OBJECT.is_value
        assert not JsonToken.FIELD_NAME.is_value


class TestScalarText:
    @pytest.mark.parametrize(
        ("token", "value", "expected"),
        [
            (JsonToken.VALUE_BOOLEAN, True, "true"),
            (JsonToken.VALUE_BOOLEAN, False, "false"),
            (JsonToken.VALUE_NUMBER, 42, "42"),
            (JsonToken.VALUE_NUMBER, 1.5, "1.5"),
            (JsonToken.VALUE_NUMBER, Decimal("2.25"), "2.25"),
            (JsonToken.VALUE_STRING, "x", "x"),
        ],
    )
    def test_renders_json_text(self, token, value, expected):
        assert scalar_text(token, value) == expected


class TestEventTokenStream:
    """The cursor starts before the first token and reports text on demand."""

    def test_cursor_starts_unpositioned(self):
        stream = EventTokenStream([(JsonToken.START_OBJECT, None)])

        assert stream.current_token is None
        assert stream.next_token() is JsonToken.START_OBJECT
        assert stream.current_token is JsonToken.START_OBJECT
        assert stream.next_token() is None
        assert stream.current_token is None

    def test_text_for_field_names_and_scalars(self):
        stream = EventTokenStream([(JsonToken.FIELD_NAME, "k"), (JsonToken.VALUE_NUMBER, 7)])

        stream.next_token()
        assert stream.text() == "k"
        stream.next_token()
        assert stream.text() == "7"

    def test_text_rejected_on_structural_tokens(self):
        stream = EventTokenStream([(JsonToken.START_ARRAY, None)])
        stream.next_token()

        with pytest.raises(MapperParsingError, match="has no text"):
            stream.text()

    def test_skip_children_lands_on_matching_end(self):
        stream = ValueTokenStream({"a": {"b": [1, {"c": 2}]}, "d": 3})
        stream.next_token()

        stream.skip_children()

        assert stream.current_token is JsonToken.END_OBJECT
        assert stream.next_token() is None

    def test_skip_children_is_noop_on_scalars(self):
        stream = ValueTokenStream("x")
        stream.next_token()

        stream.skip_children()

        assert stream.current_token is JsonToken.VALUE_STRING

    def test_skip_children_on_truncated_input(self):
        stream = EventTokenStream([(JsonToken.START_OBJECT, None), (JsonToken.START_ARRAY, None)])
        stream.next_token()

        with pytest.raises(MapperParsingError, match="Unexpected end of input"):
            stream.skip_children()


class TestValueTokenStream:
    def test_walks_nested_value_in_order(self):
        stream = ValueTokenStream({"a": [1, None, True], "b": {"c": "x"}})

        assert _drain(stream) == [
            JsonToken.START_OBJECT,
            JsonToken.FIELD_NAME,
            JsonToken.START_ARRAY,
            JsonToken.VALUE_NUMBER,
            JsonToken.VALUE_NULL,
            JsonToken.VALUE_BOOLEAN,
            JsonToken.END_ARRAY,
            JsonToken.FIELD_NAME,
            JsonToken.START_OBJECT,
            JsonToken.FIELD_NAME,
            JsonToken.VALUE_STRING,
            JsonToken.END_OBJECT,
            JsonToken.END_OBJECT,
        ]

    def test_rejects_non_json_values(self):
        stream = ValueTokenStream({"a": object()})
        stream.next_token()
        stream.next_token()

        with pytest.raises(MapperParsingError, match="Unsupported JSON value"):
            stream.next_token()


class TestIjsonTokenStream:
    def test_matches_value_stream_tokens(self):
        raw = b'{"a": [1, null, true], "b": {"c": "x"}}'

        assert _drain(IjsonTokenStream.from_bytes(raw)) == _drain(
            ValueTokenStream({"a": [1, None, True], "b": {"c": "x"}})
        )

    def test_accepts_text_and_file_sources(self):
        from_text = IjsonTokenStream.from_bytes('{"k": "v"}')
        from_file = IjsonTokenStream(io.BytesIO(b'{"k": "v"}'))

        assert _drain(from_text) == _drain(from_file)

    def test_number_text(self):
        stream = IjsonTokenStream.from_bytes(b'{"n": 1.5, "i": 10}')
        texts = []
        while (token := stream.next_token()) is not None:
            if token is JsonToken.VALUE_NUMBER:
                texts.append(stream.text())

        assert texts == ["1.5", "10"]

    def test_malformed_input_raises_parsing_error(self):
        stream = IjsonTokenStream.from_bytes(b'{"a": ]')

        with pytest.raises(MapperParsingError, match="Malformed JSON"):
            _drain(stream)
