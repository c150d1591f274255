"""Tests for WhitespaceTokenizer driven by a StateMachine."""

from __future__ import annotations

import pytest

from runeflow import (
    MachineConfigError,
    RuneflowError,
    StateMachine,
    Substitute,
    TokenizeError,
    TokenizerOptions,
    WhitespaceTokenizer,
)


def words(buf: bytes) -> str | None:
    """Word splitter: a token ends at the first whitespace after content."""
    if buf[-1:].isspace():
        return buf[:-1].decode()
    return None


def no_hash(buf: bytes) -> str | None:
    """Every non-empty buffer is a token, unless it contains '#'."""
    if b"#" in buf:
        raise TokenizeError(f"unexpected '#' in {buf!r}")
    return buf.decode()


class TestWordSplitting:
    """Verify whitespace skipping and incremental matching."""

    def test_two_words_then_done(self) -> None:
        tokenizer = WhitespaceTokenizer(words)
        machine = StateMachine("  foo bar\n", tokenizer.config())

        assert machine.run() is True
        assert tokenizer.token == "foo"
        assert machine.run() is True
        assert tokenizer.token == "bar"
        assert machine.run() is False
        assert machine.err() is None

    def test_last_word_without_trailing_newline(self) -> None:
        tokenizer = WhitespaceTokenizer(words)
        machine = StateMachine("foo bar", tokenizer.config())

        assert machine.run() is True
        assert machine.run() is True
        assert tokenizer.token == "bar"
        assert machine.run() is False
        assert machine.err() is None

    def test_only_whitespace(self) -> None:
        tokenizer = WhitespaceTokenizer(words)
        machine = StateMachine(" \t\n  ", tokenizer.config())

        assert machine.run() is False
        assert machine.err() is None
        assert tokenizer.token is None

    def test_empty_input(self) -> None:
        machine = StateMachine("", WhitespaceTokenizer(words).config())
        assert machine.run() is False
        assert machine.err() is None

    def test_unicode_whitespace_and_content(self) -> None:
        tokenizer = WhitespaceTokenizer(lambda buf: buf.decode() if len(buf.decode()) == 2 else None)
        machine = StateMachine("　né", tokenizer.config())

        assert machine.run() is True
        assert tokenizer.token == "né"


class TestMapperContract:
    """Verify what the mapper sees and how its results are used."""

    def test_mapper_sees_whole_prefix(self) -> None:
        seen: list[bytes] = []

        def mapper(buf: bytes) -> str | None:
            seen.append(buf)
            return None

        machine = StateMachine("  abc", WhitespaceTokenizer(mapper).config())
        machine.run()
        assert seen == [b"a", b"ab", b"abc", b"abc\n"]

    def test_buffer_reset_between_tokens(self) -> None:
        seen: list[bytes] = []

        def mapper(buf: bytes) -> str | None:
            seen.append(buf)
            return words(buf)

        machine = StateMachine("ab cd", WhitespaceTokenizer(mapper).config())
        machine.run()
        seen.clear()
        machine.run()
        assert seen[0] == b"c"

    def test_whitespace_inside_token_goes_to_mapper(self) -> None:
        """Once matching, whitespace is not skipped; the mapper decides."""

        def pair(buf: bytes) -> str | None:
            return buf.decode() if len(buf) == 3 else None

        tokenizer = WhitespaceTokenizer(pair)
        machine = StateMachine("a bc", tokenizer.config())
        assert machine.run() is True
        assert tokenizer.token == "a b"

    def test_falsy_token_is_a_token(self) -> None:
        tokenizer = WhitespaceTokenizer(lambda buf: 0)
        machine = StateMachine("x", tokenizer.config())
        assert machine.run() is True
        assert tokenizer.token == 0

    def test_two_rune_token_on_end_of_input(self) -> None:
        """'ab' then end-of-input is recognized on the sentinel."""

        def two(buf: bytes) -> str | None:
            return buf[:2].decode() if len(buf) > 2 else None

        tokenizer = WhitespaceTokenizer(two)
        machine = StateMachine("ab", tokenizer.config())
        assert machine.run() is True
        assert tokenizer.token == "ab"

    def test_buffer_is_utf8_by_default(self) -> None:
        seen: list[bytes] = []

        def mapper(buf: bytes) -> str | None:
            seen.append(buf)
            return buf.decode()

        StateMachine("€", WhitespaceTokenizer(mapper).config()).run()
        assert seen == ["€".encode()]


class TestMapperErrors:
    """Verify mapper failures latch on the machine."""

    def test_hash_fails_second_pass(self) -> None:
        tokenizer = WhitespaceTokenizer(no_hash)
        machine = StateMachine("a#b\n", tokenizer.config())

        assert machine.run() is True
        assert tokenizer.token == "a"
        assert machine.run() is False
        assert isinstance(machine.err(), TokenizeError)
        assert machine.run() is False

    def test_error_is_exact_exception(self) -> None:
        err = TokenizeError("nope")

        def mapper(buf: bytes) -> str | None:
            raise err

        machine = StateMachine("x", WhitespaceTokenizer(mapper).config())
        machine.run()
        assert machine.err() is err

    def test_base_error_class_latched(self) -> None:
        def mapper(buf: bytes) -> str | None:
            raise RuneflowError("generic")

        machine = StateMachine("x", WhitespaceTokenizer(mapper).config())
        assert machine.run() is False
        assert str(machine.err()) == "generic"

    def test_programming_errors_propagate(self) -> None:
        def mapper(buf: bytes) -> str | None:
            raise ZeroDivisionError

        machine = StateMachine("x", WhitespaceTokenizer(mapper).config())
        with pytest.raises(ZeroDivisionError):
            machine.run()


class TestTokenizerOptions:
    """Verify options change the tokenizer's behavior."""

    def test_config_uses_substitute_policy(self) -> None:
        config = WhitespaceTokenizer(words).config()
        assert config.eof == Substitute("\n")

    def test_custom_eof_rune(self) -> None:
        def until_semicolon(buf: bytes) -> str | None:
            return buf[:-1].decode() if buf.endswith(b";") else None

        tokenizer = WhitespaceTokenizer(until_semicolon, TokenizerOptions(eof_rune=";"))
        machine = StateMachine("abc", tokenizer.config())
        assert machine.run() is True
        assert tokenizer.token == "abc"

    def test_custom_whitespace(self) -> None:
        options = TokenizerOptions(is_space=lambda rune: rune in ", ")
        tokenizer = WhitespaceTokenizer(lambda buf: buf[:-1].decode() if buf[-1:] in b", \n" else None, options)
        machine = StateMachine(",, a,b", tokenizer.config())

        assert machine.run() is True
        assert tokenizer.token == "a"
        assert machine.run() is True
        assert tokenizer.token == "b"

    def test_buffer_encoding(self) -> None:
        seen: list[bytes] = []

        def mapper(buf: bytes) -> str | None:
            seen.append(buf)
            return buf.decode("utf-16-le")

        options = TokenizerOptions(buffer_encoding="utf-16-le")
        StateMachine("é", WhitespaceTokenizer(mapper, options).config()).run()
        assert seen == ["é".encode("utf-16-le")]

    def test_invalid_eof_rune(self) -> None:
        with pytest.raises(MachineConfigError):
            TokenizerOptions(eof_rune="")

    def test_tokenizer_independent_of_machine(self) -> None:
        tokenizer = WhitespaceTokenizer(words)
        first = StateMachine("one", tokenizer.config())
        second = StateMachine("two", tokenizer.config())

        assert first.run() is True
        assert tokenizer.token == "one"
        assert second.run() is True
        assert tokenizer.token == "two"


class TestUnencodableRunes:
    """Runes the buffer codec cannot encode are latched, not raised."""

    def test_surrogate_escaped_byte(self) -> None:
        from runeflow import RuneReader

        reader = RuneReader(b"ab\xff cd", errors="surrogateescape")
        machine = StateMachine(reader, WhitespaceTokenizer(words).config())

        assert machine.run() is False
        err = machine.err()
        assert isinstance(err, TokenizeError)
        assert isinstance(err.__cause__, UnicodeEncodeError)
        assert err.offset == 3
        assert machine.run() is False

    def test_lone_surrogate_in_str(self) -> None:
        machine = StateMachine("x\ud800", WhitespaceTokenizer(words).config())
        assert machine.run() is False
        assert "cannot encode" in str(machine.err())

    def test_encodable_with_other_codec(self) -> None:
        options = TokenizerOptions(buffer_encoding="ascii")
        machine = StateMachine("ok é", WhitespaceTokenizer(words, options).config())

        assert machine.run() is True
        assert machine.run() is False
        assert "ascii" in str(machine.err())
