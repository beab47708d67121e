"""
Tests for tokenizing, argument splitting and option parsing.
"""

from chatcmd.commands.command import OptionSchema
from chatcmd.utils.parsing import parse_args, parse_opts, split_quoted, strip_quotes, tokenize


class TestTokenize:
    def test_groups_quoted_text(self):
        assert tokenize('bar "foo bar" baz') == ["bar", "foo bar", "baz"]

    def test_single_quotes(self):
        assert tokenize("lorem 'ipsum dolor' sit") == ["lorem", "ipsum dolor", "sit"]

    def test_lone_apostrophe_is_literal(self):
        assert tokenize("I'm running out") == ["I'm", "running", "out"]

    def test_partially_quoted_token_keeps_quotes(self):
        assert tokenize('say="hello world" now') == ['say="hello world"', "now"]

    def test_mismatched_quotes_are_not_stripped(self):
        assert strip_quotes("\"abc'") == "\"abc'"
        assert strip_quotes("'abc'") == "abc"

    def test_discards_empty_tokens(self):
        assert tokenize("a   b  ") == ["a", "b"]
        assert tokenize("") == []

    def test_escaped_space_joins_token(self):
        assert tokenize(r"foo\ bar baz") == ["foo bar", "baz"]

    def test_escaped_quote_is_literal(self):
        assert tokenize(r'\"not quoted" x') == ['"not', 'quoted"', "x"]

    def test_split_quoted_keeps_quotes_and_empties(self):
        assert split_quoted('a  "b c"') == ["a", "", '"b c"']


class TestParseArgs:
    def test_splits_along_spaces(self):
        cmd, args, suffix = parse_args("foo bar foobar fazbaz")

        assert cmd == "foo"
        assert args == ["bar", "foobar", "fazbaz"]
        assert suffix == "bar foobar fazbaz"

    def test_groups_quoted_text(self):
        parsed = parse_args('foo bar "foobar fazbaz" lorem')

        assert parsed.cmd == "foo"
        assert parsed.args == ["bar", "foobar fazbaz", "lorem"]
        assert parsed.suffix == 'bar "foobar fazbaz" lorem'

    def test_ignores_single_apostrophe(self):
        text = "foo bar \"foobar fazbaz\" lorem 'ipsum' I'm running out of things to write here."
        parsed = parse_args(text)

        assert parsed.args == [
            "bar", "foobar fazbaz", "lorem", "ipsum", "I'm",
            "running", "out", "of", "things", "to", "write", "here.",
        ]
        assert parsed.suffix == "bar \"foobar fazbaz\" lorem 'ipsum' I'm running out of things to write here."

    def test_command_is_lowercased(self):
        assert parse_args("HeLp me").cmd == "help"

    def test_command_only(self):
        assert parse_args("ping") == ("ping", [], "")

    def test_empty_text(self):
        assert parse_args("   ") == ("", [], "")


class TestParseOpts:
    def schema(self, **kwargs):
        return OptionSchema(**kwargs)

    def test_boolean_and_string_flags(self):
        schema = self.schema(boolean=["silent"], string=["reason"])
        options, operands = parse_opts('@user --silent --reason "being rude" extra', schema)

        assert options == {"silent": True, "reason": "being rude"}
        assert operands == ["@user", "extra"]

    def test_declared_booleans_default_false(self):
        options, operands = parse_opts("hello", self.schema(boolean=["force"]))

        assert options == {"force": False}
        assert operands == ["hello"]

    def test_defaults_apply_when_absent(self):
        schema = self.schema(defaults={"limit": 10})

        assert parse_opts("", schema).options == {"limit": 10}
        assert parse_opts("--limit 25", schema).options == {"limit": 25}

    def test_equals_syntax_and_number_coercion(self):
        options, _ = parse_opts("--limit=5 --ratio=0.5 --name=7", self.schema(string=["name"]))

        assert options == {"limit": 5, "ratio": 0.5, "name": "7"}

    def test_negated_flag(self):
        options, _ = parse_opts("--no-color", self.schema(boolean=["color"]))

        assert options == {"color": False}

    def test_boolean_does_not_consume_operand(self):
        options, operands = parse_opts("--silent target", self.schema(boolean=["silent"]))

        assert options == {"silent": True}
        assert operands == ["target"]

    def test_boolean_accepts_literal_value(self):
        options, operands = parse_opts("--silent false target", self.schema(boolean=["silent"]))

        assert options == {"silent": False}
        assert operands == ["target"]

    def test_string_flag_without_value(self):
        options, _ = parse_opts("--reason --silent", self.schema(boolean=["silent"], string=["reason"]))

        assert options == {"silent": True, "reason": ""}

    def test_short_flags(self):
        options, operands = parse_opts("-abc file", self.schema(boolean=["a", "b", "c"]))

        assert options == {"a": True, "b": True, "c": True}
        assert operands == ["file"]

    def test_short_flag_with_attached_number(self):
        options, _ = parse_opts("-n5", self.schema())

        assert options == {"n": 5}

    def test_double_dash_ends_options(self):
        options, operands = parse_opts("--a 1 -- --b c", self.schema())

        assert options == {"a": 1}
        assert operands == ["--b", "c"]

    def test_negative_number_is_operand(self):
        options, operands = parse_opts("-5 x", self.schema())

        assert options == {}
        assert operands == ["-5", "x"]

    def test_repeated_flag_collects_values(self):
        options, _ = parse_opts("--tag a --tag b --tag c", self.schema(string=["tag"]))

        assert options == {"tag": ["a", "b", "c"]}

    def test_unknown_policy_drops_undeclared_flags(self):
        seen = []

        def unknown(flag):
            seen.append(flag)
            return False

        schema = self.schema(boolean=["known"], unknown=unknown)
        options, operands = parse_opts("--known --mystery 3 word", schema)

        assert options == {"known": True}
        assert seen == ["--mystery"]
        assert operands == ["word"]

    def test_unknown_policy_can_allow(self):
        schema = self.schema(unknown=lambda flag: True)

        assert parse_opts("--extra yes", schema).options == {"extra": "yes"}
