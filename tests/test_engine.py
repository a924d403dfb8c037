"""Tests for the rule engine."""

from conftest import BOLD_RED, GREEN, RED, RESET, YELLOW

from colorcat.core.color import ColorSpec, parse_color
from colorcat.core.engine import MatchSpan, find_matches, match_regions, render
from colorcat.core.parser import parse_rules


class TestProcess:
    """Tests for RuleEngine.process."""

    def test_whole_match_colored(self, make_engine):
        """Test a single unlimited rule."""
        engine = make_engine("regexp=ERROR\ncolours=bold red\ncount=unlimited\n")

        result = engine.process("2024 ERROR disk full")

        assert result == f"2024 {BOLD_RED}ERROR{RESET} disk full"

    def test_pass_through(self, make_engine):
        """Test that lines matching no rule are unchanged."""
        engine = make_engine("regexp=ERROR\ncolours=red\n")

        assert engine.process("all good") == "all good"
        assert engine.process("") == ""

    def test_every_occurrence_colored(self, make_engine):
        engine = make_engine("regexp=ab\ncolours=red\n")

        assert engine.process("ab-ab") == f"{RED}ab{RESET}-{RED}ab{RESET}"

    def test_capture_groups(self, make_engine):
        """Test per-group colors layered over the whole match."""
        engine = make_engine(r"regexp=(\w+)=(\d+)" "\ncolours=bold,cyan,yellow\n")

        result = engine.process("x=10")

        assert result == (
            f"\033[1;36mx{RESET}\033[1m={RESET}\033[1;33m10{RESET}"
        )

    def test_single_color_applies_to_whole_match_only(self, make_engine):
        engine = make_engine("regexp=(a)(b)\ncolours=red\n")

        assert engine.process("ab") == f"{RED}ab{RESET}"

    def test_fewer_colors_than_groups(self, make_engine):
        """Test that groups without a color stay unstyled."""
        engine = make_engine("regexp=(a)(b)\ncolours=default,green\n")

        assert engine.process("ab") == f"{GREEN}a{RESET}b"

    def test_unchanged_group(self, make_engine):
        """Test that 'unchanged' leaves a group alone."""
        engine = make_engine("regexp=(a)(b)\ncolours=red,unchanged,green\n")

        assert engine.process("ab") == f"{RED}a{RESET}{GREEN}b{RESET}"

    def test_previous_color_token(self, make_engine):
        """Test that 'previous' reuses the color of the last colored span."""
        engine = make_engine("regexp=foo\ncolours=red\n\nregexp=bar\ncolours=previous\n")

        assert engine.process("foo bar") == f"{RED}foo{RESET} {RED}bar{RESET}"

    def test_beep(self, make_engine):
        engine = make_engine("regexp=ALERT\ncolours=beep red\n")

        assert engine.process("ALERT") == f"\a{RED}ALERT{RESET}"

    def test_zero_length_match_is_no_match(self, make_engine):
        """Test that empty matches never color anything."""
        engine = make_engine("regexp=x*\ncolours=red\ncount=once\n")

        assert engine.process("abc") == "abc"
        assert not engine.rules[0].has_fired
        assert engine.process("axx") == f"a{RED}xx{RESET}"

    def test_alternatives_first_match_wins(self, make_engine):
        """Test that only the first matching alternative is used."""
        engine = make_engine("regexp=foo\nregexp=bar\ncolours=red\n")

        assert engine.process("bar") == f"{RED}bar{RESET}"
        assert engine.process("foo bar") == f"{RED}foo{RESET} bar"

    def test_rule_order_decides_overlap(self, make_engine):
        """Test that later rules win, regardless of match length."""
        forward = make_engine("regexp=disk\ncolours=red\n\nregexp=disk full\ncolours=green\n")
        backward = make_engine("regexp=disk full\ncolours=green\n\nregexp=disk\ncolours=red\n")

        assert forward.process("disk full") == f"{GREEN}disk full{RESET}"
        assert backward.process("disk full") == f"{RED}disk{RESET}{GREEN} full{RESET}"

    def test_later_rules_match_original_text(self, make_engine):
        """Test that inserted escape sequences do not affect later rules."""
        engine = make_engine("regexp=31\ncolours=red\n\nregexp=m\\b\ncolours=green\n")

        assert engine.process("31 m") == f"{RED}31{RESET} {GREEN}m{RESET}"

    def test_every_styled_run_is_reset(self, make_engine):
        """Test that no styling leaks past a colored span."""
        engine = make_engine(r"regexp=(\d+)-(\d+)" "\ncolours=underline,red,green\n")

        result = engine.process("a 1-2 b")

        assert result.endswith(f"{RESET} b")
        assert result.count(RESET) == 3


class TestCountPolicies:
    """Tests for count policies and skip."""

    def test_stop(self, make_engine):
        """Test that a stop rule hides later rules but keeps earlier ones."""
        engine = make_engine(
            "regexp=this\ncolours=green\n"
            "\nregexp=WARN\ncolours=yellow\ncount=stop\n"
            "\nregexp=message\ncolours=red\n"
        )

        result = engine.process("this is a WARN message")

        assert result == f"{GREEN}this{RESET} is a {YELLOW}WARN{RESET} message"

    def test_stop_only_when_matching(self, make_engine):
        engine = make_engine(
            "regexp=WARN\ncolours=yellow\ncount=stop\n\nregexp=message\ncolours=red\n"
        )

        assert engine.process("a message") == f"a {RED}message{RESET}"

    def test_once(self, make_engine):
        """Test that a once rule applies on the first matching line only."""
        engine = make_engine("regexp=boot\ncolours=green\ncount=once\n")

        assert engine.process("no match") == "no match"
        assert engine.process("boot") == f"{GREEN}boot{RESET}"
        assert engine.process("boot") == "boot"
        assert engine.rules[0].has_fired
        assert engine.rules[0].is_exhausted

    def test_more_is_armed_by_first_match(self, make_engine):
        """Test that a more rule stays active after its first match."""
        engine = make_engine("regexp=tick\ncolours=green\ncount=more\n")
        rule = engine.rules[0]

        assert not rule.is_active
        engine.process("nothing")
        assert not rule.is_active

        assert engine.process("tick") == f"{GREEN}tick{RESET}"
        assert rule.is_active
        assert engine.process("tock") == "tock"
        assert engine.process("tick") == f"{GREEN}tick{RESET}"

    def test_skip(self, make_engine):
        """Test that skip suppresses the line even after coloring."""
        engine = make_engine("regexp=x\ncolours=red\n\nregexp=^DEBUG\nskip=yes\n")

        assert engine.process("DEBUG x") is None
        assert engine.process("INFO x") == f"INFO {RED}x{RESET}"

    def test_skip_once(self, make_engine):
        engine = make_engine("regexp=banner\nskip=yes\ncount=once\n")

        assert engine.process("banner") is None
        assert engine.process("banner") == "banner"

    def test_previous_reuses_fired_spans(self, make_engine):
        """Test that a previous rule layers its colors on the last fired spans."""
        engine = make_engine("regexp=took\ncolours=red\n\ncount=previous\ncolours=underline\n")

        assert engine.process("it took") == f"it \033[4;31mtook{RESET}"

    def test_previous_without_colors(self, make_engine):
        engine = make_engine("regexp=took\ncolours=red\n\ncount=previous\n")

        assert engine.process("it took") == f"it {RED}took{RESET}"

    def test_previous_is_noop_when_nothing_fired(self, make_engine):
        """Test that previous does nothing on lines where no rule fired."""
        engine = make_engine("regexp=took\ncolours=red\n\ncount=previous\ncolours=underline\n")

        assert engine.process("nothing") == "nothing"
        assert not engine.rules[1].has_fired

    def test_block_and_unblock(self, make_engine):
        """Test that block colors whole lines until unblock."""
        engine = make_engine(
            "regexp=BEGIN\ncolours=yellow\ncount=block\n\nregexp=END\ncount=unblock\n"
        )

        assert engine.process("before") == "before"
        assert engine.process("x BEGIN y") == f"x {YELLOW}BEGIN y{RESET}"
        assert engine.in_block
        assert engine.process("middle") == f"{YELLOW}middle{RESET}"
        assert engine.process("the END here") == f"{YELLOW}the END{RESET} here"
        assert not engine.in_block
        assert engine.process("after") == "after"

    def test_block_and_unblock_on_one_line(self, make_engine):
        """Test that a block opened and closed on the same line ends at the unblock match."""
        engine = make_engine(
            "regexp=BEGIN\ncolours=yellow\ncount=block\n\nregexp=END\ncount=unblock\n"
        )

        assert engine.process("a BEGIN b END c") == f"a {YELLOW}BEGIN b END{RESET} c"
        assert not engine.in_block
        assert engine.process("after") == "after"

    def test_color_disabled(self, make_engine):
        """Test that without color only skip rules have an effect."""
        engine = make_engine("regexp=x\ncolours=red\n\nregexp=^DEBUG\nskip=yes\n", color=False)

        assert engine.process("a x b") == "a x b"
        assert engine.process("DEBUG") is None


class TestMatching:
    """Tests for the match helpers."""

    def test_find_matches_skips_empty(self):
        rules = parse_rules("regexp=b*\n")

        matches = find_matches(rules[0], "abba")

        assert [m.group() for m in matches] == ["bb"]

    def test_match_regions_skip_missing_groups(self):
        """Test that groups that did not participate are left out."""
        rules = parse_rules("regexp=(a)|(b)\n")

        regions = match_regions(find_matches(rules[0], "b"))

        assert regions == [(0, 1, 0), (0, 1, 2)]


class TestRender:
    """Tests for render function."""

    def test_no_spans(self):
        assert render("text", []) == "text"

    def test_nested_span_restores_outer(self):
        """Test that the outer style is re-emitted after an inner span."""
        spans = [
            MatchSpan(0, 5, 0, parse_color("red"), (0, 0)),
            MatchSpan(1, 2, 1, parse_color("green"), (0, 1)),
        ]

        assert render("abcde", spans) == f"{RED}a{RESET}{GREEN}b{RESET}{RED}cde{RESET}"

    def test_plain_span_emits_nothing(self):
        spans = [MatchSpan(0, 2, 0, ColorSpec(), (0, 0))]

        assert render("ab", spans) == "ab"
