"""Tests for expanding templates against repository state."""

from __future__ import annotations

import unittest

from fakes import FakeProvider, make_context
from git_prompt_expand.models import Domain


NOT_IN_REPO = FakeProvider(inside=False, branch_name="ignored", ahead=4, stash_count=2, modified=True)


class PassthroughTests(unittest.TestCase):
    def test_templates_without_extended_codes_are_unchanged(self) -> None:
        templates = [
            "",
            "plain text",
            "%% %-3~ %D{%f-%K-%L} %F{red} %{seq%3G%} %v %(C.a.%(g#b#c)) %10<...<%~%<<%# ",
            "%n@%m %1~ %(?..%F{red}%?%f) %(!.#.$) ",
            "%d %/ %~ 100%",
        ]
        context = make_context(FakeProvider(inside=False))
        for template in templates:
            with self.subTest(template=template):
                self.assertEqual(context.expand(template), template)

    def test_unterminated_conditional(self) -> None:
        context = make_context(FakeProvider(inside=True))
        self.assertEqual(context.expand("%(G.yes"), "%(G.yes")

    def test_substitutions_inside_standard_conditional(self) -> None:
        context = make_context(FakeProvider(branch_name="dev"))
        self.assertEqual(context.expand("%(?.%r.%p!)"), "%(?.dev.0!)")


class OutsideRepositoryTests(unittest.TestCase):
    def test_substitutions_use_defaults(self) -> None:
        context = make_context(NOT_IN_REPO)
        self.assertEqual(context.expand("r%r a%p b%q s%x"), "r a0 b0 s0")

    def test_conditionals_use_defaults(self) -> None:
        context = make_context(NOT_IN_REPO)
        template = (
            "%(G.e.n) %(y.d.n)%(m#m#n)%(s.s.n) %(o.d.o)%1(o,g,n)%(o.d.g._) "
            "%(p.a.n)%1(p.o.n) %(q.b.n)%1(q.o.n) %(x.s.n)%1(x.o.n)"
        )
        self.assertEqual(context.expand(template), "n nnn dnd an bn sn")

    def test_in_repo_false_selects_false_branch(self) -> None:
        context = make_context(FakeProvider(inside=False))
        self.assertEqual(context.expand("%(G.yes.no)"), "no")


class RepositoryTests(unittest.TestCase):
    PROMPT = (
        "%(G.%(y.d.)%(m.m.)%(s.s.) %(o.g.h.l.b.a.) "
        "%1(p.%2(p.^%p.^).)%1(q.%2(q.v%q.v).)%1(x.%2(x.s%x.s).) %r.)"
    )

    def test_everything_set(self) -> None:
        provider = FakeProvider(
            branch_name="main",
            ahead=2,
            behind=1,
            stash_count=1,
            modified=True,
            staged=True,
            domain=Domain.GITHUB,
        )
        self.assertEqual(make_context(provider).expand(self.PROMPT), "dms h ^2vs main")

    def test_partial_state(self) -> None:
        provider = FakeProvider(
            branch_name="feature",
            ahead=0,
            behind=2,
            stash_count=3,
            staged=True,
            domain=Domain.AZURE,
        )
        self.assertEqual(make_context(provider).expand(self.PROMPT), "ds a v2s3 feature")

    def test_branch_name(self) -> None:
        self.assertEqual(make_context(FakeProvider(branch_name="main")).expand("%r"), "main")

    def test_thresholds_fall_through_to_fallback(self) -> None:
        context = make_context(FakeProvider(ahead=0, behind=0))
        self.assertEqual(context.expand("%1(p. .%1(q. .0))"), "0")

    def test_saturating_selection(self) -> None:
        context = make_context(FakeProvider(stash_count=5))
        self.assertEqual(context.expand("%(x.0-none.1-one.2-many)"), "2-many")

    def test_multi_branch_index_is_clamped(self) -> None:
        for count in range(3, 6):
            branches = [str(index) for index in range(count)]
            template = "%(p." + ".".join(branches) + ")"
            for value in range(8):
                with self.subTest(branches=count, ahead=value):
                    context = make_context(FakeProvider(ahead=value))
                    self.assertEqual(context.expand(template), str(min(value, count - 1)))

    def test_boolean_codes_pick_first_branch_when_true(self) -> None:
        cases = {
            "G": (FakeProvider(inside=True), FakeProvider(inside=False)),
            "y": (FakeProvider(modified=True), FakeProvider()),
            "m": (FakeProvider(modified=True), FakeProvider(staged=True)),
            "s": (FakeProvider(staged=True), FakeProvider(modified=True)),
        }
        for code, (truthy, falsy) in cases.items():
            with self.subTest(code=code):
                self.assertEqual(make_context(truthy).expand(f"%({code}.T.F)"), "T")
                self.assertEqual(make_context(falsy).expand(f"%({code}.T.F)"), "F")

    def test_boolean_codes_ignore_extra_branches(self) -> None:
        context = make_context(FakeProvider(modified=False))
        self.assertEqual(context.expand("%(m.a.b.c)"), "b")

    def test_missing_false_branch_renders_nothing(self) -> None:
        context = make_context(FakeProvider(inside=True, staged=False))
        self.assertEqual(context.expand("[%(s.staged)]"), "[]")

    def test_domain_argument_is_an_equality_test(self) -> None:
        context = make_context(FakeProvider(domain=Domain.GITLAB))
        self.assertEqual(context.expand("%1(o.gh.no)%2(o.gl.no)%3(o.bb.no)"), "noglno")

    def test_explicit_argument_with_many_branches_is_boolean(self) -> None:
        context = make_context(FakeProvider(behind=3))
        self.assertEqual(context.expand("%2(q.yes.no.never)"), "yes")

    def test_custom_delimiter(self) -> None:
        context = make_context(FakeProvider(ahead=1))
        self.assertEqual(context.expand("%1(p|+%p|-)%(p,a,b,c)"), "+1b")

    def test_two_branch_count_codes_select_by_value(self) -> None:
        self.assertEqual(make_context(FakeProvider(ahead=0)).expand("%(p.a.n)"), "a")
        self.assertEqual(make_context(FakeProvider(ahead=1)).expand("%(p.a.n)"), "n")
        self.assertEqual(make_context(FakeProvider(ahead=3)).expand("%(p.a.n)"), "n")
        self.assertEqual(make_context(FakeProvider(behind=2)).expand("%(q.even.behind)"), "behind")
        self.assertEqual(make_context(FakeProvider(stash_count=2)).expand("%(x.clean.stashed)"), "stashed")
        self.assertEqual(make_context(FakeProvider(domain=Domain.GITHUB)).expand("%(o.other.gh)"), "gh")

    def test_single_branch_count_code(self) -> None:
        self.assertEqual(make_context(FakeProvider(behind=5)).expand("%(q.only)"), "only")

    def test_close_paren_as_delimiter(self) -> None:
        self.assertEqual(make_context(FakeProvider(inside=True)).expand("%(G)yes)no)"), "yes")
        self.assertEqual(make_context(FakeProvider(inside=False)).expand("%(G)yes)no)"), "no")
        self.assertEqual(make_context(FakeProvider(ahead=0)).expand("%1(p)up)even)"), "even")
        self.assertEqual(make_context(FakeProvider()).expand("%(C)a)b)"), "%(C)a)b)")

    def test_percent_as_delimiter(self) -> None:
        self.assertEqual(make_context(FakeProvider(inside=True)).expand("%(G%yes%no)"), "yes")
        self.assertEqual(make_context(FakeProvider()).expand("%(C%a%b)"), "%(C%a%b)")


class DirectoryRuleTests(unittest.TestCase):
    def expand(self, template: str, **environ: str) -> str:
        return make_context(FakeProvider(inside=False), **environ).expand(template)

    def test_no_rules(self) -> None:
        self.assertEqual(self.expand("%/{:}", PWD="/home/user/sub/dir"), "/home/user/sub/dir")

    def test_first_matching_rule_wins(self) -> None:
        self.assertEqual(
            self.expand("%/{:missing:/dev:~:/home/user}", PWD="/home/user/sub/dir"),
            "~/sub/dir",
        )
        self.assertEqual(
            self.expand("%/{:A:/home:B:/home/user}", PWD="/home/user/sub/dir"),
            "A/user/sub/dir",
        )

    def test_environment_reference_in_prefix(self) -> None:
        self.assertEqual(self.expand("%/{:~:$HOME}", PWD="/home/u/proj", HOME="/home/u"), "~/proj")

    def test_truncation(self) -> None:
        self.assertEqual(self.expand("%-2/{:~:/home/user}", PWD="/home/user/sub/dir"), "~/sub")
        self.assertEqual(self.expand("%2/{:}", PWD="/home/user/sub/dir"), "sub/dir")
        self.assertEqual(self.expand("%-2d{:}", PWD="/home/user/sub/dir"), "/home")

    def test_whole_prefix_and_root(self) -> None:
        self.assertEqual(self.expand("%/{:~:/home/user}", PWD="/home/user"), "~")
        self.assertEqual(self.expand("%/{:}", PWD="/"), "/")

    def test_rule_inside_conditional(self) -> None:
        template = "%(G.%/{:~:/w}.%d{:})"
        self.assertEqual(self.expand(template, PWD="/w/x"), "/w/x")

    def test_empty_prefix_stays_literal(self) -> None:
        self.assertEqual(self.expand("%/{:x:}", PWD="/a/b"), "%/{:x:}")


if __name__ == "__main__":
    unittest.main()
