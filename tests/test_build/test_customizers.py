"""Unit tests for the build customizer chain (initgen.build.customizers).

Tests cover:
- Customizers only apply to the build kinds they support
- Sequential application, each customizer seeing the previous mutations
- Ordering through the generation context
"""

from __future__ import annotations

import pytest

from initgen.build import Build, BuildCustomizer, GradleBuild, MavenBuild, apply_customizers
from initgen.context import GenerationContext, Many
from initgen.ordering import HIGHEST_PRECEDENCE

pytestmark = pytest.mark.unit


class TestSupports:
    def test_base_kind_supports_every_build(self):
        customizer = BuildCustomizer(Build, lambda build: None)
        assert customizer.supports(GradleBuild())
        assert customizer.supports(MavenBuild())

    def test_specific_kind_rejects_other_builds(self):
        customizer = BuildCustomizer(GradleBuild, lambda build: None)
        assert customizer.supports(GradleBuild())
        assert not customizer.supports(MavenBuild())


class TestApplyCustomizers:
    def test_applies_in_given_order(self):
        calls: list[str] = []
        customizers = [
            BuildCustomizer(Build, lambda build: calls.append("first")),
            BuildCustomizer(Build, lambda build: calls.append("second")),
        ]
        apply_customizers(customizers, GradleBuild())
        assert calls == ["first", "second"]

    def test_skips_unsupported_kinds(self):
        build = GradleBuild()
        customizers = [
            BuildCustomizer(MavenBuild, lambda b: b.add_plugin("maven-only")),
            BuildCustomizer(GradleBuild, lambda b: b.add_plugin("java")),
        ]
        apply_customizers(customizers, build)
        assert [plugin.id for plugin in build.plugins] == ["java"]

    def test_later_customizer_sees_earlier_mutation(self):
        seen: list[bool] = []
        customizers = [
            BuildCustomizer(GradleBuild, lambda b: b.add_plugin("war")),
            BuildCustomizer(GradleBuild, lambda b: seen.append(b.has_plugin("war"))),
        ]
        apply_customizers(customizers, GradleBuild())
        assert seen == [True]

    def test_returns_same_instance(self):
        build = GradleBuild()
        assert apply_customizers([], build) is build

    def test_each_customizer_runs_once(self):
        calls: list[str] = []
        customizer = BuildCustomizer(Build, lambda build: calls.append("run"))
        apply_customizers([customizer], GradleBuild())
        assert calls == ["run"]


class TestChainThroughContext:
    def test_context_orders_customizers(self, resolved_gradle):
        context = GenerationContext(resolved_gradle)
        context.register_component(
            "late", lambda: BuildCustomizer(GradleBuild, lambda b: b.add_plugin("late"), order=10), BuildCustomizer
        )
        context.register_component(
            "plain", lambda: BuildCustomizer(GradleBuild, lambda b: b.add_plugin("plain")), BuildCustomizer
        )
        context.register_component(
            "first",
            lambda: BuildCustomizer(GradleBuild, lambda b: b.add_plugin("first"), order=HIGHEST_PRECEDENCE),
            BuildCustomizer,
        )
        context.register_component(
            "build",
            lambda customizers: apply_customizers(customizers, GradleBuild()),
            GradleBuild,
            requires=(Many(BuildCustomizer),),
        )
        context.seal()
        assert [plugin.id for plugin in context.get(GradleBuild).plugins] == ["first", "plain", "late"]
