"""Unit tests for the request-scoped component registry (initgen.context).

Tests cover:
- Condition evaluation and inactive candidates
- Lookup by type: single, optional and ordered collections
- Ordering: explicit order, instance order, HIGHEST_PRECEDENCE, ties
- Dependency injection and topological construction
- Configuration errors: cycles, ambiguity, missing dependencies
- Lifecycle: state checks, disposal order, disposal errors
"""

from __future__ import annotations

import pytest

from initgen.conditions import OnLanguage, OnPackaging
from initgen.context import ComponentDefinition, ContextState, GenerationContext, Many
from initgen.errors import ComponentNotFoundError, ConfigurationError, ContextStateError
from initgen.ordering import HIGHEST_PRECEDENCE

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Service:
    def __init__(self, label: str = "", order=None) -> None:
        self.label = label
        if order is not None:
            self.order = order


class OtherService(Service):
    pass


class Closeable:
    def __init__(self, label: str, closed: list[str]) -> None:
        self.label = label
        self._closed = closed

    def close(self) -> None:
        self._closed.append(self.label)


@pytest.fixture
def context(resolved_gradle) -> GenerationContext:
    return GenerationContext(resolved_gradle)


def _labels(services):
    return [service.label for service in services]


# ---------------------------------------------------------------------------
# Activation and lookup
# ---------------------------------------------------------------------------


class TestActivation:
    def test_only_matching_components_are_active(self, context):
        context.register_component("java", lambda: Service("java"), Service, condition=OnLanguage("java"))
        context.register_component("war", lambda: Service("war"), Service, condition=OnPackaging("war"))
        context.seal()
        assert _labels(context.get_all(Service)) == ["java"]

    def test_inactive_component_is_never_constructed(self, context):
        calls: list[str] = []

        def factory():
            calls.append("built")
            return Service("war")

        context.register_component("war", factory, Service, condition=OnPackaging("war"))
        context.seal()
        assert calls == []
        assert context.get_all(Service) == []

    def test_each_active_factory_runs_once(self, context):
        calls: list[str] = []

        def factory():
            calls.append("built")
            return Service("one")

        context.register_component("one", factory, Service)
        context.seal()
        context.get(Service)
        context.get(Service)
        context.get_all(Service)
        assert calls == ["built"]

    def test_conditions_evaluated_once_at_seal(self, context):
        evaluations: list[str] = []

        class CountingCondition(OnLanguage):
            def matches(self, description):
                evaluations.append(self.language_id)
                return super().matches(description)

        context.register_component("c", lambda: Service("c"), Service, condition=CountingCondition("java"))
        context.seal()
        context.get_all(Service)
        context.get(Service)
        assert evaluations == ["java"]


class TestLookup:
    def test_get_single(self, context):
        context.register_component("one", lambda: Service("one"), Service)
        context.seal()
        assert context.get(Service).label == "one"

    def test_get_matches_subclasses(self, context):
        context.register_component("other", lambda: OtherService("other"), OtherService)
        context.seal()
        assert context.get(Service).label == "other"
        assert context.get(OtherService).label == "other"

    def test_get_missing_raises_not_found(self, context):
        context.seal()
        with pytest.raises(ComponentNotFoundError) as exc_info:
            context.get(Service)
        assert exc_info.value.component_type is Service
        assert isinstance(exc_info.value, LookupError)

    def test_get_ambiguous_raises(self, context):
        context.register_component("a", lambda: Service("a"), Service)
        context.register_component("b", lambda: Service("b"), Service)
        context.seal()
        with pytest.raises(ConfigurationError, match="Expected a single Service"):
            context.get(Service)

    def test_get_optional(self, context):
        context.seal()
        assert context.get_optional(Service) is None

    def test_get_all_empty_when_none_active(self, context):
        context.seal()
        assert context.get_all(Service) == []

    def test_register_instance(self, context):
        service = Service("prebuilt")
        context.register_instance(service)
        context.seal()
        assert context.get(Service) is service

    def test_description_is_available(self, context, resolved_gradle):
        assert context.description is resolved_gradle


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_lower_order_first(self, context):
        context.register_component("late", lambda: Service("late"), Service, order=10)
        context.register_component("early", lambda: Service("early"), Service, order=-5)
        context.register_component("default", lambda: Service("default"), Service)
        context.seal()
        assert _labels(context.get_all(Service)) == ["early", "default", "late"]

    def test_ties_keep_registration_order(self, context):
        for label in ["a", "b", "c", "d"]:
            context.register_component(label, lambda label=label: Service(label), Service)
        context.seal()
        assert _labels(context.get_all(Service)) == ["a", "b", "c", "d"]

    def test_highest_precedence_before_every_numeric_order(self, context):
        context.register_component("very-early", lambda: Service("very-early"), Service, order=-(10 ** 9))
        context.register_component("first", lambda: Service("first"), Service, order=HIGHEST_PRECEDENCE)
        context.seal()
        assert _labels(context.get_all(Service)) == ["first", "very-early"]

    def test_highest_precedence_ties_keep_registration_order(self, context):
        context.register_component("x", lambda: Service("x"), Service, order=HIGHEST_PRECEDENCE)
        context.register_component("y", lambda: Service("y"), Service, order=HIGHEST_PRECEDENCE)
        context.seal()
        assert _labels(context.get_all(Service)) == ["x", "y"]

    def test_instance_order_attribute_used(self, context):
        context.register_component("plain", lambda: Service("plain"), Service)
        context.register_component("first", lambda: Service("first", HIGHEST_PRECEDENCE), Service)
        context.seal()
        assert _labels(context.get_all(Service)) == ["first", "plain"]

    def test_definition_order_overrides_instance_order(self, context):
        context.register_component("a", lambda: Service("a", HIGHEST_PRECEDENCE), Service, order=5)
        context.register_component("b", lambda: Service("b"), Service)
        context.seal()
        assert _labels(context.get_all(Service)) == ["b", "a"]

    def test_invalid_instance_order_rejected(self, context):
        context.register_component("bad", lambda: Service("bad", "soon"), Service)
        context.seal()
        with pytest.raises(TypeError, match="order must be"):
            context.get_all(Service)

    def test_order_is_stable_across_lookups(self, context):
        for index, label in enumerate(["c", "a", "b"]):
            context.register_component(label, lambda label=label: Service(label), Service, order=index % 2)
        context.seal()
        first = _labels(context.get_all(Service))
        assert first == ["c", "b", "a"]
        assert _labels(context.get_all(Service)) == first


# ---------------------------------------------------------------------------
# Dependency injection
# ---------------------------------------------------------------------------


class Consumer:
    def __init__(self, service: Service, services: list[Service] | None = None) -> None:
        self.service = service
        self.services = services or []


class TestInjection:
    def test_dependency_constructed_before_dependant(self, context):
        built: list[str] = []

        def make_consumer(service):
            built.append("consumer")
            return Consumer(service)

        def make_service():
            built.append("service")
            return OtherService("dep")

        # Registered dependant-first on purpose.
        context.register_component("consumer", make_consumer, Consumer, requires=(OtherService,))
        context.register_component("service", make_service, OtherService)
        context.seal()
        assert built == ["service", "consumer"]
        assert context.get(Consumer).service.label == "dep"

    def test_many_injects_ordered_list(self, context):
        context.register_component("b", lambda: Service("b"), Service, order=2)
        context.register_component("a", lambda: Service("a"), Service, order=1)
        context.register_component(
            "consumer",
            lambda services: Consumer(None, services),
            Consumer,
            requires=(Many(Service),),
        )
        context.seal()
        assert _labels(context.get(Consumer).services) == ["a", "b"]

    def test_many_with_no_providers_injects_empty_list(self, context):
        context.register_component(
            "consumer", lambda services: Consumer(None, services), Consumer, requires=(Many(Service),)
        )
        context.seal()
        assert context.get(Consumer).services == []

    def test_inactive_providers_not_injected(self, context):
        context.register_component("war", lambda: Service("war"), Service, condition=OnPackaging("war"))
        context.register_component("jar", lambda: Service("jar"), Service, condition=OnPackaging("jar"))
        context.register_component("consumer", Consumer, Consumer, requires=(Service,))
        context.seal()
        assert context.get(Consumer).service.label == "jar"

    def test_missing_dependency_raises_before_any_factory(self, context):
        built: list[str] = []
        context.register_component("first", lambda: built.append("first") or Service("first"), Service)
        context.register_component("consumer", Consumer, Consumer, requires=(OtherService,))
        with pytest.raises(ConfigurationError, match="requires OtherService"):
            context.seal()
        assert built == []

    def test_ambiguous_dependency_raises_before_any_factory(self, context):
        built: list[str] = []
        context.register_component("a", lambda: built.append("a") or Service("a"), Service)
        context.register_component("b", lambda: built.append("b") or Service("b"), Service)
        context.register_component("consumer", Consumer, Consumer, requires=(Service,))
        with pytest.raises(ConfigurationError, match="requires a single Service"):
            context.seal()
        assert built == []

    def test_undeclared_lookup_from_factory_rejected(self, context):
        context.register_component("sneaky", lambda: Consumer(context.get(OtherService)), Consumer)
        context.register_component("service", lambda: OtherService("late"), OtherService)
        with pytest.raises(ConfigurationError, match="not constructed yet"):
            context.seal()


class TestCycles:
    def test_cycle_detected_before_any_factory(self, context):
        built: list[str] = []

        class A:
            pass

        class B:
            pass

        context.register_component("a", lambda b: built.append("a") or A(), A, requires=(B,))
        context.register_component("b", lambda a: built.append("b") or B(), B, requires=(A,))
        with pytest.raises(ConfigurationError, match="Dependency cycle") as exc_info:
            context.seal()
        assert "'a'" in str(exc_info.value)
        assert "'b'" in str(exc_info.value)
        assert built == []

    def test_cycle_through_many_detected(self, context):
        context.register_component(
            "consumer", lambda services: OtherService("c"), OtherService, requires=(Many(Service),)
        )
        with pytest.raises(ConfigurationError, match="Dependency cycle"):
            context.seal()

    def test_inactive_component_does_not_form_cycle(self, context):
        class A:
            pass

        context.register_component("a", lambda: A(), A)
        context.register_component(
            "ghost", lambda a: Service("ghost"), Service, requires=(A,), condition=OnPackaging("war")
        )
        context.seal()
        assert context.get_all(Service) == []


class TestUniqueKinds:
    def test_two_providers_of_same_unique_type_rejected(self, context):
        context.require_unique(Service)
        context.register_component("a", lambda: Service("a"), Service)
        context.register_component("b", lambda: Service("b"), Service)
        with pytest.raises(ConfigurationError, match="Ambiguous Service"):
            context.seal()

    def test_distinct_concrete_types_allowed(self, context):
        context.require_unique(Service)
        context.register_component("a", lambda: Service("a"), Service)
        context.register_component("b", lambda: OtherService("b"), OtherService)
        context.seal()
        assert context.get(OtherService).label == "b"

    def test_inactive_duplicates_allowed(self, context):
        context.require_unique(Service)
        context.register_component("a", lambda: Service("a"), Service)
        context.register_component("b", lambda: Service("b"), Service, condition=OnPackaging("war"))
        context.seal()
        assert context.get(Service).label == "a"


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_lookup_before_seal_rejected(self, context):
        with pytest.raises(ContextStateError, match="context is open"):
            context.get(Service)

    def test_register_after_seal_rejected(self, context):
        context.seal()
        with pytest.raises(ContextStateError):
            context.register_component("late", Service, Service)

    def test_seal_twice_rejected(self, context):
        context.seal()
        with pytest.raises(ContextStateError):
            context.seal()

    def test_lookup_after_dispose_rejected(self, context):
        context.seal()
        context.dispose()
        assert context.state is ContextState.DISPOSED
        with pytest.raises(ContextStateError, match="disposed"):
            context.get_all(Service)

    def test_dispose_closes_in_reverse_construction_order(self, context):
        closed: list[str] = []
        context.register_component("first", lambda: Closeable("first", closed), Closeable)
        context.register_component("second", lambda: Closeable("second", closed), Closeable)
        context.register_component("third", lambda: Closeable("third", closed), Closeable)
        context.seal()
        context.dispose()
        assert closed == ["third", "second", "first"]

    def test_dispose_is_idempotent(self, context):
        closed: list[str] = []
        context.register_component("only", lambda: Closeable("only", closed), Closeable)
        context.seal()
        context.dispose()
        context.dispose()
        assert closed == ["only"]

    def test_instances_not_owned_are_left_open(self, context):
        closed: list[str] = []
        context.register_instance(Closeable("shared", closed), name="shared", owned=False)
        context.register_instance(Service("local"))
        context.register_component("owned", lambda: Closeable("owned", closed), Closeable)
        context.seal()
        context.dispose()
        assert closed == ["owned"]

    def test_dispose_unsealed_context(self, context):
        context.register_component("only", Service, Service)
        context.dispose()
        assert context.state is ContextState.DISPOSED

    def test_disposal_errors_collected_not_raised(self, context):
        closed: list[str] = []

        class Broken:
            def close(self):
                raise RuntimeError("boom")

        context.register_component("ok", lambda: Closeable("ok", closed), Closeable)
        context.register_component("broken", Broken, Broken)
        context.seal()
        context.dispose()
        assert closed == ["ok"]
        assert len(context.disposal_errors) == 1
        assert str(context.disposal_errors[0]) == "boom"

    def test_construction_failure_disposes_constructed_components(self, context):
        closed: list[str] = []

        def explode():
            raise RuntimeError("factory failed")

        context.register_component("first", lambda: Closeable("first", closed), Closeable)
        context.register_component("second", lambda: Closeable("second", closed), Closeable)
        context.register_component("broken", explode, Service)
        with pytest.raises(RuntimeError, match="factory failed"):
            context.seal()
        assert closed == ["second", "first"]
        assert context.state is ContextState.DISPOSED

    def test_context_manager_disposes(self, resolved_gradle):
        closed: list[str] = []
        with GenerationContext(resolved_gradle) as context:
            context.register_component("only", lambda: Closeable("only", closed), Closeable)
            context.seal()
        assert closed == ["only"]


class TestComponentDefinition:
    def test_defaults(self):
        definition = ComponentDefinition(name="x", factory=Service, provides=Service)
        assert definition.requires == ()
        assert definition.order is None
        assert definition.owned is True
        assert definition.condition.matches(None)
