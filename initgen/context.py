"""Request-scoped component registry.

A ``GenerationContext`` is created for one generation request around the
request's ``ResolvedProjectDescription``.  It goes through three states:

1. **open** -- candidates are registered with ``register`` (a factory, the
   type it provides, an activation condition and the types it depends on).
2. **sealed** -- ``seal`` evaluates every condition once, validates the
   dependency graph of the active candidates and constructs them in
   dependency order.  Lookups (``get``/``get_all``) are only valid here.
3. **disposed** -- ``dispose`` closes every constructed component in reverse
   construction order.  Nothing may be looked up afterwards.

Dependencies are resolved by type.  A plain type in ``requires`` injects the
single active component assignable to it; ``Many(T)`` injects the ordered
list of every active component assignable to ``T``.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, TypeVar, Union

from .conditions import ALWAYS, Condition
from .description import ResolvedProjectDescription
from .errors import ComponentNotFoundError, ConfigurationError, ContextStateError
from .log import get_logger
from .ordering import Order, order_key, order_of

T = TypeVar("T")

logger = get_logger("context")


# ---------------------------------------------------------------------------
# Registrations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Many:
    """Dependency marker injecting every active component of ``type``."""

    type: type


Requirement = Union[type, Many]


@dataclass(frozen=True)
class ComponentDefinition:
    """A candidate component: how to build it and when it is active.

    Attributes:
        name: Identifier used in logs and error messages.
        factory: Callable invoked with one argument per entry in ``requires``.
        provides: Type the component is looked up under.  Subclass lookups
            match, so a ``GradleBuild`` is found by ``get(Build)``.
        condition: Activation predicate over the resolved description.
        requires: Declared dependencies, each a type or ``Many(type)``.
        order: Explicit order; when ``None`` the instance's ``order``
            attribute (if any) is used.
        owned: Whether the context closes the instance on disposal.  False
            for instances whose lifetime the caller manages.
    """

    name: str
    factory: Callable[..., Any]
    provides: type
    condition: Condition = ALWAYS
    requires: tuple[Requirement, ...] = ()
    order: Order = None
    owned: bool = True


class ContextState(str, Enum):
    OPEN = "open"
    SEALED = "sealed"
    DISPOSED = "disposed"


@dataclass
class _Entry:
    index: int
    definition: ComponentDefinition
    active: bool = False
    instance: Any = None
    constructed: bool = False


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class GenerationContext:
    """Registry and lifecycle owner of the components of one request."""

    def __init__(self, description: ResolvedProjectDescription) -> None:
        self.description = description
        self.state = ContextState.OPEN
        self.disposal_errors: list[BaseException] = []
        self._entries: list[_Entry] = []
        self._constructed: list[_Entry] = []
        self._unique_kinds: list[type] = []

    # -- Registration ------------------------------------------------------

    def register(self, definition: ComponentDefinition) -> None:
        """Add a candidate component."""
        self._require_state(ContextState.OPEN, "register components")
        self._entries.append(_Entry(index=len(self._entries), definition=definition))

    def register_all(self, definitions: Iterable[ComponentDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    def register_component(
        self,
        name: str,
        factory: Callable[..., Any],
        provides: type,
        *,
        condition: Condition = ALWAYS,
        requires: Iterable[Requirement] = (),
        order: Order = None,
    ) -> None:
        """Shorthand for ``register(ComponentDefinition(...))``."""
        self.register(
            ComponentDefinition(
                name=name,
                factory=factory,
                provides=provides,
                condition=condition,
                requires=tuple(requires),
                order=order,
            )
        )

    def register_instance(
        self,
        instance: Any,
        provides: type | None = None,
        *,
        name: str | None = None,
        owned: bool = True,
    ) -> None:
        """Register an already built, unconditional component.

        Pass ``owned=False`` for an instance that outlives the request; it is
        then never closed by ``dispose``.
        """
        provided = provides or type(instance)
        self.register(
            ComponentDefinition(
                name=name or provided.__name__,
                factory=lambda: instance,
                provides=provided,
                owned=owned,
            )
        )

    def require_unique(self, kind: type) -> None:
        """Declare that at most one active component may provide *kind*.

        Checked per concrete provided type: two active ``GradleBuild``
        providers are ambiguous, a ``GradleBuild`` next to a ``MavenBuild`` is
        not.
        """
        self._require_state(ContextState.OPEN, "declare unique kinds")
        if kind not in self._unique_kinds:
            self._unique_kinds.append(kind)

    # -- Sealing -----------------------------------------------------------

    def seal(self) -> None:
        """Activate matching candidates and construct them in dependency order.

        Raises:
            ConfigurationError: On ambiguous, missing or cyclic dependencies.
                Raised before any factory runs.
        """
        self._require_state(ContextState.OPEN, "seal")

        for entry in self._entries:
            entry.active = bool(entry.definition.condition.matches(self.description))
            logger.debug(
                "Component %s is %s",
                entry.definition.name,
                "active" if entry.active else "inactive",
            )

        active = [entry for entry in self._entries if entry.active]
        self._check_unique_kinds(active)
        dependencies = {entry.index: self._dependencies_of(entry, active) for entry in active}
        construction_order = _construction_order(active, dependencies)

        # Lookups performed by factories (through injection) are only valid
        # once the context counts as sealed.
        self.state = ContextState.SEALED
        try:
            for entry in construction_order:
                self._construct(entry)
        except BaseException:
            self._dispose_constructed()
            self.state = ContextState.DISPOSED
            raise
        logger.debug(
            "Sealed context with %d active of %d candidate components",
            len(active),
            len(self._entries),
        )

    def _check_unique_kinds(self, active: list[_Entry]) -> None:
        for kind in self._unique_kinds:
            seen: dict[type, _Entry] = {}
            for entry in active:
                provided = entry.definition.provides
                if not issubclass(provided, kind):
                    continue
                if provided in seen:
                    raise ConfigurationError(
                        f"Ambiguous {kind.__name__}: both {seen[provided].definition.name!r} "
                        f"and {entry.definition.name!r} provide {provided.__name__}"
                    )
                seen[provided] = entry

    def _dependencies_of(self, entry: _Entry, active: list[_Entry]) -> list[_Entry]:
        result: list[_Entry] = []
        for requirement in entry.definition.requires:
            if isinstance(requirement, Many):
                result.extend(_providers(requirement.type, active))
                continue
            providers = _providers(requirement, active)
            if not providers:
                raise ConfigurationError(
                    f"Component {entry.definition.name!r} requires "
                    f"{requirement.__name__} but no active component provides it"
                )
            if len(providers) > 1:
                names = ", ".join(repr(p.definition.name) for p in providers)
                raise ConfigurationError(
                    f"Component {entry.definition.name!r} requires a single "
                    f"{requirement.__name__} but several are active: {names}"
                )
            result.extend(providers)
        return result

    def _construct(self, entry: _Entry) -> None:
        definition = entry.definition
        arguments = [self._resolve(requirement) for requirement in definition.requires]
        logger.debug("Constructing %s", definition.name)
        entry.instance = definition.factory(*arguments)
        entry.constructed = True
        self._constructed.append(entry)

    def _resolve(self, requirement: Requirement) -> Any:
        if isinstance(requirement, Many):
            return self.get_all(requirement.type)
        return self.get(requirement)

    # -- Lookup ------------------------------------------------------------

    def get(self, component_type: type[T]) -> T:
        """Return the single active component assignable to *component_type*.

        Raises:
            ComponentNotFoundError: If none is active.
            ConfigurationError: If several are active.
        """
        self._require_state(ContextState.SEALED, "look up components")
        matches = self._matching(component_type)
        if not matches:
            raise ComponentNotFoundError(component_type)
        if len(matches) > 1:
            names = ", ".join(repr(entry.definition.name) for entry in matches)
            raise ConfigurationError(
                f"Expected a single {component_type.__name__} but found {len(matches)}: {names}"
            )
        return matches[0].instance

    def get_optional(self, component_type: type[T]) -> T | None:
        """Like ``get`` but return ``None`` when no component is active."""
        try:
            return self.get(component_type)
        except ComponentNotFoundError:
            return None

    def get_all(self, component_type: type[T]) -> list[T]:
        """Return every active component assignable to *component_type*, in order."""
        self._require_state(ContextState.SEALED, "look up components")
        matches = self._matching(component_type)
        matches.sort(key=lambda entry: order_key(_effective_order(entry), entry.index))
        return [entry.instance for entry in matches]

    def _matching(self, component_type: type) -> list[_Entry]:
        found = [
            entry for entry in self._entries
            if entry.active and issubclass(entry.definition.provides, component_type)
        ]
        missing = [entry for entry in found if not entry.constructed]
        if missing:
            # A factory asked for something it did not declare in ``requires``.
            raise ConfigurationError(
                f"{missing[0].definition.name!r} is not constructed yet; declare it as a dependency"
            )
        return found

    # -- Disposal ----------------------------------------------------------

    def dispose(self) -> None:
        """Close every constructed component, most recently built first.

        Safe to call more than once; only the first call does anything.
        Errors raised by ``close`` are collected in ``disposal_errors`` and
        logged, never raised.
        """
        if self.state is ContextState.DISPOSED:
            return
        self._dispose_constructed()
        self.state = ContextState.DISPOSED

    def _dispose_constructed(self) -> None:
        while self._constructed:
            entry = self._constructed.pop()
            if not entry.definition.owned:
                continue
            close = getattr(entry.instance, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception as exc:
                self.disposal_errors.append(exc)
                logger.error("Failed to dispose component %s: %s", entry.definition.name, exc)

    def __enter__(self) -> "GenerationContext":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    # -- Internals ---------------------------------------------------------

    def _require_state(self, expected: ContextState, action: str) -> None:
        if self.state is not expected:
            raise ContextStateError(
                f"Cannot {action}: context is {self.state.value}, expected {expected.value}"
            )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _providers(component_type: type, active: list[_Entry]) -> list[_Entry]:
    return [entry for entry in active if issubclass(entry.definition.provides, component_type)]


def _effective_order(entry: _Entry) -> Order:
    if entry.definition.order is not None:
        return entry.definition.order
    return order_of(entry.instance)


def _construction_order(
    active: list[_Entry], dependencies: dict[int, list[_Entry]]
) -> list[_Entry]:
    """Topologically sort *active* so dependencies are built first.

    Kahn's algorithm; among ready components the earliest registered goes
    first.  Components left over once no component is ready form a cycle.
    """
    by_index = {entry.index: entry for entry in active}
    in_degree = {entry.index: 0 for entry in active}
    dependents: dict[int, list[int]] = {entry.index: [] for entry in active}
    for index, deps in dependencies.items():
        for dep in {d.index for d in deps}:
            dependents[dep].append(index)
            in_degree[index] += 1

    ready = [index for index, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    result: list[_Entry] = []
    while ready:
        current = heapq.heappop(ready)
        result.append(by_index[current])
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(result) != len(active):
        remaining = sorted(index for index, degree in in_degree.items() if degree > 0)
        names = ", ".join(repr(by_index[index].definition.name) for index in remaining)
        raise ConfigurationError(f"Dependency cycle among components: {names}")
    return result
