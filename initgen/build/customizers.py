"""Build customizers and the chain that applies them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable

from ..log import get_logger
from ..ordering import Order
from .model import B, Build

logger = get_logger("build")


@dataclass(frozen=True)
class BuildCustomizer(Generic[B]):
    """A side-effect-only mutation of one build model kind.

    Attributes:
        kind: Build model class this customizer applies to (subclasses too).
        customize: The mutation.
        order: Explicit order; see ``initgen.ordering``.
        name: Label used in logs.
    """

    kind: type[B]
    customize: Callable[[B], None]
    order: Order = None
    name: str = ""

    def supports(self, build: Build) -> bool:
        return isinstance(build, self.kind)


def apply_customizers(customizers: Iterable[BuildCustomizer], build: B) -> B:
    """Apply every customizer supporting *build*, in the given order.

    The sequence is expected to be ordered already (as returned by
    ``GenerationContext.get_all``).  Each customizer runs exactly once,
    synchronously, against the same *build* instance.
    """
    for customizer in customizers:
        if not customizer.supports(build):
            continue
        logger.debug("Applying build customizer %s", customizer.name or customizer.customize)
        customizer.customize(build)
    return build
