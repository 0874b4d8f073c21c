"""Transform registry for pipeline stage dispatch."""

from typing import TYPE_CHECKING, Callable

from bleedmill.constants import PIPELINE_ORDER
from bleedmill.exceptions import TransformError

if TYPE_CHECKING:
    from bleedmill.options import ProcessingOptions
    from bleedmill.transforms.base import BaseTransform


class TransformRegistry:
    """Registry of pipeline stage classes, keyed by stage name.

    Usage:
        @register_transform("rotate")
        class RotateTransform(BaseTransform):
            ...

        handler_class = TransformRegistry.get("rotate")
        names = TransformRegistry.all_names()
    """

    _handlers: dict[str, type["BaseTransform"]] = {}

    @classmethod
    def register(cls, name: str, handler_class: type["BaseTransform"]) -> type["BaseTransform"]:
        """Register a stage class under a name."""
        handler_class.name = name
        cls._handlers[name] = handler_class
        return handler_class

    @classmethod
    def get(cls, name: str) -> type["BaseTransform"]:
        """
        Get a stage class by name.

        Raises:
            TransformError: If no stage is registered for the name
        """
        if name not in cls._handlers:
            available = ", ".join(sorted(cls._handlers.keys()))
            raise TransformError(
                f"Unknown transform type: '{name}'. Available: {available}",
                context={"transform_type": name},
            )
        return cls._handlers[name]

    @classmethod
    def all_names(cls) -> list[str]:
        """Get all registered stage names, sorted."""
        return sorted(cls._handlers.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._handlers


def register_transform(name: str) -> Callable[[type["BaseTransform"]], type["BaseTransform"]]:
    """Class decorator registering a stage under `name`."""

    def decorator(handler_class: type["BaseTransform"]) -> type["BaseTransform"]:
        return TransformRegistry.register(name, handler_class)

    return decorator


def get_transform(name: str) -> type["BaseTransform"]:
    """Look up a registered stage class by name."""
    return TransformRegistry.get(name)


def list_transforms() -> list[str]:
    """List registered stage names."""
    return TransformRegistry.all_names()


def build_transforms(options: "ProcessingOptions") -> list["BaseTransform"]:
    """
    Build the stages requested by `options`, in pipeline order.

    The order is fixed (resize, flip, bleed, rotate) regardless of the
    order the stages were registered in.
    """
    stages = []
    for name in PIPELINE_ORDER:
        handler_class = get_transform(name)
        if handler_class.is_triggered(options):
            stages.append(handler_class.from_options(options))
    return stages
