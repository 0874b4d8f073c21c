"""Pipeline stages for bleedmill.

Each stage module registers itself on import with @register_transform.

Usage:
    from bleedmill.transforms import build_transforms
    from bleedmill.options import ProcessingOptions

    for stage in build_transforms(ProcessingOptions(rotation_angle=90)):
        image = stage.apply(image)

Plain function exports are available too:
    from bleedmill.transforms import add_bleed, resize_image, rotate_image
"""

# Import all stage modules to trigger registration
from bleedmill.transforms import (
    bleed,
    flip,
    resize,
    rotate,
)

# Core exports
from bleedmill.transforms.base import BaseTransform
from bleedmill.transforms.registry import (
    TransformRegistry,
    build_transforms,
    get_transform,
    list_transforms,
    register_transform,
)

# Stage functions
from bleedmill.transforms.bleed import BleedTransform, add_bleed, bleed_index_map
from bleedmill.transforms.flip import FlipTransform, flip_image
from bleedmill.transforms.resize import ResizeTransform, compute_resize_dimensions, resize_image
from bleedmill.transforms.rotate import RotateTransform, rotate_image

__all__ = [
    # Core classes
    "BaseTransform",
    "TransformRegistry",
    # Registry functions
    "register_transform",
    "get_transform",
    "list_transforms",
    "build_transforms",
    # Stages
    "ResizeTransform",
    "FlipTransform",
    "BleedTransform",
    "RotateTransform",
    # Stage functions
    "compute_resize_dimensions",
    "resize_image",
    "flip_image",
    "add_bleed",
    "bleed_index_map",
    "rotate_image",
]
