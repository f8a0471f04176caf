"""Abstract base class for generation layers.

Each layer in the pipeline implements the GenerationLayer interface and
transforms the GenerationContext in some way - carving hubs, linking them,
adding features or refining the terrain.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import GenerationContext


class GenerationLayer(ABC):
    """Abstract base class for map generation layers.

    Layers are applied sequentially by the PipelineGenerator. Each layer
    receives a GenerationContext and modifies it in place.

    Subclasses must implement the apply() method to perform their specific
    generation logic.
    """

    @abstractmethod
    def apply(self, ctx: GenerationContext) -> None:
        """Apply this layer's generation logic to the context.

        This method should modify the context in place. It may:
        - Modify terrain (ctx.grid)
        - Add hubs, rooms and edges (ctx.hubs, ctx.rooms, ctx.edges)
        - Draw from a named stream (ctx.rng("map.<layer>"))

        Args:
            ctx: The generation context to modify.
        """
        raise NotImplementedError
