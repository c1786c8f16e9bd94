import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import numpy
import pandas

from netmem.common import bytes_per_element
from netmem.layer.backend import Backend
from netmem.layer.errors import ShapeInferenceError
from netmem.layer.layer_kind import LayerKind
from netmem.layer.layer_spec import LayerSpec
from netmem.network.layer_graph import LayerGraph
import netmem.layer.layer_keys as layer_keys

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryPlanConfig():
    # keep a gradient buffer next to every data and parameter buffer
    include_gradients: bool = False


@dataclass(frozen=True)
class MemoryPlan():
    backend: Backend
    tensor_bytes: int
    parameter_bytes: int
    workspace_bytes: int

    @property
    def total_bytes(self) -> int:
        return self.tensor_bytes + self.parameter_bytes + self.workspace_bytes


def compute_memory_plan(
    graph: LayerGraph,
    backend: Backend,
    config: MemoryPlanConfig = MemoryPlanConfig(),
) -> MemoryPlan:
    '''
    Estimates the memory needed to run graph on backend.

    Tensors and parameters are persistent and add up. Workspace memory is
    transient and reused from layer to layer, so only the largest one counts.
    '''
    buffers_per_value = 2 if config.include_gradients else 1

    tensor_bytes = sum(
        (bytes_per_element * t.count() for t in graph.tensors))
    parameter_bytes = sum((l.memory_parameters() for l in graph.layers))
    workspace_bytes = max(
        (l.memory_workspace(backend) for l in graph.layers),
        default=0,
    )

    return MemoryPlan(
        backend,
        buffers_per_value * tensor_bytes,
        buffers_per_value * parameter_bytes,
        workspace_bytes,
    )


def summarize_layers(graph: LayerGraph) -> pandas.DataFrame:
    '''
    One row per layer with its output shapes and memory footprint.
    '''
    return pandas.DataFrame(
        [{
            'name': layer.name,
            'kind': layer.kind.value,
            'output_shapes': [list(o.shape) for o in layer.outputs],
            'parameter_bytes': layer.memory_parameters(),
            'workspace_bytes_optimized':
            layer.memory_workspace(Backend.OPTIMIZED),
            'workspace_bytes_fallback':
            layer.memory_workspace(Backend.FALLBACK),
        } for layer in graph.layers],
        columns=[
            'name',
            'kind',
            'output_shapes',
            'parameter_bytes',
            'workspace_bytes_optimized',
            'workspace_bytes_fallback',
        ],
    )


def with_input_shape(
    specs: Sequence[LayerSpec],
    input_name: str,  # name of the input layer to reshape
    shape: Sequence[int],
) -> List[LayerSpec]:
    '''
    Returns a copy of specs with the shape of the named input layer replaced.
    '''
    result = []
    found = False
    for spec in specs:
        if spec.name == input_name:
            if spec.kind != LayerKind.INPUT:
                raise ValueError(f'Layer "{input_name}" is not an input layer.')
            config = dict(spec.config)
            config[layer_keys.shape] = list(shape)
            spec = replace(spec, config=config)
            found = True
        result.append(spec)

    if not found:
        raise KeyError(f'Unknown input layer "{input_name}".')
    return result


def find_largest_tile(
    specs: Sequence[LayerSpec],
    input_name: str,  # name of the input layer whose spatial extents are varied
    base_shape: Sequence[int],  # batch size and channels of the input, spatial extents are replaced
    budget_bytes: int,
    backend: Backend,
    minimum: int = 1,
    maximum: int = 1024,
    step: int = 1,
    config: MemoryPlanConfig = MemoryPlanConfig(),
) -> Optional[Tuple[int, MemoryPlan]]:
    '''
    Finds the largest input tile extent, the same in every spatial
    dimension, for which the network is valid and fits into budget_bytes.

    Extents for which the network can not be built (e.g. because a stride
    does not divide an intermediate extent) are skipped. Returns the extent
    and its memory plan, or None if no candidate fits.
    '''
    if step < 1:
        raise ValueError(f'Step must be positive, got {step}.')
    if minimum < 1 or maximum < minimum:
        raise ValueError(
            f'Invalid extent range [{minimum}, {maximum}].')

    num_spatial_dims = len(base_shape) - 2
    for extent in numpy.arange(minimum, maximum + 1, step)[::-1]:
        extent = int(extent)
        shape = (*base_shape[:2], *((extent, ) * num_spatial_dims))
        try:
            graph = LayerGraph(with_input_shape(specs, input_name, shape))
        except ShapeInferenceError as e:
            logger.debug('tile extent %d is invalid: %s', extent, e)
            continue

        plan = compute_memory_plan(graph, backend, config)
        if plan.total_bytes <= budget_bytes:
            logger.info('largest tile extent %d needs %d of %d bytes', extent,
                        plan.total_bytes, budget_bytes)
            return extent, plan
        logger.debug('tile extent %d needs %d bytes, over budget', extent,
                     plan.total_bytes)

    logger.info('no tile extent in [%d, %d] fits into %d bytes', minimum,
                maximum, budget_bytes)
    return None
