import logging
from typing import List, Optional, Sequence, Tuple

from netmem.layer.backend import Backend
from netmem.layer.errors import InvalidLayerSpec
from netmem.layer.layer_kind import LayerKind
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator import LayerOperator, get_operator
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor

logger = logging.getLogger(__name__)


class Layer():
    '''
    A constructed layer: its spec, the tensors it consumes, its normalized
    parameters and the tensors it produces.

    Layers are built by make_layer() and are immutable afterwards. Memory
    queries are pure and can be repeated freely.
    '''

    def __init__(
        self,
        spec: LayerSpec,
        inputs: Sequence[Tensor],
        parameters: Optional[SpatialParameters],
        outputs: Sequence[Tensor],
    ) -> None:
        self._spec: LayerSpec = spec
        self._inputs: Tuple[Tensor, ...] = tuple(inputs)
        self._parameters: Optional[SpatialParameters] = parameters
        self._outputs: Tuple[Tensor, ...] = tuple(outputs)

    def __repr__(self) -> str:
        return f'Layer({self.name!r}, {self.kind.name})'

    @property
    def spec(self) -> LayerSpec:
        return self._spec

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def kind(self) -> LayerKind:
        return self._spec.kind

    @property
    def operator(self) -> LayerOperator:
        return get_operator(self._spec.kind)

    @property
    def inputs(self) -> Tuple[Tensor, ...]:
        return self._inputs

    @property
    def outputs(self) -> Tuple[Tensor, ...]:
        return self._outputs

    @property
    def input(self) -> Tensor:
        '''
        The zeroth input. Useful shortcut for layers with only one input.
        '''
        return self._inputs[0]

    @property
    def output(self) -> Tensor:
        '''
        The zeroth output.
        '''
        return self._outputs[0]

    @property
    def parameters(self) -> Optional[SpatialParameters]:
        '''
        Normalized kernel shape, pad, stride and dilation, None for kinds
        without spatial parameters.
        '''
        return self._parameters

    def memory_parameters(self) -> int:
        '''
        Bytes of parameter memory. The same for every backend.
        '''
        return self.operator.memory_parameters(self)

    def memory_workspace(self, backend: Backend) -> int:
        '''
        Bytes of transient workspace memory on the given backend.
        '''
        return self.operator.memory_workspace(self, backend)

    def param_string(self) -> str:
        return self.operator.param_string(self)

    def describe(self) -> str:
        output_shapes = ', '.join(
            (f'{o.name}: {list(o.shape)}' for o in self._outputs))
        description = f'{self.name} ({self.kind.value}) -> [{output_shapes}]' \
            f' params: {self.memory_parameters()} B'
        param_string = self.param_string()
        if len(param_string) > 0:
            description += f' {param_string}'
        return description


def make_layer(
    spec: LayerSpec,
    inputs: Sequence[Tensor],  # already resolved input tensors, in spec order
) -> Layer:
    '''
    Builds a layer from its spec: normalizes the parameters, computes and
    validates the output shapes and, for operators that execute on the
    compute backend, marks the input tensors as resident.

    Raises a ShapeInferenceError if the spec is invalid for the given inputs.
    '''
    operator = get_operator(spec.kind)
    spec = operator.apply_defaults(spec)
    inputs = list(inputs)
    operator.check_inputs(spec, inputs)
    if len(spec.outputs) == 0:
        raise InvalidLayerSpec('No outputs declared.', spec.name)

    parameters = operator.normalize_parameters(spec, inputs)
    shapes = operator.compute_output_shapes(spec, inputs, parameters)
    outputs: List[Tensor] = [
        Tensor(name, shape, spec.name)
        for name, shape in zip(spec.outputs, shapes)
    ]

    if operator.moves_inputs_to_backend:
        for input in inputs:
            input.mark_resident()

    layer = Layer(spec, inputs, parameters, outputs)
    logger.debug('made layer %s', layer.describe())
    return layer
