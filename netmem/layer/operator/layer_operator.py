from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

from netmem.layer.backend import Backend
from netmem.layer.errors import InvalidLayerSpec
from netmem.layer.layer_spec import LayerConfig, LayerSpec, empty_config
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor, TensorShape, spatial_rank

if TYPE_CHECKING:
    from netmem.layer.layer import Layer


class LayerOperator(ABC):
    '''
    Shape and memory inference rules of one LayerKind.

    Operators are stateless. Everything a query needs is read from the Layer
    it is given, so one instance serves every layer of its kind.
    '''

    _default_config: LayerConfig = empty_config

    # operands must be placed on the compute backend before execution
    moves_inputs_to_backend: bool = False

    # minimum number of input tensors
    min_inputs: int = 1

    def apply_defaults(self, spec: LayerSpec) -> LayerSpec:
        if len(self._default_config) == 0:
            return spec
        return spec.with_defaults(self._default_config)

    def check_inputs(self, spec: LayerSpec, inputs: List[Tensor]) -> None:
        if len(inputs) < self.min_inputs:
            raise InvalidLayerSpec(
                f'Expected at least {self.min_inputs} inputs, got {len(inputs)}.',
                spec.name)

    def normalize_parameters(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
    ) -> Optional[SpatialParameters]:
        '''
        Normalized per-dimension parameters, None for kinds without any.
        '''
        return None

    @abstractmethod
    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        '''
        One shape per declared output of spec. Raises a ShapeInferenceError
        if any output would be invalid.
        '''
        pass

    def memory_parameters(self, layer: 'Layer') -> int:
        '''
        Bytes of persistent parameter memory.
        '''
        return 0

    def memory_workspace(self, layer: 'Layer', backend: Backend) -> int:
        '''
        Bytes of transient scratch memory needed to execute the layer on the
        given backend.
        '''
        return 0

    def param_string(self, layer: 'Layer') -> str:
        return ''


def get_spatial_rank(spec: LayerSpec, inputs: List[Tensor]) -> int:
    num_dims = spatial_rank(inputs[0].shape)
    if num_dims < 1:
        raise InvalidLayerSpec(
            f'Input "{inputs[0].name}" of shape {inputs[0].shape} has no spatial dimensions.',
            spec.name)
    return num_dims


def check_fan_out(spec: LayerSpec, inputs: List[Tensor]) -> None:
    '''
    Layers computing output i from input i need an input for every output.
    '''
    if len(spec.outputs) > len(inputs):
        raise InvalidLayerSpec(
            f'{len(spec.outputs)} outputs declared but only {len(inputs)} inputs given.',
            spec.name)
