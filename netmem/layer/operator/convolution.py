from typing import List, Optional, TYPE_CHECKING

from netmem.common import bytes_per_element, optimized_workspace_bytes
from netmem.layer.backend import Backend
from netmem.layer.errors import InvalidLayerSpec, ShapeCollapse, StrideMismatch
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator.layer_operator import LayerOperator, check_fan_out, get_spatial_rank
from netmem.layer.spatial_parameters import SpatialParameters, normalize_spatial_parameters
from netmem.layer.tensor import Tensor, TensorShape, spatial_start_axis
import netmem.layer.layer_keys as layer_keys

if TYPE_CHECKING:
    from netmem.layer.layer import Layer


class Convolution(LayerOperator):
    '''
    N-dimensional convolution with a bias term per output channel.

    Output i is computed from input i, all outputs share the kernel.
    '''

    moves_inputs_to_backend = True

    def normalize_parameters(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
    ) -> Optional[SpatialParameters]:
        return normalize_spatial_parameters(spec, get_spatial_rank(spec, inputs))

    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        assert parameters is not None
        check_fan_out(spec, inputs)
        num_output = get_num_output(spec)

        shapes = []
        for input in inputs[:len(spec.outputs)]:
            input_spatial_shape = input.spatial_shape
            if len(input_spatial_shape) != parameters.num_dims:
                raise InvalidLayerSpec(
                    f'Input "{input.name}" has spatial rank {len(input_spatial_shape)}, expected {parameters.num_dims}.',
                    spec.name)

            output_spatial_shape = []
            for d, extent in enumerate(input_spatial_shape):
                numerator = extent + 2 * parameters.pad[d] - \
                    parameters.receptive_field(d)
                if numerator <= 0:
                    raise ShapeCollapse(
                        f'Convolution of extent {extent} would collapse the output to an empty extent.',
                        spec.name, d)
                stride = parameters.stride[d]
                if numerator % stride != 0:
                    raise StrideMismatch(
                        f'Stride {stride} does not evenly divide the dilated receptive field ({numerator}).',
                        spec.name, d)
                output_spatial_shape.append(numerator // stride + 1)

            shapes.append((input.batch_size, num_output,
                           *output_spatial_shape))
        return shapes

    def memory_parameters(self, layer: 'Layer') -> int:
        '''
        (#input channels * #kernel entries + 1) * #output channels weights
        '''
        return bytes_per_element * layer.output.num_channels * \
            (layer.input.num_channels * layer.parameters.kernel_volume + 1)

    def memory_workspace(self, layer: 'Layer', backend: Backend) -> int:
        '''
        The optimized backend allocates a bounded workspace pool. The
        fallback expands input patches into a buffer of
        #output pixels * #input channels * #kernel entries, which a 1x1
        kernel does not need.
        '''
        if backend == Backend.OPTIMIZED:
            return optimized_workspace_bytes

        kernel_volume = layer.parameters.kernel_volume
        if kernel_volume == 1:
            return 0
        return bytes_per_element * layer.output.count(spatial_start_axis) * \
            layer.input.num_channels * kernel_volume

    def param_string(self, layer: 'Layer') -> str:
        return str(layer.parameters)


def get_num_output(spec: LayerSpec) -> int:
    if layer_keys.num_output not in spec:
        raise InvalidLayerSpec(
            f'Required parameter "{layer_keys.num_output}" is missing.',
            spec.name)
    return int(spec[layer_keys.num_output])
