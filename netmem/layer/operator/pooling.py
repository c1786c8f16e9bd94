from typing import List, Optional, TYPE_CHECKING

from netmem.common import bytes_per_element, render_vector
from netmem.layer.backend import Backend
from netmem.layer.errors import InvalidLayerSpec, ShapeCollapse, StrideMismatch
from netmem.layer.layer_spec import LayerConfig, LayerSpec
from netmem.layer.operator.layer_operator import LayerOperator, check_fan_out, get_spatial_rank
from netmem.layer.spatial_parameters import SpatialParameters, normalize_spatial_parameters
from netmem.layer.tensor import Tensor, TensorShape
import netmem.layer.layer_keys as layer_keys

if TYPE_CHECKING:
    from netmem.layer.layer import Layer


class Pooling(LayerOperator):
    '''
    Max or average pooling. Channels are kept, the spatial extents shrink
    like a convolution without dilation.
    '''

    _default_config: LayerConfig = {
        layer_keys.pool: layer_keys.pool_max,
    }

    moves_inputs_to_backend = True

    def normalize_parameters(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
    ) -> Optional[SpatialParameters]:
        method = spec[layer_keys.pool]
        if method not in (layer_keys.pool_max, layer_keys.pool_average):
            raise InvalidLayerSpec(f'Unsupported pooling method "{method}".',
                                   spec.name)
        return normalize_spatial_parameters(spec, get_spatial_rank(spec, inputs))

    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        assert parameters is not None
        check_fan_out(spec, inputs)

        shapes = []
        for input in inputs[:len(spec.outputs)]:
            if len(input.spatial_shape) != parameters.num_dims:
                raise InvalidLayerSpec(
                    f'Input "{input.name}" has spatial rank {len(input.spatial_shape)}, expected {parameters.num_dims}.',
                    spec.name)

            output_spatial_shape = []
            for d, extent in enumerate(input.spatial_shape):
                numerator = extent + 2 * parameters.pad[d] - \
                    parameters.kernel_shape[d]
                if numerator < 0:
                    raise ShapeCollapse(
                        f'Pooling window {parameters.kernel_shape[d]} exceeds the padded extent {extent + 2 * parameters.pad[d]}.',
                        spec.name, d)
                stride = parameters.stride[d]
                if numerator % stride != 0:
                    raise StrideMismatch(
                        f'Stride {stride} does not evenly divide the pooled extent ({numerator}).',
                        spec.name, d)
                output_spatial_shape.append(numerator // stride + 1)

            shapes.append((input.batch_size, input.num_channels,
                           *output_spatial_shape))
        return shapes

    def memory_workspace(self, layer: 'Layer', backend: Backend) -> int:
        '''
        Without the optimized backend max pooling keeps an argmax mask of
        the output's size.
        '''
        if backend == Backend.FALLBACK and \
                layer.spec[layer_keys.pool] == layer_keys.pool_max:
            return bytes_per_element * layer.output.count()
        return 0

    def param_string(self, layer: 'Layer') -> str:
        parameters = layer.parameters
        return (f'pool: {layer.spec[layer_keys.pool]}'
                f' kernelShape: {render_vector(parameters.kernel_shape)}'
                f' pad: {render_vector(parameters.pad)}'
                f' stride: {render_vector(parameters.stride)}')

