from typing import List, Optional, TYPE_CHECKING

from netmem.common import bytes_per_element, optimized_workspace_bytes
from netmem.layer.backend import Backend
from netmem.layer.errors import InvalidLayerSpec, ShapeCollapse
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator.convolution import Convolution, get_num_output
from netmem.layer.operator.layer_operator import check_fan_out
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor, TensorShape, spatial_start_axis

if TYPE_CHECKING:
    from netmem.layer.layer import Layer


class Deconvolution(Convolution):
    '''
    Transposed convolution (up-convolution). Shares parameter normalization,
    parameter memory and diagnostics with Convolution.
    '''

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
                output_extent = parameters.stride[d] * (extent - 1) + \
                    parameters.receptive_field(d) - 2 * parameters.pad[d]
                if output_extent <= 0:
                    raise ShapeCollapse(
                        f'Deconvolution of extent {extent} would collapse the output to an empty extent.',
                        spec.name, d)
                output_spatial_shape.append(output_extent)

            shapes.append((input.batch_size, num_output,
                           *output_spatial_shape))
        return shapes

    def memory_workspace(self, layer: 'Layer', backend: Backend) -> int:
        '''
        The fallback scatters #input pixels * #output channels *
        #kernel entries columns back into the output.
        '''
        if backend == Backend.OPTIMIZED:
            return optimized_workspace_bytes

        kernel_volume = layer.parameters.kernel_volume
        if kernel_volume == 1:
            return 0
        return bytes_per_element * layer.input.count(spatial_start_axis) * \
            layer.output.num_channels * kernel_volume
