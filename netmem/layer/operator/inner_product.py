from typing import List, Optional, TYPE_CHECKING

from netmem.common import bytes_per_element
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator.convolution import get_num_output
from netmem.layer.operator.layer_operator import LayerOperator, check_fan_out
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor, TensorShape, channel_axis

if TYPE_CHECKING:
    from netmem.layer.layer import Layer


class InnerProduct(LayerOperator):
    '''
    Fully connected layer over all non-batch axes.
    '''

    moves_inputs_to_backend = True

    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        check_fan_out(spec, inputs)
        num_output = get_num_output(spec)
        return [(input.batch_size, num_output)
                for input in inputs[:len(spec.outputs)]]

    def memory_parameters(self, layer: 'Layer') -> int:
        return bytes_per_element * layer.output.num_channels * \
            (layer.input.count(channel_axis) + 1)

    def param_string(self, layer: 'Layer') -> str:
        return f'num_output: {layer.output.num_channels}'
