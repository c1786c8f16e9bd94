from typing import List, Optional, TYPE_CHECKING

from netmem.layer.errors import InvalidLayerSpec
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator.layer_operator import LayerOperator
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor, TensorShape
import netmem.layer.layer_keys as layer_keys

if TYPE_CHECKING:
    from netmem.layer.layer import Layer


class Input(LayerOperator):
    '''
    Graph input of a declared shape. Every declared output gets that shape.
    '''

    min_inputs = 0

    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        shape = spec.get_list(layer_keys.shape)
        if len(shape) == 0:
            raise InvalidLayerSpec(
                f'Required parameter "{layer_keys.shape}" is missing.',
                spec.name)
        for d, extent in enumerate(shape):
            if extent <= 0:
                raise InvalidLayerSpec(f'Non-positive extent {extent}.',
                                       spec.name, d)
        return [shape] * len(spec.outputs)

    def param_string(self, layer: 'Layer') -> str:
        return f'shape: {list(layer.spec.get_list(layer_keys.shape))}'
