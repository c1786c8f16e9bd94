from typing import List, Optional

from netmem.layer.errors import ShapeMismatch
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator.layer_operator import LayerOperator
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor, TensorShape


class ElementWise(LayerOperator):
    '''
    Shape preserving operations (activations, dropout, softmax, sums of
    equally shaped inputs). All inputs must share one shape.
    '''

    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        shape = inputs[0].shape
        for input in inputs[1:]:
            if input.shape != shape:
                raise ShapeMismatch(
                    f'Input "{input.name}" of shape {input.shape} differs from "{inputs[0].name}" of shape {shape}.',
                    spec.name)
        return [shape] * len(spec.outputs)
