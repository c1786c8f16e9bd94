from typing import List, Optional

from netmem.layer.errors import InvalidLayerSpec, ShapeMismatch
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.operator.layer_operator import LayerOperator
from netmem.layer.spatial_parameters import SpatialParameters
from netmem.layer.tensor import Tensor, TensorShape


class ConcatAndCrop(LayerOperator):
    '''
    Concatenates inputs along the channel axis after center-cropping each of
    them to the spatial shape of the last input, as in the U-Net skip
    connections.
    '''

    min_inputs = 2

    def compute_output_shapes(
        self,
        spec: LayerSpec,
        inputs: List[Tensor],
        parameters: Optional[SpatialParameters],
    ) -> List[TensorShape]:
        target = inputs[-1]
        target_spatial_shape = target.spatial_shape
        for input in inputs[:-1]:
            if input.batch_size != target.batch_size:
                raise ShapeMismatch(
                    f'Input "{input.name}" has batch size {input.batch_size}, expected {target.batch_size}.',
                    spec.name)
            if len(input.spatial_shape) != len(target_spatial_shape):
                raise InvalidLayerSpec(
                    f'Input "{input.name}" has spatial rank {len(input.spatial_shape)}, expected {len(target_spatial_shape)}.',
                    spec.name)
            for d, (extent, target_extent) in enumerate(
                    zip(input.spatial_shape, target_spatial_shape)):
                if extent < target_extent:
                    raise ShapeMismatch(
                        f'Can not crop extent {extent} of input "{input.name}" to {target_extent}.',
                        spec.name, d)

        num_channels = sum((i.num_channels for i in inputs))
        shape = (target.batch_size, num_channels, *target_spatial_shape)
        return [shape] * len(spec.outputs)
