from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from netmem.common import product, render_vector
from netmem.layer.errors import InvalidLayerSpec
from netmem.layer.layer_spec import LayerSpec
import netmem.layer.layer_keys as layer_keys

ParameterVector = Tuple[int, ...]

default_pad: int = 0
default_stride: int = 1
default_dilation: int = 1


def normalize_parameter(
    values: Sequence[int],
    num_dims: int,
    default: Optional[int] = None,  # fill value when no values are given, None if the parameter is required
    key: str = '',  # used when raising an exception
    layer_name: Optional[str] = None,  # used when raising an exception
) -> ParameterVector:
    '''
    Expands a per-dimension parameter list to exactly num_dims entries.

    The given values fill the leading positions and the last given value is
    repeated for the remaining ones. Values beyond num_dims are ignored.
    Without any values every position is set to default.
    '''
    if len(values) == 0:
        if default is None:
            raise InvalidLayerSpec(f'Required parameter "{key}" is missing.',
                                   layer_name)
        return (default, ) * num_dims

    given = tuple(values[:num_dims])
    return given + (given[-1], ) * (num_dims - len(given))


@dataclass(frozen=True)
class SpatialParameters():
    kernel_shape: ParameterVector
    pad: ParameterVector
    stride: ParameterVector
    dilation: ParameterVector

    @property
    def num_dims(self) -> int:
        return len(self.kernel_shape)

    @property
    def kernel_volume(self) -> int:
        return product(self.kernel_shape)

    def receptive_field(self, dim: int) -> int:
        '''
        Extent covered by one kernel application along dim after dilation.
        '''
        return self.dilation[dim] * (self.kernel_shape[dim] - 1) + 1

    def __str__(self) -> str:
        return (f'kernelShape: {render_vector(self.kernel_shape)}'
                f' pad: {render_vector(self.pad)}'
                f' stride: {render_vector(self.stride)}'
                f' dilation: {render_vector(self.dilation)}')


def normalize_spatial_parameters(
    spec: LayerSpec,
    num_dims: int,
) -> SpatialParameters:

    def normalize(
        key: str,
        default: Optional[int],
        minimum: int,  # smallest valid entry
    ) -> ParameterVector:
        vector = normalize_parameter(
            spec.get_list(key),
            num_dims,
            default,
            key,
            spec.name,
        )
        for d, value in enumerate(vector):
            if value < minimum:
                raise InvalidLayerSpec(
                    f'Parameter "{key}" must be at least {minimum}, got {value}.',
                    spec.name, d)
        return vector

    return SpatialParameters(
        normalize(layer_keys.kernel_size, None, 1),
        normalize(layer_keys.pad, default_pad, 0),
        normalize(layer_keys.stride, default_stride, 1),
        normalize(layer_keys.dilation, default_dilation, 1),
    )
