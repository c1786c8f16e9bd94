from typing import Optional, Sequence, Tuple

from netmem.common import product

TensorShape = Tuple[int, ...]

batch_axis: int = 0
channel_axis: int = 1
spatial_start_axis: int = 2


def batch_size(shape: TensorShape) -> int:
    return shape[batch_axis]


def num_channels(shape: TensorShape) -> int:
    return shape[channel_axis]


def spatial_shape(shape: TensorShape) -> TensorShape:
    return tuple(shape[spatial_start_axis:])


def spatial_rank(shape: TensorShape) -> int:
    return max(0, len(shape) - spatial_start_axis)


def count(shape: Sequence[int], start: int = 0) -> int:
    '''
    Number of elements spanned by the axes starting at start.
    count(shape, 2) is the number of spatial elements per channel.
    '''
    return product(shape[start:])


class Tensor():
    '''
    A named tensor produced by one layer and consumed by any number of others.

    The shape is fixed at construction. The only mutable state is the
    residency flag, which records that the tensor's data has been placed on
    the compute backend. It only ever transitions from off to on.
    '''

    def __init__(
        self,
        name: str,
        shape: Sequence[int],
        producer: Optional[str] = None,  # name of the producing layer, None for graph inputs
    ) -> None:
        self._name: str = name
        self._shape: TensorShape = tuple(int(e) for e in shape)
        self._producer: Optional[str] = producer
        self._on_backend: bool = False

    def __repr__(self) -> str:
        return f'Tensor({self._name!r}, {self._shape})'

    @property
    def name(self) -> str:
        return self._name

    @property
    def shape(self) -> TensorShape:
        return self._shape

    @property
    def producer(self) -> Optional[str]:
        return self._producer

    @property
    def on_backend(self) -> bool:
        return self._on_backend

    @property
    def batch_size(self) -> int:
        return batch_size(self._shape)

    @property
    def num_channels(self) -> int:
        return num_channels(self._shape)

    @property
    def spatial_shape(self) -> TensorShape:
        return spatial_shape(self._shape)

    def count(self, start: int = 0) -> int:
        return count(self._shape, start)

    def mark_resident(self) -> None:
        '''
        Marks this tensor as resident on the compute backend.
        Setting an already resident tensor again has no effect.
        '''
        self._on_backend = True
