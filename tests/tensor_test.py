from netmem.layer import Tensor
from netmem.layer.tensor import count, spatial_rank


def test_tensor_accessors():
    tensor = Tensor('data', [2, 3, 4, 5], 'input')
    assert tensor.shape == (2, 3, 4, 5)
    assert tensor.batch_size == 2
    assert tensor.num_channels == 3
    assert tensor.spatial_shape == (4, 5)
    assert tensor.count() == 120
    assert tensor.count(2) == 20
    assert tensor.producer == 'input'


def test_residency_is_one_way_and_idempotent():
    tensor = Tensor('data', (1, 1, 4))
    assert not tensor.on_backend
    tensor.mark_resident()
    assert tensor.on_backend
    tensor.mark_resident()
    assert tensor.on_backend


def test_shape_helpers():
    assert spatial_rank((1, 3)) == 0
    assert spatial_rank((1, 3, 8, 8, 8)) == 3
    assert count((1, 3, 8, 8), 4) == 1
