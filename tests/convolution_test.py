import pytest

from netmem.layer import (
    Backend,
    InvalidLayerSpec,
    ShapeCollapse,
    StrideMismatch,
    Tensor,
    make_layer,
)
from tests.network_test_util import conv_spec

optimized_workspace = 3 * 8 * 1024 * 1024


def test_convolution_same_padding():
    data = Tensor('data', (1, 3, 32, 32))
    layer = make_layer(
        conv_spec('conv1', 8, [3, 3], pad=[1, 1], stride=[1, 1],
                  dilation=[1, 1]),
        [data],
    )

    assert layer.output.name == 'conv1'
    assert layer.output.shape == (1, 8, 32, 32)
    assert layer.output.producer == 'conv1'
    assert layer.memory_parameters() == 4 * 8 * (3 * 9 + 1) == 896
    assert layer.memory_workspace(Backend.FALLBACK) == \
        4 * (32 * 32) * 3 * 9 == 110592
    assert layer.memory_workspace(Backend.OPTIMIZED) == optimized_workspace


def test_convolution_fills_forward_kernel():
    layer = make_layer(conv_spec('conv1', 4, [3]),
                       [Tensor('data', (2, 1, 10, 12))])
    assert layer.parameters.kernel_shape == (3, 3)
    assert layer.output.shape == (2, 4, 8, 10)


def test_convolution_3d_stride_and_dilation():
    layer = make_layer(
        conv_spec('conv1', 2, [3], stride=[2], dilation=[2, 1, 1]),
        [Tensor('data', (1, 1, 13, 11, 9))],
    )
    # receptive fields 5, 3, 3 give numerators 8, 8, 6
    assert layer.output.shape == (1, 2, 5, 5, 4)


def test_convolution_collapses():
    with pytest.raises(ShapeCollapse) as e:
        make_layer(conv_spec('conv1', 1, [5]), [Tensor('data', (1, 1, 4))])
    assert e.value.layer_name == 'conv1'
    assert e.value.dimension == 0


def test_convolution_single_pixel_output_collapses():
    with pytest.raises(ShapeCollapse):
        make_layer(conv_spec('conv1', 1, [3]), [Tensor('data', (1, 1, 3, 3))])


def test_convolution_collapse_reports_dimension():
    with pytest.raises(ShapeCollapse) as e:
        make_layer(conv_spec('conv1', 1, [3, 5]),
                   [Tensor('data', (1, 1, 10, 4))])
    assert e.value.dimension == 1


def test_convolution_stride_mismatch():
    # numerator 10 - 3 = 7 is no multiple of 4
    with pytest.raises(StrideMismatch) as e:
        make_layer(conv_spec('conv1', 1, [3], stride=[4]),
                   [Tensor('data', (1, 1, 10))])
    assert e.value.layer_name == 'conv1'
    assert e.value.dimension == 0


def test_convolution_requires_kernel_size():
    spec = conv_spec('conv1', 1, [])
    with pytest.raises(InvalidLayerSpec):
        make_layer(spec, [Tensor('data', (1, 1, 10, 10))])


def test_convolution_requires_spatial_dimensions():
    with pytest.raises(InvalidLayerSpec):
        make_layer(conv_spec('conv1', 1, [1]), [Tensor('data', (1, 1))])


def test_convolution_marks_inputs_resident():
    data = Tensor('data', (1, 3, 8, 8))
    assert not data.on_backend
    make_layer(conv_spec('conv1', 4, [3]), [data])
    assert data.on_backend

    # a second consumer of the same tensor leaves it resident
    make_layer(conv_spec('conv2', 4, [1]), [data])
    assert data.on_backend


def test_failed_convolution_leaves_inputs_alone():
    data = Tensor('data', (1, 3, 2, 2))
    with pytest.raises(ShapeCollapse):
        make_layer(conv_spec('conv1', 4, [3]), [data])
    assert not data.on_backend


def test_convolution_multiple_outputs():
    first = Tensor('a', (1, 3, 10, 10))
    second = Tensor('b', (2, 3, 6, 8))
    layer = make_layer(
        conv_spec('conv1', 5, [3], inputs=('a', 'b'), outputs=('x', 'y')),
        [first, second],
    )
    assert [o.name for o in layer.outputs] == ['x', 'y']
    assert layer.outputs[0].shape == (1, 5, 8, 8)
    assert layer.outputs[1].shape == (2, 5, 4, 6)
    assert first.on_backend and second.on_backend


def test_convolution_validates_every_output():
    with pytest.raises(ShapeCollapse):
        make_layer(
            conv_spec('conv1', 5, [3], inputs=('a', 'b'), outputs=('x', 'y')),
            [Tensor('a', (1, 3, 10, 10)),
             Tensor('b', (1, 3, 10, 2))],
        )


def test_convolution_needs_an_input_per_output():
    with pytest.raises(InvalidLayerSpec):
        make_layer(
            conv_spec('conv1', 5, [3], outputs=('x', 'y')),
            [Tensor('data', (1, 3, 10, 10))],
        )


@pytest.mark.parametrize('batch, stride, pad, dilation', [
    (1, [1], [0], [1]),
    (4, [1], [0], [1]),
    (1, [2], [1], [1]),
    (3, [1], [2], [2]),
])
def test_parameter_memory_depends_on_channels_and_kernel_only(
        batch, stride, pad, dilation):
    layer = make_layer(
        conv_spec('conv1', 6, [3], stride=stride, pad=pad, dilation=dilation),
        [Tensor('data', (batch, 2, 21, 21))],
    )
    assert layer.memory_parameters() == 4 * 6 * (2 * 9 + 1)


@pytest.mark.parametrize('shape, stride, pad', [
    ((1, 16, 7, 7), [1], [0]),
    ((4, 3, 9, 5), [2], [1]),
    ((1, 8, 5, 5, 5), [1], [3]),
])
def test_fallback_workspace_of_unit_kernel_is_zero(shape, stride, pad):
    layer = make_layer(conv_spec('conv1', 32, [1], stride=stride, pad=pad),
                       [Tensor('data', shape)])
    assert layer.memory_workspace(Backend.FALLBACK) == 0
    assert layer.memory_workspace(Backend.OPTIMIZED) == optimized_workspace


def test_fallback_workspace_uses_first_output_spatial_count():
    layer = make_layer(conv_spec('conv1', 4, [3, 1], stride=[2, 1]),
                       [Tensor('data', (2, 5, 11, 6))])
    assert layer.output.shape == (2, 4, 5, 6)
    assert layer.memory_workspace(Backend.FALLBACK) == 4 * (5 * 6) * 5 * 3


def test_convolution_param_string():
    layer = make_layer(conv_spec('conv1', 4, [3], pad=[1], stride=[1, 2]),
                       [Tensor('data', (1, 1, 9, 9))])
    assert layer.param_string() == \
        'kernelShape: [ 3 3 ] pad: [ 1 1 ] stride: [ 1 2 ] dilation: [ 1 1 ]'


@pytest.mark.parametrize('config', [
    {'stride': [0]},
    {'dilation': [0]},
    {'pad': [-1]},
])
def test_convolution_rejects_out_of_range_parameters(config):
    data = Tensor('data', (1, 1, 10, 10))
    with pytest.raises(InvalidLayerSpec):
        make_layer(conv_spec('conv1', 1, [3], **config), [data])
    assert not data.on_backend


def test_convolution_rejects_empty_kernel():
    with pytest.raises(InvalidLayerSpec):
        make_layer(conv_spec('conv1', 1, [0]), [Tensor('data', (1, 1, 10, 10))])
