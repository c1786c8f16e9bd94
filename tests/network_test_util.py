from typing import List, Sequence

from netmem.layer import LayerKind, LayerSpec


def conv_spec(
    name: str,
    num_output: int,
    kernel_size: Sequence[int],
    inputs: Sequence[str] = ('data', ),
    outputs: Sequence[str] = None,
    **config,
) -> LayerSpec:
    config['num_output'] = num_output
    config['kernel_size'] = list(kernel_size)
    return LayerSpec(
        name,
        LayerKind.CONVOLUTION,
        tuple(inputs),
        (name, ) if outputs is None else tuple(outputs),
        config,
    )


def small_unet_specs(extent: int = 20) -> List[LayerSpec]:
    '''
    One level U-Net: conv, relu, pool, conv, up-conv, skip connection, 1x1
    scoring conv. Valid for even extents above 8.
    '''
    return [
        LayerSpec('data', LayerKind.INPUT, (), ('data', ),
                  {'shape': [1, 1, extent, extent]}),
        conv_spec('conv1', 8, [3], ('data', )),
        LayerSpec('relu1', LayerKind.ELEMENT_WISE, ('conv1', ), ('relu1', ),
                  {'operation': 'relu'}),
        LayerSpec('pool1', LayerKind.POOLING, ('relu1', ), ('pool1', ), {
            'pool': 'max',
            'kernel_size': [2],
            'stride': [2]
        }),
        conv_spec('conv2', 16, [3], ('pool1', )),
        LayerSpec('up', LayerKind.DECONVOLUTION, ('conv2', ), ('up', ), {
            'num_output': 8,
            'kernel_size': [2],
            'stride': [2]
        }),
        LayerSpec('concat', LayerKind.CONCAT_AND_CROP, ('relu1', 'up'),
                  ('concat', )),
        conv_spec('score', 2, [1], ('concat', )),
    ]
