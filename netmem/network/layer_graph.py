import logging
from typing import Dict, Iterable, Iterator, List, Set

from netmem.layer.errors import InvalidLayerSpec
from netmem.layer.layer import Layer, make_layer
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.tensor import Tensor

logger = logging.getLogger(__name__)


class LayerGraph():
    '''
    Layers built from specs given in topological order.

    Each spec's inputs are resolved against the tensors produced by the specs
    before it. Any ShapeInferenceError aborts construction: a network
    description that fails for one layer has no valid memory plan.
    '''

    def __init__(self, specs: Iterable[LayerSpec]) -> None:
        self._layers: List[Layer] = []
        self._layers_by_name: Dict[str, Layer] = {}
        self._tensors: Dict[str, Tensor] = {}

        for spec in specs:
            self._add(spec)

        logger.debug('built graph of %d layers and %d tensors',
                     len(self._layers), len(self._tensors))

    def _add(self, spec: LayerSpec) -> None:
        if spec.name in self._layers_by_name:
            raise InvalidLayerSpec('Duplicate layer name.', spec.name)

        inputs = []
        for input_name in spec.inputs:
            tensor = self._tensors.get(input_name, None)
            if tensor is None:
                raise InvalidLayerSpec(f'Unknown input tensor "{input_name}".',
                                       spec.name)
            inputs.append(tensor)

        layer = make_layer(spec, inputs)

        for output in layer.outputs:
            if output.name in self._tensors:
                raise InvalidLayerSpec(
                    f'Tensor "{output.name}" is already produced by layer "{self._tensors[output.name].producer}".',
                    spec.name)
            self._tensors[output.name] = output

        self._layers.append(layer)
        self._layers_by_name[layer.name] = layer

    @property
    def layers(self) -> List[Layer]:
        '''
        Layers in construction order.
        '''
        return list(self._layers)

    @property
    def tensors(self) -> List[Tensor]:
        '''
        Every tensor of the graph in the order it was produced.
        '''
        return list(self._tensors.values())

    def layer(self, name: str) -> Layer:
        try:
            return self._layers_by_name[name]
        except KeyError:
            raise KeyError(f'Unknown layer "{name}".')

    def tensor(self, name: str) -> Tensor:
        try:
            return self._tensors[name]
        except KeyError:
            raise KeyError(f'Unknown tensor "{name}".')

    @property
    def input_tensors(self) -> Iterator[Tensor]:
        '''
        Tensors produced by layers without inputs.
        '''
        for layer in self._layers:
            if len(layer.inputs) == 0:
                yield from layer.outputs

    @property
    def output_tensors(self) -> Iterator[Tensor]:
        '''
        Tensors that no layer consumes.
        '''
        consumed: Set[str] = set()
        for layer in self._layers:
            consumed.update((i.name for i in layer.inputs))

        for tensor in self._tensors.values():
            if tensor.name not in consumed:
                yield tensor

    def describe(self) -> str:
        return '\n'.join((f'{index}: {layer.describe()}'
                          for index, layer in enumerate(self._layers)))
