from typing import Callable, Dict

from netmem.common import make_dispatcher
from netmem.layer.layer_kind import LayerKind
from netmem.layer.operator.layer_operator import LayerOperator
from netmem.layer.operator.input import Input
from netmem.layer.operator.convolution import Convolution
from netmem.layer.operator.deconvolution import Deconvolution
from netmem.layer.operator.pooling import Pooling
from netmem.layer.operator.inner_product import InnerProduct
from netmem.layer.operator.element_wise import ElementWise
from netmem.layer.operator.concat_and_crop import ConcatAndCrop

operator_table: Dict[LayerKind, LayerOperator] = {
    LayerKind.INPUT: Input(),
    LayerKind.CONVOLUTION: Convolution(),
    LayerKind.DECONVOLUTION: Deconvolution(),
    LayerKind.POOLING: Pooling(),
    LayerKind.INNER_PRODUCT: InnerProduct(),
    LayerKind.ELEMENT_WISE: ElementWise(),
    LayerKind.CONCAT_AND_CROP: ConcatAndCrop(),
}

get_operator: Callable[[LayerKind], LayerOperator] = make_dispatcher(
    'layer kind',
    operator_table,
)
