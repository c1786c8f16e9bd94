from netmem.layer.layer_kind import LayerKind
from netmem.layer.layer_spec import LayerSpec, LayerConfig, empty_config
from netmem.layer.backend import Backend
from netmem.layer.tensor import Tensor, TensorShape
from netmem.layer.errors import (
    ShapeInferenceError,
    InvalidLayerSpec,
    ShapeCollapse,
    StrideMismatch,
    ShapeMismatch,
)
from netmem.layer.spatial_parameters import (
    SpatialParameters,
    normalize_parameter,
    normalize_spatial_parameters,
)
from netmem.layer.layer import Layer, make_layer
