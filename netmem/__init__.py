from netmem.layer.layer_kind import LayerKind
from netmem.layer.layer_spec import LayerSpec
from netmem.layer.backend import Backend
from netmem.layer.tensor import Tensor
from netmem.layer.errors import (
    ShapeInferenceError,
    InvalidLayerSpec,
    ShapeCollapse,
    StrideMismatch,
    ShapeMismatch,
)
from netmem.layer.layer import Layer, make_layer
from netmem.network.layer_graph import LayerGraph
from netmem.network.memory_plan import (
    MemoryPlan,
    MemoryPlanConfig,
    compute_memory_plan,
    summarize_layers,
    find_largest_tile,
)
