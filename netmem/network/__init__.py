from netmem.network.layer_graph import LayerGraph
from netmem.network.memory_plan import (
    MemoryPlan,
    MemoryPlanConfig,
    compute_memory_plan,
    summarize_layers,
    with_input_shape,
    find_largest_tile,
)
