# config keys of a LayerSpec
kernel_size = 'kernel_size'
pad = 'pad'
stride = 'stride'
dilation = 'dilation'
num_output = 'num_output'
pool = 'pool'
shape = 'shape'
operation = 'operation'

# LayerSpec.from_config keys
name = 'name'
kind = 'type'
inputs = 'bottom'
outputs = 'top'

# pooling methods
pool_max = 'max'
pool_average = 'ave'
