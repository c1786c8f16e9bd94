from enum import Enum


class Backend(Enum):
    '''
    Execution strategies with different workspace memory models.
    '''
    OPTIMIZED = 'optimized'  # fixed size scratch buffer pool
    FALLBACK = 'fallback'  # scratch memory proportional to the problem size
