from enum import Enum


class LayerKind(Enum):
    '''
    Operator kinds understood by the shape and memory inference engine.
    Values match the type names used in network descriptions.
    '''
    INPUT = 'Input'
    CONVOLUTION = 'Convolution'
    DECONVOLUTION = 'Deconvolution'
    POOLING = 'Pooling'
    INNER_PRODUCT = 'InnerProduct'
    ELEMENT_WISE = 'ElementWise'
    CONCAT_AND_CROP = 'ConcatAndCrop'
