from typing import Optional


class ShapeInferenceError(ValueError):
    '''
    Raised when a layer can not be constructed from its spec and inputs.
    Carries the offending layer's name and, where it applies, the spatial
    dimension index.
    '''

    def __init__(
        self,
        message: str,
        layer_name: Optional[str] = None,
        dimension: Optional[int] = None,
    ) -> None:
        self.message: str = message
        self.layer_name: Optional[str] = layer_name
        self.dimension: Optional[int] = dimension

        location = ''
        if layer_name is not None:
            location += f'Layer "{layer_name}"'
        if dimension is not None:
            location += f' (dimension {dimension})'
        super().__init__(f'{location}: {message}' if location else message)


class InvalidLayerSpec(ShapeInferenceError):
    '''
    A required parameter is absent or the spec does not match its inputs.
    '''
    pass


class ShapeCollapse(ShapeInferenceError):
    '''
    An output extent would be zero or negative.
    '''
    pass


class StrideMismatch(ShapeInferenceError):
    '''
    The stride does not evenly divide the dilated receptive field.
    '''
    pass


class ShapeMismatch(ShapeInferenceError):
    '''
    Input shapes are incompatible with each other.
    '''
    pass
