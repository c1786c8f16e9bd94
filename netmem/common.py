from typing import Callable, Dict, Iterable, TypeVar
import math

bytes_per_element: int = 4  # single precision floats
optimized_workspace_bytes: int = 3 * 8 * 1024 * 1024  # upper bound of the optimized backend's scratch pool

K = TypeVar('K')
V = TypeVar('V')


def dispatch(
        dispatch_name: str,
        dispatch_table: Dict[K, V],
        key: K,  # key to dispatch on
) -> V:
    try:
        return dispatch_table[key]
    except KeyError:
        raise NotImplementedError(f'Unknown {dispatch_name}, "{key}".')


def make_dispatcher(
    dispatch_name: str,  # used when raising an exception
    dispatch_table: Dict[K, V],
) -> Callable[[K], V]:

    def dispatch_function(key: K) -> V:
        return dispatch(dispatch_name, dispatch_table, key)

    return dispatch_function


def product(values: Iterable[int]) -> int:
    '''
    Product of an iterable of ints, 1 if it is empty.
    '''
    return int(math.prod(values))


def render_vector(values: Iterable[int]) -> str:
    '''
    Renders values as a bracketed, space separated list, e.g. "[ 3 3 ]".
    '''
    return '[ ' + ''.join(f'{v} ' for v in values) + ']'
