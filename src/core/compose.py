"""Composición de wrappers (providers).

Por qué un combinador genérico:
- La app aplica varios contextos (settings, ruta, tema, caché) alrededor de la
  unidad raíz; declararlos como lista evita anidar a mano.
- No conoce ningún contexto concreto: solo pliega funciones.
"""

from __future__ import annotations

from functools import reduce
from typing import Callable, TypeVar

T = TypeVar("T")

ComponentFactory = Callable[[], T]
Wrapper = Callable[[Callable[[], T]], Callable[[], T]]


def compose(*wrappers: Wrapper) -> Wrapper:
    """Encadena wrappers: `compose(a, b)(x)` equivale a `a(b(x))`.

    El orden queda fijado al llamar a `compose`; el primero es el más externo.
    Sin wrappers devuelve la identidad.
    """

    chain = tuple(wrappers)

    def apply(component: Callable[[], T]) -> Callable[[], T]:
        return reduce(lambda inner, wrapper: wrapper(inner), reversed(chain), component)

    return apply
