# src/loadable_config/core/lazy.py
"""
Inicialização preguiçosa executada no máximo uma vez, segura entre threads.

Este módulo define o `LazyValue`, usado por `ConfigType` para carregar a
instância de configuração somente no primeiro acesso.

Decisões arquiteturais:
    - Double-checked locking: leituras após a inicialização não tomam o lock
    - A factory efetiva pode ser escolhida pelo primeiro chamador, e essa
      escolha acontece dentro do lock
    - Falhas são terminais: não há nova tentativa

Invariantes:
    - A factory roda no máximo uma vez por `LazyValue`
    - Todo chamador observa o mesmo valor ou a mesma exceção

Limites explícitos:
    - Não memoriza `BaseException` que não seja `Exception` (ex.: KeyboardInterrupt)
    - Não oferece reset
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class LazyValue(Generic[T]):
    """
    Valor calculado na primeira leitura e memorizado para sempre.

    Acessos concorrentes ao primeiro `get()` resultam em uma única chamada
    da factory: as demais threads aguardam o lock e observam o mesmo
    resultado. Uma falha também é memorizada e a mesma exceção é
    re-levantada para todo chamador seguinte (sem nova tentativa).
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._done = False
        self._value: Optional[T] = None
        self._error: Optional[BaseException] = None

    @property
    def is_loaded(self) -> bool:
        return self._done and self._error is None

    @property
    def has_failed(self) -> bool:
        return self._done and self._error is not None

    def get(self, factory: Optional[Callable[[], T]] = None) -> T:
        """
        Retorna o valor, calculando-o no primeiro acesso.

        Args:
            factory: Substitui a factory padrão apenas se este chamador for
                quem executa a inicialização; ignorada depois dela.

        Raises:
            Exception: A exceção memorizada da factory, se ela falhou.
        """
        if not self._done:
            with self._lock:
                if not self._done:
                    try:
                        value = (factory or self._factory)()
                    except Exception as e:
                        self._error = e
                        self._done = True
                        raise
                    self._value = value
                    self._done = True

        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]
