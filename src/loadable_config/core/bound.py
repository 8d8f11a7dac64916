# src/loadable_config/core/bound.py
"""
Instâncias de configuração com campos vinculados e congeláveis.

`FrozenFields` é a base de toda instância produzida pelo loader: os
valores só entram via `_bind` durante o carregamento e, após `_freeze`,
nenhum campo pode ser alterado (nem pelo próprio loader).

`BoundConfig` é a instância padrão de um `ConfigType` declarado sem
classe: um mapping somente-leitura com acesso por atributo.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator

from .errors import FrozenConfigError

# Campos de instância mantidos fora do namespace da classe.
INSTANCE_FIELDS = frozenset({"_values", "_frozen", "_name"})


class FrozenFields:
    """Campos nomeados preenchidos pelo loader e congelados em seguida."""

    def __init__(self) -> None:
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_frozen", False)

    def _bind(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenConfigError(f"cannot bind '{name}': {type(self).__name__} is frozen")
        self._values[name] = value

    def _freeze(self) -> None:
        object.__setattr__(self, "_values", MappingProxyType(dict(self._values)))
        object.__setattr__(self, "_frozen", True)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def to_dict(self) -> Dict[str, Any]:
        """Cópia rasa dos valores vinculados."""
        return dict(self._values)

    def __setattr__(self, name: str, value: Any) -> None:
        raise FrozenConfigError(f"cannot set '{name}': {type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise FrozenConfigError(f"cannot delete '{name}': {type(self).__name__} is immutable")


class BoundConfig(FrozenFields, Mapping):
    """Mapping somente-leitura `nome -> valor` com acesso por atributo."""

    def __init__(self, name: str = "BoundConfig") -> None:
        super().__init__()
        object.__setattr__(self, "_name", name)

    def __getattr__(self, name: str) -> Any:
        # Chamado apenas quando o atributo normal não existe.
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        owner = self.__dict__.get("_name", type(self).__name__)
        raise AttributeError(f"{owner} has no attribute '{name}'")

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{self._name}({dict(self._values)!r})"
