# src/loadable_config/core/registry.py
"""
Tipos de configuração declarados e seu registro process-wide.

Este módulo define o `ConfigType`, o descritor (atributos + caminho) de um
tipo de configuração, e o `ConfigTypeRegistry`, que indexa os descritores
por nome.

Cada `ConfigType` carrega sua instância de forma preguiçosa: o primeiro
acesso dispara exatamente um carregamento, e todos os acessos seguintes
recebem a mesma instância congelada (ou a mesma falha).

Decisões arquiteturais:
    - O caminho é resolvido contra o prefixo global no load, não na declaração
    - Declarações ficam bloqueadas depois do primeiro carregamento
    - Re-registrar um nome substitui o descritor anterior (re-declaração em testes)

Invariantes:
    - Um `ConfigType` carrega no máximo uma vez por processo
    - A instância exposta está sempre totalmente vinculada e congelada

Limites explícitos:
    - Não lê arquivos diretamente (ver `ConfigLoader`)
    - Não oferece reload
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Union

from .attribute import AttributeRegistry, AttributeSpec, reserved_names_of
from .bound import INSTANCE_FIELDS, BoundConfig
from .errors import DeclarationError
from .lazy import LazyValue
from .loader import ConfigLoader
from .schema import build_schema

logger = logging.getLogger(__name__)

BOUND_CONFIG_RESERVED: FrozenSet[str] = reserved_names_of(dir(BoundConfig), INSTANCE_FIELDS)


class ConfigType:
    """
    Descritor de um tipo de configuração: atributos, arquivo e singleton.

    Args:
        name: Identidade usada em mensagens de erro e no registry.
        config_file: Caminho do arquivo (relativo ao prefixo global, se houver).
        factory: Produz a instância vazia a ser vinculada pelo loader.
        reserved_names: Nomes que não podem ser usados como atributos.
        owner: Objeto entregue à função de overlay (default: o próprio tipo).
    """

    def __init__(
        self,
        name: str,
        config_file: Union[str, Path, None] = None,
        *,
        factory: Optional[Callable[[], Any]] = None,
        reserved_names: Optional[FrozenSet[str]] = None,
        owner: Any = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise DeclarationError("config type name must be a non-empty string")

        self.name = name
        self.config_file = config_file
        self.owner = owner if owner is not None else self
        self._factory = factory or (lambda: BoundConfig(name))
        self.attributes = AttributeRegistry(
            reserved_names=BOUND_CONFIG_RESERVED if reserved_names is None else reserved_names
        )
        self._lazy: LazyValue[Any] = LazyValue(self._load)

    def __repr__(self) -> str:
        return (
            f"ConfigType(name={self.name!r}, config_file={self.config_file!r}, "
            f"attributes={self.attributes.names()!r}, loaded={self.loaded})"
        )

    # -----------------------------
    # Declaration
    # -----------------------------
    def _ensure_declarable(self) -> None:
        if self._lazy.is_loaded or self._lazy.has_failed:
            raise DeclarationError(
                f"Cannot change declaration of {self.name}: configuration already loaded"
            )

    def set_config_file(self, path: Union[str, Path, None]) -> None:
        """
        Define (ou troca) o caminho do arquivo antes do primeiro carregamento.

        Raises:
            DeclarationError: Se o tipo já foi carregado (ou falhou).
        """
        self._ensure_declarable()
        self.config_file = path

    def declare_attribute(self, name: str, types: Any = "string", **kwargs: Any) -> AttributeSpec:
        """
        Declara um atributo; `kwargs` segue `AttributeSpec.declare`.

        Raises:
            DeclarationError: Se o nome é reservado, duplicado ou inválido,
                ou se o tipo já foi carregado.
        """
        self._ensure_declarable()
        return self.attributes.declare_attribute(name, types, **kwargs)

    def declare_attributes(self, *names: str, **kwargs: Any) -> List[AttributeSpec]:
        self._ensure_declarable()
        return self.attributes.declare_attributes(*names, **kwargs)

    def schema(self) -> Dict[str, Any]:
        """JSON Schema derivado dos atributos atuais (cópia independente)."""
        return build_schema(self.attributes, title=self.name)

    # -----------------------------
    # Singleton lifecycle
    # -----------------------------
    def new_instance(self) -> Any:
        return self._factory()

    @property
    def loaded(self) -> bool:
        return self._lazy.is_loaded

    def instance(self, loader: Optional[ConfigLoader] = None) -> Any:
        """
        Retorna a instância congelada, carregando-a no primeiro acesso.

        O loader só é considerado pelo chamador que executa o carregamento;
        depois disso a instância (ou a falha) memorizada é devolvida sem
        reler o arquivo.

        Args:
            loader: Loader a usar no primeiro acesso (default: `ConfigLoader()`).

        Raises:
            ConfigError: A falha memorizada do carregamento, se houver.
        """
        if loader is None:
            return self._lazy.get()
        return self._lazy.get(lambda: loader.load(self))

    def _load(self) -> Any:
        return ConfigLoader().load(self)


@dataclass
class ConfigTypeRegistry:
    """Registro de `ConfigType` indexado por nome."""

    _types: Dict[str, ConfigType] = field(default_factory=dict, init=False, repr=False)

    def register(self, config_type: ConfigType) -> ConfigType:
        if config_type.name in self._types:
            logger.debug("replacing config type %s", config_type.name)
        self._types[config_type.name] = config_type
        return config_type

    def get(self, name: str) -> ConfigType:
        return self._types[name]

    def discard(self, name: str) -> None:
        self._types.pop(name, None)

    def names(self) -> List[str]:
        return list(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


config_types = ConfigTypeRegistry()


def declare_config_type(name: str, config_file: Union[str, Path, None] = None) -> ConfigType:
    """Cria um `ConfigType` com instância `BoundConfig` e o registra em `config_types`."""
    return config_types.register(ConfigType(name, config_file))
