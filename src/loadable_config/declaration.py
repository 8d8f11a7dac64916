# src/loadable_config/declaration.py
"""
Superfície declarativa de tipos de configuração.

Um consumidor declara uma subclasse de `LoadableConfig` com o caminho do
arquivo e um descritor por atributo:

    class AppConfig(LoadableConfig, config_file="app.yml"):
        text = attribute()
        port = attribute(int, default=8080)

    AppConfig.port          # primeiro acesso carrega; depois, memorizado
    AppConfig.instance()    # singleton congelado

Cada subclasse é apenas uma fachada sobre um `ConfigType` registrado em
`config_types`: toda a lógica de carregamento vive em `core`.

Decisões arquiteturais:
    - Atributos redefinidos no corpo da classe são erro de declaração
    - Nomes públicos da própria superfície são reservados
    - A classe não pode ser instanciada diretamente (singleton)

Limites explícitos:
    - Não lê arquivos
    - Não valida schema
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .core.attribute import _UNSET, AttributeSpec, reserved_names_of
from .core.bound import INSTANCE_FIELDS, FrozenFields
from .core.errors import DeclarationError
from .core.loader import ConfigLoader
from .core.options import GlobalOptions, configure, current_options, reset_configuration
from .core.registry import ConfigType, config_types


class Attribute:
    """
    Descritor de um atributo declarado.

    Acesso pela classe carrega o singleton e devolve o valor vinculado;
    acesso pela instância devolve o valor vinculado diretamente.
    """

    def __init__(
        self,
        types: Any = "string",
        *,
        schema: Optional[Dict[str, Any]] = None,
        serializer: Any = None,
        default: Any = None,
        optional: Any = _UNSET,
    ) -> None:
        self.types = types
        self.schema = schema
        self.serializer = serializer
        self.default = default
        self.optional = optional
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<Attribute {self.name!r}>"

    def to_spec(self) -> AttributeSpec:
        return AttributeSpec.declare(
            self.name,
            self.types,
            schema=self.schema,
            serializer=self.serializer,
            default=self.default,
            optional=self.optional,
        )

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            if not _is_declared(owner):
                return self
            instance = owner.instance()
        return instance._values[self.name]


def attribute(
    types: Any = "string",
    *,
    schema: Optional[Dict[str, Any]] = None,
    serializer: Any = None,
    default: Any = None,
    optional: Any = _UNSET,
) -> Any:
    """Declara um atributo no corpo de uma subclasse de `LoadableConfig`."""
    return Attribute(types, schema=schema, serializer=serializer, default=default, optional=optional)


def _is_declared(cls: type) -> bool:
    return getattr(cls, "_config_type", None) is not None


class _DeclarationNamespace(dict):
    """Namespace de corpo de classe que rejeita atributos redefinidos."""

    def __setitem__(self, key: str, value: Any) -> None:
        if key in self and (isinstance(value, Attribute) or isinstance(self[key], Attribute)):
            raise DeclarationError(f"Duplicate attribute name: {key}")
        super().__setitem__(key, value)


class LoadableConfigMeta(type):
    @classmethod
    def __prepare__(mcs, name: str, bases: tuple, **kwargs: Any) -> Dict[str, Any]:
        return _DeclarationNamespace()

    def __new__(mcs, name: str, bases: tuple, namespace: Dict[str, Any], **kwargs: Any) -> type:
        return super().__new__(mcs, name, bases, dict(namespace), **kwargs)


class LoadableConfig(FrozenFields, metaclass=LoadableConfigMeta):
    """Base declarativa: cada subclasse é um tipo de configuração singleton."""

    _config_type: Optional[ConfigType] = None

    def __init_subclass__(cls, config_file: Union[str, Path, None] = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        parent = next((b._config_type for b in cls.__mro__[1:] if b.__dict__.get("_config_type")), None)
        if config_file is None and parent is not None:
            config_file = parent.config_file

        config_type = ConfigType(
            cls.__qualname__,
            config_file,
            factory=cls._new_blank,
            reserved_names=RESERVED_NAMES,
            owner=cls,
        )
        if parent is not None:
            for spec in parent.attributes:
                config_type.attributes.add(spec)

        for attr in [v for v in cls.__dict__.values() if isinstance(v, Attribute)]:
            config_type.attributes.add(attr.to_spec())

        cls._config_type = config_types.register(config_type)

    def __new__(cls, *args: Any, **kwargs: Any) -> "LoadableConfig":
        raise TypeError(f"{cls.__name__} is a singleton: use {cls.__name__}.instance()")

    @classmethod
    def _new_blank(cls) -> "LoadableConfig":
        self = object.__new__(cls)
        FrozenFields.__init__(self)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._values)!r})"

    # -----------------------------
    # Declaration
    # -----------------------------
    @classmethod
    def config_type(cls) -> ConfigType:
        if cls.__dict__.get("_config_type") is None:
            raise DeclarationError(
                f"{cls.__name__} is not a declared configuration: subclass LoadableConfig"
            )
        return cls._config_type

    @classmethod
    def set_config_file(cls, path: Union[str, Path, None]) -> None:
        cls.config_type().set_config_file(path)

    @classmethod
    def declare_attribute(cls, name: str, types: Any = "string", **kwargs: Any) -> AttributeSpec:
        """Declara um atributo após a criação da classe e gera seu accessor."""
        spec = cls.config_type().declare_attribute(name, types, **kwargs)
        descriptor = Attribute(spec.types)
        descriptor.name = name
        setattr(cls, name, descriptor)
        return spec

    @classmethod
    def declare_attributes(
        cls,
        *names: str,
        types: Any = "string",
        optional: bool = False,
        serializer: Any = None,
    ) -> List[AttributeSpec]:
        return [
            cls.declare_attribute(name, types, optional=optional, serializer=serializer)
            for name in names
        ]

    @classmethod
    def schema(cls) -> Dict[str, Any]:
        return cls.config_type().schema()

    # -----------------------------
    # Singleton
    # -----------------------------
    @classmethod
    def instance(cls, loader: Optional[ConfigLoader] = None) -> "LoadableConfig":
        return cls.config_type().instance(loader)

    @classmethod
    def loaded(cls) -> bool:
        return cls.config_type().loaded

    # -----------------------------
    # Global options
    # -----------------------------
    @staticmethod
    def configure(callback: Callable[[GlobalOptions], Any]) -> GlobalOptions:
        return configure(callback)

    @staticmethod
    def reset_configuration() -> GlobalOptions:
        return reset_configuration()

    @staticmethod
    def options() -> GlobalOptions:
        return current_options()


RESERVED_NAMES = reserved_names_of(dir(LoadableConfig), INSTANCE_FIELDS)
