# src/loadable_config/__init__.py
"""
loadable_config — configuração declarativa, validada e imutável.

Um consumidor declara atributos tipados (com defaults opcionais) em um tipo
de configuração, aponta para um arquivo YAML/JSON e recebe um singleton
congelado, validado contra o schema derivado da própria declaração.

Arquitetura em alto nível:
    - declaration → fachada `LoadableConfig` / `attribute`
    - core        → opções globais, schema, loader, merge e registro

Limites explícitos:
    - Não recarrega configuração durante o processo
    - Não é um engine de templates
"""

import logging

from .core.attribute import AttributeRegistry, AttributeSpec
from .core.bound import BoundConfig
from .core.errors import (
    AlreadyConfiguredError,
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFileNotSetError,
    ConfigParseError,
    ConfigValidationError,
    DeclarationError,
    EmptyConfigError,
    FrozenConfigError,
    InvalidOptionError,
    MissingConfigError,
    MissingEnvironmentError,
    SchemaViolation,
)
from .core.loader import ConfigLoader
from .core.merge import deep_merge
from .core.options import GlobalOptions, configure, current_options, reset_configuration
from .core.registry import ConfigType, ConfigTypeRegistry, config_types, declare_config_type
from .core.schema import build_schema
from .declaration import Attribute, LoadableConfig, attribute

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AlreadyConfiguredError",
    "Attribute",
    "AttributeRegistry",
    "AttributeSpec",
    "BoundConfig",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFileNotSetError",
    "ConfigLoader",
    "ConfigParseError",
    "ConfigType",
    "ConfigTypeRegistry",
    "ConfigValidationError",
    "DeclarationError",
    "EmptyConfigError",
    "FrozenConfigError",
    "GlobalOptions",
    "InvalidOptionError",
    "LoadableConfig",
    "MissingConfigError",
    "MissingEnvironmentError",
    "SchemaViolation",
    "attribute",
    "build_schema",
    "config_types",
    "configure",
    "current_options",
    "declare_config_type",
    "deep_merge",
    "reset_configuration",
]
