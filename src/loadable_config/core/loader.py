# src/loadable_config/core/loader.py
"""
Loader canônico de tipos de configuração.

Este módulo é responsável por carregar, validar estruturalmente e vincular
a configuração de um tipo declarado, produzindo sua instância congelada.

O carregamento segue estágios em ordem, terminando na primeira falha:
    1. resolve path     → prefixo global + caminho declarado
    2. read             → leitura UTF-8 + preprocessor opcional
    3. parse            → YAML (aliases resolvidos) ou JSON por extensão
    4. environment      → seleção da sub-árvore do ambiente configurado
    5. overlay          → deep-merge do overlay sobre a árvore
    6. validate         → schema gerado a partir dos atributos
    7. bind             → valores (ou defaults) via serializers
    8. freeze           → instância imutável

Princípios fundamentais:
    - Configuração é declarativa e explícita
    - Erros estruturais são tratados como falhas fatais
    - Nenhuma instância parcialmente preenchida é exposta

Invariantes:
    - O arquivo é lido no máximo uma vez por chamada de `load`
    - Todas as violações de schema são reportadas juntas
    - A instância retornada está sempre congelada

Limites explícitos:
    - Não memoriza instâncias (ver `ConfigType`)
    - Não valida semântica de domínio além do schema
    - Não recarrega arquivos
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # PyYAML

from .errors import (
    ConfigFileNotFoundError,
    ConfigFileNotSetError,
    ConfigParseError,
    ConfigValidationError,
    EmptyConfigError,
    MissingConfigError,
    MissingEnvironmentError,
)
from .merge import deep_merge
from .options import GlobalOptions, current_options
from .schema import build_schema, validate_tree

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Executa o pipeline de carregamento para um tipo de configuração.

    As opções globais são injetadas explicitamente; quando omitidas, as
    opções vivas do processo são consultadas no momento do `load`.
    """

    def __init__(self, options: Optional[GlobalOptions] = None) -> None:
        self._options = options

    @property
    def options(self) -> GlobalOptions:
        return self._options if self._options is not None else current_options()

    def load(self, config_type: Any) -> Any:
        """
        Carrega, valida e vincula a configuração de `config_type`.

        Args:
            config_type: Descritor com `name`, `config_file`, `attributes`,
                `owner` e `new_instance()` (ver `ConfigType`).

        Returns:
            Instância congelada com um campo por atributo declarado.

        Raises:
            ConfigFileNotSetError: Se o tipo não declara `config_file`.
            ConfigFileNotFoundError: Se o caminho resolvido não existe.
            ConfigParseError: Se o conteúdo não puder ser parseado.
            EmptyConfigError: Se o arquivo não produz árvore utilizável.
            MissingEnvironmentError: Se o ambiente configurado não existe.
            MissingConfigError: Se a árvore fica ausente após o overlay.
            ConfigValidationError: Se a árvore viola o schema gerado.
        """
        options = self.options
        name = config_type.name

        path = self.resolve_path(config_type, options)
        logger.debug("loading %s from %s", name, path)

        text = self.read(config_type, path, options)
        tree = self.parse(config_type, path, text)
        tree = self.select_environment(config_type, tree, options)
        tree = self.apply_overlay(config_type, tree, options)
        self.validate(config_type, tree)

        instance = self.bind(config_type, tree)
        instance._freeze()

        logger.info("loaded configuration %s from %s", name, path)
        return instance

    # -----------------------------
    # Stages
    # -----------------------------
    def resolve_path(self, config_type: Any, options: GlobalOptions) -> Path:
        """
        Resolve o caminho efetivo do arquivo de `config_type`.

        Com `path_prefix` definido, o caminho declarado é sempre tratado
        como relativo ao prefixo, inclusive quando absoluto
        (`/etc/app.yml` sob `P` resolve para `P/etc/app.yml`).

        Raises:
            ConfigFileNotSetError: Se o tipo não declara `config_file`.
        """
        config_file = config_type.config_file
        if config_file is None or not str(config_file).strip():
            raise ConfigFileNotSetError(
                f"Incomplete configuration '{config_type.name}': config_file not set"
            )

        path = Path(config_file)
        if options.path_prefix is not None:
            if path.is_absolute():
                path = path.relative_to(path.anchor)
            path = options.path_prefix / path
        return path

    def read(self, config_type: Any, path: Path, options: GlobalOptions) -> str:
        """
        Lê o arquivo como UTF-8 e aplica o preprocessor, se configurado.

        Raises:
            ConfigFileNotFoundError: Se o caminho não é um arquivo existente.
            ConfigParseError: Se o conteúdo não é UTF-8 válido.
        """
        if not path.is_file():
            raise ConfigFileNotFoundError(
                f"Cannot configure {config_type.name}: configuration file '{path}' missing"
            )

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ConfigParseError(
                f"Cannot configure {config_type.name}: '{path}' is not valid UTF-8: {e}"
            ) from e

        if options.preprocessor is not None:
            text = options.preprocessor(text)
            logger.debug("preprocessed %s (%d chars)", path, len(text))

        return text

    def parse(self, config_type: Any, path: Path, text: str) -> Any:
        """
        Converte o texto em árvore: JSON para `.json`, YAML para o resto.

        Aliases e merge keys YAML já chegam resolvidos (`yaml.safe_load`).

        Raises:
            ConfigParseError: Se o parser rejeitar o conteúdo.
            EmptyConfigError: Se o documento é vazio ou apenas `null`.
        """
        try:
            if path.suffix.lower() == ".json":
                tree = json.loads(text) if text.strip() else None
            else:
                tree = yaml.safe_load(text)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigParseError(
                f"Cannot configure {config_type.name}: failed to parse '{path}': {e}"
            ) from e

        if tree is None:
            raise EmptyConfigError(
                f"Cannot configure {config_type.name}: "
                f"configuration file empty for {config_type.name}"
            )
        return tree

    def select_environment(self, config_type: Any, tree: Any, options: GlobalOptions) -> Any:
        """
        Seleciona a sub-árvore do ambiente configurado.

        Sem `environment_key`, a árvore é devolvida inalterada. A sub-árvore
        pode ser `None`; nesse caso só o overlay pode completá-la.

        Raises:
            MissingEnvironmentError: Se a raiz não é mapping ou não tem a chave.
        """
        env = options.environment_key
        if env is None:
            return tree

        if not isinstance(tree, Mapping) or env not in tree:
            raise MissingEnvironmentError(
                f"Cannot configure {config_type.name}: "
                f"Configuration missing for environment '{env}'",
                environment=env,
            )

        logger.debug("selected environment '%s' for %s", env, config_type.name)
        return tree[env]

    def apply_overlay(self, config_type: Any, tree: Any, options: GlobalOptions) -> Any:
        """
        Mescla o overlay devolvido pela função global sobre a árvore.

        A função recebe `config_type.owner` (a classe declarada, quando houver).
        Overlays vazios ou `None` são ignorados; o overlay vence em conflitos.

        Raises:
            MissingConfigError: Se a árvore continua `None` após o overlay.
        """
        overlay_function = options.overlay_function
        if overlay_function is not None:
            overlay = overlay_function(config_type.owner)
            if overlay:
                tree = deep_merge(tree, overlay)
                logger.debug("applied overlay to %s", config_type.name)

        if tree is None:
            raise MissingConfigError(
                f"Configuration file missing config for {config_type.name}"
            )
        return tree

    def validate(self, config_type: Any, tree: Any) -> None:
        """
        Valida a árvore contra o schema gerado dos atributos.

        Raises:
            ConfigValidationError: Com todas as violações, cada uma com ponteiro.
        """
        schema = build_schema(config_type.attributes, title=config_type.name)
        violations = validate_tree(schema, tree)
        if violations:
            raise ConfigValidationError(config_type.name, violations)

    def bind(self, config_type: Any, tree: Dict[str, Any]) -> Any:
        """
        Vincula cada atributo declarado a uma instância nova (ainda mutável).

        Valores presentes passam pelo serializer; ausentes recebem uma cópia
        profunda do default, para que instâncias nunca compartilhem estado
        com a declaração. Erros do serializer propagam sem conversão.
        """
        instance = config_type.new_instance()

        for attr in config_type.attributes:
            if attr.name in tree:
                value = attr.decode(tree[attr.name])
            else:
                value = deepcopy(attr.default)
            instance._bind(attr.name, value)

        return instance
