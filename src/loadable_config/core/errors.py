# src/loadable_config/core/errors.py
"""
Exceções canônicas da camada de carregamento de configuração.

Este módulo define a hierarquia oficial de exceções utilizadas durante a
declaração de tipos de configuração, o carregamento de arquivos, a
validação estrutural e o binding de valores.

As exceções aqui definidas representam **falhas fatais de inicialização**,
e não erros recuperáveis de execução.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Nenhuma falha é re-tentada automaticamente
    - Mensagens de erro são claras e direcionadas ao usuário

Invariantes:
    - Todas as exceções do pacote herdam de `ConfigError`
    - Erros de parser de terceiros são sempre encadeados (`raise ... from`)

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não registra logs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


class ConfigError(Exception):
    """
    Exceção base para erros de declaração e carregamento de configuração.

    Esta hierarquia permite:
        - captura genérica de qualquer falha de configuração
        - distinção clara entre falhas de declaração, de arquivo e de schema
    """


class DeclarationError(ConfigError):
    """
    Declaração ilegal de um tipo de configuração.

    Exemplos:
        - nome de atributo que colide com a superfície de declaração
        - atributo declarado duas vezes
        - tipo desconhecido ou serializer sem capacidade de `load`
    """


class ConfigFileNotSetError(DeclarationError):
    """Tipo de configuração sem `config_file` no momento do carregamento."""


class ConfigFileNotFoundError(ConfigError):
    """O caminho resolvido não referencia um arquivo existente."""


class ConfigParseError(ConfigError):
    """Falha ao parsear o conteúdo do arquivo (YAML/JSON)."""


class EmptyConfigError(ConfigError):
    """O parse produziu uma árvore vazia (ex.: arquivo vazio)."""


class MissingConfigError(EmptyConfigError):
    """A árvore ficou ausente após seleção de ambiente e overlay."""


class MissingEnvironmentError(ConfigError):
    """
    `environment_key` configurado, mas a árvore não contém essa chave.

    O nome do ambiente ausente fica disponível em `environment`.
    """

    def __init__(self, message: str, *, environment: str) -> None:
        super().__init__(message)
        self.environment = environment


class AlreadyConfiguredError(ConfigError):
    """As opções globais já foram configuradas (e congeladas)."""


class InvalidOptionError(ConfigError):
    """Valor inválido atribuído a uma opção global."""


class FrozenConfigError(ConfigError, AttributeError):
    """Tentativa de mutar uma instância de configuração congelada."""


@dataclass(frozen=True)
class SchemaViolation:
    """Uma violação de schema: ponteiro na árvore + mensagem do validador."""

    pointer: str
    message: str

    def __str__(self) -> str:
        return f"{self.pointer}: {self.message}"


class ConfigValidationError(ConfigError):
    """
    A árvore de configuração viola o schema gerado a partir dos atributos.

    Todas as violações encontradas são agregadas (não apenas a primeira),
    cada uma em sua própria linha, prefixadas pela identidade do tipo.

    Atributos:
        config_name: nome do tipo de configuração.
        violations: lista de `SchemaViolation`.
    """

    def __init__(
        self,
        config_name: str,
        violations: Sequence[SchemaViolation],
        message: Optional[str] = None,
    ) -> None:
        self.config_name = config_name
        self.violations: List[SchemaViolation] = list(violations)
        if message is None:
            message = f"Errors parsing {config_name}:\n" + "\n".join(
                str(v) for v in self.violations
            )
        super().__init__(message)
