# src/loadable_config/core/options.py
"""
Opções globais de carregamento (GlobalOptions).

Este módulo define as opções process-wide que controlam como todo tipo de
configuração resolve e carrega seu arquivo, e o ciclo de vida
configurar-uma-vez / congelar / resetar dessas opções.

Opções suportadas:
    - path_prefix       → diretório base para os caminhos declarados
    - environment_key   → chave de topo que seleciona o ambiente efetivo
    - preprocessor      → transformação do texto bruto antes do parse
    - overlay_function  → função que devolve um overlay por tipo de config

Decisões arquiteturais:
    - As opções são configuradas exatamente uma vez e então congeladas
    - Valores inválidos falham no momento da atribuição (fail fast)
    - O reset existe apenas para isolamento de testes

Invariantes:
    - Uma instância congelada nunca volta a aceitar atribuições
    - Após `reset_configuration()` as opções voltam aos defaults

Limites explícitos:
    - Não carrega arquivos
    - Não conhece tipos de configuração concretos
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Union

from .errors import AlreadyConfiguredError, InvalidOptionError

logger = logging.getLogger(__name__)

Preprocessor = Callable[[str], str]
OverlayFunction = Callable[[Any], Any]


class GlobalOptions:
    """
    Opções de carregamento compartilhadas por todos os tipos de configuração.

    Todas as opções começam desligadas (`None`). Cada setter valida o valor
    recebido e rejeita qualquer atribuição depois de `freeze()`.
    """

    def __init__(self) -> None:
        # Prefixo para os caminhos dos arquivos. Deve ser um diretório
        # existente; sem prefixo, caminhos relativos partem do cwd.
        self._path_prefix: Optional[Path] = None

        # Se definido, os arquivos possuem chaves de topo por ambiente e
        # esta chave seleciona qual delas é a configuração efetiva.
        self._environment_key: Optional[str] = None

        # Recebe o texto bruto do arquivo e devolve o texto a ser parseado.
        self._preprocessor: Optional[Preprocessor] = None

        # Recebe o tipo de configuração e devolve um overlay opcional.
        self._overlay_function: Optional[OverlayFunction] = None

        self._frozen = False

    def __repr__(self) -> str:
        return (
            f"GlobalOptions(path_prefix={self._path_prefix!r}, "
            f"environment_key={self._environment_key!r}, "
            f"preprocessor={self._preprocessor!r}, "
            f"overlay_function={self._overlay_function!r}, "
            f"frozen={self._frozen})"
        )

    # -----------------------------
    # Freeze
    # -----------------------------
    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _ensure_mutable(self, option: str) -> None:
        if self._frozen:
            raise AlreadyConfiguredError(
                f"Cannot set '{option}': loadable_config already configured"
            )

    # -----------------------------
    # path_prefix
    # -----------------------------
    @property
    def path_prefix(self) -> Optional[Path]:
        return self._path_prefix

    @path_prefix.setter
    def path_prefix(self, value: Union[str, Path, None]) -> None:
        self._ensure_mutable("path_prefix")
        if value is None:
            self._path_prefix = None
            return

        prefix = Path(value).expanduser()
        if not prefix.is_dir():
            raise InvalidOptionError(
                f"Config path prefix '{value}' is not a valid directory"
            )
        self._path_prefix = prefix.resolve()

    # -----------------------------
    # environment_key
    # -----------------------------
    @property
    def environment_key(self) -> Optional[str]:
        return self._environment_key

    @environment_key.setter
    def environment_key(self, value: Any) -> None:
        self._ensure_mutable("environment_key")
        self._environment_key = None if value is None else str(value)

    # -----------------------------
    # Hooks
    # -----------------------------
    @property
    def preprocessor(self) -> Optional[Preprocessor]:
        return self._preprocessor

    @preprocessor.setter
    def preprocessor(self, func: Optional[Preprocessor]) -> None:
        self._ensure_mutable("preprocessor")
        _require_callable("preprocessor", func)
        self._preprocessor = func

    @property
    def overlay_function(self) -> Optional[OverlayFunction]:
        return self._overlay_function

    @overlay_function.setter
    def overlay_function(self, func: Optional[OverlayFunction]) -> None:
        self._ensure_mutable("overlay_function")
        _require_callable("overlay_function", func)
        self._overlay_function = func

    def preprocess(self, func: Preprocessor) -> Preprocessor:
        """Define o preprocessor; utilizável como decorator."""
        self.preprocessor = func
        return func

    def overlay(self, func: OverlayFunction) -> OverlayFunction:
        """Define a função de overlay; utilizável como decorator."""
        self.overlay_function = func
        return func


def _require_callable(option: str, func: Any) -> None:
    if func is not None and not callable(func):
        raise InvalidOptionError(
            f"Option '{option}' must be callable, got {type(func).__name__}"
        )


# -----------------------------
# Process-wide lifecycle
# -----------------------------
_lock = threading.Lock()
_options = GlobalOptions()


def current_options() -> GlobalOptions:
    """Retorna as opções globais vivas (congeladas ou não)."""
    return _options


def configure(callback: Callable[[GlobalOptions], Any]) -> GlobalOptions:
    """
    Configura as opções globais exatamente uma vez.

    O callback recebe as opções vivas (ainda mutáveis); ao retornar, as
    opções são congeladas. Se o callback levantar exceção, as opções
    permanecem mutáveis e a exceção é propagada.

    Raises:
        AlreadyConfiguredError: Se as opções já foram configuradas.
    """
    with _lock:
        if _options.frozen:
            raise AlreadyConfiguredError(
                "Cannot configure loadable_config: already configured"
            )
        callback(_options)
        _options.freeze()
        logger.debug("global options configured: %r", _options)
        return _options


def reset_configuration() -> GlobalOptions:
    """Descarta as opções atuais e instala defaults mutáveis (uso em testes)."""
    global _options
    with _lock:
        _options = GlobalOptions()
        logger.debug("global options reset")
        return _options
