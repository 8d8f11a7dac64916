# src/loadable_config/core/merge.py
"""
Utilitário canônico de deep-merge de overlays de configuração.

Este módulo implementa a política de merge utilizada para aplicar um
overlay (árvore secundária, ex.: valores específicos de deploy) sobre a
árvore de configuração lida do arquivo.

Política de merge:
    - mapping + mapping → merge recursivo por chave
    - qualquer outro conflito → o valor do overlay vence
    - chaves ausentes no overlay são preservadas da base

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não valida schema
    - Não realiza coerção de tipos
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any


def deep_merge(base: Any, overlay: Any) -> Any:
    """
    Realiza um deep-merge determinístico do overlay sobre a base.

    Quando base e overlay são mappings, o resultado é um novo dicionário
    com as chaves de ambos; valores que são mappings dos dois lados são
    mesclados recursivamente. Em qualquer outro caso (escalar, lista,
    mapping vs não-mapping) o valor do overlay substitui o da base.

    Invariantes:
        - A estrutura retornada é sempre uma cópia nova
        - `base` e `overlay` não sofrem mutação
        - Uma base `None` resulta em uma cópia do overlay

    Args:
        base: Árvore base (ex.: configuração lida do arquivo).
        overlay: Árvore que prevalece em conflitos.

    Returns:
        Nova árvore resultante do merge.
    """
    if not isinstance(base, Mapping) or not isinstance(overlay, Mapping):
        return deepcopy(overlay)

    result = {key: deepcopy(value) for key, value in base.items()}

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(overlay_value, Mapping):
            result[key] = deep_merge(result[key], overlay_value)
            continue

        result[key] = deepcopy(overlay_value)

    return result
