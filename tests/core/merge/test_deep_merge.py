# tests/core/merge/test_deep_merge.py
"""
Testes da política de deep-merge de overlays.

Os testes asseguram que:
- valores escalares do overlay prevalecem
- dicionários são mesclados de forma recursiva
- conflitos mapping vs não-mapping resolvem para o valor do overlay
- objetos de entrada não são mutados durante o merge

Invariantes:
    - Chaves ausentes no overlay são preservadas
    - O resultado é sempre uma estrutura nova
"""

import pytest

try:
    from loadable_config.core.merge import deep_merge
except Exception as e:  # noqa: BLE001
    deep_merge = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente quando `deep_merge` não pode ser importado."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing merge module. Implement:\n"
            "- src/loadable_config/core/merge.py (deep_merge)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override():
    """
    Verifica o override básico de valores escalares sem mutar as entradas.

    Invariantes:
        - O valor sobrescrito reflete exatamente o overlay
        - `base` e `overlay` não sofrem mutação
    """
    _require_imports()
    base = {"a": 1, "b": 2}
    overlay = {"b": 99}
    out = deep_merge(base, overlay)
    assert out == {"a": 1, "b": 99}
    assert base == {"a": 1, "b": 2}
    assert overlay == {"b": 99}


def test_merge_nested_dict():
    """
    Verifica o merge recursivo de mappings aninhados.

    Invariantes:
        - Chaves aninhadas não sobrescritas são preservadas
        - Chaves novas do overlay são adicionadas
    """
    _require_imports()
    base = {"a": {"x": 1, "y": 2}}
    overlay = {"a": {"y": 9, "z": 3}}
    assert deep_merge(base, overlay) == {"a": {"x": 1, "y": 9, "z": 3}}


def test_merge_list_override_total():
    _require_imports()
    base = {"hosts": ["a", "b"]}
    overlay = {"hosts": ["c"]}
    assert deep_merge(base, overlay) == {"hosts": ["c"]}


def test_merge_mapping_vs_scalar_overlay_wins():
    """
    Verifica que conflitos estruturais resolvem para o valor do overlay.

    Decisões arquiteturais:
        - Overlays injetam valores de deploy sem editar o arquivo base;
          o overlay sempre tem a última palavra
    """
    _require_imports()
    assert deep_merge({"a": {"x": 1}}, {"a": "flat"}) == {"a": "flat"}
    assert deep_merge({"a": "flat"}, {"a": {"x": 1}}) == {"a": {"x": 1}}


def test_merge_does_not_share_nested_structures():
    _require_imports()
    base = {"a": {"x": [1, 2]}}
    overlay = {"b": {"y": [3]}}
    out = deep_merge(base, overlay)

    out["a"]["x"].append(99)
    out["b"]["y"].append(99)

    assert base == {"a": {"x": [1, 2]}}
    assert overlay == {"b": {"y": [3]}}


def test_merge_none_base_yields_overlay_copy():
    _require_imports()
    overlay = {"text": "from overlay"}
    out = deep_merge(None, overlay)
    assert out == overlay
    assert out is not overlay
