# src/loadable_config/core/schema.py
"""
Geração de schema e validação estrutural da árvore de configuração.

O schema de um tipo de configuração é derivado exclusivamente da lista
ordenada de atributos declarados:

    - type = object
    - properties[name] = {"type": [tags]} mesclado ao schema extra
    - required = nomes dos atributos não opcionais
    - additionalProperties = false

Propriedades desconhecidas são rejeitadas: o arquivo deve declarar
exatamente os atributos esperados, o que expõe typos e divergências entre
código e dados logo na inicialização.

A validação usa `jsonschema` (Draft 7) e coleta todas as violações, cada
uma com um ponteiro para a posição ofensora na árvore (`#/attr/sub`).
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Iterable, List, Optional

from jsonschema import Draft7Validator

from .attribute import AttributeSpec
from .errors import SchemaViolation


def build_schema(attributes: Iterable[AttributeSpec], *, title: Optional[str] = None) -> Dict[str, Any]:
    """Constrói o schema de objeto para a lista ordenada de atributos."""
    attributes = list(attributes)

    properties: Dict[str, Any] = {}
    for attr in attributes:
        prop: Dict[str, Any] = {"type": list(attr.types)}
        prop.update(deepcopy(attr.schema))
        properties[attr.name] = prop

    schema: Dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "required": [attr.name for attr in attributes if not attr.optional],
        "additionalProperties": False,
    }
    if title:
        schema["description"] = f"{title} Configuration"

    return schema


def format_pointer(path: Iterable[Any]) -> str:
    """Formata o caminho de um erro como ponteiro JSON (`#/a/0/b`)."""
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    if not parts:
        return "#"
    return "#/" + "/".join(parts)


def validate_tree(schema: Dict[str, Any], tree: Any) -> List[SchemaViolation]:
    """
    Valida a árvore contra o schema e retorna todas as violações.

    Uma lista vazia indica árvore válida. As violações são ordenadas pelo
    caminho na árvore para que o relatório seja estável.
    """
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(tree), key=lambda e: [str(p) for p in e.absolute_path])
    return [SchemaViolation(pointer=format_pointer(e.absolute_path), message=e.message) for e in errors]
