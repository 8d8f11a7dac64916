# src/loadable_config/core/attribute.py
"""
Declaração de atributos de configuração.

Este módulo define o `AttributeSpec`, a descrição imutável de um campo de
configuração, e o `AttributeRegistry`, responsável por registrar atributos
preservando a ordem de declaração e validando a integridade da declaração
antes de qualquer carregamento.

Responsabilidades do módulo:
    - Normalizar tipos aceitos para tags JSON Schema
    - Derivar `optional` a partir do default quando não informado
    - Validar nomes (reservados, duplicados) e serializers
    - Preservar a ordem de declaração dos atributos

Decisões arquiteturais:
    - A validação ocorre no momento da declaração, não do load
    - Erros de declaração são tratados como falhas fatais
    - Nomes duplicados são rejeitados (não há "última declaração vence")

Invariantes:
    - Cada atributo registrado possui nome único
    - Um default presente nunca coexiste com `optional=False`
    - A lista de atributos reflete exatamente a ordem de registro

Limites explícitos:
    - Não gera schema (ver `schema`)
    - Não lê arquivos nem faz binding de valores
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from .errors import DeclarationError


JSON_TYPES: FrozenSet[str] = frozenset(
    {"string", "integer", "number", "boolean", "object", "array", "null"}
)

_PYTHON_TYPES: Dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    list: "array",
    type(None): "null",
    None: "null",
}

# Sentinela: distingue "optional não informado" de `optional=False`.
_UNSET: Any = object()


def normalize_types(types: Any) -> Tuple[str, ...]:
    """
    Normaliza a declaração de tipos para uma tupla de tags JSON Schema.

    Aceita uma tag (`"string"`), um builtin Python (`int`) ou uma sequência
    de ambos. A ordem é preservada e repetições são descartadas.

    Raises:
        DeclarationError: Se algum tipo não for reconhecido.
    """
    if isinstance(types, (list, tuple, set, frozenset)):
        candidates = list(types)
    else:
        candidates = [types]

    if not candidates:
        raise DeclarationError("at least one attribute type must be declared")

    tags: List[str] = []
    for candidate in candidates:
        if isinstance(candidate, str):
            tag = candidate
        else:
            tag = _PYTHON_TYPES.get(candidate, "")

        if tag not in JSON_TYPES:
            raise DeclarationError(
                f"Unknown attribute type {candidate!r}: expected one of {sorted(JSON_TYPES)}"
            )
        if tag not in tags:
            tags.append(tag)

    return tuple(tags)


def decode(serializer: Any, raw: Any) -> Any:
    """Aplica o serializer ao valor bruto (`serializer.load(raw)` ou `serializer(raw)`)."""
    load = getattr(serializer, "load", None)
    if callable(load):
        return load(raw)
    return serializer(raw)


def _check_serializer(name: str, serializer: Any) -> None:
    if serializer is None:
        return
    if callable(getattr(serializer, "load", None)) or callable(serializer):
        return
    raise DeclarationError(
        f"Serializer for attribute '{name}' must define load(raw) or be callable"
    )


@dataclass(frozen=True)
class AttributeSpec:
    """
    Descrição imutável de um campo de configuração.

    Campos:
    - name: identificador único dentro do tipo de configuração
    - types: tags JSON Schema aceitas (união)
    - schema: fragmento extra mesclado ao schema do campo
    - serializer: transformação opcional aplicada ao valor bruto
    - default: valor usado quando o campo está ausente
    - optional: se False, ausência é violação de schema
    """

    name: str
    types: Tuple[str, ...] = ("string",)
    schema: Dict[str, Any] = field(default_factory=dict)
    serializer: Any = None
    default: Any = None
    optional: bool = False

    @classmethod
    def declare(
        cls,
        name: str,
        types: Any = "string",
        *,
        schema: Optional[Dict[str, Any]] = None,
        serializer: Any = None,
        default: Any = None,
        optional: Any = _UNSET,
    ) -> "AttributeSpec":
        """Constrói um `AttributeSpec` validado a partir da forma declarativa."""
        if not isinstance(name, str) or not name.strip():
            raise DeclarationError("attribute name must be a non-empty string")

        if optional is _UNSET:
            optional = default is not None
        elif not optional and default is not None:
            raise DeclarationError(
                f"Attribute '{name}' declares a default and cannot be required"
            )

        if schema is not None and not isinstance(schema, dict):
            raise DeclarationError(f"Extra schema for attribute '{name}' must be a mapping")

        _check_serializer(name, serializer)

        return cls(
            name=name,
            types=normalize_types(types),
            schema=dict(schema or {}),
            serializer=serializer,
            default=default,
            optional=bool(optional),
        )

    def decode(self, raw: Any) -> Any:
        if self.serializer is None:
            return raw
        return decode(self.serializer, raw)


@dataclass
class AttributeRegistry:
    """
    Registro ordenado de atributos de um tipo de configuração.

    Garante unicidade de nome e rejeita nomes reservados pela superfície
    de declaração (métodos que um accessor gerado sombrearia).
    """

    reserved_names: FrozenSet[str] = frozenset()

    _specs: Dict[str, AttributeSpec] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, spec: AttributeSpec) -> AttributeSpec:
        """
        Registra um atributo já validado, preservando a ordem de declaração.

        Raises:
            DeclarationError: Se o nome é reservado pela superfície de
                declaração ou já foi registrado.
        """
        if spec.name in self.reserved_names:
            raise DeclarationError(
                f"Illegal attribute name '{spec.name}': attributes must not "
                "collide with methods of the declaration surface"
            )

        if spec.name in self._specs:
            raise DeclarationError(f"Duplicate attribute name: {spec.name}")

        self._specs[spec.name] = spec
        self._order.append(spec.name)
        return spec

    def declare_attribute(self, name: str, types: Any = "string", **kwargs: Any) -> AttributeSpec:
        """Constrói via `AttributeSpec.declare` e registra (ver `add`)."""
        return self.add(AttributeSpec.declare(name, types, **kwargs))

    def declare_attributes(
        self,
        *names: str,
        types: Any = "string",
        optional: bool = False,
        serializer: Any = None,
    ) -> List[AttributeSpec]:
        """Forma em lote: vários atributos com mesmo tipo, opcionalidade e serializer."""
        return [
            self.declare_attribute(name, types, optional=optional, serializer=serializer)
            for name in names
        ]

    def get(self, name: str) -> AttributeSpec:
        """
        Retorna o atributo registrado sob `name`.

        Raises:
            KeyError: Se o nome não foi declarado.
        """
        return self._specs[name]

    def list(self) -> List[AttributeSpec]:
        return [self._specs[name] for name in self._order]

    def names(self) -> List[str]:
        return list(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[AttributeSpec]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._order)


def reserved_names_of(namespace: Iterable[str], *extra: Iterable[str]) -> FrozenSet[str]:
    """
    Nomes que um accessor gerado não pode sombrear.

    Inclui todos os nomes da superfície, com ou sem `_` inicial: os hooks
    privados (`_bind`, `_freeze`, `_config_type`) são chamados pelo loader
    e quebrariam o carregamento se substituídos por um valor.

    Args:
        namespace: Nomes da classe (tipicamente `dir(cls)`).
        extra: Nomes adicionais, como campos de instância.
    """
    names = set(namespace)
    for group in extra:
        names.update(group)
    return frozenset(names)
