# src/loadable_config/core/__init__.py
"""
Core do loadable_config.

Este pacote contém o pipeline de carregamento e validação, independente
da forma como os tipos de configuração são declarados.

Componentes principais:
    - options   → opções globais configuráveis uma única vez
    - attribute → AttributeSpec e registro ordenado de atributos
    - schema    → geração de schema e validação (jsonschema)
    - merge     → deep-merge de overlays
    - loader    → máquina de estados de carregamento
    - lazy      → inicialização única e thread-safe
    - registry  → ConfigType e registro process-wide
    - errors    → taxonomia de erros

Princípios fundamentais:
    - Cada tipo de configuração carrega no máximo uma vez
    - Nenhuma instância parcialmente preenchida é exposta
    - Toda falha é fatal e tipada

Limites explícitos:
    - Não oferece reload
    - Não é um framework genérico de validação
"""
