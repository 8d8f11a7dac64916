# tests/conftest.py
"""
Fixtures compartilhados para testes do loadable_config.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdos YAML mínimos e determinísticos
- uma factory para escrever arquivos de configuração em `tmp_path`
- isolamento das opções globais entre testes

Decisões arquiteturais:
    - Conteúdos são fornecidos como string; a escrita em disco é explícita
    - As opções globais são resetadas antes e depois de cada teste
    - Imports do pacote são realizados de forma lazy para melhorar
      a clareza de erros durante falhas

Invariantes:
    - Nenhum teste herda opções congeladas de outro teste
    - Arquivos são criados apenas dentro de `tmp_path`

Limites explícitos:
    - Não declara tipos de configuração compartilhados (cada teste declara o seu)
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_global_options():
    """
    Reseta as opções globais em torno de cada teste.

    `configure` só pode ser chamado uma vez por processo; sem este reset,
    o primeiro teste que configurasse as opções bloquearia todos os demais.
    """
    from loadable_config import reset_configuration

    reset_configuration()
    yield
    reset_configuration()


@pytest.fixture
def write_config(tmp_path: Path):
    """
    Fixture factory que escreve um arquivo de configuração em `tmp_path`.

    Returns:
        Callable[[str, str], Path]: recebe (conteúdo, nome do arquivo) e
        devolve o caminho escrito.
    """

    def _write(content: str, name: str = "config.yml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def simple_config_yaml() -> str:
    """YAML com um único atributo string."""
    return "text: Baz\n"


@pytest.fixture
def environments_config_yaml() -> str:
    """
    YAML com chaves de topo por ambiente.

    Usado por:
        - Testes de seleção de ambiente (`environment_key`)
    """
    return """\
development:
  text: dev
production:
  text: prod
"""


@pytest.fixture
def database_config_yaml() -> str:
    """YAML realista com anchors/aliases e atributos de tipos variados."""
    return """\
defaults: &defaults
  host: localhost
  port: 5432

primary: *defaults
replica:
  <<: *defaults
  host: replica.internal
pool_size: 10
ssl: false
"""
