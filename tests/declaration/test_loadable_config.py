# tests/declaration/test_loadable_config.py
"""
Testes da superfície declarativa `LoadableConfig`.

Este módulo valida o comportamento ponta a ponta de um tipo de
configuração declarado como subclasse:

- leitura de atributos pelo accessor de classe
- rejeição de valores nulos, ausentes, desconhecidos ou de tipo errado
- atributos em lote, tipados, complexos e opcionais
- seleção de ambiente, prefixo de caminho e overlay via opções globais
- nomes reservados, duplicados e instanciação direta

Decisões arquiteturais:
    - Cada teste declara sua própria subclasse (re-declaração é o padrão
      de isolamento em testes)
    - Opções globais são configuradas via `configure` e resetadas pelo
      fixture autouse de `conftest.py`
"""

import types
from pathlib import Path

import pytest

from loadable_config import (
    ConfigFileNotFoundError,
    ConfigFileNotSetError,
    ConfigValidationError,
    DeclarationError,
    FrozenConfigError,
    LoadableConfig,
    MissingEnvironmentError,
    attribute,
    config_types,
    configure,
)


def test_reads_an_attribute(write_config, simple_config_yaml):
    path = write_config(simple_config_yaml)

    class AppConfig(LoadableConfig, config_file=str(path)):
        text = attribute()

    assert AppConfig.config_type().config_file == str(path)
    assert AppConfig.text == "Baz"
    assert AppConfig.instance().text == "Baz"
    assert AppConfig.loaded() is True


def test_registers_config_type_by_qualname(write_config, simple_config_yaml):
    class AppConfig(LoadableConfig, config_file=write_config(simple_config_yaml)):
        text = attribute()

    assert config_types.get(AppConfig.__qualname__) is AppConfig.config_type()
    assert AppConfig.config_type().owner is AppConfig


def test_nil_value_is_rejected(write_config):
    path = write_config("text: null\n")

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    with pytest.raises(ConfigValidationError, match="None is not of type"):
        AppConfig.instance()


def test_missing_attribute_is_rejected(write_config):
    path = write_config("{}\n")

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    with pytest.raises(ConfigValidationError, match="'text' is a required property"):
        AppConfig.instance()


def test_unknown_attribute_is_rejected(write_config):
    path = write_config("text: Baz\nunknown: 1\n")

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    with pytest.raises(ConfigValidationError, match="'unknown' was unexpected"):
        AppConfig.instance()


def test_bulk_attributes(write_config):
    path = write_config("text1: Foo\ntext2: Bar\n")

    class AppConfig(LoadableConfig, config_file=path):
        pass

    AppConfig.declare_attributes("text1", "text2")

    assert AppConfig.text2 == "Bar"
    assert AppConfig.text1 == "Foo"


def test_typed_attribute(write_config):
    """
    Verifica atributos tipados e a rejeição de tipos incorretos.

    Invariantes:
        - Um inteiro é lido como `int`
        - Uma string numérica não é coagida: é violação de schema
    """
    path = write_config("number: 1000\n")

    class AppConfig(LoadableConfig, config_file=path):
        number = attribute(int)

    assert AppConfig.number == 1000

    bad = write_config('number: "100"\n', "bad.yml")

    class BadConfig(LoadableConfig, config_file=bad):
        number = attribute("integer")

    with pytest.raises(ConfigValidationError, match="number"):
        BadConfig.instance()


def test_complex_typed_attribute(write_config):
    object_schema = {
        "additionalProperties": False,
        "properties": {
            "number": {"type": "integer"},
            "string": {"type": "string"},
        },
        "required": ["number", "string"],
    }
    path = write_config("object:\n  number: 1\n  string: cat\n")

    class AppConfig(LoadableConfig, config_file=path):
        object = attribute("object", schema=object_schema)

    assert AppConfig.object == {"number": 1, "string": "cat"}

    bad = write_config("object:\n  unknown: 1\n  string: 3\n", "bad.yml")

    class BadConfig(LoadableConfig, config_file=bad):
        object = attribute("object", schema=object_schema)

    with pytest.raises(ConfigValidationError, match="is not of type") as exc:
        BadConfig.instance()
    pointers = {v.pointer for v in exc.value.violations}
    assert pointers == {"#/object", "#/object/string"}


def test_type_union(write_config):
    def declare(content, name):
        path = write_config(content, name)

        class UnionConfig(LoadableConfig, config_file=path):
            value = attribute([str, None])

        return UnionConfig

    assert declare("value: cat\n", "cat.yml").value == "cat"
    assert declare("value: null\n", "null.yml").value is None
    with pytest.raises(ConfigValidationError):
        declare("value: 7\n", "seven.yml").instance()


def test_optional_attribute(write_config, simple_config_yaml):
    present = write_config(simple_config_yaml)
    absent = write_config("{}\n", "absent.yml")

    class PresentConfig(LoadableConfig, config_file=present):
        text = attribute(optional=True)

    class AbsentConfig(LoadableConfig, config_file=absent):
        text = attribute(optional=True)

    assert PresentConfig.text == "Baz"
    assert AbsentConfig.text is None


def test_default_is_used_when_absent(write_config):
    path = write_config("{}\n")

    class AppConfig(LoadableConfig, config_file=path):
        port = attribute(int, default=8080)

    assert AppConfig.port == 8080
    assert "port" not in AppConfig.schema()["required"]


def test_serializer_decodes_raw_value(write_config):
    class Seconds:
        @staticmethod
        def load(raw):
            return raw * 1000

    path = write_config("timeout: 3\nroot: /srv\n")

    class AppConfig(LoadableConfig, config_file=path):
        timeout = attribute(int, serializer=Seconds)
        root = attribute(serializer=Path)

    assert AppConfig.timeout == 3000
    assert AppConfig.root == Path("/srv")


@pytest.mark.parametrize("environment, expected", [("development", "dev"), ("production", "prod")])
def test_environment_keying(write_config, environments_config_yaml, environment, expected):
    path = write_config(environments_config_yaml)
    configure(lambda options: setattr(options, "environment_key", environment))

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    assert AppConfig.text == expected


def test_missing_environment(write_config, environments_config_yaml):
    path = write_config(environments_config_yaml)
    configure(lambda options: setattr(options, "environment_key", "does_not_exist"))

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    with pytest.raises(MissingEnvironmentError, match="Configuration missing for environment"):
        AppConfig.instance()


def test_missing_config_file(tmp_path: Path):
    """
    Verifica que um arquivo inexistente falha em todo acesso.

    Invariantes:
        - A mensagem nomeia o caminho resolvido
        - Acessos repetidos re-levantam a mesma falha
    """
    missing = tmp_path / "nonexistent_file"

    class AppConfig(LoadableConfig, config_file=missing):
        text = attribute()

    for _ in range(2):
        with pytest.raises(ConfigFileNotFoundError, match="configuration file .* missing"):
            AppConfig.text
    assert str(missing) in str(pytest.raises(ConfigFileNotFoundError, AppConfig.instance).value)


def test_path_prefix(write_config, simple_config_yaml):
    path = write_config(simple_config_yaml)
    configure(lambda options: setattr(options, "path_prefix", path.parent))

    class AppConfig(LoadableConfig, config_file=path.name):
        text = attribute()

    assert AppConfig.text == "Baz"


def test_overlay_receives_declaring_class(write_config, simple_config_yaml):
    path = write_config(simple_config_yaml)

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    class OtherConfig(LoadableConfig, config_file=path):
        text = attribute()

    def _setup(options):
        @options.overlay
        def overlay(cls):
            return {"text": "overlaid"} if cls is AppConfig else None

    configure(_setup)

    assert AppConfig.text == "overlaid"
    assert OtherConfig.text == "Baz"


def test_no_config_file_set():
    class AppConfig(LoadableConfig):
        text = attribute()

    with pytest.raises(ConfigFileNotSetError, match="config_file not set"):
        AppConfig.instance()


def test_set_config_file_after_declaration(write_config, simple_config_yaml):
    class AppConfig(LoadableConfig):
        text = attribute()

    AppConfig.set_config_file(write_config(simple_config_yaml))
    assert AppConfig.text == "Baz"


def test_reserved_names_are_rejected():
    """
    Verifica que accessors não podem sombrear a superfície de declaração.

    Invariantes:
        - Nomes públicos de `LoadableConfig` são reservados
        - A falha ocorre na declaração, não no carregamento
    """
    with pytest.raises(DeclarationError, match="Illegal attribute name 'instance'"):

        class BadConfig(LoadableConfig, config_file="x.yml"):
            instance = attribute()

    class AppConfig(LoadableConfig, config_file="x.yml"):
        pass

    for name in ("configure", "declare_attribute", "schema", "options"):
        with pytest.raises(DeclarationError):
            AppConfig.declare_attribute(name)


@pytest.mark.parametrize("name", ["_freeze", "_config_type", "_bind", "_values", "_new_blank"])
def test_private_hooks_are_reserved(write_config, simple_config_yaml, name):
    """
    Verifica que hooks privados usados no carregamento não podem ser sombreados.

    Invariantes:
        - Nomes com `_` inicial da superfície também são reservados
        - A falha ocorre na declaração, tanto no corpo da classe quanto depois
    """
    path = write_config(simple_config_yaml)

    with pytest.raises(DeclarationError, match=f"Illegal attribute name '{name}'"):
        types.new_class(
            "Shadow",
            (LoadableConfig,),
            {"config_file": path},
            lambda ns: ns.update(text=attribute(), **{name: attribute()}),
        )

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    with pytest.raises(DeclarationError, match="Illegal attribute name"):
        AppConfig.declare_attribute(name)
    assert AppConfig.text == "Baz"


def test_duplicate_attribute_in_class_body_is_rejected():
    with pytest.raises(DeclarationError, match="Duplicate attribute name: text"):

        class DupConfig(LoadableConfig, config_file="x.yml"):
            text = attribute()
            text = attribute("integer")  # noqa: F811


def test_duplicate_attribute_after_declaration_is_rejected():
    class AppConfig(LoadableConfig, config_file="x.yml"):
        text = attribute()

    with pytest.raises(DeclarationError, match="Duplicate"):
        AppConfig.declare_attribute("text")


def test_instances_are_singletons_and_frozen(write_config, simple_config_yaml):
    path = write_config(simple_config_yaml)

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    with pytest.raises(TypeError, match="singleton"):
        AppConfig()

    config = AppConfig.instance()
    assert AppConfig.instance() is config
    assert isinstance(config, AppConfig)
    assert config.to_dict() == {"text": "Baz"}

    with pytest.raises(FrozenConfigError):
        config.text = "changed"
    with pytest.raises(FrozenConfigError):
        config.anything = 1


def test_idempotent_after_file_removal(write_config, simple_config_yaml):
    path = write_config(simple_config_yaml)

    class AppConfig(LoadableConfig, config_file=path):
        text = attribute()

    assert AppConfig.text == "Baz"
    path.unlink()
    assert AppConfig.text == "Baz"


def test_subclass_inherits_attributes_and_file(write_config):
    path = write_config("text: Baz\n")
    extended = write_config("text: Baz\nextra: 1\n", "extended.yml")

    class BaseConfig(LoadableConfig, config_file=path):
        text = attribute()

    class SameFileConfig(BaseConfig):
        pass

    class ExtendedConfig(BaseConfig, config_file=extended):
        extra = attribute(int)

    assert SameFileConfig.text == "Baz"
    assert ExtendedConfig.extra == 1
    assert ExtendedConfig.schema()["required"] == ["text", "extra"]
    assert BaseConfig.schema()["required"] == ["text"]


def test_base_class_is_not_loadable():
    with pytest.raises(DeclarationError):
        LoadableConfig.instance()
