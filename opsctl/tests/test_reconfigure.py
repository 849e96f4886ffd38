import pytest

from opsctl.errors import AmbiguityError, NotFoundError, SchemaViolationError, UsageError
from opsctl.modules import fake
from opsctl.modules.models import ConfigMapSnapshot, ConfigTemplate
from opsctl.modules.reconfigure import (
    fill_component_name,
    parse_parameters,
    resolve_config_file,
    resolve_template,
    validate_reconfigure,
)


def test_parse_parameters_splits_comma_separated_pairs():
    assert parse_parameters(["max_connections=1000,general_log=OFF"]) == {
        "max_connections": "1000",
        "general_log": "OFF",
    }


def test_parse_parameters_last_value_wins():
    assert parse_parameters(["a=1", "a=2"]) == {"a": "2"}
    assert parse_parameters(["a=1,a=3"]) == {"a": "3"}


def test_parse_parameters_splits_on_first_equal_sign():
    assert parse_parameters(["sql_mode=A=B"]) == {"sql_mode": "A=B"}


def test_parse_parameters_rejects_pairs_without_equal_sign():
    with pytest.raises(UsageError, match="key=value"):
        parse_parameters(["bad_token"])


def test_single_template_is_selected_and_recorded(reconfigure_op):
    op = reconfigure_op()
    tpl = resolve_template(op, [ConfigTemplate(name="mysql-tpl")])
    assert tpl.name == "mysql-tpl"
    assert op.cfg_template_name == "mysql-tpl"


def test_multiple_templates_need_a_name(reconfigure_op):
    templates = [ConfigTemplate(name="a"), ConfigTemplate(name="b")]
    with pytest.raises(AmbiguityError, match="must specify which template"):
        resolve_template(reconfigure_op(), templates)
    assert resolve_template(reconfigure_op(cfg_template_name="b"), templates).name == "b"


@pytest.mark.parametrize("templates", [
    [ConfigTemplate(name="a")],
    [ConfigTemplate(name="a"), ConfigTemplate(name="b")],
])
def test_unknown_template_name_fails(templates, reconfigure_op):
    with pytest.raises(NotFoundError, match="not exist"):
        resolve_template(reconfigure_op(cfg_template_name="c"), templates)


def test_no_templates_fails(reconfigure_op):
    with pytest.raises(NotFoundError, match="no config template"):
        resolve_template(reconfigure_op(), [])


def test_single_config_file_is_selected(reconfigure_op):
    op = reconfigure_op()
    assert resolve_config_file(op, ConfigMapSnapshot(name="cm", data={"my.cnf": ""})) == "my.cnf"
    assert op.cfg_file == "my.cnf"


def test_empty_config_map_fails(reconfigure_op):
    with pytest.raises(NotFoundError, match="no config file"):
        resolve_config_file(reconfigure_op(), ConfigMapSnapshot(name="cm", data={}))


def test_unknown_config_file_fails(reconfigure_op):
    cm = ConfigMapSnapshot(name="cm", data={"my.cnf": "", "extra.cnf": ""})
    with pytest.raises(NotFoundError, match="not exist"):
        resolve_config_file(reconfigure_op(cfg_file="other.cnf"), cm)
    with pytest.raises(NotFoundError, match="not exist"):
        resolve_config_file(reconfigure_op(), cm)


def test_reconfigure_resolves_template_file_and_parameters(accessor, reconfigure_op):
    op = reconfigure_op(parameters=["max_connections=1000,general_log=OFF"])
    validate_reconfigure(op, accessor)
    assert op.key_values == {"max_connections": "1000", "general_log": "OFF"}
    assert op.cfg_template_name == fake.CONFIG_TEMPLATE_NAME
    assert op.cfg_file == fake.CONFIG_FILE_NAME


def test_reconfigure_only_supports_one_component(accessor, reconfigure_op):
    op = reconfigure_op(component_names=["a", "b"], parameters=["a=1"])
    with pytest.raises(UsageError, match="only support one component"):
        validate_reconfigure(op, accessor)


def test_reconfigure_requires_file_or_parameters(accessor, reconfigure_op):
    with pytest.raises(UsageError, match="required configure file or updated parameters"):
        validate_reconfigure(reconfigure_op(), accessor)


def test_reconfigure_with_bad_parameter_fails_before_lookups(accessor, reconfigure_op):
    with pytest.raises(UsageError, match="key=value"):
        validate_reconfigure(reconfigure_op(parameters=["bad_token"]), accessor)
    assert accessor.calls == []


def test_existing_local_file_skips_resolution(tmp_path, accessor, reconfigure_op):
    local = tmp_path / "my.cnf"
    local.write_text("[mysqld]\nmax_connections=2000\n")
    op = reconfigure_op(url_path=str(local), parameters=["bad_token"])
    validate_reconfigure(op, accessor)
    assert accessor.calls == []
    assert op.key_values == {}
    assert op.cfg_template_name == ""


def test_missing_local_file_fails(tmp_path, accessor, reconfigure_op):
    op = reconfigure_op(url_path=str(tmp_path / "absent.cnf"))
    with pytest.raises(UsageError, match="absent.cnf"):
        validate_reconfigure(op, accessor)


def test_schema_rejection_is_reported(accessor, reconfigure_op):
    op = reconfigure_op(parameters=["general_log=MAYBE"])
    with pytest.raises(SchemaViolationError, match="failed to validate updated params"):
        validate_reconfigure(op, accessor)


def test_template_without_constraint_skips_schema(reconfigure_op):
    accessor = fake.reconfigure_accessor(
        cluster_definition=fake.cluster_definition(templates=[fake.config_template(constraint=None)]),
    )
    op = reconfigure_op(parameters=["anything=goes"])
    validate_reconfigure(op, accessor)
    assert ("get", "configconstraints", "", fake.CONFIG_CONSTRAINT_NAME) not in accessor.calls


def test_missing_config_map_is_propagated(reconfigure_op):
    accessor = fake.reconfigure_accessor(config_map=fake.config_map(volume_name="other-volume"))
    with pytest.raises(NotFoundError, match="configmaps"):
        validate_reconfigure(reconfigure_op(parameters=["max_connections=10"]), accessor)


def test_template_choice_scopes_the_config_map(reconfigure_op):
    templates = [
        fake.config_template("first", volume_name="first-volume"),
        fake.config_template("second", volume_name="second-volume"),
    ]
    accessor = fake.reconfigure_accessor(
        cluster_definition=fake.cluster_definition(templates=templates),
        config_map=fake.config_map(volume_name="second-volume", data={"second.cnf": ""}),
    )
    op = reconfigure_op(cfg_template_name="second", parameters=["max_connections=10"])
    validate_reconfigure(op, accessor)
    assert op.cfg_file == "second.cnf"


def test_fill_component_name_adopts_the_only_component(reconfigure_op):
    accessor = fake.reconfigure_accessor()
    op = reconfigure_op(component_names=[])
    fill_component_name(op, accessor)
    assert op.component_names == [fake.COMPONENT_NAME]


def test_fill_component_name_with_several_components_fails(reconfigure_op):
    accessor = fake.reconfigure_accessor(
        cluster=fake.cluster(components=[("mysql", "mysql"), ("proxy", "proxy")]),
    )
    with pytest.raises(AmbiguityError, match="must specify which component"):
        fill_component_name(reconfigure_op(component_names=[]), accessor)


def test_fill_component_name_keeps_given_component(accessor, reconfigure_op):
    op = reconfigure_op(component_names=["mysql"])
    fill_component_name(op, accessor)
    assert op.component_names == ["mysql"]
    assert accessor.calls == []
