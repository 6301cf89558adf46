import pytest

from prototyper.spec import ClassModel, ConstructorParam, Dependency, ImportUsage, TypeRef


def test_type_ref_names():
    ref = TypeRef("app.services.cache.Cache")

    assert ref.short_name == "Cache"
    assert ref.module == "app.services.cache"
    assert ref.alias_or_short_name == "Cache"

    ref.alias = "Cache2"
    assert ref.alias_or_short_name == "Cache2"


@pytest.mark.parametrize("fqn", ["", "app..Cache", "app.Cache."])
def test_type_ref_rejects_malformed_names(fqn):
    with pytest.raises(ValueError):
        TypeRef(fqn)


def test_dependency_defaults_var_and_property_to_name():
    dependency = Dependency.create("cache", "app.Cache")

    assert dependency.var == "cache"
    assert dependency.property == "cache"
    assert dependency.type.fqn == "app.Cache"


def test_import_usage_bound_name():
    assert ImportUsage("app.Cache").bound_name == "Cache"
    assert ImportUsage("app.Cache", "AppCache").bound_name == "AppCache"


def test_class_model_helpers():
    model = ClassModel.create("Mailer", "app.mail")
    model.add_import("app.Cache", "C")
    model.add_instantiation("app.mail.Message")
    model.add_instantiation("app.mail.Message")
    model.add_param(ConstructorParam("name", default="None", nullable=True))

    assert model.fqn == "app.mail.Mailer"
    assert model.find_import("app.Cache").alias == "C"
    assert model.find_import("app.Other") is None
    assert model.instantiations == ["app.mail.Message"]
    assert model.constructor_params["name"].has_default
    assert model.is_local_type(TypeRef("app.mail.Message"))
    assert not model.is_local_type(TypeRef("app.Cache"))
    assert ClassModel.create("Script").fqn == "Script"
