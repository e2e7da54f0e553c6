from collections.abc import Mapping

from pydantic import BaseModel

RUN_FIELDS = frozenset({'date', 'commit', 'kind', 'by_crate'})


def validate_config_from_attributes_true(schema: type[BaseModel]) -> bool:
    conf = getattr(schema, 'model_config', None)
    if conf is None:
        return False
    if isinstance(conf, Mapping):
        return bool(conf.get('from_attributes', False))
    return bool(getattr(conf, 'from_attributes', False))


def validate_run_schema(schema: type[BaseModel]) -> None:
    """
    Check that `schema` can be built from a Run via `model_validate(run)`.

    Raises
    ------
    TypeError
        If it is not a BaseModel subclass, lacks `from_attributes=True`, or
        requires a field a Run does not have.
    """
    if not isinstance(schema, type) or not issubclass(schema, BaseModel):
        raise TypeError('run_schema must be a subclass of pydantic.BaseModel.')
    if not validate_config_from_attributes_true(schema):
        raise TypeError('run_schema.model_config.from_attributes must be set to True.')

    required = {n for n, f in schema.model_fields.items() if f.is_required()}
    missing = required - RUN_FIELDS
    if missing:
        raise TypeError(f'Required run_schema fields must be Run attributes: missing={sorted(missing)}')
