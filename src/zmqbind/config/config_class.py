import argparse
import dataclasses
import enum
import tomllib
import typing
from typing import Any, Dict, Optional, Sequence, Type, TypeVar

ConfigType = TypeVar("ConfigType", bound="ConfigClass")


class ConfigClass:
    """Mixin for dataclass configurations that can be filled from the command line and from a TOML file

    Field metadata understood by the parser:
        short:      short option name, e.g. "-n"
        long:       long option name, defaults to the field name in kebab case
        positional: expose the field as an (optional) positional argument
        help:       help text
        choices:    allowed values

    Nested ConfigClass fields add their options to the same parser and read their values from a TOML sub-table
    named after the field. Command line values take precedence over TOML values, TOML values over field defaults.
    """

    @classmethod
    def parse(
        cls: Type[ConfigType], program_name: str, section: str, argv: Optional[Sequence[str]] = None
    ) -> ConfigType:
        parser = argparse.ArgumentParser(program_name, formatter_class=argparse.ArgumentDefaultsHelpFormatter)
        parser.add_argument("--config", "-c", type=str, default=None, help="Path to the TOML configuration file.")
        cls.configure_parser(parser)

        args = vars(parser.parse_args(argv))

        file_values: Dict[str, Any] = {}
        config_path = args.pop("config")
        if config_path is not None:
            with open(config_path, "rb") as f:
                file_values = tomllib.load(f).get(section, {})

        try:
            return cls._build(file_values, args)
        except (TypeError, ValueError) as e:
            parser.error(str(e))
            raise  # unreachable, parser.error() exits

    @classmethod
    def configure_parser(cls, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        hints = typing.get_type_hints(cls)
        for field in dataclasses.fields(cls):  # type: ignore[arg-type]
            field_type = _unwrap_optional(hints[field.name])
            if _is_config_class(field_type):
                field_type.configure_parser(parser, prefix=f"{prefix}{field.name}.")
                continue

            dest = f"{prefix}{field.name}"
            kwargs: Dict[str, Any] = dict(default=None, help=field.metadata.get("help"))

            if "choices" in field.metadata:
                kwargs["choices"] = field.metadata["choices"]

            if field_type is bool:
                kwargs["action"] = "store_true"
            elif typing.get_origin(field_type) is tuple:
                kwargs["nargs"] = "*"
                kwargs["type"] = typing.get_args(field_type)[0]
            else:
                kwargs["type"] = _value_parser(field_type)

            if field.metadata.get("positional", False):
                kwargs["nargs"] = "?"
                parser.add_argument(dest, metavar=field.name, **kwargs)
                continue

            names = [field.metadata.get("long", f"--{field.name.replace('_', '-')}")]
            if "short" in field.metadata:
                names.append(field.metadata["short"])

            parser.add_argument(*names, dest=dest, **kwargs)

    @classmethod
    def _build(cls: Type[ConfigType], file_values: Dict[str, Any], args: Dict[str, Any], prefix: str = "") -> ConfigType:
        hints = typing.get_type_hints(cls)
        values: Dict[str, Any] = {}
        for field in dataclasses.fields(cls):  # type: ignore[arg-type]
            field_type = _unwrap_optional(hints[field.name])
            if _is_config_class(field_type):
                values[field.name] = field_type._build(
                    file_values.get(field.name, {}), args, prefix=f"{prefix}{field.name}."
                )
                continue

            value = args.get(f"{prefix}{field.name}")
            if value is None and field.name in file_values:
                value = file_values[field.name]

            if value is None:
                continue

            values[field.name] = _convert(field_type, value)

        return cls(**values)


def _is_config_class(field_type: Any) -> bool:
    return isinstance(field_type, type) and issubclass(field_type, ConfigClass)


def _unwrap_optional(field_type: Any) -> Any:
    if typing.get_origin(field_type) is typing.Union:
        arguments = [argument for argument in typing.get_args(field_type) if argument is not type(None)]
        if len(arguments) == 1:
            return arguments[0]

    return field_type


def _value_parser(field_type: Any):
    if hasattr(field_type, "from_string"):
        return field_type.from_string

    return field_type


def _convert(field_type: Any, value: Any) -> Any:
    if typing.get_origin(field_type) is tuple:
        return tuple(value)

    if isinstance(field_type, type) and isinstance(value, field_type):
        return value

    if isinstance(field_type, type) and issubclass(field_type, enum.Enum):
        return field_type(value)

    if hasattr(field_type, "from_string") and isinstance(value, str):
        return field_type.from_string(value)

    return field_type(value)
