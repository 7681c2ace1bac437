import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from roi_model.config.models import BusinessParameters, FormInputs
from roi_model import scenario_loader

# Configure logger for this module
logger = logging.getLogger(__name__)

_NUMBER = {"type": "number", "nullable": False}

# Raw currency/ratio fields a scenario or the defaults block may set
PARAMETER_SCHEMA: Dict[str, Any] = {
    name: dict(_NUMBER) for name, info in BusinessParameters.model_fields.items()
    if info.annotation is float
}
PARAMETER_SCHEMA["use_optics"] = {"type": "boolean"}

FORM_SCHEMA: Dict[str, Any] = {
    "annual_revenue_eok": {"type": ["number", "string"]},
    "personnel_count": {"type": ["number", "string"]},
    "salary_mil": {"type": ["number", "string"]},
    "equipment_units": {"type": ["number", "string"]},
    "reuse_optical": {"type": "boolean"},
    "misdetect_reduction_pct": dict(_NUMBER),
    "quality_defect_reduction_pct": dict(_NUMBER),
    "target_personnel": {"type": ["number", "string"]},
}

SCENARIO_FILE_SCHEMA: Dict[str, Any] = {
    "extends": {"type": "string", "required": False},
    "defaults": {"type": "dict", "required": False, "schema": PARAMETER_SCHEMA},
    "scenarios": {
        "type": "dict",
        "required": True,
        "valuesrules": {
            "type": "dict",
            "schema": dict(
                PARAMETER_SCHEMA,
                description={"type": "string"},
                form={"type": "dict", "schema": FORM_SCHEMA},
            ),
        },
    },
}


class ConfigLoadError(Exception):
    """Custom exception for errors during config loading."""

    pass


def load_yaml_config(config_path: Union[Path, str]) -> Optional[Dict[str, Any]]:
    """
    Loads configuration data from a YAML file.

    Args:
        config_path: Path pointing to the YAML configuration file.

    Returns:
        A dictionary containing the loaded configuration.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    if not isinstance(config_path, Path):
        config_path = Path(config_path)

    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e
    except OSError as e:
        logger.exception(f"Could not read configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Could not read configuration file {config_path}") from e

    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(
            f"Invalid configuration format in {config_path}: Expected a dictionary."
        )

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config_data


def validate_scenario_config(config_data: Dict[str, Any], source: str = "<memory>") -> None:
    """Check the scenario file layout; raises ConfigLoadError listing every problem."""
    v = Validator(SCENARIO_FILE_SCHEMA)
    if not v.validate(config_data):
        logger.error(f"Scenario config validation failed for {source}: {v.errors}")
        raise ConfigLoadError(f"Invalid scenario config {source}: {v.errors}")


def build_parameters(
    scenario: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None
) -> BusinessParameters:
    """
    Turn one scenario mapping into ``BusinessParameters``.

    The scenario is merged over the file-level defaults. A ``form`` block is
    read in display units (억원, 백만원, percent); the form fields it sets
    beat the defaults, raw fields next to it beat both, and the target
    headcount is still capped at the current headcount.
    """
    defaults = dict(defaults or {})
    raw = {k: v for k, v in scenario.items() if k not in ("form", "description")}

    form = scenario.get("form")
    if form is None:
        return BusinessParameters(**{**defaults, **raw})

    inputs = FormInputs(**form)
    converted = inputs.to_business_parameters().model_dump()
    typed = {name: converted[name] for name in inputs.typed_parameter_fields()}
    return inputs.to_business_parameters(**{**defaults, **typed, **raw})


def load_scenarios(config_path: Union[Path, str]) -> Dict[str, BusinessParameters]:
    """
    Load a scenario file into validated ``BusinessParameters`` keyed by name.

    A parent named under ``extends`` (relative to the file) is resolved with
    ``roi_model.scenario_loader.load``, so chains of parents are followed
    and circular chains are rejected.
    """
    config_path = Path(config_path)
    config_data = load_yaml_config(config_path)

    parent = config_data.pop("extends", None)
    if parent:
        parent_path = config_path.parent / parent
        logger.debug(f"{config_path} extends {parent_path}")
        try:
            parent_data = scenario_loader.load(parent_path, {config_path.resolve()})
        except (ValueError, FileNotFoundError) as e:
            logger.error(f"Could not resolve extends of {config_path}: {e}")
            raise ConfigLoadError(f"Could not resolve extends of {config_path}: {e}") from e
        except yaml.YAMLError as e:
            logger.exception(f"Error parsing parent of {config_path}: {e}")
            raise ConfigLoadError(f"Error parsing YAML file {parent_path}") from e
        config_data = scenario_loader.deep_merge(parent_data, config_data)

    validate_scenario_config(config_data, str(config_path))

    defaults = config_data.get("defaults") or {}
    scenarios: Dict[str, BusinessParameters] = {}
    for name, scenario in config_data["scenarios"].items():
        try:
            scenarios[str(name)] = build_parameters(scenario or {}, defaults)
        except ValidationError as e:
            logger.error(f"Scenario '{name}' in {config_path} is invalid: {e}")
            raise ConfigLoadError(f"Invalid scenario '{name}' in {config_path}") from e

    logger.info(f"Loaded {len(scenarios)} scenario(s) from {config_path}: {list(scenarios)}")
    return scenarios
