from .models import BusinessParameters, FormInputs
from .loaders import ConfigLoadError, load_scenarios, load_yaml_config

__all__ = [
    "BusinessParameters",
    "FormInputs",
    "ConfigLoadError",
    "load_scenarios",
    "load_yaml_config",
]
