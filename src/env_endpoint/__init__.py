"""env-endpoint — environment reports with masked configuration values."""

from .specification import FilterSpecification
from .report import build_full_report, build_single_source_report, build_property_source_info
from .environment import Environment
from .endpoint import EnvironmentEndpoint, EnvironmentEndpointFilter, ConfiguredEnvironmentFilter
from .sources import from_mapping, from_environ, from_yaml
from .config import create_endpoint, load_config, load_from_yaml
from .errors import EnvEndpointError, InvalidPatternError, ConfigError
from .types import FilterResult, PropertyConvention, PropertySource, MapPropertySource, MASK_MARKER

__all__ = [
    "FilterSpecification",
    "build_full_report", "build_single_source_report", "build_property_source_info",
    "Environment",
    "EnvironmentEndpoint", "EnvironmentEndpointFilter", "ConfiguredEnvironmentFilter",
    "from_mapping", "from_environ", "from_yaml",
    "create_endpoint", "load_config", "load_from_yaml",
    "EnvEndpointError", "InvalidPatternError", "ConfigError",
    "FilterResult", "PropertyConvention", "PropertySource", "MapPropertySource", "MASK_MARKER",
]
__version__ = "0.1.0"
