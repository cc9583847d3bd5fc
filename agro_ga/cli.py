"""
CLI module for the plant-layout optimizer.

Handles run configuration loading, validation, and running the engine.

Run configuration format:

    domain:
      type: annulus
      parameters: {inner_radius: 2.0, outer_radius: 6.0}
    plants:                  # either 'plants' ...
      count: 20
      radius: 0.5
      type: tomato           # optional
    inventory:               # ... or 'inventory'
      - {name: Roma, type: tomato, radius: 0.4, quantity: 6}
    evolution: {...}         # optional, see EvolutionSettings
    output:                  # optional
      root: output/annulus
      name: layout
      overwrite: false
      plot: true
    random_seed: 42          # optional, overrides evolution.random_seed
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ConfigurationError, EvolutionSettings, load_config
from .data_models import EvolutionResult, PlantSlot, PlantType
from .domains import Domain, DomainType, create_domain
from .engine import EvolutionEngine
from .inventory import PlantInventory, uniform_slots
from .io_utils import result_metadata, save_individual_to_csv, save_metadata
from .layout_metrics import LayoutMetrics, format_layout_report
from .views import ConsoleEvolutionView


class ConfigValidationError(ConfigurationError):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise ConfigValidationError(str(e)) from e

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration must be a mapping at top level")

    return config


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if 'domain' not in config:
        raise ConfigValidationError("Missing required field: 'domain'")

    domain_config = config['domain']
    if not isinstance(domain_config, dict):
        raise ConfigValidationError("'domain' must be a dictionary")

    if 'type' not in domain_config:
        raise ConfigValidationError("Missing required field: 'domain.type'")

    if not isinstance(domain_config.get('parameters'), dict):
        raise ConfigValidationError("'domain.parameters' must be a dictionary")

    has_plants = 'plants' in config
    has_inventory = 'inventory' in config

    if not has_plants and not has_inventory:
        raise ConfigValidationError("Run requires either 'plants' or 'inventory'")

    if has_plants and has_inventory:
        raise ConfigValidationError(
            "Run cannot have both 'plants' and 'inventory'. Please specify only one."
        )

    if has_plants:
        _validate_plants_config(config['plants'])
    else:
        _validate_inventory_config(config['inventory'])

    if 'evolution' in config and not isinstance(config['evolution'], (dict, type(None))):
        raise ConfigValidationError("'evolution' must be a dictionary")

    if 'output' in config:
        if not isinstance(config['output'], dict):
            raise ConfigValidationError("'output' must be a dictionary")
        if 'root' not in config['output']:
            raise ConfigValidationError("Missing required field: 'output.root'")

    seed = config.get('random_seed')
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool) or seed < 0):
        raise ConfigValidationError(
            f"'random_seed' must be a non-negative integer, got: {seed}"
        )


def _validate_plants_config(plants: Any) -> None:
    if not isinstance(plants, dict):
        raise ConfigValidationError("'plants' must be a dictionary")

    for field in ('count', 'radius'):
        if field not in plants:
            raise ConfigValidationError(f"Missing required field: 'plants.{field}'")

    count = plants['count']
    if not isinstance(count, int) or isinstance(count, bool) or count <= 0:
        raise ConfigValidationError(f"'plants.count' must be a positive integer, got: {count}")

    if not _is_positive_number(plants['radius']):
        raise ConfigValidationError(f"'plants.radius' must be a positive number, got: {plants['radius']}")


def _validate_inventory_config(inventory: Any) -> None:
    if not isinstance(inventory, list) or not inventory:
        raise ConfigValidationError("'inventory' must be a non-empty list")

    for position, item in enumerate(inventory, start=1):
        if not isinstance(item, dict):
            raise ConfigValidationError(f"'inventory' item {position} must be a dictionary")

        for field in ('name', 'radius', 'quantity'):
            if field not in item:
                raise ConfigValidationError(f"'inventory' item {position} missing field '{field}'")

        quantity = item['quantity']
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise ConfigValidationError(
                f"'inventory' item {position} quantity must be a positive integer, got: {quantity}"
            )

        if not _is_positive_number(item['radius']):
            raise ConfigValidationError(
                f"'inventory' item {position} radius must be a positive number, got: {item['radius']}"
            )


def build_domain(config: Dict[str, Any]) -> Domain:
    domain_config = config['domain']
    domain_type = DomainType.from_name(domain_config['type'])
    return create_domain(domain_type, domain_config['parameters'])


def build_slots(config: Dict[str, Any]) -> List[PlantSlot]:
    """
    Gene templates from the 'plants' or 'inventory' section.

    Raises:
        ConfigValidationError: If a plant type or inventory item is invalid
    """
    try:
        if 'inventory' in config:
            return PlantInventory.from_config(config['inventory']).expand_slots()

        plants = config['plants']
        plant_type = PlantType.from_name(plants.get('type', 'generic'))
        return uniform_slots(plants['count'], float(plants['radius']), plant_type)
    except ValueError as e:
        raise ConfigValidationError(str(e))


def build_settings(config: Dict[str, Any]) -> EvolutionSettings:
    """Evolution settings with the top-level random_seed applied."""
    evolution = dict(config.get('evolution') or {})
    if config.get('random_seed') is not None:
        evolution['random_seed'] = config['random_seed']
    return EvolutionSettings.from_dict(evolution)


def write_outputs(
    result: EvolutionResult,
    domain: Domain,
    output_config: Dict[str, Any]
) -> Dict[str, Path]:
    """
    Write layout CSV, metadata sidecar and (optionally) the plot.

    Returns:
        Mapping of output kind ('csv', 'metadata', 'plot') to written path

    Raises:
        FileExistsError: If an output exists and overwrite is off
    """
    output_root = Path(output_config['root'])
    overwrite = output_config.get('overwrite', False)
    name = output_config.get('name', 'layout')

    written = {}
    written['csv'] = save_individual_to_csv(
        result.best, output_root / f"{name}.csv", overwrite=overwrite
    )
    written['metadata'] = save_metadata(
        result_metadata(result, domain, extra={'layout_csv': written['csv'].name}),
        output_root / f"{name}_metadata.yaml",
        overwrite=overwrite
    )

    if output_config.get('plot', True):
        from .visualization_utils import save_layout_plot
        written['plot'] = save_layout_plot(result.best, domain, output_root / f"{name}.png")

    return written


def run_from_config(config_path: str, progress_interval: Optional[int] = 50) -> EvolutionResult:
    """
    Load run configuration, evolve a layout and write the outputs.

    This is the main entry point called by agro_cli.py.

    Args:
        config_path: Path to run configuration YAML file
        progress_interval: Generations between progress lines (0 to hide)

    Returns:
        EvolutionResult of the run

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config is invalid
        DomainConstraintError: If the domain or plant sizes are invalid
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)

    domain = build_domain(config)
    slots = build_slots(config)
    settings = build_settings(config)
    print(f"Domain: {domain.describe()}")
    print(f"Plants: {len(slots)}\n")

    engine = EvolutionEngine(
        domain, slots, settings,
        listener=ConsoleEvolutionView(progress_interval=progress_interval or 0)
    )
    result = engine.run()

    print()
    print(format_layout_report(LayoutMetrics(domain).analyze_layout(result.best)))

    if 'output' in config:
        written = write_outputs(result, domain, config['output'])
        print()
        for kind, path in written.items():
            print(f"  Saved {kind}: {path}")

    return result
