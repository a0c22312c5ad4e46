"""Geo Query Parameters Entry Point

Command-line interface that loads an environment's configuration, builds the
default query parameters and prints the derived bounds and coverer options.
"""

import argparse
import json
import sys
from typing import Any, Dict, Optional

from src.config.config_loader import ConfigLoader
from src.exceptions import GeoConfigurationError, GeoPreconditionError, GeoValidationError
from src.utils import get_logger, setup_logging_from_config
from .geometry.lat_lng import LatLng
from .models.query_params import SpatialQueryParams


def describe(params: SpatialQueryParams) -> Dict[str, Any]:
    """Summarize query parameters and their derived values."""
    return {
        "params": params.to_persisted(),
        "min_distance_rad": params.min_distance_rad(),
        "max_distance_rad": params.max_distance_rad(),
        "near_query": params.is_near_query(),
        "coverer_options": params.cover.to_options().model_dump(),
    }


def main(args: Optional[list] = None) -> int:
    """Main entry point.
    
    Args:
        args: Command line arguments (defaults to sys.argv)
        
    Returns:
        Exit code (0 for success, 1 for configuration or validation errors)
    """
    parser = argparse.ArgumentParser(
        description="Geo Query Parameters - show derived bounds for configured query defaults"
    )
    parser.add_argument(
        "--environment",
        default="development",
        help="Environment to load (default: development)"
    )
    parser.add_argument(
        "--config-dir",
        default="config",
        help="Directory holding environment_config.json (default: config)"
    )
    parser.add_argument(
        "--origin",
        nargs=2,
        type=float,
        metavar=("LAT", "LNG"),
        help="Origin of the near query in degrees"
    )
    parser.add_argument(
        "--max-distance",
        type=float,
        help="Maximum distance from origin in meters"
    )
    
    parsed_args = parser.parse_args(args)
    config_loader = ConfigLoader(parsed_args.config_dir)
    logger = get_logger(__name__)
    
    try:
        setup_logging_from_config(
            config_loader.get_logging_config(parsed_args.environment),
            environment=parsed_args.environment,
        )
        
        overrides: Dict[str, Any] = {}
        if parsed_args.origin is not None:
            overrides["origin"] = LatLng.from_persisted(
                {"lat": parsed_args.origin[0], "lng": parsed_args.origin[1]}
            )
        if parsed_args.max_distance is not None:
            overrides["max_distance"] = parsed_args.max_distance
        
        params = SpatialQueryParams.from_config(config_loader, parsed_args.environment, **overrides)
    except (GeoConfigurationError, GeoValidationError, GeoPreconditionError) as e:
        logger.error(f"Cannot build query parameters: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    
    print(json.dumps(describe(params), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
