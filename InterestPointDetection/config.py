"""
Configuration management for the interest point detector.

This module provides predefined configurations, validation, and
configuration management utilities.
"""

import copy
import json
import os
from typing import Dict, List, Any

from .detectors import InterestPointDetector, ScaledInterestPointDetector
from .interest_operators import create_interest_operator
from .logger import get_logger
from .orientation import OrientationAssigner

logger = get_logger("config")


# =============================================================================
# Default Configurations
# =============================================================================


DEFAULT_CONFIG = {
    'detector': 'flat',
    'operator': 'harris',
    'max_points': 1000,
    'max_tile_dimension': 0,
    'operator_params': {
        'harris': {
            'threshold': 1e-5,
            'k': -1.0          # Negative selects the Noble measure
        },
        'log': {
            'threshold': 0.03
        }
    },
    'scale_space': {
        'scales': 3,
        'octaves': 3,
        'init_sigma': 1.6
    },
    'orientation': {
        'half_width': 5,
        'num_bins': 36,
        'smoothing': 5.0
    },
    'reject_unlocalized': False,
    'support_size': 41
}


PRESET_CONFIGS = {
    'corners': {
        'detector': 'flat',
        'operator': 'harris',
        'max_points': 1000
    },

    'blobs': {
        'detector': 'scaled',
        'operator': 'log',
        'max_points': 500,
        'scale_space': {
            'scales': 3,
            'octaves': 3
        }
    },

    'large_image': {
        'detector': 'flat',
        'operator': 'harris',
        'max_points': 1000,
        'max_tile_dimension': 2048
    }
}


VALID_DETECTORS = ['flat', 'scaled']
VALID_OPERATORS = ['harris', 'log']


# =============================================================================
# Configuration Functions
# =============================================================================

def get_default_config() -> Dict[str, Any]:
    """Get a copy of the default configuration"""
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries

    Args:
        base_config: Base configuration
        override_config: Configuration to override base with

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def create_config_from_preset(preset: str) -> Dict[str, Any]:
    """
    Create configuration from a preset

    Args:
        preset: Preset name ('corners', 'blobs', 'large_image')

    Returns:
        Configuration dictionary

    Raises:
        ValueError: If preset is not available
    """
    if preset not in PRESET_CONFIGS:
        available = ', '.join(PRESET_CONFIGS.keys())
        raise ValueError(f"Unknown preset: {preset}. Available: {available}")

    return merge_configs(get_default_config(), PRESET_CONFIGS[preset])


def validate_config(config: Dict[str, Any]) -> Dict[str, List[str]]:
    """
    Validate configuration and return any issues

    Args:
        config: Configuration to validate

    Returns:
        Dictionary with validation results:
        {
            'errors': [list of error messages],
            'warnings': [list of warning messages]
        }
    """
    errors = []
    warnings = []

    required_fields = ['detector', 'operator', 'max_points']
    for field in required_fields:
        if field not in config:
            errors.append(f"Missing required field: {field}")

    if 'detector' in config and config['detector'] not in VALID_DETECTORS:
        errors.append(f"'detector' must be one of: {VALID_DETECTORS}")

    if 'operator' in config and config['operator'] not in VALID_OPERATORS:
        errors.append(f"'operator' must be one of: {VALID_OPERATORS}")

    if 'max_points' in config:
        if not isinstance(config['max_points'], int) or config['max_points'] < 0:
            errors.append("'max_points' must be a non-negative integer")
        elif config['max_points'] == 0:
            warnings.append("'max_points' is 0, culling is disabled")

    tile = config.get('max_tile_dimension', 0)
    if not isinstance(tile, int) or tile < 0:
        errors.append("'max_tile_dimension' must be a non-negative integer")
    elif 0 < tile < 64:
        warnings.append("Very small tiles lose many interest points along tile borders")

    scale_space = config.get('scale_space', {})
    if not isinstance(scale_space, dict):
        errors.append("'scale_space' must be a dictionary")
    else:
        for key in ['scales', 'octaves']:
            value = scale_space.get(key, 1)
            if not isinstance(value, int) or value < 1:
                errors.append(f"'scale_space.{key}' must be a positive integer")

    operator_params = config.get('operator_params', {})
    if not isinstance(operator_params, dict):
        errors.append("'operator_params' must be a dictionary")
    else:
        for operator, params in operator_params.items():
            if not isinstance(params, dict):
                errors.append(f"Parameters for {operator} must be a dictionary")

    if config.get('detector') == 'flat' and config.get('operator') == 'log':
        warnings.append("The LoG operator expects a blurred image when used without scale space")

    return {'errors': errors, 'warnings': warnings}


def save_config(config: Dict[str, Any], filepath: str):
    """
    Save configuration to JSON file

    Args:
        config: Configuration to save
        filepath: Path to save file
    """
    with open(filepath, 'w') as f:
        json.dump(config, f, indent=2)
    logger.info("Configuration saved to: %s", filepath)


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from JSON file

    Args:
        filepath: Path to configuration file

    Returns:
        Loaded configuration, merged over the defaults

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(filepath, 'r') as f:
        config = json.load(f)

    logger.info("Configuration loaded from: %s", filepath)
    return merge_configs(get_default_config(), config)


def get_available_presets() -> List[str]:
    """Get list of available preset configurations"""
    return list(PRESET_CONFIGS.keys())


def describe_preset(preset: str) -> str:
    """
    Get description of a preset configuration

    Args:
        preset: Preset name

    Returns:
        Description string
    """
    descriptions = {
        'corners': "Single-scale Noble corners, up to 1000 points",
        'blobs': "Scale-space Laplacian of Gaussian blobs over 3 octaves",
        'large_image': "Single-scale Noble corners processed in 2048 pixel tiles"
    }

    return descriptions.get(preset, "No description available")


def create_detector_from_config(config: Dict[str, Any]):
    """
    Build the detector described by a configuration

    Args:
        config: Configuration (missing keys fall back to the defaults)

    Returns:
        Configured detector

    Raises:
        ValueError: If the configuration has errors
    """
    config = merge_configs(get_default_config(), config)
    validation = validate_config(config)
    if validation['errors']:
        raise ValueError("Invalid configuration: " + "; ".join(validation['errors']))
    for warning in validation['warnings']:
        logger.warning(warning)

    operator = create_interest_operator(
        config['operator'], **config['operator_params'].get(config['operator'], {}))
    orientation = OrientationAssigner(**config['orientation'])

    if config['detector'] == 'scaled':
        return ScaledInterestPointDetector(
            interest=operator,
            max_points=config['max_points'],
            orientation=orientation,
            reject_unlocalized=config['reject_unlocalized'],
            **config['scale_space']
        )
    return InterestPointDetector(
        interest=operator,
        max_points=config['max_points'],
        orientation=orientation,
        reject_unlocalized=config['reject_unlocalized']
    )
