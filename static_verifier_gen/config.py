#!/usr/bin/env python3
"""
Emitter configuration management.

This module handles loading and validating YAML configuration files that
control how shared verifier functions are named and which of them are
emitted. This allows several generated files to be built from the same
schema (for example one for op verifiers and one for rewrite patterns)
without their symbols colliding.
"""

import yaml
import jsonschema
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

from .naming import DEFAULT_SYMBOL_SCOPE


# JSON Schema for validating emitter configuration YAML files
EMITTER_CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Static Verifier Emitter Configuration",
    "description": "Naming and output options for shared constraint functions",
    "type": "object",
    "properties": {
        "tag": {
            "type": "string",
            "description": "Free text distinguishing emitters over the same input file"
        },
        "symbol_scope": {
            "type": "string",
            "pattern": "^[A-Za-z_][A-Za-z0-9_]*$",
            "description": "Scope prefix of generated symbol names"
        },
        "input_filename": {
            "type": "string",
            "minLength": 1,
            "description": "File name used for the output label instead of the schema path"
        },
        "emit_ops": {
            "type": "boolean",
            "description": "Emit op verifier constraint functions"
        },
        "emit_patterns": {
            "type": "boolean",
            "description": "Emit rewrite pattern constraint functions"
        }
    },
    "additionalProperties": False
}


@dataclass
class EmitterConfig:
    """Options for one static verifier emitter run."""
    tag: str = ""
    symbol_scope: str = DEFAULT_SYMBOL_SCOPE
    input_filename: Optional[str] = None  # None: use the schema path
    emit_ops: bool = True
    emit_patterns: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'EmitterConfig':
        """Create EmitterConfig from dictionary (loaded from YAML)."""
        config = cls()
        if 'tag' in d:
            config.tag = d['tag']
        if 'symbol_scope' in d:
            config.symbol_scope = d['symbol_scope']
        if 'input_filename' in d:
            config.input_filename = d['input_filename']
        if 'emit_ops' in d:
            config.emit_ops = d['emit_ops']
        if 'emit_patterns' in d:
            config.emit_patterns = d['emit_patterns']
        return config

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> 'EmitterConfig':
        """Load and validate configuration from YAML file.

        Raises:
            ValueError: If the file is malformed or doesn't match the schema
            FileNotFoundError: If file doesn't exist
        """
        with open(yaml_path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid config file {yaml_path}: {e}") from e

        # An empty file means all defaults
        if data is None:
            data = {}

        try:
            jsonschema.validate(instance=data, schema=EMITTER_CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ValueError(f"Invalid config file {yaml_path}: {e.message}") from e

        return cls.from_dict(data)

    def label_filename(self, schema_path: Path) -> str:
        """File name the output label is derived from."""
        if self.input_filename:
            return self.input_filename
        return str(schema_path)


def load_config(config_path: Optional[Path] = None) -> EmitterConfig:
    """
    Load emitter configuration from file or use the defaults.

    Args:
        config_path: Path to YAML config file

    Returns:
        EmitterConfig object
    """
    if config_path and config_path.exists():
        return EmitterConfig.from_yaml(config_path)

    return EmitterConfig()
