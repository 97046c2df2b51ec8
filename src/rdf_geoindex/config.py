"""
Geo Index Configuration.

Provides:
- GeoIndexConfig: table, partitions, predicate allow-list, credentials,
  mock backend flag and write buffering
- Loading from flat property maps (the ``sc.*`` keys), dicts, JSON and YAML
- Configuration validation
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

import yaml

from rdf_geoindex.constants import FEATURE_NAME
from rdf_geoindex.errors import ConfigValidationError
from rdf_geoindex.terms import IRI

logger = logging.getLogger(__name__)

# Property keys
CLOUDBASE_AUTHS = "sc.cloudbase.authorizations"
CLOUDBASE_INSTANCE = "sc.cloudbase.instancename"
CLOUDBASE_ZOOKEEPERS = "sc.cloudbase.zookeepers"
CLOUDBASE_USER = "sc.cloudbase.username"
CLOUDBASE_PASSWORD = "sc.cloudbase.password"
NUM_PARTITIONS = "sc.cloudbase.numPartitions"
GEO_TABLENAME = "sc.geo.table"
GEO_NUM_PARTITIONS = "sc.geo.numPartitions"
GEO_PREDICATES_LIST = "sc.geo.predicates"
GEO_WRITE_BUFFER_SIZE = "sc.geo.writeBufferSize"
USE_MOCK_INSTANCE = ".useMockInstance"

DEFAULT_NUM_PARTITIONS = 25


def _split_list(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v).strip() for v in value if str(v).strip()]


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("true", "1", "yes", "on")


@dataclass
class GeoIndexConfig:
    """Configuration for a geo index."""
    table_name: str = ""
    num_partitions: int = DEFAULT_NUM_PARTITIONS
    predicates: List[str] = field(default_factory=list)

    # Connection
    instance_name: str = ""
    zookeepers: str = ""
    username: str = ""
    password: str = ""
    authorizations: List[str] = field(default_factory=list)
    use_mock: bool = False

    # 0 writes every store call immediately
    write_buffer_size: int = 0

    def get_geo_predicates(self) -> FrozenSet[IRI]:
        return frozenset(IRI(p) for p in self.predicates)

    def index_schema_format(self) -> str:
        """Key layout for partitioned spatial tables."""
        return (
            f"%~#s%{self.num_partitions}#r%{FEATURE_NAME}"
            "#cstr%0,3#gh%yyyyMMdd#d::%~#s%3,2#gh::%~#s%#id"
        )

    def backend_params(self) -> Dict[str, Any]:
        """Connection parameters handed to a backend factory."""
        return {
            "instanceId": self.instance_name,
            "zookeepers": self.zookeepers,
            "user": self.username,
            "password": self.password,
            "auths": ",".join(self.authorizations),
            "tableName": self.table_name,
            "indexSchemaFormat": self.index_schema_format(),
            "useMock": str(self.use_mock).lower(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table_name": self.table_name,
            "num_partitions": self.num_partitions,
            "predicates": list(self.predicates),
            "instance_name": self.instance_name,
            "zookeepers": self.zookeepers,
            "username": self.username,
            "password": self.password,
            "authorizations": list(self.authorizations),
            "use_mock": self.use_mock,
            "write_buffer_size": self.write_buffer_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoIndexConfig":
        return cls(
            table_name=data.get("table_name", ""),
            num_partitions=int(data.get("num_partitions", DEFAULT_NUM_PARTITIONS)),
            predicates=_split_list(data.get("predicates")),
            instance_name=data.get("instance_name", ""),
            zookeepers=data.get("zookeepers", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            authorizations=_split_list(data.get("authorizations")),
            use_mock=_parse_bool(data.get("use_mock", False)),
            write_buffer_size=int(data.get("write_buffer_size", 0)),
        )

    @classmethod
    def from_properties(cls, props: Mapping[str, Any]) -> "GeoIndexConfig":
        """
        Build a configuration from flat ``sc.*`` property keys.

        The geo partition count falls back to the store-wide partition
        count, then to 25.
        """
        partitions = props.get(GEO_NUM_PARTITIONS, props.get(NUM_PARTITIONS, DEFAULT_NUM_PARTITIONS))
        return cls(
            table_name=props.get(GEO_TABLENAME, ""),
            num_partitions=int(partitions),
            predicates=_split_list(props.get(GEO_PREDICATES_LIST)),
            instance_name=props.get(CLOUDBASE_INSTANCE, ""),
            zookeepers=props.get(CLOUDBASE_ZOOKEEPERS, ""),
            username=props.get(CLOUDBASE_USER, ""),
            password=props.get(CLOUDBASE_PASSWORD, ""),
            authorizations=_split_list(props.get(CLOUDBASE_AUTHS)),
            use_mock=_parse_bool(props.get(USE_MOCK_INSTANCE, False)),
            write_buffer_size=int(props.get(GEO_WRITE_BUFFER_SIZE, 0)),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GeoIndexConfig":
        """
        Load configuration from a JSON or YAML file.

        Files whose top-level keys start with ``sc.`` (or the mock flag) are
        read as property maps; anything else as ``to_dict()`` output.
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ConfigValidationError(f"Configuration file {path} must hold a mapping")

        if any(k.startswith("sc.") or k == USE_MOCK_INSTANCE for k in data):
            config = cls.from_properties(data)
        else:
            config = cls.from_dict(data)
        logger.debug(f"Loaded geo index configuration from {path}")
        return config

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)


class ConfigValidator:
    """Validates geo index configuration."""

    @staticmethod
    def validate(config: GeoIndexConfig) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []

        if not config.table_name:
            errors.append(f"{GEO_TABLENAME} not set")

        if config.num_partitions < 1:
            errors.append("num_partitions must be at least 1")

        if config.write_buffer_size < 0:
            errors.append("write_buffer_size cannot be negative")

        if not config.use_mock:
            if not config.instance_name:
                errors.append(f"{CLOUDBASE_INSTANCE} not set")
            if not config.username:
                errors.append(f"{CLOUDBASE_USER} not set")

        return errors

    @staticmethod
    def validate_or_raise(config: GeoIndexConfig) -> None:
        """Validate configuration, raising on errors."""
        errors = ConfigValidator.validate(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))


def create_mock_config(table_name: str = "geo_index", predicates: Optional[List[str]] = None) -> GeoIndexConfig:
    """Configuration for an in-memory index."""
    return GeoIndexConfig(
        table_name=table_name,
        predicates=list(predicates or []),
        use_mock=True,
    )
