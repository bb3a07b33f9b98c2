import logging
import os
from typing import Dict, List, Optional

import yaml

from intelcrawl.domain.seed_config import SeedConfig
from intelcrawl.exceptions import SeedConfigError
from intelcrawl.services.seed_config_parser import SeedConfigParser

logger = logging.getLogger(__name__)


class SeedConfigStore:
    """Filesystem/YAML IO for seed config files in one directory."""

    def __init__(self, *, configs_dir: str, parser: Optional[SeedConfigParser] = None):
        self.configs_dir = configs_dir
        self.parser = parser or SeedConfigParser()

    def list_config_files(self) -> List[str]:
        if not os.path.isdir(self.configs_dir):
            return []
        return sorted(
            fname
            for fname in os.listdir(self.configs_dir)
            if fname.endswith(".yml") or fname.endswith(".yaml")
        )

    def _resolve_path(self, config_path: str) -> str:
        return config_path if os.path.isabs(config_path) else os.path.join(self.configs_dir, config_path)

    def load_file(self, config_path: str) -> SeedConfig:
        full_path = self._resolve_path(config_path)
        if not os.path.isfile(full_path):
            raise SeedConfigError(config_path)
        try:
            with open(full_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise SeedConfigError(config_path, f"could not be read: {e}") from e
        return self.parser.parse(config_path=full_path, data=data)

    def load_all(self) -> Dict[str, SeedConfig]:
        """Every valid config keyed by name; invalid files are logged and skipped."""
        configs: Dict[str, SeedConfig] = {}
        for fname in self.list_config_files():
            try:
                config = self.load_file(fname)
            except SeedConfigError as e:
                logger.warning("Skipping seed config: %s", e)
                continue
            if config.name in configs:
                logger.warning("Duplicate seed config name %r in %s; keeping the first", config.name, fname)
                continue
            configs[config.name] = config
        return configs

    def get(self, name: str) -> SeedConfig:
        config = self.load_all().get(name)
        if config is None:
            raise SeedConfigError(name)
        return config


def load_seed_configs(configs_dir: str, parser: Optional[SeedConfigParser] = None) -> Dict[str, SeedConfig]:
    return SeedConfigStore(configs_dir=configs_dir, parser=parser).load_all()
