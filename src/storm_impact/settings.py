"""Project settings for the storm_impact Kedro project.

Only the config loader is set; everything else uses Kedro's defaults
(conf/base + conf/local, conf/logging.yml for logging).
"""

from kedro.config import OmegaConfigLoader

CONFIG_LOADER_CLASS = OmegaConfigLoader
CONFIG_LOADER_ARGS = {
    "base_env": "base",
    "default_run_env": "local",
}
