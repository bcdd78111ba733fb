from hydra import initialize, compose
import os
from hydra.core.global_hydra import GlobalHydra

from omegaconf import DictConfig


def load_hydra_config(version_base=None, config_path="../../conf", config_name="config.yaml") -> DictConfig:
    if GlobalHydra.instance().is_initialized():
        GlobalHydra.instance().clear()
    with initialize(version_base=version_base, config_path=config_path):
        cfg = compose(config_name=config_name)
    return cfg


def init_env(cfg):
    for item in cfg.get("env") or []:
        os.environ[str(item.name)] = str(item.value)


conf = load_hydra_config()
init_env(conf)
