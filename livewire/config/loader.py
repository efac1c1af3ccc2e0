#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置加载器

从YAML文件加载配置并使用Pydantic验证。
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from loguru import logger
from pydantic import ValidationError

from ..common.exceptions import ConfigError
from .models import LiveWireConfig


def load_config(config_path: Path, base_dir: Optional[Path] = None) -> LiveWireConfig:
    """
    从YAML文件加载配置

    Args:
        config_path: 配置文件路径
        base_dir: 用于解析相对路径的目录（默认为配置文件所在目录）

    Returns:
        验证后的LiveWireConfig对象

    Raises:
        ConfigError: 文件不存在、YAML格式错误或配置验证失败
    """
    config_path = Path(config_path)
    base_dir = Path(base_dir).resolve() if base_dir is not None else config_path.resolve().parent

    if not config_path.exists():
        error_msg = f"配置文件不存在: {config_path}"
        logger.error(error_msg)
        raise ConfigError(error_msg)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        error_msg = f"YAML格式错误: {e}"
        logger.error(error_msg)
        raise ConfigError(error_msg) from e

    # 空文件视为全部使用默认值
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        error_msg = f"配置文件顶层必须是映射: {config_path}"
        logger.error(error_msg)
        raise ConfigError(error_msg)

    _apply_relative_paths(raw_config, base_dir)

    try:
        config = LiveWireConfig(**raw_config)
    except ValidationError as e:
        logger.error(f"配置验证失败: {config_path}")
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error['loc'])
            logger.error(f"  {field_path}: {error['msg']}")
        raise ConfigError(f"配置验证失败:\n{e}") from e

    logger.info(f"配置加载成功: {config_path}")
    return config


def _apply_relative_paths(raw_config: Dict[str, Any], base_dir: Path) -> None:
    """将配置中的相对路径字段转换为绝对路径"""
    logging_cfg = raw_config.get('logging')
    if isinstance(logging_cfg, dict) and logging_cfg.get('log_dir'):
        path = Path(logging_cfg['log_dir'])
        if not path.is_absolute():
            path = base_dir / path
        logging_cfg['log_dir'] = str(path.resolve())
