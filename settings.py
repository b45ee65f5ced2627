"""
Settings and Global Initialization Module for Essay Scoring.

This module is responsible for:
1. Retrieving application-wide configuration settings using the `config.py` module.
2. Setting up global logging using a utility from `logger_utils.py`.
3. Constructing the process-wide `EmbeddingModelService`. The service is created
   unloaded; the model itself is only fetched when `score.initialize_model()` is called.

The objects initialized here (`settings`, `default_model_service`) are intended to be
imported and used by other modules in the application.
"""

import logging
import os

from config import get_settings
from embedding_model import EmbeddingModelService
from logger_utils import setup_global_logger

settings = get_settings()

log_level_to_use = os.getenv("LOG_LEVEL", settings.app.log_level).upper()
setup_global_logger(log_level=log_level_to_use, app_name=settings.app.name)

app_logger = logging.getLogger(settings.app.name)
app_logger.info(f"Application settings loaded successfully for environment: '{settings.env}'")
app_logger.debug(f"Full application settings object: {settings.model_dump_json(indent=2)}")

default_model_service = EmbeddingModelService.from_config(settings.embedding)
