"""
Configuration module for the essay scoring application.

This module defines configuration models, settings, and utilities for loading
and validating application settings from environment variables, .env files, and YAML files.
"""

from __future__ import annotations

import logging
import math
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Module-level Constants ---
VALID_ENVS: set[str] = {"dev", "prod"}


# --- Configuration Models ---


class AppConfig(BaseModel):
    """
    Application configuration settings.

    Attributes:
        name (str): The name of the application.
        version (str): The version of the application.
        debug (bool): Flag to enable or disable debug mode.
        log_level (str): The logging level for the application (e.g., INFO, DEBUG).
    """

    name: str = Field("Essay Scorer", description="The name of the application.")
    version: str = Field("1.0", description="The version of the application.")
    debug: bool = Field(default=False, description="Whether debug mode is enabled, typically more verbose.")
    log_level: str = Field("INFO", description="The logging level (e.g., DEBUG, INFO, WARNING).")


class EmbeddingConfig(BaseModel):
    """
    Configuration for the sentence-embedding model used by the coherence analyzer.

    Attributes:
        model_name (str): Name or path of the SentenceTransformer model to be used.
        device (Literal["cpu", "cuda", "mps"]): The hardware device to run the model on.
        batch_size (int): Batch size for encoding sentences.
        normalize_embeddings (bool): Whether the encoder L2-normalizes its output vectors.
        clamp_negative_similarity (bool): Clamp adjacent-pair similarities below zero to zero
            before averaging. Off by default so coherence stays the plain mean.
    """

    model_name: str = Field("all-MiniLM-L6-v2", description="The name or path of the SentenceTransformer model.")
    device: Literal["cpu", "cuda", "mps"] = Field(
        "cpu",
        description="Device to run the embedding model on ('cpu', 'cuda', 'mps').",
    )
    batch_size: int = Field(32, gt=0, description="Batch size for embedding model inference.")
    normalize_embeddings: bool = Field(default=False, description="L2-normalize embeddings after encoding.")
    clamp_negative_similarity: bool = Field(
        default=False,
        description="Clamp negative adjacent-pair similarities to 0 before averaging.",
    )


class ScoringConfig(BaseModel):
    """
    Weights, thresholds and heuristic constants for the scoring pipeline.

    The defaults are the reference values; changing them changes every score.
    """

    coherence_weight: float = Field(0.4, ge=0.0, le=1.0, description="Weight of coherence in the overall score.")
    grammar_weight: float = Field(0.3, ge=0.0, le=1.0, description="Weight of grammar in the overall score.")
    structure_weight: float = Field(0.3, ge=0.0, le=1.0, description="Weight of structure in the overall score.")

    weak_below: float = Field(0.6, ge=0.0, le=1.0, description="Scores below this get the weak feedback clause.")
    medium_below: float = Field(0.8, ge=0.0, le=1.0, description="Scores below this get the medium feedback clause.")

    long_sentence_words: int = Field(25, gt=0, description="Average words per sentence tolerated before penalty.")
    long_sentence_step: int = Field(5, gt=0, description="Words above the limit per additional issue.")
    issue_density: float = Field(0.1, gt=0.0, description="Issues per word that saturate the grammar penalty.")

    min_paragraphs: int = Field(3, ge=3, description="Paragraphs needed before structure is judged.")
    short_structure_score: float = Field(0.5, ge=0.0, le=1.0, description="Structure score for short essays.")
    min_essay_chars: int = Field(100, ge=0, description="Below this length a 'too_short' warning is attached.")
    decimals: int = Field(2, ge=0, description="Decimal places the returned scores are rounded to.")

    @model_validator(mode="after")
    def check_weights_and_thresholds(self) -> ScoringConfig:
        """
        Validate that the weights form a convex combination and thresholds are ordered.

        Raises:
            ValueError: If the weights do not sum to 1 or `weak_below` exceeds `medium_below`.

        Returns:
            ScoringConfig: The validated configuration.
        """
        total = self.coherence_weight + self.grammar_weight + self.structure_weight
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            msg = f"Score weights must sum to 1.0, got {total}"
            raise ValueError(msg)
        if self.weak_below > self.medium_below:
            msg = f"weak_below ({self.weak_below}) must not exceed medium_below ({self.medium_below})"
            raise ValueError(msg)
        return self


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        env (str): The environment to run in (dev, prod).
        app (AppConfig): Application configuration.
        embedding (EmbeddingConfig): Sentence-embedding model configuration.
        scoring (ScoringConfig): Scoring weights and heuristic constants.
    """

    env: str = "dev"
    app: AppConfig = AppConfig()
    embedding: EmbeddingConfig = EmbeddingConfig()
    scoring: ScoringConfig = ScoringConfig()
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("env")
    @classmethod
    def check_env_is_valid(cls, v: str) -> str:
        """
        Validate the env field and ensure it is a valid environment.

        Args:
            v (str): The value of the env field.

        Raises:
            ValueError: If the environment is not valid.

        Returns:
            str: The validated environment.
        """
        env_lower = v.lower()
        if env_lower not in VALID_ENVS:
            msg = f"Invalid environment '{v}'. Must be one of {VALID_ENVS}"
            raise ValueError(msg)
        return env_lower


# --- Settings Loading Function ---


def _load_env_file(effective_env: str, config_dir: Path) -> None:
    """
    Load environment-specific .env file.

    Args:
        effective_env (str): The current environment (e.g., 'dev').
        config_dir (Path): The directory containing config files.
    """
    env_file_path = config_dir / f"{effective_env}.env"
    if env_file_path.is_file():
        logging.info(f"Loading environment variables from: {env_file_path}")
        load_dotenv(dotenv_path=env_file_path, override=False)
    else:
        logging.debug(f"Environment file not found at {env_file_path}. Skipping .env load.")


def _load_yaml_config(effective_env: str, config_dir: Path) -> dict:
    """
    Load YAML configuration file.

    Args:
        effective_env (str): The current environment.
        config_dir (Path): The directory containing config files.

    Returns:
        dict: The loaded YAML configuration as a dictionary.
    """
    yaml_config_path = config_dir / "envs" / f"{effective_env}.yaml"
    file_config: dict = {}
    if not yaml_config_path.exists():
        logging.debug(f"YAML config file not found at {yaml_config_path}. Skipping.")
        return file_config
    try:
        with yaml_config_path.open("r") as f:
            loaded_yaml = yaml.safe_load(f)
    except yaml.YAMLError:
        logging.exception(f"Error parsing YAML file {yaml_config_path}")
        return file_config
    if isinstance(loaded_yaml, dict):
        file_config = loaded_yaml
        logging.info(f"Successfully loaded YAML config from: {yaml_config_path}")
    else:
        logging.warning(f"YAML file {yaml_config_path} did not contain a dictionary. Ignoring.")
    return file_config


def load_settings(effective_env: str, config_dir: Path) -> Settings:
    """
    Build a `Settings` object for one environment.

    `<env>.env` is merged into the process environment without overriding variables
    already set. Values from `envs/<env>.yaml` are passed as init arguments, so they
    take precedence over environment variables for the keys they define.

    Args:
        effective_env (str): The environment to load ('dev' or 'prod').
        config_dir (Path): Directory holding the .env file and the `envs/` folder.

    Raises:
        SystemExit: If the resulting settings fail validation.

    Returns:
        Settings: The validated settings.
    """
    _load_env_file(effective_env, config_dir)
    file_config = _load_yaml_config(effective_env, config_dir)

    init_data = file_config.copy()
    if "env" not in init_data:
        init_data["env"] = effective_env
    elif str(init_data["env"]).lower() != effective_env:
        logging.warning(
            f"YAML file specifies 'env: {init_data['env']}', which differs from the loading "
            f"environment '{effective_env}'. The YAML value will be used for settings.env.",
        )

    try:
        settings = Settings(**init_data)
    except ValidationError as e:
        logging.exception("Error validating settings")
        msg = "Failed to load or validate application settings."
        raise SystemExit(msg) from e

    logging.info(f"Settings loaded successfully for environment '{settings.env}'.")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings.

    Determines the environment from `APP_ENV`, loads .env and YAML files, and returns a Settings object.

    Returns:
        Settings: The initialized application settings.
    """
    effective_env = os.getenv("APP_ENV", "dev").lower()
    if effective_env not in VALID_ENVS:
        logging.warning(f"APP_ENV='{effective_env}' is not one of {VALID_ENVS}. Falling back to 'dev'.")
        effective_env = "dev"

    logging.debug(f"Loading settings for environment: '{effective_env}'")
    return load_settings(effective_env, Path(__file__).parent)
