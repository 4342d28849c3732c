"""Tests for insertion configuration."""

import pytest
from pydantic import ValidationError
from nestzip.inserter.config import InsertionConfig, NestZipConfig
from nestzip.common import LoggingConfig


class TestInsertionConfig:
    """Tests for InsertionConfig."""
    
    def test_defaults(self):
        config = InsertionConfig()
        
        assert config.no_overwrite is False
        assert config.verbose is False
        assert config.backend == "file"
        assert config.staging_dir is None
    
    def test_custom_values(self):
        config = InsertionConfig(
            no_overwrite=True,
            verbose=True,
            backend="memory",
            staging_dir="/tmp/staging"
        )
        
        assert config.no_overwrite is True
        assert config.verbose is True
        assert config.backend == "memory"
        assert config.staging_dir == "/tmp/staging"
    
    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            InsertionConfig(backend="rar")
    
    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            InsertionConfig(overwrite=False)


class TestNestZipConfig:
    """Tests for the root configuration."""
    
    def test_defaults(self):
        config = NestZipConfig()
        
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.insertion, InsertionConfig)
        assert config.logging.level == "INFO"
        assert config.logging.format == "simple"
    
    def test_from_dict(self):
        config = NestZipConfig(**{
            "logging": {"level": "debug"},
            "insertion": {"no_overwrite": True},
        })
        
        assert config.logging.level == "DEBUG"
        assert config.insertion.no_overwrite is True
        assert config.insertion.backend == "file"
    
    def test_validation(self):
        with pytest.raises(ValueError):
            NestZipConfig(logging=LoggingConfig(level="INVALID"))
        
        with pytest.raises(ValueError):
            NestZipConfig(insertion={"verbose": "not a bool"})
