"""
Table Adapter Configuration

Parameters of the pandas boundary: output column naming, defaults for rolling
windows and standardization, correlation row handling.
All parameters are versioned for reproducibility.
"""

from dataclasses import dataclass, field
import hashlib
import json


@dataclass
class ColumnNamingConfig:
    """Suffixes appended to the source column name"""
    normalize_suffix: str = "_norm"
    zscore_suffix: str = "_zscore"
    rolling_mean_suffix: str = "_rolling_mean"
    ewm_suffix: str = "_ewm"


@dataclass
class RollingConfig:
    """Rolling mean defaults"""

    # Valid values a window needs before it produces a mean
    min_observations: int = 1


@dataclass
class StandardizationConfig:
    """Z-score defaults"""

    # Use median/MAD instead of mean/std
    use_robust: bool = False


@dataclass
class CorrelationConfig:
    """Correlation table settings"""

    # Exclude rows holding an invalid value in any selected column
    drop_incomplete_rows: bool = True


@dataclass
class TableAdapterConfig:
    """
    Master configuration for the TableAdapter.
    """

    config_version: str = "1.0.0"

    naming: ColumnNamingConfig = field(default_factory=ColumnNamingConfig)
    rolling: RollingConfig = field(default_factory=RollingConfig)
    standardization: StandardizationConfig = field(default_factory=StandardizationConfig)
    correlation: CorrelationConfig = field(default_factory=CorrelationConfig)

    verbose_logging: bool = True

    def validate(self) -> bool:
        """
        Validate configuration parameters.

        Returns:
            bool: True if valid, raises ValueError if invalid
        """
        min_obs = self.rolling.min_observations
        if isinstance(min_obs, bool) or not isinstance(min_obs, int) or min_obs <= 0:
            raise ValueError(f"rolling.min_observations must be a positive integer, got {min_obs!r}")

        suffixes = [
            self.naming.normalize_suffix,
            self.naming.zscore_suffix,
            self.naming.rolling_mean_suffix,
            self.naming.ewm_suffix,
        ]
        if any(not s for s in suffixes):
            raise ValueError("Column suffixes must be non-empty strings")
        if len(set(suffixes)) != len(suffixes):
            raise ValueError(f"Column suffixes must be distinct, got {suffixes}")

        return True

    def _to_dict_no_hash(self) -> dict:
        """Internal method: serialize config without hash (prevents recursion)"""
        return {
            "config_version": self.config_version,
            "naming": {
                "normalize_suffix": self.naming.normalize_suffix,
                "zscore_suffix": self.naming.zscore_suffix,
                "rolling_mean_suffix": self.naming.rolling_mean_suffix,
                "ewm_suffix": self.naming.ewm_suffix,
            },
            "rolling": {
                "min_observations": self.rolling.min_observations,
            },
            "standardization": {
                "use_robust": self.standardization.use_robust,
            },
            "correlation": {
                "drop_incomplete_rows": self.correlation.drop_incomplete_rows,
            },
            "verbose_logging": self.verbose_logging,
        }

    def get_config_hash(self) -> str:
        """
        Generate deterministic hash of configuration.

        Returns:
            16-character hex digest
        """
        config_str = json.dumps(self._to_dict_no_hash(), sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    def to_dict(self) -> dict:
        """Serialize configuration to dictionary with hash"""
        d = self._to_dict_no_hash()
        d["config_hash"] = self.get_config_hash()
        return d

    def to_json(self) -> str:
        """Serialize configuration to JSON string"""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'TableAdapterConfig':
        """Create config from dictionary (unknown keys such as config_hash are ignored)"""
        return cls(
            config_version=config_dict.get("config_version", "1.0.0"),
            naming=ColumnNamingConfig(**config_dict.get("naming", {})),
            rolling=RollingConfig(**config_dict.get("rolling", {})),
            standardization=StandardizationConfig(**config_dict.get("standardization", {})),
            correlation=CorrelationConfig(**config_dict.get("correlation", {})),
            verbose_logging=config_dict.get("verbose_logging", True),
        )


# Default configuration instance
DEFAULT_CONFIG = TableAdapterConfig()
