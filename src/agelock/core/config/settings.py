"""Top-level agelock configuration models."""

from dataclasses import dataclass, field

from agelock.core.config.observability import AuditConfig, LoggingConfig

DEFAULT_STORE_ROOT = "~/.local/share/agelock/store"


@dataclass
class StoreConfig:
    """Configuration for the local content store."""

    root: str = DEFAULT_STORE_ROOT
    """Store directory; ``~`` is expanded (default: ~/.local/share/agelock/store)"""

    substituters: list[str] = field(default_factory=list)
    """Directories consulted, in order, for hash-locked paths missing locally (default: [])"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.root:
            raise ValueError("store root is required")


@dataclass
class AgelockConfig:
    """Configuration for resolving encrypted secrets."""

    store: StoreConfig = field(default_factory=StoreConfig)
    """Content store configuration (default: StoreConfig with defaults)"""

    age_path: str = "age"
    """age executable name or path (default: age)"""

    identity_file: str | None = None
    """Identity file; overrides AGE_IDENTITY_FILE and the default SSH keys (optional)"""

    pure_eval: bool = False
    """Refuse to decrypt references without a hash (default: False)"""

    decrypt_timeout_seconds: float | None = None
    """Timeout for a single age invocation (optional, no timeout by default)"""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    """Logging configuration (default: LoggingConfig with defaults)"""

    audit: AuditConfig | None = None
    """Audit trail configuration (optional)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.age_path:
            raise ValueError("age_path is required")

        if self.decrypt_timeout_seconds is not None and self.decrypt_timeout_seconds <= 0:
            raise ValueError("decrypt_timeout_seconds must be positive")
