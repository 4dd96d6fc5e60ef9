"""Configuration for partial records.

Library-wide switches are defined here as class variables so that callers
can flip them in one place without threading options through every call.
"""

import os


class PartialConfig:
    """Configuration for partial records.

    Type checks guard the erased field store. Writes through the public
    setters are checked against the field path's declared type, and reads
    re-check stored payloads so that a corrupted store fails loudly.
    """

    # Type checking
    CHECK_WRITE_TYPES: bool = True
    CHECK_READ_TYPES: bool = True

    # Environment overrides
    ENV_PREFIX: str = "PARTIAL_RECORD_"
    TRUE_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "on"})
    FALSE_VALUES: frozenset[str] = frozenset({"0", "false", "no", "off"})

    @classmethod
    def parse_flag(cls, name: str, raw: str) -> bool:
        """Parse a boolean environment flag.

        Args:
            name: Environment variable name (for error messages)
            raw: Raw environment value

        Returns:
            Parsed boolean

        Raises:
            ValueError: If raw is not a recognised boolean spelling
        """
        value = raw.strip().lower()
        if value in cls.TRUE_VALUES:
            return True
        if value in cls.FALSE_VALUES:
            return False
        msg = (
            f"Invalid boolean for {name}: {raw!r}. "
            f"Expected one of: {sorted(cls.TRUE_VALUES | cls.FALSE_VALUES)}"
        )
        raise ValueError(msg)

    @classmethod
    def from_env(cls) -> type["PartialConfig"]:
        """Apply overrides from environment variables.

        Environment variables:
            PARTIAL_RECORD_CHECK_WRITE_TYPES: Validate values on set_value
            PARTIAL_RECORD_CHECK_READ_TYPES: Validate stored payloads on value

        Unset variables leave the current setting untouched.

        Returns:
            The configuration class, for chaining
        """
        for attr in ("CHECK_WRITE_TYPES", "CHECK_READ_TYPES"):
            env_name = f"{cls.ENV_PREFIX}{attr}"
            raw = os.getenv(env_name)
            if raw is not None:
                setattr(cls, attr, cls.parse_flag(env_name, raw))
        return cls
