from .config_validators import to_uppercase, to_lowercase

__all__ = ["to_uppercase", "to_lowercase"]
