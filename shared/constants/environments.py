from enum import Enum


class Environment(str, Enum):
    """Deployment environment the daemon runs in."""

    PRODUCTION = "production"
    STAGING = "staging"
    TESTING = "testing"
    DEVELOPMENT = "development"

    @classmethod
    def parse(cls, env: str) -> "Environment":
        """Map a free-form environment string onto a member.

        Unknown values are treated as production so that a typo never turns
        off structured logging on a live host.
        """
        try:
            return cls(env.strip().lower())
        except ValueError:
            return cls.PRODUCTION

    @classmethod
    def is_production(cls, env: str) -> bool:
        return cls.parse(env) is cls.PRODUCTION

    @classmethod
    def is_development(cls, env: str) -> bool:
        return cls.parse(env) is cls.DEVELOPMENT

    @property
    def wants_json_logs(self) -> bool:
        return self is not Environment.DEVELOPMENT
