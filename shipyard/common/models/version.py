from typing import NamedTuple
from shipyard.utils.errors import PermanentConfigError


class ServerVersionInfo(NamedTuple):
    major: str
    minor: int
    git_version: str


class ServerVersion:
    """Kubernetes API server version as reported by `/version`."""

    info: ServerVersionInfo

    def __init__(self, major: str, minor: str, git_version: str = "") -> None:
        self.info = ServerVersionInfo(
            str(major).strip(), self.parse_minor(minor), git_version or ""
        )

    @property
    def major(self) -> str:
        return self.info.major

    @property
    def minor(self) -> int:
        return self.info.minor

    @staticmethod
    def unify_minor(minor: str) -> str:
        """Some vendors report the minor version as e.g. `18+`."""
        return str(minor).strip().rstrip("+")

    @classmethod
    def parse_minor(cls, minor: str) -> int:
        try:
            return int(cls.unify_minor(minor))
        except ValueError:
            raise PermanentConfigError(f"unknown minor version({minor})")

    @classmethod
    def from_version_info(cls, version_info) -> "ServerVersion":
        """Build from a `kubernetes.client.VersionInfo` or its dict form."""
        if isinstance(version_info, dict):
            return cls(
                version_info.get("major", ""),
                version_info.get("minor", ""),
                version_info.get("gitVersion", ""),
            )
        return cls(version_info.major, version_info.minor, version_info.git_version)

    def __repr__(self) -> str:
        return f"ServerVersion<{self.major}.{self.minor}>"
