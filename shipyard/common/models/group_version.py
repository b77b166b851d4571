import re
from typing import NamedTuple, Optional
from shipyard.utils.errors import PermanentConfigError

GROUP_EXTENSIONS = "extensions"

PHASE_GA = ""
PHASE_ALPHA = "alpha"
PHASE_BETA = "beta"

_VERSION_RE = re.compile(r"^v([0-9]+)((alpha|beta)([0-9]+))?$")


class GroupVersion(NamedTuple):
    """An API (group, version) pair, e.g. `apps/v1` or core `v1`.

    Versions follow `v<main>[alpha|beta<test>]`. `test_version` is -1 for
    GA versions.
    """

    group: str
    version: str
    main_version: int
    phase: str
    test_version: int

    @classmethod
    def parse(cls, value: str) -> "GroupVersion":
        if isinstance(value, GroupVersion):
            return value
        value = (value or "").strip()
        if not value or value.count("/") > 1:
            raise PermanentConfigError(f"parse GroupVersion error: {value!r}")
        if "/" in value:
            group, version = value.split("/")
        else:
            group, version = "", value
        return cls.from_parts(group, version)

    @classmethod
    def from_parts(cls, group: str, version: str) -> "GroupVersion":
        name = f"{group}/{version}" if group else version
        match = _VERSION_RE.match(version)
        if match is None:
            raise PermanentConfigError(f"unknown version format of GroupVersion({name})")

        main_version = int(match.group(1))
        if main_version < 1:
            raise PermanentConfigError(f"unknown main_version in GroupVersion({name})")

        phase = match.group(3) or PHASE_GA
        if match.group(4) is None:
            test_version = -1
        else:
            test_version = int(match.group(4))
            if test_version < 1:
                raise PermanentConfigError(f"unknown test_version in GroupVersion({name})")

        return cls(group, version, main_version, phase, test_version)

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def is_preferred_than(self, target: Optional["GroupVersion"]) -> bool:
        """Whether this version should be chosen over `target` for a kind."""
        if target is None:
            return True

        # the extensions group ranks below every other group, the core group included
        if target.group == GROUP_EXTENSIONS and self.group != GROUP_EXTENSIONS:
            return True
        if target.group != GROUP_EXTENSIONS and self.group == GROUP_EXTENSIONS:
            return False

        if self.group != target.group:
            raise PermanentConfigError(
                f"cannot compare with different groups({self.group}, {target.group})"
            )

        if self.main_version == target.main_version:
            if self.phase == PHASE_GA:
                return target.phase != PHASE_GA
            if self.phase == PHASE_BETA:
                return target.phase == PHASE_ALPHA or (
                    target.phase == PHASE_BETA and self.test_version > target.test_version
                )
            return target.phase == PHASE_ALPHA and self.test_version > target.test_version

        return self.main_version > target.main_version

    def __str__(self) -> str:
        return self.api_version


EXTENSIONS_V1BETA1 = GroupVersion.parse("extensions/v1beta1")
APPS_V1 = GroupVersion.parse("apps/v1")
