"""Installed application models."""

from __future__ import annotations

from dataclasses import dataclass

PACKAGE_PREFIX = "package:"

# Unity / XR 系アプリとみなすキーワード（小文字で部分一致）
RELEVANT_KEYWORDS = (
    "unity",
    "com.defaultcompany",
    "viture",
    "spacewalker",
    "xr",
    "vr",
    "ar",
    "oculus",
    "meta",
    "immersive",
    "spatial",
)


@dataclass
class AppRecord:
    """端末にインストールされているサードパーティアプリ"""

    package_id: str
    display_name: str
    is_relevant: bool = False

    @classmethod
    def from_package_id(cls, package_id: str) -> "AppRecord":
        return cls(
            package_id=package_id,
            display_name=display_name_for(package_id),
            is_relevant=is_relevant_package(package_id),
        )

    def to_dict(self) -> dict:
        return {
            "packageId": self.package_id,
            "displayName": self.display_name,
            "isRelevant": self.is_relevant,
        }


def is_relevant_package(package_id: str) -> bool:
    lowered = package_id.lower()
    return any(keyword in lowered for keyword in RELEVANT_KEYWORDS)


def display_name_for(package_id: str) -> str:
    """`com.defaultcompany.MyGameTitle` -> `My Game Title`"""

    parts = package_id.split(".")
    if len(parts) < 2 or not parts[-1]:
        return package_id

    name = parts[-1]
    spaced = "".join(f" {ch}" if i > 0 and ch.isupper() else ch for i, ch in enumerate(name))
    return spaced[0].upper() + spaced[1:]
