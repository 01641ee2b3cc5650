"""Configuration dataclasses for preimage proofs."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict

from .curves import get_curve


@dataclass(slots=True)
class ZKConfig:
    curve: str = "bls12_381"

    def __post_init__(self) -> None:
        get_curve(self.curve)


@dataclass(slots=True)
class ArtifactConfig:
    params_path: Path = Path("artifacts/params.json")
    verifying_key_path: Path = Path("artifacts/verifying_key.json")


@dataclass(slots=True)
class GlobalConfig:
    zk: ZKConfig = field(default_factory=ZKConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zk": asdict(self.zk),
            "artifacts": {
                "params_path": str(self.artifacts.params_path),
                "verifying_key_path": str(self.artifacts.verifying_key_path),
            },
        }

    def dump(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], base_dir: Path | None = None) -> "GlobalConfig":
        def _resolve(value: str | Path) -> Path:
            p = Path(value)
            if base_dir is not None and not p.is_absolute():
                p = (base_dir / p).resolve()
            return p

        defaults = ArtifactConfig()
        artifact_entry = raw.get("artifacts", {})
        artifacts = ArtifactConfig(
            params_path=_resolve(artifact_entry.get("params_path", defaults.params_path)),
            verifying_key_path=_resolve(artifact_entry.get("verifying_key_path", defaults.verifying_key_path)),
        )
        return cls(zk=ZKConfig(**raw.get("zk", {})), artifacts=artifacts)

    @classmethod
    def load(cls, path: Path) -> "GlobalConfig":
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        return cls.from_dict(raw, base_dir=path.parent)
