import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import uuid4

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import BusinessError


@dataclass
class Preferences:
    """界面保存的 Provider 选择与 API Key。"""

    provider: str = ""
    api_key: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.provider and not self.api_key


class JsonPreferencesStore:
    """把偏好设置保存为 {root}/preferences.json。

    文件格式：{"provider": "...", "api_key": "..."}；写入使用临时文件 + os.replace。
    """

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._path = self._root / "preferences.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise BusinessError(code="STORE_READ_ERROR", message=str(e))
        if not isinstance(data, dict):
            raise BusinessError(code="STORE_READ_ERROR", message=f"{self._path} is not a mapping")
        return Preferences(
            provider=str(data.get("provider") or "").strip().lower(),
            api_key=str(data.get("api_key") or "").strip(),
        )

    def save(self, prefs: Preferences) -> None:
        tmp_path = self._root / f"preferences.{uuid4().hex}.json.tmp"
        obj = {"provider": prefs.provider.strip().lower(), "api_key": prefs.api_key.strip()}
        try:
            tmp_path.write_text(json.dumps(obj, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise BusinessError(code="STORE_WRITE_ERROR", message=str(e))

    def explicit_key_for(self, provider: str, prefs: Optional[Preferences] = None) -> Optional[str]:
        """若偏好中保存了该 Provider 的 Key，返回之。"""

        prefs = prefs or self.load()
        if prefs.api_key and prefs.provider == provider.lower():
            return prefs.api_key
        return None
