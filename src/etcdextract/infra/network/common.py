from __future__ import annotations

from etcdextract.domain.constants import APP_NAME, APP_VERSION, PUBLISH_TIMEOUT

USER_AGENT = f"{APP_NAME}/{APP_VERSION}"
DEFAULT_TIMEOUT = PUBLISH_TIMEOUT
