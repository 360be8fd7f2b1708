"""Post-publish triggers that ask the visual testing deployment to rebuild."""

import json
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Mapping, Optional

from utils import PACKAGE_NAME, VERSION, iso_now

USER_AGENT = f"{PACKAGE_NAME}/{VERSION}"
TIMEOUT = 30


@dataclass(frozen=True)
class NotifyConfig:
    build_hook_url: Optional[str] = None
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    enabled: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "NotifyConfig":
        return cls(
            build_hook_url=environ.get("VERCEL_BUILD_HOOK_URL") or None,
            webhook_url=environ.get("VISUAL_TESTING_WEBHOOK_URL") or None,
            webhook_secret=environ.get("VISUAL_TESTING_WEBHOOK_SECRET") or None,
            enabled=environ.get("ENABLE_VISUAL_TESTING_TRIGGER") != "false",
        )


def post_json(url: str, payload: dict, headers: Optional[dict] = None) -> bytes:
    req = urllib.request.Request(
        url,
        data=json.dumps(payload).encode("utf-8"),
        method="POST",
        headers={"Content-Type": "application/json", "User-Agent": USER_AGENT, **(headers or {})},
    )
    with urllib.request.urlopen(req, timeout=TIMEOUT) as response:
        return response.read()


def trigger_build_hook(config: NotifyConfig, version: str = VERSION) -> str:
    post_json(
        config.build_hook_url,
        {"reason": f"{PACKAGE_NAME} v{version} published", "source": "npm-postpublish"},
    )
    return "Vercel build hook triggered"


def trigger_webhook(config: NotifyConfig, version: str = VERSION) -> str:
    headers = {"X-Webhook-Secret": config.webhook_secret} if config.webhook_secret else {}
    body = post_json(
        config.webhook_url,
        {"package": PACKAGE_NAME, "version": version, "source": "npm-postpublish", "timestamp": iso_now()},
        headers,
    )
    try:
        message = json.loads(body or b"{}").get("message")
    except (ValueError, AttributeError):
        message = None
    return f"Webhook triggered: {message or 'Success'}"


def trigger_rebuild(config: NotifyConfig, version: str = VERSION) -> int:
    """Fire every configured trigger once; returns how many succeeded.

    Failures are logged only, so a successful publish is never reported as failed.
    """
    if not config.enabled:
        logging.warning("Visual testing trigger disabled by environment variable")
        return 0

    triggers = []
    if config.build_hook_url:
        triggers.append(("build hook", trigger_build_hook))
    else:
        logging.info("VERCEL_BUILD_HOOK_URL not set, skipping build hook")
    if config.webhook_url:
        triggers.append(("webhook", trigger_webhook))
    else:
        logging.info("VISUAL_TESTING_WEBHOOK_URL not set, skipping webhook")

    if not triggers:
        logging.warning("No trigger URLs configured. Set VERCEL_BUILD_HOOK_URL or VISUAL_TESTING_WEBHOOK_URL")
        return 0

    succeeded = 0
    for label, trigger in triggers:
        try:
            result = trigger(config, version)
        except (urllib.error.URLError, OSError, ValueError) as e:
            logging.error(f"Trigger {label} failed: {e}")
            continue
        logging.info(result)
        succeeded += 1

    logging.info(f"Triggered {succeeded}/{len(triggers)} rebuild methods")
    return succeeded
